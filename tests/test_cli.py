"""Tests for CLI interface"""

from __future__ import annotations

import json
import logging

import click
import pytest
import requests
import yaml
from click.testing import CliRunner

from httpretry.cli import _die, cli, setup_logging
from httpretry.infrastructure import retry as retry_module


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("HTTPRETRY_STRATEGY", "HTTPRETRY_MAX_ATTEMPTS", "HTTPRETRY_BASE_URL", "HTTPRETRY_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(retry_module, "pause", lambda seconds, token, target: None)


def _response(status_code: int, payload: dict) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r._content = json.dumps(payload).encode("utf-8")  # type: ignore[attr-defined]
    return r


class TestSetupLogging:
    """Tests for setup_logging function"""

    def test_setup_logging_info_level(self):
        """Test that logging is set to INFO level by default"""
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_debug_level(self):
        """Test that logging is set to DEBUG level when verbose"""
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG


class TestDie:
    """Tests for _die function"""

    def test_die_without_exception(self):
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=False)

    def test_die_with_exception_verbose(self):
        exc = ValueError("Test exception")
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=True, exc=exc)


class TestScheduleCommand:
    """Tests for the schedule command"""

    def test_exponential_schedule(self, runner):
        result = runner.invoke(
            cli,
            ["schedule", "--strategy", "exponential", "--max-attempts", "3", "--initial-delay-ms", "100"],
        )

        assert result.exit_code == 0, result.output
        assert "Strategy: exponential (max attempts: 3)" in result.output
        assert "Retry 1: wait 100 ms" in result.output
        assert "Retry 2: wait 200 ms" in result.output
        assert "Retry 3: wait 400 ms" in result.output
        assert "Total wait: 700 ms" in result.output

    def test_default_is_no_retry(self, runner):
        result = runner.invoke(cli, ["schedule"])

        assert result.exit_code == 0, result.output
        assert "No retries" in result.output

    def test_schedule_from_config_file(self, runner, tmp_path):
        config_path = tmp_path / "retry.yml"
        config_path.write_text(
            yaml.dump({"retry": {"type": "fibonacci", "maxAttempts": 5, "initialDelayMs": 100}}),
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["--config", str(config_path), "schedule"])

        assert result.exit_code == 0, result.output
        assert "Retry 5: wait 500 ms" in result.output
        assert "Total wait: 1200 ms" in result.output

    def test_flag_overrides_configured_parameter(self, runner, tmp_path):
        (tmp_path / ".httpretry.yml").write_text(
            yaml.dump({"retry": {"type": "interval", "max_attempts": 2, "interval_ms": 50}}),
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["schedule", "--interval-ms", "75"])

        assert result.exit_code == 0, result.output
        assert "Retry 2: wait 75 ms" in result.output

    def test_missing_parameter_reported(self, runner):
        result = runner.invoke(
            cli,
            ["schedule", "--strategy", "polynomial", "--max-attempts", "3", "--initial-delay-ms", "10"],
        )

        assert result.exit_code == 1
        assert "degree" in result.output

    def test_invalid_config_file_reported(self, runner, tmp_path):
        config_path = tmp_path / "retry.yml"
        config_path.write_text(yaml.dump({"retry": {"type": "exponential", "max_attempts": 0}}), encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_path), "schedule"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


class TestRequestCommands:
    """Tests for the get and request commands"""

    def test_get_retries_until_success(self, runner, monkeypatch, no_sleep):
        calls = {"n": 0}

        def fake_request(self, method, url, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise requests.ConnectionError("connection refused")
            return _response(200, {"ok": True})

        monkeypatch.setattr(requests.Session, "request", fake_request)

        result = runner.invoke(
            cli,
            ["get", "http://example.test/items", "--strategy", "interval", "--max-attempts", "2", "--interval-ms", "0"],
        )

        assert result.exit_code == 0, result.output
        assert calls["n"] == 2
        assert "HTTP 200" in result.output
        assert '"ok": true' in result.output

    def test_request_exhaustion_exits_with_error(self, runner, monkeypatch, no_sleep):
        def fake_request(self, method, url, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(requests.Session, "request", fake_request)

        result = runner.invoke(
            cli,
            ["request", "DELETE", "http://example.test/items/1", "--strategy", "fibonacci", "--max-attempts", "2"],
        )

        assert result.exit_code == 1
        assert "HTTP call failed after 2 attempts" in result.output
        assert "connection refused" in result.output

    def test_post_sends_json_body(self, runner, monkeypatch):
        seen = {}

        def fake_request(self, method, url, **kwargs):
            seen["method"] = method
            seen["url"] = url
            seen["kwargs"] = kwargs
            return _response(201, {"id": 1})

        monkeypatch.setattr(requests.Session, "request", fake_request)
        monkeypatch.setenv("HTTPRETRY_BASE_URL", "http://example.test/api")

        result = runner.invoke(cli, ["request", "post", "items", "--data", '{"name": "a"}', "--timeout", "3"])

        assert result.exit_code == 0, result.output
        assert seen["method"] == "POST"
        assert seen["url"] == "http://example.test/api/items"
        assert seen["kwargs"] == {"timeout": 3.0, "json": {"name": "a"}}

    def test_invalid_json_body(self, runner):
        result = runner.invoke(cli, ["request", "POST", "http://example.test", "--data", "{oops"])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output
