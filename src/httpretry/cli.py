"""CLI interface for httpretry"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from httpretry.domain.strategies import RetryStrategy
from httpretry.infrastructure.config.config_manager import (
    ConfigManager,
    ConfigurationError,
    format_validation_error,
)
from httpretry.infrastructure.exceptions import HttpRetryError
from httpretry.infrastructure.http_client import RetryingHttpClient
from httpretry.infrastructure.strategy_factory import RetryStrategyFactory

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def strategy_options(func):
    """Attach the strategy override flags shared by every command"""
    options = [
        click.option(
            "--strategy",
            "strategy_type",
            type=click.Choice(list(RetryStrategyFactory.STRATEGIES), case_sensitive=False),
            help="Retry strategy. Overrides config.",
        ),
        click.option("--max-attempts", type=int, help="Maximum number of retries"),
        click.option("--initial-delay-ms", type=float, help="Initial delay (exponential, polynomial, fibonacci)"),
        click.option("--interval-ms", type=float, help="Fixed delay (interval)"),
        click.option("--degree", type=int, help="Polynomial degree"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(ctx: click.Context) -> ConfigManager:
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)


def _create_strategy(
    config_manager: ConfigManager,
    strategy_type: Optional[str],
    overrides: Dict[str, Any],
    verbose: bool,
) -> RetryStrategy:
    """Create retry strategy from config, applying CLI overrides

    Args:
        config_manager: Configuration manager
        strategy_type: Strategy type from --strategy (None = keep configured type)
        overrides: Parameter flags given on the command line
        verbose: Verbose mode for error reporting

    Returns:
        RetryStrategy instance
    """
    configured = config_manager.get_retry_options().model_dump()
    if strategy_type and strategy_type.lower() != configured["type"]:
        options = {"type": strategy_type.lower()}
    else:
        options = configured
    options.update({k: v for k, v in overrides.items() if v is not None})

    try:
        strategy = RetryStrategyFactory.create(options)
    except ValidationError as e:
        _die(format_validation_error(e), verbose=verbose, exc=e)
    except ValueError as e:
        _die(str(e), verbose=verbose, exc=e)
    logger.info(f"Using retry strategy: {strategy}")
    return strategy


def _format_delay(delay_ms: float) -> str:
    if float(delay_ms).is_integer():
        return f"{int(delay_ms)} ms"
    return f"{delay_ms:.3f} ms"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .httpretry.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """httpretry - HTTP calls with pluggable retry strategies"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@strategy_options
@click.pass_context
def schedule(ctx, strategy_type, max_attempts, initial_delay_ms, interval_ms, degree):
    """Print the delay before each retry the strategy permits."""
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)
    strategy = _create_strategy(
        config_manager,
        strategy_type,
        {
            "max_attempts": max_attempts,
            "initial_delay_ms": initial_delay_ms,
            "interval_ms": interval_ms,
            "degree": degree,
        },
        verbose,
    )

    if strategy.max_attempts == 0:
        click.echo("No retries: the first failure is final.")
        return

    click.echo(f"Strategy: {strategy.type} (max attempts: {strategy.max_attempts})")
    total = 0.0
    for attempt, delay in enumerate(strategy.delays()):
        total += delay
        click.echo(f"Retry {attempt + 1}: wait {_format_delay(delay)}")
    click.echo(f"Total wait: {_format_delay(total)}")


@cli.command()
@click.argument("method", type=click.Choice(["GET", "POST", "PUT", "DELETE"], case_sensitive=False))
@click.argument("url", type=str)
@click.option("--data", type=str, help="JSON body for POST/PUT")
@click.option("--timeout", type=float, help="Per-attempt timeout in seconds. Overrides config.")
@strategy_options
@click.pass_context
def request(ctx, method, url, data, timeout, strategy_type, max_attempts, initial_delay_ms, interval_ms, degree):
    """Send an HTTP request, retrying failures.

    METHOD: HTTP method (GET, POST, PUT, DELETE)
    URL: Absolute URL, or path relative to http.base_url
    """
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)
    strategy = _create_strategy(
        config_manager,
        strategy_type,
        {
            "max_attempts": max_attempts,
            "initial_delay_ms": initial_delay_ms,
            "interval_ms": interval_ms,
            "degree": degree,
        },
        verbose,
    )

    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as e:
            _die(f"--data is not valid JSON: {e}", verbose=verbose, exc=e)

    http_config = config_manager.get_http_config()
    client = RetryingHttpClient(
        strategy,
        base_url=http_config.base_url,
        timeout=timeout or http_config.timeout,
        headers=http_config.headers,
    )

    method = method.upper()
    try:
        with client:
            if method == "GET":
                resp = client.get(url)
            elif method == "POST":
                resp = client.post(url, body)
            elif method == "PUT":
                resp = client.put(url, body)
            else:
                resp = client.delete(url)
    except HttpRetryError as e:
        _die(str(e), verbose=verbose, exc=e)

    click.echo(f"HTTP {resp.status_code}")
    click.echo(resp.text)


@cli.command()
@click.argument("url", type=str)
@click.option("--timeout", type=float, help="Per-attempt timeout in seconds. Overrides config.")
@strategy_options
@click.pass_context
def get(ctx, url, timeout, strategy_type, max_attempts, initial_delay_ms, interval_ms, degree):
    """Shortcut for `request GET URL`."""
    ctx.invoke(
        request,
        method="GET",
        url=url,
        data=None,
        timeout=timeout,
        strategy_type=strategy_type,
        max_attempts=max_attempts,
        initial_delay_ms=initial_delay_ms,
        interval_ms=interval_ms,
        degree=degree,
    )


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
