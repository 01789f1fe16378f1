"""Retrying HTTP client (requests + pluggable retry strategy).

We keep HTTP logic centralized so that every caller shares the same retry
behavior. Each call retries according to the client's default strategy or
a per-call override.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, Optional

import requests

from httpretry.domain.config.app import AppConfig
from httpretry.domain.strategies import NoRetryStrategy, RetryStrategy
from httpretry.infrastructure.retry import CancellationToken, call_with_retries
from httpretry.infrastructure.strategy_factory import RetryStrategyFactory

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (requests.exceptions.RequestException,)


def resolve_url(base_url: Optional[str], url: str) -> str:
    """Join a relative URL onto base_url; absolute URLs are left untouched."""
    if not base_url or url.startswith(("http://", "https://")):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


class RetryingHttpClient:
    """HTTP client that retries failed calls according to a RetryStrategy

    Any requests.RequestException (network errors and non-2xx responses) is
    a transient failure. Once the strategy declines a retry the call raises
    RetryExhaustedError carrying the last failure's message.
    """

    def __init__(
        self,
        retry_strategy: Optional[RetryStrategy] = None,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize client

        Args:
            retry_strategy: Default strategy for every call (None = no retries)
            session: requests session to use (a new one is created if None)
            base_url: Prefix for relative URLs
            timeout: Per-attempt timeout in seconds
            headers: Headers sent with every request (the session is left untouched)
        """
        self.retry_strategy = retry_strategy or NoRetryStrategy()
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = timeout
        self.headers = dict(headers or {})

    @classmethod
    def from_config(cls, config: AppConfig, session: Optional[requests.Session] = None) -> "RetryingHttpClient":
        """Create client from application configuration"""
        return cls(
            RetryStrategyFactory.create(config.retry),
            session=session,
            base_url=config.http.base_url,
            timeout=config.http.timeout,
            headers=config.http.headers,
        )

    def request(
        self,
        method: str,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> requests.Response:
        """Issue a request, retrying transient failures

        Args:
            method: HTTP method
            url: Absolute URL, or URL relative to base_url
            options: Extra keyword arguments for requests (params, json, headers, ...)
            strategy: Strategy overriding the client default for this call
            cancel_token: Token that abandons the call when cancelled

        Returns:
            Response of the first successful attempt

        Raises:
            RetryExhaustedError: If every permitted attempt failed
            RetryCancelledError: If the call was cancelled
        """
        target = resolve_url(self.base_url, url)
        kwargs = {"timeout": self.timeout}
        kwargs.update(options or {})
        if self.headers:
            kwargs["headers"] = {**self.headers, **(kwargs.get("headers") or {})}
        return call_with_retries(
            partial(self._send, method.upper(), target, kwargs),
            strategy or self.retry_strategy,
            target,
            TRANSIENT_ERRORS,
            cancel_token,
        )

    def _send(self, method: str, url: str, kwargs: Dict[str, Any]) -> requests.Response:
        logger.debug(f"HTTP {method} {url}")
        resp = self.session.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    def get(
        self,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> requests.Response:
        return self.request("GET", url, options, strategy, cancel_token)

    def post(
        self,
        url: str,
        data: Any = None,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> requests.Response:
        """POST ``data`` as JSON"""
        return self.request("POST", url, with_json_body(options, data), strategy, cancel_token)

    def put(
        self,
        url: str,
        data: Any = None,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> requests.Response:
        """PUT ``data`` as JSON"""
        return self.request("PUT", url, with_json_body(options, data), strategy, cancel_token)

    def delete(
        self,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> requests.Response:
        return self.request("DELETE", url, options, strategy, cancel_token)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RetryingHttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def with_json_body(options: Optional[Dict[str, Any]], data: Any) -> Dict[str, Any]:
    merged = dict(options or {})
    if data is not None:
        merged["json"] = data
    return merged
