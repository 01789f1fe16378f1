"""Async retrying HTTP client (httpx + pluggable retry strategy)."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, Optional

import httpx

from httpretry.domain.config.app import AppConfig
from httpretry.domain.strategies import NoRetryStrategy, RetryStrategy
from httpretry.infrastructure.http_client import resolve_url, with_json_body
from httpretry.infrastructure.retry import async_call_with_retries
from httpretry.infrastructure.strategy_factory import RetryStrategyFactory

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (httpx.HTTPError,)


class AsyncRetryingHttpClient:
    """Async HTTP client that retries failed calls according to a RetryStrategy

    Waits between attempts never block the event loop, so unrelated calls
    proceed concurrently. Cancelling the awaiting task aborts a pending wait
    and no further attempt is made.
    """

    def __init__(
        self,
        retry_strategy: Optional[RetryStrategy] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.retry_strategy = retry_strategy or NoRetryStrategy()
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "AsyncRetryingHttpClient":
        """Create client from application configuration"""
        return cls(
            RetryStrategyFactory.create(config.retry),
            base_url=config.http.base_url,
            timeout=config.http.timeout,
            headers=config.http.headers,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
    ) -> httpx.Response:
        """Issue a request, retrying transient failures

        Raises:
            RetryExhaustedError: If every permitted attempt failed
        """
        target = resolve_url(self.base_url, url)
        return await async_call_with_retries(
            partial(self._send, method.upper(), target, options or {}),
            strategy or self.retry_strategy,
            target,
            TRANSIENT_ERRORS,
        )

    async def _send(self, method: str, url: str, kwargs: Dict[str, Any]) -> httpx.Response:
        logger.debug(f"HTTP {method} {url}")
        resp = await self.client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    async def get(
        self,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
    ) -> httpx.Response:
        return await self.request("GET", url, options, strategy)

    async def post(
        self,
        url: str,
        data: Any = None,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
    ) -> httpx.Response:
        return await self.request("POST", url, with_json_body(options, data), strategy)

    async def put(
        self,
        url: str,
        data: Any = None,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
    ) -> httpx.Response:
        return await self.request("PUT", url, with_json_body(options, data), strategy)

    async def delete(
        self,
        url: str,
        options: Optional[Dict[str, Any]] = None,
        strategy: Optional[RetryStrategy] = None,
    ) -> httpx.Response:
        return await self.request("DELETE", url, options, strategy)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "AsyncRetryingHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
