"""Pluggable retry strategies for outbound HTTP calls"""

from httpretry.domain.strategies import (
    MAX_DELAY_MS,
    ConstantIntervalRetryStrategy,
    ExponentialBackoffRetryStrategy,
    FibonacciBackoffRetryStrategy,
    InvalidStrategyError,
    NoRetryStrategy,
    PolynomialBackoffRetryStrategy,
    RetryStrategy,
)
from httpretry.infrastructure.async_http_client import AsyncRetryingHttpClient
from httpretry.infrastructure.exceptions import (
    HttpRetryError,
    RetryCancelledError,
    RetryExhaustedError,
)
from httpretry.infrastructure.http_client import RetryingHttpClient
from httpretry.infrastructure.retry import CancellationToken
from httpretry.infrastructure.strategy_factory import RetryStrategyFactory

__version__ = "0.1.0"

__all__ = [
    "MAX_DELAY_MS",
    "RetryStrategy",
    "NoRetryStrategy",
    "ConstantIntervalRetryStrategy",
    "ExponentialBackoffRetryStrategy",
    "PolynomialBackoffRetryStrategy",
    "FibonacciBackoffRetryStrategy",
    "InvalidStrategyError",
    "RetryStrategyFactory",
    "RetryingHttpClient",
    "AsyncRetryingHttpClient",
    "CancellationToken",
    "HttpRetryError",
    "RetryExhaustedError",
    "RetryCancelledError",
]
