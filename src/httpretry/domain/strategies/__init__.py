"""Retry strategies"""

from httpretry.domain.strategies.base import (
    MAX_DELAY_MS,
    InvalidStrategyError,
    RetryStrategy,
)
from httpretry.domain.strategies.constant_interval import ConstantIntervalRetryStrategy
from httpretry.domain.strategies.exponential import ExponentialBackoffRetryStrategy
from httpretry.domain.strategies.fibonacci import FibonacciBackoffRetryStrategy
from httpretry.domain.strategies.no_retry import NoRetryStrategy
from httpretry.domain.strategies.polynomial import PolynomialBackoffRetryStrategy

__all__ = [
    "MAX_DELAY_MS",
    "InvalidStrategyError",
    "RetryStrategy",
    "NoRetryStrategy",
    "ConstantIntervalRetryStrategy",
    "ExponentialBackoffRetryStrategy",
    "PolynomialBackoffRetryStrategy",
    "FibonacciBackoffRetryStrategy",
]
