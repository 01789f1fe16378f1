"""Configuration models with Pydantic validation."""

from httpretry.domain.config.app import AppConfig
from httpretry.domain.config.http import HttpConfig
from httpretry.domain.config.retry import (
    ExponentialRetryOptions,
    FibonacciRetryOptions,
    IntervalRetryOptions,
    NoRetryOptions,
    PolynomialRetryOptions,
    RetryStrategyOptions,
)

__all__ = [
    "AppConfig",
    "HttpConfig",
    "RetryStrategyOptions",
    "NoRetryOptions",
    "IntervalRetryOptions",
    "ExponentialRetryOptions",
    "PolynomialRetryOptions",
    "FibonacciRetryOptions",
]
