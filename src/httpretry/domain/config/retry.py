"""Retry strategy configuration models.

One model per recognized option shape, discriminated by ``type``. Keys are
accepted in snake_case or camelCase (``max_attempts`` / ``maxAttempts``).
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RetryOptions(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class NoRetryOptions(_RetryOptions):
    """Disables retries entirely."""

    type: Literal["no-retry"] = "no-retry"


class IntervalRetryOptions(_RetryOptions):
    """Constant-delay retries.

    Attributes:
        max_attempts: Maximum number of retries
        interval_ms: Fixed delay between retries in milliseconds
    """

    type: Literal["interval"] = "interval"
    max_attempts: int = Field(ge=1)
    interval_ms: float = Field(ge=0)


class ExponentialRetryOptions(_RetryOptions):
    """Exponential backoff.

    Attributes:
        max_attempts: Maximum number of retries
        initial_delay_ms: Delay before the first retry, doubled on every retry
    """

    type: Literal["exponential"] = "exponential"
    max_attempts: int = Field(ge=1)
    initial_delay_ms: float = Field(1000, gt=0)


class PolynomialRetryOptions(_RetryOptions):
    """Polynomial backoff.

    Attributes:
        max_attempts: Maximum number of retries
        initial_delay_ms: Scale factor of the polynomial
        degree: Degree of the polynomial (positive integer)
    """

    type: Literal["polynomial"] = "polynomial"
    max_attempts: int = Field(ge=1)
    initial_delay_ms: float = Field(gt=0)
    degree: int = Field(gt=0, strict=True)


class FibonacciRetryOptions(_RetryOptions):
    """Fibonacci backoff.

    Attributes:
        max_attempts: Maximum number of retries
        initial_delay_ms: Delay before the first two retries
    """

    type: Literal["fibonacci"] = "fibonacci"
    max_attempts: int = Field(ge=1)
    initial_delay_ms: float = Field(1000, gt=0)


RetryStrategyOptions = Annotated[
    Union[
        NoRetryOptions,
        IntervalRetryOptions,
        ExponentialRetryOptions,
        PolynomialRetryOptions,
        FibonacciRetryOptions,
    ],
    Field(discriminator="type"),
]
