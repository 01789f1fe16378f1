"""Exponential backoff retry strategy"""

import math
from dataclasses import dataclass
from typing import ClassVar

from httpretry.domain.strategies.base import (
    MAX_DELAY_MS,
    RetryStrategy,
    saturate,
    validate_attempt,
    validate_initial_delay,
    validate_max_attempts,
)


@dataclass(frozen=True)
class ExponentialBackoffRetryStrategy(RetryStrategy):
    """Doubles the delay with every retry

    delay = initial_delay_ms * 2^attempt, capped at MAX_DELAY_MS.

    Attributes:
        max_attempts: Maximum number of retries (at least 1)
        initial_delay_ms: Delay before the first retry, base of the backoff
    """

    type: ClassVar[str] = "exponential"
    max_attempts: int
    initial_delay_ms: float = 1000

    def __post_init__(self) -> None:
        validate_max_attempts(self.max_attempts)
        validate_initial_delay(self.initial_delay_ms)

    def get_delay_ms(self, attempt: int) -> float:
        validate_attempt(attempt)
        try:
            delay = math.ldexp(self.initial_delay_ms, attempt)
        except OverflowError:
            return MAX_DELAY_MS
        return saturate(delay)
