"""Fibonacci backoff retry strategy"""

from dataclasses import dataclass
from fractions import Fraction
from typing import ClassVar

from httpretry.domain.strategies.base import (
    MAX_DELAY_MS,
    RetryStrategy,
    validate_attempt,
    validate_initial_delay,
    validate_max_attempts,
)


@dataclass(frozen=True)
class FibonacciBackoffRetryStrategy(RetryStrategy):
    """Scales the delay by the Fibonacci sequence (1, 1, 2, 3, 5, 8, ...)

    delay = initial_delay_ms * fib(attempt), where fib(0) = fib(1) = 1.

    Attributes:
        max_attempts: Maximum number of retries (at least 1)
        initial_delay_ms: Delay before the first two retries
    """

    type: ClassVar[str] = "fibonacci"
    max_attempts: int
    initial_delay_ms: float = 1000

    def __post_init__(self) -> None:
        validate_max_attempts(self.max_attempts)
        validate_initial_delay(self.initial_delay_ms)

    def get_delay_ms(self, attempt: int) -> float:
        validate_attempt(attempt)
        # Exact bound, so a tiny initial delay cannot overflow a float product.
        limit = Fraction(MAX_DELAY_MS) / Fraction(self.initial_delay_ms)
        previous, current = 1, 1
        for _ in range(2, attempt + 1):
            if current >= limit:
                return MAX_DELAY_MS
            previous, current = current, previous + current
        if current >= limit:
            return MAX_DELAY_MS
        return float(Fraction(self.initial_delay_ms) * current)
