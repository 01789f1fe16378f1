"""Polynomial backoff retry strategy"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import ClassVar

from httpretry.domain.strategies.base import (
    MAX_DELAY_MS,
    InvalidStrategyError,
    RetryStrategy,
    saturate,
    validate_attempt,
    validate_initial_delay,
    validate_max_attempts,
)


@dataclass(frozen=True)
class PolynomialBackoffRetryStrategy(RetryStrategy):
    """Grows the delay as a power of the attempt index

    delay = initial_delay_ms * attempt^degree, capped at MAX_DELAY_MS.
    Attempt 0 therefore has no delay at all.

    Attributes:
        max_attempts: Maximum number of retries (at least 1)
        initial_delay_ms: Scale factor of the polynomial
        degree: Positive integer exponent
    """

    type: ClassVar[str] = "polynomial"
    max_attempts: int
    initial_delay_ms: float
    degree: int

    def __post_init__(self) -> None:
        validate_max_attempts(self.max_attempts)
        validate_initial_delay(self.initial_delay_ms)
        if isinstance(self.degree, bool) or not isinstance(self.degree, int) or self.degree < 1:
            raise InvalidStrategyError("Degree must be a positive integer.")

    def get_delay_ms(self, attempt: int) -> float:
        validate_attempt(attempt)
        if attempt == 0:
            return 0
        # Past 2**54 in log space the product is well above the cap.
        if self.degree * math.log2(attempt) + math.log2(self.initial_delay_ms) >= 54:
            return MAX_DELAY_MS
        return saturate(float(Fraction(self.initial_delay_ms) * attempt**self.degree))
