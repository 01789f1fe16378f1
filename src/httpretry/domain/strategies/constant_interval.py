"""Retry strategy with a fixed delay between attempts"""

import math
from dataclasses import dataclass
from typing import ClassVar

from httpretry.domain.strategies.base import (
    InvalidStrategyError,
    RetryStrategy,
    validate_max_attempts,
)


@dataclass(frozen=True)
class ConstantIntervalRetryStrategy(RetryStrategy):
    """Waits the same interval before every retry

    Attributes:
        max_attempts: Maximum number of retries (at least 1)
        interval_ms: Fixed delay in milliseconds (0 or greater)
    """

    type: ClassVar[str] = "interval"
    max_attempts: int
    interval_ms: float

    def __post_init__(self) -> None:
        validate_max_attempts(self.max_attempts)
        if isinstance(self.interval_ms, bool) or not isinstance(self.interval_ms, (int, float)):
            raise InvalidStrategyError("Interval milliseconds must be a number.")
        if not self.interval_ms >= 0 or math.isinf(self.interval_ms):
            raise InvalidStrategyError("Interval milliseconds must be 0 or greater.")

    def get_delay_ms(self, attempt: int) -> float:
        return self.interval_ms
