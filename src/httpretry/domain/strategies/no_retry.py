"""Strategy that never retries"""

from dataclasses import dataclass, field
from typing import ClassVar

from httpretry.domain.strategies.base import RetryStrategy


@dataclass(frozen=True)
class NoRetryStrategy(RetryStrategy):
    """Declines every retry. Used when no retry policy is configured."""

    type: ClassVar[str] = "no-retry"
    max_attempts: int = field(default=0, init=False)

    def should_retry(self, attempt: int) -> bool:
        return False

    def get_delay_ms(self, attempt: int) -> float:
        return 0
