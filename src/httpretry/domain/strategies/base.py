"""Base retry strategy interface"""

import math
from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional

# Largest integer a double represents exactly (2**53 - 1).
MAX_DELAY_MS = 2**53 - 1


class InvalidStrategyError(ValueError):
    """Raised when a retry strategy is constructed with invalid parameters."""

    pass


def saturate(delay: float) -> float:
    """Cap a computed delay at MAX_DELAY_MS (inf and nan included)."""
    if math.isnan(delay) or delay >= MAX_DELAY_MS:
        return MAX_DELAY_MS
    return delay


class RetryStrategy(ABC):
    """Abstract base class for retry strategies

    A strategy decides whether a failed call may be retried and how long to
    wait before doing so. Both decisions depend only on the attempt index and
    on the parameters fixed at construction.

    Attributes:
        type: Configuration tag identifying the strategy
        max_attempts: Maximum number of retries the strategy permits
    """

    type: ClassVar[str]
    max_attempts: int

    def should_retry(self, attempt: int) -> bool:
        """Check whether retry number ``attempt`` is still permitted

        Args:
            attempt: Zero-based count of retries already performed

        Returns:
            True if another retry may be made
        """
        return attempt < self.max_attempts

    @abstractmethod
    def get_delay_ms(self, attempt: int) -> float:
        """Get the delay before performing retry number ``attempt``

        Args:
            attempt: Zero-based count of retries already performed

        Returns:
            Non-negative delay in milliseconds
        """
        pass

    def delays(self, count: Optional[int] = None) -> List[float]:
        """Get the delays for the first ``count`` retries

        Args:
            count: Number of retries (defaults to every retry the strategy permits)

        Returns:
            List of delays in milliseconds, indexed by attempt
        """
        if count is None:
            count = self.max_attempts
        return [self.get_delay_ms(attempt) for attempt in range(count)]


def validate_max_attempts(max_attempts: int) -> None:
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int):
        raise InvalidStrategyError("Max attempts must be an integer.")
    if max_attempts < 1:
        raise InvalidStrategyError("Max attempts must be at least 1.")


def validate_initial_delay(initial_delay_ms: float) -> None:
    if isinstance(initial_delay_ms, bool) or not isinstance(initial_delay_ms, (int, float)):
        raise InvalidStrategyError("Initial delay must be a number.")
    if not initial_delay_ms > 0 or math.isinf(initial_delay_ms):
        raise InvalidStrategyError("Initial delay must be greater than 0.")


def validate_attempt(attempt: int) -> None:
    if attempt < 0:
        raise ValueError(f"Attempt must be non-negative, got {attempt}")
