"""Exceptions raised by the retrying HTTP clients."""

from typing import Optional


class HttpRetryError(Exception):
    """Base exception for retrying HTTP calls."""

    pass


class RetryExhaustedError(HttpRetryError):
    """Raised when the retry strategy declines any further attempt.

    Attributes:
        attempts: Maximum number of retries of the strategy that was used
        target: URL of the failed call
        last_exception: Transport error of the final attempt
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        target: str,
        last_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.target = target
        self.last_exception = last_exception


class RetryCancelledError(HttpRetryError):
    """Raised when a call is cancelled while attempting or waiting to retry."""

    def __init__(self, target: str):
        super().__init__(f"HTTP call to {target} was cancelled")
        self.target = target
