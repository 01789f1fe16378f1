"""Retry orchestration using tenacity.

The retry strategy is the only source of retry decisions: tenacity's stop
and wait hooks delegate to it, so swapping strategies needs no change here.
Attempt indexes passed to the strategy are the zero-based count of retries
already made.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
)

from httpretry.domain.strategies import RetryStrategy
from httpretry.infrastructure.exceptions import RetryCancelledError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")
ExceptionTypes = Tuple[Type[BaseException], ...]


class CancellationToken:
    """Thread-safe flag used to abandon a call and abort its pending wait."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Block for up to ``seconds``. Returns True if cancelled meanwhile."""
        return self._event.wait(seconds)


def retries_made(retry_state: RetryCallState) -> int:
    """Zero-based count of retries already performed for this call."""
    return retry_state.attempt_number - 1


def pause(seconds: float, cancel_token: CancellationToken, target: str) -> None:
    """Wait before the next attempt, aborting if the call gets cancelled."""
    if cancel_token.wait(seconds):
        raise RetryCancelledError(target)


async def async_pause(seconds: float) -> None:
    """Non-blocking wait; cancelling the awaiting task aborts it."""
    await asyncio.sleep(seconds)


def _stop(strategy: RetryStrategy) -> Callable[[RetryCallState], bool]:
    def stop(retry_state: RetryCallState) -> bool:
        return not strategy.should_retry(retries_made(retry_state))

    return stop


def _wait(strategy: RetryStrategy) -> Callable[[RetryCallState], float]:
    def wait(retry_state: RetryCallState) -> float:
        return strategy.get_delay_ms(retries_made(retry_state)) / 1000.0

    return wait


def _before_attempt(
    target: str, cancel_token: Optional[CancellationToken] = None
) -> Callable[[RetryCallState], None]:
    def before(retry_state: RetryCallState) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            raise RetryCancelledError(target)
        # The first call is attempt 1; only retries are logged.
        if retry_state.attempt_number > 1:
            logger.info(f"Attempt {retries_made(retry_state)} to call {target} initializing.")

    return before


def build_retrying(
    strategy: RetryStrategy,
    target: str,
    retry_on: ExceptionTypes,
    cancel_token: Optional[CancellationToken] = None,
) -> Retrying:
    """Create a tenacity controller driven by ``strategy``

    Args:
        strategy: Retry strategy deciding whether and when to retry
        target: Identifier of the call, used in log messages
        retry_on: Exception types treated as transient failures
        cancel_token: Optional token that abandons the call

    Returns:
        Configured tenacity Retrying instance
    """
    token = cancel_token or CancellationToken()
    return Retrying(
        stop=_stop(strategy),
        wait=_wait(strategy),
        retry=retry_if_exception_type(retry_on),
        before=_before_attempt(target, token),
        sleep=lambda seconds: pause(seconds, token, target),
    )


def build_async_retrying(
    strategy: RetryStrategy,
    target: str,
    retry_on: ExceptionTypes,
) -> AsyncRetrying:
    """Async counterpart of build_retrying; cancellation is task cancellation."""
    return AsyncRetrying(
        stop=_stop(strategy),
        wait=_wait(strategy),
        retry=retry_if_exception_type(retry_on),
        before=_before_attempt(target),
        sleep=lambda seconds: async_pause(seconds),
    )


def exhausted_error(
    strategy: RetryStrategy, target: str, last_exception: Optional[BaseException]
) -> RetryExhaustedError:
    """Log the terminal failure and build the error surfaced to the caller"""
    logger.error(
        f"HTTP call to {target} failed after {strategy.max_attempts} attempts: {last_exception}"
    )
    return RetryExhaustedError(
        f"HTTP call failed after {strategy.max_attempts} attempts; "
        f"last error message: {last_exception}",
        attempts=strategy.max_attempts,
        target=target,
        last_exception=last_exception,
    )


def call_with_retries(
    fn: Callable[[], T],
    strategy: RetryStrategy,
    target: str,
    retry_on: ExceptionTypes,
    cancel_token: Optional[CancellationToken] = None,
) -> T:
    """Run ``fn`` until it succeeds or ``strategy`` declines another retry

    Raises:
        RetryExhaustedError: If the strategy declines after a transient failure
        RetryCancelledError: If ``cancel_token`` is cancelled
    """
    retrying = build_retrying(strategy, target, retry_on, cancel_token)
    try:
        return retrying(fn)
    except RetryError as e:
        last_exception = e.last_attempt.exception()
        raise exhausted_error(strategy, target, last_exception) from last_exception


async def async_call_with_retries(
    fn: Callable[[], Awaitable[T]],
    strategy: RetryStrategy,
    target: str,
    retry_on: ExceptionTypes,
) -> T:
    """Await ``fn`` until it succeeds or ``strategy`` declines another retry"""
    retrying = build_async_retrying(strategy, target, retry_on)
    try:
        return await retrying(fn)
    except RetryError as e:
        last_exception = e.last_attempt.exception()
        raise exhausted_error(strategy, target, last_exception) from last_exception
