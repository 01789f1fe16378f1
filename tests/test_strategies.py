"""Tests for retry strategies"""

import dataclasses
import math

import pytest

from httpretry.domain.strategies import (
    MAX_DELAY_MS,
    ConstantIntervalRetryStrategy,
    ExponentialBackoffRetryStrategy,
    FibonacciBackoffRetryStrategy,
    InvalidStrategyError,
    NoRetryStrategy,
    PolynomialBackoffRetryStrategy,
)

BACKOFF_STRATEGIES = [
    ConstantIntervalRetryStrategy(3, 500),
    ExponentialBackoffRetryStrategy(5, 100),
    PolynomialBackoffRetryStrategy(4, 100, 2),
    FibonacciBackoffRetryStrategy(5, 100),
]


class TestShouldRetry:
    """Tests for the shared should_retry contract"""

    @pytest.mark.parametrize("strategy", BACKOFF_STRATEGIES, ids=lambda s: s.type)
    def test_retries_below_max_attempts(self, strategy):
        """Retries are permitted exactly while attempt < max_attempts"""
        for attempt in range(strategy.max_attempts):
            assert strategy.should_retry(attempt) is True
        for attempt in range(strategy.max_attempts, strategy.max_attempts + 5):
            assert strategy.should_retry(attempt) is False

    @pytest.mark.parametrize("strategy", BACKOFF_STRATEGIES, ids=lambda s: s.type)
    def test_strategy_is_immutable(self, strategy):
        """Strategies cannot be changed after construction"""
        with pytest.raises(dataclasses.FrozenInstanceError):
            strategy.max_attempts = 100

    def test_equal_parameters_compare_equal(self):
        assert ExponentialBackoffRetryStrategy(3, 10) == ExponentialBackoffRetryStrategy(3, 10)
        assert ExponentialBackoffRetryStrategy(3, 10) != FibonacciBackoffRetryStrategy(3, 10)


class TestNoRetryStrategy:
    """Tests for NoRetryStrategy"""

    @pytest.mark.parametrize("attempt", [0, 1, 5, 1000])
    def test_never_retries(self, attempt):
        strategy = NoRetryStrategy()
        assert strategy.should_retry(attempt) is False
        assert strategy.get_delay_ms(attempt) == 0

    def test_max_attempts_is_zero(self):
        assert NoRetryStrategy().max_attempts == 0

    def test_max_attempts_cannot_be_configured(self):
        with pytest.raises(TypeError):
            NoRetryStrategy(max_attempts=3)

    def test_delays_empty(self):
        assert NoRetryStrategy().delays() == []


class TestConstantIntervalRetryStrategy:
    """Tests for ConstantIntervalRetryStrategy"""

    def test_delay_is_constant(self):
        strategy = ConstantIntervalRetryStrategy(3, 500)
        assert [strategy.get_delay_ms(a) for a in range(6)] == [500] * 6

    def test_zero_interval_allowed(self):
        assert ConstantIntervalRetryStrategy(1, 0).get_delay_ms(0) == 0

    def test_negative_interval_rejected(self):
        with pytest.raises(InvalidStrategyError, match="0 or greater"):
            ConstantIntervalRetryStrategy(3, -1)

    def test_zero_max_attempts_rejected(self):
        with pytest.raises(InvalidStrategyError, match="at least 1"):
            ConstantIntervalRetryStrategy(0, 100)


class TestExponentialBackoffRetryStrategy:
    """Tests for ExponentialBackoffRetryStrategy"""

    def test_delay_doubles(self):
        strategy = ExponentialBackoffRetryStrategy(5, 100)
        assert strategy.delays(4) == [100, 200, 400, 800]

    def test_default_initial_delay(self):
        strategy = ExponentialBackoffRetryStrategy(3)
        assert strategy.initial_delay_ms == 1000
        assert strategy.get_delay_ms(0) == 1000

    @pytest.mark.parametrize("attempt", [60, 1023, 1024, 10_000, 10**9])
    def test_large_attempt_saturates(self, attempt):
        """Huge exponents are capped instead of overflowing"""
        delay = ExponentialBackoffRetryStrategy(5, 100).get_delay_ms(attempt)
        assert delay == MAX_DELAY_MS
        assert math.isfinite(delay)

    def test_tiny_initial_delay_with_large_attempt(self):
        """A huge exponent is fine while the product stays below the cap"""
        delay = ExponentialBackoffRetryStrategy(5, 1e-310).get_delay_ms(1030)
        assert delay == pytest.approx(1.1509, rel=1e-3)
        assert delay < 2

    def test_zero_initial_delay_rejected(self):
        with pytest.raises(InvalidStrategyError, match="greater than 0"):
            ExponentialBackoffRetryStrategy(3, 0)

    def test_zero_max_attempts_rejected(self):
        with pytest.raises(InvalidStrategyError, match="at least 1"):
            ExponentialBackoffRetryStrategy(0)

    def test_negative_attempt_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            ExponentialBackoffRetryStrategy(3).get_delay_ms(-1)


class TestPolynomialBackoffRetryStrategy:
    """Tests for PolynomialBackoffRetryStrategy"""

    def test_quadratic_delay(self):
        strategy = PolynomialBackoffRetryStrategy(4, 100, 2)
        assert strategy.delays() == [0, 100, 400, 900]

    def test_first_retry_has_no_delay(self):
        assert PolynomialBackoffRetryStrategy(4, 250, 1).get_delay_ms(0) == 0

    def test_linear_delay(self):
        strategy = PolynomialBackoffRetryStrategy(4, 50, 1)
        assert strategy.delays() == [0, 50, 100, 150]

    def test_large_attempt_saturates(self):
        strategy = PolynomialBackoffRetryStrategy(4, 100, 50)
        assert strategy.get_delay_ms(10**6) == MAX_DELAY_MS

    def test_tiny_initial_delay_with_large_attempt(self):
        strategy = PolynomialBackoffRetryStrategy(5, 1e-300, 100)
        assert strategy.get_delay_ms(1000) == pytest.approx(1.0)
        assert strategy.get_delay_ms(10**4) == MAX_DELAY_MS

    @pytest.mark.parametrize("degree", [0, -1, 1.5, 2.0, True])
    def test_invalid_degree_rejected(self, degree):
        with pytest.raises(InvalidStrategyError, match="positive integer"):
            PolynomialBackoffRetryStrategy(4, 100, degree)

    def test_zero_initial_delay_rejected(self):
        with pytest.raises(InvalidStrategyError, match="greater than 0"):
            PolynomialBackoffRetryStrategy(4, 0, 2)

    def test_zero_max_attempts_rejected(self):
        with pytest.raises(InvalidStrategyError, match="at least 1"):
            PolynomialBackoffRetryStrategy(0, 100, 2)


class TestFibonacciBackoffRetryStrategy:
    """Tests for FibonacciBackoffRetryStrategy"""

    def test_fibonacci_sequence(self):
        strategy = FibonacciBackoffRetryStrategy(5, 100)
        assert strategy.delays() == [100, 100, 200, 300, 500]

    def test_later_terms(self):
        strategy = FibonacciBackoffRetryStrategy(10, 1)
        assert strategy.get_delay_ms(9) == 55

    def test_default_initial_delay(self):
        assert FibonacciBackoffRetryStrategy(3).get_delay_ms(2) == 2000

    def test_large_attempt_saturates(self):
        """Large indexes are capped without computing the full sequence"""
        assert FibonacciBackoffRetryStrategy(5, 100).get_delay_ms(10**7) == MAX_DELAY_MS

    def test_tiny_initial_delay_saturates(self):
        """Fibonacci numbers beyond the float range still cap cleanly"""
        assert FibonacciBackoffRetryStrategy(5, 1e-300).get_delay_ms(2000) == MAX_DELAY_MS

    def test_tiny_initial_delay_below_cap(self):
        delay = FibonacciBackoffRetryStrategy(5, 5e-324).get_delay_ms(1500)
        assert 0 < delay < MAX_DELAY_MS

    def test_zero_initial_delay_rejected(self):
        with pytest.raises(InvalidStrategyError, match="greater than 0"):
            FibonacciBackoffRetryStrategy(5, 0)

    def test_zero_max_attempts_rejected(self):
        with pytest.raises(InvalidStrategyError, match="at least 1"):
            FibonacciBackoffRetryStrategy(0, 100)
