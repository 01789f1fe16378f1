"""Factory for creating retry strategies from configuration"""

import logging
from typing import Any, Dict, Type, Union

from pydantic import TypeAdapter

from httpretry.domain.config.retry import (
    ExponentialRetryOptions,
    FibonacciRetryOptions,
    IntervalRetryOptions,
    NoRetryOptions,
    PolynomialRetryOptions,
    RetryStrategyOptions,
)
from httpretry.domain.strategies import (
    ConstantIntervalRetryStrategy,
    ExponentialBackoffRetryStrategy,
    FibonacciBackoffRetryStrategy,
    NoRetryStrategy,
    PolynomialBackoffRetryStrategy,
    RetryStrategy,
)

logger = logging.getLogger(__name__)

_options_adapter = TypeAdapter(RetryStrategyOptions)


class RetryStrategyFactory:
    """Factory for creating retry strategy instances"""

    STRATEGIES: Dict[str, Type[RetryStrategy]] = {
        NoRetryStrategy.type: NoRetryStrategy,
        ConstantIntervalRetryStrategy.type: ConstantIntervalRetryStrategy,
        ExponentialBackoffRetryStrategy.type: ExponentialBackoffRetryStrategy,
        PolynomialBackoffRetryStrategy.type: PolynomialBackoffRetryStrategy,
        FibonacciBackoffRetryStrategy.type: FibonacciBackoffRetryStrategy,
    }

    @classmethod
    def create(cls, options: Union[RetryStrategyOptions, Dict[str, Any], None] = None) -> RetryStrategy:
        """Create retry strategy instance

        Args:
            options: Validated options model or raw mapping with a ``type`` tag
                (None = no retries)

        Returns:
            RetryStrategy instance

        Raises:
            ValueError: If the strategy type is not supported
            pydantic.ValidationError: If a raw mapping is invalid
        """
        if options is None:
            return cls.default()

        if isinstance(options, dict):
            strategy_type = str(options.get("type", "")).lower()
            if strategy_type not in cls.STRATEGIES:
                available = ", ".join(cls.STRATEGIES.keys())
                raise ValueError(
                    f"Unknown retry strategy: {options.get('type')}. "
                    f"Available strategies: {available}"
                )
            options = _options_adapter.validate_python({**options, "type": strategy_type})

        logger.debug(f"Creating {options.type} retry strategy")

        if isinstance(options, IntervalRetryOptions):
            return ConstantIntervalRetryStrategy(options.max_attempts, options.interval_ms)
        if isinstance(options, ExponentialRetryOptions):
            return ExponentialBackoffRetryStrategy(options.max_attempts, options.initial_delay_ms)
        if isinstance(options, PolynomialRetryOptions):
            return PolynomialBackoffRetryStrategy(
                options.max_attempts, options.initial_delay_ms, options.degree
            )
        if isinstance(options, FibonacciRetryOptions):
            return FibonacciBackoffRetryStrategy(options.max_attempts, options.initial_delay_ms)
        if isinstance(options, NoRetryOptions):
            return cls.default()
        raise ValueError(f"Unsupported retry options: {options!r}")

    @classmethod
    def default(cls) -> RetryStrategy:
        """Strategy used when no retry policy is configured"""
        return NoRetryStrategy()
