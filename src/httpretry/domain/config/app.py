"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from httpretry.domain.config.http import HttpConfig
from httpretry.domain.config.retry import NoRetryOptions, RetryStrategyOptions


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation is
    performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry strategy options (defaults to no retries)
        http: HTTP transport configuration
    """

    retry: RetryStrategyOptions = Field(default_factory=NoRetryOptions)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "type": "exponential",
                    "max_attempts": 5,
                    "initial_delay_ms": 500,
                },
                "http": {
                    "base_url": "https://api.example.com",
                    "timeout": 10.0,
                    "headers": {"Accept": "application/json"},
                },
            }
        },
    )
