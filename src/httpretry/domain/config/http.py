"""HTTP transport configuration model."""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class HttpConfig(BaseModel):
    """Configuration for the underlying HTTP transport.

    Attributes:
        base_url: Prefix for relative request URLs (None = URLs must be absolute)
        timeout: Per-attempt request timeout in seconds
        headers: Headers sent with every request
    """

    base_url: Optional[str] = None
    timeout: float = Field(30.0, gt=0.0)
    headers: Dict[str, str] = Field(default_factory=dict)
