"""
Configuration for the commissioning service.
"""

from pydantic import Field

from shared.config import BaseConfig
from service_commissioning.app.ratelimit.gate import TimeUnit

DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/commissioning/contract/create"


class CommissioningConfig(BaseConfig):
    """Settings read from ``CRPT_*`` environment variables."""

    api_url: str = Field(default=DEFAULT_API_URL)
    user_token: str = Field(default="")

    # Rate gate: at most request_limit calls per window, one time_unit apart
    time_unit: TimeUnit = Field(default=TimeUnit.SECONDS)
    request_limit: int = Field(default=1)

    # Passed through to the HTTP client; the gate imposes no timeout of its own
    http_timeout_seconds: float = Field(default=30.0)


def get_config() -> CommissioningConfig:
    """Get configuration for the commissioning service."""
    return CommissioningConfig()
