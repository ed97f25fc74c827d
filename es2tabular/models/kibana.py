import os
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


class KibanaSettings(BaseModel):
    """
    Connection settings for Kibana's Console Proxy API.

    Every field falls back to a KIBANA_* environment variable when it is
    not given in config.json.

    Example JSON:
    {
        "host": "kibana.internal",
        "port": 5601,
        "protocol": "https",
        "authToken": "Bearer abc..."
    }
    """

    # --- Endpoint ---
    host: str = Field(default_factory=lambda: _env("KIBANA_HOST", "localhost"))
    port: int = Field(default_factory=lambda: int(_env("KIBANA_PORT", "5601")), ge=1, le=65535)
    protocol: Literal["http", "https"] = Field(default_factory=lambda: _env("KIBANA_PROTOCOL", "http"))

    # --- Credentials ---
    username: Optional[str] = Field(default_factory=lambda: _env("KIBANA_USERNAME"))
    password: Optional[str] = Field(default_factory=lambda: _env("KIBANA_PASSWORD"))
    auth_token: Optional[str] = Field(
        default_factory=lambda: _env("KIBANA_AUTH_TOKEN"),
        alias="authToken",
        description="Either 'Bearer <token>' or a pre-encoded Basic credential."
    )

    # --- Network ---
    verify_ssl: bool = Field(default=True)
    timeout: int = Field(default=60, ge=1, description="Request timeout in seconds.")

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("username", "password", "auth_token", mode="before")
    @classmethod
    def strip_credentials(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"
