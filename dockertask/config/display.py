"""Terminal display configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class DisplayConfig(BaseSettings):
    """Progress indicator and table rendering settings."""

    spinner_name: str = Field(default="bouncingBall", alias="spinner_name")
    spinner_interval_ms: int = Field(default=80, ge=10, le=1000, alias="spinner_interval_ms")
    table_width: int = Field(default=160, ge=40, le=1000, alias="table_width")

    @property
    def spinner_interval(self) -> float:
        """Repaint interval in seconds."""
        return self.spinner_interval_ms / 1000

    class Config:
        env_prefix = ""
        extra = "ignore"
