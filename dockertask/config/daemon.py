"""Docker daemon connection configuration."""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class DaemonConfig(BaseSettings):
    """Connection settings for the Docker daemon."""

    docker_host: Optional[str] = Field(default=None, alias="docker_host")
    docker_api_version: str = Field(default="auto", alias="docker_api_version")
    docker_timeout: int = Field(default=60, ge=1, le=3600, alias="docker_timeout")
    docker_tls_verify: bool = Field(default=False, alias="docker_tls_verify")
    docker_cert_path: Optional[str] = Field(default=None, alias="docker_cert_path")

    def environment(self) -> Dict[str, str]:
        """Settings rendered as the ``DOCKER_*`` variables the SDK understands."""
        env = {"DOCKER_TLS_VERIFY": "1" if self.docker_tls_verify else ""}
        if self.docker_host:
            env["DOCKER_HOST"] = self.docker_host
        if self.docker_cert_path:
            env["DOCKER_CERT_PATH"] = self.docker_cert_path
        return env

    class Config:
        env_prefix = ""
        extra = "ignore"
