"""Docker client factory."""

from typing import Any, Mapping, Optional

import docker
import structlog
from docker.utils import kwargs_from_env

from ..config import settings
from ..config.daemon import DaemonConfig

logger = structlog.get_logger(__name__)


class DockerClientFactory:
    """Creates low-level Docker API clients.

    Connection parameters come from, in increasing precedence: the
    ``DOCKER_*`` environment handled by the SDK, the daemon settings, and
    the daemon options of the invocation.
    """

    def __init__(self, config: Optional[DaemonConfig] = None):
        self._config = config or settings.daemon

    def client_kwargs(self, daemon_options: Optional[Mapping[str, Any]] = None) -> dict:
        kwargs = kwargs_from_env(environment=self._config.environment())
        kwargs["version"] = self._config.docker_api_version
        kwargs["timeout"] = self._config.docker_timeout
        kwargs.update(daemon_options or {})
        return kwargs

    def create(self, daemon_options: Optional[Mapping[str, Any]] = None) -> docker.APIClient:
        """Create a client; resolving ``version="auto"`` contacts the daemon."""
        kwargs = self.client_kwargs(daemon_options)
        logger.debug(
            "Creating Docker client",
            base_url=kwargs.get("base_url", "default"),
            version=kwargs.get("version"),
        )
        return docker.APIClient(**kwargs)
