"""Unit tests for settings and the client factory."""

import pytest
from pydantic import ValidationError

from dockertask.config import Settings
from dockertask.config.daemon import DaemonConfig
from dockertask.services.daemon import DockerClientFactory


class TestSettings:
    """Test settings validation and grouping."""

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.spinner_interval_ms == 80
        assert s.display.spinner_interval == 0.08
        assert s.task_file == "dockertask.json"

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="loud")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_daemon_group(self):
        s = Settings(_env_file=None, docker_host="tcp://10.0.0.5:2375", docker_timeout=5)
        assert s.daemon.docker_host == "tcp://10.0.0.5:2375"
        assert s.daemon.docker_timeout == 5


class TestDaemonEnvironment:
    """Test rendering settings as SDK environment."""

    def test_host_and_tls(self):
        config = DaemonConfig(
            docker_host="tcp://10.0.0.5:2376",
            docker_tls_verify=True,
            docker_cert_path="/certs",
        )
        assert config.environment() == {
            "DOCKER_TLS_VERIFY": "1",
            "DOCKER_HOST": "tcp://10.0.0.5:2376",
            "DOCKER_CERT_PATH": "/certs",
        }

    def test_no_host(self):
        config = DaemonConfig(docker_host=None, docker_tls_verify=False, docker_cert_path=None)
        assert config.environment() == {"DOCKER_TLS_VERIFY": ""}


class TestDockerClientFactory:
    """Test client keyword resolution."""

    def test_invocation_options_win(self):
        config = DaemonConfig(
            docker_host="tcp://10.0.0.5:2375",
            docker_api_version="1.43",
            docker_timeout=60,
            docker_tls_verify=False,
            docker_cert_path=None,
        )
        factory = DockerClientFactory(config)
        kwargs = factory.client_kwargs({"timeout": 5})
        assert kwargs["base_url"] == "tcp://10.0.0.5:2375"
        assert kwargs["version"] == "1.43"
        assert kwargs["timeout"] == 5

    def test_default_socket(self):
        config = DaemonConfig(docker_host=None, docker_tls_verify=False, docker_cert_path=None)
        kwargs = DockerClientFactory(config).client_kwargs()
        assert "base_url" not in kwargs
