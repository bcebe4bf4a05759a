"""Pytest configuration and shared fixtures."""

import io
from unittest.mock import MagicMock

import docker
import pytest
from rich.console import Console

from dockertask.services.dispatcher import CommandDispatcher
from dockertask.utils.output import Reporter


@pytest.fixture
def output():
    """Buffer receiving everything the reporter writes."""
    return io.StringIO()


@pytest.fixture
def reporter(output):
    """Reporter writing plain text to the output buffer."""
    console = Console(
        file=output,
        width=200,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    return Reporter(console=console)


@pytest.fixture
def stdout():
    """Stand-in for process standard output."""
    return io.StringIO()


@pytest.fixture
def mock_client():
    """Mock low-level Docker API client."""
    client = MagicMock(spec=docker.APIClient)
    client.tag.return_value = True
    client.containers.return_value = []
    client.create_container.return_value = {"Id": "c0ffee1234567890abcdef"}
    client.exec_create.return_value = {"Id": "exec-1"}
    client.wait.return_value = {"StatusCode": 0}
    return client


@pytest.fixture
def client_factory(mock_client):
    """Client factory handing out the mock client."""
    factory = MagicMock()
    factory.create.return_value = mock_client
    return factory


@pytest.fixture
def dispatcher(client_factory, reporter, stdout):
    """Dispatcher wired to the mock daemon and in-memory output."""
    return CommandDispatcher(
        client_factory=client_factory,
        reporter=reporter,
        stdin=io.BytesIO(),
        stdout=stdout,
    )
