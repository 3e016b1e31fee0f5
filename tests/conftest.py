"""
Shared pytest fixtures for Volcop tests.

Provides an in-memory runtime client that records every call, settings
rooted in a temporary directory, and a mocked docker SDK client.
"""

import pytest
from unittest.mock import MagicMock
from typer.testing import CliRunner

from volcop.helpers.config import BackupSettings
from volcop.types import ContainerInspection, MountBinding


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")
    config.addinivalue_line("markers", "integration: tests spanning CLI, orchestrator and filesystem")


class FakeRuntimeClient:
    """
    RuntimeClient double that records calls and tracks running state.

    Failures are injected through ``fail``: keys are either an operation name
    ("create"), an (operation, container) tuple (("stop", "c1")), or the full
    call tuple (("copy_out", "helper1", "/data")).
    """

    def __init__(
        self,
        container_id="c1",
        mounts=None,
        running=True,
        helper_id="helper1",
        contents=None,
        modes=None,
        logs=b"",
        wait_status=0,
        fail=None,
    ):
        self.container_id = container_id
        self.mounts = list(mounts or [])
        self.helper_id = helper_id
        self.contents = dict(contents or {})
        self.modes = dict(modes or {})
        self.log_output = logs
        self.wait_status = wait_status
        self.fail = dict(fail or {})
        self.running = {container_id: running}
        self.calls = []
        self.created = []
        self.closed = False

    def _record(self, op, *args):
        call = (op,) + args
        self.calls.append(call)
        for key in (call, (op, args[0]) if args else None, op):
            if key is not None and key in self.fail:
                raise self.fail[key]

    def inspect(self, container_id):
        self._record("inspect", container_id)
        return ContainerInspection(
            id=container_id,
            name="web",
            running=self.running.get(container_id, False),
            mounts=list(self.mounts),
        )

    def stop(self, container_id):
        self._record("stop", container_id)
        self.running[container_id] = False

    def create(self, image, command, mounts):
        self._record("create", image)
        self.created.append({"image": image, "command": list(command), "mounts": list(mounts)})
        self.running[self.helper_id] = False
        return self.helper_id

    def start(self, container_id):
        self._record("start", container_id)
        self.running[container_id] = True

    def wait(self, container_id, condition="not-running", timeout=None):
        self._record("wait", container_id)
        self.running[container_id] = False
        return self.wait_status

    def logs(self, container_id):
        self._record("logs", container_id)
        return iter([self.log_output])

    def copy_out(self, container_id, path):
        self._record("copy_out", container_id, path)
        data = self.contents.get(path, b"ab")
        return iter([data]), {"name": path.rsplit("/", 1)[-1], "mode": self.modes.get(path, 0o755)}

    def remove(self, container_id):
        self._record("remove", container_id)

    def close(self):
        self.closed = True

    def ops(self):
        return [(c[0], c[1]) for c in self.calls]


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def backup_settings(tmp_path):
    """Settings writing archives below a temporary backup root."""
    return BackupSettings(backup_root=tmp_path / "volcop_backup")


@pytest.fixture
def fake_runtime_factory():
    """Factory fixture for FakeRuntimeClient instances.

    Usage:
        def test_something(fake_runtime_factory):
            runtime = fake_runtime_factory(mounts=[...], fail={"create": error})
    """
    return FakeRuntimeClient


@pytest.fixture
def data_mount():
    return MountBinding(type="volume", source="v1", destination="/data")


@pytest.fixture
def mock_docker_inspect():
    """Docker inspect output for a running container with two mounts."""
    return {
        "Id": "abc123",
        "Name": "/test-container",
        "State": {"Running": True, "Status": "running"},
        "Config": {"Image": "nginx:latest", "Labels": {}},
        "Mounts": [
            {
                "Type": "volume",
                "Name": "test-volume",
                "Source": "/var/lib/docker/volumes/test-volume/_data",
                "Destination": "/data",
            },
            {
                "Type": "bind",
                "Source": "/srv/config",
                "Destination": "/etc/app",
            },
        ],
    }


@pytest.fixture
def mock_docker_client():
    """Mock docker.DockerClient whose low-level API is a MagicMock."""
    client = MagicMock()
    client.api.create_host_config.side_effect = lambda **kwargs: kwargs
    client.api.create_container.return_value = {"Id": "helper123"}
    client.api.wait.return_value = {"StatusCode": 0}
    return client
