"""
Unit tests for DockerRuntimeClient.

The docker SDK client is replaced by a MagicMock; tests check the API calls
made and the translation of SDK errors.
"""

import pytest
import requests
from unittest.mock import patch
from docker.errors import APIError, DockerException, ImageNotFound, InvalidArgument, NotFound

from volcop.cores.runtime_client import DockerRuntimeClient, parse_mounts
from volcop.helpers.errors import ContainerNotFoundError, RuntimeClientError, WaitTimeoutError
from volcop.types import MountBinding


def make_client(mock_docker_client, **kwargs) -> DockerRuntimeClient:
    return DockerRuntimeClient(client=mock_docker_client, **kwargs)


# =============================================================================
# Inspect
# =============================================================================


@pytest.mark.unit
class TestInspect:
    """Tests for inspect and mount parsing."""

    def test_parse_mounts_uses_volume_name_and_bind_source(self, mock_docker_inspect):
        assert parse_mounts(mock_docker_inspect) == [
            MountBinding(type="volume", source="test-volume", destination="/data"),
            MountBinding(type="bind", source="/srv/config", destination="/etc/app"),
        ]

    def test_parse_mounts_without_mounts(self):
        assert parse_mounts({"Mounts": None}) == []
        assert parse_mounts({}) == []

    def test_parse_mounts_tmpfs_has_no_source(self):
        mounts = parse_mounts({"Mounts": [{"Type": "tmpfs", "Source": "", "Destination": "/run"}]})
        assert mounts == [MountBinding(type="tmpfs", source=None, destination="/run")]

    def test_inspect_returns_running_state_and_mounts(self, mock_docker_client, mock_docker_inspect):
        mock_docker_client.api.inspect_container.return_value = mock_docker_inspect
        client = make_client(mock_docker_client)

        inspection = client.inspect("abc")

        mock_docker_client.api.inspect_container.assert_called_once_with("abc")
        assert inspection.id == "abc123"
        assert inspection.name == "test-container"
        assert inspection.running is True
        assert len(inspection.mounts) == 2

    def test_inspect_missing_container(self, mock_docker_client):
        mock_docker_client.api.inspect_container.side_effect = NotFound("No such container: nope")
        client = make_client(mock_docker_client)

        with pytest.raises(ContainerNotFoundError):
            client.inspect("nope")

    def test_inspect_unreachable_daemon(self, mock_docker_client):
        mock_docker_client.api.inspect_container.side_effect = requests.exceptions.ConnectionError("refused")
        client = make_client(mock_docker_client)

        with pytest.raises(RuntimeClientError) as exc_info:
            client.inspect("abc")

        assert not isinstance(exc_info.value, ContainerNotFoundError)


# =============================================================================
# Container lifecycle
# =============================================================================


@pytest.mark.unit
class TestLifecycle:
    """Tests for stop/create/start/remove."""

    def test_stop_uses_runtime_default_timeout(self, mock_docker_client):
        make_client(mock_docker_client).stop("abc")
        mock_docker_client.api.stop.assert_called_once_with("abc")

    def test_stop_with_timeout(self, mock_docker_client):
        make_client(mock_docker_client, stop_timeout=30).stop("abc")
        mock_docker_client.api.stop.assert_called_once_with("abc", timeout=30)

    def test_stop_api_error(self, mock_docker_client):
        mock_docker_client.api.stop.side_effect = APIError("server error")

        with pytest.raises(RuntimeClientError):
            make_client(mock_docker_client).stop("abc")

    def test_create_passes_mounts(self, mock_docker_client):
        client = make_client(mock_docker_client)
        mounts = [MountBinding(type="volume", source="v1", destination="/data")]

        helper_id = client.create("alpine", ["sleep", "5"], mounts)

        assert helper_id == "helper123"
        args, kwargs = mock_docker_client.api.create_container.call_args
        assert args == ("alpine",)
        assert kwargs["command"] == ["sleep", "5"]
        mount = kwargs["host_config"]["mounts"][0]
        assert mount["Target"] == "/data"
        assert mount["Source"] == "v1"
        assert mount["Type"] == "volume"

    def test_create_pulls_missing_image(self, mock_docker_client):
        mock_docker_client.api.create_container.side_effect = [
            ImageNotFound("No such image: alpine:latest"),
            {"Id": "helper456"},
        ]
        client = make_client(mock_docker_client)

        helper_id = client.create("alpine", ["sleep", "5"], [])

        mock_docker_client.images.pull.assert_called_once_with("alpine")
        assert helper_id == "helper456"
        assert mock_docker_client.api.create_container.call_count == 2

    def test_create_failure(self, mock_docker_client):
        mock_docker_client.api.create_container.side_effect = APIError("invalid mount config")

        with pytest.raises(RuntimeClientError):
            make_client(mock_docker_client).create("alpine", ["sleep", "5"], [])

    def test_create_invalid_host_config(self, mock_docker_client):
        mock_docker_client.api.create_host_config.side_effect = InvalidArgument("bad mount type")

        with pytest.raises(RuntimeClientError, match="bad mount type"):
            make_client(mock_docker_client).create("alpine", ["sleep", "5"], [])

        mock_docker_client.api.create_container.assert_not_called()

    def test_start_and_remove(self, mock_docker_client):
        client = make_client(mock_docker_client)

        client.start("abc")
        client.remove("helper123")

        mock_docker_client.api.start.assert_called_once_with("abc")
        mock_docker_client.api.remove_container.assert_called_once_with("helper123")

    def test_close_closes_sdk_client(self, mock_docker_client):
        make_client(mock_docker_client).close()
        mock_docker_client.close.assert_called_once()

    def test_from_env_failure(self):
        with patch("docker.from_env", side_effect=DockerException("Error while fetching server API version")):
            with pytest.raises(RuntimeClientError):
                DockerRuntimeClient()


# =============================================================================
# Wait
# =============================================================================


@pytest.mark.unit
class TestWait:
    """Tests for wait and its timeout handling."""

    def test_wait_returns_status_code(self, mock_docker_client):
        mock_docker_client.api.wait.return_value = {"StatusCode": 3}

        status = make_client(mock_docker_client).wait("helper123", timeout=60)

        assert status == 3
        mock_docker_client.api.wait.assert_called_once_with("helper123", timeout=60, condition="not-running")

    def test_read_timeout_becomes_wait_timeout(self, mock_docker_client):
        mock_docker_client.api.wait.side_effect = requests.exceptions.ReadTimeout("Read timed out.")

        with pytest.raises(WaitTimeoutError):
            make_client(mock_docker_client).wait("helper123", timeout=1)

    def test_wrapped_read_timeout_becomes_wait_timeout(self, mock_docker_client):
        mock_docker_client.api.wait.side_effect = requests.exceptions.ConnectionError(
            "UnixHTTPConnectionPool(host='localhost', port=None): Read timed out. (read timeout=1)"
        )

        with pytest.raises(WaitTimeoutError):
            make_client(mock_docker_client).wait("helper123", timeout=1)

    def test_connection_error_is_runtime_error(self, mock_docker_client):
        mock_docker_client.api.wait.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(RuntimeClientError) as exc_info:
            make_client(mock_docker_client).wait("helper123", timeout=1)

        assert not isinstance(exc_info.value, WaitTimeoutError)


# =============================================================================
# Streams
# =============================================================================


@pytest.mark.unit
class TestStreams:
    """Tests for logs and copy-out streams."""

    def test_logs_requests_stdout_and_stderr(self, mock_docker_client):
        mock_docker_client.api.logs.return_value = iter([b"line 1\n", b"line 2\n"])

        chunks = list(make_client(mock_docker_client).logs("helper123"))

        assert chunks == [b"line 1\n", b"line 2\n"]
        mock_docker_client.api.logs.assert_called_once_with(
            "helper123", stdout=True, stderr=True, stream=True, follow=False
        )

    def test_copy_out_returns_stream_and_stat(self, mock_docker_client):
        stat = {"name": "data", "size": 4096, "mode": 2147484141}
        mock_docker_client.api.get_archive.return_value = (iter([b"ab", b"cd"]), stat)

        stream, result_stat = make_client(mock_docker_client).copy_out("helper123", "/data")

        assert b"".join(stream) == b"abcd"
        assert result_stat == stat
        args, _ = mock_docker_client.api.get_archive.call_args
        assert args == ("helper123", "/data")

    def test_copy_out_missing_path(self, mock_docker_client):
        mock_docker_client.api.get_archive.side_effect = NotFound("Could not find the file /data")

        with pytest.raises(ContainerNotFoundError):
            make_client(mock_docker_client).copy_out("helper123", "/data")

    def test_interrupted_stream_raises_runtime_error(self, mock_docker_client):
        def broken():
            yield b"ab"
            raise requests.exceptions.ChunkedEncodingError("connection broken")

        mock_docker_client.api.get_archive.return_value = (broken(), {"mode": 0o755})
        stream, _ = make_client(mock_docker_client).copy_out("helper123", "/data")

        with pytest.raises(RuntimeClientError):
            list(stream)
