################################################################################
# VOLCOP
#
# @file:        runtime_client.py
# @module:      volcop.cores
# @description: Container runtime capability interface and its Docker implementation.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
################################################################################

"""
Container runtime access for Volcop.

The orchestrator only talks to the runtime through the RuntimeClient
protocol. DockerRuntimeClient implements it on top of the docker SDK's
low-level API and translates SDK and transport errors into
RuntimeClientError subclasses.
"""

from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

import docker
import requests
from docker.errors import DockerException, ImageNotFound, NotFound
from docker.types import Mount

from ..helpers.constants import COPY_CHUNK_SIZE, HELPER_WAIT_CONDITION
from ..helpers.errors import ContainerNotFoundError, RuntimeClientError, WaitTimeoutError
from ..helpers.logging import get_logger
from ..types import ContainerInspection, MountBinding

logger = get_logger(__name__)


class RuntimeClient(Protocol):
    """Capabilities the backup orchestrator needs from a container runtime."""

    def inspect(self, container_id: str) -> ContainerInspection: ...

    def stop(self, container_id: str) -> None: ...

    def create(self, image: str, command: List[str], mounts: List[MountBinding]) -> str: ...

    def start(self, container_id: str) -> None: ...

    def wait(self, container_id: str, condition: str = HELPER_WAIT_CONDITION,
             timeout: Optional[int] = None) -> int: ...

    def logs(self, container_id: str) -> Iterator[bytes]: ...

    def copy_out(self, container_id: str, path: str) -> Tuple[Iterator[bytes], Dict[str, Any]]: ...

    def remove(self, container_id: str) -> None: ...


def parse_mounts(inspect_data: Dict[str, Any]) -> List[MountBinding]:
    """
    Extract mount bindings from Docker inspect output.

    Named volumes are referenced by name, bind mounts by host path.

    Args:
        inspect_data: Docker inspect JSON data

    Returns:
        Mount bindings in the order Docker reports them
    """
    mounts = []
    for m in inspect_data.get("Mounts") or []:
        mount_type = m.get("Type", "volume")
        if mount_type == "volume":
            source = m.get("Name") or None
        else:
            source = m.get("Source") or None
        mounts.append(MountBinding(
            type=mount_type,
            source=source,
            destination=m.get("Destination", ""),
        ))
    return mounts


class DockerRuntimeClient:
    """
    RuntimeClient backed by the Docker Engine API.

    Args:
        client: Existing docker.DockerClient (defaults to docker.from_env())
        stop_timeout: Grace period passed to container stop, None for Docker's default
    """

    def __init__(self, client: Optional[docker.DockerClient] = None, stop_timeout: Optional[int] = None):
        if client is None:
            try:
                client = docker.from_env()
            except DockerException as e:
                raise RuntimeClientError(f"Cannot connect to Docker: {e}") from e
        self.client = client
        self.api = client.api
        self.stop_timeout = stop_timeout

    def close(self) -> None:
        self.client.close()

    def inspect(self, container_id: str) -> ContainerInspection:
        data = self._call("inspect", container_id, self.api.inspect_container, container_id)
        return ContainerInspection(
            id=data.get("Id", container_id),
            name=(data.get("Name") or "").lstrip("/"),
            running=bool((data.get("State") or {}).get("Running", False)),
            mounts=parse_mounts(data),
        )

    def stop(self, container_id: str) -> None:
        kwargs = {}
        if self.stop_timeout is not None:
            kwargs["timeout"] = self.stop_timeout
        self._call("stop", container_id, self.api.stop, container_id, **kwargs)

    def create(self, image: str, command: List[str], mounts: List[MountBinding]) -> str:
        try:
            host_config = self.api.create_host_config(
                mounts=[Mount(target=m.destination, source=m.source, type=m.type) for m in mounts]
            )
            response = self.api.create_container(image, command=command, host_config=host_config)
        except ImageNotFound:
            logger.info(f"Image {image} not found locally, pulling", extra={'image': image})
            self._call("pull", image, self.client.images.pull, image)
            response = self._call(
                "create", image, self.api.create_container,
                image, command=command, host_config=host_config,
            )
        except (DockerException, requests.exceptions.RequestException) as e:
            raise RuntimeClientError(f"create from {image} failed: {e}") from e
        return response["Id"]

    def start(self, container_id: str) -> None:
        self._call("start", container_id, self.api.start, container_id)

    def wait(self, container_id: str, condition: str = HELPER_WAIT_CONDITION,
             timeout: Optional[int] = None) -> int:
        try:
            result = self.api.wait(container_id, timeout=timeout, condition=condition)
        except requests.exceptions.ReadTimeout as e:
            raise WaitTimeoutError(f"{container_id} still running after {timeout}s") from e
        except requests.exceptions.ConnectionError as e:
            # urllib3 read timeouts can surface wrapped in ConnectionError
            if "timed out" in str(e).lower():
                raise WaitTimeoutError(f"{container_id} still running after {timeout}s") from e
            raise RuntimeClientError(f"wait on {container_id} failed: {e}") from e
        except NotFound as e:
            raise ContainerNotFoundError(f"No such container: {container_id}") from e
        except DockerException as e:
            raise RuntimeClientError(f"wait on {container_id} failed: {e}") from e
        return int(result.get("StatusCode", 0))

    def logs(self, container_id: str) -> Iterator[bytes]:
        stream = self._call(
            "logs", container_id, self.api.logs,
            container_id, stdout=True, stderr=True, stream=True, follow=False,
        )
        return self._guarded(stream, "logs", container_id)

    def copy_out(self, container_id: str, path: str) -> Tuple[Iterator[bytes], Dict[str, Any]]:
        stream, stat = self._call(
            "copy", f"{container_id}:{path}", self.api.get_archive,
            container_id, path, chunk_size=COPY_CHUNK_SIZE,
        )
        return self._guarded(stream, "copy", f"{container_id}:{path}"), stat or {}

    def remove(self, container_id: str) -> None:
        self._call("remove", container_id, self.api.remove_container, container_id)

    def _call(self, action: str, target: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except NotFound as e:
            raise ContainerNotFoundError(f"{action} {target}: {e.explanation or e}") from e
        except (DockerException, requests.exceptions.RequestException) as e:
            raise RuntimeClientError(f"{action} {target} failed: {e}") from e

    @staticmethod
    def _guarded(stream: Iterator[bytes], action: str, target: str) -> Iterator[bytes]:
        """Re-raise transport errors hit while consuming a response stream."""
        try:
            for chunk in stream:
                yield chunk
        except (DockerException, requests.exceptions.RequestException) as e:
            raise RuntimeClientError(f"{action} {target} interrupted: {e}") from e
