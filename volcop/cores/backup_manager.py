################################################################################
# VOLCOP
#
# @file:        backup_manager.py
# @module:      volcop.cores
# @description: Orchestrates the stop / copy-out / restart sequence for one container.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
# ==============================================================================
# Notes:
# - The target restart runs on every exit path once the target was stopped
# - Per-volume and helper teardown failures become warnings, not aborts
# - Volumes are copied one at a time in the order Docker reports them
################################################################################

"""
Volume backup orchestration for Volcop.

This module stops a target container, mounts its volumes into a short-lived
helper container, copies every mount out as a tar archive, and starts the
target again.
"""

import time
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from ..helpers.config import BackupSettings
from ..helpers.constants import HELPER_WAIT_CONDITION
from ..helpers.errors import (
    ArchiveWriteError,
    HelperCreateError,
    HelperStartError,
    InspectError,
    RestartError,
    RuntimeClientError,
    StopError,
    WaitError,
    WaitTimeoutError,
)
from ..helpers.logging import get_logger
from ..types import BackupResult, ContainerInspection, MountBinding
from .archive_sink import FilesystemArchiveSink
from .runtime_client import RuntimeClient

logger = get_logger(__name__)


class VolumeBackupOrchestrator:
    """
    Backs up the volumes of a single container to local tar archives.

    The sequence is: inspect, stop target, create and start helper, wait for
    the helper, drain its output, copy each mount, stop helper, restart
    target. Once the target has been stopped, it is started again on every
    exit path, including helper provisioning failures.
    """

    def __init__(
        self,
        runtime: RuntimeClient,
        settings: Optional[BackupSettings] = None,
        sink: Optional[FilesystemArchiveSink] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            runtime: Container runtime client
            settings: Run settings (helper image/command, timeouts, backup root)
            sink: Archive sink (defaults to one rooted at settings.backup_root)
        """
        self.runtime = runtime
        self.settings = settings or BackupSettings()
        self.sink = sink or FilesystemArchiveSink(self.settings.backup_root)

    def backup_volumes(self, container_id: str) -> BackupResult:
        """
        Back up every mount of a container.

        Args:
            container_id: Target container id or name

        Returns:
            BackupResult with written archives and warnings

        Raises:
            InspectError: Empty id or target could not be inspected (nothing changed)
            StopError: Target could not be stopped (no helper created)
            HelperCreateError, HelperStartError, WaitError: Helper failed;
                raised after the target was restarted
            RestartError: Target could not be started again
        """
        if not container_id or not container_id.strip():
            raise InspectError(container_id, ValueError("container id must not be empty"))

        logger.info(f"Starting volume backup of container {container_id}",
                    extra={'container': container_id})
        start_time = time.time()
        result = BackupResult(container_id=container_id, timestamp=datetime.now())

        inspection = self._inspect(container_id)
        mounts = list(inspection.mounts)
        result.was_running = inspection.running
        logger.info(f"Found {len(mounts)} mounts on container {container_id}",
                    extra={'container': container_id, 'mounts': len(mounts)})

        try:
            with self._stopped_target(container_id, restart=inspection.running):
                helper_id = self._create_helper(container_id, mounts)
                result.helper_id = helper_id
                with self._helper_container(container_id, helper_id, result):
                    self._start_helper(container_id, helper_id)
                    self._wait_helper(helper_id, result)
                    self._drain_helper_logs(helper_id)
                    self._copy_volumes(helper_id, mounts, result)
        finally:
            if result.helper_id and self.settings.remove_helper:
                self._remove_helper(result.helper_id, result)

        result.duration_seconds = time.time() - start_time
        result.success = True

        if result.warnings:
            logger.warning(f"Backup of {container_id} completed with {len(result.warnings)} warnings "
                           f"in {result.duration_seconds:.2f}s",
                           extra={'container': container_id, 'warnings': len(result.warnings)})
        else:
            logger.info(f"Backup of {container_id} completed successfully in {result.duration_seconds:.2f}s",
                        extra={'container': container_id, 'duration': result.duration_seconds})
        return result

    # ---- Target container ----

    def _inspect(self, container_id: str) -> ContainerInspection:
        try:
            return self.runtime.inspect(container_id)
        except RuntimeClientError as e:
            logger.error(f"Failed to inspect container {container_id}: {e}",
                         extra={'container': container_id, 'phase': 'inspect'})
            raise InspectError(container_id, e) from e

    @contextmanager
    def _stopped_target(self, container_id: str, restart: bool) -> Iterator[None]:
        """
        Hold the target container stopped for the duration of the block.

        Stop failures propagate before the block runs. Once stopped, the
        target is restarted on exit whether or not the block raised.
        """
        logger.info(f"Shutting down container {container_id}",
                    extra={'container': container_id})
        try:
            self.runtime.stop(container_id)
        except RuntimeClientError as e:
            logger.error(f"Failed to stop container {container_id}: {e}",
                         extra={'container': container_id, 'phase': 'stop'})
            raise StopError(container_id, e) from e

        pending = None
        try:
            yield
        except Exception as e:
            pending = e
            raise
        finally:
            if restart:
                self._restart_target(container_id, pending)
            else:
                logger.info(f"Container {container_id} was not running before the backup, leaving it stopped",
                            extra={'container': container_id})

    def _restart_target(self, container_id: str, pending: Optional[Exception] = None) -> None:
        logger.info(f"Starting container {container_id} back up",
                    extra={'container': container_id})
        try:
            self.runtime.start(container_id)
        except RuntimeClientError as e:
            logger.critical(f"Failed to restart container {container_id}, it is left stopped: {e}",
                            extra={'container': container_id, 'phase': 'restart'})
            raise RestartError(container_id, e, original_error=pending) from e

    # ---- Helper container ----

    def _create_helper(self, container_id: str, mounts: List[MountBinding]) -> str:
        logger.info("Starting container for copying volumes",
                    extra={'container': container_id, 'image': self.settings.helper_image})
        try:
            helper_id = self.runtime.create(self.settings.helper_image, self.settings.helper_command, mounts)
        except RuntimeClientError as e:
            logger.error(f"Failed to create helper container for {container_id}: {e}",
                         extra={'container': container_id, 'phase': 'helper create'})
            raise HelperCreateError(container_id, e) from e
        logger.info(f"Created container {helper_id}", extra={'helper': helper_id})
        return helper_id

    @contextmanager
    def _helper_container(self, container_id: str, helper_id: str, result: BackupResult) -> Iterator[None]:
        """Stop the helper on exit; teardown failures are recorded as warnings."""
        try:
            yield
        finally:
            logger.info(f"Shutting down container {helper_id}", extra={'helper': helper_id})
            try:
                self.runtime.stop(helper_id)
            except RuntimeClientError as e:
                message = f"Failed to stop helper container {helper_id}: {e}"
                logger.warning(message, extra={'container': container_id, 'helper': helper_id})
                result.warnings.append(message)

    def _start_helper(self, container_id: str, helper_id: str) -> None:
        try:
            self.runtime.start(helper_id)
        except RuntimeClientError as e:
            logger.error(f"Failed to start helper container {helper_id}: {e}",
                         extra={'container': container_id, 'helper': helper_id, 'phase': 'helper start'})
            raise HelperStartError(container_id, e) from e

    def _wait_helper(self, helper_id: str, result: BackupResult) -> None:
        timeout = self.settings.wait_timeout
        try:
            status = self.runtime.wait(helper_id, condition=HELPER_WAIT_CONDITION, timeout=timeout)
        except WaitTimeoutError:
            message = f"Helper container {helper_id} did not exit within {timeout}s, copying anyway"
            logger.warning(message, extra={'helper': helper_id})
            result.warnings.append(message)
            return
        except RuntimeClientError as e:
            logger.error(f"Failed waiting for helper container {helper_id}: {e}",
                         extra={'container': result.container_id, 'helper': helper_id, 'phase': 'helper wait'})
            raise WaitError(result.container_id, e) from e

        if status != 0:
            logger.warning(f"Helper container {helper_id} exited with status {status}",
                           extra={'helper': helper_id, 'status': status})

    def _drain_helper_logs(self, helper_id: str) -> None:
        try:
            output = b"".join(self.runtime.logs(helper_id))
        except RuntimeClientError as e:
            logger.warning(f"Could not read output of helper container {helper_id}: {e}",
                           extra={'helper': helper_id})
            return

        for line in output.decode("utf-8", errors="replace").splitlines():
            if line.strip():
                logger.info(f"[helper] {line}", extra={'helper': helper_id})

    def _remove_helper(self, helper_id: str, result: BackupResult) -> None:
        try:
            self.runtime.remove(helper_id)
            logger.debug(f"Removed helper container {helper_id}", extra={'helper': helper_id})
        except RuntimeClientError as e:
            message = f"Failed to remove helper container {helper_id}: {e}"
            logger.warning(message, extra={'helper': helper_id})
            result.warnings.append(message)

    # ---- Volumes ----

    def _copy_volumes(self, helper_id: str, mounts: List[MountBinding], result: BackupResult) -> None:
        if not mounts:
            logger.info("No mounts to copy", extra={'helper': helper_id})
            return

        logger.info("Copying mount content to TAR files", extra={'helper': helper_id})
        for mount in mounts:
            stream = None
            try:
                stream, stat = self.runtime.copy_out(helper_id, mount.destination)
                archive = self.sink.write(mount.destination, stream, stat.get("mode"))
                result.archives.append(archive)
                logger.info(f"Archived {mount.destination} to {archive.path} ({archive.size_bytes} bytes)",
                            extra={'helper': helper_id, 'destination': mount.destination})
            except (RuntimeClientError, ArchiveWriteError) as e:
                message = f"Failed to back up {mount.destination}: {e}"
                logger.error(message, extra={'helper': helper_id, 'destination': mount.destination})
                result.warnings.append(message)
            finally:
                close = getattr(stream, "close", None)
                if close is not None:
                    close()
