################################################################################
# VOLCOP
#
# @file:        errors.py
# @module:      volcop.helpers
# @description: Exception hierarchy for configuration, runtime and backup failures.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
################################################################################

"""
Exceptions raised by Volcop.

Abort-level failures (inspect, stop target, restart target) and helper
provisioning failures are raised to the caller. Per-volume failures are
raised by the archive sink or runtime client and recorded as warnings by
the orchestrator.
"""

from typing import Optional


class VolcopError(Exception):
    """Base class for all Volcop errors."""


class ConfigurationError(VolcopError):
    """Raised when settings are missing or invalid."""


# ---- Runtime client ----

class RuntimeClientError(VolcopError):
    """Raised when the container runtime rejects or fails a request."""


class ContainerNotFoundError(RuntimeClientError):
    """Raised when the requested container does not exist."""


class WaitTimeoutError(RuntimeClientError):
    """Raised when a container did not reach the wait condition in time."""


# ---- Archive sink ----

class ArchiveWriteError(VolcopError):
    """Raised when an archive cannot be written to the backup root."""


# ---- Orchestration ----

class BackupError(VolcopError):
    """
    Base class for orchestration failures.

    Attributes:
        phase: Orchestration phase that failed (e.g. "inspect", "restart")
        container_id: Container the phase was operating on
    """

    phase = "backup"

    def __init__(self, container_id: str, cause: Optional[BaseException] = None):
        self.container_id = container_id
        self.cause = cause
        message = f"{self.phase} failed for container {container_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class InspectError(BackupError):
    phase = "inspect"


class StopError(BackupError):
    phase = "stop"


class HelperCreateError(BackupError):
    phase = "helper create"


class HelperStartError(BackupError):
    phase = "helper start"


class WaitError(BackupError):
    phase = "helper wait"


class RestartError(BackupError):
    """
    Target container could not be started again and is left down.

    Attributes:
        original_error: Failure that was already propagating when the
            restart was attempted, if any
    """

    phase = "restart"

    def __init__(self, container_id: str, cause: Optional[BaseException] = None,
                 original_error: Optional[BaseException] = None):
        super().__init__(container_id, cause)
        self.original_error = original_error
