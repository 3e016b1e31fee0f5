################################################################################
# VOLCOP
#
# @file:        __init__.py
# @module:      volcop
# @description: Exposes version, data models, and the backup orchestrator.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
################################################################################

"""
Volcop: point-in-time backups of a container's volumes.

Stops a container, copies each of its mounts out through a short-lived
helper container into local tar archives, and starts the container again.
"""

from .helpers.constants import VERSION

__version__ = VERSION

from .types import (
    MountBinding,
    ContainerInspection,
    ArchiveFile,
    BackupResult,
)

from .helpers.config import BackupSettings, load_settings
from .cores.archive_sink import FilesystemArchiveSink
from .cores.backup_manager import VolumeBackupOrchestrator
from .cores.runtime_client import DockerRuntimeClient, RuntimeClient

__all__ = [
    "VERSION",
    "MountBinding",
    "ContainerInspection",
    "ArchiveFile",
    "BackupResult",
    "BackupSettings",
    "load_settings",
    "FilesystemArchiveSink",
    "VolumeBackupOrchestrator",
    "DockerRuntimeClient",
    "RuntimeClient",
]
