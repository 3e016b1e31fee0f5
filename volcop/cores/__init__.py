"""Core backup components for Volcop."""

from .archive_sink import FilesystemArchiveSink
from .backup_manager import VolumeBackupOrchestrator
from .runtime_client import DockerRuntimeClient, RuntimeClient, parse_mounts

__all__ = [
    'FilesystemArchiveSink',
    'VolumeBackupOrchestrator',
    'DockerRuntimeClient',
    'RuntimeClient',
    'parse_mounts',
]
