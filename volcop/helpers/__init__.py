"""Helper modules and utilities for Volcop."""

from .config import BackupSettings, load_settings
from .constants import VERSION, DEFAULT_BACKUP_DIR
from .errors import (
    VolcopError,
    ConfigurationError,
    RuntimeClientError,
    ContainerNotFoundError,
    WaitTimeoutError,
    ArchiveWriteError,
    BackupError,
    InspectError,
    StopError,
    HelperCreateError,
    HelperStartError,
    WaitError,
    RestartError,
)
from .logging import get_logger, setup_logging

__all__ = [
    'BackupSettings',
    'load_settings',
    'VERSION',
    'DEFAULT_BACKUP_DIR',
    'VolcopError',
    'ConfigurationError',
    'RuntimeClientError',
    'ContainerNotFoundError',
    'WaitTimeoutError',
    'ArchiveWriteError',
    'BackupError',
    'InspectError',
    'StopError',
    'HelperCreateError',
    'HelperStartError',
    'WaitError',
    'RestartError',
    'get_logger',
    'setup_logging',
]
