################################################################################
# VOLCOP
#
# @file:        config.py
# @module:      volcop.helpers
# @description: Pydantic settings model for the backup run, loaded from the environment.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
# ==============================================================================
# Notes:
# - Defaults come from helpers.constants
# - VOLCOP_* environment variables override single fields
# - Validation errors surface as ConfigurationError
################################################################################

"""
Settings for a Volcop backup run.

The backup root, helper image, helper command and timeouts are passed to the
orchestrator explicitly instead of being read from module globals, so tests
can run against their own temporary directories.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_BACKUP_DIR,
    ENV_PREFIX,
    HELPER_COMMAND,
    HELPER_IMAGE,
    HELPER_WAIT_TIMEOUT,
)
from .errors import ConfigurationError

# field name -> environment variable suffix
ENV_FIELDS = {
    "backup_root": "BACKUP_DIR",
    "helper_image": "HELPER_IMAGE",
    "helper_command": "HELPER_COMMAND",
    "wait_timeout": "WAIT_TIMEOUT",
    "stop_timeout": "STOP_TIMEOUT",
    "remove_helper": "REMOVE_HELPER",
    "log_level": "LOG_LEVEL",
}

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class BackupSettings(BaseModel):
    """Settings for one backup run"""

    backup_root: Path = Field(
        default=Path(DEFAULT_BACKUP_DIR),
        description="Directory receiving <destination>/content.tar archives"
    )
    helper_image: str = Field(
        default=HELPER_IMAGE,
        description="Image used for the short-lived helper container"
    )
    helper_command: List[str] = Field(
        default_factory=lambda: list(HELPER_COMMAND),
        description="Command keeping the helper alive long enough for the copy"
    )
    wait_timeout: int = Field(
        default=HELPER_WAIT_TIMEOUT,
        gt=0,
        description="Seconds to wait for the helper to exit"
    )
    stop_timeout: Optional[int] = Field(
        default=None,
        ge=0,
        description="Grace period for stopping containers (runtime default if unset)"
    )
    remove_helper: bool = Field(
        default=False,
        description="Remove the helper container after the target is restarted"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("backup_root", mode="before")
    @classmethod
    def validate_backup_root(cls, v: Any) -> Path:
        """Convert string to Path"""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("backup_root cannot be empty")
            return Path(v).expanduser()
        return v

    @field_validator("helper_image")
    @classmethod
    def validate_helper_image(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("helper_image cannot be empty")
        return v.strip()

    @field_validator("helper_command", mode="before")
    @classmethod
    def validate_helper_command(cls, v: Any) -> List[str]:
        """Accept a shell-style string as well as a list"""
        if isinstance(v, str):
            v = shlex.split(v)
        if not v:
            raise ValueError("helper_command cannot be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(VALID_LOG_LEVELS)}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> BackupSettings:
    """
    Build settings from VOLCOP_* environment variables.

    Args:
        environ: Environment mapping (defaults to os.environ)
        **overrides: Explicit field values, taking precedence over the environment

    Returns:
        Validated BackupSettings

    Raises:
        ConfigurationError: If a value fails validation
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    for field_name, suffix in ENV_FIELDS.items():
        raw = environ.get(f"{ENV_PREFIX}{suffix}")
        if raw is not None and raw != "":
            values[field_name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BackupSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
