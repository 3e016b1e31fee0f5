################################################################################
# VOLCOP
#
# @file:        types.py
# @module:      volcop.types
# @description: Shared data models for inspection results, archives, and run results.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
# ==============================================================================
# Notes:
# - MountBinding is copied verbatim from the target onto the helper container
# - ContainerInspection is the subset of inspect data the backup relies on
# - BackupResult collects written archives and non-fatal warnings per run
################################################################################

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional


# ---- Runtime DTOs ----

@dataclass(frozen=True)
class MountBinding:
    type: str
    source: Optional[str]  # volume name for "volume", host path for "bind"
    destination: str


@dataclass
class ContainerInspection:
    id: str
    name: str = ""
    running: bool = False
    mounts: List[MountBinding] = field(default_factory=list)


# ---- Archive & run results ----

@dataclass
class ArchiveFile:
    destination: str
    path: Path
    size_bytes: int = 0


@dataclass
class BackupResult:
    container_id: str
    timestamp: datetime
    duration_seconds: float = 0.0
    helper_id: Optional[str] = None
    was_running: bool = False
    success: bool = False
    archives: List[ArchiveFile] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "container_id": self.container_id,
            "timestamp": self.timestamp.isoformat(),
            "duration_seconds": self.duration_seconds,
            "helper_id": self.helper_id,
            "was_running": self.was_running,
            "success": self.success,
            "archives": [
                {
                    "destination": a.destination,
                    "path": str(a.path),
                    "size_bytes": a.size_bytes,
                }
                for a in self.archives
            ],
            "warnings": self.warnings,
        }
