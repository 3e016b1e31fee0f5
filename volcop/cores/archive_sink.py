################################################################################
# VOLCOP
#
# @file:        archive_sink.py
# @module:      volcop.cores
# @description: Writes copied-out volume tar streams below the backup root.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
################################################################################

"""
Filesystem sink for volume archives.

Each mount destination maps to <root>/<destination>/content.tar, mirroring
the path the volume is mounted at inside the container.
"""

from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from ..helpers.constants import ARCHIVE_FILENAME, DEFAULT_DIRECTORY_MODE
from ..helpers.errors import ArchiveWriteError
from ..helpers.logging import get_logger
from ..types import ArchiveFile

logger = get_logger(__name__)


class FilesystemArchiveSink:
    """
    Stores one tar archive per mount destination.

    Args:
        root: Backup root directory
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> Path:
        """Create the backup root; an existing directory is fine."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArchiveWriteError(f"Cannot create backup root {self.root}: {e}") from e
        return self.root

    def archive_path(self, destination: str) -> Path:
        """
        Map an in-container mount path to its archive file.

        Args:
            destination: Absolute mount destination, e.g. "/var/lib/data"

        Returns:
            Path of the content.tar file for this destination

        Raises:
            ArchiveWriteError: If the destination is empty or escapes the root
        """
        parts = [p for p in PurePosixPath(destination).parts if p != "/"]
        if not parts:
            raise ArchiveWriteError(f"Cannot archive mount destination {destination!r}")
        if ".." in parts:
            raise ArchiveWriteError(f"Mount destination {destination!r} escapes the backup root")
        return self.root.joinpath(*parts, ARCHIVE_FILENAME)

    def write(self, destination: str, chunks: Iterable[bytes], mode: Optional[int] = None) -> ArchiveFile:
        """
        Stream a tar archive to disk, replacing any previous archive.

        Args:
            destination: Mount destination the archive belongs to
            chunks: Tar byte stream
            mode: Permission bits for the archive directory (default 0o755)

        Returns:
            ArchiveFile describing the written file
        """
        path = self.archive_path(destination)
        perms = (mode or 0) & 0o777
        # owner keeps rwx so the archive can be written into it
        dir_mode = (perms | 0o700) if perms else DEFAULT_DIRECTORY_MODE

        try:
            path.parent.mkdir(mode=dir_mode, parents=True, exist_ok=True)
        except OSError as e:
            raise ArchiveWriteError(f"Cannot create directory {path.parent}: {e}") from e

        size = 0
        try:
            with open(path, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
                    size += len(chunk)
        except OSError as e:
            raise ArchiveWriteError(f"Cannot write archive {path}: {e}") from e

        logger.debug(f"Wrote {size} bytes to {path}",
                     extra={'destination': destination, 'size_bytes': size})
        return ArchiveFile(destination=destination, path=path, size_bytes=size)
