"""
This file contains various utility functions like I/O operations, handling archives and platform detection.
"""

import hashlib
import logging
import lzma
import os
import pathlib
import platform
import tarfile
from typing import Iterable, Optional

from runtimepin.runtimepin_exceptions import ExtractionFailed
from runtimepin.runtimepin_logger import RuntimePinLogger

CHUNK_SIZE = 1024 * 1024


class PlatformUtils:
    """
    This class provides utilities for platform detection and identification.
    """

    @staticmethod
    def get_architecture_key() -> str:
        """
        Returns the host CPU architecture as reported by the operating system (e.g. x86_64, aarch64).
        """
        return platform.machine()


class FileUtils:
    """
    Utility functions for file operations.
    """

    @staticmethod
    def write_chunks(target_path: pathlib.Path, chunks: Iterable[bytes]) -> str:
        """
        Writes the chunks to target_path and returns the hex SHA-256 of everything written.
        """
        hasher = hashlib.sha256()
        with open(target_path, "wb") as f:
            for chunk in chunks:
                if chunk:
                    f.write(chunk)
                    hasher.update(chunk)
        return hasher.hexdigest()

    @staticmethod
    def extract_tar_xz_stripped(logger: RuntimePinLogger, archive_path: pathlib.Path, target_path: pathlib.Path) -> None:
        """
        Extracts a tar.xz archive into target_path, dropping the single top-level directory
        that wraps the archive contents. Ownership recorded in the archive is discarded.
        """
        logger.log(f"Extracting {archive_path} to {target_path}", logging.DEBUG)
        target_path.mkdir(parents=True, exist_ok=True)
        try:
            with tarfile.open(archive_path, "r:xz") as tar_ref:
                tar_ref.extractall(path=target_path, filter=_strip_first_component)
        except (tarfile.TarError, lzma.LZMAError, EOFError, OSError) as e:
            raise ExtractionFailed(f"Failed to extract {archive_path.name}: {e}") from e

    @staticmethod
    def is_executable(path: pathlib.Path) -> bool:
        return path.is_file() and os.access(path, os.X_OK)


def _strip_component(name: str) -> Optional[str]:
    parts = [part for part in name.split("/") if part not in ("", ".")]
    if len(parts) <= 1:
        return None
    return "/".join(parts[1:])


def _strip_first_component(member: tarfile.TarInfo, dest_path: str) -> Optional[tarfile.TarInfo]:
    name = _strip_component(member.name)
    if name is None:
        return None

    changes = {"name": name}
    if member.islnk():
        # hard link targets are archive paths and carry the same prefix
        linkname = _strip_component(member.linkname)
        if linkname is None:
            raise tarfile.FilterError(f"Hard link {member.name} points at the archive root")
        changes["linkname"] = linkname

    # data_filter rejects unsafe members and drops uid/gid/uname/gname,
    # so extracted files belong to the invoking process.
    return tarfile.data_filter(member.replace(**changes, deep=False), dest_path)
