"""
Installs a verified artifact into the install root.

The archive is extracted into a staging directory inside the workspace and
checked before it replaces the live installation. The replacement itself is a
pair of renames within one filesystem, so a failed extraction never leaves
the install root without a runtime.
"""

import logging
import os
import pathlib
import shutil
import uuid
from typing import List, Optional

from runtimepin.runtime_dependency_config import InstallationState
from runtimepin.runtimepin_exceptions import ExtractionFailed, RelinkFailed
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimepin_utils import FileUtils


class Installer:
    """
    Extracts verified artifacts, commits them to the install root and repairs launcher symlinks.
    """

    STAGING_DIR = "staging"
    PREVIOUS_DIR = "previous"

    def __init__(
        self,
        install_root: pathlib.Path,
        bin_dir: pathlib.Path,
        launchers: List[str],
        logger: RuntimePinLogger,
        legacy_dir: Optional[pathlib.Path] = None,
    ):
        """
        Initialize the installer.

        Args:
            install_root: Directory that holds the live installation
            bin_dir: Shared directory that receives one symlink per launcher
            launchers: Executable names under <install_root>/bin
            logger: Logger for progress and error messages
            legacy_dir: Installation of a competing mechanism removed after install, if any
        """
        self.install_root = install_root
        self.bin_dir = bin_dir
        self.launchers = list(launchers)
        self.logger = logger
        self.legacy_dir = legacy_dir

    def install(self, artifact_path: pathlib.Path, workspace: pathlib.Path) -> InstallationState:
        """
        Install a verified artifact.

        Args:
            artifact_path: Path returned by SecureFetcher.fetch
            workspace: The run's workspace, on the same filesystem as the install root

        Returns:
            The new InstallationState

        Raises:
            ExtractionFailed: If the archive is unusable or the new tree could not be committed
            RelinkFailed: If launcher symlinks or the legacy installation could not be repaired
        """
        staging = workspace / self.STAGING_DIR
        FileUtils.extract_tar_xz_stripped(self.logger, artifact_path, staging)
        self._verify_staged_tree(staging)
        self._commit(staging, workspace)

        links = self._relink()
        self._remove_legacy_installation()

        state = InstallationState(install_root=self.install_root, launcher_symlinks=frozenset(links))
        self.logger.log(f"Installed runtime into {self.install_root}", logging.INFO)
        return state

    def _verify_staged_tree(self, staging: pathlib.Path) -> None:
        missing = [
            name for name in self.launchers if not FileUtils.is_executable(staging / "bin" / name)
        ]
        if missing:
            raise ExtractionFailed(
                f"Extracted artifact is missing executable launchers: {', '.join(missing)}"
            )

    def _commit(self, staging: pathlib.Path, workspace: pathlib.Path) -> None:
        previous = workspace / self.PREVIOUS_DIR
        had_previous = os.path.lexists(self.install_root)
        try:
            self.install_root.parent.mkdir(parents=True, exist_ok=True)
            if had_previous:
                os.rename(self.install_root, previous)
        except OSError as e:
            raise ExtractionFailed(f"Could not move aside existing installation {self.install_root}: {e}") from e

        try:
            os.rename(staging, self.install_root)
        except OSError as e:
            if had_previous:
                try:
                    os.rename(previous, self.install_root)
                except OSError as restore_error:
                    self.logger.log(
                        f"Failed to restore previous installation from {previous}: {restore_error}",
                        logging.ERROR,
                    )
            raise ExtractionFailed(f"Could not move new installation into {self.install_root}: {e}") from e

        self.logger.log(f"Committed new installation to {self.install_root}", logging.DEBUG)

    def _relink(self) -> List[pathlib.Path]:
        links = []
        try:
            self.bin_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RelinkFailed(f"Could not create {self.bin_dir}: {e}") from e

        for name in self.launchers:
            link_path = self.bin_dir / name
            target = self.install_root / "bin" / name
            if link_path.is_dir() and not link_path.is_symlink():
                raise RelinkFailed(f"Cannot replace directory {link_path} with a launcher symlink")

            temp_link = self.bin_dir / f".{name}.{uuid.uuid4().hex}"
            try:
                os.symlink(target, temp_link)
                os.replace(temp_link, link_path)
            except OSError as e:
                if os.path.lexists(temp_link):
                    os.unlink(temp_link)
                raise RelinkFailed(f"Could not link {link_path} to {target}: {e}") from e

            self.logger.log(f"Linked {link_path} -> {target}", logging.DEBUG)
            links.append(link_path)
        return links

    def _remove_legacy_installation(self) -> None:
        if self.legacy_dir is None or not os.path.lexists(self.legacy_dir):
            return
        try:
            if self.legacy_dir.is_dir() and not self.legacy_dir.is_symlink():
                shutil.rmtree(self.legacy_dir)
            else:
                self.legacy_dir.unlink()
        except OSError as e:
            raise RelinkFailed(f"Could not remove legacy installation {self.legacy_dir}: {e}") from e
        self.logger.log(f"Removed legacy installation {self.legacy_dir}", logging.INFO)
