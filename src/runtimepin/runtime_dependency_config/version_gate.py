"""
Checks whether the installed runtime already reports the pinned version.
"""

import logging
import pathlib
import subprocess
from typing import Optional

from runtimepin.runtimepin_logger import RuntimePinLogger


class VersionGate:
    """
    Runs the installed launcher with --version and compares its output with the pinned version.

    The same comparison is used before the installation (to skip all work)
    and after it (to confirm the new installation works).
    """

    def __init__(
        self,
        launcher_path: pathlib.Path,
        pinned_version: str,
        logger: RuntimePinLogger,
        timeout: float = 10.0,
    ):
        """
        Args:
            launcher_path: The launcher whose self-reported version is checked
            pinned_version: Version without the leading "v" (e.g. "16.14.0")
            logger: Logger for gate decisions
            timeout: Seconds to wait for the launcher before treating it as broken
        """
        self.launcher_path = launcher_path
        self.pinned_version = pinned_version
        self.logger = logger
        self.timeout = timeout

    @property
    def expected_output(self) -> str:
        return f"v{self.pinned_version}"

    def installed_version(self) -> Optional[str]:
        """
        Returns the version reported by the launcher, or None if it cannot be run.
        """
        try:
            result = subprocess.run(
                [str(self.launcher_path), "--version"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            self.logger.log(f"Could not run {self.launcher_path}: {e}", logging.DEBUG)
            return None

        if result.returncode != 0:
            self.logger.log(
                f"{self.launcher_path} --version exited with status {result.returncode}",
                logging.DEBUG,
            )
            return None
        return result.stdout.strip()

    def is_satisfied(self) -> bool:
        version = self.installed_version()
        satisfied = version == self.expected_output
        self.logger.log(
            f"Installed runtime reports {version or 'nothing'}, pinned {self.expected_output}: "
            f"{'satisfied' if satisfied else 'not satisfied'}",
            logging.INFO,
        )
        return satisfied
