"""
Ensures that one pinned version of a runtime is installed and usable.

The version gate guards everything: when the installed runtime already
reports the pinned version nothing is downloaded and nothing on disk changes.
Otherwise the artifact for the host architecture is downloaded into a
workspace, verified, installed, and the gate is run again to confirm the
new installation works.
"""

import logging
import pathlib
from typing import Optional

import requests

from runtimepin.runtime_dependency_config import (
    ArtifactResolver,
    InstallOutcome,
    VersionGate,
)
from runtimepin.runtime_dependency_downloader import Installer, SecureFetcher, Workspace
from runtimepin.runtimepin_config import RuntimePinConfig
from runtimepin.runtimepin_exceptions import PostInstallCheckFailed, RuntimePinException
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimepin_utils import PlatformUtils


class RuntimeInstaller:
    """
    Runs the gate, resolve, fetch, install, gate sequence for a single pinned artifact.
    """

    def __init__(
        self,
        config: RuntimePinConfig,
        logger: RuntimePinLogger,
        resolver: ArtifactResolver,
        pinned_version: str,
        architecture_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            config: Paths and policies of the run
            logger: Logger shared by all components
            resolver: Resolver loaded with the artifact table of the pinned version
            pinned_version: The compiled-in version every check compares against
            architecture_key: Host architecture, detected from the platform if None
            session: HTTP session handed to the fetcher
        """
        self.config = config
        self.logger = logger
        self.resolver = resolver
        self.pinned_version = pinned_version
        self.architecture_key = architecture_key or PlatformUtils.get_architecture_key()

        # The gate checks the user-visible launcher, so the post-install check covers the symlinks too.
        self.version_gate = VersionGate(
            launcher_path=config.bin_dir / resolver.launchers[0],
            pinned_version=pinned_version,
            logger=logger,
            timeout=config.version_timeout,
        )
        self.fetcher = SecureFetcher(
            logger=logger,
            dist_host=config.dist_host,
            session=session,
            timeout=config.request_timeout,
            max_attempts=config.max_attempts,
            backoff_seconds=config.backoff_seconds,
            max_backoff_seconds=config.max_backoff_seconds,
        )
        self.installer = Installer(
            install_root=config.install_root,
            bin_dir=config.bin_dir,
            launchers=resolver.launchers,
            logger=logger,
            legacy_dir=config.legacy_dir,
        )

    def ensure_installed(self, trust_anchor: Optional[pathlib.Path] = None) -> InstallOutcome:
        """
        Make sure the pinned version is installed.

        Args:
            trust_anchor: CA bundle used for the download instead of the system trust store

        Returns:
            InstallOutcome with changed=False if the installed runtime already satisfied the pin

        Raises:
            RuntimePinException: On any fatal failure; the run must be treated as failed
        """
        if self.version_gate.is_satisfied():
            self.logger.log(f"Runtime v{self.pinned_version} already installed, nothing to do", logging.INFO)
            return InstallOutcome(pinned_version=self.pinned_version, changed=False)

        try:
            descriptor = self.resolver.resolve(self.architecture_key)
            with Workspace(self.config.get_workspace_parent(), self.logger) as workspace:
                artifact_path = self.fetcher.fetch(descriptor, workspace, trust_anchor)
                state = self.installer.install(artifact_path, workspace)

            if not self.version_gate.is_satisfied():
                raise PostInstallCheckFailed(
                    f"{self.version_gate.launcher_path} does not report v{self.pinned_version} after installation"
                )
        except RuntimePinException as e:
            self.logger.log(f"Installation of v{self.pinned_version} failed: {e}", logging.ERROR)
            raise

        self.logger.log(f"Runtime v{self.pinned_version} installed at {state.install_root}", logging.INFO)
        return InstallOutcome(
            pinned_version=self.pinned_version,
            changed=True,
            state=state,
            descriptor=descriptor,
        )
