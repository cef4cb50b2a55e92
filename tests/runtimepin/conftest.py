"""
Shared fixtures for runtimepin tests.
"""

import pytest

from runtimepin.runtime_dependency_config import ArtifactResolver
from runtimepin.runtime_installer import RuntimeInstaller
from runtimepin.runtimepin_config import RuntimePinConfig
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimes.nodejs import PINNED_VERSION
from runtimepin_test_utils import build_archive, make_table, sha256


@pytest.fixture
def logger():
    return RuntimePinLogger()


@pytest.fixture
def archive():
    return build_archive()


@pytest.fixture
def config(tmp_path):
    return RuntimePinConfig(
        install_root=tmp_path / "lib" / "nodejs",
        bin_dir=tmp_path / "bin",
        legacy_dir=tmp_path / "home" / ".nvm",
    )


@pytest.fixture
def make_installer(config, logger):
    """
    Builds a RuntimeInstaller whose table expects the digest of the given archive.
    """

    def _make(session, expected_archive: bytes, architecture_key: str = "x86_64", launchers=None):
        resolver = ArtifactResolver(make_table(sha256(expected_archive), launchers), logger)
        return RuntimeInstaller(
            config=config,
            logger=logger,
            resolver=resolver,
            pinned_version=PINNED_VERSION,
            architecture_key=architecture_key,
            session=session,
        )

    return _make
