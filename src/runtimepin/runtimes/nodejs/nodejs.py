"""
Provides the Node.js specific instantiation of the RuntimeInstaller class.
"""

import os
import pathlib
from typing import Optional

import requests

from runtimepin.runtime_dependency_config import ArtifactResolver
from runtimepin.runtime_installer import RuntimeInstaller
from runtimepin.runtimepin_config import RuntimePinConfig
from runtimepin.runtimepin_logger import RuntimePinLogger

PINNED_VERSION = "16.14.0"

RUNTIME_DEPENDENCIES_PATH = pathlib.Path(os.path.dirname(__file__), "runtime_dependencies.json")


def load_resolver(logger: RuntimePinLogger) -> ArtifactResolver:
    """
    Loads the Node.js artifact table shipped with the package.
    """
    return ArtifactResolver.from_json(RUNTIME_DEPENDENCIES_PATH, PINNED_VERSION, logger)


def create_installer(
    config: RuntimePinConfig,
    logger: RuntimePinLogger,
    architecture_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> RuntimeInstaller:
    """
    Creates a RuntimeInstaller for Node.js v16.14.0.
    """
    return RuntimeInstaller(
        config=config,
        logger=logger,
        resolver=load_resolver(logger),
        pinned_version=PINNED_VERSION,
        architecture_key=architecture_key,
        session=session,
    )
