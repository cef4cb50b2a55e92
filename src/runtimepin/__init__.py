"""
runtimepin ensures that a pinned, digest-verified Node.js release is installed at a fixed location.
"""

from runtimepin.runtime_installer import RuntimeInstaller
from runtimepin.runtimepin_config import RuntimePinConfig
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimes.nodejs import PINNED_VERSION, create_installer

__all__ = [
    "PINNED_VERSION",
    "RuntimeInstaller",
    "RuntimePinConfig",
    "RuntimePinLogger",
    "create_installer",
]
