"""
Runtime dependency downloader.

This package handles:
1. Scoping each run to an ephemeral workspace
2. Downloading the artifact and verifying its digest
3. Extracting the verified artifact and committing it to the install root
4. Repairing launcher symlinks
"""

from .downloader import SecureFetcher
from .installer import Installer
from .workspace import Workspace

__all__ = ["SecureFetcher", "Installer", "Workspace"]
