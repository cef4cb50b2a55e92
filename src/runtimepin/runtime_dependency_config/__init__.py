"""
Runtime dependency configuration management.

This package handles:
1. Loading and validating the artifact table from JSON
2. Resolving the artifact for the host architecture
3. Deciding whether the installed runtime already satisfies the pinned version
"""

from .config_manager import ArtifactResolver, InstallationState, InstallOutcome
from .version_gate import VersionGate

__all__ = ["ArtifactResolver", "InstallationState", "InstallOutcome", "VersionGate"]
