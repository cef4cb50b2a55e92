"""
Artifact resolution and installation state.

Maps the host architecture to the artifact that should be installed on it
and describes the installation that results from a run.
"""

import json
import logging
import pathlib
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from runtimepin.runtime_dependency_models import ArtifactDescriptor, ArtifactTable
from runtimepin.runtimepin_exceptions import ConfigurationError, UnsupportedArchitecture
from runtimepin.runtimepin_logger import RuntimePinLogger


@dataclass(frozen=True)
class InstallationState:
    """
    The live, user-visible result of an installation.
    """

    install_root: pathlib.Path
    launcher_symlinks: FrozenSet[pathlib.Path] = field(default_factory=frozenset)

    def __repr__(self) -> str:
        return (
            f"InstallationState(root={self.install_root}, "
            f"launchers={sorted(str(p) for p in self.launcher_symlinks)})"
        )


@dataclass(frozen=True)
class InstallOutcome:
    """
    Result of a run. changed is False when the installed runtime already satisfied the pinned version.
    """

    pinned_version: str
    changed: bool
    state: Optional[InstallationState] = None
    descriptor: Optional[ArtifactDescriptor] = None


class ArtifactResolver:
    """
    Resolves the artifact descriptor for a host architecture from a static table.

    The table is parsed once at construction, resolve() never touches the
    network or the filesystem.
    """

    def __init__(self, table: ArtifactTable, logger: RuntimePinLogger):
        """
        Initialize the resolver.

        Args:
            table: Validated artifact table
            logger: Logger for resolution messages
        """
        self.table = table
        self.logger = logger

    @classmethod
    def from_json(cls, table_path: pathlib.Path, pinned_version: str, logger: RuntimePinLogger) -> "ArtifactResolver":
        """
        Load the artifact table from a JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or is not a valid table
        """
        try:
            with open(table_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load artifact table {table_path}: {e}") from e
        return cls(ArtifactTable.from_dict(data, pinned_version), logger)

    @property
    def launchers(self) -> List[str]:
        return list(self.table.launchers)

    def supported_architectures(self) -> List[str]:
        return sorted(self.table.architectures.keys())

    def resolve(self, architecture_key: str) -> ArtifactDescriptor:
        """
        Returns the descriptor for the architecture.

        Raises:
            UnsupportedArchitecture: If the architecture is not in the table
        """
        descriptor = self.table.descriptor_for(architecture_key)
        if descriptor is None:
            raise UnsupportedArchitecture(architecture_key, self.supported_architectures())

        self.logger.log(
            f"Resolved {descriptor.file_name} for architecture {architecture_key}",
            logging.DEBUG,
        )
        return descriptor
