"""
Pydantic data models for runtime_dependencies.json.

The artifact table maps every supported host architecture to the one archive
that is installed on it, together with the SHA-256 digest the downloaded bytes
must match.
"""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from runtimepin.runtimepin_exceptions import ConfigurationError

SHA256_PATTERN = re.compile(r"^[0-9a-f]{64}$")


class ArtifactDescriptor(BaseModel):
    """
    The resolved artifact for one architecture. Immutable once resolved.
    """

    model_config = ConfigDict(frozen=True)

    architecture_key: str = Field(..., description="Host architecture, as reported by the OS")
    file_name: str = Field(..., description="Archive file name on the distribution host")
    expected_digest: str = Field(..., description="Lowercase hex SHA-256 of the archive")
    pinned_version: str = Field(..., description="Runtime version contained in the archive")


class ArchitectureEntry(BaseModel):
    """
    A single row of the artifact table.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    file_name: str = Field(..., alias="fileName", min_length=1)
    sha256: str = Field(..., min_length=64, max_length=64)
    description: Optional[str] = Field(None, alias="_description")

    @field_validator("sha256")
    @classmethod
    def check_digest(cls, value: str) -> str:
        if not SHA256_PATTERN.match(value):
            raise ValueError("sha256 must be 64 lowercase hexadecimal characters")
        return value


class ArtifactTable(BaseModel):
    """
    Complete artifact table.

    Structure:
    {
      "_description": "...",
      "version": "16.14.0",
      "launchers": ["node", "npm", ...],
      "architectures": {
        "x86_64": {"fileName": "...", "sha256": "..."},
        ...
      }
    }
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: Optional[str] = Field(None, alias="_description")
    version: str
    launchers: List[str] = Field(..., min_length=1)
    architectures: Dict[str, ArchitectureEntry]

    @classmethod
    def from_dict(cls, data: dict, pinned_version: str) -> "ArtifactTable":
        """
        Parse and validate the table against the pinned version.

        Raises:
            ConfigurationError: If the table is malformed or does not describe the pinned version
        """
        try:
            table = cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid artifact table: {e}") from e
        table.validate_for(pinned_version)
        return table

    def validate_for(self, pinned_version: str) -> None:
        if self.version != pinned_version:
            raise ConfigurationError(
                f"Artifact table describes version {self.version}, expected {pinned_version}"
            )
        if not self.architectures:
            raise ConfigurationError("Artifact table has no architectures")

        file_names = set()
        digests = set()
        for key, entry in self.architectures.items():
            if pinned_version not in entry.file_name:
                raise ConfigurationError(
                    f"Artifact {entry.file_name} for {key} does not name version {pinned_version}"
                )
            if entry.file_name in file_names or entry.sha256 in digests:
                raise ConfigurationError(f"Artifact for {key} duplicates another architecture")
            file_names.add(entry.file_name)
            digests.add(entry.sha256)

        for launcher in self.launchers:
            if not launcher or "/" in launcher or launcher in (".", ".."):
                raise ConfigurationError(f"Invalid launcher name: {launcher!r}")

    def descriptor_for(self, architecture_key: str) -> Optional[ArtifactDescriptor]:
        entry = self.architectures.get(architecture_key)
        if entry is None:
            return None
        return ArtifactDescriptor(
            architecture_key=architecture_key,
            file_name=entry.file_name,
            expected_digest=entry.sha256,
            pinned_version=self.version,
        )
