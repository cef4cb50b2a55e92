"""
Runtime dependency models.

This package provides Pydantic data models for the artifact table and the
descriptors resolved from it.
"""

from .artifact_descriptors import (
    ArtifactDescriptor,
    ArchitectureEntry,
    ArtifactTable,
)

__all__ = [
    "ArtifactDescriptor",
    "ArchitectureEntry",
    "ArtifactTable",
]
