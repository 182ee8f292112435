#!/usr/bin/env python3

"""Layout extraction interface.

The optimization engine never parses source code or computes ABI offsets
itself. Extractors turn some compiled artifact into LayoutDescriptors whose
offsets and sizes come straight from the compiler, so the engine can be
driven by a real toolchain or by hand-built descriptors in tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ...models.layout import LayoutDescriptor


class LayoutExtractor(ABC):
    """Produces declaration-ordered record layouts from a compiled artifact."""

    @abstractmethod
    def extract_layouts(self, artifact_path: Path, struct_name: str = "") -> list[LayoutDescriptor]:
        """Extract record layouts.

        Args:
            artifact_path: Compiled object or binary to read
            struct_name: Only return records with this unqualified name; empty returns all

        Returns:
            Layouts with members, sizes and polymorphism populated
        """

    def pointer_size(self, artifact_path: Path) -> int | None:
        """Return the artifact's pointer size in bytes, if the extractor can tell."""
        return None
