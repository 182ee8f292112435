#!/usr/bin/env python3

"""Layout optimization engine facade.

Runs padding detection and optimization reporting over one descriptor.
The engine is pure and synchronous: it holds no state between calls, so
independent descriptors can be analyzed concurrently without locking.
"""

from dataclasses import replace

from ....infrastructure.logging import get_logger
from ...models.layout import LayoutDescriptor
from .optimization_reporter import OptimizationReporter
from .padding_detector import PaddingDetector

logger = get_logger(__name__)


class LayoutEngine:
    """Annotates layout descriptors with padding regions and suggestions."""

    def __init__(
        self,
        padding_detector: PaddingDetector | None = None,
        reporter: OptimizationReporter | None = None,
    ):
        self.padding_detector = padding_detector or PaddingDetector()
        self.reporter = reporter or OptimizationReporter()

    def analyze_layout(self, descriptor: LayoutDescriptor, pointer_size: int) -> LayoutDescriptor:
        """Return a copy of ``descriptor`` with ``padding`` and ``optimizations`` populated.

        Both lists are regenerated from the members on every call, so
        analyzing an already-annotated descriptor yields the same result.
        The input descriptor is left untouched, and the copy shares only
        frozen member and vtable records with it.

        Args:
            descriptor: Layout produced by an extractor
            pointer_size: Target pointer size in bytes (4 or 8)

        Returns:
            Annotated descriptor; every other field is unchanged
        """
        padding = self.padding_detector.detect(descriptor)
        optimizations = self.reporter.generate(descriptor, pointer_size)

        logger.debug(
            f"Analyzed {descriptor.qualified_name}: size={descriptor.total_size}, "
            f"padding={sum(r.size for r in padding)}, suggestions={len(optimizations)}"
        )

        return replace(
            descriptor,
            members=list(descriptor.members),
            base_subobjects=list(descriptor.base_subobjects),
            padding=padding,
            optimizations=optimizations,
        )


_default_engine = LayoutEngine()


def analyze_layout(descriptor: LayoutDescriptor, pointer_size: int) -> LayoutDescriptor:
    """Analyze ``descriptor`` with the default engine."""
    return _default_engine.analyze_layout(descriptor, pointer_size)
