#!/usr/bin/env python3

"""Optimization suggestion model."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OptimizationSuggestion:
    """One actionable or informational layout finding.

    ``confidence`` is a fixed coefficient per finding kind, not a
    calibrated probability.
    """

    description: str
    bytes_saved: int = 0
    suggested_order: tuple[str, ...] = field(default_factory=tuple)
    confidence: float = 0.0

    @property
    def is_reordering(self) -> bool:
        return bool(self.suggested_order)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "bytes_saved": self.bytes_saved,
            "suggested_order": list(self.suggested_order),
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OptimizationSuggestion":
        return cls(
            description=data["description"],
            bytes_saved=data.get("bytes_saved", 0),
            suggested_order=tuple(data.get("suggested_order", ())),
            confidence=data.get("confidence", 0.0),
        )
