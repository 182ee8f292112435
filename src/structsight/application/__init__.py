#!/usr/bin/env python3

"""Application layer orchestrating compilation, extraction and analysis."""

from .layout_analyzer import LayoutAnalyzer

__all__ = [
    "LayoutAnalyzer",
]
