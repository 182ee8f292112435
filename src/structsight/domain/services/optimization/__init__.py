#!/usr/bin/env python3

"""Layout optimization engine."""

from .layout_engine import LayoutEngine, analyze_layout
from .optimization_reporter import (
    CACHE_LINE_SIZE,
    CACHE_LINE_SPAN_CONFIDENCE,
    REORDER_CONFIDENCE,
    OptimizationReporter,
)
from .order_optimizer import OrderOptimizer
from .padding_detector import PaddingDetector
from .size_simulator import SizeSimulator, align_up

__all__ = [
    "CACHE_LINE_SIZE",
    "CACHE_LINE_SPAN_CONFIDENCE",
    "LayoutEngine",
    "OptimizationReporter",
    "OrderOptimizer",
    "PaddingDetector",
    "REORDER_CONFIDENCE",
    "SizeSimulator",
    "align_up",
    "analyze_layout",
]
