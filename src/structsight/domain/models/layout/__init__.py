#!/usr/bin/env python3

"""Record layout domain models."""

from .analysis_request import AnalysisRequest, AnalysisResult, Architecture, Compiler
from .layout_descriptor import LayoutDescriptor
from .member_descriptor import MemberDescriptor
from .optimization_suggestion import OptimizationSuggestion
from .padding_region import PaddingReason, PaddingRegion
from .vtable_info import VTableInfo

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "Architecture",
    "Compiler",
    "LayoutDescriptor",
    "MemberDescriptor",
    "OptimizationSuggestion",
    "PaddingReason",
    "PaddingRegion",
    "VTableInfo",
]
