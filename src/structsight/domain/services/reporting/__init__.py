#!/usr/bin/env python3

"""Report rendering and source rewriting for analyzed layouts."""

from .layout_report import LayoutReportFormatter
from .reorder_rewriter import MemberReorderRewriter

__all__ = [
    "LayoutReportFormatter",
    "MemberReorderRewriter",
]
