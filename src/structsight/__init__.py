"""StructSight - struct/class memory layout analysis and padding optimization."""

from .application import LayoutAnalyzer
from .domain.services.optimization import LayoutEngine, analyze_layout
from .infrastructure.config import Config
from .main import main

__all__ = ["Config", "LayoutAnalyzer", "LayoutEngine", "analyze_layout", "main"]
