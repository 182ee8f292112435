#!/usr/bin/env python3
"""
Entry point for StructSight.

This file allows running the tool directly from the project root:
    python main.py <source.cpp> --struct <name>
"""

import sys
from pathlib import Path

# Add src to path for development mode
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from structsight.main import main

if __name__ == "__main__":
    main()
