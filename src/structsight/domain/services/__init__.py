#!/usr/bin/env python3

"""Domain services layer."""

from . import extraction, optimization, reporting

__all__ = [
    "extraction",
    "optimization",
    "reporting",
]
