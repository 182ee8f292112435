#!/usr/bin/env python3

"""Repository layer for cached analysis data."""

from . import cache

__all__ = [
    "cache",
]
