#!/usr/bin/env python3

"""Caching repositories."""

from .result_cache import ResultCache

__all__ = [
    "ResultCache",
]
