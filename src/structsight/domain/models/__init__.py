#!/usr/bin/env python3

"""Domain models for StructSight."""

from . import layout

__all__ = [
    "layout",
]
