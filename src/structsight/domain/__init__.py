#!/usr/bin/env python3

"""Domain layer containing layout models, analysis services and caches."""

from . import models, repositories, services

__all__ = [
    "models",
    "repositories",
    "services",
]
