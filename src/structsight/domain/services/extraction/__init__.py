#!/usr/bin/env python3

"""Upstream layout extraction services."""

from .dwarf_layout_extractor import DwarfLayoutExtractor
from .layout_extractor import LayoutExtractor
from .location_parser import parse_location_offset
from .record_parser import RecordParser, is_complete_record, qualified_name
from .type_resolver import TypeResolver

__all__ = [
    "DwarfLayoutExtractor",
    "LayoutExtractor",
    "RecordParser",
    "TypeResolver",
    "is_complete_record",
    "parse_location_offset",
    "qualified_name",
]
