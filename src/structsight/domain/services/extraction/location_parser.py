#!/usr/bin/env python3

"""DWARF location expression parsing for member offsets.

``DW_AT_data_member_location`` is a plain integer in DWARF 3+ but may be a
location expression in DWARF 2 output, usually ``DW_OP_plus_uconst <uleb>``.

Example:
    DWARF 4: member_location = 16 -> offset = 16
    DWARF 2: member_location = [0x23, 0x10] -> offset = 16
"""

from collections.abc import Sequence

from ....infrastructure.logging import get_logger

logger = get_logger(__name__)

DW_OP_PLUS_UCONST = 0x23  # Add unsigned LEB128 constant to stack


def decode_uleb128(data: Sequence[int], start: int = 0) -> tuple[int, int]:
    """Decode an unsigned LEB128 value.

    Returns:
        Tuple of (value, index just past the encoded value)
    """
    result = 0
    shift = 0
    index = start
    while index < len(data):
        byte = data[index]
        result |= (byte & 0x7F) << shift
        index += 1
        if not byte & 0x80:
            break
        shift += 7
    return result, index


def parse_location_offset(attr_value: int | Sequence[int] | None) -> int | None:
    """Extract a member's byte offset from ``DW_AT_data_member_location``.

    Args:
        attr_value: Integer offset, DWARF 2 location expression, or None

    Returns:
        Offset in bytes, or None if the value cannot be interpreted
    """
    if attr_value is None:
        return None

    if isinstance(attr_value, int):
        return attr_value

    if isinstance(attr_value, (list, tuple, bytes)):
        if not attr_value:
            logger.debug("Empty location expression, cannot extract offset")
            return None

        if attr_value[0] == DW_OP_PLUS_UCONST and len(attr_value) >= 2:
            offset, _ = decode_uleb128(attr_value, 1)
            return offset

        if len(attr_value) == 1:
            return int(attr_value[0])

        logger.warning(f"Unsupported location expression: {list(attr_value)}")
        return None

    logger.warning(
        f"Unknown attribute value type for location offset: {type(attr_value).__name__}"
    )
    return None
