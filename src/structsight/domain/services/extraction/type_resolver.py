#!/usr/bin/env python3

"""Type resolution for DWARF member types.

Follows ``DW_AT_type`` chains through typedefs, qualifiers, pointers and
arrays to produce display names, byte sizes and alignments for members.
"""

from elftools.dwarf.die import DIE

from ....infrastructure.logging import get_logger
from .location_parser import parse_location_offset

logger = get_logger(__name__)

TRANSPARENT_TAGS = frozenset(
    {
        "DW_TAG_typedef",
        "DW_TAG_const_type",
        "DW_TAG_volatile_type",
        "DW_TAG_restrict_type",
        "DW_TAG_atomic_type",
    }
)

POINTER_TAGS = frozenset(
    {
        "DW_TAG_pointer_type",
        "DW_TAG_reference_type",
        "DW_TAG_rvalue_reference_type",
        "DW_TAG_ptr_to_member_type",
    }
)

RECORD_TAGS = frozenset(
    {
        "DW_TAG_structure_type",
        "DW_TAG_class_type",
        "DW_TAG_union_type",
    }
)

# Largest alignment any scalar may demand inside a record
DEFAULT_MAX_SCALAR_ALIGNMENT = 16


def largest_power_of_two_divisor(value: int) -> int:
    """Return the largest power of two dividing ``value`` (1 for zero or negatives)."""
    if value <= 0:
        return 1
    return value & -value


def attribute_value(die: DIE, name: str, default=None):
    """Return the raw value of attribute ``name`` on ``die``."""
    attr = die.attributes.get(name)
    return attr.value if attr is not None else default


def die_name(die: DIE) -> str | None:
    """Return the decoded ``DW_AT_name`` of ``die``, if any."""
    value = attribute_value(die, "DW_AT_name")
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class TypeResolver:
    """Resolves names, sizes and alignments of DWARF types for one compile unit.

    Attributes:
        address_size: Pointer size of the compile unit in bytes
        max_scalar_alignment: Cap on natural scalar alignment for the target
    """

    def __init__(
        self,
        address_size: int,
        max_scalar_alignment: int = DEFAULT_MAX_SCALAR_ALIGNMENT,
    ):
        self.address_size = address_size
        self.max_scalar_alignment = max_scalar_alignment
        self._record_alignment_cache: dict[int, int] = {}

    def referenced_type(self, die: DIE) -> DIE | None:
        """Return the DIE referenced by ``DW_AT_type``, or None for void."""
        if "DW_AT_type" not in die.attributes:
            return None
        try:
            return die.get_DIE_from_attribute("DW_AT_type")
        except Exception as e:
            logger.debug(f"Could not resolve DW_AT_type of {die.tag}: {e}")
            return None

    def strip_transparent(self, type_die: DIE | None) -> DIE | None:
        """Skip typedefs and cv-qualifiers."""
        while type_die is not None and type_die.tag in TRANSPARENT_TAGS:
            type_die = self.referenced_type(type_die)
        return type_die

    def resolve_type_name(self, die: DIE) -> str:
        """Return a C++-style display name for the type referenced by ``die``."""
        return self.type_name(self.referenced_type(die))

    def type_name(self, type_die: DIE | None) -> str:
        if type_die is None:
            return "void"

        name = die_name(type_die)
        tag = type_die.tag

        if tag == "DW_TAG_pointer_type":
            return f"{self.type_name(self.referenced_type(type_die))} *"
        if tag == "DW_TAG_reference_type":
            return f"{self.type_name(self.referenced_type(type_die))} &"
        if tag == "DW_TAG_rvalue_reference_type":
            return f"{self.type_name(self.referenced_type(type_die))} &&"
        if tag == "DW_TAG_const_type":
            return f"const {self.type_name(self.referenced_type(type_die))}"
        if tag == "DW_TAG_volatile_type":
            return f"volatile {self.type_name(self.referenced_type(type_die))}"
        if tag == "DW_TAG_array_type":
            element = self.type_name(self.referenced_type(type_die))
            dims = "".join(
                f"[{count}]" if count is not None else "[]"
                for count in self.array_dimensions(type_die)
            )
            return f"{element}{dims}"
        if tag == "DW_TAG_subroutine_type":
            return f"{self.type_name(self.referenced_type(type_die))} ()"

        if name:
            return name
        if tag in RECORD_TAGS or tag == "DW_TAG_enumeration_type":
            kind = tag.replace("DW_TAG_", "").replace("_type", "")
            return f"{kind} (anonymous)"
        return tag.replace("DW_TAG_", "")

    def array_dimensions(self, array_die: DIE) -> list[int | None]:
        """Return the element count of each dimension; None marks an unbounded one."""
        dims: list[int | None] = []
        for child in array_die.iter_children():
            if child.tag not in ("DW_TAG_subrange_type", "DW_TAG_enumeration_type"):
                continue
            count = attribute_value(child, "DW_AT_count")
            if count is None:
                upper = attribute_value(child, "DW_AT_upper_bound")
                lower = attribute_value(child, "DW_AT_lower_bound", 0)
                if isinstance(upper, int) and isinstance(lower, int):
                    count = upper - lower + 1
            dims.append(count if isinstance(count, int) else None)
        return dims

    def type_size(self, type_die: DIE | None) -> int:
        """Return the byte size of a type; 0 when it cannot be determined."""
        type_die = self.strip_transparent(type_die)
        if type_die is None:
            return 0

        byte_size = attribute_value(type_die, "DW_AT_byte_size")
        if isinstance(byte_size, int):
            return byte_size

        tag = type_die.tag
        if tag in POINTER_TAGS:
            return self.address_size
        if tag == "DW_TAG_array_type":
            total = self.type_size(self.referenced_type(type_die))
            for count in self.array_dimensions(type_die):
                total *= count or 0
            return total
        if tag == "DW_TAG_enumeration_type":
            return self.type_size(self.referenced_type(type_die))

        return 0

    def type_alignment(self, type_die: DIE | None) -> int:
        """Return the alignment requirement of a type as a power of two >= 1."""
        while type_die is not None:
            explicit = attribute_value(type_die, "DW_AT_alignment")
            if isinstance(explicit, int) and explicit > 0:
                return explicit
            if type_die.tag not in TRANSPARENT_TAGS:
                break
            type_die = self.referenced_type(type_die)

        if type_die is None:
            return 1

        tag = type_die.tag
        if tag in POINTER_TAGS:
            return min(self.address_size, self.max_scalar_alignment)
        if tag == "DW_TAG_array_type":
            return self.type_alignment(self.referenced_type(type_die))
        if tag in RECORD_TAGS:
            return self.record_alignment(type_die)

        size = self.type_size(type_die)
        return max(1, min(largest_power_of_two_divisor(size), self.max_scalar_alignment))

    def record_alignment(self, record_die: DIE) -> int:
        """Infer a record's alignment from its members, bases and vtable pointer.

        Packed records are detected by misaligned members or a size that is
        not a multiple of the natural alignment; the alignment is then lowered
        until the measured layout is consistent with it.
        """
        explicit = attribute_value(record_die, "DW_AT_alignment")
        if isinstance(explicit, int) and explicit > 0:
            return explicit

        cached = self._record_alignment_cache.get(record_die.offset)
        if cached is not None:
            return cached

        # Guards against self-referential types while computing
        self._record_alignment_cache[record_die.offset] = 1

        alignment = 1
        placements: list[tuple[int, int]] = []
        for child in record_die.iter_children():
            if child.tag not in ("DW_TAG_member", "DW_TAG_inheritance"):
                continue
            if child.tag == "DW_TAG_member" and "DW_AT_declaration" in child.attributes:
                continue
            child_alignment = self.type_alignment(self.referenced_type(child))
            alignment = max(alignment, child_alignment)
            offset = parse_location_offset(attribute_value(child, "DW_AT_data_member_location"))
            if offset is not None and "DW_AT_bit_size" not in child.attributes:
                placements.append((offset, child_alignment))

        byte_size = attribute_value(record_die, "DW_AT_byte_size", 0) or 0
        while alignment > 1 and (
            byte_size % alignment
            or any(offset % min(align, alignment) for offset, align in placements)
        ):
            alignment //= 2

        self._record_alignment_cache[record_die.offset] = alignment
        return alignment
