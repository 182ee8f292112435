#!/usr/bin/env python3

"""Record parsing from DWARF debug information.

Turns a ``DW_TAG_structure_type``/``DW_TAG_class_type`` DIE into a
LayoutDescriptor carrying the compiler-measured member offsets, sizes,
alignments, bitfield positions and polymorphism facts.
"""

from elftools.dwarf.die import DIE

from ....infrastructure.logging import get_logger
from ...models.layout import LayoutDescriptor, MemberDescriptor, VTableInfo
from .location_parser import parse_location_offset
from .type_resolver import TypeResolver, attribute_value, die_name

logger = get_logger(__name__)

EXTRACTABLE_RECORD_TAGS = frozenset({"DW_TAG_structure_type", "DW_TAG_class_type"})

SCOPE_TAGS = frozenset(
    {
        "DW_TAG_namespace",
        "DW_TAG_structure_type",
        "DW_TAG_class_type",
        "DW_TAG_union_type",
    }
)

DW_ACCESS_PUBLIC = 1
DW_ACCESS_PRIVATE = 3
DW_VIRTUALITY_NONE = 0

VTABLE_POINTER_PREFIXES = ("_vptr.", "_vptr$", "__vptr")


def is_complete_record(die: DIE) -> bool:
    """Return True for named struct/class definitions (not forward declarations)."""
    if die.tag not in EXTRACTABLE_RECORD_TAGS:
        return False
    if "DW_AT_declaration" in die.attributes:
        return False
    return "DW_AT_byte_size" in die.attributes and die_name(die) is not None


def qualified_name(die: DIE) -> str:
    """Join enclosing namespace and record names with ``::``."""
    parts = [die_name(die) or "(anonymous)"]
    parent = die.get_parent()
    while parent is not None and parent.tag in SCOPE_TAGS:
        if parent.tag == "DW_TAG_namespace":
            parts.append(die_name(parent) or "(anonymous namespace)")
        else:
            parts.append(die_name(parent) or "(anonymous)")
        parent = parent.get_parent()
    return "::".join(reversed(parts))


def _is_virtual(die: DIE) -> bool:
    virtuality = attribute_value(die, "DW_AT_virtuality", DW_VIRTUALITY_NONE)
    return bool(virtuality)


def _is_vtable_pointer(member_die: DIE) -> bool:
    name = die_name(member_die) or ""
    return name.startswith(VTABLE_POINTER_PREFIXES)


class RecordParser:
    """Parses record DIEs of one compile unit into layout descriptors.

    Attributes:
        type_resolver: Resolver bound to the compile unit's address size
        little_endian: Byte order of the target, used for DWARF 2/3 bitfields
    """

    def __init__(self, type_resolver: TypeResolver, little_endian: bool = True):
        self.type_resolver = type_resolver
        self.little_endian = little_endian
        self._polymorphic_cache: dict[int, bool] = {}

    def parse_record(self, record_die: DIE) -> LayoutDescriptor:
        """Parse a complete record definition.

        Args:
            record_die: Struct or class DIE with ``DW_AT_byte_size``

        Returns:
            LayoutDescriptor without padding or optimizations
        """
        name = die_name(record_die) or "(anonymous)"
        total_size = attribute_value(record_die, "DW_AT_byte_size", 0) or 0
        default_access = (
            DW_ACCESS_PRIVATE if record_die.tag == "DW_TAG_class_type" else DW_ACCESS_PUBLIC
        )

        members: list[MemberDescriptor] = []
        base_subobjects: list[MemberDescriptor] = []
        virtual_functions: list[str] = []
        access_levels: set[int] = set()
        has_vtable_pointer = False
        has_virtual_base = False
        has_polymorphic_base = False
        bases_with_data = 0

        for child in record_die.iter_children():
            if child.tag == "DW_TAG_member":
                if _is_vtable_pointer(child):
                    has_vtable_pointer = True
                    continue
                member = self.parse_member(child, len(members))
                if member is None:
                    continue
                members.append(member)
                access_levels.add(attribute_value(child, "DW_AT_accessibility", default_access))

            elif child.tag == "DW_TAG_subprogram":
                if _is_virtual(child):
                    virtual_functions.append(die_name(child) or "(unnamed)")

            elif child.tag == "DW_TAG_inheritance":
                if _is_virtual(child):
                    has_virtual_base = True
                base_die = self.type_resolver.strip_transparent(
                    self.type_resolver.referenced_type(child)
                )
                if base_die is not None:
                    if self.is_polymorphic(base_die):
                        has_polymorphic_base = True
                    if self._has_data_members(base_die):
                        bases_with_data += 1
                        base = self.parse_base(child)
                        if base is not None:
                            base_subobjects.append(base)

        is_polymorphic = (
            has_vtable_pointer or bool(virtual_functions) or has_polymorphic_base or has_virtual_base
        )
        self._polymorphic_cache[record_die.offset] = is_polymorphic

        is_standard_layout = (
            not is_polymorphic
            and not has_virtual_base
            and len(access_levels) <= 1
            and bases_with_data + (1 if members else 0) <= 1
        )

        alignment = self.type_resolver.record_alignment(record_die)
        if is_polymorphic:
            alignment = max(alignment, self.type_resolver.address_size)

        vtable = None
        if is_polymorphic:
            vtable = VTableInfo(
                pointer_offset=0,
                virtual_function_names=tuple(virtual_functions),
                has_virtual_base=has_virtual_base,
            )

        layout = LayoutDescriptor(
            name=name,
            qualified_name=qualified_name(record_die),
            total_size=total_size,
            alignment=alignment,
            members=members,
            vtable=vtable,
            is_polymorphic=is_polymorphic,
            is_standard_layout=is_standard_layout,
            base_subobjects=base_subobjects,
        )
        logger.debug(
            f"Parsed record {layout.qualified_name}: {total_size} bytes, "
            f"{len(members)} member(s), polymorphic={is_polymorphic}"
        )
        return layout

    def parse_member(self, member_die: DIE, index: int = 0) -> MemberDescriptor | None:
        """Parse a non-static data member; static members yield None."""
        if "DW_AT_declaration" in member_die.attributes or "DW_AT_external" in member_die.attributes:
            return None

        resolver = self.type_resolver
        type_die = resolver.referenced_type(member_die)
        type_name = resolver.type_name(type_die)
        storage_size = resolver.type_size(type_die)
        alignment = resolver.type_alignment(type_die)

        name = die_name(member_die)
        location = parse_location_offset(
            attribute_value(member_die, "DW_AT_data_member_location")
        )

        bit_size = attribute_value(member_die, "DW_AT_bit_size")
        if bit_size is not None:
            storage_size = attribute_value(member_die, "DW_AT_byte_size", storage_size)
            bit_position = self._bit_position(member_die, location, storage_size, bit_size)
            offset = bit_position // 8
            bit_offset = bit_position % 8
        elif location is None:
            logger.debug(f"Member {name or index} has no data location, skipping")
            return None
        else:
            offset = location
            bit_offset = 0

        if name is None:
            name = f"(anonymous@{offset})"

        return MemberDescriptor(
            name=name,
            type=type_name,
            offset=offset,
            size=storage_size,
            alignment=alignment,
            is_bitfield=bit_size is not None,
            bitfield_width=bit_size or 0,
            bitfield_bit_offset=bit_offset,
        )

    def parse_base(self, inheritance_die: DIE) -> MemberDescriptor | None:
        """Describe a non-virtual base class subobject; virtual bases yield None."""
        if _is_virtual(inheritance_die):
            return None
        offset = parse_location_offset(
            attribute_value(inheritance_die, "DW_AT_data_member_location", 0)
        )
        if offset is None:
            return None

        resolver = self.type_resolver
        base_type = resolver.referenced_type(inheritance_die)
        type_name = resolver.type_name(base_type)
        return MemberDescriptor(
            name=type_name,
            type=type_name,
            offset=offset,
            size=resolver.type_size(base_type),
            alignment=resolver.type_alignment(base_type),
        )

    def _bit_position(
        self, member_die: DIE, location: int | None, storage_size: int, bit_size: int
    ) -> int:
        """Return a bitfield's position in bits from the start of the record."""
        data_bit_offset = attribute_value(member_die, "DW_AT_data_bit_offset")
        if data_bit_offset is not None:
            return data_bit_offset

        byte_location = location or 0
        legacy_bit_offset = attribute_value(member_die, "DW_AT_bit_offset")
        if legacy_bit_offset is None:
            return byte_location * 8

        # DWARF 2/3 count from the most significant bit of the storage unit
        if self.little_endian:
            return byte_location * 8 + storage_size * 8 - legacy_bit_offset - bit_size
        return byte_location * 8 + legacy_bit_offset

    def is_polymorphic(self, record_die: DIE) -> bool:
        """Return True if the record or any of its bases has virtual dispatch."""
        cached = self._polymorphic_cache.get(record_die.offset)
        if cached is not None:
            return cached

        self._polymorphic_cache[record_die.offset] = False
        result = False
        for child in record_die.iter_children():
            if child.tag == "DW_TAG_member" and _is_vtable_pointer(child):
                result = True
            elif child.tag == "DW_TAG_subprogram" and _is_virtual(child):
                result = True
            elif child.tag == "DW_TAG_inheritance":
                if _is_virtual(child):
                    result = True
                else:
                    base_die = self.type_resolver.strip_transparent(
                        self.type_resolver.referenced_type(child)
                    )
                    result = base_die is not None and self.is_polymorphic(base_die)
            if result:
                break

        self._polymorphic_cache[record_die.offset] = result
        return result

    def _has_data_members(self, record_die: DIE) -> bool:
        for child in record_die.iter_children():
            if child.tag == "DW_TAG_member" and not _is_vtable_pointer(child):
                if "DW_AT_declaration" not in child.attributes:
                    return True
            elif child.tag == "DW_TAG_inheritance":
                base_die = self.type_resolver.strip_transparent(
                    self.type_resolver.referenced_type(child)
                )
                if base_die is not None and self._has_data_members(base_die):
                    return True
        return False
