#!/usr/bin/env python3

"""DWARF-backed layout extraction using pyelftools.

Reads every complete struct/class definition from the debug information of
an ELF object or binary compiled with ``-g``.
"""

from pathlib import Path

from elftools.common.exceptions import DWARFError, ELFError
from elftools.elf.elffile import ELFFile

from ....infrastructure.logging import get_logger, log_timing
from ...models.layout import LayoutDescriptor
from .layout_extractor import LayoutExtractor
from .record_parser import RecordParser, is_complete_record
from .type_resolver import DEFAULT_MAX_SCALAR_ALIGNMENT, TypeResolver, die_name

logger = get_logger(__name__)

# i386 System V places 8-byte scalars on 4-byte boundaries inside records
MAX_SCALAR_ALIGNMENT_BY_MACHINE = {
    "EM_386": 4,
}


class DwarfLayoutExtractor(LayoutExtractor):
    """Extracts record layouts from DWARF debug information."""

    @log_timing
    def extract_layouts(self, artifact_path: Path, struct_name: str = "") -> list[LayoutDescriptor]:
        """Extract record layouts from an ELF file's DWARF info.

        Records defined in several compile units are reported once.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not ELF or carries no DWARF info
        """
        artifact_path = Path(artifact_path)
        if not artifact_path.exists():
            raise FileNotFoundError(f"ELF file not found: {artifact_path}")

        with open(artifact_path, "rb") as f:
            try:
                elf = ELFFile(f)
            except ELFError as e:
                raise ValueError(f"Not an ELF file: {artifact_path}: {e}") from e

            if not elf.has_dwarf_info():
                raise ValueError(f"No DWARF info found in {artifact_path}")

            machine = elf.header["e_machine"]
            max_scalar_alignment = MAX_SCALAR_ALIGNMENT_BY_MACHINE.get(
                machine, DEFAULT_MAX_SCALAR_ALIGNMENT
            )
            logger.debug(
                f"Reading DWARF from {artifact_path} (machine={machine}, "
                f"elfclass={elf.elfclass}, little_endian={elf.little_endian})"
            )

            layouts: dict[str, LayoutDescriptor] = {}
            try:
                self._collect_layouts(elf, struct_name, max_scalar_alignment, layouts)
            except (DWARFError, ELFError) as e:
                raise ValueError(f"Malformed DWARF info in {artifact_path}: {e}") from e

        logger.info(f"Extracted {len(layouts)} record layout(s) from {artifact_path.name}")
        return list(layouts.values())

    def _collect_layouts(
        self,
        elf: ELFFile,
        struct_name: str,
        max_scalar_alignment: int,
        layouts: dict[str, LayoutDescriptor],
    ) -> None:
        for cu in elf.get_dwarf_info().iter_CUs():
            resolver = TypeResolver(cu["address_size"], max_scalar_alignment)
            parser = RecordParser(resolver, little_endian=elf.little_endian)

            for die in cu.iter_DIEs():
                if not is_complete_record(die):
                    continue
                if struct_name and die_name(die) != struct_name:
                    continue

                try:
                    layout = parser.parse_record(die)
                except Exception as e:
                    logger.warning(f"Failed to parse record at DIE offset 0x{die.offset:x}: {e}")
                    continue

                if layout.qualified_name not in layouts:
                    layouts[layout.qualified_name] = layout

    def pointer_size(self, artifact_path: Path) -> int | None:
        """Return 4 for ELFCLASS32 and 8 for ELFCLASS64 files."""
        with open(artifact_path, "rb") as f:
            try:
                elf = ELFFile(f)
            except ELFError as e:
                logger.warning(f"Could not read ELF header of {artifact_path}: {e}")
                return None
            return elf.elfclass // 8
