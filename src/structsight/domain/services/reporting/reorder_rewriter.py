#!/usr/bin/env python3

"""Source rewriting for member reordering suggestions.

Locates a struct/class definition in C++ source text and rewrites its body
so that simple data member declarations follow a suggested order.
"""

import re

from ....infrastructure.logging import get_logger
from ...models.layout import LayoutDescriptor, OptimizationSuggestion

logger = get_logger(__name__)

# One declaration per line: "type name;", "type name[4];", "unsigned x : 3;"
MEMBER_DECLARATION = re.compile(
    r"^\s*(?P<type>[^;{}()]+?[\s*&])(?P<name>\w+)\s*(?:\[[^\]]*\]\s*)*(?::\s*\w+\s*)?"
    r"(?:=[^;]*)?;"
)
ACCESS_SPECIFIER = re.compile(r"^\s*(?:public|private|protected)\s*:(?!:)")

# Lines led by these words are never data member declarations
NON_MEMBER_KEYWORDS = frozenset({"return", "using", "typedef", "friend", "static"})


def _code_part(line: str) -> str:
    """Strip a trailing ``//`` comment so braces inside it are not counted."""
    return line.split("//", 1)[0]


class MemberReorderRewriter:
    """Applies a reordering suggestion to a record definition in source text."""

    def rewrite(
        self, source: str, layout: LayoutDescriptor, suggestion: OptimizationSuggestion
    ) -> str:
        """Return ``source`` with the record's members in ``suggestion.suggested_order``.

        Only declarations directly in the record body are considered; lines
        inside inline method bodies and nested types are left alone. The
        member declaration lines swap places among themselves and every
        other line (access specifiers, comments, methods) keeps its position.

        The source is returned unchanged when the definition cannot be found,
        a suggested member has no single-line declaration, or the members
        sit under more than one access specifier.
        """
        order = list(suggestion.suggested_order)
        if not order:
            return source

        body_span = self.find_body(source, layout.name)
        if body_span is None:
            logger.debug(f"Definition of {layout.name} not found in source")
            return source

        start, end = body_span
        lines = source[start:end].split("\n")
        slots = self._declaration_slots(lines, set(order))
        if slots is None:
            logger.debug(f"Cannot rewrite {layout.name}: duplicate member declarations")
            return source

        missing = [name for name in order if name not in slots]
        if missing:
            logger.debug(f"Cannot rewrite {layout.name}: no declaration line for {missing}")
            return source

        sections = {slots[name][1] for name in order}
        if len(sections) > 1:
            logger.debug(f"Cannot rewrite {layout.name}: members span several access sections")
            return source

        declarations = [lines[slots[name][0]] for name in order]
        for index, declaration in zip(sorted(slots[name][0] for name in order), declarations):
            lines[index] = declaration
        return source[:start] + "\n".join(lines) + source[end:]

    def rewrite_all(self, source: str, layouts: list[LayoutDescriptor]) -> tuple[str, list[str]]:
        """Apply every reordering suggestion of ``layouts`` to ``source``.

        Returns:
            The rewritten source and the qualified names of the records changed
        """
        rewritten_names = []
        for layout in layouts:
            for suggestion in layout.optimizations:
                if not suggestion.suggested_order:
                    continue
                rewritten = self.rewrite(source, layout, suggestion)
                if rewritten != source:
                    source = rewritten
                    rewritten_names.append(layout.qualified_name)
        return source, rewritten_names

    @staticmethod
    def _declaration_slots(
        lines: list[str], names: set[str]
    ) -> dict[str, tuple[int, int]] | None:
        """Map member names to (line index, access section) for top-level declarations.

        Returns None when a name is declared on more than one top-level line.
        """
        slots: dict[str, tuple[int, int]] = {}
        depth = 0
        section = 0

        for index, line in enumerate(lines):
            code = _code_part(line)
            at_top_level = depth == 0
            depth += code.count("{") - code.count("}")
            if not at_top_level or "{" in code:
                continue

            if ACCESS_SPECIFIER.match(code):
                section += 1
                continue

            match = MEMBER_DECLARATION.match(code)
            if match is None or match.group("name") not in names:
                continue
            type_words = match.group("type").split()
            if not type_words or type_words[0] in NON_MEMBER_KEYWORDS:
                continue
            if match.group("name") in slots:
                return None
            slots[match.group("name")] = (index, section)

        return slots

    @staticmethod
    def find_body(source: str, record_name: str) -> tuple[int, int] | None:
        """Return the (start, end) span between the braces of a record definition."""
        header = re.compile(rf"\b(?:struct|class)\s+{re.escape(record_name)}\b[^;{{]*\{{")
        match = header.search(source)
        if match is None:
            return None

        depth = 1
        index = match.end()
        while index < len(source):
            char = source[index]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return match.end(), index
            index += 1
        return None
