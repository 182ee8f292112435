#!/usr/bin/env python3

"""Analysis request and result models for the batch boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .layout_descriptor import LayoutDescriptor


class Architecture(Enum):
    """Target architecture; selects the pointer size."""

    X86 = "x86"  # 32-bit
    X64 = "x64"  # 64-bit

    @property
    def pointer_size(self) -> int:
        return 4 if self is Architecture.X86 else 8

    @property
    def compiler_flag(self) -> str:
        return "-m32" if self is Architecture.X86 else "-m64"

    @classmethod
    def parse(cls, value: str) -> Architecture:
        """Parse an architecture name such as ``x64``, ``i386`` or ``32``."""
        key = value.strip().lower()
        aliases = {
            "x86": cls.X86,
            "i386": cls.X86,
            "i686": cls.X86,
            "32": cls.X86,
            "x64": cls.X64,
            "x86_64": cls.X64,
            "amd64": cls.X64,
            "64": cls.X64,
        }
        if key not in aliases:
            raise ValueError(f"Unknown architecture: {value}")
        return aliases[key]

    def __str__(self) -> str:
        return self.value


class Compiler(Enum):
    """Compiler whose layout rules the extraction layer should follow."""

    GCC = "gcc"
    CLANG = "clang"
    MSVC = "msvc"

    @classmethod
    def parse(cls, value: str) -> Compiler:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown compiler: {value}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AnalysisRequest:
    """A batch layout analysis request for one translation unit."""

    source_code: str
    file_path: str = "input.cpp"
    struct_name: str = ""  # Empty analyzes every record
    architecture: Architecture = Architecture.X64
    compiler: Compiler = Compiler.CLANG
    compile_flags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cache_key(self) -> tuple[Any, ...]:
        return (
            self.source_code,
            self.file_path,
            self.struct_name,
            self.architecture,
            self.compiler,
            self.compile_flags,
        )


@dataclass
class AnalysisResult:
    """Outcome of an analysis request.

    ``error_message`` is only populated when extraction or compilation failed.
    """

    success: bool
    error_message: str = ""
    layouts: list[LayoutDescriptor] = field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> AnalysisResult:
        return cls(success=False, error_message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error_message": self.error_message,
            "layouts": [layout.to_dict() for layout in self.layouts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        return cls(
            success=data["success"],
            error_message=data.get("error_message", ""),
            layouts=[LayoutDescriptor.from_dict(d) for d in data.get("layouts", [])],
        )
