"""Pytest configuration and shared fixtures."""

import itertools
import shutil
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from structsight.domain.models.layout import LayoutDescriptor, VTableInfo
from tests.layout_factories import member


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def padded_layout() -> LayoutDescriptor:
    """char a; int b; char c; double d; as laid out on x86-64."""
    return LayoutDescriptor(
        name="TestStruct",
        qualified_name="TestStruct",
        total_size=24,
        alignment=8,
        members=[
            member("a", 1, 1, 0, "char"),
            member("b", 4, 4, 4, "int"),
            member("c", 1, 1, 8, "char"),
            member("d", 8, 8, 16, "double"),
        ],
    )


@pytest.fixture
def optimal_layout() -> LayoutDescriptor:
    """double d; int b; char a; char c; - already in the proposed order."""
    return LayoutDescriptor(
        name="OptimizedStruct",
        qualified_name="OptimizedStruct",
        total_size=16,
        alignment=8,
        members=[
            member("d", 8, 8, 0, "double"),
            member("b", 4, 4, 8, "int"),
            member("a", 1, 1, 12, "char"),
            member("c", 1, 1, 13, "char"),
        ],
    )


@pytest.fixture
def polymorphic_layout() -> LayoutDescriptor:
    """class BaseClass { virtual foo(); virtual bar(); int x; char y; } on x86-64."""
    return LayoutDescriptor(
        name="BaseClass",
        qualified_name="BaseClass",
        total_size=16,
        alignment=8,
        members=[
            member("x", 4, 4, 8, "int"),
            member("y", 1, 1, 12, "char"),
        ],
        vtable=VTableInfo(virtual_function_names=("foo", "bar")),
        is_polymorphic=True,
        is_standard_layout=False,
    )


@pytest.fixture
def make_die() -> Callable[..., Mock]:
    """Factory for mock pyelftools DIEs.

    Attribute values are wrapped the way pyelftools exposes them
    (``die.attributes[name].value``); ``type_die`` wires ``DW_AT_type``.
    """
    offsets = itertools.count(0x100, 0x10)

    def factory(
        tag: str,
        attributes: dict[str, Any] | None = None,
        children: list[Mock] | None = None,
        type_die: Mock | None = None,
        parent: Mock | None = None,
    ) -> Mock:
        die = Mock()
        die.tag = tag
        die.offset = next(offsets)
        die.attributes = {key: Mock(value=value) for key, value in (attributes or {}).items()}
        if type_die is not None:
            die.attributes["DW_AT_type"] = Mock(value=type_die.offset)
            die.get_DIE_from_attribute.return_value = type_die
        die.iter_children.return_value = list(children or [])
        die.get_parent.return_value = parent
        for child in children or []:
            child.get_parent.return_value = die
        return die

    return factory


@pytest.fixture
def base_types(make_die: Callable[..., Mock]) -> dict[str, Mock]:
    """Common DW_TAG_base_type DIEs keyed by name."""
    sizes = {
        "char": 1,
        "short": 2,
        "int": 4,
        "unsigned int": 4,
        "float": 4,
        "double": 8,
        "long long": 8,
        "long double": 16,
    }
    return {
        name: make_die("DW_TAG_base_type", {"DW_AT_name": name.encode(), "DW_AT_byte_size": size})
        for name, size in sizes.items()
    }


def available_compiler() -> str | None:
    """Return the name of an installed C++ compiler driver, preferring clang."""
    if shutil.which("clang++"):
        return "clang"
    if shutil.which("g++"):
        return "gcc"
    return None


@pytest.fixture(scope="session")
def compiler_name() -> str:
    """Installed compiler, skipping the test when none is available."""
    name = available_compiler()
    if name is None:
        pytest.skip("No C++ compiler (clang++ or g++) on PATH")
    return name
