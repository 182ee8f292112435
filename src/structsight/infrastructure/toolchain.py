#!/usr/bin/env python3

"""C++ compiler invocation for layout extraction.

Compiles request source text into an object file with debug information so
the DWARF extractor can read the compiler's own record layouts.
"""

import shutil
import subprocess
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from ..domain.models.layout import Architecture, Compiler
from .config import get_config
from .logging import get_logger, timed

logger = get_logger(__name__)

# Keep types that no function or variable refers to
DEBUG_INFO_FLAGS = ("-g", "-fno-eliminate-unused-debug-types")

COMPILER_FLAGS: dict[Compiler, tuple[str, ...]] = {
    Compiler.GCC: (),
    Compiler.CLANG: ("-fstandalone-debug",),
    Compiler.MSVC: ("-fstandalone-debug", "-fms-extensions", "-fms-compatibility"),
}


class ToolchainError(RuntimeError):
    """Base error for compiler invocation failures."""


class ToolchainNotFoundError(ToolchainError):
    """The compiler executable is not installed or not on PATH."""


class CompilationError(ToolchainError):
    """The compiler rejected the source.

    Attributes:
        stderr: Compiler diagnostics
        returncode: Compiler exit status
    """

    def __init__(self, message: str, stderr: str = "", returncode: int | None = None):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class CompilerToolchain:
    """Builds and runs compiler command lines for analysis requests."""

    def __init__(self, config: dict | None = None):
        self.config = config or get_config()

    def executable_for(self, compiler: Compiler) -> str:
        """Return the driver executable for ``compiler``; MSVC mode runs through clang."""
        if compiler is Compiler.GCC:
            return self.config["GCC_EXECUTABLE"]
        return self.config["CLANG_EXECUTABLE"]

    def build_command(
        self,
        source_path: Path,
        output_path: Path,
        architecture: Architecture,
        compiler: Compiler,
        extra_flags: Sequence[str] = (),
    ) -> list[str]:
        """Return the full compiler command line."""
        return [
            self.executable_for(compiler),
            f"-std={self.config['CXX_STANDARD']}",
            architecture.compiler_flag,
            *COMPILER_FLAGS[compiler],
            *DEBUG_INFO_FLAGS,
            *extra_flags,
            "-c",
            str(source_path),
            "-o",
            str(output_path),
        ]

    def is_available(self, compiler: Compiler) -> bool:
        return shutil.which(self.executable_for(compiler)) is not None

    @contextmanager
    def compile(
        self,
        source_code: str,
        architecture: Architecture,
        compiler: Compiler,
        extra_flags: Sequence[str] = (),
        file_name: str = "input.cpp",
    ) -> Iterator[Path]:
        """Compile ``source_code`` and yield the path of the object file.

        The object lives in a temporary directory removed on exit.

        Raises:
            ToolchainNotFoundError: If the compiler executable is missing
            CompilationError: If the compiler exits with a non-zero status
        """
        executable = self.executable_for(compiler)
        if shutil.which(executable) is None:
            raise ToolchainNotFoundError(f"Compiler not found: {executable}")

        with tempfile.TemporaryDirectory(prefix="structsight_") as temp_dir:
            source_path = Path(temp_dir) / (Path(file_name).name or "input.cpp")
            if source_path.suffix not in (".cpp", ".cc", ".cxx", ".hpp", ".h"):
                source_path = source_path.with_suffix(".cpp")
            output_path = Path(temp_dir) / "layout.o"
            source_path.write_text(source_code, encoding="utf-8")

            command = self.build_command(
                source_path, output_path, architecture, compiler, extra_flags
            )
            if source_path.suffix in (".hpp", ".h"):
                command[1:1] = ["-x", "c++"]
            logger.debug(f"Running: {' '.join(command)}")

            try:
                with timed(logger, f"{executable} {source_path.name}"):
                    completed = subprocess.run(
                        command,
                        capture_output=True,
                        text=True,
                        timeout=self.config["COMPILE_TIMEOUT_SECONDS"],
                        check=False,
                    )
            except FileNotFoundError as e:
                raise ToolchainNotFoundError(f"Compiler not found: {executable}") from e
            except subprocess.TimeoutExpired as e:
                raise CompilationError(
                    f"Compiler timed out after {e.timeout}s", stderr=str(e.stderr or "")
                ) from e

            if completed.returncode != 0:
                raise CompilationError(
                    f"{executable} exited with status {completed.returncode}",
                    stderr=completed.stderr,
                    returncode=completed.returncode,
                )

            if completed.stderr:
                logger.debug(f"Compiler diagnostics:\n{completed.stderr}")

            yield output_path
