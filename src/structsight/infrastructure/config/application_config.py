#!/usr/bin/env python3

"""Run configuration for the StructSight CLI.

Values come from ``STRUCTSIGHT_*`` environment variables, optionally loaded
from a ``.env`` file, and are then overridden by command line arguments.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ...domain.models.layout import Architecture, Compiler

OUTPUT_FORMATS = ("text", "json")
TRUTHY = ("true", "1", "yes")


@dataclass
class Config:
    """What to analyze, for which target, and how to report it."""

    source_file: Path | None = None
    output_format: str = "text"
    architecture: str = "x64"
    compiler: str = "clang"
    verbose: bool = False
    log_dir: Path = Path("logs")

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """
        Build a config from ``STRUCTSIGHT_*`` variables.

        Args:
            env_path: ``.env`` file to load first; ``./.env`` when omitted.
                Variables already set in the environment take precedence.
        """
        env_file = env_path if env_path is not None else Path.cwd() / ".env"
        if env_file.exists():
            from dotenv import load_dotenv

            load_dotenv(env_file)

        source = os.getenv("STRUCTSIGHT_SOURCE_FILE")
        return cls(
            source_file=Path(source) if source else None,
            output_format=os.getenv("STRUCTSIGHT_OUTPUT_FORMAT", "text").lower(),
            architecture=os.getenv("STRUCTSIGHT_ARCHITECTURE", "x64"),
            compiler=os.getenv("STRUCTSIGHT_COMPILER", "clang"),
            verbose=os.getenv("STRUCTSIGHT_VERBOSE", "false").lower() in TRUTHY,
            log_dir=Path(os.getenv("STRUCTSIGHT_LOG_DIR", "logs")),
        )

    @classmethod
    def from_args(
        cls,
        source_file: Optional[Path] = None,
        output_format: Optional[str] = None,
        architecture: Optional[str] = None,
        compiler: Optional[str] = None,
        verbose: Optional[bool] = None,
        env_path: Optional[Path] = None,
    ) -> "Config":
        """Overlay command line values on :meth:`from_env`; None keeps the environment's value."""
        config = cls.from_env(env_path)
        overrides = {
            "source_file": source_file,
            "output_format": output_format.lower() if output_format else None,
            "architecture": architecture,
            "compiler": compiler,
            "verbose": verbose,
        }
        for field_name, value in overrides.items():
            if value is not None:
                setattr(config, field_name, value)
        return config

    @property
    def target_architecture(self) -> Architecture:
        return Architecture.parse(self.architecture)

    @property
    def target_compiler(self) -> Compiler:
        return Compiler.parse(self.compiler)

    def validate(self, require_source: bool = True) -> None:
        """
        Check the source file and the format, architecture and compiler names.

        Args:
            require_source: False when analyzing a prebuilt binary

        Raises:
            ValueError: Describing the first problem found
        """
        if require_source:
            if self.source_file is None:
                raise ValueError("No source file given")
            if not self.source_file.exists():
                raise ValueError(f"Source file not found: {self.source_file}")
            if not self.source_file.is_file():
                raise ValueError(f"Not a file: {self.source_file}")

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")

        # parse() raises ValueError for unknown names
        self.target_architecture
        self.target_compiler
