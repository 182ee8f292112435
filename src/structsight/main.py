"""Main entry point for StructSight."""

import argparse
import json
import sys
from pathlib import Path
from typing import NoReturn

from .application import LayoutAnalyzer
from .domain.models.layout import AnalysisRequest, AnalysisResult
from .domain.services.reporting import LayoutReportFormatter, MemberReorderRewriter
from .infrastructure.config import Config
from .infrastructure.logging import LoggerSetup, get_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Report C/C++ struct and class memory layouts: member offsets, "
        "padding, vtable presence and member reordering suggestions",
        epilog="""
Examples:
  # Analyze every struct in a source file (64-bit, clang)
  structsight shapes.cpp

  # Analyze one struct for a 32-bit target with gcc
  structsight shapes.cpp --struct Packet --arch x86 --compiler gcc

  # Pass extra compiler flags
  structsight shapes.cpp --flag=-DUSE_DOUBLE --flag=-Iinclude

  # Analyze an existing binary built with -g
  structsight --binary build/app --struct Packet

  # Machine-readable output
  structsight shapes.cpp --format json

  # Print the source with members reordered as suggested
  structsight shapes.cpp --rewrite

  # Write the reordered source to a new file and print the report
  structsight shapes.cpp --rewrite shapes_reordered.cpp
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        help="C++ source file to analyze (optional if using .env or --binary)",
    )
    parser.add_argument(
        "-s",
        "--struct",
        type=str,
        default="",
        metavar="NAME",
        help="Only analyze the struct/class with this name",
    )
    parser.add_argument(
        "--arch",
        type=str,
        help="Target architecture: x86 (32-bit) or x64 (64-bit, default)",
    )
    parser.add_argument(
        "--compiler",
        type=str,
        help="Compiler layout rules: gcc, clang (default) or msvc",
    )
    parser.add_argument(
        "--flag",
        action="append",
        default=[],
        metavar="FLAG",
        help="Extra compiler flag (repeatable)",
    )
    parser.add_argument(
        "--binary",
        type=Path,
        metavar="ELF",
        help="Analyze an existing ELF object or binary instead of compiling",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=str,
        help="Output format: text (default) or json",
    )
    parser.add_argument(
        "--rewrite",
        nargs="?",
        const="-",
        metavar="PATH",
        help="Apply reordering suggestions to the source; print it, or write it to PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose output with debug logs",
    )
    return parser.parse_args(argv)


def render(result: AnalysisResult, output_format: str) -> str:
    """Render a result in the requested output format."""
    if output_format == "json":
        return json.dumps(result.to_dict(), indent=2)
    return LayoutReportFormatter().format_result(result)


def rewrite_source(source_file: Path, result: AnalysisResult) -> str:
    """Return the source file's text with every reordering suggestion applied."""
    logger = get_logger(__name__)
    source = source_file.read_text(encoding="utf-8")
    rewritten, changed = MemberReorderRewriter().rewrite_all(source, result.layouts)
    if changed:
        logger.info(f"Reordered members of {', '.join(changed)}")
    else:
        logger.info("No member declarations were reordered")
    return rewritten


def main(argv: list[str] | None = None) -> NoReturn:
    """Command line entry point."""
    args = parse_args(argv)

    try:
        config = Config.from_args(
            source_file=args.source,
            output_format=args.format,
            architecture=args.arch,
            compiler=args.compiler,
            verbose=args.verbose,
        )
        config.validate(require_source=args.binary is None)
        if args.rewrite is not None and args.binary is not None:
            raise ValueError("--rewrite needs a source file and cannot be used with --binary")
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    LoggerSetup.initialize(config.log_dir, verbose=config.verbose)
    logger = get_logger(__name__)

    analyzer = LayoutAnalyzer()

    if args.binary is not None:
        if not args.binary.exists():
            logger.error(f"Binary not found: {args.binary}")
            sys.exit(1)
        result = analyzer.analyze_binary(
            args.binary,
            struct_name=args.struct,
            pointer_size=config.target_architecture.pointer_size if args.arch else None,
        )
    else:
        assert config.source_file is not None
        request = AnalysisRequest(
            source_code=config.source_file.read_text(encoding="utf-8"),
            file_path=str(config.source_file),
            struct_name=args.struct,
            architecture=config.target_architecture,
            compiler=config.target_compiler,
            compile_flags=tuple(args.flag),
        )
        result = analyzer.analyze(request)

    if not result.success:
        print(render(result, config.output_format))
        sys.exit(1)

    if args.rewrite is not None:
        assert config.source_file is not None
        rewritten = rewrite_source(config.source_file, result)
        if args.rewrite == "-":
            print(rewritten, end="")
            sys.exit(0)
        Path(args.rewrite).write_text(rewritten, encoding="utf-8")
        logger.info(f"Wrote reordered source to {args.rewrite}")

    print(render(result, config.output_format))

    logger.debug(f"Analyzed {len(result.layouts)} layout(s)")
    sys.exit(0)


if __name__ == "__main__":
    main()
