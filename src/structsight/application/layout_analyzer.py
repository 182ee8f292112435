#!/usr/bin/env python3

"""Batch layout analysis: compile, extract, analyze.

This is the boundary between callers and the layout engine. It turns an
AnalysisRequest into an AnalysisResult and reports every upstream failure
(missing compiler, compilation error, unreadable debug info) as an
unsuccessful result rather than an exception.
"""

from copy import deepcopy
from pathlib import Path

from ..domain.models.layout import AnalysisRequest, AnalysisResult, LayoutDescriptor
from ..domain.repositories.cache import ResultCache
from ..domain.services.extraction import DwarfLayoutExtractor, LayoutExtractor
from ..domain.services.optimization import LayoutEngine
from ..infrastructure.config import get_config
from ..infrastructure.logging import get_logger, log_timing
from ..infrastructure.toolchain import CompilationError, CompilerToolchain, ToolchainError

logger = get_logger(__name__)


class LayoutAnalyzer:
    """Runs layout analysis requests end to end.

    Args:
        extractor: Upstream layout extractor; DWARF-based by default
        toolchain: Compiler wrapper used to build request sources
        engine: Layout optimization engine
        cache: Result cache; only successful results are stored
    """

    def __init__(
        self,
        extractor: LayoutExtractor | None = None,
        toolchain: CompilerToolchain | None = None,
        engine: LayoutEngine | None = None,
        cache: ResultCache | None = None,
    ):
        config = get_config()
        self.extractor = extractor or DwarfLayoutExtractor()
        self.toolchain = toolchain or CompilerToolchain(config)
        self.engine = engine or LayoutEngine()
        self.cache = cache or ResultCache(
            max_size=config["RESULT_CACHE_SIZE"],
            ttl_seconds=config["RESULT_CACHE_TTL_SECONDS"],
        )

    @log_timing
    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Compile the request's source and analyze every matching record."""
        cached = self.cache.get(request.cache_key)
        if cached is not None:
            logger.debug(f"Result cache hit for {request.file_path}")
            return deepcopy(cached)

        logger.info(
            f"Analyzing {request.file_path} ({request.architecture}, {request.compiler}"
            + (f", struct {request.struct_name}" if request.struct_name else "")
            + ")"
        )

        try:
            with self.toolchain.compile(
                request.source_code,
                request.architecture,
                request.compiler,
                request.compile_flags,
                file_name=request.file_path,
            ) as object_path:
                descriptors = self.extractor.extract_layouts(object_path, request.struct_name)
        except CompilationError as e:
            logger.error(f"Compilation failed for {request.file_path}: {e}")
            message = "Compilation failed"
            if e.stderr:
                message += f":\n{e.stderr.strip()}"
            return AnalysisResult.failure(message)
        except (ToolchainError, OSError, ValueError) as e:
            logger.error(f"Analysis error for {request.file_path}: {e}")
            return AnalysisResult.failure(f"Analysis error: {e}")

        result = AnalysisResult(
            success=True,
            layouts=self.analyze_layouts(descriptors, request.architecture.pointer_size),
        )
        # Callers own what they get back; the cache keeps its own copy
        self.cache.put(request.cache_key, deepcopy(result))
        return result

    @log_timing
    def analyze_binary(
        self, binary_path: Path, struct_name: str = "", pointer_size: int | None = None
    ) -> AnalysisResult:
        """Analyze records in an existing ELF object or binary without compiling."""
        try:
            if pointer_size is None:
                pointer_size = self.extractor.pointer_size(binary_path) or 8
            descriptors = self.extractor.extract_layouts(binary_path, struct_name)
        except (OSError, ValueError) as e:
            logger.error(f"Analysis error for {binary_path}: {e}")
            return AnalysisResult.failure(f"Analysis error: {e}")

        return AnalysisResult(
            success=True,
            layouts=self.analyze_layouts(descriptors, pointer_size),
        )

    def analyze_layouts(
        self, descriptors: list[LayoutDescriptor], pointer_size: int
    ) -> list[LayoutDescriptor]:
        """Run the engine over each descriptor independently."""
        return [self.engine.analyze_layout(d, pointer_size) for d in descriptors]

    def clear_cache(self) -> None:
        logger.debug(f"Clearing result cache: {self.cache.stats()}")
        self.cache.clear()
