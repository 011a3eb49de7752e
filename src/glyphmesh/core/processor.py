"""Parallel batch tessellation of many glyphs.

The pipeline itself is a pure function of one glyph; this module fans a
list of glyphs out to worker processes with ProcessPoolExecutor and
collects meshes, diagnostics and statistics.

Key components:
- tessellate_glyph_task: Top-level picklable function for parallel execution
- BatchTessellator: Orchestrator that runs the tasks and gathers results
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from glyphmesh.config import GlyphMeshSettings, TessellationConfig
from glyphmesh.core.pipeline import tessellate_glyph
from glyphmesh.domain import Diagnostic, GlyphOutline, Mesh, TessellationResult
from glyphmesh.utils import ProcessingLogger, ProcessingStats, configure_logging

ProgressCallback = Callable[[int, int, str, bool], None]


def tessellate_glyph_task(
    glyph_dict: dict[str, Any],
    config_dict: dict[str, Any],
) -> dict[str, Any]:
    """Tessellate a single serialized glyph.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes glyph and configuration, runs the pipeline, and returns the
    serialized result.

    Args:
        glyph_dict: Serialized glyph (from GlyphOutline.to_dict())
        config_dict: Serialized tessellation configuration

    Returns:
        Dictionary containing either:
        - Success: {"result": result_dict, "duration_ms": float}
        - Error: {"error": str, "glyph_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        glyph = GlyphOutline.from_dict(glyph_dict)
        config = TessellationConfig.from_dict(config_dict)

        result = tessellate_glyph(glyph, config)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "result": result.to_dict(),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        # Capture full traceback for debugging
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "glyph_name": glyph_dict.get("metadata", {}).get("name", "unknown"),
            "traceback": tb,
            "duration_ms": duration_ms,
        }


@dataclass
class BatchResult:
    """Meshes and diagnostics of a batch run, keyed by glyph name.

    Attributes:
        meshes: Mesh of every glyph that was tessellated (possibly empty)
        diagnostics: Recovered problems per glyph; glyphs without any are absent
        stats: Counts, totals and timings of the run
    """

    meshes: dict[str, Mesh] = field(default_factory=dict)
    diagnostics: dict[str, list[Diagnostic]] = field(default_factory=dict)
    stats: ProcessingStats = field(default_factory=ProcessingStats)


class BatchTessellator:
    """Tessellates many glyphs, in parallel when more than one worker is allowed.

    Example:
        settings = GlyphMeshSettings()
        batch = BatchTessellator(settings)
        result = batch.process(glyphs, max_workers=4)
        mesh = result.meshes["A"]
    """

    def __init__(self, settings: GlyphMeshSettings | None = None) -> None:
        """Initialize the batch tessellator with configuration.

        Args:
            settings: Settings containing tessellation, processing and logging config
        """
        self.settings = settings if settings is not None else GlyphMeshSettings()
        self.logger = configure_logging(
            log_file=self.settings.logging.log_file,
            console_level=self.settings.logging.log_level,
            file_level=self.settings.logging.file_log_level,
        )
        # Statistics of the current or most recent run
        self.stats: ProcessingStats | None = None

    def process(
        self,
        glyphs: Sequence[GlyphOutline],
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
        config: TessellationConfig | None = None,
    ) -> BatchResult:
        """Tessellate a batch of glyphs.

        Glyphs sharing a name are tessellated once.

        Args:
            glyphs: Glyph outlines to tessellate
            max_workers: Maximum worker processes (None = settings default;
                1 = run inline without a process pool)
            progress_callback: Optional callback(completed, total, glyph_name, success)
                for progress updates
            config: Tessellation settings overriding the ones in ``settings``

        Returns:
            BatchResult with meshes, diagnostics and statistics

        Raises:
            KeyboardInterrupt: If processing is cancelled by user
        """
        processing_logger = ProcessingLogger(self.logger)
        batch = BatchResult(stats=processing_logger.stats)
        self.stats = batch.stats
        batch.stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.settings.processing.max_workers
        if config is None:
            config = self.settings.tessellation

        tasks = {glyph.name: glyph.to_dict() for glyph in glyphs}
        config_dict = config.model_dump()

        self.logger.info(
            "Starting batch tessellation",
            glyph_count=len(tasks),
            max_workers=max_workers,
        )

        if tasks:
            if max_workers == 1:
                self._process_inline(tasks, config_dict, batch, processing_logger, progress_callback)
            else:
                self._process_parallel(
                    tasks, config_dict, max_workers, batch, processing_logger, progress_callback
                )
        else:
            self.logger.info("No glyphs to process")

        batch.stats.end_time = time.time()

        self.logger.info(
            "Batch tessellation complete",
            processed=batch.stats.processed_count,
            empty=batch.stats.empty_count,
            warnings=batch.stats.warning_count,
            errors=batch.stats.error_count,
            triangles=batch.stats.triangle_count,
            duration_seconds=round(batch.stats.duration_seconds, 2),
        )

        return batch

    def _process_inline(
        self,
        tasks: dict[str, dict[str, Any]],
        config_dict: dict[str, Any],
        batch: BatchResult,
        processing_logger: ProcessingLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        total = len(tasks)
        for completed, (name, glyph_dict) in enumerate(tasks.items(), start=1):
            processing_logger.log_glyph_start(name)
            result = tessellate_glyph_task(glyph_dict, config_dict)
            success = self._collect(name, result, batch, processing_logger)
            if progress_callback is not None:
                progress_callback(completed, total, name, success)

    def _process_parallel(
        self,
        tasks: dict[str, dict[str, Any]],
        config_dict: dict[str, Any],
        max_workers: int | None,
        batch: BatchResult,
        processing_logger: ProcessingLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """Process glyphs in parallel using ProcessPoolExecutor."""
        total = len(tasks)
        completed = 0
        pending_futures: dict[Future, str] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for name, glyph_dict in tasks.items():
                future = executor.submit(tessellate_glyph_task, glyph_dict, config_dict)
                pending_futures[future] = name

            try:
                for future in as_completed(list(pending_futures)):
                    glyph_name = pending_futures.pop(future)
                    success = False

                    try:
                        success = self._collect(
                            glyph_name, future.result(), batch, processing_logger
                        )
                    except Exception as e:
                        # Executor-level error
                        processing_logger.log_glyph_error(
                            glyph_name=glyph_name,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, glyph_name, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                batch.stats.was_cancelled = True
                batch.stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

    def _collect(
        self,
        glyph_name: str,
        result: dict[str, Any],
        batch: BatchResult,
        processing_logger: ProcessingLogger,
    ) -> bool:
        """Record one task result; returns True on success."""
        if "error" in result:
            processing_logger.log_glyph_error(
                glyph_name=result["glyph_name"],
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return False

        tessellation = TessellationResult.from_dict(result["result"])
        batch.meshes[glyph_name] = tessellation.mesh

        if tessellation.diagnostics:
            batch.diagnostics[glyph_name] = tessellation.diagnostics
            for diagnostic in tessellation.diagnostics:
                processing_logger.log_diagnostic(glyph_name, diagnostic.kind, diagnostic.message)

        if tessellation.is_empty:
            processing_logger.log_glyph_empty(glyph_name)
        else:
            duration_ms = result.get("duration_ms", 0.0)
            processing_logger.log_glyph_complete(
                glyph_name=glyph_name,
                triangles=tessellation.mesh.triangle_count,
                vertices=tessellation.mesh.vertex_count,
                duration_ms=duration_ms,
            )
            batch.stats.glyph_timings_ms.append(duration_ms)

        return True
