"""Logging utilities for Glyphmesh."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from a batch tessellation run."""

    processed_count: int = 0
    empty_count: int = 0
    warning_count: int = 0
    error_count: int = 0
    cancelled_count: int = 0
    triangle_count: int = 0
    vertex_count: int = 0
    was_cancelled: bool = False
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def average_glyph_ms(self) -> float:
        """Mean time spent per tessellated glyph."""
        if not self.glyph_timings_ms:
            return 0.0
        return sum(self.glyph_timings_ms) / len(self.glyph_timings_ms)

    @property
    def min_glyph_ms(self) -> float:
        return min(self.glyph_timings_ms, default=0.0)

    @property
    def max_glyph_ms(self) -> float:
        return max(self.glyph_timings_ms, default=0.0)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphmesh")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file is not None else None,
        level=console_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking batch progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_glyph_start(self, glyph_name: str) -> None:
        """Log start of glyph processing."""
        self._logger.debug("Tessellating glyph", glyph=glyph_name)

    def log_glyph_complete(
        self,
        glyph_name: str,
        triangles: int,
        vertices: int,
        duration_ms: float,
    ) -> None:
        """Log successful glyph tessellation."""
        self._logger.info(
            "Glyph tessellated",
            glyph=glyph_name,
            triangles=triangles,
            vertices=vertices,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.triangle_count += triangles
        self._stats.vertex_count += vertices

    def log_glyph_empty(self, glyph_name: str) -> None:
        """Log a glyph that produced no geometry."""
        self._logger.debug("Glyph has no geometry", glyph=glyph_name)
        self._stats.empty_count += 1

    def log_diagnostic(self, glyph_name: str, kind: str, message: str) -> None:
        """Log a problem recovered while tessellating a glyph."""
        self._logger.warning(
            "Glyph tessellated with diagnostics",
            glyph=glyph_name,
            kind=kind,
            message=message,
        )
        self._stats.warning_count += 1

    def log_glyph_error(
        self,
        glyph_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log glyph processing error."""
        self._logger.error(
            "Glyph tessellation failed",
            glyph=glyph_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
