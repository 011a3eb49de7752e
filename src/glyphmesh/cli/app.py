"""CLI application entry point for glyphmesh.

This module provides the main CLI interface using Typer.
"""

import json
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from glyphmesh import __version__
from glyphmesh.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_diagnostics,
    print_error,
    print_font_info,
    print_glyph_table,
    print_header,
    print_processing_info,
    print_settings,
    print_step,
    print_summary,
)
from glyphmesh.config import (
    GlyphMeshSettings,
    LoggingConfig,
    NormalMode,
    OrphanHolePolicy,
    ProcessingConfig,
    TessellationConfig,
)
from glyphmesh.core import BatchResult, BatchTessellator
from glyphmesh.domain import GlyphOutline
from glyphmesh.exceptions import FontLoadError, GlyphMeshError
from glyphmesh.io import FontMeshGenerator, FontReader

# Create the Typer app
app = typer.Typer(
    name="glyphmesh",
    help="Tessellate font glyphs into 2D or extruded 3D triangle meshes.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphmesh[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def tessellate(
    input_font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
    text: Annotated[
        str,
        typer.Argument(
            help="Characters to tessellate",
            show_default=False,
        ),
    ],
    depth: Annotated[
        float,
        typer.Option(
            "--depth",
            "-d",
            help="Extrusion depth (0 = flat 2D mesh)",
            min=0.0,
        ),
    ] = 0.0,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Curve flattening tolerance in font units at 1000 UPM",
            min=0.0,
        ),
    ] = 0.5,
    normals: Annotated[
        str,
        typer.Option(
            "--normals",
            help="Normals for extruded meshes (flat|smooth)",
        ),
    ] = "flat",
    orphan_holes: Annotated[
        str,
        typer.Option(
            "--orphan-holes",
            help="Holes without an enclosing outer (discard|promote)",
        ),
    ] = "discard",
    normalize: Annotated[
        bool,
        typer.Option(
            "--normalize",
            help="Scale meshes so the font height is one unit",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write meshes and diagnostics as JSON",
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto, 1 = no worker processes)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Tessellate the glyphs of TEXT from a font into triangle meshes.

    Curves are flattened, holes (the counters of o, e, B, ...) are bridged
    into their outer contour and the result is ear-clipped. With --depth the
    mesh is extruded into a closed solid.

    Example:
        glyphmesh Roboto-Regular.ttf "Hello" --depth 50
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_font.exists():
        print_error(
            f"Input file not found: {input_font}",
            details=f"The file '{input_font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_font.is_file():
        print_error(
            f"Input path is not a file: {input_font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    if tolerance <= 0:
        print_error("Tolerance must be greater than zero")
        raise typer.Exit(code=1)

    try:
        normal_mode = NormalMode(normals.lower())
    except ValueError:
        print_error(f"Invalid normals: {normals}", details="Valid values: flat, smooth")
        raise typer.Exit(code=1)

    try:
        orphan_policy = OrphanHolePolicy(orphan_holes.lower())
    except ValueError:
        print_error(
            f"Invalid orphan hole policy: {orphan_holes}",
            details="Valid values: discard, promote",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = GlyphMeshSettings(
        tessellation=TessellationConfig(
            flatten_tolerance=tolerance,
            extrusion_depth=depth,
            normal_mode=normal_mode,
            orphan_hole_policy=orphan_policy,
        ),
        processing=ProcessingConfig(
            max_workers=workers,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="ERROR" if quiet else log_level,
        ),
    )

    try:
        if not quiet:
            print_step("Loading font")

        with FontReader(input_font) as reader:
            if not quiet:
                print_font_info(
                    font_path=str(input_font),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                    font_height=reader.font_height,
                )

            generator = FontMeshGenerator(reader, settings.tessellation, normalize=normalize)
            config = generator.tessellation_config()

            rows, outlines = _resolve_text(reader, text)
            if not quiet and verbose:
                print_settings(depth, tolerance, normal_mode.value, normalize)

            result = _run_batch(settings, config, list(outlines.values()), workers, quiet)

        if not quiet:
            print_step("Meshes")
            print_glyph_table(rows, result.meshes, result.diagnostics)
            if verbose and result.diagnostics:
                print_step("Diagnostics")
                print_diagnostics(result.diagnostics)

        if output is not None:
            _write_json(output, rows, outlines, result, config)

        if not quiet:
            print_summary(result.stats, str(output) if output is not None else None)

        if result.stats.error_count > 0:
            raise typer.Exit(code=1)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphMeshError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _resolve_text(
    reader: FontReader, text: str
) -> tuple[list[tuple[str, str]], dict[str, GlyphOutline]]:
    """Map each distinct character of ``text`` to its glyph outline.

    Returns:
        (character, glyph name) rows in first-seen order, and the outlines
        keyed by glyph name
    """
    rows: list[tuple[str, str]] = []
    outlines: dict[str, GlyphOutline] = {}
    seen: set[str] = set()

    for char in text:
        if char in seen:
            continue
        seen.add(char)

        name = reader.glyph_name_for_char(char)
        rows.append((char, name))
        if name not in outlines:
            outlines[name] = reader.get_glyph(name)

    return rows, outlines


def _run_batch(
    settings: GlyphMeshSettings,
    config: TessellationConfig,
    outlines: list[GlyphOutline],
    workers: int | None,
    quiet: bool,
) -> BatchResult:
    """Tessellate outlines with a progress bar unless quiet."""
    batch = BatchTessellator(settings)

    if quiet:
        return batch.process(outlines, max_workers=workers, config=config)

    actual_workers = workers if workers else os.cpu_count() or 1
    print_step("Tessellating")
    print_processing_info(actual_workers, is_auto=(workers is None))

    try:
        with create_progress() as progress:
            task_id = progress.add_task(
                f"Tessellating {len(outlines)} glyphs",
                total=len(outlines),
            )

            def update_progress(completed: int, *_: object) -> None:
                progress.update(task_id, completed=completed)

            return batch.process(
                outlines,
                max_workers=workers,
                progress_callback=update_progress,
                config=config,
            )
    except KeyboardInterrupt:
        stats = batch.stats
        print_cancellation_notice()
        print_cancellation_summary(
            processed=stats.processed_count if stats else 0,
            cancelled=stats.cancelled_count if stats else 0,
        )
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code


def _write_json(
    path: Path,
    rows: list[tuple[str, str]],
    outlines: dict[str, GlyphOutline],
    result: BatchResult,
    config: TessellationConfig,
) -> None:
    """Write meshes and diagnostics keyed by glyph name."""
    glyphs: dict[str, Any] = {}
    for name, outline in outlines.items():
        mesh = result.meshes.get(name)
        glyphs[name] = {
            "unicode": outline.metadata.unicode,
            "advance_width": outline.metadata.advance_width * config.scale,
            "mesh": mesh.to_dict() if mesh is not None else None,
            "diagnostics": [d.to_dict() for d in result.diagnostics.get(name, [])],
        }

    document = {
        "version": __version__,
        "config": config.model_dump(mode="json"),
        "characters": {char: name for char, name in rows},
        "glyphs": glyphs,
    }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
