"""Console rendering for the glyphmesh CLI.

Everything the command prints goes through the shared rich ``console``:
headers and step markers, the per-glyph mesh table, diagnostics and the
final run summary.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphmesh.domain import Diagnostic, Mesh
from glyphmesh.utils import ProcessingStats

console = Console()

BULLET = "▸"
CHECK = "✓"
CROSS = "✗"
WARN = "!"
SEP = "·"


def create_progress() -> Progress:
    """Progress bar showing tessellated glyphs out of the total."""
    return Progress(
        TextColumn("  [progress.description]{task.description}"),
        BarColumn(bar_width=32, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Glyphmesh[/bold] [dim]v{version}[/dim]")
    console.print("[dim]" + "═" * 40 + "[/dim]")


def print_step(message: str) -> None:
    console.print(f"\n[bold]{BULLET}[/bold] {message}")


def print_font_info(
    font_path: str,
    font_type: str,
    glyph_count: int,
    upm: int,
    font_height: int,
) -> None:
    """Print the font's path, format and vertical metrics.

    Args:
        font_path: Path to the font file
        font_type: "TrueType" or "OpenType"
        glyph_count: Number of glyphs in the font
        upm: Units per em
        font_height: Ascender minus descender in font units
    """
    # Text keeps brackets in file names from being read as markup
    path_line = Text("  ")
    path_line.append(font_path, style="bold")
    path_line.append(f" [{font_type}]", style="dim")
    console.print(path_line)
    console.print(
        f"  {glyph_count:,} glyphs {SEP} UPM {upm:,} {SEP} height {font_height:,} units"
    )


def print_settings(depth: float, tolerance: float, normals: str, normalize: bool) -> None:
    """Print the tessellation settings in effect."""
    mode = f"extruded {depth:g}" if depth > 0 else "flat"
    units = "font height" if normalize else "font units"
    console.print(
        f"  {mode} {SEP} tolerance {tolerance:g} {SEP} {normals} normals {SEP} {units}"
    )


def _elapsed(seconds: float) -> str:
    if seconds >= 60:
        minutes, rest = divmod(seconds, 60)
        return f"{int(minutes)}m{rest:04.1f}s"
    if seconds >= 1:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.0f}ms"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print how many worker processes tessellate the glyphs.

    Args:
        workers: Worker process count
        is_auto: True when the count defaults to the CPU count
    """
    source = "auto" if is_auto else "requested"
    noun = "worker" if workers == 1 else "workers"
    console.print(f"  {workers} {noun} ({source}) {SEP} press Ctrl+C to stop")


def print_glyph_table(
    rows: list[tuple[str, str]],
    meshes: dict[str, Mesh],
    diagnostics: dict[str, list[Diagnostic]],
) -> None:
    """Print one row per character with its mesh size and warnings.

    Args:
        rows: (character, glyph name) pairs in display order
        meshes: Meshes keyed by glyph name
        diagnostics: Diagnostics keyed by glyph name
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Char")
    table.add_column("Glyph")
    table.add_column("Vertices", justify="right")
    table.add_column("Triangles", justify="right")
    table.add_column("Warnings")

    for char, glyph_name in rows:
        mesh = meshes.get(glyph_name)
        if mesh is None:
            table.add_row(repr(char), glyph_name, "-", "-", f"[red]{CROSS} failed[/red]")
            continue

        warnings = diagnostics.get(glyph_name, [])
        if warnings:
            kinds = sorted({d.kind for d in warnings})
            warning_text = f"[yellow]{WARN} {', '.join(kinds)}[/yellow]"
        elif mesh.is_empty():
            warning_text = "[dim]empty[/dim]"
        else:
            warning_text = ""

        table.add_row(
            repr(char),
            glyph_name,
            f"{mesh.vertex_count:,}",
            f"{mesh.triangle_count:,}",
            warning_text,
        )

    console.print(table)


def print_diagnostics(diagnostics: dict[str, list[Diagnostic]]) -> None:
    """Print every diagnostic message grouped by glyph."""
    for glyph_name, entries in diagnostics.items():
        console.print(f"  [bold]{glyph_name}[/bold]")
        for diagnostic in entries:
            console.print(f"    {WARN} {diagnostic.kind}: {diagnostic.message}")


def print_summary(stats: ProcessingStats, output_path: str | None = None) -> None:
    """Print summary of a batch run.

    Args:
        stats: Statistics of the run
        output_path: Path of the written mesh file, if any
    """
    console.print(
        f"\n[bold green]{CHECK} Complete[/bold green] [dim]({_elapsed(stats.duration_seconds)})[/dim]"
    )

    if output_path is not None:
        written = Text("  wrote ")
        written.append(output_path, style="bold")
        console.print(written)

    error_style = "red" if stats.error_count > 0 else "green"
    warning_style = "yellow" if stats.warning_count > 0 else "green"
    console.print(
        f"  {stats.processed_count} glyphs {SEP} {stats.empty_count} empty {SEP} "
        f"{stats.triangle_count:,} triangles {SEP} {stats.vertex_count:,} vertices"
    )
    console.print(
        f"  [{warning_style}]{stats.warning_count} warnings[/{warning_style}] {SEP} "
        f"[{error_style}]{stats.error_count} errors[/{error_style}]"
    )

    if stats.glyph_timings_ms:
        console.print(
            f"  [dim]per glyph: {stats.average_glyph_ms:.1f}ms mean, "
            f"{stats.min_glyph_ms:.1f}ms min, {stats.max_glyph_ms:.1f}ms max[/dim]"
        )


def print_error(message: str, details: str | None = None) -> None:
    """Print an error line and an optional hint below it."""
    console.print(f"\n[bold red]{CROSS}[/bold red] {message}")
    if details:
        console.print(f"  [dim]{details}[/dim]")


def print_cancellation_notice() -> None:
    console.print(f"\n[yellow]{WARN}[/yellow] Interrupted, letting running glyphs finish")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print what was done before the run was interrupted.

    Args:
        processed: Glyphs tessellated before the interrupt
        cancelled: Queued glyphs that never started
    """
    console.print(f"  {processed} tessellated {SEP} {cancelled} skipped")
    console.print("  [dim]Nothing was written[/dim]")
