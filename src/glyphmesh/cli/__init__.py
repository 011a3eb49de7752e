"""Command-line interface for glyphmesh.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for batch tessellation
- Per-glyph table of mesh sizes and warnings
- Verbose/quiet output modes
- JSON export of meshes and diagnostics
"""

from glyphmesh.cli.app import cli, main

__all__ = ["cli", "main"]
