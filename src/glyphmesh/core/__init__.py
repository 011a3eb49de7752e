"""Core processing algorithms for glyphmesh.

This module contains the stages of the outline-to-mesh pipeline:

- Curve flattening (adaptive Bezier subdivision)
- Winding classification and hole ownership
- Hole bridging and ear-clipping triangulation
- Extrusion into closed solids
- Mesh assembly (vertex welding, normals)

All services are designed to be:
- Stateless (safe for use in worker processes)
- Pure (no side effects apart from logging)

Key functions:
- tessellate: Run the whole pipeline on the contours of one glyph
- signed_area: Calculate polygon area using shoelace formula
- point_in_polygon: Test if point is inside polygon
- extrude: Turn a 2D triangulation into a closed 3D part

Key classes:
- CurveFlattener: Turns contours into closed polygons
- ContourClassifier: Splits polygons into outers and owned holes
- Triangulator: Bridges holes and clips ears
- MeshAssembler: Merges parts into one deduplicated mesh
- BatchTessellator: Tessellates many glyphs in worker processes
"""

from glyphmesh.core.assembler import MeshAssembler, VertexWelder, assemble
from glyphmesh.core.classifier import (
    ClassificationResult,
    ContourClassifier,
    classify_contours,
)
from glyphmesh.core.extruder import extrude
from glyphmesh.core.flattener import CurveFlattener, flatten_contour, flatten_segment
from glyphmesh.core.geometry import point_in_polygon, signed_area
from glyphmesh.core.pipeline import tessellate, tessellate_glyph
from glyphmesh.core.processor import BatchResult, BatchTessellator, tessellate_glyph_task
from glyphmesh.core.triangulator import Triangulator, triangulate, triangulate_points

__all__ = [
    # Processor classes
    "BatchResult",
    "BatchTessellator",
    # Classifier classes
    "ClassificationResult",
    "ContourClassifier",
    # Flattener classes
    "CurveFlattener",
    # Assembler classes
    "MeshAssembler",
    # Triangulator classes
    "Triangulator",
    "VertexWelder",
    # Functions
    "assemble",
    "classify_contours",
    "extrude",
    "flatten_contour",
    "flatten_segment",
    "point_in_polygon",
    "signed_area",
    "tessellate",
    "tessellate_glyph",
    "tessellate_glyph_task",
    "triangulate",
    "triangulate_points",
]
