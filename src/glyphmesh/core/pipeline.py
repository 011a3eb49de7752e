"""The outline-to-mesh pipeline.

Runs the stages in order for one glyph:

1. Scale contours by ``config.scale``
2. Flatten every contour (contour errors become diagnostics)
3. Classify winding and assign holes to outers
4. Triangulate each polygon with holes
5. Extrude each triangulation when a depth is set
6. Assemble all parts into one deduplicated mesh

Only recoverable problems are handled here; programming errors and invalid
configuration propagate to the caller.
"""

import logging
from collections.abc import Sequence

from glyphmesh.config import TessellationConfig
from glyphmesh.core.assembler import MeshAssembler
from glyphmesh.core.classifier import ContourClassifier
from glyphmesh.core.extruder import extrude
from glyphmesh.core.flattener import CurveFlattener
from glyphmesh.core.triangulator import Triangulator
from glyphmesh.domain import (
    Contour,
    Diagnostic,
    FlatContour,
    GlyphOutline,
    Mesh,
    MeshPart,
    TessellationResult,
)
from glyphmesh.exceptions import ContourError

logger = logging.getLogger(__name__)


def tessellate(
    contours: Sequence[Contour],
    config: TessellationConfig | None = None,
) -> TessellationResult:
    """Turn the contours of one glyph into a triangle mesh.

    Args:
        contours: Closed contours in glyph units
        config: Tessellation settings (defaults apply when omitted)

    Returns:
        TessellationResult with the mesh and every recovered problem. A
        glyph without usable contours yields an empty mesh.
    """
    if config is None:
        config = TessellationConfig()

    dimension = 2 if config.is_flat else 3
    diagnostics: list[Diagnostic] = []

    if config.scale != 1.0:
        contours = [c.scaled(config.scale) for c in contours]

    flattener = CurveFlattener(config)
    flat: list[FlatContour] = []
    indices: list[int] = []
    for index, contour in enumerate(contours):
        try:
            flat.append(flattener.flatten(contour, index))
        except ContourError as e:
            logger.warning("Skipping contour %d: %s", index, e)
            diagnostics.append(Diagnostic.from_exception(e, index))
            continue
        indices.append(index)

    if not flat:
        return TessellationResult(mesh=Mesh.empty(dimension), diagnostics=diagnostics)

    classification = ContourClassifier(config).classify(flat, indices)
    diagnostics.extend(classification.diagnostics)

    triangulator = Triangulator(config)
    parts: list[MeshPart] = []
    quality_warning = False

    for polygon in classification.polygons:
        triangulation = triangulator.triangulate(polygon)
        diagnostics.extend(triangulation.diagnostics)
        quality_warning = quality_warning or triangulation.quality_warning

        if config.is_flat:
            parts.append(triangulation.as_part())
        else:
            parts.append(extrude(triangulation, config.extrusion_depth, config.outer_winding))

    mesh = MeshAssembler(config).assemble(parts, dimension)

    logger.debug(
        "Tessellated %d polygons into %d triangles (%d vertices)",
        len(classification.polygons), mesh.triangle_count, mesh.vertex_count,
    )

    return TessellationResult(
        mesh=mesh,
        diagnostics=diagnostics,
        quality_warning=quality_warning,
        polygon_count=len(classification.polygons),
    )


def tessellate_glyph(
    outline: GlyphOutline,
    config: TessellationConfig | None = None,
) -> TessellationResult:
    """Tessellate a glyph outline.

    Convenience wrapper around tessellate() that logs the glyph name with
    any diagnostics.
    """
    result = tessellate(outline.contours, config)
    for diagnostic in result.diagnostics:
        logger.debug("Glyph %s: %s: %s", outline.name, diagnostic.kind, diagnostic.message)
    return result
