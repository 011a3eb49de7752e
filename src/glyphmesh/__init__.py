"""Glyphmesh - Turn font glyph outlines into triangle meshes.

Glyphmesh flattens the Bezier outlines of a glyph, classifies its contours
into filled shapes and holes, triangulates every shape with its holes and
optionally extrudes the result into a closed solid.

Example:
    $ glyphmesh Roboto-Regular.ttf "Hello" --depth 100

This tessellates every glyph of "Hello" and reports vertex and triangle
counts for each mesh.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
