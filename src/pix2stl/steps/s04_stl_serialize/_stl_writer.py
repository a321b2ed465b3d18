"""ASCII STL formatting.

Numbers are written with Python's shortest round-trip repr unless a fixed
precision is requested, so no precision is lost by default.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from pix2stl.core.mesh import Mesh

logger = logging.getLogger(__name__)


def _number_formatter(precision: Optional[int]) -> Callable[[float], str]:
    if precision is None:
        return repr
    return lambda v: f"{v:.{precision}f}"


def format_stl(mesh: Mesh, name: str, precision: Optional[int] = None) -> str:
    """Render the mesh as an ASCII STL document, one facet per triangle in order."""
    fmt = _number_formatter(precision)

    def xyz(p) -> str:
        return f"{fmt(p[0])} {fmt(p[1])} {fmt(p[2])}"

    lines = [f"solid {name}"]
    for normal, (a, b, c) in zip(mesh.normals.tolist(), mesh.vertices.tolist()):
        lines.append(f"facet normal {xyz(normal)}")
        lines.append("    outer loop")
        lines.append(f"        vertex {xyz(a)}")
        lines.append(f"        vertex {xyz(b)}")
        lines.append(f"        vertex {xyz(c)}")
        lines.append("    endloop")
        lines.append("endfacet")
    lines.append(f"endsolid {name}")
    return "\n".join(lines) + "\n"
