"""Post-processing of raw search paths: vias, straightening and statistics."""
import dataclasses
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..models.geometry import Point
from ..models.routing import Path, Via, DEFAULT_VIA_DIAMETER
from .cost import is_bend


def insert_vias(path: Path, layers: Optional[Sequence[str]] = None,
                diameter: float = DEFAULT_VIA_DIAMETER) -> Path:
    """Return a copy of ``path`` with one Via per layer change.

    Each via sits at the earlier point of the transition, on that point's layer.
    ``layers`` is accepted for API symmetry with the search config; transitions
    are taken from the points themselves.
    """
    vias = []
    for prev, curr in zip(path.points, path.points[1:]):
        if prev.layer != curr.layer:
            vias.append(Via(position=prev, from_layer=prev.layer,
                            to_layer=curr.layer, diameter=diameter))
    return dataclasses.replace(path, vias=tuple(vias))


def _is_redundant(prev: Point, curr: Point, nxt: Point) -> bool:
    if not (prev.layer == curr.layer == nxt.layer):
        return False
    return (prev.x == curr.x == nxt.x) or (prev.y == curr.y == nxt.y)


def optimize_path(path: Path) -> Path:
    """Drop interior points lying on a straight run between their neighbours.

    Endpoints and points adjacent to a layer transition are always kept, so
    re-running via insertion on the result yields the same vias.
    """
    points = path.points
    if len(points) <= 2:
        return path

    optimized: List[Point] = [points[0]]
    for i in range(1, len(points) - 1):
        if not _is_redundant(points[i - 1], points[i], points[i + 1]):
            optimized.append(points[i])
    optimized.append(points[-1])

    result = dataclasses.replace(path, points=tuple(optimized))
    if path.vias:
        result = insert_vias(result, diameter=path.vias[0].diameter)
    return result


def calculate_path_length(path: Path) -> float:
    """Sum of planar Euclidean distances between consecutive points."""
    coords = np.array([(p.x, p.y) for p in path.points], dtype=np.float64)
    deltas = np.diff(coords, axis=0)
    return float(np.hypot(deltas[:, 0], deltas[:, 1]).sum())


def count_bends(path: Path) -> int:
    points = path.points
    return sum(
        1 for i in range(1, len(points) - 1)
        if is_bend(points[i - 1], points[i], points[i + 1])
    )


def path_statistics(path: Path) -> Dict[str, Any]:
    """Summary numbers for a single path."""
    return {
        'length': calculate_path_length(path),
        'bends': count_bends(path),
        'vias': len(path.vias),
        'points': len(path.points),
        'layers': list(path.layers_used),
    }
