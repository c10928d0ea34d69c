"""Obstacle model: blocked rectangles per layer and their derivation."""
import logging
from typing import Dict, Iterable, List, Sequence

import numpy as np

from ..models.geometry import Point, Obstacle, ObstacleKind
from ..models.layout import Cell, Wire
from ..models.routing import Path

logger = logging.getLogger(__name__)


def is_blocked(point: Point, obstacles: Iterable[Obstacle]) -> bool:
    """True if any obstacle on the point's layer contains it (inclusive bounds)."""
    return any(obstacle.contains(point) for obstacle in obstacles)


class ObstacleMap:
    """Per-layer index of obstacle rectangles answering ``is_blocked`` queries.

    Each layer holds an ``(n, 4)`` array of ``x1, y1, x2, y2`` rows so a query
    is one vectorized comparison instead of a Python loop over every obstacle.
    """

    def __init__(self, obstacles: Sequence[Obstacle] = ()):
        self.obstacles: List[Obstacle] = list(obstacles)
        grouped: Dict[str, List[List[float]]] = {}
        for obstacle in self.obstacles:
            grouped.setdefault(obstacle.layer, []).append(
                [obstacle.x1, obstacle.y1, obstacle.x2, obstacle.y2]
            )
        self._rects: Dict[str, np.ndarray] = {
            layer: np.asarray(rows, dtype=np.float64) for layer, rows in grouped.items()
        }
        logger.debug(f"Obstacle map built: {len(self.obstacles)} obstacles on {len(self._rects)} layers")

    def is_blocked(self, point: Point) -> bool:
        rects = self._rects.get(point.layer)
        if rects is None:
            return False
        hits = ((rects[:, 0] <= point.x) & (point.x <= rects[:, 2]) &
                (rects[:, 1] <= point.y) & (point.y <= rects[:, 3]))
        return bool(hits.any())

    def count(self, layer: str = None) -> int:
        if layer is None:
            return len(self.obstacles)
        rects = self._rects.get(layer)
        return 0 if rects is None else len(rects)

    def __len__(self) -> int:
        return len(self.obstacles)


def obstacles_from_cells(cells: Iterable[Cell], layer: str) -> List[Obstacle]:
    """Cell bounding boxes as obstacles on one layer."""
    return [
        Obstacle(*cell.bounds, layer=layer, kind=ObstacleKind.CELL)
        for cell in cells
    ]


def _segment_obstacles(points: Sequence[Point], margin: float) -> List[Obstacle]:
    obstacles = []
    for prev, curr in zip(points, points[1:]):
        if prev.layer != curr.layer:
            # Via hop: block the landing spot on both layers
            for point in (prev, curr):
                obstacles.append(Obstacle(
                    point.x - margin, point.y - margin, point.x + margin, point.y + margin,
                    layer=point.layer, kind=ObstacleKind.ROUTE
                ))
            continue
        obstacles.append(Obstacle(
            min(prev.x, curr.x) - margin, min(prev.y, curr.y) - margin,
            max(prev.x, curr.x) + margin, max(prev.y, curr.y) + margin,
            layer=prev.layer, kind=ObstacleKind.ROUTE
        ))
    return obstacles


def obstacles_from_path(path: Path) -> List[Obstacle]:
    """One route obstacle per segment, widened by half the wire width."""
    return _segment_obstacles(path.points, path.width / 2)


def obstacles_from_wires(wires: Iterable[Wire]) -> List[Obstacle]:
    obstacles = []
    for wire in wires:
        if len(wire.points) == 1:
            point = wire.points[0]
            obstacles.append(Obstacle(point.x, point.y, point.x, point.y,
                                      layer=point.layer, kind=ObstacleKind.ROUTE))
            continue
        obstacles.extend(_segment_obstacles(wire.points, wire.width / 2))
    return obstacles
