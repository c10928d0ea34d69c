"""Geometric value objects shared by the routing services."""
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Point:
    """Value object for a position in continuous layout units on a named layer."""
    x: float
    y: float
    layer: str
    
    def distance_to(self, other: 'Point') -> float:
        """Calculate planar Euclidean distance to another point (layer ignored)."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def on_layer(self, layer: str) -> 'Point':
        return Point(self.x, self.y, layer)


@dataclass(frozen=True)
class GridKey:
    """A point in the discretized routing grid: integer cell plus layer index."""
    x: int
    y: int
    layer: int


class ObstacleKind(Enum):
    """Origin of an obstacle rectangle."""
    CELL = "cell"
    ROUTE = "route"
    BLOCKAGE = "blockage"


@dataclass(frozen=True)
class Obstacle:
    """Axis-aligned blocked rectangle on a single layer."""
    x1: float
    y1: float
    x2: float
    y2: float
    layer: str
    kind: ObstacleKind = ObstacleKind.BLOCKAGE

    def __post_init__(self):
        # Normalise so that (x1, y1) is always the lower-left corner
        if self.x1 > self.x2:
            x1, x2 = self.x2, self.x1
            object.__setattr__(self, 'x1', x1)
            object.__setattr__(self, 'x2', x2)
        if self.y1 > self.y2:
            y1, y2 = self.y2, self.y1
            object.__setattr__(self, 'y1', y1)
            object.__setattr__(self, 'y2', y2)
        if not isinstance(self.kind, ObstacleKind):
            object.__setattr__(self, 'kind', ObstacleKind(self.kind))

    def contains(self, point: Point) -> bool:
        """Inclusive containment test on the obstacle's own layer."""
        if point.layer != self.layer:
            return False
        return (self.x1 <= point.x <= self.x2 and
                self.y1 <= point.y <= self.y2)

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1
