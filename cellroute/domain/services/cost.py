"""Traversal costs and heuristic for the grid search."""
from typing import Optional

from ..models.geometry import Point
from ..models.routing import RoutingConfig


def step_cost(a: Point, b: Point, config: RoutingConfig) -> float:
    """Planar distance plus via cost when the layer changes."""
    cost = a.distance_to(b)
    if a.layer != b.layer:
        cost += config.via_cost
    return cost


def heuristic(a: Point, b: Point) -> float:
    """Manhattan distance ignoring layer. Never exceeds the true remaining cost."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def _axis(a: Point, b: Point) -> Optional[str]:
    if a.layer != b.layer:
        return None
    if a.x != b.x and a.y == b.y:
        return "h"
    if a.y != b.y and a.x == b.x:
        return "v"
    return None


def is_bend(previous: Point, current: Point, following: Point) -> bool:
    """A bend is a change between horizontal and vertical travel at ``current``."""
    dx1, dy1 = current.x - previous.x, current.y - previous.y
    dx2, dy2 = following.x - current.x, following.y - current.y
    return (dx1 != 0 and dy2 != 0) or (dy1 != 0 and dx2 != 0)


class CostModel:
    """Edge costs for one routing configuration."""

    def __init__(self, config: RoutingConfig):
        self.config = config

    def step_cost(self, a: Point, b: Point) -> float:
        return step_cost(a, b, self.config)

    def heuristic(self, a: Point, b: Point) -> float:
        return heuristic(a, b)

    def bend_cost(self, previous: Optional[Point], current: Point, following: Point) -> float:
        """Penalty for turning at ``current``; vias and the first step are free."""
        if previous is None or not self.config.bend_cost:
            return 0.0
        incoming = _axis(previous, current)
        outgoing = _axis(current, following)
        if incoming is None or outgoing is None or incoming == outgoing:
            return 0.0
        return self.config.bend_cost

    def transition_cost(self, previous: Optional[Point], current: Point, following: Point) -> float:
        return self.step_cost(current, following) + self.bend_cost(previous, current, following)
