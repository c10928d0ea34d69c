"""Mapping between continuous layout coordinates and the routing grid."""
import math

from ..models.geometry import Point, GridKey
from ..models.routing import RoutingConfig
from ...shared.utils.validation_utils import validate_coordinates


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class GridMapper:
    """Converts Points to GridKeys and back for one routing configuration."""

    def __init__(self, config: RoutingConfig):
        self.config = config
        self.grid_size = config.grid_size
        self.layers = config.layers

    def to_grid(self, point: Point) -> GridKey:
        """Round a point to the nearest grid cell on its layer.

        Raises:
            ValidationError: If the coordinates are not finite or the layer is unknown
        """
        validate_coordinates(point.x, point.y)
        return GridKey(
            _round_half_up(point.x / self.grid_size),
            _round_half_up(point.y / self.grid_size),
            self.config.layer_index(point.layer),
        )

    def to_world(self, key: GridKey) -> Point:
        return Point(key.x * self.grid_size, key.y * self.grid_size, self.layers[key.layer])

    def snap(self, point: Point) -> Point:
        """Nearest grid-aligned point on the same layer."""
        return self.to_world(self.to_grid(point))

    def is_aligned(self, point: Point) -> bool:
        return self.snap(point) == point


def to_grid(point: Point, config: RoutingConfig) -> GridKey:
    return GridMapper(config).to_grid(point)


def to_world(key: GridKey, config: RoutingConfig) -> Point:
    return GridMapper(config).to_world(key)
