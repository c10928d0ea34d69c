"""Domain models for routing configuration and results."""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .geometry import Point
from .constraints import DRCViolation
from ...shared.exceptions import ConfigurationError, ValidationError
from ...shared.utils.validation_utils import validate_layer_name

DIRECTIONS = ("horizontal", "vertical", "any")
DEFAULT_VIA_DIAMETER = 0.22
DEFAULT_WIRE_WIDTH = 0.1


@dataclass(frozen=True)
class RoutingConfig:
    """Immutable per-invocation routing parameters."""
    grid_size: float = 20.0
    layers: Tuple[str, ...] = ("metal1", "metal2")
    via_cost: float = 10.0
    bend_cost: float = 0.0
    max_bends: int = 10
    drc_aware: bool = True
    grid_snap: bool = True
    preferred_direction: str = "any"
    max_iterations: int = 50000
    via_diameter: float = DEFAULT_VIA_DIAMETER
    default_width: float = DEFAULT_WIRE_WIDTH
    optimize: bool = False
    avoid_routed: bool = True
    avoid_cells: bool = True

    def __post_init__(self):
        if isinstance(self.layers, str):
            raise ConfigurationError("layers must be a sequence of layer names, not a string")
        object.__setattr__(self, 'layers', tuple(self.layers))

        if not self.layers:
            raise ConfigurationError("Routing configuration needs at least one layer")
        if len(set(self.layers)) != len(self.layers):
            raise ConfigurationError(f"Duplicate layer names in {list(self.layers)}")
        if not _is_number(self.grid_size) or not math.isfinite(self.grid_size) or self.grid_size <= 0:
            raise ConfigurationError(f"grid_size must be a positive number, got {self.grid_size!r}")
        for name in ("via_cost", "bend_cost", "via_diameter", "default_width"):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative number, got {value!r}")
        if not _is_integer(self.max_bends) or self.max_bends < 0:
            raise ConfigurationError(f"max_bends must be non-negative, got {self.max_bends}")
        if not _is_integer(self.max_iterations) or self.max_iterations <= 0:
            raise ConfigurationError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.preferred_direction not in DIRECTIONS:
            raise ConfigurationError(
                f"preferred_direction must be one of {DIRECTIONS}, got {self.preferred_direction!r}"
            )

    def layer_index(self, layer: str) -> int:
        """Index of a layer name in the ordered layer list."""
        validate_layer_name(layer, self.layers)
        return self.layers.index(layer)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Via:
    """Value object recording one layer transition along a path."""
    position: Point
    from_layer: str
    to_layer: str
    diameter: float = DEFAULT_VIA_DIAMETER


@dataclass(frozen=True)
class Path:
    """Routed centerline for one net."""
    points: Tuple[Point, ...]
    width: float = DEFAULT_WIRE_WIDTH
    layer: Optional[str] = None
    vias: Tuple[Via, ...] = ()
    net_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))
        object.__setattr__(self, 'vias', tuple(self.vias))
        if len(self.points) < 2:
            raise ValidationError(
                f"A path needs at least two points, got {len(self.points)}",
                field="points", value=self.points
            )
        if self.layer is None:
            object.__setattr__(self, 'layer', self.points[0].layer)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def layers_used(self) -> Tuple[str, ...]:
        """Layers touched by the path, in order of first use."""
        seen = []
        for point in self.points:
            if point.layer not in seen:
                seen.append(point.layer)
        return tuple(seen)


@dataclass
class RoutingStatistics:
    """Aggregated counters for one batch routing run."""
    total_length: float = 0.0
    via_count: int = 0
    bend_count: int = 0
    drc_violations: int = 0
    nets_attempted: int = 0
    nets_routed: int = 0
    nets_failed: int = 0
    iterations: int = 0
    total_time: float = 0.0
    memory_peak: float = 0.0
    
    @property
    def success_rate(self) -> float:
        """Calculate routing success rate."""
        if self.nets_attempted == 0:
            return 0.0
        return self.nets_routed / self.nets_attempted
    
    @property
    def average_length(self) -> float:
        """Calculate average route length."""
        if self.nets_routed == 0:
            return 0.0
        return self.total_length / self.nets_routed
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary."""
        return {
            'total_length': self.total_length,
            'via_count': self.via_count,
            'bend_count': self.bend_count,
            'drc_violations': self.drc_violations,
            'nets_attempted': self.nets_attempted,
            'nets_routed': self.nets_routed,
            'nets_failed': self.nets_failed,
            'iterations': self.iterations,
            'success_rate': self.success_rate,
            'average_length': self.average_length,
            'total_time_seconds': self.total_time,
            'memory_peak_mb': self.memory_peak,
        }


@dataclass(frozen=True)
class RouteResult:
    """Output of one batch routing run."""
    routes: Tuple[Path, ...] = ()
    statistics: RoutingStatistics = field(default_factory=RoutingStatistics)
    errors: Tuple[str, ...] = ()
    violations: Tuple[DRCViolation, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'routes', tuple(self.routes))
        object.__setattr__(self, 'errors', tuple(self.errors))
        object.__setattr__(self, 'violations', tuple(self.violations))

    @property
    def success(self) -> bool:
        """True when every requested net was routed."""
        return not self.errors

    def route_for(self, net_id: str) -> Optional[Path]:
        for path in self.routes:
            if path.net_id == net_id:
                return path
        return None
