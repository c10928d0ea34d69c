"""
cellroute - multi-layer maze router for placed IC cell layouts
"""
from .domain.models import (
    Point, GridKey, Obstacle, ObstacleKind, Pin, Cell, Wire, Net,
    RoutingConfig, Path, Via, RoutingStatistics, RouteResult,
    DRCRule, DRCViolation, DRCResult, DEFAULT_TECHNOLOGY_RULES
)
from .domain.services import (
    GridMapper, ObstacleMap, CostModel, AStarPathfinder, CancellationToken,
    NetRouter, find_path, route, check_drc, insert_vias, optimize_path,
    calculate_path_length, count_bends, is_blocked
)
from .shared.exceptions import (
    CellRouteException, ConfigurationError, ValidationError, RoutingError,
    RoutingCancelledError, DRCViolationError, LayoutLoadError
)

__version__ = "1.0.0"
__license__ = "MIT"
__description__ = "Multi-layer A* interconnect router for placed IC cell layouts"

__all__ = [
    'Point', 'GridKey', 'Obstacle', 'ObstacleKind', 'Pin', 'Cell', 'Wire', 'Net',
    'RoutingConfig', 'Path', 'Via', 'RoutingStatistics', 'RouteResult',
    'DRCRule', 'DRCViolation', 'DRCResult', 'DEFAULT_TECHNOLOGY_RULES',
    'GridMapper', 'ObstacleMap', 'CostModel', 'AStarPathfinder', 'CancellationToken',
    'NetRouter', 'find_path', 'route', 'check_drc', 'insert_vias', 'optimize_path',
    'calculate_path_length', 'count_bends', 'is_blocked',
    'CellRouteException', 'ConfigurationError', 'ValidationError', 'RoutingError',
    'RoutingCancelledError', 'DRCViolationError', 'LayoutLoadError',
]
