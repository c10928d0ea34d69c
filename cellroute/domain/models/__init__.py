"""Domain models package."""
from .geometry import Point, GridKey, Obstacle, ObstacleKind
from .layout import Pin, Cell, Wire, Net
from .routing import RoutingConfig, Path, Via, RoutingStatistics, RouteResult
from .constraints import (
    DRCRule, DRCViolation, DRCResult, DEFAULT_TECHNOLOGY_RULES, rules_for_layer
)

__all__ = [
    'Point', 'GridKey', 'Obstacle', 'ObstacleKind',
    'Pin', 'Cell', 'Wire', 'Net',
    'RoutingConfig', 'Path', 'Via', 'RoutingStatistics', 'RouteResult',
    'DRCRule', 'DRCViolation', 'DRCResult', 'DEFAULT_TECHNOLOGY_RULES', 'rules_for_layer'
]
