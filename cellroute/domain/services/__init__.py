"""Domain services package."""
from .grid import GridMapper
from .obstacles import ObstacleMap, is_blocked, obstacles_from_cells, obstacles_from_wires
from .cost import CostModel
from .pathfinder import AStarPathfinder, CancellationToken, find_path
from .post_processing import insert_vias, optimize_path, calculate_path_length, count_bends
from .drc_checker import DRCChecker, check_drc
from .routing_engine import NetRouter, route

__all__ = [
    'GridMapper', 'ObstacleMap', 'is_blocked', 'obstacles_from_cells', 'obstacles_from_wires',
    'CostModel', 'AStarPathfinder', 'CancellationToken', 'find_path',
    'insert_vias', 'optimize_path', 'calculate_path_length', 'count_bends',
    'DRCChecker', 'check_drc', 'NetRouter', 'route'
]
