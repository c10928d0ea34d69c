"""A* search over the multi-layer routing grid."""
import heapq
import itertools
import logging
import math
import threading
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..models.geometry import Point, GridKey, Obstacle
from ..models.routing import RoutingConfig, Path
from .grid import GridMapper
from .cost import CostModel
from .obstacles import ObstacleMap
from ...shared.exceptions import RoutingCancelledError, ValidationError
from ...shared.utils.validation_utils import validate_coordinates

logger = logging.getLogger(__name__)

# Free grid cells kept around the start, end and obstacles
SEARCH_MARGIN = 2

HORIZONTAL_STEPS = ((1, 0), (-1, 0))
VERTICAL_STEPS = ((0, 1), (0, -1))


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and running searches."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class AStarPathfinder:
    """A* pathfinder over GridKeys with via transitions between all layers."""

    def __init__(self, config: RoutingConfig):
        self.config = config
        self.mapper = GridMapper(config)
        self.cost_model = CostModel(config)
        if config.preferred_direction == "vertical":
            self._planar_steps = VERTICAL_STEPS + HORIZONTAL_STEPS
        else:
            self._planar_steps = HORIZONTAL_STEPS + VERTICAL_STEPS
        self.last_iterations = 0

    def find_path(self, start: Point, end: Point,
                  obstacles: Sequence[Obstacle] = (),
                  cancel_token: Optional[CancellationToken] = None) -> Optional[Path]:
        """Find a minimum-cost path from ``start`` to ``end``.

        The path is cost-optimal for step and via costs. With ``bend_cost > 0``
        the bend penalty is charged against the parent recorded when a node is
        first reached, so the result is a low-bend path but not necessarily the
        cheapest one under the full cost function.

        Returns:
            The routed Path, or None when no path exists within the obstacle set
            or the iteration cap was reached.

        Raises:
            ValidationError: For non-finite coordinates or unknown layers
            RoutingCancelledError: If ``cancel_token`` is cancelled mid-search
        """
        start_key = self.mapper.to_grid(start)
        end_key = self.mapper.to_grid(end)
        obstacle_map = obstacles if isinstance(obstacles, ObstacleMap) else ObstacleMap(obstacles)
        for obstacle in obstacle_map.obstacles:
            self._validate_obstacle(obstacle)

        self.last_iterations = 0
        if start_key == end_key:
            logger.debug(f"Start and end share grid cell {start_key}, returning trivial path")
            return self._build_path([start_key, end_key], start, end)

        if obstacle_map.is_blocked(self.mapper.to_world(end_key)):
            logger.debug(f"End point {end} is blocked, no search attempted")
            return None

        keys = self._search(start_key, end_key, obstacle_map, cancel_token)
        if keys is None:
            return None
        return self._build_path(keys, start, end)

    def _search(self, start_key: GridKey, end_key: GridKey, obstacle_map: ObstacleMap,
                cancel_token: Optional[CancellationToken]) -> Optional[List[GridKey]]:
        bounds = self._search_bounds(start_key, end_key, obstacle_map)
        to_world = self.mapper.to_world
        end_point = to_world(end_key)
        counter = itertools.count()

        open_heap: List[Tuple[float, int, GridKey]] = []
        g_score: Dict[GridKey, float] = {start_key: 0.0}
        came_from: Dict[GridKey, GridKey] = {}
        closed: Set[GridKey] = set()
        blocked_cache: Dict[GridKey, bool] = {}

        start_point = to_world(start_key)
        heapq.heappush(open_heap, (self.cost_model.heuristic(start_point, end_point), next(counter), start_key))

        iterations = 0
        while open_heap:
            _, _, current = heapq.heappop(open_heap)
            if current in closed:
                continue

            if current == end_key:
                self.last_iterations = iterations
                logger.debug(f"A* reached {end_key} after {iterations} expansions")
                return self._reconstruct(came_from, current)

            if iterations >= self.config.max_iterations:
                self.last_iterations = iterations
                logger.warning(f"A* stopped after {iterations} expansions without reaching {end_key}")
                return None
            if cancel_token is not None and cancel_token.cancelled:
                self.last_iterations = iterations
                raise RoutingCancelledError(
                    f"Search cancelled after {iterations} expansions", iterations=iterations
                )

            iterations += 1
            closed.add(current)
            current_point = to_world(current)
            parent = came_from.get(current)
            parent_point = to_world(parent) if parent is not None else None

            for neighbor in self._neighbors(current, bounds):
                if neighbor in closed:
                    continue

                blocked = blocked_cache.get(neighbor)
                if blocked is None:
                    blocked = obstacle_map.is_blocked(to_world(neighbor))
                    blocked_cache[neighbor] = blocked
                if blocked:
                    continue

                neighbor_point = to_world(neighbor)
                tentative_g = g_score[current] + self.cost_model.transition_cost(
                    parent_point, current_point, neighbor_point
                )
                if neighbor in g_score and tentative_g >= g_score[neighbor]:
                    continue

                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                f_score = tentative_g + self.cost_model.heuristic(neighbor_point, end_point)
                heapq.heappush(open_heap, (f_score, next(counter), neighbor))

        self.last_iterations = iterations
        logger.debug(f"A* exhausted open set after {iterations} expansions")
        return None

    def _neighbors(self, key: GridKey, bounds: Tuple[int, int, int, int]) -> List[GridKey]:
        """Planar neighbors on the same layer, then one via neighbor per other layer."""
        min_x, min_y, max_x, max_y = bounds
        neighbors = []
        for dx, dy in self._planar_steps:
            nx, ny = key.x + dx, key.y + dy
            if min_x <= nx <= max_x and min_y <= ny <= max_y:
                neighbors.append(GridKey(nx, ny, key.layer))
        for layer in range(len(self.config.layers)):
            if layer != key.layer:
                neighbors.append(GridKey(key.x, key.y, layer))
        return neighbors

    def _search_bounds(self, start_key: GridKey, end_key: GridKey,
                       obstacle_map: ObstacleMap) -> Tuple[int, int, int, int]:
        """Grid window that contains every useful path.

        Any path leaving the bounding box of endpoints and obstacles can be
        pulled back onto the free ring around it without getting longer.
        """
        xs = [start_key.x, end_key.x]
        ys = [start_key.y, end_key.y]
        size = self.config.grid_size
        for obstacle in obstacle_map.obstacles:
            xs.extend((math.floor(obstacle.x1 / size), math.ceil(obstacle.x2 / size)))
            ys.extend((math.floor(obstacle.y1 / size), math.ceil(obstacle.y2 / size)))
        return (min(xs) - SEARCH_MARGIN, min(ys) - SEARCH_MARGIN,
                max(xs) + SEARCH_MARGIN, max(ys) + SEARCH_MARGIN)

    @staticmethod
    def _reconstruct(came_from: Dict[GridKey, GridKey], current: GridKey) -> List[GridKey]:
        keys = [current]
        while current in came_from:
            current = came_from[current]
            keys.append(current)
        keys.reverse()
        return keys

    def _build_path(self, keys: List[GridKey], start: Point, end: Point) -> Path:
        points = [self.mapper.to_world(key) for key in keys]
        if not self.config.grid_snap:
            points[0] = start
            points[-1] = end
        return Path(points=points, width=self.config.default_width, layer=points[0].layer)

    @staticmethod
    def _validate_obstacle(obstacle: Obstacle) -> None:
        try:
            validate_coordinates(obstacle.x1, obstacle.y1)
            validate_coordinates(obstacle.x2, obstacle.y2)
        except ValidationError as e:
            raise ValidationError(f"Invalid obstacle {obstacle}: {e}", field="obstacle", value=obstacle) from e


def find_path(start: Point, end: Point, obstacles: Sequence[Obstacle],
              config: RoutingConfig,
              cancel_token: Optional[CancellationToken] = None) -> Optional[Path]:
    """Stateless entry point: route one point pair under ``config``."""
    return AStarPathfinder(config).find_path(start, end, obstacles, cancel_token)
