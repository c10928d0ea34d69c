"""Net batch router and the NetRouter facade."""
import dataclasses
import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple

import psutil

from ..models.constraints import DRCRule, DRCViolation
from ..models.geometry import Point, Obstacle
from ..models.layout import Cell, Net, Wire, split_pin_ref
from ..models.routing import RoutingConfig, Path, RouteResult, RoutingStatistics
from .drc_checker import check_drc
from .grid import GridMapper
from .obstacles import ObstacleMap, obstacles_from_cells, obstacles_from_path, obstacles_from_wires
from .pathfinder import AStarPathfinder, CancellationToken
from .post_processing import insert_vias, optimize_path, calculate_path_length, count_bends
from ...shared.exceptions import RoutingCancelledError, ValidationError
from ...shared.utils.logging_utils import get_context_logger
from ...shared.utils.validation_utils import validate_coordinates, validate_positive_number

logger = logging.getLogger(__name__)


class NetRouter:
    """Routing engine bound to one RoutingConfig and DRC rule set.

    Holds no per-call state, so one instance may serve concurrent calls on
    independent inputs.
    """

    def __init__(self, config: RoutingConfig, rules: Sequence[DRCRule] = ()):
        self.config = config
        self.rules: Tuple[DRCRule, ...] = tuple(rules)

    def find_path(self, start: Point, end: Point, obstacles: Sequence[Obstacle] = (),
                  cancel_token: Optional[CancellationToken] = None) -> Optional[Path]:
        return AStarPathfinder(self.config).find_path(start, end, obstacles, cancel_token)

    def route_wire(self, start: Point, end: Point, cells: Sequence[Cell] = (),
                   existing_wires: Sequence[Wire] = ()) -> Optional[Path]:
        """Route one wire around placed cells and existing wires, with vias annotated."""
        obstacles = self._base_obstacles(cells, existing_wires)
        path = self.find_path(start, end, obstacles)
        if path is None:
            return None
        return self._finish(path, width=self.config.default_width)

    def route_between_pins(self, from_cell: Cell, from_pin: str, to_cell: Cell, to_pin: str,
                           cells: Sequence[Cell] = (), existing_wires: Sequence[Wire] = (),
                           layer: Optional[str] = None) -> Optional[Path]:
        """Route between two named cell pins; None if either pin does not exist."""
        layer = layer or self.config.layers[0]
        start = from_cell.pin_position(from_pin, layer)
        end = to_cell.pin_position(to_pin, layer)
        if start is None or end is None:
            logger.warning(f"Cannot route {from_cell.id}.{from_pin} -> {to_cell.id}.{to_pin}: unknown pin")
            return None
        return self.route_wire(start, end, cells, existing_wires)

    def route(self, nets: Sequence[Net], cells: Sequence[Cell] = (),
              existing_wires: Sequence[Wire] = (),
              cancel_token: Optional[CancellationToken] = None) -> RouteResult:
        """Route every net in list order and aggregate the outcome.

        Raises:
            ValidationError: If a net references an unknown cell, pin or layer
        """
        start_time = time.time()
        endpoints = self._resolve_endpoints(nets, cells)
        base_obstacles = self._base_obstacles(cells, existing_wires)
        routed: List[Tuple[Path, List[Obstacle]]] = []

        routes: List[Path] = []
        errors: List[str] = []
        violations: List[DRCViolation] = []
        stats = RoutingStatistics(nets_attempted=len(nets))
        pathfinder = AStarPathfinder(self.config)

        logger.info(f"Routing {len(nets)} nets on layers {list(self.config.layers)}")

        for index, (net, (start, end)) in enumerate(zip(nets, endpoints)):
            net_logger = get_context_logger(__name__, net=net.name)
            obstacle_map = ObstacleMap(base_obstacles + self._routed_obstacles(routed, start, end))

            try:
                raw_path = pathfinder.find_path(start, end, obstacle_map, cancel_token)
            except RoutingCancelledError:
                stats.iterations += pathfinder.last_iterations
                pending = nets[index:]
                net_logger.warning(f"Routing cancelled, {len(pending)} net(s) left unrouted")
                errors.extend(f"Routing cancelled before net {pending_net.name}" for pending_net in pending)
                stats.nets_failed += len(pending)
                break

            stats.iterations += pathfinder.last_iterations

            if raw_path is None:
                net_logger.warning(f"No path after {pathfinder.last_iterations} expansions")
                errors.append(f"Failed to route net {net.name}")
                stats.nets_failed += 1
                continue

            path = self._finish(raw_path, width=net.width, net_id=net.id)
            length = calculate_path_length(path)
            bends = count_bends(path)

            if self.config.drc_aware:
                drc_result = check_drc(path, self.rules)
                violations.extend(drc_result.violations)
            if bends > self.config.max_bends:
                violations.append(DRCViolation(
                    type="bends",
                    message=f"{bends} bends exceed maximum {self.config.max_bends}",
                    position=path.points[0],
                    severity="warning",
                    net_id=net.id,
                ))

            routes.append(path)
            if self.config.avoid_routed:
                routed.append((path, obstacles_from_path(path)))

            stats.nets_routed += 1
            stats.total_length += length
            stats.via_count += len(path.vias)
            stats.bend_count += bends
            net_logger.info(f"Routed: length={length:.2f} vias={len(path.vias)} bends={bends}")

        stats.drc_violations = len(violations)
        stats.total_time = time.time() - start_time
        stats.memory_peak = psutil.Process().memory_info().rss / (1024 * 1024)

        logger.info(
            f"Routing complete: {stats.nets_routed}/{stats.nets_attempted} nets, "
            f"length={stats.total_length:.2f}, vias={stats.via_count}, "
            f"expansions={stats.iterations}, "
            f"DRC violations={stats.drc_violations}"
        )
        return RouteResult(routes=routes, statistics=stats, errors=errors, violations=violations)

    def _finish(self, path: Path, width: float, net_id: Optional[str] = None) -> Path:
        path = dataclasses.replace(path, width=width, net_id=net_id)
        path = insert_vias(path, self.config.layers, diameter=self.config.via_diameter)
        if self.config.optimize:
            path = optimize_path(path)
        return path

    def _routed_obstacles(self, routed: List[Tuple[Path, List[Obstacle]]],
                          start: Point, end: Point) -> List[Obstacle]:
        """Obstacles from earlier wires, skipping wires that share a pin with this net."""
        mapper = GridMapper(self.config)
        pins = {mapper.to_grid(start), mapper.to_grid(end)}
        obstacles = []
        for path, path_obstacles in routed:
            shared_pin = {mapper.to_grid(path.start), mapper.to_grid(path.end)} & pins
            if not shared_pin:
                obstacles.extend(path_obstacles)
        return obstacles

    def _base_obstacles(self, cells: Sequence[Cell], existing_wires: Sequence[Wire]) -> List[Obstacle]:
        obstacles: List[Obstacle] = []
        if self.config.avoid_cells:
            # Cells occupy the first (lowest) routing layer only
            obstacles.extend(obstacles_from_cells(cells, self.config.layers[0]))
        obstacles.extend(obstacles_from_wires(existing_wires))
        return obstacles

    def _resolve_endpoints(self, nets: Sequence[Net],
                           cells: Sequence[Cell]) -> List[Tuple[Point, Point]]:
        """Resolve every net's pin references before any search starts.

        The result is aligned with ``nets``; net ids need not be unique.
        """
        cells_by_id = {cell.id: cell for cell in cells}
        endpoints = []
        for net in nets:
            layer = net.preferred_layer or self.config.layers[0]
            self.config.layer_index(layer)
            validate_positive_number(net.width, "width")
            endpoints.append((
                self._resolve_pin(net, net.source_pin, cells_by_id, layer),
                self._resolve_pin(net, net.target_pin, cells_by_id, layer),
            ))
        return endpoints

    @staticmethod
    def _resolve_pin(net: Net, ref: str, cells_by_id: Dict[str, Cell], layer: str) -> Point:
        parts = split_pin_ref(ref)
        if parts is None:
            raise ValidationError(
                f"Net {net.name}: malformed pin reference {ref!r}, expected 'cell.pin'",
                field="pin", value=ref
            )
        cell_id, pin_name = parts
        cell = cells_by_id.get(cell_id)
        if cell is None:
            raise ValidationError(f"Net {net.name}: unknown cell {cell_id!r}", field="pin", value=ref)
        point = cell.pin_position(pin_name, layer)
        if point is None:
            raise ValidationError(
                f"Net {net.name}: cell {cell_id!r} has no pin {pin_name!r}", field="pin", value=ref
            )
        try:
            validate_coordinates(point.x, point.y)
        except ValidationError as e:
            raise ValidationError(f"Net {net.name}: pin {ref!r} has invalid position: {e}",
                                  field="pin", value=ref) from e
        return point


def route(nets: Sequence[Net], cells: Sequence[Cell], config: RoutingConfig,
          rules: Sequence[DRCRule] = (), existing_wires: Sequence[Wire] = (),
          cancel_token: Optional[CancellationToken] = None) -> RouteResult:
    """Stateless entry point for batch routing."""
    return NetRouter(config, rules).route(nets, cells, existing_wires, cancel_token)
