"""Tests for the obstacle model."""
import itertools

from cellroute.domain.models import Cell, Obstacle, ObstacleKind, Point, Wire, Path
from cellroute.domain.services.obstacles import (
    ObstacleMap, is_blocked, obstacles_from_cells, obstacles_from_path, obstacles_from_wires
)


class TestIsBlocked:
    """Inclusive rectangle containment per layer"""

    def test_interior_point_blocked(self):
        obstacles = [Obstacle(0, 0, 40, 20, "m1")]
        assert is_blocked(Point(10, 10, "m1"), obstacles)

    def test_edges_and_corners_are_blocked(self):
        # Bounds are inclusive on all four sides, so points exactly on the
        # edge of a cell count as inside it.
        obstacles = [Obstacle(0, 0, 40, 20, "m1")]

        for x, y in [(0, 0), (40, 20), (0, 20), (40, 0), (20, 0), (40, 10)]:
            assert is_blocked(Point(x, y, "m1"), obstacles)

    def test_just_outside_is_free(self):
        obstacles = [Obstacle(0, 0, 40, 20, "m1")]

        assert not is_blocked(Point(40.001, 10, "m1"), obstacles)
        assert not is_blocked(Point(-0.001, 10, "m1"), obstacles)

    def test_other_layer_is_free(self):
        obstacles = [Obstacle(0, 0, 40, 20, "m1")]
        assert not is_blocked(Point(10, 10, "m2"), obstacles)

    def test_reversed_corners_are_normalised(self):
        obstacle = Obstacle(40, 20, 0, 0, "m1")
        assert (obstacle.x1, obstacle.y1, obstacle.x2, obstacle.y2) == (0, 0, 40, 20)

    def test_kind_accepts_string(self):
        assert Obstacle(0, 0, 1, 1, "m1", kind="cell").kind is ObstacleKind.CELL


class TestObstacleMap:
    """Vectorized index agrees with the plain predicate"""

    def test_matches_predicate(self):
        obstacles = [
            Obstacle(0, 0, 40, 20, "m1"),
            Obstacle(60, -20, 80, 100, "m1", ObstacleKind.ROUTE),
            Obstacle(-40, 40, 20, 60, "m2", ObstacleKind.CELL),
        ]
        obstacle_map = ObstacleMap(obstacles)

        for x, y, layer in itertools.product(range(-60, 120, 10), range(-40, 120, 10), ("m1", "m2", "m3")):
            point = Point(x, y, layer)
            assert obstacle_map.is_blocked(point) == is_blocked(point, obstacles)

    def test_counts(self):
        obstacle_map = ObstacleMap([Obstacle(0, 0, 1, 1, "m1"), Obstacle(0, 0, 1, 1, "m2"),
                                    Obstacle(5, 5, 6, 6, "m1")])

        assert len(obstacle_map) == 3
        assert obstacle_map.count("m1") == 2
        assert obstacle_map.count("m3") == 0

    def test_empty_map_blocks_nothing(self):
        assert not ObstacleMap().is_blocked(Point(0, 0, "m1"))


class TestObstacleDerivation:
    """Obstacles built from cells and wires"""

    def test_cells_use_their_bounds_on_one_layer(self):
        cells = [Cell("u1", "INV", 10, 20, width=30, height=40), Cell("u2", "NAND", 100, 0)]
        obstacles = obstacles_from_cells(cells, "metal1")

        assert obstacles[0] == Obstacle(10, 20, 40, 60, "metal1", ObstacleKind.CELL)
        # Cells without explicit size use the default 80 x 60 footprint
        assert (obstacles[1].x2, obstacles[1].y2) == (180, 60)
        assert all(o.layer == "metal1" for o in obstacles)

    def test_wire_segments_are_widened(self):
        wire = Wire("w1", "clk", (Point(0, 0, "m2"), Point(100, 0, "m2")), width=2.0)
        obstacles = obstacles_from_wires([wire])

        assert obstacles == [Obstacle(-1, -1, 101, 1, "m2", ObstacleKind.ROUTE)]

    def test_path_via_blocks_both_layers(self):
        path = Path(points=(Point(0, 0, "m1"), Point(0, 0, "m2"), Point(20, 0, "m2")), width=0.2)
        layers = sorted(o.layer for o in obstacles_from_path(path))

        assert layers == ["m1", "m2", "m2"]
        assert is_blocked(Point(10, 0, "m2"), obstacles_from_path(path))
