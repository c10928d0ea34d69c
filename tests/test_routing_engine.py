"""Tests for batch net routing."""
import math
from unittest import mock

import pytest

from cellroute.domain.models import Cell, Net, Pin, Point, RoutingConfig, DEFAULT_TECHNOLOGY_RULES
from cellroute.domain.services.pathfinder import AStarPathfinder, CancellationToken
from cellroute.domain.services.post_processing import calculate_path_length
from cellroute.domain.services.routing_engine import NetRouter, route
from cellroute.shared.exceptions import ValidationError


def _cross_cells():
    """Pins arranged so a horizontal and a vertical net must cross at (50, 50)."""
    return [
        Cell("P", "P", -20, 40, 20, 20, (Pin("out", 20, 10),)),
        Cell("Q", "Q", 100, 40, 20, 20, (Pin("in", 0, 10),)),
        Cell("R", "R", 40, -20, 20, 20, (Pin("out", 10, 20),)),
        Cell("S", "S", 40, 100, 20, 20, (Pin("in", 10, 0),)),
    ]


def _cross_nets():
    return [
        Net("a", "horizontal", "P.out", "Q.in", preferred_layer="metal2"),
        Net("b", "vertical", "R.out", "S.in", preferred_layer="metal2"),
    ]


class TestBatchRouting:
    """Routing a list of nets"""

    def test_partial_failure(self, layout_config, placed_cells, batch_nets, enclosing_wire):
        result = route(batch_nets, placed_cells, layout_config,
                       rules=DEFAULT_TECHNOLOGY_RULES, existing_wires=[enclosing_wire])

        assert [path.net_id for path in result.routes] == ["n1", "n2"]
        assert result.errors == ("Failed to route net trapped",)
        assert not result.success

        stats = result.statistics
        assert stats.nets_attempted == 3
        assert stats.nets_routed == 2
        assert stats.nets_failed == 1
        assert stats.total_length == pytest.approx(160)
        assert stats.via_count == 0
        assert stats.success_rate == pytest.approx(2 / 3)

    def test_width_violations_reported(self, layout_config, placed_cells, batch_nets, enclosing_wire):
        result = route(batch_nets, placed_cells, layout_config,
                       rules=DEFAULT_TECHNOLOGY_RULES, existing_wires=[enclosing_wire])

        assert [v.type for v in result.violations] == ["width", "width"]
        assert [v.net_id for v in result.violations] == ["n1", "n2"]
        assert result.statistics.drc_violations == 2

    def test_list_order_wins_over_priority(self, layout_config, placed_cells, batch_nets):
        reordered = [batch_nets[1], batch_nets[0]]
        result = route(reordered, placed_cells, layout_config)

        assert [path.net_id for path in result.routes] == ["n2", "n1"]

    def test_drc_disabled(self, placed_cells, batch_nets):
        config = RoutingConfig(grid_size=10, layers=("metal1", "metal2"), drc_aware=False)
        result = route(batch_nets[:2], placed_cells, config, rules=DEFAULT_TECHNOLOGY_RULES)

        assert result.violations == ()
        assert result.success

    def test_routes_connect_pins(self, layout_config, placed_cells, batch_nets):
        result = route(batch_nets[:1], placed_cells, layout_config)
        path = result.route_for("n1")

        assert path.start == Point(20, 10, "metal2")
        assert path.end == Point(100, 10, "metal2")
        assert path.width == 0.1
        assert calculate_path_length(path) == 80

    def test_optimize_collapses_straight_routes(self, placed_cells, batch_nets):
        config = RoutingConfig(grid_size=10, layers=("metal1", "metal2"), optimize=True)
        path = route(batch_nets[:1], placed_cells, config).route_for("n1")

        assert path.points == (Point(20, 10, "metal2"), Point(100, 10, "metal2"))

    def test_too_many_bends_is_a_warning(self, placed_cells):
        config = RoutingConfig(grid_size=10, layers=("metal1", "metal2"), max_bends=0)
        nets = [Net("x", "diagonal", "A.out", "D.in", preferred_layer="metal2")]
        result = route(nets, placed_cells, config)

        assert result.success
        bends = [v for v in result.violations if v.type == "bends"]
        assert len(bends) == 1
        assert bends[0].severity == "warning"
        assert result.statistics.bend_count >= 1

    def test_memory_recorded(self, layout_config, placed_cells, batch_nets):
        stats = route(batch_nets[:1], placed_cells, layout_config).statistics
        assert stats.memory_peak > 0
        assert stats.total_time >= 0

    def test_expansions_counted(self, layout_config, placed_cells, batch_nets, enclosing_wire):
        stats = route(batch_nets, placed_cells, layout_config, existing_wires=[enclosing_wire]).statistics

        assert stats.iterations >= 16
        assert stats.to_dict()["iterations"] == stats.iterations

    def test_cells_can_be_ignored(self, placed_cells):
        # B.in sits on the edge of cell B, so on metal1 it is only reachable when cells are not obstacles
        nets = [Net("n1", "low", "A.out", "B.in", preferred_layer="metal1")]
        blocked = route(nets, placed_cells, RoutingConfig(grid_size=10, layers=("metal1", "metal2")))
        ignored = route(nets, placed_cells,
                        RoutingConfig(grid_size=10, layers=("metal1", "metal2"), avoid_cells=False))

        assert blocked.errors == ("Failed to route net low",)
        assert ignored.success
        assert ignored.route_for("n1").layers_used == ("metal1",)

    def test_empty_batch(self, layout_config):
        result = route([], [], layout_config)

        assert result.routes == ()
        assert result.success
        assert result.statistics.success_rate == 0.0


class TestRoutedObstacles:
    """Earlier routes block later nets"""

    def test_later_net_crosses_on_other_layer(self, layout_config):
        result = route(_cross_nets(), _cross_cells(), layout_config)

        crossing = result.route_for("b")
        assert len(result.route_for("a").vias) == 0
        assert len(crossing.vias) == 2
        assert "metal1" in crossing.layers_used
        assert calculate_path_length(crossing) == 100

    def test_disabled_avoidance_routes_straight(self):
        config = RoutingConfig(grid_size=10, layers=("metal1", "metal2"), avoid_routed=False)
        result = route(_cross_nets(), _cross_cells(), config)

        assert len(result.route_for("b").vias) == 0

    def test_shared_pin_stays_reachable(self, layout_config, placed_cells):
        nets = [
            Net("n1", "first", "A.out", "B.in", preferred_layer="metal2"),
            Net("n4", "fanin", "C.out", "B.in", preferred_layer="metal2"),
        ]
        result = route(nets, placed_cells, layout_config)

        assert result.success
        assert result.route_for("n4").end == Point(100, 10, "metal2")


class TestBatchValidation:
    """Bad net references fail before any search"""

    @pytest.mark.parametrize("source", ["Aout", ".out", "A.", "Z.out", "A.nope"])
    def test_bad_pin_reference(self, layout_config, placed_cells, source):
        nets = [Net("n1", "good", "A.out", "B.in"), Net("n2", "bad", source, "B.in")]

        with pytest.raises(ValidationError):
            route(nets, placed_cells, layout_config)

    def test_unknown_preferred_layer(self, layout_config, placed_cells):
        with pytest.raises(ValidationError):
            route([Net("n1", "n", "A.out", "B.in", preferred_layer="poly")], placed_cells, layout_config)

    def test_zero_width(self, layout_config, placed_cells):
        with pytest.raises(ValidationError):
            route([Net("n1", "n", "A.out", "B.in", width=0)], placed_cells, layout_config)

    def test_duplicate_net_ids_keep_their_own_pins(self, layout_config, placed_cells):
        nets = [
            Net("n", "first", "A.out", "B.in", preferred_layer="metal2"),
            Net("n", "second", "C.out", "D.in", preferred_layer="metal2"),
        ]
        result = route(nets, placed_cells, layout_config)

        assert result.success
        assert [path.start for path in result.routes] == [Point(20, 10, "metal2"), Point(20, 110, "metal2")]
        assert [path.end for path in result.routes] == [Point(100, 10, "metal2"), Point(100, 110, "metal2")]

    def test_non_finite_pin_rejected_before_routing(self, layout_config, placed_cells):
        broken = Cell("X", "X", 0, 200, 20, 20, (Pin("out", math.nan, 0),))
        nets = [Net("n1", "good", "A.out", "B.in"), Net("n2", "broken", "X.out", "B.in")]

        with mock.patch.object(AStarPathfinder, "find_path") as find_path:
            with pytest.raises(ValidationError):
                route(nets, placed_cells + [broken], layout_config)
        find_path.assert_not_called()


class TestCancellation:
    """Cancelled runs return partial results"""

    def test_cancelled_before_start(self, layout_config, placed_cells, batch_nets):
        token = CancellationToken()
        token.cancel()
        result = route(batch_nets, placed_cells, layout_config, cancel_token=token)

        assert result.routes == ()
        assert result.errors == (
            "Routing cancelled before net data0",
            "Routing cancelled before net data1",
            "Routing cancelled before net trapped",
        )
        assert result.statistics.nets_failed == 3


class TestNetRouter:
    """Single-wire helpers"""

    def test_route_wire(self, layout_config, placed_cells):
        router = NetRouter(layout_config)
        path = router.route_wire(Point(20, 10, "metal2"), Point(100, 10, "metal2"), placed_cells)

        assert path.width == layout_config.default_width
        assert path.vias == ()

    def test_route_between_pins(self, layout_config, placed_cells):
        cells = {cell.id: cell for cell in placed_cells}
        router = NetRouter(layout_config)
        path = router.route_between_pins(cells["A"], "out", cells["B"], "in",
                                         placed_cells, layer="metal2")

        assert path.start == Point(20, 10, "metal2")
        assert path.end == Point(100, 10, "metal2")

    def test_route_between_unknown_pins(self, layout_config, placed_cells):
        cells = {cell.id: cell for cell in placed_cells}
        assert NetRouter(layout_config).route_between_pins(cells["A"], "nope", cells["B"], "in") is None
