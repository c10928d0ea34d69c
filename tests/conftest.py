"""Test configuration and fixtures for cellroute."""
import pytest

from cellroute.domain.models import Cell, Pin, Net, Point, Wire, RoutingConfig


@pytest.fixture
def two_layer_config():
    """The 20-unit, two-layer configuration used throughout the examples."""
    return RoutingConfig(grid_size=20, layers=("m1", "m2"), via_cost=10, bend_cost=0)


@pytest.fixture
def layout_config():
    """Finer grid on the default metal stack for batch routing tests."""
    return RoutingConfig(grid_size=10, layers=("metal1", "metal2"), via_cost=10)


def _pin_cell(cell_id, x, y, pin_name, pin_x, pin_y, width=20, height=20):
    return Cell(id=cell_id, name=cell_id, x=x, y=y, width=width, height=height,
                pins=(Pin(pin_name, pin_x, pin_y),))


@pytest.fixture
def placed_cells():
    """Four driver/receiver cells and one cell whose input is walled in on metal2."""
    return [
        _pin_cell("A", 0, 0, "out", 20, 10),
        _pin_cell("B", 100, 0, "in", 0, 10),
        _pin_cell("C", 0, 100, "out", 20, 10),
        _pin_cell("D", 100, 100, "in", 0, 10),
        _pin_cell("E", 200, 0, "out", 0, 10, width=80, height=60),
        _pin_cell("V", 200, 200, "in", 40, 30, width=80, height=60),
    ]


@pytest.fixture
def enclosing_wire():
    """A closed metal2 ring around V.in at (240, 230)."""
    corners = [(220, 210), (260, 210), (260, 250), (220, 250), (220, 210)]
    return Wire(id="ring", name="ring",
                points=tuple(Point(x, y, "metal2") for x, y in corners), width=0.1)


@pytest.fixture
def batch_nets():
    """Two free nets and one whose target is enclosed."""
    return [
        Net("n1", "data0", "A.out", "B.in", priority=5, width=0.1, preferred_layer="metal2"),
        Net("n2", "data1", "C.out", "D.in", priority=1, width=0.1, preferred_layer="metal2"),
        Net("n3", "trapped", "E.out", "V.in", priority=0, width=0.1, preferred_layer="metal2"),
    ]


def sample_layout_dict():
    """Layout document in the editor's JSON shape."""
    return {
        "name": "two_inverters",
        "cells": [
            {"id": "A", "name": "INV_1", "x": 0, "y": 0, "width": 20, "height": 20,
             "pins": [{"name": "out", "x": 20, "y": 10, "direction": "output"}]},
            {"id": "B", "name": "INV_2", "x": 100, "y": 0, "width": 20, "height": 20,
             "pins": [{"name": "in", "x": 0, "y": 10, "direction": "input"}]},
        ],
        "nets": [
            {"id": "n1", "name": "a_to_b", "startPin": "A.out", "endPin": "B.in",
             "priority": 1, "width": 0.3, "preferredLayer": "metal2"},
        ],
        "wires": [],
        "rules": [
            {"type": "width", "layer1": "metal2", "value": 0.23, "severity": "error"},
        ],
    }


@pytest.fixture
def layout_dict():
    return sample_layout_dict()
