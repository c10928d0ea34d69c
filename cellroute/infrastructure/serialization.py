#!/usr/bin/env python3
"""
cellroute Serialization Module

Reads layout documents handed over by the placement/editor layer and writes
routing results back out.

File Formats:
- Layout document: cells, nets, existing wires and DRC rules (JSON, optionally gzipped)
- Route document: routed paths, vias, statistics, errors and DRC violations
"""

import gzip
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..domain.models.constraints import DRCRule, DRCViolation
from ..domain.models.geometry import Point
from ..domain.models.layout import Cell, Net, Pin, Wire
from ..domain.models.routing import Path as RoutedPath, RouteResult, Via
from ..shared.exceptions import LayoutLoadError, ValidationError

logger = logging.getLogger(__name__)

LAYOUT_FORMAT_VERSION = "1.0"
ROUTES_FORMAT_VERSION = "1.0"


@dataclass
class LayoutDocument:
    """Everything the router needs from a layout file."""
    cells: List[Cell] = field(default_factory=list)
    nets: List[Net] = field(default_factory=list)
    wires: List[Wire] = field(default_factory=list)
    rules: List[DRCRule] = field(default_factory=list)
    name: str = "untitled"


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key; accepts both snake_case and the editor's camelCase names."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        with gzip.open(path, 'rt', encoding='utf-8') as f:
            return json.load(f)
    except (gzip.BadGzipFile, OSError):
        pass
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _parse_point(data: Dict[str, Any], default_layer: Optional[str] = None) -> Point:
    return Point(float(data['x']), float(data['y']), _get(data, 'layer', default=default_layer))


def parse_rules(rules_data: List[Dict[str, Any]]) -> List[DRCRule]:
    return [
        DRCRule(
            type=_get(rule, 'type', 'category'),
            layer1=rule['layer1'],
            value=float(rule['value']),
            severity=rule.get('severity', 'error'),
            layer2=rule.get('layer2'),
            id=rule.get('id'),
            description=rule.get('description', ''),
        )
        for rule in rules_data
    ]


def parse_layout(data: Dict[str, Any]) -> LayoutDocument:
    """Build a LayoutDocument from already-decoded JSON.

    Raises:
        LayoutLoadError: If required keys are missing or values are malformed
    """
    try:
        cells = [
            Cell(
                id=str(cell['id']),
                name=cell.get('name', str(cell['id'])),
                x=float(cell['x']),
                y=float(cell['y']),
                width=float(cell.get('width', 80)),
                height=float(cell.get('height', 60)),
                pins=tuple(
                    Pin(pin['name'], float(pin['x']), float(pin['y']), pin.get('direction', 'inout'))
                    for pin in cell.get('pins', [])
                ),
            )
            for cell in data.get('cells', [])
        ]
        nets = [
            Net(
                id=str(net['id']),
                name=net.get('name', str(net['id'])),
                source_pin=_get(net, 'source_pin', 'startPin'),
                target_pin=_get(net, 'target_pin', 'endPin'),
                priority=int(net.get('priority', 0)),
                width=float(net.get('width', 0.1)),
                preferred_layer=_get(net, 'preferred_layer', 'preferredLayer'),
            )
            for net in data.get('nets', [])
        ]
        wires = [
            Wire(
                id=str(wire['id']),
                name=wire.get('name', str(wire['id'])),
                points=tuple(_parse_point(p, wire.get('layer')) for p in _get(wire, 'points', 'path', default=[])),
                width=float(wire.get('width', 0.1)),
            )
            for wire in data.get('wires', [])
        ]
        rules = parse_rules(data.get('rules', []))
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise LayoutLoadError(f"Malformed layout document: {e}") from e

    return LayoutDocument(cells=cells, nets=nets, wires=wires, rules=rules,
                          name=data.get('name', 'untitled'))


def load_layout(path: Union[str, Path]) -> LayoutDocument:
    """Load a layout document (plain or gzipped JSON) from disk."""
    try:
        data = _read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutLoadError(f"Cannot read layout {path}: {e}", file_path=str(path)) from e
    if not isinstance(data, dict):
        raise LayoutLoadError(f"Layout {path} must contain a JSON object", file_path=str(path))

    try:
        document = parse_layout(data)
    except LayoutLoadError as e:
        e.file_path = str(path)
        raise
    logger.info(
        f"Loaded layout {document.name}: {len(document.cells)} cells, "
        f"{len(document.nets)} nets, {len(document.wires)} wires, {len(document.rules)} rules"
    )
    return document


def load_rules(path: Union[str, Path]) -> List[DRCRule]:
    """Load a technology rule list; accepts a bare list or an object with a 'rules' key."""
    try:
        data = _read_json(path)
        if isinstance(data, dict):
            data = data.get('rules', [])
        return parse_rules(data)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as e:
        raise LayoutLoadError(f"Cannot read rules {path}: {e}", file_path=str(path)) from e


def _point_to_dict(point: Point) -> Dict[str, Any]:
    return {'x': point.x, 'y': point.y, 'layer': point.layer}


def _via_to_dict(via: Via) -> Dict[str, Any]:
    return {
        'position': _point_to_dict(via.position),
        'from_layer': via.from_layer,
        'to_layer': via.to_layer,
        'diameter': via.diameter,
    }


def _path_to_dict(path: RoutedPath) -> Dict[str, Any]:
    return {
        'net_id': path.net_id,
        'layer': path.layer,
        'width': path.width,
        'points': [_point_to_dict(p) for p in path.points],
        'vias': [_via_to_dict(v) for v in path.vias],
    }


def _violation_to_dict(violation: DRCViolation) -> Dict[str, Any]:
    return {
        'type': violation.type,
        'message': violation.message,
        'position': _point_to_dict(violation.position) if violation.position else None,
        'severity': violation.severity,
        'net_id': violation.net_id,
    }


def route_result_to_dict(result: RouteResult) -> Dict[str, Any]:
    """Serializable form of a RouteResult."""
    return {
        'format': 'cellroute routes',
        'version': ROUTES_FORMAT_VERSION,
        'timestamp': datetime.now().isoformat(),
        'routes': [_path_to_dict(path) for path in result.routes],
        'statistics': result.statistics.to_dict(),
        'errors': list(result.errors),
        'violations': [_violation_to_dict(v) for v in result.violations],
    }


def export_route_result(result: RouteResult, output_path: Union[str, Path],
                        compress: bool = False) -> bool:
    """
    Write a RouteResult as JSON.

    Returns:
        True if export succeeded, False otherwise
    """
    output_path = Path(output_path)
    json_str = json.dumps(route_result_to_dict(result), indent=2)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if compress:
            with gzip.open(output_path, 'wt', encoding='utf-8') as f:
                f.write(json_str)
        else:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(json_str)
    except OSError as e:
        logger.error(f"Failed to export routes to {output_path}: {e}")
        return False

    logger.info(f"Exported {len(result.routes)} routes to {output_path} ({len(json_str)} bytes)")
    return True


def layout_to_dict(document: LayoutDocument) -> Dict[str, Any]:
    """Inverse of parse_layout, used for fixtures and round trips."""
    return {
        'format': 'cellroute layout',
        'version': LAYOUT_FORMAT_VERSION,
        'name': document.name,
        'cells': [
            {
                'id': cell.id, 'name': cell.name, 'x': cell.x, 'y': cell.y,
                'width': cell.width, 'height': cell.height,
                'pins': [
                    {'name': pin.name, 'x': pin.x, 'y': pin.y, 'direction': pin.direction}
                    for pin in cell.pins
                ],
            }
            for cell in document.cells
        ],
        'nets': [
            {
                'id': net.id, 'name': net.name, 'source_pin': net.source_pin,
                'target_pin': net.target_pin, 'priority': net.priority,
                'width': net.width, 'preferred_layer': net.preferred_layer,
            }
            for net in document.nets
        ],
        'wires': [
            {
                'id': wire.id, 'name': wire.name, 'width': wire.width,
                'points': [_point_to_dict(p) for p in wire.points],
            }
            for wire in document.wires
        ],
        'rules': [
            {
                'type': rule.type, 'layer1': rule.layer1, 'layer2': rule.layer2,
                'value': rule.value, 'severity': rule.severity, 'id': rule.id,
                'description': rule.description,
            }
            for rule in document.rules
        ],
    }
