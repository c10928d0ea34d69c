"""Domain models for placed cells, existing wires and net requests."""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .geometry import Point

DEFAULT_CELL_WIDTH = 80.0
DEFAULT_CELL_HEIGHT = 60.0
PIN_SEPARATOR = "."


@dataclass(frozen=True)
class Pin:
    """Cell pin; coordinates are offsets from the owning cell's origin."""
    name: str
    x: float
    y: float
    direction: str = "inout"


@dataclass(frozen=True)
class Cell:
    """A placed cell instance."""
    id: str
    name: str
    x: float
    y: float
    width: float = DEFAULT_CELL_WIDTH
    height: float = DEFAULT_CELL_HEIGHT
    pins: Tuple[Pin, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'pins', tuple(self.pins))

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box as (x1, y1, x2, y2)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def get_pin(self, name: str) -> Optional[Pin]:
        for pin in self.pins:
            if pin.name == name:
                return pin
        return None

    def pin_position(self, name: str, layer: str) -> Optional[Point]:
        """Absolute layout position of a pin, or None if the cell has no such pin."""
        pin = self.get_pin(name)
        if pin is None:
            return None
        return Point(self.x + pin.x, self.y + pin.y, layer)


@dataclass(frozen=True)
class Wire:
    """An already routed wire supplied by the caller."""
    id: str
    name: str
    points: Tuple[Point, ...]
    width: float = 0.1

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))


@dataclass(frozen=True)
class Net:
    """A two-pin connection request.

    ``source_pin`` and ``target_pin`` reference pins as ``"<cell_id>.<pin_name>"``.
    ``priority`` is carried for the caller; the batch router keeps list order.
    """
    id: str
    name: str
    source_pin: str
    target_pin: str
    priority: int = 0
    width: float = 0.1
    preferred_layer: Optional[str] = None


def split_pin_ref(ref: str) -> Optional[Tuple[str, str]]:
    """Split ``"cell.pin"`` into its parts; cell ids may not contain dots, pin names may."""
    if not isinstance(ref, str) or PIN_SEPARATOR not in ref:
        return None
    cell_id, pin_name = ref.split(PIN_SEPARATOR, 1)
    if not cell_id or not pin_name:
        return None
    return cell_id, pin_name
