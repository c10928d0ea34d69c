"""Validation utilities for cellroute."""
import math
from typing import Any, Sequence

from ..exceptions import ValidationError


def validate_coordinates(x: float, y: float) -> None:
    """Validate coordinate values before they enter a search.
    
    Args:
        x: X coordinate
        y: Y coordinate
        
    Raises:
        ValidationError: If coordinates are not finite numbers
    """
    for name, value in (("x", x), ("y", y)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"{name.upper()} coordinate must be numeric, got {type(value).__name__}",
                field=name, value=value
            )
        if not math.isfinite(value):
            raise ValidationError(
                f"{name.upper()} coordinate must be finite, got {value}",
                field=name, value=value
            )


def validate_layer_name(layer: str, layers: Sequence[str]) -> None:
    """Validate that a layer name is one of the configured routing layers.
    
    Raises:
        ValidationError: If the layer is unknown
    """
    if layer not in layers:
        raise ValidationError(
            f"Unknown layer {layer!r}, expected one of {list(layers)}",
            field="layer", value=layer
        )


def validate_positive_number(value: Any, field_name: str) -> None:
    """Validate that a value is a positive finite number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value).__name__}",
            field=field_name, value=value
        )
    
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(
            f"{field_name} must be positive, got {value}",
            field=field_name, value=value
        )


def validate_non_negative_number(value: Any, field_name: str) -> None:
    """Validate that a value is a non-negative finite number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not non-negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value).__name__}",
            field=field_name, value=value
        )
    
    if not math.isfinite(value) or value < 0:
        raise ValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name, value=value
        )
