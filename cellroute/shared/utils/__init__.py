"""Shared utilities."""
from .logging_utils import setup_logging, get_logger, get_context_logger
from .validation_utils import (
    validate_coordinates, validate_layer_name, validate_positive_number,
    validate_non_negative_number
)

__all__ = [
    'setup_logging', 'get_logger', 'get_context_logger',
    'validate_coordinates', 'validate_layer_name', 'validate_positive_number',
    'validate_non_negative_number'
]
