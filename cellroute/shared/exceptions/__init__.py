"""Shared exceptions for cellroute."""
from .base_exceptions import (
    CellRouteException, ConfigurationError, ValidationError, RoutingError
)
from .domain_exceptions import (
    LayoutLoadError, NetRoutingError, RoutingCancelledError, DRCViolationError
)

__all__ = [
    'CellRouteException', 'ConfigurationError', 'ValidationError', 'RoutingError',
    'LayoutLoadError', 'NetRoutingError', 'RoutingCancelledError', 'DRCViolationError'
]
