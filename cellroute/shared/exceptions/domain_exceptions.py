"""Domain-specific exceptions."""
from .base_exceptions import CellRouteException, RoutingError


class LayoutLoadError(CellRouteException):
    """Exception raised when a layout document cannot be loaded."""
    
    def __init__(self, message: str, file_path: str = None, **kwargs):
        """Initialize layout load error.
        
        Args:
            message: Error message
            file_path: Path to the document that failed to load
        """
        super().__init__(message, **kwargs)
        self.file_path = file_path


class NetRoutingError(RoutingError):
    """Exception raised when a net cannot be routed."""
    
    def __init__(self, message: str, net_id: str, reason: str = None, **kwargs):
        """Initialize net routing error.
        
        Args:
            message: Error message
            net_id: ID of net that failed routing
            reason: Specific reason for routing failure
        """
        super().__init__(message, net_id=net_id, **kwargs)
        self.reason = reason


class RoutingCancelledError(RoutingError):
    """Exception raised when a search is stopped through its cancellation token."""

    def __init__(self, message: str = "Routing cancelled", iterations: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.iterations = iterations


class DRCViolationError(CellRouteException):
    """Exception raised for design rule check violations."""
    
    def __init__(self, message: str, violations: list = None, **kwargs):
        """Initialize DRC violation error.
        
        Args:
            message: Error message
            violations: The error-severity violations that triggered it
        """
        super().__init__(message, **kwargs)
        self.violations = list(violations or [])
