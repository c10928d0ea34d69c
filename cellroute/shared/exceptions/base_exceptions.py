"""Base exceptions for cellroute."""


class CellRouteException(Exception):
    """Base exception class for cellroute."""
    
    def __init__(self, message: str, error_code: str = None, details: dict = None):
        """Initialize exception.
        
        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            details: Optional additional error details
        """
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
    
    def __str__(self) -> str:
        """Return string representation of exception."""
        base_msg = super().__str__()
        if self.error_code:
            return f"[{self.error_code}] {base_msg}"
        return base_msg


class ConfigurationError(CellRouteException):
    """Exception raised for invalid routing configuration or settings."""
    pass


class ValidationError(CellRouteException):
    """Exception raised for malformed input geometry or references."""
    
    def __init__(self, message: str, field: str = None, value=None, **kwargs):
        """Initialize validation error.
        
        Args:
            message: Error message
            field: Field that failed validation
            value: Invalid value
        """
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class RoutingError(CellRouteException):
    """Exception raised for routing-related errors."""
    
    def __init__(self, message: str, net_id: str = None, **kwargs):
        """Initialize routing error.
        
        Args:
            message: Error message
            net_id: Net ID being routed when the error occurred
        """
        super().__init__(message, **kwargs)
        self.net_id = net_id
