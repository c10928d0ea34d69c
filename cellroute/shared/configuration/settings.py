"""Application settings dataclasses."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

VALID_DIRECTIONS = ("horizontal", "vertical", "any")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _number_error(name: str, value, minimum: float = 0.0, strict: bool = False,
                  integer: bool = False) -> Optional[str]:
    """Error message for a value that is not a number in range, else None."""
    kinds = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, kinds):
        expected = "an integer" if integer else "numeric"
        return f"{name} must be {expected}, got {type(value).__name__}"
    if value != value or value in (float("inf"), float("-inf")):
        return f"{name} must be finite, got {value}"
    if strict and value <= minimum:
        return f"{name} must be positive, got {value}"
    if not strict and value < minimum:
        return f"{name} must be non-negative, got {value}"
    return None


@dataclass
class RoutingSettings:
    """Default parameters for a routing pass."""
    grid_size: float = 20.0
    layers: List[str] = field(default_factory=lambda: ["metal1", "metal2", "metal3"])
    via_cost: float = 10.0
    bend_cost: float = 0.0
    max_bends: int = 10
    drc_aware: bool = True
    grid_snap: bool = True
    preferred_direction: str = "any"
    max_iterations: int = 50000
    via_diameter: float = 0.22
    default_width: float = 0.1
    optimize: bool = False
    avoid_routed: bool = True
    avoid_cells: bool = True

    def validate(self) -> List[str]:
        errors = []
        if not isinstance(self.layers, (list, tuple)) or not all(isinstance(layer, str) for layer in self.layers):
            errors.append("layers must be a list of layer names")
        elif not self.layers:
            errors.append("layers must not be empty")
        elif len(set(self.layers)) != len(self.layers):
            errors.append("layers must be unique")

        checks = [
            _number_error("grid_size", self.grid_size, strict=True),
            _number_error("via_cost", self.via_cost),
            _number_error("bend_cost", self.bend_cost),
            _number_error("via_diameter", self.via_diameter),
            _number_error("default_width", self.default_width),
            _number_error("max_bends", self.max_bends, integer=True),
            _number_error("max_iterations", self.max_iterations, strict=True, integer=True),
        ]
        errors.extend(error for error in checks if error)

        for name in ("drc_aware", "grid_snap", "optimize", "avoid_routed", "avoid_cells"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be true or false")
        if self.preferred_direction not in VALID_DIRECTIONS:
            errors.append(f"preferred_direction must be one of {VALID_DIRECTIONS}")
        return errors

    def to_routing_config(self):
        """Build the immutable RoutingConfig used by the engine."""
        from ...domain.models.routing import RoutingConfig

        return RoutingConfig(
            grid_size=self.grid_size,
            layers=tuple(self.layers),
            via_cost=self.via_cost,
            bend_cost=self.bend_cost,
            max_bends=self.max_bends,
            drc_aware=self.drc_aware,
            grid_snap=self.grid_snap,
            preferred_direction=self.preferred_direction,
            max_iterations=self.max_iterations,
            via_diameter=self.via_diameter,
            default_width=self.default_width,
            optimize=self.optimize,
            avoid_routed=self.avoid_routed,
            avoid_cells=self.avoid_cells,
        )


@dataclass
class DRCSettings:
    """Where the DRC rule table comes from."""
    use_default_rules: bool = True
    rules_file: Optional[str] = None

    def validate(self) -> List[str]:
        if not self.use_default_rules and not self.rules_file:
            return ["rules_file is required when use_default_rules is false"]
        return []


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = "INFO"
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    console_output: bool = True
    file_output: bool = False
    log_file: str = "logs/cellroute.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    component_levels: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> List[str]:
        errors = []
        if not isinstance(self.level, str) or self.level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.level}")
        for name in ("max_file_size_mb", "backup_count"):
            error = _number_error(name, getattr(self, name), integer=True)
            if error:
                errors.append(error)
        if not isinstance(self.component_levels, dict):
            errors.append("component_levels must map logger names to levels")
            return errors
        for component, level in self.component_levels.items():
            if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
                errors.append(f"Invalid log level for {component}: {level}")
        return errors


@dataclass
class ApplicationSettings:
    """Top-level settings container."""
    version: str = "1.0.0"
    config_version: int = 1
    routing: RoutingSettings = field(default_factory=RoutingSettings)
    drc: DRCSettings = field(default_factory=DRCSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def validate(self) -> Dict[str, List[str]]:
        """Validate every settings category.

        Returns:
            Mapping of category name to a (possibly empty) list of errors.
        """
        return {
            "routing": self.routing.validate(),
            "drc": self.drc.validate(),
            "logging": self.logging.validate(),
        }
