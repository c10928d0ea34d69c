"""Domain models for design rule constraints."""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .geometry import Point
from ...shared.exceptions import DRCViolationError, ValidationError
from ...shared.utils.validation_utils import validate_non_negative_number

RULE_TYPES = ("spacing", "width", "area", "overlap")
SEVERITIES = ("error", "warning")


@dataclass(frozen=True)
class DRCRule:
    """Value object for one technology design rule."""
    type: str
    layer1: str
    value: float
    severity: str = "error"
    layer2: Optional[str] = None
    id: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        if self.type not in RULE_TYPES:
            raise ValidationError(f"Unknown DRC rule type: {self.type!r}", field="type", value=self.type)
        if self.severity not in SEVERITIES:
            raise ValidationError(
                f"Unknown DRC severity: {self.severity!r}", field="severity", value=self.severity
            )
        validate_non_negative_number(self.value, "value")

    def applies_to(self, layer: str) -> bool:
        return self.layer1 == layer


@dataclass(frozen=True)
class DRCViolation:
    """Represents a design rule violation."""
    type: str
    message: str
    position: Optional[Point]
    severity: str = "error"
    net_id: Optional[str] = None
    
    def __str__(self):
        location_str = f" at ({self.position.x:.3f}, {self.position.y:.3f})" if self.position else ""
        return f"{self.severity.upper()}: {self.message}{location_str}"


@dataclass(frozen=True)
class DRCResult:
    """Outcome of checking one path against a rule set."""
    violations: Tuple[DRCViolation, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'violations', tuple(self.violations))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> List[DRCViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> List[DRCViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def raise_for_errors(self) -> None:
        """Raise DRCViolationError when any error-severity violation is present."""
        errors = self.errors
        if errors:
            raise DRCViolationError(
                f"{len(errors)} DRC error(s): {errors[0].message}",
                violations=errors
            )


# 180nm technology table used when no rule file is configured
DEFAULT_TECHNOLOGY_RULES: Tuple[DRCRule, ...] = (
    DRCRule("spacing", "metal1", 0.28, "error", id="min_spacing_metal1",
            description="Minimum spacing between Metal1 features"),
    DRCRule("width", "metal1", 0.23, "error", id="min_width_metal1",
            description="Minimum width of Metal1 features"),
    DRCRule("area", "metal1", 0.12, "warning", id="min_area_metal1",
            description="Minimum area of Metal1 features"),
    DRCRule("overlap", "metal1", 0.14, "error", layer2="poly", id="metal1_poly_overlap",
            description="Minimum overlap of Metal1 over Poly for contacts"),
    DRCRule("spacing", "metal2", 0.28, "error", id="min_spacing_metal2",
            description="Minimum spacing between Metal2 features"),
    DRCRule("width", "metal2", 0.23, "error", id="min_width_metal2",
            description="Minimum width of Metal2 features"),
    DRCRule("width", "via1", 0.22, "error", id="via1_size",
            description="Via1 size"),
)


def rules_for_layer(layer: str, rules: Iterable[DRCRule]) -> List[DRCRule]:
    """Rules that mention a layer either as primary or secondary layer."""
    return [rule for rule in rules if rule.layer1 == layer or rule.layer2 == layer]
