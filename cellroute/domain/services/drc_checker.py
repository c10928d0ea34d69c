"""Domain service for single-path design rule checking."""
import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..models.constraints import DRCRule, DRCViolation, DRCResult
from ..models.routing import Path

logger = logging.getLogger(__name__)


def check_drc(path: Path, rules: Iterable[DRCRule]) -> DRCResult:
    """Check a finished path against the rules for its primary layer.

    Only width rules can be decided from one path. Spacing, area and overlap
    rules need the surrounding layout and are left to a full-layout pass.
    """
    violations = []
    for rule in rules:
        if not rule.applies_to(path.layer):
            continue

        if rule.type == "width" and path.width < rule.value:
            violations.append(DRCViolation(
                type="width",
                message=f"Width {path.width} < minimum {rule.value}",
                position=path.points[0],
                severity=rule.severity,
                net_id=path.net_id,
            ))

    return DRCResult(violations=tuple(violations))


class DRCChecker:
    """Rule-set holder for repeated path checks."""
    
    def __init__(self, rules: Sequence[DRCRule] = ()):
        self.rules: Tuple[DRCRule, ...] = tuple(rules)
    
    def check_path(self, path: Path) -> DRCResult:
        result = check_drc(path, self.rules)
        if result.violations:
            logger.debug(f"Path for net {path.net_id}: {len(result.violations)} DRC violation(s)")
        return result
    
    def check_paths(self, paths: Iterable[Path]) -> List[DRCViolation]:
        violations = []
        for path in paths:
            violations.extend(self.check_path(path).violations)
        return violations
    
    def generate_drc_report(self, violations: Iterable[DRCViolation]) -> Dict[str, Any]:
        """Generate a summary report grouped by violation type and net."""
        violations = list(violations)
        report = {
            'total_violations': len(violations),
            'errors': len([v for v in violations if v.severity == 'error']),
            'warnings': len([v for v in violations if v.severity == 'warning']),
            'violations_by_type': {},
            'violations_by_net': {},
            'violations': [str(v) for v in violations]
        }
        
        for violation in violations:
            by_type = report['violations_by_type']
            by_type[violation.type] = by_type.get(violation.type, 0) + 1
            if violation.net_id:
                by_net = report['violations_by_net']
                by_net[violation.net_id] = by_net.get(violation.net_id, 0) + 1
        
        return report
