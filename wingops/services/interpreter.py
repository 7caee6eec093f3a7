"""
Result Interpretation

Turns provider output and coverage documents into small summary objects.
"""

import xml.etree.ElementTree as ET
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from wingops.exceptions import ParseError
from wingops.models.coverage import CoverageEvaluation, CoverageSummary
from wingops.models.deployment import (
    DeploymentOutputs,
    DeploymentResult,
    PlannedChange,
    PlanResult,
)


def parse_azure_outputs(raw: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Flatten ARM outputs ({name: {type, value}}) into name -> string."""
    outputs: Dict[str, str] = {}
    for name, entry in (raw or {}).items():
        if isinstance(entry, dict) and "value" in entry:
            value = entry["value"]
        else:
            value = entry
        outputs[name] = "" if value is None else str(value)
    return outputs


def parse_what_if(raw: Dict[str, Any]) -> PlanResult:
    """Convert a what-if response into a PlanResult."""
    changes = [
        PlannedChange(
            change_type=change.get("changeType", "Unknown"),
            resource_id=change.get("resourceId", ""),
        )
        for change in raw.get("changes", []) or []
    ]
    return PlanResult(changes=changes, status=raw.get("status", ""))


def interpret_deployment(
    result: DeploymentResult,
    expected: Iterable[str],
    optional: Iterable[str] = (),
) -> DeploymentOutputs:
    """
    Pick named outputs out of a provisioning result.

    Missing outputs are warnings, not errors: some templates legitimately
    omit optional resources.
    """
    outputs = DeploymentOutputs()

    for name in expected:
        value = result.outputs.get(name)
        if value:
            outputs.values[name] = value
        else:
            outputs.warnings.append(f"Expected output '{name}' missing from deployment")

    for name in optional:
        value = result.outputs.get(name)
        if value:
            outputs.values[name] = value

    return outputs


def find_coverage_report(search_dir: Path, pattern: str) -> Path:
    """
    Newest file matching pattern anywhere under search_dir.

    Raises:
        ParseError: If no coverage file exists at all
    """
    search_dir = Path(search_dir)
    candidates = list(search_dir.rglob(pattern)) if search_dir.exists() else []
    if not candidates:
        raise ParseError(
            f"No coverage file '{pattern}' found",
            context=f"Searched: {search_dir}",
        )
    return max(candidates, key=lambda p: p.stat().st_mtime)


def parse_cobertura(path: Path, target: str = "") -> CoverageSummary:
    """
    Read line and branch rates from a Cobertura XML document.

    Raises:
        ParseError: If the file is missing, malformed, or lacks rates
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"Coverage report not found: {path}")

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ParseError(f"Malformed coverage report: {path}", context=str(e))

    if root.tag != "coverage":
        raise ParseError(
            f"Not a Cobertura report: {path}", context=f"Root element: <{root.tag}>"
        )

    try:
        line_rate = Decimal(root.attrib["line-rate"]) * 100
        branch_rate = Decimal(root.attrib["branch-rate"]) * 100
    except (KeyError, InvalidOperation) as e:
        raise ParseError(f"Missing or invalid coverage rates in {path}", context=str(e))

    return CoverageSummary(
        line_rate=float(line_rate),
        branch_rate=float(branch_rate),
        source=path,
        target=target,
    )


def evaluate_coverage(summary: CoverageSummary, threshold: float) -> CoverageEvaluation:
    """Each metric passes when it meets or exceeds the threshold."""
    return CoverageEvaluation(
        summary=summary,
        threshold=threshold,
        line_passed=summary.line_rate >= threshold,
        branch_passed=summary.branch_rate >= threshold,
    )
