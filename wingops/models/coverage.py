"""
Coverage Models
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass
class CoverageSummary:
    """Line and branch coverage, as percentages (0-100)."""

    line_rate: float
    branch_rate: float
    source: Optional[Path] = None
    target: str = ""

    def __repr__(self) -> str:
        return f"CoverageSummary(target={self.target}, line={self.line_rate:.2f}%, branch={self.branch_rate:.2f}%)"


@dataclass
class CoverageEvaluation:
    """A summary compared against a minimum threshold."""

    summary: CoverageSummary
    threshold: float
    line_passed: bool
    branch_passed: bool

    @property
    def passed(self) -> bool:
        """Both metrics must meet or exceed the threshold."""
        return self.line_passed and self.branch_passed

    @property
    def failed_metrics(self) -> List[str]:
        failed = []
        if not self.line_passed:
            failed.append("line")
        if not self.branch_passed:
            failed.append("branch")
        return failed
