"""
Result Models

Dataclass models for validation outcomes and external command executions.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationResult:
    """Accumulated outcome of a set of checks. Issues are only ever added."""

    is_valid: bool = True
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """Check if validation has issues."""
        return len(self.issues) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if validation has warnings."""
        return len(self.warnings) > 0

    def add_issue(self, issue: str) -> None:
        """Add an issue to the validation result."""
        self.issues.append(issue)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        """Fold another result's issues and warnings into this one."""
        for issue in other.issues:
            self.add_issue(issue)
        self.warnings.extend(other.warnings)

    def __repr__(self) -> str:
        return f"ValidationResult(valid={self.is_valid}, issues={len(self.issues)}, warnings={len(self.warnings)})"


@dataclass
class ExecutionResult:
    """Result of an external command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"
