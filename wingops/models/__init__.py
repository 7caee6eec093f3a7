"""
WingOps Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    ValidationResult,
    ExecutionResult,
)
from .deployment import (
    SecretBundle,
    DeploymentRequest,
    DeploymentResult,
    DeploymentOutputs,
    DeploymentReport,
    PlannedChange,
    PlanResult,
)
from .coverage import (
    CoverageSummary,
    CoverageEvaluation,
)

__all__ = [
    # Results
    "ValidationResult",
    "ExecutionResult",
    # Deployment
    "SecretBundle",
    "DeploymentRequest",
    "DeploymentResult",
    "DeploymentOutputs",
    "DeploymentReport",
    "PlannedChange",
    "PlanResult",
    # Coverage
    "CoverageSummary",
    "CoverageEvaluation",
]
