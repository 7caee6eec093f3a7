"""
Deployment Models

Transient value objects for one backup-infrastructure deployment run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wingops.exceptions import SecretResolutionError


@dataclass(frozen=True)
class SecretBundle:
    """Admin credential pair resolved from the secret store."""

    admin_login: str
    admin_password: str = field(repr=False)

    def __post_init__(self):
        missing = []
        if not (self.admin_login or "").strip():
            missing.append("admin_login")
        if not (self.admin_password or "").strip():
            missing.append("admin_password")
        if missing:
            raise SecretResolutionError(missing, store="secret bundle")


@dataclass(frozen=True)
class DeploymentRequest:
    """Everything needed to issue one provisioning call. Immutable."""

    environment: str
    resource_group: str
    location: str
    template_path: str
    storage_account: str
    vault_name: str
    key_vault: str
    secrets: SecretBundle
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def deployment_name(self) -> str:
        """Stable deployment name so re-runs update the same deployment."""
        return f"backup-{self.environment}"

    def to_parameters(self) -> Dict[str, Any]:
        """Build the ARM parameters document for the template."""
        values = {
            "environmentName": self.environment,
            "location": self.location,
            "storageAccountName": self.storage_account,
            "vaultName": self.vault_name,
            "keyVaultName": self.key_vault,
            "sqlAdminLogin": self.secrets.admin_login,
            "sqlAdminPassword": self.secrets.admin_password,
            "tags": dict(self.tags),
        }
        return {
            "$schema": "https://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json#",
            "contentVersion": "1.0.0.0",
            "parameters": {name: {"value": value} for name, value in values.items()},
        }


@dataclass
class DeploymentResult:
    """Terminal outcome of an apply-mode provisioning call."""

    succeeded: bool
    provisioning_state: str
    outputs: Dict[str, str] = field(default_factory=dict)
    deployment_name: str = ""
    correlation_id: Optional[str] = None

    def __repr__(self) -> str:
        return f"DeploymentResult(state={self.provisioning_state}, outputs={len(self.outputs)})"


@dataclass
class PlannedChange:
    """One resource change predicted by a what-if call."""

    change_type: str
    resource_id: str


@dataclass
class PlanResult:
    """Predicted diff returned by a dry-run. Nothing was mutated."""

    changes: List[PlannedChange] = field(default_factory=list)
    status: str = ""

    def counts(self) -> Dict[str, int]:
        """Number of changes per change type."""
        totals: Dict[str, int] = {}
        for change in self.changes:
            totals[change.change_type] = totals.get(change.change_type, 0) + 1
        return totals

    @property
    def has_changes(self) -> bool:
        return any(
            change.change_type not in ("NoChange", "Ignore") for change in self.changes
        )


@dataclass
class DeploymentOutputs:
    """Named outputs picked out of a provisioning result."""

    values: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(name, default)

    @property
    def storage_account_name(self) -> Optional[str]:
        return self.values.get("storageAccountName")

    @property
    def vault_name(self) -> Optional[str]:
        return self.values.get("vaultName")


@dataclass
class DeploymentReport:
    """Flat audit record persisted after a deployment run."""

    status: str
    timestamp: str
    environment: str
    resource_group: str
    deployment_name: str = ""
    security: Dict[str, str] = field(default_factory=dict)
    backup: Dict[str, str] = field(default_factory=dict)
    monitoring: Dict[str, str] = field(default_factory=dict)

    SECTIONS = ("security", "backup", "monitoring")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "environment": self.environment,
            "resourceGroup": self.resource_group,
            "deploymentName": self.deployment_name,
            "security": dict(self.security),
            "backup": dict(self.backup),
            "monitoring": dict(self.monitoring),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentReport":
        """Create from dictionary."""
        return cls(
            status=data.get("status", ""),
            timestamp=data.get("timestamp", ""),
            environment=data.get("environment", ""),
            resource_group=data.get("resourceGroup", ""),
            deployment_name=data.get("deploymentName", ""),
            security={k: str(v) for k, v in data.get("security", {}).items()},
            backup={k: str(v) for k, v in data.get("backup", {}).items()},
            monitoring={k: str(v) for k, v in data.get("monitoring", {}).items()},
        )
