"""
Provisioning Client

Narrow interface over the cloud provider's deployment engine, plus the
Azure CLI implementation. Every call is a single blocking request; there is
no polling or retry here.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from wingops.config import BackupConfig
from wingops.constants import PROVISIONING_SUCCEEDED
from wingops.exceptions import ExternalCallError, ParseError
from wingops.models.deployment import DeploymentRequest, DeploymentResult, PlanResult
from wingops.models.results import ValidationResult
from wingops.services.interpreter import parse_azure_outputs, parse_what_if


class ProvisioningClient(ABC):
    """What the deployment pipeline needs from a provider."""

    @abstractmethod
    def plan(self, request: DeploymentRequest) -> PlanResult:
        """Plan-only (what-if) call. Must never mutate resources."""

    @abstractmethod
    def apply(self, request: DeploymentRequest) -> DeploymentResult:
        """Perform the deployment and block until a terminal state."""

    @abstractmethod
    def configure_backup_schedule(
        self, request: DeploymentRequest, backup: BackupConfig, outputs: Dict[str, str]
    ) -> List[str]:
        """Apply retention schedules. Returns human-readable lines describing them."""

    @abstractmethod
    def validate_deployment(
        self, request: DeploymentRequest, outputs: Dict[str, str]
    ) -> ValidationResult:
        """Check the provisioned resources look right."""


class AzureCliProvider(ProvisioningClient):
    """Resource-group deployments through the az CLI."""

    def __init__(self, runner):
        self.runner = runner

    @contextmanager
    def _parameters_file(self, request: DeploymentRequest) -> Iterator[str]:
        """Write parameters to a private temp file so secrets stay off argv."""
        fd, path = tempfile.mkstemp(prefix="wingops-params-", suffix=".json")
        try:
            os.chmod(path, 0o600)
            with os.fdopen(fd, "w") as f:
                json.dump(request.to_parameters(), f)
            yield path
        finally:
            if os.path.exists(path):
                os.unlink(path)

    def _deployment_args(self, operation: str, request: DeploymentRequest, params_path: str) -> List[str]:
        return [
            "az",
            "deployment",
            "group",
            operation,
            "--resource-group",
            request.resource_group,
            "--name",
            request.deployment_name,
            "--template-file",
            request.template_path,
            "--parameters",
            f"@{params_path}",
        ]

    @staticmethod
    def _load_json(stdout: str, what: str) -> dict:
        try:
            return json.loads(stdout)
        except (json.JSONDecodeError, TypeError) as e:
            raise ParseError(f"Could not parse {what} output as JSON", context=str(e))

    def plan(self, request: DeploymentRequest) -> PlanResult:
        with self._parameters_file(request) as params_path:
            args = self._deployment_args("what-if", request, params_path)
            args += ["--no-pretty-print", "-o", "json"]
            result = self.runner.run(args, description="Running what-if analysis")

        return parse_what_if(self._load_json(result.stdout, "what-if"))

    def apply(self, request: DeploymentRequest) -> DeploymentResult:
        with self._parameters_file(request) as params_path:
            args = self._deployment_args("create", request, params_path)
            args += ["-o", "json"]
            result = self.runner.run(args, description="Deploying backup infrastructure")

        data = self._load_json(result.stdout, "deployment")
        properties = data.get("properties", {}) or {}
        state = properties.get("provisioningState", "Unknown")

        deployment = DeploymentResult(
            succeeded=state == PROVISIONING_SUCCEEDED,
            provisioning_state=state,
            outputs=parse_azure_outputs(properties.get("outputs")),
            deployment_name=data.get("name", request.deployment_name),
            correlation_id=properties.get("correlationId"),
        )

        if not deployment.succeeded:
            raise ExternalCallError(
                f"Deployment '{deployment.deployment_name}' finished in state {state}",
                command="az deployment group create",
                context=f"Correlation ID: {deployment.correlation_id}",
            )

        return deployment

    def configure_backup_schedule(
        self, request: DeploymentRequest, backup: BackupConfig, outputs: Dict[str, str]
    ) -> List[str]:
        server = backup.sql_server or outputs.get("sqlServerName")
        database = backup.sql_database
        if not server or not database:
            return []

        self.runner.run(
            [
                "az",
                "sql",
                "db",
                "ltr-policy",
                "set",
                "--resource-group",
                request.resource_group,
                "--server",
                server,
                "--database",
                database,
                "--weekly-retention",
                backup.weekly_retention,
                "--monthly-retention",
                backup.monthly_retention,
                "--yearly-retention",
                backup.yearly_retention,
                "--week-of-year",
                str(backup.week_of_year),
            ],
            description="Configuring long-term retention",
        )

        return [
            f"{server}/{database}: weekly {backup.weekly_retention}, "
            f"monthly {backup.monthly_retention}, yearly {backup.yearly_retention}"
        ]

    def validate_deployment(
        self, request: DeploymentRequest, outputs: Dict[str, str]
    ) -> ValidationResult:
        result = ValidationResult()
        account = outputs.get("storageAccountName", request.storage_account)
        vault = outputs.get("vaultName", request.vault_name)

        state = self.runner.run(
            [
                "az",
                "storage",
                "account",
                "show",
                "--name",
                account,
                "--resource-group",
                request.resource_group,
                "--query",
                "provisioningState",
                "-o",
                "tsv",
            ],
            check=False,
        )
        if state.is_failure or state.stdout.strip() != PROVISIONING_SUCCEEDED:
            result.add_issue(f"Storage account '{account}' is not provisioned")
        else:
            self._check_soft_delete(request, account, result)

        vault_check = self.runner.run(
            [
                "az",
                "backup",
                "vault",
                "show",
                "--name",
                vault,
                "--resource-group",
                request.resource_group,
                "--query",
                "name",
                "-o",
                "tsv",
            ],
            check=False,
        )
        if vault_check.is_failure or not vault_check.stdout.strip():
            result.add_issue(f"Recovery Services vault '{vault}' not found")

        return result

    def _check_soft_delete(
        self, request: DeploymentRequest, account: str, result: ValidationResult
    ) -> None:
        props = self.runner.run(
            [
                "az",
                "storage",
                "account",
                "blob-service-properties",
                "show",
                "--account-name",
                account,
                "--resource-group",
                request.resource_group,
                "-o",
                "json",
            ],
            check=False,
        )
        if props.is_failure:
            result.add_warning(f"Could not read blob service properties for '{account}'")
            return

        try:
            data = json.loads(props.stdout)
        except json.JSONDecodeError:
            result.add_warning(f"Unreadable blob service properties for '{account}'")
            return

        policy: Optional[dict] = data.get("deleteRetentionPolicy") or {}
        if not policy.get("enabled"):
            result.add_issue(f"Blob soft delete is disabled on '{account}'")
