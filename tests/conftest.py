"""Shared fixtures: a recording command runner, a fake provider, a project root."""

import base64
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import pytest

from wingops.exceptions import ExternalCallError
from wingops.models.deployment import DeploymentResult, PlannedChange, PlanResult
from wingops.models.results import ExecutionResult, ValidationResult
from wingops.services.provider import ProvisioningClient

SQL_LOGIN = "wingadmin"
SQL_PASSWORD = "S3cret-Passw0rd!"

CONFIG_YAML = """
application: wingcompanion
environments:
  dev:
    resource_group: rg-wing-dev
    location: australiaeast
    api_url: https://localhost:5001
    tags:
      owner: platform
    backup:
      storage_account: stbackup01
      vault_name: kv-backup
    frontend:
      storage_account: stwebdev
      build_dir: frontend/dist
      cdn_profile: cdn-wing
      cdn_endpoint: wing-web
"""


@dataclass
class RunnerCall:
    args: List[str]
    cwd: Optional[Path] = None
    env: Optional[Dict[str, str]] = None
    check: bool = True
    description: Optional[str] = None
    capture_only: bool = False


Response = Union[ExecutionResult, Callable[[List[str]], ExecutionResult]]


class FakeRunner:
    """Stands in for CommandRunner; records every call, answers by command prefix.

    The most recently registered matching prefix wins.
    """

    def __init__(self):
        self.logger = None
        self.calls: List[RunnerCall] = []
        self._responses: List[tuple] = []

    def on(self, prefix: List[str], response: Response) -> "FakeRunner":
        self._responses.insert(0, (list(prefix), response))
        return self

    def run(self, args, cwd=None, env=None, check=True, description=None, capture_only=False):
        self.calls.append(RunnerCall(list(args), cwd, env, check, description, capture_only))

        result = ExecutionResult(returncode=0, command=" ".join(args))
        for prefix, response in self._responses:
            if list(args[: len(prefix)]) == prefix:
                result = response(list(args)) if callable(response) else response
                break

        if check and result.is_failure:
            raise ExternalCallError(
                f"Command failed: {args[0]}", command=" ".join(args), returncode=result.returncode
            )
        return result

    def commands(self) -> List[str]:
        return [" ".join(call.args) for call in self.calls]


@dataclass
class FakeProvider(ProvisioningClient):
    """Idempotent in-memory provider: the same request always yields the same outputs."""

    outputs: Dict[str, str] = field(
        default_factory=lambda: {
            "storageAccountName": "stbackup01",
            "vaultName": "kv-backup",
            "keyVaultName": "kv-wing-dev",
            "logAnalyticsWorkspaceName": "log-wing-dev",
        }
    )
    plan_calls: int = 0
    apply_calls: int = 0
    schedule_calls: int = 0
    validate_calls: int = 0
    apply_error: Optional[Exception] = None
    validation: ValidationResult = field(default_factory=ValidationResult)

    def plan(self, request):
        self.plan_calls += 1
        return PlanResult(
            changes=[PlannedChange("Create", f"/resourceGroups/{request.resource_group}/storage")],
            status="Succeeded",
        )

    def apply(self, request):
        self.apply_calls += 1
        if self.apply_error:
            raise self.apply_error
        return DeploymentResult(
            succeeded=True,
            provisioning_state="Succeeded",
            outputs=dict(self.outputs),
            deployment_name=request.deployment_name,
        )

    def configure_backup_schedule(self, request, backup, outputs):
        self.schedule_calls += 1
        return []

    def validate_deployment(self, request, outputs):
        self.validate_calls += 1
        return self.validation


@pytest.fixture
def fake_runner():
    runner = FakeRunner()
    runner.on(["az", "account", "show"], ExecutionResult(0, "Wing Subscription\n"))
    return runner


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    """A repository root with wingops.yml and a Bicep template."""
    monkeypatch.setenv("WINGOPS_ROOT", str(tmp_path))
    monkeypatch.delenv("WINGOPS_CONFIG", raising=False)

    (tmp_path / "wingops.yml").write_text(CONFIG_YAML)
    template = tmp_path / "infra" / "bicep" / "backup.bicep"
    template.parent.mkdir(parents=True)
    template.write_text("param environmentName string\n")
    return tmp_path


@pytest.fixture
def sql_secrets(monkeypatch):
    monkeypatch.setenv("SQL_ADMIN_LOGIN", SQL_LOGIN)
    monkeypatch.setenv("SQL_ADMIN_PASSWORD", SQL_PASSWORD)


@pytest.fixture
def tools_on_path(monkeypatch):
    monkeypatch.setattr(
        "wingops.services.preconditions.shutil.which", lambda tool: f"/usr/bin/{tool}"
    )


def make_token(payload: dict) -> str:
    def segment(data: dict) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(payload)}.signature"


@pytest.fixture
def token_factory():
    return make_token


def write_cobertura(path: Path, line_rate: float, branch_rate: float) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<coverage line-rate="{line_rate}" branch-rate="{branch_rate}" version="1.9">'
        "<packages /></coverage>\n"
    )
    return path


@pytest.fixture
def cobertura():
    return write_cobertura
