"""Tests for the deployment report and exit codes."""

import json
import re

import pytest
from rich.console import Console

from wingops.exceptions import ParseError
from wingops.models.deployment import DeploymentOutputs, DeploymentRequest, SecretBundle
from wingops.services.report_service import (
    Reporter,
    build_deployment_report,
    exit_code,
    load_report,
    write_report,
)


@pytest.fixture
def request_():
    return DeploymentRequest(
        environment="dev",
        resource_group="rg-wing-dev",
        location="australiaeast",
        template_path="backup.bicep",
        storage_account="stbackup01",
        vault_name="kv-backup",
        key_vault="kv-wing-dev",
        secrets=SecretBundle("wingadmin", "S3cret!"),
    )


@pytest.fixture
def outputs():
    return DeploymentOutputs(
        values={
            "storageAccountName": "stbackup01",
            "vaultName": "kv-backup",
            "keyVaultName": "kv-wing-dev",
            "logAnalyticsWorkspaceName": "log-wing-dev",
        }
    )


class TestDeploymentReport:
    def test_outputs_land_in_their_sections(self, request_, outputs):
        report = build_deployment_report(request_, outputs, "Succeeded", "2026-10-19T10:00:00")

        assert report.backup["storageAccountName"] == "stbackup01"
        assert report.backup["vaultName"] == "kv-backup"
        assert report.security["keyVaultName"] == "kv-wing-dev"
        assert report.monitoring["logAnalyticsWorkspaceName"] == "log-wing-dev"
        assert report.deployment_name == "backup-dev"

    def test_report_never_contains_secrets(self, request_, outputs, tmp_path):
        report = build_deployment_report(request_, outputs, "Succeeded", "2026-10-19T10:00:00")
        path = write_report(report, tmp_path, "20261019_100000")

        text = path.read_text()
        assert "S3cret!" not in text
        assert "wingadmin" not in text

    def test_persisted_file_name_and_content(self, request_, outputs, tmp_path):
        report = build_deployment_report(request_, outputs, "Succeeded", "2026-10-19T10:00:00")

        path = write_report(report, tmp_path / "reports", "20261019_100000")

        assert path.name == "backup-deployment-dev-20261019_100000.json"
        assert re.match(r"backup-deployment-dev-\d{8}_\d{6}\.json", path.name)
        data = json.loads(path.read_text())
        assert data["status"] == "Succeeded"
        assert data["backup"]["storageAccountName"] == "stbackup01"
        assert data["backup"]["vaultName"] == "kv-backup"

    def test_round_trip_is_lossless(self, request_, outputs, tmp_path):
        report = build_deployment_report(
            request_,
            outputs,
            "Succeeded",
            "2026-10-19T10:00:00",
            extra={"backup": {"retention": "weekly P4W"}},
        )

        loaded = load_report(write_report(report, tmp_path, "20261019_100000"))

        assert loaded == report
        assert loaded.backup["retention"] == "weekly P4W"

    def test_unreadable_report(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ParseError):
            load_report(path)


class TestExitCode:
    def test_strictly_binary(self):
        assert exit_code(True) == 0
        assert exit_code(False) == 1


class TestReporter:
    def test_summary_shows_verdict(self):
        console = Console(record=True, width=120)

        Reporter(console).render_summary(
            "Coverage summary",
            [("backend lines", "success", "85.00%"), ("backend branches", "error", "72.00%")],
            success=False,
        )

        text = console.export_text()
        assert "backend branches" in text
        assert "One or more checks failed" in text
