"""Tests for the Azure CLI provisioning client."""

import json
import os

import pytest

from wingops.config import BackupConfig
from wingops.exceptions import ExternalCallError
from wingops.models.deployment import DeploymentRequest, SecretBundle
from wingops.models.results import ExecutionResult
from wingops.services.provider import AzureCliProvider

WHAT_IF_RESPONSE = {
    "status": "Succeeded",
    "changes": [
        {"changeType": "Create", "resourceId": "/subscriptions/x/storageAccounts/stbackup01"},
        {"changeType": "NoChange", "resourceId": "/subscriptions/x/vaults/kv-backup"},
    ],
}

CREATE_RESPONSE = {
    "name": "backup-dev",
    "properties": {
        "provisioningState": "Succeeded",
        "correlationId": "c0ffee",
        "outputs": {
            "storageAccountName": {"type": "String", "value": "stbackup01"},
            "vaultName": {"type": "String", "value": "kv-backup"},
        },
    },
}


@pytest.fixture
def request_():
    return DeploymentRequest(
        environment="dev",
        resource_group="rg-wing-dev",
        location="australiaeast",
        template_path="infra/bicep/backup.bicep",
        storage_account="stbackup01",
        vault_name="kv-backup",
        key_vault="",
        secrets=SecretBundle("wingadmin", "S3cret-Passw0rd!"),
        tags={"environment": "dev"},
    )


def parameters_path(args):
    return args[args.index("--parameters") + 1].lstrip("@")


class TestPlanAndApply:
    def test_plan_uses_what_if_only(self, fake_runner, request_):
        fake_runner.on(["az", "deployment", "group", "what-if"], ExecutionResult(0, json.dumps(WHAT_IF_RESPONSE)))

        plan = AzureCliProvider(fake_runner).plan(request_)

        assert [call.args[3] for call in fake_runner.calls] == ["what-if"]
        assert plan.counts() == {"Create": 1, "NoChange": 1}
        assert plan.has_changes

    def test_apply_uses_create(self, fake_runner, request_):
        fake_runner.on(["az", "deployment", "group", "create"], ExecutionResult(0, json.dumps(CREATE_RESPONSE)))

        result = AzureCliProvider(fake_runner).apply(request_)

        assert [call.args[3] for call in fake_runner.calls] == ["create"]
        assert result.succeeded
        assert result.outputs == {"storageAccountName": "stbackup01", "vaultName": "kv-backup"}
        assert result.correlation_id == "c0ffee"

    def test_secrets_only_in_private_parameters_file(self, fake_runner, request_):
        seen = {}

        def respond(args):
            path = parameters_path(args)
            seen["path"] = path
            seen["mode"] = os.stat(path).st_mode & 0o777
            with open(path) as f:
                seen["params"] = json.load(f)["parameters"]
            return ExecutionResult(0, json.dumps(CREATE_RESPONSE))

        fake_runner.on(["az", "deployment", "group", "create"], respond)
        AzureCliProvider(fake_runner).apply(request_)

        assert "S3cret-Passw0rd!" not in " ".join(fake_runner.calls[0].args)
        assert seen["params"]["sqlAdminPassword"]["value"] == "S3cret-Passw0rd!"
        assert seen["mode"] == 0o600
        assert not os.path.exists(seen["path"])

    def test_failed_state_raises(self, fake_runner, request_):
        failed = {"name": "backup-dev", "properties": {"provisioningState": "Failed"}}
        fake_runner.on(["az", "deployment"], ExecutionResult(0, json.dumps(failed)))

        with pytest.raises(ExternalCallError) as excinfo:
            AzureCliProvider(fake_runner).apply(request_)

        assert "Failed" in excinfo.value.message

    def test_cli_failure_propagates_and_cleans_up(self, fake_runner, request_):
        paths = []

        def respond(args):
            paths.append(parameters_path(args))
            return ExecutionResult(1, "", "InvalidTemplate")

        fake_runner.on(["az", "deployment"], respond)

        with pytest.raises(ExternalCallError):
            AzureCliProvider(fake_runner).apply(request_)

        assert not os.path.exists(paths[0])


class TestScheduleAndValidation:
    def test_schedule_skipped_without_database(self, fake_runner, request_):
        backup = BackupConfig(storage_account="stbackup01", vault_name="kv-backup")

        assert AzureCliProvider(fake_runner).configure_backup_schedule(request_, backup, {}) == []
        assert fake_runner.calls == []

    def test_schedule_sets_ltr_policy(self, fake_runner, request_):
        backup = BackupConfig(
            storage_account="stbackup01", vault_name="kv-backup", sql_database="wingcompanion"
        )

        lines = AzureCliProvider(fake_runner).configure_backup_schedule(
            request_, backup, {"sqlServerName": "sql-wing-dev"}
        )

        args = fake_runner.calls[0].args
        assert args[:5] == ["az", "sql", "db", "ltr-policy", "set"]
        assert args[args.index("--server") + 1] == "sql-wing-dev"
        assert args[args.index("--weekly-retention") + 1] == "P4W"
        assert lines == ["sql-wing-dev/wingcompanion: weekly P4W, monthly P12M, yearly P5Y"]

    def test_validation_passes(self, fake_runner, request_):
        fake_runner.on(["az", "storage", "account", "show"], ExecutionResult(0, "Succeeded\n"))
        fake_runner.on(
            ["az", "storage", "account", "blob-service-properties"],
            ExecutionResult(0, json.dumps({"deleteRetentionPolicy": {"enabled": True, "days": 7}})),
        )
        fake_runner.on(["az", "backup", "vault"], ExecutionResult(0, "kv-backup\n"))

        result = AzureCliProvider(fake_runner).validate_deployment(request_, {})

        assert result.is_valid

    def test_validation_collects_every_issue(self, fake_runner, request_):
        fake_runner.on(["az", "storage", "account", "show"], ExecutionResult(0, "Succeeded\n"))
        fake_runner.on(
            ["az", "storage", "account", "blob-service-properties"],
            ExecutionResult(0, json.dumps({"deleteRetentionPolicy": {"enabled": False}})),
        )
        fake_runner.on(["az", "backup", "vault"], ExecutionResult(3, "", "ResourceNotFound"))

        result = AzureCliProvider(fake_runner).validate_deployment(
            request_, {"storageAccountName": "stbackup01"}
        )

        assert not result.is_valid
        assert result.issues == [
            "Blob soft delete is disabled on 'stbackup01'",
            "Recovery Services vault 'kv-backup' not found",
        ]
