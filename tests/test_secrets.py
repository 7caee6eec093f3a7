"""Tests for secret stores and the parameter resolver."""

from dataclasses import FrozenInstanceError

import pytest

from wingops.config import BackupConfig, EnvironmentConfig
from wingops.exceptions import ExternalCallError, SecretResolutionError
from wingops.logger import OpsLogger
from wingops.models.deployment import SecretBundle
from wingops.models.results import ExecutionResult
from wingops.services.secret_service import (
    EnvSecretStore,
    KeyVaultSecretStore,
    SecretResolver,
    create_secret_store,
    mask_secret,
)


def dev_environment(key_vault=None) -> EnvironmentConfig:
    return EnvironmentConfig(
        name="dev",
        resource_group="rg-wing-dev",
        key_vault=key_vault,
        tags={"environment": "dev", "application": "wingcompanion"},
        backup=BackupConfig(storage_account="stbackup01", vault_name="kv-backup"),
    )


class TestEnvSecretStore:
    def test_secret_name_maps_to_variable(self):
        store = EnvSecretStore(environ={"SQL_ADMIN_LOGIN": "wingadmin"})

        assert EnvSecretStore.variable_name("sql-admin-login") == "SQL_ADMIN_LOGIN"
        assert store.get_secret("sql-admin-login") == "wingadmin"
        assert store.get_secret("sql-admin-password") is None

    def test_environment_overrides_dotenv(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SQL_ADMIN_LOGIN=fromfile\nSQL_ADMIN_PASSWORD=filepass\n")

        store = EnvSecretStore(environ={"SQL_ADMIN_LOGIN": "fromenv"}, env_file=env_file)

        assert store.get_secret("sql-admin-login") == "fromenv"
        assert store.get_secret("sql-admin-password") == "filepass"
        assert str(env_file) in store.describe()


class TestKeyVaultSecretStore:
    def test_reads_value_without_logging_it(self, fake_runner):
        fake_runner.on(["az", "keyvault"], ExecutionResult(0, "hunter2\n"))
        store = KeyVaultSecretStore("kv-wing-dev", fake_runner)

        assert store.get_secret("sql-admin-password") == "hunter2"
        call = fake_runner.calls[0]
        assert call.capture_only is True
        assert "--vault-name" in call.args and "kv-wing-dev" in call.args

    def test_missing_secret_is_none(self, fake_runner):
        fake_runner.on(
            ["az", "keyvault"],
            ExecutionResult(1, "", "ERROR: (SecretNotFound) A secret with (name/id) x was not found"),
        )

        assert KeyVaultSecretStore("kv", fake_runner).get_secret("x") is None

    def test_other_failures_raise(self, fake_runner):
        fake_runner.on(["az", "keyvault"], ExecutionResult(1, "", "ERROR: Forbidden"))

        with pytest.raises(ExternalCallError):
            KeyVaultSecretStore("kv", fake_runner).get_secret("x")


class TestSecretResolver:
    def test_missing_secret_produces_no_request(self):
        """A missing password stops the run before any request object exists."""
        resolver = SecretResolver(EnvSecretStore(environ={"SQL_ADMIN_LOGIN": "wingadmin"}))
        request = None

        with pytest.raises(SecretResolutionError) as excinfo:
            request = resolver.build_deployment_request(dev_environment(), "backup.bicep")

        assert request is None
        assert excinfo.value.missing == ["sql-admin-password"]

    def test_all_missing_names_are_listed(self):
        resolver = SecretResolver(EnvSecretStore(environ={"SQL_ADMIN_LOGIN": " "}))

        with pytest.raises(SecretResolutionError) as excinfo:
            resolver.resolve(["sql-admin-login", "sql-admin-password"])

        assert excinfo.value.missing == ["sql-admin-login", "sql-admin-password"]

    def test_builds_immutable_request(self):
        store = EnvSecretStore(
            environ={"SQL_ADMIN_LOGIN": "wingadmin", "SQL_ADMIN_PASSWORD": "S3cret!"}
        )
        request = SecretResolver(store).build_deployment_request(
            dev_environment(key_vault="kv-wing-dev"), "backup.bicep"
        )

        assert request.secrets.admin_login == "wingadmin"
        assert request.deployment_name == "backup-dev"
        assert request.tags["environment"] == "dev"
        assert "S3cret!" not in repr(request.secrets)

        params = request.to_parameters()["parameters"]
        assert params["storageAccountName"] == {"value": "stbackup01"}
        assert params["sqlAdminPassword"] == {"value": "S3cret!"}

        with pytest.raises(FrozenInstanceError):
            request.environment = "prod"

    def test_secret_values_never_reach_the_log(self, tmp_path):
        store = EnvSecretStore(
            environ={"SQL_ADMIN_LOGIN": "wingadmin", "SQL_ADMIN_PASSWORD": "S3cret!"}
        )
        logger = OpsLogger("dev", "secrets", log_root=tmp_path, quiet=True)
        SecretResolver(store, logger).build_deployment_request(dev_environment(), "backup.bicep")
        logger.close()

        text = logger.log_path.read_text()
        assert "sql-admin-password" in text
        assert "S3cret!" not in text


class TestHelpers:
    def test_blank_bundle_rejected(self):
        with pytest.raises(SecretResolutionError):
            SecretBundle(admin_login="wingadmin", admin_password="")

    def test_store_selection(self, fake_runner, tmp_path, monkeypatch):
        monkeypatch.setenv("WINGOPS_ROOT", str(tmp_path))

        assert isinstance(create_secret_store(dev_environment(), fake_runner), EnvSecretStore)
        assert isinstance(
            create_secret_store(dev_environment("kv-wing-dev"), fake_runner), KeyVaultSecretStore
        )
        assert isinstance(
            create_secret_store(dev_environment("kv-wing-dev"), fake_runner, source="env"),
            EnvSecretStore,
        )
        with pytest.raises(SecretResolutionError):
            create_secret_store(dev_environment(), fake_runner, source="keyvault")

    def test_masking(self):
        assert mask_secret("short") == "***"
        assert mask_secret("a-much-longer-secret") == "***cret"
