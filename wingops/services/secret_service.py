"""
Secret Resolution Service

Read-only secret stores (Azure Key Vault, process environment) and the
resolver that turns configuration plus secrets into a DeploymentRequest.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from wingops.config import EnvironmentConfig
from wingops.exceptions import ExternalCallError, SecretResolutionError
from wingops.logger import OpsLogger
from wingops.models.deployment import DeploymentRequest, SecretBundle

NOT_FOUND_MARKERS = ("SecretNotFound", "was not found", "(NotFound)")


class SecretStore(ABC):
    """Read-only lookup of named secrets."""

    @abstractmethod
    def get_secret(self, name: str) -> Optional[str]:
        """Return the secret value, or None if it does not exist."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable store name for diagnostics."""


class KeyVaultSecretStore(SecretStore):
    """Azure Key Vault, read through the az CLI."""

    def __init__(self, vault_name: str, runner):
        self.vault_name = vault_name
        self.runner = runner

    def get_secret(self, name: str) -> Optional[str]:
        result = self.runner.run(
            [
                "az",
                "keyvault",
                "secret",
                "show",
                "--vault-name",
                self.vault_name,
                "--name",
                name,
                "--query",
                "value",
                "-o",
                "tsv",
            ],
            check=False,
            capture_only=True,
        )

        if result.is_success:
            return result.stdout.rstrip("\r\n")

        if any(marker in result.stderr for marker in NOT_FOUND_MARKERS):
            return None

        raise ExternalCallError(
            f"Could not read secret '{name}' from Key Vault '{self.vault_name}'",
            command=f"az keyvault secret show --vault-name {self.vault_name} --name {name}",
            returncode=result.returncode,
            context=result.stderr.strip()[-500:],
        )

    def describe(self) -> str:
        return f"Key Vault '{self.vault_name}'"


class EnvSecretStore(SecretStore):
    """
    Secrets from environment variables.

    Secret 'sql-admin-login' is read from SQL_ADMIN_LOGIN. An optional
    dotenv file fills in anything the environment does not define.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ):
        values: Dict[str, str] = {}
        if env_file and Path(env_file).exists():
            values.update(
                {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            )
        values.update(os.environ if environ is None else environ)
        self._values = values
        self.env_file = env_file

    @staticmethod
    def variable_name(secret_name: str) -> str:
        return secret_name.replace("-", "_").replace(".", "_").upper()

    def get_secret(self, name: str) -> Optional[str]:
        return self._values.get(self.variable_name(name))

    def describe(self) -> str:
        if self.env_file:
            return f"environment ({self.env_file})"
        return "environment"


class SecretResolver:
    """
    Builds parameter bags from configuration and a secret store.

    Never falls back to a default value and never logs a secret value.
    """

    def __init__(self, store: SecretStore, logger: Optional[OpsLogger] = None):
        self.store = store
        self.logger = logger

    def resolve(self, names: List[str]) -> Dict[str, str]:
        """
        Resolve every named secret.

        Raises:
            SecretResolutionError: Naming every absent or empty secret
        """
        resolved: Dict[str, str] = {}
        missing: List[str] = []

        for name in names:
            value = self.store.get_secret(name)
            if value is None or not value.strip():
                missing.append(name)
                continue
            resolved[name] = value
            if self.logger:
                self.logger.success(f"Resolved secret '{name}'")

        if missing:
            raise SecretResolutionError(missing, store=self.store.describe())

        return resolved

    def build_deployment_request(
        self, env_config: EnvironmentConfig, template_path: str
    ) -> DeploymentRequest:
        """Resolve the admin credential pair and build the immutable request."""
        backup = env_config.require_backup()
        secrets = self.resolve([backup.admin_login_secret, backup.admin_password_secret])

        return DeploymentRequest(
            environment=env_config.name,
            resource_group=env_config.resource_group,
            location=env_config.location,
            template_path=template_path,
            storage_account=backup.storage_account,
            vault_name=backup.vault_name,
            key_vault=env_config.key_vault or "",
            secrets=SecretBundle(
                admin_login=secrets[backup.admin_login_secret],
                admin_password=secrets[backup.admin_password_secret],
            ),
            tags=dict(env_config.tags),
        )


def create_secret_store(env_config: EnvironmentConfig, runner, source: str = "auto") -> SecretStore:
    """
    Pick the secret store for an environment.

    'keyvault' and 'env' force a store; 'auto' uses Key Vault when the
    environment names one.
    """
    if source == "env" or (source == "auto" and not env_config.key_vault):
        from wingops.utils import get_project_root

        return EnvSecretStore(env_file=get_project_root() / ".env")
    if not env_config.key_vault:
        raise SecretResolutionError(["key_vault"], store=f"environment '{env_config.name}' config")
    return KeyVaultSecretStore(env_config.key_vault, runner)



def mask_secret(value: str, show_chars: int = 4) -> str:
    """
    Mask secret value for safe display.

    Returns:
        Masked string (e.g., "***abcd")
    """
    if not value or len(value) <= show_chars * 2:
        return "***"
    return f"***{value[-show_chars:]}"
