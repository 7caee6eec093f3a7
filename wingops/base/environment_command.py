"""
Environment Command Base Class

Base class for commands that target one deployment environment.
Provides configuration and secret-store access.
"""

from typing import Optional

from wingops.config import EnvironmentConfig, OpsConfig, load_config
from wingops.services.preconditions import SecretPrecondition
from wingops.services.secret_service import SecretResolver, SecretStore, create_secret_store

from .base_command import BaseCommand


class EnvironmentCommand(BaseCommand):
    """
    Base class for environment-specific commands.

    Provides:
    - wingops.yml loading
    - The selected EnvironmentConfig
    - A secret store (Key Vault or environment) and resolver
    """

    def __init__(
        self,
        environment: str,
        verbose: bool = False,
        json_output: bool = False,
        secret_source: str = "auto",
    ):
        super().__init__(verbose=verbose, json_output=json_output)
        self.environment = environment
        self.secret_source = secret_source
        self._config: Optional[OpsConfig] = None
        self._secret_store: Optional[SecretStore] = None

    @property
    def config(self) -> OpsConfig:
        if self._config is None:
            self._config = load_config()
        return self._config

    @property
    def env_config(self) -> EnvironmentConfig:
        return self.config.get_environment(self.environment)

    @property
    def secret_store(self) -> SecretStore:
        if self._secret_store is None:
            self._secret_store = create_secret_store(
                self.env_config, self.runner, source=self.secret_source
            )
        return self._secret_store

    def secret_resolver(self) -> SecretResolver:
        return SecretResolver(self.secret_store, logger=self.logger)

    def secret_precondition(self, secret_name: str) -> SecretPrecondition:
        """Precondition that builds the secret store only when checked."""
        return SecretPrecondition(lambda: self.secret_store, secret_name)
