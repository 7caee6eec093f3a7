"""Configuration management for WingOps (wingops.yml)"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from wingops.constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_ADMIN_LOGIN_SECRET,
    DEFAULT_ADMIN_PASSWORD_SECRET,
    DEFAULT_APP_ADMIN_EMAIL_SECRET,
    DEFAULT_APP_ADMIN_PASSWORD_SECRET,
    DEFAULT_APPLICATION,
    DEFAULT_BACKUP_TEMPLATE,
    DEFAULT_CONNECTION_STRING_SECRET,
    DEFAULT_COVERAGE_THRESHOLD,
    DEFAULT_FRONTEND_COVERAGE_REPORTER,
    DEFAULT_FRONTEND_COVERAGE_SCRIPT,
    DEFAULT_LOCATION,
    DEFAULT_MONTHLY_RETENTION,
    DEFAULT_SEED_WAIT_SECONDS,
    DEFAULT_WEEK_OF_YEAR,
    DEFAULT_WEEKLY_RETENTION,
    DEFAULT_YEARLY_RETENTION,
)
from wingops.exceptions import ConfigurationError, EnvironmentNotFoundError
from wingops.utils import get_project_root


@dataclass
class BackupConfig:
    """Backup / disaster-recovery infrastructure settings"""

    storage_account: str
    vault_name: str
    template: str = DEFAULT_BACKUP_TEMPLATE
    sql_server: Optional[str] = None
    sql_database: Optional[str] = None
    weekly_retention: str = DEFAULT_WEEKLY_RETENTION
    monthly_retention: str = DEFAULT_MONTHLY_RETENTION
    yearly_retention: str = DEFAULT_YEARLY_RETENTION
    week_of_year: int = DEFAULT_WEEK_OF_YEAR
    admin_login_secret: str = DEFAULT_ADMIN_LOGIN_SECRET
    admin_password_secret: str = DEFAULT_ADMIN_PASSWORD_SECRET


@dataclass
class FrontendConfig:
    """Static frontend hosting (storage static website + CDN)"""

    storage_account: str
    project_dir: str = "frontend"
    build_dir: str = "frontend/dist"
    cdn_profile: Optional[str] = None
    cdn_endpoint: Optional[str] = None


@dataclass
class DatabaseConfig:
    """EF Core migration settings"""

    project: str = "backend"
    startup_project: Optional[str] = None
    connection_string_secret: str = DEFAULT_CONNECTION_STRING_SECRET
    seed_wait_seconds: int = DEFAULT_SEED_WAIT_SECONDS


@dataclass
class EnvironmentConfig:
    """One deployment target (dev, test, prod)"""

    name: str
    resource_group: str
    location: str = DEFAULT_LOCATION
    key_vault: Optional[str] = None
    api_url: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    backup: Optional[BackupConfig] = None
    frontend: Optional[FrontendConfig] = None
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    admin_email_secret: str = DEFAULT_APP_ADMIN_EMAIL_SECRET
    admin_password_secret: str = DEFAULT_APP_ADMIN_PASSWORD_SECRET

    def require_backup(self) -> BackupConfig:
        if self.backup is None:
            raise ConfigurationError(
                f"Environment '{self.name}' has no 'backup' section",
                context=f"Add environments.{self.name}.backup to {CONFIG_FILENAME}",
            )
        return self.backup

    def require_frontend(self) -> FrontendConfig:
        if self.frontend is None:
            raise ConfigurationError(
                f"Environment '{self.name}' has no 'frontend' section",
                context=f"Add environments.{self.name}.frontend to {CONFIG_FILENAME}",
            )
        return self.frontend


@dataclass
class CoverageConfig:
    """Coverage thresholds and report locations"""

    threshold: float = DEFAULT_COVERAGE_THRESHOLD
    backend_project: str = "backend"
    backend_results_dir: str = "TestResults"
    frontend_project: str = "frontend"
    frontend_results_dir: str = "frontend/coverage"
    frontend_script: str = DEFAULT_FRONTEND_COVERAGE_SCRIPT
    frontend_reporter: str = DEFAULT_FRONTEND_COVERAGE_REPORTER


class OpsConfig:
    """Represents a loaded and validated wingops.yml"""

    def __init__(self, config_dict: dict, config_path: Optional[Path] = None):
        """
        Initialize configuration

        Args:
            config_dict: Raw configuration dictionary from wingops.yml
            config_path: Where it was loaded from (optional)
        """
        self.raw_config = config_dict or {}
        self.config_path = config_path
        self.application = self.raw_config.get("application", DEFAULT_APPLICATION)
        self.workflows_dir = self.raw_config.get("workflows_dir", ".github/workflows")
        self.environments = self._parse_environments()
        self.coverage = self._parse_coverage()

    def _parse_environments(self) -> Dict[str, EnvironmentConfig]:
        raw_envs = self.raw_config.get("environments", {}) or {}
        if not isinstance(raw_envs, dict):
            raise ConfigurationError("'environments' must be a mapping of name -> settings")

        environments = {}
        for name, data in raw_envs.items():
            environments[name] = self._parse_environment(name, data or {})
        return environments

    def _parse_environment(self, name: str, data: Dict[str, Any]) -> EnvironmentConfig:
        if "resource_group" not in data:
            raise ConfigurationError(
                f"Missing required field: environments.{name}.resource_group"
            )

        tags = {"environment": name, "application": self.application}
        tags.update({str(k): str(v) for k, v in (data.get("tags") or {}).items()})

        backup = None
        if data.get("backup"):
            backup = self._build(BackupConfig, data["backup"], f"environments.{name}.backup")

        frontend = None
        if data.get("frontend"):
            frontend = self._build(
                FrontendConfig, data["frontend"], f"environments.{name}.frontend"
            )

        database = self._build(
            DatabaseConfig, data.get("database") or {}, f"environments.{name}.database"
        )

        return EnvironmentConfig(
            name=name,
            resource_group=data["resource_group"],
            location=data.get("location", DEFAULT_LOCATION),
            key_vault=data.get("key_vault"),
            api_url=data.get("api_url"),
            tags=tags,
            backup=backup,
            frontend=frontend,
            database=database,
            admin_email_secret=data.get("admin_email_secret", DEFAULT_APP_ADMIN_EMAIL_SECRET),
            admin_password_secret=data.get(
                "admin_password_secret", DEFAULT_APP_ADMIN_PASSWORD_SECRET
            ),
        )

    def _parse_coverage(self) -> CoverageConfig:
        return self._build(CoverageConfig, self.raw_config.get("coverage") or {}, "coverage")

    @staticmethod
    def _build(cls, data: Dict[str, Any], where: str):
        """Instantiate a config dataclass, turning bad keys into ConfigurationError."""
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid '{where}' section", context=str(e))

    def list_environments(self) -> List[str]:
        return list(self.environments.keys())

    def get_environment(self, name: str) -> EnvironmentConfig:
        if name not in self.environments:
            raise EnvironmentNotFoundError(name, self.list_environments())
        return self.environments[name]


def get_config_path(project_root: Optional[Path] = None) -> Path:
    """Location of wingops.yml (WINGOPS_CONFIG overrides)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return (project_root or get_project_root()) / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> OpsConfig:
    """
    Load wingops.yml.

    Raises:
        ConfigurationError: If the file is missing or not valid YAML
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            context="Copy wingops.example.yml to wingops.yml and edit it",
        )

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}", context=str(e))

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at top level")

    return OpsConfig(data, config_path=config_path)
