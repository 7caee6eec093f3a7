"""Database migration service (EF Core via dotnet ef)."""

import os
from pathlib import Path
from typing import Dict, List

from wingops.config import DatabaseConfig

CONNECTION_STRING_VARIABLE = "ConnectionStrings__DefaultConnection"


class DatabaseMigrator:
    """Drops and migrates the application database."""

    def __init__(self, runner, project_root: Path, config: DatabaseConfig, connection_string: str):
        self.runner = runner
        self.project_root = project_root
        self.config = config
        self._connection_string = connection_string

    def child_env(self, **extra: str) -> Dict[str, str]:
        """Environment for dotnet children; the connection string never touches os.environ."""
        env = dict(os.environ)
        env[CONNECTION_STRING_VARIABLE] = self._connection_string
        env.update(extra)
        return env

    def _ef_args(self, *args: str) -> List[str]:
        cmd = ["dotnet", "ef", *args, "--project", self.config.project]
        if self.config.startup_project:
            cmd += ["--startup-project", self.config.startup_project]
        return cmd

    def drop(self) -> None:
        self.runner.run(
            self._ef_args("database", "drop", "--force"),
            cwd=self.project_root,
            env=self.child_env(),
            description="Dropping database",
        )

    def migrate(self) -> None:
        self.runner.run(
            self._ef_args("database", "update"),
            cwd=self.project_root,
            env=self.child_env(),
            description="Applying migrations",
        )

    def list_migrations(self) -> List[str]:
        result = self.runner.run(
            self._ef_args("migrations", "list", "--no-color"),
            cwd=self.project_root,
            env=self.child_env(),
        )
        return [
            line.strip()
            for line in result.stdout.splitlines()
            if line.strip() and line.strip()[0].isdigit()
        ]

    def app_command(self) -> List[str]:
        """Command that starts the API so its startup seeding runs."""
        project = self.config.startup_project or self.config.project
        return ["dotnet", "run", "--project", project, "--no-build"]
