"""WingOps - Database migration and recreation"""

from typing import Optional

import click

from wingops.base import EnvironmentCommand
from wingops.constants import DEFAULT_LOCAL_API_URL, HEALTH_READY_PATH
from wingops.services.database_service import DatabaseMigrator
from wingops.services.preconditions import (
    FilePrecondition,
    PreconditionChecker,
    ToolPrecondition,
)
from wingops.services.startup import StartupWaiter


class DbMigrateCommand(EnvironmentCommand):
    """Apply EF Core migrations, optionally dropping the database first, then seed."""

    def __init__(
        self,
        environment: str,
        recreate: bool = False,
        force: bool = False,
        seed_wait: Optional[int] = None,
        wait_mode: str = "fixed",
        skip_seed: bool = False,
        health_url: Optional[str] = None,
        secret_source: str = "auto",
        verbose: bool = False,
        waiter: Optional[StartupWaiter] = None,
    ):
        super().__init__(environment, verbose=verbose, secret_source=secret_source)
        self.recreate = recreate
        self.force = force
        self.seed_wait = seed_wait
        self.wait_mode = wait_mode
        self.skip_seed = skip_seed
        self.health_url = health_url
        self.waiter = waiter

    def execute(self) -> bool:
        database = self.env_config.database

        self.show_header(
            title="Recreate Database" if self.recreate else "Migrate Database",
            environment=self.environment,
            details={
                "Project": database.project,
                "Seeding": "skipped" if self.skip_seed else f"{self.wait_mode} wait",
            },
        )

        if self.recreate and not self.force:
            self.console.print(
                f"[bold red]⚠  WARNING:[/bold red] This drops the [bold]{self.environment}[/bold] database."
            )
            if not self.confirm("Drop and recreate the database?"):
                self.print_warning("Database recreation cancelled")
                return False

        logger = self.init_logger(self.environment, "db-migrate")

        logger.step("Checking prerequisites")
        PreconditionChecker(logger).require(
            [
                ToolPrecondition("dotnet", hint="Install the .NET SDK and dotnet-ef tool"),
                FilePrecondition(self.project_root / database.project, label="EF Core project"),
                self.secret_precondition(database.connection_string_secret),
            ]
        )

        logger.step("Resolving connection string")
        secrets = self.secret_resolver().resolve([database.connection_string_secret])
        migrator = DatabaseMigrator(
            self.runner,
            self.project_root,
            database,
            secrets[database.connection_string_secret],
        )

        if self.recreate:
            logger.step("Dropping database")
            migrator.drop()
            logger.success("Database dropped")

        logger.step("Applying migrations")
        migrator.migrate()
        migrations = migrator.list_migrations()
        logger.success(f"Database up to date ({len(migrations)} migration(s))")

        if self.skip_seed:
            logger.warning("Seeding skipped")
            return True

        logger.step("Running startup seeding")
        waiter = self.waiter or StartupWaiter(logger)
        command = migrator.app_command()

        if self.wait_mode == "probe":
            url = self.health_url or f"{DEFAULT_LOCAL_API_URL}{HEALTH_READY_PATH}"
            elapsed = waiter.run_until_ready(
                command, url, cwd=self.project_root, env=migrator.child_env()
            )
            logger.success(f"Application ready after {elapsed:.0f}s")
        else:
            seconds = self.seed_wait if self.seed_wait is not None else database.seed_wait_seconds
            waiter.run_fixed(command, seconds, cwd=self.project_root, env=migrator.child_env())
            logger.success(f"Application ran for {seconds}s")

        return True


@click.command(name="db:migrate")
@click.option("--env", "-e", "environment", required=True, help="Target environment")
@click.option("--recreate", is_flag=True, help="Drop the database before migrating")
@click.option("--force", is_flag=True, help="Skip the drop confirmation")
@click.option("--seed-wait", type=int, help="Seconds to run the API for seeding")
@click.option(
    "--wait-mode",
    type=click.Choice(["fixed", "probe"]),
    default="fixed",
    show_default=True,
    help="Fixed delay, or poll the readiness endpoint",
)
@click.option("--health-url", help="Readiness URL for --wait-mode probe")
@click.option("--skip-seed", is_flag=True, help="Do not start the API after migrating")
@click.option(
    "--secrets",
    "secret_source",
    type=click.Choice(["auto", "keyvault", "env"]),
    default="auto",
    show_default=True,
    help="Where to read the connection string from",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def db_migrate(
    environment, recreate, force, seed_wait, wait_mode, health_url, skip_seed, secret_source, verbose
):
    """
    Apply database migrations (and optionally recreate)

    \b
    Examples:
      wingops dev:db:migrate                       # Migrate + 30s seeding run
      wingops dev:db:migrate --recreate --force    # Drop, migrate, seed
      wingops dev:db:migrate --wait-mode probe     # Seed until /health/ready
    """
    cmd = DbMigrateCommand(
        environment,
        recreate=recreate,
        force=force,
        seed_wait=seed_wait,
        wait_mode=wait_mode,
        skip_seed=skip_seed,
        health_url=health_url,
        secret_source=secret_source,
        verbose=verbose,
    )
    cmd.run()
