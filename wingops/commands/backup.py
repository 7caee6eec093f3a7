"""WingOps - Backup / disaster-recovery infrastructure deployment"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.table import Table

from wingops.base import EnvironmentCommand
from wingops.constants import EXPECTED_BACKUP_OUTPUTS, OPTIONAL_BACKUP_OUTPUTS
from wingops.models.deployment import DeploymentRequest, PlanResult
from wingops.services.interpreter import interpret_deployment
from wingops.services.preconditions import (
    FilePrecondition,
    PreconditionChecker,
    SessionPrecondition,
    ToolPrecondition,
)
from wingops.services.provider import AzureCliProvider, ProvisioningClient
from wingops.services.report_service import (
    Reporter,
    build_deployment_report,
    write_report,
)
from wingops.utils import resolve_path, timestamp_now


class BackupDeployCommand(EnvironmentCommand):
    """Deploy backup infrastructure: check, resolve, deploy, schedule, validate, report."""

    def __init__(
        self,
        environment: str,
        what_if: bool = False,
        template: Optional[str] = None,
        report_dir: Optional[str] = None,
        skip_validation: bool = False,
        secret_source: str = "auto",
        verbose: bool = False,
        provider: Optional[ProvisioningClient] = None,
    ):
        super().__init__(environment, verbose=verbose, secret_source=secret_source)
        self.what_if = what_if
        self.template = template
        self.report_dir = report_dir
        self.skip_validation = skip_validation
        self.provider = provider
        self.report_path: Optional[Path] = None

    def execute(self) -> bool:
        backup = self.env_config.require_backup()
        template_path = resolve_path(self.template or backup.template, self.project_root)

        self.show_header(
            title="Deploy Backup Infrastructure",
            environment=self.environment,
            details={
                "Resource group": self.env_config.resource_group,
                "Mode": "what-if (no changes)" if self.what_if else "apply",
            },
        )

        logger = self.init_logger(self.environment, "backup-deploy")
        provider = self.provider or AzureCliProvider(self.runner)

        logger.step("Checking prerequisites")
        checker = PreconditionChecker(logger)
        checker.require(
            [
                ToolPrecondition("az", hint="Install the Azure CLI: https://aka.ms/azcli"),
                FilePrecondition(template_path, label="Bicep template"),
                SessionPrecondition(self.runner),
                self.secret_precondition(backup.admin_login_secret),
                self.secret_precondition(backup.admin_password_secret),
            ]
        )

        logger.step("Resolving parameters and secrets")
        request = self.secret_resolver().build_deployment_request(
            self.env_config, str(template_path)
        )
        logger.success(f"Deployment request ready ({len(request.tags)} tags)")

        if self.what_if:
            logger.step("Running what-if analysis")
            plan = provider.plan(request)
            self._display_plan(plan)
            logger.success(f"What-if complete: {len(plan.changes)} resource(s) evaluated")
            return True

        logger.step("Deploying backup infrastructure")
        result = provider.apply(request)
        logger.success(f"Provisioning state: {result.provisioning_state}")

        outputs = interpret_deployment(result, EXPECTED_BACKUP_OUTPUTS, OPTIONAL_BACKUP_OUTPUTS)
        for warning in outputs.warnings:
            logger.warning(warning)

        logger.step("Configuring backup schedule")
        schedule = provider.configure_backup_schedule(request, backup, outputs.values)
        if schedule:
            for line in schedule:
                logger.success(line)
        else:
            logger.warning("No SQL database configured; long-term retention skipped")

        valid = True
        if self.skip_validation:
            logger.warning("Validation skipped")
        else:
            logger.step("Validating deployment")
            validation = provider.validate_deployment(request, outputs.values)
            for issue in validation.issues:
                logger.failure(issue)
            for warning in validation.warnings:
                logger.warning(warning)
            if validation.is_valid:
                logger.success("Deployment validated")
            valid = validation.is_valid

        logger.step("Writing report")
        self.report_path = self._write_report(request, outputs, valid, schedule)
        logger.success(f"Report written: {self.report_path}")

        return valid

    def _write_report(self, request: DeploymentRequest, outputs, valid: bool, schedule) -> Path:
        report = build_deployment_report(
            request,
            outputs,
            status="Succeeded" if valid else "ValidationFailed",
            timestamp=datetime.now().isoformat(timespec="seconds"),
            extra={"backup": {"retention": "; ".join(schedule)}} if schedule else None,
        )
        directory = resolve_path(self.report_dir or "reports", self.project_root)
        path = write_report(report, directory, timestamp_now())
        Reporter(self.console).render_report(report, path)
        return path

    def _display_plan(self, plan: PlanResult) -> None:
        table = Table(title="What-if result", title_justify="left", padding=(0, 1))
        table.add_column("Change", style="cyan", no_wrap=True)
        table.add_column("Resource", style="dim")

        for change in plan.changes:
            table.add_row(change.change_type, change.resource_id)

        self.console.print()
        self.console.print(table)

        counts = ", ".join(f"{kind}: {count}" for kind, count in sorted(plan.counts().items()))
        self.console.print(f"\n[dim]{counts or 'No changes'}[/dim]")
        self.console.print(
            f"\n[bold]To apply:[/bold] [cyan]wingops {self.environment}:backup:deploy[/cyan]\n"
        )


@click.command(name="backup:deploy")
@click.option("--env", "-e", "environment", required=True, help="Target environment")
@click.option("--what-if", is_flag=True, help="Preview changes without deploying")
@click.option("--template", "-t", help="Bicep template (default from wingops.yml)")
@click.option("--report-dir", help="Directory for the JSON report (default: ./reports)")
@click.option("--skip-validation", is_flag=True, help="Skip post-deployment checks")
@click.option(
    "--secrets",
    "secret_source",
    type=click.Choice(["auto", "keyvault", "env"]),
    default="auto",
    show_default=True,
    help="Where to read secrets from",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def backup_deploy(environment, what_if, template, report_dir, skip_validation, secret_source, verbose):
    """
    Deploy backup & disaster-recovery infrastructure

    \b
    Examples:
      wingops dev:backup:deploy --what-if     # Preview changes
      wingops dev:backup:deploy               # Deploy and write report
      wingops backup:deploy -e prod --secrets keyvault

    \b
    Stages:
    - Check az CLI, template, login session and secrets
    - Resolve the SQL admin credential pair
    - what-if or create the deployment
    - Configure long-term retention, validate, write report
    """
    cmd = BackupDeployCommand(
        environment,
        what_if=what_if,
        template=template,
        report_dir=report_dir,
        skip_validation=skip_validation,
        secret_source=secret_source,
        verbose=verbose,
    )
    cmd.run()
