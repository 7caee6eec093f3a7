"""
Reporting Service

Console summaries and the persisted deployment audit record.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from rich.console import Console
from rich.table import Table

from wingops.constants import EXIT_FAILURE, EXIT_SUCCESS, REPORT_SECTION_OUTPUTS
from wingops.exceptions import ParseError
from wingops.models.deployment import DeploymentOutputs, DeploymentReport, DeploymentRequest

STATUS_STYLES = {
    "success": "green",
    "info": "cyan",
    "warn": "yellow",
    "error": "red",
}

STATUS_ICONS = {
    "success": "✓",
    "info": "•",
    "warn": "⚠",
    "error": "✗",
}


def exit_code(success: bool) -> int:
    """Strictly binary: 0 for full success, 1 for anything else."""
    return EXIT_SUCCESS if success else EXIT_FAILURE


def build_deployment_report(
    request: DeploymentRequest,
    outputs: DeploymentOutputs,
    status: str,
    timestamp: str,
    extra: Optional[Dict[str, Dict[str, str]]] = None,
) -> DeploymentReport:
    """Place each named output verbatim into its report section."""
    sections: Dict[str, Dict[str, str]] = {name: {} for name in DeploymentReport.SECTIONS}

    for section, names in REPORT_SECTION_OUTPUTS.items():
        for name in names:
            value = outputs.get(name)
            if value is not None:
                sections[section][name] = value

    sections["security"].setdefault("secretSource", "keyVault" if request.key_vault else "environment")
    sections["backup"].setdefault("resourceGroup", request.resource_group)
    sections["monitoring"].setdefault("location", request.location)

    for section, values in (extra or {}).items():
        sections.setdefault(section, {}).update(values)

    return DeploymentReport(
        status=status,
        timestamp=timestamp,
        environment=request.environment,
        resource_group=request.resource_group,
        deployment_name=request.deployment_name,
        security=sections["security"],
        backup=sections["backup"],
        monitoring=sections["monitoring"],
    )


def write_report(report: DeploymentReport, directory: Path, stamp: str) -> Path:
    """Persist the report as JSON; file name carries environment and stamp."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"backup-deployment-{report.environment}-{stamp}.json"
    path.write_text(json.dumps(report.to_dict(), indent=2, sort_keys=False))
    return path


def load_report(path: Path) -> DeploymentReport:
    """Re-read a persisted report."""
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ParseError(f"Could not read report {path}", context=str(e))
    return DeploymentReport.from_dict(data)


class Reporter:
    """Summary tables for command results."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render_summary(
        self, title: str, rows: Iterable[Tuple[str, str, str]], success: bool
    ) -> None:
        """
        Render a three-column summary table followed by the overall verdict.

        Args:
            title: Table title
            rows: (label, level, detail) tuples; level is a STATUS_STYLES key
            success: Overall outcome
        """
        table = Table(title=title, title_justify="left", padding=(0, 1))
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Details", style="dim")

        for label, level, detail in rows:
            style = STATUS_STYLES.get(level, "white")
            table.add_row(label, f"[{style}]{STATUS_ICONS.get(level, '')} {level}[/{style}]", detail)

        self.console.print()
        self.console.print(table)
        self.console.print()

        if success:
            self.console.print("[bold green]✓ All checks passed[/bold green]\n")
        else:
            self.console.print("[bold red]✗ One or more checks failed[/bold red]\n")

    def render_report(self, report: DeploymentReport, path: Optional[Path] = None) -> None:
        table = Table(title=f"Deployment report ({report.status})", title_justify="left")
        table.add_column("Section", style="cyan")
        table.add_column("Key")
        table.add_column("Value", style="dim")

        for section in DeploymentReport.SECTIONS:
            for key, value in getattr(report, section).items():
                table.add_row(section, key, value)

        self.console.print()
        self.console.print(table)
        if path:
            self.console.print(f"\n[dim]Report saved to:[/dim] {path}\n")
