"""WingOps - Doctor command"""

import click
from rich.table import Table

from wingops.base import BaseCommand
from wingops.config import get_config_path, load_config
from wingops.constants import REQUIRED_TOOLS
from wingops.exceptions import WingOpsError
from wingops.services.preconditions import SessionPrecondition, ToolPrecondition

TOOL_HINTS = {
    "az": "https://aka.ms/azcli",
    "dotnet": "https://dot.net",
    "npm": "https://nodejs.org",
    "git": "https://git-scm.com",
}


class DoctorCommand(BaseCommand):
    """Tool, session and configuration diagnostics."""

    def __init__(self, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.failures = 0
        self.table = Table(title="System Health Report", title_justify="left", padding=(0, 1))
        self.table.add_column("Check", style="cyan", no_wrap=True)
        self.table.add_column("Status")
        self.table.add_column("Details", style="dim")

    def _row(self, label: str, ok: bool, status: str, detail: str = "") -> None:
        if ok:
            self.table.add_row(f"✓ {label}", f"[green]{status}[/green]", detail)
        else:
            self.failures += 1
            self.table.add_row(f"✗ {label}", f"[red]{status}[/red]", detail)

    def check_tools(self) -> None:
        for tool in REQUIRED_TOOLS:
            ok, detail = ToolPrecondition(tool, hint=TOOL_HINTS.get(tool)).check()
            self._row(tool, ok, "Installed" if ok else "Missing", detail)

    def check_session(self) -> None:
        ok, detail = SessionPrecondition(self.runner).check()
        self._row("Azure CLI session", ok, "Logged in" if ok else "Not logged in", detail)

    def check_configuration(self) -> None:
        path = get_config_path(self.project_root)
        if not path.exists():
            self._row("Configuration", False, "Not found", f"Copy wingops.example.yml to {path.name}")
            return

        try:
            config = load_config(path)
        except WingOpsError as e:
            self._row("Configuration", False, "Invalid", e.message)
            return

        environments = config.list_environments()
        self._row("Configuration", True, "Valid", f"{len(environments)} environment(s)")
        for name in environments:
            env = config.environments[name]
            sections = [s for s in ("backup", "frontend") if getattr(env, s) is not None]
            store = f"Key Vault {env.key_vault}" if env.key_vault else "environment secrets"
            self.table.add_row(
                f"  {name}", "[green]Defined[/green]", f"{store}; {', '.join(sections) or 'no sections'}"
            )

    def execute(self) -> bool:
        self.show_header(
            title="System Diagnostics",
            subtitle="Checking tools, Azure session and configuration",
        )

        self.check_tools()
        self.check_session()
        self.check_configuration()

        self.console.print(self.table)
        self.console.print()

        if self.failures:
            self.print_error(f"{self.failures} check(s) failed")
            return False

        self.print_success("All checks passed")
        return True


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def doctor(verbose):
    """
    Health check & diagnostics

    \b
    Checks:
    - Required tools (az, dotnet, npm, git)
    - Azure CLI login
    - wingops.yml validity
    """
    cmd = DoctorCommand(verbose=verbose)
    cmd.run()
