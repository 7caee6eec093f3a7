#!/usr/bin/env python3
"""WingOps CLI - Main entry point"""

import functools
import os
import sys

import rich_click as click
from click.exceptions import Abort, ClickException, UsageError
from rich.console import Console

from wingops import __version__
from wingops.commands import (
    admin_verify,
    backup_deploy,
    coverage,
    db_migrate,
    doctor,
    frontend_publish,
    jwt_inspect,
    pipeline_validate,
)
from wingops.constants import EXIT_FAILURE

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_USAGE_COMMAND = "bold cyan"
click.rich_click.STYLE_HELPTEXT_FIRST_LINE = "bold white"
click.rich_click.STYLE_HELPTEXT = ""
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_REQUIRED_SHORT = "bold red"
click.rich_click.STYLE_REQUIRED_LONG = "bold red"
click.rich_click.STYLE_OPTION_DEFAULT = "dim cyan"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"
click.rich_click.ALIGN_OPTIONS_PANEL = "left"
click.rich_click.ERRORS_EPILOGUE = ""

console = Console()

BANNER = """
[bold cyan]╔══════════════════════════════════════════════════╗[/bold cyan]
[bold cyan]║[/bold cyan]  [bold white]WingOps[/bold white] - WingCompanion operations tooling     [bold cyan]║[/bold cyan]
[bold cyan]╚══════════════════════════════════════════════════╝[/bold cyan]
"""


def handle_cli_errors(func):
    """Map every failure to exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except UsageError as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e.format_message()}\n")
            if e.ctx and e.ctx.command:
                console.print(
                    f"[dim]Run[/dim] [cyan]wingops {e.ctx.command.name} --help[/cyan] [dim]for usage information[/dim]\n"
                )
            sys.exit(EXIT_FAILURE)
        except ClickException as e:
            e.show()
            sys.exit(EXIT_FAILURE)
        except (Abort, KeyboardInterrupt):
            console.print("\n\n[yellow]⚠  Operation cancelled by user[/yellow]")
            sys.exit(EXIT_FAILURE)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")
            if os.environ.get("DEBUG"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(EXIT_FAILURE)

    return wrapper


class NamespacedGroup(click.RichGroup):
    """Group that accepts '<env>:<command>', e.g. 'dev:backup:deploy'."""

    def get_command(self, ctx, cmd_name):
        existing = super().get_command(ctx, cmd_name)
        if existing is not None or ":" not in cmd_name:
            return existing

        environment, sub_cmd = cmd_name.split(":", 1)
        base_command = super().get_command(ctx, sub_cmd)
        if base_command is None or not any(p.name == "environment" for p in base_command.params):
            return None

        wrapper = click.Command(
            name=cmd_name,
            callback=functools.partial(
                self._inject_environment, base_command.callback, environment
            ),
            params=[p for p in base_command.params if p.name != "environment"],
            help=base_command.help,
        )
        return wrapper

    @staticmethod
    def _inject_environment(original_callback, environment, *args, **kwargs):
        kwargs["environment"] = environment
        return original_callback(*args, **kwargs)


@click.group(cls=NamespacedGroup, invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    WingOps - deployment, data and quality operations for WingCompanion.

    \b
    Environment commands (-e/--env or <env>:<command>):
      wingops dev:backup:deploy --what-if   # Preview backup infrastructure
      wingops dev:backup:deploy             # Deploy and write report
      wingops dev:db:migrate --recreate     # Drop, migrate, seed
      wingops prod:frontend:publish         # Build, upload, purge CDN
      wingops test:admin:verify             # Check admin login and role

    \b
    Local commands:
      wingops coverage --threshold 80       # Backend + frontend coverage
      wingops pipeline:validate             # Check workflow files
      wingops jwt:inspect <token>           # Decode token claims
      wingops doctor                        # Diagnostics

    Every command exits 0 on full success and 1 otherwise.
    """
    if ctx.invoked_subcommand is None:
        console.print(BANNER)
        console.print("[yellow]Run 'wingops --help' for usage[/yellow]\n")


cli.add_command(backup_deploy)
cli.add_command(db_migrate)
cli.add_command(frontend_publish)
cli.add_command(admin_verify)
cli.add_command(coverage)
cli.add_command(pipeline_validate)
cli.add_command(jwt_inspect)
cli.add_command(doctor)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli(standalone_mode=False)


if __name__ == "__main__":
    main()
