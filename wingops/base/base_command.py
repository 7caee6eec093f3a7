"""
Base Command Class

Abstract base for all WingOps CLI commands.
Provides common functionality and structure.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from rich.console import Console

from wingops.constants import EXIT_FAILURE
from wingops.exceptions import WingOpsError
from wingops.logger import OpsLogger
from wingops.services.command_runner import CommandRunner
from wingops.ui_components import show_header
from wingops.utils import get_project_root


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling with a strictly binary exit code
    - JSON output support
    """

    def __init__(self, verbose: bool = False, json_output: bool = False):
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self.project_root = get_project_root()
        self.logger: Optional[OpsLogger] = None
        self.runner = CommandRunner()

    def init_logger(self, environment: str, command_name: str) -> OpsLogger:
        """
        Initialize command logger and attach it to the command runner.

        Args:
            environment: Environment name (use "local" for env-less commands)
            command_name: Command name

        Returns:
            OpsLogger instance
        """
        self.logger = OpsLogger(
            environment,
            command_name,
            verbose=self.verbose,
            log_root=self.project_root,
            quiet=self.json_output,
        )
        self.runner.logger = self.logger
        return self.logger

    def output_json(self, data: Dict[str, Any]) -> None:
        """Print data as JSON."""
        print(json.dumps(data, indent=2, default=str))

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        environment: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                environment=environment,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {message}[/red]")

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def confirm(self, question: str, default: bool = False) -> bool:
        """
        Ask for user confirmation.

        Args:
            question: Question to ask
            default: Default answer

        Returns:
            True if confirmed
        """
        default_str = "y" if default else "n"
        self.console.print(
            f"{question} [bold bright_white]\\[y/n][/bold bright_white] [dim]({default_str})[/dim]: ",
            end="",
        )
        answer = input().strip().lower()

        if not answer:
            return default

        return answer in ["y", "yes"]

    def _fail(self, message: str, context: Optional[str] = None) -> None:
        if self.logger:
            self.logger.log_error(message, context=context)
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")
        else:
            self.print_error(message)
            if context:
                self.print_dim(f"Context: {context}")
        raise SystemExit(EXIT_FAILURE)

    @abstractmethod
    def execute(self, **kwargs) -> bool:
        """
        Execute command logic.

        Returns:
            True when every stage succeeded
        """

    def run(self, **kwargs) -> None:
        """
        Run command with error handling. Exits 0 on success, 1 otherwise.

        Args:
            **kwargs: Command arguments
        """
        try:
            if not self.execute(**kwargs):
                if self.logger:
                    self.logger.has_errors = True
                raise SystemExit(EXIT_FAILURE)
        except KeyboardInterrupt:
            self._fail("Operation cancelled by user")
        except SystemExit:
            raise
        except WingOpsError as e:
            self._fail(e.message, context=e.context)
        except FileNotFoundError as e:
            self._fail(f"File not found: {e}")
        except PermissionError as e:
            self._fail(f"Permission denied: {e}")
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")
        finally:
            if self.logger:
                self.logger.close()
