"""
Logging system for WingOps
Provides real-time logging to files with clean console output
"""

import re
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple

from rich.console import Console
from rich.live import Live
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from wingops.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class OpsLogger:
    """
    Manages logging for operational commands
    - Writes all output to log files in real-time
    - Shows clean progress UI in console (unless verbose)
    - Captures errors with context
    """

    def __init__(
        self,
        environment: str,
        operation: str,
        verbose: bool = False,
        log_root: Optional[Path] = None,
        quiet: bool = False,
    ):
        """
        Initialize logger

        Args:
            environment: Target environment (or 'local' for env-less commands)
            operation: Operation name (e.g., 'backup-deploy', 'coverage')
            verbose: If True, show all output in console
            log_root: Directory holding logs/ (defaults to project root)
            quiet: File only, nothing on the console (JSON output mode)
        """
        self.environment = environment
        self.operation = operation
        self.verbose = verbose
        self.quiet = quiet
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        if log_root is None:
            from wingops.utils import get_project_root

            log_root = get_project_root()

        # Structure: logs/{environment}/{date}/{time}_{operation}.log
        now = datetime.now()
        logs_dir = log_root / "logs" / environment / now.strftime(LOG_DATE_FORMAT)
        logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = logs_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time tailing
        self.log_file = open(self.log_path, "w", buffering=1)

        self._write_log_header()

    @property
    def show_progress(self) -> bool:
        """Compact console output: neither verbose nor quiet"""
        return not self.verbose and not self.quiet

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
WingOps Operation Log
{"=" * 80}
Environment: {self.environment}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")
        log_line = f"[{timestamp}] [{level}] {message}\n"

        if self.log_file:
            self.log_file.write(log_line)
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                console.print(f"[red]{message}[/red]")
            elif level == "WARNING":
                console.print(f"[yellow]{message}[/yellow]")
            elif level == "DEBUG":
                console.print(f"[dim]{message}[/dim]")
            else:
                console.print(message)

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always written to the log file; shown in console only if verbose.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output:
            return

        clean_output = ANSI_ESCAPE.sub("", output)

        if self.log_file:
            for line in clean_output.splitlines() or [clean_output]:
                self.log_file.write(f"  [{stream}] {line}\n")
            self.log_file.flush()

        if self.verbose:
            console.print(output, markup=False, highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"

        if self.log_file:
            self.log_file.write(error_block)
            self.log_file.flush()

        if self.quiet:
            return

        if self.show_progress:
            console.print()

        console.print(f"[bold red]✗ {error}[/bold red]")
        if context:
            console.print(f"  [color(208)]{context}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step and self.show_progress:
            console.print()

        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")

        if self.show_progress:
            console.print(f"[color(214)]▶[/color(214)] [white]{step_name}[/white]")

    def info(self, message: str):
        """Log an informational line"""
        self.log(message, "INFO")

        if self.show_progress:
            console.print(f"  [cyan]•[/cyan] {message}")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if self.show_progress:
            console.print(f"  [dim]✓ {message}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if self.show_progress:
            console.print(f"  [yellow]⚠[/yellow] [dim]{message}[/dim]")

    def failure(self, message: str):
        """Log a failed check without marking the whole run as errored"""
        self.log(message, "ERROR")

        if self.show_progress:
            console.print(f"  [red]✗[/red] {message}")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type != SystemExit:
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False


def run_with_progress(
    logger: OpsLogger,
    args: List[str],
    description: str,
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
) -> Tuple[int, str, str]:
    """
    Run a command with progress indicator

    Args:
        logger: OpsLogger instance
        args: Command and arguments
        description: Description for progress indicator
        cwd: Working directory
        env: Complete child environment (None inherits the parent's)

    Returns:
        Tuple of (return_code, stdout, stderr)
    """
    logger.log_command(" ".join(args))

    if logger.verbose or logger.quiet:
        process = subprocess.Popen(
            args,
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
        )

        stdout_lines = []
        if process.stdout:
            for line in process.stdout:
                line_stripped = line.rstrip()
                stdout_lines.append(line_stripped)
                logger.log_output(line_stripped, "stdout")

        process.wait()
        stderr_content = process.stderr.read() if process.stderr else ""
        if stderr_content:
            logger.log_output(stderr_content, "stderr")

        return process.returncode, "\n".join(stdout_lines), stderr_content

    spinner = Spinner("dots", text=f"[cyan]{description}...[/cyan]")
    padded_spinner = Padding(spinner, (0, 0, 0, 2))

    with Live(padded_spinner, console=console, refresh_per_second=10) as live:
        result = subprocess.run(
            args, cwd=cwd, env=env, capture_output=True, text=True
        )

        if result.stdout:
            logger.log_output(result.stdout, "stdout")
        if result.stderr:
            logger.log_output(result.stderr, "stderr")

        if result.returncode == 0:
            checkmark = Text("  ✓ ", style="dim")
            checkmark.append(description, style="dim")
            live.update(checkmark)
        else:
            x_mark = Text("  ✗ ", style="red")
            x_mark.append(description, style="dim")
            live.update(x_mark)

    return result.returncode, result.stdout, result.stderr
