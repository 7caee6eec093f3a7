"""
External Command Runner

Thin subprocess wrapper shared by every provider and runner. Working
directory and environment are always explicit arguments.
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from wingops.exceptions import ExternalCallError
from wingops.logger import OpsLogger, run_with_progress
from wingops.models.results import ExecutionResult


class CommandRunner:
    """Runs external tools and converts failures into ExternalCallError."""

    def __init__(self, logger: Optional[OpsLogger] = None):
        self.logger = logger

    def run(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
        description: Optional[str] = None,
        capture_only: bool = False,
    ) -> ExecutionResult:
        """
        Run a command to completion.

        Args:
            args: Command and arguments
            cwd: Working directory for the child only
            env: Complete child environment (None inherits)
            check: Raise ExternalCallError on non-zero exit
            description: Spinner text (only used with a logger)
            capture_only: Keep stdout out of the log file (secret values)

        Returns:
            ExecutionResult

        Raises:
            ExternalCallError: If the tool is missing, or fails and check=True
        """
        cmd_string = " ".join(args)

        try:
            if self.logger and description and not capture_only:
                returncode, stdout, stderr = run_with_progress(
                    self.logger, args, description, cwd=cwd, env=env
                )
            else:
                if self.logger:
                    self.logger.log_command(cmd_string)
                completed = subprocess.run(
                    args, cwd=cwd, env=env, capture_output=True, text=True
                )
                returncode, stdout, stderr = (
                    completed.returncode,
                    completed.stdout,
                    completed.stderr,
                )
                if self.logger and not capture_only:
                    self.logger.log_output(stdout, "stdout")
                if self.logger:
                    self.logger.log_output(stderr, "stderr")
        except FileNotFoundError:
            raise ExternalCallError(
                f"Executable not found: {args[0]}",
                command=cmd_string,
                context="Install it or add it to PATH",
            )

        result = ExecutionResult(
            returncode=returncode,
            stdout=stdout or "",
            stderr=stderr or "",
            command=cmd_string,
        )

        if check and result.is_failure:
            raise ExternalCallError(
                f"Command failed: {args[0]} {args[1] if len(args) > 1 else ''}".strip(),
                command=cmd_string,
                returncode=result.returncode,
                context=f"Exit code: {result.returncode}\nError: {result.stderr.strip()[-500:]}",
            )

        return result
