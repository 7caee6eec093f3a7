"""
Startup Waiter

Launches the API long enough for its one-time startup seeding to run, then
stops it. The default is a fixed wait followed by unconditional termination;
run_until_ready() polls the readiness endpoint instead.
"""

import subprocess
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import requests

from wingops.constants import (
    DEFAULT_READY_INTERVAL_SECONDS,
    DEFAULT_READY_TIMEOUT_SECONDS,
    DEFAULT_TERMINATE_GRACE_SECONDS,
)
from wingops.exceptions import ExternalCallError
from wingops.logger import OpsLogger


class StartupWaiter:
    """Launch, wait, terminate."""

    def __init__(
        self,
        logger: Optional[OpsLogger] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        http_get: Callable[..., requests.Response] = requests.get,
        popen=subprocess.Popen,
    ):
        self.logger = logger
        self.sleep = sleep
        self.clock = clock
        self.http_get = http_get
        self.popen = popen

    def _launch(self, args: List[str], cwd: Optional[Path], env: Optional[Dict[str, str]]):
        if self.logger:
            self.logger.log_command(" ".join(args))
        try:
            return self.popen(
                args,
                cwd=cwd,
                env=env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            raise ExternalCallError(f"Executable not found: {args[0]}", command=" ".join(args))

    def _check_alive(self, process, args: List[str]) -> None:
        returncode = process.poll()
        if returncode is not None and returncode != 0:
            raise ExternalCallError(
                "Application exited before startup completed",
                command=" ".join(args),
                returncode=returncode,
            )

    def _terminate(self, process) -> None:
        if process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=DEFAULT_TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
        if self.logger:
            self.logger.log("Application process terminated")

    def run_fixed(
        self,
        args: List[str],
        seconds: float,
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        """Start the process, sleep a fixed time, then stop it regardless."""
        process = self._launch(args, cwd, env)
        try:
            if self.logger:
                self.logger.log(f"Waiting {seconds}s for startup seeding")
            self.sleep(seconds)
            self._check_alive(process, args)
        finally:
            self._terminate(process)

    def run_until_ready(
        self,
        args: List[str],
        health_url: str,
        timeout: float = DEFAULT_READY_TIMEOUT_SECONDS,
        interval: float = DEFAULT_READY_INTERVAL_SECONDS,
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> float:
        """
        Start the process and poll health_url until it answers 200.

        Returns:
            Seconds until ready

        Raises:
            ExternalCallError: On timeout or early exit
        """
        process = self._launch(args, cwd, env)
        started = self.clock()
        try:
            while True:
                self._check_alive(process, args)
                try:
                    response = self.http_get(health_url, timeout=interval)
                    if response.status_code == 200:
                        elapsed = self.clock() - started
                        if self.logger:
                            self.logger.log(f"Ready after {elapsed:.1f}s: {health_url}")
                        return elapsed
                except requests.RequestException as e:
                    if self.logger:
                        self.logger.log(f"Not ready yet: {e}", "DEBUG")

                if self.clock() - started >= timeout:
                    raise ExternalCallError(
                        f"Application not ready after {timeout:.0f}s",
                        command=" ".join(args),
                        context=f"Polled: {health_url}",
                    )
                self.sleep(interval)
        finally:
            self._terminate(process)
