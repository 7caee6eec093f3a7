"""
Coverage Service

Runs the backend and frontend test suites with coverage enabled and reads
back the Cobertura reports they emit.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path

from wingops.config import CoverageConfig
from wingops.constants import BACKEND_COVERAGE_PATTERN, FRONTEND_COVERAGE_PATTERN
from wingops.models.coverage import CoverageSummary
from wingops.services.interpreter import find_coverage_report, parse_cobertura


class CoverageRunner(ABC):
    """One test suite that produces a Cobertura report."""

    target: str = ""
    pattern: str = ""

    def __init__(self, runner, project_root: Path, config: CoverageConfig):
        self.runner = runner
        self.project_root = project_root
        self.config = config

    @property
    @abstractmethod
    def results_dir(self) -> Path:
        """Where the report is written."""

    @abstractmethod
    def run_tests(self) -> None:
        """Run the suite. Raises ExternalCallError if the test runner fails."""

    def collect(self, skip_tests: bool = False) -> CoverageSummary:
        if not skip_tests:
            self.run_tests()
        report = find_coverage_report(self.results_dir, self.pattern)
        return parse_cobertura(report, target=self.target)


class BackendCoverageRunner(CoverageRunner):
    """dotnet test with the coverlet XPlat collector."""

    target = "backend"
    pattern = BACKEND_COVERAGE_PATTERN

    @property
    def results_dir(self) -> Path:
        return self.project_root / self.config.backend_results_dir

    def run_tests(self) -> None:
        self.runner.run(
            [
                "dotnet",
                "test",
                self.config.backend_project,
                "--collect",
                "XPlat Code Coverage",
                "--results-directory",
                str(self.results_dir),
            ],
            cwd=self.project_root,
            description="Running backend tests with coverage",
        )


class FrontendCoverageRunner(CoverageRunner):
    """npm coverage script, asked for a Cobertura report."""

    target = "frontend"
    pattern = FRONTEND_COVERAGE_PATTERN

    @property
    def results_dir(self) -> Path:
        return self.project_root / self.config.frontend_results_dir

    def run_tests(self) -> None:
        env = dict(os.environ)
        env["CI"] = "true"
        self.runner.run(
            [
                "npm",
                "run",
                self.config.frontend_script,
                "--",
                f"--coverage.reporter={self.config.frontend_reporter}",
            ],
            cwd=self.project_root / self.config.frontend_project,
            env=env,
            description="Running frontend tests with coverage",
        )


RUNNERS = {
    "backend": BackendCoverageRunner,
    "frontend": FrontendCoverageRunner,
}
