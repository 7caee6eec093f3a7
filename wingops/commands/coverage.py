"""WingOps - Code coverage aggregation"""

from typing import List, Optional

import click

from wingops.base import BaseCommand
from wingops.config import CoverageConfig, load_config, get_config_path
from wingops.models.coverage import CoverageEvaluation
from wingops.services.coverage_service import RUNNERS
from wingops.services.interpreter import evaluate_coverage
from wingops.services.report_service import Reporter


class CoverageCommand(BaseCommand):
    """Run backend and/or frontend coverage and compare against the threshold."""

    def __init__(
        self,
        target: str = "all",
        threshold: Optional[float] = None,
        skip_tests: bool = False,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(verbose=verbose, json_output=json_output)
        self.target = target
        self.threshold = threshold
        self.skip_tests = skip_tests
        self.evaluations: List[CoverageEvaluation] = []

    def _coverage_config(self) -> CoverageConfig:
        # Coverage works without a wingops.yml; defaults cover the standard layout
        if get_config_path(self.project_root).exists():
            return load_config().coverage
        return CoverageConfig()

    def execute(self) -> bool:
        config = self._coverage_config()
        threshold = self.threshold if self.threshold is not None else config.threshold
        targets = list(RUNNERS) if self.target == "all" else [self.target]

        self.show_header(
            title="Code Coverage",
            details={"Targets": ", ".join(targets), "Threshold": f"{threshold:.0f}%"},
        )
        logger = self.init_logger("local", "coverage")

        for target in targets:
            logger.step(f"Collecting {target} coverage")
            runner = RUNNERS[target](self.runner, self.project_root, config)
            summary = runner.collect(skip_tests=self.skip_tests)
            evaluation = evaluate_coverage(summary, threshold)
            self.evaluations.append(evaluation)

            logger.log(
                f"{target}: line {summary.line_rate:.2f}%, branch {summary.branch_rate:.2f}% "
                f"(threshold {threshold:.2f}%) from {summary.source}"
            )
            if evaluation.passed:
                logger.success(f"{target} meets the {threshold:.0f}% threshold")
            else:
                logger.warning(
                    f"{target} below threshold: {', '.join(evaluation.failed_metrics)}"
                )

        passed = all(e.passed for e in self.evaluations)

        if self.json_output:
            self.output_json(
                {
                    "passed": passed,
                    "threshold": threshold,
                    "targets": {
                        e.summary.target: {
                            "lineRate": round(e.summary.line_rate, 2),
                            "branchRate": round(e.summary.branch_rate, 2),
                            "linePassed": e.line_passed,
                            "branchPassed": e.branch_passed,
                            "report": str(e.summary.source),
                        }
                        for e in self.evaluations
                    },
                }
            )
        else:
            Reporter(self.console).render_summary(
                "Coverage summary", self._rows(), success=passed
            )

        return passed

    def _rows(self):
        for evaluation in self.evaluations:
            summary = evaluation.summary
            yield (
                f"{summary.target} lines",
                "success" if evaluation.line_passed else "error",
                f"{summary.line_rate:.2f}% (min {evaluation.threshold:.0f}%)",
            )
            yield (
                f"{summary.target} branches",
                "success" if evaluation.branch_passed else "error",
                f"{summary.branch_rate:.2f}% (min {evaluation.threshold:.0f}%)",
            )


@click.command(name="coverage")
@click.option(
    "--target",
    type=click.Choice(["all", "backend", "frontend"]),
    default="all",
    show_default=True,
    help="Which suite to measure",
)
@click.option("--threshold", type=float, help="Minimum line and branch coverage (%)")
@click.option("--skip-tests", is_flag=True, help="Re-use existing coverage reports")
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def coverage(target, threshold, skip_tests, verbose, json_output):
    """
    Generate coverage reports and enforce the threshold

    \b
    Examples:
      wingops coverage                         # Backend + frontend
      wingops coverage --target backend --threshold 85
      wingops coverage --skip-tests --json     # Re-read existing reports

    Exits 1 when any line or branch rate is below the threshold.
    """
    cmd = CoverageCommand(
        target=target,
        threshold=threshold,
        skip_tests=skip_tests,
        verbose=verbose,
        json_output=json_output,
    )
    cmd.run()
