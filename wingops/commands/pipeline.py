"""WingOps - CI/CD workflow validation"""

from typing import Optional

import click

from wingops.base import BaseCommand
from wingops.config import get_config_path, load_config
from wingops.services.pipeline_validator import PipelineValidator
from wingops.utils import resolve_path


class PipelineValidateCommand(BaseCommand):
    """Validate every workflow file and report all problems together."""

    def __init__(
        self,
        workflows_dir: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(verbose=verbose, json_output=json_output)
        self.workflows_dir = workflows_dir

    def _resolve_dir(self):
        if self.workflows_dir:
            return resolve_path(self.workflows_dir, self.project_root)
        if get_config_path(self.project_root).exists():
            return resolve_path(load_config().workflows_dir, self.project_root)
        return self.project_root / ".github" / "workflows"

    def execute(self) -> bool:
        directory = self._resolve_dir()

        self.show_header(title="Validate Pipelines", details={"Directory": str(directory)})
        logger = self.init_logger("local", "pipeline-validate")

        validator = PipelineValidator(directory)
        files = validator.workflow_files()

        logger.step(f"Validating {len(files)} workflow file(s)")
        result = validator.validate()

        for issue in result.issues:
            logger.failure(issue)
        for warning in result.warnings:
            logger.warning(warning)
        if validator.secrets_referenced:
            logger.info(f"Secrets referenced: {', '.join(sorted(validator.secrets_referenced))}")

        if self.json_output:
            self.output_json(
                {
                    "valid": result.is_valid,
                    "files": [f.name for f in files],
                    "issues": result.issues,
                    "warnings": result.warnings,
                    "secrets": sorted(validator.secrets_referenced),
                }
            )
        elif result.is_valid:
            self.print_success(f"{len(files)} workflow file(s) valid")
        else:
            self.print_error(f"{len(result.issues)} issue(s) found")

        return result.is_valid


@click.command(name="pipeline:validate")
@click.option("--dir", "workflows_dir", help="Workflow directory (default: .github/workflows)")
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def pipeline_validate(workflows_dir, verbose, json_output):
    """
    Validate CI/CD workflow files

    \b
    Checks every workflow for:
    - Valid YAML, a trigger and at least one job
    - runs-on and non-empty steps per job
    - needs references to existing jobs
    """
    cmd = PipelineValidateCommand(
        workflows_dir=workflows_dir, verbose=verbose, json_output=json_output
    )
    cmd.run()
