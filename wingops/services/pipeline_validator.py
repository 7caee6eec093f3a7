"""CI/CD workflow validation."""

import re
from pathlib import Path
from typing import Any, Dict, List, Set

import yaml

from wingops.models.results import ValidationResult

SECRET_REFERENCE = re.compile(r"\$\{\{\s*secrets\.([A-Za-z0-9_]+)\s*\}\}")


class PipelineValidator:
    """
    Structural checks for GitHub Actions workflow files.

    All problems across all files are collected; nothing stops early.
    """

    def __init__(self, workflows_dir: Path):
        self.workflows_dir = Path(workflows_dir)
        self.secrets_referenced: Set[str] = set()

    def workflow_files(self) -> List[Path]:
        if not self.workflows_dir.exists():
            return []
        return sorted(
            p for p in self.workflows_dir.iterdir() if p.suffix in (".yml", ".yaml")
        )

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        files = self.workflow_files()

        if not files:
            result.add_issue(f"No workflow files found in {self.workflows_dir}")
            return result

        for path in files:
            result.merge(self.validate_file(path))

        return result

    def validate_file(self, path: Path) -> ValidationResult:
        result = ValidationResult()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result.add_issue(f"{path.name}: unreadable ({e.__class__.__name__})")
            return result

        try:
            workflow = yaml.safe_load(text)
        except yaml.YAMLError as e:
            result.add_issue(f"{path.name}: invalid YAML ({e.__class__.__name__})")
            return result

        if not isinstance(workflow, dict):
            result.add_issue(f"{path.name}: top level must be a mapping")
            return result

        self.secrets_referenced.update(SECRET_REFERENCE.findall(text))

        if "name" not in workflow:
            result.add_warning(f"{path.name}: workflow has no name")

        # YAML 1.1 reads a bare `on:` key as boolean True
        if "on" not in workflow and True not in workflow:
            result.add_issue(f"{path.name}: no trigger ('on') defined")

        jobs = workflow.get("jobs")
        if not isinstance(jobs, dict) or not jobs:
            result.add_issue(f"{path.name}: no jobs defined")
            return result

        for job_name, job in jobs.items():
            self._validate_job(path.name, job_name, job, jobs, result)

        return result

    def _validate_job(
        self,
        file_name: str,
        job_name: str,
        job: Any,
        jobs: Dict[str, Any],
        result: ValidationResult,
    ) -> None:
        where = f"{file_name}: job '{job_name}'"

        if not isinstance(job, dict):
            result.add_issue(f"{where} must be a mapping")
            return

        # Reusable workflow calls have neither runs-on nor steps
        if "uses" in job:
            return

        if "runs-on" not in job:
            result.add_issue(f"{where} has no runs-on")

        steps = job.get("steps")
        if not isinstance(steps, list) or not steps:
            result.add_issue(f"{where} has no steps")
        else:
            for index, step in enumerate(steps, start=1):
                if not isinstance(step, dict) or not ("run" in step or "uses" in step):
                    result.add_issue(f"{where} step {index} has neither 'run' nor 'uses'")

        needs = job.get("needs", [])
        if isinstance(needs, str):
            needs = [needs]
        for dependency in needs or []:
            if dependency not in jobs:
                result.add_issue(f"{where} needs unknown job '{dependency}'")
