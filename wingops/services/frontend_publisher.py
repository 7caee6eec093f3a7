"""Frontend publishing: build, upload to the static website container, purge the CDN."""

from pathlib import Path
from typing import List

from wingops.config import FrontendConfig
from wingops.constants import STATIC_WEBSITE_CONTAINER
from wingops.exceptions import ExternalCallError


class FrontendPublisher:
    def __init__(self, runner, project_root: Path, config: FrontendConfig, resource_group: str):
        self.runner = runner
        self.project_root = project_root
        self.config = config
        self.resource_group = resource_group

    @property
    def build_dir(self) -> Path:
        return self.project_root / self.config.build_dir

    def build(self) -> None:
        project_dir = self.project_root / self.config.project_dir
        self.runner.run(["npm", "ci"], cwd=project_dir, description="Installing dependencies")
        self.runner.run(["npm", "run", "build"], cwd=project_dir, description="Building frontend")

        if not self.build_dir.exists():
            raise ExternalCallError(
                "Build finished but produced no output",
                command="npm run build",
                context=f"Expected: {self.build_dir}",
            )

    def list_files(self) -> List[Path]:
        """Files that an upload would send, relative to the build dir."""
        return sorted(
            p.relative_to(self.build_dir) for p in self.build_dir.rglob("*") if p.is_file()
        )

    def upload(self) -> None:
        self.runner.run(
            [
                "az",
                "storage",
                "blob",
                "upload-batch",
                "--account-name",
                self.config.storage_account,
                "--destination",
                STATIC_WEBSITE_CONTAINER,
                "--source",
                str(self.build_dir),
                "--overwrite",
                "--auth-mode",
                "login",
            ],
            description=f"Uploading to {self.config.storage_account}/{STATIC_WEBSITE_CONTAINER}",
        )

    @property
    def has_cdn(self) -> bool:
        return bool(self.config.cdn_profile and self.config.cdn_endpoint)

    def purge(self) -> None:
        self.runner.run(
            [
                "az",
                "cdn",
                "endpoint",
                "purge",
                "--resource-group",
                self.resource_group,
                "--profile-name",
                self.config.cdn_profile,
                "--name",
                self.config.cdn_endpoint,
                "--content-paths",
                "/*",
            ],
            description=f"Purging CDN endpoint {self.config.cdn_endpoint}",
        )
