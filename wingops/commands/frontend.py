"""WingOps - Frontend publishing"""

import click

from wingops.base import EnvironmentCommand
from wingops.constants import STATIC_WEBSITE_CONTAINER
from wingops.exceptions import PreconditionError
from wingops.services.frontend_publisher import FrontendPublisher
from wingops.services.preconditions import (
    PreconditionChecker,
    SessionPrecondition,
    ToolPrecondition,
)


class FrontendPublishCommand(EnvironmentCommand):
    """Build the SPA, upload it to the static website container and purge the CDN."""

    def __init__(
        self,
        environment: str,
        skip_build: bool = False,
        what_if: bool = False,
        verbose: bool = False,
    ):
        super().__init__(environment, verbose=verbose)
        self.skip_build = skip_build
        self.what_if = what_if

    def execute(self) -> bool:
        frontend = self.env_config.require_frontend()
        publisher = FrontendPublisher(
            self.runner, self.project_root, frontend, self.env_config.resource_group
        )

        self.show_header(
            title="Publish Frontend",
            environment=self.environment,
            details={
                "Storage account": frontend.storage_account,
                "CDN": frontend.cdn_endpoint or "none",
                "Mode": "what-if (no upload)" if self.what_if else "publish",
            },
        )

        logger = self.init_logger(self.environment, "frontend-publish")

        logger.step("Checking prerequisites")
        conditions = [ToolPrecondition("az", hint="Install the Azure CLI: https://aka.ms/azcli")]
        if not self.skip_build:
            conditions.append(ToolPrecondition("npm", hint="Install Node.js"))
        if not self.what_if:
            conditions.append(SessionPrecondition(self.runner))
        PreconditionChecker(logger).require(conditions)

        if self.skip_build:
            logger.warning("Build skipped; publishing existing output")
        else:
            logger.step("Building frontend")
            publisher.build()
            logger.success(f"Build output: {publisher.build_dir}")

        if not publisher.build_dir.exists():
            raise PreconditionError([f"Build output not found: {publisher.build_dir}"])

        files = publisher.list_files()

        if self.what_if:
            logger.step("Files that would be uploaded")
            for path in files:
                logger.info(str(path))
            logger.success(
                f"{len(files)} file(s) would be uploaded to "
                f"{frontend.storage_account}/{STATIC_WEBSITE_CONTAINER}"
            )
            return True

        logger.step("Uploading")
        publisher.upload()
        logger.success(f"Uploaded {len(files)} file(s)")

        if publisher.has_cdn:
            logger.step("Purging CDN")
            publisher.purge()
            logger.success(f"Purged {frontend.cdn_endpoint}")
        else:
            logger.warning("No CDN endpoint configured; purge skipped")

        return True


@click.command(name="frontend:publish")
@click.option("--env", "-e", "environment", required=True, help="Target environment")
@click.option("--skip-build", is_flag=True, help="Publish the existing build output")
@click.option("--what-if", is_flag=True, help="List files without uploading")
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def frontend_publish(environment, skip_build, what_if, verbose):
    """
    Build and publish the frontend to the CDN

    \b
    Examples:
      wingops dev:frontend:publish
      wingops prod:frontend:publish --skip-build
      wingops dev:frontend:publish --what-if
    """
    cmd = FrontendPublishCommand(
        environment, skip_build=skip_build, what_if=what_if, verbose=verbose
    )
    cmd.run()
