"""WingOps - Admin account verification"""

from typing import Optional

import click

from wingops.base import EnvironmentCommand
from wingops.exceptions import ConfigurationError
from wingops.services.admin_verifier import AdminVerifier
from wingops.services.preconditions import PreconditionChecker


class AdminVerifyCommand(EnvironmentCommand):
    """Log in with the admin credentials from the secret store and check the Admin role."""

    def __init__(
        self,
        environment: str,
        api_url: Optional[str] = None,
        secret_source: str = "auto",
        verbose: bool = False,
        verifier: Optional[AdminVerifier] = None,
    ):
        super().__init__(environment, verbose=verbose, secret_source=secret_source)
        self.api_url = api_url
        self.verifier = verifier

    def execute(self) -> bool:
        env = self.env_config
        api_url = self.api_url or env.api_url
        if not api_url:
            raise ConfigurationError(
                f"No API URL for environment '{self.environment}'",
                context=f"Set environments.{self.environment}.api_url or pass --api-url",
            )

        self.show_header(
            title="Verify Admin Account",
            environment=self.environment,
            details={"API": api_url},
        )
        logger = self.init_logger(self.environment, "admin-verify")

        logger.step("Checking prerequisites")
        PreconditionChecker(logger).require(
            [
                self.secret_precondition(env.admin_email_secret),
                self.secret_precondition(env.admin_password_secret),
            ]
        )

        logger.step("Resolving admin credentials")
        secrets = self.secret_resolver().resolve(
            [env.admin_email_secret, env.admin_password_secret]
        )

        logger.step("Logging in")
        verifier = self.verifier or AdminVerifier(logger)
        result = verifier.verify(
            api_url, secrets[env.admin_email_secret], secrets[env.admin_password_secret]
        )

        for issue in result.issues:
            logger.failure(issue)
        for warning in result.warnings:
            logger.warning(warning)

        if result.is_valid:
            self.print_success("Admin account verified")
        return result.is_valid


@click.command(name="admin:verify")
@click.option("--env", "-e", "environment", required=True, help="Target environment")
@click.option("--api-url", help="API base URL (default from wingops.yml)")
@click.option(
    "--secrets",
    "secret_source",
    type=click.Choice(["auto", "keyvault", "env"]),
    default="auto",
    show_default=True,
    help="Where to read the admin credentials from",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def admin_verify(environment, api_url, secret_source, verbose):
    """
    Verify the admin account can log in and holds the Admin role

    \b
    Examples:
      wingops dev:admin:verify
      wingops admin:verify -e test --api-url https://localhost:5001
    """
    cmd = AdminVerifyCommand(
        environment, api_url=api_url, secret_source=secret_source, verbose=verbose
    )
    cmd.run()
