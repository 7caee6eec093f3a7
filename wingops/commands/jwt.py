"""WingOps - JWT inspection"""

import click
from rich.markup import escape
from rich.table import Table

from wingops.base import BaseCommand
from wingops.services.jwt_inspector import decode_jwt_payload, summarize_claims
from wingops.services.secret_service import mask_secret


class JwtInspectCommand(BaseCommand):
    """Decode a token and show its claims. The signature is not verified."""

    def __init__(self, token: str, show_all: bool = False, json_output: bool = False):
        super().__init__(json_output=json_output)
        self.token = token
        self.show_all = show_all

    def execute(self) -> bool:
        self.show_header(title="Inspect Token", details={"Token": mask_secret(self.token)})
        payload = decode_jwt_payload(self.token)
        summary = summarize_claims(payload)

        if self.json_output:
            self.output_json({"summary": summary, "claims": payload} if self.show_all else summary)
            return True

        table = Table(title="Token claims", title_justify="left", padding=(0, 1))
        table.add_column("Claim", style="cyan", no_wrap=True)
        table.add_column("Value")

        for key, value in summary.items():
            if isinstance(value, list):
                value = ", ".join(value) or "-"
            table.add_row(key, "-" if value is None else escape(str(value)))

        if self.show_all:
            for key, value in payload.items():
                table.add_row(f"[dim]{escape(key)}[/dim]", escape(str(value)))

        self.console.print(table)

        if summary["expired"]:
            self.print_warning("Token has expired")

        return True


@click.command(name="jwt:inspect")
@click.argument("token")
@click.option("--all", "show_all", is_flag=True, help="Also list every raw claim")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def jwt_inspect(token, show_all, json_output):
    """
    Decode a JWT and print its claims

    \b
    Example:
      wingops jwt:inspect eyJhbGciOi...
    """
    cmd = JwtInspectCommand(token, show_all=show_all, json_output=json_output)
    cmd.run()
