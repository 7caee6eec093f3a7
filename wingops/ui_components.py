"""
WingOps - UI Components
Standardized headers and UI elements
"""

from rich.console import Console

LOGO = "wingops"


def show_header(
    title: str,
    subtitle: str = None,
    environment: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized WingOps command header.

    Args:
        title: Main title (e.g., "Deploy Backup Infrastructure")
        subtitle: Optional subtitle line
        environment: Target environment (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy Backup Infrastructure",
            environment="dev",
            details={"Mode": "what-if"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if environment:
        console.print(f"{prefix} Environment: [cyan]{environment}[/cyan]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [cyan]{value}[/cyan]")

    console.print()
