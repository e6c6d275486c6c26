"""flownodes config: Show resolved flownodes configuration."""

from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def config_show():
    """Show the resolved configuration (environment + .env).

    Example:
        flownodes config
    """
    from flownodes.config import FlowNodesConfig
    cfg = FlowNodesConfig()

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]flownodes Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=28)
    table.add_column("Value", width=30)
    table.add_column("Env Var", style="dim", width=36)

    for key, value in cfg.model_dump().items():
        table.add_row(key, str(value), f"FLOWNODES_{key.upper()}")

    console.print()
    console.print(table)
    console.print()
