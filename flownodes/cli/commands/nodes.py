"""flownodes nodes: List all registered node types."""

from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def nodes_list():
    """List every registered node type with its I/O and runtime hints.

    Example:
        flownodes nodes
    """
    from flownodes.nodes.registry import default_registry

    registry = default_registry(load_builtins=True)
    metas = registry.list_meta()

    if not metas:
        console.print("[yellow]No nodes registered.[/yellow]")
        return

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title=f"[bold]{len(metas)} Registered Nodes[/bold]",
    )
    table.add_column("Type", style="cyan", width=20)
    table.add_column("Label", width=16)
    table.add_column("Category", width=10, style="dim")
    table.add_column("Inputs", width=12)
    table.add_column("Outputs", width=20)
    table.add_column("Deterministic", width=13)

    for meta in metas:
        table.add_row(
            meta.type,
            f"{meta.icon} {meta.label}",
            meta.category,
            ", ".join(p.key for p in meta.inputs) or "[dim]-[/dim]",
            ", ".join(meta.output_keys),
            "[green]yes[/green]" if meta.is_deterministic else "[yellow]no[/yellow]",
        )

    console.print()
    console.print(table)
    console.print()
