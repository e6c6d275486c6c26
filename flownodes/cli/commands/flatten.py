"""flownodes flatten: Show the flattened leaves of an event's arguments."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def _events_from_abi(raw) -> list[dict]:
    # accepts a full ABI list, {"abi": [...]}, or {"events": [...]}
    if isinstance(raw, dict):
        raw = raw.get("events") or raw.get("abi") or []
    return [e for e in raw if isinstance(e, dict) and e.get("type", "event") == "event"]


def flatten_abi(
    abi_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="ABI JSON file"),
    event: Optional[str] = typer.Option(None, "--event", "-e", help="Only this event"),
):
    """Flatten the inputs of every event (or one) in ABI_FILE.

    Example:
        flownodes flatten seaport.json --event OrderFulfilled
    """
    from flownodes.paths import flatten_args

    try:
        raw = json.loads(abi_file.read_text())
    except json.JSONDecodeError as exc:
        console.print(f"[red]{abi_file} is not valid JSON:[/red] {exc}")
        raise typer.Exit(1)

    events = _events_from_abi(raw)
    if event:
        events = [e for e in events if e.get("name") == event]
    if not events:
        console.print("[yellow]No matching events.[/yellow]")
        raise typer.Exit(1)

    for evt in events:
        table = Table(box=box.ROUNDED, header_style="bold dim", title=f"[bold]{evt.get('name', '?')}[/bold]")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Path", style="dim")
        table.add_column("Indexed", width=8)
        for leaf in flatten_args(evt.get("inputs") or []):
            table.add_row(leaf.name, leaf.type, " → ".join(leaf.source_path), "yes" if leaf.indexed else "")
        console.print(table)
