"""flownodes render / validate: Exercise the template engine from the shell."""

import json
from typing import Optional

import typer
from rich.console import Console

console = Console()


def _load_json_option(raw: Optional[str], label: str):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        console.print(f"[red]--{label} is not valid JSON:[/red] {exc}")
        raise typer.Exit(1)


def render_template(
    template: str = typer.Argument(..., help="Template text, e.g. '{\"a\": {{x}}}'"),
    mode: str = typer.Option("json", "--mode", "-m", help="json or string"),
    inputs: Optional[str] = typer.Option(None, "--inputs", "-i", help="Inputs as a JSON object"),
    hints: Optional[str] = typer.Option(None, "--hints", help="availableParams hints as a JSON array"),
):
    """Render TEMPLATE and print the result.

    Example:
        flownodes render '{"total": {{amount}}}' --inputs '{"amount": 5}'
    """
    from flownodes.template import render
    from flownodes.types import RenderMode

    result = render(
        template,
        mode=mode,
        inputs=_load_json_option(inputs, "inputs") or {},
        hints=_load_json_option(hints, "hints"),
    )
    if mode == RenderMode.STRING.value:
        console.print(result, markup=False, highlight=False)
    else:
        console.print_json(json.dumps(result))


def validate(
    template: str = typer.Argument(..., help="Template text"),
    mode: str = typer.Option("json", "--mode", "-m", help="json or string"),
):
    """Print Valid/Invalid for TEMPLATE; exit code 1 when invalid."""
    from flownodes.template import validate_template

    if validate_template(template, mode):
        console.print("[green]Valid[/green]")
        return
    console.print("[red]Invalid[/red]")
    raise typer.Exit(1)
