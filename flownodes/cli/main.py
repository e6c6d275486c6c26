"""flownodes CLI: Typer application."""

import logging

import typer
from rich.console import Console

from flownodes.version import __version__

app = typer.Typer(
    name="flownodes",
    help="flownodes: node dispatch and template rendering for automation graphs.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


def _configure_logging() -> None:
    from flownodes.config import FlowNodesConfig
    level = FlowNodesConfig().log_level.upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("flownodes").setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """flownodes CLI."""
    if version:
        console.print(f"flownodes v{__version__}")
        raise typer.Exit()
    _configure_logging()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


from flownodes.cli.commands import nodes, render, flatten, config  # noqa: E402

app.command(name="nodes", help="List registered node types")(nodes.nodes_list)
app.command(name="render", help="Render a template against JSON inputs")(render.render_template)
app.command(name="validate", help="Check whether a template is valid")(render.validate)
app.command(name="flatten", help="Flatten event arguments from an ABI file")(flatten.flatten_abi)
app.command(name="config", help="Show resolved configuration")(config.config_show)


if __name__ == "__main__":
    app()
