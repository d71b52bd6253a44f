"""playerhub CLI -- typer-based command interface.

Commands:
    playerhub config normalize <file>   Print the canonical config for an options file
    playerhub config serialize <value>  Print the persisted encoding of a value
    playerhub providers                 List registered media providers
"""

from __future__ import annotations

import typer

from playerhub.cli import config_cmd
from playerhub.observability import ObservabilityConfig, configure

app = typer.Typer(
    name="playerhub",
    help="Inspect player configuration and the process-level registries.",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")


@app.callback()
def _main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for stderr output."),
) -> None:
    configure(ObservabilityConfig(log_level=log_level, log_format="console"))


@app.command()
def providers() -> None:
    """List registered media providers, highest priority first."""
    from playerhub.global_api import available_providers

    names = available_providers()
    if not names:
        typer.echo("No providers registered.")
        return
    for name in names:
        typer.echo(name)


def main() -> None:
    """Entry point for the playerhub CLI."""
    app()
