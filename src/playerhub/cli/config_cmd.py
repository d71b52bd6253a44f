"""CLI commands for player configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml

from playerhub.config import normalize
from playerhub.page import PageContext
from playerhub.serialize import serialize as encode

app = typer.Typer(help="Normalize options files and encode persisted values.")


def _load_mapping(path: Path, label: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as err:
        typer.echo(f"Error: cannot read {label} {path}: {err}", err=True)
        raise typer.Exit(1) from err
    if not isinstance(data, dict):
        typer.echo(f"Error: {label} {path} must contain a mapping", err=True)
        raise typer.Exit(1)
    return data


@app.command("normalize")
def normalize_cmd(
    path: Path = typer.Argument(..., help="YAML or JSON file with player options"),
    persisted: Path = typer.Option(
        None, "--persisted", "-p", help="YAML/JSON mapping of stored (encoded) options"
    ),
    script_url: str = typer.Option(None, "--script-url", help="URL the loader script came from"),
    load_origin: str = typer.Option("", "--load-origin", help="Fallback asset origin"),
    http: bool = typer.Option(False, "--http", help="Page is served over plain http"),
) -> None:
    """Print the canonical config the engine would receive, as JSON."""
    options = _load_mapping(path, "options file")
    stored = None
    if persisted is not None:
        stored = {
            key: value if isinstance(value, str) else encode(value)
            for key, value in _load_mapping(persisted, "persisted file").items()
        }

    from playerhub.global_api import get_hub

    page = PageContext(
        script_url=script_url,
        load_origin=load_origin,
        protocol="http:" if http else "https:",
    )
    config = normalize(options, stored, defaults=get_hub().defaults, page=page)
    typer.echo(json.dumps(config, indent=2, default=str))


@app.command("serialize")
def serialize_cmd(
    value: str = typer.Argument(..., help="A JSON value; anything else is taken as a string"),
) -> None:
    """Print how VALUE is stored in persisted options."""
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = value
    typer.echo(encode(parsed))
