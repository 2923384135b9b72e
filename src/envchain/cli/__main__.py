from __future__ import annotations

import json
import logging
from itertools import chain
from pathlib import Path
from typing import List, Optional

import typer

from ..core.bootstrap import BootstrapConfigParser
from ..core.config_loader import ConfigLoader
from ..core.environment import Environment
from ..core.errors import EnvChainError
from ..core.pipeline import EnvironmentPreparer
from ..core.profiles import ACTIVE_PROFILES_PROPERTY
from ..core.types import Asset

app = typer.Typer(help="envchain CLI")


def _prepare(config: Optional[Path], profile: Optional[str], verbose: bool) -> Environment:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    loader = ConfigLoader(config)
    context = loader.get_context()
    registries = loader.get_asset_registries()
    context.known_modules = tuple(context.known_modules) + tuple(
        chain.from_iterable(registry.modules for registry in registries)
    )

    args: List[str] = []
    active = [profile] if profile else loader.get_active_profiles()
    if active:
        args.append(f"--{ACTIVE_PROFILES_PROPERTY}={','.join(active)}")
    environment = Environment.from_process(args)

    EnvironmentPreparer(context).prepare(environment, chain.from_iterable(registries))
    return environment


@app.command("chain")
def show_chain(
    config: Optional[Path] = typer.Option(None, "--config"),
    profile: Optional[str] = typer.Option(None, "--profile"),
    include_environ: bool = typer.Option(False, "--include-environ"),
    verbose: bool = typer.Option(False, "--verbose"),
):
    env = _prepare(config, profile, verbose)
    typer.echo(json.dumps(
        {
            "active_profiles": env.active_profiles,
            "sources": [
                {
                    "name": source.name,
                    "properties": (
                        source.properties
                        if include_environ or source.name != "systemEnvironment"
                        else {"<hidden>": len(source.properties)}
                    ),
                }
                for source in env.property_sources
            ],
        },
        indent=2,
        default=str,
    ))


@app.command()
def get(
    key: str,
    config: Optional[Path] = typer.Option(None, "--config"),
    profile: Optional[str] = typer.Option(None, "--profile"),
    verbose: bool = typer.Option(False, "--verbose"),
):
    env = _prepare(config, profile, verbose)
    typer.echo(json.dumps(
        {"key": key, "value": env.get_property(key), "source": env.source_of(key)},
        indent=2,
        default=str,
    ))


@app.command()
def bootstrap(path: Path = typer.Argument(..., exists=True, dir_okay=False)):
    asset = Asset(path=path.name, module="", content=path.read_bytes())
    try:
        parsed = BootstrapConfigParser().parse_asset(asset)
    except EnvChainError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(parsed, indent=2))


if __name__ == "__main__":
    app()
