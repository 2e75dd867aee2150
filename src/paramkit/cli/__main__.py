"""paramkit CLI entry point.

Provides commands for inspecting parameter files: dumping a (possibly
namespaced) view of a file and reading single raw values.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import ParameterException
from ..parameters import Parameters

app = typer.Typer(
    name="paramkit",
    help="Inspect namespaced parameter files",
    invoke_without_command=True,
)


def _load(param_file: Path, namespace: Optional[str]) -> Parameters:
    params = Parameters.load(param_file)
    if namespace:
        if not params.is_namespace_present(namespace):
            raise ParameterException(f"Namespace '{namespace}' not present in {param_file}")
        params = params.copy_namespace(namespace)
    return params


@app.command("dump")
def dump_command(
    param_file: Path = typer.Argument(..., help="Parameter file to load"),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Only dump parameters under this namespace"
    ),
    timestamp: bool = typer.Option(
        True, "--timestamp/--no-timestamp", help="Write a leading timestamp comment"
    ),
    relative_keys: bool = typer.Option(
        False, "--relative-keys", help="Print keys relative to --namespace"
    ),
):
    """Print the parameters as sorted 'key: value' lines."""
    try:
        params = _load(param_file, namespace)
    except ParameterException as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(params.dump(timestamp, not relative_keys), nl=False)


@app.command("get")
def get_command(
    param_file: Path = typer.Argument(..., help="Parameter file to load"),
    key: str = typer.Argument(..., help="Parameter name (may be dotted)"),
):
    """Print the raw value of a single parameter."""
    try:
        value = Parameters.load(param_file).get_string(key)
    except ParameterException as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(value)


@app.command("version")
def version():
    """Show version information."""
    from .. import __version__
    typer.echo(f"paramkit version {__version__}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output")
):
    """paramkit CLI for parameter file inspection."""
    if verbose:
        logging.basicConfig(level=logging.INFO)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        typer.echo("\nError: Missing command.", err=True)
        raise typer.Exit(1)


def cli_main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\nAborted", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
