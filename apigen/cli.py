"""CLI entry point for apigen."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .codegen import generate as generate_file
from .config import CONFIG_FILE, init_config, load_config
from .errors import ApiGenError
from .loader import load_document


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug diagnostics.")
@click.option(
    "-c", "--config", "config_path",
    default=str(CONFIG_FILE),
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file path.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path):
    """Generate TypeScript types and client functions from a Swagger 2.0 document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration.")
@click.pass_context
def init(ctx: click.Context, force: bool):
    """Write a default configuration file."""
    config_path: Path = ctx.obj["config_path"]
    try:
        init_config(config_path, force=force)
    except ApiGenError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Created {config_path}. Set 'source' to your Swagger document.")


@main.command()
@click.pass_context
def generate(ctx: click.Context):
    """Generate the output file."""
    config_path: Path = ctx.obj["config_path"]
    try:
        config = load_config(config_path)
        click.echo(f"Loading {config.source}...")
        document = load_document(config.source)
        result = generate_file(document, config.output_path)
    except ApiGenError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"[{config.path}] Unable to write file: {e.strerror or e}") from e

    click.echo(
        f"Generated {config.output_path} "
        f"({result['definition_count']} types, {result['operation_count']} functions)"
    )


main.add_command(generate, name="g")
