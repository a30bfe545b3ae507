"""Command line interface entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .codegen import generate
from .config import (
    DEFAULT_HANDLERS_OUTPUT,
    DEFAULT_INTERFACE_NAME,
    DEFAULT_MODELS_OUTPUT,
    GeneratorConfig,
)
from .context_builder import compile_document
from .errors import RoutegenError
from .loader import load_spec


class CliError(click.ClickException):
    """Generation failed; reported as ``Error: <message>`` with exit status 1."""


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--spec",
    "spec_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the OpenAPI specification file (JSON or YAML); must be set",
)
@click.option(
    "--path",
    "output_dir",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the generated modules to",
)
@click.option(
    "--output",
    "handlers_output",
    default=DEFAULT_HANDLERS_OUTPUT,
    show_default=True,
    help="File name of the generated handlers module",
)
@click.option(
    "--models-output",
    default=DEFAULT_MODELS_OUTPUT,
    show_default=True,
    help="File name of the generated models module",
)
@click.option(
    "--package",
    default=None,
    help="Dotted package the generated modules live in",
)
@click.option(
    "--type-name",
    "interface_name",
    default=DEFAULT_INTERFACE_NAME,
    show_default=True,
    help="Name of the generated handler interface",
)
@click.option(
    "--flat-names",
    is_flag=True,
    default=False,
    help="Name nested property types after the property alone",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output")
@click.version_option(package_name="routegen")
def cli(
    spec_path: Path,
    output_dir: Path,
    handlers_output: str,
    models_output: str,
    package: str | None,
    interface_name: str,
    flat_names: bool,
    verbose: bool,
) -> None:
    """Generate models and a handler interface from an OpenAPI document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = GeneratorConfig(
        interface_name=interface_name,
        package=package,
        output_dir=output_dir,
        handlers_output=handlers_output,
        models_output=models_output,
        qualify_nested_names=not flat_names,
    )
    try:
        compilation = compile_document(load_spec(spec_path), config)
        generate(compilation, config)
    except RoutegenError as exc:
        raise CliError(str(exc)) from exc
    except OSError as exc:
        raise CliError(f"cannot write generated code: {exc}") from exc

    click.echo(f"Generated {config.models_path} ({len(compilation.types)} types)")
    click.echo(f"Generated {config.handlers_path} ({len(compilation.operations)} operations)")


def main() -> None:
    """console_scripts entry point."""
    cli()
