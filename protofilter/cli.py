"""protofilter CLI application with Typer."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import click
import typer

from protofilter import __version__
from protofilter.bootstrap import bootstrap_application
from protofilter.codegen.emitter import GENERATOR_NAME
from protofilter.config import GeneratorOptions, get_settings
from protofilter.errors import GenerationError
from protofilter.utils.cli_output import json_response

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="protofilter",
    help="Generate permission-based field filters for Protocol Buffers messages",
    add_completion=False,
    no_args_is_help=True,
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"protofilter version {__version__}")
        raise typer.Exit()


def configure_logging(level: int) -> None:
    """Send diagnostics to stderr; stdout is reserved for the plugin protocol."""
    root = logging.getLogger("protofilter")
    root.setLevel(level)
    if not any(getattr(handler, "_protofilter", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._protofilter = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def _join_options(options: list[str] | None) -> str:
    return ",".join(option.strip() for option in options or [] if option.strip())


def run_plugin() -> None:
    """Read a CodeGeneratorRequest from stdin and answer on stdout."""
    container = bootstrap_application()
    stdin = click.get_binary_stream("stdin")
    stdout = click.get_binary_stream("stdout")

    payload = container.generator_service.generate_bytes(stdin.read())
    stdout.write(payload)
    stdout.flush()


def plugin_entrypoint() -> None:
    """Console entry point invoked by ``protoc`` as ``protoc-gen-pyfilter``."""
    configure_logging(get_settings().get_log_level())
    run_plugin()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug diagnostics to stderr"),
    ] = False,
) -> None:
    """protofilter - permission-based field redaction for Protocol Buffers."""
    settings = get_settings()
    configure_logging(logging.DEBUG if verbose else settings.get_log_level())


@app.command("plugin")
def plugin() -> None:
    """Run as a protoc plugin (request on stdin, response on stdout)."""
    run_plugin()


@app.command("generate")
def generate(
    descriptor_set: Annotated[
        Path,
        typer.Argument(
            help="FileDescriptorSet from protoc --descriptor_set_out --include_imports",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output_dir: Annotated[
        Path,
        typer.Option("--out", "-o", help="Directory receiving generated modules"),
    ],
    files: Annotated[
        list[str] | None,
        typer.Option("--file", "-f", help="Proto file to generate (repeatable, defaults to all)"),
    ] = None,
    options: Annotated[
        list[str] | None,
        typer.Option("--opt", help="Generator parameter such as paths=import (repeatable)"),
    ] = None,
) -> None:
    """Generate filter modules offline from a descriptor set."""

    container = bootstrap_application()
    service = container.generator_service

    try:
        request = service.build_request(
            service.load_descriptor_set(descriptor_set),
            targets=files or [],
            parameter=_join_options(options),
        )
        written = service.write_response(service.generate(request), output_dir.expanduser())
    except GenerationError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if not written:
        typer.secho("No annotated fields found; nothing generated.", fg=typer.colors.YELLOW)
        return

    for path in written:
        typer.echo(f"   {path}")
    typer.secho(f"✅ Generated {len(written)} filter module(s)", fg=typer.colors.GREEN)


@app.command("inspect")
def inspect(
    descriptor_set: Annotated[
        Path,
        typer.Argument(help="FileDescriptorSet to inspect", exists=True, dir_okay=False),
    ],
    options: Annotated[
        list[str] | None,
        typer.Option("--opt", help="Generator parameter such as extension=50777 (repeatable)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List annotated fields and the value each is redacted to."""

    container = bootstrap_application()
    service = container.generator_service

    parameter = _join_options(options)
    try:
        generator_options = GeneratorOptions.from_parameter(parameter, container.settings)
        files = service.read_files(
            service.load_descriptor_set(descriptor_set),
            parameter=parameter,
        )
    except GenerationError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    rows = service.describe(files)

    if json_output:
        typer.echo(
            json_response(
                "annotated_fields",
                1,
                generator=GENERATOR_NAME,
                options=generator_options.model_dump(),
                fields=[row.model_dump() for row in rows],
            )
        )
        return

    if not rows:
        typer.secho("No annotated fields found.", fg=typer.colors.YELLOW)
        return

    for row in rows:
        typer.echo(
            f"{row.message}.{row.field}  [{row.permission}]  {row.category} -> {row.zero_value}"
        )
    typer.secho(f"{len(rows)} annotated field(s)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
