"""customid CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

import click

from customid.core.models import EngineConfig, FormatError, IdFormat

_format_file = click.argument(
    "format_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


@click.group()
@click.version_option(package_name="customid")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file.",
)
@click.option("--json-logs", is_flag=True, default=False, help="Output logs as JSON.")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR).")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    json_logs: bool,
    log_level: str | None,
) -> None:
    """customid: build and check custom item identifiers."""
    from customid.core.config import load_config_file, make_engine_config
    from customid.core.logging import configure_logging

    data = load_config_file(config_path) if config_path else {}
    config = make_engine_config(data)
    if json_logs:
        config.json_logs = True
    if log_level is not None:
        config.log_level = log_level

    configure_logging(json_output=config.json_logs, level=config.log_level)
    ctx.obj = config


def _load(path: Path) -> IdFormat:
    from customid.core.config import load_format_file

    try:
        return load_format_file(path)
    except FormatError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@_format_file
@click.option("--counter", "-n", type=int, default=1, help="Counter value for SEQUENCE.")
@click.option("--count", type=click.IntRange(min=1), default=1, help="How many to generate.")
@click.option("--seed", type=int, default=None, help="Seed random elements (for testing).")
@click.pass_obj
def generate(
    config: EngineConfig, format_file: Path, counter: int, count: int, seed: int | None
) -> None:
    """Generate identifiers from FORMAT_FILE.

    With --count, consecutive counter values starting at --counter are used.
    """
    from customid.core.config import make_clock
    from customid.core.random_source import SeededRandomSource

    fmt = _load(format_file)
    source = SeededRandomSource(seed) if seed is not None else None
    clock = make_clock(config)
    for offset in range(count):
        click.echo(fmt.generate(counter + offset, random_source=source, now=clock()))


@cli.command()
@_format_file
@click.argument("candidate")
def validate(format_file: Path, candidate: str) -> None:
    """Check whether CANDIDATE conforms to FORMAT_FILE."""
    fmt = _load(format_file)
    if fmt.validate_id(candidate):
        click.echo("valid")
        return
    click.echo("invalid")
    raise SystemExit(1)


@cli.command()
@_format_file
def pattern(format_file: Path) -> None:
    """Print the recognition pattern for FORMAT_FILE."""
    fmt = _load(format_file)
    source = fmt.pattern()
    if source is None:
        click.echo("Format is empty; any identifier is accepted.")
        return
    click.echo(source)


@cli.command()
@_format_file
def normalize(format_file: Path) -> None:
    """Print FORMAT_FILE's records re-indexed to contiguous sort orders."""
    fmt = _load(format_file)
    click.echo(json.dumps(fmt.normalized().to_records(), indent=2))


@cli.command()
@_format_file
@click.option(
    "--current",
    type=int,
    default=0,
    help="Current counter value; the preview uses the next one.",
)
@click.pass_obj
def preview(config: EngineConfig, format_file: Path, current: int) -> None:
    """Show what the next identifier from FORMAT_FILE will look like."""
    from customid.core.config import make_clock

    fmt = _load(format_file)
    result = fmt.preview(current, now=make_clock(config)())
    if result is None:
        click.echo("EMPTY FORMAT (a random UUID will be used)")
        return
    click.echo(result)
