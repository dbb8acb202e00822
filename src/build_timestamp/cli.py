"""Command-line interface for rendering build timestamp properties.

Usage:
    $ build-timestamp render --config build-timestamp.toml
    BUILD_TIMESTAMP=2024-03-01 00:00:00 UTC
    YESTERDAY=2024-02-29

    $ build-timestamp render --at 2024-03-01T00:00:00Z --format json
    $ build-timestamp check-shift "+1D-2h"
    $ build-timestamp check-pattern "yyyy-MM-dd" --timezone Europe/Madrid
    $ build-timestamp timezones
"""

from datetime import datetime, timezone
from enum import Enum
import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
import typer

from .config import load_settings
from .exceptions import ConfigValidationError
from .properties import evaluate_properties
from .utils import configure_logger, ensure_aware
from .validation import check_pattern, check_shift_expression, timezone_items

app = typer.Typer(name="build-timestamp", help="Expose build timestamps as environment properties.", no_args_is_help=True)


class OutputFormat(str, Enum):
    env = "env"
    json = "json"


def _parse_instant(value: Optional[str]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        return ensure_aware(datetime.fromisoformat(value))
    except ValueError:
        raise typer.BadParameter(f"not an ISO 8601 instant: {value}", param_hint="--at")


@app.command()
def render(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file"),
    at: Optional[str] = typer.Option(None, "--at", help="Base instant in ISO 8601 (default: now)"),
    output: OutputFormat = typer.Option(OutputFormat.env, "--format", "-f", help="Output format"),
) -> None:
    """Render BUILD_TIMESTAMP and the extra properties."""
    base = _parse_instant(at)

    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    configure_logger(level=settings.logging.level, structured=settings.logging.structured)

    try:
        timestamp_config = settings.to_config()
    except ConfigValidationError as e:
        for issue in e.issues:
            typer.echo(f"Error: {issue.field}: {issue.message}", err=True)
        raise typer.Exit(code=2)

    result = evaluate_properties(timestamp_config, base)

    if output == OutputFormat.json:
        typer.echo(json.dumps(result.properties, indent=2, sort_keys=True))
    else:
        for key in sorted(result.properties):
            typer.echo(f"{key}={result.properties[key]}")

    for failure in result.failures:
        typer.echo(f"Skipped {failure.key}: {failure.message}", err=True)

    if not result.ok:
        raise typer.Exit(code=1)


@app.command("check-shift")
def check_shift(expression: str = typer.Argument(..., help="Shift expression, e.g. +1D-2h")) -> None:
    """Validate a time shift expression."""
    result = check_shift_expression(expression)
    if not result.is_ok:
        typer.echo(result.message, err=True)
        raise typer.Exit(code=1)
    typer.echo("OK")


@app.command("check-pattern")
def check_pattern_command(
    pattern: str = typer.Argument(..., help="Date pattern, e.g. yyyy-MM-dd"),
    timezone_id: Optional[str] = typer.Option(None, "--timezone", "-z", help="Timezone id for the preview"),
) -> None:
    """Validate a date pattern and print a sample timestamp."""
    result = check_pattern(pattern, timezone_id)
    if not result.is_ok:
        typer.echo(result.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(result.message)


@app.command()
def timezones() -> None:
    """List the available timezone ids."""
    for item in timezone_items():
        typer.echo(item)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
