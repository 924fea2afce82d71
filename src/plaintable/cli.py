"""Command-line interface for rendering record files as plain-text tables."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from .border import BorderStyle
from .builder import ColumnBuilder, TableFormatterBuilder
from .config import RenderSettings
from .csv_export import render_csv
from .exceptions import PlainTableError
from .extractors import summing
from .manifest import TableManifest

logger = logging.getLogger(__name__)

_STYLE_CHOICES = [style.value for style in BorderStyle]


@click.group()
@click.version_option(package_name="plaintable")
def cli() -> None:
    """plaintable: render records as aligned plain-text tables."""
    pass


@cli.command()
@click.option(
    "--table",
    "-t",
    "table_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML table manifest.",
)
@click.option(
    "--data",
    "-d",
    "data_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Records file (.json, .yaml or .yml) holding a list.",
)
@click.option(
    "--style",
    type=click.Choice(_STYLE_CHOICES, case_sensitive=False),
    help="Border style (default: manifest border, then PLAINTABLE_BORDER_STYLE).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "csv"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--heading", help="Override the manifest heading.")
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Write to this file instead of stdout.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def render(
    table_path: str,
    data_path: str,
    style: str | None,
    output_format: str,
    heading: str | None,
    output_path: str | None,
    verbose: bool,
) -> None:
    """Render a records file with a table manifest."""
    try:
        settings = RenderSettings.from_environment()
        _configure_logging("DEBUG" if verbose else settings.log_level)

        manifest = TableManifest.from_dict(_load_yaml(table_path))
        records = _load_records(data_path)
        border_style = style or manifest.border or settings.border_style
        table = manifest.build(border_style=border_style, heading=heading)
        logger.debug(
            "Rendering %d records from %s with %s border", len(records), data_path, border_style
        )

        if output_format == "csv":
            text = render_csv(table, records)
        else:
            text = table.render(records) + "\n"
    except (PlainTableError, yaml.YAMLError, json.JSONDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_path:
        Path(output_path).write_text(text, encoding="utf-8")
        click.echo(f"Wrote {output_path}", err=True)
    else:
        click.echo(text, nl=False)


@cli.command()
def styles() -> None:
    """Show every border style over a sample table."""
    sample = [
        {"fruit": "apple", "qty": 3},
        {"fruit": "banana", "qty": 12},
    ]
    for style in BorderStyle:
        table = (
            TableFormatterBuilder()
            .heading(style.value)
            .border_style(style)
            .show_aggregation()
            .stateless("Fruit", lambda r: r["fruit"], aggregate_constant="Total")
            .column(
                ColumnBuilder()
                .title("Qty")
                .extractor(summing(lambda r: r["qty"]))
                .value_type(int)
                .align("right")
            )
            .build()
        )
        click.echo(table.render(sample))
        click.echo()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_yaml(file_path: str) -> dict[str, Any]:
    """Load and parse a YAML file."""
    with open(file_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise PlainTableError(f"{file_path}: YAML file must contain a mapping")
    return data


def _load_records(file_path: str) -> list[Any]:
    """Load a list of records from a JSON or YAML file."""
    with open(file_path, encoding="utf-8") as f:
        if Path(file_path).suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        return []
    if not isinstance(data, list):
        raise PlainTableError(f"{file_path}: records file must contain a list")
    return data


if __name__ == "__main__":
    cli()
