"""CLI entry point for api-docs-builder."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from api_docs_builder.config import load_config
from api_docs_builder.errors import EXIT_USAGE, ApiDocsError
from api_docs_builder.generator.groups import build_api_groups
from api_docs_builder.generator.ordering import ordered_data
from api_docs_builder.generator.validator import validate_groups
from api_docs_builder.parser.base import Endpoint, Group
from api_docs_builder.parser.loader import load_endpoint_data, load_ordered_items


def _find_endpoint(groups: list[Group], endpoint_id: str) -> Endpoint | None:
    for group in groups:
        for subgroup in group.subgroups:
            for endpoint in subgroup.endpoints:
                if endpoint.id == endpoint_id:
                    return endpoint
    return None


def _dump_groups(groups: list[Group], output: Path) -> str:
    data = [group.model_dump(mode="json") for group in groups]
    if output.suffix in (".yaml", ".yml"):
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _fail(error: ApiDocsError):
    click.echo(f"Error: {error}", err=True)
    sys.exit(error.exit_code)


config_option = click.option(
    "-c", "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Site config YAML with api_docs / ordered_data sections.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Docs Builder — group, order and annotate scanned API endpoints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@config_option
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file (.json, .yaml or .yml).")
@click.option("--validate", is_flag=True, help="Check every generated OpenAPI fragment parses.")
def build(input_path: Path, config_path: Path | None, output: Path, validate: bool):
    """Build the ordered API docs tree from scanner output."""
    try:
        config = load_config(config_path)
        click.echo(f"Loading endpoints from {input_path}...")
        endpoints_data = load_endpoint_data(input_path)
        groups = build_api_groups(endpoints_data, config.api_docs)
    except ApiDocsError as e:
        _fail(e)

    count = sum(len(sg.endpoints) for g in groups for sg in g.subgroups)
    click.echo(f"Built {len(groups)} groups with {count} endpoints.")

    if validate:
        errors = validate_groups(groups)
        if errors:
            click.echo(f"OpenAPI validation failed for {len(errors)} endpoints:", err=True)
            for endpoint_id, err in errors.items():
                click.echo(f"  {endpoint_id}: {err}", err=True)
            sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump_groups(groups, output), encoding="utf-8")
    click.echo(f"Docs tree saved to {output}")


@main.command()
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("name")
@config_option
def order(data_path: Path, name: str, config_path: Path | None):
    """Print the entries of DATA_PATH in the order configured under ordered_data.NAME."""
    try:
        ordering = load_config(config_path).ordering_for(name)
        items = ordered_data(load_ordered_items(data_path), key_field=ordering.key, order=ordering.order)
    except ApiDocsError as e:
        _fail(e)

    for item in items:
        record = item[1] if isinstance(item, (tuple, list)) else item
        click.echo(record[ordering.key])


@main.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.argument("endpoint_id")
@config_option
def examples(input_path: Path, endpoint_id: str, config_path: Path | None):
    """Print the code examples and OpenAPI fragment of one endpoint."""
    try:
        config = load_config(config_path)
        groups = build_api_groups(load_endpoint_data(input_path), config.api_docs)
    except ApiDocsError as e:
        _fail(e)

    endpoint = _find_endpoint(groups, endpoint_id)
    if endpoint is None:
        click.echo(f"Error: no endpoint with id {endpoint_id!r}", err=True)
        sys.exit(EXIT_USAGE)

    for lang, code in endpoint.examples.items():
        click.echo(f"# {lang}")
        click.echo(code)
        click.echo("")
    click.echo("# openapi")
    click.echo(endpoint.openapi_yaml)
