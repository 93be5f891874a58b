"""CLI entry point for odata-openapi-ops."""

import logging
from pathlib import Path

import click
import yaml

from odata_openapi.edm.loader import load_fixture
from odata_openapi.errors import ModelLoadError
from odata_openapi.generator import generate_document
from odata_openapi.settings import load_settings


@click.group()
def main():
    """OData OpenAPI operations: generate operation objects from a service model."""
    pass


@main.command()
@click.argument("fixture_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output YAML file.")
@click.option("--settings", "settings_path", default=None, type=click.Path(exists=True, path_type=Path), help="Settings YAML file.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def generate(fixture_path: Path, output: Path, settings_path: Path | None, verbose: bool):
    """Generate operations for every path of a model fixture."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(settings_path)
        click.echo(f"Loading {fixture_path}...")
        fixture = load_fixture(fixture_path)
        click.echo(f"Found {len(fixture.paths)} paths.")
        document = generate_document(fixture, settings)
    except ModelLoadError as e:
        raise click.ClickException(str(e)) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(yaml.safe_dump(document, sort_keys=False, allow_unicode=True), encoding="utf-8")
    operations = sum(len(item) for item in document["paths"].values())
    click.echo(f"{operations} operations saved to {output}")


if __name__ == "__main__":
    main()
