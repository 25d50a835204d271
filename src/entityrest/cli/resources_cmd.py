"""Resource CLI commands."""

from pathlib import Path

import click

from entityrest.config import RestConfig
from entityrest.resources.loader import ResourceDefinition, ResourceLoader


@click.group()
def resources():
    """Resource definition commands."""
    pass


@resources.command()
@click.option(
    "--path",
    "resources_path",
    default=None,
    type=click.Path(path_type=Path),
    help="Resource directory (defaults to ENTITYREST_RESOURCES_PATH).",
)
def validate(resources_path: Path | None):
    """Validate resource YAML files and their JSON Schemas."""
    resources_path = resources_path or RestConfig.from_env().resources_path
    if not resources_path.is_dir():
        click.echo(f"Error: Resources directory not found at {resources_path}", err=True)
        raise SystemExit(1)

    loader = ResourceLoader(resources_path)
    try:
        loader.load_all()
    except ValueError as e:
        click.echo(click.style(f"Validation failed: {e}", fg="red"), err=True)
        raise SystemExit(1)

    names = loader.list_resources()
    click.echo(f"Loaded {len(names)} resource(s):")
    for name in sorted(names):
        resource: ResourceDefinition = loader.get_resource(name)
        read_only = ", ".join(resource.read_only_fields) or "none"
        click.echo(f"  ✓ {name} (/{resource.plural_name}, read-only: {read_only})")

    click.echo(click.style("\nAll resources are valid.", fg="green", bold=True))
