"""EntityREST CLI entry point."""

import click


@click.group()
def cli():
    """EntityREST - schema-driven REST/HAL collections."""
    pass


# Register subcommand groups
from entityrest.cli.resources_cmd import resources  # noqa: E402
from entityrest.cli.serve_cmd import serve  # noqa: E402

cli.add_command(resources)
cli.add_command(serve)
