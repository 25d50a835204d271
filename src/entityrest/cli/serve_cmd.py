"""Development server command."""

import click


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port.")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool):
    """Serve every resource in ENTITYREST_RESOURCES_PATH."""
    import uvicorn

    uvicorn.run(
        "entityrest.api.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )
