"""Solid Steel command line: run the service and maintain its content and media."""

from typing import Annotated

import typer

from solidsteel.cli import blob, content

app = typer.Typer(
    name="solidsteel",
    help="Solid Steel Management site service",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(blob.app, name="blob")
app.add_typer(content.app, name="content")


@app.command("serve")
def serve(
    host: Annotated[str | None, typer.Option("--host", "-h", help="Host to bind to")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on")] = None,
) -> None:
    """Run the API server."""
    from solidsteel.main import run_server

    run_server(host=host, port=port)


@app.command("version")
def version() -> None:
    """Show the installed version."""
    from solidsteel import __version__

    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
