"""Entry point for the Solid Steel site service."""

import logging

import structlog

from solidsteel import __version__
from solidsteel import config as config_module


def configure_logging(level: str) -> None:
    """Route structlog's stdlib loggers to stderr at ``level``."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the API server.

    Args:
        host: Host to bind to (defaults to settings.server_host)
        port: Port to listen on (defaults to settings.server_port)
    """
    import uvicorn

    from solidsteel.api.app import create_app

    settings = config_module.settings
    configure_logging(settings.log_level)
    log = structlog.get_logger()

    host = host or settings.server_host
    port = port or settings.server_port

    log.info(
        "Starting Solid Steel site service",
        version=__version__,
        environment=settings.environment,
        host=host,
        port=port,
        docs=f"http://{host}:{port}/api/docs",
    )

    config = uvicorn.Config(
        create_app(),
        host=host,
        port=port,
        log_level="warning",  # Suppress verbose uvicorn logs
        access_log=False,  # Use our own access logging
    )
    uvicorn.Server(config).run()


def main() -> None:
    run_server()


if __name__ == "__main__":
    main()
