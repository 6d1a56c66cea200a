"""
DB Time Service: Process Entry Point
=====================================

Usage:
    python -m dbtime
    dbtime

Binds SERVER_HOST:SERVER_PORT (default 0.0.0.0:3000) and serves until
killed. There are no command-line flags; configure through the environment.
If the port cannot be bound, uvicorn logs the error and the process exits
with status 1.
"""

from typing import Optional

import uvicorn

from dbtime import main as app_module
from dbtime.config import Settings, settings as default_settings


def run(settings: Optional[Settings] = None) -> None:
    """
    Serve the application with uvicorn.

    Without settings, the module-level dbtime.main.app is served, so only
    one DatabaseClient exists in the process. With settings, a fresh app is
    built from them.
    """
    if settings is None:
        settings = default_settings
        app = app_module.app
    else:
        app = app_module.create_app(settings)

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    run()


if __name__ == "__main__":
    main()
