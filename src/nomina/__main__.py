"""Run the upload service: ``python -m nomina``."""

from __future__ import annotations

import uvicorn

from nomina.api.app import create_app
from nomina.core.config import AppSettings
from nomina.core.logging_config import configure_logging


def main() -> None:
    settings = AppSettings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
