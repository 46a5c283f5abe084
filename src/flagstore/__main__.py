"""Run the flag service: ``python -m flagstore``."""
from __future__ import annotations

import uvicorn

from flagstore.app import create_app
from flagstore.config import AppSettings, DatabaseSettings, DotenvSettingsLoader
from flagstore.observability.logging import JsonLoggerFactory


def main() -> None:
    app_settings = DotenvSettingsLoader().load(AppSettings)
    db_settings = DotenvSettingsLoader().load(DatabaseSettings)
    JsonLoggerFactory.configure(level=app_settings.log_level)
    app = create_app(app_settings, db_settings)
    uvicorn.run(
        app,
        host=app_settings.host,
        port=app_settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
