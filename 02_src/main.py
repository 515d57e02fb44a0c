"""Main entry point for Zap Relay."""

import os

import uvicorn
from dotenv import load_dotenv

from relay.api import create_fastapi_app
from relay.app import Application
from relay.config import Settings, resolve_env_path
from relay.logging_config import setup_logging


def main():
    """Run the application."""
    load_dotenv(resolve_env_path(os.getenv("ENV_FILE")))

    setup_logging()
    settings = Settings.from_env()

    app = create_fastapi_app(Application(settings))

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
