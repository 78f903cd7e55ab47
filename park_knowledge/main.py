# park_knowledge/main.py

import asyncio
import logging
import os

import uvicorn
from components.api_app.main import create_app
from shared.initializer import (
    create_arg_parser,
    initialize_service_from_args,
)

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, log_level.upper()))


async def main() -> None:
    """
    Initializes the core services and serves the HTTP API.
    """
    parser = create_arg_parser()
    parser.description = "Run the Park Knowledge Server."
    args = parser.parse_args()

    bundle = initialize_service_from_args(args)
    config = bundle.config

    app = create_app(bundle.service, bundle.agent, bundle.bridge)
    server_config = uvicorn.Config(
        app, host=config.server.host, port=config.server.port
    )
    server = uvicorn.Server(server_config)
    print(
        f"Park Knowledge API will be served on "
        f"http://{config.server.host}:{config.server.port}"
    )
    await server.serve()


def run() -> None:
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Server shut down gracefully.")


if __name__ == "__main__":
    run()
