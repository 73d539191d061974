"""
Main entry point for the channelframe service.

Runs the FastAPI frame endpoint under uvicorn.
"""

import argparse
import logging
import sys

import uvicorn

from channelframe.api_server import create_app
from channelframe.config import settings
from channelframe.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Channelframe - Farcaster channel frame renderer")
    parser.add_argument("--host", default=settings.host, help=f"Host to bind (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to bind (default: {settings.port})")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(log_level=args.log_level, log_format=settings.log_format, log_file=settings.log_file)

    try:
        app = create_app(settings)
        uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    return 0


if __name__ == "__main__":
    sys.exit(main())
