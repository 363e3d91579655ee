#!/usr/bin/env python3
"""
Server runner script for BorderWatch.

This script starts the BorderWatch API and WebSocket server.
"""

import asyncio
import argparse
from datetime import datetime
import uvicorn

from borderwatch.core.config import settings
from borderwatch.core.logging import logger


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="BorderWatch server runner")
    parser.add_argument("--host", default=settings.API_HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.API_PORT, help="Port to listen on")
    parser.add_argument("--no-feed", action="store_true", help="Don't fetch the external alert feed")
    parser.add_argument("--no-ai", action="store_true", help="Don't call the language model")
    args = parser.parse_args()

    # Settings are read by the services when the app starts
    if args.no_feed:
        settings.EXTERNAL_FEED_ENABLED = False
    if args.no_ai:
        settings.AI_ENABLED = False

    # Print banner
    print("\n" + "=" * 80)
    print(f"{settings.PROJECT_NAME} v{settings.VERSION}")
    print(f"Starting at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80 + "\n")

    try:
        logger.info(f"Starting API server on {args.host}:{args.port}")
        config = uvicorn.Config(
            "borderwatch.main:app",
            host=args.host,
            port=args.port,
            log_level=settings.LOG_LEVEL.lower(),
            reload=settings.DEBUG
        )
        server = uvicorn.Server(config)
        await server.serve()
    except Exception as e:
        logger.error(f"Error in main: {e}", exc_info=True)
    finally:
        logger.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
