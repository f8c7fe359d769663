"""
Startup script for running the webhook dispatcher with uvicorn.
"""
import argparse
import logging
import sys

import uvicorn

from webhook_dispatcher.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("startup")


def main():
    """Main entry point for the application."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the webhook dispatcher")
    parser.add_argument("--port", type=int, default=settings.port,
                        help="Port to run the server on")
    parser.add_argument("--host", type=str, default=settings.host,
                        help="Host to run the server on")
    parser.add_argument("--workers", type=int, default=1,
                        help="Number of uvicorn worker processes")
    parser.add_argument("--reload", action="store_true",
                        help="Reload on code changes (development only)")

    args = parser.parse_args()

    logger.info(f"Starting webhook dispatcher on {args.host}:{args.port}")
    logger.info(f"Database: {settings.database_url}")
    if settings.dispatch_max_workers > 1:
        logger.info(f"Concurrent fan-out with up to {settings.dispatch_max_workers} threads")

    uvicorn.run(
        "webhook_dispatcher.main:app",
        host=args.host,
        port=args.port,
        workers=args.workers,
        reload=args.reload,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
