"""
Server entry point.

Usage:
    python -m gatekeeper
    python -m gatekeeper --port 8000 --workers 1
"""

import argparse
import logging

import uvicorn

from gatekeeper.core.config import settings

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Gatekeeper API server")
    parser.add_argument("--host", default=settings.host, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.port, help="Bind port")
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Worker processes (more than 1 requires RATE_LIMIT_STORAGE_URI)",
    )
    args = parser.parse_args()

    if args.workers > 1 and not settings.rate_limit_storage_uri:
        parser.error(
            "--workers > 1 needs RATE_LIMIT_STORAGE_URI: in-memory counters "
            "are per process"
        )

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run(
        "gatekeeper.main:app", host=args.host, port=args.port, workers=args.workers
    )


if __name__ == "__main__":
    main()
