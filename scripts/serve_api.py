#!/usr/bin/env python3
"""Script to serve the organization's repositories over HTTP."""

import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from repo_lister.config import Settings
from repo_lister.application.repository_service import build_service
from repo_lister.interface.http_api import RepositoryAPIServer

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Build the process-wide service and serve it until interrupted."""
    try:
        settings = Settings.from_env()
        logging.getLogger().setLevel(settings.log_level)

        # One service per process so every request shares the cache
        service = build_service(settings)
        server = RepositoryAPIServer((settings.host, settings.port), service, settings.home_url)
    except Exception as e:
        logger.error(f"Server startup failed: {e}", exc_info=True)
        return 1

    logger.info(
        f"Serving repositories of '{settings.github_org}' on http://{settings.host}:{settings.port} "
        f"(cache TTL {settings.cache_ttl})"
    )
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down server")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
