"""JSON HTTP API over the repository service."""

import http.server
import json
import logging
import urllib.parse
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from repo_lister.application.cache_manager import ServiceUnavailable
from repo_lister.application.query_pipeline import RepositoryQuery
from repo_lister.application.repository_service import RepositoryService

logger = logging.getLogger(__name__)

LIST_ALL_PATH = "/api/github/repositories/listall"
FILTER_PATH = "/api/github/repositories/filter"
INTERNAL_ERROR_MESSAGE = "Internal server error."


class RepositoryAPIServer(http.server.ThreadingHTTPServer):
    """Threaded HTTP server sharing one RepositoryService across requests."""

    daemon_threads = True

    def __init__(self, server_address, service: RepositoryService, home_url: str):
        super().__init__(server_address, RepositoryRequestHandler)
        self.service = service
        self.home_url = home_url


class RepositoryRequestHandler(http.server.BaseHTTPRequestHandler):
    """Routes the listing endpoints to the shared service."""

    server: RepositoryAPIServer

    def _send_json_response(self, data: Any, status: HTTPStatus = HTTPStatus.OK):
        """Send a JSON response with consistent headers."""
        body = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_json_error(self, message: str, status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR):
        self._send_json_response({"success": False, "message": message}, status)

    def do_GET(self):
        """Handle GET requests."""
        parsed_path = urllib.parse.urlparse(self.path)
        path = parsed_path.path.rstrip("/") or "/"
        query_params = urllib.parse.parse_qs(parsed_path.query)

        if path == LIST_ALL_PATH:
            self.send_list_all()
        elif path == FILTER_PATH:
            self.send_filtered(query_params)
        elif path == "/":
            self.send_response(HTTPStatus.FOUND)
            self.send_header("Location", self.server.home_url)
            self.send_header("Content-Length", "0")
            self.end_headers()
        else:
            self._send_json_error("Endpoint not found", HTTPStatus.NOT_FOUND)

    def send_list_all(self):
        try:
            repositories = self.server.service.list_all()
        except ServiceUnavailable as e:
            self._send_json_error(str(e))
            return
        except Exception as e:
            logger.error(f"Failed to list repositories: {e}", exc_info=True)
            self._send_json_error(INTERNAL_ERROR_MESSAGE)
            return
        self._send_json_response(repositories)

    def send_filtered(self, query_params: Dict[str, List[str]]):
        """Answer the filter endpoint from its query string."""
        raw_limit = _first(query_params, "limit")
        try:
            limit = int(raw_limit) if raw_limit else None
        except ValueError:
            self._send_json_error(f"Invalid 'limit' parameter: {raw_limit!r}", HTTPStatus.BAD_REQUEST)
            return

        query = RepositoryQuery(
            language=_first(query_params, "language"),
            name=_first(query_params, "name"),
            sort_order=_first(query_params, "sortOrder") or "asc",
            limit=limit,
        )
        try:
            repositories = self.server.service.filter_repositories(query)
        except ServiceUnavailable as e:
            self._send_json_error(str(e))
            return
        except Exception as e:
            logger.error(f"Failed to filter repositories with {query}: {e}", exc_info=True)
            self._send_json_error(INTERNAL_ERROR_MESSAGE)
            return
        self._send_json_response(repositories)

    def log_message(self, format, *args):
        logger.info(f"{self.address_string()} - {format % args}")


def _first(query_params: Dict[str, List[str]], key: str) -> Optional[str]:
    values = query_params.get(key)
    return values[0] if values else None
