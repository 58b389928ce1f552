#Purpose: The task store "adapter/client".
#Sole responsibility: read task rows from the remote store over HTTP.
#Write-backs live in assignment/relay.py because they are fire-and-forget.

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Network or parse failure while reading the task store."""
    pass


class TaskStoreClient:
    """
    Reads `{ rows: [...] }` from the task store endpoint.
    """

    def __init__(self, url: Optional[str], timeout: float = 10.0, session: Optional[Any] = None):
        if not url:
            raise ValueError("Task store URL not set. Please set TASKS_API_URL in the .env file.")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_rows(self) -> Any:
        """
        GET the endpoint and return the decoded JSON payload (unnormalized).
        Raises CatalogLoadError on any transport, status or JSON failure.
        """
        try:
            response = self.session.get(
                self.url,
                headers={"Cache-Control": "no-store"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            logger.error(f"Task store request failed: {exc}")
            raise CatalogLoadError(f"Could not reach task store: {exc}") from exc
        except ValueError as exc:
            logger.error(f"Task store returned invalid JSON: {exc}")
            raise CatalogLoadError(f"Task store returned invalid JSON: {exc}") from exc
