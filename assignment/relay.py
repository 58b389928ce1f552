"""
Purpose: The Persistence Relay (fire-and-forget write-back of assignments).
What it does:
- POSTs {id, assignedDriver} to the task store on a background worker.
  An empty driver name clears the assignment remotely.
- At most one attempt per call. The response body is never read.
- Failures are logged and swallowed: local ledger state stays the source of
  truth for the session and is never rolled back. The store is eventually
  consistent with it, and a lost write simply stays lost.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Iterable, List, Optional, Union

import requests

logger = logging.getLogger(__name__)

TaskIdPayload = Union[int, str]


def wire_task_id(task_id: str) -> TaskIdPayload:
    """
    The store keys rows by number; ids that look numeric go out as numbers.
    """
    text = str(task_id).strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return text


class PersistenceRelay:
    def __init__(
        self,
        url: Optional[str],
        *,
        timeout: float = 10.0,
        max_workers: int = 8,
        session: Optional[Any] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        if not url:
            raise ValueError("Task store URL not set. Please set TASKS_API_URL in the .env file.")
        self.url = url
        self.timeout = timeout
        # requests.Session is not thread-safe; the module-level API is
        self.session = session or requests
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="assignment-relay"
        )
        self._closed = False

    # --- Public API ---

    def save(self, task_id: str, driver_name: str = "") -> Optional[Future]:
        """
        Schedule one write-back and return immediately.
        Returns the Future for observers/tests, or None once the relay is closed.
        """
        if self._closed:
            logger.warning(f"Relay closed; dropping assignment write for task {task_id}")
            return None
        return self._executor.submit(self._post, task_id, driver_name or "")

    def save_many(self, task_ids: Iterable[str], driver_name: str = "") -> List[Future]:
        """
        One independent call per task: concurrent, unordered, not atomic.
        """
        futures = []
        for task_id in task_ids:
            future = self.save(task_id, driver_name)
            if future is not None:
                futures.append(future)
        return futures

    def close(self) -> None:
        """
        Abandon in-flight and queued writes; never waits on the network.
        """
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    # --- Worker ---

    def _post(self, task_id: str, driver_name: str) -> bool:
        try:
            body = json.dumps({"id": wire_task_id(task_id), "assignedDriver": driver_name})
            response = self.session.post(
                self.url,
                data=body,
                headers={"Content-Type": "text/plain;charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error(f"Failed to save assignment for task {task_id}: {exc}")
            return False
        except Exception:
            logger.exception(f"Failed to save assignment for task {task_id}")
            return False

        status = getattr(response, "status_code", 200)
        if status >= 400:
            logger.error(f"Task store rejected assignment for task {task_id}: HTTP {status}")
            return False

        logger.debug(f"Saved assignment task={task_id} driver={driver_name!r}")
        return True
