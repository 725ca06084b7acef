"""Fire-and-forget logging of interview rows to a spreadsheet web hook."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


class SheetLogger:
    """Post session rows to an external endpoint on a background thread.

    The primary flow never waits on the post, never sees its failures and
    never retries it. Without a configured URL rows are only logged locally.
    """

    def __init__(self, url: Optional[str] = None, *, timeout: float = 10.0) -> None:
        self.url = url
        self.timeout = timeout
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def record(self, data: Mapping[str, Any]) -> Optional[Future]:
        row: Dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat(), **data}
        logger.debug("Saving sheet row: %s", row)
        if not self.url:
            return None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sheet-logger")
        return self._executor.submit(self._post, row)

    def _post(self, row: Dict[str, Any]) -> None:
        try:
            requests.post(self.url, json=row, timeout=self.timeout)
        except Exception:
            logger.warning("Failed to save to sheet", exc_info=True)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
