from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Callable, Protocol

from recombiner.core.config import HttpSettings, load_http_settings
from recombiner.core.errors import FetchFailedError, HarvestCancelledError, NetworkFailure

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def get_text(self, url: str) -> str: ...

    def get_json(self, url: str) -> Any: ...

    def exists(self, url: str) -> bool: ...


class HttpFetcher:
    """Read-only GET/HEAD client over ``urllib``.

    HTTP status failures and transport failures are reported as distinct
    errors because only the latter may trigger the GitLab API fallback.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        cancellation_check: Callable[[], bool] | None = None,
    ) -> None:
        self.settings = settings or load_http_settings()
        self.cancellation_check = cancellation_check

    def with_cancellation(self, cancellation_check: Callable[[], bool] | None) -> HttpFetcher:
        return HttpFetcher(settings=self.settings, cancellation_check=cancellation_check)

    def get_text(self, url: str) -> str:
        raw = self._request(url, method="GET")
        return raw.decode("utf-8", errors="replace")

    def get_json(self, url: str) -> Any:
        text = self.get_text(url)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchFailedError(url) from exc

    def exists(self, url: str) -> bool:
        try:
            self._request(url, method="HEAD")
        except (FetchFailedError, NetworkFailure):
            return False
        return True

    def _request(self, url: str, *, method: str) -> bytes:
        self._ensure_not_cancelled(url)
        request = urllib.request.Request(
            url,
            method=method,
            headers={"User-Agent": self.settings.user_agent},
        )
        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(request, timeout=self.settings.timeout_seconds) as response:
                self._ensure_not_cancelled(url)
                status = int(response.status)
                if not 200 <= status < 300:
                    raise FetchFailedError(url, status)
                return response.read() if method != "HEAD" else b""
        except urllib.error.HTTPError as exc:
            raise FetchFailedError(url, exc.code) from exc
        except urllib.error.URLError as exc:
            raise NetworkFailure(url, exc.reason) from exc
        except (OSError, http.client.HTTPException, ValueError) as exc:
            raise NetworkFailure(url, exc) from exc

    def _ensure_not_cancelled(self, url: str) -> None:
        if self.cancellation_check is not None and bool(self.cancellation_check()):
            raise HarvestCancelledError(f"Request to {url} cancelled by caller.")
