"""
Search client with debounced input, mirroring the grocery finder search box.
Each keystroke re-arms a 300ms timer; only the last input in a burst is searched.
"""
import threading
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3
MIN_QUERY_LENGTH = 2


class SearchClientError(Exception):
    pass


def format_price(price_cents: int) -> str:
    return f"${price_cents / 100:.2f}"


class SearchClient:
    """HTTP client for the /search endpoint"""

    def __init__(self, endpoint_url: str, api_key: Optional[str] = None,
                 limit: int = 10, timeout: float = 10.0):
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.limit = limit
        self.timeout = timeout

    def search(self, query: str) -> List[Dict[str, Any]]:
        if len(query) < MIN_QUERY_LENGTH:
            return []

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                self.endpoint_url,
                headers=headers,
                json={"q": query, "limit": self.limit},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SearchClientError(f"Search failed: {str(e)}") from e

        if not response.ok:
            raise SearchClientError(f"Search failed: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchClientError("Search failed: invalid response") from e

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise SearchClientError("Search failed: invalid response")
        return results


class Debouncer:
    """
    Delays calls to fn until `wait` seconds pass without a new trigger.
    """

    def __init__(self, fn: Callable[..., Any], wait: float = DEFAULT_DEBOUNCE_SECONDS):
        self.fn = fn
        self.wait = wait
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def trigger(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.wait, self.fn, args=args, kwargs=kwargs)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the pending call, if any, to finish"""
        timer = self._timer
        if timer is not None:
            timer.join(timeout)


class DebouncedSearchBox:
    """
    Keeps the latest query, results and error for a text input.
    on_input() is called per keystroke; the search runs after the debounce delay.
    """

    def __init__(self, client: SearchClient, wait: float = DEFAULT_DEBOUNCE_SECONDS):
        self.client = client
        self.query = ""
        self.results: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.is_loading = False
        self._debouncer = Debouncer(self._search, wait=wait)

    def on_input(self, text: str) -> None:
        self.query = text
        self._debouncer.trigger(text)

    def wait_idle(self, timeout: Optional[float] = None) -> None:
        self._debouncer.join(timeout)

    def close(self) -> None:
        self._debouncer.cancel()

    def _search(self, query: str) -> None:
        if len(query) < MIN_QUERY_LENGTH:
            self.results = []
            return

        self.is_loading = True
        self.error = None
        try:
            self.results = self.client.search(query)
        except SearchClientError as e:
            logger.warning(f"Search for '{query}' failed: {str(e)}")
            self.error = str(e)
            self.results = []
        finally:
            self.is_loading = False

    @property
    def show_empty_hint(self) -> bool:
        return (not self.is_loading and self.error is None
                and len(self.query) >= MIN_QUERY_LENGTH and not self.results)

    def render_lines(self) -> List[str]:
        """Plain text rendering of the current results"""
        lines = []
        for item in self.results:
            price = item.get("price_cents")
            lines.append(f"{item['name']}  {format_price(price)}" if price else item["name"])
        return lines
