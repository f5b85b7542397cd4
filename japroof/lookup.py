"""Wikipedia REST API による用語参照。

用語の正式名称と概要を取得する。結果は TTL 付きの LRU キャッシュに保持し、
見つからなかった用語もキャッシュする。通信エラーは AppError に変換して送出する。
"""
from __future__ import annotations
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from urllib.parse import quote

import requests

from .errors import AppError, ErrorCode

LOGGER = logging.getLogger(__name__)

BASE_URL = "https://ja.wikipedia.org/api/rest_v1/page/summary"
USER_AGENT = "japroof/0.1 (Japanese proofreading tool)"


@dataclass(frozen=True)
class TermSummary:
    title: str
    extract: str


class WikipediaClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 5.0,
        cache_ttl: float = 86400.0,
        cache_size: int = 1000,
        base_url: str = BASE_URL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.cache_size = cache_size
        self.base_url = base_url.rstrip("/")
        self._clock = clock
        self._cache: "OrderedDict[str, Tuple[float, Optional[TermSummary]]]" = OrderedDict()
        self._lock = threading.Lock()

    def get_summary(self, term: str) -> Optional[TermSummary]:
        key = term.strip()
        if not key:
            return None
        hit, value = self._cache_get(key)
        if hit:
            LOGGER.debug("lookup cache hit: %s", key)
            return value
        value = self._fetch(key)
        self._cache_put(key, value)
        return value

    def _fetch(self, term: str) -> Optional[TermSummary]:
        url = f"{self.base_url}/{quote(term, safe='')}"
        try:
            resp = self.session.get(
                url,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise AppError(ErrorCode.WIKIPEDIA_TIMEOUT, f"lookup timed out: {term}", e) from e
        except requests.RequestException as e:
            raise AppError(ErrorCode.WIKIPEDIA_REQUEST_FAILED, f"lookup failed: {term}: {e}", e) from e
        if resp.status_code == 404:
            return None
        if resp.status_code == 429:
            raise AppError(ErrorCode.WIKIPEDIA_RATE_LIMIT, f"rate limited while looking up {term}")
        if not 200 <= resp.status_code < 300:
            raise AppError(ErrorCode.WIKIPEDIA_REQUEST_FAILED, f"lookup failed: {term}: HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise AppError(ErrorCode.WIKIPEDIA_REQUEST_FAILED, f"invalid response for {term}", e) from e
        if not isinstance(data, dict) or "not_found" in str(data.get("type", "")):
            return None
        title = data.get("title") or term
        return TermSummary(title=title, extract=data.get("extract") or "")

    def _cache_get(self, key: str) -> Tuple[bool, Optional[TermSummary]]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False, None
            stored, value = entry
            if self._clock() - stored > self.cache_ttl:
                del self._cache[key]
                return False, None
            self._cache.move_to_end(key)
            return True, value

    def _cache_put(self, key: str, value: Optional[TermSummary]) -> None:
        with self._lock:
            self._cache[key] = (self._clock(), value)
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "WikipediaClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


__all__ = ["TermSummary", "WikipediaClient", "BASE_URL", "USER_AGENT"]
