"""File-based read-through cache for GitHub API responses."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "repo-pulse"
DEFAULT_TTL = 600  # 10 minutes


class FileCache:
    """File cache with TTL, one JSON file per request.

    Entries are keyed by request path and params, which include the
    owner/repo pair. Concurrent writers for the same key overwrite each
    other; the last write wins.
    """

    def __init__(
        self, cache_dir: Path = DEFAULT_CACHE_DIR, ttl: int = DEFAULT_TTL
    ) -> None:
        self._cache_dir = cache_dir
        self._ttl = ttl
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def ttl(self) -> int:
        return self._ttl

    @staticmethod
    def _make_key(url: str, params: dict[str, Any] | None = None) -> str:
        raw = url + json.dumps(params or {}, sort_keys=True)
        return hashlib.sha256(raw.encode()).hexdigest()

    def _path_for(self, key: str) -> Path:
        return self._cache_dir / f"{key}.json"

    def get(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        path = self._path_for(self._make_key(url, params))
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.debug("Ignoring unreadable cache entry %s", path.name)
            return None
        if not isinstance(data, dict):
            logger.debug("Ignoring malformed cache entry %s", path.name)
            return None
        if time.time() - data.get("ts", 0) > self._ttl:
            path.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit for %s", url)
        return data.get("value")

    def set(self, url: str, params: dict[str, Any] | None, value: Any) -> None:
        path = self._path_for(self._make_key(url, params))
        payload = {"ts": time.time(), "url": url, "value": value}
        try:
            path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write cache entry for %s: %s", url, exc)

    def clear(self) -> int:
        """Delete every cached entry and return how many were removed."""
        removed = 0
        for path in self._cache_dir.glob("*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        return removed
