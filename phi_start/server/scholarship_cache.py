# server/scholarship_cache.py

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError

from . import config
from .account_models import Language
from .scholarship_models import Scholarship

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000


def top_scholarships_key(lang: Language) -> str:
    return f"topScholarships_{Language(lang).value}"


def now_ms() -> int:
    return int(time.time() * 1000)


class ScholarshipCache:
    """
    Small JSON-file cache, one file per key under <store>/cache.

    Each file holds {"scholarships": [...], "timestamp": <epoch ms>}.
    """

    def __init__(
        self,
        store_dir: Path = config.STORE_DIR,
        ttl_hours: float = config.CACHE_TTL_HOURS,
    ):
        self._dir = Path(store_dir) / "cache"
        self.ttl_ms = int(ttl_hours * HOUR_MS)

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> Optional[Tuple[Any, int]]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return raw["scholarships"], int(raw["timestamp"])
        except (ValueError, KeyError, TypeError) as e:
            # Unreadable entry: treat as a miss, the next put overwrites it.
            logger.warning("Ignoring unreadable cache entry %s: %s", path, e)
            return None

    def put(self, key: str, value: Any, timestamp: int) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            json.dump(
                {"scholarships": value, "timestamp": timestamp},
                f,
                ensure_ascii=False,
                indent=2,
            )

    def top_scholarships(
        self,
        lang: Language,
        fetch: Callable[[Language], List[Scholarship]],
        now: Optional[int] = None,
    ) -> List[Scholarship]:
        """Cached homepage list for `lang`, refetched once older than the TTL."""
        key = top_scholarships_key(lang)
        now = now_ms() if now is None else now

        hit = self.get(key)
        if hit is not None:
            value, ts = hit
            if now - ts < self.ttl_ms:
                try:
                    return [Scholarship.model_validate(item) for item in value]
                except (ValidationError, TypeError) as e:
                    logger.warning("Stale cache shape for %s, refetching: %s", key, e)

        scholarships = fetch(lang)
        self.put(
            key,
            [s.model_dump(mode="json", by_alias=True) for s in scholarships],
            now,
        )
        return scholarships
