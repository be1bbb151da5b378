"""Deprecation notices for legacy query criteria."""

from __future__ import annotations

import warnings
from collections import Counter
from threading import Lock

from commerce.logging import get_logger

logger = get_logger("commerce.deprecations")


class Deprecator:
    """Emit deprecation notices and keep a per-key occurrence count."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = Lock()

    def log(self, key: str, message: str) -> None:
        with self._lock:
            self._counts[key] += 1
            count = self._counts[key]
        warnings.warn(message, DeprecationWarning, stacklevel=3)
        logger.warning(message, extra={"deprecation_key": key, "occurrences": count})

    def count(self, key: str) -> int:
        with self._lock:
            return self._counts[key]

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


deprecator = Deprecator()
