"""Memoized validation keyed by a canonical serialization of the input."""

from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from marketing_contracts.models import DEFAULT_SETTINGS, ValidationResult, ValidationSettings
from marketing_contracts.validation import KindLike, RecordKind, resolve_kind, validate_record

logger = logging.getLogger("marketing_contracts.cache")

CacheKey = Tuple[RecordKind, str]


def _is_plain_json(value: Any) -> bool:
    """True if value round-trips through JSON without changing type.

    Tuples, non-string dict keys, NaN and arbitrary objects would be
    coerced by json.dumps and could collapse distinct inputs onto one key.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return True
    if isinstance(value, float):
        return value == value and value not in (float("inf"), float("-inf"))
    if isinstance(value, list):
        return all(_is_plain_json(v) for v in value)
    if isinstance(value, dict):
        return all(
            isinstance(k, str) and _is_plain_json(v) for k, v in value.items()
        )
    return False


def canonical_key(raw: Any) -> Optional[str]:
    """Canonical JSON text for raw, or None if raw cannot be keyed safely."""
    if not _is_plain_json(raw):
        return None
    return json.dumps(raw, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    bypasses: int
    size: int


class ValidationCache:
    """Bounded LRU cache in front of validate_record.

    Validation is referentially transparent for a fixed settings object, so
    entries never need invalidation. Inputs that cannot be canonicalized are
    validated directly and never stored.
    """

    def __init__(self, settings: Optional[ValidationSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self._entries: OrderedDict[CacheKey, ValidationResult] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._bypasses = 0

    def validate(self, raw: Any, kind: KindLike) -> ValidationResult:
        """Return the cached result for (kind, raw), validating on a miss."""
        record_kind = resolve_kind(kind)
        text = canonical_key(raw)
        if text is None:
            logger.debug("Cache bypass for non-canonical %s input", record_kind.value)
            with self._lock:
                self._bypasses += 1
            return validate_record(raw, record_kind, self.settings)

        key: CacheKey = (record_kind, text)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self._hits += 1
                return cached
            self._misses += 1

        result = validate_record(raw, record_kind, self.settings)

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.settings.cache_size:
                self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                bypasses=self._bypasses,
                size=len(self._entries),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
