"""AppState (de)serialization and the background state writer."""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from renumber.core.mappings import seed_mappings, seed_state
from renumber.core.models import AppState, Difficulty, NumberMapping, Tag, TestResult
from renumber.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STATE_KEY = "appState"


def state_to_payload(state: AppState) -> Dict[str, Any]:
    return {
        "mappings": {
            number: {
                "id": mapping.id,
                "number": mapping.number,
                "tags": [
                    {
                        "id": tag.id,
                        "label": tag.label,
                        "usageCount": tag.usage_count,
                        "successCount": tag.success_count,
                    }
                    for tag in mapping.tags
                ],
            }
            for number, mapping in state.mappings.items()
        },
        "tests": [
            {
                "id": result.id,
                "date": result.date.isoformat(),
                "difficulty": result.difficulty.value,
                "successRate": result.success_rate,
            }
            for result in state.tests
        ],
    }


def encode_state(state: AppState) -> str:
    return json.dumps(state_to_payload(state))


def _require(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"{what}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_date(text: str) -> datetime:
    # Older blobs were written by ``Date.toISOString`` with a trailing "Z".
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        # Naive timestamps are taken as UTC.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_tag(raw: Any) -> Tag:
    _require(raw, dict, "tag")
    usage = _require(raw["usageCount"], int, "usageCount")
    success = _require(raw["successCount"], int, "successCount")
    if not 0 <= success <= usage:
        raise ValueError(f"tag {raw['id']!r}: successCount {success} outside 0..{usage}")
    return Tag(
        id=_require(raw["id"], str, "tag id"),
        label=_require(raw["label"], str, "tag label"),
        usage_count=usage,
        success_count=success,
    )


def _parse_mapping(key: str, raw: Any) -> NumberMapping:
    _require(raw, dict, f"mapping {key!r}")
    number = _require(raw.get("number", key), str, "number")
    if number != key:
        raise ValueError(f"mapping {key!r} holds number {number!r}")
    tags = tuple(_parse_tag(tag) for tag in _require(raw.get("tags", []), list, "tags"))
    if len({tag.id for tag in tags}) != len(tags):
        raise ValueError(f"mapping {key!r} has duplicate tag ids")
    return NumberMapping(id=key, number=key, tags=tags)


def _parse_result(raw: Any) -> TestResult:
    _require(raw, dict, "test")
    rate = _require(raw["successRate"], int, "successRate")
    if not 0 <= rate <= 100:
        raise ValueError(f"successRate {rate} outside 0..100")
    return TestResult(
        id=_require(raw["id"], str, "test id"),
        date=_parse_date(_require(raw["date"], str, "date")),
        difficulty=Difficulty(raw["difficulty"]),
        success_rate=rate,
    )


def decode_state(blob: str) -> AppState:
    """Parse a stored blob, raising ``ValueError`` when it is malformed.

    Numbers of the supported domain that the blob lacks are filled in
    with empty mappings.
    """
    try:
        payload = json.loads(blob)
        _require(payload, dict, "state")
        raw_mappings = _require(payload.get("mappings", {}), dict, "mappings")
        raw_tests: List[Any] = _require(payload.get("tests", []), list, "tests")
        mappings = seed_mappings()
        for key, raw in raw_mappings.items():
            if key not in mappings:
                raise ValueError(f"unsupported number {key!r}")
            mappings[key] = _parse_mapping(key, raw)
        tests = tuple(_parse_result(raw) for raw in raw_tests)
    except (KeyError, TypeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        raise ValueError(f"malformed stored state: {e}") from e
    return AppState(mappings=mappings, tests=tests)


def load_state(storage: KeyValueStorage, key: str = STATE_KEY) -> AppState:
    """Load the stored state, or seed a fresh one when absent or unreadable."""
    blob = storage.load(key)
    if blob is None:
        logger.info("No stored state under %r, seeding a fresh one", key)
        return seed_state()
    try:
        return decode_state(blob)
    except ValueError as e:
        logger.warning("Discarding stored state under %r: %s", key, e)
        return seed_state()


class StatePersister:
    """Writes snapshots to storage on one background worker.

    ``save`` returns immediately; writes happen in submission order. A
    snapshot still queued when the process dies is lost.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STATE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="renumber-persist")
        self._pending: List[Future] = []
        self._closed = False

    def save(self, state: AppState) -> None:
        if self._closed:
            logger.warning("Persister under %r is closed, dropping write", self._key)
            return
        future = self._executor.submit(self._write, state)
        self._pending = [f for f in self._pending if not f.done()]
        self._pending.append(future)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every write queued so far has finished."""
        for future in list(self._pending):
            future.exception(timeout=timeout)
        self._pending = [f for f in self._pending if not f.done()]

    def close(self) -> None:
        self._closed = True
        self._executor.shutdown(wait=True)
        self._pending = []

    def _write(self, state: AppState) -> None:
        try:
            self._storage.save(self._key, encode_state(state))
        except Exception:
            logger.exception("Could not persist state under %r", self._key)
            raise
