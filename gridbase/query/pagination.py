# File: /gridbase/query/pagination.py | Version: 1.0 | Title: Pagination Planner (keyset vs offset strategies)
"""
Two strategies, chosen once per request:

* ``KeysetStrategy`` (no custom sort): rows come in (created_at, id) order
  and the cursor is the last row's key. Pages already served never change,
  and rows inserted meanwhile show up only in later pages.
* ``OffsetStrategy`` (custom sort active): the cursor is the number of rows
  consumed. Inserts, deletes or edits to sorted cells between two fetches
  can make later pages skip or repeat rows; callers that need a stable
  walk should page without a sort.

Cursors are opaque url-safe base64 JSON tokens tagged with the strategy that
produced them.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union

from sqlalchemy import and_, or_

from gridbase.core.config import settings
from gridbase.core.exceptions import InvalidCursor
from gridbase.models.core_entities import Record

_KEYSET = "k"
_OFFSET = "o"


@dataclass(frozen=True)
class KeysetCursor:
    created_at: datetime
    record_id: str


@dataclass(frozen=True)
class KeysetStrategy:
    after: Optional[KeysetCursor] = None


@dataclass(frozen=True)
class OffsetStrategy:
    offset: int = 0


PaginationStrategy = Union[KeysetStrategy, OffsetStrategy]


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        limit = settings.PAGE_LIMIT_DEFAULT
    return max(1, min(int(limit), settings.PAGE_LIMIT_MAX))


def _encode(payload: dict) -> str:
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode(token: str) -> dict:
    try:
        padded = token + "=" * (-len(token) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, ValueError, UnicodeError):
        raise InvalidCursor("Malformed cursor")
    if not isinstance(payload, dict):
        raise InvalidCursor("Malformed cursor")
    return payload


def encode_cursor(strategy: PaginationStrategy) -> str:
    if isinstance(strategy, OffsetStrategy):
        return _encode({"s": _OFFSET, "o": strategy.offset})
    after = strategy.after
    return _encode({"s": _KEYSET, "t": after.created_at.isoformat(), "id": after.record_id})


def plan(has_sorts: bool, cursor: Optional[str]) -> PaginationStrategy:
    """Pick the strategy for this request and position it after ``cursor``."""
    if not cursor:
        return OffsetStrategy(0) if has_sorts else KeysetStrategy()

    payload = _decode(cursor)
    kind = payload.get("s")
    if has_sorts:
        if kind != _OFFSET:
            raise InvalidCursor("Cursor was issued for unsorted paging")
        offset = payload.get("o")
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            raise InvalidCursor("Malformed cursor")
        return OffsetStrategy(offset)

    if kind != _KEYSET:
        raise InvalidCursor("Cursor was issued for sorted paging")
    try:
        created_at = datetime.fromisoformat(payload["t"])
        record_id = str(payload["id"])
    except (KeyError, TypeError, ValueError):
        raise InvalidCursor("Malformed cursor")
    return KeysetStrategy(KeysetCursor(created_at, record_id))


def apply(stmt, strategy: PaginationStrategy, limit: int):
    """Bound ``stmt`` for one page; fetches one extra row to detect more."""
    if isinstance(strategy, OffsetStrategy):
        return stmt.offset(strategy.offset).limit(limit + 1)

    after = strategy.after
    if after is not None:
        stmt = stmt.where(
            or_(
                Record.created_at > after.created_at,
                and_(Record.created_at == after.created_at, Record.id > after.record_id),
            )
        )
    return stmt.limit(limit + 1)


def finish(
    rows: Sequence[Tuple[str, datetime]],
    strategy: PaginationStrategy,
    limit: int,
) -> Tuple[List[Tuple[str, datetime]], bool, Optional[str]]:
    """
    Trim the ``limit + 1`` probe. ``rows`` are ``(record_id, created_at)``
    pairs in page order. Returns ``(page, has_more, next_cursor)``.
    """
    page = list(rows[:limit])
    has_more = len(rows) > limit
    if not has_more:
        return page, False, None

    if isinstance(strategy, OffsetStrategy):
        following: PaginationStrategy = OffsetStrategy(strategy.offset + len(page))
    else:
        last_id, last_created = page[-1]
        following = KeysetStrategy(KeysetCursor(last_created, last_id))
    return page, True, encode_cursor(following)
