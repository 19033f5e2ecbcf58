"""Backend-neutral filter predicates for chunk retrieval and deletion.

Predicates are plain values. ``second_brain.adapters.qdrant_filters`` compiles
them into Qdrant filters; :func:`matches` evaluates them against a payload for
the scan-based code paths.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, TypeAlias

from second_brain.core.constants import K_DOCUMENT_ID, K_FILENAME, K_UPLOAD_DATE
from second_brain.core.timestamps import parse_timestamp, to_iso_timestamp

DateInput: TypeAlias = str | date | datetime


@dataclass(frozen=True)
class DocumentIdEquals:
    document_id: str
    key: str = K_DOCUMENT_ID


@dataclass(frozen=True)
class FilenameEquals:
    filename: str
    key: str = K_FILENAME


@dataclass(frozen=True)
class DateRange:
    """Inclusive range on ``uploadDate``; either bound may be open."""

    date_from: str | None = None
    date_to: str | None = None
    key: str = K_UPLOAD_DATE

    @classmethod
    def between(cls, date_from: DateInput | None, date_to: DateInput | None) -> DateRange:
        """Build a range, normalizing both bounds to canonical UTC timestamps."""
        return cls(
            date_from=to_iso_timestamp(date_from) if date_from else None,
            date_to=to_iso_timestamp(date_to) if date_to else None,
        )


@dataclass(frozen=True)
class AllOf:
    predicates: tuple[FilterPredicate, ...]


FilterPredicate: TypeAlias = DocumentIdEquals | FilenameEquals | DateRange | AllOf


def build_predicate(
    *,
    document_id: str | None = None,
    filename: str | None = None,
    date_from: DateInput | None = None,
    date_to: DateInput | None = None,
) -> FilterPredicate | None:
    """Combine the supplied criteria with AND; ``None`` when nothing was supplied."""
    predicates: list[FilterPredicate] = []
    if document_id:
        predicates.append(DocumentIdEquals(document_id))
    if filename:
        predicates.append(FilenameEquals(filename))
    if date_from or date_to:
        predicates.append(DateRange.between(date_from, date_to))

    if not predicates:
        return None
    return AllOf(tuple(predicates))


def flatten(predicate: FilterPredicate) -> Sequence[FilterPredicate]:
    """Expand nested ``AllOf`` into its leaf predicates."""
    if isinstance(predicate, AllOf):
        leaves: list[FilterPredicate] = []
        for inner in predicate.predicates:
            leaves.extend(flatten(inner))
        return leaves
    return [predicate]


def matches(predicate: FilterPredicate | None, payload: Mapping[str, Any] | None) -> bool:
    """Evaluate a predicate client-side against a point payload."""
    if predicate is None:
        return True
    payload = payload or {}

    if isinstance(predicate, AllOf):
        return all(matches(inner, payload) for inner in predicate.predicates)
    if isinstance(predicate, DocumentIdEquals):
        return payload.get(predicate.key) == predicate.document_id
    if isinstance(predicate, FilenameEquals):
        return payload.get(predicate.key) == predicate.filename
    if isinstance(predicate, DateRange):
        return _in_range(payload.get(predicate.key), predicate)

    raise TypeError(f"Unsupported filter predicate: {predicate!r}")


def _in_range(value: Any, predicate: DateRange) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return False
    if predicate.date_from and moment < parse_timestamp(predicate.date_from):
        return False
    if predicate.date_to and moment > parse_timestamp(predicate.date_to):
        return False
    return True
