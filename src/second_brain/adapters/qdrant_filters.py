"""Compile filter predicates into Qdrant filter objects."""

from __future__ import annotations

from qdrant_client import models as q

from second_brain.core.filters import (
    AllOf,
    DateRange,
    DocumentIdEquals,
    FilenameEquals,
    FilterPredicate,
    flatten,
)
from second_brain.core.timestamps import parse_timestamp


def compile_filter(predicate: FilterPredicate | None) -> q.Filter | None:
    """Translate a predicate into a ``must`` filter, or ``None`` for no filtering."""
    if predicate is None:
        return None

    conditions = [_compile_leaf(leaf) for leaf in flatten(predicate)]
    if not conditions:
        return None
    return q.Filter(must=conditions)


def _compile_leaf(predicate: FilterPredicate) -> q.Condition:
    if isinstance(predicate, DocumentIdEquals):
        return q.FieldCondition(
            key=predicate.key,
            match=q.MatchValue(value=predicate.document_id),
        )
    if isinstance(predicate, FilenameEquals):
        return q.FieldCondition(
            key=predicate.key,
            match=q.MatchValue(value=predicate.filename),
        )
    if isinstance(predicate, DateRange):
        return q.FieldCondition(
            key=predicate.key,
            range=q.DatetimeRange(
                gte=parse_timestamp(predicate.date_from) if predicate.date_from else None,
                lte=parse_timestamp(predicate.date_to) if predicate.date_to else None,
            ),
        )
    if isinstance(predicate, AllOf):  # pragma: no cover - flattened above
        raise TypeError("AllOf must be flattened before compilation")

    raise TypeError(f"Unsupported filter predicate: {predicate!r}")
