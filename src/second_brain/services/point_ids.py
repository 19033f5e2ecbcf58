"""Qdrant point id helpers for the chunk and full-document collections."""

from __future__ import annotations

import uuid

_MAX_POINT_ID = (1 << 63) - 1


def new_chunk_point_id() -> int:
    """Return a fresh random 63-bit point id for a chunk.

    Derived from ``uuid4`` so ids from concurrent ingestions do not repeat in
    practice; chunk ids carry no meaning beyond identity.
    """
    return uuid.uuid4().int & _MAX_POINT_ID


def document_point_id(document_id: str) -> int:
    """Map a string document id onto the full-document collection's numeric id.

    Polynomial rolling hash (base 31) over UTF-16 code units, folded into a
    signed 32-bit integer, absolute value taken. Pure and deterministic, but not
    collision free: the stored ``documentId`` payload remains authoritative.
    """
    raw = document_id.encode("utf-16-le")
    value = 0
    for i in range(0, len(raw), 2):
        code_unit = raw[i] | (raw[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)
