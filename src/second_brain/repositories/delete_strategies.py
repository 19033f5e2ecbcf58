"""Strategies for deleting every point that matches a predicate.

Some Qdrant deployments reject filtered deletes on fields without a payload
index. The scan strategy covers them by paging through the collection,
matching client-side and deleting by id. There is no locking: points written
while a scan is in progress may or may not be deleted.
"""

from __future__ import annotations

from typing import Protocol

from qdrant_client.http.exceptions import UnexpectedResponse

from second_brain.adapters.qdrant_filters import compile_filter
from second_brain.config import Settings
from second_brain.core.exceptions import StoreUnavailable
from second_brain.core.filters import FilterPredicate, matches
from second_brain.core.logging import get_logger
from second_brain.services.qdrant_service import QdrantService

logger = get_logger(__name__)


class DeleteStrategy(Protocol):
    async def delete_matching(self, collection_name: str, predicate: FilterPredicate) -> int | None:
        """Delete matching points; returns the count when it is known."""
        ...


class FilteredDeleteStrategy:
    """One server-side delete with a payload filter."""

    def __init__(self, qdrant_service: QdrantService):
        self._qdrant = qdrant_service

    async def delete_matching(self, collection_name: str, predicate: FilterPredicate) -> int | None:
        filter_ = compile_filter(predicate)
        if filter_ is None:
            raise ValueError("Refusing to delete with an empty filter")
        await self._qdrant.delete(collection_name, filter_=filter_)
        return None


class ScanDeleteStrategy:
    """Scroll everything (up to ``cap``), filter client-side, delete ids in batches."""

    def __init__(
        self,
        qdrant_service: QdrantService,
        *,
        cap: int,
        page_size: int = 100,
        batch_size: int = 100,
    ):
        self._qdrant = qdrant_service
        self._cap = cap
        self._page_size = page_size
        self._batch_size = batch_size

    async def delete_matching(self, collection_name: str, predicate: FilterPredicate) -> int | None:
        records = await self._qdrant.scroll_all(
            collection_name,
            cap=self._cap,
            page_size=self._page_size,
        )
        ids = [record.id for record in records if matches(predicate, record.payload)]

        for start in range(0, len(ids), self._batch_size):
            batch = ids[start : start + self._batch_size]
            await self._qdrant.delete(collection_name, ids=batch)
            logger.debug(
                "Deleted batch %d (%d points) from '%s'",
                start // self._batch_size + 1,
                len(batch),
                collection_name,
            )

        return len(ids)


class NegotiatedDeleteStrategy:
    """Filtered delete first; once the backend rejects it, scan from then on.

    Only a 4xx answer to the filtered delete counts as a rejection. Timeouts and
    connection errors propagate and leave the capability untouched.
    """

    def __init__(self, filtered: FilteredDeleteStrategy, scan: ScanDeleteStrategy):
        self._filtered = filtered
        self._scan = scan
        self.supports_filtered_delete = True

    async def delete_matching(self, collection_name: str, predicate: FilterPredicate) -> int | None:
        if self.supports_filtered_delete:
            try:
                return await self._filtered.delete_matching(collection_name, predicate)
            except StoreUnavailable as exc:
                if not _is_rejection(exc):
                    raise
                logger.warning(
                    "Filtered delete rejected on '%s' (%s); falling back to scan-and-delete",
                    collection_name,
                    exc.message,
                )
                self.supports_filtered_delete = False
        return await self._scan.delete_matching(collection_name, predicate)


def _is_rejection(exc: StoreUnavailable) -> bool:
    cause = exc.__cause__
    return isinstance(cause, UnexpectedResponse) and 400 <= cause.status_code < 500


def build_delete_strategy(
    settings: Settings,
    qdrant_service: QdrantService,
    *,
    cap: int,
) -> DeleteStrategy:
    """Build the strategy named by ``qdrant_delete_strategy``."""
    scan = ScanDeleteStrategy(
        qdrant_service,
        cap=cap,
        page_size=settings.scroll_page_size,
        batch_size=settings.delete_batch_size,
    )
    if settings.qdrant_delete_strategy == "scan":
        return scan

    filtered = FilteredDeleteStrategy(qdrant_service)
    if settings.qdrant_delete_strategy == "filter":
        return filtered
    return NegotiatedDeleteStrategy(filtered, scan)
