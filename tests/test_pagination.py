"""Tests for paged listing collection."""

from __future__ import annotations

import pytest

from transcode_orchestrator.errors import PaginationError, RemoteTransportError
from transcode_orchestrator.pagination import Page, collect_all


def paged_source(items, total=None):
    """Fetch function serving ``items`` by offset/limit; records each call."""
    calls = []
    reported_total = len(items) if total is None else total

    async def fetch_page(offset, limit):
        calls.append((offset, limit))
        return Page(items=items[offset : offset + limit], total_count=reported_total)

    return fetch_page, calls


class TestCollectAll:
    """Tests for collect_all."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count,page_size", [(0, 10), (1, 10), (10, 10), (11, 10), (25, 7), (5, 1)])
    async def test_collects_every_item_in_order(self, count, page_size):
        """All items come back in listing order, whatever the page size."""
        items = [{"id": f"m{i}"} for i in range(count)]
        fetch_page, calls = paged_source(items)

        result = await collect_all(fetch_page, page_size=page_size)

        assert result == items
        assert all(limit == page_size for _, limit in calls)

    @pytest.mark.asyncio
    async def test_offsets_advance_by_collected_count(self):
        """Each request starts where the previous page ended."""
        fetch_page, calls = paged_source(list(range(25)))

        await collect_all(fetch_page, page_size=10)

        assert calls == [(0, 10), (10, 10), (20, 10)]

    @pytest.mark.asyncio
    async def test_failure_on_later_page_returns_nothing(self):
        """A failing page aborts the whole collection."""
        calls = []

        async def fetch_page(offset, limit):
            calls.append(offset)
            if offset >= 20:
                raise RuntimeError("connection reset")
            return Page(items=list(range(offset, offset + limit)), total_count=50)

        with pytest.raises(RemoteTransportError) as exc_info:
            await collect_all(fetch_page, page_size=10, description="mp4 muxings")

        assert exc_info.value.operation == "retrieving mp4 muxings at offset 20"
        assert "connection reset" in str(exc_info.value)
        assert calls == [0, 10, 20]

    @pytest.mark.asyncio
    async def test_transport_errors_propagate_unchanged(self):
        """Errors already carrying an operation are not wrapped again."""
        error = RemoteTransportError("retrieving mp4 muxings", "HTTP 500")

        async def fetch_page(offset, limit):
            raise error

        with pytest.raises(RemoteTransportError) as exc_info:
            await collect_all(fetch_page)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_empty_page_before_total_is_an_error(self):
        """A listing that stops short of its total fails instead of looping."""

        async def fetch_page(offset, limit):
            if offset == 0:
                return Page(items=[1, 2], total_count=5)
            return Page(items=[], total_count=5)

        with pytest.raises(PaginationError) as exc_info:
            await collect_all(fetch_page, page_size=2)

        assert "2 of 5" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_total_means_one_page(self):
        """A page without a total count ends the listing."""
        fetch_page, calls = paged_source([1, 2, 3], total=0)

        async def no_total(offset, limit):
            page = await fetch_page(offset, limit)
            return Page(items=page.items, total_count=None)

        assert await collect_all(no_total, page_size=10) == [1, 2, 3]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_rejects_non_positive_page_size(self):
        """A zero page size would never make progress."""
        fetch_page, _ = paged_source([1])

        with pytest.raises(ValueError):
            await collect_all(fetch_page, page_size=0)
