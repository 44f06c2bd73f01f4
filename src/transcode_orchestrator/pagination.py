"""Draining of offset/limit paged listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .errors import PaginationError, RemoteTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """One page of a remote listing."""

    items: list[T] = field(default_factory=list)
    total_count: int | None = None


FetchPage = Callable[[int, int], Awaitable[Page[Any]]]


async def collect_all(
    fetch_page: FetchPage,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    description: str = "listing",
) -> list[Any]:
    """
    Request pages until the collected count reaches the reported total.

    Args:
        fetch_page: Coroutine function called with ``(offset, limit)``
        page_size: Limit sent with every page request
        description: What is being listed, used in error messages

    Returns:
        Every item, in the order the pages returned them

    Raises:
        RemoteTransportError: A page request failed. Nothing collected so far
            is returned.
        PaginationError: A page came back empty before the total was reached.
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    items: list[Any] = []
    total = 1  # unknown until the first page answers
    while len(items) < total:
        offset = len(items)
        try:
            page = await fetch_page(offset, page_size)
        except RemoteTransportError:
            raise
        except Exception as e:
            raise RemoteTransportError(f"retrieving {description} at offset {offset}", e) from e

        total = page.total_count or 0
        if not page.items and len(items) < total:
            raise PaginationError(
                f"retrieving {description} at offset {offset}",
                f"empty page with {len(items)} of {total} items collected",
            )
        items.extend(page.items)

    logger.debug(f"Collected {len(items)} items from {description}")
    return items
