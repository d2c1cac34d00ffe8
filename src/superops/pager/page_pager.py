"""カーソル方式のページ単位ページャ。"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from superops.pager.cursor_pager import PageFetcher
from superops.types import Page
from superops.validation import normalize_page_size

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PagePaginator(Generic[T]):
    """ページ全体を返す非同期イテレータ。"""

    def __init__(self, fetcher: PageFetcher[T], *, page_size: int | None = None) -> None:
        self._fetcher = fetcher
        self._page_size = normalize_page_size(page_size)
        self._has_more = True
        self._end_cursor: str | None = None

    def __aiter__(self) -> "PagePaginator[T]":
        return self

    async def __anext__(self) -> Page[T]:
        if not self._has_more:
            raise StopAsyncIteration

        after = self._end_cursor
        page = await self._fetcher(first=self._page_size, after=after)
        self._end_cursor = page.end_cursor
        self._has_more = page.has_next_page
        logger.debug(
            "fetched page: first=%d after=%s items=%d has_next=%s",
            self._page_size,
            after,
            len(page.items),
            page.has_next_page,
        )
        if not page.items:
            self._has_more = False
            raise StopAsyncIteration
        return page

    async def to_list(self) -> list[Page[T]]:
        """残りのページをすべて取得して返す。"""

        return [page async for page in self]


def paginate_pages(fetcher: PageFetcher[T], *, page_size: int | None = None) -> PagePaginator[T]:
    """取得関数からページ単位の非同期イテレータを作る。"""

    return PagePaginator(fetcher, page_size=page_size)
