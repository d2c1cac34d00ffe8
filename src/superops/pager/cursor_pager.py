"""カーソル方式の要素単位ページャ。"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from superops.types import Page
from superops.validation import normalize_max_items, normalize_page_size

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class PageFetcher(Protocol[T_co]):
    """1ページ取得関数。"""

    def __call__(self, *, first: int, after: str | None) -> Awaitable[Page[T_co]]: ...


@dataclass(slots=True)
class CursorPagerState:
    """カーソルページング状態。

    Attributes:
        page_size: 1回の取得件数。
        max_items: 返却件数の上限。
        buffer: 取得済みページの要素。
        buffer_index: 次に返す要素位置。
        total_yielded: 返却済み件数。
        has_more: 後続ページがあるか。
        end_cursor: 次回取得の after。
        pages_fetched: 取得したページ数。
    """

    page_size: int
    max_items: int | None = None
    buffer: list[Any] = field(default_factory=list)
    buffer_index: int = 0
    total_yielded: int = 0
    has_more: bool = True
    end_cursor: str | None = None
    pages_fetched: int = 0

    @property
    def exhausted_buffer(self) -> bool:
        return self.buffer_index >= len(self.buffer)

    @property
    def reached_limit(self) -> bool:
        return self.max_items is not None and self.total_yielded >= self.max_items

    def absorb(self, page: Page[Any]) -> None:
        """取得ページを状態へ反映する。"""

        self.buffer = list(page.items)
        self.buffer_index = 0
        self.end_cursor = page.end_cursor
        self.has_more = page.has_next_page
        self.pages_fetched += 1


class CursorPaginator(Generic[T]):
    """要素を1件ずつ返す非同期イテレータ。

    要素を使い切るまで次ページを取得しない。空ページを受け取った時点で、
    hasNextPage の値にかかわらず終了する。取得失敗はそのまま呼び出し元へ伝播する。
    """

    def __init__(
        self,
        fetcher: PageFetcher[T],
        *,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._state = CursorPagerState(
            page_size=normalize_page_size(page_size),
            max_items=normalize_max_items(max_items),
        )
        self._done = False

    @property
    def state(self) -> CursorPagerState:
        return self._state

    def __aiter__(self) -> "CursorPaginator[T]":
        return self

    async def __anext__(self) -> T:
        state = self._state
        if self._done or state.reached_limit:
            self._done = True
            raise StopAsyncIteration

        while state.exhausted_buffer and state.has_more:
            after = state.end_cursor
            page = await self._fetcher(first=state.page_size, after=after)
            state.absorb(page)
            logger.debug(
                "fetched page: first=%d after=%s items=%d has_next=%s",
                state.page_size,
                after,
                len(page.items),
                page.has_next_page,
            )
            if not page.items:
                self._done = True
                raise StopAsyncIteration

        if state.exhausted_buffer:
            self._done = True
            raise StopAsyncIteration

        item = state.buffer[state.buffer_index]
        state.buffer_index += 1
        state.total_yielded += 1
        return item

    async def to_list(self) -> list[T]:
        """残りの要素をすべて取得して返す。"""

        return [item async for item in self]


def paginate(
    fetcher: PageFetcher[T],
    *,
    page_size: int | None = None,
    max_items: int | None = None,
) -> CursorPaginator[T]:
    """取得関数から要素単位の非同期イテレータを作る。

    Args:
        fetcher: ``await fetcher(first=..., after=...)`` で Page を返す関数。
        page_size: 1回の取得件数（既定50、上限100）。
        max_items: 返却件数の上限。

    Returns:
        新しいイテレータ。
    """

    return CursorPaginator(fetcher, page_size=page_size, max_items=max_items)


async def collect_all(fetcher: PageFetcher[T], *, page_size: int | None = None) -> list[T]:
    """全件を取得して返す。"""

    return await paginate(fetcher, page_size=page_size).to_list()


async def take(
    fetcher: PageFetcher[T],
    count: int,
    *,
    page_size: int | None = None,
) -> list[T]:
    """先頭から count 件だけ取得して返す。"""

    return await paginate(fetcher, page_size=page_size, max_items=count).to_list()
