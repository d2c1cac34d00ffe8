"""公開型と内部共通データ構造。"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar

from superops.enums import ErrorCategory

T = TypeVar("T")


@dataclass(slots=True)
class PageInfo:
    """コネクションのページ情報。

    Attributes:
        has_next_page: 後続ページがあるか。
        has_previous_page: 前ページがあるか。
        start_cursor: 先頭要素のカーソル。
        end_cursor: 末尾要素のカーソル。次ページ取得時に after として渡す。
    """

    has_next_page: bool
    has_previous_page: bool = False
    start_cursor: str | None = None
    end_cursor: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "PageInfo":
        """GraphQL pageInfo から生成する。"""

        data = payload or {}
        return cls(
            has_next_page=bool(data.get("hasNextPage", False)),
            has_previous_page=bool(data.get("hasPreviousPage", False)),
            start_cursor=data.get("startCursor"),
            end_cursor=data.get("endCursor"),
        )


@dataclass(slots=True)
class Page(Generic[T]):
    """1回の取得で得られるページ。

    Attributes:
        items: ページ内の要素（取得順）。
        page_info: ページ情報。
        total_count: 総件数。サーバーが返さない場合None。
        cursors: 要素ごとのカーソル。
    """

    items: list[T]
    page_info: PageInfo
    total_count: int | None = None
    cursors: list[str | None] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def has_next_page(self) -> bool:
        return self.page_info.has_next_page

    @property
    def end_cursor(self) -> str | None:
        return self.page_info.end_cursor

    @classmethod
    def from_connection(
        cls,
        payload: Mapping[str, Any] | None,
        convert: Callable[[Any], T] | None = None,
    ) -> "Page[T]":
        """GraphQLコネクション（edges/pageInfo/totalCount）を解析する。

        Args:
            payload: コネクション本体。
            convert: node 変換関数。

        Returns:
            ページ。
        """

        data = payload or {}
        items: list[T] = []
        cursors: list[str | None] = []
        for edge in data.get("edges") or []:
            node = edge.get("node")
            items.append(convert(node) if convert is not None else node)
            cursors.append(edge.get("cursor"))
        total = data.get("totalCount")
        return cls(
            items=items,
            page_info=PageInfo.from_payload(data.get("pageInfo")),
            total_count=int(total) if total is not None else None,
            cursors=cursors,
        )


@dataclass(slots=True)
class ValidationErrorDetail:
    """入力検証エラーの項目。"""

    field: str
    message: str


@dataclass(slots=True)
class ErrorClassification:
    """例外分類結果。

    Attributes:
        category: 分類カテゴリ。
        code: エラーコード。
        retryable: 再試行対象か。
    """

    category: ErrorCategory
    code: str
    retryable: bool


@dataclass(slots=True)
class RateLimitStatus:
    """レート制御の観測スナップショット。"""

    enabled: bool
    current_count: int
    max_requests: int
    remaining: int
    window_ms: int
    is_throttling: bool
    is_limited: bool
    delay_ms: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class GraphQLResponse:
    """例外化しない生のGraphQL応答。

    Attributes:
        data: data 部。
        errors: errors 部。
    """

    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
