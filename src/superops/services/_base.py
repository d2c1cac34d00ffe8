"""リソースサービス共通基底。"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any

from superops.enums import DateHandling
from superops.normalize import convert_dates
from superops.pager import CursorPaginator, paginate
from superops.services._transport import GraphQLExecutor
from superops.types import Page
from superops.validation import normalize_page_size, prepare_filter, serialize_input

Entity = dict[str, Any]
ListMethod = Callable[..., Awaitable[Page[Entity]]]

_CONNECTION_BODY = """
    edges {
      node {
        ...%(fragment_name)s
      }
      cursor
    }
    pageInfo {
      hasNextPage
      hasPreviousPage
      startCursor
      endCursor
    }
    totalCount
"""


def connection_query(operation: str, field: str, *, fragment: str, fragment_name: str) -> str:
    """コネクションを返すクエリ文書を組み立てる。

    Args:
        operation: ``query Name($a: T, ...)`` 部分。
        field: ``rootField(a: $a, ...)`` 部分。
        fragment: フラグメント定義。
        fragment_name: node に展開するフラグメント名。

    Returns:
        GraphQL文書。
    """

    body = _CONNECTION_BODY % {"fragment_name": fragment_name}
    return f"{fragment}\n{operation} {{\n  {field} {{{body}  }}\n}}\n"


def entity_document(operation: str, field: str, *, fragment: str, fragment_name: str) -> str:
    """単一エンティティを返す文書を組み立てる。"""

    return f"{fragment}\n{operation} {{\n  {field} {{\n    ...{fragment_name}\n  }}\n}}\n"


def enum_value(value: Enum | str, enum_type: type[Enum]) -> str:
    """列挙または文字列を検証して送信値へ変換する。"""

    return str(enum_type(value).value)


class BaseService:
    """リソースサービスの基底クラス。

    応答の取り出し、コネクション解析、日時変換、全件走査の組み立てを提供する。
    """

    def __init__(self, *, executor: GraphQLExecutor, dates: DateHandling) -> None:
        self._executor = executor
        self._dates = dates

    def _convert(self, value: Any) -> Any:
        return convert_dates(value, self._dates)

    async def _fetch(self, document: str, variables: Mapping[str, Any] | None, root: str) -> Any:
        """クエリを実行し root フィールドを返す。"""

        data = await self._executor.query(document, variables)
        return self._convert(data.get(root))

    async def _mutate(self, document: str, variables: Mapping[str, Any] | None, root: str) -> Any:
        """ミューテーションを実行し root フィールドを返す。"""

        data = await self._executor.mutate(document, variables)
        return self._convert(data.get(root))

    async def _fetch_page(
        self,
        document: str,
        variables: Mapping[str, Any] | None,
        root: str,
    ) -> Page[Entity]:
        """コネクションを返すクエリを実行しページへ変換する。"""

        data = await self._executor.query(document, variables)
        return Page.from_connection(data.get(root), convert=self._convert)

    def _page_variables(
        self,
        *,
        first: int,
        after: str | None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        variables: dict[str, Any] = dict(extra)
        variables["first"] = normalize_page_size(first)
        variables["after"] = after
        if filter is not None:
            variables["filter"] = prepare_filter(filter)
        variables["orderBy"] = prepare_filter(order_by)
        return variables

    def _iterate(
        self,
        list_method: ListMethod,
        *,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """フィルタと並び順を固定した全件イテレータを作る。"""

        async def fetcher(*, first: int, after: str | None) -> Page[Entity]:
            return await list_method(first=first, after=after, filter=filter, order_by=order_by)

        return paginate(fetcher, page_size=page_size, max_items=max_items)

    def _iterate_scoped(
        self,
        list_method: ListMethod,
        *args: Any,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """位置引数で対象を絞る一覧メソッド用の全件イテレータを作る。"""

        async def fetcher(*, first: int, after: str | None) -> Page[Entity]:
            return await list_method(*args, first=first, after=after, order_by=order_by)

        return paginate(fetcher, page_size=page_size, max_items=max_items)


def prepare_input(value: Mapping[str, Any]) -> dict[str, Any]:
    """作成・更新入力を送信用に整形する。None 値は null として送る。"""

    return serialize_input(value)
