"""資産サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

ASSET_FRAGMENT = """
fragment AssetFields on Asset {
  id
  name
  type
  status
  serialNumber
  manufacturer
  model
  operatingSystem
  ipAddress
  macAddress
  lastSeenAt
  installedAt
  warrantyExpiresAt
  notes
  clientId
  siteId
  createdAt
  updatedAt
  client {
    id
    name
  }
  site {
    id
    name
  }
}
"""

_FRAGMENT = {"fragment": ASSET_FRAGMENT, "fragment_name": "AssetFields"}

GET_ASSET = entity_document("query GetAsset($id: ID!)", "getAsset(id: $id)", **_FRAGMENT)

LIST_ASSETS = connection_query(
    "query GetAssetList($first: Int, $after: String, $filter: AssetFilterInput, $orderBy: AssetOrderInput)",
    "getAssetList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_ASSETS_BY_CLIENT = connection_query(
    "query GetAssetsByClient($clientId: ID!, $first: Int, $after: String, $orderBy: AssetOrderInput)",
    "getAssetsByClient(clientId: $clientId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_ASSETS_BY_SITE = connection_query(
    "query GetAssetsBySite($siteId: ID!, $first: Int, $after: String, $orderBy: AssetOrderInput)",
    "getAssetsBySite(siteId: $siteId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_ASSET = entity_document(
    "mutation CreateAsset($input: AssetInput!)", "createAsset(input: $input)", **_FRAGMENT
)

UPDATE_ASSET = entity_document(
    "mutation UpdateAsset($id: ID!, $input: AssetInput!)",
    "updateAsset(id: $id, input: $input)",
    **_FRAGMENT,
)

DELETE_ASSET = """
mutation DeleteAsset($id: ID!) {
  deleteAsset(id: $id)
}
"""


class AssetsService(BaseService):
    """資産（管理対象端末）の取得・更新。"""

    async def get(self, id: str) -> Entity:
        """IDで資産を1件取得する。"""

        return await self._fetch(GET_ASSET, {"id": id}, "getAsset")

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """資産一覧の1ページを取得する。

        Args:
            first: 取得件数（上限100）。
            after: このカーソルより後ろを取得する。
            filter: 絞り込み条件（``AssetFilterInput``）。
            order_by: 並び順（``AssetOrderInput``）。

        Returns:
            ページ。
        """

        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_ASSETS, variables, "getAssetList")

    def list_all(
        self,
        *,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """全資産を順に返すイテレータを作る。"""

        return self._iterate(
            self.list,
            filter=filter,
            order_by=order_by,
            page_size=page_size,
            max_items=max_items,
        )

    async def list_by_client(
        self,
        client_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """顧客に属する資産の1ページを取得する。"""

        variables = self._page_variables(first=first, after=after, order_by=order_by, clientId=client_id)
        return await self._fetch_page(LIST_ASSETS_BY_CLIENT, variables, "getAssetsByClient")

    def list_by_client_all(
        self,
        client_id: str,
        *,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """顧客に属する全資産を順に返すイテレータを作る。"""

        return self._iterate_scoped(
            self.list_by_client,
            client_id,
            order_by=order_by,
            page_size=page_size,
            max_items=max_items,
        )

    async def list_by_site(
        self,
        site_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """拠点に属する資産の1ページを取得する。"""

        variables = self._page_variables(first=first, after=after, order_by=order_by, siteId=site_id)
        return await self._fetch_page(LIST_ASSETS_BY_SITE, variables, "getAssetsBySite")

    async def create(self, input: Mapping[str, Any]) -> Entity:
        """資産を作成する。"""

        return await self._mutate(CREATE_ASSET, {"input": prepare_input(input)}, "createAsset")

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        """資産を更新する。"""

        return await self._mutate(
            UPDATE_ASSET,
            {"id": id, "input": prepare_input(input)},
            "updateAsset",
        )

    async def delete(self, id: str) -> bool:
        """資産を削除する。"""

        return bool(await self._mutate(DELETE_ASSET, {"id": id}, "deleteAsset"))
