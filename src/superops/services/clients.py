"""顧客サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

_CONTACT = """{
    email
    phone
    mobile
    fax
  }"""

_ADDRESS = """{
    street1
    street2
    city
    state
    postalCode
    country
  }"""

CLIENT_FRAGMENT = f"""
fragment ClientFields on Client {{
  id
  name
  status
  type
  displayName
  website
  industry
  notes
  taxId
  defaultTechnicianId
  createdAt
  updatedAt
  primaryContact {_CONTACT}
  billingContact {_CONTACT}
  address {_ADDRESS}
  billingAddress {_ADDRESS}
  defaultTechnician {{
    id
    name
  }}
  tags
}}
"""

_FRAGMENT = {"fragment": CLIENT_FRAGMENT, "fragment_name": "ClientFields"}

GET_CLIENT = entity_document("query GetClient($id: ID!)", "getClient(id: $id)", **_FRAGMENT)

LIST_CLIENTS = connection_query(
    "query GetClientList($first: Int, $after: String, $filter: ClientFilterInput, $orderBy: ClientOrderInput)",
    "getClientList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_FRAGMENT,
)

SEARCH_CLIENTS = connection_query(
    "query SearchClients($query: String!, $first: Int, $after: String, $orderBy: ClientOrderInput)",
    "searchClients(query: $query, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_CLIENT = entity_document(
    "mutation CreateClient($input: ClientInput!)", "createClient(input: $input)", **_FRAGMENT
)

UPDATE_CLIENT = entity_document(
    "mutation UpdateClient($id: ID!, $input: ClientInput!)",
    "updateClient(id: $id, input: $input)",
    **_FRAGMENT,
)

ARCHIVE_CLIENT = entity_document(
    "mutation ArchiveClient($id: ID!)", "archiveClient(id: $id)", **_FRAGMENT
)


class ClientsService(BaseService):
    """顧客（MSPの契約先）の取得・更新。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_CLIENT, {"id": id}, "getClient")

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """顧客一覧の1ページを取得する。"""

        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_CLIENTS, variables, "getClientList")

    def list_all(
        self,
        *,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        return self._iterate(
            self.list,
            filter=filter,
            order_by=order_by,
            page_size=page_size,
            max_items=max_items,
        )

    async def search(
        self,
        query: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """名称などの文字列で顧客を検索する。

        Args:
            query: 検索文字列。
            first: 取得件数（上限100）。
            after: このカーソルより後ろを取得する。
            order_by: 並び順。

        Returns:
            ページ。
        """

        variables = self._page_variables(first=first, after=after, order_by=order_by, query=query)
        return await self._fetch_page(SEARCH_CLIENTS, variables, "searchClients")

    async def create(self, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(CREATE_CLIENT, {"input": prepare_input(input)}, "createClient")

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_CLIENT,
            {"id": id, "input": prepare_input(input)},
            "updateClient",
        )

    async def archive(self, id: str) -> Entity:
        """顧客をアーカイブする。"""

        return await self._mutate(ARCHIVE_CLIENT, {"id": id}, "archiveClient")
