"""拠点サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

SITE_FRAGMENT = """
fragment SiteFields on Site {
  id
  name
  status
  clientId
  timezone
  notes
  createdAt
  updatedAt
  address {
    street1
    street2
    city
    state
    postalCode
    country
  }
  primaryContact {
    email
    phone
    mobile
    fax
  }
  client {
    id
    name
  }
}
"""

_FRAGMENT = {"fragment": SITE_FRAGMENT, "fragment_name": "SiteFields"}

GET_SITE = entity_document("query GetSite($id: ID!)", "getSite(id: $id)", **_FRAGMENT)

LIST_SITES_BY_CLIENT = connection_query(
    "query GetSitesByClient($clientId: ID!, $first: Int, $after: String, $orderBy: SiteOrderInput)",
    "getSitesByClient(clientId: $clientId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_SITE = entity_document(
    "mutation CreateClientSite($clientId: ID!, $input: SiteInput!)",
    "createClientSite(clientId: $clientId, input: $input)",
    **_FRAGMENT,
)

UPDATE_SITE = entity_document(
    "mutation UpdateSite($id: ID!, $input: SiteInput!)",
    "updateSite(id: $id, input: $input)",
    **_FRAGMENT,
)

DELETE_SITE = """
mutation DeleteSite($id: ID!) {
  deleteSite(id: $id)
}
"""


class SitesService(BaseService):
    """顧客拠点の取得・更新。拠点は常に顧客に属する。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_SITE, {"id": id}, "getSite")

    async def list_by_client(
        self,
        client_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """顧客に属する拠点の1ページを取得する。"""

        variables = self._page_variables(first=first, after=after, order_by=order_by, clientId=client_id)
        return await self._fetch_page(LIST_SITES_BY_CLIENT, variables, "getSitesByClient")

    def list_by_client_all(
        self,
        client_id: str,
        *,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        return self._iterate_scoped(
            self.list_by_client,
            client_id,
            order_by=order_by,
            page_size=page_size,
            max_items=max_items,
        )

    async def create(self, client_id: str, input: Mapping[str, Any]) -> Entity:
        """顧客に拠点を追加する。"""

        return await self._mutate(
            CREATE_SITE,
            {"clientId": client_id, "input": prepare_input(input)},
            "createClientSite",
        )

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_SITE,
            {"id": id, "input": prepare_input(input)},
            "updateSite",
        )

    async def delete(self, id: str) -> bool:
        return bool(await self._mutate(DELETE_SITE, {"id": id}, "deleteSite"))
