"""契約サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

CONTRACT_FRAGMENT = """
fragment ContractFields on Contract {
  id
  name
  status
  clientId
  startDate
  endDate
  billingCycle
  value
  currency
  description
  autoRenew
  renewalNotificationDays
  createdAt
  updatedAt
  client {
    id
    name
  }
}
"""

_FRAGMENT = {"fragment": CONTRACT_FRAGMENT, "fragment_name": "ContractFields"}

GET_CONTRACT = entity_document("query GetContract($id: ID!)", "getContract(id: $id)", **_FRAGMENT)

LIST_CONTRACTS_BY_CLIENT = connection_query(
    "query GetContractsByClient($clientId: ID!, $first: Int, $after: String, $orderBy: ContractOrderInput)",
    "getContractsByClient(clientId: $clientId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_CONTRACT = entity_document(
    "mutation CreateClientContract($clientId: ID!, $input: ContractInput!)",
    "createClientContract(clientId: $clientId, input: $input)",
    **_FRAGMENT,
)

UPDATE_CONTRACT = entity_document(
    "mutation UpdateContract($id: ID!, $input: ContractInput!)",
    "updateContract(id: $id, input: $input)",
    **_FRAGMENT,
)

RENEW_CONTRACT = entity_document(
    "mutation RenewContract($id: ID!, $input: RenewalInput!)",
    "renewContract(id: $id, input: $input)",
    **_FRAGMENT,
)


class ContractsService(BaseService):
    """顧客契約の取得・更新。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_CONTRACT, {"id": id}, "getContract")

    async def list_by_client(
        self,
        client_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, order_by=order_by, clientId=client_id)
        return await self._fetch_page(LIST_CONTRACTS_BY_CLIENT, variables, "getContractsByClient")

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
        return await self._mutate(
            CREATE_CONTRACT,
            {"clientId": client_id, "input": prepare_input(input)},
            "createClientContract",
        )

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_CONTRACT,
            {"id": id, "input": prepare_input(input)},
            "updateContract",
        )

    async def renew(self, id: str, input: Mapping[str, Any]) -> Entity:
        """契約を更新（延長）する。

        Args:
            id: 契約ID。
            input: 新しい終了日などの更新条件（``RenewalInput``）。

        Returns:
            更新後の契約。
        """

        return await self._mutate(
            RENEW_CONTRACT,
            {"id": id, "input": prepare_input(input)},
            "renewContract",
        )
