"""アラートサービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.enums import AlertSeverity
from superops.pager import CursorPaginator
from superops.services._base import (
    BaseService,
    Entity,
    connection_query,
    entity_document,
    enum_value,
    prepare_input,
)
from superops.types import Page

ALERT_FRAGMENT = """
fragment AlertFields on Alert {
  id
  title
  message
  status
  severity
  category
  source
  acknowledgedAt
  resolvedAt
  dismissedAt
  assetId
  clientId
  siteId
  ticketId
  createdAt
  updatedAt
  asset {
    id
    name
  }
  client {
    id
    name
  }
  site {
    id
    name
  }
  ticket {
    id
    subject
  }
  acknowledgedBy {
    id
    name
  }
  resolvedBy {
    id
    name
  }
}
"""

_FRAGMENT = {"fragment": ALERT_FRAGMENT, "fragment_name": "AlertFields"}

LIST_ALERTS = connection_query(
    "query GetAlertList($first: Int, $after: String, $filter: AlertFilterInput, $orderBy: AlertOrderInput)",
    "getAlertList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_ALERTS_FOR_ASSET = connection_query(
    "query GetAlertsForAsset($assetId: ID!, $first: Int, $after: String, $orderBy: AlertOrderInput)",
    "getAlertsForAsset(assetId: $assetId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_ALERTS_BY_CLIENT = connection_query(
    "query GetAlertsByClient($clientId: ID!, $first: Int, $after: String, $orderBy: AlertOrderInput)",
    "getAlertsByClient(clientId: $clientId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_ALERTS_BY_SEVERITY = connection_query(
    "query GetAlertsBySeverity($severity: AlertSeverity!, $first: Int, $after: String, $orderBy: AlertOrderInput)",
    "getAlertsBySeverity(severity: $severity, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_ALERT = entity_document(
    "mutation CreateAlert($input: AlertInput!)", "createAlert(input: $input)", **_FRAGMENT
)

ACKNOWLEDGE_ALERT = entity_document(
    "mutation AcknowledgeAlert($id: ID!)", "acknowledgeAlert(id: $id)", **_FRAGMENT
)

RESOLVE_ALERT = entity_document(
    "mutation ResolveAlert($id: ID!)", "resolveAlert(id: $id)", **_FRAGMENT
)

DISMISS_ALERT = entity_document(
    "mutation DismissAlert($id: ID!)", "dismissAlert(id: $id)", **_FRAGMENT
)


class AlertsService(BaseService):
    """監視アラートの取得と状態遷移。"""

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """アラート一覧の1ページを取得する。"""

        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_ALERTS, variables, "getAlertList")

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

    async def list_by_asset(
        self,
        asset_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, order_by=order_by, assetId=asset_id)
        return await self._fetch_page(LIST_ALERTS_FOR_ASSET, variables, "getAlertsForAsset")

    async def list_by_client(
        self,
        client_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, order_by=order_by, clientId=client_id)
        return await self._fetch_page(LIST_ALERTS_BY_CLIENT, variables, "getAlertsByClient")

    async def list_by_severity(
        self,
        severity: AlertSeverity | str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """重大度でアラートを絞り込む。"""

        variables = self._page_variables(
            first=first,
            after=after,
            order_by=order_by,
            severity=enum_value(severity, AlertSeverity),
        )
        return await self._fetch_page(LIST_ALERTS_BY_SEVERITY, variables, "getAlertsBySeverity")

    async def create(self, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(CREATE_ALERT, {"input": prepare_input(input)}, "createAlert")

    async def acknowledge(self, id: str) -> Entity:
        """アラートを確認済みにする。"""

        return await self._mutate(ACKNOWLEDGE_ALERT, {"id": id}, "acknowledgeAlert")

    async def resolve(self, id: str) -> Entity:
        return await self._mutate(RESOLVE_ALERT, {"id": id}, "resolveAlert")

    async def dismiss(self, id: str) -> Entity:
        return await self._mutate(DISMISS_ALERT, {"id": id}, "dismissAlert")
