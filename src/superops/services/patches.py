"""パッチ管理サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

PATCH_FRAGMENT = """
fragment PatchFields on Patch {
  id
  name
  title
  kbArticleId
  description
  status
  severity
  category
  releaseDate
  vendor
  productName
  classification
  rebootRequired
  supersededBy
  fileSize
  assetId
  clientId
  installedAt
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
}
"""

DEPLOYMENT_FRAGMENT = """
fragment DeploymentFields on PatchDeployment {
  id
  name
  scheduledAt
  patchIds
  assetIds
  status
  maintenanceWindowStart
  maintenanceWindowEnd
  rebootPolicy
  createdAt
  updatedAt
  createdBy {
    id
    name
  }
}
"""

_PATCH = {"fragment": PATCH_FRAGMENT, "fragment_name": "PatchFields"}

_STATS = """{
      totalPatches
      installedPatches
      pendingPatches
      failedPatches
      compliancePercentage
      criticalPending
      importantPending
    }"""

LIST_PATCHES = connection_query(
    "query GetPatchList($first: Int, $after: String, $filter: PatchFilterInput, $orderBy: PatchOrderInput)",
    "getPatchList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_PATCH,
)

LIST_PATCHES_BY_ASSET = connection_query(
    "query GetPatchesByAsset($assetId: ID!, $first: Int, $after: String, $orderBy: PatchOrderInput)",
    "getPatchesByAsset(assetId: $assetId, first: $first, after: $after, orderBy: $orderBy)",
    **_PATCH,
)

GET_COMPLIANCE_REPORT = f"""
query GetPatchComplianceReport($clientId: ID, $siteId: ID, $assetId: ID) {{
  getPatchComplianceReport(clientId: $clientId, siteId: $siteId, assetId: $assetId) {{
    generatedAt
    scope
    scopeId
    stats {_STATS}
    byAsset {{
      assetId
      assetName
      stats {_STATS}
    }}
    byClient {{
      clientId
      clientName
      stats {_STATS}
    }}
  }}
}}
"""

APPROVE_PATCH = entity_document("mutation ApprovePatch($id: ID!)", "approvePatch(id: $id)", **_PATCH)

SCHEDULE_DEPLOYMENT = entity_document(
    "mutation SchedulePatchDeployment($input: PatchDeploymentInput!)",
    "schedulePatchDeployment(input: $input)",
    fragment=DEPLOYMENT_FRAGMENT,
    fragment_name="DeploymentFields",
)


class PatchesService(BaseService):
    """OS・ソフトウェアパッチの把握と配布。"""

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_PATCHES, variables, "getPatchList")

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
        return await self._fetch_page(LIST_PATCHES_BY_ASSET, variables, "getPatchesByAsset")

    async def get_compliance_report(
        self,
        *,
        client_id: str | None = None,
        site_id: str | None = None,
        asset_id: str | None = None,
    ) -> Entity:
        """パッチ適用状況の集計を取得する。

        指定がなければ全体、指定があればその範囲で集計される。

        Args:
            client_id: 顧客ID。
            site_id: 拠点ID。
            asset_id: 資産ID。

        Returns:
            集計結果。
        """

        return await self._fetch(
            GET_COMPLIANCE_REPORT,
            {"clientId": client_id, "siteId": site_id, "assetId": asset_id},
            "getPatchComplianceReport",
        )

    async def approve(self, id: str) -> Entity:
        return await self._mutate(APPROVE_PATCH, {"id": id}, "approvePatch")

    async def schedule_deployment(self, input: Mapping[str, Any]) -> Entity:
        """パッチ配布を予約する。"""

        return await self._mutate(
            SCHEDULE_DEPLOYMENT,
            {"input": prepare_input(input)},
            "schedulePatchDeployment",
        )
