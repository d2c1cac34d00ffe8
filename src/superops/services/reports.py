"""レポートサービス。"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from superops.normalize import to_iso_string
from superops.services._base import BaseService, Entity

_PRIORITY_COUNTS = """{
      low
      medium
      high
      critical
    }"""

GET_TICKET_METRICS = f"""
query GetTicketMetrics($dateRange: DateRangeInput!, $clientId: ID, $technicianId: ID) {{
  getTicketMetrics(dateRange: $dateRange, clientId: $clientId, technicianId: $technicianId) {{
    period {{
      startDate
      endDate
    }}
    totalTickets
    openTickets
    resolvedTickets
    closedTickets
    averageResolutionTimeHours
    averageFirstResponseTimeHours
    ticketsByPriority {_PRIORITY_COUNTS}
    ticketsByStatus
    ticketsBySource
    ticketsByType
    ticketTrend {{
      date
      created
      resolved
    }}
  }}
}}
"""

GET_ASSET_SUMMARY = """
query GetAssetSummary($clientId: ID, $siteId: ID) {
  getAssetSummary(clientId: $clientId, siteId: $siteId) {
    totalAssets
    activeAssets
    inactiveAssets
    assetsByType
    assetsByStatus
    assetsByClient {
      clientId
      clientName
      count
    }
    assetsByOperatingSystem
    recentlyAdded
    needingAttention
  }
}
"""

GET_TECHNICIAN_PERFORMANCE = f"""
query GetTechnicianPerformance($dateRange: DateRangeInput!) {{
  getTechnicianPerformance(dateRange: $dateRange) {{
    period {{
      startDate
      endDate
    }}
    technicians {{
      technicianId
      technicianName
      ticketsAssigned
      ticketsResolved
      averageResolutionTimeHours
      averageFirstResponseTimeHours
      totalTimeLoggedHours
      customerSatisfactionScore
      ticketsByPriority {_PRIORITY_COUNTS}
    }}
  }}
}}
"""

GET_CLIENT_HEALTH_SCORES = """
query GetClientHealthScores($clientId: ID) {
  getClientHealthScores(clientId: $clientId) {
    scores {
      clientId
      clientName
      overallScore
      components {
        assetHealth
        ticketVolume
        patchCompliance
        alertFrequency
        contractStatus
      }
      riskLevel
      recommendations
      lastUpdatedAt
    }
    averageScore
    atRiskCount
    healthyCount
  }
}
"""


def date_range_input(date_range: Mapping[str, date | str]) -> dict[str, str | None]:
    """``{"start_date"/"startDate", "end_date"/"endDate"}`` を DateRangeInput へ変換する。

    Raises:
        ValueError: 開始日または終了日がない場合。
    """

    start = date_range.get("startDate", date_range.get("start_date"))
    end = date_range.get("endDate", date_range.get("end_date"))
    if start is None or end is None:
        raise ValueError("date_range には開始日と終了日を指定してください。")
    return {"startDate": to_iso_string(start), "endDate": to_iso_string(end)}


class ReportsService(BaseService):
    """集計レポート（読み取り専用）。"""

    async def ticket_metrics(
        self,
        date_range: Mapping[str, date | str],
        *,
        client_id: str | None = None,
        technician_id: str | None = None,
    ) -> Entity:
        """期間内のチケット集計を取得する。

        Args:
            date_range: 集計期間。
            client_id: 顧客で絞り込む。
            technician_id: 技術者で絞り込む。

        Returns:
            集計結果。
        """

        variables: dict[str, Any] = {
            "dateRange": date_range_input(date_range),
            "clientId": client_id,
            "technicianId": technician_id,
        }
        return await self._fetch(GET_TICKET_METRICS, variables, "getTicketMetrics")

    async def asset_summary(
        self,
        *,
        client_id: str | None = None,
        site_id: str | None = None,
    ) -> Entity:
        return await self._fetch(
            GET_ASSET_SUMMARY,
            {"clientId": client_id, "siteId": site_id},
            "getAssetSummary",
        )

    async def technician_performance(self, date_range: Mapping[str, date | str]) -> Entity:
        return await self._fetch(
            GET_TECHNICIAN_PERFORMANCE,
            {"dateRange": date_range_input(date_range)},
            "getTechnicianPerformance",
        )

    async def client_health_scores(self, *, client_id: str | None = None) -> Entity:
        """顧客ごとの健全性スコアを取得する。"""

        return await self._fetch(
            GET_CLIENT_HEALTH_SCORES,
            {"clientId": client_id},
            "getClientHealthScores",
        )
