"""技術者サービス。"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

TECHNICIAN_FRAGMENT = """
fragment TechnicianFields on Technician {
  id
  email
  firstName
  lastName
  name
  status
  role
  phone
  mobile
  title
  department
  timezone
  avatarUrl
  skills
  createdAt
  updatedAt
  queues {
    id
    name
  }
}
"""

_FRAGMENT = {"fragment": TECHNICIAN_FRAGMENT, "fragment_name": "TechnicianFields"}

GET_TECHNICIAN = entity_document(
    "query GetTechnician($id: ID!)", "getTechnician(id: $id)", **_FRAGMENT
)

LIST_TECHNICIANS = connection_query(
    "query GetTechnicianList($first: Int, $after: String, $filter: TechnicianFilterInput, "
    "$orderBy: TechnicianOrderInput)",
    "getTechnicianList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_FRAGMENT,
)

GET_TECHNICIAN_AVAILABILITY = """
query GetTechnicianAvailability($id: ID!, $date: Date!) {
  getTechnicianAvailability(id: $id, date: $date) {
    date
    startTime
    endTime
    available
    reason
  }
}
"""

UPDATE_TECHNICIAN = entity_document(
    "mutation UpdateTechnician($id: ID!, $input: TechnicianInput!)",
    "updateTechnician(id: $id, input: $input)",
    **_FRAGMENT,
)


def _date_only(value: date | str) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class TechniciansService(BaseService):
    """技術者（担当者）の取得・更新。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_TECHNICIAN, {"id": id}, "getTechnician")

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_TECHNICIANS, variables, "getTechnicianList")

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

    async def get_availability(self, id: str, date: date | str) -> list[Entity]:
        """指定日の空き枠を取得する。

        Args:
            id: 技術者ID。
            date: 対象日。datetime の場合は日付部分のみ送る。

        Returns:
            空き枠の一覧。
        """

        result = await self._fetch(
            GET_TECHNICIAN_AVAILABILITY,
            {"id": id, "date": _date_only(date)},
            "getTechnicianAvailability",
        )
        return list(result or [])

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_TECHNICIAN,
            {"id": id, "input": prepare_input(input)},
            "updateTechnician",
        )
