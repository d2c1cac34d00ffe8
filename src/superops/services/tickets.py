"""チケットサービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.enums import TicketStatus
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

TICKET_FRAGMENT = """
fragment TicketFields on Ticket {
  id
  subject
  description
  status
  priority
  type
  source
  dueDate
  resolvedAt
  closedAt
  firstResponseAt
  clientId
  siteId
  assetId
  technicianId
  queueId
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
  asset {
    id
    name
  }
  technician {
    id
    name
    email
  }
  queue {
    id
    name
  }
  tags
}
"""

_NOTE_FIELDS = """
    id
    content
    isPublic
    createdAt
    createdBy {
      id
      name
    }
"""

_TIME_ENTRY_FIELDS = """
    id
    startTime
    endTime
    durationMinutes
    description
    billable
    technicianId
    technician {
      id
      name
    }
"""

_FRAGMENT = {"fragment": TICKET_FRAGMENT, "fragment_name": "TicketFields"}

GET_TICKET = f"""{TICKET_FRAGMENT}
query GetTicket($id: ID!) {{
  getTicket(id: $id) {{
    ...TicketFields
    notes {{{_NOTE_FIELDS}    }}
    timeEntries {{{_TIME_ENTRY_FIELDS}    }}
  }}
}}
"""

LIST_TICKETS = connection_query(
    "query GetTicketList($first: Int, $after: String, $filter: TicketFilterInput, $orderBy: TicketOrderInput)",
    "getTicketList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_TICKETS_BY_CLIENT = connection_query(
    "query GetTicketsByClient($clientId: ID!, $first: Int, $after: String, $orderBy: TicketOrderInput)",
    "getTicketsByClient(clientId: $clientId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_TICKETS_BY_STATUS = connection_query(
    "query GetTicketsByStatus($status: TicketStatus!, $first: Int, $after: String, $orderBy: TicketOrderInput)",
    "getTicketsByStatus(status: $status, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

LIST_TICKETS_BY_TECHNICIAN = connection_query(
    "query GetTicketsByTechnician($techId: ID!, $first: Int, $after: String, $orderBy: TicketOrderInput)",
    "getTicketsByTechnician(techId: $techId, first: $first, after: $after, orderBy: $orderBy)",
    **_FRAGMENT,
)

CREATE_TICKET = entity_document(
    "mutation CreateTicket($input: TicketInput!)", "createTicket(input: $input)", **_FRAGMENT
)

UPDATE_TICKET = entity_document(
    "mutation UpdateTicket($id: ID!, $input: TicketInput!)",
    "updateTicket(id: $id, input: $input)",
    **_FRAGMENT,
)

ADD_TICKET_NOTE = f"""
mutation AddTicketNote($ticketId: ID!, $note: String!, $isPublic: Boolean) {{
  addTicketNote(ticketId: $ticketId, note: $note, isPublic: $isPublic) {{{_NOTE_FIELDS}  }}
}}
"""

ADD_TICKET_TIME_ENTRY = f"""
mutation AddTicketTimeEntry($ticketId: ID!, $input: TimeEntryInput!) {{
  addTicketTimeEntry(ticketId: $ticketId, input: $input) {{{_TIME_ENTRY_FIELDS}  }}
}}
"""

CHANGE_TICKET_STATUS = entity_document(
    "mutation ChangeTicketStatus($id: ID!, $status: TicketStatus!)",
    "changeTicketStatus(id: $id, status: $status)",
    **_FRAGMENT,
)

ASSIGN_TICKET = entity_document(
    "mutation AssignTicket($id: ID!, $technicianId: ID!)",
    "assignTicket(id: $id, technicianId: $technicianId)",
    **_FRAGMENT,
)


class TicketsService(BaseService):
    """サービスデスクのチケット操作。"""

    async def get(self, id: str) -> Entity:
        """チケットをメモ・作業記録つきで取得する。"""

        return await self._fetch(GET_TICKET, {"id": id}, "getTicket")

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """チケット一覧の1ページを取得する。

        Args:
            first: 取得件数（上限100）。
            after: このカーソルより後ろを取得する。
            filter: 絞り込み条件（``TicketFilterInput``）。
            order_by: 並び順（``TicketOrderInput``）。

        Returns:
            ページ。
        """

        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_TICKETS, variables, "getTicketList")

    def list_all(
        self,
        *,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """全チケットを順に返すイテレータを作る。"""

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
        variables = self._page_variables(first=first, after=after, order_by=order_by, clientId=client_id)
        return await self._fetch_page(LIST_TICKETS_BY_CLIENT, variables, "getTicketsByClient")

    async def list_by_status(
        self,
        status: TicketStatus | str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(
            first=first,
            after=after,
            order_by=order_by,
            status=enum_value(status, TicketStatus),
        )
        return await self._fetch_page(LIST_TICKETS_BY_STATUS, variables, "getTicketsByStatus")

    async def list_by_technician(
        self,
        technician_id: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, order_by=order_by, techId=technician_id)
        return await self._fetch_page(LIST_TICKETS_BY_TECHNICIAN, variables, "getTicketsByTechnician")

    async def create(self, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(CREATE_TICKET, {"input": prepare_input(input)}, "createTicket")

    async def update(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_TICKET,
            {"id": id, "input": prepare_input(input)},
            "updateTicket",
        )

    async def add_note(self, ticket_id: str, note: str, *, is_public: bool = False) -> Entity:
        """チケットにメモを追加する。

        Args:
            ticket_id: チケットID。
            note: 本文。
            is_public: 顧客に公開するか。

        Returns:
            追加されたメモ。
        """

        return await self._mutate(
            ADD_TICKET_NOTE,
            {"ticketId": ticket_id, "note": note, "isPublic": is_public},
            "addTicketNote",
        )

    async def add_time_entry(self, ticket_id: str, input: Mapping[str, Any]) -> Entity:
        """チケットに作業時間を記録する。"""

        return await self._mutate(
            ADD_TICKET_TIME_ENTRY,
            {"ticketId": ticket_id, "input": prepare_input(input)},
            "addTicketTimeEntry",
        )

    async def change_status(self, id: str, status: TicketStatus | str) -> Entity:
        return await self._mutate(
            CHANGE_TICKET_STATUS,
            {"id": id, "status": enum_value(status, TicketStatus)},
            "changeTicketStatus",
        )

    async def assign(self, id: str, technician_id: str) -> Entity:
        """チケットを技術者へ割り当てる。"""

        return await self._mutate(
            ASSIGN_TICKET,
            {"id": id, "technicianId": technician_id},
            "assignTicket",
        )
