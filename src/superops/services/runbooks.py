"""ランブックサービス。"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document
from superops.types import Page

RUNBOOK_FRAGMENT = """
fragment RunbookFields on Runbook {
  id
  name
  description
  status
  category
  tags
  estimatedDurationMinutes
  lastExecutedAt
  executionCount
  createdAt
  updatedAt
  createdBy {
    id
    name
  }
  steps {
    id
    name
    description
    order
    type
    continueOnError
  }
}
"""

EXECUTION_FRAGMENT = """
fragment ExecutionFields on RunbookExecution {
  id
  runbookId
  status
  startedAt
  completedAt
  targetIds
  createdAt
  updatedAt
  initiatedBy {
    id
    name
  }
  results {
    targetId
    targetName
    status
    startedAt
    completedAt
    output
    error
  }
  progress {
    total
    completed
    failed
  }
}
"""

_RUNBOOK = {"fragment": RUNBOOK_FRAGMENT, "fragment_name": "RunbookFields"}
_EXECUTION = {"fragment": EXECUTION_FRAGMENT, "fragment_name": "ExecutionFields"}

GET_RUNBOOK = entity_document("query GetRunbook($id: ID!)", "getRunbook(id: $id)", **_RUNBOOK)

LIST_RUNBOOKS = connection_query(
    "query GetRunbookList($first: Int, $after: String, $filter: RunbookFilterInput, $orderBy: RunbookOrderInput)",
    "getRunbookList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_RUNBOOK,
)

EXECUTE_RUNBOOK = entity_document(
    "mutation ExecuteRunbook($id: ID!, $targetIds: [ID!]!)",
    "executeRunbook(id: $id, targetIds: $targetIds)",
    **_EXECUTION,
)

GET_EXECUTION_STATUS = entity_document(
    "query GetRunbookExecutionStatus($executionId: ID!)",
    "getRunbookExecutionStatus(executionId: $executionId)",
    **_EXECUTION,
)


class RunbooksService(BaseService):
    """自動化ランブックの取得と実行。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_RUNBOOK, {"id": id}, "getRunbook")

    async def list(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_RUNBOOKS, variables, "getRunbookList")

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

    async def execute(self, id: str, target_ids: Sequence[str]) -> Entity:
        """ランブックを対象資産群に対して実行する。

        Args:
            id: ランブックID。
            target_ids: 実行対象の資産ID。

        Returns:
            実行記録。進捗は get_execution_status で追跡する。

        Raises:
            ValueError: 対象が空の場合。
        """

        targets = [str(target) for target in target_ids]
        if not targets:
            raise ValueError("target_ids を1件以上指定してください。")
        return await self._mutate(EXECUTE_RUNBOOK, {"id": id, "targetIds": targets}, "executeRunbook")

    async def get_execution_status(self, execution_id: str) -> Entity:
        return await self._fetch(
            GET_EXECUTION_STATUS,
            {"executionId": execution_id},
            "getRunbookExecutionStatus",
        )
