"""リモートセッションサービス。"""

from __future__ import annotations

from superops.enums import SessionType
from superops.services._base import BaseService, Entity, entity_document, enum_value

REMOTE_SESSION_FRAGMENT = """
fragment RemoteSessionFields on RemoteSession {
  id
  assetId
  type
  status
  connectionUrl
  startedAt
  terminatedAt
  expiresAt
  createdAt
  updatedAt
  initiatedBy {
    id
    name
  }
  asset {
    id
    name
    clientId
  }
}
"""

_FRAGMENT = {"fragment": REMOTE_SESSION_FRAGMENT, "fragment_name": "RemoteSessionFields"}

GET_REMOTE_SESSION = entity_document(
    "query GetRemoteSession($id: ID!)", "getRemoteSession(id: $id)", **_FRAGMENT
)

INITIATE_REMOTE_SESSION = entity_document(
    "mutation InitiateRemoteSession($assetId: ID!, $type: SessionType!)",
    "initiateRemoteSession(assetId: $assetId, type: $type)",
    **_FRAGMENT,
)

TERMINATE_REMOTE_SESSION = entity_document(
    "mutation TerminateRemoteSession($id: ID!)", "terminateRemoteSession(id: $id)", **_FRAGMENT
)


class RemoteSessionsService(BaseService):
    """資産へのリモート接続セッション。"""

    async def get(self, id: str) -> Entity:
        return await self._fetch(GET_REMOTE_SESSION, {"id": id}, "getRemoteSession")

    async def initiate(self, asset_id: str, type: SessionType | str) -> Entity:
        """資産へのセッションを開始する。

        Args:
            asset_id: 資産ID。
            type: セッション種別。

        Returns:
            開始したセッション。``connectionUrl`` に接続先が入る。
        """

        return await self._mutate(
            INITIATE_REMOTE_SESSION,
            {"assetId": asset_id, "type": enum_value(type, SessionType)},
            "initiateRemoteSession",
        )

    async def terminate(self, id: str) -> Entity:
        return await self._mutate(TERMINATE_REMOTE_SESSION, {"id": id}, "terminateRemoteSession")
