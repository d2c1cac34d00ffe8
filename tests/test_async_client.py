"""AsyncSuperOpsClient とリソースサービスのテスト。"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone
from typing import Any

import httpx
import pytest

from superops import AsyncSuperOpsClient, RateLimitConfig, SuperOpsNotFoundError


def _respond(request: httpx.Request, payload: Any, status: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status,
        content=json.dumps(payload).encode("utf-8"),
        request=request,
    )


def _connection(nodes: list[dict[str, Any]], *, has_next: bool, cursor: str | None) -> dict[str, Any]:
    return {
        "edges": [{"node": node, "cursor": f"c-{node['id']}"} for node in nodes],
        "pageInfo": {"hasNextPage": has_next, "hasPreviousPage": False, "endCursor": cursor},
        "totalCount": 3,
    }


def _with_client(
    handler: Callable[[httpx.Request], httpx.Response],
    action: Callable[[AsyncSuperOpsClient], Awaitable[Any]],
    **options: Any,
) -> Any:
    async def run() -> Any:
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport) as http_client:
            async with AsyncSuperOpsClient(
                api_token="token",
                customer_subdomain="acme",
                endpoint="https://example.invalid/msp",
                http_client=http_client,
                **options,
            ) as client:
                return await action(client)

    return asyncio.run(run())


def test_get_ticket_converts_dates() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append(body)
        ticket = {
            "id": "t1",
            "subject": "Printer down",
            "createdAt": "2024-01-15T10:30:00Z",
            "notes": [{"id": "n1", "createdAt": "2024-01-15T11:00:00Z"}],
        }
        return _respond(request, {"data": {"getTicket": ticket}})

    ticket = _with_client(handler, lambda client: client.tickets.get("t1"))

    assert ticket["createdAt"] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert isinstance(ticket["notes"][0]["createdAt"], datetime)
    assert seen[0]["variables"] == {"id": "t1"}
    assert "query GetTicket" in seen[0]["query"]


def test_string_date_mode_keeps_raw_values() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _respond(request, {"data": {"getClient": {"id": "c1", "createdAt": "2024-01-15T10:30:00Z"}}})

    client_entity = _with_client(handler, lambda client: client.clients.get("c1"), dates="string")

    assert client_entity["createdAt"] == "2024-01-15T10:30:00Z"


def test_list_all_walks_pages_with_cursor() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content).get("variables", {})
        seen.append(variables)
        if variables.get("after") is None:
            page = _connection([{"id": "a1"}, {"id": "a2"}], has_next=True, cursor="cur-1")
        else:
            page = _connection([{"id": "a3"}], has_next=False, cursor="cur-2")
        return _respond(request, {"data": {"getAssetList": page}})

    assets = _with_client(
        handler,
        lambda client: client.assets.list_all(filter={"status": "ONLINE", "siteId": None}, page_size=2).to_list(),
    )

    assert [asset["id"] for asset in assets] == ["a1", "a2", "a3"]
    assert seen[0] == {"first": 2, "filter": {"status": "ONLINE"}}
    assert seen[1] == {"first": 2, "after": "cur-1", "filter": {"status": "ONLINE"}}


def test_single_page_list_returns_page() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        page = _connection([{"id": "c1"}], has_next=False, cursor="c-c1")
        return _respond(request, {"data": {"getClientList": page}})

    page = _with_client(handler, lambda client: client.clients.list(first=10))

    assert page.items == [{"id": "c1"}]
    assert page.total_count == 3
    assert page.has_next_page is False


def test_list_by_status_validates_enum() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not send")

    with pytest.raises(ValueError):
        _with_client(handler, lambda client: client.tickets.list_by_status("NOT_A_STATUS"))


def test_list_by_status_sends_enum_value() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["variables"])
        page = _connection([], has_next=False, cursor=None)
        return _respond(request, {"data": {"getTicketsByStatus": page}})

    _with_client(handler, lambda client: client.tickets.list_by_status("IN_PROGRESS"))

    assert seen[0]["status"] == "IN_PROGRESS"


def test_not_found_error_propagates_from_service() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = {"data": None, "errors": [{"message": "missing", "extensions": {"code": "NOT_FOUND"}}]}
        return _respond(request, payload)

    with pytest.raises(SuperOpsNotFoundError):
        _with_client(handler, lambda client: client.sites.get("s-404"))


def test_add_note_defaults_to_private() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _respond(request, {"data": {"addTicketNote": {"id": "n1", "isPublic": False}}})

    note = _with_client(handler, lambda client: client.tickets.add_note("t1", "checked cables"))

    assert note["id"] == "n1"
    assert seen[0]["variables"] == {"ticketId": "t1", "note": "checked cables", "isPublic": False}
    assert seen[0]["query"].lstrip().startswith("mutation AddTicketNote")


def test_asset_delete_returns_bool() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _respond(request, {"data": {"deleteAsset": True}})

    assert _with_client(handler, lambda client: client.assets.delete("a1")) is True


def test_reports_convert_date_range() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["variables"])
        return _respond(request, {"data": {"getTicketMetrics": {"totalTickets": 4}}})

    result = _with_client(
        handler,
        lambda client: client.reports.ticket_metrics(
            {"start_date": date(2024, 1, 1), "endDate": "2024-01-31"},
            client_id="c1",
        ),
    )

    assert result == {"totalTickets": 4}
    assert seen[0] == {
        "dateRange": {"startDate": "2024-01-01", "endDate": "2024-01-31"},
        "clientId": "c1",
    }


def test_reports_require_both_dates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not send")

    with pytest.raises(ValueError):
        _with_client(handler, lambda client: client.reports.technician_performance({"startDate": "2024-01-01"}))


def test_runbook_execute_requires_targets() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not send")

    with pytest.raises(ValueError):
        _with_client(handler, lambda client: client.runbooks.execute("rb1", []))


def test_technician_availability_sends_date_only() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["variables"])
        return _respond(request, {"data": {"getTechnicianAvailability": [{"startTime": "2024-02-01T09:00:00Z"}]}})

    slots = _with_client(
        handler,
        lambda client: client.technicians.get_availability("tech1", datetime(2024, 2, 1, 15, 0)),
    )

    assert seen[0] == {"id": "tech1", "date": "2024-02-01"}
    assert isinstance(slots[0]["startTime"], datetime)


def test_remote_session_rejects_unknown_type() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not send")

    with pytest.raises(ValueError):
        _with_client(handler, lambda client: client.remote_sessions.initiate("a1", "TELEPORT"))


def test_requests_share_one_rate_limiter() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _respond(request, {"data": {"getAsset": {"id": "a1"}, "getClient": {"id": "c1"}}})

    async def action(client: AsyncSuperOpsClient) -> dict[str, Any]:
        await client.assets.get("a1")
        await client.clients.get("c1")
        return client.rate_limit_status().to_dict()

    status = _with_client(handler, action, rate_limit={"max_requests": 10})

    assert status["current_count"] == 2
    assert status["remaining"] == 8
    assert status["max_requests"] == 10


def test_config_resolution_from_region_and_vertical() -> None:
    client = AsyncSuperOpsClient(
        api_token=" token ",
        customer_subdomain="acme",
        region="EU",
        vertical="it",
    )
    asyncio.run(client.aclose())

    assert client.config.endpoint == "https://euapi.superops.ai/it"
    assert client.config.api_token == "token"
    assert client.config.rate_limit == RateLimitConfig()


def test_invalid_constructor_arguments() -> None:
    with pytest.raises(ValueError):
        AsyncSuperOpsClient(api_token="", customer_subdomain="acme")
    with pytest.raises(ValueError):
        AsyncSuperOpsClient(api_token="t", customer_subdomain="acme", region="apac")
    with pytest.raises(ValueError):
        AsyncSuperOpsClient(api_token="t", customer_subdomain="acme", timeout=0)
    with pytest.raises(ValueError):
        AsyncSuperOpsClient(api_token="t", customer_subdomain="acme", rate_limit={"unknown": 1})


def test_injected_http_client_is_not_closed() -> None:
    async def run() -> bool:
        http_client = httpx.AsyncClient()
        async with AsyncSuperOpsClient(
            api_token="t",
            customer_subdomain="acme",
            http_client=http_client,
        ):
            pass
        closed = http_client.is_closed
        await http_client.aclose()
        return closed

    assert asyncio.run(run()) is False


def test_owned_http_client_is_closed() -> None:
    async def run() -> bool:
        client = AsyncSuperOpsClient(api_token="t", customer_subdomain="acme")
        await client.aclose()
        return client._http_client.is_closed

    assert asyncio.run(run()) is True


class _Recorder:
    """送信内容を記録し、root フィールドごとの応答を返すハンドラ。"""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.bodies: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        for root, value in self.responses.items():
            if f"{root}(" in body["query"]:
                payload = value(body.get("variables", {})) if callable(value) else value
                return _respond(request, {"data": {root: payload}})
        raise AssertionError(f"unexpected document: {body['query'][:80]}")


def test_update_keeps_explicit_null_in_input() -> None:
    recorder = _Recorder({"updateTicket": {"id": "t1", "technicianId": None}})

    _with_client(
        recorder,
        lambda client: client.tickets.update(
            "t1",
            {"subject": "s", "technicianId": None, "dueDate": date(2024, 3, 1)},
        ),
    )

    sent = recorder.bodies[0]["variables"]
    assert sent["id"] == "t1"
    assert sent["input"] == {"subject": "s", "technicianId": None, "dueDate": "2024-03-01"}


def test_filter_still_drops_none_values() -> None:
    recorder = _Recorder({"getAlertList": _connection([], has_next=False, cursor=None)})

    _with_client(recorder, lambda client: client.alerts.list(filter={"status": "OPEN", "assetId": None}))

    assert recorder.bodies[0]["variables"]["filter"] == {"status": "OPEN"}


def test_alerts_list_by_severity_sends_enum_value() -> None:
    recorder = _Recorder({"getAlertsBySeverity": _connection([{"id": "al1"}], has_next=False, cursor="x")})

    page = _with_client(recorder, lambda client: client.alerts.list_by_severity("CRITICAL", first=5))

    body = recorder.bodies[0]
    assert "query GetAlertsBySeverity" in body["query"]
    assert body["variables"] == {"severity": "CRITICAL", "first": 5}
    assert page.items == [{"id": "al1"}]


def test_alerts_list_by_severity_rejects_unknown_value() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not send")

    with pytest.raises(ValueError):
        _with_client(handler, lambda client: client.alerts.list_by_severity("SEVERE"))


def test_alert_acknowledge_sends_id() -> None:
    recorder = _Recorder({"acknowledgeAlert": {"id": "al1", "status": "ACKNOWLEDGED"}})

    alert = _with_client(recorder, lambda client: client.alerts.acknowledge("al1"))

    assert alert["status"] == "ACKNOWLEDGED"
    assert "mutation AcknowledgeAlert" in recorder.bodies[0]["query"]
    assert recorder.bodies[0]["variables"] == {"id": "al1"}


def test_contract_renew_sends_renewal_input() -> None:
    recorder = _Recorder({"renewContract": {"id": "k1", "endDate": "2025-12-31"}})

    contract = _with_client(
        recorder,
        lambda client: client.contracts.renew("k1", {"endDate": date(2025, 12, 31), "notes": None}),
    )

    body = recorder.bodies[0]
    assert "mutation RenewContract" in body["query"]
    assert body["variables"] == {"id": "k1", "input": {"endDate": "2025-12-31", "notes": None}}
    assert contract["endDate"] == datetime(2025, 12, 31)


def test_contracts_list_by_client_all_carries_client_id_across_pages() -> None:
    def page(variables: dict[str, Any]) -> dict[str, Any]:
        if variables.get("after") is None:
            return _connection([{"id": "k1"}, {"id": "k2"}], has_next=True, cursor="cur-1")
        return _connection([{"id": "k3"}], has_next=False, cursor="cur-2")

    recorder = _Recorder({"getContractsByClient": page})

    contracts = _with_client(
        recorder,
        lambda client: client.contracts.list_by_client_all("c1", page_size=2).to_list(),
    )

    assert [contract["id"] for contract in contracts] == ["k1", "k2", "k3"]
    assert "query GetContractsByClient" in recorder.bodies[0]["query"]
    assert [body["variables"] for body in recorder.bodies] == [
        {"clientId": "c1", "first": 2},
        {"clientId": "c1", "first": 2, "after": "cur-1"},
    ]


def test_sites_list_by_client_all_respects_max_items() -> None:
    recorder = _Recorder(
        {"getSitesByClient": _connection([{"id": "s1"}, {"id": "s2"}], has_next=True, cursor="cur-1")}
    )

    sites = _with_client(
        recorder,
        lambda client: client.sites.list_by_client_all("c9", max_items=1).to_list(),
    )

    assert sites == [{"id": "s1"}]
    assert len(recorder.bodies) == 1
    assert recorder.bodies[0]["variables"] == {"clientId": "c9", "first": 50}


def test_knowledge_base_search_returns_scored_nodes() -> None:
    node = {
        "id": "r1",
        "article": {"id": "kb1", "title": "VPN", "publishedAt": "2024-01-02T00:00:00Z"},
        "score": 0.92,
        "highlights": [{"title": "VPN", "content": "connect"}],
    }
    recorder = _Recorder({"searchKnowledgeBase": _connection([node], has_next=False, cursor=None)})

    page = _with_client(recorder, lambda client: client.knowledge_base.search("vpn", first=10))

    body = recorder.bodies[0]
    assert "query SearchKnowledgeBase" in body["query"]
    assert body["variables"] == {"query": "vpn", "first": 10}
    result = page.items[0]
    assert result["score"] == 0.92
    assert isinstance(result["article"]["publishedAt"], datetime)


def test_knowledge_base_publish_article() -> None:
    recorder = _Recorder({"publishKbArticle": {"id": "kb1", "status": "PUBLISHED"}})

    article = _with_client(recorder, lambda client: client.knowledge_base.publish_article("kb1"))

    assert article["status"] == "PUBLISHED"
    assert "mutation PublishKbArticle" in recorder.bodies[0]["query"]
    assert recorder.bodies[0]["variables"] == {"id": "kb1"}


def test_knowledge_base_list_articles_all_walks_pages() -> None:
    def page(variables: dict[str, Any]) -> dict[str, Any]:
        if variables.get("after") is None:
            return _connection([{"id": "kb1"}], has_next=True, cursor="cur-1")
        return _connection([{"id": "kb2"}], has_next=False, cursor=None)

    recorder = _Recorder({"getKbArticleList": page})

    articles = _with_client(
        recorder,
        lambda client: client.knowledge_base.list_articles_all(filter={"status": "PUBLISHED"}, page_size=1).to_list(),
    )

    assert [article["id"] for article in articles] == ["kb1", "kb2"]
    assert "query GetKbArticleList" in recorder.bodies[0]["query"]
    assert recorder.bodies[1]["variables"] == {"first": 1, "after": "cur-1", "filter": {"status": "PUBLISHED"}}


def test_patches_compliance_report_omits_unset_scope() -> None:
    recorder = _Recorder({"getPatchComplianceReport": {"compliantCount": 8, "totalAssets": 10}})

    report = _with_client(recorder, lambda client: client.patches.get_compliance_report(client_id="c1"))

    body = recorder.bodies[0]
    assert "query GetPatchComplianceReport" in body["query"]
    assert body["variables"] == {"clientId": "c1"}
    assert report["compliantCount"] == 8


def test_patches_schedule_deployment_serializes_input() -> None:
    recorder = _Recorder({"schedulePatchDeployment": {"id": "d1", "scheduledAt": "2024-05-01T02:00:00Z"}})

    deployment = _with_client(
        recorder,
        lambda client: client.patches.schedule_deployment(
            {
                "patchIds": ["p1", "p2"],
                "assetIds": ["a1"],
                "scheduledAt": datetime(2024, 5, 1, 2, 0, tzinfo=timezone.utc),
            }
        ),
    )

    body = recorder.bodies[0]
    assert "mutation SchedulePatchDeployment" in body["query"]
    assert body["variables"] == {
        "input": {
            "patchIds": ["p1", "p2"],
            "assetIds": ["a1"],
            "scheduledAt": "2024-05-01T02:00:00Z",
        }
    }
    assert deployment["scheduledAt"] == datetime(2024, 5, 1, 2, 0, tzinfo=timezone.utc)
