"""CLI出力処理のテスト。"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from superops.cli import GETTABLE_RESOURCES, _dump_records, _resolve, fetch_list, fetch_one


class _FakePaginator:
    def __init__(self, items: list[dict[str, Any]]) -> None:
        self._items = items

    async def to_list(self) -> list[dict[str, Any]]:
        return list(self._items)


class _FakeKnowledgeBase:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def list_articles_all(self, *, page_size: int | None = None, max_items: int | None = None) -> _FakePaginator:
        self.calls.append({"page_size": page_size, "max_items": max_items})
        return _FakePaginator([{"id": "kb1"}, {"id": "kb2"}])

    async def get_article(self, id: str) -> dict[str, Any]:
        return {"id": id, "title": "VPN setup"}


class _FakeClient:
    def __init__(self) -> None:
        self.knowledge_base = _FakeKnowledgeBase()


def test_dump_records_json_serializes_datetimes(tmp_path: Path) -> None:
    out = tmp_path / "tickets.json"
    records = [
        {
            "id": "t1",
            "subject": "プリンタ故障",
            "createdAt": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        }
    ]

    _dump_records(records, out)

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload == [{"id": "t1", "subject": "プリンタ故障", "createdAt": "2024-01-15T10:30:00Z"}]


def test_dump_records_csv_flattens_nested_fields(tmp_path: Path) -> None:
    pd = pytest.importorskip("pandas")
    out = tmp_path / "assets.csv"

    _dump_records([{"id": "a1", "client": {"id": "c1", "name": "Acme"}}], out)

    frame = pd.read_csv(out)
    assert list(frame.columns) == ["id", "client.id", "client.name"]
    assert frame.loc[0, "client.name"] == "Acme"


def test_dump_records_rejects_unknown_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match=r"\.json / \.csv"):
        _dump_records([], tmp_path / "out.parquet")


def test_resolve_accepts_underscore_alias() -> None:
    assert _resolve(GETTABLE_RESOURCES, "remote_sessions") == ("remote_sessions", "get")
    assert _resolve(GETTABLE_RESOURCES, "KB-Articles") == ("knowledge_base", "get_article")
    with pytest.raises(ValueError, match="未対応のリソース"):
        _resolve(GETTABLE_RESOURCES, "invoices")


def test_fetch_list_dispatches_to_paginator() -> None:
    client = _FakeClient()

    records = asyncio.run(fetch_list(client, "kb-articles", max_items=2, page_size=25))

    assert records == [{"id": "kb1"}, {"id": "kb2"}]
    assert client.knowledge_base.calls == [{"page_size": 25, "max_items": 2}]


def test_fetch_one_dispatches_to_getter() -> None:
    record = asyncio.run(fetch_one(_FakeClient(), "kb_articles", "art-1"))

    assert record == {"id": "art-1", "title": "VPN setup"}


def test_fetch_list_rejects_unlisted_resource() -> None:
    with pytest.raises(ValueError):
        asyncio.run(fetch_list(_FakeClient(), "sites"))
