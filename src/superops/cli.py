"""CLIエントリポイント。"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from superops.normalize import to_iso_string

# CLI上のリソース名 -> (クライアント属性, メソッド名)
LISTABLE_RESOURCES: dict[str, tuple[str, str]] = {
    "assets": ("assets", "list_all"),
    "tickets": ("tickets", "list_all"),
    "clients": ("clients", "list_all"),
    "alerts": ("alerts", "list_all"),
    "technicians": ("technicians", "list_all"),
    "runbooks": ("runbooks", "list_all"),
    "patches": ("patches", "list_all"),
    "kb-articles": ("knowledge_base", "list_articles_all"),
}

GETTABLE_RESOURCES: dict[str, tuple[str, str]] = {
    "assets": ("assets", "get"),
    "tickets": ("tickets", "get"),
    "clients": ("clients", "get"),
    "sites": ("sites", "get"),
    "contracts": ("contracts", "get"),
    "technicians": ("technicians", "get"),
    "runbooks": ("runbooks", "get"),
    "remote-sessions": ("remote_sessions", "get"),
    "kb-articles": ("knowledge_base", "get_article"),
    "kb-collections": ("knowledge_base", "get_collection"),
}


def _require_typer() -> Any:
    try:
        import typer
    except ImportError as exc:
        raise RuntimeError(
            "CLIには typer が必要です。pip install 'superops[cli]' を実行してください。"
        ) from exc
    return typer


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return to_iso_string(value)
    return str(value)


def _resolve(table: Mapping[str, tuple[str, str]], resource: str) -> tuple[str, str]:
    key = resource.strip().lower().replace("_", "-")
    if key not in table:
        raise ValueError(f"未対応のリソースです: {resource} (対応: {', '.join(sorted(table))})")
    return table[key]


def _dump_records(records: Sequence[Mapping[str, Any]], out: Path) -> None:
    suffix = out.suffix.lower()
    if suffix == ".json":
        out.write_text(
            json.dumps(list(records), ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )
        return
    if suffix == ".csv":
        try:
            import pandas as pd
        except ImportError as exc:
            raise RuntimeError(
                "CSV出力には pandas が必要です。pip install 'superops[cli]' を実行してください。"
            ) from exc
        df = pd.json_normalize(list(records))
        df.to_csv(out, index=False)
        return
    raise ValueError("出力拡張子は .json / .csv のみ対応です。")


async def fetch_list(
    client: Any,
    resource: str,
    *,
    max_items: int | None = None,
    page_size: int | None = None,
) -> list[dict[str, Any]]:
    """リソース一覧を全件（または max_items 件）取得する。"""

    attr, method = _resolve(LISTABLE_RESOURCES, resource)
    paginator = getattr(getattr(client, attr), method)(page_size=page_size, max_items=max_items)
    return await paginator.to_list()


async def fetch_one(client: Any, resource: str, id: str) -> dict[str, Any] | None:
    """リソースを1件取得する。"""

    attr, method = _resolve(GETTABLE_RESOURCES, resource)
    return await getattr(getattr(client, attr), method)(id)


def app_entry() -> None:
    """CLIアプリを起動する。"""

    typer = _require_typer()
    from superops import AsyncSuperOpsClient

    app = typer.Typer(no_args_is_help=True)

    def _client(api_token: str, subdomain: str, region: str, vertical: str) -> AsyncSuperOpsClient:
        return AsyncSuperOpsClient(
            api_token=api_token,
            customer_subdomain=subdomain,
            region=region,
            vertical=vertical,
        )

    @app.command("list")
    def list_command(
        resource: str = typer.Argument(...),
        out: Path = typer.Option(..., "--out"),
        max_items: int | None = typer.Option(None, "--max-items"),
        page_size: int | None = typer.Option(None, "--page-size"),
        api_token: str = typer.Option(..., "--api-token", envvar="SUPEROPS_API_TOKEN"),
        subdomain: str = typer.Option(..., "--subdomain", envvar="SUPEROPS_CUSTOMER_SUBDOMAIN"),
        region: str = typer.Option("us", "--region"),
        vertical: str = typer.Option("msp", "--vertical"),
    ) -> None:
        """リソース一覧を取得して保存する。"""

        async def run() -> list[dict[str, Any]]:
            async with _client(api_token, subdomain, region, vertical) as client:
                return await fetch_list(client, resource, max_items=max_items, page_size=page_size)

        _dump_records(asyncio.run(run()), out)

    @app.command("get")
    def get_command(
        resource: str = typer.Argument(...),
        id: str = typer.Argument(...),
        out: Path = typer.Option(..., "--out"),
        api_token: str = typer.Option(..., "--api-token", envvar="SUPEROPS_API_TOKEN"),
        subdomain: str = typer.Option(..., "--subdomain", envvar="SUPEROPS_CUSTOMER_SUBDOMAIN"),
        region: str = typer.Option("us", "--region"),
        vertical: str = typer.Option("msp", "--vertical"),
    ) -> None:
        """リソースを1件取得して保存する。"""

        async def run() -> dict[str, Any] | None:
            async with _client(api_token, subdomain, region, vertical) as client:
                return await fetch_one(client, resource, id)

        record = asyncio.run(run())
        _dump_records([record] if record is not None else [], out)

    app()


if __name__ == "__main__":
    app_entry()
