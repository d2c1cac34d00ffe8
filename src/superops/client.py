"""公開クライアント実装。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from superops.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ClientConfig, RateLimitConfig
from superops.enums import DateHandling, Region, Vertical
from superops.errors_catalog import ErrorClassifier
from superops.services import (
    AlertsService,
    AssetsService,
    ClientsService,
    ContractsService,
    GraphQLExecutor,
    KnowledgeBaseService,
    PatchesService,
    RemoteSessionsService,
    ReportsService,
    RunbooksService,
    SitesService,
    TechniciansService,
    TicketsService,
)
from superops.types import RateLimitStatus
from superops.validation import (
    resolve_endpoint,
    resolve_rate_limit_config,
    validate_api_token,
    validate_customer_subdomain,
)


class AsyncSuperOpsClient:
    """SuperOps GraphQL API の非同期クライアント。

    送信はすべて1つの GraphQLExecutor を通り、レート制御の状態を共有する。
    """

    def __init__(
        self,
        *,
        api_token: str,
        customer_subdomain: str,
        region: Region | str = Region.US,
        vertical: Vertical | str = Vertical.MSP,
        endpoint: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limit: RateLimitConfig | Mapping[str, Any] | None = None,
        dates: DateHandling | str = DateHandling.DATE,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: httpx.AsyncClient | None = None,
        http2: bool = False,
        proxy: str | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        """クライアントを初期化する。

        Args:
            api_token: APIトークン。
            customer_subdomain: 顧客サブドメイン。
            region: リージョン（us/eu）。
            vertical: 業態（msp/it）。
            endpoint: エンドポイントURL。指定時は region/vertical より優先。
            timeout: HTTPタイムアウト秒。
            rate_limit: レート制御設定。Mapping は既定値への部分上書き。
            dates: 応答中の日時の扱い。
            user_agent: User-Agent。
            http_client: 外部httpx.AsyncClient。クライアント側ではクローズしない。
            http2: HTTP/2有効化。
            proxy: プロキシ。
            limits: httpx接続制御。

        Raises:
            ValueError: 認証情報・リージョン・設定値が不正な場合。
        """

        token = validate_api_token(api_token)
        subdomain = validate_customer_subdomain(customer_subdomain)
        if timeout <= 0:
            raise ValueError("timeout は0より大きい値を指定してください。")
        dates_norm = dates if isinstance(dates, DateHandling) else DateHandling(str(dates).lower())

        self._config = ClientConfig(
            api_token=token,
            customer_subdomain=subdomain,
            endpoint=resolve_endpoint(endpoint=endpoint, region=region, vertical=vertical),
            timeout=timeout,
            rate_limit=resolve_rate_limit_config(rate_limit),
            dates=dates_norm,
            user_agent=user_agent,
        )

        self._owns_client = http_client is None
        if http_client is None:
            client_kwargs: dict[str, Any] = {
                "timeout": timeout,
                "http2": http2,
            }
            if proxy is not None:
                client_kwargs["proxy"] = proxy
            if limits is not None:
                client_kwargs["limits"] = limits
            self._http_client = httpx.AsyncClient(**client_kwargs)
        else:
            self._http_client = http_client

        self.graphql = GraphQLExecutor(self._http_client, self._config)
        service_kwargs = {"executor": self.graphql, "dates": self._config.dates}
        self.assets = AssetsService(**service_kwargs)
        self.tickets = TicketsService(**service_kwargs)
        self.clients = ClientsService(**service_kwargs)
        self.sites = SitesService(**service_kwargs)
        self.alerts = AlertsService(**service_kwargs)
        self.contracts = ContractsService(**service_kwargs)
        self.technicians = TechniciansService(**service_kwargs)
        self.knowledge_base = KnowledgeBaseService(**service_kwargs)
        self.runbooks = RunbooksService(**service_kwargs)
        self.patches = PatchesService(**service_kwargs)
        self.remote_sessions = RemoteSessionsService(**service_kwargs)
        self.reports = ReportsService(**service_kwargs)
        self.errors = ErrorClassifier()

    @property
    def config(self) -> ClientConfig:
        """解決済み設定。"""

        return self._config

    def rate_limit_status(self) -> RateLimitStatus:
        """レート制御の現在状態を返す。"""

        return self.graphql.rate_limit_status()

    async def aclose(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncSuperOpsClient":
        """非同期コンテキスト開始。"""

        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """非同期コンテキスト終了。"""

        await self.aclose()
