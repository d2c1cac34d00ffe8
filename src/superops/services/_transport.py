"""サービス層向けトランスポート共通処理。"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping
from typing import Any

import httpx

from superops.config import DEFAULT_MAX_DELAY_MS, ClientConfig, RetryConfig
from superops.errors import (
    SuperOpsAuthenticationError,
    SuperOpsError,
    SuperOpsErrorContext,
    SuperOpsNetworkError,
    SuperOpsRateLimitError,
    SuperOpsServerError,
    SuperOpsTimeoutError,
)
from superops.errors_catalog import ErrorClassifier, error_from_graphql
from superops.http import RateLimiter, Sleep, build_request_headers, parse_retry_after, retry_with_backoff
from superops.types import GraphQLResponse, RateLimitStatus

logger = logging.getLogger(__name__)


def _prepare_variables(variables: Mapping[str, Any] | None) -> dict[str, Any]:
    if not variables:
        return {}
    return {key: value for key, value in variables.items() if value is not None}


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _status_error(response: httpx.Response, body: Any, *, request_url: str) -> SuperOpsError | None:
    """HTTPステータスから例外を生成する。正常時はNone。"""

    status = int(response.status_code)
    if 200 <= status < 300:
        return None
    context = SuperOpsErrorContext(
        request_url=request_url,
        response=body if body is not None else response.text[:2048],
    )
    if status == 429:
        seconds = parse_retry_after(response.headers.get("Retry-After"))
        retry_after_ms = math.ceil(seconds * 1000) if seconds is not None else None
        return SuperOpsRateLimitError(
            "Rate limit exceeded",
            retry_after_ms=retry_after_ms,
            context=context,
        )
    if status in {401, 403}:
        return SuperOpsAuthenticationError(context=context)
    if status >= 500:
        return SuperOpsServerError(
            f"Server error (HTTP {status})",
            status=status,
            context=context,
        )
    return SuperOpsError(f"HTTP error (HTTP {status})", code="HTTP_ERROR", context=context)


class GraphQLExecutor:
    """GraphQL送信を担う実行器。

    クライアントごとに1つの RateLimiter を保持し、すべての送信で共有する。
    1回の試行は「待機判定 → 送信記録 → POST」で構成され、試行全体を
    再試行ポリシーで包む。
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: ClientConfig,
        *,
        limiter: RateLimiter | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config
        self._limiter = limiter or RateLimiter(config.rate_limit, sleep=sleep)
        self._sleep = sleep
        self._headers = dict(
            build_request_headers(
                api_token=config.api_token,
                customer_subdomain=config.customer_subdomain,
                user_agent=config.user_agent,
            )
        )
        classifier = ErrorClassifier()
        self._retry_config = RetryConfig(
            max_retries=config.rate_limit.max_retries,
            base_delay_ms=config.rate_limit.retry_after_ms,
            max_delay_ms=DEFAULT_MAX_DELAY_MS,
            should_retry=classifier.should_retry,
            retry_after_ms=classifier.retry_after_ms,
        )

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry_config

    def rate_limit_status(self) -> RateLimitStatus:
        return self._limiter.status()

    async def query(self, document: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """クエリを実行して data 部を返す。

        Args:
            document: GraphQL文書。
            variables: 変数。None値は送信しない。

        Returns:
            data 部。

        Raises:
            SuperOpsError: 再試行後も失敗した場合、最後の失敗。
        """

        return await self._execute(document, variables)

    async def mutate(self, document: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """ミューテーションを実行して data 部を返す。"""

        return await self._execute(document, variables)

    async def raw_request(
        self,
        document: str,
        variables: Mapping[str, Any] | None = None,
    ) -> GraphQLResponse:
        """再試行なしで1回だけ送信し、GraphQLエラーを例外化せずに返す。

        通信例外とHTTPステータス異常は例外として送出する。
        """

        response = await self._send(document, variables)
        body = _decode_body(response)
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            return GraphQLResponse(data=body.get("data"), errors=list(errors))
        error = _status_error(response, body, request_url=self._config.endpoint)
        if error is not None:
            raise error
        if not isinstance(body, dict):
            raise self._invalid_response(response)
        return GraphQLResponse(data=body.get("data"))

    async def _execute(self, document: str, variables: Mapping[str, Any] | None) -> dict[str, Any]:
        async def attempt() -> dict[str, Any]:
            response = await self._send(document, variables)
            return self._unwrap(response)

        return await retry_with_backoff(attempt, self._retry_config, sleep=self._sleep)

    async def _send(self, document: str, variables: Mapping[str, Any] | None) -> httpx.Response:
        await self._limiter.wait_if_needed()
        self._limiter.record_request()

        payload: dict[str, Any] = {"query": document}
        prepared = _prepare_variables(variables)
        if prepared:
            payload["variables"] = prepared

        endpoint = self._config.endpoint
        try:
            response = await self._client.post(endpoint, json=payload, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise SuperOpsTimeoutError(
                f"Request timed out after {self._config.timeout}s",
                timeout=self._config.timeout,
                request_url=endpoint,
            ) from exc
        except httpx.TransportError as exc:
            raise SuperOpsNetworkError(f"Network error: {exc}", request_url=endpoint) from exc
        logger.debug("graphql request: status=%d url=%s", response.status_code, endpoint)
        return response

    def _unwrap(self, response: httpx.Response) -> dict[str, Any]:
        body = _decode_body(response)
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise error_from_graphql(errors, response=body, request_url=self._config.endpoint)
        error = _status_error(response, body, request_url=self._config.endpoint)
        if error is not None:
            raise error
        if not isinstance(body, dict):
            raise self._invalid_response(response)
        data = body.get("data")
        return dict(data) if isinstance(data, Mapping) else {}

    def _invalid_response(self, response: httpx.Response) -> SuperOpsError:
        return SuperOpsError(
            "Invalid response body",
            code="INVALID_RESPONSE",
            context=SuperOpsErrorContext(
                request_url=self._config.endpoint,
                response=response.text[:2048],
            ),
        )
