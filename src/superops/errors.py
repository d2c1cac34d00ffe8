"""例外定義。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from superops.types import ValidationErrorDetail


@dataclass(slots=True)
class SuperOpsErrorContext:
    """例外に付随する共通コンテキスト。

    Attributes:
        request_url: リクエストURL。
        response: 応答本文（解析済みまたは生の値）。
        graphql_errors: GraphQL errors 部。
    """

    request_url: str | None = None
    response: Any = None
    graphql_errors: list[dict[str, Any]] = field(default_factory=list)


class SuperOpsError(Exception):
    """ライブラリ例外の基底クラス。

    Attributes:
        message: メッセージ。
        code: エラーコード。
        origin: 例外発生元。
        context: 追加コンテキスト。
    """

    default_message = "SuperOps API error."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str = "UNKNOWN",
        origin: str = "server_response",
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        text = message or self.default_message
        super().__init__(text)
        self.message = text
        self.code = code
        self.origin = origin
        self.context = context or SuperOpsErrorContext()

    @property
    def graphql_errors(self) -> list[dict[str, Any]]:
        return self.context.graphql_errors

    @property
    def response(self) -> Any:
        return self.context.response

    def __str__(self) -> str:
        parts = [f"{self.message} ({self.code})"]
        if self.graphql_errors:
            messages = ", ".join(str(err.get("message", "")) for err in self.graphql_errors)
            parts.append(f"GraphQL errors: {messages}")
        return "\n".join(parts)


class SuperOpsAuthenticationError(SuperOpsError):
    """認証・認可の失敗。"""

    default_message = "Authentication failed. Check your API token and customer subdomain."

    def __init__(
        self,
        message: str | None = None,
        *,
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        super().__init__(message, code="AUTHENTICATION_ERROR", context=context)


class SuperOpsNotFoundError(SuperOpsError):
    """対象リソースが存在しない。"""

    default_message = "Resource not found."

    def __init__(
        self,
        message: str | None = None,
        *,
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        super().__init__(message, code="NOT_FOUND", context=context)


class SuperOpsValidationError(SuperOpsError):
    """サーバー側の入力検証エラー。

    Attributes:
        validation_errors: 項目ごとの検証エラー。
    """

    default_message = "Validation failed."

    def __init__(
        self,
        message: str | None = None,
        *,
        validation_errors: list[ValidationErrorDetail] | None = None,
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", context=context)
        self.validation_errors = list(validation_errors or [])

    def error_messages(self) -> list[str]:
        """「項目: メッセージ」形式の一覧を返す。"""

        return [f"{detail.field}: {detail.message}" for detail in self.validation_errors]

    def __str__(self) -> str:
        base = super().__str__()
        messages = self.error_messages()
        if not messages:
            return base
        lines = "\n".join(f"  - {line}" for line in messages)
        return f"{base}\nValidation errors:\n{lines}"


class SuperOpsRateLimitError(SuperOpsError):
    """レート制限超過。

    Attributes:
        retry_after_ms: サーバーが示した待機ミリ秒。
    """

    default_message = "Rate limit exceeded."

    def __init__(
        self,
        message: str | None = None,
        *,
        retry_after_ms: int | None = None,
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        super().__init__(message, code="RATE_LIMITED", context=context)
        self.retry_after_ms = retry_after_ms


class SuperOpsServerError(SuperOpsError):
    """サーバー側障害（5xx相当）。"""

    default_message = "Server error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        context: SuperOpsErrorContext | None = None,
    ) -> None:
        super().__init__(message, code="SERVER_ERROR", context=context)
        self.status = status


class SuperOpsNetworkError(SuperOpsError):
    """接続レベルの通信例外。"""

    default_message = "Network error occurred."

    def __init__(self, message: str | None = None, *, request_url: str | None = None) -> None:
        super().__init__(
            message,
            code="NETWORK_ERROR",
            origin="transport",
            context=SuperOpsErrorContext(request_url=request_url),
        )


class SuperOpsTimeoutError(SuperOpsError):
    """タイムアウト。

    Attributes:
        timeout: 設定されていたタイムアウト秒。
    """

    default_message = "Request timed out."

    def __init__(
        self,
        message: str | None = None,
        *,
        timeout: float,
        request_url: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code="TIMEOUT",
            origin="transport",
            context=SuperOpsErrorContext(request_url=request_url),
        )
        self.timeout = timeout
