"""GraphQLエラーコード分類カタログ。"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from superops.enums import ErrorCategory
from superops.errors import (
    SuperOpsAuthenticationError,
    SuperOpsError,
    SuperOpsErrorContext,
    SuperOpsNetworkError,
    SuperOpsNotFoundError,
    SuperOpsRateLimitError,
    SuperOpsServerError,
    SuperOpsTimeoutError,
    SuperOpsValidationError,
)
from superops.types import ErrorClassification, ValidationErrorDetail

_CODE_MAP = {
    "UNAUTHENTICATED": ErrorCategory.AUTHENTICATION,
    "UNAUTHORIZED": ErrorCategory.AUTHENTICATION,
    "FORBIDDEN": ErrorCategory.AUTHENTICATION,
    "NOT_FOUND": ErrorCategory.NOT_FOUND,
    "BAD_USER_INPUT": ErrorCategory.VALIDATION,
    "VALIDATION_ERROR": ErrorCategory.VALIDATION,
    "RATE_LIMITED": ErrorCategory.RATE_LIMITED,
    "INTERNAL_SERVER_ERROR": ErrorCategory.SERVER,
    "GRAPHQL_PARSE_FAILED": ErrorCategory.SERVER,
    "GRAPHQL_VALIDATION_FAILED": ErrorCategory.SERVER,
}

_CLASS_CATEGORY = (
    (SuperOpsAuthenticationError, ErrorCategory.AUTHENTICATION),
    (SuperOpsNotFoundError, ErrorCategory.NOT_FOUND),
    (SuperOpsValidationError, ErrorCategory.VALIDATION),
    (SuperOpsRateLimitError, ErrorCategory.RATE_LIMITED),
    (SuperOpsServerError, ErrorCategory.SERVER),
    (SuperOpsNetworkError, ErrorCategory.NETWORK),
    (SuperOpsTimeoutError, ErrorCategory.TIMEOUT),
)

_RETRYABLE = frozenset({ErrorCategory.RATE_LIMITED, ErrorCategory.SERVER})


def _extension_code(error: dict[str, Any]) -> str:
    extensions = error.get("extensions") or {}
    code = extensions.get("code") if isinstance(extensions, dict) else None
    return str(code).upper() if code else "UNKNOWN"


def _validation_details(errors: Sequence[dict[str, Any]]) -> list[ValidationErrorDetail]:
    details: list[ValidationErrorDetail] = []
    for error in errors:
        path = error.get("path") or []
        if path:
            details.append(
                ValidationErrorDetail(
                    field=".".join(str(part) for part in path),
                    message=str(error.get("message", "")),
                )
            )
    return details


def error_from_graphql(
    errors: Sequence[dict[str, Any]] | None,
    response: Any = None,
    request_url: str | None = None,
) -> SuperOpsError:
    """GraphQL errors 部から対応する例外を生成する。

    先頭エラーの extensions.code で例外クラスを決める。

    Args:
        errors: GraphQL errors 部。
        response: 応答本文。
        request_url: リクエストURL。

    Returns:
        例外インスタンス（送出はしない）。
    """

    error_list = list(errors or [])
    context = SuperOpsErrorContext(
        request_url=request_url,
        response=response,
        graphql_errors=error_list,
    )
    if not error_list:
        return SuperOpsError("Unknown error", code="UNKNOWN", context=context)

    primary = error_list[0]
    code = _extension_code(primary)
    message = str(primary.get("message") or "")
    category = _CODE_MAP.get(code, ErrorCategory.UNKNOWN)

    if category == ErrorCategory.AUTHENTICATION:
        return SuperOpsAuthenticationError(message, context=context)
    if category == ErrorCategory.NOT_FOUND:
        return SuperOpsNotFoundError(message, context=context)
    if category == ErrorCategory.VALIDATION:
        return SuperOpsValidationError(
            message,
            validation_errors=_validation_details(error_list),
            context=context,
        )
    if category == ErrorCategory.RATE_LIMITED:
        return SuperOpsRateLimitError(message, context=context)
    if category == ErrorCategory.SERVER:
        return SuperOpsServerError(message, context=context)
    return SuperOpsError(message, code=code, context=context)


@dataclass(slots=True)
class ErrorClassifier:
    """例外分類器。

    再試行ポリシーへ渡す判定関数の供給元でもある。
    """

    def classify(self, exc: BaseException) -> ErrorClassification:
        """例外の分類カテゴリを返す。

        Args:
            exc: 判定対象の例外。

        Returns:
            分類結果。
        """

        category = ErrorCategory.UNKNOWN
        for klass, mapped in _CLASS_CATEGORY:
            if isinstance(exc, klass):
                category = mapped
                break
        code = exc.code if isinstance(exc, SuperOpsError) else type(exc).__name__
        return ErrorClassification(
            category=category,
            code=code,
            retryable=category in _RETRYABLE,
        )

    def should_retry(self, exc: BaseException) -> bool:
        """レート制限・サーバー障害のときだけTrue。"""

        return self.classify(exc).retryable

    def retry_after_ms(self, exc: BaseException) -> int | None:
        """レート制限例外が持つ待機ミリ秒を返す。"""

        if isinstance(exc, SuperOpsRateLimitError):
            return exc.retry_after_ms
        return None
