"""入力正規化と送信前バリデーション。"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, replace
from datetime import date
from enum import Enum
from typing import Any

from superops.config import DEFAULT_PAGE_SIZE, ENDPOINT_URLS, MAX_PAGE_SIZE, RateLimitConfig
from superops.enums import Region, Vertical
from superops.normalize import to_iso_string


def _require_text(value: Any, *, label: str) -> str:
    if value is None:
        raise ValueError(f"SuperOps {label} is required.")
    if not isinstance(value, str):
        raise ValueError(f"SuperOps {label} must be a string.")
    text = value.strip()
    if not text:
        raise ValueError(f"SuperOps {label} cannot be empty.")
    return text


def validate_api_token(value: Any) -> str:
    """APIトークンを検証する。

    Args:
        value: 入力値。

    Returns:
        前後空白を除いたトークン。

    Raises:
        ValueError: 未指定・非文字列・空文字の場合。
    """

    return _require_text(value, label="API token")


def validate_customer_subdomain(value: Any) -> str:
    """顧客サブドメインを検証する。"""

    return _require_text(value, label="customer subdomain")


def normalize_region(value: Region | str) -> Region:
    """リージョン入力を正規化する。"""

    if isinstance(value, Region):
        return value
    try:
        return Region(str(value).strip().lower())
    except ValueError as exc:
        valid = ", ".join(member.value for member in Region)
        raise ValueError(f"region が不正です: {value!r} (有効値: {valid})") from exc


def normalize_vertical(value: Vertical | str) -> Vertical:
    """業態入力を正規化する。"""

    if isinstance(value, Vertical):
        return value
    try:
        return Vertical(str(value).strip().lower())
    except ValueError as exc:
        valid = ", ".join(member.value for member in Vertical)
        raise ValueError(f"vertical が不正です: {value!r} (有効値: {valid})") from exc


def resolve_endpoint(
    *,
    endpoint: str | None,
    region: Region | str,
    vertical: Vertical | str,
) -> str:
    """送信先GraphQLエンドポイントを決定する。

    明示指定があればそれを優先し、末尾のスラッシュを除去する。

    Args:
        endpoint: 明示指定URL。
        region: リージョン。
        vertical: 業態。

    Returns:
        エンドポイントURL。

    Raises:
        ValueError: リージョンまたは業態が不正な場合。
    """

    if endpoint:
        return endpoint.rstrip("/")
    return ENDPOINT_URLS[normalize_region(region)][normalize_vertical(vertical)]


def resolve_rate_limit_config(value: RateLimitConfig | Mapping[str, Any] | None) -> RateLimitConfig:
    """レート制御設定を解決する。

    Mapping の場合は既定値へ部分的に上書きする。

    Args:
        value: 設定、部分上書き、またはNone。

    Returns:
        解決済み設定。

    Raises:
        ValueError: 未知のキーまたは不正値を含む場合。
    """

    if value is None:
        return RateLimitConfig()
    if isinstance(value, RateLimitConfig):
        return value
    known = {item.name for item in fields(RateLimitConfig)}
    unknown = sorted(set(value) - known)
    if unknown:
        raise ValueError(f"rate_limit に未知のキーがあります: {', '.join(unknown)}")
    return replace(RateLimitConfig(), **dict(value))


def normalize_page_size(value: int | None) -> int:
    """ページサイズを正規化する。上限超過は黙って丸める。"""

    if value is None:
        return DEFAULT_PAGE_SIZE
    size = int(value)
    if size < 1:
        raise ValueError("page_size は1以上を指定してください。")
    return min(size, MAX_PAGE_SIZE)


def normalize_max_items(value: int | None) -> int | None:
    """最大取得件数を正規化する。"""

    if value is None:
        return None
    count = int(value)
    if count < 0:
        raise ValueError("max_items は0以上を指定してください。")
    return count


def _prepare_value(value: Any, *, drop_none: bool = True) -> Any:
    if isinstance(value, date):
        return to_iso_string(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {
            key: _prepare_value(item, drop_none=drop_none)
            for key, item in value.items()
            if item is not None or not drop_none
        }
    if isinstance(value, (list, tuple)):
        return [_prepare_value(item, drop_none=drop_none) for item in value]
    return value


def prepare_filter(filter: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """フィルタ入力を送信用に整形する。

    None値のキーを除き、日時はISO-8601文字列、列挙はその値へ変換する。

    Args:
        filter: フィルタ入力。

    Returns:
        送信用フィルタ。空の場合None。
    """

    if not filter:
        return None
    prepared = _prepare_value(filter)
    return prepared or None


def serialize_input(value: Mapping[str, Any] | None) -> dict[str, Any]:
    """作成・更新入力を送信用に整形する。

    日時と列挙は prepare_filter と同様に変換するが、None は null として残す。
    項目を明示的に空へ戻す更新に使う。
    """

    if not value:
        return {}
    return _prepare_value(value, drop_none=False)
