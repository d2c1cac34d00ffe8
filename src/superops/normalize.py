"""送受信値の正規化処理。"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from superops.enums import DateHandling

_DATE_KEYS = frozenset({"date", "startTime", "endTime"})
_DATE_SUFFIXES = ("At", "Date")


def to_iso_string(value: datetime | date | str | None) -> str | None:
    """日時をISO-8601文字列へ変換する。

    タイムゾーンなしの日時はUTCとみなし、UTCは末尾 ``Z`` で表す。

    Args:
        value: 日時、日付、文字列またはNone。

    Returns:
        ISO-8601文字列。Noneはそのまま返す。
    """

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        text = aware.isoformat()
        if text.endswith("+00:00"):
            text = text[: -len("+00:00")] + "Z"
        return text
    return value.isoformat()


def parse_datetime_tolerant(raw: str | None) -> datetime | None:
    """日時文字列を寛容に解析する。

    Args:
        raw: 日時原文。

    Returns:
        解析結果。失敗時はNone。
    """

    if not raw:
        return None
    text = raw.strip()
    candidates = [text]
    if text.endswith(("Z", "z")):
        candidates.append(text[:-1] + "+00:00")
    for candidate in candidates:
        try:
            return datetime.fromisoformat(candidate)
        except ValueError:
            continue
    return None


def _is_date_key(key: str) -> bool:
    return key in _DATE_KEYS or key.endswith(_DATE_SUFFIXES)


def _convert(value: Any) -> Any:
    if isinstance(value, dict):
        converted: dict[str, Any] = {}
        for key, item in value.items():
            if isinstance(item, str) and _is_date_key(key):
                parsed = parse_datetime_tolerant(item)
                converted[key] = parsed if parsed is not None else item
            else:
                converted[key] = _convert(item)
        return converted
    if isinstance(value, list):
        return [_convert(item) for item in value]
    return value


def convert_dates(payload: Any, dates: DateHandling | str) -> Any:
    """応答中の日時文字列を datetime へ変換する。

    ``At``/``Date`` で終わるキー、および date/startTime/endTime が対象。
    解析できない文字列はそのまま残す。

    Args:
        payload: 応答値（dict/list/スカラー）。
        dates: 日時の扱い。

    Returns:
        変換後の値。STRING指定時は入力をそのまま返す。
    """

    if DateHandling(dates) == DateHandling.STRING:
        return payload
    return _convert(payload)
