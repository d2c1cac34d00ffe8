"""列挙型定義。"""

from __future__ import annotations

from enum import StrEnum


class Region(StrEnum):
    """APIリージョンを表す列挙型。

    Attributes:
        US: 米国リージョン。
        EU: 欧州リージョン。
    """

    US = "us"
    EU = "eu"


class Vertical(StrEnum):
    """製品バーティカルを表す列挙型。

    Attributes:
        MSP: MSP向け。
        IT: 社内IT向け。
    """

    MSP = "msp"
    IT = "it"


class DateHandling(StrEnum):
    """応答中の日時文字列の扱い。

    Attributes:
        DATE: datetime へ変換する。
        STRING: 文字列のまま返す。
    """

    DATE = "date"
    STRING = "string"


class OrderDirection(StrEnum):
    """並び順。"""

    ASC = "ASC"
    DESC = "DESC"


class ErrorCategory(StrEnum):
    """失敗の分類カテゴリ。

    Attributes:
        AUTHENTICATION: 認証・認可失敗。
        NOT_FOUND: 対象リソースなし。
        VALIDATION: 入力検証失敗。
        RATE_LIMITED: レート制限超過。
        SERVER: サーバー側障害。
        NETWORK: 接続レベルの障害。
        TIMEOUT: タイムアウト。
        UNKNOWN: 分類不能。
    """

    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class TicketStatus(StrEnum):
    """チケット状態。"""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING_ON_CLIENT = "WAITING_ON_CLIENT"
    WAITING_ON_VENDOR = "WAITING_ON_VENDOR"
    SCHEDULED = "SCHEDULED"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class TicketPriority(StrEnum):
    """チケット優先度。"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AlertSeverity(StrEnum):
    """アラート重大度。"""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SessionType(StrEnum):
    """リモートセッション種別。"""

    REMOTE_DESKTOP = "REMOTE_DESKTOP"
    COMMAND_LINE = "COMMAND_LINE"
    FILE_TRANSFER = "FILE_TRANSFER"
    SCREEN_SHARE = "SCREEN_SHARE"
