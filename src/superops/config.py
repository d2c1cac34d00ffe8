"""設定値定義。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from superops.enums import DateHandling, Region, Vertical

DEFAULT_USER_AGENT = "superops-python/0.1.0"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
DEFAULT_MAX_DELAY_MS = 60_000

ENDPOINT_URLS: dict[Region, dict[Vertical, str]] = {
    Region.US: {
        Vertical.MSP: "https://api.superops.ai/msp",
        Vertical.IT: "https://api.superops.ai/it",
    },
    Region.EU: {
        Vertical.MSP: "https://euapi.superops.ai/msp",
        Vertical.IT: "https://euapi.superops.ai/it",
    },
}


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """スライディングウィンドウ型レート制御の設定。

    SuperOps は1分間あたり800リクエストまでを許容する。

    Attributes:
        enabled: レート制御を有効化するか。
        max_requests: ウィンドウ内の最大リクエスト数。
        window_ms: ウィンドウ幅（ミリ秒）。
        throttle_threshold: 先行スロットリングを開始する使用率（0より大きく1以下）。
        retry_after_ms: スロットリング時の最大待機、および再試行の基準待機（ミリ秒）。
        max_retries: 最大再試行回数。
    """

    enabled: bool = True
    max_requests: int = 800
    window_ms: int = 60_000
    throttle_threshold: float = 0.8
    retry_after_ms: int = 5_000
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests は1以上を指定してください。")
        if self.window_ms < 1:
            raise ValueError("window_ms は1以上を指定してください。")
        if not 0.0 < self.throttle_threshold <= 1.0:
            raise ValueError("throttle_threshold は0より大きく1以下を指定してください。")
        if self.retry_after_ms < 0:
            raise ValueError("retry_after_ms は0以上を指定してください。")
        if self.max_retries < 0:
            raise ValueError("max_retries は0以上を指定してください。")


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """再試行設定。

    Attributes:
        max_retries: 初回を除く最大再試行回数。
        base_delay_ms: 指数バックオフの基準待機（ミリ秒）。
        max_delay_ms: バックオフ待機の上限（ミリ秒）。
        should_retry: 例外を受け取り再試行可否を返す関数。未指定時は常に再試行。
        retry_after_ms: 例外からサーバー指定の待機ミリ秒を取り出す関数。
    """

    max_retries: int
    base_delay_ms: int
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS
    should_retry: Callable[[BaseException], bool] | None = None
    retry_after_ms: Callable[[BaseException], int | None] | None = None

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries は0以上を指定してください。")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms は0以上を指定してください。")
        if self.max_delay_ms < 0:
            raise ValueError("max_delay_ms は0以上を指定してください。")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """解決済みのクライアント設定。

    Attributes:
        api_token: APIトークン。
        customer_subdomain: 顧客サブドメイン。
        endpoint: GraphQLエンドポイントURL。
        timeout: HTTPタイムアウト秒。
        rate_limit: レート制御設定。
        dates: 日時の扱い。
        user_agent: User-Agent。
    """

    api_token: str
    customer_subdomain: str
    endpoint: str
    timeout: float = DEFAULT_TIMEOUT
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    dates: DateHandling = DateHandling.DATE
    user_agent: str = DEFAULT_USER_AGENT
