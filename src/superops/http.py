"""HTTP実行補助（レート制御・再試行・ヘッダ）。"""

from __future__ import annotations

import asyncio
import logging
import math
import random
import time
from collections import deque
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from typing import TypeVar

from superops.config import RateLimitConfig, RetryConfig
from superops.types import RateLimitStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

JITTER_RATIO = 0.1


@dataclass(slots=True)
class WaitDecision:
    """待機時間決定結果。

    Attributes:
        ms: 待機ミリ秒。
        source: 待機根拠。
    """

    ms: float
    source: str


class RateLimiter:
    """スライディングウィンドウ方式のレート制御。

    直近 window_ms 内の送信時刻を保持し、使用率が throttle_threshold を
    超えた時点から待機を段階的に伸ばす。上限到達時は最古の送信が
    ウィンドウから外れるまで待たせる。

    時刻列の追加と刈り込みはすべて同期的に行うため、同一イベントループ上の
    複数の呼び出し元が共有しても整合性は崩れない。
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._sleep = sleep
        self._requests: deque[float] = deque()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _prune(self, now_ms: float) -> None:
        cutoff = now_ms - self._config.window_ms
        while self._requests and self._requests[0] < cutoff:
            self._requests.popleft()

    @property
    def current_count(self) -> int:
        """ウィンドウ内の送信数。"""

        self._prune(self._now_ms())
        return len(self._requests)

    @property
    def remaining(self) -> int:
        """ウィンドウ内の残り送信可能数。"""

        return max(0, self._config.max_requests - self.current_count)

    @property
    def is_throttling(self) -> bool:
        """使用率がスロットリング閾値以上か。"""

        if not self._config.enabled:
            return False
        return self.current_count / self._config.max_requests >= self._config.throttle_threshold

    @property
    def is_limited(self) -> bool:
        """上限に達しているか。"""

        if not self._config.enabled:
            return False
        return self.current_count >= self._config.max_requests

    def record_request(self) -> None:
        """送信を記録する。"""

        if not self._config.enabled:
            return
        now = self._now_ms()
        self._prune(now)
        self._requests.append(now)

    def delay_ms(self) -> int:
        """次の送信までに必要な待機ミリ秒を返す。

        Returns:
            待機ミリ秒。不要なら0。
        """

        if not self._config.enabled:
            return 0
        now = self._now_ms()
        self._prune(now)
        count = len(self._requests)
        used_ratio = count / self._config.max_requests
        threshold = self._config.throttle_threshold
        if used_ratio < threshold:
            return 0

        if count >= self._config.max_requests and self._requests:
            expire_at = self._requests[0] + self._config.window_ms
            return max(0, math.ceil(expire_at - now))

        # threshold == 1.0 のときは上の分岐で必ず返るため除算は安全。
        progress = (used_ratio - threshold) / (1.0 - threshold)
        return max(0, math.floor(progress * self._config.retry_after_ms))

    async def wait_if_needed(self) -> int:
        """必要な間だけ待機する。

        Returns:
            待機したミリ秒。
        """

        delay = self.delay_ms()
        if delay > 0:
            logger.debug(
                "rate limiter throttling: count=%d max=%d wait_ms=%d",
                len(self._requests),
                self._config.max_requests,
                delay,
            )
            await self._sleep(delay / 1000.0)
        return delay

    def reset(self) -> None:
        """記録済みの送信時刻をすべて破棄する。"""

        self._requests.clear()

    def status(self) -> RateLimitStatus:
        """監視用スナップショットを返す。"""

        return RateLimitStatus(
            enabled=self.enabled,
            current_count=self.current_count,
            max_requests=self._config.max_requests,
            remaining=self.remaining,
            window_ms=self._config.window_ms,
            is_throttling=self.is_throttling,
            is_limited=self.is_limited,
            delay_ms=self.delay_ms(),
        )


def exponential_backoff_ms(*, attempt: int, base_ms: float, cap_ms: float) -> float:
    """指数バックオフの待機ミリ秒（ゆらぎなし）を返す。"""

    return min(base_ms * (2 ** attempt), cap_ms)


def decide_wait_ms(*, backoff_ms: float, retry_after_ms: float | None) -> WaitDecision:
    """待機ミリ秒を統合決定する。"""

    if retry_after_ms is None or retry_after_ms <= backoff_ms:
        return WaitDecision(ms=backoff_ms, source="backoff")
    return WaitDecision(ms=retry_after_ms, source="retry_after")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """失敗時に指数バックオフ＋ゆらぎで再試行する。

    should_retry が False を返した例外は再試行せず即座に送出する。
    再試行を使い切った場合も、最後に発生した例外をそのまま送出する。

    Args:
        operation: 実行する非同期処理（引数なし）。
        config: 再試行設定。
        sleep: 待機関数（秒指定）。

    Returns:
        operation の戻り値。
    """

    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if config.should_retry is not None and not config.should_retry(exc):
                raise
            if attempt >= config.max_retries:
                logger.warning(
                    "retries exhausted after %d attempts: %s",
                    attempt + 1,
                    type(exc).__name__,
                )
                raise

            delay = exponential_backoff_ms(
                attempt=attempt,
                base_ms=config.base_delay_ms,
                cap_ms=config.max_delay_ms,
            )
            jitter = random.random() * delay * JITTER_RATIO
            hint = config.retry_after_ms(exc) if config.retry_after_ms is not None else None
            wait = decide_wait_ms(backoff_ms=delay + jitter, retry_after_ms=hint)
            logger.debug(
                "retrying after %s: attempt=%d wait_ms=%.1f source=%s",
                type(exc).__name__,
                attempt + 1,
                wait.ms,
                wait.source,
            )
            await sleep(wait.ms / 1000.0)
            attempt += 1


def parse_retry_after(value: str | None) -> float | None:
    """Retry-Afterヘッダを秒へ変換する。"""

    if not value:
        return None
    text = value.strip()
    if text.isdigit():
        return float(text)
    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    return max(0.0, dt.timestamp() - time.time())


def build_request_headers(
    *,
    api_token: str,
    customer_subdomain: str,
    user_agent: str,
) -> Mapping[str, str]:
    """標準ヘッダを構築する。"""

    return {
        "Authorization": f"Bearer {api_token}",
        "CustomerSubDomain": customer_subdomain,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": user_agent,
    }
