"""
시세 조회 재시도 정책 모듈

- 최대 3회 시도, 지수 백오프
- 타임아웃/네트워크 계열 오류만 재시도
- 데이터 없음(4xx 계열)은 즉시 실패
"""

import logging  # tenacity의 before_sleep_log에서 logging.WARNING 사용
from dataclasses import dataclass
from datetime import date
from typing import List

from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from core.config import settings
from core.exceptions import is_retryable
from core.data.feed import MarketDataProvider, PricePoint
from core.utils.log_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """재시도 정책"""
    max_attempts: int = 3
    multiplier: float = 1.0
    min_wait: float = 1.0
    max_wait: float = 10.0

    @classmethod
    def from_settings(cls) -> 'RetryPolicy':
        return cls(
            max_attempts=settings.FETCH_MAX_ATTEMPTS,
            multiplier=settings.FETCH_BACKOFF_MULTIPLIER,
            min_wait=settings.FETCH_BACKOFF_MIN,
            max_wait=settings.FETCH_BACKOFF_MAX,
        )

    def retrying(self) -> Retrying:
        """tenacity Retrying 객체 생성"""
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.multiplier, min=self.min_wait, max=self.max_wait
            ),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


# 테스트 등에서 대기 없이 사용하는 정책
NO_WAIT_POLICY = RetryPolicy(multiplier=0, min_wait=0, max_wait=0)


def fetch_with_retry(
    provider: MarketDataProvider,
    symbol: str,
    interval: str,
    from_date: date,
    to_date: date,
    policy: RetryPolicy = None
) -> List[PricePoint]:
    """재시도 정책을 적용하여 과거 시세 조회

    Raises:
        마지막 시도의 예외를 그대로 전파
    """
    policy = policy or RetryPolicy.from_settings()
    for attempt in policy.retrying():
        with attempt:
            attempt_number = attempt.retry_state.attempt_number
            if attempt_number > 1:
                logger.info(f"과거 시세 재조회: {symbol} ({attempt_number}/{policy.max_attempts})")
            return provider.get_historical_data(symbol, interval, from_date, to_date)
