"""
실시간 시그널 스캔 모듈

현재 시세와 최근 과거 시세로 지표를 계산하여
백테스트와 같은 규칙/리스크 필터로 당일 시그널을 생성합니다.
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from core.backtest.config import StrategyMode
from core.backtest.risk import RiskAssessor, RiskFilter
from core.backtest.strategy import MarketSnapshot, Signal, SignalGenerator, build_snapshot
from core.config import settings
from core.config.constants import MIN_HISTORY_DAYS
from core.data.feed import MarketDataProvider, Quote
from core.data.retry import RetryPolicy, fetch_with_retry
from core.exceptions import DataException
from core.utils.log_utils import get_logger, TraceIdContext

logger = get_logger(__name__)


class LiveSignalScanner:
    """당일 시그널 스캐너"""

    def __init__(
        self,
        provider: MarketDataProvider,
        strategy_mode: StrategyMode = StrategyMode.BOTH,
        risk_assessor: Optional[RiskAssessor] = None,
        lookback_days: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None
    ):
        self.provider = provider
        self.generator = SignalGenerator(strategy_mode)
        self.risk_assessor = risk_assessor or RiskFilter()
        self.lookback_days = lookback_days or settings.LIVE_LOOKBACK_DAYS
        self.retry_policy = retry_policy or RetryPolicy.from_settings()

    def _snapshot(self, quote: Quote, today: date) -> MarketSnapshot:
        """최근 종가에 현재가를 최신 종가로 붙여 스냅샷 생성"""
        history = fetch_with_retry(
            self.provider,
            quote.symbol,
            "day",
            today - timedelta(days=self.lookback_days),
            today,
            self.retry_policy,
        )
        closes = [p.close for p in history if p.date < today]
        closes.append(quote.last_price)

        if len(closes) < MIN_HISTORY_DAYS:
            logger.warning(
                f"과거 데이터 부족으로 지표 생략: {quote.symbol} ({len(closes)}개)"
            )
            return MarketSnapshot(symbol=quote.symbol, price=quote.last_price, volume=quote.volume)
        return build_snapshot(quote.symbol, closes, quote.volume)

    def scan(self, symbols: Sequence[str], today: Optional[date] = None) -> List[Signal]:
        """
        시그널 스캔

        과거 시세를 가져오지 못한 종목은 경고 후 제외됩니다.

        Args:
            symbols: 대상 심볼
            today: 기준일 (None이면 오늘)

        Returns:
            리스크 필터를 통과한 Signal 리스트
        """
        today = today or date.today()
        with TraceIdContext():
            quotes = self.provider.get_quotes(list(symbols))
            logger.info(f"시그널 스캔 시작: {len(quotes)}/{len(symbols)}개 종목 시세 수신")

            snapshots = []
            for symbol in symbols:
                quote = quotes.get(symbol)
                if quote is None:
                    logger.warning(f"시세 없음, 스캔 제외: {symbol}")
                    continue
                try:
                    snapshots.append(self._snapshot(quote, today))
                except DataException as e:
                    logger.warning(f"과거 시세 조회 실패, 스캔 제외: {symbol} ({e.message})")

            signals = self.generator.generate(snapshots, today)
            approved = self.risk_assessor.assess_risk(signals)
            logger.info(f"시그널 스캔 완료: 생성 {len(signals)}개, 승인 {len(approved)}개")
            return approved
