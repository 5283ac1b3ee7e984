"""
백테스트 엔진 모듈

과거 데이터로 시그널 규칙을 검증하는 핵심 엔진입니다.

실행 단계: INIT -> FETCHING -> SIMULATING -> SUMMARIZING -> DONE
어느 단계에서든 실패하면 FAILED 상태가 되고 예외가 호출자에게 전파됩니다.
"""

import concurrent.futures
import contextvars
import time
from datetime import date
from typing import Dict, List, Optional, Callable

from core.backtest.analyzer import PerformanceAnalyzer
from core.backtest.config import BacktestConfig
from core.backtest.execution import ExecutionSimulator, REASON_ZERO_QUANTITY
from core.backtest.result import (
    BacktestResult, BacktestStatus, ALLOWED_TRANSITIONS,
    Trade, EquityPoint, SignalRecord,
)
from core.backtest.risk import RiskAssessor, RiskFilter
from core.backtest.strategy import SignalGenerator, build_snapshot
from core.config import settings
from core.data.feed import MarketDataProvider, PricePoint
from core.data.retry import RetryPolicy, fetch_with_retry
from core.exceptions import (
    BacktestStateError,
    BacktestTimeoutError,
    DataFetchError,
    SimTraderException,
    wrap_exception,
)
from core.utils.log_utils import get_logger, TraceIdContext

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


class BacktestEngine:
    """백테스트 엔진

    엔진 인스턴스는 여러 번 실행할 수 있지만 동시에 두 실행을 수행하지는 않습니다.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        risk_assessor: Optional[RiskAssessor] = None,
        max_workers: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None
    ):
        """
        Args:
            provider: 시세 데이터 제공자
            risk_assessor: 리스크 평가기 (None이면 기본 RiskFilter)
            max_workers: 과거 시세 병렬 조회 스레드 수
            retry_policy: 조회 재시도 정책 (None이면 환경 설정값)
        """
        self.provider = provider
        self.risk_assessor = risk_assessor or RiskFilter()
        self.max_workers = max_workers or settings.FETCH_MAX_WORKERS
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.analyzer = PerformanceAnalyzer()
        self.status = BacktestStatus.INIT

    def _transition(self, new_status: BacktestStatus):
        """상태 전이

        Raises:
            BacktestStateError: 허용되지 않은 전이
        """
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise BacktestStateError(
                f"허용되지 않은 상태 전이: {self.status.value} -> {new_status.value}",
                state=self.status.value
            )
        logger.info(f"상태 전이: {self.status.value} -> {new_status.value}")
        self.status = new_status

    def run(
        self,
        config: BacktestConfig,
        timeout: Optional[float] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> BacktestResult:
        """
        백테스트 실행

        Args:
            config: 백테스트 설정
            timeout: 전체 실행 제한 시간 (초, None이면 환경 설정값)
            progress_callback: 진행률 콜백 함수 (current, total)

        Returns:
            BacktestResult: 백테스트 결과

        Raises:
            InvalidConfigError: 설정 검증 실패
            DataFetchError: 과거 시세 조회 실패
            BacktestTimeoutError: 제한 시간 초과
        """
        start_time = time.monotonic()
        timeout = settings.BACKTEST_TIMEOUT if timeout is None else timeout
        deadline = start_time + timeout
        self.status = BacktestStatus.INIT

        with TraceIdContext() as trace_id:
            try:
                config.validate()
                logger.info(
                    f"백테스트 시작: {config.name} ({config.strategy}), "
                    f"기간: {config.start_date} ~ {config.end_date}, "
                    f"종목 수: {len(config.symbols)}"
                )

                self._transition(BacktestStatus.FETCHING)
                history = self._fetch_history(config, deadline, timeout)

                self._transition(BacktestStatus.SIMULATING)
                simulation = self._simulate(config, history, deadline, timeout, progress_callback)

                self._transition(BacktestStatus.SUMMARIZING)
                summary = self.analyzer.analyze(
                    simulation['trades'],
                    simulation['equity'],
                    simulation['daily_returns'],
                    config.initial_capital,
                    simulation['signals'],
                )

                result = BacktestResult(
                    config=config,
                    summary=summary,
                    trades=tuple(simulation['trades']),
                    equity=tuple(simulation['equity']),
                    signals=tuple(simulation['signals']),
                    daily_returns=tuple(simulation['daily_returns']),
                    open_positions=tuple(simulation['open_positions']),
                    execution_time=time.monotonic() - start_time,
                    backtest_id=trace_id,
                )
                self._transition(BacktestStatus.DONE)

            except Exception as e:
                if self.status not in (BacktestStatus.DONE, BacktestStatus.FAILED):
                    self.status = BacktestStatus.FAILED
                if isinstance(e, SimTraderException) and not e.trace_id:
                    e.with_trace_id(trace_id)
                logger.error(f"백테스트 실패: {e}")
                raise

        logger.info(
            f"백테스트 완료: {result.execution_time:.2f}초, "
            f"수익률 {summary.total_return_percent:.2f}%, 완료 거래 {summary.total_trades}회"
        )
        return result

    def _fetch_history(
        self,
        config: BacktestConfig,
        deadline: float,
        timeout: float
    ) -> Dict[str, List[PricePoint]]:
        """종목별 과거 시세 병렬 조회

        작업 스레드는 현재 컨텍스트(trace_id)를 복사하여 실행합니다.
        첫 실패에서 남은 조회를 취소하고 DataFetchError를 발생시킵니다.
        """
        history: Dict[str, List[PricePoint]] = {}
        workers = max(1, min(self.max_workers, len(config.symbols)))
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=workers)
        try:
            futures = {
                executor.submit(
                    contextvars.copy_context().run,
                    fetch_with_retry,
                    self.provider,
                    symbol,
                    config.interval,
                    config.start_date,
                    config.end_date,
                    self.retry_policy,
                ): symbol
                for symbol in config.symbols
            }

            remaining = max(deadline - time.monotonic(), 0)
            try:
                for future in concurrent.futures.as_completed(futures, timeout=remaining):
                    symbol = futures[future]
                    try:
                        points = future.result()
                    except Exception as e:
                        raise wrap_exception(
                            e, DataFetchError,
                            f"과거 시세 조회 실패: {symbol} ({e})",
                            symbol=symbol,
                        ) from e

                    if not points:
                        raise DataFetchError(
                            f"과거 시세가 비어 있습니다: {symbol}", symbol=symbol
                        )
                    history[symbol] = points
                    logger.debug(f"과거 시세 조회 완료: {symbol} ({len(points)}개)")
            except concurrent.futures.TimeoutError as e:
                raise BacktestTimeoutError(
                    f"과거 시세 조회 중 제한 시간 초과 ({timeout}초)",
                    timeout=timeout,
                    state=BacktestStatus.FETCHING.value,
                ) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(f"과거 시세 조회 완료: {len(history)}개 종목")
        return history

    def _simulate(
        self,
        config: BacktestConfig,
        history: Dict[str, List[PricePoint]],
        deadline: float,
        timeout: float,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict[str, list]:
        """날짜별 시뮬레이션"""
        bars: Dict[str, Dict[date, PricePoint]] = {
            symbol: {p.date: p for p in points} for symbol, points in history.items()
        }
        all_dates = sorted({p.date for points in history.values() for p in points})
        total_days = len(all_dates)

        simulator = ExecutionSimulator.from_config(config)
        generator = SignalGenerator(config.strategy_mode)

        closes: Dict[str, List[float]] = {symbol: [] for symbol in history}
        last_close: Dict[str, float] = {}
        peak = config.initial_capital

        trades: List[Trade] = []
        equity: List[EquityPoint] = []
        records: List[SignalRecord] = []
        daily_returns: List[float] = []

        for day_idx, current_date in enumerate(all_dates):
            if time.monotonic() > deadline:
                raise BacktestTimeoutError(
                    f"시뮬레이션 중 제한 시간 초과 ({timeout}초, {current_date})",
                    timeout=timeout,
                    state=BacktestStatus.SIMULATING.value,
                )

            if progress_callback and day_idx % 10 == 0:
                progress_callback(day_idx, total_days)

            value_start = simulator.equity()

            # 1. 당일 종가 반영 및 스냅샷 생성
            snapshots = []
            for symbol in config.symbols:
                bar = bars.get(symbol, {}).get(current_date)
                if bar is None:
                    continue
                closes[symbol].append(bar.close)
                last_close[symbol] = bar.close
                if len(closes[symbol]) >= config.min_history:
                    snapshots.append(build_snapshot(symbol, closes[symbol], bar.volume))

            # 2. 시그널 생성 및 리스크 평가
            signals = generator.generate(snapshots, current_date)
            approved = self.risk_assessor.assess_risk(signals)

            # 3. 체결
            for signal in approved:
                check = simulator.can_execute(signal)
                if not check:
                    records.append(SignalRecord(
                        current_date, signal.symbol, signal, False, check.reason
                    ))
                    continue

                trade = simulator.execute(signal, current_date)
                if trade is None:
                    records.append(SignalRecord(
                        current_date, signal.symbol, signal, False, REASON_ZERO_QUANTITY
                    ))
                    continue

                trades.append(trade)
                records.append(SignalRecord(current_date, signal.symbol, signal, True))

            # 4. 평가 및 자산 곡선
            value_end = simulator.equity(last_close)
            peak = max(peak, value_end)
            equity.append(EquityPoint(current_date, value_end, peak - value_end))
            daily_returns.append(
                (value_end - value_start) / value_start * 100 if value_start else 0.0
            )

        if progress_callback:
            progress_callback(total_days, total_days)

        open_positions = [p.to_dict() for p in simulator.positions.values()]
        if open_positions:
            logger.info(f"미청산 포지션 {len(open_positions)}개 (평가액으로 보고)")

        return {
            'trades': trades,
            'equity': equity,
            'signals': records,
            'daily_returns': daily_returns,
            'open_positions': open_positions,
        }


def run_backtest(
    config: BacktestConfig,
    provider: MarketDataProvider,
    risk_assessor: Optional[RiskAssessor] = None,
    timeout: Optional[float] = None,
    progress_callback: Optional[ProgressCallback] = None,
    **engine_kwargs
) -> BacktestResult:
    """
    간편 백테스트 실행 함수

    Args:
        config: 백테스트 설정
        provider: 시세 데이터 제공자
        risk_assessor: 리스크 평가기
        timeout: 제한 시간 (초)
        progress_callback: 진행률 콜백
        **engine_kwargs: BacktestEngine 추가 인자 (max_workers, retry_policy)

    Returns:
        BacktestResult
    """
    engine = BacktestEngine(provider, risk_assessor=risk_assessor, **engine_kwargs)
    return engine.run(config, timeout=timeout, progress_callback=progress_callback)
