"""
백테스트 엔진 패키지

과거 데이터로 시그널 규칙을 검증하고 성과를 분석합니다.

사용 예시:
    from datetime import date
    from core.backtest import BacktestEngine, BacktestConfig
    from core.data import CsvMarketData

    # 설정
    config = BacktestConfig(
        symbols=('RELIANCE', 'TCS'),
        strategy='both',
        start_date=date(2024, 1, 1),
        end_date=date(2024, 6, 30),
    )

    # 백테스트 실행
    engine = BacktestEngine(CsvMarketData('./data/historical'))
    result = engine.run(config)

    # 결과 출력
    print(result.summary_text())
"""

from .config import (
    BacktestConfig,
    StrategyMode,
    PRESET_PERIODS,
    default_config,
    config_from_preset,
)

from .strategy import (
    SignalAction,
    MarketSnapshot,
    Signal,
    SignalGenerator,
    build_snapshot,
)

from .risk import (
    RiskAssessor,
    RiskFilter,
    PassThroughRiskFilter,
    CompositeRiskFilter,
)

from .result import (
    BacktestResult,
    BacktestStatus,
    BacktestSummary,
    Trade,
    Position,
    EquityPoint,
    SignalRecord,
)

from .execution import (
    ExecutionCheck,
    ExecutionSimulator,
)

from .analyzer import PerformanceAnalyzer

from .engine import (
    BacktestEngine,
    run_backtest,
)

from .live import LiveSignalScanner

__all__ = [
    # Config
    'BacktestConfig',
    'StrategyMode',
    'PRESET_PERIODS',
    'default_config',
    'config_from_preset',

    # Strategy
    'SignalAction',
    'MarketSnapshot',
    'Signal',
    'SignalGenerator',
    'build_snapshot',

    # Risk
    'RiskAssessor',
    'RiskFilter',
    'PassThroughRiskFilter',
    'CompositeRiskFilter',

    # Result
    'BacktestResult',
    'BacktestStatus',
    'BacktestSummary',
    'Trade',
    'Position',
    'EquityPoint',
    'SignalRecord',

    # Execution
    'ExecutionCheck',
    'ExecutionSimulator',

    # Analyzer
    'PerformanceAnalyzer',

    # Engine
    'BacktestEngine',
    'run_backtest',

    # Live
    'LiveSignalScanner',
]

__version__ = '1.0.0'
