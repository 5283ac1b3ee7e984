"""
Configuration management module.

환경변수(.env 포함)에서 시뮬레이션 엔진의 기본값을 읽어옵니다.
"""

import os
from pathlib import Path
from dotenv import load_dotenv
import logging

# .env 파일 로드
load_dotenv()

# 프로젝트 디렉토리 설정
ROOT_DIR = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv('SIMTRADER_DATA_DIR', str(ROOT_DIR / 'data')))
HISTORICAL_DIR = DATA_DIR / 'historical'
LOG_DIR = ROOT_DIR / 'logs'

# 로깅 설정
LOG_LEVEL = logging.getLevelName(os.getenv('LOG_LEVEL', 'INFO').upper())
LOG_FILE = os.getenv('LOG_FILE')
LOG_JSON = os.getenv('LOG_JSON', 'false').lower() == 'true'

# 시세 데이터 소스 설정
MARKET_DATA_URL = os.getenv('MARKET_DATA_URL', 'http://localhost:5000')
REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '30'))

# 과거 시세 조회 설정 (병렬 조회 + 재시도 정책)
FETCH_MAX_WORKERS = int(os.getenv('FETCH_MAX_WORKERS', '4'))
FETCH_MAX_ATTEMPTS = int(os.getenv('FETCH_MAX_ATTEMPTS', '3'))
FETCH_BACKOFF_MULTIPLIER = float(os.getenv('FETCH_BACKOFF_MULTIPLIER', '1.0'))
FETCH_BACKOFF_MIN = float(os.getenv('FETCH_BACKOFF_MIN', '1.0'))
FETCH_BACKOFF_MAX = float(os.getenv('FETCH_BACKOFF_MAX', '10.0'))

# 백테스트 실행 시간 제한 (초)
BACKTEST_TIMEOUT = float(os.getenv('BACKTEST_TIMEOUT', '60'))

# 리스크 필터 임계값
MIN_CONFIDENCE = float(os.getenv('MIN_CONFIDENCE', '0.25'))
MIN_RISK_REWARD = float(os.getenv('MIN_RISK_REWARD', '0.8'))

# 백테스트 기본값
DEFAULT_SYMBOLS = [
    s.strip() for s in os.getenv(
        'DEFAULT_SYMBOLS', 'RELIANCE,TCS,INFY,HDFCBANK,ICICIBANK'
    ).split(',') if s.strip()
]
DEFAULT_INITIAL_CAPITAL = float(os.getenv('DEFAULT_INITIAL_CAPITAL', '100000'))
DEFAULT_POSITION_SIZE_PERCENT = float(os.getenv('DEFAULT_POSITION_SIZE_PERCENT', '10'))
DEFAULT_COMMISSION_PERCENT = float(os.getenv('DEFAULT_COMMISSION_PERCENT', '0.1'))
DEFAULT_SLIPPAGE_PERCENT = float(os.getenv('DEFAULT_SLIPPAGE_PERCENT', '0.05'))

# 실시간 시그널 스캔 시 지표 계산용 과거 조회 기간 (일)
LIVE_LOOKBACK_DAYS = int(os.getenv('LIVE_LOOKBACK_DAYS', '120'))
