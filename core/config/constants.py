"""
금융 계산 상수 (SSOT - Single Source of Truth)

이 파일의 상수는 프로젝트 전체에서 사용됩니다.
"""

# 연간 거래일수 (샤프 비율 연환산)
TRADING_DAYS_PER_YEAR = 252

# 지표 계산에 필요한 최소 과거 데이터 수
MIN_HISTORY_DAYS = 20

# 스냅샷 지표 기간
RSI_PERIOD = 14
SHORT_SMA_PERIOD = 20
LONG_SMA_PERIOD = 50
