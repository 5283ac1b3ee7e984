"""공통 유틸리티 (로깅)"""

from .log_utils import get_logger, setup_logging, TraceIdContext

__all__ = [
    'get_logger',
    'setup_logging',
    'TraceIdContext',
]
