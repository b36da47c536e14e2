"""
Market layer for LEX

- state_calculator: 실제 공급량 기반 파생 상태 계산
- engine: 마켓별 상태를 소유하는 mint / redeem / swap 오케스트레이터
- oracle: quote 환산용 가격 오라클
"""

from .state_calculator import (
    calc_ratio,
    calculate_market_state,
    get_debt_price_discount,
)
from .oracle import PriceOracle, StaticPriceOracle
from .engine import LexEngine
