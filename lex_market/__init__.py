"""
LEX Bounded Concentrated-Liquidity Market Engine

하나의 base 담보를 DEBT(안전) / LEVERAGE(위험) 두 청구권으로 나누는
[edge_low, edge_high] 구간 곡선 마켓 엔진.
온체인 수준 정밀도의 고정소수점(sqrtPriceX96) 계산을 사용합니다.
"""

__version__ = "0.1.0"

from .constants import Q96, Q192, FEE_DENOMINATOR, PAR_SQRT_PRICE
