"""
LTV Math - 곡선 위치 기반 담보 비율

LTV = DEBT 리저브 / BASE 리저브 (Q96)
    edge_low 에서 Z 리저브가 0 이므로 LTV = 1
    edge_high 에서 A 리저브가 0 이므로 LTV = 0
가격이 올라갈수록 단조 감소합니다.
"""

from ..constants import Q96
from ..data.types import AssetType
from .full_math import mul_div
from .sqrt_price_math import get_XvsL


def compute_ltv(edge_low: int, edge_high: int, sqrt_price_x96: int) -> int:
    """현재 가격의 LTV (Q96, 0 ~ Q96)

    Raises:
        InvalidRange: 가격이 범위를 벗어났거나 경계 순서가 잘못된 경우
    """
    debt_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.DEBT)
    leverage_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.LEVERAGE)
    return mul_div(debt_ratio, Q96, debt_ratio + leverage_ratio)
