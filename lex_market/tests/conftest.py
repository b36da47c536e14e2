"""
공통 fixture

par(sqrt price = 1.0)를 중심으로 대칭인 곡선:
    edge_low = 0.5 (price 0.25), edge_high = 2.0 (price 4.0)
이 구간에서는 par 에서 DEBT / LEVERAGE 비율이 각각 정확히 0.5 입니다.
"""

import pytest

from ..constants import Q96
from ..data.types import EngineConfig, MarketConfig
from ..math.sqrt_price_math import encode_sqrt_ratio

EDGE_LOW = Q96 // 2
EDGE_HIGH = 2 * Q96
LIM_HIGH = encode_sqrt_ratio(3, 1)
LIM_MAX = encode_sqrt_ratio(18, 5)

DAY = 24 * 3600


@pytest.fixture
def engine_config():
    return EngineConfig(
        edge_low=EDGE_LOW,
        edge_high=EDGE_HIGH,
        lim_high=LIM_HIGH,
        lim_max=LIM_MAX,
    )


@pytest.fixture
def market_config():
    return MarketConfig(base_token="WETH", swap_fee=3000, debt_duration=DAY)
