"""
Math layer for LEX

고정소수점 곡선 수학 함수들:
- full_math: 범위 검사가 포함된 mul/div
- sqrt_price_math: sqrtPriceX96, 리저브/유동성 비율
- liquidity_math: 유동성 ↔ 리저브 변환, mint/redeem
- swap_math: 단일 구간 스왑
- ltv_math: 곡선 위치 기반 LTV
- decay_math: 반감기 기반 수렴
"""

from .full_math import (
    mul_div,
    mul_div_rounding_up,
    div_rounding_up,
)
from .sqrt_price_math import (
    sqrt_price_x96_to_price,
    price_to_sqrt_price_x96,
    encode_sqrt_ratio,
    get_XvsL,
    get_debt_delta,
    get_leverage_delta,
    get_next_sqrt_price_from_debt,
    get_next_sqrt_price_from_leverage,
)
from .liquidity_math import (
    RedeemStep,
    compute_liquidity,
    compute_mint,
    compute_redeem,
    get_liquidity_for_base,
    get_reserves_for_liquidity,
    get_sqrt_price_from_reserves,
    split_base,
)
from .swap_math import (
    SwapStep,
    compute_swap,
)
from .ltv_math import compute_ltv
from .decay_math import (
    LN2_X96,
    exp2_neg,
    decay_factor,
    converge,
)
