"""
Liquidity Math - 유동성 계산

[edge_low, edge_high] 로 제한된 단일 구간 곡선에서 리저브와 유동성 간의 변환.
리저브 (Z, A) 두 값만으로 유동성과 가격을 함께 구하는 이차방정식 해를 포함합니다.

핵심 공식 (실수 단위, el = edge_low, eh = edge_high):
    Z = L * (s - el)
    A = L * (1/s - 1/eh)
    (Z/L + el) * (A/L + 1/eh) = 1
    => (eh - el) * L^2 - (Z + A*el*eh) * L - Z*A*eh = 0
"""

import math
from typing import NamedTuple, Tuple

from ..constants import Q96
from ..data.types import AssetType
from ..errors import ZeroLiquidity
from .full_math import check_amount, mul_div, mul_div_rounding_up
from .sqrt_price_math import (
    check_edges,
    check_price,
    get_XvsL,
    get_debt_delta,
    get_leverage_delta,
)

# mint 시 각 리저브 올림으로 생길 수 있는 최대 초과분 (양쪽 합)
MINT_ROUNDING_BUFFER: int = 2


class RedeemStep(NamedTuple):
    """redeem 계산 결과"""
    liquidity_out: int  # 소각되는 유동성
    next_price: int  # 남은 리저브로 다시 계산한 sqrtPriceX96
    leverage_used: int  # 실제 사용된 LEVERAGE (올림)
    debt_used: int  # 실제 사용된 DEBT (올림)


def _solve_liquidity(
    edge_low: int,
    edge_high: int,
    z_amount: int,
    a_amount: int
) -> int:
    """이차방정식의 양의 근 (내림)

    Q96 단위로 정리한 식:
        α = eh - el
        β = Z * Q96 + A * el * eh / Q96
        γ = Z * A * eh
        L = (β + √(β² + 4αγ)) / 2α
    """
    alpha = edge_high - edge_low
    beta = z_amount * Q96 + a_amount * edge_low * edge_high // Q96
    gamma = z_amount * a_amount * edge_high
    return (beta + math.isqrt(beta * beta + 4 * alpha * gamma)) // (2 * alpha)


def compute_liquidity(
    edge_low: int,
    edge_high: int,
    z_amount: int,
    a_amount: int
) -> int:
    """두 리저브에서 유동성 계산 (내림)

    올림된 mint 수량은 각 리저브에 1 미만의 초과분을 가지므로, 실제 유동성은
    각 리저브에서 1을 뺀 값의 유동성보다 큽니다. 결과를 그 값 + 1 로 제한하여
    compute_mint(s, L) 의 수량을 다시 넣어도 L 을 넘지 않습니다.

    Args:
        edge_low: 하한 edge
        edge_high: 상한 edge
        z_amount: LEVERAGE 리저브
        a_amount: DEBT 리저브

    Returns:
        유동성

    Raises:
        ZeroLiquidity: 두 수량이 모두 0인 경우
    """
    check_edges(edge_low, edge_high)
    check_amount(z_amount, "z_amount")
    check_amount(a_amount, "a_amount")
    if z_amount == 0 and a_amount == 0:
        raise ZeroLiquidity("두 리저브가 모두 0입니다")

    liquidity = _solve_liquidity(edge_low, edge_high, z_amount, a_amount)
    bound = _solve_liquidity(edge_low, edge_high, max(z_amount - 1, 0), max(a_amount - 1, 0)) + 1
    return check_amount(min(liquidity, bound), "liquidity")


def get_sqrt_price_from_reserves(
    edge_low: int,
    edge_high: int,
    z_amount: int,
    a_amount: int
) -> Tuple[int, int]:
    """두 리저브에서 (유동성, sqrtPriceX96) 계산

    가격은 제한 전의 근으로, 더 큰 쪽 리저브에서 계산합니다:
        Z >= A: s = el + Z / L
        Z <  A: s = L * eh / (A * eh + L)

    Returns:
        (compute_liquidity 결과, sqrt_price_x96), 가격은 [edge_low, edge_high] 로 clamp
    """
    liquidity = compute_liquidity(edge_low, edge_high, z_amount, a_amount)
    if liquidity == 0:
        raise ZeroLiquidity("리저브가 너무 작아 유동성이 0입니다")

    solved = _solve_liquidity(edge_low, edge_high, z_amount, a_amount)
    if z_amount >= a_amount:
        sqrt_price = edge_low + mul_div(z_amount, Q96, solved)
    else:
        sqrt_price = mul_div(
            solved * edge_high, Q96, a_amount * edge_high + Q96 * solved
        )

    return liquidity, max(edge_low, min(edge_high, sqrt_price))


def get_reserves_for_liquidity(
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    liquidity: int,
    round_up: bool = False
) -> Tuple[int, int]:
    """유동성에서 리저브 계산

    Returns:
        (z_amount, a_amount) 튜플
    """
    check_price(sqrt_price_x96, edge_low, edge_high)
    z_amount = get_leverage_delta(edge_low, sqrt_price_x96, liquidity, round_up)
    a_amount = get_debt_delta(sqrt_price_x96, edge_high, liquidity, round_up)
    return z_amount, a_amount


def compute_mint(
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    liquidity: int
) -> Tuple[int, int]:
    """유동성을 만들기 위해 필요한 리저브 (올림)

    compute_liquidity 의 역함수. 호출자는 최소한 이만큼을 공급해야 합니다.

    Returns:
        (z_amount, a_amount) 튜플
    """
    return get_reserves_for_liquidity(
        sqrt_price_x96, edge_low, edge_high, liquidity, round_up=True
    )


def get_liquidity_for_base(
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    base_amount: int
) -> int:
    """base 예치량으로 적립할 수 있는 유동성 (내림)

    compute_mint 의 올림 결과 합이 base_amount 를 넘지 않도록
    MINT_ROUNDING_BUFFER 만큼 먼저 제외합니다.
    """
    check_amount(base_amount, "base_amount")
    if base_amount <= MINT_ROUNDING_BUFFER:
        return 0

    ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.BASE, round_up=True)
    return mul_div(base_amount - MINT_ROUNDING_BUFFER, Q96, ratio)


def split_base(
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    base_amount: int
) -> Tuple[int, int]:
    """base 수량을 현재 가격 비율로 (Z, A) 리저브로 분할

    A 는 내림, Z 는 나머지. 합은 항상 base_amount.
    """
    check_amount(base_amount, "base_amount")
    debt_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.DEBT)
    leverage_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.LEVERAGE)

    a_amount = mul_div(base_amount, debt_ratio, debt_ratio + leverage_ratio)
    return base_amount - a_amount, a_amount


def compute_redeem(
    liquidity: int,
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    z_amount_in: int,
    a_amount_in: int
) -> RedeemStep:
    """두 리저브를 비율대로 소각하여 유동성으로 교환

    입력 수량은 상한값입니다. 유동성에 해당하는 만큼만 사용하고
    나머지는 오케스트레이터가 돌려줍니다.

    Args:
        liquidity: 현재 유동성
        sqrt_price_x96: 현재 가격
        edge_low: 하한 edge
        edge_high: 상한 edge
        z_amount_in: 제공된 LEVERAGE
        a_amount_in: 제공된 DEBT

    Returns:
        RedeemStep

    Raises:
        ZeroLiquidity: 현재 유동성이 0이거나 소각할 유동성이 0인 경우
    """
    check_price(sqrt_price_x96, edge_low, edge_high)
    check_amount(liquidity, "liquidity")
    check_amount(z_amount_in, "z_amount_in")
    check_amount(a_amount_in, "a_amount_in")
    if liquidity == 0:
        raise ZeroLiquidity("유동성이 0입니다")

    leverage_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.LEVERAGE)
    debt_ratio = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.DEBT, round_up=True)

    # edge 에서는 한쪽 비율이 0이므로 그쪽 입력은 제약이 없음
    candidates = []
    if leverage_ratio > 0:
        candidates.append(mul_div(z_amount_in, Q96, leverage_ratio))
    if debt_ratio > 0:
        candidates.append(mul_div(a_amount_in, Q96, debt_ratio))

    liquidity_out = min(min(candidates), liquidity)
    if liquidity_out == 0:
        raise ZeroLiquidity("소각할 유동성이 0입니다")

    leverage_used = mul_div_rounding_up(liquidity_out, leverage_ratio, Q96)
    debt_used = mul_div_rounding_up(liquidity_out, debt_ratio, Q96)

    if liquidity_out == liquidity:
        return RedeemStep(liquidity_out, sqrt_price_x96, leverage_used, debt_used)

    z_current, a_current = get_reserves_for_liquidity(
        sqrt_price_x96, edge_low, edge_high, liquidity
    )
    z_remaining = max(z_current - leverage_used, 0)
    a_remaining = max(a_current - debt_used, 0)
    if z_remaining == 0 and a_remaining == 0:
        return RedeemStep(liquidity_out, sqrt_price_x96, leverage_used, debt_used)
    if compute_liquidity(edge_low, edge_high, z_remaining, a_remaining) == 0:
        return RedeemStep(liquidity_out, sqrt_price_x96, leverage_used, debt_used)

    _, next_price = get_sqrt_price_from_reserves(edge_low, edge_high, z_remaining, a_remaining)
    return RedeemStep(liquidity_out, next_price, leverage_used, debt_used)
