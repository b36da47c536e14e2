"""
Swap Math - 단일 구간 스왑 계산

DEBT ↔ LEVERAGE 스왑의 상대 수량과 다음 가격을 계산합니다.
풀이 유동성 부족 상태가 되지 않도록 반올림 방향을 고정:
- 풀이 받는 수량: 올림
- 트레이더가 받는 수량: 내림

가격이 edge 를 넘어가는 스왑은 edge 에서 멈추고 범위 안에서 체결 가능한
부분만 반환합니다. 나머지를 어떻게 처리할지는 호출자가 결정합니다.

References:
- Uniswap V3 Core: contracts/libraries/SwapMath.sol
"""

from typing import NamedTuple

from ..data.types import AssetType
from ..errors import UnsupportedAsset, ZeroLiquidity
from .full_math import check_amount
from .sqrt_price_math import (
    check_price,
    get_debt_delta,
    get_leverage_delta,
    get_next_sqrt_price_from_debt,
    get_next_sqrt_price_from_leverage,
)


class SwapStep(NamedTuple):
    """스왑 계산 결과"""
    amount_calculated: int  # exact in: 받는 수량, exact out: 내야 하는 수량
    next_price: int  # 스왑 후 sqrtPriceX96
    amount_filled: int  # 실제 체결된 지정 자산 수량 (<= amount_specified)


def compute_swap(
    liquidity: int,
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    asset_specified: AssetType,
    amount_specified: int,
    is_exact_in: bool
) -> SwapStep:
    """단일 구간 스왑 계산

    방향:
        DEBT 입력 / LEVERAGE 출력: 가격 하락 (edge_low 쪽)
        LEVERAGE 입력 / DEBT 출력: 가격 상승 (edge_high 쪽)

    Args:
        liquidity: 현재 유동성
        sqrt_price_x96: 현재 가격
        edge_low: 하한 edge
        edge_high: 상한 edge
        asset_specified: 수량을 지정한 자산 (DEBT 또는 LEVERAGE)
        amount_specified: 지정 수량
        is_exact_in: True면 지정 자산이 입력, False면 출력

    Returns:
        SwapStep

    Raises:
        UnsupportedAsset: BASE 또는 AssetType 이 아닌 경우
        ZeroLiquidity: 유동성이 0인 경우
    """
    check_price(sqrt_price_x96, edge_low, edge_high)
    check_amount(liquidity, "liquidity")
    check_amount(amount_specified, "amount_specified")
    if asset_specified not in (AssetType.DEBT, AssetType.LEVERAGE):
        raise UnsupportedAsset(f"스왑할 수 없는 자산: {asset_specified!r}")
    if liquidity == 0:
        raise ZeroLiquidity("유동성이 0입니다")
    if amount_specified == 0:
        return SwapStep(0, sqrt_price_x96, 0)

    price_down = (asset_specified is AssetType.DEBT) == is_exact_in
    target = edge_low if price_down else edge_high

    if is_exact_in:
        if asset_specified is AssetType.DEBT:
            max_in = get_debt_delta(target, sqrt_price_x96, liquidity, True)
        else:
            max_in = get_leverage_delta(sqrt_price_x96, target, liquidity, True)

        if amount_specified >= max_in:
            next_price = target
            amount_filled = max_in
        elif asset_specified is AssetType.DEBT:
            next_price = get_next_sqrt_price_from_debt(sqrt_price_x96, liquidity, amount_specified, True)
            amount_filled = amount_specified
        else:
            next_price = get_next_sqrt_price_from_leverage(sqrt_price_x96, liquidity, amount_specified, True)
            amount_filled = amount_specified

        if asset_specified is AssetType.DEBT:
            next_price = max(next_price, edge_low)
            amount_out = get_leverage_delta(next_price, sqrt_price_x96, liquidity, False)
        else:
            next_price = min(next_price, edge_high)
            amount_out = get_debt_delta(sqrt_price_x96, next_price, liquidity, False)
        return SwapStep(amount_out, next_price, amount_filled)

    if asset_specified is AssetType.DEBT:
        max_out = get_debt_delta(sqrt_price_x96, target, liquidity, False)
    else:
        max_out = get_leverage_delta(target, sqrt_price_x96, liquidity, False)

    if amount_specified >= max_out:
        next_price = target
        amount_filled = max_out
    elif asset_specified is AssetType.DEBT:
        next_price = get_next_sqrt_price_from_debt(sqrt_price_x96, liquidity, amount_specified, False)
        amount_filled = amount_specified
    else:
        next_price = get_next_sqrt_price_from_leverage(sqrt_price_x96, liquidity, amount_specified, False)
        amount_filled = amount_specified

    if asset_specified is AssetType.DEBT:
        next_price = min(next_price, edge_high)
        amount_in = get_leverage_delta(sqrt_price_x96, next_price, liquidity, True)
    else:
        next_price = max(next_price, edge_low)
        amount_in = get_debt_delta(next_price, sqrt_price_x96, liquidity, True)
    return SwapStep(amount_in, next_price, amount_filled)
