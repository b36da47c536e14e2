"""
Sqrt Price Math - sqrtPriceX96 관련 계산

LEX 곡선의 가격은 sqrtPriceX96 형식으로 저장되며 항상 [edge_low, edge_high] 안에 있습니다.
sqrtPriceX96 = sqrt(price) * 2^96

리저브 정의 (L = 유동성, s = sqrt price):
    Z (LEVERAGE) = L * (s - edge_low)
    A (DEBT)     = L * (1/s - 1/edge_high)
    BASE         = A + Z

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
"""

import math

from ..constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO, Q96, Q192
from ..data.types import AssetType
from ..errors import InvalidRange, UnsupportedAsset, ZeroLiquidity
from .full_math import (
    check_amount,
    check_uint,
    div_rounding_up,
    mul_div,
    mul_div_rounding_up,
)


def sqrt_price_x96_to_price(sqrt_price_x96: int) -> float:
    """sqrtPriceX96을 human-readable 가격으로 변환

    가격 = (sqrtPriceX96 / 2^96)^2
    """
    sqrt_price = sqrt_price_x96 / Q96
    return sqrt_price ** 2


def price_to_sqrt_price_x96(price: float) -> int:
    """Human-readable 가격을 sqrtPriceX96으로 변환

    sqrtPriceX96 = sqrt(price) * 2^96
    """
    if price <= 0:
        raise InvalidRange("가격은 양수여야 합니다")

    sqrt_price = math.sqrt(price)
    return int(sqrt_price * Q96)


def encode_sqrt_ratio(numerator: int, denominator: int) -> int:
    """정수 비율 numerator/denominator 의 sqrtPriceX96 (내림)

    float를 거치지 않으므로 테스트와 설정에서 정확한 값이 필요할 때 사용.
    """
    if numerator <= 0 or denominator <= 0:
        raise InvalidRange("비율은 양수여야 합니다")
    return math.isqrt(numerator * Q192 // denominator)


def check_edges(edge_low: int, edge_high: int) -> None:
    """MIN_SQRT_RATIO <= edge_low < edge_high <= MAX_SQRT_RATIO"""
    if not (MIN_SQRT_RATIO <= edge_low < edge_high <= MAX_SQRT_RATIO):
        raise InvalidRange(f"경계 순서가 잘못되었습니다: {edge_low} >= {edge_high}")


def check_price(sqrt_price_x96: int, edge_low: int, edge_high: int) -> None:
    """edge_low <= sqrt_price <= edge_high"""
    check_edges(edge_low, edge_high)
    if not (edge_low <= sqrt_price_x96 <= edge_high):
        raise InvalidRange(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96} "
            f"(범위: {edge_low} ~ {edge_high})"
        )


def get_XvsL(
    sqrt_price_x96: int,
    edge_low: int,
    edge_high: int,
    asset_type: AssetType,
    round_up: bool = False
) -> int:
    """유동성 1단위당 자산 리저브 비율 (Q96)

    공식:
        LEVERAGE: Z/L = s - edge_low
        DEBT:     A/L = 1/s - 1/edge_high = (edge_high - s) / (s * edge_high)
        BASE:     DEBT + LEVERAGE

    Args:
        sqrt_price_x96: 가격 (edge 범위 안)
        edge_low: 하한 edge
        edge_high: 상한 edge
        asset_type: 자산 타입
        round_up: True면 올림, False면 내림

    Returns:
        리저브/유동성 비율 (Q96)

    Raises:
        InvalidRange: 가격이 범위를 벗어난 경우
        UnsupportedAsset: AssetType이 아닌 경우
    """
    check_price(sqrt_price_x96, edge_low, edge_high)

    if asset_type is AssetType.LEVERAGE:
        return sqrt_price_x96 - edge_low
    elif asset_type is AssetType.DEBT:
        div = mul_div_rounding_up if round_up else mul_div
        return div(Q192, edge_high - sqrt_price_x96, sqrt_price_x96 * edge_high)
    elif asset_type is AssetType.BASE:
        return (
            get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.DEBT, round_up)
            + get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.LEVERAGE, round_up)
        )
    raise UnsupportedAsset(f"지원하지 않는 자산: {asset_type!r}")


def get_debt_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """두 가격 사이의 DEBT(A) 리저브 변화량

    공식: ΔA = L * (√P_b - √P_a) / (√P_a * √P_b)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_a_x96 <= 0:
        raise InvalidRange("sqrt price는 양수여야 합니다")

    numerator1 = check_amount(liquidity, "liquidity") << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    else:
        return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_leverage_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """두 가격 사이의 LEVERAGE(Z) 리저브 변화량

    공식: ΔZ = L * (√P_b - √P_a)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    div = mul_div_rounding_up if round_up else mul_div
    return div(check_amount(liquidity, "liquidity"), sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def get_next_sqrt_price_from_debt(
    sqrt_price_x96: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """DEBT 변화에 따른 다음 sqrtPriceX96 (올림)

    DEBT를 추가하면 가격이 내려가고, 제거하면 올라갑니다.
    항상 올림하여 트레이더가 받는 LEVERAGE가 과대 계산되지 않도록 합니다.

    Raises:
        ZeroLiquidity: 유동성이 0이거나 DEBT 리저브 전체를 제거하려는 경우
    """
    if liquidity == 0:
        raise ZeroLiquidity("유동성이 0입니다")
    if amount == 0:
        return sqrt_price_x96

    check_amount(amount)
    numerator1 = check_amount(liquidity, "liquidity") << 96
    product = amount * sqrt_price_x96

    if add:
        return mul_div_rounding_up(numerator1, sqrt_price_x96, numerator1 + product)
    if numerator1 <= product:
        raise ZeroLiquidity("DEBT 리저브를 모두 제거할 수 없습니다")
    return mul_div_rounding_up(numerator1, sqrt_price_x96, numerator1 - product)


def get_next_sqrt_price_from_leverage(
    sqrt_price_x96: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """LEVERAGE 변화에 따른 다음 sqrtPriceX96 (내림)

    LEVERAGE를 추가하면 가격이 올라가고, 제거하면 내려갑니다.
    """
    if liquidity == 0:
        raise ZeroLiquidity("유동성이 0입니다")

    check_amount(amount)
    if add:
        quotient = (amount << 96) // liquidity
        return check_uint(sqrt_price_x96 + quotient, name="sqrt_price")

    quotient = div_rounding_up(amount << 96, liquidity)
    if sqrt_price_x96 <= quotient:
        raise ZeroLiquidity("LEVERAGE 리저브를 모두 제거할 수 없습니다")
    return sqrt_price_x96 - quotient
