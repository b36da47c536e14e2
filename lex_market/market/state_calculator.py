"""
Market State Calculator - 파생 상태 계산

영속 상태 + 엔진 설정 + 실제 base 공급량으로 마켓의 전체 파생 상태를 계산합니다.
가격은 저장된 값을 그대로 쓰고, 유동성과 리저브는 항상 실제 공급량에서 다시 계산합니다.

debt notional price 는 순간 목표값(par * discount)으로 바로 바뀌지 않고
반감기(debt_duration)에 따라 천천히 수렴합니다:
    n' = target + (n - target) * 2^(-elapsed / half_life)

이 모듈은 부수효과가 없습니다. 수렴된 값의 저장은 오케스트레이터의 몫입니다.
"""

import logging
from typing import Optional

from ..constants import PAR_NOTIONAL_PRICE, PAR_SQRT_PRICE, Q96
from ..data.types import AssetType, EngineConfig, LexFullState, MarketConfig, MarketState
from ..errors import InvalidRange, UnderCollateralized, UnsupportedAsset, ZeroLiquidity
from ..math.decay_math import converge
from ..math.full_math import check_amount, mul_div
from ..math.liquidity_math import split_base
from ..math.ltv_math import compute_ltv
from ..math.sqrt_price_math import check_price, get_XvsL

logger = logging.getLogger(__name__)


def get_debt_price_discount(
    edge_low: int,
    edge_high: int,
    sqrt_price_x96: int,
    reference_price: int = PAR_SQRT_PRICE
) -> int:
    """debt 청구권의 할인 계수 (Q96)

    공식: discount = (A/L at reference) / (A/L at current)
    par 에서 정확히 Q96 (할인 없음).

    Raises:
        ZeroLiquidity: 현재 가격에서 DEBT 리저브가 0인 경우 (edge_high)
    """
    reference = get_XvsL(reference_price, edge_low, edge_high, AssetType.DEBT)
    current = get_XvsL(sqrt_price_x96, edge_low, edge_high, AssetType.DEBT)
    if current == 0:
        raise ZeroLiquidity("DEBT 리저브가 0이어서 할인 계수를 계산할 수 없습니다")
    return mul_div(reference, Q96, current)


def calc_ratio(
    engine_config: EngineConfig,
    full_state: LexFullState,
    asset_from: AssetType,
    asset_to: AssetType
) -> int:
    """asset_from 1단위당 asset_to 수량 (Q96)

    공식: ratio = (to/L) / (from/L)
    """
    if asset_from == asset_to:
        raise UnsupportedAsset(f"같은 자산끼리는 비율을 구할 수 없습니다: {asset_from!r}")

    edge_low, edge_high = engine_config.edge_low, engine_config.edge_high
    from_ratio = get_XvsL(full_state.sqrt_price, edge_low, edge_high, asset_from)
    to_ratio = get_XvsL(full_state.sqrt_price, edge_low, edge_high, asset_to)
    if from_ratio == 0:
        raise ZeroLiquidity(f"{asset_from.value} 리저브가 0입니다")
    return mul_div(to_ratio, Q96, from_ratio)


def calculate_market_state(
    market_config: MarketConfig,
    engine_config: EngineConfig,
    market_state: MarketState,
    base_token_supply: int,
    now: int,
    strict_mode: bool = False
) -> LexFullState:
    """마켓 전체 파생 상태 계산

    1. 저장된 가격 비율로 base 공급량을 (Z, A) 로 나누고 유동성 계산 (가격은 유지)
    2. LTV 와 under-collateralized 플래그 (price >= lim_high)
    3. debt notional price 수렴

    Args:
        market_config: 마켓 설정
        engine_config: 엔진 설정
        market_state: 영속 상태
        base_token_supply: 마켓이 실제로 보유한 base 수량
        now: 호출자가 제공한 현재 시각
        strict_mode: True면 under-collateralized 일 때 예외

    Returns:
        LexFullState

    Raises:
        InvalidRange: 저장된 가격이 범위를 벗어났거나 시간이 역행한 경우
        UnderCollateralized: strict_mode 에서 소프트 한도를 넘은 경우
    """
    edge_low, edge_high = engine_config.edge_low, engine_config.edge_high
    check_price(market_state.sqrt_price, edge_low, edge_high)
    check_amount(base_token_supply, "base_token_supply")
    if now < market_state.last_update:
        raise InvalidRange(f"시간이 역행했습니다: {now} < {market_state.last_update}")

    # 가격은 저장된 값 그대로, 유동성만 실제 공급량에서 계산 (내림)
    sqrt_price = market_state.sqrt_price
    leverage_reserve, debt_reserve = split_base(sqrt_price, edge_low, edge_high, base_token_supply)
    base_ratio = get_XvsL(sqrt_price, edge_low, edge_high, AssetType.BASE, round_up=True)
    liquidity = mul_div(base_token_supply, Q96, base_ratio)

    ltv = compute_ltv(edge_low, edge_high, sqrt_price)
    under_collateralized = sqrt_price >= engine_config.lim_high
    if under_collateralized:
        logger.warning(
            "Market under-collateralized: sqrt_price=%d lim_high=%d ltv=%d",
            sqrt_price, engine_config.lim_high, ltv
        )
        if strict_mode:
            raise UnderCollateralized(
                f"가격이 소프트 한도를 넘었습니다: {sqrt_price} >= {engine_config.lim_high}"
            )

    # edge_high 에서는 DEBT 리저브가 없으므로 목표값을 마지막 notional 로 유지
    discount: Optional[int] = None
    target = market_state.debt_notional_price
    if get_XvsL(sqrt_price, edge_low, edge_high, AssetType.DEBT) > 0:
        discount = get_debt_price_discount(edge_low, edge_high, sqrt_price)
        target = PAR_NOTIONAL_PRICE * discount // Q96

    debt_notional_price = converge(
        market_state.debt_notional_price,
        target,
        now - market_state.last_update,
        market_config.debt_duration,
        market_config.rate_bias,
    )

    leverage_price = 0
    if leverage_reserve > 0:
        debt_value = debt_reserve * debt_notional_price // Q96
        leverage_price = max(base_token_supply - debt_value, 0) * Q96 // leverage_reserve

    logger.debug(
        "Market state: sqrt_price=%d liquidity=%d ltv=%d notional=%d",
        sqrt_price, liquidity, ltv, debt_notional_price
    )

    return LexFullState(
        sqrt_price=sqrt_price,
        liquidity=liquidity,
        debt_reserve=debt_reserve,
        leverage_reserve=leverage_reserve,
        base_supply=base_token_supply,
        ltv=ltv,
        under_collateralized=under_collateralized,
        debt_price_discount=discount,
        debt_notional_price=debt_notional_price,
        leverage_price=leverage_price,
        timestamp=now,
    )
