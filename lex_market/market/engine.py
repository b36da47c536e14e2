"""
LEX Engine - 마켓 오케스트레이터

마켓별 영속 상태와 엔진 전역 설정을 소유하고 mint / redeem / swap 을 수행합니다.

각 연산의 순서:
    1. calculate_market_state 로 현재 스냅샷 계산 (strict 검사 포함)
    2. 스냅샷의 가격/유동성으로 곡선 수학 함수 호출
    3. 결과 가격, 수렴된 debt notional price, 현재 시각을 한 번에 저장

실패한 연산은 저장된 상태를 바꾸지 않습니다. 같은 market id 에 대한 동시 호출의
직렬화는 호출하는 쪽이 보장해야 합니다.
"""

import logging
from typing import Dict, Optional

from ..constants import FEE_DENOMINATOR, Q96
from ..data.types import (
    AssetType,
    EngineConfig,
    LexFullState,
    MarketConfig,
    MarketState,
    MintResult,
    RedeemResult,
    SwapOutcome,
)
from ..errors import (
    InvalidRange,
    LexError,
    MarketAlreadyExists,
    UnderCollateralized,
    UnknownMarket,
    UnsupportedAsset,
    ZeroLiquidity,
)
from ..math.full_math import mul_div, mul_div_rounding_up
from ..math.liquidity_math import compute_mint, compute_redeem, get_liquidity_for_base
from ..math.sqrt_price_math import get_XvsL
from ..math.swap_math import compute_swap
from .oracle import PriceOracle
from .state_calculator import calc_ratio, calculate_market_state

logger = logging.getLogger(__name__)

SWAPPABLE_ASSETS = frozenset({AssetType.DEBT, AssetType.LEVERAGE})


class LexEngine:
    """LEX 마켓 오케스트레이터

    사용법:
        engine = LexEngine(EngineConfig.from_settings())
        engine.create_market("weth-1", market_config, now)
        result = engine.mint("weth-1", market_config, base_supply, 10**18, now)
    """

    def __init__(self, engine_config: EngineConfig, oracle: Optional[PriceOracle] = None):
        """
        Args:
            engine_config: 모든 마켓이 공유하는 불변 설정
            oracle: quote_value 에 사용할 가격 오라클
        """
        self.engine_config = engine_config
        self.oracle = oracle
        self._markets: Dict[str, MarketState] = {}

    # ------------------------------------------------------------------
    # 마켓 생성 / 조회
    # ------------------------------------------------------------------

    def create_market(self, market_id: str, market_config: MarketConfig, now: int) -> MarketState:
        """액면가에서 시작하는 마켓 생성

        Raises:
            MarketAlreadyExists: 이미 존재하는 id
            InvalidRange: par 가 edge 범위 안에 없는 경우
        """
        if market_id in self._markets:
            raise MarketAlreadyExists(f"이미 존재하는 마켓: {market_id}")
        if not self.engine_config.contains_par:
            raise InvalidRange("par 가격이 edge 범위 안에 있어야 합니다")

        state = MarketState.initial(now)
        self._markets[market_id] = state
        logger.info("Market created: %s base=%s", market_id, market_config.base_token)
        return state

    def get_market_state(self, market_id: str) -> MarketState:
        try:
            return self._markets[market_id]
        except KeyError:
            raise UnknownMarket(market_id) from None

    def get_full_state(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        now: int,
        strict_mode: bool = False
    ) -> LexFullState:
        return calculate_market_state(
            market_config,
            self.engine_config,
            self.get_market_state(market_id),
            base_token_supply,
            now,
            strict_mode,
        )

    def get_ltv(self, market_id: str, market_config: MarketConfig, base_token_supply: int, now: int) -> int:
        return self.get_full_state(market_id, market_config, base_token_supply, now).ltv

    def get_debt_price_discount(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        now: int
    ) -> Optional[int]:
        return self.get_full_state(market_id, market_config, base_token_supply, now).debt_price_discount

    def calc_ratio(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        asset_from: AssetType,
        asset_to: AssetType,
        now: int
    ) -> int:
        full_state = self.get_full_state(market_id, market_config, base_token_supply, now)
        return calc_ratio(self.engine_config, full_state, asset_from, asset_to)

    def quote_value(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        asset: AssetType,
        amount: int,
        quote_token: str,
        now: int
    ) -> int:
        """청구권을 base 가치로 바꾼 뒤 오라클로 quote 토큰 수량 환산

        DEBT 는 debt notional price, LEVERAGE 는 leverage price 로 평가합니다.
        """
        if self.oracle is None:
            raise LexError("오라클이 설정되지 않았습니다")

        full_state = self.get_full_state(market_id, market_config, base_token_supply, now)
        if asset is AssetType.BASE:
            base_amount = amount
        elif asset is AssetType.DEBT:
            base_amount = mul_div(amount, full_state.debt_notional_price, Q96)
        elif asset is AssetType.LEVERAGE:
            base_amount = mul_div(amount, full_state.leverage_price, Q96)
        else:
            raise UnsupportedAsset(f"지원하지 않는 자산: {asset!r}")

        return self.oracle.preview_quote(base_amount, market_config.base_token, quote_token)

    # ------------------------------------------------------------------
    # 상태 변경 연산
    # ------------------------------------------------------------------

    def mint(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        base_amount: int,
        now: int,
        strict_mode: bool = False
    ) -> MintResult:
        """base 를 예치하고 DEBT + LEVERAGE 청구권을 현재 비율로 발행

        발행 수량(compute_mint 올림)의 합은 base_amount 를 넘지 않습니다.
        """
        snapshot = self._snapshot(market_id, market_config, base_token_supply, now, strict_mode)
        edge_low, edge_high = self.engine_config.edge_low, self.engine_config.edge_high

        liquidity = get_liquidity_for_base(snapshot.sqrt_price, edge_low, edge_high, base_amount)
        if liquidity == 0:
            raise ZeroLiquidity(f"예치량이 너무 작습니다: {base_amount}")

        leverage_out, debt_out = compute_mint(snapshot.sqrt_price, edge_low, edge_high, liquidity)
        next_price = snapshot.sqrt_price
        self._check_strict(next_price, strict_mode)
        self._commit(market_id, next_price, snapshot)

        return MintResult(
            liquidity=liquidity,
            debt_out=debt_out,
            leverage_out=leverage_out,
            sqrt_price=next_price,
            under_collateralized=self._is_under_collateralized(next_price),
        )

    def redeem(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        debt_amount: int,
        leverage_amount: int,
        now: int,
        strict_mode: bool = False
    ) -> RedeemResult:
        """DEBT + LEVERAGE 청구권을 비율대로 소각하고 base 반환

        제공된 수량은 상한이며 사용되지 않은 부분은 호출자에게 남습니다.
        """
        snapshot = self._snapshot(market_id, market_config, base_token_supply, now, strict_mode)
        edge_low, edge_high = self.engine_config.edge_low, self.engine_config.edge_high

        step = compute_redeem(
            snapshot.liquidity, snapshot.sqrt_price, edge_low, edge_high,
            leverage_amount, debt_amount
        )
        base_ratio = get_XvsL(snapshot.sqrt_price, edge_low, edge_high, AssetType.BASE)
        base_out = min(mul_div(step.liquidity_out, base_ratio, Q96), base_token_supply)

        self._check_strict(step.next_price, strict_mode)
        self._commit(market_id, step.next_price, snapshot)

        return RedeemResult(
            liquidity=step.liquidity_out,
            debt_used=step.debt_used,
            leverage_used=step.leverage_used,
            base_out=base_out,
            sqrt_price=step.next_price,
            under_collateralized=self._is_under_collateralized(step.next_price),
        )

    def swap(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        asset_in: AssetType,
        asset_out: AssetType,
        amount: int,
        is_exact_in: bool,
        now: int,
        strict_mode: bool = False
    ) -> SwapOutcome:
        """DEBT ↔ LEVERAGE 스왑

        수수료는 입력 자산에 부과됩니다 (exact in: 곡선 전에 차감, exact out: 입력에 가산).
        edge 에서 멈춘 경우 partial=True 와 함께 체결된 부분만 반환합니다.
        """
        if asset_in == asset_out:
            raise UnsupportedAsset(f"같은 자산끼리는 스왑할 수 없습니다: {asset_in!r}")
        if {asset_in, asset_out} != SWAPPABLE_ASSETS:
            raise UnsupportedAsset(f"DEBT ↔ LEVERAGE 만 스왑할 수 있습니다: {asset_in!r} -> {asset_out!r}")

        snapshot = self._snapshot(market_id, market_config, base_token_supply, now, strict_mode)
        edge_low, edge_high = self.engine_config.edge_low, self.engine_config.edge_high
        fee_rate = market_config.swap_fee

        if is_exact_in:
            fee = mul_div_rounding_up(amount, fee_rate, FEE_DENOMINATOR)
            step = compute_swap(
                snapshot.liquidity, snapshot.sqrt_price, edge_low, edge_high,
                asset_in, amount - fee, True
            )
            partial = step.amount_filled < amount - fee
            if partial:
                fee = mul_div_rounding_up(step.amount_filled, fee_rate, FEE_DENOMINATOR - fee_rate)
            amount_in = step.amount_filled + fee
            amount_out = step.amount_calculated
        else:
            step = compute_swap(
                snapshot.liquidity, snapshot.sqrt_price, edge_low, edge_high,
                asset_out, amount, False
            )
            partial = step.amount_filled < amount
            amount_in = mul_div_rounding_up(step.amount_calculated, FEE_DENOMINATOR, FEE_DENOMINATOR - fee_rate)
            fee = amount_in - step.amount_calculated
            amount_out = step.amount_filled

        self._check_strict(step.next_price, strict_mode)
        self._commit(market_id, step.next_price, snapshot)

        if partial:
            logger.info("Swap limited by range: market=%s filled=%d", market_id, step.amount_filled)

        return SwapOutcome(
            amount_in=amount_in,
            amount_out=amount_out,
            fee=fee,
            sqrt_price=step.next_price,
            under_collateralized=self._is_under_collateralized(step.next_price),
            partial=partial,
        )

    # ------------------------------------------------------------------
    # 내부 함수
    # ------------------------------------------------------------------

    def _snapshot(
        self,
        market_id: str,
        market_config: MarketConfig,
        base_token_supply: int,
        now: int,
        strict_mode: bool
    ) -> LexFullState:
        return self.get_full_state(market_id, market_config, base_token_supply, now, strict_mode)

    def _is_under_collateralized(self, sqrt_price_x96: int) -> bool:
        return sqrt_price_x96 >= self.engine_config.lim_high

    def _check_strict(self, next_price: int, strict_mode: bool) -> None:
        """strict 모드 연산은 결과 가격이 lim_max 에 닿을 수 없음"""
        if strict_mode and next_price >= self.engine_config.lim_max:
            raise UnderCollateralized(
                f"결과 가격이 최대 한도를 넘습니다: {next_price} >= {self.engine_config.lim_max}"
            )

    def _commit(self, market_id: str, next_price: int, snapshot: LexFullState) -> None:
        """결과 가격과 수렴된 notional price 를 한 번에 저장"""
        self._markets[market_id] = MarketState(
            sqrt_price=next_price,
            debt_notional_price=snapshot.debt_notional_price,
            last_update=snapshot.timestamp,
        )
        logger.info(
            "Market committed: %s sqrt_price=%d notional=%d",
            market_id, next_price, snapshot.debt_notional_price
        )
