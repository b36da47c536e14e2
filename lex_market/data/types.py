"""
LEX 데이터 타입 정의

엔진 설정, 마켓 설정, 영속 상태와 파생 상태를 정의.
모든 가격/수량 필드는 고정소수점 정밀도를 위해 int 타입 사용.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..constants import (
    FEE_DENOMINATOR,
    MAX_SQRT_RATIO,
    MIN_SQRT_RATIO,
    PAR_NOTIONAL_PRICE,
    PAR_SQRT_PRICE,
)
from ..errors import InvalidRange


class AssetType(Enum):
    """곡선이 다루는 세 가지 자산

    - BASE: 담보 자산 (DEBT + LEVERAGE)
    - DEBT: 안전 청구권 (A 리저브)
    - LEVERAGE: 레버리지 청구권 (Z 리저브)
    """
    BASE = "base"
    DEBT = "debt"
    LEVERAGE = "leverage"


@dataclass(frozen=True)
class EngineConfig:
    """엔진 전역 설정 (모든 마켓이 공유, 생성 후 불변)

    - edge_low / edge_high: 곡선의 수학적 한계 (한쪽 리저브가 0이 되는 지점)
    - lim_high: 이 가격 이상이면 under-collateralized 플래그
    - lim_max: strict 모드 연산이 넘을 수 없는 가격
    """
    edge_low: int
    edge_high: int
    lim_high: int
    lim_max: int

    def __post_init__(self):
        if not (MIN_SQRT_RATIO <= self.edge_low < self.edge_high <= MAX_SQRT_RATIO):
            raise InvalidRange(
                f"경계 순서가 잘못되었습니다: edge_low={self.edge_low}, edge_high={self.edge_high}"
            )
        if not (self.edge_low < self.lim_high <= self.lim_max <= self.edge_high):
            raise InvalidRange(
                f"한도는 경계 안에 있어야 합니다: lim_high={self.lim_high}, lim_max={self.lim_max}"
            )

    @property
    def contains_par(self) -> bool:
        return self.edge_low < PAR_SQRT_PRICE < self.edge_high

    @classmethod
    def from_prices(
        cls,
        edge_low_price: float,
        edge_high_price: float,
        lim_high_price: float,
        lim_max_price: float
    ) -> "EngineConfig":
        """Human-readable 가격으로 설정 생성 (price = sqrt_price^2)"""
        from ..math.sqrt_price_math import price_to_sqrt_price_x96

        return cls(
            edge_low=price_to_sqrt_price_x96(edge_low_price),
            edge_high=price_to_sqrt_price_x96(edge_high_price),
            lim_high=price_to_sqrt_price_x96(lim_high_price),
            lim_max=price_to_sqrt_price_x96(lim_max_price),
        )

    @classmethod
    def from_settings(cls, settings=None) -> "EngineConfig":
        if settings is None:
            from ..config import settings
        return cls.from_prices(
            settings.EDGE_LOW_PRICE,
            settings.EDGE_HIGH_PRICE,
            settings.LIM_HIGH_PRICE,
            settings.LIM_MAX_PRICE,
        )


class MarketConfig(BaseModel):
    """마켓 설정 (마켓 생성 후 불변)"""
    base_token: str = Field(..., description="Base token identity (symbol or address)", min_length=1)
    base_decimals: int = Field(default=18, description="Base token decimals", ge=0, le=36)
    swap_fee: int = Field(default=3000, description="Swap fee in hundredths of a bip", ge=0, lt=FEE_DENOMINATOR)
    debt_duration: int = Field(..., description="Debt notional half-life (seconds)", gt=0)
    rate_bias: int = Field(default=0, description="Continuously-compounded rate bias per second (Q96)")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "base_token": "WETH",
                "base_decimals": 18,
                "swap_fee": 3000,
                "debt_duration": 2592000,
                "rate_bias": 0
            }
        }

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "MarketConfig":
        if settings is None:
            from ..config import settings
        values = {
            "base_token": settings.BASE_TOKEN,
            "base_decimals": settings.BASE_DECIMALS,
            "swap_fee": settings.SWAP_FEE,
            "debt_duration": settings.DEBT_DURATION,
            "rate_bias": settings.rate_bias_x96(),
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class MarketState:
    """마켓별 영속 상태 (오케스트레이터만 갱신)"""
    sqrt_price: int  # 마지막 sqrtPriceX96
    debt_notional_price: int  # 마지막 debt notional price (Q96, par = 2^96)
    last_update: int  # Unix timestamp

    @classmethod
    def initial(cls, now: int) -> "MarketState":
        """액면가에서 시작하는 초기 상태"""
        return cls(
            sqrt_price=PAR_SQRT_PRICE,
            debt_notional_price=PAR_NOTIONAL_PRICE,
            last_update=now,
        )


@dataclass(frozen=True)
class LexFullState:
    """파생 상태 (매 조회마다 재계산, 저장하지 않음)"""
    sqrt_price: int  # 실제 공급량에서 다시 계산한 sqrtPriceX96
    liquidity: int  # 현재 유동성 (L)
    debt_reserve: int  # A 리저브 (base 단위)
    leverage_reserve: int  # Z 리저브 (base 단위)
    base_supply: int  # 마켓이 보유한 base 수량
    ltv: int  # Q96, [0, 1]
    under_collateralized: bool
    debt_price_discount: Optional[int]  # Q96, par에서 1.0 (DEBT 리저브가 0이면 None)
    debt_notional_price: int  # 수렴 후 notional price (Q96)
    leverage_price: int  # leverage 1단위의 base 가치 (Q96)
    timestamp: int


@dataclass(frozen=True)
class MintResult:
    liquidity: int
    debt_out: int
    leverage_out: int
    sqrt_price: int
    under_collateralized: bool


@dataclass(frozen=True)
class RedeemResult:
    liquidity: int
    debt_used: int
    leverage_used: int
    base_out: int
    sqrt_price: int
    under_collateralized: bool


@dataclass(frozen=True)
class SwapOutcome:
    amount_in: int  # 수수료 포함
    amount_out: int
    fee: int
    sqrt_price: int
    under_collateralized: bool
    partial: bool  # 경계에서 멈춰 일부만 체결된 경우
