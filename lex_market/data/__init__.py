"""
Data layer for LEX

설정, 영속 상태, 파생 상태 타입 정의
"""

from .types import (
    AssetType,
    EngineConfig,
    MarketConfig,
    MarketState,
    LexFullState,
    MintResult,
    RedeemResult,
    SwapOutcome,
)
