"""
Price Oracle - 외부 가격 오라클 인터페이스

엔진은 preview_quote(amount, base, quote) 만 사용합니다.
피드 검증(신뢰구간, 지수 범위, 업데이트 수수료)은 실제 오라클 어댑터의 몫이며,
여기서는 고정 환율 테이블 구현을 제공합니다.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from ..config import settings
from ..constants import Q96, Q192
from ..errors import StaleQuote, UnsupportedAsset
from ..math.full_math import check_amount, mul_div


class PriceOracle(ABC):
    """base 토큰 1단위당 quote 토큰 수량을 알려주는 오라클"""

    @abstractmethod
    def preview_quote(self, amount: int, base: str, quote: str) -> int:
        """amount 만큼의 base 를 quote 로 환산 (부수효과 없음)

        Raises:
            UnsupportedAsset: 지원하지 않는 토큰 쌍
            StaleQuote: 가격이 오래된 경우
        """


class StaticPriceOracle(PriceOracle):
    """고정 환율 오라클

    사용법:
        oracle = StaticPriceOracle(max_age=3600)
        oracle.set_rate("WETH", "USDC", rate_x96, updated_at=now)
        oracle.set_time(now)
        oracle.preview_quote(10**18, "WETH", "USDC")
    """

    def __init__(self, max_age: Optional[int] = None):
        """
        Args:
            max_age: 허용되는 최대 경과 시간 (초). None 이면 설정값 사용
        """
        self.max_age = settings.ORACLE_MAX_AGE if max_age is None else max_age
        self.now: Optional[int] = None
        self._rates: Dict[Tuple[str, str], Tuple[int, int]] = {}

    def set_rate(self, base: str, quote: str, rate_x96: int, updated_at: int) -> None:
        """base 1단위당 quote 수량 (Q96) 등록"""
        if rate_x96 <= 0:
            raise ValueError("환율은 양수여야 합니다")
        self._rates[(base, quote)] = (rate_x96, updated_at)

    def set_time(self, now: int) -> None:
        self.now = now

    def preview_quote(self, amount: int, base: str, quote: str) -> int:
        check_amount(amount)
        if base == quote:
            raise UnsupportedAsset(f"같은 토큰끼리는 환산할 수 없습니다: {base}")

        if (base, quote) in self._rates:
            rate_x96, updated_at = self._rates[(base, quote)]
        elif (quote, base) in self._rates:
            inverse_x96, updated_at = self._rates[(quote, base)]
            rate_x96 = Q192 // inverse_x96
        else:
            raise UnsupportedAsset(f"지원하지 않는 토큰 쌍: {base}/{quote}")

        if self.now is not None and self.now - updated_at > self.max_age:
            raise StaleQuote(
                f"{base}/{quote} 가격이 오래되었습니다: {self.now - updated_at}s > {self.max_age}s"
            )

        return mul_div(amount, rate_x96, Q96)
