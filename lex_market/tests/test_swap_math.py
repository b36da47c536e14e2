"""
Swap Math 테스트

DEBT ↔ LEVERAGE 단일 구간 스왑 계산을 테스트합니다.
"""

import pytest

from ..math.swap_math import compute_swap
from ..constants import Q96
from ..data.types import AssetType
from ..errors import InvalidRange, UnsupportedAsset, ZeroLiquidity
from .conftest import EDGE_HIGH, EDGE_LOW

LIQUIDITY = 10**24


def swap(asset, amount, is_exact_in, liquidity=LIQUIDITY, sqrt_price=Q96):
    return compute_swap(liquidity, sqrt_price, EDGE_LOW, EDGE_HIGH, asset, amount, is_exact_in)


class TestSwapDirection:
    """스왑 방향과 가격 이동 테스트"""

    def test_debt_in_lowers_price(self):
        step = swap(AssetType.DEBT, 10**21, True)
        assert step.next_price < Q96
        assert step.amount_filled == 10**21
        assert 0 < step.amount_calculated < 10**21

    def test_leverage_in_raises_price(self):
        step = swap(AssetType.LEVERAGE, 10**21, True)
        assert step.next_price > Q96
        assert step.amount_filled == 10**21
        assert 0 < step.amount_calculated < 10**21

    def test_debt_out_raises_price(self):
        step = swap(AssetType.DEBT, 10**21, False)
        assert step.next_price > Q96
        assert step.amount_filled == 10**21
        assert step.amount_calculated > 10**21

    def test_leverage_out_lowers_price(self):
        step = swap(AssetType.LEVERAGE, 10**21, False)
        assert step.next_price < Q96
        assert step.amount_calculated > 10**21


class TestSwapRounding:
    """반올림 방향 테스트 (풀에 유리하게)"""

    def test_exact_in_then_exact_out(self):
        """par 에서 exact in 으로 받은 수량을 exact out 으로 요청하면 입력과 1 단위 이내"""
        for amount_in in [10**21, 10**21 + 7, 999999]:
            first = swap(AssetType.DEBT, amount_in, True)
            second = swap(AssetType.LEVERAGE, first.amount_calculated, False)
            assert amount_in - 1 <= second.amount_calculated <= amount_in

    def test_leverage_exact_in_then_exact_out(self):
        for amount_in in [10**21, 10**21 + 7, 999999]:
            first = swap(AssetType.LEVERAGE, amount_in, True)
            second = swap(AssetType.DEBT, first.amount_calculated, False)
            assert amount_in - 1 <= second.amount_calculated <= amount_in

    @pytest.mark.parametrize("sqrt_price", [Q96 * 3 // 5, Q96 * 3 // 4, Q96 * 5 // 4, Q96 * 3 // 2])
    @pytest.mark.parametrize("asset_in,asset_out", [
        (AssetType.DEBT, AssetType.LEVERAGE),
        (AssetType.LEVERAGE, AssetType.DEBT),
    ])
    def test_round_trip_brackets_input(self, sqrt_price, asset_in, asset_out):
        """받은 수량 Y 에 대해 exact out(Y) <= 입력 <= exact out(Y + 1)

        par 밖에서는 출력 1 단위가 가격 비율만큼의 입력에 해당하므로
        exact out(Y) 와 입력의 차이는 그 비율까지 벌어질 수 있습니다.
        """
        for amount_in in [999999, 10**21 + 7]:
            received = swap(asset_in, amount_in, True, sqrt_price=sqrt_price).amount_calculated
            lower = swap(asset_out, received, False, sqrt_price=sqrt_price).amount_calculated
            upper = swap(asset_out, received + 1, False, sqrt_price=sqrt_price).amount_calculated
            assert lower <= amount_in <= upper


class TestSwapEdges:
    """edge 도달 시 부분 체결 테스트"""

    def test_debt_in_stops_at_edge_low(self):
        """edge_low 까지 넣을 수 있는 DEBT 는 L * (1/el - 1/s) = L"""
        step = swap(AssetType.DEBT, 10**30, True)
        assert step.next_price == EDGE_LOW
        assert step.amount_filled == LIQUIDITY
        assert step.amount_calculated == LIQUIDITY // 2

    def test_leverage_out_stops_at_edge_low(self):
        step = swap(AssetType.LEVERAGE, 10**30, False)
        assert step.next_price == EDGE_LOW
        assert step.amount_filled == LIQUIDITY // 2
        assert step.amount_calculated == LIQUIDITY

    def test_leverage_in_stops_at_edge_high(self):
        step = swap(AssetType.LEVERAGE, 10**30, True)
        assert step.next_price == EDGE_HIGH
        assert step.amount_filled == LIQUIDITY
        assert step.amount_calculated == LIQUIDITY // 2

    def test_at_edge_nothing_to_fill(self):
        step = swap(AssetType.DEBT, 10**18, True, sqrt_price=EDGE_LOW)
        assert step.amount_filled == 0
        assert step.amount_calculated == 0
        assert step.next_price == EDGE_LOW


class TestSwapErrors:
    """예외 케이스 테스트"""

    def test_zero_amount(self):
        step = swap(AssetType.DEBT, 0, True)
        assert tuple(step) == (0, Q96, 0)

    def test_base_unsupported(self):
        with pytest.raises(UnsupportedAsset):
            swap(AssetType.BASE, 10**18, True)

    def test_zero_liquidity(self):
        with pytest.raises(ZeroLiquidity):
            swap(AssetType.DEBT, 10**18, True, liquidity=0)

    def test_price_out_of_range(self):
        with pytest.raises(InvalidRange):
            swap(AssetType.DEBT, 10**18, True, sqrt_price=EDGE_HIGH + 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
