"""
Liquidity Math 테스트

리저브 ↔ 유동성 변환과 mint / redeem 계산을 테스트합니다.
"""

import pytest

from ..math.liquidity_math import (
    MINT_ROUNDING_BUFFER,
    compute_liquidity,
    compute_mint,
    compute_redeem,
    get_liquidity_for_base,
    get_reserves_for_liquidity,
    get_sqrt_price_from_reserves,
    split_base,
)
from ..constants import Q96
from ..errors import ZeroLiquidity
from .conftest import EDGE_HIGH, EDGE_LOW

PRICES = [Q96 * 3 // 5, Q96 * 3 // 4, Q96, Q96 * 5 // 4, Q96 * 3 // 2, Q96 * 19 // 10]


class TestComputeLiquidity:
    """compute_liquidity, get_sqrt_price_from_reserves 테스트"""

    def test_par_reserves(self):
        """par 에서 (1000, 1000) 은 1999 로 인정되고 가격은 par 그대로"""
        assert compute_liquidity(EDGE_LOW, EDGE_HIGH, 1000, 1000) == 1999
        assert get_sqrt_price_from_reserves(EDGE_LOW, EDGE_HIGH, 1000, 1000) == (1999, Q96)
        assert compute_mint(Q96, EDGE_LOW, EDGE_HIGH, 1999) == (1000, 1000)

    def test_single_side_is_exact(self):
        """한쪽 리저브만 있으면 1 단위 보정이 결과를 줄이지 않음"""
        assert compute_liquidity(EDGE_LOW, EDGE_HIGH, 3000, 0) == 2000
        assert compute_liquidity(EDGE_LOW, EDGE_HIGH, 0, 3000) == 2000

    def test_only_leverage(self):
        """DEBT 리저브가 0이면 가격은 edge_high"""
        liquidity, sqrt_price = get_sqrt_price_from_reserves(EDGE_LOW, EDGE_HIGH, 3000, 0)
        assert liquidity == 2000
        assert sqrt_price == EDGE_HIGH

    def test_only_debt(self):
        """LEVERAGE 리저브가 0이면 가격은 edge_low"""
        liquidity, sqrt_price = get_sqrt_price_from_reserves(EDGE_LOW, EDGE_HIGH, 0, 3000)
        assert liquidity == 2000
        assert sqrt_price == EDGE_LOW

    def test_both_zero(self):
        with pytest.raises(ZeroLiquidity):
            compute_liquidity(EDGE_LOW, EDGE_HIGH, 0, 0)

    def test_price_recovered_from_reserves(self):
        """유동성에서 만든 리저브로 가격을 다시 구하면 원래 가격 근처"""
        liquidity = 10**24
        for sqrt_price in PRICES:
            z, a = get_reserves_for_liquidity(sqrt_price, EDGE_LOW, EDGE_HIGH, liquidity)
            _, recovered = get_sqrt_price_from_reserves(EDGE_LOW, EDGE_HIGH, z, a)
            assert abs(recovered - sqrt_price) < Q96 // 10**18


class TestMint:
    """compute_mint, get_liquidity_for_base 테스트"""

    def test_par_mint(self):
        assert compute_mint(Q96, EDGE_LOW, EDGE_HIGH, 2000) == (1000, 1000)

    def test_mint_round_trip_never_exceeds(self):
        """compute_mint 결과로 다시 계산한 유동성은 요청한 유동성을 넘지 않음

        par 밖에서는 각 리저브의 올림 1 단위가 가격에 따라 최대 약 3 단위의
        유동성에 해당하므로 하한은 L - 3 입니다.
        """
        for sqrt_price in PRICES:
            for liquidity in [1, 2, 999, 10**6, 10**18, 10**18 + 1, 12345678901234567890]:
                z, a = compute_mint(sqrt_price, EDGE_LOW, EDGE_HIGH, liquidity)
                recovered = compute_liquidity(EDGE_LOW, EDGE_HIGH, z, a)
                assert max(liquidity - 3, 0) <= recovered <= liquidity

    def test_mint_round_trip_at_par(self):
        """par 에서는 L - 1 <= L' <= L"""
        for liquidity in [1, 2, 3, 999, 1000, 2000, 10**18, 10**18 + 1, 12345678901234567891]:
            z, a = compute_mint(Q96, EDGE_LOW, EDGE_HIGH, liquidity)
            recovered = compute_liquidity(EDGE_LOW, EDGE_HIGH, z, a)
            assert liquidity - 1 <= recovered <= liquidity

    def test_round_trip_odd_liquidity(self):
        """올림으로 생긴 초과분이 유동성으로 인정되지 않음"""
        z, a = compute_mint(Q96, EDGE_LOW, EDGE_HIGH, 999)
        assert (z, a) == (500, 500)
        assert compute_liquidity(EDGE_LOW, EDGE_HIGH, z, a) == 999

        near_high = Q96 * 19 // 10
        z, a = compute_mint(near_high, EDGE_LOW, EDGE_HIGH, 10**18)
        assert compute_liquidity(EDGE_LOW, EDGE_HIGH, z, a) <= 10**18

    def test_mint_rounds_up(self):
        """mint 수량(올림)은 같은 유동성의 리저브(내림) 이상"""
        for sqrt_price in PRICES:
            up = compute_mint(sqrt_price, EDGE_LOW, EDGE_HIGH, 10**18 + 7)
            down = get_reserves_for_liquidity(sqrt_price, EDGE_LOW, EDGE_HIGH, 10**18 + 7)
            assert up[0] >= down[0]
            assert up[1] >= down[1]

    def test_liquidity_for_base(self):
        assert get_liquidity_for_base(Q96, EDGE_LOW, EDGE_HIGH, 2000 + MINT_ROUNDING_BUFFER) == 2000

    def test_liquidity_for_tiny_base(self):
        assert get_liquidity_for_base(Q96, EDGE_LOW, EDGE_HIGH, MINT_ROUNDING_BUFFER) == 0

    def test_minted_amounts_fit_in_base(self):
        """발행 수량의 합은 예치한 base 를 넘지 않음"""
        for sqrt_price in PRICES:
            for base in [3, 17, 10**6 + 1, 10**18, 987654321987654321]:
                liquidity = get_liquidity_for_base(sqrt_price, EDGE_LOW, EDGE_HIGH, base)
                z, a = compute_mint(sqrt_price, EDGE_LOW, EDGE_HIGH, liquidity)
                assert z + a <= base


class TestSplitBase:
    """split_base 테스트"""

    def test_par_split(self):
        assert split_base(Q96, EDGE_LOW, EDGE_HIGH, 2000) == (1000, 1000)

    def test_sum_is_preserved(self):
        for sqrt_price in PRICES:
            z, a = split_base(sqrt_price, EDGE_LOW, EDGE_HIGH, 10**18 + 1)
            assert z + a == 10**18 + 1

    def test_edges(self):
        assert split_base(EDGE_LOW, EDGE_LOW, EDGE_HIGH, 1000) == (0, 1000)
        assert split_base(EDGE_HIGH, EDGE_LOW, EDGE_HIGH, 1000) == (1000, 0)


class TestRedeem:
    """compute_redeem 테스트"""

    def test_proportional_redeem(self):
        """par 에서 (500, 500) 소각 → 유동성 1000, 가격 유지"""
        step = compute_redeem(2000, Q96, EDGE_LOW, EDGE_HIGH, 500, 500)
        assert step.liquidity_out == 1000
        assert step.leverage_used == 500
        assert step.debt_used == 500
        assert step.next_price == Q96

    def test_binding_side(self):
        """적은 쪽이 소각량을 결정하고 남는 쪽은 사용되지 않음"""
        step = compute_redeem(2000, Q96, EDGE_LOW, EDGE_HIGH, 500, 10**6)
        assert step.liquidity_out == 1000
        assert step.debt_used == 500

    def test_capped_at_liquidity(self):
        step = compute_redeem(2000, Q96, EDGE_LOW, EDGE_HIGH, 10**9, 10**9)
        assert step.liquidity_out == 2000
        assert step.leverage_used == 1000
        assert step.debt_used == 1000
        assert step.next_price == Q96

    def test_used_never_exceeds_offered(self):
        for sqrt_price in PRICES:
            step = compute_redeem(10**24, sqrt_price, EDGE_LOW, EDGE_HIGH, 10**20 + 3, 10**20 + 11)
            assert step.leverage_used <= 10**20 + 3
            assert step.debt_used <= 10**20 + 11
            assert EDGE_LOW <= step.next_price <= EDGE_HIGH

    def test_zero_liquidity(self):
        with pytest.raises(ZeroLiquidity):
            compute_redeem(0, Q96, EDGE_LOW, EDGE_HIGH, 500, 500)

    def test_nothing_to_burn(self):
        with pytest.raises(ZeroLiquidity):
            compute_redeem(2000, Q96, EDGE_LOW, EDGE_HIGH, 0, 500)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
