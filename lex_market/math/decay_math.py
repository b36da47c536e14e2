"""
Decay Math - 반감기 기반 지수 수렴

debt notional price 를 목표값으로 천천히 수렴시키는 고정소수점 2^(-x) 근사.

핵심 공식:
    n' = target + (n - target) * 2^(-x)
    x  = elapsed / half_life + elapsed * rate_bias / ln 2

반감기의 정수배(x 가 정수)에서는 비트 시프트만 사용하므로 정확합니다.
"""

import math
from typing import List

from ..constants import Q96
from ..errors import InvalidRange
from .full_math import check_uint

# 소수부 근사에 사용하는 비트 수 (하위 비트는 무시, 상대 오차 < 2^-64)
FRACTION_BITS: int = 64


def _ln2_x96() -> int:
    """ln 2 = Σ 1 / (k * 2^k), 2^352 스케일로 합산 후 Q96 으로 변환"""
    acc = 0
    for k in range(1, 257):
        acc += (1 << 352) // (k << k)
    return acc >> 256


def _exp2_neg_table() -> List[int]:
    """table[i] = 2^(-2^-(i+1)) * Q96

    2^(-1/2) 부터 시작해 제곱근을 반복합니다.
    """
    table = [math.isqrt(Q96 * Q96 // 2)]
    for _ in range(FRACTION_BITS - 1):
        table.append(math.isqrt(table[-1] * Q96))
    return table


LN2_X96: int = _ln2_x96()
_EXP2_NEG_TABLE: List[int] = _exp2_neg_table()


def exp2_neg(x_x96: int) -> int:
    """2^(-x) (Q96), x >= 0 (Q96)

    정수부는 시프트, 소수부는 비트별 상수 곱으로 계산합니다.
    """
    check_uint(x_x96, name="exponent")

    whole = x_x96 >> 96
    if whole > 96:
        return 0

    fraction = x_x96 & (Q96 - 1)
    result = Q96
    for i, factor in enumerate(_EXP2_NEG_TABLE):
        if fraction & (1 << (95 - i)):
            result = result * factor >> 96
    return result >> whole


def decay_exponent(elapsed: int, half_life: int, rate_bias: int = 0) -> int:
    """경과 시간을 반감기 단위 지수로 변환 (Q96, 0 이상으로 clamp)

    Args:
        elapsed: 경과 시간 (초)
        half_life: 반감기 (초)
        rate_bias: 연속복리 rate bias (초당, Q96). 양수면 수렴이 빨라짐
    """
    if elapsed < 0:
        raise InvalidRange(f"경과 시간은 음수일 수 없습니다: {elapsed}")
    if half_life <= 0:
        raise InvalidRange(f"반감기는 양수여야 합니다: {half_life}")

    exponent = elapsed * Q96 // half_life + elapsed * rate_bias * Q96 // LN2_X96
    return max(exponent, 0)


def decay_factor(elapsed: int, half_life: int, rate_bias: int = 0) -> int:
    """남은 차이의 비율 2^(-x) (Q96)"""
    return exp2_neg(decay_exponent(elapsed, half_life, rate_bias))


def converge(
    last_value: int,
    target_value: int,
    elapsed: int,
    half_life: int,
    rate_bias: int = 0
) -> int:
    """last_value 를 target_value 쪽으로 경과 시간만큼 수렴

    Returns:
        target + (last - target) * 2^(-x)
    """
    factor = decay_factor(elapsed, half_life, rate_bias)
    return target_value + (last_value - target_value) * factor // Q96
