"""
Full Math - 범위 검사가 포함된 정수 연산

파이썬 정수는 크기 제한이 없으므로 온체인과 같은 범위를 명시적으로 검사합니다.
중간 곱은 512비트까지 허용하고, 결과는 uint256 안에 있어야 합니다.

References:
- Uniswap V3 Core: contracts/libraries/FullMath.sol
"""

from ..constants import UINT128_MAX, UINT256_MAX
from ..errors import ArithmeticOverflow


def check_uint(value: int, bound: int = UINT256_MAX, name: str = "value") -> int:
    """0 <= value <= bound 인지 검사

    Raises:
        ArithmeticOverflow: 음수이거나 bound를 넘는 경우
    """
    if value < 0 or value > bound:
        raise ArithmeticOverflow(f"{name} 범위 초과: {value}")
    return value


def check_amount(value: int, name: str = "amount") -> int:
    """리저브/유동성 수량은 uint128 범위"""
    return check_uint(value, UINT128_MAX, name)


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator)

    Raises:
        ArithmeticOverflow: denominator가 0이거나 결과가 uint256을 넘는 경우
    """
    if denominator <= 0:
        raise ArithmeticOverflow("0으로 나눌 수 없습니다")
    return check_uint((a * b) // denominator, name="mul_div")


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator)"""
    result = mul_div(a, b, denominator)
    if (a * b) % denominator > 0:
        result = check_uint(result + 1, name="mul_div")
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """ceil(numerator / denominator)"""
    if denominator <= 0:
        raise ArithmeticOverflow("0으로 나눌 수 없습니다")
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result
