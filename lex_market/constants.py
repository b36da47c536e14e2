"""
LEX 상수 정의

고정소수점 연산과 곡선 경계를 위한 상수들:
- Q96: sqrt price 인코딩에 사용 (2^96)
- FEE_DENOMINATOR: 스왑 수수료 분모 (1e6, 100 = 1 bps)
- MIN/MAX_SQRT_RATIO: 허용되는 sqrt price 범위
"""

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q192: int = 2 ** 192

# 액면가(par): sqrt price = 1.0
PAR_SQRT_PRICE: int = Q96
PAR_NOTIONAL_PRICE: int = Q96

# 스왑 수수료 (hundredths of a bip)
# 500 = 0.05%, 3000 = 0.30%, 10000 = 1.00%
FEE_DENOMINATOR: int = 1_000_000

# sqrt price 경계 (Uniswap V3 TickMath 와 동일)
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# 정수 범위
UINT128_MAX: int = 2 ** 128 - 1
UINT256_MAX: int = 2 ** 256 - 1
