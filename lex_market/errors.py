"""
LEX 에러 정의

모든 에러는 위반한 연산의 호출자에게 동기적으로 전달되며
엔진 내부에서 재시도하지 않습니다.
"""


class LexError(Exception):
    """LEX 엔진 에러의 기본 클래스"""


class InvalidRange(LexError, ValueError):
    """가격이 경계를 벗어났거나 경계 순서가 잘못된 경우"""


class ArithmeticOverflow(LexError, ArithmeticError):
    """고정소수점 값이 표현 가능한 범위를 벗어난 경우"""


class ZeroLiquidity(LexError):
    """유동성이 0이거나, 0이 아니어야 할 리저브가 0이 되는 경우"""


class UnsupportedAsset(LexError, ValueError):
    """지원하지 않는 자산 타입이거나 상대 자산과 동일한 경우"""


class UnderCollateralized(LexError):
    """strict 모드에서 소프트 한도를 넘은 상태로 연산이 거부된 경우"""


class UnknownMarket(LexError, KeyError):
    """등록되지 않은 market id"""


class MarketAlreadyExists(LexError):
    """이미 생성된 market id"""


class StaleQuote(LexError):
    """오라클 가격이 허용된 최대 경과 시간보다 오래된 경우"""
