"""Error codes raised by the pool state machinery."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Failure conditions; each member's value is its human-readable message."""

    InvalidTimestamp = "Timestamp should be convertible from i64 to u64"
    LiquidityZero = "Liquidity amount must be greater than zero"
    LiquidityTooHigh = "Liquidity amount must be less than i64::MAX"
    LiquidityOverflow = "Liquidity overflow"
    LiquidityUnderflow = "Liquidity underflow"
    LiquidityNetError = "Tick liquidity net underflowed or overflowed"
    MulDivOverflow = "Mul div overflow"
    MulDivInvalidInput = "Invalid div_u256 input"
    MultiplicationShiftRightOverflow = "Multiplication with shift right overflow"
    MultiplicationOverflow = "Multiplication overflow"
    DivideByZero = "Unable to divide by zero"
    IndexOutOfBounds = "Index is out of bounds"
    TickNotFound = "Tick-array does not contain the requested tick"
    SqrtPriceOutOfBounds = "Provided sqrt price out of bounds"
    InvalidSqrtPriceLimitDirection = "Provided sqrt price limit does not match the swap direction"
    ZeroTradableAmount = "There are no tradable amount to swap"
    AmountRemainingOverflow = "Amount remaining overflows"
    AmountCalcOverflow = "Amount calculated overflows"
    OverflowOrConversion = "Arithmetic overflow or failed integer conversion"
    InvalidTickArraySequence = "Invalid tick array sequence provided for instruction"
    TickArraySequenceInvalidIndex = "Swap tick array sequence index is out of bounds"
    TickArrayIndexOutofBounds = "Tick index is out of bounds of the tick array"
    InvalidTickSpacing = "Tick spacing cannot be zero"
    InvalidTickIndex = "Tick index is out of bounds, out of order or not a multiple of the spacing"
    TokenMaxExceeded = "Exceeded token max"
    TokenMinSubceeded = "Did not meet token min"
    InvalidRewardIndex = "Invalid reward index"

    @property
    def message(self) -> str:
        return self.value


class DexError(Exception):
    """An error carrying one :class:`ErrorCode`."""

    def __init__(self, code):
        if not isinstance(code, ErrorCode):
            raise TypeError(f"expected an ErrorCode, got {code!r}")
        self.code = code
        super().__init__(f"{code.name}: {code.message}")