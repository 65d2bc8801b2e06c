"""Checked and wrapping integer arithmetic for Q64.64 fixed-point values."""

from __future__ import annotations

from .errors import DexError, ErrorCode

Q64_RESOLUTION = 64
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1

# Protocol fee rates are expressed in basis points.
PROTOCOL_FEE_RATE_MUL_VALUE = 10_000


def add_liquidity_delta(liquidity: int, delta: int) -> int:
    """Apply a signed delta to an unsigned 128-bit liquidity value."""
    if delta == 0:
        return liquidity
    if delta > 0:
        result = liquidity + delta
        if result > U128_MAX:
            raise DexError(ErrorCode.LiquidityOverflow)
        return result
    result = liquidity + delta
    if result < 0:
        raise DexError(ErrorCode.LiquidityUnderflow)
    return result


def checked_mul_div(n0: int, n1: int, d: int) -> int:
    """Return ``n0 * n1 // d``, failing if the product exceeds 128 bits."""
    if d == 0:
        raise DexError(ErrorCode.DivideByZero)
    product = n0 * n1
    if product > U128_MAX:
        raise DexError(ErrorCode.MulDivOverflow)
    return product // d


def checked_mul_shift_right(n0: int, n1: int) -> int:
    """Return ``(n0 * n1) >> 64`` as a 64-bit value, failing on 128-bit overflow."""
    if n0 == 0 or n1 == 0:
        return 0
    product = n0 * n1
    if product > U128_MAX:
        raise DexError(ErrorCode.MultiplicationShiftRightOverflow)
    return product >> Q64_RESOLUTION


def wrapping_add_u128(a: int, b: int) -> int:
    """Add modulo 2**128."""
    return (a + b) & U128_MAX


def wrapping_sub_u128(a: int, b: int) -> int:
    """Subtract modulo 2**128."""
    return (a - b) & U128_MAX


def wrapping_add_u64(a: int, b: int) -> int:
    """Add modulo 2**64."""
    return (a + b) & U64_MAX