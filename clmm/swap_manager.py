"""Swap execution across initialized ticks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .errors import DexError, ErrorCode
from .fixed_point import (
    PROTOCOL_FEE_RATE_MUL_VALUE,
    Q64_RESOLUTION,
    U64_MAX,
    U128_MAX,
    add_liquidity_delta,
    wrapping_add_u64,
)
from .pool_manager import next_pool_reward_infos
from .state import Pool, PoolRewardInfo, PriceCurve, Tick, TickSequence, TickUpdate
from .tick_manager import next_tick_cross_update

logger = logging.getLogger(__name__)


@dataclass
class PostSwapUpdate:
    """Pool state and token amounts resulting from a swap."""

    amount_a: int
    amount_b: int
    next_liquidity: int
    next_tick_index: int
    next_sqrt_price: int
    next_fee_growth_global: int
    next_reward_infos: list[PoolRewardInfo]
    next_protocol_fee: int
    fee: int


def _sub_u64(a: int, b: int, code: ErrorCode) -> int:
    result = a - b
    if result < 0:
        raise DexError(code)
    return result


def _add_u64(a: int, b: int, code: ErrorCode) -> int:
    result = a + b
    if result > U64_MAX:
        raise DexError(code)
    return result


def swap(
    pool: Pool,
    tick_sequence: TickSequence,
    amount: int,
    sqrt_price_limit: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
    timestamp: int,
    curve: PriceCurve,
) -> PostSwapUpdate:
    """Swap ``amount`` through the pool until it is used up or the limit is hit.

    Crossed ticks are updated in ``tick_sequence``; pool state is returned, not written.
    """
    if not curve.min_sqrt_price <= sqrt_price_limit <= curve.max_sqrt_price:
        raise DexError(ErrorCode.SqrtPriceOutOfBounds)
    if (a_to_b and sqrt_price_limit > pool.sqrt_price) or (
        not a_to_b and sqrt_price_limit < pool.sqrt_price
    ):
        raise DexError(ErrorCode.InvalidSqrtPriceLimitDirection)
    if amount == 0:
        raise DexError(ErrorCode.ZeroTradableAmount)

    tick_spacing = pool.tick_spacing
    next_reward_infos = next_pool_reward_infos(pool, timestamp)

    amount_remaining = amount
    amount_calculated = 0
    curr_sqrt_price = pool.sqrt_price
    curr_tick_index = pool.tick_current_index
    curr_liquidity = pool.liquidity
    fee = 0
    curr_protocol_fee = 0
    curr_array_index = 0
    curr_fee_growth_global_input = (
        pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b
    )

    while amount_remaining > 0 and sqrt_price_limit != curr_sqrt_price:
        next_array_index, next_tick_index = tick_sequence.get_next_initialized_tick_index(
            curr_tick_index, tick_spacing, a_to_b, curr_array_index
        )
        next_tick_sqrt_price, sqrt_price_target = get_next_sqrt_prices(
            next_tick_index, sqrt_price_limit, a_to_b, curve
        )
        step = curve.compute_swap(
            amount_remaining,
            pool.fee_rate,
            curr_liquidity,
            curr_sqrt_price,
            sqrt_price_target,
            amount_specified_is_input,
            a_to_b,
        )

        if amount_specified_is_input:
            amount_remaining = _sub_u64(
                amount_remaining, step.amount_in, ErrorCode.AmountRemainingOverflow
            )
            amount_remaining = _sub_u64(
                amount_remaining, step.fee_amount, ErrorCode.AmountRemainingOverflow
            )
            amount_calculated = _add_u64(
                amount_calculated, step.amount_out, ErrorCode.AmountCalcOverflow
            )
        else:
            amount_remaining = _sub_u64(
                amount_remaining, step.amount_out, ErrorCode.AmountRemainingOverflow
            )
            amount_calculated = _add_u64(
                amount_calculated, step.amount_in, ErrorCode.AmountCalcOverflow
            )
            amount_calculated = _add_u64(
                amount_calculated, step.fee_amount, ErrorCode.AmountCalcOverflow
            )

        curr_protocol_fee, curr_fee_growth_global_input = calculate_fees(
            step.fee_amount,
            pool.protocol_fee_rate,
            curr_liquidity,
            curr_protocol_fee,
            curr_fee_growth_global_input,
        )

        if step.next_price == next_tick_sqrt_price:
            try:
                next_tick = tick_sequence.get_tick(next_array_index, next_tick_index, tick_spacing)
            except DexError:
                next_tick = None

            if next_tick is not None and next_tick.initialized:
                if a_to_b:
                    fee_growth_global_a = curr_fee_growth_global_input
                    fee_growth_global_b = pool.fee_growth_global_b
                else:
                    fee_growth_global_a = pool.fee_growth_global_a
                    fee_growth_global_b = curr_fee_growth_global_input

                update, curr_liquidity = calculate_update(
                    next_tick,
                    a_to_b,
                    curr_liquidity,
                    fee_growth_global_a,
                    fee_growth_global_b,
                    next_reward_infos,
                )
                tick_sequence.update_tick(next_array_index, next_tick_index, tick_spacing, update)

            tick_offset = tick_sequence.get_tick_offset(
                next_array_index, next_tick_index, tick_spacing
            )
            # Move to the next array when leaving the current one at its edge.
            at_edge = (a_to_b and tick_offset == 0) or (
                not a_to_b and tick_offset == tick_sequence.tick_array_size - 1
            )
            curr_array_index = next_array_index + 1 if at_edge else next_array_index

            # The search is inclusive of the current tick going left, so step past it.
            curr_tick_index = next_tick_index - 1 if a_to_b else next_tick_index
        elif step.next_price != curr_sqrt_price:
            curr_tick_index = curve.tick_index_from_sqrt_price(step.next_price)

        curr_sqrt_price = step.next_price
        fee = step.fee_amount

    swapped = _sub_u64(amount, amount_remaining, ErrorCode.OverflowOrConversion)
    if a_to_b == amount_specified_is_input:
        amount_a, amount_b = swapped, amount_calculated
    else:
        amount_a, amount_b = amount_calculated, swapped

    fee_growth_before = pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b
    fee_growth = curr_fee_growth_global_input - fee_growth_before
    if fee_growth < 0:
        raise DexError(ErrorCode.OverflowOrConversion)
    logger.debug("fee_growth: %d", fee_growth)

    return PostSwapUpdate(
        amount_a=amount_a,
        amount_b=amount_b,
        next_liquidity=curr_liquidity,
        next_tick_index=curr_tick_index,
        next_sqrt_price=curr_sqrt_price,
        next_fee_growth_global=curr_fee_growth_global_input,
        next_reward_infos=next_reward_infos,
        next_protocol_fee=curr_protocol_fee,
        fee=fee,
    )


def calculate_fees(
    fee_amount: int,
    protocol_fee_rate: int,
    curr_liquidity: int,
    curr_protocol_fee: int,
    curr_fee_growth_global_input: int,
) -> tuple[int, int]:
    """Split a step's fee into protocol fee and per-liquidity fee growth."""
    next_protocol_fee = curr_protocol_fee
    next_fee_growth = curr_fee_growth_global_input
    global_fee = fee_amount
    if protocol_fee_rate > 0:
        delta = calculate_protocol_fee(global_fee, protocol_fee_rate)
        global_fee -= delta
        if global_fee < 0:
            raise DexError(ErrorCode.OverflowOrConversion)
        next_protocol_fee = wrapping_add_u64(next_protocol_fee, delta)

    if curr_liquidity > 0:
        next_fee_growth += (global_fee << Q64_RESOLUTION) // curr_liquidity
        if next_fee_growth > U128_MAX:
            raise DexError(ErrorCode.OverflowOrConversion)
    return next_protocol_fee, next_fee_growth


def calculate_protocol_fee(global_fee: int, protocol_fee_rate: int) -> int:
    """Protocol share of ``global_fee`` at a rate in basis points."""
    product = global_fee * protocol_fee_rate
    if product > U128_MAX:
        raise DexError(ErrorCode.OverflowOrConversion)
    protocol_fee = product // PROTOCOL_FEE_RATE_MUL_VALUE
    if protocol_fee > U64_MAX:
        raise DexError(ErrorCode.OverflowOrConversion)
    return protocol_fee


def calculate_update(
    tick: Tick,
    a_to_b: bool,
    liquidity: int,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
    reward_infos: Sequence[PoolRewardInfo],
) -> tuple[TickUpdate, int]:
    """Tick update and new active liquidity after crossing ``tick``."""
    signed_liquidity_net = -tick.liquidity_net if a_to_b else tick.liquidity_net
    update = next_tick_cross_update(tick, fee_growth_global_a, fee_growth_global_b, reward_infos)
    return update, add_liquidity_delta(liquidity, signed_liquidity_net)


def get_next_sqrt_prices(
    next_tick_index: int, sqrt_price_limit: int, a_to_b: bool, curve: PriceCurve
) -> tuple[int, int]:
    """Price at the next tick, and the price the step should aim for."""
    next_tick_price = curve.sqrt_price_from_tick_index(next_tick_index)
    if a_to_b:
        target = max(sqrt_price_limit, next_tick_price)
    else:
        target = min(sqrt_price_limit, next_tick_price)
    return next_tick_price, target