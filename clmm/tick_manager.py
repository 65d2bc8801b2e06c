"""State transitions for individual ticks and growth accounting between ticks."""

from __future__ import annotations

from typing import Sequence

from .errors import DexError, ErrorCode
from .fixed_point import I128_MAX, I128_MIN, add_liquidity_delta, wrapping_sub_u128
from .state import NUM_REWARDS, PoolRewardInfo, Tick, TickUpdate, to_reward_growths


def next_tick_cross_update(
    tick: Tick,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
    reward_infos: Sequence[PoolRewardInfo],
) -> TickUpdate:
    """Flip the tick's outside growth values as the price crosses it."""
    update = TickUpdate.from_tick(tick)
    update.fee_growth_outside_a = wrapping_sub_u128(fee_growth_global_a, tick.fee_growth_outside_a)
    update.fee_growth_outside_b = wrapping_sub_u128(fee_growth_global_b, tick.fee_growth_outside_b)

    if len(reward_infos) < NUM_REWARDS:
        raise DexError(ErrorCode.IndexOutOfBounds)

    for i, reward_info in enumerate(reward_infos[:NUM_REWARDS]):
        if not reward_info.initialized():
            continue
        if i < len(update.reward_growths_outside):
            update.reward_growths_outside[i] = wrapping_sub_u128(
                reward_info.growth_global_x64, update.reward_growths_outside[i]
            )
    return update


def next_tick_modify_liquidity_update(
    tick: Tick,
    tick_index: int,
    tick_current_index: int,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
    reward_infos: Sequence[PoolRewardInfo],
    liquidity_delta: int,
    is_upper_tick: bool,
) -> TickUpdate:
    """Compute the tick's state after a position bounded by it changes liquidity."""
    if liquidity_delta == 0:
        return TickUpdate.from_tick(tick)

    liquidity_gross = add_liquidity_delta(tick.liquidity_gross, liquidity_delta)

    # Removing the last liquidity leaves the tick uninitialized.
    if liquidity_gross == 0:
        return TickUpdate()

    if tick.liquidity_gross == 0:
        # By convention, all prior growth happened below the tick.
        if tick_current_index >= tick_index:
            fee_growth_outside_a = fee_growth_global_a
            fee_growth_outside_b = fee_growth_global_b
            reward_growths_outside = to_reward_growths(reward_infos)
        else:
            fee_growth_outside_a = 0
            fee_growth_outside_b = 0
            reward_growths_outside = [0] * NUM_REWARDS
    else:
        fee_growth_outside_a = tick.fee_growth_outside_a
        fee_growth_outside_b = tick.fee_growth_outside_b
        reward_growths_outside = list(tick.reward_growths_outside)

    if is_upper_tick:
        liquidity_net = tick.liquidity_net - liquidity_delta
    else:
        liquidity_net = tick.liquidity_net + liquidity_delta
    if not I128_MIN <= liquidity_net <= I128_MAX:
        raise DexError(ErrorCode.LiquidityNetError)

    return TickUpdate(
        initialized=True,
        liquidity_net=liquidity_net,
        liquidity_gross=liquidity_gross,
        fee_growth_outside_a=fee_growth_outside_a,
        fee_growth_outside_b=fee_growth_outside_b,
        reward_growths_outside=reward_growths_outside,
    )


def next_fee_growths_inside(
    tick_current_index: int,
    tick_lower: Tick,
    tick_lower_index: int,
    tick_upper: Tick,
    tick_upper_index: int,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
) -> tuple[int, int]:
    """Fee growth of tokens A and B accumulated between the two ticks."""
    # An uninitialized lower tick counts all growth as having happened below it.
    if not tick_lower.initialized:
        below_a, below_b = fee_growth_global_a, fee_growth_global_b
    elif tick_current_index < tick_lower_index:
        below_a = wrapping_sub_u128(fee_growth_global_a, tick_lower.fee_growth_outside_a)
        below_b = wrapping_sub_u128(fee_growth_global_b, tick_lower.fee_growth_outside_b)
    else:
        below_a, below_b = tick_lower.fee_growth_outside_a, tick_lower.fee_growth_outside_b

    # An uninitialized upper tick counts no growth as having happened above it.
    if not tick_upper.initialized:
        above_a, above_b = 0, 0
    elif tick_current_index < tick_upper_index:
        above_a, above_b = tick_upper.fee_growth_outside_a, tick_upper.fee_growth_outside_b
    else:
        above_a = wrapping_sub_u128(fee_growth_global_a, tick_upper.fee_growth_outside_a)
        above_b = wrapping_sub_u128(fee_growth_global_b, tick_upper.fee_growth_outside_b)

    return (
        wrapping_sub_u128(wrapping_sub_u128(fee_growth_global_a, below_a), above_a),
        wrapping_sub_u128(wrapping_sub_u128(fee_growth_global_b, below_b), above_b),
    )


def _outside(growths: Sequence[int], i: int) -> int:
    return growths[i] if i < len(growths) else 0


def next_reward_growths_inside(
    tick_current_index: int,
    tick_lower: Tick,
    tick_lower_index: int,
    tick_upper: Tick,
    tick_upper_index: int,
    reward_infos: Sequence[PoolRewardInfo],
) -> list[int]:
    """Reward growth between the two ticks; uninitialized rewards yield zero."""
    inside = [0] * NUM_REWARDS
    for i, reward_info in enumerate(reward_infos[:NUM_REWARDS]):
        if not reward_info.initialized():
            continue
        growth_global = reward_info.growth_global_x64
        lower_outside = _outside(tick_lower.reward_growths_outside, i)
        upper_outside = _outside(tick_upper.reward_growths_outside, i)

        if not tick_lower.initialized:
            below = growth_global
        elif tick_current_index < tick_lower_index:
            below = wrapping_sub_u128(growth_global, lower_outside)
        else:
            below = lower_outside

        if not tick_upper.initialized:
            above = 0
        elif tick_current_index < tick_upper_index:
            above = upper_outside
        else:
            above = wrapping_sub_u128(growth_global, upper_outside)

        inside[i] = wrapping_sub_u128(wrapping_sub_u128(growth_global, below), above)
    return inside