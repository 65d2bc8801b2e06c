"""Position liquidity changes and the fee and reward accounting around them."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import DexError, ErrorCode
from .pool_manager import next_pool_liquidity, next_pool_reward_infos
from .position_manager import next_position_modify_liquidity_update
from .state import Pool, PoolRewardInfo, Position, PositionUpdate, PriceCurve, Tick, TickUpdate
from .tick_manager import (
    next_fee_growths_inside,
    next_reward_growths_inside,
    next_tick_modify_liquidity_update,
)


@dataclass
class ModifyLiquidityUpdate:
    """Every state change produced by modifying a position's liquidity."""

    pool_liquidity: int
    tick_lower_update: TickUpdate
    tick_upper_update: TickUpdate
    reward_infos: list[PoolRewardInfo]
    position_update: PositionUpdate


def calculate_modify_liquidity(
    pool: Pool,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    liquidity_delta: int,
    timestamp: int,
) -> ModifyLiquidityUpdate:
    """State after changing ``position``'s liquidity by ``liquidity_delta``.

    Fee and reward growths are brought up to date as well.
    """
    # Refreshing growths alone is meaningless for an empty position.
    if liquidity_delta == 0 and position.liquidity == 0:
        raise DexError(ErrorCode.LiquidityZero)

    next_reward_infos = next_pool_reward_infos(pool, timestamp)

    next_global_liquidity = next_pool_liquidity(
        pool, position.tick_upper_index, position.tick_lower_index, liquidity_delta
    )

    tick_lower_update = next_tick_modify_liquidity_update(
        tick_lower,
        position.tick_lower_index,
        pool.tick_current_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
        next_reward_infos,
        liquidity_delta,
        False,
    )
    tick_upper_update = next_tick_modify_liquidity_update(
        tick_upper,
        position.tick_upper_index,
        pool.tick_current_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
        next_reward_infos,
        liquidity_delta,
        True,
    )

    fee_growth_inside_a, fee_growth_inside_b = next_fee_growths_inside(
        pool.tick_current_index,
        tick_lower,
        position.tick_lower_index,
        tick_upper,
        position.tick_upper_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
    )
    reward_growths_inside = next_reward_growths_inside(
        pool.tick_current_index,
        tick_lower,
        position.tick_lower_index,
        tick_upper,
        position.tick_upper_index,
        next_reward_infos,
    )

    position_update = next_position_modify_liquidity_update(
        position,
        liquidity_delta,
        fee_growth_inside_a,
        fee_growth_inside_b,
        reward_growths_inside,
    )

    return ModifyLiquidityUpdate(
        pool_liquidity=next_global_liquidity,
        tick_lower_update=tick_lower_update,
        tick_upper_update=tick_upper_update,
        reward_infos=next_reward_infos,
        position_update=position_update,
    )


def calculate_fee_and_reward_growths(
    pool: Pool,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    timestamp: int,
) -> tuple[PositionUpdate, list[PoolRewardInfo]]:
    """Bring a position's fees and rewards up to date without changing liquidity."""
    update = calculate_modify_liquidity(pool, position, tick_lower, tick_upper, 0, timestamp)
    return update.position_update, update.reward_infos


def calculate_liquidity_token_deltas(
    current_tick_index: int,
    sqrt_price: int,
    position: Position,
    liquidity_delta: int,
    curve: PriceCurve,
) -> tuple[int, int]:
    """Token A and B amounts moved by changing ``position``'s liquidity.

    Deposits round up and withdrawals round down.
    """
    if liquidity_delta == 0:
        raise DexError(ErrorCode.LiquidityZero)

    liquidity = abs(liquidity_delta)
    round_up = liquidity_delta > 0
    lower_price = curve.sqrt_price_from_tick_index(position.tick_lower_index)
    upper_price = curve.sqrt_price_from_tick_index(position.tick_upper_index)

    if current_tick_index < position.tick_lower_index:
        return curve.get_amount_delta_a(lower_price, upper_price, liquidity, round_up), 0
    if current_tick_index < position.tick_upper_index:
        return (
            curve.get_amount_delta_a(sqrt_price, upper_price, liquidity, round_up),
            curve.get_amount_delta_b(lower_price, sqrt_price, liquidity, round_up),
        )
    return 0, curve.get_amount_delta_b(lower_price, upper_price, liquidity, round_up)


def sync_modify_liquidity_values(
    pool: Pool,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    update: ModifyLiquidityUpdate,
    reward_last_updated_timestamp: int,
) -> None:
    """Write a computed :class:`ModifyLiquidityUpdate` back into the state."""
    position.update(update.position_update)
    tick_lower.update(update.tick_lower_update)
    tick_upper.update(update.tick_upper_update)
    pool.update_rewards_and_liquidity(
        update.reward_infos, update.pool_liquidity, reward_last_updated_timestamp
    )