"""Pool-wide reward growth and liquidity transitions."""

from __future__ import annotations

from dataclasses import replace

from .errors import DexError, ErrorCode
from .fixed_point import add_liquidity_delta, checked_mul_div, wrapping_add_u128
from .state import NUM_REWARDS, Pool, PoolRewardInfo


def next_pool_reward_infos(pool: Pool, next_timestamp: int) -> list[PoolRewardInfo]:
    """Reward state after emissions accrue up to ``next_timestamp``.

    The timestamp may not precede the pool's last reward update.
    """
    curr_timestamp = pool.reward_last_updated_timestamp
    if next_timestamp < curr_timestamp:
        raise DexError(ErrorCode.InvalidTimestamp)

    if pool.liquidity == 0 or next_timestamp == curr_timestamp:
        return list(pool.reward_infos)

    time_delta = next_timestamp - curr_timestamp
    next_infos = list(pool.reward_infos)
    for i, reward_info in enumerate(next_infos[:NUM_REWARDS]):
        if not reward_info.initialized():
            continue
        # An overflowing delta halts distribution of this reward.
        try:
            growth_delta = checked_mul_div(
                time_delta, reward_info.emissions_per_second_x64, pool.liquidity
            )
        except DexError:
            growth_delta = 0
        next_infos[i] = replace(
            reward_info,
            growth_global_x64=wrapping_add_u128(reward_info.growth_global_x64, growth_delta),
        )
    return next_infos


def next_pool_liquidity(
    pool: Pool, tick_upper_index: int, tick_lower_index: int, liquidity_delta: int
) -> int:
    """Active pool liquidity after a position over the given range changes."""
    if tick_lower_index <= pool.tick_current_index < tick_upper_index:
        return add_liquidity_delta(pool.liquidity, liquidity_delta)
    return pool.liquidity