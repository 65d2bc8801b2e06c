"""Position fee and reward accrual when liquidity changes."""

from __future__ import annotations

from typing import Sequence

from .errors import DexError
from .fixed_point import (
    add_liquidity_delta,
    checked_mul_shift_right,
    wrapping_add_u64,
    wrapping_sub_u128,
)
from .state import Position, PositionRewardInfo, PositionUpdate


def _owed_delta(liquidity: int, growth_delta: int) -> int:
    # An overflowing delta is forfeited: the position loses what it earned since
    # its last checkpoint.
    try:
        return checked_mul_shift_right(liquidity, growth_delta)
    except DexError:
        return 0


def next_position_modify_liquidity_update(
    position: Position,
    liquidity_delta: int,
    fee_growth_inside_a: int,
    fee_growth_inside_b: int,
    reward_growths_inside: Sequence[int],
) -> PositionUpdate:
    """Accrue fees and rewards to ``position`` and apply ``liquidity_delta``."""
    fee_delta_a = _owed_delta(
        position.liquidity, wrapping_sub_u128(fee_growth_inside_a, position.fee_growth_checkpoint_a)
    )
    fee_delta_b = _owed_delta(
        position.liquidity, wrapping_sub_u128(fee_growth_inside_b, position.fee_growth_checkpoint_b)
    )

    reward_infos = []
    for growth_inside, current in zip(reward_growths_inside, position.reward_infos, strict=True):
        owed_delta = _owed_delta(
            position.liquidity, wrapping_sub_u128(growth_inside, current.growth_inside_checkpoint)
        )
        reward_infos.append(
            PositionRewardInfo(
                growth_inside_checkpoint=growth_inside,
                amount_owed=wrapping_add_u64(current.amount_owed, owed_delta),
            )
        )

    return PositionUpdate(
        liquidity=add_liquidity_delta(position.liquidity, liquidity_delta),
        fee_growth_checkpoint_a=fee_growth_inside_a,
        fee_owed_a=wrapping_add_u64(position.fee_owed_a, fee_delta_a),
        fee_growth_checkpoint_b=fee_growth_inside_b,
        fee_owed_b=wrapping_add_u64(position.fee_owed_b, fee_delta_b),
        reward_infos=reward_infos,
    )