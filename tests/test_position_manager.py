import pytest
from hypothesis import given, strategies as st

from clmm.errors import DexError, ErrorCode
from clmm.fixed_point import U64_MAX, U128_MAX
from clmm.position_manager import next_position_modify_liquidity_update
from clmm.state import Position, PositionRewardInfo

ONE_X64 = 1 << 64


def test_checkpoints_follow_inputs_and_liquidity_changes():
    position = Position(liquidity=100)
    update = next_position_modify_liquidity_update(position, 50, 11, 22, [33, 44, 55])
    assert update.liquidity == 150
    assert update.fee_growth_checkpoint_a == 11
    assert update.fee_growth_checkpoint_b == 22
    assert [r.growth_inside_checkpoint for r in update.reward_infos] == [33, 44, 55]


@given(st.integers(min_value=0, max_value=U64_MAX), st.integers(min_value=0, max_value=U64_MAX))
def test_unit_liquidity_earns_growth_delta(growth_a, growth_b):
    position = Position(liquidity=ONE_X64)
    update = next_position_modify_liquidity_update(position, 0, growth_a, growth_b, [growth_a] * 3)
    assert update.fee_owed_a == growth_a
    assert update.fee_owed_b == growth_b
    assert [r.amount_owed for r in update.reward_infos] == [growth_a] * 3


def test_owed_amounts_accumulate_on_existing_balances():
    position = Position(
        liquidity=ONE_X64,
        fee_growth_checkpoint_a=ONE_X64,
        fee_owed_a=7,
        reward_infos=[PositionRewardInfo(growth_inside_checkpoint=5, amount_owed=3)] * 3,
    )
    update = next_position_modify_liquidity_update(position, 0, ONE_X64 + 4, 0, [5 + 6] * 3)
    assert update.fee_owed_a == 7 + 4
    assert [r.amount_owed for r in update.reward_infos] == [3 + 6] * 3


def test_overflowing_delta_is_forfeited():
    position = Position(liquidity=U128_MAX, fee_owed_a=9, fee_owed_b=8)
    update = next_position_modify_liquidity_update(position, 0, 2, 2, [2, 2, 2])
    assert (update.fee_owed_a, update.fee_owed_b) == (9, 8)
    assert [r.amount_owed for r in update.reward_infos] == [0, 0, 0]
    assert update.fee_growth_checkpoint_a == 2


def test_checkpoint_above_inside_wraps_and_forfeits():
    position = Position(liquidity=ONE_X64, fee_growth_checkpoint_a=10)
    update = next_position_modify_liquidity_update(position, 0, 9, 0, [0, 0, 0])
    assert update.fee_owed_a == 0


def test_fee_owed_wraps_at_64_bits():
    position = Position(liquidity=ONE_X64, fee_owed_a=U64_MAX)
    update = next_position_modify_liquidity_update(position, 0, 1, 0, [0, 0, 0])
    assert update.fee_owed_a == 0


def test_zero_liquidity_earns_nothing():
    position = Position(liquidity=0, fee_owed_b=4)
    update = next_position_modify_liquidity_update(position, 20, 1000, 1000, [1000] * 3)
    assert update.fee_owed_b == 4
    assert update.liquidity == 20


def test_liquidity_underflow_raises():
    with pytest.raises(DexError) as info:
        next_position_modify_liquidity_update(Position(liquidity=5), -6, 0, 0, [0, 0, 0])
    assert info.value.code is ErrorCode.LiquidityUnderflow


def test_reward_growth_count_must_match():
    with pytest.raises(ValueError):
        next_position_modify_liquidity_update(Position(liquidity=5), 1, 0, 0, [0, 0])


def test_input_position_is_not_mutated():
    position = Position(liquidity=ONE_X64)
    next_position_modify_liquidity_update(position, 10, 100, 100, [100] * 3)
    assert position.liquidity == ONE_X64
    assert position.fee_owed_a == 0
    assert position.fee_growth_checkpoint_a == 0