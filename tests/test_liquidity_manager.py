import pytest

from clmm.errors import DexError, ErrorCode
from clmm.liquidity_manager import (
    ModifyLiquidityUpdate,
    calculate_fee_and_reward_growths,
    calculate_liquidity_token_deltas,
    calculate_modify_liquidity,
    sync_modify_liquidity_values,
)
from clmm.state import Pool, PoolRewardInfo, Position, PositionUpdate, Tick, TickUpdate

BASE_PRICE = 1_000_000
STEP = 100


class LinearCurve:
    min_sqrt_price = 0
    max_sqrt_price = 2 * BASE_PRICE

    def sqrt_price_from_tick_index(self, tick_index):
        return BASE_PRICE + tick_index * STEP

    def tick_index_from_sqrt_price(self, sqrt_price):
        return (sqrt_price - BASE_PRICE) // STEP

    def get_amount_delta_a(self, p0, p1, liquidity, round_up):
        return abs(p1 - p0) * liquidity + (1 if round_up else 0)

    def get_amount_delta_b(self, p0, p1, liquidity, round_up):
        return 2 * abs(p1 - p0) * liquidity + (1 if round_up else 0)

    def compute_swap(self, *args):
        raise AssertionError("not used")


def _pool(**kwargs):
    defaults = dict(tick_current_index=0, liquidity=1000, sqrt_price=BASE_PRICE)
    defaults.update(kwargs)
    return Pool(**defaults)


def _position(**kwargs):
    defaults = dict(tick_lower_index=-10, tick_upper_index=10)
    defaults.update(kwargs)
    return Position(**defaults)


def test_modify_liquidity_in_range_adds_to_pool():
    pool = _pool(fee_growth_global_a=7, fee_growth_global_b=9)
    update = calculate_modify_liquidity(pool, _position(), Tick(), Tick(), 100, 0)
    assert update.pool_liquidity == pool.liquidity + 100
    assert update.position_update.liquidity == 100
    assert update.tick_lower_update.liquidity_net == 100
    assert update.tick_upper_update.liquidity_net == -100
    assert update.tick_lower_update.liquidity_gross == 100
    assert update.tick_upper_update.initialized
    # Current tick is above the lower tick, so its outside growth is the global growth.
    assert update.tick_lower_update.fee_growth_outside_a == 7
    assert update.tick_lower_update.fee_growth_outside_b == 9
    assert update.tick_upper_update.fee_growth_outside_a == 0


def test_modify_liquidity_out_of_range_leaves_pool_liquidity():
    pool = _pool(tick_current_index=50)
    update = calculate_modify_liquidity(pool, _position(), Tick(), Tick(), 100, 0)
    assert update.pool_liquidity == pool.liquidity


def test_zero_delta_on_empty_position_fails():
    with pytest.raises(DexError) as info:
        calculate_modify_liquidity(_pool(), _position(), Tick(), Tick(), 0, 0)
    assert info.value.code is ErrorCode.LiquidityZero


def test_removing_too_much_liquidity_underflows():
    with pytest.raises(DexError) as info:
        calculate_modify_liquidity(_pool(), _position(liquidity=5), Tick(), Tick(), -6, 0)
    assert info.value.code is ErrorCode.LiquidityUnderflow


def test_timestamp_before_last_update_fails():
    pool = _pool(reward_last_updated_timestamp=100)
    with pytest.raises(DexError) as info:
        calculate_modify_liquidity(pool, _position(), Tick(), Tick(), 1, 99)
    assert info.value.code is ErrorCode.InvalidTimestamp


def test_fee_and_reward_growths_accrue_fees():
    growth = 5 << 64
    pool = _pool(fee_growth_global_a=growth, fee_growth_global_b=growth)
    position = _position(liquidity=10)
    lower = Tick(initialized=True, liquidity_gross=10, liquidity_net=10)
    upper = Tick(initialized=True, liquidity_gross=10, liquidity_net=-10)
    position_update, reward_infos = calculate_fee_and_reward_growths(
        pool, position, lower, upper, 0
    )
    assert position_update.liquidity == position.liquidity
    assert position_update.fee_growth_checkpoint_a == growth
    assert position_update.fee_owed_a == position.liquidity * 5
    assert position_update.fee_owed_b == position.liquidity * 5
    assert reward_infos == pool.reward_infos


def test_fee_and_reward_growths_advance_rewards():
    reward = PoolRewardInfo(mint=b"\x01" * 32, emissions_per_second_x64=1000)
    pool = _pool(reward_infos=[reward, PoolRewardInfo(), PoolRewardInfo()])
    position = _position(liquidity=1)
    _, reward_infos = calculate_fee_and_reward_growths(pool, position, Tick(), Tick(), 10)
    assert reward_infos[0].growth_global_x64 == 10 * 1000 // pool.liquidity
    assert reward_infos[1] == PoolRewardInfo()


def test_fee_and_reward_growths_require_liquidity():
    with pytest.raises(DexError) as info:
        calculate_fee_and_reward_growths(_pool(), _position(), Tick(), Tick(), 0)
    assert info.value.code is ErrorCode.LiquidityZero


def test_token_deltas_below_range_only_token_a():
    curve = LinearCurve()
    position = _position()
    delta_a, delta_b = calculate_liquidity_token_deltas(-20, 0, position, 3, curve)
    lower = curve.sqrt_price_from_tick_index(position.tick_lower_index)
    upper = curve.sqrt_price_from_tick_index(position.tick_upper_index)
    assert delta_a == curve.get_amount_delta_a(lower, upper, 3, True)
    assert delta_b == 0


def test_token_deltas_above_range_only_token_b():
    curve = LinearCurve()
    position = _position()
    delta_a, delta_b = calculate_liquidity_token_deltas(10, 0, position, -3, curve)
    lower = curve.sqrt_price_from_tick_index(position.tick_lower_index)
    upper = curve.sqrt_price_from_tick_index(position.tick_upper_index)
    assert delta_a == 0
    assert delta_b == curve.get_amount_delta_b(lower, upper, 3, False)


def test_token_deltas_in_range_use_current_price():
    curve = LinearCurve()
    position = _position()
    price = curve.sqrt_price_from_tick_index(2)
    delta_a, delta_b = calculate_liquidity_token_deltas(2, price, position, 4, curve)
    lower = curve.sqrt_price_from_tick_index(position.tick_lower_index)
    upper = curve.sqrt_price_from_tick_index(position.tick_upper_index)
    assert delta_a == curve.get_amount_delta_a(price, upper, 4, True)
    assert delta_b == curve.get_amount_delta_b(lower, price, 4, True)


def test_token_deltas_round_up_only_on_deposit():
    curve = LinearCurve()
    position = _position()
    price = curve.sqrt_price_from_tick_index(0)
    deposit = calculate_liquidity_token_deltas(0, price, position, 4, curve)
    withdraw = calculate_liquidity_token_deltas(0, price, position, -4, curve)
    assert deposit[0] == withdraw[0] + 1
    assert deposit[1] == withdraw[1] + 1


def test_token_deltas_zero_liquidity_fails():
    with pytest.raises(DexError) as info:
        calculate_liquidity_token_deltas(0, BASE_PRICE, _position(), 0, LinearCurve())
    assert info.value.code is ErrorCode.LiquidityZero


def test_sync_writes_back_all_values():
    pool = _pool()
    position = _position()
    lower, upper = Tick(), Tick()
    update = calculate_modify_liquidity(pool, position, lower, upper, 250, 42)
    sync_modify_liquidity_values(pool, position, lower, upper, update, 42)
    assert position.liquidity == 250
    assert lower.liquidity_net == 250 and lower.initialized
    assert upper.liquidity_net == -250
    assert pool.liquidity == update.pool_liquidity
    assert pool.reward_last_updated_timestamp == 42


def test_sync_explicit_update():
    pool = _pool()
    position = _position()
    lower, upper = Tick(), Tick()
    update = ModifyLiquidityUpdate(
        pool_liquidity=77,
        tick_lower_update=TickUpdate(initialized=True, liquidity_gross=3),
        tick_upper_update=TickUpdate(initialized=True, liquidity_gross=4),
        reward_infos=[PoolRewardInfo()] * 3,
        position_update=PositionUpdate(liquidity=9, fee_owed_a=2),
    )
    sync_modify_liquidity_values(pool, position, lower, upper, update, 5)
    assert (pool.liquidity, pool.reward_last_updated_timestamp) == (77, 5)
    assert (lower.liquidity_gross, upper.liquidity_gross) == (3, 4)
    assert (position.liquidity, position.fee_owed_a) == (9, 2)


def test_deposit_then_withdraw_restores_liquidity():
    pool = _pool()
    position = _position()
    lower, upper = Tick(), Tick()
    original = pool.liquidity
    for delta in (500, -500):
        update = calculate_modify_liquidity(pool, position, lower, upper, delta, 0)
        sync_modify_liquidity_values(pool, position, lower, upper, update, 0)
    assert pool.liquidity == original
    assert position.liquidity == 0
    assert lower == Tick()
    assert upper == Tick()