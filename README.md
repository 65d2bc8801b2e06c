# clmm

Integer-exact bookkeeping for a concentrated liquidity market maker. The
package holds the state of a pool, its ticks and its positions. It works out
what changes when liquidity is added or removed, when fees and rewards build
up, and when a swap moves the price.

Every value is a plain Python `int`. Where a quantity stands for an unsigned
64-bit or 128-bit number, the package either checks that it is in range or
wraps it the way a number of that width would. When an operation fails, the
package raises `clmm.errors.DexError`, and its `code` attribute holds the
`ErrorCode` that says what went wrong.

The package has no runtime dependencies.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `clmm.errors`: the `ErrorCode` enum, whose values are messages, and the
  `DexError` exception.
- `clmm.fixed_point`: checked and wrapping helpers: `add_liquidity_delta`,
  `checked_mul_div`, `checked_mul_shift_right` (Q64.64), `wrapping_add_u128`,
  `wrapping_sub_u128` and `wrapping_add_u64`.
- `clmm.state`: the dataclasses `Pool`, `PoolRewardInfo`, `Tick`,
  `TickUpdate`, `Position`, `PositionUpdate` and `PositionRewardInfo`, plus
  `to_reward_growths`, and the `PriceCurve` and `TickSequence` protocols.
  A pool carries `NUM_REWARDS` (3) reward slots. A reward counts as
  initialized once its mint is set.
- `clmm.tick_manager`: `next_tick_cross_update`,
  `next_tick_modify_liquidity_update`, `next_fee_growths_inside` and
  `next_reward_growths_inside`.
- `clmm.pool_manager`: `next_pool_reward_infos`, which accrues emissions up to
  a timestamp, and `next_pool_liquidity`.
- `clmm.position_manager`: `next_position_modify_liquidity_update`, which
  works out the fees and rewards owed to a position.
- `clmm.liquidity_manager`: `ModifyLiquidityUpdate`,
  `calculate_modify_liquidity`, `calculate_fee_and_reward_growths`,
  `calculate_liquidity_token_deltas` and `sync_modify_liquidity_values`.
- `clmm.swap_manager`: `swap`, which returns a `PostSwapUpdate`, together with
  the helpers `calculate_fees`, `calculate_protocol_fee` (the rate is in basis
  points), `calculate_update` and `get_next_sqrt_prices`. `swap` logs the fee
  growth of each swap at debug level through the `clmm.swap_manager` logger.
- `clmm.instructions`: the catalogue of the program's instructions. It holds
  `ArgType`, `InstructionArg` and `InstructionSpec`, whose `validate` binds
  arguments and checks their ranges, plus `get_instruction` and
  `list_instructions`.
- `clmm.encoding`: binary instruction data. Each instruction is an 8-byte
  discriminator, the first 8 bytes of SHA-256 of `global:<name>`, followed by
  its arguments. Integers are little-endian. Bumps and remaining-accounts info
  are byte strings with a u32 length prefix. Optional arguments carry a
  0 or 1 tag byte. The module provides `discriminator`, `encode_arg`,
  `decode_arg`, `encode_instruction` and `decode_instruction`.

## Example

```python
from clmm.state import Pool, Position, Tick
from clmm.liquidity_manager import calculate_modify_liquidity, sync_modify_liquidity_values

pool = Pool(tick_spacing=64, tick_current_index=0, liquidity=0)
position = Position(tick_lower_index=-128, tick_upper_index=128)
lower, upper = Tick(), Tick()

update = calculate_modify_liquidity(pool, position, lower, upper, 1_000_000, timestamp=0)
sync_modify_liquidity_values(pool, position, lower, upper, update, 0)
assert pool.liquidity == 1_000_000
assert position.liquidity == 1_000_000
```

The `calculate_*` functions only compute new values. Nothing changes until
`sync_modify_liquidity_values` writes them back. A position keeps the fees it
earns until its liquidity changes again or its fees are updated. A fee or
reward delta that would overflow counts as zero, and amounts owed wrap at
64 bits.

## Encoding instructions

```python
from clmm.encoding import encode_instruction, decode_instruction

data = encode_instruction("set_fee_rate", 3000)
name, args = decode_instruction(data)
assert (name, args) == ("set_fee_rate", {"fee_rate": 3000})
```

## What the package does not do

- It has no price curve. `swap`, `get_next_sqrt_prices` and
  `calculate_liquidity_token_deltas` take a `curve` object that follows the
  `PriceCurve` protocol. You supply it. It converts between ticks and square-root
  prices, works out token amounts, and computes each swap step.
- It has no tick-array storage. `swap` walks a `TickSequence` object that you
  supply.
- It does not run instructions. `clmm.instructions` and `clmm.encoding`
  describe, validate, encode and decode instruction data only. They do not
  load accounts, check authorities, transfer tokens or persist state.
- It has no command-line interface.