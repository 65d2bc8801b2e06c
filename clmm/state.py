"""Pool, tick and position state, plus the interfaces the managers rely on."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, runtime_checkable

NUM_REWARDS = 3
DEFAULT_PUBKEY = bytes(32)


def _zero_growths() -> list[int]:
    return [0] * NUM_REWARDS


@dataclass(frozen=True)
class PoolRewardInfo:
    """Global state of one reward emitted by a pool."""

    mint: bytes = DEFAULT_PUBKEY
    vault: bytes = DEFAULT_PUBKEY
    authority: bytes = DEFAULT_PUBKEY
    emissions_per_second_x64: int = 0
    growth_global_x64: int = 0

    def initialized(self) -> bool:
        """A reward is live once it has a mint."""
        return self.mint != DEFAULT_PUBKEY


def to_reward_growths(reward_infos: Iterable[PoolRewardInfo]) -> list[int]:
    """Global growth of each reward, in order."""
    return [info.growth_global_x64 for info in reward_infos]


@dataclass
class Tick:
    """Liquidity and accumulated growth recorded at one tick."""

    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: list[int] = field(default_factory=_zero_growths)

    def update(self, update: TickUpdate) -> None:
        """Overwrite this tick with the values of ``update``."""
        self.initialized = update.initialized
        self.liquidity_net = update.liquidity_net
        self.liquidity_gross = update.liquidity_gross
        self.fee_growth_outside_a = update.fee_growth_outside_a
        self.fee_growth_outside_b = update.fee_growth_outside_b
        self.reward_growths_outside = list(update.reward_growths_outside)


@dataclass
class TickUpdate:
    """New values for a tick, computed before being written back."""

    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: list[int] = field(default_factory=_zero_growths)

    @classmethod
    def from_tick(cls, tick: Tick) -> TickUpdate:
        """An update that leaves ``tick`` unchanged."""
        return cls(
            initialized=tick.initialized,
            liquidity_net=tick.liquidity_net,
            liquidity_gross=tick.liquidity_gross,
            fee_growth_outside_a=tick.fee_growth_outside_a,
            fee_growth_outside_b=tick.fee_growth_outside_b,
            reward_growths_outside=list(tick.reward_growths_outside),
        )


@dataclass(frozen=True)
class PositionRewardInfo:
    """Per-position bookkeeping for one reward."""

    growth_inside_checkpoint: int = 0
    amount_owed: int = 0


def _empty_position_rewards() -> list[PositionRewardInfo]:
    return [PositionRewardInfo() for _ in range(NUM_REWARDS)]


@dataclass
class PositionUpdate:
    """New values for a position after liquidity or growth changes."""

    liquidity: int = 0
    fee_growth_checkpoint_a: int = 0
    fee_owed_a: int = 0
    fee_growth_checkpoint_b: int = 0
    fee_owed_b: int = 0
    reward_infos: list[PositionRewardInfo] = field(default_factory=_empty_position_rewards)


@dataclass
class Position:
    """A liquidity position over a tick range of a pool."""

    pool: bytes = DEFAULT_PUBKEY
    position_mint: bytes = DEFAULT_PUBKEY
    liquidity: int = 0
    tick_lower_index: int = 0
    tick_upper_index: int = 0
    fee_growth_checkpoint_a: int = 0
    fee_owed_a: int = 0
    fee_growth_checkpoint_b: int = 0
    fee_owed_b: int = 0
    reward_infos: list[PositionRewardInfo] = field(default_factory=_empty_position_rewards)

    def update(self, update: PositionUpdate) -> None:
        """Apply the liquidity, fee and reward values of ``update``."""
        self.liquidity = update.liquidity
        self.fee_growth_checkpoint_a = update.fee_growth_checkpoint_a
        self.fee_owed_a = update.fee_owed_a
        self.fee_growth_checkpoint_b = update.fee_growth_checkpoint_b
        self.fee_owed_b = update.fee_owed_b
        self.reward_infos = list(update.reward_infos)


def _empty_pool_rewards() -> list[PoolRewardInfo]:
    return [PoolRewardInfo() for _ in range(NUM_REWARDS)]


@dataclass
class Pool:
    """Global state of a concentrated liquidity pool."""

    tick_spacing: int = 1
    fee_rate: int = 0
    protocol_fee_rate: int = 0
    liquidity: int = 0
    sqrt_price: int = 0
    tick_current_index: int = 0
    protocol_fee_owed_a: int = 0
    protocol_fee_owed_b: int = 0
    fee_growth_global_a: int = 0
    fee_growth_global_b: int = 0
    reward_last_updated_timestamp: int = 0
    reward_infos: list[PoolRewardInfo] = field(default_factory=_empty_pool_rewards)

    def update_rewards_and_liquidity(
        self, reward_infos: Iterable[PoolRewardInfo], liquidity: int, timestamp: int
    ) -> None:
        """Store new reward state, liquidity and the reward timestamp."""
        self.reward_infos = list(reward_infos)
        self.liquidity = liquidity
        self.reward_last_updated_timestamp = timestamp


@runtime_checkable
class PriceCurve(Protocol):
    """Tick/price conversions and swap-step math used by the managers.

    ``compute_swap`` returns an object exposing ``amount_in``, ``amount_out``,
    ``next_price`` and ``fee_amount``.
    """

    min_sqrt_price: int
    max_sqrt_price: int

    def sqrt_price_from_tick_index(self, tick_index: int) -> int: ...

    def tick_index_from_sqrt_price(self, sqrt_price: int) -> int: ...

    def get_amount_delta_a(
        self, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
    ) -> int: ...

    def get_amount_delta_b(
        self, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
    ) -> int: ...

    def compute_swap(
        self,
        amount_remaining: int,
        fee_rate: int,
        liquidity: int,
        sqrt_price_current: int,
        sqrt_price_target: int,
        amount_specified_is_input: bool,
        a_to_b: bool,
    ): ...


@runtime_checkable
class TickSequence(Protocol):
    """An ordered run of tick arrays traversed by a swap."""

    tick_array_size: int

    def get_next_initialized_tick_index(
        self, tick_index: int, tick_spacing: int, a_to_b: bool, array_index: int
    ) -> tuple[int, int]: ...

    def get_tick(self, array_index: int, tick_index: int, tick_spacing: int) -> Tick: ...

    def update_tick(
        self, array_index: int, tick_index: int, tick_spacing: int, update: TickUpdate
    ) -> None: ...

    def get_tick_offset(self, array_index: int, tick_index: int, tick_spacing: int) -> int: ...