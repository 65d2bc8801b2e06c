"""Catalogue of the program's instructions and validation of their arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

PUBKEY_LENGTH = 32

_INT_RANGES: dict[str, tuple[int, int]] = {
    "u8": (0, (1 << 8) - 1),
    "u16": (0, (1 << 16) - 1),
    "i32": (-(1 << 31), (1 << 31) - 1),
    "u64": (0, (1 << 64) - 1),
    "u128": (0, (1 << 128) - 1),
}


class ArgType(Enum):
    """Wire types of instruction arguments."""

    U8 = "u8"
    U16 = "u16"
    I32 = "i32"
    U64 = "u64"
    U128 = "u128"
    BOOL = "bool"
    PUBKEY = "publicKey"
    BUMPS = "bumps"
    REMAINING_ACCOUNTS_INFO = "remainingAccountsInfo"

    @property
    def is_integer(self) -> bool:
        return self.value in _INT_RANGES

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive range of an integer type."""
        try:
            return _INT_RANGES[self.value]
        except KeyError:
            raise AttributeError(f"{self.name} is not an integer type") from None

    def check(self, value: Any) -> Any:
        """Return ``value`` in canonical form, or raise if it does not fit this type."""
        if self.is_integer:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{self.value} expects an int, got {value!r}")
            low, high = self.bounds
            if not low <= value <= high:
                raise ValueError(f"{value} is out of range for {self.value}")
            return value
        if self is ArgType.BOOL:
            if not isinstance(value, bool):
                raise TypeError(f"bool expects True or False, got {value!r}")
            return value
        if self is ArgType.PUBKEY:
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError(f"publicKey expects bytes, got {value!r}")
            key = bytes(value)
            if len(key) != PUBKEY_LENGTH:
                raise ValueError(f"publicKey must be {PUBKEY_LENGTH} bytes, got {len(key)}")
            return key
        if self is ArgType.BUMPS:
            if isinstance(value, (bytes, bytearray, memoryview)):
                return bytes(value)
            if isinstance(value, (str, int)) or not hasattr(value, "__iter__"):
                raise TypeError(f"bumps expects a sequence of u8 values, got {value!r}")
            return bytes(ArgType.U8.check(item) for item in value)
        # Remaining-accounts info travels as an opaque serialized payload.
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"remainingAccountsInfo expects bytes, got {value!r}")
        return bytes(value)


@dataclass(frozen=True)
class InstructionArg:
    """One named argument of an instruction."""

    name: str
    type: ArgType
    optional: bool = False

    def check(self, value: Any) -> Any:
        if value is None:
            if self.optional:
                return None
            raise TypeError(f"argument {self.name!r} may not be None")
        try:
            return self.type.check(value)
        except (TypeError, ValueError) as exc:
            raise type(exc)(f"argument {self.name!r}: {exc}") from None


@dataclass(frozen=True)
class InstructionSpec:
    """An instruction's name, arguments and the special errors it documents."""

    name: str
    args: tuple[InstructionArg, ...] = ()
    errors: tuple[str, ...] = field(default=())

    @property
    def arg_names(self) -> tuple[str, ...]:
        return tuple(arg.name for arg in self.args)

    def validate(self, *args: Any, **kwargs: Any) -> dict[str, Any]:
        """Bind and check arguments; return them by name in declaration order.

        Optional arguments left out are taken as ``None``.
        """
        if len(args) > len(self.args):
            raise TypeError(
                f"{self.name} takes {len(self.args)} arguments, {len(args)} given"
            )
        bound: dict[str, Any] = {spec.name: value for spec, value in zip(self.args, args)}
        known = set(self.arg_names)
        for name, value in kwargs.items():
            if name not in known:
                raise TypeError(f"{self.name} got an unexpected argument {name!r}")
            if name in bound:
                raise TypeError(f"{self.name} got multiple values for argument {name!r}")
            bound[name] = value

        result: dict[str, Any] = {}
        for spec in self.args:
            if spec.name not in bound:
                if not spec.optional:
                    raise TypeError(f"{self.name} is missing argument {spec.name!r}")
                result[spec.name] = None
                continue
            result[spec.name] = spec.check(bound[spec.name])
        return result


_SWAP_ERRORS = (
    "ZeroTradableAmount",
    "InvalidSqrtPriceLimitDirection",
    "SqrtPriceOutOfBounds",
    "InvalidTickArraySequence",
    "TickArraySequenceInvalidIndex",
    "TickArrayIndexOutofBounds",
    "LiquidityOverflow",
    "InvalidTickSpacing",
)
_TWO_HOP_ERRORS = _SWAP_ERRORS + ("InvalidIntermediaryMint", "DuplicateTwoHopPool")
_INCREASE_ERRORS = ("LiquidityZero", "LiquidityTooHigh", "TokenMaxExceeded")
_DECREASE_ERRORS = ("LiquidityZero", "LiquidityTooHigh", "TokenMinSubceeded")
_REWARD_INDEX_ERRORS = ("InvalidRewardIndex",)
_EMISSIONS_ERRORS = ("RewardVaultAmountInsufficient", "InvalidTimestamp", "InvalidRewardIndex")
_INIT_POOL_ERRORS = ("InvalidTokenMintOrder", "SqrtPriceOutOfBounds")

_A = ArgType
_REMAINING = ("remaining_accounts_info", _A.REMAINING_ACCOUNTS_INFO, True)
_SWAP_ARGS = (
    ("amount", _A.U64),
    ("other_amount_threshold", _A.U64),
    ("sqrt_price_limit", _A.U128),
    ("amount_specified_is_input", _A.BOOL),
    ("a_to_b", _A.BOOL),
)
_TWO_HOP_ARGS = (
    ("amount", _A.U64),
    ("other_amount_threshold", _A.U64),
    ("amount_specified_is_input", _A.BOOL),
    ("a_to_b_one", _A.BOOL),
    ("a_to_b_two", _A.BOOL),
    ("sqrt_price_limit_one", _A.U128),
    ("sqrt_price_limit_two", _A.U128),
)
_INCREASE_ARGS = (
    ("liquidity_amount", _A.U128),
    ("token_max_a", _A.U64),
    ("token_max_b", _A.U64),
)
_DECREASE_ARGS = (
    ("liquidity_amount", _A.U128),
    ("token_min_a", _A.U64),
    ("token_min_b", _A.U64),
)
_POSITION_ARGS = (
    ("bumps", _A.BUMPS),
    ("tick_lower_index", _A.I32),
    ("tick_upper_index", _A.I32),
)

_TABLE: tuple[tuple[str, tuple[tuple, ...], tuple[str, ...]], ...] = (
    (
        "initialize_config",
        (
            ("fee_authority", _A.PUBKEY),
            ("collect_protocol_fees_authority", _A.PUBKEY),
            ("reward_emissions_super_authority", _A.PUBKEY),
            ("default_protocol_fee_rate", _A.U16),
        ),
        (),
    ),
    (
        "initialize_pool",
        (("bumps", _A.BUMPS), ("tick_spacing", _A.U16), ("initial_sqrt_price", _A.U128)),
        _INIT_POOL_ERRORS,
    ),
    ("initialize_tokens_pool", (("bumps", _A.BUMPS), ("tick_spacing", _A.U16)), ()),
    ("initialize_tick_array", (("start_tick_index", _A.I32),), ("InvalidStartTick",)),
    (
        "initialize_fee_tier",
        (("tick_spacing", _A.U16), ("default_fee_rate", _A.U16)),
        ("FeeRateMaxExceeded",),
    ),
    ("initialize_reward", (("reward_index", _A.U8),), _REWARD_INDEX_ERRORS),
    (
        "set_reward_emissions",
        (("reward_index", _A.U8), ("emissions_per_second_x64", _A.U128)),
        _EMISSIONS_ERRORS,
    ),
    ("open_position", _POSITION_ARGS, ("InvalidTickIndex",)),
    ("open_position_with_metadata", _POSITION_ARGS, ("InvalidTickIndex",)),
    ("increase_liquidity", _INCREASE_ARGS, _INCREASE_ERRORS),
    ("decrease_liquidity", _DECREASE_ARGS, _DECREASE_ERRORS),
    ("update_fees_and_rewards", (), ("TickNotFound", "LiquidityZero")),
    ("collect_fees", (), ()),
    ("collect_reward", (("reward_index", _A.U8),), ()),
    ("collect_protocol_fees", (), ()),
    ("swap", _SWAP_ARGS, _SWAP_ERRORS),
    ("close_position", (), ("ClosePositionNotEmpty",)),
    ("set_default_fee_rate", (("default_fee_rate", _A.U16),), ("FeeRateMaxExceeded",)),
    (
        "set_default_protocol_fee_rate",
        (("default_protocol_fee_rate", _A.U16),),
        ("ProtocolFeeRateMaxExceeded",),
    ),
    ("set_fee_rate", (("fee_rate", _A.U16),), ("FeeRateMaxExceeded",)),
    (
        "set_protocol_fee_rate",
        (("protocol_fee_rate", _A.U16),),
        ("ProtocolFeeRateMaxExceeded",),
    ),
    ("set_fee_authority", (), ()),
    ("set_collect_protocol_fees_authority", (), ()),
    ("set_reward_authority", (("reward_index", _A.U8),), _REWARD_INDEX_ERRORS),
    (
        "set_reward_authority_by_super_authority",
        (("reward_index", _A.U8),),
        _REWARD_INDEX_ERRORS,
    ),
    ("set_reward_emissions_super_authority", (), ()),
    ("two_hop_swap", _TWO_HOP_ARGS, _TWO_HOP_ERRORS),
    ("initialize_position_bundle", (), ()),
    ("initialize_position_bundle_with_metadata", (), ()),
    ("delete_position_bundle", (), ("PositionBundleNotDeletable",)),
    (
        "open_bundled_position",
        (
            ("bundle_index", _A.U16),
            ("tick_lower_index", _A.I32),
            ("tick_upper_index", _A.I32),
        ),
        ("InvalidBundleIndex", "InvalidTickIndex"),
    ),
    (
        "close_bundled_position",
        (("bundle_index", _A.U16),),
        ("InvalidBundleIndex", "ClosePositionNotEmpty"),
    ),
    ("collect_fees_v2", (_REMAINING,), ()),
    ("collect_protocol_fees_v2", (_REMAINING,), ()),
    ("collect_reward_v2", (("reward_index", _A.U8), _REMAINING), ()),
    ("decrease_liquidity_v2", _DECREASE_ARGS + (_REMAINING,), _DECREASE_ERRORS),
    ("increase_liquidity_v2", _INCREASE_ARGS + (_REMAINING,), _INCREASE_ERRORS),
    (
        "initialize_pool_v2",
        (("tick_spacing", _A.U16), ("initial_sqrt_price", _A.U128)),
        _INIT_POOL_ERRORS,
    ),
    ("initialize_reward_v2", (("reward_index", _A.U8),), _REWARD_INDEX_ERRORS),
    (
        "set_reward_emissions_v2",
        (("reward_index", _A.U8), ("emissions_per_second_x64", _A.U128)),
        _EMISSIONS_ERRORS,
    ),
    ("swap_v2", _SWAP_ARGS + (_REMAINING,), _SWAP_ERRORS),
    ("two_hop_swap_v2", _TWO_HOP_ARGS + (_REMAINING,), _TWO_HOP_ERRORS),
    ("initialize_config_extension", (), ()),
    ("set_config_extension_authority", (), ()),
    ("set_token_badge_authority", (), ()),
    ("initialize_token_badge", (), ()),
    ("delete_token_badge", (), ()),
)

_INSTRUCTIONS: dict[str, InstructionSpec] = {
    name: InstructionSpec(
        name=name,
        args=tuple(InstructionArg(*arg) for arg in args),
        errors=errors,
    )
    for name, args, errors in _TABLE
}


def get_instruction(name: str) -> InstructionSpec:
    """Look up an instruction by name; raise KeyError if there is none."""
    try:
        return _INSTRUCTIONS[name]
    except KeyError:
        raise KeyError(f"unknown instruction {name!r}") from None


def list_instructions() -> list[InstructionSpec]:
    """All instructions in program declaration order."""
    return list(_INSTRUCTIONS.values())