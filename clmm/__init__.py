"""Concentrated liquidity pool accounting in exact integer arithmetic, with instruction encoding."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "fixed_point",
    "state",
    "tick_manager",
    "pool_manager",
    "position_manager",
    "liquidity_manager",
    "swap_manager",
    "instructions",
    "encoding",
]