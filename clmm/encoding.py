"""Binary encoding of instruction data: an 8-byte discriminator and Borsh arguments."""

from __future__ import annotations

import hashlib
import struct
from functools import lru_cache
from typing import Any

from .instructions import PUBKEY_LENGTH, ArgType, get_instruction, list_instructions

DISCRIMINATOR_LENGTH = 8

_INT_LAYOUT: dict[ArgType, tuple[int, bool]] = {
    ArgType.U8: (1, False),
    ArgType.U16: (2, False),
    ArgType.I32: (4, True),
    ArgType.U64: (8, False),
    ArgType.U128: (16, False),
}

# Variable-length payloads travel as Borsh byte strings: a u32 length, then the bytes.
_LENGTH = struct.Struct("<I")


@lru_cache(maxsize=None)
def discriminator(name: str) -> bytes:
    """The 8-byte prefix identifying the instruction ``name``."""
    return hashlib.sha256(f"global:{name}".encode()).digest()[:DISCRIMINATOR_LENGTH]


@lru_cache(maxsize=1)
def _by_discriminator() -> dict[bytes, str]:
    return {discriminator(spec.name): spec.name for spec in list_instructions()}


def encode_arg(arg_type: ArgType, value: Any) -> bytes:
    """Serialize one argument value of the given type."""
    value = arg_type.check(value)
    if arg_type in _INT_LAYOUT:
        size, signed = _INT_LAYOUT[arg_type]
        return value.to_bytes(size, "little", signed=signed)
    if arg_type is ArgType.BOOL:
        return b"\x01" if value else b"\x00"
    if arg_type is ArgType.PUBKEY:
        return value
    return _LENGTH.pack(len(value)) + value


def _take(data: bytes, offset: int, size: int) -> bytes:
    if offset < 0 or offset + size > len(data):
        raise ValueError(f"need {size} bytes at offset {offset}, data has {len(data)}")
    return bytes(data[offset : offset + size])


def decode_arg(arg_type: ArgType, data: bytes, offset: int = 0) -> tuple[Any, int]:
    """Read one argument at ``offset``; return the value and the offset after it."""
    if arg_type in _INT_LAYOUT:
        size, signed = _INT_LAYOUT[arg_type]
        raw = _take(data, offset, size)
        return int.from_bytes(raw, "little", signed=signed), offset + size
    if arg_type is ArgType.BOOL:
        flag = _take(data, offset, 1)[0]
        if flag > 1:
            raise ValueError(f"invalid bool byte {flag} at offset {offset}")
        return flag == 1, offset + 1
    if arg_type is ArgType.PUBKEY:
        return _take(data, offset, PUBKEY_LENGTH), offset + PUBKEY_LENGTH
    (length,) = _LENGTH.unpack(_take(data, offset, _LENGTH.size))
    start = offset + _LENGTH.size
    return _take(data, start, length), start + length


def encode_instruction(name: str, *args: Any, **kwargs: Any) -> bytes:
    """Instruction data for ``name`` called with the given arguments."""
    spec = get_instruction(name)
    values = spec.validate(*args, **kwargs)
    parts = [discriminator(name)]
    for arg in spec.args:
        value = values[arg.name]
        if arg.optional:
            if value is None:
                parts.append(b"\x00")
                continue
            parts.append(b"\x01")
        parts.append(encode_arg(arg.type, value))
    return b"".join(parts)


def decode_instruction(data: bytes) -> tuple[str, dict[str, Any]]:
    """Parse instruction data into its name and arguments by name."""
    data = bytes(data)
    prefix = _take(data, 0, DISCRIMINATOR_LENGTH)
    try:
        name = _by_discriminator()[prefix]
    except KeyError:
        raise ValueError(f"unknown instruction discriminator {prefix.hex()}") from None

    spec = get_instruction(name)
    offset = DISCRIMINATOR_LENGTH
    values: dict[str, Any] = {}
    for arg in spec.args:
        if arg.optional:
            tag = _take(data, offset, 1)[0]
            offset += 1
            if tag == 0:
                values[arg.name] = None
                continue
            if tag != 1:
                raise ValueError(f"invalid option tag {tag} for {arg.name!r}")
        values[arg.name], offset = decode_arg(arg.type, data, offset)

    if offset != len(data):
        raise ValueError(f"{len(data) - offset} trailing bytes after {name} arguments")
    return name, values