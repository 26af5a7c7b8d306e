"""Instruction decoding and builders.

Wire layout::

    +-----+---------------------------+
    | Tag | Payload                   |
    | 1 B | 4 B u32 LE (Set only)     |
    +-----+---------------------------+

- Tag 0: Increment, trailing bytes are ignored
- Tag 1: Decrement, trailing bytes are ignored
- Tag 2: Set, followed by exactly 4 bytes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from ..errors import MalformedPayload, MissingTag, UnknownTag

logger = logging.getLogger(__name__)

U32_MAX = 0xFFFFFFFF
SET_PAYLOAD_SIZE = 4


class Tag(IntEnum):
    """Instruction tag bytes."""

    INCREMENT = 0
    DECREMENT = 1
    SET = 2


@dataclass(frozen=True)
class Increment:
    """Add one to the counter."""

    tag = Tag.INCREMENT


@dataclass(frozen=True)
class Decrement:
    """Subtract one from the counter."""

    tag = Tag.DECREMENT


@dataclass(frozen=True)
class Set:
    """Overwrite the counter with ``value``."""

    value: int
    tag = Tag.SET

    def __post_init__(self) -> None:
        if not 0 <= self.value <= U32_MAX:
            raise ValueError(
                f"Counter value must be 0-{U32_MAX}, got {self.value}"
            )

    def __repr__(self) -> str:
        return f"Set(value={self.value})"


Command = Union[Increment, Decrement, Set]

# Mapping from human-readable command names to tags
COMMAND_NAMES: dict[str, Tag] = {
    "increment": Tag.INCREMENT,
    "decrement": Tag.DECREMENT,
    "set": Tag.SET,
}


def decode(data: bytes) -> Command:
    """Decode an instruction buffer into a command.

    Args:
        data: Raw instruction bytes.

    Returns:
        The decoded ``Increment``, ``Decrement`` or ``Set``.

    Raises:
        MissingTag: If ``data`` is empty.
        UnknownTag: If the tag byte is not 0, 1 or 2.
        MalformedPayload: If a Set payload is not exactly 4 bytes.
    """
    if not data:
        raise MissingTag("Instruction buffer is empty")

    tag, rest = data[0], bytes(data[1:])

    if tag == Tag.INCREMENT:
        return Increment()
    if tag == Tag.DECREMENT:
        return Decrement()
    if tag == Tag.SET:
        if len(rest) != SET_PAYLOAD_SIZE:
            raise MalformedPayload(tag, SET_PAYLOAD_SIZE, len(rest))
        value = int.from_bytes(rest, "little")
        logger.debug("Decoded Set payload %s -> %d", rest.hex(" "), value)
        return Set(value)

    raise UnknownTag(tag)


def encode(command: Command) -> bytes:
    """Encode a command into its canonical instruction buffer."""
    if isinstance(command, Set):
        return build_set(command.value)
    if isinstance(command, Increment):
        return build_increment()
    if isinstance(command, Decrement):
        return build_decrement()
    raise TypeError(f"Not a counter command: {command!r}")


def build_increment() -> bytes:
    """Build an Increment instruction (tag 0)."""
    return bytes([Tag.INCREMENT])


def build_decrement() -> bytes:
    """Build a Decrement instruction (tag 1)."""
    return bytes([Tag.DECREMENT])


def build_set(value: int) -> bytes:
    """Build a Set instruction (tag 2).

    Args:
        value: New counter value, 0 to 2**32 - 1.
    """
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"Counter value must be 0-{U32_MAX}, got {value}")
    return bytes([Tag.SET]) + value.to_bytes(SET_PAYLOAD_SIZE, "little")


def build_command(name: str, value: int | None = None) -> bytes:
    """Build an instruction from a command name.

    Args:
        name: One of ``increment``, ``decrement``, ``set``.
        value: Required for ``set``.
    """
    if name not in COMMAND_NAMES:
        raise ValueError(
            f"Unknown command '{name}'. Valid: {list(COMMAND_NAMES)}"
        )
    tag = COMMAND_NAMES[name]
    if tag == Tag.SET:
        if value is None:
            raise ValueError("The set command needs a value")
        return build_set(value)
    return build_increment() if tag == Tag.INCREMENT else build_decrement()
