"""Host account model and the ownership check.

An account is the host-allocated region holding a serialized
``CounterState``. The program only mutates accounts it owns.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .state import STATE_SIZE

KEY_SIZE = 32


def new_key() -> bytes:
    """Generate a random 32-byte account key."""
    return os.urandom(KEY_SIZE)


def parse_key(text: str) -> bytes:
    """Parse a 64-character hex string into a 32-byte key."""
    key = bytes.fromhex(text)
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    return key


def check_owner(expected: bytes, actual: bytes) -> bool:
    """Return True if ``actual`` is the program id ``expected``."""
    return bytes(expected) == bytes(actual)


@dataclass
class Account:
    """A single host account."""

    key: bytes
    owner: bytes
    data: bytearray = field(default_factory=lambda: bytearray(STATE_SIZE))
    lamports: int = 0
    is_writable: bool = True

    def __repr__(self) -> str:
        return (
            f"Account(key={self.key.hex()[:8]}.., "
            f"owner={self.owner.hex()[:8]}.., "
            f"data={self.data.hex(' ') if self.data else '(empty)'})"
        )

    @classmethod
    def new(cls, owner: bytes, size: int = STATE_SIZE) -> Account:
        """Create a zero-initialized account with a random key."""
        return cls(key=new_key(), owner=owner, data=bytearray(size))

    def to_dict(self) -> dict:
        return {
            "key": self.key.hex(),
            "owner": self.owner.hex(),
            "data_hex": self.data.hex(" "),
            "lamports": self.lamports,
            "is_writable": self.is_writable,
        }
