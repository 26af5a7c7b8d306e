"""Counter state model: serialize/deserialize the 4-byte account data.

Layout::

    +---------------------+
    | counter (u32 LE)    |
    | 4 bytes             |
    +---------------------+

No header, padding or version tag.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import DeserializationFailure
from ..protocol.instruction import U32_MAX

STATE_SIZE = 4


@dataclass
class CounterState:
    """The persisted counter held by one account."""

    counter: int = 0

    def to_bytes(self) -> bytes:
        """Serialize to exactly 4 little-endian bytes."""
        if not 0 <= self.counter <= U32_MAX:
            raise DeserializationFailure(
                f"Counter {self.counter} does not fit in {STATE_SIZE} bytes"
            )
        return self.counter.to_bytes(STATE_SIZE, "little")

    def write_into(self, region: bytearray) -> None:
        """Rewrite ``region`` in place with the serialized state."""
        if len(region) != STATE_SIZE:
            raise DeserializationFailure(
                f"State region must be {STATE_SIZE} bytes, got {len(region)}"
            )
        region[:] = self.to_bytes()

    def to_dict(self) -> dict:
        return {"counter": self.counter, "raw_hex": self.to_bytes().hex(" ")}

    @classmethod
    def from_bytes(cls, data: bytes) -> CounterState:
        """Deserialize a 4-byte state region.

        Raises:
            DeserializationFailure: If ``data`` is not exactly 4 bytes.
        """
        if len(data) != STATE_SIZE:
            raise DeserializationFailure(
                f"State region must be {STATE_SIZE} bytes, got {len(data)}"
            )
        return cls(counter=int.from_bytes(bytes(data), "little"))

    @classmethod
    def max(cls) -> CounterState:
        return cls(counter=U32_MAX)
