"""Typed failures returned by the counter program.

Every error carries ``program_error``, the name of the host's
program-result code it maps to.
"""

from __future__ import annotations

from typing import Any


class CounterProgramError(Exception):
    """Base class for all counter program failures."""

    program_error = "Custom"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.program_error,
            "kind": type(self).__name__,
            "message": str(self),
        }


# ─── INSTRUCTION DECODING ────────────────────────────────────────────

class DecodeError(CounterProgramError):
    """The instruction buffer could not be decoded."""

    program_error = "InvalidInstructionData"


class MissingTag(DecodeError):
    """Empty instruction buffer."""


class UnknownTag(DecodeError):
    """Tag byte outside the known command set."""

    def __init__(self, tag: int) -> None:
        super().__init__(f"Unknown instruction tag 0x{tag:02X}")
        self.tag = tag


class MalformedPayload(DecodeError):
    """Payload length does not match what the tag requires."""

    def __init__(self, tag: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Instruction 0x{tag:02X} needs a {expected}-byte payload, "
            f"got {actual}"
        )
        self.tag = tag
        self.expected = expected
        self.actual = actual


# ─── ACCOUNT STATE ───────────────────────────────────────────────────

class DeserializationFailure(CounterProgramError):
    """The state region is not a valid 4-byte counter."""

    program_error = "InvalidAccountData"


class Unauthorized(CounterProgramError):
    """The account is not owned by the invoking program."""

    program_error = "IncorrectProgramId"


class ReadonlyAccount(CounterProgramError):
    """The account was passed without write access."""

    program_error = "InvalidArgument"


class NotEnoughAccountKeys(CounterProgramError):
    """No account was passed to the program."""

    program_error = "NotEnoughAccountKeys"


# ─── TRANSITIONS ─────────────────────────────────────────────────────

class TransitionError(CounterProgramError):
    """The command would move the counter outside the u32 range."""

    program_error = "ArithmeticOverflow"


class Overflow(TransitionError):
    """Increment at the maximum counter value."""


class Underflow(TransitionError):
    """Decrement at zero."""
