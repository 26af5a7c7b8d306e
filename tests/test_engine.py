"""Tests for the state transition engine and the entrypoint."""

import logging

import pytest

from counter_program.engine import apply, process_instruction
from counter_program.errors import (
    DeserializationFailure,
    MalformedPayload,
    MissingTag,
    NotEnoughAccountKeys,
    Overflow,
    ReadonlyAccount,
    Unauthorized,
    Underflow,
    UnknownTag,
)
from counter_program.models.account import Account
from counter_program.models.state import CounterState
from counter_program.protocol.instruction import (
    Decrement,
    Increment,
    Set,
    build_set,
)

PROGRAM_ID = bytes(32)
U32_MAX = 2**32 - 1


def _account(counter: int = 0, owner: bytes = PROGRAM_ID) -> Account:
    account = Account.new(owner)
    account.data[:] = CounterState(counter).to_bytes()
    return account


def _counter(account: Account) -> int:
    return CounterState.from_bytes(account.data).counter


# ─── apply ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("value", [0, 1, 100, U32_MAX])
def test_apply_set(value):
    state = CounterState(counter=42)
    apply(Set(value), state)
    assert state.counter == value


@pytest.mark.parametrize("start", [0, 1, 100, U32_MAX - 1])
def test_apply_increment(start):
    state = CounterState(counter=start)
    apply(Increment(), state)
    assert state.counter == start + 1


def test_apply_increment_overflow():
    state = CounterState(counter=U32_MAX)
    with pytest.raises(Overflow):
        apply(Increment(), state)
    assert state.counter == U32_MAX


@pytest.mark.parametrize("start", [1, 2, 101, U32_MAX])
def test_apply_decrement(start):
    state = CounterState(counter=start)
    apply(Decrement(), state)
    assert state.counter == start - 1


def test_apply_decrement_underflow():
    state = CounterState(counter=0)
    with pytest.raises(Underflow):
        apply(Decrement(), state)
    assert state.counter == 0


def test_transition_errors_map_to_arithmetic_overflow():
    with pytest.raises(Overflow) as exc:
        apply(Increment(), CounterState.max())
    assert exc.value.program_error == "ArithmeticOverflow"


def test_apply_unknown_command():
    with pytest.raises(TypeError):
        apply("increment", CounterState())


# ─── process_instruction ─────────────────────────────────────────────

def test_scenario_set_then_increment():
    """Set to 100, then increment to 101."""
    account = _account()
    assert _counter(account) == 0

    process_instruction(PROGRAM_ID, [account], bytes([2, 100, 0, 0, 0]))
    assert _counter(account) == 100

    process_instruction(PROGRAM_ID, [account], bytes([0]))
    assert _counter(account) == 101


def test_increment_with_trailing_bytes():
    """An all-zero buffer is an Increment with ignored trailing bytes."""
    account = _account(100)
    process_instruction(PROGRAM_ID, [account], bytes(5))
    assert _counter(account) == 101


def test_decrement_from_zero_leaves_state_unchanged():
    account = _account(0)
    with pytest.raises(Underflow):
        process_instruction(PROGRAM_ID, [account], bytes([1]))
    assert account.data == bytearray(4)


def test_increment_at_max_leaves_state_unchanged():
    account = _account(U32_MAX)
    with pytest.raises(Overflow):
        process_instruction(PROGRAM_ID, [account], bytes([0]))
    assert account.data == bytearray(b"\xff\xff\xff\xff")


def test_malformed_set_rejected():
    account = _account(7)
    with pytest.raises(MalformedPayload):
        process_instruction(PROGRAM_ID, [account], bytes([2, 1, 2, 3]))
    assert _counter(account) == 7


@pytest.mark.parametrize(
    "data, error", [(b"", MissingTag), (b"\x03", UnknownTag)]
)
def test_decode_errors_propagate(data, error):
    account = _account(7)
    with pytest.raises(error):
        process_instruction(PROGRAM_ID, [account], data)
    assert _counter(account) == 7


def test_wrong_owner_is_unauthorized():
    account = _account(5, owner=b"\x01" * 32)
    with pytest.raises(Unauthorized) as exc:
        process_instruction(PROGRAM_ID, [account], build_set(9))
    assert exc.value.program_error == "IncorrectProgramId"
    assert account.data == bytearray([5, 0, 0, 0])


def test_owner_checked_before_decode():
    """An unauthorized caller gets Unauthorized even for garbage input."""
    account = _account(owner=b"\x01" * 32)
    with pytest.raises(Unauthorized):
        process_instruction(PROGRAM_ID, [account], b"")


def test_readonly_account_is_rejected():
    """A read-only account is never rewritten."""
    account = _account()
    account.is_writable = False
    with pytest.raises(ReadonlyAccount) as exc:
        process_instruction(PROGRAM_ID, [account], bytes([0]))
    assert exc.value.program_error == "InvalidArgument"
    assert account.data == bytearray(4)


def test_readonly_checked_before_decode():
    account = _account()
    account.is_writable = False
    with pytest.raises(ReadonlyAccount):
        process_instruction(PROGRAM_ID, [account], b"\x09")


def test_no_accounts():
    with pytest.raises(NotEnoughAccountKeys):
        process_instruction(PROGRAM_ID, [], bytes([0]))


@pytest.mark.parametrize("size", [0, 3, 5])
def test_bad_region_size(size):
    account = Account.new(PROGRAM_ID, size=size)
    with pytest.raises(DeserializationFailure):
        process_instruction(PROGRAM_ID, [account], bytes([0]))
    assert account.data == bytearray(size)


def test_only_first_account_is_used():
    first, second = _account(1), _account(50)
    process_instruction(PROGRAM_ID, [first, second], bytes([0]))
    assert _counter(first) == 2
    assert _counter(second) == 50


def test_region_rewritten_in_place():
    account = _account()
    region = account.data
    process_instruction(PROGRAM_ID, [account], build_set(0x01020304))
    assert account.data is region
    assert region == bytearray([4, 3, 2, 1])


def test_returns_new_state():
    state = process_instruction(PROGRAM_ID, [_account(9)], bytes([1]))
    assert state == CounterState(counter=8)


def test_logs_new_counter(caplog):
    with caplog.at_level(logging.INFO, logger="counter_program.engine"):
        process_instruction(PROGRAM_ID, [_account(41)], bytes([0]))
    assert "Counter is now 42" in caplog.text


def test_set_out_of_range_never_reaches_state():
    """A u32 overflow is caught when the command is built, not when written."""
    state = CounterState(counter=5)
    with pytest.raises(ValueError):
        apply(Set(2**32), state)
    assert state.counter == 5
