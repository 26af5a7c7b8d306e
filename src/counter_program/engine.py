"""State transition engine and program entrypoint.

``apply`` moves a ``CounterState`` forward by one command.
``process_instruction`` wraps it with the host-facing steps: account
lookup, ownership check, decoding and writing the state back.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .errors import (
    NotEnoughAccountKeys,
    Overflow,
    ReadonlyAccount,
    Underflow,
    Unauthorized,
)
from .models.account import Account, check_owner
from .models.state import CounterState
from .protocol.instruction import (
    U32_MAX,
    Command,
    Decrement,
    Increment,
    Set,
    decode,
)

logger = logging.getLogger(__name__)


def apply(command: Command, state: CounterState) -> None:
    """Apply ``command`` to ``state`` in place.

    The state is left unmodified when an error is raised.

    Raises:
        Overflow: Increment at 2**32 - 1.
        Underflow: Decrement at 0.
    """
    if isinstance(command, Increment):
        if state.counter >= U32_MAX:
            raise Overflow(f"Counter is already at {U32_MAX}")
        state.counter += 1
    elif isinstance(command, Decrement):
        if state.counter <= 0:
            raise Underflow("Counter is already at 0")
        state.counter -= 1
    elif isinstance(command, Set):
        state.counter = command.value
    else:
        raise TypeError(f"Not a counter command: {command!r}")


def process_instruction(
    program_id: bytes,
    accounts: Sequence[Account],
    instruction_data: bytes,
) -> CounterState:
    """Run one decode-then-apply cycle against the first account.

    The account data is rewritten only when every step succeeds.

    Args:
        program_id: Key of the invoking program.
        accounts: Accounts passed by the host; only the first is used.
        instruction_data: Raw instruction bytes.

    Returns:
        The new counter state.
    """
    if not accounts:
        raise NotEnoughAccountKeys("Expected a counter account")
    account = accounts[0]

    if not check_owner(program_id, account.owner):
        logger.warning("Counter account does not have the correct program id")
        raise Unauthorized(
            f"Account {account.key.hex()} is owned by {account.owner.hex()}, "
            f"not {program_id.hex()}"
        )

    if not account.is_writable:
        raise ReadonlyAccount(f"Account {account.key.hex()} is not writable")

    command = decode(instruction_data)
    logger.debug("Decoded instruction %r", command)

    state = CounterState.from_bytes(account.data)
    apply(command, state)
    state.write_into(account.data)

    logger.info("Counter is now %d", state.counter)
    return state
