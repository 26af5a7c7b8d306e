"""MCP server entry point for the counter program.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport. Accounts live in an
in-memory ledger owned by this process.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .engine import process_instruction
from .errors import CounterProgramError
from .models.account import Account, parse_key
from .models.state import STATE_SIZE, CounterState
from .protocol.instruction import (
    COMMAND_NAMES,
    Set,
    build_command,
    build_decrement,
    build_increment,
    build_set,
    decode,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    load_config().server_name,
    instructions="MCP server for a u32 counter program with binary instructions",
)

# Global ledger state
_accounts: dict[str, Account] = {}


def _get_account(key: str) -> Account:
    """Look up an account by hex key, raising if unknown."""
    account = _accounts.get(key.lower())
    if account is None:
        raise KeyError(f"Unknown account '{key}'. Use 'create_account' first.")
    return account


def _execute(key: str, instruction: bytes) -> dict[str, Any]:
    """Invoke the program on one account and report the outcome."""
    try:
        account = _get_account(key)
    except KeyError as e:
        return {"error": e.args[0]}

    try:
        state = process_instruction(
            load_config().program_id, [account], instruction
        )
    except CounterProgramError as e:
        logger.info("Instruction %s failed: %s", instruction.hex(" "), e)
        result = e.to_dict()
        result["account"] = account.key.hex()
        return result

    return {"account": account.key.hex(), "counter": state.counter}


# ─── ACCOUNT TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def create_account(owner: str | None = None) -> dict[str, Any]:
    """Allocate a new zero-initialized counter account.

    Args:
        owner: Optional owner program id (64 hex chars). Defaults to the
               configured program id; any other owner makes the account
               read-only for this program.
    """
    try:
        owner_key = parse_key(owner) if owner else load_config().program_id
    except ValueError as e:
        return {"error": f"Invalid owner: {e}"}

    account = Account.new(owner_key)
    _accounts[account.key.hex()] = account
    logger.info("Created account %s", account.key.hex())
    return {"account": account.key.hex(), "owner": owner_key.hex(), "counter": 0}


@mcp.tool()
def list_accounts() -> dict[str, Any]:
    """List all accounts in the ledger with their counters."""
    accounts = []
    for key, account in _accounts.items():
        entry: dict[str, Any] = {"account": key, "owner": account.owner.hex()}
        try:
            entry["counter"] = CounterState.from_bytes(account.data).counter
        except CounterProgramError:
            entry["counter"] = None
        accounts.append(entry)
    return {"accounts": accounts}


@mcp.tool()
def get_counter(account: str) -> dict[str, Any]:
    """Read the counter stored in an account.

    Args:
        account: Account key (64 hex chars).
    """
    try:
        acc = _get_account(account)
        state = CounterState.from_bytes(acc.data)
    except KeyError as e:
        return {"error": e.args[0]}
    except CounterProgramError as e:
        return e.to_dict()

    result = state.to_dict()
    result["account"] = acc.key.hex()
    return result


# ─── INSTRUCTION TOOLS ───────────────────────────────────────────────

@mcp.tool()
def increment(account: str) -> dict[str, Any]:
    """Add one to the counter.

    Args:
        account: Account key (64 hex chars).
    """
    return _execute(account, build_increment())


@mcp.tool()
def decrement(account: str) -> dict[str, Any]:
    """Subtract one from the counter. Fails at zero.

    Args:
        account: Account key (64 hex chars).
    """
    return _execute(account, build_decrement())


@mcp.tool()
def set_counter(account: str, value: int) -> dict[str, Any]:
    """Overwrite the counter.

    Args:
        account: Account key (64 hex chars).
        value: New value, 0 to 4294967295.
    """
    try:
        instruction = build_set(value)
    except ValueError as e:
        return {"error": str(e)}
    return _execute(account, instruction)


@mcp.tool()
def send_instruction(account: str, data_hex: str) -> dict[str, Any]:
    """Send raw instruction bytes to the program.

    Args:
        account: Account key (64 hex chars).
        data_hex: Instruction bytes as hex, e.g. "02 64 00 00 00".
    """
    try:
        data = bytes.fromhex(data_hex)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}
    return _execute(account, data)


@mcp.tool()
def decode_instruction(data_hex: str) -> dict[str, Any]:
    """Decode instruction bytes without executing them.

    Args:
        data_hex: Instruction bytes as hex.
    """
    try:
        command = decode(bytes.fromhex(data_hex))
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}
    except CounterProgramError as e:
        return e.to_dict()

    result: dict[str, Any] = {"command": command.tag.name.lower()}
    if isinstance(command, Set):
        result["value"] = command.value
    return result


@mcp.tool()
def encode_instruction(command: str, value: int | None = None) -> dict[str, Any]:
    """Build instruction bytes for a command.

    Args:
        command: One of increment, decrement, set.
        value: New counter value, required for set.
    """
    try:
        data = build_command(command, value)
    except ValueError as e:
        return {"error": str(e)}
    return {"command": command, "data_hex": data.hex(" ")}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("counter://program")
def resource_program() -> str:
    """Program id and wire formats."""
    return json.dumps({
        "program_id": load_config().program_id.hex(),
        "instructions": {name: int(tag) for name, tag in COMMAND_NAMES.items()},
        "set_payload": "u32 little-endian",
        "state_size": STATE_SIZE,
        "state_layout": "u32 little-endian",
    })


@mcp.resource("counter://accounts")
def resource_accounts() -> str:
    """All ledger accounts with raw data."""
    return json.dumps({"accounts": [a.to_dict() for a in _accounts.values()]})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=load_config().log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
