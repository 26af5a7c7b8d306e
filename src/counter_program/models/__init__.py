"""Data models for the counter state and host accounts."""

from .state import CounterState, STATE_SIZE
from .account import Account, check_owner
