"""
pledge/core/state.py

Settlement state and outcome storage.

A cell's outcome is exactly one of three shapes:

    Pending()             not settled yet
    Fulfilled(value)      settled with a success payload
    Rejected(error)       settled with a failure payload

The shape IS the state. There are no separate optional value / error
fields, so a payload of None, 0, "" or False is never confused with
"not settled yet".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class CellState(Enum):
    """Lifecycle states of a SettlementCell."""
    PENDING   = "pending"
    FULFILLED = "fulfilled"
    REJECTED  = "rejected"


@dataclass(frozen=True)
class Pending:
    """Outcome of a cell that has not settled."""

    @property
    def state(self) -> CellState:
        return CellState.PENDING


@dataclass(frozen=True)
class Fulfilled:
    """Outcome of a cell that settled successfully."""
    value: Any

    @property
    def state(self) -> CellState:
        return CellState.FULFILLED


@dataclass(frozen=True)
class Rejected:
    """Outcome of a cell that settled with a failure."""
    error: Any

    @property
    def state(self) -> CellState:
        return CellState.REJECTED


Outcome = Union[Pending, Fulfilled, Rejected]

PENDING = Pending()
