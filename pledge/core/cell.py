"""
pledge/core/cell.py

SettlementCell: the eventual outcome of an asynchronous operation.

Contract:
  1. The initializer runs synchronously inside __init__ and receives two
     triggers, fulfill(value) and reject(error), bound to this cell.
  2. If the initializer raises before settling, the cell is rejected with
     the raised exception.
  3. The cell settles at most once. Later fulfill/reject calls are ignored.
  4. Observers never run inside the call that registered them, and never
     before settlement. Every notification goes through the scheduler.
  5. Within one settlement: success (or failure) observers run first, in
     registration order, then settle observers, in registration order.

Registration methods return the SAME cell. There is no chaining of
transformed results and no derived cells.
"""

import threading
from functools import partial
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from pledge.core.exceptions import CellStateError
from pledge.core.modes import ModeConfig, get_mode
from pledge.core.scheduler import Scheduler, get_default_scheduler
from pledge.core.state import (
    PENDING,
    CellState,
    Fulfilled,
    Outcome,
    Pending,
    Rejected,
)


T = TypeVar("T")
E = TypeVar("E")

Initializer = Callable[[Callable[..., None], Callable[..., None]], Any]


class SettlementCell(Generic[T, E]):
    """
    Single-settlement container with deferred observer notification.

    Thread-safe: the state transition and the three observer lists are
    guarded by one lock per cell. Work is handed to the scheduler under
    that lock, so queue order follows settlement and registration order.
    Observers are never called under it; Scheduler.call_soon() must not
    call back into the cell.
    """

    def __init__(
        self,
        initializer: Initializer,
        scheduler:   Optional[Scheduler]  = None,
        mode:        Optional[ModeConfig] = None,
    ) -> None:
        if not callable(initializer):
            raise TypeError(
                f"SettlementCell initializer must be callable, "
                f"got {type(initializer).__name__}"
            )

        self._scheduler: Scheduler  = scheduler if scheduler is not None else get_default_scheduler()
        self._mode:      ModeConfig = mode if mode is not None else get_mode()

        self._lock:    threading.Lock = threading.Lock()
        self._outcome: Outcome        = PENDING

        self._success_observers: List[Callable[[T], Any]]  = []
        self._failure_observers: List[Callable[[E], Any]]  = []
        self._settle_observers:  List[Callable[[], Any]]   = []

        def fulfill(value: T = None) -> None:
            self._settle(Fulfilled(value))

        def reject(error: E = None) -> None:
            self._settle(Rejected(error))

        try:
            initializer(fulfill, reject)
        except Exception as exc:
            self._settle(Rejected(exc))

    # ── Registration ──────────────────────────────────────────

    def on_success(self, handler: Callable[[T], Any]) -> "SettlementCell[T, E]":
        """
        Register handler(value) for fulfillment.

        Already fulfilled: handler is scheduled for a later turn.
        Pending: handler waits for settlement.
        Already rejected: handler can never fire and is dropped.
        """
        _require_callable(handler, "on_success")
        with self._lock:
            outcome = self._outcome
            if isinstance(outcome, Pending):
                self._success_observers.append(handler)
            elif isinstance(outcome, Fulfilled):
                self._scheduler.call_soon(partial(self._invoke, handler, outcome.value))
        return self

    def on_failure(self, handler: Callable[[E], Any]) -> "SettlementCell[T, E]":
        """Register handler(error) for rejection. Mirror of on_success()."""
        _require_callable(handler, "on_failure")
        with self._lock:
            outcome = self._outcome
            if isinstance(outcome, Pending):
                self._failure_observers.append(handler)
            elif isinstance(outcome, Rejected):
                self._scheduler.call_soon(partial(self._invoke, handler, outcome.error))
        return self

    def on_settle(self, handler: Callable[[], Any]) -> "SettlementCell[T, E]":
        """Register handler() to run once after settlement of either kind."""
        _require_callable(handler, "on_settle")
        with self._lock:
            if isinstance(self._outcome, Pending):
                self._settle_observers.append(handler)
            else:
                self._scheduler.call_soon(partial(self._invoke, handler))
        return self

    # ── Read Access ───────────────────────────────────────────

    @property
    def state(self) -> CellState:
        return self._outcome.state

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def is_pending(self) -> bool:
        return isinstance(self._outcome, Pending)

    @property
    def is_settled(self) -> bool:
        return not self.is_pending

    @property
    def value(self) -> T:
        """Fulfillment value. Raises CellStateError unless fulfilled."""
        outcome = self._outcome
        if not isinstance(outcome, Fulfilled):
            raise CellStateError(
                "Cell has no value",
                {"state": outcome.state.value},
            )
        return outcome.value

    @property
    def error(self) -> E:
        """Rejection payload. Raises CellStateError unless rejected."""
        outcome = self._outcome
        if not isinstance(outcome, Rejected):
            raise CellStateError(
                "Cell has no error",
                {"state": outcome.state.value},
            )
        return outcome.error

    # ── Internal ──────────────────────────────────────────────

    def _settle(self, outcome: Outcome) -> None:
        """
        Move from Pending to outcome and schedule one dispatch unit.
        Silently ignored if already settled.
        """
        with self._lock:
            if not isinstance(self._outcome, Pending):
                return
            self._outcome = outcome

            if isinstance(outcome, Fulfilled):
                primary: List[Callable[..., Any]] = self._success_observers
                args: Tuple[Any, ...] = (outcome.value,)
            else:
                primary = self._failure_observers
                args = (outcome.error,)
            terminal = self._settle_observers

            # Nothing can be appended after settlement; release references.
            self._success_observers = []
            self._failure_observers = []
            self._settle_observers  = []

            self._scheduler.call_soon(partial(self._dispatch, primary, args, terminal))

    def _dispatch(
        self,
        primary:  List[Callable[..., Any]],
        args:     Tuple[Any, ...],
        terminal: List[Callable[[], Any]],
    ) -> None:
        for handler in primary:
            self._invoke(handler, *args)
        for handler in terminal:
            self._invoke(handler)

    def _invoke(self, handler: Callable[..., Any], *args: Any) -> None:
        try:
            handler(*args)
        except Exception as exc:
            self._mode.observer_failed(handler, exc)

    def __repr__(self) -> str:
        outcome = self._outcome
        if isinstance(outcome, Fulfilled):
            return f"SettlementCell(state='fulfilled', value={outcome.value!r})"
        if isinstance(outcome, Rejected):
            return f"SettlementCell(state='rejected', error={outcome.error!r})"
        return "SettlementCell(state='pending')"


def _require_callable(handler: Any, method: str) -> None:
    if not callable(handler):
        raise TypeError(
            f"{method}() handler must be callable, got {type(handler).__name__}"
        )
