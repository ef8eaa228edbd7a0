"""
Deferred: the creator side of a SettlementCell.

A SettlementCell hands its triggers only to its initializer. A Deferred
keeps them, so code that settles the outcome later (a callback, another
thread, a protocol handler) can do it without living inside an initializer.

    deferred = Deferred()
    deferred.cell.on_success(print)
    ...
    deferred.resolve(42)
"""

from typing import Any, Callable, Optional

from pledge.core.cell import SettlementCell
from pledge.core.modes import ModeConfig
from pledge.core.scheduler import Scheduler


class Deferred:
    """
    Attributes:
        cell (SettlementCell): the consumer side.
        resolve (function): fulfills cell. Ignored once cell settled.
        reject (function): rejects cell. Ignored once cell settled.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler]  = None,
        mode:      Optional[ModeConfig] = None,
    ) -> None:
        self.resolve: Callable[..., None]
        self.reject:  Callable[..., None]
        self.cell = SettlementCell(self._capture, scheduler=scheduler, mode=mode)

    def _capture(self, resolve: Callable[..., None], reject: Callable[..., None]) -> None:
        self.resolve = resolve
        self.reject  = reject

    def __repr__(self) -> str:
        return f"Deferred({self.cell!r})"
