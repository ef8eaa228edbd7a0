"""
pledge/__init__.py

Pledge: single-settlement cells with deferred observer notification.

A SettlementCell settles once, to Fulfilled(value) or Rejected(error),
and notifies observers registered with on_success / on_failure / on_settle
on a later turn of the scheduler it was built with.
"""

__version__ = "0.1.0"

from pledge.core.cell import SettlementCell
from pledge.core.deferred import Deferred
from pledge.core.exceptions import (
    CellStateError,
    ConfigError,
    ObserverError,
    ObserverErrorWarning,
    PledgeError,
    SchedulerError,
)
from pledge.core.modes import (
    ModeConfig,
    PledgeMode,
    get_mode,
    init_lenient_mode,
    init_mode_from_env,
    init_strict_mode,
    set_mode,
)
from pledge.core.scheduler import (
    AsyncioScheduler,
    DeferredQueue,
    Scheduler,
    get_default_scheduler,
    reset_default_scheduler,
    set_default_scheduler,
)
from pledge.core.state import CellState, Fulfilled, Pending, Rejected

__all__ = [
    # Core types
    "SettlementCell",
    "Deferred",
    "CellState",
    "Pending",
    "Fulfilled",
    "Rejected",
    # Scheduling
    "Scheduler",
    "DeferredQueue",
    "AsyncioScheduler",
    "get_default_scheduler",
    "set_default_scheduler",
    "reset_default_scheduler",
    # Modes
    "PledgeMode",
    "ModeConfig",
    "init_lenient_mode",
    "init_strict_mode",
    "init_mode_from_env",
    "get_mode",
    "set_mode",
    # Errors
    "PledgeError",
    "CellStateError",
    "SchedulerError",
    "ObserverError",
    "ConfigError",
    "ObserverErrorWarning",
]
