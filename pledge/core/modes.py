"""
Pledge: Lenient and Strict Modes.

Decides what happens when an observer raises while a settlement is
being dispatched.

Lenient Mode: Warn and keep going. Remaining observers still run.
Strict Mode:  The first observer failure is wrapped in ObserverError and
              propagates out of the deferred unit of work. Remaining
              observers of that dispatch do not run.

The mode is read once per cell, at construction.
"""

import os
import threading
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pledge.core.exceptions import ConfigError, ObserverError, ObserverErrorWarning


MODE_ENV_VAR = "PLEDGE_MODE"


class PledgeMode(Enum):
    LENIENT = "lenient"
    STRICT  = "strict"


@dataclass(frozen=True)
class ModeConfig:
    mode:                     PledgeMode
    warn_on_observer_error:   bool
    raise_on_observer_error:  bool

    def observer_failed(self, handler: Callable[..., Any], exc: Exception) -> None:
        """
        Apply this mode's policy to an exception raised by an observer.

        Strict: raises ObserverError chained to exc.
        Lenient: issues ObserverErrorWarning (if enabled) and returns.
        """
        name = _describe(handler)
        if self.raise_on_observer_error:
            raise ObserverError(
                "Observer raised during settlement dispatch",
                {"observer": name, "error": repr(exc)},
            ) from exc
        if self.warn_on_observer_error:
            warnings.warn(
                f"Observer {name} raised {exc!r}; "
                "remaining observers still run",
                ObserverErrorWarning,
                stacklevel=3,
            )


def _describe(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


# ─────────────────────────────────────────────────────────────
# Factory Functions
# ─────────────────────────────────────────────────────────────

def init_lenient_mode() -> ModeConfig:
    return ModeConfig(
        mode=PledgeMode.LENIENT,
        warn_on_observer_error=True,
        raise_on_observer_error=False,
    )


def init_strict_mode() -> ModeConfig:
    return ModeConfig(
        mode=PledgeMode.STRICT,
        warn_on_observer_error=True,
        raise_on_observer_error=True,
    )


def init_mode_from_env() -> ModeConfig:
    """Read PLEDGE_MODE env var. Defaults to lenient."""
    raw = os.environ.get(MODE_ENV_VAR, PledgeMode.LENIENT.value).strip().lower()
    if raw == PledgeMode.STRICT.value:
        return init_strict_mode()
    if raw == PledgeMode.LENIENT.value:
        return init_lenient_mode()
    raise ConfigError(
        f"Unknown {MODE_ENV_VAR} value",
        {"value": raw, "expected": "lenient|strict"},
    )


# ── Process-wide Mode ─────────────────────────────────────────

_mode: Optional[ModeConfig] = None
_mode_lock = threading.Lock()


def get_mode() -> ModeConfig:
    """Return the process-wide mode, reading PLEDGE_MODE on first use."""
    global _mode
    with _mode_lock:
        if _mode is None:
            _mode = init_mode_from_env()
        return _mode


def set_mode(config: Optional[ModeConfig]) -> None:
    """Install config process-wide. None re-reads PLEDGE_MODE on next use."""
    global _mode
    with _mode_lock:
        _mode = config
