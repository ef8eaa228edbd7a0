"""
Pledge Exception Hierarchy

All exceptions inherit from PledgeError for easy catching.
Payloads a cell is rejected with are NOT wrapped in these; only
errors raised by the library itself are.
"""


class PledgeError(Exception):
    """Base exception for all Pledge errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class CellStateError(PledgeError):
    """Raised when a cell's outcome is read in the wrong state"""
    pass


class SchedulerError(PledgeError):
    """Raised when a scheduler is used incorrectly"""
    pass


class ObserverError(PledgeError):
    """Raised in strict mode when an observer raises during dispatch"""
    pass


class ConfigError(PledgeError):
    """Raised when mode configuration is invalid"""
    pass


class ObserverErrorWarning(RuntimeWarning):
    """Issued in lenient mode when an observer raises during dispatch"""
    pass
