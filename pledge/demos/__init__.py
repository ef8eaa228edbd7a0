"""
Pledge demos.

These demos show cells settled by real asynchronous triggers.
"""

from pledge.demos.wait_for import OddNumberError, wait_for

__all__ = [
    "OddNumberError",
    "wait_for",
]
