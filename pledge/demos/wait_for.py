"""
Timer demo - a cell settled by an asyncio timer.

wait_for(n) settles after n seconds: fulfilled with n when n is even,
rejected with OddNumberError when n is odd.
"""

import asyncio
from typing import Optional

from pledge.core.cell import SettlementCell
from pledge.core.exceptions import PledgeError
from pledge.core.modes import ModeConfig
from pledge.core.scheduler import AsyncioScheduler


class OddNumberError(PledgeError):
    """Raised (as a rejection payload) by wait_for() for odd delays"""
    pass


def wait_for(
    seconds: int,
    loop:    asyncio.AbstractEventLoop,
    scale:   float = 1.0,
    mode:    Optional[ModeConfig] = None,
) -> SettlementCell:
    """
    Return a cell that settles seconds * scale seconds from now on loop.

    Args:
        seconds: Delay, and the value the cell is fulfilled with.
        loop:    Event loop that owns the timer and delivers notifications.
        scale:   Multiplier applied to the delay only.
        mode:    Observer-failure policy for the cell.
    """
    def initializer(resolve, reject):
        def fire():
            if seconds % 2 == 0:
                resolve(seconds)
            else:
                reject(OddNumberError(
                    f"Odd number {seconds}, rejected!",
                ))

        loop.call_later(seconds * scale, fire)

    return SettlementCell(initializer, scheduler=AsyncioScheduler(loop), mode=mode)
