"""
pledge/cli/demo.py

pledge demo: narrate timer-settled cells.

Usage:
    pledge demo                     One 3-second cell
    pledge demo 2 3 4               Three cells; odd delays reject
    pledge demo 2 3 --scale 0.01    Same, 100x faster
    pledge demo 3 --strict          Observer failures raise

Exit codes:
    0  Every cell settled
    1  A cell was not reported settled in time
    2  Usage error (bad arguments, unknown PLEDGE_MODE)
"""

import asyncio
import sys
from typing import List, Optional, Tuple

import click

from pledge.core.exceptions import ConfigError
from pledge.core.modes import ModeConfig, get_mode, init_strict_mode
from pledge.demos.wait_for import wait_for


# Extra wait past the longest timer before giving up on settle reports
SETTLE_GRACE_SECONDS = 1.0


async def _run(delays: Tuple[int, ...], scale: float, mode: Optional[ModeConfig]) -> List[str]:
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    remaining = len(delays)
    states: List[str] = []

    def one_settled(cell) -> None:
        nonlocal remaining
        states.append(cell.state.value)
        remaining -= 1
        if remaining == 0 and not done.done():
            done.set_result(None)

    for seconds in delays:
        click.echo(f"Waiting {seconds}s ...")
        cell = wait_for(seconds, loop, scale=scale, mode=mode)
        (
            cell
            .on_success(lambda val: click.echo(f"Resolved with value: {val}"))
            .on_failure(lambda err: click.echo(f"Rejected with reason: {err}", err=True))
            .on_settle(lambda: click.echo("Operation completed."))
            .on_settle(lambda cell=cell: one_settled(cell))
        )

    # A strict-mode observer failure skips the rest of its dispatch,
    # including one_settled(); never wait past the last timer plus grace.
    await asyncio.wait({done}, timeout=max(delays) * scale + SETTLE_GRACE_SECONDS)
    return states


@click.command(name="demo")
@click.argument("seconds", nargs=-1, type=click.IntRange(min=0))
@click.option(
    "--scale",
    type=click.FloatRange(min=0.0),
    default=1.0,
    show_default=True,
    help="Multiply every delay by this factor (values are unchanged).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Raise observer failures instead of warning.",
)
def demo_command(seconds: Tuple[int, ...], scale: float, strict: bool) -> None:
    """
    Settle one cell per SECONDS after that many seconds.

    Even delays fulfill with the delay; odd delays reject.
    """
    delays = seconds or (3,)
    try:
        mode = init_strict_mode() if strict else get_mode()
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    states = asyncio.run(_run(delays, scale, mode))

    fulfilled = states.count("fulfilled")
    click.echo(
        f"{len(states)} settled: {fulfilled} fulfilled, "
        f"{len(states) - fulfilled} rejected"
    )

    missing = len(delays) - len(states)
    if missing:
        click.echo(f"{missing} cell(s) not reported settled in time", err=True)
        sys.exit(1)
