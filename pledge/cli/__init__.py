"""
pledge/cli/__init__.py

Pledge CLI: root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    pledge = "pledge.cli:cli"

Adding a new command:
    1. Create pledge/cli/your_command.py with a @click.command()
    2. Import it here
    3. cli.add_command(your_command)
"""

import click

from pledge.cli.demo import demo_command


@click.group()
@click.version_option(package_name="pledge")
def cli() -> None:
    """
    Pledge: single-settlement cells with deferred observers.

    \b
    Commands:
      demo      Settle cells from asyncio timers and narrate observers.

    \b
    Quick start:
      pledge demo
      pledge demo 2 3 --scale 0.01
    """
    pass


cli.add_command(demo_command)
