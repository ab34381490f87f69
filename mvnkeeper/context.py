"""
Shared context object for mvnkeeper CLI commands.

One :class:`MvnKeeperContext` is created per invocation by the ``mvnkeeper``
group and handed to subcommands through Click's context mechanism.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from mvnkeeper.config import MvnKeeperConfig


class MvnKeeperContext:
    """Global options shared by every subcommand.

    Attributes:
        config_path: Configuration file in use, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; defaults until the group callback
            has run.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: MvnKeeperConfig = MvnKeeperConfig()


#: Click decorator for injecting :class:`MvnKeeperContext` into commands.
pass_context = click.make_pass_decorator(MvnKeeperContext, ensure=True)
