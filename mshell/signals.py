"""Signal dispositions for the prompt and for running commands."""

from __future__ import annotations

import signal
import sys
from types import FrameType
from typing import Optional


def reset_prompt(signum: int, frame: Optional[FrameType]) -> None:
    """Start a fresh prompt line after an interrupt at the prompt."""
    sys.stdout.write("\n")
    sys.stdout.flush()


def print_newline(signum: int, frame: Optional[FrameType]) -> None:
    """Move to a new line when a running command is interrupted."""
    sys.stdout.write("\n")
    sys.stdout.flush()


def interactive_signals() -> None:
    """Ignore SIGQUIT and redraw the prompt on SIGINT."""
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    signal.signal(signal.SIGINT, reset_prompt)


def noninteractive_signals() -> None:
    """Print a newline on SIGINT and SIGQUIT while commands run."""
    signal.signal(signal.SIGINT, print_newline)
    signal.signal(signal.SIGQUIT, print_newline)