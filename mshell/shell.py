"""Processing one command line from text to finished commands."""

from __future__ import annotations

import os
import sys
from typing import Iterable, Mapping, Optional, Union

from .commands import build_commands
from .env import Environment, ShellState
from .executor import execute
from .expand import expand_tokens
from .lexer import (
    UNCLOSED_QUOTE_MESSAGE,
    ShellSyntaxError,
    drop_empty_tokens,
    has_unclosed_quote,
    is_blank,
    tokenize,
    validate_tokens,
)

SYNTAX_ERROR_STATUS = 2


class Shell:
    """A shell session: its environment, last status and output streams."""

    def __init__(self, environ: Union[Mapping[str, str], Iterable[str], None] = None) -> None:
        if environ is None:
            environ = os.environ
        if isinstance(environ, Mapping):
            entries = [f"{name}={value}" for name, value in environ.items()]
        else:
            entries = list(environ)
        self.state = ShellState(Environment(entries))
        self.stdout = sys.stdout
        self.stderr = sys.stderr

    def _syntax_error(self, message: str) -> bool:
        self.stderr.write(f"{message}\n")
        self.state.status = SYNTAX_ERROR_STATUS
        return False

    def run_line(self, line: str) -> bool:
        """Parse and run one line; return False when nothing was executed.

        ``exit`` propagates as :class:`mshell.builtins.ShellExit`.
        """
        if is_blank(line):
            return False
        if has_unclosed_quote(line):
            return self._syntax_error(UNCLOSED_QUOTE_MESSAGE)
        tokens = tokenize(line)
        try:
            validate_tokens(tokens)
        except ShellSyntaxError as exc:
            return self._syntax_error(str(exc))
        tokens = drop_empty_tokens(
            expand_tokens(tokens, self.state.env, self.state.status)
        )
        try:
            commands = build_commands(tokens)
        except ShellSyntaxError as exc:
            return self._syntax_error(str(exc))
        if not commands:
            return False
        execute(self.state, commands, self.stdout, self.stderr)
        return True