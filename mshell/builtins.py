"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from typing import Callable, Optional, Sequence, TextIO

from .env import ShellState
from .lexer import is_special

BUILTINS = frozenset({"exit", "pwd", "cd", "export", "echo", "unset"})

_ATOI_SPACES = frozenset(" \t\n\v\f\r")


class ShellExit(Exception):
    """Raised by ``exit`` to stop the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status % 256


def is_builtin(name: Optional[str]) -> bool:
    """True when ``name`` is one of the shell's own commands."""
    return name in BUILTINS


def is_numeric(text: str) -> bool:
    """True when ``text`` is an optionally signed number, blanks allowed around it."""
    stripped = text.lstrip(" \t\n\r\v\f")
    if not stripped:
        return False
    if stripped[0] in "+-":
        stripped = stripped[1:]
    seen_space = False
    for char in stripped:
        if char in " \t\n\r\v\f":
            seen_space = True
        elif not "0" <= char <= "9":
            return False
        elif seen_space:
            return False
    return True


def _atoi(text: str) -> int:
    index = 0
    while index < len(text) and text[index] in _ATOI_SPACES:
        index += 1
    sign = 1
    if text[index:index + 1] == "-":
        sign = -1
        index += 1
    elif text[index:index + 1] == "+":
        index += 1
    value = 0
    while index < len(text) and "0" <= text[index] <= "9":
        value = value * 10 + int(text[index])
        index += 1
    return sign * value


def _valid_name_start(text: str) -> bool:
    return bool(text) and (text[0] == "_" or text[0].isascii() and text[0].isalpha())


def _report_identifier(text: str, stderr: TextIO) -> None:
    stderr.write(f"export: `{text}': not a valid identifier\n")


def echo(args: Sequence[str], stdout: TextIO) -> None:
    """Print the arguments separated by spaces; leading ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    while words and words[0] == "-n":
        newline = False
        words.pop(0)
    stdout.write(" ".join(words))
    if newline:
        stdout.write("\n")


def pwd(state: ShellState, stdout: TextIO, stderr: TextIO) -> None:
    """Print the working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        stderr.write(f"{exc.strerror}\n")
        state.status = exc.errno or 1
        return
    stdout.write(f"{cwd}\n")


def cd(args: Sequence[str], stderr: TextIO) -> int:
    """Change directory; return the exit status."""
    if len(args) < 2:
        return 0
    if len(args) > 2:
        stderr.write("cd: too many arguments\n")
        return 1
    target = args[1]
    if target.startswith("-"):
        stderr.write(f"cd: {target}: invalid option\n")
        return 1
    try:
        info = os.stat(target)
    except OSError as exc:
        stderr.write(f"{target}: {exc.strerror}\n")
        return 1
    if os.path.isfile(target) and not os.path.isdir(target) and info:
        stderr.write(f"cd: {target}: No such file or directory\n")
        return 1
    try:
        os.chdir(target)
    except OSError as exc:
        stderr.write(f"{target}: {exc.strerror}\n")
        return 1
    return 0


def _export_kind(text: str) -> Optional[bool]:
    """None for an invalid entry, False for a bare name, True for ``NAME=value``."""
    if not _valid_name_start(text):
        return None
    name, sep, _ = text.partition("=")
    if any(is_special(char) for char in name):
        return None
    return bool(sep)


def export(state: ShellState, args: Sequence[str], stderr: TextIO) -> None:
    """Set each ``NAME=value`` argument in the environment."""
    for entry in args[1:]:
        kind = _export_kind(entry)
        if kind is None:
            _report_identifier(entry, stderr)
            state.status = 1
        elif kind:
            state.env.export(entry)


def unset(state: ShellState, args: Sequence[str], stderr: TextIO) -> None:
    """Remove each named variable from the environment."""
    for name in args[1:]:
        if not _valid_name_start(name) or any(is_special(char) for char in name):
            _report_identifier(name, stderr)
            state.status = 1
        else:
            state.env.unset(name)


def exit_builtin(state: ShellState, args: Sequence[str], stdout: TextIO,
                 stderr: TextIO) -> None:
    """Raise :class:`ShellExit`; with too many arguments, only set the status."""
    stdout.write("exit\n")
    if len(args) < 2:
        raise ShellExit(state.status)
    argument = args[1]
    if not is_numeric(argument):
        stderr.write(f"bash: exit: {argument}: numeric argument required\n")
        raise ShellExit(2)
    if len(args) > 2:
        stderr.write("bash: exit: too many arguments\n")
        state.status = 1
        return
    raise ShellExit(_atoi(argument))


def _run_cd(state: ShellState, args: Sequence[str], stdout: TextIO,
            stderr: TextIO) -> None:
    state.status = cd(args, stderr)


_DISPATCH: dict[str, Callable[[ShellState, Sequence[str], TextIO, TextIO], None]] = {
    "exit": exit_builtin,
    "pwd": lambda state, args, out, err: pwd(state, out, err),
    "echo": lambda state, args, out, err: echo(args, out),
    "cd": _run_cd,
    "export": lambda state, args, out, err: export(state, args, err),
    "unset": lambda state, args, out, err: unset(state, args, err),
}


def run_builtin(state: ShellState, args: Sequence[str], stdout: TextIO,
                stderr: TextIO) -> int:
    """Run the builtin named by ``args[0]`` and return the shell's status."""
    if not args or not is_builtin(args[0]):
        raise ValueError(f"not a builtin: {args[0] if args else ''!r}")
    _DISPATCH[args[0]](state, args, stdout, stderr)
    return state.status