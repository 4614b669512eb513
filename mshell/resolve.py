"""Finding the program a command name refers to."""

from __future__ import annotations

import errno
import os

from .env import Environment

PIPE_ERROR_MESSAGE = "probleme survenu lors de la creation du pipe\n"

_POSIX_STATUS = {
    errno.ENOENT: 127,
    errno.EACCES: 126,
    errno.EINTR: 130,
}


class CommandError(Exception):
    """Raised when a command cannot be run.

    ``status`` is the code the shell keeps as its exit status. The message
    is the line written to standard error.
    """

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def posix_status(code: int) -> int:
    """Map an errno-style code onto the exit status a shell reports."""
    return _POSIX_STATUS.get(code, code)


def _system_error(path: str) -> CommandError:
    """Build the error for a path that is missing or cannot be executed."""
    try:
        os.stat(path)
    except OSError as exc:
        code = exc.errno or errno.ENOENT
    else:
        code = errno.EACCES
    return CommandError(f"{path}: {os.strerror(code)}", code)


def _search_path(name: str, env: Environment) -> str:
    path = env.lookup("PATH", 0)
    directories = [part for part in (path or "").split(":") if part]
    for directory in directories:
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK):
            if os.access(candidate, os.X_OK):
                return candidate
            raise _system_error(candidate)
    raise CommandError(f"minishell: {name} : command not found", 127)


def resolve_command(name: str, env: Environment) -> str:
    """Return the path to execute for ``name``.

    Names holding a slash are used as they are; others are looked up in the
    directories of ``PATH``. Raises :class:`CommandError` on failure.
    """
    if "/" in name:
        if os.access(name, os.X_OK):
            if not os.path.isfile(name):
                raise CommandError(f"{name} : Is a directory", 126)
            return name
        raise _system_error(name)
    return _search_path(name, env)