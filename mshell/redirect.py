"""Opening the files named by input and output redirections."""

from __future__ import annotations

import os
import tempfile
from typing import BinaryIO, Callable, Optional, Sequence, TextIO

from .commands import Redirect
from .lexer import TokenType

Reader = Callable[[str], Optional[str]]

HEREDOC_PROMPT = ">"


class RedirectError(Exception):
    """Raised when a redirection cannot be set up; the message was already shown."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _fail(path: str, exc: OSError, stderr: TextIO) -> RedirectError:
    message = f"{path}: {exc.strerror}"
    stderr.write(f"{message}\n")
    return RedirectError(message)


def read_heredoc(delimiter: str, reader: Reader, stderr: TextIO) -> str:
    """Collect lines from ``reader`` until one starts with ``delimiter``.

    ``reader`` is called with the prompt and returns None at end of input,
    in which case a warning is written to ``stderr``.
    """
    lines: list[str] = []
    while True:
        line = reader(HEREDOC_PROMPT)
        if line is None:
            stderr.write(
                "warning: here-document delimited by end-of-file "
                f"(wanted '{delimiter}')\n"
            )
            break
        if line.startswith(delimiter):
            break
        lines.append(f"{line}\n")
    return "".join(lines)


def open_input(redirects: Sequence[Redirect], reader: Reader,
               stderr: TextIO) -> Optional[BinaryIO]:
    """Open every input redirection in order and return the last one.

    All here-documents are read first; each of them then supplies the text of
    the last one read. Returns None when there is no redirection.
    """
    heredoc_text = ""
    for redirect in redirects:
        if redirect.type is TokenType.HEREDOC:
            heredoc_text = read_heredoc(redirect.file, reader, stderr)
    current: Optional[BinaryIO] = None
    for redirect in redirects:
        if current is not None:
            current.close()
            current = None
        if redirect.type is TokenType.HEREDOC:
            current = tempfile.TemporaryFile()
            current.write(heredoc_text.encode("utf-8"))
            current.seek(0)
        else:
            try:
                current = open(redirect.file, "rb")
            except OSError as exc:
                raise _fail(redirect.file, exc, stderr) from exc
    return current


def open_output(redirects: Sequence[Redirect], stderr: TextIO) -> Optional[BinaryIO]:
    """Create or open every output redirection in order and return the last one."""
    current: Optional[BinaryIO] = None
    for redirect in redirects:
        if current is not None:
            current.close()
            current = None
        mode = os.O_TRUNC if redirect.type is TokenType.TRUNC else os.O_APPEND
        try:
            descriptor = os.open(redirect.file, os.O_CREAT | os.O_WRONLY | mode, 0o644)
        except OSError as exc:
            raise _fail(redirect.file, exc, stderr) from exc
        current = os.fdopen(descriptor, "wb")
    return current