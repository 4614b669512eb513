"""Grouping tokens into the commands of a pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .lexer import ShellSyntaxError, Token, TokenType

_OUTPUT_TYPES = (TokenType.TRUNC, TokenType.APPEND)
_INPUT_TYPES = (TokenType.INPUT, TokenType.HEREDOC)


@dataclass
class Redirect:
    """A redirection of standard input or output to ``file``."""

    type: TokenType
    file: str


@dataclass
class Command:
    """One stage of a pipeline."""

    name: Optional[str] = None
    args: list[str] = field(default_factory=list)
    inputs: list[Redirect] = field(default_factory=list)
    outputs: list[Redirect] = field(default_factory=list)

    def add_word(self, word: str) -> None:
        """Append a word; the first one names the command."""
        if self.name is None:
            self.name = word
        self.args.append(word)

    def add_redirect(self, redirect: Redirect) -> None:
        """File the redirection under inputs or outputs by its type."""
        if redirect.type in _OUTPUT_TYPES:
            self.outputs.append(redirect)
        elif redirect.type in _INPUT_TYPES:
            self.inputs.append(redirect)


def _build_one(tokens: Iterator[Token], first: Token) -> tuple[Command, bool]:
    """Consume tokens up to a pipe; return the command and whether a pipe ended it."""
    command = Command()
    token: Optional[Token] = first
    while token is not None:
        if token.type is TokenType.PIPE:
            return command, True
        if token.type is TokenType.WORD:
            command.add_word(token.text)
        else:
            target = next(tokens, None)
            if target is None:
                raise ShellSyntaxError("parse error near `\\n'")
            command.add_redirect(Redirect(token.type, target.text))
        token = next(tokens, None)
    return command, False


def build_commands(tokens: list[Token]) -> list[Command]:
    """Split a token list on pipes into commands with their redirections."""
    commands: list[Command] = []
    stream = iter(tokens)
    token = next(stream, None)
    while token is not None:
        command, piped = _build_one(stream, token)
        commands.append(command)
        token = next(stream, None) if piped else None
    return commands