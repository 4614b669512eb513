"""Splitting command lines into tokens and checking their order."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Optional

_SPACES = frozenset(" \t\n\r\v\f")


class TokenType(IntEnum):
    """Kinds of token produced by :func:`tokenize`."""

    SPACE = 1
    INPUT = 2  # <
    TRUNC = 3  # >
    HEREDOC = 4  # <<
    APPEND = 5  # >>
    WORD = 6
    PIPE = 7  # |


class QuoteState(Enum):
    """Quoting context while scanning a line."""

    DEFAULT = 0
    SQUOTE = 1
    DQUOTE = 2


@dataclass
class Token:
    """A piece of a command line."""

    type: TokenType
    text: str


class ShellSyntaxError(Exception):
    """Raised when a command line cannot be parsed."""


UNCLOSED_QUOTE_MESSAGE = "unexpected EOF while looking for matching"


def next_quote_state(state: QuoteState, char: str) -> QuoteState:
    """Return the quoting state after reading ``char``."""
    if state is QuoteState.DEFAULT:
        if char == "'":
            return QuoteState.SQUOTE
        if char == '"':
            return QuoteState.DQUOTE
    elif state is QuoteState.SQUOTE and char == "'":
        return QuoteState.DEFAULT
    elif state is QuoteState.DQUOTE and char == '"':
        return QuoteState.DEFAULT
    return state


def is_space(char: str) -> bool:
    """True for the whitespace characters the shell separates words on."""
    return char in _SPACES and char != ""


def is_special(char: str) -> bool:
    """True for any character that cannot appear in a variable name."""
    return not (char == "_" or ("0" <= char <= "9") or ("A" <= char <= "Z")
                or ("a" <= char <= "z"))


def is_blank(text: str) -> bool:
    """True when the line holds only whitespace."""
    return all(is_space(char) for char in text)


def has_unclosed_quote(text: str) -> bool:
    """True when a quote opened in ``text`` is never closed."""
    state = QuoteState.DEFAULT
    for char in text:
        state = next_quote_state(state, char)
    return state is not QuoteState.DEFAULT


def _separator_at(text: str, index: int) -> Optional[TokenType]:
    char = text[index:index + 1]
    following = text[index + 1:index + 2]
    if not char:
        return None
    if is_space(char):
        return TokenType.SPACE
    if char == "|":
        return TokenType.PIPE
    if char == "<":
        return TokenType.HEREDOC if following == "<" else TokenType.INPUT
    if char == ">":
        return TokenType.APPEND if following == ">" else TokenType.TRUNC
    return None


def tokenize(text: str) -> list[Token]:
    """Split a line into words and operators, keeping quotes inside words."""
    tokens: list[Token] = []
    state = QuoteState.DEFAULT
    start = 0
    index = 0
    end = len(text)
    while index < end:
        state = next_quote_state(state, text[index])
        if state is QuoteState.DEFAULT:
            kind = _separator_at(text, index)
            if kind is None:
                if index + 1 == end or _separator_at(text, index + 1) is not None:
                    tokens.append(Token(TokenType.WORD, text[start:index + 1]))
            else:
                if kind in (TokenType.HEREDOC, TokenType.APPEND):
                    tokens.append(Token(kind, text[index:index + 2]))
                    index += 1
                elif kind is not TokenType.SPACE:
                    tokens.append(Token(kind, text[index]))
                start = index + 1
        index += 1
    return tokens


def validate_tokens(tokens: list[Token]) -> None:
    """Raise :class:`ShellSyntaxError` if operators are misplaced."""
    if not tokens:
        return
    if tokens[0].type is TokenType.PIPE:
        raise ShellSyntaxError("parse error near `|'")
    for current, following in zip(tokens, [*tokens[1:], None]):
        if current.type is TokenType.WORD:
            continue
        if following is None:
            raise ShellSyntaxError("parse error near `\\n'")
        if following.type is TokenType.WORD:
            continue
        if current.type is TokenType.PIPE and following.type is not TokenType.PIPE:
            continue
        raise ShellSyntaxError(f"parse error near `{following.text}'")


def drop_empty_tokens(tokens: Iterable[Token]) -> list[Token]:
    """Return the tokens whose text is not empty."""
    return [token for token in tokens if token.text]