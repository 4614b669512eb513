"""Quote removal and ``$VAR`` expansion inside words."""

from __future__ import annotations

from .env import Environment
from .lexer import Token, TokenType, is_space, is_special


def variable_name_length(text: str) -> int:
    """Return how many characters at the start of ``text`` form a variable name.

    ``?`` on its own is a name; otherwise the name runs until the first
    character that cannot appear in an identifier.
    """
    if text.startswith("?"):
        return 1
    length = 0
    for char in text:
        if char == "$" or is_special(char):
            break
        length += 1
    return length


def _expand_dollar(text: str, index: int, env: Environment,
                   status: int) -> tuple[str, int]:
    """Replace the ``$NAME`` at ``index``; return the text and the next index."""
    following = text[index + 1:index + 2]
    if not following or is_space(following) or following == '"':
        return text, index + 1
    size = variable_name_length(text[index + 1:])
    value = env.lookup(text[index + 1:index + 1 + size], status) or ""
    return text[:index] + value + text[index + 1 + size:], index + len(value)


def _expand_inside_double_quotes(text: str, env: Environment, status: int) -> str:
    index = 0
    while index < len(text):
        if text[index] == "$":
            text, index = _expand_dollar(text, index, env, status)
        else:
            index += 1
    return text


def _expand_quoted(text: str, index: int, env: Environment,
                   status: int) -> tuple[str, int]:
    """Remove the quote pair opening at ``index``, expanding inside ``"..."``."""
    quote = text[index]
    close = text.find(quote, index + 1)
    if close == -1:
        inner, rest = text[index + 1:], ""
    else:
        inner, rest = text[index + 1:close], text[close + 1:]
    if quote == '"':
        inner = _expand_inside_double_quotes(inner, env, status)
    return text[:index] + inner + rest, index + len(inner)


def expand_word(word: str, env: Environment, status: int) -> str:
    """Expand variables and strip quotes from one word.

    Substituted values are not scanned again.
    """
    index = 0
    while index < len(word):
        char = word[index]
        if char in ("'", '"'):
            word, index = _expand_quoted(word, index, env, status)
        elif char == "$":
            word, index = _expand_dollar(word, index, env, status)
        else:
            index += 1
    return word


def expand_tokens(tokens: list[Token], env: Environment, status: int) -> list[Token]:
    """Return the tokens with every word expanded; operators are kept as they are."""
    return [
        Token(token.type, expand_word(token.text, env, status))
        if token.type is TokenType.WORD else token
        for token in tokens
    ]