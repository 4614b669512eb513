"""Environment storage shared by the shell and its builtins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


def name_length(entry: str) -> int:
    """Return the length of the variable name in a ``NAME=value`` entry."""
    index = entry.find("=")
    return len(entry) if index == -1 else index


class Environment:
    """An ordered list of ``NAME=value`` entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[str] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"

    def find(self, name: str) -> Optional[int]:
        """Return the position of the entry named ``name``, or None."""
        size = len(name)
        for position, entry in enumerate(self._entries):
            if name_length(entry) == size and entry[:size] == name:
                return position
        return None

    def lookup(self, name: str, status: int) -> Optional[str]:
        """Return the value of ``name``; ``?`` yields the last exit status."""
        if name.startswith("?"):
            return str(status)
        position = self.find(name)
        if position is None:
            return None
        entry = self._entries[position]
        _, _, value = entry.partition("=")
        return value

    def export(self, entry: str) -> None:
        """Set a ``NAME=value`` entry, replacing one with the same name."""
        position = self.find(entry[: name_length(entry)])
        if position is None:
            self._entries.append(entry)
        else:
            self._entries[position] = entry

    def unset(self, name: str) -> None:
        """Remove the entry named ``name`` if it exists."""
        position = self.find(name)
        if position is not None:
            del self._entries[position]

    def as_list(self) -> list[str]:
        """Return a copy of the entries in order."""
        return list(self._entries)

    def as_dict(self) -> dict[str, str]:
        """Return the entries as a mapping suitable for child processes."""
        result: dict[str, str] = {}
        for entry in self._entries:
            name, _, value = entry.partition("=")
            result[name] = value
        return result


@dataclass
class ShellState:
    """Mutable state that outlives a single command line."""

    env: Environment = field(default_factory=Environment)
    status: int = 0