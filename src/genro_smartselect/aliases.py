# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Alias registry: named shortcuts for a set of values.

Two aliases are duplicates when they share the name or when their value
lists are equal as unordered multisets. Adding a duplicate needs a
confirmation; declining leaves the registry unchanged.

Example:
    >>> aliases = AliasRegistry()
    >>> aliases.add('fruits', ['apple', 'pear'])
    >>> aliases.match(['pear', 'apple'])
    'fruits'
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Iterable, Iterator

from .exceptions import DuplicateAliasError

logger = logging.getLogger(__name__)


def _as_values(values: Any) -> list[str]:
    if isinstance(values, (str, int, float)):
        return [str(values)]
    return [str(v) for v in values]


def same_values(one: Iterable[str], two: Iterable[str]) -> bool:
    """True if two value lists hold the same items, order ignored."""
    return Counter(one) == Counter(two)


class AliasRegistry:
    """Ordered mapping of alias name to value list."""

    __slots__ = ('_aliases',)

    def __init__(self, aliases: dict[str, Iterable[str]] | None = None) -> None:
        self._aliases: dict[str, list[str]] = {}
        for name, values in (aliases or {}).items():
            self._aliases[str(name)] = _as_values(values)

    def __len__(self) -> int:
        return len(self._aliases)

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __contains__(self, name: str) -> bool:
        return name in self._aliases

    def __getitem__(self, name: str) -> list[str]:
        return list(self._aliases[name])

    def as_dict(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._aliases.items()}

    def add(
        self,
        name: str,
        values: Any,
        confirm: Callable[[str], bool] | None = None,
        message: str = 'alias duplicated',
    ) -> None:
        """Register ``name`` for ``values``.

        Args:
            name: Alias name.
            values: A value or a list of values, coerced to str.
            confirm: Asked once per conflicting alias. None declines.
            message: Prefix of the confirmation question.

        Raises:
            DuplicateAliasError: If a conflict is not confirmed.
        """
        name = str(name)
        values = _as_values(values)

        conflicts = [
            existing
            for existing, existing_values in self._aliases.items()
            if existing == name or same_values(existing_values, values)
        ]
        for existing in conflicts:
            question = f"{message}: {existing} {self._aliases[existing]}, replace it?"
            if confirm is None or not confirm(question):
                raise DuplicateAliasError(name, existing)

        for existing in conflicts:
            del self._aliases[existing]
        self._aliases[name] = values
        logger.info("alias %r set to %r", name, values)

    def remove(self, names: str | Iterable[str]) -> list[str]:
        """Remove one or more aliases. Unknown names are ignored.

        Returns:
            The names actually removed.
        """
        if isinstance(names, str):
            names = [names]
        removed = []
        for name in names:
            if self._aliases.pop(name, None) is not None:
                removed.append(name)
        if removed:
            logger.info("aliases removed: %s", ', '.join(removed))
        return removed

    def match(self, values: Iterable[str]) -> str | None:
        """Return the first alias whose values equal ``values``, or None for an empty list."""
        values = list(values)
        if not values:
            return None
        for name, alias_values in self._aliases.items():
            if same_values(alias_values, values):
                return name
        return None
