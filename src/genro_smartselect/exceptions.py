# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""SmartSelect exceptions."""

from __future__ import annotations


class SmartSelectError(Exception):
    """Base exception for SmartSelect errors."""

    pass


class ConfigurationError(SmartSelectError, ValueError):
    """Raised for invalid settings, descriptors or tree depth overflow."""

    pass


class DuplicateValueError(SmartSelectError):
    """Raised when an option value is already present in the tree."""

    def __init__(self, value: str) -> None:
        super().__init__(f"duplicated option found: {value!r}")
        self.value = value


class DuplicateAliasError(SmartSelectError):
    """Raised when an alias name or value set exists and replacement is declined."""

    def __init__(self, name: str, existing: str) -> None:
        super().__init__(f"alias duplicated: {name!r} conflicts with {existing!r}")
        self.name = name
        self.existing = existing


class InvalidOptionError(SmartSelectError):
    """Raised when an explicit option reference cannot be resolved."""

    pass
