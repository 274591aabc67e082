# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Cross-instance coordination of open dropdowns."""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .smartselect import SmartSelect

logger = logging.getLogger(__name__)


class DropdownRegistry:
    """Keeps track of live SmartSelect instances.

    Opening a dropdown may close every other one (``close_other``). The
    registry holds weak references, so a discarded select simply drops out.

    Example:
        >>> registry = DropdownRegistry()
        >>> a = SmartSelect(data, registry=registry)
        >>> b = SmartSelect(data, registry=registry)
        >>> a.open_dropdown(); b.open_dropdown()
        >>> a.is_open, b.is_open
        (False, True)
    """

    __slots__ = ('_instances',)

    def __init__(self) -> None:
        self._instances: weakref.WeakSet[SmartSelect] = weakref.WeakSet()

    def __len__(self) -> int:
        return len(self._instances)

    def register(self, instance: SmartSelect) -> None:
        self._instances.add(instance)

    def unregister(self, instance: SmartSelect) -> None:
        self._instances.discard(instance)

    def open_instances(self) -> list[SmartSelect]:
        return [instance for instance in list(self._instances) if instance.is_open]

    def close_all_except(self, instance: SmartSelect | None = None) -> None:
        """Close every open dropdown other than ``instance``."""
        for other in self.open_instances():
            if other is not instance:
                logger.debug("closing %r", other)
                other.close_dropdown()


# registry used when none is given explicitly
default_registry = DropdownRegistry()
