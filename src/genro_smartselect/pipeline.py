# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Event/callback pipeline.

Every lifecycle event owns an ordered list of handlers. The engine's own
steps are registered first, user handlers are appended after them. Firing
an event:

1. notifies subscribers (the externally visible event), unless
   ``notify=False``;
2. runs the handlers in order; a handler returning ``False`` vetoes the
   event, the remaining handlers are skipped and ``fire`` returns False.

Example:
    >>> pipeline = EventPipeline()
    >>> pipeline.add(Event.OPTION_SELECT, lambda target: target != 'x')
    >>> pipeline.fire(Event.OPTION_SELECT, 'x')
    False
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class Event(str, Enum):
    """Lifecycle events. Values are the notification names."""

    PLUGIN_LOAD = 'PluginLoad'
    PLUGIN_LOADED = 'PluginLoaded'
    DROPDOWN_SHOW = 'DropdownShow'
    DROPDOWN_SHOWN = 'DropdownShown'
    DROPDOWN_HIDE = 'DropdownHide'
    DROPDOWN_HIDDEN = 'DropdownHidden'
    OPTION_CHANGE = 'OptionChange'
    OPTION_CHANGED = 'OptionChanged'
    OPTION_SELECT = 'OptionSelect'
    OPTION_SELECTED = 'OptionSelected'
    OPTION_DESELECT = 'OptionDeselect'
    OPTION_DESELECTED = 'OptionDeselected'
    OPTION_DISABLE = 'OptionDisable'
    OPTION_DISABLED = 'OptionDisabled'
    OPTION_ENABLED = 'OptionEnabled'

    @classmethod
    def coerce(cls, name: str | Event) -> Event:
        """Resolve an Event from a member, a value or an ``on``-prefixed value.

        Raises:
            ValueError: If ``name`` is not a known event.

        Example:
            >>> Event.coerce('onOptionSelected') is Event.OPTION_SELECTED
            True
        """
        if isinstance(name, cls):
            return name
        text = str(name)
        if text.startswith('on') and text[2:3].isupper():
            text = text[2:]
        for member in cls:
            if text in (member.value, member.name):
                return member
        raise ValueError(f"unknown event {name!r}")


class EventPipeline:
    """Ordered handler lists per event with veto semantics.

    Args:
        notify: Subscriber channel, called as ``notify(name, target)``
            before the handlers run.
    """

    __slots__ = ('_handlers', '_notify')

    def __init__(self, notify: Callable[..., Any] | None = None) -> None:
        self._handlers: dict[Event, list[Handler]] = {event: [] for event in Event}
        self._notify = notify

    def add(self, event: str | Event, handler: Handler) -> None:
        """Append ``handler`` to the list of ``event``.

        Raises:
            ValueError: If ``event`` is unknown.
        """
        self._handlers[Event.coerce(event)].append(handler)

    def handlers(self, event: str | Event) -> list[Handler]:
        """Return a copy of the handler list of ``event``."""
        return list(self._handlers[Event.coerce(event)])

    def fire(self, event: Event, target: Any = None, notify: bool = True) -> bool:
        """Fire ``event`` for ``target``.

        Args:
            event: The event.
            target: The option concerned, or None for select-level events.
            notify: Deliver the notification to subscribers first.

        Returns:
            False if a handler vetoed, True otherwise.
        """
        logger.debug("fire %s target=%r", event.value, target)
        if notify and self._notify is not None:
            self._notify(event.value, target)
        for handler in list(self._handlers[event]):
            if handler(target) is False:
                logger.debug("%s vetoed by %r", event.value, handler)
                return False
        return True
