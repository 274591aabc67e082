# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Named notifications delivered to external subscribers.

Subscribers are identified by an id and receive every notification, or
only the names they registered for. A notification is the observable side
of the engine: lifecycle events (``OptionSelected``...) and the named
signals ``atLeast``, ``atMost``, ``mustSelect``, ``optionAdded``,
``optionRemoved``, ``optionDuplicated`` and ``aliasChange``.

Example:
    >>> def on_change(name, target, **kw):
    ...     print(name, target)
    >>> select.subscribe('log', on_change, events=['atLeast'])
    >>> select.unsubscribe('log')
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)

# Signature: callback(name, target, **kwargs)
SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Mixin adding subscribe/unsubscribe/_notify to a class.

    The host class must declare a ``_subscribers`` slot and call
    ``_init_subscriptions()`` from its constructor.
    """

    __slots__ = ()

    _subscribers: dict[str, tuple[SubscriberCallback, frozenset[str] | None]]

    def _init_subscriptions(self) -> None:
        self._subscribers = {}

    def subscribe(
        self,
        subscriber_id: str,
        callback: SubscriberCallback,
        events: Iterable[str] | None = None,
    ) -> None:
        """Register ``callback`` under ``subscriber_id``.

        Args:
            subscriber_id: Identifier, replaces a previous subscription
                with the same id.
            callback: Called as ``callback(name, target, **kwargs)``.
            events: Notification names to receive. None means all.
        """
        names = frozenset(str(e) for e in events) if events is not None else None
        self._subscribers[subscriber_id] = (callback, names)

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscription. Unknown ids are ignored."""
        self._subscribers.pop(subscriber_id, None)

    def _notify(self, name: str, target: Any = None, **kwargs: Any) -> None:
        """Deliver notification ``name`` to every interested subscriber."""
        logger.debug("notify %s target=%r", name, target)
        for callback, names in list(self._subscribers.values()):
            if names is None or name in names:
                callback(name, target, **kwargs)
