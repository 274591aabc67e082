# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loading an OptionTree from a flat list of node descriptors.

The presentation layer describes the hierarchy the way a ``<select>``
lists it: one row per group or option, with option depth given by
``level``. Rows are turned into explicit parent/child links here.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..config import GroupDescriptor, MessageText, OptionDescriptor
from ..exceptions import ConfigurationError
from .core import OptionTree, validate_descriptor

logger = logging.getLogger(__name__)


def load_from_list(
    tree: OptionTree,
    data: list[dict[str, Any]],
    exclusive_groups: bool = False,
    alert: Callable[[str], Any] | None = None,
    text: MessageText | None = None,
) -> None:
    """Populate ``tree`` from descriptor rows.

    Row kinds:
        - ``{'divider': True}``: ignored
        - ``{'group': True, 'label': ..., ...}``: opens a new group; the
          following options belong to it unless they set ``in_group=False``
        - anything else: an option, ``level`` defaulting to 1

    An option at level N is attached to the nearest preceding option at
    level N-1 of the same branch.

    Args:
        tree: The tree to fill.
        data: Descriptor rows.
        exclusive_groups: Force every group exclusive (single-select root).
        alert: Channel for non-fatal descriptor problems.
        text: Message table for the alerts, defaults to MessageText().

    Raises:
        ConfigurationError: On invalid rows, orphan levels or level overflow.
        DuplicateValueError: On a repeated option value.
    """
    text = text or MessageText()
    current_group = None
    # last option seen per level, one table per branch (group id or None)
    branches: dict[str | None, dict[int, Any]] = {None: {}}

    for row in data:
        if not isinstance(row, dict):
            raise ConfigurationError(f"bad argument {row!r}: descriptor must be a dict")
        if row.get('divider'):
            continue

        if row.get('group'):
            desc = validate_descriptor(GroupDescriptor, row)
            _apply_group_rules(desc, exclusive_groups, alert, text)
            current_group = tree.add_group(desc)
            branches[current_group.id] = {}
            continue

        desc = validate_descriptor(OptionDescriptor, row)
        in_group = desc.in_group if desc.in_group is not None else current_group is not None
        group = current_group if in_group else None
        uids = branches[group.id if group is not None else None]

        level = desc.level or 1
        parent = None
        if level > 1:
            parent = uids.get(level - 1)
            if parent is None:
                raise ConfigurationError(
                    f"option {desc.value!r} at level {level} has no level {level - 1} parent"
                )

        option = tree.create_option(desc, level, group, parent)
        if parent is not None:
            parent.children.append(option)
        elif group is not None:
            group.children.append(option)
        else:
            tree._top.append(option)

        uids[level] = option
        for deeper in [lvl for lvl in uids if lvl > level]:
            del uids[deeper]

    logger.debug("loaded %d options in %d groups", len(tree), len(tree.groups()))


def _apply_group_rules(
    desc: GroupDescriptor,
    exclusive_groups: bool,
    alert: Callable[[str], Any] | None,
    text: MessageText,
) -> None:
    """Resolve group attribute interactions before the group is built."""
    if exclusive_groups:
        desc.exclusive = True

    if desc.at_least and desc.group_exclusive:
        logger.warning("group %r: at_least dropped, combined with group_exclusive", desc.label)
        if alert is not None:
            alert(text.group_exclude_error)
        desc.at_least = None
