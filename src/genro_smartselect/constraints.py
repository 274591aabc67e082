# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Constraint engine: the selection rules run from pipeline handlers.

Two entry points are wired into the pipeline by SmartSelect:

- ``fix_empty_logic(target, event)``: floors, run on deselect, on disable
  and on load. Must-select, then group at-least, then global at-least,
  stopping at the first veto.
- ``fix_select_logic(target)``: exclusivity and level fix-up, run after a
  selection. Group exclusivity, then same-branch multiplicity, then level
  inclusivity.

``at_most(target)`` is the ceiling check run before a selection.

A veto is a False return together with a named notification
(``atLeast``, ``atMost``, ``mustSelect``). It is not an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .pipeline import Event

if TYPE_CHECKING:
    from .node import GroupNode, OptionNode
    from .smartselect import SmartSelect

logger = logging.getLogger(__name__)

# Tag standing for "no group_exclusive attribute"
DEFAULT_EXCLUSIVE_TAG = '.'


def tags_overlap(one: frozenset[str] | None, two: frozenset[str] | None) -> bool:
    """True if two tag sets share at least one tag."""
    return bool(one and two and not one.isdisjoint(two))


class ConstraintEngine:
    """Applies the selection rules on behalf of a SmartSelect.

    The engine owns no selection state: it reads the tree of its host and
    mutates it through the host primitives, so nested events fire as usual.

    Args:
        host: The SmartSelect the rules apply to.
    """

    __slots__ = ('host', '_pending_must')

    def __init__(self, host: SmartSelect) -> None:
        self.host = host
        # configured must-select values, applied on the first check
        self._pending_must: list[str] = list(host.config.must_select)

    @property
    def tree(self):
        return self.host.tree

    @property
    def config(self):
        return self.host.config

    # ==================== Predicates ====================

    def is_group_exclusive(
        self,
        one: GroupNode | None,
        two: GroupNode | None = None,
    ) -> bool:
        """True if selecting in ``one`` must clear ``two`` (None is the root).

        A missing tag counts as the default tag, so untagged groups are
        compatible with each other and with the root.
        """
        default = frozenset({DEFAULT_EXCLUSIVE_TAG})
        tags_one = one.group_exclusive if one is not None and one.group_exclusive is not None else default
        tags_two = two.group_exclusive if two is not None and two.group_exclusive is not None else default
        return not tags_overlap(tags_one, tags_two)

    def is_data_inclusive(self, one: OptionNode, two: OptionNode) -> bool:
        """True if two peers share an inclusive tag and may stay selected together."""
        if one.container is not two.container:
            return False
        return tags_overlap(one.inclusive, two.inclusive)

    def is_group_multiple(self, group: GroupNode | None) -> bool:
        """True unless the group (or the root, for None) is exclusive."""
        if group is not None:
            return not group.exclusive
        return not (self.config.multiple and self.config.exclusive)

    def is_level_inclusive(self, group: GroupNode | None) -> bool:
        if group is not None:
            return group.level_inclusive or self.config.level_inclusive
        return self.config.level_inclusive

    def has_at_most(self) -> bool:
        """True if a ceiling exists at the root or in an enabled group."""
        if self.config.at_most:
            return True
        return any(g.at_most and not g.disabled for g in self.tree.groups())

    def has_group_at_least(self) -> bool:
        return any(g.at_least for g in self.tree.groups())

    # ==================== Helpers ====================

    def _active_in(self, group: GroupNode | None) -> list[OptionNode]:
        return [o for o in self.tree.branch_options(group) if o.is_active]

    def _fill(self, candidates: list[OptionNode], count: int, required: int) -> int:
        """Select candidates (with per-item events) until ``required`` is reached."""
        for option in candidates:
            if count >= required:
                break
            if option.is_active or not option.is_selectable:
                continue
            if self.host._select(option):
                count += 1
        return count

    # ==================== Floors ====================

    def fix_empty_logic(self, target: OptionNode | None = None, event: Event | None = None) -> bool:
        """Run must-select, group at-least and global at-least in order.

        Args:
            target: The option being deselected or disabled, None on load.
            event: The event being handled, None for a plain repair pass.

        Returns:
            False if one of the rules vetoed.
        """
        return (
            self.must_select(target, event)
            and self.at_least_in_group(target, event)
            and self.at_least(target, event)
        )

    def must_select(self, target: OptionNode | None, event: Event | None) -> bool:
        """Forced options: selected on load, never deselected."""
        if self._pending_must:
            for value in self._pending_must:
                option = self.tree.find_by_value(value)
                if option is not None:
                    option.must_select = True
            self._pending_must = []

        musts = [o for o in self.tree.options() if o.must_select and not o.disabled]
        if not musts:
            return True

        if event is Event.OPTION_DESELECT:
            if target is not None and target in musts:
                self.host._notify('mustSelect', target)
                return False
            return True

        if event is None or event is Event.PLUGIN_LOADED:
            for option in musts:
                self.host._select(option)
        return True

    def at_least_in_group(self, target: OptionNode | None, event: Event | None) -> bool:
        """Per-group floors."""
        if not self.has_group_at_least():
            return True

        if event in (Event.OPTION_DESELECT, Event.OPTION_DISABLED):
            group = target.group if target is not None else None
            if group is None or not group.at_least:
                return True
            least = group.at_least
            done = len(self._active_in(group))
            if event is Event.OPTION_DESELECT:
                if done > least:
                    return True
                self.host._notify('atLeast', target)
                return False
            if done < least:
                self._fill(self.tree.options(group=group), done, least)
            return True

        for group in self.tree.groups():
            if not group.at_least or group.disabled:
                continue
            done = len(self._active_in(group))
            if done < group.at_least:
                self._fill(self.tree.options(group=group), done, group.at_least)
        return True

    def at_least(self, target: OptionNode | None, event: Event | None) -> bool:
        """Global floor, with default values as the preferred substitute."""
        required = self.config.at_least
        if not required:
            return True

        defaults = self.config.default_values
        selected = self.host.selected_options()

        if event is Event.OPTION_DESELECT:
            if len([o for o in selected if o is not target]) + 1 > required:
                return True
            if required == 1 and defaults is not None:
                self.host._set_values(defaults)
                if target is not None and target.value not in defaults:
                    return True
            self.host._notify('atLeast', target)
            return False

        if len(selected) >= required:
            return True

        if event is Event.OPTION_DISABLED:
            if required == 1 and defaults is not None:
                self.host._set_values(defaults)
        elif defaults is not None:
            self.host._set_values(defaults)

        count = len(self.host.selected_options())
        if count < required:
            self._fill(self.tree.options(), count, required)
        return True

    # ==================== Ceilings ====================

    def at_most(self, target: OptionNode) -> bool:
        """Veto a selection that would exceed a group or global ceiling."""
        if not self.has_at_most():
            return True

        group = target.group
        if group is not None and group.at_most:
            if len(self._active_in(group)) >= group.at_most:
                self.host._notify('atMost', target)
                return False

        if not self.config.at_most:
            return True
        if len(self.host.selected_options()) < self.config.at_most:
            return True
        self.host._notify('atMost', target)
        return False

    # ==================== Selection fix-up ====================

    def fix_select_logic(self, target: OptionNode) -> bool:
        """Deselect whatever conflicts with the newly selected ``target``."""
        host = self.host
        others = [o for o in host.selected_options() if o is not target]
        if not others:
            return True

        if not self.config.multiple:
            for option in others:
                host._deselect(option)
            return True

        group = target.group

        # exclusive groups (and the root)
        for grp in self.tree.groups():
            if grp is group or grp.disabled:
                continue
            if self.is_group_exclusive(group, grp):
                host.deselect_group_options(grp, trigger_change=False)
        if group is not None and self.is_group_exclusive(group):
            host.deselect_group_options(None, trigger_change=False)

        # same branch multiplicity
        if not self.is_group_multiple(group):
            for option in self._active_in(group):
                if option is target:
                    continue
                if not self.is_data_inclusive(target, option):
                    host._deselect(option)

        if self.is_level_inclusive(group):
            return True

        for option in self.tree.descendants_of(target):
            if option.is_active:
                option.selected = False

        branch = [o for o in self._active_in(group) if o is not target]
        if target.level > 1 and branch:
            parent = target.parent
            peers = [o for o in parent.children if not o.disabled] if parent else []
            inactive = [o for o in peers if not o.is_active]
            if len(peers) == 1 or inactive:
                for option in self.tree.ancestors_of(target, include_self=False):
                    if option.is_active:
                        host._deselect(option)
            elif parent is not None:
                host._select(parent)
        return True
