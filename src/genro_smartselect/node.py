# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree node classes for groups and options."""

from __future__ import annotations

from typing import Any


class BaseNode:
    """Common part of groups and options.

    Each node has:
    - id: Stable identity, auto-generated by the tree (``group_0``, ``opt_3``)
    - label: Display text
    - attr: Extra descriptor attributes not interpreted by the engine
    - children: Ordered child options
    - disabled: Excluded from selection, counts and views
    - view_depth: Descendant levels revealed by the ``view`` mode
    - open: Folder display state, maintained by the view projector
    """

    __slots__ = ('id', 'label', 'attr', 'children', 'disabled', 'view_depth', 'open')

    is_group: bool = False

    def __init__(
        self,
        id: str,
        label: str = '',
        attr: dict[str, Any] | None = None,
        disabled: bool = False,
        view_depth: int | None = None,
    ) -> None:
        self.id = id
        self.label = label
        self.attr = attr or {}
        self.children: list[OptionNode] = []
        self.disabled = disabled
        self.view_depth = view_depth
        self.open = False

    @property
    def has_children(self) -> bool:
        """True if this node is a folder."""
        return bool(self.children)

    def get_attr(self, attr: str | None = None, default: Any = None) -> Any:
        """Get attribute value or all attributes.

        Args:
            attr: Attribute name. If None, returns all attributes.
            default: Default value if attribute not found.

        Returns:
            Attribute value, default, or dict of all attributes.
        """
        if attr is None:
            return self.attr
        return self.attr.get(attr, default)


class GroupNode(BaseNode):
    """An optional container of options carrying its own constraints.

    Example:
        >>> group = GroupNode('group_0', 'Fruits', exclusive=True, at_least=1)
        >>> group.is_group
        True
    """

    __slots__ = ('exclusive', 'level_inclusive', 'at_least', 'at_most', 'group_exclusive')

    is_group = True

    def __init__(
        self,
        id: str,
        label: str = '',
        attr: dict[str, Any] | None = None,
        disabled: bool = False,
        view_depth: int | None = None,
        exclusive: bool = False,
        level_inclusive: bool = False,
        at_least: int | None = None,
        at_most: int | None = None,
        group_exclusive: frozenset[str] | None = None,
    ) -> None:
        super().__init__(id, label, attr, disabled, view_depth)
        self.exclusive = exclusive
        self.level_inclusive = level_inclusive
        self.at_least = at_least
        self.at_most = at_most
        self.group_exclusive = group_exclusive

    @property
    def level(self) -> int:
        """Groups sit above level 1."""
        return 0

    def __repr__(self) -> str:
        return f"GroupNode({self.id!r}, {self.label!r})"


class OptionNode(BaseNode):
    """A selectable node in the hierarchy.

    Parent/child relations are explicit: ``parent`` is the option one level
    up (None at level 1) and ``group`` the owning group (None at the root).

    Example:
        >>> opt = OptionNode('opt_0', 'Apple', value='apple')
        >>> opt.level, opt.selected
        (1, False)
    """

    __slots__ = (
        'value', 'level', 'group', 'parent', 'selected', 'not_selectable',
        'must_select', 'special', 'special_value', 'inclusive',
    )

    def __init__(
        self,
        id: str,
        label: str = '',
        value: str = '',
        level: int = 1,
        attr: dict[str, Any] | None = None,
        group: GroupNode | None = None,
        parent: OptionNode | None = None,
        disabled: bool = False,
        view_depth: int | None = None,
        not_selectable: bool = False,
        must_select: bool = False,
        special: bool = False,
        inclusive: frozenset[str] | None = None,
    ) -> None:
        super().__init__(id, label, attr, disabled, view_depth)
        self.value = value
        self.level = level
        self.group = group
        self.parent = parent
        self.selected = False
        self.not_selectable = not_selectable
        self.must_select = must_select
        self.special = special
        self.special_value = ''
        self.inclusive = inclusive

    @property
    def container(self) -> BaseNode | None:
        """The node holding this option in its children (option, group or None)."""
        if self.parent is not None:
            return self.parent
        return self.group

    @property
    def is_active(self) -> bool:
        """Selected and enabled, i.e. counted by the engine."""
        return self.selected and not self.disabled

    @property
    def is_selectable(self) -> bool:
        """True if the engine may select this option."""
        return not self.disabled and not self.not_selectable

    def __repr__(self) -> str:
        state = 'on' if self.selected else 'off'
        return f"OptionNode({self.value!r}, level={self.level}, {state})"
