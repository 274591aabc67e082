# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""OptionTree - the hierarchy of groups and options.

This module provides the OptionTree class, the in-memory model the
selection engine works on. Nodes are linked explicitly: every option keeps
a reference to its parent option and to its owning group, and every node
keeps its ordered children. Value lookup is O(1) through a value -> id
mapping.

Key Features:
    - **Explicit hierarchy**: parent references and ordered children
    - **O(1) lookup**: by node id and by option value
    - **Positional insertion**: under a parent or right after an anchor
    - **Bounded walks**: ancestor/descendant traversals never exceed
      ``max_levels``

Example:
    Basic usage::

        tree = OptionTree()
        tree.add_option({'value': 'fruit', 'label': 'Fruit'})
        tree.add_option({'value': 'apple', 'label': 'Apple'}, parent='fruit')
        tree.find_by_value('apple').level  # 2
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from pydantic import BaseModel, ValidationError

from ..config import GroupDescriptor, OptionDescriptor
from ..exceptions import ConfigurationError, DuplicateValueError, InvalidOptionError
from ..node import BaseNode, GroupNode, OptionNode

logger = logging.getLogger(__name__)

NodeRef = BaseNode | str


def validate_descriptor(model: type[BaseModel], info: Any) -> Any:
    """Validate a raw descriptor, turning pydantic errors into ConfigurationError."""
    if isinstance(info, model):
        return info
    if not isinstance(info, dict):
        raise ConfigurationError(f"bad argument {info!r}: descriptor must be a dict")
    try:
        return model.model_validate(info)
    except ValidationError as exc:
        raise ConfigurationError(f"bad argument {info!r}: {exc}") from exc


class OptionTree:
    """A hierarchy of groups and options with O(1) lookup.

    Top-level entries (groups and level-1 root options) are kept in input
    order; every other option lives in the ``children`` list of its parent
    option or group. Display order is the depth-first traversal of that
    structure.

    Attributes:
        max_levels: Deepest option level accepted.
        separator: Joins a special option value to its bound text
            (``value::text``).
    """

    __slots__ = ('_top', '_nodes', '_mapping', '_tag_counters', 'max_levels', 'separator')

    def __init__(self, max_levels: int = 5, separator: str = '::') -> None:
        self._top: list[BaseNode] = []
        self._nodes: dict[str, BaseNode] = {}
        self._mapping: dict[str, str] = {}
        self._tag_counters: dict[str, int] = {}
        self.max_levels = max_levels
        self.separator = separator

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"OptionTree({list(self._mapping.keys())})"

    def __len__(self) -> int:
        """Return the number of options (groups excluded)."""
        return len(self._mapping)

    def __iter__(self) -> Iterator[BaseNode]:
        """Iterate over all nodes in display order."""
        for node in self._top:
            yield node
            yield from self.descendants_of(node)

    def __contains__(self, value: str) -> bool:
        return str(value) in self._mapping

    # ==================== Identity ====================

    def _generate_id(self, tag: str) -> str:
        """Generate a unique id for a tag.

        Uses pattern: tag_0, tag_1, tag_2, ...
        Counter always increments (never reuses numbers).
        """
        n = self._tag_counters.get(tag, 0)
        self._tag_counters[tag] = n + 1
        return f"{tag}_{n}"

    def get_node(self, node_id: str) -> BaseNode:
        """Get a node by id.

        Raises:
            KeyError: If id not found.
        """
        return self._nodes[node_id]

    def find_by_value(self, value: str) -> OptionNode | None:
        """Get the option holding ``value``, or None.

        A special value in the ``value::text`` form resolves to ``value``.
        """
        value = str(value)
        node_id = self._mapping.get(value)
        if node_id is None and self.separator in value:
            node_id = self._mapping.get(value.split(self.separator, 1)[0])
        if node_id is None:
            return None
        return self._nodes[node_id]  # type: ignore[return-value]

    def resolve(self, ref: NodeRef | None, by_label: bool = True) -> BaseNode | None:
        """Resolve a node, an option value or (with ``by_label``) a group label."""
        if ref is None:
            return None
        if isinstance(ref, BaseNode):
            return ref if self._nodes.get(ref.id) is ref else None
        option = self.find_by_value(ref)
        if option is not None or not by_label:
            return option
        return self.get_group(ref)

    # ==================== Structure ====================

    def add_group(self, info: dict[str, Any] | GroupDescriptor) -> GroupNode:
        """Append a group at the end of the tree."""
        desc = validate_descriptor(GroupDescriptor, info)
        group = GroupNode(
            self._generate_id('group'),
            desc.label,
            attr=desc.extra_attr,
            disabled=desc.disabled,
            view_depth=desc.view_depth,
            exclusive=desc.exclusive,
            level_inclusive=desc.level_inclusive,
            at_least=desc.at_least or None,
            at_most=desc.at_most or None,
            group_exclusive=desc.group_exclusive,
        )
        self._nodes[group.id] = group
        self._top.append(group)
        return group

    def create_option(
        self,
        desc: OptionDescriptor,
        level: int,
        group: GroupNode | None,
        parent: OptionNode | None,
    ) -> OptionNode:
        """Build and register an option without placing it in a children list."""
        if desc.value in self._mapping:
            raise DuplicateValueError(desc.value)
        if level > self.max_levels:
            raise ConfigurationError(
                f"option {desc.value!r} at level {level} exceeds max_levels={self.max_levels}"
            )
        option = OptionNode(
            self._generate_id('opt'),
            desc.label or desc.value,
            value=desc.value,
            level=level,
            attr=desc.extra_attr,
            group=group,
            parent=parent,
            disabled=desc.disabled,
            view_depth=desc.view_depth,
            not_selectable=desc.not_selectable,
            must_select=desc.must_select,
            special=desc.special,
            inclusive=desc.inclusive,
        )
        option.special_value = desc.special_value
        self._nodes[option.id] = option
        self._mapping[option.value] = option.id
        return option

    def _siblings(self, option: OptionNode) -> list[Any]:
        """Return the list holding ``option`` (children of its container or top level)."""
        container = option.container
        if container is None:
            return self._top
        return container.children

    def add_option(
        self,
        info: dict[str, Any] | OptionDescriptor,
        after: NodeRef | None = None,
        parent: NodeRef | None = None,
    ) -> str:
        """Insert a new option and return its id.

        Args:
            info: Option descriptor (``value`` required).
            after: Anchor option (value or node); the new option takes its level and is
                placed right after the anchor's subtree.
            parent: Parent option (value or node) or group node. The new
                option is appended as its last child (level 1 under a group).

        Without ``after`` and ``parent`` the option is appended at the root
        with level 1. A descriptor ``level`` is ignored.

        Raises:
            DuplicateValueError: If the value already exists.
            InvalidOptionError: If ``after``/``parent`` cannot be resolved.
            ConfigurationError: On invalid descriptor or level overflow.
        """
        desc = validate_descriptor(OptionDescriptor, info)
        if desc.value in self._mapping:
            raise DuplicateValueError(desc.value)

        if parent is not None:
            pnode = self.resolve(parent, by_label=False)
            if isinstance(pnode, GroupNode):
                option = self.create_option(desc, 1, pnode, None)
            elif isinstance(pnode, OptionNode):
                option = self.create_option(desc, pnode.level + 1, pnode.group, pnode)
            else:
                raise InvalidOptionError(f"invalid option {parent!r}")
            pnode.children.append(option)
        elif after is not None:
            anchor = self.resolve(after, by_label=False)
            if not isinstance(anchor, OptionNode):
                raise InvalidOptionError(f"invalid option {after!r}")
            option = self.create_option(desc, anchor.level, anchor.group, anchor.parent)
            siblings = self._siblings(anchor)
            siblings.insert(siblings.index(anchor) + 1, option)
        else:
            option = self.create_option(desc, 1, None, None)
            self._top.append(option)

        logger.info("option %r added as %s (level %d)", option.value, option.id, option.level)
        return option.id

    def remove_option(self, value: str) -> OptionNode | None:
        """Remove the option holding ``value`` together with its subtree.

        Returns:
            The removed option, or None if the value is unknown.
        """
        option = self.find_by_value(value)
        if option is None:
            return None
        self._siblings(option).remove(option)
        for node in [option, *self.descendants_of(option)]:
            del self._nodes[node.id]
            self._mapping.pop(node.value, None)  # type: ignore[attr-defined]
        logger.info("option %r removed", option.value)
        return option

    def clear(self) -> None:
        """Discard every node and mapping at once."""
        self._top = []
        self._nodes = {}
        self._mapping = {}

    # ==================== Navigation ====================

    def ancestors_of(self, option: OptionNode, include_self: bool = True) -> list[OptionNode]:
        """Return the option chain above ``option``, root-most first.

        Raises:
            ConfigurationError: If the chain is longer than max_levels.
        """
        chain: list[OptionNode] = []
        node = option if include_self else option.parent
        while node is not None:
            chain.append(node)
            if len(chain) > self.max_levels:
                raise ConfigurationError(
                    f"ancestors of {option.value!r} exceed max_levels={self.max_levels}"
                )
            node = node.parent
        chain.reverse()
        return chain

    def descendants_of(self, node: BaseNode) -> Iterator[OptionNode]:
        """Yield every option below ``node`` in display order."""

        def _walk(current: BaseNode, depth: int) -> Iterator[OptionNode]:
            if depth > self.max_levels:
                raise ConfigurationError(
                    f"subtree of {current.id!r} exceeds max_levels={self.max_levels}"
                )
            for child in current.children:
                yield child
                yield from _walk(child, depth + 1)

        return _walk(node, 1)

    def group_of(self, option: OptionNode) -> GroupNode | None:
        return option.group

    def groups(self) -> list[GroupNode]:
        """Return all groups in display order."""
        return [node for node in self._top if isinstance(node, GroupNode)]

    def get_group(self, name: str | GroupNode) -> GroupNode | None:
        """Return a group by node or by (partial) label match."""
        if isinstance(name, GroupNode):
            return name
        for group in self.groups():
            if name in group.label:
                return group
        return None

    def options(
        self,
        group: GroupNode | None = None,
        root_only: bool = False,
    ) -> list[OptionNode]:
        """Return options in display order.

        Args:
            group: Only the options of this group.
            root_only: Only the options outside every group.
        """
        result = [node for node in self if isinstance(node, OptionNode)]
        if group is not None:
            return [option for option in result if option.group is group]
        if root_only:
            return [option for option in result if option.group is None]
        return result

    def branch_options(self, group: GroupNode | None) -> list[OptionNode]:
        """Return the options of ``group``, or the non-grouped ones if None."""
        if group is None:
            return self.options(root_only=True)
        return self.options(group=group)

