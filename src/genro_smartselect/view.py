# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""View projection: which nodes of the tree are expanded/visible.

A view specification is a ``+``-joined union of modes:

    'root'      level-1 options outside groups
    'expand'    everything (short-circuits the other modes)
    'level1'    options at level 1
    'level2'    options up to level 2
    'selected'  ancestor chains of the selected options
    'view'      nodes carrying a view depth, their ancestors and their
                subtree down to that many levels (at most 3)

Groups are always visible. The projection is recomputed in full on every
call; search highlighting is a separate pass.

Example:
    >>> projector = ViewProjector(tree)
    >>> visible = projector.compute_view('root+selected')
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .node import BaseNode, OptionNode
    from .tree import OptionTree

VIEW_MODES = frozenset({'root', 'expand', 'level1', 'level2', 'selected', 'view'})

DEFAULT_VIEW = 'root+selected+view'

# deepest subtree a single view depth may reveal
MAX_VIEW_DEPTH = 3


def parse_view_spec(spec: str | Iterable[str]) -> frozenset[str]:
    """Split a view specification into its modes.

    Raises:
        ConfigurationError: On an empty specification or an unknown mode.

    Example:
        >>> sorted(parse_view_spec('root+selected'))
        ['root', 'selected']
    """
    if isinstance(spec, str):
        modes = [m.strip() for m in spec.split('+') if m.strip()]
    else:
        modes = [str(m).strip() for m in spec]
    if not modes:
        raise ConfigurationError("empty view specification")
    unknown = set(modes) - VIEW_MODES
    if unknown:
        raise ConfigurationError(f"unknown view mode(s): {', '.join(sorted(unknown))}")
    return frozenset(modes)


class ViewProjector:
    """Computes and holds the set of visible node ids for a tree.

    Attributes:
        visible: Ids of the nodes currently visible.
    """

    __slots__ = ('tree', 'visible')

    def __init__(self, tree: OptionTree) -> None:
        self.tree = tree
        self.visible: set[str] = set()

    # ==================== Projection ====================

    def compute_view(
        self,
        spec: str | Iterable[str] = DEFAULT_VIEW,
        selection: Iterable[OptionNode] | None = None,
    ) -> set[str]:
        """Compute the visible node ids for ``spec``.

        Args:
            spec: View specification (mode union).
            selection: Selected options to reveal for the ``selected`` mode.
                Defaults to the active options of the tree.

        Returns:
            Set of visible node ids. Does not change ``visible``.
        """
        modes = parse_view_spec(spec)
        tree = self.tree

        if 'expand' in modes:
            return {node.id for node in tree}

        visible = {group.id for group in tree.groups()}
        options = tree.options()

        if 'root' in modes:
            visible.update(o.id for o in options if o.group is None and o.level == 1)

        if 'level1' in modes or 'level2' in modes:
            max_level = 2 if 'level2' in modes else 1
            visible.update(o.id for o in options if o.level <= max_level)

        if 'selected' in modes:
            if selection is None:
                selection = [o for o in options if o.is_active]
            for option in selection:
                if option.disabled:
                    continue
                visible.update(o.id for o in tree.ancestors_of(option))

        if 'view' in modes:
            for node in tree:
                if node.view_depth is None or node.disabled:
                    continue
                base_level = node.level  # type: ignore[attr-defined]
                if not node.is_group:
                    visible.update(o.id for o in tree.ancestors_of(node))  # type: ignore[arg-type]
                depth = min(node.view_depth, MAX_VIEW_DEPTH)
                visible.update(
                    o.id for o in tree.descendants_of(node) if o.level - base_level <= depth
                )

        return visible

    def apply(
        self,
        spec: str | Iterable[str] = DEFAULT_VIEW,
        selection: Iterable[OptionNode] | None = None,
    ) -> set[str]:
        """Recompute and store the view, then refresh folder states."""
        self.visible = self.compute_view(spec, selection)
        self.refresh_folders()
        return self.visible

    def expand_all(self) -> set[str]:
        """Make every node visible."""
        self.visible = {node.id for node in self.tree}
        self.refresh_folders()
        return self.visible

    def collapse_all(self, show_groups: bool = True) -> set[str]:
        """Hide every option, keeping groups visible unless ``show_groups`` is False."""
        self.visible = {g.id for g in self.tree.groups()} if show_groups else set()
        self.refresh_folders()
        return self.visible

    def search(
        self,
        text: str,
        search_by: str = 'label',
        case_insensitive: bool = True,
        label_of: Callable[[OptionNode], str] | None = None,
        value_of: Callable[[OptionNode], str] | None = None,
    ) -> set[str]:
        """Reveal only the options matching ``text`` and their ancestor chains.

        The previous view is discarded. An empty (or blank) text expands
        everything.

        Args:
            text: Substring to look for.
            search_by: 'label', 'value' or 'both' ('label value').
            case_insensitive: Compare lower-cased strings.
            label_of: Label extractor, defaults to ``node.label``.
            value_of: Value extractor, defaults to ``node.value``.
        """
        text = text.strip()
        if not text:
            return self.expand_all()

        label_of = label_of or (lambda node: node.label)
        value_of = value_of or (lambda node: node.value)
        if case_insensitive:
            text = text.lower()

        visible: set[str] = set()
        for option in self.tree.options():
            if option.disabled:
                continue
            if search_by == 'value':
                haystack = value_of(option)
            elif search_by == 'both':
                haystack = f"{label_of(option)} {value_of(option)}"
            else:
                haystack = label_of(option)
            if case_insensitive:
                haystack = haystack.lower()
            if text in haystack:
                visible.update(o.id for o in self.tree.ancestors_of(option))
                if option.group is not None:
                    visible.add(option.group.id)

        self.visible = visible
        self.refresh_folders()
        return visible

    # ==================== Folders ====================

    def toggle_folder(self, node: BaseNode) -> bool:
        """Open or close a single folder. Returns the new open state.

        Closing hides the whole subtree, opening reveals the direct children.
        """
        if node.open:
            self.visible.difference_update(o.id for o in self.tree.descendants_of(node))
            node.open = False
        else:
            self.visible.update(child.id for child in node.children)
            node.open = bool(node.children)
        return node.open

    def refresh_folders(self) -> bool:
        """Update each folder's ``open`` flag from its children's visibility.

        Returns:
            True if some enabled option is still hidden (the "expand all"
            control should be offered).
        """
        hidden = False
        for node in self.tree:
            if node.children:
                node.open = all(child.id in self.visible for child in node.children)
            else:
                node.open = False
            if not node.is_group and not node.disabled and node.id not in self.visible:
                hidden = True
        return hidden
