# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""SmartSelect - the selection engine behind a hierarchical select widget.

SmartSelect composes the tree model, the constraint engine, the alias
registry, the view projector and the event pipeline. The presentation
layer feeds it descriptor rows, issues commands and reads back the
projection (values, labels, visible nodes, trigger caption).

Key Features:
    - **Constraint rules**: floors, ceilings, exclusivity, forced options
    - **Veto pipeline**: every change goes through before/after events
    - **Aliases**: named value sets matched against the selection
    - **Views**: which branches are expanded, plus search
    - **Notifications**: subscribe to lifecycle events and named signals

Example:
    >>> select = SmartSelect([
    ...     {'value': 'A'},
    ...     {'group': True, 'label': 'G', 'at_least': 1, 'exclusive': True},
    ...     {'value': 'B'},
    ...     {'value': 'C'},
    ... ])
    >>> select.get_values()
    ['B']
    >>> select.select_options(['C'])
    >>> select.get_values()
    ['C']
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from .aliases import AliasRegistry, same_values
from .config import SmartSelectConfig
from .constraints import ConstraintEngine
from .exceptions import (
    ConfigurationError,
    DuplicateAliasError,
    DuplicateValueError,
    InvalidOptionError,
    SmartSelectError,
)
from .node import BaseNode, GroupNode, OptionNode
from .pipeline import Event, EventPipeline
from .registry import DropdownRegistry, default_registry
from .subscription import SubscriptionMixin
from .tree import OptionTree, load_from_list
from .view import ViewProjector

logger = logging.getLogger(__name__)


class Result(Enum):
    """Outcome of a selection primitive. Only OK is truthy."""

    OK = 'ok'
    VETOED = 'vetoed'
    NOT_FOUND = 'not_found'
    DISABLED = 'disabled'

    def __bool__(self) -> bool:
        return self is Result.OK


def _as_values(values: Any) -> list[str]:
    if values is None:
        return []
    if isinstance(values, (str, int, float, OptionNode)):
        values = [values]
    return [v if isinstance(v, OptionNode) else str(v) for v in values]


class SmartSelect(SubscriptionMixin):
    """A hierarchical multi-select with selection constraints.

    Args:
        data: Descriptor rows (see ``load_from_list``). Overrides
            ``config.data`` when given.
        config: A SmartSelectConfig. Keyword options are merged over it.
        registry: Coordinator of open dropdowns, shared by default.
        **options: Any SmartSelectConfig field, in snake_case or camelCase.

    Raises:
        ConfigurationError: On invalid settings or descriptors.
        DuplicateValueError: On a repeated option value.
    """

    __slots__ = (
        'config', 'tree', 'aliases', 'view', 'pipeline', 'engine', 'registry',
        '_subscribers', '_disabled', '_open', '_delayed', '_saved_values',
        '_host_values', '_expandable', 'label', 'label_title', '__weakref__',
    )

    def __init__(
        self,
        data: list[dict[str, Any]] | None = None,
        config: SmartSelectConfig | None = None,
        registry: DropdownRegistry | None = None,
        **options: Any,
    ) -> None:
        self.config = self._build_config(config, data, options)
        self._init_subscriptions()
        self.tree = OptionTree(
            max_levels=self.config.max_levels,
            separator=self.config.special_value_separator,
        )
        self.aliases = AliasRegistry(self.config.aliases)
        self.view = ViewProjector(self.tree)
        self.pipeline = EventPipeline(notify=self._notify)
        self.engine = ConstraintEngine(self)
        self.registry = registry if registry is not None else default_registry
        self.registry.register(self)

        self._disabled = False
        self._open = False
        self._delayed = False
        self._saved_values: list[str] = []
        self._host_values: list[str] = []
        self._expandable = False
        self.label = self.config.text.select_label
        self.label_title = self.label

        self._register_builtin_callbacks()
        for event, handlers in self.config.callbacks.items():
            self.add_callback(event, handlers)

        self._init()

    @staticmethod
    def _build_config(
        config: SmartSelectConfig | None,
        data: list[dict[str, Any]] | None,
        options: dict[str, Any],
    ) -> SmartSelectConfig:
        options = dict(options)
        if data is not None:
            options['data'] = data
        try:
            if config is None:
                return SmartSelectConfig.model_validate(options)
            if not options:
                return config.model_copy()
            return config.merged(options)
        except ValidationError as exc:
            raise ConfigurationError(f"bad argument: {exc}") from exc

    def _init(self) -> None:
        if not self.pipeline.fire(Event.PLUGIN_LOAD):
            return
        try:
            load_from_list(
                self.tree,
                self.config.data,
                exclusive_groups=not self.config.multiple,
                alert=self._alert,
                text=self.config.text,
            )
        except SmartSelectError as exc:
            self._alert(str(exc))
            raise
        self.pipeline.fire(Event.PLUGIN_LOADED)

    def __repr__(self) -> str:
        return f"SmartSelect({self.get_values()!r}, label={self.label!r})"

    # ==================== Pipeline wiring ====================

    def _register_builtin_callbacks(self) -> None:
        engine = self.engine
        add = self.pipeline.add

        add(Event.PLUGIN_LOAD, self._fix_plugin_options)

        add(Event.PLUGIN_LOADED, self._set_default_values)
        add(Event.PLUGIN_LOADED, lambda target: engine.fix_empty_logic(target, Event.PLUGIN_LOADED))
        add(Event.PLUGIN_LOADED, self._flush_select)
        add(Event.PLUGIN_LOADED, self._set_select_label)
        add(Event.PLUGIN_LOADED, self._match_alias_name)
        add(Event.PLUGIN_LOADED, self._sync_select)
        add(Event.PLUGIN_LOADED, self._disabled_select)

        add(Event.DROPDOWN_SHOW, self._delayed_init)

        add(Event.DROPDOWN_SHOWN, self._save_old_values)
        add(Event.DROPDOWN_SHOWN, self._update_icons)

        add(Event.DROPDOWN_HIDDEN, self._sync_select)

        add(Event.OPTION_CHANGED, self._flush_select)
        add(Event.OPTION_CHANGED, self._set_select_label)
        add(Event.OPTION_CHANGED, self._match_alias_name)
        add(Event.OPTION_CHANGED, self._reveal_selected)
        add(Event.OPTION_CHANGED, self._close_on_select)

        add(Event.OPTION_DISABLED, lambda target: engine.fix_empty_logic(target, Event.OPTION_DISABLED))
        add(Event.OPTION_SELECT, engine.at_most)
        add(Event.OPTION_SELECTED, engine.fix_select_logic)
        add(Event.OPTION_DESELECT, lambda target: engine.fix_empty_logic(target, Event.OPTION_DESELECT))

    def add_callback(
        self,
        event: str | Event,
        callback: Callable[[Any], Any] | Iterable[Callable[[Any], Any]],
    ) -> None:
        """Append user handlers to an event.

        A handler is called with the event target and vetoes the event by
        returning False.

        Raises:
            ConfigurationError: If the event name is unknown.
        """
        try:
            event = Event.coerce(event)
        except ValueError as exc:
            self._alert(f"{self.config.text.callback_error}{event}")
            raise ConfigurationError(f"unknown callback {event!r}") from exc
        handlers = [callback] if callable(callback) else list(callback)
        for handler in handlers:
            self.pipeline.add(event, handler)

    # ==================== Channels ====================

    def _alert(self, message: str) -> None:
        if self.config.alert is not None:
            self.config.alert(message)
        else:
            logger.warning(message)

    def _confirm(self, message: str) -> bool:
        if self.config.confirm is None:
            logger.info("declined without confirm handler: %s", message)
            return False
        return bool(self.config.confirm(message))

    # ==================== Read back ====================

    def is_disabled(self) -> bool:
        return self._disabled

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def visible(self) -> frozenset[str]:
        """Ids of the nodes currently visible."""
        return frozenset(self.view.visible)

    @property
    def expandable(self) -> bool:
        """True if some enabled option is hidden by the current view."""
        return self._expandable

    @property
    def host_values(self) -> list[str]:
        """Values last written to the host control."""
        return list(self._host_values)

    def selected_options(self) -> list[OptionNode]:
        """Selected and enabled options in display order."""
        return [option for option in self.tree.options() if option.is_active]

    def option_value(self, option: OptionNode) -> str:
        """External value of ``option``, ``value::text`` for special options."""
        if not option.special:
            return option.value
        if self.config.get_special_value is not None:
            return self.config.get_special_value(option, self)
        return f"{option.value}{self.config.special_value_separator}{option.special_value}"

    def option_label(self, option: OptionNode) -> str:
        """Display text of ``option``, the bound text for special options."""
        if not option.special:
            return option.label
        if self.config.get_special_label is not None:
            return self.config.get_special_label(option, self)
        return option.special_value

    def get_selected_pairs(self) -> dict[str, Any] | None:
        """Return ``{'value': [...], 'label': {value: text}, 'text': [...]}``.

        None while the select is disabled.
        """
        if self._disabled:
            return None
        result: dict[str, Any] = {'value': [], 'label': {}, 'text': []}
        for option in self.selected_options():
            value = self.option_value(option)
            text = self.option_label(option)
            result['label'][value] = text
            result['value'].append(value)
            result['text'].append(text)
        return result

    def get_values(self) -> list[str]:
        """Selected values in display order, empty while disabled."""
        if self._disabled:
            return []
        return self.get_selected_pairs()['value']

    def get_group(self, name: str | GroupNode) -> GroupNode | None:
        return self.tree.get_group(name)

    # ==================== Primitives ====================

    def _lookup(self, ref: str | OptionNode) -> OptionNode | None:
        if isinstance(ref, OptionNode):
            return ref if self.tree.resolve(ref) is ref else None
        return self.tree.find_by_value(ref)

    def _set_special_value(self, text: str, option: OptionNode) -> None:
        if self.config.set_special_value is not None:
            self.config.set_special_value(text, option, self)
            return
        parts = text.split(self.config.special_value_separator, 1)
        option.special_value = parts[1]

    def _select(self, ref: str | OptionNode, trigger: bool = True) -> Result:
        """Select one option, firing OptionSelect/OptionSelected."""
        option = self._lookup(ref)
        if option is None:
            return Result.NOT_FOUND
        if isinstance(ref, str) and self.config.special_value_separator in ref:
            self._set_special_value(ref, option)
        if option.selected:
            return Result.OK
        if not option.is_selectable:
            return Result.DISABLED
        if trigger and not self.pipeline.fire(Event.OPTION_SELECT, option):
            return Result.VETOED
        option.selected = True
        if trigger and not self.pipeline.fire(Event.OPTION_SELECTED, option):
            return Result.VETOED
        return Result.OK

    def _deselect(self, ref: str | OptionNode, trigger: bool = True) -> Result:
        """Deselect one option, firing OptionDeselect/OptionDeselected."""
        option = self._lookup(ref)
        if option is None:
            return Result.NOT_FOUND
        if not option.selected:
            return Result.OK
        if option.disabled:
            return Result.DISABLED
        if trigger and not self.pipeline.fire(Event.OPTION_DESELECT, option):
            return Result.VETOED
        option.selected = False
        if trigger and not self.pipeline.fire(Event.OPTION_DESELECTED, option):
            return Result.VETOED
        return Result.OK

    def _apply_values(self, values: Any, select: bool) -> list[str]:
        primitive = self._select if select else self._deselect
        unresolved = []
        for value in _as_values(values):
            result = primitive(value)
            if result is Result.NOT_FOUND:
                self._alert(f"{self.config.text.value_set_error}{value}")
                unresolved.append(value)
            elif not result:
                logger.debug("%s %r: %s", 'select' if select else 'deselect', value, result.value)
        return unresolved

    def _set_values(self, values: Any) -> list[str]:
        """Select each value with per-item events. Returns the unknown values."""
        return self._apply_values(values, True)

    def _unset_values(self, values: Any) -> list[str]:
        """Deselect each value with per-item events. Returns the unknown values."""
        return self._apply_values(values, False)

    def _clear_values(self) -> None:
        """Deselect every enabled option, no events, no rules."""
        for option in self.tree.options():
            if option.is_active:
                option.selected = False

    def _quick_select(
        self,
        options: list[OptionNode],
        select: bool = True,
        trigger_change: bool = True,
    ) -> None:
        """Flip the state of ``options`` without per-item events or rules."""
        if trigger_change and not self.pipeline.fire(Event.OPTION_CHANGE):
            return
        for option in options:
            option.selected = select
        if trigger_change:
            self.pipeline.fire(Event.OPTION_CHANGED)

    def _select_matched(
        self,
        options: list[OptionNode],
        select: bool = True,
        trigger_event: bool = True,
        trigger_change: bool = True,
    ) -> None:
        if trigger_change and not self.pipeline.fire(Event.OPTION_CHANGE):
            return
        for option in options:
            if select:
                self._select(option, trigger_event)
            else:
                self._deselect(option, trigger_event)
        if trigger_change:
            self.pipeline.fire(Event.OPTION_CHANGED)

    # ==================== Selection commands ====================

    def select_options(self, values: Any, clear: bool = True) -> None:
        """Select ``values``, by default replacing the current selection.

        With ``clear`` the selection is emptied first (no rules) and the
        floors are repaired after the batch.
        """
        if self._disabled:
            return
        logger.debug("select_options %r clear=%s", values, clear)
        if not self.pipeline.fire(Event.OPTION_CHANGE):
            return
        if clear:
            self._clear_values()
        self._set_values(values)
        if clear:
            self.engine.fix_empty_logic()
        self.pipeline.fire(Event.OPTION_CHANGED)

    def deselect_options(self, values: Any) -> None:
        """Deselect ``values``, each subject to the floor rules."""
        if self._disabled:
            return
        logger.debug("deselect_options %r", values)
        if not self.pipeline.fire(Event.OPTION_CHANGE):
            return
        self._unset_values(values)
        self.pipeline.fire(Event.OPTION_CHANGED)

    def toggle_option(
        self,
        ref: str | OptionNode,
        trigger_change: bool = True,
        set_option: bool | None = None,
    ) -> Result:
        """Toggle one option, or force it with ``set_option`` True/False.

        Raises:
            InvalidOptionError: If ``ref`` is not an option of this select.
        """
        if self._disabled:
            return Result.DISABLED
        option = self._lookup(ref)
        if option is None:
            raise InvalidOptionError(f"{self.config.text.invalid_option_error}: {ref!r}")
        if option.disabled:
            return Result.DISABLED
        if trigger_change and not self.pipeline.fire(Event.OPTION_CHANGE, option):
            return Result.VETOED
        if set_option is None:
            set_option = not option.selected
        result = self._select(ref) if set_option else self._deselect(ref)
        if trigger_change:
            self.pipeline.fire(Event.OPTION_CHANGED, option)
        return result

    def select_option(self, ref: str | OptionNode, trigger_change: bool = True) -> Result:
        return self.toggle_option(ref, trigger_change, True)

    def deselect_option(self, ref: str | OptionNode, trigger_change: bool = True) -> Result:
        return self.toggle_option(ref, trigger_change, False)

    def _resolve_group(self, group: str | GroupNode | None) -> GroupNode | None:
        if group is None:
            return None
        grp = self.tree.get_group(group)
        if grp is None:
            raise InvalidOptionError(f"{self.config.text.invalid_option_error}: group {group!r}")
        return grp

    def select_group_options(
        self,
        group: str | GroupNode | None = None,
        trigger_change: bool = True,
    ) -> None:
        """Select every selectable option of ``group`` (None is the root).

        Only level-1 options unless the group is level inclusive. Special
        options are never bulk selected.
        """
        if self._disabled:
            return
        grp = self._resolve_group(group)
        inclusive = self.engine.is_level_inclusive(grp)
        candidates = [
            option
            for option in self.tree.branch_options(grp)
            if option.is_selectable and not option.special and (inclusive or option.level == 1)
        ]
        if self.engine.is_group_multiple(grp) and not self.engine.has_at_most():
            # the first one goes through the rules (it may clear other groups)
            if candidates:
                self._select(candidates[0])
            self._quick_select(candidates, True, trigger_change)
        else:
            self._select_matched(candidates, True, True, trigger_change)

    def deselect_group_options(
        self,
        group: str | GroupNode | None = None,
        trigger_change: bool = True,
    ) -> None:
        """Deselect the active options of ``group`` (None is the root)."""
        if self._disabled:
            return
        grp = self._resolve_group(group)
        active = [option for option in self.tree.branch_options(grp) if option.is_active]
        if not active:
            return
        if self.engine.is_group_multiple(grp):
            self._quick_select(active, False, trigger_change)
        else:
            self._select_matched(active, False, True, trigger_change)

    def select_all_options(self) -> None:
        """Select everything the rules allow, group by group, then the root."""
        if self._disabled:
            return
        self._clear_values()
        for group in self.tree.groups():
            if not group.disabled:
                self.select_group_options(group, trigger_change=False)
        self.select_group_options(None)

    def deselect_all_options(self, force: bool = False) -> None:
        """Empty the selection and replay the load rules (defaults, floors).

        Args:
            force: Deselect through the rules, with events, instead of
                clearing silently.
        """
        if self._disabled:
            return
        if force:
            self.deselect_options(self.get_values())
        else:
            self._clear_values()
        self.pipeline.fire(Event.PLUGIN_LOADED, notify=False)

    # ==================== Aliases ====================

    def add_alias(
        self,
        name: str | dict[str, Any],
        values: Any = None,
        sync_label: bool = True,
    ) -> None:
        """Register an alias, or several from a ``{name: values}`` dict.

        Raises:
            DuplicateAliasError: If a conflicting alias is not replaced.
        """
        if self._disabled:
            return
        dup_message = self.config.text.alias_dup_error
        if isinstance(name, dict):
            for alias_name, alias_values in name.items():
                self.aliases.add(alias_name, alias_values, confirm=self._confirm, message=dup_message)
            self._match_alias_name()
            self._notify('aliasChange', None)
            return
        try:
            self.aliases.add(name, values, confirm=self._confirm, message=dup_message)
        except DuplicateAliasError:
            logger.info("alias %r not added", name)
            raise
        if sync_label:
            self._match_alias_name()
        self._notify('aliasChange', name)

    def remove_alias(self, names: str | Iterable[str], sync_label: bool = True) -> None:
        """Remove one or more aliases. Unknown names are ignored."""
        if self._disabled:
            return
        self.aliases.remove(names)
        if sync_label:
            self._set_select_label()
            self._match_alias_name()
        self._notify('aliasChange', names)

    def select_alias(self, name: str) -> None:
        """Replace the selection with the values of alias ``name``.

        Raises:
            InvalidOptionError: If the alias does not exist.
        """
        if name not in self.aliases:
            raise InvalidOptionError(f"unknown alias {name!r}")
        self.select_options(self.aliases[name])
        if self.config.view_after_alias:
            self.set_view(self.config.toolbar_view)
        if self.config.close_after_alias:
            self.close_dropdown()

    def save_alias(self, name: str) -> bool:
        """Store the current selection as alias ``name``.

        Returns:
            False (after an alert) if nothing is selected.
        """
        values = self.get_values()
        if not values:
            self._alert(self.config.text.empty_values_error)
            return False
        self.add_alias(name, values)
        return True

    # ==================== Tree mutation ====================

    def add_option(
        self,
        info: dict[str, Any],
        after: str | OptionNode | None = None,
        parent: str | BaseNode | None = None,
    ) -> str:
        """Insert an option and return its id. See ``OptionTree.add_option``.

        Raises:
            DuplicateValueError: After an ``optionDuplicated`` notification.
        """
        try:
            option_id = self.tree.add_option(info, after=after, parent=parent)
        except DuplicateValueError as exc:
            self._notify('optionDuplicated', self.tree.find_by_value(exc.value))
            self._alert(f"{self.config.text.duplication_error}: {exc.value}")
            raise
        except ConfigurationError as exc:
            self._alert(str(exc))
            raise
        option = self.tree.get_node(option_id)
        self._notify('optionAdded', option)
        if self._open:
            self.view.expand_all()
            self._update_icons()
        return option_id

    def remove_option(self, value: str) -> None:
        """Remove an option with its subtree. Unknown values are ignored."""
        option = self.tree.remove_option(value)
        if option is None:
            return
        removed = {option.id, *(node.id for node in self.tree.descendants_of(option))}
        self.view.visible.difference_update(removed)
        self._notify('optionRemoved', option)
        self.pipeline.fire(Event.OPTION_CHANGED)
        self._update_icons()

    def clear_all_options(self) -> None:
        """Discard every group and option."""
        if self._disabled:
            return
        nodes = list(self.tree)
        if not nodes:
            return
        had_active = bool(self.selected_options())
        self.close_dropdown()
        self.tree.clear()
        self.view.visible = set()
        self._host_values = []
        self._delayed = False
        logger.info("all options cleared")
        self._notify('optionRemoved', None)
        if had_active:
            self.pipeline.fire(Event.OPTION_CHANGED)
        self._set_select_label()
        self._update_icons()

    # ==================== Enable / disable ====================

    def disable_select(self) -> None:
        """Freeze the whole select: commands are ignored, values read empty."""
        if self._disabled:
            return
        self.close_dropdown()
        self._disabled = True
        self._set_select_label(self.config.text.disabled)
        logger.info("select disabled")

    def enable_select(self) -> None:
        if not self._disabled:
            return
        self._disabled = False
        logger.info("select enabled")
        self.pipeline.fire(Event.OPTION_CHANGED)

    def _options_for(self, values: Any, disabled: bool) -> list[OptionNode]:
        if values is None:
            return [o for o in self.tree.options() if o.disabled == disabled]
        todo = []
        for value in _as_values(values):
            option = self._lookup(value)
            if option is not None and option.disabled == disabled and option not in todo:
                todo.append(option)
        return todo

    def disable_options(self, values: Any = None) -> None:
        """Disable options (all enabled ones for None), repairing the floors."""
        if self._disabled:
            return
        for option in self._options_for(values, False):
            if not self.pipeline.fire(Event.OPTION_DISABLE, option):
                continue
            option.disabled = True
            self.pipeline.fire(Event.OPTION_DISABLED, option)
        self.pipeline.fire(Event.OPTION_CHANGED)

    def enable_options(self, values: Any = None) -> None:
        """Enable options (all disabled ones for None)."""
        if self._disabled:
            return
        for option in self._options_for(values, True):
            option.disabled = False
            self.pipeline.fire(Event.OPTION_ENABLED, option)
        self.pipeline.fire(Event.OPTION_CHANGED)

    # ==================== Dropdown ====================

    def toggle_dropdown(self, hide: bool | None = None) -> None:
        """Open or close the dropdown; ``hide`` forces the direction."""
        if self._disabled:
            return
        if hide is None:
            hide = self._open
        if hide:
            if self.pipeline.fire(Event.DROPDOWN_HIDE):
                self._open = False
                self.pipeline.fire(Event.DROPDOWN_HIDDEN)
        elif self.pipeline.fire(Event.DROPDOWN_SHOW):
            if self.config.close_other:
                self.registry.close_all_except(self)
            self._open = True
            self.pipeline.fire(Event.DROPDOWN_SHOWN)

    def open_dropdown(self) -> None:
        self.toggle_dropdown(False)

    def close_dropdown(self) -> None:
        self.toggle_dropdown(True)

    # ==================== View ====================

    def set_view(self, spec: str | None = None) -> frozenset[str]:
        """Apply a view specification (default view for None)."""
        try:
            self.view.apply(spec or self.config.default_view)
        except ConfigurationError as exc:
            self._alert(str(exc))
            raise
        self._update_icons()
        return self.visible

    def search(self, text: str) -> frozenset[str]:
        """Show only the options matching ``text``; blank text shows everything."""
        self.view.search(
            text,
            search_by=self.config.search_by,
            case_insensitive=self.config.search_case_insensitive,
            label_of=self.option_label,
            value_of=self.option_value,
        )
        self._update_icons()
        return self.visible

    def expand_all(self) -> frozenset[str]:
        self.view.expand_all()
        self._update_icons()
        return self.visible

    def collapse_all(self, show_groups: bool = True) -> frozenset[str]:
        self.view.collapse_all(show_groups)
        self._update_icons()
        return self.visible

    def unfold_option(self, ref: str | BaseNode) -> None:
        """Open a folder (option value, group label or node)."""
        node = self.tree.resolve(ref)
        if node is None or node.open:
            return
        self.view.toggle_folder(node)
        self._update_icons()

    def fold_option(self, ref: str | BaseNode) -> None:
        """Close a folder (option value, group label or node)."""
        node = self.tree.resolve(ref)
        if node is None or not node.open:
            return
        self.view.toggle_folder(node)
        self._update_icons()

    def cancel_changes(self) -> None:
        """Restore the selection saved when the dropdown was last shown."""
        if not same_values(self._saved_values, self.get_values()):
            self.select_options(self._saved_values)

    def sync_select(self) -> None:
        """Force the selection onto the host control."""
        self._sync_select()

    # ==================== Built-in handlers ====================

    def _fix_plugin_options(self, target: Any = None) -> None:
        self.config.normalise()

    def _set_default_values(self, target: Any = None) -> None:
        self._clear_values()
        if self.config.initial_values:
            self._set_values(self.config.initial_values)
            self.config.initial_values = []
        elif self.config.default_values is not None:
            self._set_values(self.config.default_values)

    def _disabled_select(self, target: Any = None) -> None:
        if self.config.disabled:
            self.disable_select()

    def _flush_select(self, target: Any = None, force: bool = False) -> None:
        if not (force or self.config.keep_in_sync):
            return
        self._host_values = self.get_values()
        if self.config.sync_callback is not None:
            self.config.sync_callback(list(self._host_values))

    def _sync_select(self, target: Any = None) -> None:
        self._flush_select(target, force=True)

    def _set_select_label(self, text: str | None = None) -> None:
        if not self.config.show_selected_in_label:
            return
        if isinstance(text, str):
            self.label = self.label_title = text
            return
        label = title = self.config.text.select_label
        pairs = self.get_selected_pairs()
        labels = pairs['text'] if pairs else []
        if labels:
            title = ','.join(labels)
            if self.config.show_selected_callback is not None:
                label = self.config.show_selected_callback(labels)
            elif len(labels) <= self.config.show_selected_count:
                label = self.config.show_selected_separator.join(labels)
            else:
                label = self.config.text.label_template.replace('#', str(len(labels)))
        self.label = label
        self.label_title = title

    def _match_alias_name(self, target: Any = None) -> None:
        if not self.config.show_selected_in_label:
            return
        name = self.aliases.match(self.get_values())
        if name is not None:
            self.label = name

    def _reveal_selected(self, target: Any = None) -> None:
        # additive: folders opened by the user stay open
        if self._delayed:
            self.view.visible |= self.view.compute_view('selected')
            self._update_icons()

    def _close_on_select(self, target: Any = None) -> None:
        if self.config.close_on_select and self._open:
            self.close_dropdown()

    def _delayed_init(self, target: Any = None) -> None:
        if self._delayed:
            return
        self.view.apply(self.config.default_view)
        self._delayed = True

    def _save_old_values(self, target: Any = None) -> None:
        self._saved_values = self.get_values()

    def _update_icons(self, target: Any = None) -> None:
        self._expandable = self.view.refresh_folders()
