# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Configuration and ingest descriptor models.

SmartSelect settings and the raw node descriptors fed by the presentation
layer are validated with pydantic. Keys are accepted both in snake_case and
in the camelCase spelling used by the HTML data attributes
(``atLeast``, ``levelInclusive``, ``groupExclusive``...).

Example:
    >>> config = SmartSelectConfig(atLeast=1, searchBy='both')
    >>> config.at_least, config.search_by
    (1, 'both')
"""

from __future__ import annotations

import re
from typing import Any, Callable, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .view import parse_view_spec

_TAG_SPLIT_RE = re.compile(r"[\s,]+")


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def parse_tags(value: Any) -> frozenset[str] | None:
    """Normalise a tag attribute to a frozenset.

    None/False means no tag. True or an empty string give an empty set,
    which overlaps with nothing.

    Example:
        >>> sorted(parse_tags('a b,c'))
        ['a', 'b', 'c']
    """
    if value is None or value is False:
        return None
    if value is True:
        return frozenset()
    if isinstance(value, str):
        parts = [p for p in _TAG_SPLIT_RE.split(value.strip()) if p]
    else:
        parts = [str(p) for p in value if str(p)]
    return frozenset(parts)


def _coerce_values(value: Any) -> list[str]:
    if isinstance(value, (str, int, float)):
        return [str(value)]
    return [str(v) for v in value]


def _coerce_view(value: Any) -> int | None:
    if value is None or value is False:
        return None
    if value is True or value == '':
        return 1
    return int(value)


# ==================== Descriptors ====================


class OptionDescriptor(BaseModel):
    """Raw option row supplied at construction or to add_option()."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    value: str = Field(min_length=1, description="External identifier, unique in the tree")
    label: str = Field(default='', description="Display text, defaults to value")
    level: int | None = Field(default=None, ge=1, description="1-based depth in its branch")
    disabled: bool = False
    view_depth: int | None = Field(
        default=None, validation_alias=_alias('view_depth', 'view', 'viewDepth')
    )
    must_select: bool = Field(
        default=False, validation_alias=_alias('must_select', 'must', 'mustSelect')
    )
    not_selectable: bool = Field(
        default=False, validation_alias=_alias('not_selectable', 'notSelectable')
    )
    special: bool = False
    special_value: str = Field(
        default='', validation_alias=_alias('special_value', 'specialValue')
    )
    inclusive: frozenset[str] | None = None
    in_group: bool | None = Field(
        default=None, validation_alias=_alias('in_group', 'inGroup', 'ingroup')
    )

    @field_validator('value', 'label', mode='before')
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return '' if value is None else str(value)

    @field_validator('view_depth', mode='before')
    @classmethod
    def _validate_view(cls, value: Any) -> int | None:
        return _coerce_view(value)

    @field_validator('inclusive', mode='before')
    @classmethod
    def _validate_inclusive(cls, value: Any) -> frozenset[str] | None:
        return parse_tags(value)

    @property
    def extra_attr(self) -> dict[str, Any]:
        """Descriptor keys the engine does not interpret."""
        return dict(self.model_extra or {})


class GroupDescriptor(BaseModel):
    """Raw group row: ``{'group': True, 'label': ..., constraint attributes}``."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    group: Literal[True] = True
    label: str = ''
    disabled: bool = False
    exclusive: bool = False
    level_inclusive: bool = Field(
        default=False,
        validation_alias=_alias('level_inclusive', 'levelInclusive', 'levelInc'),
    )
    at_least: int | None = Field(
        default=None, ge=0, validation_alias=_alias('at_least', 'atLeast', 'atleast')
    )
    at_most: int | None = Field(
        default=None, ge=0, validation_alias=_alias('at_most', 'atMost', 'atmost')
    )
    group_exclusive: frozenset[str] | None = Field(
        default=None,
        validation_alias=_alias('group_exclusive', 'groupExclusive'),
    )
    view_depth: int | None = Field(
        default=None, validation_alias=_alias('view_depth', 'view', 'viewDepth')
    )

    @field_validator('at_least', mode='before')
    @classmethod
    def _validate_at_least(cls, value: Any) -> int | None:
        # an empty data-atleast attribute means one
        if value is True or value == '':
            return 1
        if value is False:
            return None
        return value

    @field_validator('group_exclusive', mode='before')
    @classmethod
    def _validate_group_exclusive(cls, value: Any) -> frozenset[str] | None:
        return parse_tags(value)

    @field_validator('view_depth', mode='before')
    @classmethod
    def _validate_view(cls, value: Any) -> int | None:
        return _coerce_view(value)

    @property
    def extra_attr(self) -> dict[str, Any]:
        """Descriptor keys the engine does not interpret."""
        return dict(self.model_extra or {})


# ==================== Settings ====================


class MessageText(BaseModel):
    """User-facing labels and alert messages."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    select_label: str = Field(default='Smart Select', validation_alias=_alias('select_label', 'selectLabel'))
    label_template: str = Field(default='# selected', validation_alias=_alias('label_template', 'labelTemplate'))
    disabled: str = 'Disabled'
    group_exclude_error: str = '"data-atleast" can not use with "data-group-exclusive"'
    callback_error: str = 'unknown callback '
    value_set_error: str = 'set value error '
    invalid_option_error: str = 'invalid option'
    empty_values_error: str = 'no option selected'
    alias_dup_error: str = 'alias duplicated'
    duplication_error: str = 'duplicated option found'


class SmartSelectConfig(BaseModel):
    """All recognised SmartSelect settings.

    Numeric floors and ceilings use 0 for "no rule", as the host control
    attributes do.
    """

    model_config = ConfigDict(
        extra='ignore', populate_by_name=True, arbitrary_types_allowed=True
    )

    multiple: bool = Field(default=True, description="Root allows more than one selection")
    exclusive: bool = Field(default=False, description="Root options are mutually exclusive")
    level_inclusive: bool = Field(
        default=False,
        validation_alias=_alias('level_inclusive', 'levelInclusive', 'dataLevelInclusive'),
        description="Selecting a descendant keeps ancestors everywhere",
    )
    at_least: int = Field(default=0, ge=0, validation_alias=_alias('at_least', 'atLeast'))
    at_most: int = Field(default=0, ge=0, validation_alias=_alias('at_most', 'atMost'))
    must_select: list[str] = Field(
        default_factory=list, validation_alias=_alias('must_select', 'mustSelect')
    )
    default_values: list[str] | None = Field(
        default=None, validation_alias=_alias('default_values', 'defaultValues')
    )
    initial_values: list[str] = Field(
        default_factory=list, validation_alias=_alias('initial_values', 'initialValues')
    )
    aliases: dict[str, list[str]] = Field(default_factory=dict)
    search_by: Literal['label', 'value', 'both'] = Field(
        default='label', validation_alias=_alias('search_by', 'searchBy')
    )
    search_case_insensitive: bool = Field(
        default=True,
        validation_alias=_alias('search_case_insensitive', 'searchCaseInsensitive'),
    )
    default_view: str = Field(
        default='root+selected+view', validation_alias=_alias('default_view', 'defaultView')
    )
    toolbar_view: str = Field(
        default='root+selected', validation_alias=_alias('toolbar_view', 'buttonView')
    )
    keep_in_sync: bool = Field(default=True, validation_alias=_alias('keep_in_sync', 'keepInSync'))
    max_levels: int = Field(default=5, ge=1, validation_alias=_alias('max_levels', 'maxLevels'))
    close_on_select: bool = Field(
        default=False, validation_alias=_alias('close_on_select', 'closeOnSelect')
    )
    close_other: bool = Field(
        default=True, validation_alias=_alias('close_other', 'closeOtherSmartSelect')
    )
    view_after_alias: bool = Field(
        default=True, validation_alias=_alias('view_after_alias', 'viewAfterAlias')
    )
    close_after_alias: bool = Field(
        default=True, validation_alias=_alias('close_after_alias', 'closeAfterAlias')
    )
    show_selected_in_label: bool = Field(
        default=True, validation_alias=_alias('show_selected_in_label', 'showSelectedInLabel')
    )
    show_selected_count: int = Field(
        default=2, ge=0, validation_alias=_alias('show_selected_count', 'showSelectedCount')
    )
    show_selected_separator: str = Field(
        default=',', validation_alias=_alias('show_selected_separator', 'showSelectedSeperator')
    )
    special_value_separator: str = Field(
        default='::', min_length=1,
        validation_alias=_alias('special_value_separator', 'specialValueSeperator'),
    )
    disabled: bool = False
    data: list[dict[str, Any]] = Field(default_factory=list)
    text: MessageText = Field(default_factory=MessageText)

    alert: Callable[[str], Any] | None = None
    confirm: Callable[[str], bool] | None = None
    get_special_label: Callable[..., str] | None = Field(
        default=None, validation_alias=_alias('get_special_label', 'getSpecialLabel')
    )
    get_special_value: Callable[..., str] | None = Field(
        default=None, validation_alias=_alias('get_special_value', 'getSpecialValue')
    )
    set_special_value: Callable[..., Any] | None = Field(
        default=None, validation_alias=_alias('set_special_value', 'setSpecialValue')
    )
    show_selected_callback: Callable[[list[str]], str] | None = Field(
        default=None, validation_alias=_alias('show_selected_callback', 'showSelectedCallback')
    )
    sync_callback: Callable[[list[str]], Any] | None = Field(
        default=None, validation_alias=_alias('sync_callback', 'syncCallback')
    )
    callbacks: dict[str, Any] = Field(default_factory=dict, validation_alias=_alias('callbacks', 'callback'))

    @field_validator('must_select', 'initial_values', mode='before')
    @classmethod
    def _validate_values(cls, value: Any) -> list[str]:
        if value is None:
            return []
        return _coerce_values(value)

    @field_validator('default_values', mode='before')
    @classmethod
    def _validate_default_values(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return _coerce_values(value)

    @field_validator('aliases', mode='before')
    @classmethod
    def _validate_aliases(cls, value: Any) -> dict[str, list[str]]:
        if value is None:
            return {}
        return {str(name): _coerce_values(values) for name, values in value.items()}

    @field_validator('default_view', 'toolbar_view')
    @classmethod
    def _validate_view(cls, value: str) -> str:
        parse_view_spec(value)
        return value

    @model_validator(mode='after')
    def _validate_implied(self) -> SmartSelectConfig:
        return self.normalise()

    def normalise(self) -> SmartSelectConfig:
        """Apply implied settings.

        Default values imply an overall floor of one, a single-select root
        closes the dropdown on every selection.
        """
        if self.default_values is not None and not self.at_least:
            self.at_least = 1
        if not self.multiple:
            self.close_on_select = True
        return self

    @classmethod
    def field_name(cls, key: str) -> str:
        """Map any accepted spelling of a setting to its field name."""
        for name, field in cls.model_fields.items():
            alias = field.validation_alias
            choices = alias.choices if isinstance(alias, AliasChoices) else [alias]
            if key == name or key in choices:
                return name
        return key

    def merged(self, options: dict[str, Any]) -> SmartSelectConfig:
        """Return a new config with ``options`` applied over this one."""
        raw = self.model_dump()
        for key, value in options.items():
            raw[self.field_name(key)] = value
        return type(self).model_validate(raw)
