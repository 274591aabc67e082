# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for configuration and descriptor models."""

import pytest
from pydantic import ValidationError

from genro_smartselect import (
    ConfigurationError,
    GroupDescriptor,
    OptionDescriptor,
    SmartSelect,
    SmartSelectConfig,
)
from genro_smartselect.config import parse_tags


class TestParseTags:
    """Tests for tag attribute normalisation."""

    def test_none_and_false(self):
        """Test missing tags stay None."""
        assert parse_tags(None) is None
        assert parse_tags(False) is None

    def test_empty_tag(self):
        """Test an empty attribute gives an empty set."""
        assert parse_tags('') == frozenset()
        assert parse_tags(True) == frozenset()

    def test_separators(self):
        """Test spaces and commas both separate tags."""
        assert parse_tags('a b,c') == frozenset({'a', 'b', 'c'})
        assert parse_tags(['x', 'y']) == frozenset({'x', 'y'})


class TestDescriptors:
    """Tests for OptionDescriptor and GroupDescriptor."""

    def test_value_stringified(self):
        """Test numeric values are coerced to str."""
        desc = OptionDescriptor.model_validate({'value': 42})
        assert desc.value == '42'

    def test_empty_value_rejected(self):
        """Test an empty value is invalid."""
        with pytest.raises(ValidationError):
            OptionDescriptor.model_validate({'value': ''})

    def test_view_flag(self):
        """Test a bare view flag means one level."""
        assert OptionDescriptor.model_validate({'value': 'x', 'view': True}).view_depth == 1
        assert OptionDescriptor.model_validate({'value': 'x', 'view': ''}).view_depth == 1
        assert OptionDescriptor.model_validate({'value': 'x'}).view_depth is None

    def test_group_at_least_flag(self):
        """Test an empty at_least attribute means one."""
        assert GroupDescriptor.model_validate({'group': True, 'atLeast': ''}).at_least == 1
        assert GroupDescriptor.model_validate({'group': True, 'atLeast': True}).at_least == 1

    def test_negative_bounds_rejected(self):
        """Test bounds cannot be negative."""
        with pytest.raises(ValidationError):
            GroupDescriptor.model_validate({'group': True, 'at_most': -1})


class TestSmartSelectConfig:
    """Tests for SmartSelectConfig."""

    def test_defaults(self):
        """Test default settings."""
        config = SmartSelectConfig()
        assert config.multiple is True
        assert config.at_least == 0
        assert config.default_view == 'root+selected+view'
        assert config.search_by == 'label'
        assert config.text.select_label == 'Smart Select'

    def test_camel_case(self):
        """Test camelCase keys are accepted."""
        config = SmartSelectConfig.model_validate(
            {'atLeast': 2, 'searchBy': 'both', 'mustSelect': 'x', 'keepInSync': False}
        )
        assert config.at_least == 2
        assert config.search_by == 'both'
        assert config.must_select == ['x']
        assert config.keep_in_sync is False

    def test_unknown_keys_ignored(self):
        """Test unknown settings are ignored."""
        config = SmartSelectConfig.model_validate({'optimized': True})
        assert not hasattr(config, 'optimized')

    def test_default_values_imply_at_least(self):
        """Test default values raise the floor to one."""
        config = SmartSelectConfig(default_values=['a'])
        assert config.at_least == 1
        assert SmartSelectConfig(default_values=['a'], at_least=3).at_least == 3

    def test_single_select_closes_on_select(self):
        """Test a single-select root closes on select."""
        assert SmartSelectConfig(multiple=False).close_on_select is True
        assert SmartSelectConfig().close_on_select is False

    def test_values_coerced(self):
        """Test value lists are coerced to lists of str."""
        config = SmartSelectConfig(initial_values=[1, 2], aliases={'x': 'a'})
        assert config.initial_values == ['1', '2']
        assert config.aliases == {'x': ['a']}

    def test_bad_view(self):
        """Test unknown view modes are rejected."""
        with pytest.raises(ValidationError, match="unknown view mode"):
            SmartSelectConfig(default_view='root+everything')

    def test_bad_search_by(self):
        """Test search_by choices are enforced."""
        with pytest.raises(ValidationError):
            SmartSelectConfig(search_by='text')

    def test_message_table(self):
        """Test the message table can be overridden."""
        config = SmartSelectConfig(text={'selectLabel': 'Pick', 'disabled': 'Off'})
        assert config.text.select_label == 'Pick'
        assert config.text.disabled == 'Off'


class TestSmartSelectOptions:
    """Tests for configuration passed to SmartSelect."""

    def test_keywords_over_config(self):
        """Test keyword options override a config instance."""
        config = SmartSelectConfig(at_most=2)
        select = SmartSelect([{'value': 'a'}], config=config, atMost=3)
        assert select.config.at_most == 3
        assert config.at_most == 2

    def test_config_not_shared(self):
        """Test a config instance is copied per select."""
        config = SmartSelectConfig(data=[{'value': 'a'}], initial_values=['a'])
        first = SmartSelect(config=config)
        second = SmartSelect(config=config)
        assert first.get_values() == ['a']
        assert second.get_values() == ['a']

    def test_invalid_option_raises(self):
        """Test invalid settings surface as ConfigurationError."""
        with pytest.raises(ConfigurationError, match="bad argument"):
            SmartSelect([{'value': 'a'}], at_least=-1)

    def test_unknown_callback(self):
        """Test an unknown callback event alerts and raises."""
        messages = []
        with pytest.raises(ConfigurationError):
            SmartSelect([{'value': 'a'}], alert=messages.append, callbacks={'onNothing': print})
        assert messages == ['unknown callback onNothing']
