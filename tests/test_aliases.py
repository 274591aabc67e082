# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for AliasRegistry and the alias commands."""

import pytest

from genro_smartselect import AliasRegistry, DuplicateAliasError, InvalidOptionError, SmartSelect

DATA = [{'value': 'a'}, {'value': 'b'}, {'value': 'c'}]


class TestAliasRegistry:
    """Tests for AliasRegistry."""

    def test_match_ignores_order(self):
        """Test a selection matches an alias regardless of order."""
        aliases = AliasRegistry()
        aliases.add('X', ['a', 'b'])
        assert aliases.match(['b', 'a']) == 'X'
        assert aliases.match(['a']) is None

    def test_match_empty(self):
        """Test an empty selection never matches."""
        aliases = AliasRegistry({'empty': []})
        assert aliases.match([]) is None

    def test_match_first_registered(self):
        """Test the first alias in registration order wins."""
        aliases = AliasRegistry({'one': ['a'], 'two': ['b']})
        assert aliases.match(['b']) == 'two'
        assert list(aliases) == ['one', 'two']

    def test_single_value_wrapped(self):
        """Test a single value becomes a one-item list of str."""
        aliases = AliasRegistry()
        aliases.add('n', 5)
        assert aliases['n'] == ['5']

    def test_same_values_needs_confirm(self):
        """Test a declined duplicate leaves the registry unchanged."""
        asked = []
        aliases = AliasRegistry({'X': ['b', 'a']})

        def decline(message):
            asked.append(message)
            return False

        with pytest.raises(DuplicateAliasError) as exc_info:
            aliases.add('Y', ['a', 'b'], confirm=decline)
        assert exc_info.value.existing == 'X'
        assert len(asked) == 1
        assert aliases.as_dict() == {'X': ['b', 'a']}

    def test_same_values_confirmed(self):
        """Test a confirmed duplicate replaces the prior alias."""
        aliases = AliasRegistry({'X': ['b', 'a']})
        aliases.add('Y', ['a', 'b'], confirm=lambda message: True)
        assert aliases.as_dict() == {'Y': ['a', 'b']}

    def test_same_name_needs_confirm(self):
        """Test redefining a name asks once."""
        asked = []
        aliases = AliasRegistry({'X': ['a']})
        aliases.add('X', ['c'], confirm=lambda message: asked.append(message) or True)
        assert len(asked) == 1
        assert aliases['X'] == ['c']

    def test_question_prefix(self):
        """Test the message argument prefixes the confirm question."""
        asked = []
        aliases = AliasRegistry({'X': ['a']})
        aliases.add('X', ['c'], confirm=lambda message: asked.append(message) or True, message='dup')
        assert asked == ["dup: X ['a'], replace it?"]

    def test_no_confirm_declines(self):
        """Test no confirm handler declines."""
        aliases = AliasRegistry({'X': ['a']})
        with pytest.raises(DuplicateAliasError):
            aliases.add('X', ['b'])

    def test_multiset_equality(self):
        """Test repeated values count."""
        aliases = AliasRegistry({'X': ['a', 'a', 'b']})
        assert aliases.match(['a', 'b']) is None
        assert aliases.match(['b', 'a', 'a']) == 'X'

    def test_remove(self):
        """Test removal by name or list, unknown names ignored."""
        aliases = AliasRegistry({'X': ['a'], 'Y': ['b'], 'Z': ['c']})
        assert aliases.remove('X') == ['X']
        assert aliases.remove(['Y', 'nope']) == ['Y']
        assert list(aliases) == ['Z']


class TestAliasCommands:
    """Tests for the SmartSelect alias commands."""

    def test_add_alias_relabels(self):
        """Test a matching alias becomes the label."""
        select = SmartSelect(DATA)
        select.select_options(['a', 'b'])
        assert select.label == 'a,b'
        select.add_alias('X', ['b', 'a'])
        assert select.label == 'X'

    def test_alias_change_notified(self):
        """Test alias changes are notified."""
        heard = []
        select = SmartSelect(DATA)
        select.subscribe('log', lambda name, target, **kw: heard.append((name, target)), events=['aliasChange'])
        select.add_alias('X', ['a'])
        select.remove_alias('X')
        assert heard == [('aliasChange', 'X'), ('aliasChange', 'X')]

    def test_add_alias_dict(self):
        """Test several aliases at once."""
        select = SmartSelect(DATA)
        select.add_alias({'X': ['a'], 'Y': ['b', 'c']})
        assert select.aliases.as_dict() == {'X': ['a'], 'Y': ['b', 'c']}

    def test_declined_duplicate(self):
        """Test the default confirm declines duplicates."""
        select = SmartSelect(DATA, aliases={'X': ['b', 'a']})
        with pytest.raises(DuplicateAliasError):
            select.add_alias('Y', ['a', 'b'])
        assert 'Y' not in select.aliases

    def test_confirmed_duplicate(self):
        """Test a confirm handler accepting replacements."""
        select = SmartSelect(DATA, aliases={'X': ['b', 'a']}, confirm=lambda message: True)
        select.add_alias('Y', ['a', 'b'])
        assert list(select.aliases) == ['Y']

    def test_duplicate_question_uses_message_text(self):
        """Test the configured alias_dup_error prefixes the confirm question."""
        asked = []
        select = SmartSelect(
            DATA,
            aliases={'X': ['a']},
            text={'alias_dup_error': 'already there'},
            confirm=lambda message: asked.append(message) or True,
        )
        select.add_alias('X', ['b'])
        assert asked == ["already there: X ['a'], replace it?"]
        assert select.aliases['X'] == ['b']

    def test_remove_alias_restores_label(self):
        """Test removing the matching alias restores the plain label."""
        select = SmartSelect(DATA, aliases={'X': ['a']}, initial_values=['a'])
        assert select.label == 'X'
        select.remove_alias('X')
        assert select.label == 'a'

    def test_select_alias(self):
        """Test selecting an alias replaces the selection."""
        select = SmartSelect(DATA, aliases={'X': ['a', 'c']}, initial_values=['b'])
        select.open_dropdown()
        select.select_alias('X')
        assert select.get_values() == ['a', 'c']
        assert select.is_open is False

    def test_select_unknown_alias(self):
        """Test an unknown alias is an invalid option."""
        select = SmartSelect(DATA)
        with pytest.raises(InvalidOptionError):
            select.select_alias('nope')

    def test_save_alias(self):
        """Test saving the current selection as an alias."""
        select = SmartSelect(DATA, initial_values=['b', 'c'])
        assert select.save_alias('mine') is True
        assert select.aliases['mine'] == ['b', 'c']
        assert select.label == 'mine'

    def test_save_alias_empty(self):
        """Test saving an empty selection alerts."""
        messages = []
        select = SmartSelect(DATA, alert=messages.append)
        assert select.save_alias('mine') is False
        assert messages == ['no option selected']
        assert 'mine' not in select.aliases
