# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for ViewProjector and view specifications."""

import pytest

from genro_smartselect import ConfigurationError, OptionTree, ViewProjector, load_from_list, parse_view_spec

DATA = [
    {'value': 'a', 'label': 'Animals'},
    {'value': 'a1', 'label': 'Dogs', 'level': 2},
    {'value': 'a1x', 'label': 'Beagle', 'level': 3},
    {'value': 'b', 'label': 'Birds'},
    {'group': True, 'label': 'Plants'},
    {'value': 'p', 'label': 'Trees'},
    {'value': 'p1', 'label': 'Oak', 'level': 2},
    {'value': 'p1x', 'label': 'Red oak', 'level': 3},
    {'value': 'p1y', 'label': 'Dwarf oak', 'level': 4},
]


def make():
    tree = OptionTree()
    load_from_list(tree, DATA)
    return tree, ViewProjector(tree)


def ids(tree, *values):
    return {tree.find_by_value(v).id for v in values}


class TestParseViewSpec:
    """Tests for parse_view_spec."""

    def test_union(self):
        """Test modes are split on '+'."""
        assert parse_view_spec('root+selected+view') == frozenset({'root', 'selected', 'view'})

    def test_iterable(self):
        """Test an iterable of modes is accepted."""
        assert parse_view_spec(['level1']) == frozenset({'level1'})

    def test_unknown_mode(self):
        """Test unknown modes are rejected."""
        with pytest.raises(ConfigurationError, match="unknown view mode"):
            parse_view_spec('root+all')

    def test_empty(self):
        """Test an empty specification is rejected."""
        with pytest.raises(ConfigurationError):
            parse_view_spec('')


class TestComputeView:
    """Tests for the projection modes."""

    def test_groups_always_visible(self):
        """Test groups are visible in every mode."""
        tree, view = make()
        group_id = tree.get_group('Plants').id
        assert group_id in view.compute_view('root')
        assert group_id in view.compute_view('selected')

    def test_root(self):
        """Test root shows level-1 options outside groups."""
        tree, view = make()
        group_id = tree.get_group('Plants').id
        assert view.compute_view('root') == ids(tree, 'a', 'b') | {group_id}

    def test_level1_and_level2(self):
        """Test level1/level2 show options up to that level in every branch."""
        tree, view = make()
        group_id = tree.get_group('Plants').id
        assert view.compute_view('level1') == ids(tree, 'a', 'b', 'p') | {group_id}
        assert view.compute_view('level2') == ids(tree, 'a', 'a1', 'b', 'p', 'p1') | {group_id}

    def test_expand(self):
        """Test expand shows every node."""
        tree, view = make()
        assert view.compute_view('expand+root') == {node.id for node in tree}

    def test_selected(self):
        """Test selected shows the ancestor chain of selected options."""
        tree, view = make()
        tree.find_by_value('p1x').selected = True
        visible = view.compute_view('selected')
        assert ids(tree, 'p', 'p1', 'p1x') <= visible
        assert tree.find_by_value('a').id not in visible

    def test_selected_skips_disabled(self):
        """Test disabled selections are not revealed."""
        tree, view = make()
        a1x = tree.find_by_value('a1x')
        a1x.selected = True
        a1x.disabled = True
        assert a1x.id not in view.compute_view('selected')

    def test_view_depth(self):
        """Test view reveals ancestors and a bounded subtree."""
        tree, view = make()
        tree.find_by_value('p').view_depth = 2
        visible = view.compute_view('view')
        assert ids(tree, 'p', 'p1', 'p1x') <= visible
        assert tree.find_by_value('p1y').id not in visible

    def test_view_depth_capped(self):
        """Test view depth never reveals more than three levels."""
        tree = OptionTree()
        load_from_list(tree, [
            {'value': 'l1', 'view': 9},
            {'value': 'l2', 'level': 2},
            {'value': 'l3', 'level': 3},
            {'value': 'l4', 'level': 4},
            {'value': 'l5', 'level': 5},
        ])
        visible = ViewProjector(tree).compute_view('view')
        assert ids(tree, 'l1', 'l2', 'l3', 'l4') <= visible
        assert tree.find_by_value('l5').id not in visible

    def test_group_view_depth(self):
        """Test a group view depth reveals its options down to that level."""
        tree, view = make()
        tree.get_group('Plants').view_depth = 1
        visible = view.compute_view('view')
        assert tree.find_by_value('p').id in visible
        assert tree.find_by_value('p1').id not in visible

    def test_compute_does_not_store(self):
        """Test compute_view leaves the current view alone."""
        tree, view = make()
        view.compute_view('expand')
        assert view.visible == set()


class TestSearch:
    """Tests for search."""

    def test_reveals_match_and_ancestors(self):
        """Test only the match, its ancestors and its group stay visible."""
        tree, view = make()
        view.expand_all()
        visible = view.search('red')
        assert visible == ids(tree, 'p', 'p1', 'p1x') | {tree.get_group('Plants').id}

    def test_independent_of_prior_state(self):
        """Test search results do not depend on expand/collapse state."""
        tree, view = make()
        view.collapse_all()
        collapsed = view.search('beagle')
        view.expand_all()
        assert view.search('beagle') == collapsed == ids(tree, 'a', 'a1', 'a1x')

    def test_case_sensitive(self):
        """Test case sensitive search."""
        tree, view = make()
        assert view.search('beagle', case_insensitive=False) == set()

    def test_search_by_value(self):
        """Test search on values."""
        tree, view = make()
        assert view.search('a1x', search_by='value') == ids(tree, 'a', 'a1', 'a1x')
        assert view.search('a1x', search_by='label') == set()

    def test_search_by_both(self):
        """Test search on 'label value'."""
        tree, view = make()
        assert view.search('birds b', search_by='both') == ids(tree, 'b')

    def test_blank_expands(self):
        """Test a blank text shows everything."""
        tree, view = make()
        assert view.search('   ') == {node.id for node in tree}

    def test_disabled_not_matched(self):
        """Test disabled options are never search results."""
        tree, view = make()
        tree.find_by_value('b').disabled = True
        assert view.search('birds') == set()


class TestFolders:
    """Tests for folder state."""

    def test_toggle_folder(self):
        """Test opening shows children, closing hides the subtree."""
        tree, view = make()
        view.apply('root')
        a = tree.find_by_value('a')
        assert view.toggle_folder(a) is True
        assert tree.find_by_value('a1').id in view.visible
        view.toggle_folder(tree.find_by_value('a1'))
        assert view.toggle_folder(a) is False
        assert not ids(tree, 'a1', 'a1x') & view.visible

    def test_refresh_folders(self):
        """Test folders open when their children are visible."""
        tree, view = make()
        assert view.apply('root') is view.visible
        assert tree.find_by_value('a').open is False
        assert view.refresh_folders() is True
        view.expand_all()
        assert tree.find_by_value('a').open is True
        assert view.refresh_folders() is False

    def test_collapse_without_groups(self):
        """Test collapse_all can hide groups too."""
        tree, view = make()
        assert view.collapse_all(show_groups=False) == set()
        assert view.collapse_all() == {tree.get_group('Plants').id}
