# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree package - the hierarchy of groups and options.

The package is organized into:
- core: OptionTree with explicit parent/child links and value lookup
- loading: Building a tree from a flat list of descriptor rows

Example:
    >>> from genro_smartselect.tree import OptionTree, load_from_list
    >>> tree = OptionTree()
    >>> load_from_list(tree, [{'value': 'a'}, {'value': 'b', 'level': 2}])
    >>> tree.find_by_value('b').parent.value
    'a'
"""

from .core import OptionTree
from .loading import load_from_list

__all__ = ["OptionTree", "load_from_list"]
