# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-SmartSelect - Selection engine for hierarchical select widgets.

Groups and nested options, selection constraints (floors, ceilings,
exclusivity, forced options), aliases and expand/collapse views, with a
vetoable event pipeline. Rendering is left to the presentation layer.
"""

__version__ = "0.1.0"

from .aliases import AliasRegistry
from .config import GroupDescriptor, MessageText, OptionDescriptor, SmartSelectConfig
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
from .registry import DropdownRegistry
from .smartselect import Result, SmartSelect
from .tree import OptionTree, load_from_list
from .view import ViewProjector, parse_view_spec

__all__ = [
    # Core classes
    "SmartSelect",
    "Result",
    "OptionTree",
    "load_from_list",
    # Nodes
    "BaseNode",
    "GroupNode",
    "OptionNode",
    # Engine parts
    "AliasRegistry",
    "ConstraintEngine",
    "DropdownRegistry",
    "Event",
    "EventPipeline",
    "ViewProjector",
    "parse_view_spec",
    # Configuration
    "SmartSelectConfig",
    "OptionDescriptor",
    "GroupDescriptor",
    "MessageText",
    # Exceptions
    "SmartSelectError",
    "ConfigurationError",
    "DuplicateValueError",
    "DuplicateAliasError",
    "InvalidOptionError",
]
