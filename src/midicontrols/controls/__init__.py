"""Control trees: declaration normalizing, building and the tree-wide operations."""

from .group import ControlGroup, build_children, build_control
from .leaf import Control, RangeControl, ToggleControl, clamp, wrap
from .loop import RangeLoopControl
from .node import BuildContext, TreeNode, uniform_name
from .normalizer import DEFAULT_STEP_DIVISIONS, normalize, normalize_entry
from .root import Controls

__all__ = [
    "DEFAULT_STEP_DIVISIONS",
    "BuildContext",
    "Control",
    "ControlGroup",
    "Controls",
    "RangeControl",
    "RangeLoopControl",
    "ToggleControl",
    "TreeNode",
    "build_children",
    "build_control",
    "clamp",
    "normalize",
    "normalize_entry",
    "uniform_name",
    "wrap",
]
