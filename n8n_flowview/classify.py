"""Node type classification shared by conversion and summary rendering."""

from enum import Enum
from typing import Optional


class NodeCategory(Enum):
    """Display category of a workflow node, with its card colour."""

    CONDITIONAL = ("conditional", "#e6f3ff")
    SPREADSHEET = ("spreadsheet", "#e6ffe6")
    EMAIL = ("email", "#ffe6e6")
    GENERIC = ("generic", "#fff")

    def __init__(self, label: str, color: str):
        self.label = label
        self.color = color


# Checked in order, first substring match wins
_TYPE_MARKERS = (
    ("if", NodeCategory.CONDITIONAL),
    ("googleSheets", NodeCategory.SPREADSHEET),
    ("gmail", NodeCategory.EMAIL),
)


def classify_node_type(node_type: Optional[str]) -> NodeCategory:
    """Classify a node by substring match on its namespaced type.

    Args:
        node_type: Node type string, e.g. ``n8n-nodes-base.gmail``

    Returns:
        The matching NodeCategory, GENERIC when nothing matches
    """
    node_type = node_type or ""
    for marker, category in _TYPE_MARKERS:
        if marker in node_type:
            return category
    return NodeCategory.GENERIC
