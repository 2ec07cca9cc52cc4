"""Per-node summary cards shown inside the graph view."""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from n8n_flowview.classify import classify_node_type

PARAMETERS_PREVIEW_LENGTH = 50

_TEMPLATE_BRACES = re.compile(r"\{\{ | \}\}")

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class ConditionLine:
    left: str
    operation: str
    right: str

    def __str__(self) -> str:
        return f"{self.left} {self.operation} {self.right}"


@dataclass
class NodeSummary:
    """Rendered content of a node card.

    ``kind`` is one of ``conditions``, ``spreadsheet``, ``email``,
    ``parameters`` or ``None`` when the payload has nothing to show.
    """

    label: str
    node_type: str
    background: str
    kind: Optional[str] = None
    combinator: Optional[str] = None
    conditions: List[ConditionLine] = field(default_factory=list)
    fields: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def footer(self) -> str:
        return f"Type: {self.node_type}"

    def lines(self) -> List[str]:
        """Plain-text body of the card, without label and footer."""
        if self.kind == "conditions":
            return [f"Conditions ({self.combinator}):"] + [str(cond) for cond in self.conditions]
        return [f"{name}: {value}" for name, value in self.fields]


def _is_set(value: Any) -> bool:
    # Mappings and lists count as set even when empty
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _display_value(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


def strip_template_braces(value: Any) -> str:
    """Drop ``{{ `` and `` }}`` from an expression, e.g. ``{{ $json.x }}``."""
    return _TEMPLATE_BRACES.sub("", _display_value(value))


def format_condition(condition: Dict[str, Any]) -> ConditionLine:
    operator = condition.get("operator") or {}
    operation = operator.get("operation") if isinstance(operator, dict) else None
    return ConditionLine(
        left=strip_template_braces(condition.get("leftValue")),
        operation=_display_value(operation).upper(),
        right=_display_value(condition.get("rightValue")),
    )


def preview_parameters(parameters: Any) -> str:
    """Compact JSON preview of a parameter mapping, truncated with an ellipsis."""
    if isinstance(parameters, (dict, list)):
        text = json.dumps(parameters, separators=(",", ":"), ensure_ascii=False)
        return text[:PARAMETERS_PREVIEW_LENGTH] + "..."
    return _display_value(parameters)


def build_summary(data: Dict[str, Any]) -> NodeSummary:
    """Build the card content for a display node payload.

    The first matching rule wins: non-empty conditions, then a spreadsheet
    document, then an email subject, then the raw parameters.

    Args:
        data: DisplayNode data payload

    Returns:
        NodeSummary for the card
    """
    node_type = data.get("nodeType") or ""
    summary = NodeSummary(
        label=_display_value(data.get("label")),
        node_type=node_type,
        background=classify_node_type(node_type).color,
    )

    conditions = data.get("conditions")
    if conditions:
        summary.kind = "conditions"
        summary.combinator = _display_value(data.get("combinator")).upper()
        summary.conditions = [
            format_condition(cond if isinstance(cond, dict) else {})
            for cond in conditions
        ]
    elif _is_set(data.get("documentId")):
        summary.kind = "spreadsheet"
        summary.fields.append(("Sheet", _display_value(data["documentId"])))
        if _is_set(data.get("sheetName")):
            summary.fields.append(("Tab", _display_value(data["sheetName"])))
    elif _is_set(data.get("subject")):
        summary.kind = "email"
        summary.fields.append(("Email Subject", _display_value(data["subject"])))
    elif _is_set(data.get("parameters")):
        summary.kind = "parameters"
        summary.fields.append(("Parameters", preview_parameters(data["parameters"])))

    return summary


def render_summary_html(data: Dict[str, Any]) -> str:
    """Render the node card partial for a display node payload."""
    template = _env.get_template("node_card.html")
    return template.render(summary=build_summary(data))
