"""Workflow document models and the display shapes consumed by the graph view."""

import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from n8n_flowview.exceptions import WorkflowLoadError

REQUIRED_KEYS = ("nodes", "connections")


class ConnectionTarget(BaseModel):
    """One link from an output slot to another node's input slot."""

    node: Optional[str] = None
    index: int = 0

    @field_validator("node", mode="before")
    @classmethod
    def _name_or_none(cls, value: Any) -> Any:
        # A non-string name can never match a node; it resolves as missing
        return value if isinstance(value, str) else None

    @field_validator("index", mode="before")
    @classmethod
    def _default_index(cls, value: Any) -> Any:
        # Exports sometimes write "index": null
        return 0 if value is None else value


class ConnectionGroup(BaseModel):
    """Outgoing connections of one node, keyed by connection kind."""

    model_config = ConfigDict(extra="ignore")

    main: List[List[ConnectionTarget]] = Field(default_factory=list)

    @field_validator("main", mode="before")
    @classmethod
    def _keep_list_slots(cls, value: Any) -> Any:
        """Drop anything that is not a list of slots, and any slot that is not a list."""
        if not isinstance(value, list):
            return []
        return [
            [target if isinstance(target, dict) else {} for target in slot]
            if isinstance(slot, list) else []
            for slot in value
        ]


class WorkflowNode(BaseModel):
    """Model for a single workflow step."""

    id: str
    type: str
    position: List[Union[int, float]] = Field(min_length=2, max_length=2)
    name: str
    parameters: Any = None


class WorkflowDocument(BaseModel):
    """Model for an exported workflow."""

    model_config = ConfigDict(extra="ignore")

    nodes: List[WorkflowNode]
    connections: Dict[str, ConnectionGroup]


@dataclass
class DisplayNode:
    """Node shape handed to the browser graph library."""

    id: str
    position: Dict[str, Union[int, float]]
    data: Dict[str, Any]
    type: str = "custom"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DisplayEdge:
    """Directed, handle-addressed edge handed to the browser graph library."""

    id: str
    source: str
    target: str
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None
    type: str = "smoothstep"
    animated: bool = True
    style: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        if self.style is None:
            result.pop("style")
        return result


@dataclass
class UnresolvedReference:
    """A connection whose source or target name matched no node."""

    role: str
    name: Optional[str]
    source: str
    output_index: Optional[int] = None

    def describe(self) -> str:
        if self.role == "source":
            return f'Source node with name "{self.name}" not found in nodes.'
        return (
            f'Target node with name "{self.name}" not found in nodes '
            f'(from "{self.source}", output {self.output_index}).'
        )


@dataclass
class DisplayGraph:
    """Result of converting a workflow document."""

    nodes: List[DisplayNode] = field(default_factory=list)
    edges: List[DisplayEdge] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)


def _format_validation_error(error: ValidationError) -> str:
    """Format Pydantic validation error for display.

    Args:
        error: Pydantic ValidationError

    Returns:
        Formatted error message
    """
    errors = error.errors()
    if len(errors) == 1:
        err = errors[0]
        location = " -> ".join(str(loc) for loc in err["loc"])
        return f"{location}: {err['msg']}"
    else:
        return f"{len(errors)} validation errors"


def parse_workflow(content: Union[str, bytes]) -> WorkflowDocument:
    """Parse exported workflow JSON into a WorkflowDocument.

    Only the presence of ``nodes`` and ``connections`` is checked up front;
    the typed parse that follows rejects content the converter could not
    build a graph from.

    Args:
        content: Raw file content

    Returns:
        Parsed WorkflowDocument

    Raises:
        WorkflowLoadError: If the content is not JSON or lacks required keys
    """
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode("utf-8-sig", errors="replace")
    elif not isinstance(content, str):
        raise WorkflowLoadError(
            "Invalid JSON",
            details=f"Expected JSON text, got {type(content).__name__}",
        )

    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise WorkflowLoadError("Invalid JSON", details=str(e)) from e

    if not isinstance(data, dict):
        raise WorkflowLoadError("Invalid workflow", details="Workflow data must be a JSON object")

    missing = [key for key in REQUIRED_KEYS if data.get(key) is None]
    if missing:
        raise WorkflowLoadError(
            "Invalid workflow",
            details=f"Missing required field(s): {', '.join(missing)}",
        )

    try:
        return WorkflowDocument.model_validate(data)
    except ValidationError as e:
        raise WorkflowLoadError(
            "Invalid workflow", details=_format_validation_error(e)
        ) from e
