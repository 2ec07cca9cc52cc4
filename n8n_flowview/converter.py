"""Translate a workflow document into the node/edge model of the graph view."""

import logging
from typing import Any, Dict, List, Optional

from n8n_flowview.classify import NodeCategory, classify_node_type
from n8n_flowview.models import (
    DisplayEdge,
    DisplayGraph,
    DisplayNode,
    UnresolvedReference,
    WorkflowDocument,
    WorkflowNode,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
DEFAULT_COMBINATOR = "and"
EDGE_STYLE = {"stroke": "#555", "strokeWidth": 2}


def _is_unset(value: Any) -> bool:
    """Empty string, zero, False and None count as unset; containers never do."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _or_default(value: Any, default: Any) -> Any:
    return default if _is_unset(value) else value


def _dig(mapping: Optional[Dict[str, Any]], *keys: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    current: Any = mapping
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def build_node_payload(node: WorkflowNode, category: NodeCategory) -> Dict[str, Any]:
    """Extract the category-specific summary fields of a node.

    Args:
        node: Source workflow node
        category: Classification of ``node.type``

    Returns:
        Exactly one payload shape: conditions, spreadsheet, email or parameters
    """
    params = node.parameters
    if category is NodeCategory.CONDITIONAL:
        return {
            "conditions": _or_default(_dig(params, "conditions", "conditions"), []),
            "combinator": _or_default(_dig(params, "conditions", "combinator"), DEFAULT_COMBINATOR),
        }
    if category is NodeCategory.SPREADSHEET:
        return {
            "documentId": _or_default(_dig(params, "documentId", "cachedResultName"), NOT_AVAILABLE),
            "sheetName": _or_default(_dig(params, "sheetName", "cachedResultName"), NOT_AVAILABLE),
        }
    if category is NodeCategory.EMAIL:
        return {"subject": _or_default(_dig(params, "subject"), NOT_AVAILABLE)}
    return {"parameters": _or_default(params, {})}


def convert_node(node: WorkflowNode) -> DisplayNode:
    """Build the display node for one workflow node."""
    data: Dict[str, Any] = {"label": node.name, "nodeType": node.type}
    data.update(build_node_payload(node, classify_node_type(node.type)))
    return DisplayNode(
        id=node.id,
        position={"x": node.position[0], "y": node.position[1]},
        data=data,
    )


def edge_id(source_id: str, target_id: str, output_index: int, input_index: int = 0) -> str:
    return f"e-{source_id}-{target_id}-{output_index}-{input_index}"


def convert_workflow(workflow: WorkflowDocument) -> DisplayGraph:
    """Convert a workflow document into display nodes and edges.

    Nodes keep input order. Connections naming an unknown source or target
    are skipped with a warning; the rest of the graph is still produced.

    Args:
        workflow: Parsed workflow document

    Returns:
        DisplayGraph with nodes, edges and any unresolved references
    """
    graph = DisplayGraph()

    name_to_id: Dict[str, str] = {}
    for node in workflow.nodes:
        name_to_id[node.name] = node.id

    graph.nodes = [convert_node(node) for node in workflow.nodes]

    edges: List[DisplayEdge] = []
    for source_name, group in workflow.connections.items():
        source_id = name_to_id.get(source_name)
        if not source_id:
            reference = UnresolvedReference(role="source", name=source_name, source=source_name)
            logger.warning(reference.describe())
            graph.unresolved.append(reference)
            continue

        for output_index, slot in enumerate(group.main):
            for target in slot:
                target_id = name_to_id.get(target.node)
                if not target_id:
                    reference = UnresolvedReference(
                        role="target",
                        name=target.node,
                        source=source_name,
                        output_index=output_index,
                    )
                    logger.warning(reference.describe())
                    graph.unresolved.append(reference)
                    continue

                input_index = target.index or 0
                edges.append(DisplayEdge(
                    id=edge_id(source_id, target_id, output_index, input_index),
                    source=source_id,
                    target=target_id,
                    sourceHandle=f"output-{output_index}",
                    targetHandle=f"input-{input_index}",
                    style=dict(EDGE_STYLE),
                ))

    graph.edges = edges
    logger.debug(
        f"Converted workflow: {len(graph.nodes)} nodes, {len(graph.edges)} edges, "
        f"{len(graph.unresolved)} unresolved references"
    )
    return graph
