"""In-memory state of the diagram currently shown in the browser."""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from n8n_flowview.converter import convert_workflow
from n8n_flowview.exceptions import WorkflowLoadError
from n8n_flowview.models import DisplayEdge, DisplayNode, WorkflowDocument, parse_workflow

logger = logging.getLogger(__name__)

# User-facing messages, localized
PROMPT_LOAD = "Tải file JSON"
PROMPT_SELECT = "Chọn file JSON"
ERROR_INVALID_JSON = "Lỗi: File JSON không hợp lệ"
NO_FILE_SELECTED = "No file selected"


class FlowSession:
    """Nodes, edges and status of the loaded workflow.

    A successful load replaces the graph wholesale. A failed load only
    changes the status message, so the last good graph stays on screen.
    Edits coming back from the graph view (moves, new or removed edges)
    change the displayed graph and never the loaded WorkflowDocument.
    """

    def __init__(self):
        self.nodes: List[DisplayNode] = []
        self.edges: List[DisplayEdge] = []
        self.workflow: Optional[WorkflowDocument] = None
        self.filename: str = NO_FILE_SELECTED
        self.error: Optional[str] = PROMPT_LOAD
        self._lock = threading.Lock()

    @property
    def is_prompt(self) -> bool:
        """Whether the current message is the neutral load prompt."""
        return self.error is not None and self.error.startswith("Tải")

    def select_file(self, filename: Optional[str], content: Union[str, bytes, None] = None) -> bool:
        """Handle a file picked by the user.

        Args:
            filename: Name of the chosen file, None when nothing was chosen
            content: File content

        Returns:
            True if a graph was loaded
        """
        if filename is None:
            with self._lock:
                self.error = PROMPT_SELECT
            return False
        return self.load(filename, content or "")

    def load(self, filename: str, content: Union[str, bytes]) -> bool:
        """Parse workflow content and replace the displayed graph.

        Args:
            filename: Name shown in the status line
            content: Raw JSON content

        Returns:
            True on success, False if the content was rejected
        """
        with self._lock:
            self.filename = filename
            try:
                workflow = parse_workflow(content)
                graph = convert_workflow(workflow)
            except WorkflowLoadError as e:
                logger.error(f"JSON parsing error in {filename}: {e} ({e.details})")
                self.error = ERROR_INVALID_JSON
                return False

            self.workflow = workflow
            self.nodes = graph.nodes
            self.edges = graph.edges
            self.error = None

        logger.info(f"Loaded {filename}: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
        return True

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> Optional[DisplayEdge]:
        """Append an edge drawn by hand in the graph view."""
        if not source or not target:
            return None
        edge = DisplayEdge(
            id=f"e-{source}-{target}",
            source=source,
            target=target,
            sourceHandle=source_handle,
            targetHandle=target_handle,
        )
        with self._lock:
            self.edges = [*self.edges, edge]
        return edge

    def move_node(self, node_id: str, x: float, y: float) -> bool:
        with self._lock:
            for node in self.nodes:
                if node.id == node_id:
                    node.position = {"x": x, "y": y}
                    return True
        return False

    def remove_edge(self, edge_id: str) -> bool:
        with self._lock:
            remaining = [edge for edge in self.edges if edge.id != edge_id]
            removed = len(remaining) != len(self.edges)
            self.edges = remaining
        return removed

    def status_text(self) -> str:
        if self.error:
            return self.error
        return f"Loaded: {self.filename} ({len(self.nodes)} nodes, {len(self.edges)} edges)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "error": self.error,
            "isPrompt": self.is_prompt,
            "status": self.status_text(),
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
