"""n8n-flowview - View n8n workflow JSON files as interactive diagrams.

This package converts exported n8n workflows into the node/edge model of a
browser graph library and serves them from a small Flask app, with a CLI
for inspecting, scanning and snapshotting workflows.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from n8n_flowview.classify import NodeCategory, classify_node_type
from n8n_flowview.converter import convert_workflow
from n8n_flowview.exceptions import FlowViewError, RenderError, WorkflowLoadError
from n8n_flowview.models import (
    DisplayEdge,
    DisplayGraph,
    DisplayNode,
    WorkflowDocument,
    WorkflowNode,
    parse_workflow,
)
from n8n_flowview.scanner import WorkflowScanner, WorkflowFile, scan_workflows
from n8n_flowview.server import WorkflowServer, create_server
from n8n_flowview.session import FlowSession
from n8n_flowview.summary import NodeSummary, build_summary, render_summary_html

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Conversion
    "NodeCategory",
    "classify_node_type",
    "convert_workflow",
    "parse_workflow",
    "WorkflowDocument",
    "WorkflowNode",
    "DisplayNode",
    "DisplayEdge",
    "DisplayGraph",
    # Errors
    "FlowViewError",
    "WorkflowLoadError",
    "RenderError",
    # Summary cards
    "NodeSummary",
    "build_summary",
    "render_summary_html",
    # Session and server
    "FlowSession",
    "WorkflowServer",
    "create_server",
    # Scanner
    "WorkflowScanner",
    "WorkflowFile",
    "scan_workflows",
]
