"""Workflow scanner module for checking folders of exported workflow JSON files."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from n8n_flowview.classify import classify_node_type
from n8n_flowview.converter import convert_workflow
from n8n_flowview.exceptions import WorkflowLoadError
from n8n_flowview.models import parse_workflow

logger = logging.getLogger(__name__)


@dataclass
class WorkflowFile:
    """Represents a discovered workflow file with conversion results."""

    path: Path
    valid: bool = False
    error: Optional[str] = None
    node_count: int = 0
    edge_count: int = 0
    categories: Dict[str, int] = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)


class WorkflowScanner:
    """Scanner that loads and converts every workflow file in a folder."""

    def __init__(self, input_folder: Union[str, Path], recursive: bool = True):
        """Initialize the workflow scanner.

        Args:
            input_folder: Path to folder containing workflow JSON files
            recursive: Whether to scan subdirectories recursively
        """
        self.input_folder = Path(input_folder)
        self.recursive = recursive
        self.workflows: List[WorkflowFile] = []

        if not self.input_folder.exists():
            raise FileNotFoundError(f"Input folder not found: {self.input_folder}")

        if not self.input_folder.is_dir():
            raise NotADirectoryError(f"Input path is not a directory: {self.input_folder}")

    def scan(self) -> List[WorkflowFile]:
        """Scan for workflow JSON files.

        Returns:
            List of WorkflowFile objects, sorted by path
        """
        logger.info(f"Scanning for workflows in: {self.input_folder}")

        pattern = "**/*.json" if self.recursive else "*.json"
        json_files = sorted(self.input_folder.glob(pattern))

        logger.info(f"Found {len(json_files)} JSON files")

        self.workflows = [self._process_file(json_file) for json_file in json_files]

        valid_count = sum(1 for w in self.workflows if w.valid)
        logger.info(f"Loaded workflows: {valid_count}/{len(self.workflows)}")

        return self.workflows

    def _process_file(self, file_path: Path) -> WorkflowFile:
        try:
            workflow = parse_workflow(file_path.read_bytes())
        except WorkflowLoadError as e:
            logger.warning(f"Rejected {file_path.name}: {e} ({e.details})")
            return WorkflowFile(path=file_path, error=f"{e}: {e.details}")
        except OSError as e:
            logger.error(f"Error reading {file_path.name}: {e}")
            return WorkflowFile(path=file_path, error=f"Read error: {e}")

        graph = convert_workflow(workflow)
        categories = Counter(classify_node_type(node.type).label for node in workflow.nodes)

        return WorkflowFile(
            path=file_path,
            valid=True,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
            categories=dict(categories),
            unresolved=[ref.describe() for ref in graph.unresolved],
        )

    def get_valid_workflows(self) -> List[WorkflowFile]:
        return [w for w in self.workflows if w.valid]

    def get_invalid_workflows(self) -> List[WorkflowFile]:
        return [w for w in self.workflows if not w.valid]

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the scan results.

        Returns:
            Dictionary containing scan statistics
        """
        valid = self.get_valid_workflows()
        categories: Counter = Counter()
        for w in valid:
            categories.update(w.categories)

        return {
            "total_files": len(self.workflows),
            "valid_workflows": len(valid),
            "invalid_workflows": len(self.workflows) - len(valid),
            "total_nodes": sum(w.node_count for w in valid),
            "total_edges": sum(w.edge_count for w in valid),
            "unresolved_references": sum(len(w.unresolved) for w in valid),
            "categories": dict(categories),
        }


def scan_workflows(
    input_folder: Union[str, Path],
    recursive: bool = True,
) -> List[WorkflowFile]:
    """Convenience function to scan workflows.

    Args:
        input_folder: Path to folder containing workflow JSON files
        recursive: Whether to scan subdirectories recursively

    Returns:
        List of scanned WorkflowFile objects
    """
    scanner = WorkflowScanner(input_folder, recursive=recursive)
    return scanner.scan()
