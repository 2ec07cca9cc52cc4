"""Exception types raised by n8n-flowview."""


class FlowViewError(Exception):
    """Base class for n8n-flowview errors."""
    pass


class WorkflowLoadError(FlowViewError):
    """Workflow file content could not be parsed or lacks required fields."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.details = details


class RenderError(FlowViewError):
    """Custom exception for snapshot rendering errors."""
    pass
