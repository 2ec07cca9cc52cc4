"""Flask server for viewing n8n workflows as interactive diagrams."""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, render_template, request, jsonify

from n8n_flowview.session import FlowSession
from n8n_flowview.summary import render_summary_html

logger = logging.getLogger(__name__)


class WorkflowServer:
    """Flask server holding one diagram session."""

    def __init__(self, port: int = 5000, debug: bool = False, session: Optional[FlowSession] = None):
        """Initialize the Flask server.

        Args:
            port: Port number to run the server on
            debug: Enable Flask debug mode
            session: Session to serve, a fresh one when omitted
        """
        self.port = port
        self.debug = debug
        self.session = session or FlowSession()
        self.app = self._create_app()

    def _create_app(self) -> Flask:
        """Create and configure Flask application.

        Returns:
            Configured Flask app instance
        """
        package_dir = Path(__file__).parent

        app = Flask(
            __name__,
            template_folder=str(package_dir / "templates"),
            static_folder=str(package_dir / "static"),
        )
        # Parameter previews depend on the export's key order
        app.json.sort_keys = False

        # Disable Flask's default logging in production
        if not self.debug:
            log = logging.getLogger("werkzeug")
            log.setLevel(logging.ERROR)

        self._register_routes(app)

        return app

    def _graph_payload(self) -> dict:
        payload = self.session.to_dict()
        payload["cards"] = {node.id: render_summary_html(node.data) for node in self.session.nodes}
        return payload

    def _register_routes(self, app: Flask) -> None:
        """Register Flask routes.

        Args:
            app: Flask application instance
        """

        @app.route("/")
        def index():
            """Diagram page."""
            return render_template("flow.html", status=self.session.status_text())

        @app.route("/api/graph")
        def graph():
            return jsonify(self._graph_payload())

        @app.route("/api/load", methods=["POST"])
        def load():
            """Load a workflow file into the session.

            Multipart Form:
                file: Workflow JSON file

            JSON Body:
                filename: Display name of the file
                content: Raw JSON text of the workflow

            Returns:
                Session state; 400 if no file was sent, 422 if it was rejected
            """
            upload = request.files.get("file")
            if upload is not None and upload.filename:
                filename = upload.filename
                content = upload.read()
            else:
                data = request.get_json(silent=True) or {}
                filename = data.get("filename")
                content = data.get("content")
                if filename is None and content is not None:
                    filename = "workflow.json"

            if filename is None:
                logger.error("No workflow file provided")
                self.session.select_file(None)
                return jsonify(self._graph_payload()), 400

            if not self.session.select_file(filename, content):
                return jsonify(self._graph_payload()), 422

            return jsonify(self._graph_payload())

        @app.route("/api/connect", methods=["POST"])
        def connect():
            """Record an edge drawn in the graph view."""
            data = request.get_json(silent=True) or {}
            edge = self.session.connect(
                data.get("source"),
                data.get("target"),
                data.get("sourceHandle"),
                data.get("targetHandle"),
            )
            if edge is None:
                return jsonify({"error": "Both source and target are required"}), 400
            return jsonify(edge.to_dict()), 201

        @app.route("/api/nodes/<node_id>/position", methods=["POST"])
        def move_node(node_id: str):
            data = request.get_json(silent=True) or {}
            try:
                x = float(data["x"])
                y = float(data["y"])
            except (KeyError, TypeError, ValueError):
                return jsonify({"error": "Numeric x and y are required"}), 400

            if not self.session.move_node(node_id, x, y):
                return jsonify({"error": f"Unknown node: {node_id}"}), 404
            return jsonify({"id": node_id, "position": {"x": x, "y": y}})

        @app.route("/api/edges/<edge_id>", methods=["DELETE"])
        def remove_edge(edge_id: str):
            if not self.session.remove_edge(edge_id):
                return jsonify({"error": f"Unknown edge: {edge_id}"}), 404
            return "", 204

        @app.route("/health")
        def health():
            """Health check endpoint for monitoring."""
            return jsonify({
                "status": "healthy",
                "port": self.port,
                "debug": self.debug
            })

    def run(self, host: str = "127.0.0.1") -> None:
        """Start the Flask server.

        Args:
            host: Host address to bind to
        """
        logger.info(f"Starting workflow viewer on http://{host}:{self.port}")
        self.app.run(host=host, port=self.port, debug=self.debug, threaded=True)

    def get_app(self) -> Flask:
        """Get the Flask app instance.

        Returns:
            Flask application instance
        """
        return self.app


def create_server(port: int = 5000, debug: bool = False, session: Optional[FlowSession] = None) -> WorkflowServer:
    """Factory function to create a WorkflowServer instance.

    Args:
        port: Port number to run the server on
        debug: Enable Flask debug mode
        session: Optional pre-loaded session

    Returns:
        WorkflowServer instance
    """
    return WorkflowServer(port=port, debug=debug, session=session)
