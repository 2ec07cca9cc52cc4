"""Tests for the Flask viewer app."""

import io
import json

import pytest

from n8n_flowview.server import create_server
from n8n_flowview.session import ERROR_INVALID_JSON, PROMPT_SELECT


@pytest.fixture
def server():
    return create_server(port=5050)


@pytest.fixture
def client(server):
    server.app.config["TESTING"] = True
    return server.app.test_client()


class TestViewerRoutes:

    def test_index_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'id="workflow-file"' in body
        assert "Tải file JSON" in body
        assert "flow.js" in body

    def test_health(self, client):
        response = client.get("/health")
        assert response.get_json() == {"status": "healthy", "port": 5050, "debug": False}

    def test_empty_graph(self, client):
        state = client.get("/api/graph").get_json()
        assert state["nodes"] == []
        assert state["edges"] == []
        assert state["cards"] == {}
        assert state["isPrompt"] is True


class TestLoadRoute:

    def test_upload_file(self, client, check_and_send):
        data = {"file": (io.BytesIO(json.dumps(check_and_send).encode("utf-8")), "flow.json")}
        response = client.post("/api/load", data=data, content_type="multipart/form-data")

        assert response.status_code == 200
        state = response.get_json()
        assert state["status"] == "Loaded: flow.json (2 nodes, 1 edges)"
        assert [node["id"] for node in state["nodes"]] == ["1", "2"]
        assert "Conditions (AND):" in state["cards"]["1"]
        assert "Email Subject:" in state["cards"]["2"]

    def test_json_body(self, client, sheets_pipeline):
        response = client.post("/api/load", json={
            "filename": "sheets.json",
            "content": json.dumps(sheets_pipeline),
        })
        assert response.status_code == 200
        state = response.get_json()
        assert len(state["edges"]) == 2
        assert list(state["nodes"][2]["data"]["parameters"]) == ["url", "method"]

    def test_no_file(self, client):
        response = client.post("/api/load", data={}, content_type="multipart/form-data")
        assert response.status_code == 400
        assert response.get_json()["error"] == PROMPT_SELECT

    def test_invalid_json_keeps_graph(self, client, check_and_send):
        client.post("/api/load", json={"filename": "good.json", "content": json.dumps(check_and_send)})

        response = client.post("/api/load", json={"filename": "bad.json", "content": "{nope"})

        assert response.status_code == 422
        state = response.get_json()
        assert state["error"] == ERROR_INVALID_JSON
        assert state["isPrompt"] is False
        assert len(state["nodes"]) == 2

    def test_non_text_content_rejected(self, client):
        response = client.post("/api/load", json={
            "filename": "x.json",
            "content": {"nodes": [], "connections": {}},
        })

        assert response.status_code == 422
        state = response.get_json()
        assert state["error"] == ERROR_INVALID_JSON
        assert state["filename"] == "x.json"


class TestEditRoutes:

    @pytest.fixture
    def loaded(self, client, check_and_send):
        client.post("/api/load", json={"filename": "flow.json", "content": json.dumps(check_and_send)})
        return client

    def test_connect(self, loaded, server):
        response = loaded.post("/api/connect", json={
            "source": "2", "target": "1", "sourceHandle": "output-0", "targetHandle": "input-0",
        })
        assert response.status_code == 201
        assert response.get_json()["id"] == "e-2-1"
        assert [edge.id for edge in server.session.edges] == ["e-1-2-0-0", "e-2-1"]

    def test_connect_missing_target(self, loaded):
        response = loaded.post("/api/connect", json={"source": "2"})
        assert response.status_code == 400

    def test_move_node(self, loaded, server):
        response = loaded.post("/api/nodes/1/position", json={"x": 12.5, "y": -4})
        assert response.status_code == 200
        assert server.session.nodes[0].position == {"x": 12.5, "y": -4.0}

    def test_move_node_bad_payload(self, loaded):
        assert loaded.post("/api/nodes/1/position", json={"x": "left"}).status_code == 400

    def test_move_unknown_node(self, loaded):
        assert loaded.post("/api/nodes/zzz/position", json={"x": 1, "y": 2}).status_code == 404

    def test_remove_edge(self, loaded, server):
        assert loaded.delete("/api/edges/e-1-2-0-0").status_code == 204
        assert server.session.edges == []
        assert loaded.delete("/api/edges/e-1-2-0-0").status_code == 404

    def test_status_follows_edge_edits(self, loaded):
        assert loaded.get("/api/graph").get_json()["status"] == "Loaded: flow.json (2 nodes, 1 edges)"

        loaded.post("/api/connect", json={"source": "2", "target": "1"})
        assert loaded.get("/api/graph").get_json()["status"] == "Loaded: flow.json (2 nodes, 2 edges)"

        loaded.delete("/api/edges/e-1-2-0-0")
        loaded.delete("/api/edges/e-2-1")
        assert loaded.get("/api/graph").get_json()["status"] == "Loaded: flow.json (2 nodes, 0 edges)"

    def test_page_script_refreshes_status_after_edits(self, client):
        script = client.get("/static/flow.js").get_data(as_text=True)
        assert script.count(".then(refreshStatus)") == 2
