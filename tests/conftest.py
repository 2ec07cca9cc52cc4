"""Shared fixtures for n8n-flowview tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def check_and_send():
    """Two-node workflow: an IF node wired to a Gmail node."""
    return {
        "nodes": [
            {
                "id": "1",
                "type": "n8n-nodes-base.if",
                "position": [0, 0],
                "name": "Check",
                "parameters": {
                    "conditions": {
                        "conditions": [
                            {
                                "id": "c1",
                                "leftValue": "{{ $json.x }}",
                                "rightValue": 5,
                                "operator": {"type": "number", "operation": "gt"},
                            }
                        ],
                        "combinator": "and",
                    }
                },
            },
            {"id": "2", "type": "gmail", "position": [100, 0], "name": "Send"},
        ],
        "connections": {"Check": {"main": [[{"node": "Send", "index": 0}]]}},
    }


@pytest.fixture
def sheets_pipeline():
    """Trigger fanning out to a sheet and an HTTP call, with a dangling target."""
    return {
        "name": "Sheets pipeline",
        "nodes": [
            {
                "id": "t",
                "type": "n8n-nodes-base.manualTrigger",
                "position": [0, 0],
                "name": "Start",
                "parameters": {},
            },
            {
                "id": "s",
                "type": "n8n-nodes-base.googleSheets",
                "position": [200, 0],
                "name": "Append Row",
                "parameters": {
                    "documentId": {"__rl": True, "cachedResultName": "Leads"},
                    "sheetName": {"__rl": True, "cachedResultName": "Sheet1"},
                },
            },
            {
                "id": "h",
                "type": "n8n-nodes-base.httpRequest",
                "position": [200, 200],
                "name": "Call API",
                "parameters": {"url": "https://example.com/api", "method": "POST"},
            },
        ],
        "connections": {
            "Start": {
                "main": [
                    [
                        {"node": "Append Row", "type": "main", "index": 0},
                        {"node": "Missing", "type": "main", "index": 0},
                        {"node": "Call API", "type": "main"},
                    ]
                ]
            }
        },
    }


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document to a file under tmp_path."""

    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
