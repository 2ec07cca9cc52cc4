"""Tests for folder scanning."""

import pytest

from n8n_flowview.scanner import WorkflowScanner, scan_workflows


class TestWorkflowScanner:

    def test_scan_mixed_folder(self, tmp_path, write_json, check_and_send, sheets_pipeline):
        write_json("a_check.json", check_and_send)
        write_json("nested/b_sheets.json", sheets_pipeline)
        write_json("c_broken.json", "{not json")
        write_json("d_partial.json", {"nodes": []})

        scanner = WorkflowScanner(tmp_path)
        workflows = scanner.scan()

        assert [w.path.name for w in workflows] == [
            "a_check.json", "c_broken.json", "d_partial.json", "b_sheets.json",
        ]

        by_name = {w.path.name: w for w in workflows}
        check = by_name["a_check.json"]
        assert check.valid
        assert check.node_count == 2
        assert check.edge_count == 1
        assert check.categories == {"conditional": 1, "email": 1}

        sheets = by_name["b_sheets.json"]
        assert sheets.edge_count == 2
        assert len(sheets.unresolved) == 1
        assert "Missing" in sheets.unresolved[0]

        assert not by_name["c_broken.json"].valid
        assert by_name["c_broken.json"].error.startswith("Invalid JSON")
        assert "connections" in by_name["d_partial.json"].error

        summary = scanner.get_summary()
        assert summary["total_files"] == 4
        assert summary["valid_workflows"] == 2
        assert summary["invalid_workflows"] == 2
        assert summary["total_nodes"] == 5
        assert summary["total_edges"] == 3
        assert summary["unresolved_references"] == 1
        assert summary["categories"]["generic"] == 2

    def test_non_recursive(self, tmp_path, write_json, check_and_send):
        write_json("top.json", check_and_send)
        write_json("sub/inner.json", check_and_send)

        workflows = scan_workflows(tmp_path, recursive=False)
        assert [w.path.name for w in workflows] == ["top.json"]

    def test_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WorkflowScanner(tmp_path / "absent")

    def test_file_instead_of_folder(self, write_json, check_and_send):
        path = write_json("flow.json", check_and_send)
        with pytest.raises(NotADirectoryError):
            WorkflowScanner(path)
