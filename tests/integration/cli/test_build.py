"""Integration tests for the build, extract and slots commands"""

import json

from typer.testing import CliRunner

from mdslots.cli.cli import app


runner = CliRunner()


def test_build_cmd_writes_results(sample_file, tmp_path, monkeypatch):
    """build writes one JSON document per markdown file and reports each."""
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["build", str(sample_file), "--out-dir", str(tmp_path / "dist")])

    assert result.exit_code == 0, result.output
    assert "Transformed 1 document(s)" in result.output
    data = json.loads((tmp_path / "dist" / "scales.json").read_text())
    assert list(data["slots"]) == ["aside"]


def test_build_cmd_no_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["build", str(tmp_path)])
    assert result.exit_code == 1
    assert "No .md/.mdx files found" in result.output


def test_build_cmd_reports_bad_document(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "bad.md").write_text("---\nkey: [unclosed\n---\nbody\n")
    result = runner.invoke(app, ["build", "bad.md"])
    assert result.exit_code == 1
    assert "Error: Failed to transform bad.md" in result.output


def test_extract_cmd_prints_result(tmp_path, monkeypatch):
    """extract prints the pruned tree and slot map as JSON."""
    monkeypatch.chdir(tmp_path)
    tree = {"type": "root", "children": [
        {"type": "element", "tagName": "meta-box", "properties": {}, "children": [{"type": "text", "value": "A"}]},
    ]}
    (tmp_path / "page.json").write_text(json.dumps(tree))

    result = runner.invoke(app, ["extract", "page.json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["tree"]["children"] == []
    assert payload["slots"]["box"]["value"] == ["A"]


def test_extract_cmd_out_and_prefix(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = {"type": "root", "children": [
        {"type": "element", "tagName": "slot-hero", "properties": {}, "children": []},
    ]}
    (tmp_path / "page.json").write_text(json.dumps(tree))

    result = runner.invoke(app, ["extract", "page.json", "--prefix", "slot-", "--out", "out.json"])
    assert result.exit_code == 0, result.output
    assert "(1 slot(s))" in result.output
    assert list(json.loads((tmp_path / "out.json").read_text())["slots"]) == ["hero"]


def test_extract_cmd_missing_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["extract", "missing.json"])
    assert result.exit_code == 1
    assert "Cannot extract slots" in result.output


def test_slots_cmd_lists_names(sample_file, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "plain.md").write_text("# Plain\n")
    result = runner.invoke(app, ["slots", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "plain: -" in result.output
    assert "scales: aside" in result.output


def test_slots_cmd_reports_unreadable_file(tmp_path, monkeypatch):
    """An unreadable document goes through the CLI error path instead of a traceback."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "broken.md").mkdir()
    result = runner.invoke(app, ["slots", str(tmp_path)])
    assert result.exit_code == 1
    assert "Error: Cannot parse" in result.output
