"""
Tests for the nullcode command line.
"""

import json

from loguru import logger

from nullcode.cli import main


def _source(tmp_path, text, name="app.py"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_format(tmp_path, capsys):
    path = _source(tmp_path, "total = calc\n")
    code = main([
        "-c", str(tmp_path / "missing.yaml"),
        "format", path, "--line", "0", "--column", "12",
        "--completion", "calculate_sum(a, b)",
    ])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert result["text"] == "ulate_sum(a, b)"
    assert result["insertion_anchor"] == {"line": 0, "column": 12}


def test_context(tmp_path, capsys):
    path = _source(tmp_path, "a = 1\nb = 2\nc = 3\n")
    code = main(["-c", str(tmp_path / "missing.yaml"), "context", path, "--line", "1"])

    assert code == 0
    bundle = json.loads(capsys.readouterr().out)
    assert bundle["recent_lines"] == ["a = 1", "b = 2", "c = 3"]
    assert bundle["accepted_suggestions"] == []


def test_missing_source_file(tmp_path):
    code = main(["-c", str(tmp_path / "missing.yaml"), "context", str(tmp_path / "nope.py"), "--line", "0"])
    assert code == 2


def test_no_command(capsys):
    assert main([]) == 2


def test_log_file_records_debug_trace(tmp_path, capsys):
    path = _source(tmp_path, "total = calc\n")
    log_path = tmp_path / "nullcode.log"
    code = main([
        "-c", str(tmp_path / "missing.yaml"),
        "--log-file", str(log_path),
        "format", path, "--line", "0", "--column", "12",
        "--completion", "calculate_sum(a, b)",
    ])
    logger.remove()

    assert code == 0
    assert "Duplication stripped by partial_identifier" in log_path.read_text(encoding="utf-8")
    assert "Duplication stripped" not in capsys.readouterr().out
