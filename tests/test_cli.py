import io
import json

import pytest

from zigtype.cli import main


@pytest.fixture
def graph_file(tmp_path, mixed_graph):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(mixed_graph), encoding="utf-8")
    return path


def test_cli_prints_code(graph_file, capsys):
    assert main([str(graph_file)]) == 0

    out = capsys.readouterr().out
    assert out.startswith("// Example code showing")
    assert "pub const Order = struct {" in out


def test_cli_writes_output_file(graph_file, tmp_path):
    output = tmp_path / "models.zig"

    assert main([str(graph_file), "--output", str(output), "--private"]) == 0

    text = output.read_text(encoding="utf-8")
    assert "\nconst Order = struct {\n" in text
    assert "\npub const Order" not in text


def test_cli_split_files(graph_file, tmp_path):
    out_dir = tmp_path / "models"

    assert main([str(graph_file), "--split-files", "--out-dir", str(out_dir)]) == 0

    assert sorted(p.name for p in out_dir.iterdir()) == [
        "customer.zig",
        "order.zig",
        "orders.zig",
        "reference.zig",
        "status.zig",
    ]
    assert 'const Order = @import("order.zig").Order;' in (out_dir / "orders.zig").read_text()


def test_cli_split_files_needs_out_dir(graph_file, capsys):
    assert main([str(graph_file), "--split-files"]) == 1
    assert "--out-dir" in capsys.readouterr().err


def test_cli_leading_comments_and_no_comments(graph_file, capsys):
    assert main(
        [str(graph_file), "--leading-comment", "Generated", "--leading-comment", "by zigtype", "--no-comments"]
    ) == 0

    out = capsys.readouterr().out
    assert out.startswith('// Generated\n// by zigtype\n\nconst std = @import("std");\n')
    assert "///" not in out


def test_cli_reads_stdin(monkeypatch, capsys, user_graph):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(user_graph)))

    assert main(["--stdin"]) == 0
    assert "    user_name: []u8,\n" in capsys.readouterr().out


def test_cli_config_file(graph_file, tmp_path, capsys):
    config_file = tmp_path / "zig.json"
    config_file.write_text(json.dumps({"string_type": "[]const u8"}), encoding="utf-8")

    assert main([str(graph_file), "--config", str(config_file)]) == 0
    assert "first_name: []const u8," in capsys.readouterr().out


def test_cli_requires_input(capsys):
    assert main([]) == 1
    assert "Input source required" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_invalid_graph(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"top_levels": {"A": {"kind": "tuple"}}}), encoding="utf-8")

    assert main([str(path)]) == 1
    assert "Invalid type graph" in capsys.readouterr().err


def test_cli_unknown_language(graph_file, capsys):
    assert main([str(graph_file), "--language", "cobol"]) == 1
    assert "cobol" in capsys.readouterr().err


def test_cli_list_languages(capsys):
    assert main(["--list-languages"]) == 0
    assert "zig" in capsys.readouterr().out


def test_cli_reports_warnings(tmp_path, capsys):
    path = tmp_path / "any.json"
    path.write_text(
        json.dumps({"top_levels": {"Root": {"kind": "class", "properties": [{"name": "x", "type": "any"}]}}}),
        encoding="utf-8",
    )

    assert main([str(path)]) == 0
    assert "Warnings" in capsys.readouterr().err


def test_cli_rejects_invalid_config_value(graph_file, tmp_path, capsys):
    config_file = tmp_path / "zig.json"
    config_file.write_text(json.dumps({"split_files": "yes"}), encoding="utf-8")

    assert main([str(graph_file), "--config", str(config_file)]) == 1
    assert "split_files must be a boolean" in capsys.readouterr().err
