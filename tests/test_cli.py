from __future__ import annotations

import io
from pathlib import Path

import pytest
import yaml

from ttmctl.cli import main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_stat_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["stat", "2/5"]) == 0
    assert capsys.readouterr().out.strip() == "2/5"


def test_stat_yaml(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--format", "yaml", "stat", "1/!"]) == 0
    data = yaml.safe_load(capsys.readouterr().out)
    assert data == {"type": "RequiredCountStat", "act": 1, "exp": True}


def test_date_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["date", "Y20S-W8M"]) == 0
    assert capsys.readouterr().out.strip() == "year 20 Spring, week 8, Mon"


def test_task_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--no-color", "task", ">(2/15) Task (due: W2M)"]) == 0
    assert capsys.readouterr().out.strip() == "Task [current] (2/15, ·, ·) due: week 2, Mon"


def test_task_yaml(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--format", "yaml", "task", "~(1) Done (prior: 2; gRun: 3/5)"]) == 0
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["type"] == "Task"
    assert data["name"] == "Done"
    assert data["flags"] == ["done"]
    assert data["priority"] == 2
    assert data["day_stat"] == {"type": "CountStat", "act": 1}
    assert data["other_stats"] == {"Run": [{"type": "CountStat", "act": 3, "exp": 5}, None, None]}


def test_notation_error_exits_1(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["task", "no parens"]) == 1
    out = capsys.readouterr().out
    assert out.startswith("Error: ")
    assert "no parens" in out


def test_missing_file_exits_1(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["tree", "missing.txt"]) == 1
    assert capsys.readouterr().out.startswith("Error: ")


def test_sections_from_file(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = isolated_cwd / "week.txt"
    doc.write_text("[Tasks]\n  (1) A\n  (2) B\n[Notes]\n  hi\n", encoding="utf-8")
    assert main(["sections", str(doc)]) == 0
    assert capsys.readouterr().out.splitlines() == ["[Tasks] (2 lines)", "[Notes] (1 lines)"]


def test_tree_from_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("(1) Parent\n  - Commit\n  Note\n"))
    assert main(["--no-color", "tree", "-"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "root",
        "└── Parent (1, ·, ·)",
        "    ├── - Commit",
        "    └── Note",
    ]


def test_tree_section_yaml(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = isolated_cwd / "week.txt"
    doc.write_text("[Tasks]\n  (1) A\n[Other]\n  (2) B\n", encoding="utf-8")
    assert main(["--format", "yaml", "tree", "--section", "Other", str(doc)]) == 0
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["text"] == "root"
    assert [c["task"]["name"] for c in data["children"]] == ["B"]


def test_tree_unknown_section(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = isolated_cwd / "week.txt"
    doc.write_text("[Tasks]\n  (1) A\n", encoding="utf-8")
    assert main(["tree", "-s", "Nope", str(doc)]) == 1
    assert "section not found" in capsys.readouterr().out


def test_tracker_text(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = isolated_cwd / "tracker.txt"
    doc.write_text("0 0 0 0 0 0 ? Gym\n", encoding="utf-8")
    assert main(["tracker", str(doc)]) == 0
    assert capsys.readouterr().out.strip() == (
        "Gym: M:0  T:0  W:0  R:0  F:0  S:0  U:unknown"
    )


def test_config_file_selects_yaml(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (isolated_cwd / ".ttmctl.yml").write_text("format: yaml\n", encoding="utf-8")
    assert main(["stat", "?"]) == 0
    assert yaml.safe_load(capsys.readouterr().out) == {"type": "UnknownStat"}


def test_bad_config_exits_1(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (isolated_cwd / ".ttmctl.yml").write_text("format: json\n", encoding="utf-8")
    assert main(["stat", "1"]) == 1
    assert capsys.readouterr().out.startswith("Error: ")


def test_undecodable_file_exits_1(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = isolated_cwd / "week.txt"
    path.write_bytes(b"(1) Task \xff\xfe\n")
    assert main(["tree", str(path)]) == 1
    assert capsys.readouterr().out.startswith("Error: ")
