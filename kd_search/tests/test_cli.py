"""
Integration Tests: Command Line
"""

import json
import logging
from pathlib import Path

import pytest

from kd_search.__main__ import build_parser, main

SAMPLE_LIBRARY = str(Path(__file__).resolve().parents[2] / "data" / "books.json")
ENV_VARS = (
    "KDSEARCH_TEXT_FIELD",
    "KDSEARCH_TOP_K",
    "KDSEARCH_DIMENSIONS",
    "KDSEARCH_EMBED_WORKERS",
    "KDSEARCH_MODEL",
)


@pytest.fixture(autouse=True)
def isolated(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def query_args(*extra):
    return [
        "query",
        "--records", SAMPLE_LIBRARY,
        "--mock",
        "--mock-dimension", "8",
        *extra,
    ]


class TestQueryCommand:
    """Tests for ``kdsearch query``."""

    def test_prints_nearest(self, capsys):
        code = main(query_args("--text", "rich and famous", "-k", "2"))

        out = capsys.readouterr().out.splitlines()
        assert code == 0
        assert out[0] == "Querying: rich and famous"
        assert [line.split(": ")[0] for line in out[1:]] == [
            "nearest", "distance", "nearest", "distance",
        ]

    def test_json_output(self, capsys):
        code = main(query_args("--text", "a long voyage", "-k", "3", "--json"))

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert len(data["neighbors"]) == 3
        assert "title" in data["neighbors"][0]["payload"]
        distances = [n["squared_distance"] for n in data["neighbors"]]
        assert distances == sorted(distances)

    def test_exact_summary_is_nearest(self, capsys):
        library = json.loads(Path(SAMPLE_LIBRARY).read_text())["books"]
        book = library[5]

        main(query_args("--text", book["summary"], "-k", "1"))

        out = capsys.readouterr().out.splitlines()
        assert out[1] == f"nearest: {book['title']}"
        assert out[2] == "distance: 0.0"

    def test_missing_records_file(self, tmp_path, capsys):
        code = main([
            "query", "--records", str(tmp_path / "missing.json"),
            "--text", "anything", "--mock",
        ])

        assert code == 1
        assert "RECORD_LOAD_FAILED" in capsys.readouterr().err

    def test_invalid_k(self, capsys):
        code = main(query_args("--text", "anything", "-k", "-2"))

        assert code == 1
        assert "CONFIG_INVALID" in capsys.readouterr().err

    def test_projection_wider_than_embedding(self, capsys):
        code = main(query_args("--text", "war", "--dimensions", "99"))

        err = capsys.readouterr().err
        assert code == 1
        assert "CONFIG_INVALID" in err
        assert "exceeds embedder dimension 8" in err

    def test_projection_flag(self, capsys):
        code = main(query_args("--text", "war", "-k", "1", "--dimensions", "2", "--json"))

        assert code == 0
        assert len(json.loads(capsys.readouterr().out)["neighbors"]) == 1


class TestOtherCommands:
    """Tests for version and help."""

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.startswith("kdsearch ")

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "query" in capsys.readouterr().out

    def test_query_requires_text(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["query"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
