# tests/test_cli.py

import json
from pathlib import Path

import pytest

from cdsearch.cli import main, parse_args

TOY_DIR = Path(__file__).resolve().parents[1] / "data" / "toy"


def _toy_args(*extra):
    return [
        "search",
        "--interactions", str(TOY_DIR / "interactions.tsv"),
        "--drugs", str(TOY_DIR / "drugs.tsv"),
        "--disease-essential", str(TOY_DIR / "disease_essential.tsv"),
        "--initial", "D_init",
        "--max-path-length", "1",
        *extra,
    ]


def test_parse_args_defaults():
    args = parse_args(_toy_args())

    assert args.subcommand == "search"
    assert args.n_solutions == 10
    assert args.n_jobs == 1
    assert args.healthy_essential is None
    assert args.output_json is None


def test_main_writes_json_and_prints_ranking(tmp_path, capsys):
    out = tmp_path / "result.json"

    main(_toy_args("--output-json", str(out), "--log-level", "WARNING"))

    printed = capsys.readouterr().out
    assert "D_cand" in printed
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [d["drug"] for d in data["sorted_drugs"]] == ["D_cand", "D_init"]
    assert [d["score"] for d in data["sorted_drugs"]] == [1, -2]


def test_main_exits_on_unknown_initial_drug(tmp_path):
    out = tmp_path / "result.json"
    args = _toy_args("--output-json", str(out))
    args[args.index("D_init")] = "unknown"

    with pytest.raises(SystemExit) as excinfo:
        main(args)

    assert excinfo.value.code == 1
    assert not out.exists()


def test_main_exits_on_invalid_path_length(tmp_path):
    out = tmp_path / "result.json"
    args = _toy_args("--output-json", str(out))
    args[args.index("--max-path-length") + 1] = "0"

    with pytest.raises(SystemExit) as excinfo:
        main(args)

    assert excinfo.value.code == 1
    assert not out.exists()


def test_main_requires_subcommand():
    with pytest.raises(SystemExit):
        main([])
