# tests/test_io_handlers.py

import json
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from cdsearch.config import SearchConfig
from cdsearch.data_models import Drug, DrugRecord, NetworkCounts, Protein, SearchResult
from cdsearch.exceptions import InitialDrugNotFound, InputDataError
from cdsearch.io_handlers import (
    find_initial_drug,
    load_drugs,
    load_network,
    load_search_inputs,
    write_results_json,
)


def _write(path: Path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_network_filters_rows_and_indexes_proteins(tmp_path):
    interactions = _write(
        tmp_path / "interactions.tsv",
        [
            "A\tB\t1",
            "C\tA\t-1",
            "B\tD\tx",         # non-integer direction
            "E\tF",            # missing direction
            "\tB\t1",          # empty source
            "B\tC\t0\textra",  # extra fields are ignored
            "A\tB\t-1",        # duplicate pair
        ],
    )
    disease = _write(tmp_path / "disease.tsv", ["B", "", "Z"])
    healthy = _write(tmp_path / "healthy.tsv", ["B", "C"])

    proteins, inters = load_network(interactions, disease, healthy)

    # Sources first, then targets, in order of appearance
    assert [p.name for p in proteins] == ["A", "C", "B"]
    assert [p.index for p in proteins] == [0, 1, 2]

    by_name = {p.name: p for p in proteins}
    assert by_name["B"].is_disease_essential and by_name["B"].is_healthy_essential
    assert by_name["C"].is_healthy_essential and not by_name["C"].is_disease_essential
    assert not by_name["A"].is_essential

    assert [(i.source, i.target, i.direction) for i in inters] == [
        (0, 2, 1),
        (1, 0, -1),
        (2, 1, 0),
        (0, 2, -1),
    ]


def test_load_network_skips_out_of_range_directions(tmp_path):
    interactions = _write(tmp_path / "interactions.tsv", ["A\tB\t2", "A\tC\t1"])

    proteins, inters = load_network(interactions)

    assert [p.name for p in proteins] == ["A", "C"]
    assert len(inters) == 1


def test_load_network_skips_oversized_direction(tmp_path):
    interactions = _write(
        tmp_path / "interactions.tsv",
        ["A\tB\t1", "A\tC\t99999999999999999999999", "B\tC\t-00001"],
    )

    proteins, inters = load_network(interactions)

    assert [p.name for p in proteins] == ["A", "B", "C"]
    assert [(i.source, i.target, i.direction) for i in inters] == [(0, 1, 1), (1, 2, -1)]


def test_extra_fields_are_dropped_without_parser_warning(tmp_path, recwarn):
    interactions = _write(
        tmp_path / "interactions.tsv",
        ["A\tB\t1", "B\tC\t-1\tnote\tmore"],
    )

    proteins, inters = load_network(interactions)

    assert [(i.source, i.target, i.direction) for i in inters] == [(0, 1, 1), (1, 2, -1)]
    assert not [w for w in recwarn if issubclass(w.category, pd.errors.ParserWarning)]


def test_load_drugs_discards_unknown_targets(tmp_path):
    proteins = [Protein(index=0, name="A"), Protein(index=1, name="B")]
    drugs_file = _write(
        tmp_path / "drugs.tsv",
        ["d1\tA\t1", "d2\tX\t-1", "d3\tB\t-1", "d4\tB"],
    )

    drugs = load_drugs(drugs_file, proteins)

    assert drugs == [Drug("d1", target=0, direction=1), Drug("d3", target=1, direction=-1)]


def test_load_search_inputs_errors(tmp_path):
    interactions = _write(tmp_path / "interactions.tsv", ["A\tB\t1"])
    drugs_file = _write(tmp_path / "drugs.tsv", ["d1\tA\t1"])
    no_drugs = _write(tmp_path / "no_drugs.tsv", ["d1\tX\t1"])
    essential = _write(tmp_path / "essential.tsv", ["B"])
    not_in_network = _write(tmp_path / "other.tsv", ["Z"])
    empty = _write(tmp_path / "empty.tsv", [""])

    cfg = SearchConfig(
        interactions_tsv=interactions,
        drugs_tsv=drugs_file,
        disease_essential_tsv=essential,
        initial="d1",
    )
    proteins, inters, drugs = load_search_inputs(cfg)
    assert len(proteins) == 2 and len(inters) == 1 and len(drugs) == 1

    with pytest.raises(InputDataError):
        load_search_inputs(SearchConfig(empty, drugs_file, essential, initial="d1"))
    with pytest.raises(InputDataError):
        load_search_inputs(SearchConfig(interactions, no_drugs, essential, initial="d1"))
    with pytest.raises(InputDataError):
        load_search_inputs(SearchConfig(interactions, drugs_file, not_in_network, initial="d1"))
    with pytest.raises(InputDataError):
        load_search_inputs(
            SearchConfig(tmp_path / "missing.tsv", drugs_file, essential, initial="d1")
        )


def test_find_initial_drug_by_name_or_target():
    proteins = [Protein(index=0, name="A"), Protein(index=1, name="B")]
    drugs = [Drug("d1", target=0, direction=1), Drug("d2", target=1, direction=1)]

    assert find_initial_drug(drugs, proteins, "d2") == drugs[1]
    assert find_initial_drug(drugs, proteins, "A") == drugs[0]
    with pytest.raises(InitialDrugNotFound):
        find_initial_drug(drugs, proteins, "C")


def _result():
    initial = DrugRecord("d1", "A", None, {"B": 1}, {})
    solution = DrugRecord("d2", "C", 1, {"B": -1}, {"C": 1})
    counts = NetworkCounts(
        proteins=3,
        interactions=2,
        disease_essential_proteins=1,
        healthy_essential_proteins=1,
        drugs=2,
    )
    return SearchResult(initial=initial, solutions=[solution], counts=counts)


def test_write_results_json(tmp_path):
    out = tmp_path / "nested" / "result.json"

    written = write_results_json(_result(), out)

    assert written == out
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["initial_drug"]["drug"] == "d1"
    assert "score" not in data["initial_drug"]
    assert data["sorted_drugs"] == [
        {
            "drug": "d2",
            "drug_target": "C",
            "score": 1,
            "disease_essential_proteins": {"B": -1},
            "healthy_essential_proteins": {"C": 1},
        }
    ]


def test_write_results_json_failure_is_logged(tmp_path, caplog):
    # The parent "directory" is a regular file
    blocker = _write(tmp_path / "blocker", ["x"])

    written = write_results_json(_result(), blocker / "result.json")

    assert written is None
    assert "occurred while writing the results" in caplog.text


def test_default_output_path():
    cfg = SearchConfig(
        interactions_tsv=Path("/data/run/interactions.tsv"),
        drugs_tsv=Path("/data/run/drugs.tsv"),
        initial="d1",
    )

    path = cfg.default_output_path("my drug", "TP53", now=datetime(2024, 1, 2, 3, 4, 5))

    assert path == Path("/data/run/mydrug_TP53_20240102030405.json")
