from __future__ import annotations

import json

from horti_engine.cli_smoke import main as cli_main
from horti_engine.core.pipeline import run_design
from horti_engine.scenarios import (
    design_summary,
    facility_spec_from_dict,
    facility_spec_to_dict,
    list_scenarios,
    load_scenario,
    save_scenario,
)
from horti_engine.scripts.smoke_pipeline import SCENARIOS, run_named_scenario


def test_facility_spec_survives_json(boundary_cone_spec):
    payload = json.loads(json.dumps(facility_spec_to_dict(boundary_cone_spec)))
    assert facility_spec_from_dict(payload) == boundary_cone_spec


def test_save_and_load_scenario(tmp_path, bench_spec):
    result = run_design(bench_spec)
    destination = save_scenario(tmp_path / "bench.json", bench_spec, result)
    assert destination.exists()

    loaded = load_scenario(destination)
    assert loaded["facility_spec"] == bench_spec
    assert loaded["design_summary"]["facility"] == "bench"
    assert [path.name for path in list_scenarios(tmp_path)] == ["bench.json"]


def test_design_summary_is_json_serializable(bench_spec):
    summary = design_summary(run_design(bench_spec))
    text = json.dumps(summary)
    assert "circuits" in json.loads(text)
    assert summary["grid"]["rows"] == 4
    assert summary["grid"]["cols"] == 8


def test_named_scenarios_run(capsys):
    for name in SCENARIOS:
        outputs = run_named_scenario(name)
        assert outputs["result"].circuits
    assert "Reference Scenario" in capsys.readouterr().out


def test_cli_prints_json_summary(capsys):
    cli_main(["small", "--json"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["facility"] == "small_bench"
    assert len(summary["circuits"]) == 1


def test_cli_round_trips_saved_scenario(tmp_path, capsys):
    target = tmp_path / "small.json"
    cli_main(["small", "--save", str(target)])
    capsys.readouterr()
    cli_main(["--load", str(target), "--json"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["facility"] == "small_bench"


def test_design_summary_carries_panel_phase_loads(bench_spec):
    summary = design_summary(run_design(bench_spec))
    assert set(summary["panel"]["phase_load_amps"]) == {"A", "B", "C"}
    json.dumps(summary["panel"])
