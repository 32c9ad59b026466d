from __future__ import annotations

import pytest

from horti_engine.core.circuits.engine import (
    chunk_fixtures,
    continuous_load_amps,
    partition_circuits,
    select_breaker,
    select_conduit,
    select_wire,
    summarize_panel,
)
from horti_engine.core.models import CircuitCatalog, SizingError


def test_eighty_fixtures_make_four_full_circuits(led_fixtures):
    circuits = partition_circuits(led_fixtures, CircuitCatalog())
    assert len(circuits) == 4
    assert [c.fixture_count for c in circuits] == [20, 20, 20, 20]
    assert [c.id for c in circuits] == ["C-01", "C-02", "C-03", "C-04"]


def test_277v_lighting_circuit_sizing(led_fixtures):
    circuits = partition_circuits(led_fixtures, CircuitCatalog())
    first = circuits[0]
    assert continuous_load_amps(645, 277) == pytest.approx(2.3285, abs=1e-4)
    assert first.continuous_load_amps == pytest.approx(46.57, abs=0.01)
    assert first.breaker_amps == 60
    assert first.wire_gauge == "6 AWG"
    assert first.conduit_size == '3/4"'


def test_continuous_duty_rule_holds(led_fixtures):
    catalog = CircuitCatalog()
    for circuit in partition_circuits(led_fixtures, catalog):
        assert circuit.continuous_load_amps <= 0.8 * circuit.breaker_amps


def test_fixtures_assigned_in_insertion_order(led_fixtures):
    fixtures = led_fixtures[:45]
    circuits = partition_circuits(fixtures, CircuitCatalog())
    assert [c.fixture_count for c in circuits] == [20, 20, 5]
    flattened = [fid for c in circuits for fid in c.fixture_ids]
    assert flattened == [f.id for f in fixtures]


def test_circuits_are_a_partition(led_fixtures):
    circuits = partition_circuits(led_fixtures, CircuitCatalog(max_fixtures_per_circuit=7))
    assert sum(c.fixture_count for c in circuits) == len(led_fixtures)
    seen = set()
    for circuit in circuits:
        ids = set(circuit.fixture_ids)
        assert not ids & seen
        seen |= ids
    assert seen == {f.id for f in led_fixtures}


def test_phases_rotate(led_fixtures):
    circuits = partition_circuits(led_fixtures, CircuitCatalog())
    assert [c.phase for c in circuits] == ["A", "B", "C", "A"]


def test_breaker_selection_uses_smallest_fit():
    catalog = CircuitCatalog()
    assert select_breaker(46.57, catalog) == 60
    assert select_breaker(10.0, catalog) == 15
    assert select_breaker(13.0, catalog) == 20


def test_breaker_catalog_exhausted_raises(led_fixtures):
    catalog = CircuitCatalog(breaker_sizes=(15, 20))
    with pytest.raises(SizingError) as excinfo:
        partition_circuits(led_fixtures, catalog)
    assert excinfo.value.entity == "C-01"


def test_wire_respects_small_conductor_limits():
    catalog = CircuitCatalog()
    assert select_wire(15, catalog) == "14 AWG"
    assert select_wire(20, catalog) == "12 AWG"
    assert select_wire(30, catalog) == "10 AWG"
    assert select_wire(60, catalog) == "6 AWG"


def test_wire_insulation_class_changes_selection():
    assert select_wire(70, CircuitCatalog(insulation_class="75C")) == "4 AWG"
    assert select_wire(70, CircuitCatalog(insulation_class="90C")) == "6 AWG"


def test_wire_table_exhausted_raises():
    with pytest.raises(SizingError):
        select_wire(400, CircuitCatalog())


def test_missing_conduit_entry_raises():
    with pytest.raises(SizingError):
        select_conduit("500 kcmil", CircuitCatalog())


def test_chunking_rejects_zero_capacity(led_fixtures):
    with pytest.raises(ValueError):
        chunk_fixtures(led_fixtures, 0)


def test_panel_summary(led_fixtures):
    catalog = CircuitCatalog()
    circuits = partition_circuits(led_fixtures, catalog)
    panel = summarize_panel(circuits, catalog)
    assert panel.circuit_count == 4
    assert panel.connected_load_kw == pytest.approx(51.6)
    assert panel.phase_load_amps["A"] == pytest.approx(2 * circuits[0].continuous_load_amps)
    assert panel.phase_load_amps["B"] == pytest.approx(circuits[1].continuous_load_amps)
    assert panel.phase_imbalance == pytest.approx(3 / 4)


def test_partition_is_deterministic(led_fixtures):
    catalog = CircuitCatalog()
    assert partition_circuits(led_fixtures, catalog) == partition_circuits(led_fixtures, catalog)


def test_panel_phase_loads_are_read_only(led_fixtures):
    catalog = CircuitCatalog()
    panel = summarize_panel(partition_circuits(led_fixtures, catalog), catalog)
    with pytest.raises(TypeError):
        panel.phase_load_amps["A"] = 0.0  # type: ignore[index]


def test_custom_conduit_table_is_used():
    catalog = CircuitCatalog(conduit_sizes=(("6 AWG", "1 in"),))
    assert select_conduit("6 AWG", catalog) == "1 in"
    with pytest.raises(SizingError):
        select_conduit("12 AWG", catalog)
