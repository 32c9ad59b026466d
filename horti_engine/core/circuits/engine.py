from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Sequence, Tuple

from horti_engine.core.models import (
    Circuit,
    CircuitCatalog,
    EngineError,
    Fixture,
    PanelSummary,
    SizingError,
    ValidationError,
)
from horti_engine.logging_config import get_logger

logger = get_logger(__name__)


def chunk_fixtures(fixtures: Sequence[Fixture], max_per_circuit: int) -> List[Tuple[Fixture, ...]]:
    """
    Greedy split in caller order: circuit k takes fixtures [k*max, (k+1)*max),
    the last circuit takes the remainder.
    """
    if max_per_circuit < 1:
        raise ValidationError("max_fixtures_per_circuit must be at least 1", entity="catalog")
    ordered = tuple(fixtures)
    return [ordered[i : i + max_per_circuit] for i in range(0, len(ordered), max_per_circuit)]


def continuous_load_amps(load_watts: float, voltage: float) -> float:
    return load_watts / voltage


def select_breaker(current_amps: float, catalog: CircuitCatalog, circuit_id: str = "circuit") -> float:
    """Smallest standard breaker B with current <= duty_factor * B."""
    factor = catalog.continuous_duty_factor
    for size in sorted(catalog.breaker_sizes):
        if current_amps <= factor * size:
            return float(size)
    raise SizingError(
        f"no breaker in catalog (max {max(catalog.breaker_sizes)} A) carries "
        f"{current_amps:.2f} A at {factor:.0%} continuous duty",
        entity=circuit_id,
    )


def select_wire(breaker_amps: float, catalog: CircuitCatalog, circuit_id: str = "circuit") -> str:
    """Smallest conductor whose ampacity covers the breaker rating."""
    for gauge, ampacity in catalog.ampacity_table():
        limit = catalog.small_conductor_limit(gauge)
        if limit is not None:
            ampacity = min(ampacity, limit)
        if ampacity >= breaker_amps:
            return gauge
    raise SizingError(
        f"no {catalog.insulation_class} conductor is rated for a {breaker_amps:g} A breaker",
        entity=circuit_id,
    )


def select_conduit(wire_gauge: str, catalog: CircuitCatalog, circuit_id: str = "circuit") -> str:
    size = catalog.conduit_for(wire_gauge)
    if size is None:
        raise SizingError(f"no conduit size listed for {wire_gauge}", entity=circuit_id)
    return size


def size_circuit(
    circuit_id: str,
    fixtures: Sequence[Fixture],
    catalog: CircuitCatalog,
    phase: str,
) -> Circuit:
    load_watts = float(sum(f.wattage for f in fixtures))
    current = continuous_load_amps(load_watts, catalog.voltage)
    breaker = select_breaker(current, catalog, circuit_id)
    wire = select_wire(breaker, catalog, circuit_id)
    conduit = select_conduit(wire, catalog, circuit_id)
    return Circuit(
        id=circuit_id,
        fixture_ids=tuple(f.id for f in fixtures),
        load_watts=load_watts,
        continuous_load_amps=current,
        breaker_amps=breaker,
        wire_gauge=wire,
        conduit_size=conduit,
        phase=phase,
    )


def partition_circuits(fixtures: Sequence[Fixture], catalog: CircuitCatalog) -> List[Circuit]:
    """
    Group fixtures into lighting branch circuits and size each one.

    Phases are assigned round-robin so consecutive circuits land on
    different legs of the panel.
    """
    logger.info(
        "Partitioning %d fixtures | max_per_circuit=%d voltage=%.0f",
        len(fixtures),
        catalog.max_fixtures_per_circuit,
        catalog.voltage,
    )
    try:
        groups = chunk_fixtures(fixtures, int(catalog.max_fixtures_per_circuit))
        circuits = [
            size_circuit(
                f"C-{index + 1:02d}",
                group,
                catalog,
                catalog.phases[index % len(catalog.phases)],
            )
            for index, group in enumerate(groups)
        ]
        logger.info(
            "Partitioned into %d circuits | breakers=%s",
            len(circuits),
            sorted({c.breaker_amps for c in circuits}),
        )
        return circuits
    except EngineError:
        raise
    except Exception:
        logger.exception("Circuit partitioning failed")
        raise


def summarize_panel(circuits: Sequence[Circuit], catalog: CircuitCatalog) -> PanelSummary:
    phase_load: Dict[str, float] = {phase: 0.0 for phase in catalog.phases}
    for circuit in circuits:
        phase_load[circuit.phase] = phase_load.get(circuit.phase, 0.0) + circuit.continuous_load_amps

    loads = list(phase_load.values())
    mean_load = sum(loads) / len(loads) if loads else 0.0
    imbalance = (max(loads) - min(loads)) / mean_load if mean_load > 0 else 0.0
    return PanelSummary(
        circuit_count=len(circuits),
        connected_load_kw=sum(c.load_watts for c in circuits) / 1000.0,
        phase_load_amps=MappingProxyType(phase_load),
        phase_imbalance=imbalance,
    )
