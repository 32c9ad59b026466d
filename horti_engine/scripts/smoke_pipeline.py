from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Dict, List

from horti_engine.core.models import (
    DesignResult,
    EngineConfig,
    FacilitySpec,
    Fixture,
    Payback,
    Room,
    SystemSpec,
)
from horti_engine.core.pipeline import run_design


def grid_layout(
    x_start: float,
    x_stop: float,
    y_start: float,
    y_stop: float,
    pitch: float,
    mounting_height: float,
    ppf: float,
    wattage: float,
    model: str | None = None,
) -> List[Fixture]:
    """Fixtures on a regular pitch, numbered column by column."""
    fixtures: List[Fixture] = []
    x = x_start
    while x <= x_stop:
        y = y_start
        while y <= y_stop:
            fixtures.append(
                Fixture(
                    id=f"fixture-{len(fixtures) + 1}",
                    x=x,
                    y=y,
                    mounting_height=mounting_height,
                    ppf=ppf,
                    wattage=wattage,
                    model=model,
                )
            )
            y += pitch
        x += pitch
    return fixtures


def build_boundary_cone_spec() -> FacilitySpec:
    """66 x 22 ft flower room re-lit with 80 LED bars replacing 59 HPS lamps."""
    fixtures = grid_layout(2, 64, 2, 20, 4, mounting_height=8, ppf=1700, wattage=645, model="SPYDR 2p")
    baseline = SystemSpec(
        label="HPS 1000W",
        fixture_count=59,
        watts_per_fixture=1000,
        annual_maintenance_cost=2400,
        annual_lamp_replacement_cost=59 * 150,
    )
    return FacilitySpec(
        name="boundary_cone",
        room=Room(length=66, width=22, height=12),
        fixtures=tuple(fixtures),
        baseline=baseline,
        capital_cost=80 * 1499 + 80 * 150 + 5000,
        annual_maintenance_cost=600,
        config=EngineConfig(resolution=1.0, photoperiod_hours=12, tariff_per_kwh=0.12),
    )


def build_small_bench_spec() -> FacilitySpec:
    fixtures = grid_layout(1, 3, 1, 3, 2, mounting_height=2, ppf=1100, wattage=400)
    return FacilitySpec(
        name="small_bench",
        room=Room(length=4, width=4, height=8),
        fixtures=tuple(fixtures),
        baseline=SystemSpec(label="HPS 600W", fixture_count=4, watts_per_fixture=600),
        capital_cost=4 * 900,
        config=EngineConfig(resolution=0.5, photoperiod_hours=18, tariff_per_kwh=0.15),
    )


def run_pipeline(spec: FacilitySpec) -> Dict[str, object]:
    result = run_design(spec)
    return {"spec": spec, "result": result}


def summarize_outputs(label: str, outputs: Dict[str, object]) -> None:
    result: DesignResult = outputs["result"]  # type: ignore[assignment]
    metrics = result.metrics
    financial = result.financial

    print(f"=== Horti Engine Reference Scenario: {label} ===")
    print("-- Photometrics --")
    print(
        f"avg_ppfd={metrics.avg_ppfd:.1f} min_ppfd={metrics.min_ppfd:.1f} max_ppfd={metrics.max_ppfd:.1f} "
        f"uniformity={metrics.uniformity:.3f} dli={metrics.dli:.2f} efficacy={metrics.efficacy:.2f}"
    )
    print("-- Circuits --")
    for circuit in result.circuits:
        print(
            f"{circuit.id} phase={circuit.phase} fixtures={circuit.fixture_count} "
            f"load={circuit.continuous_load_amps:.2f}A breaker={circuit.breaker_amps:g}A "
            f"wire={circuit.wire_gauge} conduit={circuit.conduit_size}"
        )
    print(f"connected_load_kw={result.panel.connected_load_kw:.2f}")
    print("-- Financial --")
    payback = financial.payback_years
    payback_text = "never" if payback is Payback.NEVER else f"{payback:.2f} years"
    print(
        f"baseline_cost={financial.annual_operating_cost['baseline']:.2f} "
        f"proposed_cost={financial.annual_operating_cost['proposed']:.2f} "
        f"savings={financial.annual_savings:.2f} payback={payback_text}"
    )
    for warning in result.warnings:
        print(f"warning: {warning}")


@dataclass(frozen=True)
class ScenarioDefinition:
    builder: Callable[[], FacilitySpec]


SCENARIOS: Dict[str, ScenarioDefinition] = {
    "boundary_cone": ScenarioDefinition(build_boundary_cone_spec),
    "small": ScenarioDefinition(build_small_bench_spec),
}


def run_named_scenario(name: str, summarize: bool = True) -> Dict[str, object]:
    key = name.lower()
    definition = SCENARIOS.get(key)
    if not definition:
        raise KeyError(f"Unknown scenario '{name}'")
    outputs = run_pipeline(definition.builder())
    if summarize:
        summarize_outputs(key, outputs)
    return outputs


def main(argv: list[str] | None = None) -> None:
    args = argv if argv is not None else sys.argv[1:]
    scenario = args[0].lower() if args else "boundary_cone"
    if scenario not in SCENARIOS:
        print(f"Unknown scenario '{scenario}'. Available: {', '.join(SCENARIOS)}")
        scenario = "boundary_cone"
    run_named_scenario(scenario)


if __name__ == "__main__":
    main()
