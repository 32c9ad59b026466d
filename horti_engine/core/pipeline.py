from __future__ import annotations

from typing import Sequence

from horti_engine.core.circuits.engine import partition_circuits, summarize_panel
from horti_engine.core.facility.engine import validate_facility
from horti_engine.core.financial.engine import compare_systems
from horti_engine.core.metrics.engine import compute_metrics
from horti_engine.core.models import (
    DesignResult,
    EngineError,
    FacilitySnapshot,
    FacilitySpec,
    Fixture,
    SystemSpec,
)
from horti_engine.core.photometry.engine import compute_ppfd_grid
from horti_engine.logging_config import get_logger

logger = get_logger(__name__)


def proposed_system(
    fixtures: Sequence[Fixture],
    capital_cost: float,
    annual_maintenance_cost: float,
    label: str = "proposed",
) -> SystemSpec:
    """Describe the laid-out fixtures as a SystemSpec with their mean wattage."""
    count = len(fixtures)
    mean_watts = sum(f.wattage for f in fixtures) / count if count else 0.0
    return SystemSpec(
        label=label,
        fixture_count=count,
        watts_per_fixture=mean_watts,
        capital_cost=capital_cost,
        annual_maintenance_cost=annual_maintenance_cost,
    )


def design_from_snapshot(snapshot: FacilitySnapshot) -> DesignResult:
    spec = snapshot.spec
    config = snapshot.config
    grid = compute_ppfd_grid(snapshot)
    metrics = compute_metrics(grid, snapshot.fixtures, config.photoperiod_hours)
    circuits = partition_circuits(snapshot.fixtures, snapshot.catalog)
    panel = summarize_panel(circuits, snapshot.catalog)
    financial = compare_systems(
        spec.baseline,
        proposed_system(snapshot.fixtures, spec.capital_cost, spec.annual_maintenance_cost),
        tariff=config.tariff_per_kwh,
        hours_per_day=config.photoperiod_hours,
        years=int(config.cash_flow_years),
        hvac_load_factor=config.hvac_load_factor,
    )
    return DesignResult(
        facility=snapshot,
        grid=grid,
        metrics=metrics,
        circuits=tuple(circuits),
        panel=panel,
        financial=financial,
        warnings=snapshot.warnings,
    )


def run_design(spec: FacilitySpec) -> DesignResult:
    """
    Run the full photometric, electrical and financial pipeline for one facility.
    """
    logger.info("Running design for %s | fixtures=%d", spec.name, len(spec.fixtures))
    try:
        snapshot = validate_facility(spec)
        result = design_from_snapshot(snapshot)
        logger.info(
            "Design complete for %s: avg_ppfd=%.1f uniformity=%.3f circuits=%d payback=%s",
            spec.name,
            result.metrics.avg_ppfd,
            result.metrics.uniformity,
            len(result.circuits),
            result.financial.payback_years,
        )
        return result
    except EngineError:
        raise
    except Exception:
        logger.exception("Design pipeline failed for %s", spec.name)
        raise
