from __future__ import annotations

import math
from types import MappingProxyType
from typing import List, Optional

from horti_engine.core.models import (
    EngineError,
    FinancialScenario,
    Payback,
    PaybackValue,
    SystemSpec,
    ValidationError,
)
from horti_engine.logging_config import get_logger

DAYS_PER_YEAR = 365
logger = get_logger(__name__)


def annual_energy_kwh(spec: SystemSpec, hours_per_day: float) -> float:
    return spec.total_watts / 1000.0 * hours_per_day * DAYS_PER_YEAR


def annual_energy_cost(spec: SystemSpec, hours_per_day: float, tariff: float) -> float:
    return annual_energy_kwh(spec, hours_per_day) * tariff


def annual_operating_cost(
    spec: SystemSpec,
    hours_per_day: float,
    tariff: float,
    hvac_load_factor: float = 0.0,
) -> float:
    """Energy (plus the cooling it induces), maintenance labor and re-lamping."""
    energy = annual_energy_cost(spec, hours_per_day, tariff)
    return (
        energy * (1.0 + hvac_load_factor)
        + spec.annual_maintenance_cost
        + spec.annual_lamp_replacement_cost
    )


def payback_years(capital_cost: float, annual_savings: float) -> PaybackValue:
    """Years to recover ``capital_cost``; ``Payback.NEVER`` when savings are not positive."""
    if annual_savings <= 0 or not math.isfinite(annual_savings):
        return Payback.NEVER
    return max(capital_cost, 0.0) / annual_savings


def cumulative_cash_flow(capital_cost: float, annual_savings: float, years: int) -> List[float]:
    series = [-capital_cost]
    for _ in range(years):
        series.append(series[-1] + annual_savings)
    return series


def _roi_percent(capital_cost: float, annual_savings: float, years: int) -> Optional[float]:
    if capital_cost <= 0:
        return None
    return (annual_savings * years - capital_cost) / capital_cost * 100.0


def _validate_inputs(tariff: float, hours_per_day: float, years: int, hvac_load_factor: float) -> None:
    if not math.isfinite(tariff) or tariff < 0:
        raise ValidationError(f"tariff must be non-negative, got {tariff}", entity="tariff")
    if not 0 < hours_per_day <= 24:
        raise ValidationError(
            f"hours per day must be in (0, 24], got {hours_per_day}", entity="photoperiod"
        )
    if years < 0:
        raise ValidationError(f"cash flow horizon must be non-negative, got {years}", entity="years")
    if not math.isfinite(hvac_load_factor) or hvac_load_factor < 0:
        raise ValidationError("hvac_load_factor must be non-negative", entity="hvac_load_factor")


def _validate_system(spec: SystemSpec) -> None:
    for name in (
        "watts_per_fixture",
        "capital_cost",
        "annual_maintenance_cost",
        "annual_lamp_replacement_cost",
    ):
        value = getattr(spec, name)
        if not math.isfinite(value) or value < 0:
            raise ValidationError(f"{name} must be non-negative, got {value}", entity=f"system {spec.label}")
    if spec.fixture_count < 0:
        raise ValidationError("fixture_count must be non-negative", entity=f"system {spec.label}")


def compare_systems(
    baseline: SystemSpec,
    proposed: SystemSpec,
    tariff: float,
    hours_per_day: float,
    years: int = 10,
    hvac_load_factor: float = 0.0,
) -> FinancialScenario:
    """
    Compare the yearly cost of running ``baseline`` against ``proposed`` and
    work out how long the proposed capital cost takes to pay back.
    """
    logger.info(
        "Comparing %s vs %s | tariff=%.4f hours=%.1f years=%d",
        baseline.label,
        proposed.label,
        tariff,
        hours_per_day,
        years,
    )
    try:
        _validate_inputs(tariff, hours_per_day, years, hvac_load_factor)
        _validate_system(baseline)
        _validate_system(proposed)

        systems = {"baseline": baseline, "proposed": proposed}
        energy_kwh = {key: annual_energy_kwh(spec, hours_per_day) for key, spec in systems.items()}
        energy_cost = {
            key: annual_energy_cost(spec, hours_per_day, tariff) for key, spec in systems.items()
        }
        operating = {
            key: annual_operating_cost(spec, hours_per_day, tariff, hvac_load_factor)
            for key, spec in systems.items()
        }
        savings = operating["baseline"] - operating["proposed"]
        payback = payback_years(proposed.capital_cost, savings)

        scenario = FinancialScenario(
            baseline=baseline,
            proposed=proposed,
            tariff=tariff,
            photoperiod_hours=hours_per_day,
            annual_energy_kwh=MappingProxyType(energy_kwh),
            annual_energy_cost=MappingProxyType(energy_cost),
            annual_operating_cost=MappingProxyType(operating),
            annual_savings=savings,
            energy_savings_kwh=energy_kwh["baseline"] - energy_kwh["proposed"],
            payback_years=payback,
            cash_flow=tuple(cumulative_cash_flow(proposed.capital_cost, savings, years)),
            roi_percent=_roi_percent(proposed.capital_cost, savings, years),
        )
        logger.info(
            "Financial comparison: savings=%.2f/yr payback=%s",
            savings,
            payback if payback is Payback.NEVER else f"{payback:.2f} years",
        )
        return scenario
    except EngineError:
        raise
    except Exception:
        logger.exception("Financial comparison failed for %s vs %s", baseline.label, proposed.label)
        raise
