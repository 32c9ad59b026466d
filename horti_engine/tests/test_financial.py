from __future__ import annotations

import math

import pytest

from horti_engine.core.financial.engine import (
    annual_energy_cost,
    compare_systems,
    cumulative_cash_flow,
    payback_years,
)
from horti_engine.core.models import Payback, SystemSpec, ValidationError

HPS = SystemSpec(label="HPS", fixture_count=59, watts_per_fixture=1000)
LED = SystemSpec(label="LED", fixture_count=80, watts_per_fixture=645, capital_cost=100_000)


def test_hps_to_led_has_finite_payback():
    scenario = compare_systems(HPS, LED, tariff=0.12, hours_per_day=12)
    assert scenario.annual_energy_cost["baseline"] == pytest.approx(31_010.40)
    assert scenario.annual_energy_cost["proposed"] == pytest.approx(27_120.96)
    assert scenario.annual_energy_kwh["baseline"] == pytest.approx(258_420)
    assert scenario.energy_savings_kwh == pytest.approx(32_412)
    assert scenario.annual_savings == pytest.approx(3_889.44)
    assert scenario.breaks_even
    assert scenario.payback_years == pytest.approx(100_000 / 3_889.44)
    assert scenario.payback_years > 0


def test_operating_costs_include_cooling_and_relamping():
    baseline = SystemSpec(
        label="HPS",
        fixture_count=59,
        watts_per_fixture=1000,
        annual_maintenance_cost=2400,
        annual_lamp_replacement_cost=59 * 150,
    )
    proposed = SystemSpec(
        label="LED",
        fixture_count=80,
        watts_per_fixture=645,
        capital_cost=136_920,
        annual_maintenance_cost=600,
    )
    scenario = compare_systems(baseline, proposed, 0.12, 12, hvac_load_factor=0.30)
    assert scenario.annual_operating_cost["baseline"] == pytest.approx(51_563.52)
    assert scenario.annual_operating_cost["proposed"] == pytest.approx(35_857.25, abs=0.01)
    assert scenario.annual_savings == pytest.approx(15_706.27, abs=0.01)


def test_identical_systems_never_break_even():
    same = SystemSpec(label="LED", fixture_count=80, watts_per_fixture=645, capital_cost=50_000)
    scenario = compare_systems(same, same, tariff=0.12, hours_per_day=12)
    assert scenario.annual_savings == 0
    assert scenario.payback_years is Payback.NEVER
    assert not scenario.breaks_even
    assert str(scenario.payback_years) == "never"


def test_more_expensive_proposal_never_breaks_even():
    scenario = compare_systems(LED, HPS, tariff=0.12, hours_per_day=12)
    assert scenario.annual_savings < 0
    assert scenario.payback_years is Payback.NEVER


@pytest.mark.parametrize("savings", [-10.0, 0.0, float("nan")])
def test_payback_sentinel_for_non_positive_savings(savings):
    assert payback_years(1000.0, savings) is Payback.NEVER


def test_payback_is_never_negative_or_nan():
    for capital in (0.0, 10.0, 1e6):
        for savings in (0.01, 1.0, 5000.0):
            value = payback_years(capital, savings)
            assert not math.isnan(value)
            assert value >= 0


def test_zero_capital_pays_back_immediately():
    free = SystemSpec(label="LED", fixture_count=80, watts_per_fixture=645)
    scenario = compare_systems(HPS, free, 0.12, 12)
    assert scenario.payback_years == 0.0
    assert scenario.roi_percent is None


def test_cash_flow_series():
    scenario = compare_systems(HPS, LED, 0.12, 12, years=5)
    assert len(scenario.cash_flow) == 6
    assert scenario.cash_flow[0] == -100_000
    assert scenario.cash_flow[-1] == pytest.approx(-100_000 + 5 * scenario.annual_savings)
    assert scenario.roi_percent == pytest.approx(
        (5 * scenario.annual_savings - 100_000) / 100_000 * 100
    )


def test_cumulative_cash_flow_helper():
    assert cumulative_cash_flow(100.0, 40.0, 3) == [-100.0, -60.0, -20.0, 20.0]
    assert cumulative_cash_flow(100.0, 40.0, 0) == [-100.0]


def test_energy_cost_helper():
    assert annual_energy_cost(LED, 12, 0.12) == pytest.approx(51.6 * 12 * 365 * 0.12)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tariff": -0.1, "hours_per_day": 12},
        {"tariff": 0.1, "hours_per_day": 0},
        {"tariff": 0.1, "hours_per_day": 25},
        {"tariff": 0.1, "hours_per_day": 12, "years": -1},
        {"tariff": 0.1, "hours_per_day": 12, "hvac_load_factor": float("nan")},
        {"tariff": 0.1, "hours_per_day": 12, "hvac_load_factor": -0.1},
    ],
)
def test_invalid_inputs_rejected(kwargs):
    with pytest.raises(ValidationError):
        compare_systems(HPS, LED, **kwargs)


def test_negative_system_cost_rejected():
    bad = SystemSpec(label="LED", fixture_count=80, watts_per_fixture=645, capital_cost=-1)
    with pytest.raises(ValidationError):
        compare_systems(HPS, bad, 0.12, 12)


def test_cost_tables_are_read_only():
    scenario = compare_systems(HPS, LED, tariff=0.12, hours_per_day=12)
    with pytest.raises(TypeError):
        scenario.annual_operating_cost["proposed"] = 0.0  # type: ignore[index]
