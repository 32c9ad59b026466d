from __future__ import annotations

import pytest

from horti_engine.core.models import EngineConfig, FacilitySpec, Fixture, Room, SystemSpec
from horti_engine.scripts.smoke_pipeline import build_boundary_cone_spec, grid_layout


@pytest.fixture
def boundary_cone_spec() -> FacilitySpec:
    return build_boundary_cone_spec()


@pytest.fixture
def led_fixtures() -> list[Fixture]:
    return grid_layout(2, 64, 2, 20, 4, mounting_height=8, ppf=1700, wattage=645)


@pytest.fixture
def bench_spec() -> FacilitySpec:
    fixtures = (
        Fixture(id="a", x=1.0, y=1.0, mounting_height=1.0, ppf=1000.0, wattage=400.0),
        Fixture(id="b", x=3.0, y=1.0, mounting_height=1.0, ppf=1000.0, wattage=400.0),
    )
    return FacilitySpec(
        name="bench",
        room=Room(length=4.0, width=2.0, height=3.0),
        fixtures=fixtures,
        baseline=SystemSpec(label="HPS", fixture_count=2, watts_per_fixture=600.0),
        capital_cost=1500.0,
        config=EngineConfig(units="m", resolution=0.5, photoperiod_hours=18.0),
    )
