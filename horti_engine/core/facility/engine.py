from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from horti_engine.core.models import (
    CircuitCatalog,
    EngineConfig,
    FacilitySnapshot,
    FacilitySpec,
    Fixture,
    Room,
    SystemSpec,
    ValidationError,
)
from horti_engine.logging_config import get_logger

logger = get_logger(__name__)


def _require_positive(value: float, name: str, entity: str) -> float:
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{name} must be positive, got {value!r}", entity=entity)
    return number


def _require_non_negative(value: float, name: str, entity: str) -> float:
    number = float(value)
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{name} must be non-negative, got {value!r}", entity=entity)
    return number


def validate_room(room: Room) -> Room:
    return Room(
        length=_require_positive(room.length, "length", "room"),
        width=_require_positive(room.width, "width", "room"),
        height=_require_positive(room.height, "height", "room"),
    )


def validate_fixture(fixture: Fixture) -> Fixture:
    entity = f"fixture {fixture.id}"
    x = float(fixture.x)
    y = float(fixture.y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValidationError("position must be finite", entity=entity)
    return Fixture(
        id=str(fixture.id),
        x=x,
        y=y,
        mounting_height=_require_positive(fixture.mounting_height, "mounting_height", entity),
        ppf=_require_non_negative(fixture.ppf, "ppf", entity),
        wattage=_require_positive(fixture.wattage, "wattage", entity),
        model=fixture.model,
    )


def validate_system(system: SystemSpec) -> SystemSpec:
    entity = f"system {system.label}"
    if int(system.fixture_count) != system.fixture_count or system.fixture_count < 0:
        raise ValidationError("fixture_count must be a non-negative integer", entity=entity)
    return SystemSpec(
        label=system.label,
        fixture_count=int(system.fixture_count),
        watts_per_fixture=_require_non_negative(system.watts_per_fixture, "watts_per_fixture", entity),
        capital_cost=_require_non_negative(system.capital_cost, "capital_cost", entity),
        annual_maintenance_cost=_require_non_negative(
            system.annual_maintenance_cost, "annual_maintenance_cost", entity
        ),
        annual_lamp_replacement_cost=_require_non_negative(
            system.annual_lamp_replacement_cost, "annual_lamp_replacement_cost", entity
        ),
    )


def validate_config(config: EngineConfig) -> EngineConfig:
    if config.units not in ("ft", "m"):
        raise ValidationError(f"units must be 'ft' or 'm', got {config.units!r}", entity="config")
    _require_positive(config.k_factor, "conversion_factor", "config")
    _require_positive(config.resolution, "resolution", "config")
    hours = float(config.photoperiod_hours)
    if not 0 < hours <= 24:
        raise ValidationError(f"photoperiod_hours must be in (0, 24], got {hours}", entity="config")
    _require_non_negative(config.tariff_per_kwh, "tariff_per_kwh", "config")
    if not 0 <= config.cutoff_fraction < 1:
        raise ValidationError("cutoff_fraction must be in [0, 1)", entity="config")
    if int(config.workers) < 1:
        raise ValidationError("workers must be at least 1", entity="config")
    _require_non_negative(config.hvac_load_factor, "hvac_load_factor", "config")
    if int(config.cash_flow_years) < 0:
        raise ValidationError("cash_flow_years must be non-negative", entity="config")
    if not math.isfinite(float(config.canopy_height)):
        raise ValidationError("canopy_height must be finite", entity="config")
    return config


def validate_catalog(catalog: CircuitCatalog) -> CircuitCatalog:
    _require_positive(catalog.voltage, "voltage", "catalog")
    if int(catalog.max_fixtures_per_circuit) < 1:
        raise ValidationError("max_fixtures_per_circuit must be at least 1", entity="catalog")
    factor = float(catalog.continuous_duty_factor)
    if not 0 < factor <= 1:
        raise ValidationError("continuous_duty_factor must be in (0, 1]", entity="catalog")
    if not catalog.breaker_sizes:
        raise ValidationError("breaker_sizes must not be empty", entity="catalog")
    if not catalog.ampacity_table():
        raise ValidationError(
            f"no conductor ampacity table for insulation class {catalog.insulation_class!r}",
            entity="catalog",
        )
    if not catalog.phases:
        raise ValidationError("phases must not be empty", entity="catalog")
    return replace(
        catalog,
        breaker_sizes=tuple(catalog.breaker_sizes),
        wire_ampacity=tuple(tuple(row) for row in catalog.wire_ampacity)
        if catalog.wire_ampacity is not None
        else None,
        conduit_sizes=tuple(dict(catalog.conduit_sizes).items()),
        small_conductor_limits=tuple(dict(catalog.small_conductor_limits).items()),
        phases=tuple(catalog.phases),
    )


def build_canopy_polygon(vertices: Optional[Sequence[Sequence[float]]]) -> Optional[Polygon]:
    if vertices is None:
        return None
    points = [(float(x), float(y)) for x, y in vertices]
    if len(points) < 3:
        raise ValidationError("canopy polygon needs at least 3 vertices", entity="canopy")
    polygon = Polygon(points)
    if polygon.is_empty or not polygon.is_valid or polygon.area <= 0:
        raise ValidationError("canopy polygon is not a valid simple polygon", entity="canopy")
    return polygon


def placement_warnings(room: Room, fixtures: Sequence[Fixture]) -> List[str]:
    warnings: List[str] = []
    for fixture in fixtures:
        if 0 <= fixture.x <= room.length and 0 <= fixture.y <= room.width:
            continue
        warnings.append(
            f"fixture {fixture.id} at ({fixture.x:g}, {fixture.y:g}) lies outside "
            f"the {room.length:g} x {room.width:g} room footprint"
        )
    return warnings


def validate_facility(spec: FacilitySpec) -> FacilitySnapshot:
    """
    Validate and normalize a facility request into an immutable snapshot.

    Geometry and configuration errors raise ``ValidationError``; a fixture hung
    outside the room footprint is only recorded as a warning since real
    installations may overhang structural edges.
    """
    room = validate_room(spec.room)
    config = validate_config(spec.config)
    catalog = validate_catalog(spec.catalog)

    fixtures: Tuple[Fixture, ...] = tuple(validate_fixture(f) for f in spec.fixtures)
    if not fixtures:
        raise ValidationError("at least one fixture is required", entity=spec.name)
    seen = set()
    for fixture in fixtures:
        if fixture.id in seen:
            raise ValidationError("duplicate fixture id", entity=f"fixture {fixture.id}")
        seen.add(fixture.id)
        if fixture.mounting_height <= config.canopy_height:
            raise ValidationError(
                f"mounting_height {fixture.mounting_height:g} must exceed canopy_height "
                f"{config.canopy_height:g}",
                entity=f"fixture {fixture.id}",
            )

    baseline = validate_system(spec.baseline)
    _require_non_negative(spec.capital_cost, "capital_cost", spec.name)
    _require_non_negative(spec.annual_maintenance_cost, "annual_maintenance_cost", spec.name)
    canopy_polygon = build_canopy_polygon(spec.canopy)

    warnings = placement_warnings(room, fixtures)
    for message in warnings:
        logger.warning("Placement warning for %s: %s", spec.name, message)

    normalized = replace(
        spec,
        room=room,
        fixtures=fixtures,
        baseline=baseline,
        capital_cost=float(spec.capital_cost),
        annual_maintenance_cost=float(spec.annual_maintenance_cost),
        canopy=tuple(tuple(point) for point in canopy_polygon.exterior.coords[:-1])
        if canopy_polygon is not None
        else None,
        catalog=catalog,
        config=config,
    )
    logger.debug(
        "Validated facility %s | fixtures=%d area=%.1f warnings=%d",
        spec.name,
        len(fixtures),
        room.area,
        len(warnings),
    )
    return FacilitySnapshot(spec=normalized, warnings=tuple(warnings), canopy_polygon=canopy_polygon)
