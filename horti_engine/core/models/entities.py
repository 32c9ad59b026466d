from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

import numpy as np

from horti_engine.core.models.catalog import (
    CONTINUOUS_DUTY_FACTOR,
    DEFAULT_BREAKER_SIZES_A,
    DEFAULT_CONDUIT_SIZES,
    DEFAULT_INSULATION_CLASS,
    DEFAULT_MAX_FIXTURES_PER_CIRCUIT,
    DEFAULT_PHASES,
    DEFAULT_VOLTAGE,
    FEET_TO_METERS_AREA,
    SMALL_CONDUCTOR_LIMITS,
    WIRE_AMPACITY_COPPER,
)


@dataclass(frozen=True)
class Room:
    """Rectangular grow room; all dimensions share the facility unit system."""

    length: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.length * self.width


@dataclass(frozen=True)
class Fixture:
    """Isotropic point source hung above the canopy."""

    id: str
    x: float
    y: float
    mounting_height: float
    ppf: float
    wattage: float
    model: Optional[str] = None


@dataclass(frozen=True)
class SystemSpec:
    """One lighting system in a financial comparison."""

    label: str
    fixture_count: int
    watts_per_fixture: float
    capital_cost: float = 0.0
    annual_maintenance_cost: float = 0.0
    annual_lamp_replacement_cost: float = 0.0

    @property
    def total_watts(self) -> float:
        return self.fixture_count * self.watts_per_fixture


@dataclass(frozen=True)
class CircuitCatalog:
    """Branch circuit rules and the breaker/conductor/conduit tables to size against."""

    voltage: float = DEFAULT_VOLTAGE
    max_fixtures_per_circuit: int = DEFAULT_MAX_FIXTURES_PER_CIRCUIT
    continuous_duty_factor: float = CONTINUOUS_DUTY_FACTOR
    breaker_sizes: Tuple[float, ...] = DEFAULT_BREAKER_SIZES_A
    insulation_class: str = DEFAULT_INSULATION_CLASS
    wire_ampacity: Optional[Tuple[Tuple[str, float], ...]] = None
    conduit_sizes: Tuple[Tuple[str, str], ...] = tuple(DEFAULT_CONDUIT_SIZES.items())
    small_conductor_limits: Tuple[Tuple[str, float], ...] = tuple(SMALL_CONDUCTOR_LIMITS.items())
    phases: Tuple[str, ...] = DEFAULT_PHASES

    def ampacity_table(self) -> Tuple[Tuple[str, float], ...]:
        if self.wire_ampacity is not None:
            return tuple(self.wire_ampacity)
        return WIRE_AMPACITY_COPPER.get(self.insulation_class, ())

    def conduit_for(self, gauge: str) -> Optional[str]:
        return dict(self.conduit_sizes).get(gauge)

    def small_conductor_limit(self, gauge: str) -> Optional[float]:
        return dict(self.small_conductor_limits).get(gauge)


@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants injected into every calculation."""

    units: str = "ft"
    conversion_factor: Optional[float] = None
    resolution: float = 1.0
    photoperiod_hours: float = 12.0
    tariff_per_kwh: float = 0.12
    cutoff_fraction: float = 0.0
    workers: int = 1
    canopy_height: float = 0.0
    hvac_load_factor: float = 0.0
    cash_flow_years: int = 10

    @property
    def k_factor(self) -> float:
        if self.conversion_factor is not None:
            return self.conversion_factor
        return FEET_TO_METERS_AREA if self.units == "ft" else 1.0

    @classmethod
    def for_units(cls, units: str, **overrides: Any) -> "EngineConfig":
        return cls(units=units, **overrides)


@dataclass(frozen=True)
class FacilitySpec:
    """Top level request that drives a single design calculation."""

    name: str
    room: Room
    fixtures: Tuple[Fixture, ...]
    baseline: SystemSpec
    capital_cost: float = 0.0
    annual_maintenance_cost: float = 0.0
    canopy: Optional[Tuple[Tuple[float, float], ...]] = None
    catalog: CircuitCatalog = field(default_factory=CircuitCatalog)
    config: EngineConfig = field(default_factory=EngineConfig)


@dataclass(frozen=True)
class FacilitySnapshot:
    """Validated facility consumed read-only by every downstream component."""

    spec: FacilitySpec
    warnings: Tuple[str, ...] = ()
    canopy_polygon: Any = None

    @property
    def room(self) -> Room:
        return self.spec.room

    @property
    def fixtures(self) -> Tuple[Fixture, ...]:
        return self.spec.fixtures

    @property
    def catalog(self) -> CircuitCatalog:
        return self.spec.catalog

    @property
    def config(self) -> EngineConfig:
        return self.spec.config


@dataclass(frozen=True, eq=False)
class PPFDGrid:
    """Sampled PPFD field; rows follow ``ys`` and columns follow ``xs``."""

    resolution: float
    xs: np.ndarray
    ys: np.ndarray
    values: np.ndarray
    mask: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def cell_count(self) -> int:
        return int(self.values.size)

    def included_values(self) -> np.ndarray:
        return self.values[self.mask]

    def cells(self) -> Iterator[Tuple[float, float, float, bool]]:
        for row, y in enumerate(self.ys):
            for col, x in enumerate(self.xs):
                yield float(x), float(y), float(self.values[row, col]), bool(self.mask[row, col])

    def to_rows(self) -> List[List[float]]:
        return self.values.tolist()


@dataclass(frozen=True)
class LightingMetrics:
    min_ppfd: float
    max_ppfd: float
    avg_ppfd: float
    uniformity: float
    dli: float
    efficacy: float
    total_ppf: float
    total_watts: float
    sample_count: int
    max_min_ratio: float


@dataclass(frozen=True)
class Circuit:
    id: str
    fixture_ids: Tuple[str, ...]
    load_watts: float
    continuous_load_amps: float
    breaker_amps: float
    wire_gauge: str
    conduit_size: str
    phase: str

    @property
    def fixture_count(self) -> int:
        return len(self.fixture_ids)


@dataclass(frozen=True)
class PanelSummary:
    circuit_count: int
    connected_load_kw: float
    phase_load_amps: Mapping[str, float]
    phase_imbalance: float


class Payback(Enum):
    NEVER = "never"

    def __str__(self) -> str:
        return self.value


PaybackValue = Union[float, Payback]


@dataclass(frozen=True)
class FinancialScenario:
    baseline: SystemSpec
    proposed: SystemSpec
    tariff: float
    photoperiod_hours: float
    annual_energy_kwh: Mapping[str, float]
    annual_energy_cost: Mapping[str, float]
    annual_operating_cost: Mapping[str, float]
    annual_savings: float
    energy_savings_kwh: float
    payback_years: PaybackValue
    cash_flow: Tuple[float, ...] = ()
    roi_percent: Optional[float] = None

    @property
    def breaks_even(self) -> bool:
        return self.payback_years is not Payback.NEVER


@dataclass(frozen=True, eq=False)
class DesignResult:
    """Aggregated engine output handed to report and drawing generators."""

    facility: FacilitySnapshot
    grid: PPFDGrid
    metrics: LightingMetrics
    circuits: Tuple[Circuit, ...]
    panel: PanelSummary
    financial: FinancialScenario
    warnings: Tuple[str, ...] = ()

    def circuit_for(self, fixture_id: str) -> Optional[Circuit]:
        for circuit in self.circuits:
            if fixture_id in circuit.fixture_ids:
                return circuit
        return None
