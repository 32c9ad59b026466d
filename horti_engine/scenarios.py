from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from horti_engine.core.models import (
    CircuitCatalog,
    DesignResult,
    EngineConfig,
    FacilitySpec,
    Fixture,
    Payback,
    Room,
    SystemSpec,
)

DEFAULT_SCENARIO_DIR = Path(__file__).resolve().parents[1] / "exports" / "scenarios"


def _maybe_number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _resolve_path(path: str | Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = DEFAULT_SCENARIO_DIR / candidate
    candidate.parent.mkdir(parents=True, exist_ok=True)
    return candidate.resolve()


def facility_spec_to_dict(spec: FacilitySpec) -> Dict[str, Any]:
    data = asdict(spec)
    data["catalog"]["conduit_sizes"] = dict(spec.catalog.conduit_sizes)
    data["catalog"]["small_conductor_limits"] = dict(spec.catalog.small_conductor_limits)
    return data


def _system_from_dict(data: Dict[str, Any]) -> SystemSpec:
    return SystemSpec(
        label=data.get("label", "baseline"),
        fixture_count=int(data.get("fixture_count", 0) or 0),
        watts_per_fixture=_maybe_number(data.get("watts_per_fixture")),
        capital_cost=_maybe_number(data.get("capital_cost")),
        annual_maintenance_cost=_maybe_number(data.get("annual_maintenance_cost")),
        annual_lamp_replacement_cost=_maybe_number(data.get("annual_lamp_replacement_cost")),
    )


def _fixture_from_dict(data: Dict[str, Any]) -> Fixture:
    return Fixture(
        id=str(data["id"]),
        x=_maybe_number(data.get("x")),
        y=_maybe_number(data.get("y")),
        mounting_height=_maybe_number(data.get("mounting_height")),
        ppf=_maybe_number(data.get("ppf")),
        wattage=_maybe_number(data.get("wattage")),
        model=data.get("model"),
    )


def _catalog_from_dict(data: Optional[Dict[str, Any]]) -> CircuitCatalog:
    if not data:
        return CircuitCatalog()
    defaults = CircuitCatalog()
    wire = data.get("wire_ampacity")
    return CircuitCatalog(
        voltage=_maybe_number(data.get("voltage"), defaults.voltage),
        max_fixtures_per_circuit=int(
            data.get("max_fixtures_per_circuit", defaults.max_fixtures_per_circuit)
        ),
        continuous_duty_factor=_maybe_number(
            data.get("continuous_duty_factor"), defaults.continuous_duty_factor
        ),
        breaker_sizes=tuple(data.get("breaker_sizes") or defaults.breaker_sizes),
        insulation_class=data.get("insulation_class", defaults.insulation_class),
        wire_ampacity=tuple((gauge, amps) for gauge, amps in wire) if wire else None,
        conduit_sizes=tuple(dict(data.get("conduit_sizes") or defaults.conduit_sizes).items()),
        small_conductor_limits=tuple(
            dict(data.get("small_conductor_limits") or defaults.small_conductor_limits).items()
        ),
        phases=tuple(data.get("phases") or defaults.phases),
    )


def _config_from_dict(data: Optional[Dict[str, Any]]) -> EngineConfig:
    if not data:
        return EngineConfig()
    known = EngineConfig.__dataclass_fields__
    return EngineConfig(**{key: value for key, value in data.items() if key in known})


def facility_spec_from_dict(data: Dict[str, Any]) -> FacilitySpec:
    room = data.get("room", {})
    canopy = data.get("canopy")
    return FacilitySpec(
        name=data.get("name", "facility"),
        room=Room(
            length=_maybe_number(room.get("length")),
            width=_maybe_number(room.get("width")),
            height=_maybe_number(room.get("height")),
        ),
        fixtures=tuple(_fixture_from_dict(item) for item in data.get("fixtures", [])),
        baseline=_system_from_dict(data.get("baseline", {})),
        capital_cost=_maybe_number(data.get("capital_cost")),
        annual_maintenance_cost=_maybe_number(data.get("annual_maintenance_cost")),
        canopy=tuple((float(x), float(y)) for x, y in canopy) if canopy else None,
        catalog=_catalog_from_dict(data.get("catalog")),
        config=_config_from_dict(data.get("config")),
    )


def design_summary(result: DesignResult) -> Dict[str, Any]:
    """JSON-friendly digest of a design result for report generators."""
    financial = result.financial
    payback = financial.payback_years
    return {
        "facility": result.facility.spec.name,
        "metrics": asdict(result.metrics),
        "grid": {
            "resolution": result.grid.resolution,
            "rows": int(result.grid.shape[0]),
            "cols": int(result.grid.shape[1]),
        },
        "circuits": [
            {
                "id": c.id,
                "phase": c.phase,
                "fixture_count": c.fixture_count,
                "fixture_ids": list(c.fixture_ids),
                "continuous_load_amps": c.continuous_load_amps,
                "breaker_amps": c.breaker_amps,
                "wire_gauge": c.wire_gauge,
                "conduit_size": c.conduit_size,
            }
            for c in result.circuits
        ],
        "panel": {
            "circuit_count": result.panel.circuit_count,
            "connected_load_kw": result.panel.connected_load_kw,
            "phase_load_amps": dict(result.panel.phase_load_amps),
            "phase_imbalance": result.panel.phase_imbalance,
        },
        "financial": {
            "annual_energy_kwh": dict(financial.annual_energy_kwh),
            "annual_energy_cost": dict(financial.annual_energy_cost),
            "annual_operating_cost": dict(financial.annual_operating_cost),
            "annual_savings": financial.annual_savings,
            "energy_savings_kwh": financial.energy_savings_kwh,
            "payback_years": payback.value if payback is Payback.NEVER else payback,
            "cash_flow": list(financial.cash_flow),
            "roi_percent": financial.roi_percent,
        },
        "warnings": list(result.warnings),
    }


def save_scenario(
    path: str | Path,
    spec: FacilitySpec,
    result: Optional[DesignResult] = None,
) -> Path:
    payload: Dict[str, Any] = {
        "facility_spec": facility_spec_to_dict(spec),
        "design_summary": design_summary(result) if result is not None else None,
        "metadata": {"path": str(path)},
    }
    destination = _resolve_path(path)
    destination.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return destination


def load_scenario(path: str | Path) -> Dict[str, Any]:
    source = _resolve_path(path)
    if not source.exists():
        raise FileNotFoundError(f"Scenario file not found: {source}")
    payload = json.loads(source.read_text(encoding="utf-8"))
    section = payload.get("facility_spec")
    return {
        "facility_spec": facility_spec_from_dict(section) if section else None,
        "design_summary": payload.get("design_summary"),
    }


def list_scenarios(directory: str | Path | None = None) -> List[Path]:
    base = Path(directory).expanduser() if directory else DEFAULT_SCENARIO_DIR
    if not base.exists():
        return []
    return sorted(base.glob("*.json"))
