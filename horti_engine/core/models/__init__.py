from .entities import (
    Circuit,
    CircuitCatalog,
    DesignResult,
    EngineConfig,
    FacilitySnapshot,
    FacilitySpec,
    FinancialScenario,
    Fixture,
    LightingMetrics,
    PanelSummary,
    Payback,
    PaybackValue,
    PPFDGrid,
    Room,
    SystemSpec,
)
from .errors import ComputationError, EngineError, SizingError, ValidationError

__all__ = [
    "Circuit",
    "CircuitCatalog",
    "ComputationError",
    "DesignResult",
    "EngineConfig",
    "EngineError",
    "FacilitySnapshot",
    "FacilitySpec",
    "FinancialScenario",
    "Fixture",
    "LightingMetrics",
    "PanelSummary",
    "Payback",
    "PaybackValue",
    "PPFDGrid",
    "Room",
    "SizingError",
    "SystemSpec",
    "ValidationError",
]
