from __future__ import annotations

from typing import Sequence

import numpy as np

from horti_engine.core.models import ComputationError, Fixture, LightingMetrics, PPFDGrid

SECONDS_PER_HOUR = 3600
MICROMOL_PER_MOL = 1_000_000


def daily_light_integral(avg_ppfd: float, photoperiod_hours: float) -> float:
    """mol·m⁻²·day⁻¹ delivered by a constant PPFD over the photoperiod."""
    return avg_ppfd * photoperiod_hours * SECONDS_PER_HOUR / MICROMOL_PER_MOL


def fixture_efficacy(fixtures: Sequence[Fixture]) -> float:
    total_watts = sum(f.wattage for f in fixtures)
    if total_watts <= 0:
        raise ComputationError("total fixture wattage must be positive", entity="fixtures")
    return sum(f.ppf for f in fixtures) / total_watts


def compute_metrics(
    grid: PPFDGrid,
    fixtures: Sequence[Fixture],
    photoperiod_hours: float,
) -> LightingMetrics:
    """Reduce the included grid cells to the scalar KPIs quoted in reports."""
    values = np.asarray(grid.included_values(), dtype=float)
    if values.size == 0:
        raise ComputationError("grid has no included cells", entity="grid")

    min_ppfd = float(values.min())
    max_ppfd = float(values.max())
    avg_ppfd = float(values.mean())
    if avg_ppfd <= 0:
        raise ComputationError("average PPFD is zero; uniformity is undefined", entity="grid")

    return LightingMetrics(
        min_ppfd=min_ppfd,
        max_ppfd=max_ppfd,
        avg_ppfd=avg_ppfd,
        uniformity=min(min_ppfd / avg_ppfd, 1.0),
        dli=daily_light_integral(avg_ppfd, photoperiod_hours),
        efficacy=fixture_efficacy(fixtures),
        total_ppf=float(sum(f.ppf for f in fixtures)),
        total_watts=float(sum(f.wattage for f in fixtures)),
        sample_count=int(values.size),
        max_min_ratio=max_ppfd / min_ppfd if min_ppfd > 0 else float("inf"),
    )
