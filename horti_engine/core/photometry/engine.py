from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np
import shapely

from horti_engine.core.models import (
    ComputationError,
    EngineError,
    FacilitySnapshot,
    Fixture,
    PPFDGrid,
    ValidationError,
)
from horti_engine.logging_config import get_logger

# Upper bound on cells x fixtures evaluated in one numpy broadcast.
CHUNK_ELEMENTS = 2_000_000
logger = get_logger(__name__)


def sample_axis(extent: float, resolution: float) -> np.ndarray:
    """Sample positions 0, r, 2r, ... strictly below ``extent``."""
    count = int(math.ceil(extent / resolution - 1e-9))
    return np.arange(max(count, 0), dtype=float) * resolution


def point_ppfd(
    x: float,
    y: float,
    fixtures: Sequence[Fixture],
    k_factor: float,
    canopy_height: float = 0.0,
) -> float:
    """Inverse-square PPFD at a single canopy point."""
    total = 0.0
    for fixture in fixtures:
        dz = fixture.mounting_height - canopy_height
        distance_sq = (x - fixture.x) ** 2 + (y - fixture.y) ** 2 + dz**2
        total += (fixture.ppf * k_factor) / (4 * math.pi * distance_sq)
    return total


def _fixture_arrays(
    fixtures: Sequence[Fixture], k_factor: float, canopy_height: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    fx = np.array([f.x for f in fixtures], dtype=float)
    fy = np.array([f.y for f in fixtures], dtype=float)
    dz_sq = np.array([(f.mounting_height - canopy_height) ** 2 for f in fixtures], dtype=float)
    intensity = np.array([f.ppf * k_factor / (4 * math.pi) for f in fixtures], dtype=float)
    return fx, fy, dz_sq, intensity


def _sum_with_cutoff(contribution: np.ndarray, cutoff_fraction: float) -> np.ndarray:
    """
    Sum contributions per cell after dropping the faintest ones, as long as
    everything dropped stays below ``cutoff_fraction`` of the exact total.

    The brightest contribution is never dropped, so a cell lit by any fixture
    stays positive and each cell is within ``cutoff_fraction`` of its exact value.
    """
    ordered = np.sort(contribution, axis=-1)
    running = np.cumsum(ordered, axis=-1)
    total = running[..., -1]
    dropped = np.where(running < cutoff_fraction * total[..., None], ordered, 0.0)
    return total - dropped.sum(axis=-1)


def _compute_band(
    xs: np.ndarray,
    ys: np.ndarray,
    fixture_data: Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray],
    cutoff_fraction: float,
) -> np.ndarray:
    fx, fy, dz_sq, intensity = fixture_data
    per_row = max(1, xs.size * fx.size)
    rows_per_chunk = max(1, CHUNK_ELEMENTS // per_row)

    band = np.empty((ys.size, xs.size), dtype=float)
    for start in range(0, ys.size, rows_per_chunk):
        chunk_ys = ys[start : start + rows_per_chunk]
        dx_sq = (xs[:, None] - fx[None, :]) ** 2
        dy_sq = (chunk_ys[:, None] - fy[None, :]) ** 2
        distance_sq = dy_sq[:, None, :] + dx_sq[None, :, :] + dz_sq[None, None, :]
        contribution = intensity / distance_sq
        if cutoff_fraction > 0:
            band[start : start + chunk_ys.size] = _sum_with_cutoff(contribution, cutoff_fraction)
        else:
            band[start : start + chunk_ys.size] = contribution.sum(axis=-1)
    return band


def _split_rows(ys: np.ndarray, workers: int) -> List[np.ndarray]:
    bands = min(workers, ys.size)
    return [band for band in np.array_split(ys, bands) if band.size]


def compute_ppfd_values(
    xs: np.ndarray,
    ys: np.ndarray,
    fixtures: Sequence[Fixture],
    k_factor: float,
    canopy_height: float = 0.0,
    cutoff_fraction: float = 0.0,
    workers: int = 1,
) -> np.ndarray:
    """PPFD for every (y, x) sample, summed over all fixtures."""
    fixture_data = _fixture_arrays(fixtures, k_factor, canopy_height)
    if workers <= 1 or ys.size < 2:
        return _compute_band(xs, ys, fixture_data, cutoff_fraction)

    bands = _split_rows(ys, workers)
    with ThreadPoolExecutor(max_workers=len(bands)) as executor:
        results = list(
            executor.map(
                lambda band_ys: _compute_band(xs, band_ys, fixture_data, cutoff_fraction),
                bands,
            )
        )
    return np.vstack(results)


def canopy_mask(xs: np.ndarray, ys: np.ndarray, polygon: Optional[object]) -> np.ndarray:
    if polygon is None:
        return np.ones((ys.size, xs.size), dtype=bool)
    grid_x, grid_y = np.meshgrid(xs, ys)
    return np.asarray(shapely.intersects_xy(polygon, grid_x, grid_y), dtype=bool)


def compute_ppfd_grid(snapshot: FacilitySnapshot, resolution: Optional[float] = None) -> PPFDGrid:
    """
    Sample the canopy plane and sum isotropic inverse-square contributions
    from every fixture.

    Cells outside the canopy polygon are still computed so the map stays
    continuous, but they are masked out of aggregate statistics.
    """
    config = snapshot.config
    step = float(resolution if resolution is not None else config.resolution)
    logger.info(
        "Computing PPFD grid for %s | fixtures=%d resolution=%.3f workers=%d",
        snapshot.spec.name,
        len(snapshot.fixtures),
        step,
        config.workers,
    )
    try:
        if not math.isfinite(step) or step <= 0:
            raise ValidationError(f"resolution must be positive, got {step}", entity="grid")
        xs = sample_axis(snapshot.room.length, step)
        ys = sample_axis(snapshot.room.width, step)
        if xs.size == 0 or ys.size == 0:
            raise ComputationError("grid produced zero cells", entity="grid")

        values = compute_ppfd_values(
            xs,
            ys,
            snapshot.fixtures,
            config.k_factor,
            canopy_height=config.canopy_height,
            cutoff_fraction=config.cutoff_fraction,
            workers=int(config.workers),
        )
        if not np.all(np.isfinite(values)):
            raise ComputationError("grid contains non-finite PPFD values", entity="grid")
        mask = canopy_mask(xs, ys, snapshot.canopy_polygon)
        if not mask.any():
            raise ComputationError("no grid cells fall inside the canopy", entity="canopy")

        for array in (xs, ys, values, mask):
            array.setflags(write=False)
        grid = PPFDGrid(resolution=step, xs=xs, ys=ys, values=values, mask=mask)
        logger.info(
            "Computed PPFD grid %dx%d | included=%d",
            ys.size,
            xs.size,
            int(mask.sum()),
        )
        return grid
    except EngineError:
        raise
    except Exception:
        logger.exception("PPFD grid computation failed for %s", snapshot.spec.name)
        raise
