from __future__ import annotations

import numpy as np


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * (3.0 - 2.0 * t)


def _snap_cells(length: int, frequency: float) -> int:
    return max(1, int(round(length * frequency)))


def _lattice_axis(length: int, cells: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    # whole number of cells per axis: column `length` would land exactly on cell 0
    coords = np.arange(length, dtype=np.float64) * (cells / length)
    low = np.minimum(np.floor(coords).astype(np.int64), cells - 1)
    weight = _fade(coords - low)
    high = (low + 1) % cells
    return low, high, weight


def value_noise(
    width: int,
    height: int,
    scale: float,
    seed: int,
    octaves: int = 1,
    persistence: float = 0.5,
) -> np.ndarray:
    """Fractal value noise sampled at integer tile coordinates.

    Returns a ``(height, width)`` array with values in ``[0, 1]``. ``scale`` is
    the size in tiles of one lattice cell of the first octave; the lattice wraps
    around both axes.
    """
    if width < 1 or height < 1:
        raise ValueError(f"noise field must be at least 1x1 (got {width}x{height})")
    rng = np.random.default_rng(seed)
    total = np.zeros((height, width), dtype=np.float64)
    amplitude = 1.0
    norm = 0.0
    frequency = 1.0 / max(scale, 1e-6)
    for _ in range(max(1, int(octaves))):
        cells_x = _snap_cells(width, frequency)
        cells_y = _snap_cells(height, frequency)
        x0, x1, tx = _lattice_axis(width, cells_x)
        y0, y1, ty = _lattice_axis(height, cells_y)
        lattice = rng.random((cells_y, cells_x))
        top = lattice[np.ix_(y0, x0)] + (lattice[np.ix_(y0, x1)] - lattice[np.ix_(y0, x0)]) * tx[None, :]
        bottom = lattice[np.ix_(y1, x0)] + (lattice[np.ix_(y1, x1)] - lattice[np.ix_(y1, x0)]) * tx[None, :]
        total += (top + (bottom - top) * ty[:, None]) * amplitude
        norm += amplitude
        amplitude *= persistence
        frequency *= 2.0
    return np.clip(total / norm, 0.0, 1.0)
