from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

# Democratic vote share per district, in percent.
PRESETS_PCT: dict[str, list[float]] = {
    # Pennsylvania 2012 congressional results
    "pa_2012": [
        84.9, 90.5, 42.8, 36.6, 37.1, 42.9, 40.6, 43.4, 38.3,
        34.4, 41.5, 48.3, 69.1, 76.9, 43.2, 41.6, 60.3, 36.0,
    ],
}


def uniform_start(num_districts: int, value: float = 0.5) -> np.ndarray:
    return np.full(int(num_districts), float(value), dtype=float)


def preset_start(name: str) -> np.ndarray:
    key = name.strip().lower()
    if key not in PRESETS_PCT:
        raise KeyError(f"Unknown preset '{name}'. Available: {sorted(PRESETS_PCT)}")
    return np.asarray(PRESETS_PCT[key], dtype=float) / 100.0


def validate_vote_vector(values: Sequence[float] | np.ndarray, num_districts: int) -> np.ndarray:
    """
    Coerce to a float array and check it can be searched:
      - 1-D, exactly num_districts entries
      - every entry finite and in [0, 1]

    Entries outside the [min_vote, max_vote] operating band are allowed;
    scoring penalizes them.
    """
    v = np.array(values, dtype=float)
    if v.ndim != 1:
        raise ValueError(f"Vote vector must be 1-D, got shape {v.shape}")
    if v.shape[0] != int(num_districts):
        raise ValueError(f"Vote vector has {v.shape[0]} districts, expected {num_districts}")
    if not np.all(np.isfinite(v)):
        raise ValueError("Vote vector contains non-finite values")
    if np.any(v < 0.0) or np.any(v > 1.0):
        bad = v[(v < 0.0) | (v > 1.0)]
        raise ValueError(f"Vote shares must lie in [0, 1]; got {bad.tolist()[:10]}")
    return v


def load_start_csv(path: str | Path, column: str | None = None) -> np.ndarray:
    """
    Read one district-level CSV into a vote vector, in row order.

    Column resolution:
      1) `column` if given
      2) `dem_share`
      3) dem_votes / (dem_votes + rep_votes)

    Values above 1 are read as percentages.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing {path}")

    df = pd.read_csv(path)

    if column is not None:
        if column not in df.columns:
            raise KeyError(f"{path.name} missing '{column}'. Available: {list(df.columns)[:50]}")
        values = df[column].astype(float)
    elif "dem_share" in df.columns:
        values = df["dem_share"].astype(float)
    elif {"dem_votes", "rep_votes"} <= set(df.columns):
        dem = df["dem_votes"].astype(float)
        rep = df["rep_votes"].astype(float)
        values = dem / (dem + rep).replace(0, np.nan)
    else:
        raise KeyError(
            f"{path.name} needs a 'dem_share' column or 'dem_votes'/'rep_votes'. "
            f"Available: {list(df.columns)[:50]}"
        )

    if values.isna().any():
        missing = int(values.isna().sum())
        raise ValueError(f"{missing} rows in {path.name} have no usable vote share.")

    out = values.to_numpy(dtype=float)
    if np.any(out > 1.0):
        out = out / 100.0
    return out


def resolve_start(start: str | None, num_districts: int, column: str | None = None) -> np.ndarray:
    """'uniform' (default), a preset name, or a CSV path -> validated vote vector."""
    if start is None or start.strip().lower() == "uniform":
        v = uniform_start(num_districts)
    elif start.strip().lower() in PRESETS_PCT:
        v = preset_start(start)
    else:
        v = load_start_csv(start, column=column)
    return validate_vote_vector(v, num_districts)
