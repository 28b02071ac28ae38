from __future__ import annotations

import math
import warnings

import numpy as np
from scipy import stats

from gerry_evasion.config import EvasionConfig

# variance at or below this is treated as zero (all districts equal)
_VAR_EPS = 1e-12


# ----------------------------
# Seats / shares
# ----------------------------
def rep_seats(v: np.ndarray) -> int:
    # exactly 0.5 is a tie, not a Republican win
    return int(np.sum(np.asarray(v, dtype=float) < 0.5))


def rep_margin_list(v: np.ndarray) -> np.ndarray:
    """Republican vote share in the districts Republicans win."""
    v = np.asarray(v, dtype=float)
    return 1.0 - v[v < 0.5]


def dem_margin_list(v: np.ndarray) -> np.ndarray:
    """Democratic vote share in the districts Democrats win."""
    v = np.asarray(v, dtype=float)
    return v[v > 0.5]


def total_dem_share(v: np.ndarray) -> float:
    return float(np.mean(np.asarray(v, dtype=float)))


# ----------------------------
# Detection tests
# ----------------------------
def mean_median_diff(v: np.ndarray) -> float:
    """
    (mean - median) / sample std dev, with the std dev taken from the sum of
    squares: sqrt((sum(x^2) - n*mean^2) / (n-1)).

    Returns nan when undefined (n <= 1 or zero variance).
    """
    v = np.asarray(v, dtype=float)
    n = v.shape[0]
    if n <= 1:
        return math.nan

    mean = float(v.mean())
    median = float(np.median(v))
    sum_sqr = float(np.sum(v * v))
    var = (sum_sqr - n * mean * mean) / (n - 1)
    if not np.isfinite(var) or var <= _VAR_EPS:
        return math.nan

    return (mean - median) / math.sqrt(var)


def detection_p_value(v: np.ndarray) -> float:
    """
    One-sided (left tail) pooled-variance two-sample t-test of Republican
    win shares against Democratic win shares.

    Anything that cannot be computed scores 0.0: the strongest evidence of
    skew, i.e. the worst value for the evading side.
    """
    r = rep_margin_list(v)
    d = dem_margin_list(v)
    if r.size == 0 or d.size == 0 or (r.size + d.size) < 3:
        return 0.0

    # pooled variance of zero: t is 0/0 or +-inf, neither is a usable test
    pooled_ss = float(np.sum((r - r.mean()) ** 2) + np.sum((d - d.mean()) ** 2))
    if pooled_ss <= _VAR_EPS:
        return 0.0

    with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        try:
            res = stats.ttest_ind(r, d, equal_var=True, alternative="less")
        except (ValueError, ZeroDivisionError, FloatingPointError):
            return 0.0

    p = float(res.pvalue)
    if not np.isfinite(float(res.statistic)) or not np.isfinite(p):
        return 0.0
    return p


def durability(v: np.ndarray) -> float:
    """Twice the smallest distance from 0.5 in any district."""
    v = np.asarray(v, dtype=float)
    return float(np.min(np.abs(v - 0.5)) * 2.0)


# ----------------------------
# Evasion
# ----------------------------
def evasion(v: np.ndarray, cfg: EvasionConfig) -> float:
    """
    Slack left before the closest detection test fires:
      min(mm_cutoff - mean_median_diff, p_value - p_cutoff)

    Falls back to cfg.evasion_failure_penalty when mean-median is undefined.
    """
    mm = mean_median_diff(v)
    if math.isnan(mm):
        return float(cfg.evasion_failure_penalty)
    p = detection_p_value(v)
    return float(min(cfg.mean_median_diff_cutoff - mm, p - cfg.t_test_p_cutoff))


def tests_passed(v: np.ndarray, cfg: EvasionConfig, evasion_value: float | None = None) -> int:
    ev = evasion(v, cfg) if evasion_value is None else evasion_value
    if ev > 0:
        return 2

    mm = mean_median_diff(v)
    passed = 0
    if not math.isnan(mm) and mm <= cfg.mean_median_diff_cutoff:
        passed += 1
    if detection_p_value(v) >= cfg.t_test_p_cutoff:
        passed += 1
    return passed
