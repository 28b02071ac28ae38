from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from gerry_evasion.config import EvasionConfig
from gerry_evasion.algos.metrics import (
    durability,
    evasion,
    rep_seats,
    tests_passed,
    total_dem_share,
)


@dataclass
class ScoreBreakdown:
    seats_component: float
    test_component: float
    durability_component: float
    evasion_component: float

    # raw metrics behind the components
    seats: int
    durability: float
    evasion: float
    tests_passed: int
    total_share: float
    pcts_valid: bool
    vote_share_valid: bool

    @property
    def total(self) -> float:
        return (
            self.seats_component
            + self.test_component
            + self.durability_component
            + self.evasion_component
        )

    def as_dict(self) -> dict:
        out = asdict(self)
        out["total"] = self.total
        return out


# ----------------------------
# Components
# ----------------------------
def seats_component(seats: int, cfg: EvasionConfig) -> float:
    if seats < cfg.min_republican_seats:
        return float(cfg.insufficient_seats_penalty)
    return (seats - cfg.min_republican_seats) * cfg.seats_weight


def test_component(passed: int, vote_share_valid: bool, pcts_valid: bool, cfg: EvasionConfig) -> float:
    if not vote_share_valid:
        return float(cfg.vote_share_not_in_range_penalty)
    if not pcts_valid:
        return 0.0
    return float(passed)


def durability_component(dur: float, cfg: EvasionConfig) -> float:
    if dur < cfg.durability_floor:
        return -1.0
    knee = cfg.durability_knee
    return (
        min(dur, knee) * cfg.durability_til_10_pct_weight
        + max(dur - knee, 0.0) * cfg.durability_past_10_pct_weight
    )


def evasion_component(ev: float, cfg: EvasionConfig) -> float:
    if ev < cfg.evasion_floor:
        return -1.0
    return ev * cfg.evasion_weight


# ----------------------------
# Objective
# ----------------------------
def score_breakdown(v: np.ndarray, cfg: EvasionConfig) -> ScoreBreakdown:
    v = np.asarray(v, dtype=float)

    seats = rep_seats(v)
    share = total_dem_share(v)
    dur = durability(v)
    ev = evasion(v, cfg)
    passed = tests_passed(v, cfg, evasion_value=ev)

    pcts_valid = bool(np.all((v >= cfg.min_vote) & (v <= cfg.max_vote)))
    vote_share_valid = bool(cfg.min_total_share <= share <= cfg.max_total_share)

    return ScoreBreakdown(
        seats_component=seats_component(seats, cfg),
        test_component=test_component(passed, vote_share_valid, pcts_valid, cfg),
        durability_component=durability_component(dur, cfg),
        evasion_component=evasion_component(ev, cfg),
        seats=seats,
        durability=dur,
        evasion=ev,
        tests_passed=passed,
        total_share=share,
        pcts_valid=pcts_valid,
        vote_share_valid=vote_share_valid,
    )


def score(v: np.ndarray, cfg: EvasionConfig) -> float:
    return float(score_breakdown(v, cfg).total)
