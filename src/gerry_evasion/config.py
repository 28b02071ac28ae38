from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


# ----------------------------
# Config
# ----------------------------
@dataclass
class EvasionConfig:
    num_districts: int = 18

    # targets + detection cutoffs
    min_republican_seats: int = 11
    mean_median_diff_cutoff: float = 0.3
    t_test_p_cutoff: float = 0.05

    # plausibility bands
    min_vote: float = 0.15
    max_vote: float = 0.85
    min_total_share: float = 0.494999
    max_total_share: float = 0.505001

    # objective weights
    seats_weight: float = 0.5
    evasion_weight: float = 2.0
    durability_til_10_pct_weight: float = 4.0
    durability_past_10_pct_weight: float = 1.0

    # piecewise thresholds
    durability_floor: float = 0.03
    durability_knee: float = 0.1
    evasion_floor: float = 0.02

    # penalties
    insufficient_seats_penalty: float = -100.0
    vote_share_not_in_range_penalty: float = -10.0
    evasion_failure_penalty: float = -100.0

    # search
    max_iterations: int = 100_000
    num_mutations_per_iteration: int = 10
    max_mutation_attempts: int = 1_000_000
    seed: Optional[int] = None

    def validate(self) -> "EvasionConfig":
        if self.num_districts < 1:
            raise ValueError(f"num_districts must be >= 1, got {self.num_districts}")
        if self.min_vote > self.max_vote:
            raise ValueError(f"min_vote ({self.min_vote}) > max_vote ({self.max_vote})")
        if self.min_total_share > self.max_total_share:
            raise ValueError(
                f"min_total_share ({self.min_total_share}) > max_total_share ({self.max_total_share})"
            )
        if self.num_mutations_per_iteration < 0:
            raise ValueError("num_mutations_per_iteration must be >= 0")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.max_mutation_attempts < 1:
            raise ValueError("max_mutation_attempts must be >= 1")
        return self


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load the YAML run configuration. An empty file yields {}."""
    with Path(path).open("r") as f:
        return yaml.safe_load(f) or {}


def _state_block(cfg: dict, state: str | None) -> dict:
    if not state:
        return {}
    scfg = (cfg.get("states", {}) or {}).get(state)
    if scfg is None:
        raise KeyError(f"State '{state}' not found under cfg['states'].")
    return scfg or {}


def _cast(name: str, value: Any, default: Any) -> Any:
    if value is None:
        return None
    if name == "seed":
        return int(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def evasion_config_from_dict(cfg: dict, state: str | None = None) -> EvasionConfig:
    """
    Build an EvasionConfig from a parsed YAML dict.

    Priority (lowest -> highest):
      1) dataclass defaults
      2) cfg.algos.vote_search
      3) cfg.states.<state>.algos.vote_search
    """
    vs_base = ((cfg.get("algos", {}) or {}).get("vote_search", {}) or {}).copy()
    scfg = _state_block(cfg, state)
    vs_override = ((scfg.get("algos", {}) or {}).get("vote_search", {}) or {})
    vs_base.update(vs_override)

    defaults = EvasionConfig()
    known = {f.name for f in fields(EvasionConfig)}
    unknown = sorted(set(vs_base) - known)
    if unknown:
        raise KeyError(f"Unknown vote_search settings: {unknown}")

    kwargs = {
        name: _cast(name, value, getattr(defaults, name))
        for name, value in vs_base.items()
    }
    return EvasionConfig(**kwargs).validate()


def state_start(cfg: dict, state: str | None) -> str | None:
    """Return cfg.states.<state>.start (a preset name or CSV path), if set."""
    start = _state_block(cfg, state).get("start")
    return str(start) if start is not None else None
