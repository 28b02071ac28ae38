from __future__ import annotations

import numpy as np

from gerry_evasion.config import EvasionConfig


class MutationStalledError(RuntimeError):
    """Raised when mutate() cannot land enough in-band changes."""


def mutate(
    v: np.ndarray,
    num_mutations: int,
    alpha: float = 0.5,
    *,
    rng: np.random.Generator,
    min_vote: float,
    max_vote: float,
    max_attempts: int = 1_000_000,
) -> np.ndarray:
    """
    Return a perturbed copy of `v` with exactly `num_mutations` accepted changes.

    Each draw picks a random district and a delta in [-alpha/2, alpha/2]
    rounded to 3 decimals. Changes stack on the candidate; a draw that would
    leave [min_vote, max_vote] is discarded and does not count.
    """
    if num_mutations < 0:
        raise ValueError(f"num_mutations must be >= 0, got {num_mutations}")

    candidate = np.array(v, dtype=float, copy=True)
    n = candidate.shape[0]
    if num_mutations == 0:
        return candidate
    if n == 0:
        raise ValueError("cannot mutate an empty vote vector")

    accepted = 0
    attempts = 0
    while accepted < num_mutations:
        if attempts >= max_attempts:
            raise MutationStalledError(
                f"only {accepted}/{num_mutations} mutations accepted after {attempts} draws "
                f"(alpha={alpha}, band=[{min_vote}, {max_vote}])"
            )
        attempts += 1

        idx = int(rng.integers(n))
        delta = round((float(rng.random()) - 0.5) * alpha, 3)
        new_val = candidate[idx] + delta

        if min_vote <= new_val <= max_vote:
            candidate[idx] = new_val
            accepted += 1

    return candidate


def mutate_with_config(v: np.ndarray, cfg: EvasionConfig, alpha: float, rng: np.random.Generator) -> np.ndarray:
    return mutate(
        v,
        cfg.num_mutations_per_iteration,
        alpha,
        rng=rng,
        min_vote=cfg.min_vote,
        max_vote=cfg.max_vote,
        max_attempts=cfg.max_mutation_attempts,
    )
