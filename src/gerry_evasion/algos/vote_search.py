from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Optional

import numpy as np

from gerry_evasion.config import EvasionConfig
from gerry_evasion.algos.mutation import mutate_with_config
from gerry_evasion.algos.scoring import ScoreBreakdown, score, score_breakdown
from gerry_evasion.data.vote_vector import validate_vote_vector

ImproveCallback = Callable[[int, np.ndarray, dict], None]
RestartCallback = Callable[[int], None]


# ----------------------------
# State
# ----------------------------
@dataclass
class SearchState:
    current: np.ndarray
    current_score: float
    stagnation: int = 0

    # bookkeeping (not used by the transition rule)
    iterations: int = 0
    improvements: int = 0
    restarts: int = 0


def cooling_alpha(stagnation: int, max_iterations: int) -> float:
    """
    Step-down schedule: mutation size drops every max_iterations//10 stuck steps.

    The step is clamped to at least 1, so for max_iterations < 10 alpha drops
    on every stuck iteration instead of dividing by zero.
    """
    step = max(int(max_iterations) // 10, 1)
    return 1.0 / (int(stagnation) // step + 1)


def format_summary(v: np.ndarray, cfg: EvasionConfig, breakdown: ScoreBreakdown | None = None) -> List[str]:
    b = breakdown if breakdown is not None else score_breakdown(v, cfg)
    shares = [round(float(x), 3) for x in np.sort(np.asarray(v, dtype=float))]
    return [
        "------------------------------------------------------",
        f"score={b.total:.6f}",
        f"shares={shares}",
        f"Seats: {b.seats}, Durability: {round(b.durability, 6)}, Evasion: {round(b.evasion, 6)}",
    ]


# ----------------------------
# Search loop
# ----------------------------
class VoteSearch:
    """
    Greedy hill-climb over a vote vector.

    Each step proposes a mutation of the current vector, keeps it only on a
    strict score improvement, shrinks the mutation size while stuck, and
    restarts from the initial vector after max_iterations stuck steps.
    """

    def __init__(
        self,
        initial: np.ndarray,
        cfg: EvasionConfig,
        *,
        rng: Optional[np.random.Generator] = None,
        on_improve: Optional[ImproveCallback] = None,
        on_restart: Optional[RestartCallback] = None,
        verbose: bool = True,
    ):
        self.cfg = cfg.validate()
        self.initial = validate_vote_vector(initial, cfg.num_districts)
        self.initial.setflags(write=False)
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        self.on_improve = on_improve
        self.on_restart = on_restart
        self.verbose = verbose

        start = self.initial.copy()
        self.state = SearchState(current=start, current_score=score(start, cfg))
        self._best = (start.copy(), self.state.current_score)

    @property
    def best(self) -> np.ndarray:
        return self._best[0]

    @property
    def best_score(self) -> float:
        return self._best[1]

    def _log(self, msg: str) -> None:
        if self.verbose:
            print(f"[vote_search] {msg}", flush=True)

    def report(self, v: np.ndarray) -> ScoreBreakdown:
        b = score_breakdown(v, self.cfg)
        for line in format_summary(v, self.cfg, b):
            self._log(line)
        return b

    def alpha(self) -> float:
        return cooling_alpha(self.state.stagnation, self.cfg.max_iterations)

    def restart(self) -> None:
        start = self.initial.copy()
        st = self.state
        self.state = replace(
            st,
            current=start,
            current_score=score(start, self.cfg),
            stagnation=0,
            restarts=st.restarts + 1,
        )

    def step(self) -> str:
        """Run one iteration. Returns 'improved', 'restarted' or 'stuck'."""
        st = self.state
        st.iterations += 1
        st.stagnation += 1

        alpha = self.alpha()
        candidate = mutate_with_config(st.current, self.cfg, alpha, self.rng)
        cand_score = score(candidate, self.cfg)

        if cand_score > st.current_score:
            # state and best are replaced as whole records
            self.state = st = replace(
                st,
                current=candidate,
                current_score=cand_score,
                stagnation=0,
                improvements=st.improvements + 1,
            )
            if cand_score > self.best_score:
                self._best = (candidate.copy(), cand_score)

            b = self.report(candidate)
            if self.on_improve is not None:
                stats = b.as_dict()
                stats["alpha"] = alpha
                self.on_improve(st.iterations, candidate, stats)
            return "improved"

        if st.stagnation > self.cfg.max_iterations:
            self.restart()
            st = self.state
            self._log("")
            self._log("-- RESTARTING --")
            self._log("")
            if self.on_restart is not None:
                self.on_restart(st.iterations)
            return "restarted"

        return "stuck"

    def run(self, max_steps: Optional[int] = None) -> SearchState:
        """
        Step until max_steps iterations have run, or forever when max_steps
        is None. Ctrl-C stops the run and prints the best vector found.
        """
        cfg = self.cfg
        self._log(f"Starting search over {cfg.num_districts} districts")
        self._log(f"Target: >= {cfg.min_republican_seats} Republican seats")
        self._log(
            f"Max stuck iterations: {cfg.max_iterations}, "
            f"mutations/iteration: {cfg.num_mutations_per_iteration}"
        )
        self.report(self.state.current)

        done = 0
        try:
            while max_steps is None or done < max_steps:
                self.step()
                done += 1
        except KeyboardInterrupt:
            self._log("interrupted")
            if self.state.current_score > self.best_score:
                self._best = (self.state.current.copy(), self.state.current_score)

        st = self.state
        self._log("------------------------------------------------------")
        self._log(
            f"iterations={st.iterations} improvements={st.improvements} restarts={st.restarts}"
        )
        self._log(f"Best score: {self.best_score:.6f}")
        self.report(self.best)
        return st
