import argparse

import numpy as np

from gerry_evasion.config import evasion_config_from_dict, load_config, state_start
from gerry_evasion.data.vote_vector import resolve_start
from gerry_evasion.algos.vote_search import VoteSearch

"""
Searches for a per-district vote-share vector that hits the seat target
while passing the mean-median and t-test checks. Runs until Ctrl-C unless
--max_steps is given.

example usage from repo root:
python3 scripts/run_vote_search.py --config config.yaml --state pa --start pa_2012
"""


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default="config.yaml")
    ap.add_argument("--state", default=None, help="Apply cfg.states.<state> overrides.")
    ap.add_argument(
        "--start",
        default=None,
        help="'uniform', a preset name (e.g. 'pa_2012') or a district-level CSV path.",
    )
    ap.add_argument("--column", default=None, help="Vote-share column to read from a --start CSV.")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--max_steps", type=int, default=None, help="Stop after N iterations (default: run forever).")
    ap.add_argument("--quiet", action="store_true")
    args = ap.parse_args()

    cfg = load_config(args.config)
    vs_cfg = evasion_config_from_dict(cfg, args.state)
    if args.seed is not None:
        vs_cfg.seed = int(args.seed)

    start = args.start or state_start(cfg, args.state) or "uniform"
    print(f"[config] start={start} districts={vs_cfg.num_districts} seed={vs_cfg.seed}", flush=True)
    initial = resolve_start(start, vs_cfg.num_districts, column=args.column)

    search = VoteSearch(
        initial,
        vs_cfg,
        rng=np.random.default_rng(vs_cfg.seed),
        verbose=not args.quiet,
    )
    search.run(max_steps=args.max_steps)


if __name__ == "__main__":
    main()
