# File: backend/app/core/primer/scoring.py
# Version: v0.2.0
"""
Pair scoring. Higher is better; 100 is a perfect pair.

Cheap score (pairing phase), per pair:
- 3.0 x ΔTm, 1.5 x |targetTm - Tm| per primer
- 0.02 x |targetProduct - product|
- 0.5 x |50 - GC%| per primer
- 3.0 x hairpin stem run per primer
- 2.0 x self-complementarity run per primer (optional)

Refinement (finalists only):
- 2.0 x hetero-dimer run
- 2.0 x (|ΔG| excess) for self-dimers more stable than -5.0 kcal/mol (optional)
"""

from __future__ import annotations

from dataclasses import dataclass

from .candidates import FastCandidate
from .constants import SELF_DIMER_PENALTY_DG


@dataclass(frozen=True)
class ScoreContext:
    target_tm: float
    target_product: int
    penalize_self_comp: bool


def cheap_pair_score(ctx: ScoreContext, f: FastCandidate, r: FastCandidate, product_size: int, tm_diff: float) -> float:
    score = 100.0
    score -= tm_diff * 3.0
    score -= abs(ctx.target_tm - f.tm) * 1.5
    score -= abs(ctx.target_tm - r.tm) * 1.5
    score -= abs(ctx.target_product - product_size) * 0.02
    score -= abs(50.0 - f.gc_percent) * 0.5
    score -= abs(50.0 - r.gc_percent) * 0.5
    score -= f.hairpin_run * 3.0
    score -= r.hairpin_run * 3.0
    if ctx.penalize_self_comp:
        score -= f.self_comp_run * 2.0
        score -= r.self_comp_run * 2.0
    return score


def hetero_dimer_penalty(run: int) -> float:
    return run * 2.0


def self_dimer_penalty(dg: float) -> float:
    if dg < SELF_DIMER_PENALTY_DG:
        return abs(dg - SELF_DIMER_PENALTY_DG) * 2.0
    return 0.0
