# File: backend/app/core/primer/pairing.py
# Version: v0.1.0
"""
Forward/reverse pairing (Phase 2).

For each forward candidate the admissible reverse window starts are
    [f.start + productMin - revMaxLen, f.start + productMax - revMinLen];
the sorted reverse starts are binary-searched to the lower bound and scanned
while start <= upper bound. Pairs outside the product/ΔTm limits (or, with a
forced region, not spanning it) are skipped.

A working list bounded near 4*K keeps the best cheap scores: above 4*K it is
sorted and cut to 2*K, and the worst kept score becomes an early-reject
threshold (pairs more than `pruneMargin` below it are not kept).
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cancellation import CancellationToken
from .candidates import FastCandidate
from .constants import UNBOUNDED_TM_DIFF
from .parameters import PrimerDesignParameters
from .scoring import ScoreContext, cheap_pair_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairLimits:
    product_min: int
    product_max: int
    tm_diff_max: float
    region: Optional[Tuple[int, int]] = None

    @classmethod
    def from_params(cls, params: PrimerDesignParameters, template_len: int) -> "PairLimits":
        if params.forcedRegion is not None:
            return cls(0, template_len, UNBOUNDED_TM_DIFF, tuple(params.forcedRegion))
        return cls(params.productSizeMin, params.productSizeMax, params.primerTmDifferenceMax)


@dataclass
class ScoredPair:
    forward: FastCandidate
    reverse: FastCandidate
    product_size: int
    tm_diff: float
    score: float


@dataclass
class PairingStats:
    considered: int = 0
    pruned: int = 0
    trims: int = 0


def pair_candidates(
    forward: Sequence[FastCandidate],
    reverse: Sequence[FastCandidate],
    params: PrimerDesignParameters,
    template_len: int,
    reverse_window: Tuple[int, int],
    token: Optional[CancellationToken] = None,
) -> Optional[Tuple[List[ScoredPair], PairingStats]]:
    """
    Return the top-K pairs by cheap score (descending, stable) and scan stats,
    or None if cancelled. `reverse` must be sorted by start.
    """
    limits = PairLimits.from_params(params, template_len)
    ctx = ScoreContext(params.primerTmTarget, params.productSizeTarget, params.penalizeSelfComplementarity)
    top_k = params.topK
    rev_min_len, rev_max_len = reverse_window
    rev_starts = [r.start for r in reverse]

    kept: List[ScoredPair] = []
    worst_kept = float("-inf")
    stats = PairingStats()

    for f in forward:
        if token is not None and token.cancelled:
            return None
        if limits.region is not None:
            lo_start, hi_start = 0, template_len - rev_min_len
        else:
            lo_start = f.start + limits.product_min - rev_max_len
            hi_start = f.start + limits.product_max - rev_min_len

        i = bisect_left(rev_starts, lo_start)
        while i < len(reverse) and reverse[i].start <= hi_start:
            r = reverse[i]
            i += 1
            product = r.end - f.start
            if product <= 0 or product < limits.product_min or product > limits.product_max:
                continue
            if limits.region is not None:
                if f.start > limits.region[0] or r.end < limits.region[1]:
                    continue
            tm_diff = abs(f.tm - r.tm)
            if tm_diff > limits.tm_diff_max:
                continue

            score = cheap_pair_score(ctx, f, r, product, tm_diff)
            stats.considered += 1
            if len(kept) >= top_k and score < worst_kept - params.pruneMargin:
                stats.pruned += 1
                continue
            kept.append(ScoredPair(f, r, product, tm_diff, score))

            if len(kept) > top_k * 4:
                kept.sort(key=lambda p: p.score, reverse=True)
                del kept[top_k * 2 :]
                worst_kept = kept[-1].score
                stats.trims += 1
                logger.debug("working set trimmed to %d (worst kept %.2f)", len(kept), worst_kept)

    kept.sort(key=lambda p: p.score, reverse=True)
    del kept[top_k:]
    return kept, stats
