# File: backend/app/core/primer/complementarity.py
# Version: v0.3.0
"""
Self-/cross-complementarity metrics for primer candidates.

Includes:
- Longest complementary run (self and primer-primer), ungapped, all offsets
- Total complementary positions at the best offset ("any" complementarity)
- Hairpin stem score (cheap) and hairpin ΔG (NN stem + loop initiation)
- Self-dimer ΔG (NN runs + duplex initiation)
- Homopolymer run checks

Dimer scans slide `a` over the reverse complement of `b` and count positions
where `a[i]` and `rc(b)[j]` form a Watson-Crick pair (A-T, G-C).
"""

from __future__ import annotations

import math
from typing import Iterator, Tuple

from .constants import (
    DUPLEX_INITIATION_DG,
    GAS_CONSTANT,
    HAIRPIN_LOOP_MAX,
    HAIRPIN_LOOP_MIN,
    HAIRPIN_LOOP_PENALTY,
    HAIRPIN_SCORE_LOOP_MAX,
    HAIRPIN_TEMPERATURE_K,
    NN_DG,
)
from .thermodynamics import nn_index, revcomp

_PAIRS = frozenset({("A", "T"), ("T", "A"), ("G", "C"), ("C", "G")})


def is_complement(a: str, b: str) -> bool:
    return (a, b) in _PAIRS


def _offsets(a: str, b: str, min_overlap: int = 1) -> Iterator[Tuple[int, int, int]]:
    """
    Yield (i0, j0, overlap) for every ungapped alignment of `a` over `b`
    with at least `min_overlap` aligned positions.
    """
    la, lb = len(a), len(b)
    for shift in range(-(lb - min_overlap), la - min_overlap + 1):
        i0 = max(0, shift)
        j0 = max(0, -shift)
        overlap = min(la - i0, lb - j0)
        if overlap >= min_overlap:
            yield i0, j0, overlap


def complement_runs(a: str, b: str) -> Tuple[int, int]:
    """
    Compute, over all offsets of a against rc(b):
     - longest run of consecutive complementary positions
     - total complementary positions in the best offset

    Returns:
        (max_consecutive, max_total)
    """
    rc = revcomp(b)
    max_consec = 0
    max_total = 0
    for i0, j0, overlap in _offsets(a, rc):
        consec = 0
        total = 0
        for k in range(overlap):
            if (a[i0 + k], rc[j0 + k]) in _PAIRS:
                total += 1
                consec += 1
                if consec > max_consec:
                    max_consec = consec
            else:
                consec = 0
        if total > max_total:
            max_total = total
    return max_consec, max_total


def hetero_dimer_run(a: str, b: str) -> int:
    """Longest consecutive complementary run between two primers."""
    if not a or not b:
        return 0
    return complement_runs(a, b)[0]


def self_complementarity_run(seq: str) -> int:
    if len(seq) < 4:
        return 0
    return complement_runs(seq, seq)[0]


def any_complementarity(seq: str) -> int:
    if len(seq) < 4:
        return 0
    return complement_runs(seq, seq)[1]


def hairpin_run_score(seq: str) -> int:
    """Longest consecutive hairpin stem (loops of 3..8 nt), no energetics."""
    n = len(seq)
    if n < 8:
        return 0
    best = 0
    for loop_start in range(3, n - 3):
        for loop_len in range(HAIRPIN_LOOP_MIN, HAIRPIN_SCORE_LOOP_MAX + 1):
            if loop_start + loop_len >= n:
                break
            stem_max = min(loop_start, n - loop_start - loop_len)
            m = 0
            for k in range(stem_max):
                if (seq[loop_start - 1 - k], seq[loop_start + loop_len + k]) in _PAIRS:
                    m += 1
                else:
                    break
            if m > best:
                best = m
    return best


def loop_penalty(loop_len: int) -> float:
    """Hairpin loop initiation ΔG (kcal/mol); log extrapolation past 20 nt."""
    if loop_len < len(HAIRPIN_LOOP_PENALTY):
        return HAIRPIN_LOOP_PENALTY[loop_len]
    rt = GAS_CONSTANT * HAIRPIN_TEMPERATURE_K / 1000.0
    return HAIRPIN_LOOP_PENALTY[-1] + 2.44 * rt * math.log(loop_len / 20.0)


def hairpin_dg(seq: str) -> float:
    """
    Most stable hairpin ΔG (kcal/mol, <= 0).

    Every loop start >= 2 from the 5' end and loop length 3..12 is tried; the stem
    grows outward from the loop while bases pair. Stems of >= 2 bp contribute NN
    ΔG per stacked step plus the loop initiation penalty.
    """
    n = len(seq)
    if n < 8:
        return 0.0
    worst = 0.0
    for loop_start in range(2, n - 4):
        for loop_len in range(HAIRPIN_LOOP_MIN, min(HAIRPIN_LOOP_MAX, n - loop_start - 2) + 1):
            max_stem = min(loop_start, n - loop_start - loop_len)
            if max_stem < 2:
                continue
            stem_bp = 0
            stem_dg = 0.0
            for s in range(max_stem):
                pos5 = loop_start - 1 - s
                pos3 = loop_start + loop_len + s
                if (seq[pos5], seq[pos3]) not in _PAIRS:
                    break
                stem_bp += 1
                if stem_bp >= 2:
                    idx = nn_index(seq[pos5], seq[pos5 + 1])
                    if idx >= 0:
                        stem_dg += NN_DG[idx]
            if stem_bp >= 2:
                total = stem_dg + loop_penalty(loop_len)
                if total < worst:
                    worst = total
    return round(worst, 2)


def self_dimer_dg(seq: str) -> float:
    """
    Most stable self-dimer ΔG (kcal/mol, <= 0).

    Slides seq over its reverse complement; at every offset with >= 2 aligned
    positions, each run of >= 2 consecutive pairs scores the NN ΔG of its
    stacked steps plus the duplex initiation penalty; the most negative run wins.
    """
    n = len(seq)
    if n < 4:
        return 0.0
    rc = revcomp(seq)
    worst = 0.0
    for i0, j0, overlap in _offsets(seq, rc, min_overlap=2):
        run_len = 0
        run_dg = 0.0
        for k in range(overlap + 1):
            paired = k < overlap and (seq[i0 + k], rc[j0 + k]) in _PAIRS
            if paired:
                run_len += 1
                if run_len >= 2:
                    idx = nn_index(seq[i0 + k - 1], seq[i0 + k])
                    if idx >= 0:
                        run_dg += NN_DG[idx]
                continue
            if run_len >= 2:
                dg = run_dg + DUPLEX_INITIATION_DG
                if dg < worst:
                    worst = dg
            run_len = 0
            run_dg = 0.0
    return round(worst, 2)


def longest_homopolymer(seq: str) -> int:
    best = 0
    run = 0
    prev = ""
    for c in seq:
        if c == prev:
            run += 1
        else:
            run = 1
            prev = c
        if run > best:
            best = run
    return best
