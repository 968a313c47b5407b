# File: backend/app/core/primer/generator.py
# Version: v0.2.0
"""
Candidate primer generator (Phase 1).

- Forward candidates: template[s : s + L] for every start s and gene-specific length L
- Reverse candidates: revcomp(template[e - L : e]) for every window end e, sorted by
  window start so the pairing phase can binary-search them

With a restriction overhang, Tm filters apply to the full oligo
(protective proxy + site + gene-specific part) while GC% and GC clamp apply to the
gene-specific part. The gene-specific length window shrinks by the overhang length
so the full oligo stays inside [primerLengthMin, primerLengthMax].

Only cheap fields are computed here; ΔG terms wait for the finalists.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .cancellation import CancellationToken
from .candidates import FastCandidate, Strand
from .complementarity import hairpin_run_score, self_complementarity_run
from .constants import GC_MAX, GC_MIN, OVERHANG_MIN_GENE_LEN
from .overhang import protective_proxy
from .parameters import PrimerDesignParameters
from .thermodynamics import ReactionConditions, gc_percent, has_gc_clamp, melting_temperature, revcomp

logger = logging.getLogger(__name__)


def screening_overhangs(params: PrimerDesignParameters) -> Tuple[str, str]:
    """(forward, reverse) 5' overhangs used during screening; '' when a strand has no site."""
    proxy = protective_proxy(params.protectiveBaseCount)
    fwd = proxy + params.forwardRecognitionSeq if params.forwardRecognitionSeq else ""
    rev = proxy + params.reverseRecognitionSeq if params.reverseRecognitionSeq else ""
    return fwd, rev


def gene_specific_window(min_len: int, max_len: int, overhang_len: int) -> Tuple[int, int]:
    if overhang_len <= 0:
        return min_len, max_len
    lo = max(OVERHANG_MIN_GENE_LEN, min_len - overhang_len)
    hi = max(lo, max_len - overhang_len)
    return lo, hi


def _screen(
    strand: Strand,
    gene_seq: str,
    start: int,
    overhang: str,
    params: PrimerDesignParameters,
    conditions: ReactionConditions,
) -> Optional[FastCandidate]:
    gc = gc_percent(gene_seq)
    if gc < GC_MIN or gc > GC_MAX:
        return None
    clamp = has_gc_clamp(gene_seq)
    if params.requireGcClamp and not clamp:
        return None
    tm = melting_temperature(overhang + gene_seq, conditions)
    if tm < params.primerTmMin or tm > params.primerTmMax:
        return None
    tm_gs = melting_temperature(gene_seq, conditions) if overhang else tm
    return FastCandidate(
        strand=strand,
        sequence=gene_seq,
        start=start,
        length=len(gene_seq),
        tm=tm,
        tm_gene_specific=tm_gs,
        gc_percent=gc,
        has_gc_clamp=clamp,
        self_comp_run=self_complementarity_run(gene_seq),
        hairpin_run=hairpin_run_score(gene_seq),
    )


def generate_forward_candidates(
    template: str,
    params: PrimerDesignParameters,
    conditions: ReactionConditions,
    overhang: str = "",
    token: Optional[CancellationToken] = None,
) -> Optional[List[FastCandidate]]:
    """All forward candidates passing the hard filters; None if cancelled."""
    lo, hi = gene_specific_window(params.primerLengthMin, params.primerLengthMax, len(overhang))
    n = len(template)
    out: List[FastCandidate] = []
    for s in range(0, n - lo + 1):
        if token is not None and token.cancelled:
            return None
        for length in range(lo, min(hi, n - s) + 1):
            cand = _screen(Strand.FORWARD, template[s : s + length], s, overhang, params, conditions)
            if cand is not None:
                out.append(cand)
    logger.debug("forward candidates: %d (lengths %d..%d)", len(out), lo, hi)
    return out


def generate_reverse_candidates(
    template: str,
    params: PrimerDesignParameters,
    conditions: ReactionConditions,
    overhang: str = "",
    token: Optional[CancellationToken] = None,
) -> Optional[List[FastCandidate]]:
    """All reverse candidates passing the hard filters, sorted by window start; None if cancelled."""
    lo, hi = gene_specific_window(params.primerLengthMin, params.primerLengthMax, len(overhang))
    n = len(template)
    out: List[FastCandidate] = []
    for end in range(lo, n + 1):
        if token is not None and token.cancelled:
            return None
        for length in range(lo, min(hi, end) + 1):
            start = end - length
            cand = _screen(Strand.REVERSE, revcomp(template[start:end]), start, overhang, params, conditions)
            if cand is not None:
                out.append(cand)
    out.sort(key=lambda c: c.start)
    logger.debug("reverse candidates: %d (lengths %d..%d)", len(out), lo, hi)
    return out
