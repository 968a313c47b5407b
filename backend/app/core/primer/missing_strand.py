# File: backend/app/core/primer/missing_strand.py
# Version: v0.1.0
"""
Complete a primer pair from one known primer.

Every binding site of the fixed primer is evaluated (forward: the primer
itself; reverse: its reverse complement on the template), not only the first,
so repeated sequences do not hide a better partner further downstream.

Per site, partners of length partnerLengthMin..partnerLengthMax are scanned over
the product window targetProduct ± productTolerance, keeping at least
`minPartnerDistance` bp between the fixed primer and the partner. Candidates must
lie within targetTm ± tmTolerance and GC 30-70 %. Score:

    100 - 3*|Tm - targetTm| - 0.1*|product - targetProduct|
        - 2*selfCompRun - 3*hairpinRun

The single best candidate across all sites wins (first found on ties).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .analysis import analyze_primer
from .cancellation import CancellationToken
from .candidates import RefinedCandidate, Strand
from .complementarity import hairpin_run_score, self_complementarity_run
from .constants import GC_MAX, GC_MIN
from .parameters import MissingStrandParameters
from .thermodynamics import ReactionConditions, gc_percent, melting_temperature, revcomp

logger = logging.getLogger(__name__)


@dataclass
class PartnerHit:
    sequence: str
    start: int
    length: int
    tm: float
    product_size: int
    score: float


@dataclass
class MissingStrandResult:
    found: bool
    partner: Optional[RefinedCandidate] = None
    score: Optional[float] = None
    product_size: Optional[int] = None
    occurrences: List[int] = field(default_factory=list)
    message: str = ""


def find_all_occurrences(template: str, query: str) -> List[int]:
    """All start positions of `query` in `template`, overlapping matches included."""
    positions: List[int] = []
    if not query:
        return positions
    idx = template.find(query)
    while idx >= 0:
        positions.append(idx)
        idx = template.find(query, idx + 1)
    return positions


def _partner_score(params: MissingStrandParameters, seq: str, tm: float, product: int) -> float:
    return (
        100.0
        - abs(tm - params.targetTm) * 3.0
        - abs(product - params.targetProduct) * 0.1
        - self_complementarity_run(seq) * 2.0
        - hairpin_run_score(seq) * 3.0
    )


def _consider(
    best: Optional[PartnerHit],
    params: MissingStrandParameters,
    conditions: ReactionConditions,
    seq: str,
    start: int,
    product: int,
) -> Optional[PartnerHit]:
    tm = melting_temperature(seq, conditions)
    if abs(tm - params.targetTm) > params.tmTolerance:
        return best
    gc = gc_percent(seq)
    if gc < GC_MIN or gc > GC_MAX:
        return best
    score = _partner_score(params, seq, tm, product)
    if best is None or score > best.score:
        return PartnerHit(seq, start, len(seq), tm, product, score)
    return best


def best_reverse_for_site(
    template: str,
    fwd_pos: int,
    params: MissingStrandParameters,
    conditions: ReactionConditions,
    best: Optional[PartnerHit] = None,
) -> Optional[PartnerHit]:
    """Best reverse partner downstream of a forward binding site at `fwd_pos`."""
    n = len(template)
    fwd_end = fwd_pos + len(params.fixedPrimer)
    lo_end = max(fwd_end + params.targetProduct - params.productTolerance, fwd_end + params.minPartnerDistance)
    hi_end = min(n, fwd_end + params.targetProduct + params.productTolerance)
    for end in range(lo_end, hi_end + 1):
        for length in range(params.partnerLengthMin, params.partnerLengthMax + 1):
            if end - length < 0:
                break
            seq = revcomp(template[end - length : end])
            best = _consider(best, params, conditions, seq, end - length, end - fwd_pos)
    return best


def best_forward_for_site(
    template: str,
    rev_pos: int,
    params: MissingStrandParameters,
    conditions: ReactionConditions,
    best: Optional[PartnerHit] = None,
) -> Optional[PartnerHit]:
    """Best forward partner upstream of a reverse binding site at `rev_pos`."""
    n = len(template)
    rev_end = rev_pos + len(params.fixedPrimer)
    lo_start = max(0, rev_pos - params.targetProduct - params.productTolerance)
    hi_start = min(rev_pos - params.targetProduct + params.productTolerance, rev_pos - params.minPartnerDistance)
    for start in range(lo_start, hi_start + 1):
        for length in range(params.partnerLengthMin, params.partnerLengthMax + 1):
            if start + length > n:
                break
            seq = template[start : start + length]
            best = _consider(best, params, conditions, seq, start, rev_end - start)
    return best


def find_missing_strand(
    template: str,
    params: MissingStrandParameters,
    token: Optional[CancellationToken] = None,
) -> MissingStrandResult:
    seq = "".join(template.split()).upper()
    fixed = params.fixedPrimer
    if not seq:
        return MissingStrandResult(found=False, message="Template is empty.")

    label = "Forward" if params.fixedIsForward else "Reverse"
    query = fixed if params.fixedIsForward else revcomp(fixed)
    sites = find_all_occurrences(seq, query)
    if not sites:
        return MissingStrandResult(
            found=False,
            message=f"{label} primer not found on template. Cannot find a complementary partner.",
        )

    conditions = params.conditions()
    best: Optional[PartnerHit] = None
    for pos in sites:
        if token is not None and token.cancelled:
            return MissingStrandResult(found=False, occurrences=sites, message="Search cancelled by a newer request.")
        if params.fixedIsForward:
            best = best_reverse_for_site(seq, pos, params, conditions, best)
        else:
            best = best_forward_for_site(seq, pos, params, conditions, best)

    if best is None:
        logger.info("missing strand: no partner for %s over %d site(s)", fixed, len(sites))
        return MissingStrandResult(
            found=False,
            occurrences=sites,
            message="No partner primer matches the Tm/GC/product criteria. Try widening the tolerances.",
        )

    strand = Strand.REVERSE if params.fixedIsForward else Strand.FORWARD
    partner = analyze_primer(best.sequence, conditions, strand=strand, start=best.start)
    site_msg = f" ({len(sites)} binding sites evaluated)" if len(sites) > 1 else ""
    logger.info("missing strand: %s partner %s (score %.1f)%s", strand.value, best.sequence, best.score, site_msg)
    return MissingStrandResult(
        found=True,
        partner=partner,
        score=round(best.score, 2),
        product_size=best.product_size,
        occurrences=sites,
        message=f"Found complementary {'reverse' if params.fixedIsForward else 'forward'} primer: "
        f"{best.sequence} (Tm={partner.tm:.1f}°C){site_msg}",
    )
