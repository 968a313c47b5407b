# File: backend/app/core/primer/designer.py
# Version: v2.1.0
"""
Primer pair search: candidate generation, pairing and refinement.

Phases
------
1. Candidate generation (`generator.py`): every forward/reverse window that
   passes length, Tm, GC% and (optional) GC-clamp filters.
2. Pairing (`pairing.py`): sorted-index scan within product/ΔTm limits,
   bounded working list, cheap score, top-K.
3. Refinement (here): for the top-K pairs only, subtract hetero-dimer and
   self-dimer penalties, assemble restriction-overhang oligos, drop pairs whose
   full oligos leave the Tm window or ΔTm limit (unless a forced region is
   set), then rank and keep `maxResults`.

Outcomes
--------
- OK: ranked pairs, rank 1..n
- NO_SOLUTION: search finished, nothing satisfied the constraints (empty list)
- INVALID_INPUT: rejected before any search
- CANCELLED: the token was cancelled; partial work is discarded

Coordinates are 0-based, end-exclusive.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, List, Optional, Tuple

from .analysis import refine_candidate
from .cancellation import CancellationToken
from .candidates import DesignOutcome, DesignStatus, FastCandidate, PrimerPairResult, RefinedCandidate
from .complementarity import hetero_dimer_run
from .generator import (
    gene_specific_window,
    generate_forward_candidates,
    generate_reverse_candidates,
    screening_overhangs,
)
from .overhang import choose_protective_sequence, full_oligo
from .pairing import ScoredPair, pair_candidates
from .parameters import PrimerDesignParameters
from .scoring import hetero_dimer_penalty, self_dimer_penalty
from .thermodynamics import ReactionConditions, melting_temperature

logger = logging.getLogger(__name__)

_CandidateKey = Tuple[str, int, int]


def normalize_template(raw: str) -> str:
    """Upper-case and drop whitespace; other characters are kept for validation."""
    return "".join(raw.split()).upper()


def validate_template(template: str, params: PrimerDesignParameters) -> Optional[str]:
    """Return an error message, or None when the template can be searched."""
    if not template:
        return "Template is empty."
    bad = sorted(set(template) - set("ACGT"))
    if bad:
        return f"Template contains non-ACGT characters: {''.join(bad)}"
    if len(template) < params.primerLengthMin:
        return f"Template ({len(template)} bp) is shorter than the minimum primer length ({params.primerLengthMin} bp)."
    if params.forcedRegion is not None and params.forcedRegion[1] > len(template):
        return f"Forced region end {params.forcedRegion[1]} exceeds template length {len(template)}."
    return None


class PrimerDesigner:
    """
    Stateless search engine. Template and parameters are read-only inputs;
    every intermediate list is local to one `design` call.
    """

    @staticmethod
    def digest_sequence(seq: str) -> str:
        return hashlib.sha256(seq.encode("utf-8")).hexdigest()

    def design(
        self,
        template: str,
        params: PrimerDesignParameters,
        token: Optional[CancellationToken] = None,
    ) -> DesignOutcome:
        seq = normalize_template(template)
        error = validate_template(seq, params)
        if error:
            logger.info("design rejected: %s", error)
            return DesignOutcome(status=DesignStatus.INVALID_INPUT, message=error)

        conditions = params.conditions()
        fwd_oh, rev_oh = screening_overhangs(params)

        forward = generate_forward_candidates(seq, params, conditions, fwd_oh, token)
        if forward is None:
            return _cancelled()
        reverse = generate_reverse_candidates(seq, params, conditions, rev_oh, token)
        if reverse is None:
            return _cancelled()
        logger.info("phase 1: %d forward, %d reverse candidates (template %d bp)", len(forward), len(reverse), len(seq))

        if not forward or not reverse:
            return DesignOutcome(
                status=DesignStatus.NO_SOLUTION,
                message="No primer candidates satisfy the length/Tm/GC/clamp filters.",
                forward_candidates=len(forward),
                reverse_candidates=len(reverse),
            )

        rev_window = gene_specific_window(params.primerLengthMin, params.primerLengthMax, len(rev_oh))
        paired = pair_candidates(forward, reverse, params, len(seq), rev_window, token)
        if paired is None:
            return _cancelled()
        finalists, stats = paired
        logger.info(
            "phase 2: %d pairs considered, %d pruned, %d kept for refinement",
            stats.considered, stats.pruned, len(finalists),
        )

        if not finalists:
            return DesignOutcome(
                status=DesignStatus.NO_SOLUTION,
                message="No primer pair satisfies the product size and ΔTm limits.",
                forward_candidates=len(forward),
                reverse_candidates=len(reverse),
                pairs_considered=stats.considered,
            )

        results = self._refine(finalists, params, conditions, token)
        if results is None:
            return _cancelled()
        if not results:
            return DesignOutcome(
                status=DesignStatus.NO_SOLUTION,
                message="No primer pair keeps its Tm and ΔTm limits once restriction overhangs are attached.",
                forward_candidates=len(forward),
                reverse_candidates=len(reverse),
                pairs_considered=stats.considered,
            )
        logger.info("phase 3: %d ranked pairs (best score %.1f)", len(results), results[0].score)

        return DesignOutcome(
            status=DesignStatus.OK,
            pairs=results,
            message=f"{len(results)} primer pair(s) found.",
            forward_candidates=len(forward),
            reverse_candidates=len(reverse),
            pairs_considered=stats.considered,
        )

    def _refine(
        self,
        finalists: List[ScoredPair],
        params: PrimerDesignParameters,
        conditions: ReactionConditions,
        token: Optional[CancellationToken],
    ) -> Optional[List[PrimerPairResult]]:
        cache: Dict[_CandidateKey, RefinedCandidate] = {}

        def refined(c: FastCandidate) -> RefinedCandidate:
            key = (c.strand.value, c.start, c.length)
            if key not in cache:
                cache[key] = refine_candidate(c, conditions)
            return cache[key]

        out: List[PrimerPairResult] = []
        rejected = 0
        for pair in finalists:
            if token is not None and token.cancelled:
                return None
            f = refined(pair.forward)
            r = refined(pair.reverse)

            hd = hetero_dimer_run(f.sequence, r.sequence)
            score = pair.score - hetero_dimer_penalty(hd)
            if params.penalizeSelfComplementarity:
                score -= self_dimer_penalty(f.self_dimer_dg)
                score -= self_dimer_penalty(r.self_dimer_dg)

            result = PrimerPairResult(
                rank=0,
                forward=f,
                reverse=r,
                product_size=pair.product_size,
                tm_difference=round(pair.tm_diff, 1),
                score=round(score, 2),
                hetero_dimer_run=hd,
            )
            if params.has_overhang:
                _attach_overhangs(result, params, conditions)
                if params.forcedRegion is None and not _full_oligos_within_limits(result, params):
                    rejected += 1
                    continue
            out.append(result)

        if rejected:
            logger.info("phase 3: %d pair(s) dropped, full-oligo Tm outside limits", rejected)

        out.sort(key=lambda p: p.score, reverse=True)
        del out[params.maxResults :]
        for i, p in enumerate(out, start=1):
            p.rank = i
        return out


def _attach_overhangs(result: PrimerPairResult, params: PrimerDesignParameters, conditions: ReactionConditions) -> None:
    """Full synthesized oligos; tm_difference becomes the full-oligo ΔTm."""
    count = params.protectiveBaseCount

    f_site = params.forwardRecognitionSeq
    if f_site:
        prot = choose_protective_sequence(count, f_site, result.forward.sequence)
        result.forward_full_oligo = full_oligo(prot, f_site, result.forward.sequence)
        result.forward_full_tm = melting_temperature(result.forward_full_oligo, conditions)
    else:
        result.forward_full_oligo = result.forward.sequence
        result.forward_full_tm = result.forward.tm_gene_specific

    r_site = params.reverseRecognitionSeq
    if r_site:
        prot = choose_protective_sequence(count, r_site, result.reverse.sequence)
        result.reverse_full_oligo = full_oligo(prot, r_site, result.reverse.sequence)
        result.reverse_full_tm = melting_temperature(result.reverse_full_oligo, conditions)
    else:
        result.reverse_full_oligo = result.reverse.sequence
        result.reverse_full_tm = result.reverse.tm_gene_specific

    result.has_overhang = True
    result.tm_difference = round(abs(result.forward_full_tm - result.reverse_full_tm), 1)


def _full_oligos_within_limits(result: PrimerPairResult, params: PrimerDesignParameters) -> bool:
    """Full oligos must stay inside the Tm window and within the ΔTm limit."""
    for tm in (result.forward_full_tm, result.reverse_full_tm):
        if tm < params.primerTmMin or tm > params.primerTmMax:
            return False
    return abs(result.forward_full_tm - result.reverse_full_tm) <= params.primerTmDifferenceMax


def _cancelled() -> DesignOutcome:
    logger.info("design cancelled")
    return DesignOutcome(status=DesignStatus.CANCELLED, message="Search cancelled by a newer request.")


def design_primers(
    template: str,
    params: Optional[PrimerDesignParameters] = None,
    token: Optional[CancellationToken] = None,
) -> DesignOutcome:
    """Convenience wrapper with default parameters."""
    return PrimerDesigner().design(template, params or PrimerDesignParameters(), token)
