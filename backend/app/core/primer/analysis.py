# File: backend/app/core/primer/analysis.py
# Version: v0.3.0
"""
Full primer analysis (all thermodynamic and structural fields + warnings) and
manual pair summaries.

Used for finalists of the automatic search and for primers entered by hand.
Warnings are informational; they never drop a candidate on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from . import constants as C
from .candidates import FastCandidate, RefinedCandidate, Strand
from .complementarity import (
    any_complementarity,
    hairpin_dg,
    hairpin_run_score,
    hetero_dimer_run,
    longest_homopolymer,
    self_complementarity_run,
    self_dimer_dg,
)
from .overhang import choose_protective_sequence, full_oligo
from .thermodynamics import (
    DEFAULT_CONDITIONS,
    ReactionConditions,
    end_stability,
    gc_percent,
    has_gc_clamp,
    melting_temperature,
    molecular_weight,
    revcomp,
)


def clean_sequence(raw: Optional[str]) -> str:
    """Upper-case and keep only A/C/G/T."""
    if not raw:
        return ""
    return "".join(c for c in raw.upper() if c in "ACGT")


def primer_warnings(candidate: RefinedCandidate) -> List[str]:
    w: List[str] = []
    seq = candidate.sequence
    if candidate.length < C.WARN_LEN_MIN:
        w.append(f"Too short (<{C.WARN_LEN_MIN} bp).")
    if candidate.length > C.WARN_LEN_MAX:
        w.append(f"Too long (>{C.WARN_LEN_MAX} bp).")
    if candidate.tm < C.WARN_TM_MIN:
        w.append(f"Tm too low (<{C.WARN_TM_MIN:.0f}°C).")
    if candidate.tm > C.WARN_TM_MAX:
        w.append(f"Tm too high (>{C.WARN_TM_MAX:.0f}°C).")
    if candidate.gc_percent < C.GC_MIN:
        w.append(f"GC% too low (<{C.GC_MIN:.0f}%).")
    if candidate.gc_percent > C.GC_MAX:
        w.append(f"GC% too high (>{C.GC_MAX:.0f}%).")
    if not candidate.has_gc_clamp:
        w.append("No GC clamp at 3'.")
    if candidate.self_comp_run >= C.WARN_SELF_COMP_RUN:
        w.append("High self-complementarity.")
    if candidate.hairpin_run >= C.WARN_HAIRPIN_RUN:
        w.append("Potential hairpin.")
    if candidate.self_dimer_dg < C.WARN_SELF_DIMER_DG:
        w.append(f"Stable self-dimer (ΔG={candidate.self_dimer_dg:.1f} kcal/mol).")
    if candidate.hairpin_dg < C.WARN_HAIRPIN_DG:
        w.append(f"Stable hairpin (ΔG={candidate.hairpin_dg:.1f} kcal/mol).")
    if longest_homopolymer(seq) >= C.WARN_MONO_RUN:
        w.append(f"Mononucleotide run ≥{C.WARN_MONO_RUN}.")
    ambiguous = sorted(set(seq) - set("ACGT"))
    if ambiguous:
        w.append(f"Ambiguous bases ({''.join(ambiguous)}) carry no NN energy; Tm and ΔG are underestimated.")
    return w


def analyze_primer(
    sequence: str,
    conditions: ReactionConditions = DEFAULT_CONDITIONS,
    *,
    strand: Optional[Strand] = None,
    start: int = -1,
    tm: Optional[float] = None,
) -> RefinedCandidate:
    """
    Analyze one primer. `tm` overrides the reported Tm (e.g. full-oligo Tm when
    the primer carries a restriction overhang); the gene-specific Tm is always
    computed from `sequence`.
    """
    seq = sequence.upper()
    tm_gs = melting_temperature(seq, conditions)
    base = RefinedCandidate(
        strand=strand,
        sequence=seq,
        start=start,
        length=len(seq),
        tm=tm_gs if tm is None else tm,
        tm_gene_specific=tm_gs,
        gc_percent=gc_percent(seq),
        molecular_weight=molecular_weight(seq),
        has_gc_clamp=has_gc_clamp(seq),
        self_comp_run=self_complementarity_run(seq),
        hairpin_run=hairpin_run_score(seq),
        end_stability_dg=end_stability(seq),
        self_dimer_dg=self_dimer_dg(seq),
        hairpin_dg=hairpin_dg(seq),
        any_comp_total=any_complementarity(seq),
    )
    base.warnings.extend(primer_warnings(base))
    return base


def refine_candidate(fast: FastCandidate, conditions: ReactionConditions = DEFAULT_CONDITIONS) -> RefinedCandidate:
    """Promote a screening candidate to a full analysis, keeping its key and Tm."""
    return analyze_primer(fast.sequence, conditions, strand=fast.strand, start=fast.start, tm=fast.tm)


@dataclass
class PairAnalysis:
    tm_difference: float
    hetero_dimer_run: int
    product_size: Optional[int]
    score: float
    warnings: List[str] = field(default_factory=list)
    full_tm_difference: Optional[float] = None


def full_oligo_tm(
    gene_seq: str,
    recognition_seq: Optional[str],
    protective_count: int,
    conditions: ReactionConditions = DEFAULT_CONDITIONS,
) -> float:
    """Tm of protective bases + site + gene-specific part; the bare primer Tm without a site."""
    if not recognition_seq:
        return melting_temperature(gene_seq, conditions)
    prot = choose_protective_sequence(protective_count, recognition_seq, gene_seq)
    return melting_temperature(full_oligo(prot, recognition_seq, gene_seq), conditions)


def locate_product(template: str, forward: str, reverse: str) -> Optional[int]:
    """Amplicon length from first binding sites, or None if not downstream."""
    f_pos = template.find(forward)
    r_pos = template.find(revcomp(reverse))
    if f_pos < 0 or r_pos < 0 or r_pos <= f_pos:
        return None
    return r_pos + len(reverse) - f_pos


def analyze_pair(
    forward: RefinedCandidate,
    reverse: RefinedCandidate,
    template: str = "",
    target_tm: float = C.DEFAULT_TM_TARGET,
    forward_full_tm: Optional[float] = None,
    reverse_full_tm: Optional[float] = None,
) -> PairAnalysis:
    """
    Summary for a hand-entered pair. When both full-oligo Tms are given (primers
    carrying restriction overhangs) their difference is reported and checked too.
    """
    dtm = round(abs(forward.tm - reverse.tm), 1)
    hd = hetero_dimer_run(forward.sequence, reverse.sequence)
    product = locate_product(template, forward.sequence, reverse.sequence) if template else None

    score = (
        100.0
        - dtm * 3.0
        - abs(target_tm - forward.tm)
        - abs(target_tm - reverse.tm)
        - 2.0 * (forward.self_comp_run + reverse.self_comp_run)
        - 2.0 * hd
        - 3.0 * (forward.hairpin_run + reverse.hairpin_run)
    )

    warnings: List[str] = []
    if dtm > C.WARN_PAIR_TM_DIFF:
        warnings.append(f"ΔTm > {C.WARN_PAIR_TM_DIFF:.0f}°C")
    full_dtm = None
    if forward_full_tm is not None and reverse_full_tm is not None:
        full_dtm = round(abs(forward_full_tm - reverse_full_tm), 1)
        if full_dtm > C.WARN_PAIR_TM_DIFF:
            warnings.append(f"Full-oligo ΔTm > {C.WARN_PAIR_TM_DIFF:.0f}°C")
    if hd >= C.WARN_HETERO_DIMER_RUN:
        warnings.append("Hetero-dimer risk")
    return PairAnalysis(
        tm_difference=dtm,
        hetero_dimer_run=hd,
        product_size=product,
        score=round(max(0.0, score), 1),
        warnings=warnings,
        full_tm_difference=full_dtm,
    )
