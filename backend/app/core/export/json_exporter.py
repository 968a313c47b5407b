# File: backend/app/core/export/json_exporter.py
# Version: v0.4.0

"""
Serialize primer search outcomes to plain dicts / JSON files.

The dict layout (camelCase keys) is shared by the CLI output, the run history
table and the API response models.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from backend.app.core.primer.candidates import DesignOutcome, PrimerPairResult, RefinedCandidate


def candidate_to_dict(c: RefinedCandidate) -> Dict[str, Any]:
    return {
        "strand": c.strand.value if c.strand is not None else None,
        "sequence": c.sequence,
        "start": c.start,
        "length": c.length,
        "tm": c.tm,
        "tmGeneSpecific": c.tm_gene_specific,
        "gcPercent": c.gc_percent,
        "molecularWeight": c.molecular_weight,
        "hasGcClamp": c.has_gc_clamp,
        "selfComplementarity": c.self_comp_run,
        "hairpinScore": c.hairpin_run,
        "endStability": c.end_stability_dg,
        "selfDimerDG": c.self_dimer_dg,
        "hairpinDG": c.hairpin_dg,
        "anyComplementarity": c.any_comp_total,
        "warnings": list(c.warnings),
    }


def pair_to_dict(p: PrimerPairResult) -> Dict[str, Any]:
    return {
        "rank": p.rank,
        "forward": candidate_to_dict(p.forward),
        "reverse": candidate_to_dict(p.reverse),
        "productSize": p.product_size,
        "tmDifference": p.tm_difference,
        "score": p.score,
        "heteroDimerRun": p.hetero_dimer_run,
        "hasOverhang": p.has_overhang,
        "forwardFullOligo": p.forward_full_oligo,
        "reverseFullOligo": p.reverse_full_oligo,
        "forwardFullTm": p.forward_full_tm,
        "reverseFullTm": p.reverse_full_tm,
    }


def outcome_to_dict(outcome: DesignOutcome) -> Dict[str, Any]:
    return {
        "status": outcome.status.value,
        "message": outcome.message,
        "forwardCandidates": outcome.forward_candidates,
        "reverseCandidates": outcome.reverse_candidates,
        "totalPairsConsidered": outcome.pairs_considered,
        "pairs": [pair_to_dict(p) for p in outcome.pairs],
    }


def export_outcome_to_json(
    outcome: DesignOutcome,
    json_path: Path,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Write the outcome (plus optional run metadata) and return the payload."""
    payload = dict(extra or {})
    payload.update(outcome_to_dict(outcome))
    json_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return payload
