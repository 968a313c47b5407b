# File: backend/app/core/export/csv_exporter.py
# Version: v0.3.0
"""
CSV export of ranked primer pairs.

Columns: Rank, Forward, Reverse, Fwd Tm, Rev Tm, dTm, Product, Score.
When a pair carries restriction overhangs, the full synthesized oligos and
their Tm values are written instead of the gene-specific parts.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, List

from backend.app.core.primer.candidates import PrimerPairResult

CSV_HEADERS = ["Rank", "Forward", "Reverse", "Fwd Tm", "Rev Tm", "dTm", "Product", "Score"]


def _row(p: PrimerPairResult) -> Dict[str, str]:
    fwd = p.forward_full_oligo if p.has_overhang and p.forward_full_oligo else p.forward.sequence
    rev = p.reverse_full_oligo if p.has_overhang and p.reverse_full_oligo else p.reverse.sequence
    fwd_tm = p.forward_full_tm if p.has_overhang and p.forward_full_tm is not None else p.forward.tm
    rev_tm = p.reverse_full_tm if p.has_overhang and p.reverse_full_tm is not None else p.reverse.tm
    return {
        "Rank": str(p.rank),
        "Forward": fwd,
        "Reverse": rev,
        "Fwd Tm": f"{fwd_tm:.1f}",
        "Rev Tm": f"{rev_tm:.1f}",
        "dTm": f"{p.tm_difference:.1f}",
        "Product": str(p.product_size),
        "Score": f"{p.score:.1f}",
    }


def pair_rows(pairs: Iterable[PrimerPairResult]) -> List[Dict[str, str]]:
    return [_row(p) for p in pairs]


def export_pair_results_csv(pairs: Iterable[PrimerPairResult], csv_path: Path) -> Path:
    """Write ranked pairs to `csv_path` (header only when there are none)."""
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with csv_path.open("w", newline="", encoding="utf-8") as fh:
        w = csv.DictWriter(fh, fieldnames=CSV_HEADERS)
        w.writeheader()
        w.writerows(pair_rows(pairs))
    return csv_path
