# File: backend/app/core/export/fasta_exporter.py
# Version: v0.3.0

"""
FASTA export of ranked primer pairs.

Two records per pair, ID: pair<rank>_F / pair<rank>_R. The description carries
Tm, GC% and length; full oligos are exported when overhangs are present.
"""

from pathlib import Path
from typing import Iterable, List

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from backend.app.core.primer.candidates import PrimerPairResult


def _records(p: PrimerPairResult) -> List[SeqRecord]:
    out: List[SeqRecord] = []
    for tag, cand, full, full_tm in (
        ("F", p.forward, p.forward_full_oligo, p.forward_full_tm),
        ("R", p.reverse, p.reverse_full_oligo, p.reverse_full_tm),
    ):
        seq = full if p.has_overhang and full else cand.sequence
        tm = full_tm if p.has_overhang and full_tm is not None else cand.tm
        desc = f"tm={tm:.1f} gc={cand.gc_percent:.1f} len={len(seq)} product={p.product_size}"
        out.append(SeqRecord(Seq(seq), id=f"pair{p.rank}_{tag}", description=desc))
    return out


def export_pairs_to_fasta(pairs: Iterable[PrimerPairResult], fasta_path: Path) -> int:
    """Write all pairs; returns the number of records written."""
    records: List[SeqRecord] = []
    for p in pairs:
        records.extend(_records(p))
    return SeqIO.write(records, fasta_path, "fasta")
