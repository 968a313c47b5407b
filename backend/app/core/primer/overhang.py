# File: backend/app/core/primer/overhang.py
# Version: v0.1.0
"""
Restriction-site overhangs: protective 5' bases + recognition sequence.

The protective prefix is picked so that GC% of (prefix + site + gene-specific)
stays as close as possible to GC% of the gene-specific part alone.
"""

from __future__ import annotations

from typing import Optional

from .thermodynamics import gc_count


def protective_proxy(count: int) -> str:
    """GC-alternating prefix used while screening candidates, before the real choice."""
    if count <= 0:
        return ""
    return ("GC" * ((count + 1) // 2))[:count]


def interleave_protective(gc_bases: int, count: int) -> str:
    """Fill `count` positions with `gc_bases` G's and A's, G-majority first."""
    g = max(0, min(count, gc_bases))
    a = count - g
    out = []
    while len(out) < count:
        if g > 0 and (a == 0 or g >= a):
            out.append("G")
            g -= 1
        else:
            out.append("A")
            a -= 1
    return "".join(out)


def choose_protective_sequence(count: int, recognition_seq: Optional[str], gene_seq: str) -> str:
    """
    Return exactly `count` protective bases.

    The ideal G/C count x solves
        target = (x + gc_site + gc_gene) / (count + len_site + len_gene)
    with target = GC fraction of the gene-specific part; x is rounded and clamped
    to [0, count].
    """
    if count <= 0:
        return ""
    site = recognition_seq or ""
    target = gc_count(gene_seq) / len(gene_seq) if gene_seq else 0.0
    site_gc = gc_count(site)
    gene_gc = gc_count(gene_seq)
    total_len = count + len(site) + len(gene_seq)
    ideal = target * total_len - site_gc - gene_gc
    gc_bases = int(max(0, min(count, round(ideal))))
    return interleave_protective(gc_bases, count)


def full_oligo(protective: str, recognition_seq: Optional[str], gene_seq: str) -> str:
    return f"{protective}{recognition_seq or ''}{gene_seq}"
