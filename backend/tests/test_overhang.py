# File: backend/tests/test_overhang.py
# Version: v0.2.0
"""
Restriction overhang integrator: protective base choice and interleaving,
full-oligo Tm in manual pair analysis.
"""

from __future__ import annotations

from backend.app.core.primer.analysis import analyze_pair, analyze_primer, full_oligo_tm
from backend.app.core.primer.overhang import (
    choose_protective_sequence,
    full_oligo,
    interleave_protective,
    protective_proxy,
)
from backend.app.core.primer.thermodynamics import gc_percent, melting_temperature

GENE_50 = "GACCAGTAAGGATCCTAGCA"   # 10/20 G+C
GENE_30 = "GACCAATAAGTATAATAGCA"   # 6/20 G+C


def test_fixture_compositions():
    assert gc_percent(GENE_50) == 50.0
    assert gc_percent(GENE_30) == 30.0


def test_balanced_gene_gets_gc_protection():
    # EcoRI site is AT-rich; two G's restore 50 % overall
    prot = choose_protective_sequence(2, "GAATTC", GENE_50)
    assert prot == "GG"
    assert gc_percent(full_oligo(prot, "GAATTC", GENE_50)) == 50.0


def test_at_rich_gene_gets_at_protection():
    assert choose_protective_sequence(2, "GAATTC", GENE_30) == "AA"


def test_length_always_matches_count():
    for count in range(0, 7):
        prot = choose_protective_sequence(count, "GCGGCCGC", GENE_30)
        assert len(prot) == count
        assert set(prot) <= {"G", "A"}


def test_no_site():
    assert len(choose_protective_sequence(3, None, GENE_50)) == 3
    assert choose_protective_sequence(0, "GAATTC", GENE_50) == ""


def test_interleave_g_majority_first():
    assert interleave_protective(2, 4) == "GAGA"
    assert interleave_protective(3, 4) == "GGGA"
    assert interleave_protective(0, 3) == "AAA"
    assert interleave_protective(9, 2) == "GG"


def test_protective_proxy():
    assert protective_proxy(0) == ""
    assert protective_proxy(3) == "GCG"
    assert protective_proxy(4) == "GCGC"


def test_full_oligo_layout():
    assert full_oligo("GA", "GAATTC", "ACGT") == "GAGAATTCACGT"
    assert full_oligo("", None, "ACGT") == "ACGT"


def test_full_oligo_tm_includes_site_and_protection():
    assert full_oligo_tm(GENE_50, None, 2) == melting_temperature(GENE_50)
    expected = melting_temperature(full_oligo("GG", "GAATTC", GENE_50))
    assert full_oligo_tm(GENE_50, "GAATTC", 2) == expected


def test_pair_warns_on_full_oligo_tm_gap():
    f = analyze_primer(GENE_50)
    r = analyze_primer(GENE_30)

    bare = analyze_pair(f, r)
    assert bare.full_tm_difference is None
    assert not any(w.startswith("Full-oligo") for w in bare.warnings)

    wide = analyze_pair(f, r, forward_full_tm=71.0, reverse_full_tm=63.5)
    assert wide.full_tm_difference == 7.5
    assert "Full-oligo ΔTm > 5°C" in wide.warnings
    assert wide.tm_difference == bare.tm_difference

    close = analyze_pair(f, r, forward_full_tm=64.0, reverse_full_tm=62.0)
    assert close.full_tm_difference == 2.0
    assert "Full-oligo ΔTm > 5°C" not in close.warnings

    at_limit = analyze_pair(f, r, forward_full_tm=65.0, reverse_full_tm=60.0)
    assert "Full-oligo ΔTm > 5°C" not in at_limit.warnings
