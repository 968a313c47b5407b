# File: backend/tests/test_thermodynamics.py
# Version: v0.2.0
"""
Thermodynamic calculator:
- Wallace / nearest-neighbor switch at 13/14 nt
- Tm symmetry under reverse complement
- salt and primer-concentration trends, salt-correction regime boundaries
- GC%, clamp, molecular weight, 3' end stability
"""

from __future__ import annotations

import math

import pytest

from backend.app.core.primer.constants import GAS_CONSTANT, INIT_AT, INIT_GC, NN_DH, NN_DS
from backend.app.core.primer.thermodynamics import (
    ReactionConditions,
    _divalent_inv_tm,
    _owczarzy_inv_tm,
    end_stability,
    gc_percent,
    has_gc_clamp,
    melting_temperature,
    molecular_weight,
    nearest_neighbor_tm,
    nn_index,
    revcomp,
    wallace_tm,
)

SEQS = [
    "ATGCGTACCTGAGCATCG",
    "GACCAGTCAGGATCCTAGCA",
    "TTTTAAAACCCCGGGGATAT",
    "GCGCGCATATATGCGCAT",
]


def test_revcomp_and_gc():
    assert revcomp("ATGC") == "GCAT"
    assert revcomp("AXGC") == "GCNT"
    assert math.isclose(gc_percent("ATGC"), 50.0)
    assert gc_percent("GGGA") == 75.0
    assert gc_percent("ACG") == 33.3
    assert gc_percent("") == 0.0


def test_gc_clamp():
    assert has_gc_clamp("AAAG")
    assert has_gc_clamp("AAAC")
    assert not has_gc_clamp("AAGT")
    assert not has_gc_clamp("")


def test_wallace_below_14_nt():
    s13 = "ATGCGTACCTGAG"
    assert len(s13) == 13
    assert melting_temperature(s13) == wallace_tm(s13) == 2.0 * 6 + 4.0 * 7


def test_nearest_neighbor_from_14_nt():
    s14 = "ATGCGTACCTGAGC"
    assert melting_temperature(s14) == nearest_neighbor_tm(s14)
    assert melting_temperature(s14 + "A") == nearest_neighbor_tm(s14 + "A")


@pytest.mark.parametrize("seq", SEQS)
def test_tm_symmetric_under_revcomp(seq):
    assert nearest_neighbor_tm(seq) == nearest_neighbor_tm(revcomp(seq))


def test_typical_20mer_default_buffer():
    tm = melting_temperature("GACCAGTCAGGATCCTAGCA")
    assert 50.0 < tm < 70.0


def test_monovalent_salt_raises_tm():
    seq = SEQS[1]
    tms = [
        nearest_neighbor_tm(seq, ReactionConditions.from_millimolar(mono, 0.0, 0.0, 250.0))
        for mono in (10.0, 50.0, 200.0, 1000.0)
    ]
    assert tms == sorted(tms)
    assert len(set(tms)) == len(tms)


def test_primer_concentration_raises_tm():
    # R*ln(Ct/4) in the denominator: more strands, more stable duplex
    seq = SEQS[1]
    tms = [
        nearest_neighbor_tm(seq, ReactionConditions.from_millimolar(50.0, 1.5, 0.6, nm))
        for nm in (50.0, 250.0, 1000.0)
    ]
    assert tms[0] < tms[1] < tms[2]


def test_magnesium_regimes_stay_finite():
    seq = SEQS[0]
    for mono, mg, dntp in ((50.0, 1.5, 0.6), (50.0, 0.1, 0.0), (1.0, 10.0, 0.0), (0.0, 2.0, 0.0), (0.0, 0.0, 0.0)):
        tm = nearest_neighbor_tm(seq, ReactionConditions.from_millimolar(mono, mg, dntp, 250.0))
        assert math.isfinite(tm)


def test_dntp_chelates_magnesium():
    cond = ReactionConditions.from_millimolar(50.0, 1.5, 0.6, 250.0)
    assert cond.free_divalent == pytest.approx(0.0009)
    assert ReactionConditions.from_millimolar(50.0, 0.5, 0.6, 250.0).free_divalent == 0.0


def test_non_acgt_contributes_nothing():
    clean = "GACCAGTCAGGATCCTAGCA"
    assert math.isfinite(nearest_neighbor_tm(clean[:10] + "N" + clean[11:]))


def test_molecular_weight():
    assert molecular_weight("A") == 410.2
    assert molecular_weight("AT") == round(331.2 + 322.2 - 18.0 + 79.0, 1)
    assert molecular_weight("") == 0.0


def test_end_stability():
    # last 5 bases GCGCG: GC, CG, GC, CG
    assert end_stability("AAAAAGCGCG") == round(-2.24 - 2.17 - 2.24 - 2.17, 2)
    assert end_stability("ACG") == 0.0


def _tm_1m(seq, cond):
    h = [(INIT_GC if b in "GC" else INIT_AT)[0] for b in (seq[0], seq[-1])]
    s = [(INIT_GC if b in "GC" else INIT_AT)[1] for b in (seq[0], seq[-1])]
    for i in range(len(seq) - 1):
        idx = nn_index(seq[i], seq[i + 1])
        h.append(NN_DH[idx])
        s.append(NN_DS[idx])
    dh, ds = math.fsum(h), math.fsum(s)
    strand = GAS_CONSTANT * math.log(cond.primer / 4.0)
    return dh, ds, strand, dh * 1000.0 / (ds + strand)


def _expected(inv_tm):
    return round(1.0 / inv_tm - 273.15, 1)


# (mono mM, free Mg mM) chosen so sqrt(Mg)/Mon lands just either side of 0.22 and 6.0
@pytest.mark.parametrize("mono_mm, mg_mm, regime", [
    (50.0, (0.21 * 0.05) ** 2 * 1000, "mono"),
    (50.0, (0.23 * 0.05) ** 2 * 1000, "mixed"),
    (1.0, (5.9 * 0.001) ** 2 * 1000, "mixed"),
    (1.0, (6.1 * 0.001) ** 2 * 1000, "divalent"),
])
def test_salt_regime_boundaries(mono_mm, mg_mm, regime):
    seq = SEQS[0]
    cond = ReactionConditions.from_millimolar(mono_mm, mg_mm, 0.0, 250.0)
    _, _, _, tm_1m = _tm_1m(seq, cond)
    f_gc = sum(c in "GC" for c in seq) / len(seq)
    mono, mg, n = cond.monovalent, cond.free_divalent, len(seq)

    by_regime = {
        "mono": _expected(_owczarzy_inv_tm(tm_1m, f_gc, mono)),
        "mixed": _expected(_divalent_inv_tm(tm_1m, f_gc, n, mono, mg, mixed=True)),
        "divalent": _expected(_divalent_inv_tm(tm_1m, f_gc, n, mono, mg, mixed=False)),
    }
    assert nearest_neighbor_tm(seq, cond) == by_regime[regime]


def test_mixed_and_divalent_formulas_differ_near_ratio_six():
    seq = SEQS[0]
    cond = ReactionConditions.from_millimolar(1.0, (6.1 * 0.001) ** 2 * 1000, 0.0, 250.0)
    _, _, _, tm_1m = _tm_1m(seq, cond)
    f_gc = sum(c in "GC" for c in seq) / len(seq)
    args = (tm_1m, f_gc, len(seq), cond.monovalent, cond.free_divalent)
    assert abs(_expected(_divalent_inv_tm(*args, mixed=True)) - _expected(_divalent_inv_tm(*args, mixed=False))) > 1.0


def test_no_free_magnesium_uses_monovalent_correction():
    seq = SEQS[0]
    cond = ReactionConditions.from_millimolar(50.0, 0.5, 0.6, 250.0)
    _, _, _, tm_1m = _tm_1m(seq, cond)
    f_gc = sum(c in "GC" for c in seq) / len(seq)
    assert nearest_neighbor_tm(seq, cond) == _expected(_owczarzy_inv_tm(tm_1m, f_gc, cond.monovalent))


@pytest.mark.parametrize("mg_mm", [0.0, 2.0])
def test_no_monovalent_uses_entropy_salt_term(mg_mm):
    seq = SEQS[0]
    cond = ReactionConditions.from_millimolar(0.0, mg_mm, 0.0, 250.0)
    dh, ds, strand, _ = _tm_1m(seq, cond)
    salt_ds = ds + 0.368 * (len(seq) - 1) * math.log(0.05)
    assert nearest_neighbor_tm(seq, cond) == round(dh * 1000.0 / (salt_ds + strand) - 273.15, 1)
