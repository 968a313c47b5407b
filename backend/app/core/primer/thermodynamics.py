# File: backend/app/core/primer/thermodynamics.py
# Version: v0.2.0
"""
Thermodynamics utilities for primer properties.

Implements:
- Nearest-neighbor Tm (SantaLucia 1998) with Owczarzy salt correction
  (monovalent-only, mixed mono/divalent, divalent-dominated regimes)
- Wallace rule for short oligos (< 14 nt)
- GC percentage, molecular weight, 3' end stability, GC clamp
- Reverse complement

Concentrations are molar inside this module; `ReactionConditions.from_millimolar`
converts the mM/nM units used by the parameter model.

Characters outside A/C/G/T contribute nothing to NN sums but still count toward
length and GC denominators.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import (
    BASE_INDEX,
    BASE_MASS,
    END_STABILITY_BASES,
    GAS_CONSTANT,
    INIT_AT,
    INIT_GC,
    KELVIN,
    MIN_MONOVALENT_M,
    MIN_PRIMER_M,
    NN_DG,
    NN_DH,
    NN_DS,
    SALT_RATIO_MIXED,
    SALT_RATIO_MONO,
    TERMINAL_PHOSPHATE_MASS,
    UNKNOWN_BASE_MASS,
    WALLACE_MAX_LEN,
    WATER_MASS,
)

_RC_MAP = str.maketrans("ACGTacgt", "TGCAtgca")


@dataclass(frozen=True)
class ReactionConditions:
    """Buffer composition in mol/L."""

    monovalent: float = 0.05
    divalent: float = 0.0015
    dntp: float = 0.0006
    primer: float = 250e-9

    @classmethod
    def from_millimolar(cls, monovalent_mm: float, divalent_mm: float, dntp_mm: float, primer_nm: float) -> "ReactionConditions":
        return cls(
            monovalent=max(0.0, monovalent_mm) / 1000.0,
            divalent=max(0.0, divalent_mm) / 1000.0,
            dntp=max(0.0, dntp_mm) / 1000.0,
            primer=max(MIN_PRIMER_M, primer_nm * 1e-9),
        )

    @property
    def free_divalent(self) -> float:
        return max(0.0, self.divalent - self.dntp)


DEFAULT_CONDITIONS = ReactionConditions()


def revcomp(seq: str) -> str:
    """Reverse complement; characters other than A/C/G/T become N."""
    out = seq.translate(_RC_MAP)[::-1]
    return "".join(c if c in "ACGTacgt" else "N" for c in out)


def nn_index(b1: str, b2: str) -> int:
    """Table index for a dinucleotide, or -1 if either base has no parameter."""
    i = BASE_INDEX.get(b1, -1)
    j = BASE_INDEX.get(b2, -1)
    if i < 0 or j < 0:
        return -1
    return i * 4 + j


def gc_count(seq: str) -> int:
    return seq.count("G") + seq.count("C")


def gc_percent(seq: str) -> float:
    if not seq:
        return 0.0
    return round(100.0 * gc_count(seq) / len(seq), 1)


def has_gc_clamp(seq: str) -> bool:
    return bool(seq) and seq[-1] in ("G", "C")


def wallace_tm(seq: str) -> float:
    """Tm proxy (°C): 2*(A+T) + 4*(G+C); other symbols count as A/T."""
    gc = gc_count(seq)
    return 2.0 * (len(seq) - gc) + 4.0 * gc


def _owczarzy_inv_tm(tm_1m: float, f_gc: float, mono: float) -> float:
    ln_na = math.log(mono)
    return 1.0 / tm_1m + (4.29 * f_gc - 3.95) * 1e-5 * ln_na + 9.40e-6 * ln_na * ln_na


def _divalent_inv_tm(tm_1m: float, f_gc: float, n: int, mono: float, free_mg: float, mixed: bool) -> float:
    ln_mg = math.log(free_mg)
    a, b, c, d = 3.92e-5, -9.11e-6, 6.26e-5, 1.42e-5
    e, f, g = -4.82e-4, 5.25e-4, 8.31e-5
    if mixed:
        ln_mon = math.log(mono)
        a = 3.92e-5 * (0.843 - 0.352 * math.sqrt(mono) * ln_mon)
        d = 1.42e-5 * (1.279 - 4.03e-3 * ln_mon - 8.03e-3 * ln_mon * ln_mon)
        g = 8.31e-5 * (0.486 - 0.258 * ln_mon + 5.25e-3 * ln_mon * ln_mon * ln_mon)
    return (
        1.0 / tm_1m
        + a
        + b * ln_mg
        + f_gc * (c + d * ln_mg)
        + (1.0 / (2.0 * (n - 1))) * (e + f * ln_mg + g * ln_mg * ln_mg)
    )


def nearest_neighbor_tm(seq: str, conditions: ReactionConditions = DEFAULT_CONDITIONS) -> float:
    """
    Salt-corrected nearest-neighbor Tm (°C, rounded to 0.1).

    Regimes by ratio = sqrt(free Mg) / [Mon]:
      - free Mg > 0, ratio < 0.22   -> monovalent correction
      - 0.22 <= ratio < 6.0         -> mixed correction
      - ratio >= 6.0                -> divalent correction
      - free Mg == 0                -> monovalent correction, or a plain ΔS salt
                                       term when no monovalent ion is present
    """
    n = len(seq)
    if n < 2:
        return wallace_tm(seq)

    # fsum keeps the totals independent of summation order (seq vs. revcomp)
    h_terms = []
    s_terms = []
    for end in (seq[0], seq[-1]):
        h, s = INIT_GC if end in ("G", "C") else INIT_AT
        h_terms.append(h)
        s_terms.append(s)
    for i in range(n - 1):
        idx = nn_index(seq[i], seq[i + 1])
        if idx >= 0:
            h_terms.append(NN_DH[idx])
            s_terms.append(NN_DS[idx])
    dh = math.fsum(h_terms)
    ds = math.fsum(s_terms)

    primer = max(MIN_PRIMER_M, conditions.primer)
    strand_term = GAS_CONSTANT * math.log(primer / 4.0)
    tm_1m = (dh * 1000.0) / (ds + strand_term)
    f_gc = gc_count(seq) / n
    mono = conditions.monovalent
    free_mg = conditions.free_divalent

    if free_mg > 0 and mono > 0:
        mono = max(MIN_MONOVALENT_M, mono)
        ratio = math.sqrt(free_mg) / mono
        if ratio < SALT_RATIO_MONO:
            inv_tm = _owczarzy_inv_tm(tm_1m, f_gc, mono)
        else:
            inv_tm = _divalent_inv_tm(tm_1m, f_gc, n, mono, free_mg, mixed=ratio < SALT_RATIO_MIXED)
        return round(1.0 / inv_tm - KELVIN, 1)

    if mono > 0:
        inv_tm = _owczarzy_inv_tm(tm_1m, f_gc, max(MIN_MONOVALENT_M, mono))
        return round(1.0 / inv_tm - KELVIN, 1)

    salt_ds = ds + 0.368 * (n - 1) * math.log(0.05)
    return round((dh * 1000.0) / (salt_ds + strand_term) - KELVIN, 1)


def melting_temperature(seq: str, conditions: ReactionConditions = DEFAULT_CONDITIONS) -> float:
    """Tm in °C: Wallace rule below 14 nt, nearest-neighbor otherwise."""
    if not seq:
        return 0.0
    if len(seq) <= WALLACE_MAX_LEN:
        return wallace_tm(seq)
    return nearest_neighbor_tm(seq, conditions)


def molecular_weight(seq: str) -> float:
    if not seq:
        return 0.0
    mw = sum(BASE_MASS.get(c, UNKNOWN_BASE_MASS) for c in seq)
    return round(mw - (len(seq) - 1) * WATER_MASS + TERMINAL_PHOSPHATE_MASS, 1)


def end_stability(seq: str) -> float:
    """ΔG (kcal/mol) of the 3'-terminal pentamer (4 NN steps)."""
    if len(seq) < END_STABILITY_BASES:
        return 0.0
    total = 0.0
    for i in range(len(seq) - END_STABILITY_BASES, len(seq) - 1):
        idx = nn_index(seq[i], seq[i + 1])
        if idx >= 0:
            total += NN_DG[idx]
    return round(total, 2)
