# File: backend/app/core/primer/constants.py
# Version: v0.2.0
"""
Constants and defaults for the Primer subsystem.

Nearest-neighbor parameters are SantaLucia (1998) unified values, indexed by
(base1 * 4 + base2) with A=0, C=1, G=2, T=3.

v0.2.0
- NN ΔH/ΔS/ΔG table, initiation terms and hairpin loop penalties.
- Warning thresholds used by the full primer analysis.
- Search caps (top-K, presented results, pruning margin).
"""

from __future__ import annotations

# --- Nearest-neighbor table ----------------------------------------------------------------------

BASE_INDEX = {"A": 0, "C": 1, "G": 2, "T": 3}

# Order: AA AC AG AT CA CC CG CT GA GC GG GT TA TC TG TT
NN_DH = (-7.9, -8.4, -7.8, -7.2, -8.5, -8.0, -10.6, -7.8, -8.2, -9.8, -8.0, -8.4, -7.2, -8.2, -8.5, -7.9)  # kcal/mol
NN_DS = (-22.2, -22.4, -21.0, -20.4, -22.7, -19.9, -27.2, -21.0, -22.2, -24.4, -19.9, -22.4, -21.3, -22.2, -22.7, -22.2)  # cal/(mol·K)
NN_DG = (-1.00, -1.44, -1.28, -0.88, -1.45, -1.84, -2.17, -1.28, -1.30, -2.24, -1.84, -1.44, -0.58, -1.30, -1.45, -1.00)  # kcal/mol, 37°C

# Terminal initiation (ΔH kcal/mol, ΔS cal/(mol·K))
INIT_GC = (0.1, -2.8)
INIT_AT = (2.3, 4.1)

GAS_CONSTANT = 1.987  # cal/(mol·K)
KELVIN = 273.15

# Below this length Tm falls back to the Wallace rule
WALLACE_MAX_LEN = 13

# Owczarzy (2008) regime boundaries on sqrt([Mg free]) / [Mon]
SALT_RATIO_MONO = 0.22
SALT_RATIO_MIXED = 6.0

# Floors applied before any logarithm (mol/L)
MIN_MONOVALENT_M = 1e-6
MIN_PRIMER_M = 1e-12

# --- Molecular weight (g/mol per nucleotide) ----------------------------------------------------

BASE_MASS = {"A": 331.2, "T": 322.2, "G": 347.2, "C": 307.2}
UNKNOWN_BASE_MASS = 326.9
WATER_MASS = 18.0
TERMINAL_PHOSPHATE_MASS = 79.0

# --- Secondary structure -------------------------------------------------------------------------

DUPLEX_INITIATION_DG = 1.96  # kcal/mol, per dimer run
END_STABILITY_BASES = 5

HAIRPIN_LOOP_MIN = 3
HAIRPIN_LOOP_MAX = 12
HAIRPIN_SCORE_LOOP_MAX = 8
HAIRPIN_TEMPERATURE_K = 310.15

# Empirical hairpin loop initiation (kcal/mol), index = loop length, valid 3..20
HAIRPIN_LOOP_PENALTY = (
    0.0, 0.0, 0.0, 5.2, 4.5, 4.4, 4.3, 4.1, 4.1, 3.9, 3.7,
    3.5, 3.4, 3.3, 3.2, 3.1, 3.1, 3.0, 3.0, 2.9, 2.9,
)

# --- Hard filters --------------------------------------------------------------------------------

GC_MIN = 30.0
GC_MAX = 70.0
OVERHANG_MIN_GENE_LEN = 8

# --- Warning thresholds (full analysis) ----------------------------------------------------------

WARN_LEN_MIN = 18
WARN_LEN_MAX = 30
WARN_TM_MIN = 50.0
WARN_TM_MAX = 70.0
WARN_SELF_COMP_RUN = 4
WARN_HAIRPIN_RUN = 3
WARN_SELF_DIMER_DG = -6.0
WARN_HAIRPIN_DG = -3.0
WARN_MONO_RUN = 4
WARN_PAIR_TM_DIFF = 5.0
WARN_HETERO_DIMER_RUN = 4

# --- Search defaults -----------------------------------------------------------------------------

DEFAULT_MIN_LEN = 18
DEFAULT_MAX_LEN = 25

DEFAULT_TM_MIN = 55.0
DEFAULT_TM_MAX = 65.0
DEFAULT_TM_TARGET = 60.0

DEFAULT_PRODUCT_MIN = 100
DEFAULT_PRODUCT_MAX = 1000
DEFAULT_PRODUCT_TARGET = 300

DEFAULT_TOP_K = 50
DEFAULT_MAX_RESULTS = 20
DEFAULT_PRUNE_MARGIN = 20.0

SELF_DIMER_PENALTY_DG = -5.0

# Constrained searches drop product/ΔTm limits
UNBOUNDED_TM_DIFF = 999.0
