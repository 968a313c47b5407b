# File: backend/app/core/primer/candidates.py
# Version: v0.2.0
"""
Candidate and result DTOs for the primer search.

- `FastCandidate`: Phase 1/2 screening record (Tm, GC, clamp, cheap structure runs)
- `RefinedCandidate`: full analysis of a finalist (ΔG terms, MW, warnings)
- `PrimerPairResult`: ranked pair returned to callers
- `DesignOutcome`: status + pairs for one search invocation

Both candidate variants share the key (strand, start, length, sequence).
Coordinates are 0-based; for reverse primers `start` is the left edge of the
template window the primer binds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Strand(str, Enum):
    FORWARD = "F"
    REVERSE = "R"


class DesignStatus(str, Enum):
    OK = "ok"
    NO_SOLUTION = "no_solution"
    INVALID_INPUT = "invalid_input"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FastCandidate:
    strand: Strand
    sequence: str            # gene-specific part, 5'->3'
    start: int
    length: int
    tm: float                # full-oligo Tm when an overhang is present
    tm_gene_specific: float
    gc_percent: float
    has_gc_clamp: bool
    self_comp_run: int
    hairpin_run: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class RefinedCandidate:
    strand: Optional[Strand]
    sequence: str
    start: int
    length: int
    tm: float
    tm_gene_specific: float
    gc_percent: float
    molecular_weight: float
    has_gc_clamp: bool
    self_comp_run: int
    hairpin_run: int
    end_stability_dg: float
    self_dimer_dg: float
    hairpin_dg: float
    any_comp_total: int
    warnings: List[str] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass
class PrimerPairResult:
    rank: int
    forward: RefinedCandidate
    reverse: RefinedCandidate
    product_size: int
    tm_difference: float
    score: float
    hetero_dimer_run: int = 0
    forward_full_oligo: Optional[str] = None
    reverse_full_oligo: Optional[str] = None
    forward_full_tm: Optional[float] = None
    reverse_full_tm: Optional[float] = None
    has_overhang: bool = False


@dataclass
class DesignOutcome:
    status: DesignStatus
    pairs: List[PrimerPairResult] = field(default_factory=list)
    message: str = ""
    forward_candidates: int = 0
    reverse_candidates: int = 0
    pairs_considered: int = 0

    @property
    def ok(self) -> bool:
        return self.status == DesignStatus.OK
