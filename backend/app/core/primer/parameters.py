# File: backend/app/core/primer/parameters.py
# Version: v2.0.0
"""
Pydantic models for primer design parameters (strict, camelCase, immutable).

- `PrimerDesignParameters`: one bundle per design search. When `forcedRegion`
  is set, product-size and ΔTm limits are lifted; the region alone decides
  validity.
- `MissingStrandParameters`: inputs for completing a pair from one fixed primer.

Salt concentrations are mM, primer concentration is nM.

Usage:
    from backend.app.core.primer.parameters import PrimerDesignParameters
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, conint, confloat, field_validator, model_validator

from .constants import (
    DEFAULT_MAX_LEN,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MIN_LEN,
    DEFAULT_PRODUCT_MAX,
    DEFAULT_PRODUCT_MIN,
    DEFAULT_PRODUCT_TARGET,
    DEFAULT_PRUNE_MARGIN,
    DEFAULT_TM_MAX,
    DEFAULT_TM_MIN,
    DEFAULT_TM_TARGET,
    DEFAULT_TOP_K,
)
from .thermodynamics import ReactionConditions


def _clean_site(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = "".join(value.split()).upper()
    if not s:
        return None
    if set(s) - set("ACGT"):
        raise ValueError("recognition sequence must contain only A/C/G/T")
    return s


class ReactionBuffer(BaseModel):
    """Ionic conditions shared by Tm calculations."""

    model_config = ConfigDict(frozen=True)

    monovalentConc: confloat(ge=0) = Field(50.0, description="Monovalent cation (Na+/K+) concentration (mM)")
    divalentConc: confloat(ge=0) = Field(1.5, description="Mg2+ concentration (mM)")
    dntpConc: confloat(ge=0) = Field(0.6, description="Total dNTP concentration (mM)")
    primerConc: confloat(gt=0) = Field(250.0, description="Primer strand concentration (nM)")

    def conditions(self) -> ReactionConditions:
        return ReactionConditions.from_millimolar(
            self.monovalentConc, self.divalentConc, self.dntpConc, self.primerConc
        )


class PrimerDesignParameters(ReactionBuffer):
    # Lengths
    primerLengthMin: conint(ge=6) = Field(DEFAULT_MIN_LEN, description="Minimum primer length (full oligo)")
    primerLengthMax: conint(ge=6) = Field(DEFAULT_MAX_LEN, description="Maximum primer length (full oligo)")

    # Temperatures
    primerTmMin: confloat(ge=0) = Field(DEFAULT_TM_MIN, description="Minimum acceptable primer Tm (°C)")
    primerTmMax: confloat(ge=0) = Field(DEFAULT_TM_MAX, description="Maximum acceptable primer Tm (°C)")
    primerTmTarget: confloat(ge=0) = Field(DEFAULT_TM_TARGET, description="Preferred primer Tm (°C)")
    primerTmDifferenceMax: confloat(ge=0) = Field(3.0, description="Max |Tm_f - Tm_r| (°C)")

    # Product
    productSizeMin: conint(ge=0) = Field(DEFAULT_PRODUCT_MIN, description="Minimum amplicon length (bp)")
    productSizeMax: conint(ge=1) = Field(DEFAULT_PRODUCT_MAX, description="Maximum amplicon length (bp)")
    productSizeTarget: conint(ge=0) = Field(DEFAULT_PRODUCT_TARGET, description="Preferred amplicon length (bp)")

    # Filters / penalties
    requireGcClamp: bool = Field(True, description="Require G/C at the 3' end")
    penalizeSelfComplementarity: bool = Field(True, description="Penalize self-complementarity and self-dimers")

    # Restriction overhangs
    forwardRecognitionSeq: Optional[str] = Field(None, description="Recognition site prepended to the forward primer")
    reverseRecognitionSeq: Optional[str] = Field(None, description="Recognition site prepended to the reverse primer")
    protectiveBaseCount: conint(ge=0, le=16) = Field(2, description="Protective 5' bases before the site")

    # Product must contain this [start, end) region (0-based)
    forcedRegion: Optional[Tuple[conint(ge=0), conint(ge=0)]] = Field(None, description="[start, end) the product must span")

    # Search bounds
    topK: conint(ge=1) = Field(DEFAULT_TOP_K, description="Pairs refined in the final phase")
    maxResults: conint(ge=1) = Field(DEFAULT_MAX_RESULTS, description="Ranked pairs returned")
    pruneMargin: confloat(ge=0) = Field(DEFAULT_PRUNE_MARGIN, description="Skip pairs scoring this far below the worst kept pair")

    @field_validator("forwardRecognitionSeq", "reverseRecognitionSeq", mode="before")
    @classmethod
    def _normalize_sites(cls, v: Optional[str]) -> Optional[str]:
        return _clean_site(v)

    @model_validator(mode="after")
    def _check_bounds(self) -> "PrimerDesignParameters":
        if self.primerLengthMax < self.primerLengthMin:
            raise ValueError("primerLengthMax must be >= primerLengthMin")
        if self.primerTmMax < self.primerTmMin:
            raise ValueError("primerTmMax must be >= primerTmMin")
        if self.productSizeMax < self.productSizeMin:
            raise ValueError("productSizeMax must be >= productSizeMin")
        if self.forcedRegion is not None and self.forcedRegion[1] <= self.forcedRegion[0]:
            raise ValueError("forcedRegion end must be > start")
        return self

    @property
    def has_overhang(self) -> bool:
        return bool(self.forwardRecognitionSeq or self.reverseRecognitionSeq)


class MissingStrandParameters(ReactionBuffer):
    """Complete a pair from one fixed primer."""

    fixedPrimer: str = Field(..., min_length=1, description="Known primer, 5'->3'")
    fixedIsForward: bool = Field(True, description="True if the fixed primer is the forward primer")
    targetTm: confloat(ge=0) = Field(DEFAULT_TM_TARGET, description="Preferred partner Tm (°C)")
    tmTolerance: confloat(ge=0) = Field(3.0, description="Allowed |Tm - targetTm| (°C)")
    targetProduct: conint(ge=1) = Field(DEFAULT_PRODUCT_TARGET, description="Preferred amplicon length (bp)")
    productTolerance: conint(ge=0) = Field(200, description="Allowed |product - targetProduct| (bp)")
    partnerLengthMin: conint(ge=6) = Field(18, description="Shortest partner to try")
    partnerLengthMax: conint(ge=6) = Field(25, description="Longest partner to try")
    minPartnerDistance: conint(ge=0) = Field(50, description="Minimum gap between the fixed primer and partner binding site")

    @field_validator("fixedPrimer", mode="before")
    @classmethod
    def _clean_primer(cls, v: str) -> str:
        return "".join(c for c in str(v).upper() if c in "ACGT")

    @model_validator(mode="after")
    def _check_bounds(self) -> "MissingStrandParameters":
        if not self.fixedPrimer:
            raise ValueError("fixedPrimer must contain at least one A/C/G/T base")
        if self.partnerLengthMax < self.partnerLengthMin:
            raise ValueError("partnerLengthMax must be >= partnerLengthMin")
        return self
