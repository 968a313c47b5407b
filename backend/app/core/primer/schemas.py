# File: backend/app/core/primer/schemas.py
# Version: v0.4.0
"""
DTOs for requests and responses used by Primer endpoints and services.

Field names mirror the dicts produced by core/export/json_exporter.py so a
stored run can be returned without re-mapping.

`PrimerDesignRequest.parameters` is optional: when omitted the backend uses the
stored parameters (backend/app/config/primers_param.json, falling back to
defaults).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, confloat, conint
from typing import List, Optional, Dict, Any

from .constants import DEFAULT_PRODUCT_TARGET, DEFAULT_TM_TARGET
from .parameters import MissingStrandParameters, PrimerDesignParameters, ReactionBuffer


class PrimerInfo(BaseModel):
    """Full analysis of one primer (gene-specific part)."""
    strand: Optional[str] = None
    sequence: str
    start: int = -1
    length: int
    tm: float
    tmGeneSpecific: float
    gcPercent: float
    molecularWeight: float
    hasGcClamp: bool
    selfComplementarity: int
    hairpinScore: int
    endStability: float
    selfDimerDG: float
    hairpinDG: float
    anyComplementarity: int
    warnings: List[str] = Field(default_factory=list)


class PrimerPairOut(BaseModel):
    rank: int
    forward: PrimerInfo
    reverse: PrimerInfo
    productSize: int
    tmDifference: float
    score: float
    heteroDimerRun: int = 0
    hasOverhang: bool = False
    forwardFullOligo: Optional[str] = None
    reverseFullOligo: Optional[str] = None
    forwardFullTm: Optional[float] = None
    reverseFullTm: Optional[float] = None


class PrimerDesignRequest(BaseModel):
    """Request an automatic primer pair search over a template."""
    sequence: str = Field(..., min_length=1, description="Template sequence (raw; whitespace is ignored).")
    parameters: Optional[PrimerDesignParameters] = None
    sessionKey: str = Field("default", description="A new request cancels the running search with the same key.")


class PrimerDesignResponse(BaseModel):
    runId: Optional[str] = None
    status: str
    message: str = ""
    forwardCandidates: int = 0
    reverseCandidates: int = 0
    totalPairsConsidered: int = 0
    pairs: List[PrimerPairOut] = Field(default_factory=list)


class PrimerAnalyzeRequest(BaseModel):
    """
    Analyze hand-entered primers. If only one primer is given and a template is
    present, the missing partner is searched first.
    """
    forward: Optional[str] = None
    reverse: Optional[str] = None
    template: Optional[str] = None
    conditions: ReactionBuffer = Field(default_factory=ReactionBuffer)
    targetTm: confloat(ge=0) = DEFAULT_TM_TARGET
    tmTolerance: confloat(ge=0) = 3.0
    targetProduct: conint(ge=1) = DEFAULT_PRODUCT_TARGET
    productTolerance: conint(ge=0) = 200
    forwardRecognitionSeq: Optional[str] = None
    reverseRecognitionSeq: Optional[str] = None
    protectiveBaseCount: conint(ge=0, le=16) = 2


class PairSummaryOut(BaseModel):
    tmDifference: float
    heteroDimerRun: int
    productSize: Optional[int] = None
    score: float
    warnings: List[str] = Field(default_factory=list)
    fullTmDifference: Optional[float] = None


class PrimerAnalyzeResponse(BaseModel):
    forward: Optional[PrimerInfo] = None
    reverse: Optional[PrimerInfo] = None
    pair: Optional[PairSummaryOut] = None
    message: str = ""


class MissingStrandRequest(BaseModel):
    template: str = Field(..., min_length=1)
    parameters: MissingStrandParameters
    sessionKey: str = Field("missing-strand", description="A new request cancels the running search with the same key.")


class MissingStrandResponse(BaseModel):
    found: bool
    partner: Optional[PrimerInfo] = None
    score: Optional[float] = None
    productSize: Optional[int] = None
    occurrences: List[int] = Field(default_factory=list)
    message: str = ""


class PrimerRunRecord(BaseModel):
    id: str
    createdAt: str
    sequenceDigest: str
    sequenceLength: int
    status: str
    message: Optional[str] = None
    totalPairsConsidered: int = 0
    parameters: Optional[Dict[str, Any]] = None
    pairs: Optional[List[PrimerPairOut]] = None  # omitted in list view


class PrimerRunList(BaseModel):
    total: int
    items: List[PrimerRunRecord]
