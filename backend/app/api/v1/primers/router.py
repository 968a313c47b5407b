# File: backend/app/api/v1/primers/router.py
# Version: v0.5.0
"""
Primer endpoints (prefix /api/v1/primers):
- GET  /parameters        ← returns current primer design parameters
- PUT  /parameters        ← validates & persists new parameters
- DELETE /parameters      ← resets to the shipped defaults
- POST /design            ← automatic pair search (runs off the event loop)
- POST /analyze           ← full analysis of hand-entered primers
- POST /missing-strand    ← complete a pair from one fixed primer
- GET  /runs
- GET  /runs/{run_id}
- DELETE /runs/{run_id}

Status mapping for /design: invalid input → 400, superseded by a newer request
for the same session key → 409, no solution → 200 with an empty list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.export.json_exporter import candidate_to_dict, outcome_to_dict
from backend.app.core.jobs.runner import job_runner
from backend.app.core.primer.analysis import analyze_pair, analyze_primer, clean_sequence, full_oligo_tm
from backend.app.core.primer.candidates import DesignStatus, RefinedCandidate, Strand
from backend.app.core.primer.designer import PrimerDesigner, normalize_template
from backend.app.core.primer.missing_strand import find_missing_strand
from backend.app.core.primer.parameters import MissingStrandParameters, PrimerDesignParameters
from backend.app.core.primer.schemas import (
    MissingStrandRequest,
    MissingStrandResponse,
    PairSummaryOut,
    PrimerAnalyzeRequest,
    PrimerAnalyzeResponse,
    PrimerDesignRequest,
    PrimerDesignResponse,
    PrimerInfo,
    PrimerRunList,
    PrimerRunRecord,
)
from backend.app.config.config_primers import (
    ensure_current_exists,
    load_current_params,
    reset_current_params,
    save_current_params,
)
from backend.app.services import run_store

from .deps import db_session

router = APIRouter(prefix="/api/v1/primers", tags=["primers"])


def _info(c: RefinedCandidate) -> PrimerInfo:
    return PrimerInfo(**candidate_to_dict(c))


@router.get("/parameters", response_model=PrimerDesignParameters)
def get_parameters():
    """
    Return the current editable primer design parameters.
    If not initialized, create primers_param.json from defaults and return it.
    """
    _, params = ensure_current_exists()
    return params


@router.put("/parameters", response_model=PrimerDesignParameters)
def update_parameters(payload: PrimerDesignParameters):
    """
    Validate and persist new primer design parameters into primers_param.json.
    """
    save_current_params(payload)
    return payload


@router.delete("/parameters", response_model=PrimerDesignParameters)
def reset_parameters():
    """Restore the shipped defaults."""
    return reset_current_params()


@router.post("/design", response_model=PrimerDesignResponse)
async def design_primers(
    payload: PrimerDesignRequest,
    db: Session = Depends(db_session),
):
    """
    Run the three-phase search. If `parameters` is omitted, the server uses the
    stored parameters from backend/app/config/primers_param.json (with default fallback).
    """
    seq = normalize_template(payload.sequence)
    params = payload.parameters or load_current_params()

    outcome = await job_runner.submit(payload.sessionKey, seq, params)
    if outcome.status == DesignStatus.INVALID_INPUT:
        raise HTTPException(status_code=400, detail=outcome.message)
    if outcome.status == DesignStatus.CANCELLED:
        raise HTTPException(status_code=409, detail=outcome.message)

    run = run_store.record_design_run(
        db,
        sequence_digest=PrimerDesigner.digest_sequence(seq),
        sequence_len=len(seq),
        params=params,
        outcome=outcome,
    )
    return PrimerDesignResponse(runId=run.id, **outcome_to_dict(outcome))


@router.post("/analyze", response_model=PrimerAnalyzeResponse)
def analyze_primers(payload: PrimerAnalyzeRequest):
    """Full analysis of one or two primers; fills in a missing partner when a template is given."""
    fwd = clean_sequence(payload.forward)
    rev = clean_sequence(payload.reverse)
    template = normalize_template(payload.template or "")
    conditions = payload.conditions.conditions()
    message = ""

    if not fwd and not rev:
        raise HTTPException(status_code=400, detail="Enter at least one primer sequence.")

    if template and bool(fwd) != bool(rev):
        ms_params = MissingStrandParameters(
            fixedPrimer=fwd or rev,
            fixedIsForward=bool(fwd),
            targetTm=payload.targetTm,
            tmTolerance=payload.tmTolerance,
            targetProduct=payload.targetProduct,
            productTolerance=payload.productTolerance,
            **payload.conditions.model_dump(),
        )
        found = find_missing_strand(template, ms_params)
        message = found.message
        if found.found and found.partner is not None:
            if fwd:
                rev = found.partner.sequence
            else:
                fwd = found.partner.sequence

    out = PrimerAnalyzeResponse(message=message)
    f = analyze_primer(fwd, conditions, strand=Strand.FORWARD) if fwd else None
    r = analyze_primer(rev, conditions, strand=Strand.REVERSE) if rev else None
    if f is not None:
        out.forward = _info(f)
    if r is not None:
        out.reverse = _info(r)
    if f is not None and r is not None:
        f_site = clean_sequence(payload.forwardRecognitionSeq) or None
        r_site = clean_sequence(payload.reverseRecognitionSeq) or None
        f_full = r_full = None
        if f_site or r_site:
            f_full = full_oligo_tm(fwd, f_site, payload.protectiveBaseCount, conditions)
            r_full = full_oligo_tm(rev, r_site, payload.protectiveBaseCount, conditions)
        pa = analyze_pair(f, r, template, payload.targetTm, f_full, r_full)
        out.pair = PairSummaryOut(
            tmDifference=pa.tm_difference,
            heteroDimerRun=pa.hetero_dimer_run,
            productSize=pa.product_size,
            score=pa.score,
            warnings=pa.warnings,
            fullTmDifference=pa.full_tm_difference,
        )
    return out


@router.post("/missing-strand", response_model=MissingStrandResponse)
async def missing_strand(payload: MissingStrandRequest):
    """Best partner for a fixed primer across all of its binding sites."""
    res = await job_runner.find_partner(payload.sessionKey, payload.template, payload.parameters)
    return MissingStrandResponse(
        found=res.found,
        partner=_info(res.partner) if res.partner is not None else None,
        score=res.score,
        productSize=res.product_size,
        occurrences=res.occurrences,
        message=res.message,
    )


def _record(run, *, full: bool) -> PrimerRunRecord:
    return PrimerRunRecord(
        id=run.id,
        createdAt=run.created_at.isoformat() if run.created_at else "",
        sequenceDigest=run.sequence_digest,
        sequenceLength=run.sequence_len,
        status=run.status,
        message=run.message,
        totalPairsConsidered=run.pairs_considered,
        parameters=run_store.run_params(run) if full else None,
        pairs=run_store.run_pairs(run) if full else None,
    )


@router.get("/runs", response_model=PrimerRunList)
def list_runs(limit: int = 50, offset: int = 0, db: Session = Depends(db_session)):
    """List recent primer design runs (lightweight view)."""
    limit = max(1, min(limit, settings.RUN_HISTORY_LIMIT))
    total, items = run_store.list_runs(db, limit=limit, offset=max(0, offset))
    return PrimerRunList(total=total, items=[_record(r, full=False) for r in items])


@router.get("/runs/{run_id}", response_model=PrimerRunRecord)
def get_run(run_id: str, db: Session = Depends(db_session)):
    """Return a full run, including its parameters and ranked pairs."""
    run = run_store.get_run(db, run_id)
    if not run:
        raise HTTPException(status_code=404, detail="Run not found.")
    return _record(run, full=True)


@router.delete("/runs/{run_id}")
def delete_run(run_id: str, db: Session = Depends(db_session)):
    if not run_store.delete_run(db, run_id):
        raise HTTPException(status_code=404, detail="Run not found.")
    return {"deleted": run_id}
