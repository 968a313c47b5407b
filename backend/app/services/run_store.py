# File: backend/app/services/run_store.py
# Version: v0.2.0
"""
Design run persistence helpers (service layer).

These functions encapsulate the DB logic so callers (routers, CLI) don't
need to import SQLAlchemy session management details.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backend.app.core.export.json_exporter import pair_to_dict
from backend.app.core.primer.candidates import DesignOutcome
from backend.app.core.primer.parameters import PrimerDesignParameters
from backend.app.db.models import PrimerPairRecord, PrimerRun

def record_design_run(
    db: Session,
    *,
    sequence_digest: str,
    sequence_len: int,
    params: PrimerDesignParameters,
    outcome: DesignOutcome,
) -> PrimerRun:
    """Store a finished search with its ranked pairs."""
    run = PrimerRun(
        sequence_digest=sequence_digest,
        sequence_len=sequence_len,
        params_json=params.model_dump_json(),
        status=outcome.status.value,
        message=outcome.message,
        pairs_considered=outcome.pairs_considered,
    )
    for p in outcome.pairs:
        run.pairs.append(
            PrimerPairRecord(
                rank=p.rank,
                forward_seq=p.forward.sequence,
                reverse_seq=p.reverse.sequence,
                product_size=p.product_size,
                score=p.score,
                pair_json=json.dumps(pair_to_dict(p), ensure_ascii=False),
            )
        )
    db.add(run)
    db.commit()
    db.refresh(run)
    return run

def list_runs(db: Session, *, limit: int = 50, offset: int = 0) -> tuple[int, list[PrimerRun]]:
    """Return (total, items), newest first."""
    stmt = select(PrimerRun).order_by(PrimerRun.created_at.desc()).limit(limit).offset(offset)
    total = db.execute(select(func.count()).select_from(PrimerRun)).scalar_one()
    items = list(db.execute(stmt).scalars())
    return total, items

def get_run(db: Session, run_id: str) -> PrimerRun | None:
    return db.get(PrimerRun, run_id)

def run_pairs(run: PrimerRun) -> List[Dict[str, Any]]:
    return [json.loads(rec.pair_json) for rec in run.pairs]

def run_params(run: PrimerRun) -> Optional[Dict[str, Any]]:
    return json.loads(run.params_json) if run.params_json else None

def delete_run(db: Session, run_id: str) -> bool:
    run = db.get(PrimerRun, run_id)
    if run is None:
        return False
    db.delete(run)  # ORM cascade removes its pairs
    db.commit()
    return True
