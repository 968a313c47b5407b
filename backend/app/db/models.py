# File: backend/app/db/models.py
# Version: v0.4.0
"""
ORM models for ThermoPrimer.

Tables:
- PrimerRun: one automatic design search (template digest/length, parameters
             JSON, outcome status and message).
- PrimerPairRecord: one ranked pair of a run, serialized as JSON
             (see core/export/json_exporter.pair_to_dict).
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base


class PrimerRun(Base):
    """A single primer design search."""
    __tablename__ = "primer_runs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    sequence_digest: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sequence_len: Mapped[int] = mapped_column(Integer, nullable=False)
    params_json: Mapped[str] = mapped_column(Text, nullable=False)  # JSON string (PrimerDesignParameters)

    status: Mapped[str] = mapped_column(String(32), nullable=False)  # DesignStatus value
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pairs_considered: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    pairs: Mapped[List["PrimerPairRecord"]] = relationship(
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="PrimerPairRecord.rank",
    )


class PrimerPairRecord(Base):
    """A ranked primer pair belonging to a run."""
    __tablename__ = "primer_pairs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_id: Mapped[str] = mapped_column(ForeignKey("primer_runs.id", ondelete="CASCADE"), nullable=False, index=True)

    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    forward_seq: Mapped[str] = mapped_column(Text, nullable=False)
    reverse_seq: Mapped[str] = mapped_column(Text, nullable=False)
    product_size: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    pair_json: Mapped[str] = mapped_column(Text, nullable=False)  # JSON string (full pair payload)

    run: Mapped[PrimerRun] = relationship(back_populates="pairs")
