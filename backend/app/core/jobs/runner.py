# File: backend/app/core/jobs/runner.py
# Version: v0.6.0
"""
Async runner for primer searches.

The search is CPU-bound and synchronous; it runs in a worker thread via
`asyncio.to_thread` so the event loop stays responsive. Each session key owns a
single-slot `SearchSession`: submitting a new search for the same key cancels
the one still in flight (it returns a CANCELLED outcome). Different keys never
interfere. A key is forgotten once its last search finishes.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, Optional

from backend.app.core.primer.cancellation import CancellationToken, SearchSession
from backend.app.core.primer.candidates import DesignOutcome
from backend.app.core.primer.designer import PrimerDesigner
from backend.app.core.primer.missing_strand import MissingStrandResult, find_missing_strand
from backend.app.core.primer.parameters import MissingStrandParameters, PrimerDesignParameters

logger = logging.getLogger(__name__)


class DesignJobRunner:
    def __init__(self, designer: Optional[PrimerDesigner] = None) -> None:
        self._designer = designer or PrimerDesigner()
        self._sessions: Dict[str, SearchSession] = {}

    def session(self, session_key: str) -> SearchSession:
        sess = self._sessions.get(session_key)
        if sess is None:
            sess = SearchSession()
            self._sessions[session_key] = sess
        return sess

    def cancel(self, session_key: str) -> bool:
        """Cancel the active search of `session_key`; False if none is running."""
        sess = self._sessions.get(session_key)
        if sess is None or sess.current is None:
            return False
        sess.current.cancel()
        return True

    def _release(self, session_key: str, sess: SearchSession, token: CancellationToken) -> None:
        sess.finish(token)
        if sess.current is None and self._sessions.get(session_key) is sess:
            del self._sessions[session_key]

    async def submit(
        self,
        session_key: str,
        template: str,
        params: PrimerDesignParameters,
    ) -> DesignOutcome:
        sess = self.session(session_key)
        token = sess.start()
        job_id = uuid.uuid4().hex[:12]
        logger.info("job %s: design started (session=%s, %d bp)", job_id, session_key, len(template))
        try:
            outcome = await asyncio.to_thread(self._designer.design, template, params, token)
        finally:
            self._release(session_key, sess, token)
        logger.info("job %s: %s, %d pair(s)", job_id, outcome.status.value, len(outcome.pairs))
        return outcome

    async def find_partner(
        self,
        session_key: str,
        template: str,
        params: MissingStrandParameters,
    ) -> MissingStrandResult:
        sess = self.session(session_key)
        token = sess.start()
        try:
            return await asyncio.to_thread(find_missing_strand, template, params, token)
        finally:
            self._release(session_key, sess, token)


job_runner = DesignJobRunner()
