# File: backend/tests/test_search_runner.py
# Version: v0.2.0
"""
Async runner: searches run off the event loop, one active search per session key.
"""

from __future__ import annotations

import asyncio
import threading

import pytest

from backend.app.core.jobs.runner import DesignJobRunner
from backend.app.core.primer.cancellation import SearchSession
from backend.app.core.primer.candidates import DesignOutcome, DesignStatus
from backend.app.core.primer.designer import PrimerDesigner
from backend.app.core.primer.parameters import MissingStrandParameters, PrimerDesignParameters


class _BlockingDesigner(PrimerDesigner):
    """Holds the first call until released, then defers to the real search."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self._first = True

    def design(self, template, params, token=None):
        if self._first:
            self._first = False
            self.started.set()
            self.release.wait(timeout=10)
        return super().design(template, params, token)


def test_search_session_supersedes_previous():
    sess = SearchSession()
    first = sess.start()
    second = sess.start()
    assert first.cancelled
    assert not second.cancelled
    sess.finish(first)
    assert sess.current is second
    sess.finish(second)
    assert sess.current is None


@pytest.mark.asyncio
async def test_submit_returns_outcome(template_60):
    runner = DesignJobRunner()
    params = PrimerDesignParameters(productSizeMin=30, productSizeMax=50, productSizeTarget=40,
                                    primerLengthMin=18, primerLengthMax=22)
    outcome = await runner.submit("s1", template_60, params)
    assert isinstance(outcome, DesignOutcome)
    assert outcome.status in (DesignStatus.OK, DesignStatus.NO_SOLUTION)
    assert "s1" not in runner._sessions


@pytest.mark.asyncio
async def test_new_request_cancels_previous(template_60):
    designer = _BlockingDesigner()
    runner = DesignJobRunner(designer)
    params = PrimerDesignParameters(productSizeMin=30, productSizeMax=50, productSizeTarget=40,
                                    primerLengthMin=18, primerLengthMax=22)

    first = asyncio.create_task(runner.submit("s", template_60, params))
    await asyncio.to_thread(designer.started.wait, 10)
    second = asyncio.create_task(runner.submit("s", template_60, params))
    await asyncio.sleep(0)
    designer.release.set()

    a, b = await asyncio.gather(first, second)
    assert a.status == DesignStatus.CANCELLED
    assert b.status != DesignStatus.CANCELLED
    assert "s" not in runner._sessions


@pytest.mark.asyncio
async def test_sessions_are_independent(template_60):
    designer = _BlockingDesigner()
    runner = DesignJobRunner(designer)
    params = PrimerDesignParameters(productSizeMin=30, productSizeMax=50, productSizeTarget=40,
                                    primerLengthMin=18, primerLengthMax=22)

    first = asyncio.create_task(runner.submit("alice", template_60, params))
    await asyncio.to_thread(designer.started.wait, 10)
    second = asyncio.create_task(runner.submit("bob", template_60, params))
    await asyncio.sleep(0)
    designer.release.set()

    a, b = await asyncio.gather(first, second)
    assert a.status != DesignStatus.CANCELLED
    assert b.status != DesignStatus.CANCELLED


def test_cancel_without_active_search():
    assert DesignJobRunner().cancel("nobody") is False


@pytest.mark.asyncio
async def test_find_partner_runs_off_loop():
    fwd = "GACCTGAGCATCGTTGACCA"
    template = fwd + "CTGAAGTAGAGATTTAATTACACGACCTAAAGTTGTCGTTTGTGCTGGGGGAGTGGATCAAGTTCGTGATCACCGGCCCTTTACTG"
    template += "TAGCCGTAGAGGGTCATTGCGTGTTGTTTGGTGAATTTAGTGAGCGTACCGAACTATTATCGGA"
    params = MissingStrandParameters(fixedPrimer=fwd, targetProduct=100, productTolerance=20, tmTolerance=10.0)
    runner = DesignJobRunner()
    res = await runner.find_partner("partner", template, params)
    assert res.found
    assert res.occurrences == [0]
    assert "partner" not in runner._sessions


@pytest.mark.asyncio
async def test_superseded_search_keeps_session_until_last_finishes(template_60):
    designer = _BlockingDesigner()
    runner = DesignJobRunner(designer)
    params = PrimerDesignParameters(productSizeMin=30, productSizeMax=50, productSizeTarget=40,
                                    primerLengthMin=18, primerLengthMax=22)

    first = asyncio.create_task(runner.submit("k", template_60, params))
    await asyncio.to_thread(designer.started.wait, 10)
    live = runner._sessions["k"]
    second = asyncio.create_task(runner.submit("k", template_60, params))
    await asyncio.sleep(0)
    assert runner._sessions["k"] is live
    assert live.current is not None

    designer.release.set()
    await asyncio.gather(first, second)
    assert runner._sessions == {}
    assert runner.cancel("k") is False
