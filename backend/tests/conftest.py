# File: backend/tests/conftest.py
# Version: v0.2.0
"""
Test bootstrap:
- ensure project root is on sys.path so 'backend.*' imports work
- point DB_URL at a throwaway SQLite file before settings are imported
- redirect the editable primer parameters file into a per-test tmp dir

This avoids requiring editable installs or extra plugins. It keeps tests hermetic
to the repo layout (works in CI and locally).
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_DB_DIR = Path(tempfile.mkdtemp(prefix="thermoprimer-tests-"))
os.environ.setdefault("DB_URL", f"sqlite:///{(_DB_DIR / 'test.db').as_posix()}")


# 60 bp, ~53 % GC, no long repeats
TEMPLATE_60 = "ATGCGTACCTGAGCATCGTTGACCAGTCAGGATCCTAGCATGCTCGAAGTCAGTGCAACG"

# 200 bp pseudo-random template
TEMPLATE_200 = (
    "TGCGTCCATCAACACGTCGGATAACGGACTACCCTATCCGGCTACCGCGAATTCTCAGGCGGTTAGAAACTGTTTCACTTGTTG"
    "CTACCGTACGTCCAGCCCACATGCCCAACTGGGTAACTAGCAATAGAGACACAGGGATGGGCCCACGCATAGTACATGTATTCAG"
    "TGTGCCCGTTGCGACCAACCGGCCCCACGAT"
)


@pytest.fixture
def template_60() -> str:
    return TEMPLATE_60


@pytest.fixture
def template_200() -> str:
    return TEMPLATE_200


@pytest.fixture(autouse=True)
def _isolated_primer_params(tmp_path, monkeypatch):
    from backend.app.config import config_primers

    monkeypatch.setattr(config_primers, "CURRENT_FILE", tmp_path / "primers_param.json")
    yield
