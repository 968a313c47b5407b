# File: backend/tests/test_config_primers.py
# Version: v0.1.0
"""
Primer parameters: model validation and JSON persistence.
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from backend.app.config import config_primers
from backend.app.core.primer.parameters import PrimerDesignParameters


def test_defaults():
    p = PrimerDesignParameters()
    assert (p.primerLengthMin, p.primerLengthMax) == (18, 25)
    assert (p.primerTmMin, p.primerTmMax, p.primerTmTarget) == (55.0, 65.0, 60.0)
    assert (p.productSizeMin, p.productSizeMax, p.productSizeTarget) == (100, 1000, 300)
    assert p.primerTmDifferenceMax == 3.0
    assert p.topK == 50 and p.maxResults == 20 and p.pruneMargin == 20.0
    assert not p.has_overhang


def test_shipped_default_file_matches_model():
    assert config_primers.load_default_params() == PrimerDesignParameters()


def test_cross_field_validation():
    with pytest.raises(ValidationError):
        PrimerDesignParameters(primerLengthMin=25, primerLengthMax=18)
    with pytest.raises(ValidationError):
        PrimerDesignParameters(primerTmMin=70.0, primerTmMax=60.0)
    with pytest.raises(ValidationError):
        PrimerDesignParameters(productSizeMin=500, productSizeMax=100)
    with pytest.raises(ValidationError):
        PrimerDesignParameters(forcedRegion=(30, 30))


def test_recognition_sites_normalized():
    p = PrimerDesignParameters(forwardRecognitionSeq=" gaa ttc ", reverseRecognitionSeq="")
    assert p.forwardRecognitionSeq == "GAATTC"
    assert p.reverseRecognitionSeq is None
    assert p.has_overhang
    with pytest.raises(ValidationError):
        PrimerDesignParameters(forwardRecognitionSeq="GANTTC")


def test_parameters_are_immutable():
    p = PrimerDesignParameters()
    with pytest.raises(ValidationError):
        p.primerTmMin = 10.0


def test_save_and_load_roundtrip():
    assert not config_primers.CURRENT_FILE.exists()
    created, params = config_primers.ensure_current_exists()
    assert created
    assert params == PrimerDesignParameters()

    updated = PrimerDesignParameters(primerTmTarget=62.0, forcedRegion=(10, 40), forwardRecognitionSeq="GGATCC")
    config_primers.save_current_params(updated)
    assert config_primers.load_current_params() == updated
    on_disk = json.loads(config_primers.CURRENT_FILE.read_text(encoding="utf-8"))
    assert on_disk["forcedRegion"] == [10, 40]
    assert not config_primers.CURRENT_FILE.with_suffix(".json.tmp").exists()


def test_load_params_file(tmp_path):
    path = tmp_path / "p.json"
    path.write_text(json.dumps({"primerLengthMin": 20, "primerLengthMax": 24}), encoding="utf-8")
    p = config_primers.load_params_file(path)
    assert (p.primerLengthMin, p.primerLengthMax) == (20, 24)
    assert p.primerTmTarget == 60.0


def test_malformed_current_file_falls_back_to_defaults():
    config_primers.CURRENT_FILE.write_text("{not json", encoding="utf-8")
    assert config_primers.load_current_params() == PrimerDesignParameters()
    config_primers.CURRENT_FILE.write_text("[1, 2]", encoding="utf-8")
    assert config_primers.load_current_params() == PrimerDesignParameters()


def test_reset_current_params():
    config_primers.save_current_params(PrimerDesignParameters(topK=10))
    assert config_primers.load_current_params().topK == 10
    assert config_primers.reset_current_params() == PrimerDesignParameters()
    assert config_primers.load_current_params().topK == 50
