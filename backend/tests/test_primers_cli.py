# File: backend/tests/test_primers_cli.py
# Version: v0.1.0
"""
CLI: FASTA in, primers.json / primers.csv / primers.fasta out.
"""

from __future__ import annotations

import json
import sys

import pytest

from backend.app.cli import primers_cli


def _write_fasta(path, name, seq):
    path.write_text(f">{name}\n{seq[:30]}\n{seq[30:]}\n", encoding="utf-8")
    return path


def _params_file(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        "primerLengthMin": 18, "primerLengthMax": 22,
        "productSizeMin": 30, "productSizeMax": 50, "productSizeTarget": 40,
    }), encoding="utf-8")
    return path


def test_cli_writes_outputs(tmp_path, monkeypatch, template_60):
    fasta = _write_fasta(tmp_path / "t.fasta", "t60", template_60)
    outdir = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", [
        "primers_cli", "--fasta", str(fasta), "--outdir", str(outdir),
        "--params-json", str(_params_file(tmp_path)),
    ])
    primers_cli.main()

    payload = json.loads((outdir / "primers.json").read_text(encoding="utf-8"))
    assert payload["sequence_name"] == "t60"
    assert payload["length"] == 60
    assert payload["status"] == "ok"
    assert (outdir / "primers.csv").read_text(encoding="utf-8").startswith("Rank,Forward,Reverse")
    assert (outdir / "primers.fasta").read_text(encoding="utf-8").startswith(">pair1_F")


def test_cli_region_and_site_flags(tmp_path, template_60):
    ns = primers_cli.argparse.Namespace(
        params_json=_params_file(tmp_path), region=[20, 40], fwd_site="gaattc", rev_site=None,
    )
    params = primers_cli.build_params(ns)
    assert params.forcedRegion == (20, 40)
    assert params.forwardRecognitionSeq == "GAATTC"


def test_cli_multi_record_fasta_fails(tmp_path, monkeypatch, capsys, template_60):
    fasta = tmp_path / "two.fasta"
    fasta.write_text(f">a\n{template_60}\n>b\n{template_60}\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["primers_cli", "--fasta", str(fasta), "--outdir", str(tmp_path / "o")])
    with pytest.raises(SystemExit) as exc:
        primers_cli.main()
    assert exc.value.code == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_cli_find_partner(tmp_path, monkeypatch):
    fwd = "GACCTGAGCATCGTTGACCA"
    template = fwd + "CTGAAGTAGAGATTTAATTACACGACCTAAAGTTGTCGTTTGTGCTGGGGGAGTGGATCAAGTTCGTGATCACCGGCCCTTTACTG"
    template += "TAGCCGTAGAGGGTCATTGCGTGTTGTTTGGTGAATTTAGTGAGCGTACCGAACTATTATCGGA"
    fasta = _write_fasta(tmp_path / "p.fasta", "partner", template)
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"productSizeMin": 50, "productSizeTarget": 120}), encoding="utf-8")
    outdir = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", [
        "primers_cli", "--fasta", str(fasta), "--outdir", str(outdir),
        "--params-json", str(params), "--find-partner", fwd, "--partner-of", "forward",
    ])
    primers_cli.main()
    payload = json.loads((outdir / "partner.json").read_text(encoding="utf-8"))
    assert payload["found"] is True
    assert payload["partner"]["strand"] == "R"
