# File: backend/app/cli/primers_cli.py
# Version: v2.0.0
"""
CLI for ThermoPrimer primer design.

- Runs the automatic pair search on a single-record FASTA and writes
  primers.json, primers.csv and primers.fasta into --outdir.
- --region forces the product to span [START, END) (0-based, end-exclusive);
  product-size and ΔTm limits are lifted in that mode.
- --fwd-site/--rev-site add restriction overhangs (protective bases + site).
- --find-partner PRIMER --partner-of forward|reverse instead completes a pair
  from one known primer and writes partner.json.

Usage:
    python -m backend.app.cli.primers_cli \
        --fasta backend/data/input/region.fasta \
        --outdir backend/data/out/primers \
        [--params-json backend/app/config/primers_param.json] \
        [--region 150 420] [--fwd-site GAATTC] [--rev-site AAGCTT] \
        [--log-level INFO]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Tuple

from Bio import SeqIO

from backend.app.config.config_primers import load_current_params, load_params_file
from backend.app.core.export.csv_exporter import export_pair_results_csv
from backend.app.core.export.fasta_exporter import export_pairs_to_fasta
from backend.app.core.export.json_exporter import candidate_to_dict, export_outcome_to_json
from backend.app.core.primer.candidates import DesignStatus
from backend.app.core.primer.designer import PrimerDesigner
from backend.app.core.primer.missing_strand import find_missing_strand
from backend.app.core.primer.parameters import MissingStrandParameters, PrimerDesignParameters

log = logging.getLogger("primers_cli")


# ---------- IO helpers ----------

def read_single_fasta(path: Path) -> Tuple[str, str]:
    """Return (name, sequence). Enforces exactly one FASTA record."""
    records = list(SeqIO.parse(str(path), "fasta"))
    if not records:
        raise ValueError(f"No FASTA record found in {path}.")
    if len(records) > 1:
        raise ValueError(f"Multiple FASTA records found in {path}. Provide a single-sequence FASTA.")
    rec = records[0]
    return rec.id or "sequence", "".join(str(rec.seq).split()).upper()


def build_params(args: argparse.Namespace) -> PrimerDesignParameters:
    params = load_params_file(args.params_json) if args.params_json else load_current_params()
    update = {}
    if args.region:
        update["forcedRegion"] = (args.region[0], args.region[1])
    if args.fwd_site:
        update["forwardRecognitionSeq"] = args.fwd_site
    if args.rev_site:
        update["reverseRecognitionSeq"] = args.rev_site
    if update:
        # re-validate so sites are normalized and bounds checked
        params = PrimerDesignParameters.model_validate({**params.model_dump(), **update})
    return params


def run_partner(args: argparse.Namespace, name: str, seq: str, params: PrimerDesignParameters) -> None:
    ms = MissingStrandParameters(
        fixedPrimer=args.find_partner,
        fixedIsForward=args.partner_of == "forward",
        targetTm=params.primerTmTarget,
        targetProduct=params.productSizeTarget,
        monovalentConc=params.monovalentConc,
        divalentConc=params.divalentConc,
        dntpConc=params.dntpConc,
        primerConc=params.primerConc,
    )
    res = find_missing_strand(seq, ms)
    payload = {
        "sequence_name": name,
        "found": res.found,
        "message": res.message,
        "occurrences": res.occurrences,
        "score": res.score,
        "product_size": res.product_size,
        "partner": candidate_to_dict(res.partner) if res.partner is not None else None,
    }
    out = args.outdir / "partner.json"
    out.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    if not res.found:
        raise ValueError(res.message)
    print(f"[OK] {res.message} -> {out}")


# ---------- Main ----------

def main() -> None:
    p = argparse.ArgumentParser(description="Primer pair design CLI")
    p.add_argument("--fasta", required=True, type=Path, help="Single-record FASTA template")
    p.add_argument("--outdir", required=True, type=Path)
    p.add_argument("--params-json", type=Path, help="JSON with PrimerDesignParameters (camelCase); default: stored parameters")
    p.add_argument("--region", nargs=2, type=int, metavar=("START", "END"), help="Forced region [START, END), 0-based")
    p.add_argument("--fwd-site", help="Recognition site for the forward primer overhang")
    p.add_argument("--rev-site", help="Recognition site for the reverse primer overhang")
    p.add_argument("--find-partner", metavar="PRIMER", help="Known primer; search only its missing partner")
    p.add_argument("--partner-of", choices=["forward", "reverse"], default="forward",
                   help="Which strand the --find-partner primer is (default: forward)")
    p.add_argument("--log-level", dest="log_level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default: INFO)")
    args = p.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        name, seq = read_single_fasta(args.fasta)
        log.info("FASTA=%s (%s, %d bp) | OUTDIR=%s", str(args.fasta), name, len(seq), str(args.outdir))
        params = build_params(args)
        args.outdir.mkdir(parents=True, exist_ok=True)

        if args.find_partner:
            run_partner(args, name, seq, params)
            return

        outcome = PrimerDesigner().design(seq, params)
        if outcome.status == DesignStatus.INVALID_INPUT:
            raise ValueError(outcome.message)

        export_outcome_to_json(
            outcome,
            args.outdir / "primers.json",
            extra={
                "sequence_name": name,
                "length": len(seq),
                "params_source": str(args.params_json) if args.params_json else "stored",
                "parameters": params.model_dump(mode="json"),
            },
        )
        export_pair_results_csv(outcome.pairs, args.outdir / "primers.csv")
        export_pairs_to_fasta(outcome.pairs, args.outdir / "primers.fasta")

        if outcome.pairs:
            best = outcome.pairs[0]
            print(f"[OK] {len(outcome.pairs)} pair(s); best score {best.score:.1f}, product {best.product_size} bp -> {args.outdir}")
        else:
            print(f"[OK] {outcome.message} -> {args.outdir}")

    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
