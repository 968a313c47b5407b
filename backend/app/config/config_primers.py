# File: backend/app/config/config_primers.py
# Version: v0.4.0
"""
Editable primer design parameters.

Two JSON files live next to this module:
  primers_param_default.json  shipped defaults, never written
  primers_param.json          current values, created on first GET /parameters

Both carry the camelCase keys of PrimerDesignParameters. Missing keys take the
model defaults, so a partial file such as

  {"primerTmTarget": 62.0, "forwardRecognitionSeq": "GAATTC"}

is valid. Writes go to a sibling *.tmp file first and are moved into place with
os.replace, so readers never observe a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from backend.app.core.primer.parameters import PrimerDesignParameters

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_FILE = CONFIG_DIR / "primers_param_default.json"
CURRENT_FILE = CONFIG_DIR / "primers_param.json"


def _load_payload(path: Path) -> Optional[Dict[str, Any]]:
    """Parsed JSON object from `path`, or None when the file is absent or unreadable."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("ignoring malformed parameters file %s: %s", path, exc)
        return None
    if not isinstance(payload, dict):
        logger.warning("ignoring parameters file %s: top level is %s, not an object", path, type(payload).__name__)
        return None
    return payload


def _write_atomically(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    staging.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    os.replace(staging, path)


def load_params_file(path: Path) -> PrimerDesignParameters:
    """Validate a user-supplied parameters file (CLI --params-json). Errors propagate."""
    with Path(path).open("r", encoding="utf-8") as fh:
        return PrimerDesignParameters.model_validate(json.load(fh))


def load_default_params() -> PrimerDesignParameters:
    return PrimerDesignParameters.model_validate(_load_payload(DEFAULT_FILE) or {})


def load_current_params(fallback_to_default: bool = True) -> PrimerDesignParameters:
    """
    Current parameters. An absent or malformed primers_param.json yields the
    shipped defaults when `fallback_to_default` is set, bare model defaults otherwise.
    """
    payload = _load_payload(CURRENT_FILE)
    if payload is None:
        return load_default_params() if fallback_to_default else PrimerDesignParameters()
    return PrimerDesignParameters.model_validate(payload)


def save_current_params(params: PrimerDesignParameters) -> None:
    _write_atomically(CURRENT_FILE, params.model_dump(mode="json"))
    logger.info("primer parameters saved to %s", CURRENT_FILE)


def ensure_current_exists() -> Tuple[bool, PrimerDesignParameters]:
    """Return (created, params), seeding primers_param.json from the defaults if needed."""
    if CURRENT_FILE.exists():
        return False, load_current_params()
    defaults = load_default_params()
    save_current_params(defaults)
    return True, defaults


def reset_current_params() -> PrimerDesignParameters:
    """Overwrite primers_param.json with the shipped defaults."""
    defaults = load_default_params()
    save_current_params(defaults)
    logger.info("primer parameters reset to defaults")
    return defaults
