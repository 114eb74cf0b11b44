"""File utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict


def read_text_file(path: str) -> str:
    """Read a UTF-8 text file."""
    return Path(path).read_text(encoding="utf-8")


def read_json_file(path: str) -> Dict[str, Any]:
    """Read and parse a JSON document, requiring an object at the top level."""
    payload = json.loads(read_text_file(path))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(payload).__name__}")
    return payload


def write_json_file(path: str, payload: Any) -> str:
    p = Path(path)
    if p.parent and not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return str(p)
