# pw_cli.py
from __future__ import annotations

import json
import subprocess
from typing import Any, List, Sequence


def _run(cmd: Sequence[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(list(cmd), capture_output=True, text=True)


def pw_dump_json() -> List[Any]:
    try:
        p = _run(["pw-dump"])
    except OSError as e:
        raise RuntimeError(f"pw-dump could not be started: {e}") from e

    if p.returncode != 0:
        msg = (p.stderr or p.stdout).strip()
        raise RuntimeError(f"pw-dump failed: {msg}")

    try:
        data = json.loads(p.stdout)
    except Exception as e:
        raise RuntimeError(f"pw-dump output is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise RuntimeError("pw-dump output JSON is not a list")

    return data
