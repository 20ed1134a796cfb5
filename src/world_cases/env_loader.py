from __future__ import annotations

import os
from pathlib import Path
from typing import Dict


def _parse_env_lines(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def load_dotenv_if_present(path: str | None = None) -> Dict[str, str]:
    """
    Load WORLD_CASES_* settings (or any KEY=VALUE pair) from a .env file.

    - Default file is ".env" in the current working directory.
    - Blank lines, comments and lines without "=" are ignored.
    - An optional leading "export " and surrounding quotes are stripped.
    - Variables already present in os.environ are never overwritten.

    Returns the pairs that were actually applied, which is handy for logging
    which settings came from the file. A missing or unreadable file is not an
    error: deployed environments configure variables directly.
    """
    env_path = Path(path or ".env")
    if not env_path.exists():
        return {}

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return {}

    applied: Dict[str, str] = {}
    for key, value in _parse_env_lines(text).items():
        if key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied


__all__ = ["load_dotenv_if_present"]
