"""Filesystem helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_lines(path: Path, lines: Iterable[str]) -> None:
    """Truncate-and-write ``lines`` verbatim; each line carries its own terminator."""
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8", newline="") as f:
        for line in lines:
            f.write(line)
