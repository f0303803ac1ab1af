"""Read and write reviewed source files without newline translation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

PathLike = Union[str, Path]


def read_source(path: PathLike) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def read_lines(path: PathLike) -> List[str]:
    """Return the file's lines with their original line endings."""
    return read_source(path).splitlines(keepends=True)


def write_source(path: PathLike, content: str) -> None:
    """Replace the whole file in one write."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
