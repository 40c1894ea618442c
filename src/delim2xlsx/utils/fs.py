from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator

def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def file_exists(p: Path) -> bool:
    return p.exists() and p.is_file()

def has_extension(p: Path, extensions: Iterable[str]) -> bool:
    return p.suffix.lower() in {e.lower() for e in extensions}

def iter_candidates(root: Path, extensions: Iterable[str], recursive: bool = False) -> Iterator[Path]:
    """
    Plik → zwracany, jeśli ma pasujące rozszerzenie.
    Katalog → posortowane pliki z pasującym rozszerzeniem (opcjonalnie rekurencyjnie).
    """
    exts = [e.lower() for e in extensions]
    if root.is_file():
        if has_extension(root, exts):
            yield root
        return
    if not root.is_dir():
        return
    pattern = "**/*" if recursive else "*"
    for p in sorted(root.glob(pattern)):
        if p.is_file() and has_extension(p, exts):
            yield p
