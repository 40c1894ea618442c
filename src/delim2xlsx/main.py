from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from delim2xlsx.log import log
from delim2xlsx.tasks import convert


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="delim2xlsx",
        description="Konwersja plików tekstowych z separatorem do .xlsx (separator wykrywany automatycznie).",
    )
    p.add_argument("inputs", nargs="+", type=Path, help="pliki lub katalogi")
    p.add_argument("-o", "--out-dir", type=Path, default=None, help="katalog wynikowy (domyślnie obok źródła)")
    p.add_argument("--merge", type=Path, default=None, metavar="FILE",
                   help="wszystko do jednego skoroszytu, arkusz na plik")
    p.add_argument("-r", "--recursive", action="store_true", help="przeszukuj katalogi rekurencyjnie")
    p.add_argument("--text", action="store_true", default=None, help="wszystkie komórki jako tekst")
    p.add_argument("--lines", type=int, default=None, help="liczba linii próbki dla detekcji separatora")
    p.add_argument("--mail-to", nargs="+", default=None, metavar="ADDR", help="wyślij wyniki mailem")
    p.add_argument("--open", action="store_true", default=None, dest="open_after",
                   help="otwórz wyniki po konwersji")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parser().parse_args(argv)
    if args.lines is not None and args.lines < 1:
        log.error("--lines musi być ≥ 1")
        return 2

    log.info("═══════════════════════════════════════════════════════════════════════════")
    log.info("■ delim2xlsx: START")
    log.info("═══════════════════════════════════════════════════════════════════════════")

    missing = [p for p in args.inputs if not p.exists()]
    for p in missing:
        log.warning("nie znaleziono: %s", p)
    inputs = [p for p in args.inputs if p.exists()]
    if not inputs:
        log.warning("brak plików do konwersji")
        return 2

    report = convert.run(
        inputs,
        out_dir=args.out_dir,
        merge_into=args.merge,
        recursive=args.recursive,
        sample_lines=args.lines,
        keep_text=args.text,
        mail_to=args.mail_to,
        open_after=args.open_after,
    )

    if not report.results:
        log.warning("brak plików do konwersji")
        return 2
    for r in report.failed:
        log.warning("niepowodzenie: %s (%s)", r.source, r.error)
    if report.failed or missing:
        log.info("koniec: %d OK, %d z błędem, %d nie znaleziono",
                 len(report.converted), len(report.failed), len(missing))
        return 1
    log.info("koniec: OK (%d)", len(report.converted))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
