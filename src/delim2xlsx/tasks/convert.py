# src/delim2xlsx/tasks/convert.py
from __future__ import annotations

import re
import smtplib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import IllegalCharacterError

from ..cfg import settings
from ..log import log
from ..utils.csv import read_sample, sniff_delimiter
from ..utils.fs import ensure_dir, file_exists, has_extension, iter_candidates
from . import launch, mail

XLSX_SUFFIX = ".xlsx"
SHEET_NAME_MAX = 31  # limit Excela
SHEET_MAX_ROWS = 1_048_576
SHEET_MAX_COLS = 16_384
_SHEET_BAD_CHARS = re.compile(r"[\[\]:*?/\\]")

# błędy jednego pliku – nie przerywają partii
_FILE_ERRORS = (
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
    UnicodeDecodeError,
    ValueError,
    OSError,
)

# błędy zapisu skoroszytu – też per plik
_WRITE_ERRORS = (IllegalCharacterError, ValueError, OSError)


@dataclass
class ConversionResult:
    source: Path
    target: Optional[Path] = None
    delimiter: Optional[str] = None
    rows: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.target is not None


@dataclass
class BatchReport:
    results: List[ConversionResult] = field(default_factory=list)

    @property
    def converted(self) -> List[ConversionResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[ConversionResult]:
        return [r for r in self.results if not r.ok]

    def targets(self) -> List[Path]:
        """Unikalne pliki wynikowe (przy scalaniu – jeden)."""
        out: List[Path] = []
        for r in self.converted:
            if r.target not in out:
                out.append(r.target)
        return out


def _fail(path: Path, reason: str, delimiter: Optional[str] = None) -> ConversionResult:
    log.warning("convert: %s – %s (pomijam)", path, reason)
    return ConversionResult(source=path, delimiter=delimiter, error=reason)


def _key(p: Path) -> str:
    # porównanie bez wielkości liter (Windows/macOS)
    return str(p.resolve()).lower()


def _target_for(path: Path, out_dir: Optional[Path], taken: Iterable[Path] = ()) -> Path:
    """
    <out_dir | katalog źródła>/<stem>.xlsx; gdy ta nazwa jest już zajęta
    w bieżącej partii → <stem>_2.xlsx, <stem>_3.xlsx, …
    """
    folder = out_dir or path.parent
    used = {_key(t) for t in taken}
    target = folder / (path.stem + XLSX_SUFFIX)
    n = 2
    while _key(target) in used:
        target = folder / f"{path.stem}_{n}{XLSX_SUFFIX}"
        n += 1
    return target


def check_sheet(df: pd.DataFrame) -> None:
    """Limity arkusza Excela i znaki niedozwolone w XML – sprawdzane przed zapisem."""
    rows, cols = df.shape
    if rows > SHEET_MAX_ROWS or cols > SHEET_MAX_COLS:
        raise ValueError(f"za duży arkusz {rows}x{cols} (limit {SHEET_MAX_ROWS}x{SHEET_MAX_COLS})")
    for j, col in enumerate(df.columns):
        for i, v in enumerate(df[col]):
            if isinstance(v, str) and ILLEGAL_CHARACTERS_RE.search(v):
                raise IllegalCharacterError(f"niedozwolony znak w wierszu {i + 1}, kolumnie {j + 1}: {v!r}")


def sheet_name(stem: str, taken: Iterable[str] = ()) -> str:
    """
    Nazwa arkusza z nazwy pliku: bez []:*?/\\, maks. 31 znaków,
    unikalna (bez rozróżniania wielkości liter) przez dopisanie _2, _3, …
    """
    base = _SHEET_BAD_CHARS.sub("_", stem).strip("'") or "Arkusz"
    base = base[:SHEET_NAME_MAX]
    used = {t.lower() for t in taken}
    name = base
    n = 2
    while name.lower() in used:
        suffix = f"_{n}"
        name = base[: SHEET_NAME_MAX - len(suffix)] + suffix
        n += 1
    return name


def load_frame(
    path: Path,
    *,
    extensions: Sequence[str],
    sample_lines: int,
    encoding: str,
    keep_text: bool,
) -> Tuple[Optional[pd.DataFrame], ConversionResult]:
    """
    Walidacja → próbka → separator → pełne wczytanie pandas.
    Zwraca (DataFrame | None, wynik); przy błędzie DataFrame = None.
    """
    if not file_exists(path):
        return None, _fail(path, "brak pliku")
    if not has_extension(path, extensions):
        return None, _fail(path, f"nieobsługiwane rozszerzenie {path.suffix or '(brak)'}")

    try:
        sample = read_sample(path, lines=sample_lines, encoding=encoding)
    except (UnicodeDecodeError, OSError) as e:
        return None, _fail(path, f"nie da się odczytać próbki: {e}")

    delimiter = sniff_delimiter(sample)
    if delimiter is None:
        return None, _fail(path, "nie wykryto separatora")
    log.info("csv: %s → separator %r", path.name, delimiter)

    try:
        df = pd.read_csv(
            path,
            sep=delimiter,
            header=None,
            quotechar='"',
            encoding=encoding,
            dtype=str if keep_text else None,
            keep_default_na=not keep_text,
        )
    except _FILE_ERRORS as e:
        return None, _fail(path, f"błąd parsowania: {e}", delimiter)

    return df, ConversionResult(source=path, delimiter=delimiter, rows=len(df))


def convert_file(
    path: Path,
    out_dir: Optional[Path] = None,
    *,
    extensions: Optional[Sequence[str]] = None,
    sample_lines: Optional[int] = None,
    encoding: Optional[str] = None,
    keep_text: Optional[bool] = None,
    target: Optional[Path] = None,
) -> ConversionResult:
    """Jeden plik tekstowy → jeden skoroszyt .xlsx (obok źródła albo w out_dir)."""
    df, result = load_frame(
        path,
        extensions=extensions if extensions is not None else settings.extension_list(),
        sample_lines=sample_lines or settings.SAMPLE_LINES,
        encoding=encoding or settings.ENCODING,
        keep_text=settings.KEEP_TEXT if keep_text is None else keep_text,
    )
    if df is None:
        return result

    target = target or _target_for(path, out_dir)
    try:
        check_sheet(df)
        ensure_dir(target.parent)
        df.to_excel(target, index=False, header=False, engine="openpyxl")
    except _WRITE_ERRORS as e:
        return _fail(path, f"zapis {target} nieudany: {e}", result.delimiter)

    result.target = target
    log.info("convert: %s → %s (wierszy=%d)", path.name, target, result.rows)
    return result


def _merge(frames: List[Tuple[pd.DataFrame, ConversionResult]], merge_into: Path) -> None:
    ensure_dir(merge_into.parent)
    taken: List[str] = []
    with pd.ExcelWriter(merge_into, engine="openpyxl") as writer:
        for df, result in frames:
            name = sheet_name(result.source.stem, taken)
            taken.append(name)
            df.to_excel(writer, sheet_name=name, index=False, header=False)
            result.target = merge_into
    log.info("convert: scalono %d plik(ów) → %s", len(frames), merge_into)


def convert_many(
    paths: Iterable[Path],
    out_dir: Optional[Path] = None,
    merge_into: Optional[Path] = None,
    *,
    extensions: Optional[Sequence[str]] = None,
    sample_lines: Optional[int] = None,
    encoding: Optional[str] = None,
    keep_text: Optional[bool] = None,
) -> BatchReport:
    """
    Partia plików, sekwencyjnie. Błąd jednego pliku nie zatrzymuje pozostałych.
    merge_into → wszystkie poprawne pliki trafiają do jednego skoroszytu (arkusz na plik).
    """
    report = BatchReport()
    if merge_into is None:
        written: List[Path] = []
        for p in paths:
            r = convert_file(
                p, out_dir,
                extensions=extensions, sample_lines=sample_lines,
                encoding=encoding, keep_text=keep_text,
                target=_target_for(p, out_dir, written),
            )
            if r.ok:
                if r.target.name != p.stem + XLSX_SUFFIX:
                    log.warning("convert: %s – nazwa zajęta w tej partii, zapisano jako %s", p, r.target.name)
                written.append(r.target)
            report.results.append(r)
        return report

    frames: List[Tuple[pd.DataFrame, ConversionResult]] = []
    for p in paths:
        df, result = load_frame(
            p,
            extensions=extensions if extensions is not None else settings.extension_list(),
            sample_lines=sample_lines or settings.SAMPLE_LINES,
            encoding=encoding or settings.ENCODING,
            keep_text=settings.KEEP_TEXT if keep_text is None else keep_text,
        )
        report.results.append(result)
        if df is None:
            continue
        try:
            check_sheet(df)
        except (IllegalCharacterError, ValueError) as e:
            result.error = f"arkusz pominięty: {e}"
            log.warning("convert: %s – %s (pomijam)", p, result.error)
            continue
        frames.append((df, result))

    if frames:
        try:
            _merge(frames, merge_into)
        except _WRITE_ERRORS as e:
            log.error("convert: zapis %s nieudany: %s", merge_into, e)
            for _, result in frames:
                result.target = None
                result.error = f"zapis {merge_into} nieudany: {e}"
    return report


def _expand(inputs: Iterable[Path], extensions: Sequence[str], recursive: bool) -> List[Path]:
    # katalogi rozwijamy; pojedyncze pliki przechodzą dalej bez filtra (walidacja w load_frame)
    out: List[Path] = []
    for p in inputs:
        if p.is_dir():
            found = list(iter_candidates(p, extensions, recursive=recursive))
            if not found:
                log.info("convert: katalog bez plików do konwersji: %s", p)
            out.extend(found)
        else:
            out.append(p)
    return out


def run(
    inputs: Iterable[Path],
    out_dir: Optional[Path] = None,
    merge_into: Optional[Path] = None,
    *,
    recursive: bool = False,
    sample_lines: Optional[int] = None,
    keep_text: Optional[bool] = None,
    mail_to: Optional[Sequence[str]] = None,
    open_after: Optional[bool] = None,
) -> BatchReport:
    """Rozwinięcie wejść → konwersja → (opcjonalnie) mail → (opcjonalnie) otwarcie."""
    extensions = settings.extension_list()
    if out_dir is None and settings.OUTPUT_DIR:
        out_dir = Path(settings.OUTPUT_DIR)
    files = _expand(inputs, extensions, recursive)
    log.info("convert: plików do przetworzenia: %d", len(files))

    report = convert_many(
        files, out_dir, merge_into,
        extensions=extensions, sample_lines=sample_lines, keep_text=keep_text,
    )
    log.info("convert: OK=%d, błędy=%d", len(report.converted), len(report.failed))

    targets = report.targets()
    recipients = list(mail_to) if mail_to else settings.mail_recipients()
    if recipients and targets:
        try:
            mail.send_workbooks(targets, recipients)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            log.error("mail: wysyłka nieudana: %s (wyniki konwersji zostają)", e)

    if open_after is None:
        open_after = settings.OPEN_AFTER
    if open_after:
        for t in targets:
            try:
                launch.open_file(t)
            except OSError as e:
                log.error("open: %s – %s", t, e)

    return report
