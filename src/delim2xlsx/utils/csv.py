from __future__ import annotations

import string
from enum import Enum
from pathlib import Path

QUOTE = '"'

# znaki, które nigdy nie są separatorem
EXCLUDED = frozenset(string.digits + string.ascii_letters + " ")


class _Quote(Enum):
    UNQUOTED = 0
    QUOTED = 1


def sniff_delimiter(sample: str) -> str | None:
    """
    Zgaduje separator pól na podstawie próbki tekstu (kilka pierwszych linii).

    Liczy wystąpienia każdego znaku spoza cudzysłowów, pomijając cyfry, litery
    ASCII i spację; wygrywa znak o największej liczbie wystąpień.
    Cudzysłów `"` zawsze przełącza stan (brak obsługi `""` jako escape),
    więc nieparzysta liczba cudzysłowów oznacza, że reszta próbki jest "w cudzysłowie".
    Remis: wygrywa znak, który pojawił się w próbce najwcześniej.

    Zwraca: znak separatora | None (brak kandydatów)
    """
    state = _Quote.UNQUOTED
    counts: dict[str, int] = {}  # kolejność wstawiania = kolejność pierwszego wystąpienia

    for c in sample:
        if c == QUOTE:
            state = _Quote.QUOTED if state is _Quote.UNQUOTED else _Quote.UNQUOTED
            continue
        if state is _Quote.QUOTED or c in EXCLUDED:
            continue
        counts[c] = counts.get(c, 0) + 1

    if not counts:
        return None
    # max() zwraca pierwszy klucz z maksymalną wartością
    return max(counts, key=counts.__getitem__)


def read_sample(path: Path, lines: int = 2, encoding: str = "utf-8-sig") -> str:
    """
    Czyta maks. `lines` pierwszych linii i skleja je bez znaków końca linii
    (żeby '\\n' / '\\r' nie konkurowały z prawdziwym separatorem).
    """
    parts: list[str] = []
    with path.open("r", encoding=encoding, newline="") as f:
        for line in f:
            parts.append(line.rstrip("\r\n"))
            if len(parts) >= lines:
                break
    return "".join(parts)
