from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from ..log import log


def open_file(path: Path) -> None:
    """Otwiera plik domyślną aplikacją systemu (bez czekania na jej zamknięcie)."""
    if not path.exists():
        raise FileNotFoundError(str(path))

    log.info("open: %s", path)
    if sys.platform.startswith("win"):
        os.startfile(str(path))  # type: ignore[attr-defined]
    elif sys.platform == "darwin":
        subprocess.Popen(["open", str(path)])
    else:
        subprocess.Popen(["xdg-open", str(path)])
