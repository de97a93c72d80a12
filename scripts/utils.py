"""Console logging and small filesystem helpers shared by the pipeline steps."""

from datetime import datetime
from pathlib import Path

import polars as pl


def log(msg: str) -> None:
    print(f"[{datetime.now().isoformat(timespec='seconds')}] {msg}")


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def inspect_frame(df: pl.DataFrame, name: str = "DataFrame") -> None:
    """Lightweight inspect: logs row/col counts."""
    log(f"[{name}] Rows: {df.height:,} | Columns: {df.width}")
