# src/wellprod/io/csv.py
from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Sequence

import pandas as pd

DELIMITER_CANDIDATES = ["\t", ",", ";", "|"]


class ExtractError(ValueError):
    """An input file is missing, unreadable, or narrower/shaped differently than its layout."""

    def __init__(self, label: str, path: Path | str, detail: str) -> None:
        self.label = label
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"{label} ({self.path}): {detail}")


def require_file(path: Path | str, label: str) -> Path:
    p = Path(path)
    if not p.exists():
        raise ExtractError(label, p, "file not found")
    if not p.is_file():
        raise ExtractError(label, p, "not a regular file")
    return p


def _read_sample_text(path: Path, *, max_bytes: int = 32_000, encoding: str = "latin-1") -> str:
    """
    Read a small prefix of the file for delimiter sniffing, without loading the whole file.
    """
    with path.open("rb") as f:
        blob = f.read(max_bytes)
    if encoding.lower().replace("-", "") in ("utf8", "utf8sig"):
        return blob.decode("utf-8-sig", errors="replace")
    return blob.decode(encoding, errors="replace")


def _first_nonempty_line(sample: str) -> str:
    for line in sample.splitlines():
        if line.strip():
            return line
    return ""


def _detect_delimiter(sample: str) -> str:
    """
    Delimiter detection for headerless regulatory extracts.

    Strategy:
      1) Fast-path on the first non-empty line when exactly one candidate occurs.
      2) Score candidates across lines (consistent counts win over large ones).
      3) csv.Sniffer with constrained delimiters, else tab.
    """
    first = _first_nonempty_line(sample)

    present = [d for d in DELIMITER_CANDIDATES if d in first]
    if len(present) == 1:
        return present[0]

    lines = [ln for ln in sample.splitlines() if ln.strip()][:50]

    def _score(delim: str) -> float:
        counts = [ln.count(delim) for ln in lines]
        if not counts or max(counts) == 0:
            return 0.0
        mean = sum(counts) / len(counts)
        var = sum((c - mean) ** 2 for c in counts) / max(1, len(counts) - 1)
        return float(mean) / (1.0 + float(var))

    scores = {d: _score(d) for d in DELIMITER_CANDIDATES}
    best = max(DELIMITER_CANDIDATES, key=lambda d: scores[d])
    if scores[best] > 0.0:
        return best

    try:
        return csv.Sniffer().sniff(sample, delimiters="".join(DELIMITER_CANDIDATES)).delimiter
    except csv.Error:
        return "\t"


def detect_delimiter(path: Path, *, encoding: str = "latin-1") -> str:
    return _detect_delimiter(_read_sample_text(path, encoding=encoding))


def count_fields(path: Path, delimiter: str, *, encoding: str = "latin-1") -> int:
    """Field count of the first non-empty line (0 for an empty file)."""
    line = _first_nonempty_line(_read_sample_text(path, encoding=encoding)).rstrip("\r\n")
    if not line:
        return 0
    return len(line.split(delimiter))


def read_delimited_columns(
    path: Path,
    usecols: Sequence[int],
    names: Sequence[str],
    *,
    delimiter: str,
    encoding: str = "latin-1",
) -> pd.DataFrame:
    """
    Read selected 0-indexed columns of a headerless delimited file as strings.

    Quotes are not interpreted (names in these extracts contain stray quotes).
    Empty fields become NaN; lines shorter than the widest requested column are
    padded with NaN by the parser.
    """
    order: List[int] = sorted(set(int(i) for i in usecols))
    if len(order) != len(usecols):
        raise ValueError("usecols must be unique")
    df = pd.read_csv(
        path,
        sep=delimiter,
        header=None,
        usecols=order,
        dtype=str,
        quoting=csv.QUOTE_NONE,
        keep_default_na=False,
        na_values=[""],
        encoding=encoding,
        engine="c",
    )
    by_index = dict(zip(order, df.columns))
    return pd.DataFrame({name: df[by_index[int(i)]] for i, name in zip(usecols, names)})


def read_header_csv(path: Path, *, encoding: str = "utf-8-sig", delimiter: str = ",") -> pd.DataFrame:
    """Header-row CSV with every column kept as text."""
    return pd.read_csv(
        path,
        sep=delimiter,
        dtype=str,
        keep_default_na=False,
        na_values=[""],
        encoding=encoding,
        encoding_errors="replace",
    )
