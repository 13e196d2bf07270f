# src/wellprod/wells/uwi.py
from __future__ import annotations

"""
Well identifier -> UWI.

The control/history extracts carry a fixed-width positional identifier:

  pos 1-3   township           (D)
  pos 4     meridian           (digit after "W")
  pos 5-6   range              (E)
  pos 7-8   section            (C)
  pos 9-10  legal subdivision  (B)
  pos 11-12 location exception (A)
  pos 13    event sequence

reassembled as  A/B-C-D-EW<meridian>/<event>,  e.g. 12/90-78-123-56W4/A for
"123456789012A". No validation: short input gives short pieces.
"""

from typing import Any

import pandas as pd

# (start, end) as 0-indexed half-open slices
_LOC_EXCEPTION = (10, 12)
_LSD = (8, 10)
_SECTION = (6, 8)
_TOWNSHIP = (0, 3)
_MERIDIAN = (3, 4)
_RANGE = (4, 6)
_EVENT = (12, 13)


def _cut(s: str, span) -> str:
    return s[span[0]:span[1]]


def normalize_uwi(raw: str) -> str:
    s = str(raw)
    return (
        f"{_cut(s, _LOC_EXCEPTION)}/{_cut(s, _LSD)}-{_cut(s, _SECTION)}-{_cut(s, _TOWNSHIP)}-"
        f"{_cut(s, _RANGE)}W{_cut(s, _MERIDIAN)}/{_cut(s, _EVENT)}"
    )


def normalize_uwi_series(raw: Any) -> pd.Series:
    """
    Vectorized normalize_uwi. Missing identifiers stay missing (pd.NA).
    """
    if not isinstance(raw, pd.Series):
        raw = pd.Series(raw)
    s = raw.astype("string")

    def cut(span) -> pd.Series:
        return s.str.slice(span[0], span[1])

    out = (
        cut(_LOC_EXCEPTION) + "/" + cut(_LSD) + "-" + cut(_SECTION) + "-" + cut(_TOWNSHIP) + "-"
        + cut(_RANGE) + "W" + cut(_MERIDIAN) + "/" + cut(_EVENT)
    )
    return out.astype(object)
