# src/wellprod/enrich/joins.py
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import pandas as pd


class MetadataFanoutWarning(UserWarning):
    """A metadata table had repeated join keys, so matched rows were multiplied."""


@dataclass(frozen=True)
class JoinStats:
    label: str
    n_left: int
    n_out: int
    n_matched: int
    n_unmatched: int
    n_duplicate_keys: int
    n_fanout_rows: int
    deduplicated: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "n_left": int(self.n_left),
            "n_out": int(self.n_out),
            "n_matched": int(self.n_matched),
            "n_unmatched": int(self.n_unmatched),
            "n_duplicate_keys": int(self.n_duplicate_keys),
            "n_fanout_rows": int(self.n_fanout_rows),
            "deduplicated": bool(self.deduplicated),
        }


def left_join_counted(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: str,
    *,
    label: str,
    dedupe: bool = False,
) -> Tuple[pd.DataFrame, JoinStats]:
    """
    Left-outer join on exact key equality, keeping left row order.

    - Right rows with a missing key never match anything.
    - Repeated right keys are NOT collapsed unless dedupe=True (first row wins);
      otherwise each matching left row is repeated once per right row and a
      MetadataFanoutWarning is emitted.
    """
    if on not in left.columns:
        raise ValueError(f"{label}: left table has no '{on}' column")
    if on not in right.columns:
        raise ValueError(f"{label}: metadata table has no '{on}' column")

    r = right[right[on].notna()]
    dup_mask = r[on].duplicated(keep=False)
    n_dup_keys = int(r.loc[dup_mask, on].nunique())

    if dedupe and n_dup_keys:
        r = r.drop_duplicates(subset=[on], keep="first")

    right_keys = set(r[on].tolist())
    matched = left[on].map(lambda k: (not pd.isna(k)) and k in right_keys).astype(bool)

    out = left.merge(r, on=on, how="left", sort=False)
    n_fanout = int(len(out) - len(left))

    if n_fanout > 0:
        warnings.warn(
            f"{label}: {n_dup_keys} repeated key(s) in metadata multiplied {n_fanout} row(s)",
            MetadataFanoutWarning,
            stacklevel=2,
        )

    stats = JoinStats(
        label=label,
        n_left=int(len(left)),
        n_out=int(len(out)),
        n_matched=int(matched.sum()),
        n_unmatched=int((~matched).sum()),
        n_duplicate_keys=n_dup_keys,
        n_fanout_rows=n_fanout,
        deduplicated=bool(dedupe and n_dup_keys),
    )
    return out.reset_index(drop=True), stats
