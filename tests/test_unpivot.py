from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from wellprod.production.fluids import FLUID_ORDER, FluidCategory, category_for_code
from wellprod.production.unpivot import unpivot_frame, unpivot_mapping, unpivot_row


def test_fluid_codes_are_fixed() -> None:
    assert [f.code for f in FLUID_ORDER] == [2, 6, 16, 51, 53, 54]
    assert [f.column for f in FLUID_ORDER] == ["gas", "water", "lpg", "oil", "propane", "butane"]


def test_category_for_code_accepts_numeric_spellings() -> None:
    assert category_for_code(51) is FluidCategory.OIL
    assert category_for_code(2.0) is FluidCategory.GAS
    assert category_for_code("16") is FluidCategory.LIQUID_PETROLEUM_GAS
    assert category_for_code(999) is None
    assert category_for_code(None) is None
    assert category_for_code(float("nan")) is None
    assert category_for_code(2.5) is None


def test_unpivot_row_always_has_six_categories() -> None:
    out = unpivot_row([], [])
    assert list(out) == list(FLUID_ORDER)
    assert all(v is None for v in out.values())

    out2 = unpivot_row([51, None, 6], [10.5, None, 3.0])
    assert set(out2) == set(FluidCategory)
    assert out2[FluidCategory.OIL] == 10.5
    assert out2[FluidCategory.WATER] == 3.0
    assert out2[FluidCategory.GAS] is None


def test_unpivot_row_later_duplicate_code_wins() -> None:
    out = unpivot_row([2, 2], [10.0, 20.0])
    assert out[FluidCategory.GAS] == 20.0


def test_unpivot_row_duplicate_code_with_absent_volume_clears_value() -> None:
    out = unpivot_row([2, 2], [10.0, None])
    assert out[FluidCategory.GAS] is None


def test_unpivot_row_unmapped_code_contributes_nothing() -> None:
    out = unpivot_row([999], [5.0])
    assert all(v is None for v in out.values())


def test_unpivot_row_length_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        unpivot_row([2, 6], [1.0])


def test_unpivot_mapping_reads_named_columns() -> None:
    row = {"c1": 53, "v1": 1.25, "c2": 54, "v2": 2.5}
    out = unpivot_mapping(row, [("c1", "v1"), ("c2", "v2")])
    assert out[FluidCategory.PROPANE] == 1.25
    assert out[FluidCategory.BUTANE] == 2.5


def _wide(rows):
    recs = []
    for codes, vols in rows:
        r = {}
        for k, (c, v) in enumerate(zip(codes, vols), start=1):
            r[f"c{k}"] = c
            r[f"v{k}"] = v
        recs.append(r)
    return pd.DataFrame(recs)


SLOTS = [("c1", "v1"), ("c2", "v2"), ("c3", "v3")]


def test_unpivot_frame_matches_row_fold() -> None:
    rows = [
        ([51, 2, 6], [1.0, 2.0, 3.0]),
        ([2, 2, None], [10.0, 20.0, None]),
        ([999, 16, 51], [5.0, 7.0, np.nan]),
        ([None, None, None], [None, None, None]),
    ]
    df = _wide(rows)
    frame, _ = unpivot_frame(df, SLOTS)

    for i, (codes, vols) in enumerate(rows):
        expected = unpivot_row(codes, vols)
        for cat, v in expected.items():
            got = frame.loc[i, cat.column]
            if v is None:
                assert math.isnan(got)
            else:
                assert got == v


def test_unpivot_frame_stats_surface_silent_cases() -> None:
    df = _wide(
        [
            ([2, 2, 999], [10.0, 20.0, 5.0]),
            ([51, 998, None], [1.0, 1.0, None]),
        ]
    )
    frame, stats = unpivot_frame(df, SLOTS)

    assert frame.loc[0, "gas"] == 20.0
    assert frame.loc[1, "oil"] == 1.0
    assert stats.n_rows == 2
    assert stats.n_slots_used == 5
    assert stats.n_unmapped_slots == 2
    assert stats.n_overwritten == 1
    assert stats.unmapped_codes == {998: 1, 999: 1}
    assert stats.as_dict()["unmapped_codes"] == {"998": 1, "999": 1}


def test_unpivot_frame_requires_slot_columns() -> None:
    with pytest.raises(ValueError):
        unpivot_frame(pd.DataFrame({"c1": [2]}), [("c1", "v1")])
