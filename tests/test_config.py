from __future__ import annotations

from pathlib import Path

import pytest

from wellprod.config.defaults import config_from_dict, default_config
from wellprod.utils.config import as_plain_dict, deep_get, deep_merge, load_yaml


def test_default_config_paths_are_relative_to_base(tmp_path: Path) -> None:
    cfg = default_config(tmp_path)
    assert cfg.io.control_path == tmp_path / "data" / "control.txt"
    assert cfg.io.out_dir == tmp_path / "out"
    assert cfg.read.history_delimiter == "\t"
    assert cfg.read.control_delimiter is None
    assert cfg.summary.seqyear_order == "input"
    assert cfg.summary.zero_range_value is None
    assert cfg.enrich.dedupe_metadata is False
    assert cfg.map.enabled is False


def test_load_yaml_resolves_io_paths_next_to_file(tmp_path: Path) -> None:
    p = tmp_path / "cfg" / "run.yaml"
    p.parent.mkdir()
    p.write_text(
        "io:\n"
        "  control_path: data/control.txt\n"
        "  history_path: /abs/history.txt\n"
        "summary:\n"
        "  pool_search_term: VIKING\n"
        "  seqyear_order: year\n",
        encoding="utf-8",
    )
    d = load_yaml(p)
    assert d["io"]["control_path"] == str(p.resolve().parent / "data" / "control.txt")
    assert d["io"]["history_path"] == "/abs/history.txt"

    cfg = config_from_dict(d, base=default_config(tmp_path))
    assert cfg.io.control_path == p.resolve().parent / "data" / "control.txt"
    assert cfg.io.locations_path == tmp_path / "data" / "bottom_hole_locations.csv"
    assert cfg.summary.pool_search_term == "VIKING"
    assert cfg.summary.seqyear_order == "year"


def test_load_yaml_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")


def test_deep_merge_none_does_not_clobber() -> None:
    base = {"io": {"out_dir": "a"}, "summary": {"pool_search_term": "X"}}
    merged = deep_merge(base, {"io": {"out_dir": None, "control_path": "c"}, "map": {"enabled": None}})
    assert merged["io"] == {"out_dir": "a", "control_path": "c"}
    assert merged["summary"] == {"pool_search_term": "X"}
    assert merged["map"] == {}
    assert deep_get(merged, "io.control_path") == "c"
    assert deep_get(merged, "io.nope", 3) == 3


def test_config_from_dict_ignores_unknown_keys_and_serializes(tmp_path: Path) -> None:
    cfg = config_from_dict(
        {"io": {"out_dir": str(tmp_path / "o"), "bogus": 1}, "enrich": {"dedupe_metadata": True}},
        base=default_config(tmp_path),
    )
    assert cfg.io.out_dir == tmp_path / "o"
    assert cfg.enrich.dedupe_metadata is True

    plain = as_plain_dict(cfg)
    assert plain["io"]["out_dir"] == str(tmp_path / "o")
    assert plain["summary"]["zero_range_value"] is None
