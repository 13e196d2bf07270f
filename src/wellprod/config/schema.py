from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class IOConfig:
    control_path: Path
    history_path: Path
    horizontal_path: Optional[Path]
    locations_path: Optional[Path]
    out_dir: Path


@dataclass(frozen=True)
class ReadConfig:
    control_delimiter: Optional[str] = None  # None => sniff
    history_delimiter: Optional[str] = "\t"
    encoding: str = "latin-1"


@dataclass(frozen=True)
class EnrichConfig:
    dedupe_metadata: bool = False


@dataclass(frozen=True)
class SummaryConfig:
    pool_search_term: str = ""
    seqyear_order: str = "input"
    zero_range_value: Optional[float] = None


@dataclass(frozen=True)
class MapConfig:
    enabled: bool = False
    radius_column: str = "rad_oil"
    max_marker_area: float = 400.0
    filename: str = "pool_map.png"


@dataclass(frozen=True)
class RunConfig:
    io: IOConfig
    read: ReadConfig = field(default_factory=ReadConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    map: MapConfig = field(default_factory=MapConfig)
