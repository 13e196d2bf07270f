# src/wellprod/io/__init__.py
from __future__ import annotations

from .csv import ExtractError
from .extracts import (
    read_bottom_hole_locations,
    read_control_extract,
    read_history_extract,
    read_horizontal_wells,
    read_positional_extract,
)

__all__ = [
    "ExtractError",
    "read_bottom_hole_locations",
    "read_control_extract",
    "read_history_extract",
    "read_horizontal_wells",
    "read_positional_extract",
]
