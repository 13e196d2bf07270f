# src/wellprod/enrich/__init__.py
from __future__ import annotations

"""
Keep this import-light: production.reshape imports enrich.joins, and
enrich.metadata imports production.reshape.
"""

from .joins import JoinStats, MetadataFanoutWarning, left_join_counted

__all__ = ["JoinStats", "MetadataFanoutWarning", "left_join_counted"]
