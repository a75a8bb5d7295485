"""
Concentration heatmap data pipeline.

Normalizes loosely-structured person records (home and institution
addresses with coordinates) and groups them into location clusters.
"""

from heatmap.aggregation import aggregate, rank_clusters, summarize
from heatmap.exceptions import (
    DocumentDecodeError,
    DocumentError,
    DocumentFetchError,
    DocumentStructureError,
    HeatmapError,
)
from heatmap.loader import DataSource, LoadResult, run_load_cycle
from heatmap.models import Cluster, LocationKind, NormalizationReport, NormalizedRecord
from heatmap.normalizers import normalize, normalize_document

__version__ = "1.0.0"

__all__ = [
    "normalize",
    "normalize_document",
    "aggregate",
    "rank_clusters",
    "summarize",
    "run_load_cycle",
    "DataSource",
    "LoadResult",
    "Cluster",
    "LocationKind",
    "NormalizedRecord",
    "NormalizationReport",
    "HeatmapError",
    "DocumentError",
    "DocumentFetchError",
    "DocumentDecodeError",
    "DocumentStructureError",
]
