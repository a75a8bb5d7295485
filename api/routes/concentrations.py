"""
Concentration API Routes.

Read-only views over the current load cycle:
- Normalized records
- Ranked home / institution clusters
- Summary statistics and the normalization report
- Manual reload
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from api.cache import get_load_result
from heatmap.config import get_settings
from heatmap.exporter import cluster_to_dict, record_to_dict, summary_payload
from heatmap.models import LocationKind

logger = logging.getLogger(__name__)
router = APIRouter()


class RecordOut(BaseModel):
    id: str
    surname: Optional[str] = None
    given_name: Optional[str] = None
    home_address: str
    institution_address: str
    city: str
    postal_code: str
    home_location: Optional[list[float]] = None
    institution_location: Optional[list[float]] = None


class RecordsResponse(BaseModel):
    count: int
    records: list[RecordOut]
    used_fallback: bool
    notice: Optional[str] = None


class ClusterOut(BaseModel):
    label: str
    kind: LocationKind
    lat: float
    lng: float
    count: int
    share: float
    members: list[RecordOut]


class ClustersResponse(BaseModel):
    kind: LocationKind
    count: int
    clusters: list[ClusterOut]


@router.get("/records", response_model=RecordsResponse)
def get_records():
    """All normalized records of the current load cycle."""
    result = get_load_result()
    return {
        "count": len(result.records),
        "records": [record_to_dict(r) for r in result.records],
        "used_fallback": result.used_fallback,
        "notice": result.notice,
    }


@router.get("/clusters/{kind}", response_model=ClustersResponse)
def get_clusters(
    kind: LocationKind,
    limit: int = Query(default=100, ge=1, le=10000, description="Maximum clusters returned"),
    members: Optional[int] = Query(default=None, ge=0, le=1000, description="Members listed per cluster"),
):
    """Clusters for one location kind, largest first."""
    result = get_load_result()
    member_limit = members if members is not None else get_settings().pipeline.display_member_limit
    total = len(result.records)
    ranked = result.ranked(kind)

    return {
        "kind": kind,
        "count": len(ranked),
        "clusters": [cluster_to_dict(c, total, member_limit) for c in ranked[:limit]],
    }


@router.get("/summary")
def get_summary():
    """Headline statistics for both groupings plus the normalization report."""
    return summary_payload(get_load_result())


@router.post("/reload")
def reload():
    """Discard the cached load cycle and run a fresh one."""
    result = get_load_result(force=True)
    logger.info(f"Reloaded: {len(result.records)} records (fallback: {result.used_fallback})")
    return {
        "status": "ok",
        "count": len(result.records),
        "used_fallback": result.used_fallback,
        "notice": result.notice,
    }
