"""
Static exporter for the concentration heatmap.

Writes one load cycle to compact JSON files a static front end can fetch
without an API.

Output files:
- records.json              - All normalized records
- clusters_home.json        - Home clusters, ranked by count
- clusters_institution.json - Institution clusters, ranked by count
- summary.json              - Statistics and the normalization report

Usage:
    python -m heatmap.main export
"""

import gzip
import json
import shutil
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from heatmap.aggregation import share_of_total
from heatmap.config import settings
from heatmap.loader import LoadResult
from heatmap.models import Cluster, LocationKind, NormalizedRecord

GZIP_OUTPUT = True  # Also create .gz versions


def save_json(path: Path, data: Any, compress: bool = True) -> Path:
    """Save data as JSON, optionally with a gzip copy."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, separators=(",", ":"), ensure_ascii=False)

    size = path.stat().st_size
    logger.info(f"  Saved {path.name}: {size / 1024:.1f} KB")

    if compress and GZIP_OUTPUT:
        gz_path = path.with_suffix(path.suffix + ".gz")
        with open(path, "rb") as f_in:
            with gzip.open(gz_path, "wb", compresslevel=9) as f_out:
                shutil.copyfileobj(f_in, f_out)
        gz_size = gz_path.stat().st_size
        logger.info(f"  Saved {gz_path.name}: {gz_size / 1024:.1f} KB (gzip)")

    return path


def _location_to_list(location):
    return list(location) if location else None


def record_to_dict(record: NormalizedRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "surname": record.surname,
        "given_name": record.given_name,
        "home_address": record.home_address,
        "institution_address": record.institution_address,
        "city": record.city,
        "postal_code": record.postal_code,
        "home_location": _location_to_list(record.home_location),
        "institution_location": _location_to_list(record.institution_location),
    }


def cluster_to_dict(cluster: Cluster, total: int, member_limit: Optional[int] = None) -> dict[str, Any]:
    """
    Serialize a cluster for display.

    Members are truncated to member_limit; count always reflects all members.
    """
    if member_limit is None:
        member_limit = settings.pipeline.display_member_limit

    return {
        "label": cluster.label,
        "kind": cluster.kind.value,
        "lat": cluster.lat,
        "lng": cluster.lng,
        "count": cluster.count,
        "share": share_of_total(cluster.count, total),
        "members": [record_to_dict(r) for r in cluster.members[:member_limit]],
    }


def clusters_payload(result: LoadResult, kind: LocationKind, member_limit: Optional[int] = None) -> list[dict[str, Any]]:
    total = len(result.records)
    return [cluster_to_dict(c, total, member_limit) for c in result.ranked(kind)]


def summary_payload(result: LoadResult) -> dict[str, Any]:
    return {
        "source": result.source.value,
        "loaded_at": result.loaded_at.isoformat(),
        "used_fallback": result.used_fallback,
        "notice": result.notice,
        "report": result.report.to_dict() if result.report else None,
        "home": result.summary(LocationKind.HOME).to_dict(),
        "institution": result.summary(LocationKind.INSTITUTION).to_dict(),
    }


def export_load_result(result: LoadResult, output_dir: Optional[Path] = None, compress: bool = True) -> list[Path]:
    """
    Export a load cycle to static JSON files.

    Args:
        result: Load cycle to export
        output_dir: Target directory (defaults to settings.pipeline.export_dir)
        compress: Also write .gz copies

    Returns:
        Paths of the written JSON files
    """
    output_dir = Path(output_dir or settings.pipeline.export_dir)
    logger.info(f"Exporting {len(result.records)} records to {output_dir}")

    return [
        save_json(output_dir / "records.json", [record_to_dict(r) for r in result.records], compress),
        save_json(output_dir / "clusters_home.json", clusters_payload(result, LocationKind.HOME), compress),
        save_json(output_dir / "clusters_institution.json", clusters_payload(result, LocationKind.INSTITUTION), compress),
        save_json(output_dir / "summary.json", summary_payload(result), compress),
    ]
