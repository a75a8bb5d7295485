"""
Spatial aggregation of normalized records.

Records are grouped by exact location equality, once per location kind.
There is no rounding and no proximity merging: two records share a cluster
only when their (lat, lng) tuples are equal.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from heatmap.models import Cluster, Location, LocationKind, NormalizedRecord

UNKNOWN_CITY_LABEL = "Unknown city"
UNKNOWN_INSTITUTION_LABEL = "Unknown institution"


def cluster_label(record: NormalizedRecord, kind: LocationKind) -> str:
    """Display label for a cluster created by this record."""
    if kind is LocationKind.HOME:
        return record.city or record.home_address or UNKNOWN_CITY_LABEL
    return record.institution_address or UNKNOWN_INSTITUTION_LABEL


def aggregate(records: Iterable[NormalizedRecord], kind: LocationKind) -> dict[Location, Cluster]:
    """
    Group records by their exact location of the given kind.

    Args:
        records: Normalized records, in source order
        kind: Which location to group on

    Returns:
        Mapping from (lat, lng) to Cluster. Members keep input order.
        Records without that location are skipped.
    """
    clusters: dict[Location, Cluster] = {}

    for record in records:
        key = record.location(kind)
        if key is None:
            continue

        cluster = clusters.get(key)
        if cluster is None:
            cluster = Cluster(key=key, label=cluster_label(record, kind), kind=kind)
            clusters[key] = cluster
        cluster.members.append(record)

    return clusters


def aggregate_all(records: list[NormalizedRecord]) -> dict[LocationKind, dict[Location, Cluster]]:
    """Build both independent groupings for one record list."""
    groups = {kind: aggregate(records, kind) for kind in LocationKind}
    logger.info(
        f"Grouped {len(records)} records: "
        f"{len(groups[LocationKind.HOME])} home zones, "
        f"{len(groups[LocationKind.INSTITUTION])} institution zones"
    )
    return groups


def rank_clusters(clusters: Mapping[Location, Cluster]) -> list[Cluster]:
    """Clusters ordered by descending count; ties keep first-encounter order."""
    return sorted(clusters.values(), key=lambda c: c.count, reverse=True)


@dataclass
class ConcentrationSummary:
    """Dashboard statistics for one location kind."""
    kind: LocationKind
    total_records: int
    located_records: int
    zone_count: int
    average_per_zone: float
    max_concentration: int
    shares: dict[Location, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "total_records": self.total_records,
            "located_records": self.located_records,
            "zone_count": self.zone_count,
            "average_per_zone": self.average_per_zone,
            "max_concentration": self.max_concentration,
        }


def share_of_total(count: int, total: int) -> float:
    """Percentage of the total, one decimal place."""
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)


def summarize(
    records: list[NormalizedRecord],
    clusters: Mapping[Location, Cluster],
    kind: LocationKind,
) -> ConcentrationSummary:
    """
    Compute the headline statistics for one grouping.

    The average and the shares are taken over all loaded records, not only
    the ones holding this kind of location.
    """
    total = len(records)
    counts = [c.count for c in clusters.values()]
    zone_count = len(counts)

    return ConcentrationSummary(
        kind=kind,
        total_records=total,
        located_records=sum(counts),
        zone_count=zone_count,
        average_per_zone=round(total / zone_count, 1) if zone_count else 0.0,
        max_concentration=max(counts) if counts else 0,
        shares={key: share_of_total(c.count, total) for key, c in clusters.items()},
    )
