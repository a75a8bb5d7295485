"""
Core data model for the heatmap pipeline.

NormalizedRecord is the common format the normalizer produces; Cluster is
the derived grouping the aggregator builds from it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# (latitude, longitude) in WGS84 degrees
Location = tuple[float, float]


class LocationKind(str, Enum):
    """Which location of a record a grouping is built from."""
    HOME = "home"
    INSTITUTION = "institution"


@dataclass(frozen=True)
class NormalizedRecord:
    """
    Validated representation of one individual.

    A record is only ever built with at least one non-empty address field
    and at least one valid location.
    """
    id: str

    home_address: str = ""
    institution_address: str = ""
    city: str = ""
    postal_code: str = ""

    home_location: Location | None = None
    institution_location: Location | None = None

    surname: str | None = None
    given_name: str | None = None

    def location(self, kind: LocationKind) -> Location | None:
        """Return the location for the given kind, if present."""
        if kind is LocationKind.HOME:
            return self.home_location
        return self.institution_location


@dataclass
class Cluster:
    """Records sharing one exact location, under one location kind."""
    key: Location
    label: str
    kind: LocationKind
    members: list[NormalizedRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def lat(self) -> float:
        return self.key[0]

    @property
    def lng(self) -> float:
        return self.key[1]


@dataclass
class NormalizationReport:
    """Counters for one normalization pass."""
    seen: int = 0
    accepted: int = 0
    rejected_not_object: int = 0
    rejected_no_identity: int = 0
    rejected_no_location: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    samples: list[Any] = field(default_factory=list)  # bounded sample of rejected raw entries

    @property
    def rejected(self) -> int:
        """Total entries that did not make it into the output."""
        return (
            self.rejected_not_object
            + self.rejected_no_identity
            + self.rejected_no_location
            + self.failed
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "seen": self.seen,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "rejected_not_object": self.rejected_not_object,
            "rejected_no_identity": self.rejected_no_identity,
            "rejected_no_location": self.rejected_no_location,
            "failed": self.failed,
            "errors": list(self.errors),
        }


@dataclass
class NormalizationResult:
    """Records emitted by a normalization pass plus its report."""
    records: list[NormalizedRecord]
    report: NormalizationReport
