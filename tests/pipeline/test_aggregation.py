# SPDX-License-Identifier: MIT
"""Tests for spatial aggregation."""

import pytest

from heatmap.aggregation import (
    UNKNOWN_CITY_LABEL,
    UNKNOWN_INSTITUTION_LABEL,
    aggregate,
    aggregate_all,
    cluster_label,
    rank_clusters,
    share_of_total,
    summarize,
)
from heatmap.models import LocationKind, NormalizedRecord
from heatmap.normalizers import normalize
from heatmap.samples import SAMPLE_RECORDS, sample_records

PARIS = (48.8566, 2.3522)
LYON = (45.7640, 4.8357)
UNIV = (45.76, 4.83)


def make_record(record_id, home=None, institution=None, **fields):
    return NormalizedRecord(id=record_id, home_location=home, institution_location=institution, **fields)


@pytest.fixture
def records() -> list:
    return [
        make_record("a", home=PARIS, institution=UNIV, city="Paris", institution_address="Univ X"),
        make_record("b", home=LYON, city="Lyon"),
        make_record("c", home=PARIS, institution=UNIV, city="Paris bis", institution_address="Univ Y"),
        make_record("d", institution=UNIV, institution_address="Univ Z"),
        make_record("e", home=PARIS, city="Paris"),
    ]


class TestAggregate:
    """Test grouping by exact location."""

    def test_groups_by_exact_location(self, records):
        clusters = aggregate(records, LocationKind.HOME)
        assert set(clusters) == {PARIS, LYON}
        assert clusters[PARIS].count == 3
        assert clusters[LYON].count == 1

    def test_members_keep_input_order(self, records):
        clusters = aggregate(records, LocationKind.HOME)
        assert [r.id for r in clusters[PARIS].members] == ["a", "c", "e"]

    def test_records_without_location_skipped(self, records):
        clusters = aggregate(records, LocationKind.HOME)
        members = [r.id for c in clusters.values() for r in c.members]
        assert "d" not in members

    def test_institution_grouping_is_independent(self, records):
        clusters = aggregate(records, LocationKind.INSTITUTION)
        assert set(clusters) == {UNIV}
        assert [r.id for r in clusters[UNIV].members] == ["a", "c", "d"]

    def test_no_rounding(self):
        records = [
            make_record("a", home=(48.8566, 2.3522), city="x"),
            make_record("b", home=(48.85660001, 2.3522), city="x"),
        ]
        assert len(aggregate(records, LocationKind.HOME)) == 2

    def test_cluster_key_and_kind(self, records):
        cluster = aggregate(records, LocationKind.HOME)[LYON]
        assert cluster.key == LYON
        assert cluster.lat == LYON[0]
        assert cluster.lng == LYON[1]
        assert cluster.kind is LocationKind.HOME

    def test_empty_input(self):
        assert aggregate([], LocationKind.HOME) == {}
        assert aggregate([], LocationKind.INSTITUTION) == {}

    def test_idempotent(self, records):
        """Aggregating twice gives identical counts and members."""
        first = aggregate(records, LocationKind.HOME)
        second = aggregate(records, LocationKind.HOME)
        assert first.keys() == second.keys()
        for key in first:
            assert first[key].count == second[key].count
            assert first[key].members == second[key].members

    @pytest.mark.parametrize("kind", list(LocationKind))
    def test_partition(self, records, kind):
        """Every located record lands in exactly one cluster."""
        clusters = aggregate(records, kind)
        located = [r for r in records if r.location(kind) is not None]
        assigned = [r.id for c in clusters.values() for r in c.members]

        assert sum(c.count for c in clusters.values()) == len(located)
        assert sorted(assigned) == sorted(r.id for r in located)
        assert len(assigned) == len(set(assigned))

    def test_aggregate_all(self, records):
        groups = aggregate_all(records)
        assert set(groups) == {LocationKind.HOME, LocationKind.INSTITUTION}
        assert len(groups[LocationKind.HOME]) == 2
        assert len(groups[LocationKind.INSTITUTION]) == 1


class TestLabels:
    """Cluster labels come from the record that created the cluster."""

    def test_home_label_prefers_city(self):
        record = make_record("a", home=PARIS, city="Paris", home_address="1 rue X")
        assert cluster_label(record, LocationKind.HOME) == "Paris"

    def test_home_label_falls_back_to_address(self):
        record = make_record("a", home=PARIS, home_address="1 rue X")
        assert cluster_label(record, LocationKind.HOME) == "1 rue X"

    def test_home_label_fallback_literal(self):
        record = make_record("a", home=PARIS, institution_address="Univ X")
        assert cluster_label(record, LocationKind.HOME) == UNKNOWN_CITY_LABEL

    def test_institution_label(self):
        record = make_record("a", institution=UNIV, institution_address="Univ X", city="Lyon")
        assert cluster_label(record, LocationKind.INSTITUTION) == "Univ X"

    def test_institution_label_fallback_literal(self):
        record = make_record("a", institution=UNIV, city="Lyon")
        assert cluster_label(record, LocationKind.INSTITUTION) == UNKNOWN_INSTITUTION_LABEL

    def test_first_record_names_cluster(self, records):
        assert aggregate(records, LocationKind.HOME)[PARIS].label == "Paris"
        assert aggregate(records, LocationKind.INSTITUTION)[UNIV].label == "Univ X"


class TestRankAndSummary:
    """Test ordering and dashboard statistics."""

    def test_rank_descending(self, records):
        ranked = rank_clusters(aggregate(records, LocationKind.HOME))
        assert [c.key for c in ranked] == [PARIS, LYON]

    def test_rank_ties_keep_encounter_order(self):
        records = [
            make_record("a", home=LYON, city="Lyon"),
            make_record("b", home=PARIS, city="Paris"),
        ]
        ranked = rank_clusters(aggregate(records, LocationKind.HOME))
        assert [c.key for c in ranked] == [LYON, PARIS]

    def test_summary(self, records):
        clusters = aggregate(records, LocationKind.HOME)
        summary = summarize(records, clusters, LocationKind.HOME)
        assert summary.total_records == 5
        assert summary.located_records == 4
        assert summary.zone_count == 2
        assert summary.average_per_zone == 2.5
        assert summary.max_concentration == 3
        assert summary.shares[PARIS] == 60.0
        assert summary.shares[LYON] == 20.0

    def test_summary_empty(self):
        summary = summarize([], {}, LocationKind.INSTITUTION)
        assert summary.zone_count == 0
        assert summary.average_per_zone == 0.0
        assert summary.max_concentration == 0
        assert summary.to_dict()["kind"] == "institution"

    def test_share_of_total(self):
        assert share_of_total(1, 3) == 33.3
        assert share_of_total(1, 0) == 0.0


class TestEndToEnd:
    """Raw document through normalization and both groupings."""

    def test_two_entry_document(self, end_to_end_document):
        records = normalize(end_to_end_document)
        assert len(records) == 2

        home = aggregate(records, LocationKind.HOME)
        assert list(home) == [(48.8566, 2.3522)]
        assert home[(48.8566, 2.3522)].count == 1

        institution = aggregate(records, LocationKind.INSTITUTION)
        assert list(institution) == [(45.76, 4.83)]
        assert institution[(45.76, 4.83)].count == 1

    def test_sample_records_cluster(self):
        institution = aggregate(sample_records(), LocationKind.INSTITUTION)
        assert len(SAMPLE_RECORDS) == 5
        assert institution[(43.2951, 5.3656)].count == 2
        assert institution[(43.2951, 5.3656)].label == "Université Aix-Marseille"
