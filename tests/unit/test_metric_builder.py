"""Tests for metric record construction."""

from collections import Counter

from az_metrics_monitor.aggregator import aggregate_group
from az_metrics_monitor.metric_builder import (
    build_cluster_metrics,
    build_healthy_metrics,
    build_state_metrics,
)
from az_metrics_monitor.models import ClusterZoneCounts, LifecycleState, ZoneRoleCount


def _by_key(records):
    """Index records by (name, dimensions) for order-independent assertions."""
    return {(record.name, record.dimensions): record.value for record in records}


class TestHealthyMetrics:
    """Test the healthy-and-in-service records."""

    def test_per_zone_records_and_total(self, fixed_timestamp):
        records = build_healthy_metrics("web-asg", {"b": 0, "a": 3}, fixed_timestamp)

        assert _by_key(records) == {
            ("HealthyInstancesInAZ", (("AutoScalingGroupName", "web-asg"), ("AvailabilityZone", "a"))): 3,
            ("HealthyInstancesInAZ", (("AutoScalingGroupName", "web-asg"), ("AvailabilityZone", "b"))): 0,
            ("TotalHealthyInstances", (("AutoScalingGroupName", "web-asg"),)): 3,
        }
        assert all(record.timestamp == fixed_timestamp for record in records)
        assert all(record.unit == "Count" for record in records)

    def test_empty_mapping_builds_nothing(self, fixed_timestamp):
        assert build_healthy_metrics("web-asg", {}, fixed_timestamp) == []


class TestStateMetrics:
    """Test the per-lifecycle-state records."""

    def test_record_layout(self, web_asg, fixed_timestamp):
        state_counts = aggregate_group(web_asg).state_counts()

        records = build_state_metrics("web-asg", state_counts, fixed_timestamp)

        states = len(LifecycleState)
        names = Counter(record.name for record in records)
        assert names["InstancesInAZ"] == states * 2
        assert names["TotalInstances"] == states + 1
        assert len(records) == states * 3 + 1

    def test_values(self, web_asg, fixed_timestamp):
        state_counts = aggregate_group(web_asg).state_counts()

        values = _by_key(build_state_metrics("web-asg", state_counts, fixed_timestamp))

        group = ("AutoScalingGroupName", "web-asg")
        assert values[("InstancesInAZ", (group, ("AvailabilityZone", "us-east-1a"), ("EC2State", "Pending")))] == 1
        assert values[("InstancesInAZ", (group, ("AvailabilityZone", "us-east-1b"), ("EC2State", "Pending")))] == 0
        assert values[("TotalInstances", (group, ("EC2State", "InService")))] == 2
        assert values[("TotalInstances", (group, ("EC2State", "Standby")))] == 0
        assert values[("TotalInstances", (group,))] == 3

    def test_dimension_sets_are_unique(self, web_asg, fixed_timestamp):
        state_counts = aggregate_group(web_asg).state_counts()

        records = build_state_metrics("web-asg", state_counts, fixed_timestamp)

        keys = [(record.name, record.dimensions) for record in records]
        assert len(keys) == len(set(keys))

    def test_output_is_stable(self, web_asg, fixed_timestamp):
        state_counts = aggregate_group(web_asg).state_counts()

        first = build_state_metrics("web-asg", state_counts, fixed_timestamp)
        second = build_state_metrics("web-asg", state_counts, fixed_timestamp)

        assert first == second


class TestClusterMetrics:
    """Test the DB cluster role records."""

    def test_writer_reader_records(self, fixed_timestamp):
        cluster = ClusterZoneCounts(
            cluster_id="aurora-prod",
            az_counts={
                "b": ZoneRoleCount(writers=0, readers=2),
                "a": ZoneRoleCount(writers=1, readers=0),
            }
        )

        records = build_cluster_metrics(cluster, fixed_timestamp)

        cid = ("DBClusterIdentifier", "aurora-prod")
        assert _by_key(records) == {
            ("WriterInstancesInAZ", (cid, ("AvailabilityZone", "a"))): 1,
            ("ReaderInstancesInAZ", (cid, ("AvailabilityZone", "a"))): 0,
            ("WriterInstancesInAZ", (cid, ("AvailabilityZone", "b"))): 0,
            ("ReaderInstancesInAZ", (cid, ("AvailabilityZone", "b"))): 2,
            ("TotalWriterInstances", (cid,)): 1,
            ("TotalReaderInstances", (cid,)): 2,
            ("TotalInstances", (cid,)): 3,
        }
        assert dict(records[0].dimensions)["AvailabilityZone"] == "a"

    def test_cluster_without_zones(self, fixed_timestamp):
        records = build_cluster_metrics(ClusterZoneCounts(cluster_id="empty"), fixed_timestamp)

        assert [(record.name, record.value) for record in records] == [
            ("TotalWriterInstances", 0),
            ("TotalReaderInstances", 0),
            ("TotalInstances", 0),
        ]
