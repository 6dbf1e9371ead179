"""Conversion of zone aggregates into CloudWatch metric records."""

from datetime import datetime
from typing import Dict, List

from .aggregator import ZoneStateCount
from .models import ClusterRole, ClusterZoneCounts, MetricRecord

ASG_DIMENSION = "AutoScalingGroupName"
CLUSTER_DIMENSION = "DBClusterIdentifier"
ZONE_DIMENSION = "AvailabilityZone"
STATE_DIMENSION = "EC2State"

# Names kept stable for existing dashboards consuming the healthy-only view
HEALTHY_IN_AZ = "HealthyInstancesInAZ"
TOTAL_HEALTHY = "TotalHealthyInstances"

INSTANCES_IN_AZ = "InstancesInAZ"
TOTAL_INSTANCES = "TotalInstances"


def _in_az_name(category: str) -> str:
    return f"{category}InAZ"


def _total_name(category: str) -> str:
    return f"Total{category}"


def build_healthy_metrics(
    group_name: str,
    zone_counts: Dict[str, int],
    timestamp: datetime
) -> List[MetricRecord]:
    """
    Build the healthy-and-in-service records of an Auto Scaling group.

    One ``HealthyInstancesInAZ`` record per zone followed by a single
    ``TotalHealthyInstances`` record. No records are built for an empty
    mapping.
    """
    if not zone_counts:
        return []

    records = [
        MetricRecord(
            name=HEALTHY_IN_AZ,
            value=count,
            dimensions=((ASG_DIMENSION, group_name), (ZONE_DIMENSION, zone)),
            timestamp=timestamp
        )
        for zone, count in sorted(zone_counts.items())
    ]
    records.append(MetricRecord(
        name=TOTAL_HEALTHY,
        value=sum(zone_counts.values()),
        dimensions=((ASG_DIMENSION, group_name),),
        timestamp=timestamp
    ))
    return records


def build_state_metrics(
    group_name: str,
    state_counts: ZoneStateCount,
    timestamp: datetime
) -> List[MetricRecord]:
    """
    Build per-state records of an Auto Scaling group.

    For every state: one ``InstancesInAZ`` record per zone dimensioned by
    group, zone and state, then a ``TotalInstances`` record for that state.
    A final ``TotalInstances`` record dimensioned by the group alone sums
    every state.

    Args:
        group_name: Auto Scaling group name
        state_counts: Zero-filled state -> zone -> count mapping
        timestamp: Timestamp shared by all records of the cycle

    Returns:
        Records in state order, zones sorted within a state
    """
    records: List[MetricRecord] = []
    group_total = 0

    for state, zone_counts in state_counts.items():
        state_total = 0
        for zone, count in sorted(zone_counts.items()):
            records.append(MetricRecord(
                name=INSTANCES_IN_AZ,
                value=count,
                dimensions=(
                    (ASG_DIMENSION, group_name),
                    (ZONE_DIMENSION, zone),
                    (STATE_DIMENSION, state),
                ),
                timestamp=timestamp
            ))
            state_total += count

        records.append(MetricRecord(
            name=TOTAL_INSTANCES,
            value=state_total,
            dimensions=((ASG_DIMENSION, group_name), (STATE_DIMENSION, state)),
            timestamp=timestamp
        ))
        group_total += state_total

    records.append(MetricRecord(
        name=TOTAL_INSTANCES,
        value=group_total,
        dimensions=((ASG_DIMENSION, group_name),),
        timestamp=timestamp
    ))
    return records


def build_cluster_metrics(cluster: ClusterZoneCounts, timestamp: datetime) -> List[MetricRecord]:
    """
    Build per-role records of a DB cluster.

    ``WriterInstancesInAZ`` and ``ReaderInstancesInAZ`` per zone, then
    ``TotalWriterInstances``, ``TotalReaderInstances`` and
    ``TotalInstances`` for the cluster.
    """
    records: List[MetricRecord] = []
    role_totals = {role: 0 for role in ClusterRole}

    for zone, counts in sorted(cluster.az_counts.items()):
        for role in ClusterRole:
            records.append(MetricRecord(
                name=_in_az_name(f"{role.value}Instances"),
                value=counts.count(role),
                dimensions=((CLUSTER_DIMENSION, cluster.cluster_id), (ZONE_DIMENSION, zone)),
                timestamp=timestamp
            ))
            role_totals[role] += counts.count(role)

    for role, total in role_totals.items():
        records.append(MetricRecord(
            name=_total_name(f"{role.value}Instances"),
            value=total,
            dimensions=((CLUSTER_DIMENSION, cluster.cluster_id),),
            timestamp=timestamp
        ))

    records.append(MetricRecord(
        name=TOTAL_INSTANCES,
        value=sum(counts.total for counts in cluster.az_counts.values()),
        dimensions=((CLUSTER_DIMENSION, cluster.cluster_id),),
        timestamp=timestamp
    ))
    return records
