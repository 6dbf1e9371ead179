"""Zone/state aggregation of Auto Scaling groups and DB clusters."""

import logging
from collections import Counter
from typing import Callable, Dict, Iterable, List

from .models import (
    AutoScalingGroup,
    ClusterZoneCounts,
    DBCluster,
    DBInstanceDetail,
    LifecycleState,
    ZoneRoleCount,
)

logger = logging.getLogger(__name__)

# state label -> zone -> instance count
ZoneStateCount = Dict[str, Dict[str, int]]


class GroupAggregate:
    """
    Result of a single counting pass over one Auto Scaling group.

    Instances are tallied once by (state, zone, healthy). The per-state
    mapping and the legacy healthy-in-service mapping are both views over
    that tally, so they cannot drift apart.
    """

    def __init__(
        self,
        group_name: str,
        declared_zones: Iterable[str],
        tally: Counter,
        skipped_instances: List[str]
    ):
        self.group_name = group_name
        self.declared_zones = tuple(declared_zones)
        self.tally = tally
        self.skipped_instances = skipped_instances

    @property
    def zones(self) -> List[str]:
        """Declared zones plus any zone an instance was observed in, sorted."""
        observed = {zone for _, zone, _ in self.tally}
        return sorted(set(self.declared_zones) | observed)

    def state_counts(self) -> ZoneStateCount:
        """Count per lifecycle state and zone, zero-filled for every known state and zone."""
        zones = self.zones
        counts: ZoneStateCount = {
            state.value: {zone: 0 for zone in zones} for state in LifecycleState
        }

        for (state, zone, _healthy), count in self.tally.items():
            counts[state.value][zone] += count

        return counts

    def healthy_in_service_counts(self) -> Dict[str, int]:
        """Legacy view: healthy InService instances per zone, zero-filled."""
        counts = {zone: 0 for zone in self.zones}

        for (state, zone, healthy), count in self.tally.items():
            if healthy and state is LifecycleState.IN_SERVICE:
                counts[zone] += count

        return counts

    @property
    def total_instances(self) -> int:
        return sum(self.tally.values())


def aggregate_group(group: AutoScalingGroup) -> GroupAggregate:
    """
    Tally the instances of an Auto Scaling group by state, zone and health.

    Instances without an availability zone, or reporting a lifecycle state
    outside ``LifecycleState``, are skipped and logged rather than counted.

    Args:
        group: Group snapshot for the current cycle

    Returns:
        GroupAggregate exposing the zero-filled views
    """
    # (state, zone, healthy) -> count
    tally: Counter = Counter()
    skipped: List[str] = []

    for instance in group.instances:
        if not instance.availability_zone:
            logger.warning(
                f"Skipping instance {instance.instance_id} in ASG {group.name}: "
                f"missing availability zone"
            )
            skipped.append(instance.instance_id)
            continue

        state = LifecycleState.parse(instance.lifecycle_state)
        if state is None:
            logger.warning(
                f"Skipping instance {instance.instance_id} in ASG {group.name}: "
                f"unknown lifecycle state {instance.lifecycle_state!r}"
            )
            skipped.append(instance.instance_id)
            continue

        tally[(state, instance.availability_zone, instance.is_healthy_and_in_service)] += 1

    return GroupAggregate(group.name, group.availability_zones, tally, skipped)


def aggregate_cluster(
    cluster: DBCluster,
    lookup: Callable[[str], DBInstanceDetail]
) -> ClusterZoneCounts:
    """
    Count writer and reader instances of a DB cluster per availability zone.

    Every declared zone starts at zero. ``lookup`` is called once per member
    to resolve its current zone; its exceptions propagate to the caller.

    Args:
        cluster: Cluster snapshot for the current cycle
        lookup: Resolves a DB instance identifier to its placement

    Returns:
        ClusterZoneCounts for the cluster
    """
    result = ClusterZoneCounts(
        cluster_id=cluster.identifier,
        az_counts={zone: ZoneRoleCount() for zone in cluster.availability_zones}
    )

    for member in cluster.members:
        if not member.instance_identifier:
            continue

        detail = lookup(member.instance_identifier)
        zone = detail.availability_zone
        if not zone:
            logger.warning(
                f"Skipping DB instance {member.instance_identifier} in cluster "
                f"{cluster.identifier}: missing availability zone"
            )
            continue

        result.az_counts.setdefault(zone, ZoneRoleCount()).add(member.role)

    return result
