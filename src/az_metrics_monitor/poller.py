"""Poll loop: list resources, aggregate per zone, publish to CloudWatch."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from .aggregator import aggregate_cluster, aggregate_group
from .clients import AutoScalingGroupLister, MetricPublisher, RDSClusterClient
from .config.aws_config import AWSClientManager
from .config.settings import MonitorSettings
from .errors import InstanceLookupError, MetricPublishError, ResourceListingError
from .metric_builder import build_cluster_metrics, build_healthy_metrics, build_state_metrics
from .models import AutoScalingGroup, ClusterZoneCounts, MetricRecord
from .utils.logging import log_error_with_context

logger = logging.getLogger(__name__)


class PollerState(str, Enum):
    """Lifecycle of the poll loop."""
    RUNNING = "running"
    FATAL = "fatal"


@dataclass
class CycleStats:
    """Summary of one poll cycle."""
    groups: int = 0
    clusters: int = 0
    records_published: int = 0
    publish_failures: int = 0
    cluster_step_failed: bool = False


class AZMetricsPoller:
    """
    Runs fetch -> aggregate -> build -> publish cycles on a fixed interval.

    Cycles are strictly sequential: every Auto Scaling group, then every DB
    cluster, then the sleep. A failure to list Auto Scaling groups moves
    the poller to FATAL and propagates; everything else is logged and the
    cycle moves on.
    """

    def __init__(
        self,
        settings: MonitorSettings,
        asg_lister: AutoScalingGroupLister,
        rds_client: RDSClusterClient,
        publisher: MetricPublisher
    ):
        self.settings = settings
        self.asg_lister = asg_lister
        self.rds_client = rds_client
        self.publisher = publisher
        self.state = PollerState.RUNNING
        self.cycles_completed = 0

        logger.info(f"Poller initialized with interval: {settings.polling_interval}s")

    @classmethod
    def from_client_manager(cls, settings: MonitorSettings, client_manager: AWSClientManager) -> "AZMetricsPoller":
        """Wire the poller to the SDK clients of ``client_manager``."""
        return cls(
            settings=settings,
            asg_lister=AutoScalingGroupLister(client_manager.autoscaling_client),
            rds_client=RDSClusterClient(client_manager.rds_client),
            publisher=MetricPublisher(
                client_manager.cloudwatch_client,
                namespace=settings.metrics.namespace,
                batch_size=settings.metrics.batch_size
            )
        )

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Run cycles until ``stop_event`` is set.

        Raises:
            ResourceListingError: If Auto Scaling groups cannot be listed
        """
        stop_event = stop_event or threading.Event()
        logger.info("Starting AZ metrics poll loop")

        while not stop_event.is_set():
            self.run_cycle()

            logger.debug(f"Waiting {self.settings.polling_interval} seconds for next cycle")
            if stop_event.wait(self.settings.polling_interval):
                break

        logger.info(f"Poll loop stopped after {self.cycles_completed} cycles")

    def run_cycle(self, now: Optional[datetime] = None) -> CycleStats:
        """
        Execute one full poll cycle.

        Args:
            now: Timestamp stamped on every record of the cycle

        Returns:
            CycleStats for the cycle

        Raises:
            ResourceListingError: If Auto Scaling groups cannot be listed
        """
        timestamp = now or datetime.now(timezone.utc)
        stats = CycleStats()

        if self.settings.metrics.enable_asg:
            self._process_auto_scaling_groups(timestamp, stats)

        if self.settings.metrics.enable_rds:
            self._process_db_clusters(timestamp, stats)

        self.cycles_completed += 1
        logger.info(
            f"Cycle completed: {stats.groups} ASGs, {stats.clusters} DB clusters, "
            f"{stats.records_published} metrics published, {stats.publish_failures} publish failures"
        )
        return stats

    def _process_auto_scaling_groups(self, timestamp: datetime, stats: CycleStats) -> None:
        try:
            groups = self.asg_lister.list_groups()
        except ResourceListingError:
            self.state = PollerState.FATAL
            raise

        for group in groups:
            self._process_group(group, timestamp, stats)
            stats.groups += 1

    def _process_group(self, group: AutoScalingGroup, timestamp: datetime, stats: CycleStats) -> None:
        aggregate = aggregate_group(group)
        healthy_counts = aggregate.healthy_in_service_counts()
        state_counts = aggregate.state_counts()

        logger.info(f"Auto Scaling Group: {group.name}")
        if healthy_counts:
            for zone, count in sorted(healthy_counts.items()):
                logger.info(f"  {zone}: {count} healthy and in-service instances")
            healthy_records = build_healthy_metrics(group.name, healthy_counts, timestamp)
            self._publish(healthy_records, "ASG", group.name, stats)
        else:
            logger.info(f"No healthy and in-service instances found in ASG {group.name}")

        for state, zone_counts in state_counts.items():
            for zone, count in sorted(zone_counts.items()):
                if count > 0:
                    logger.info(f"  In state {state} in availability zone {zone}: {count} instances")
        logger.info(f"Total instances in ASG {group.name}: {aggregate.total_instances}")

        state_records = build_state_metrics(group.name, state_counts, timestamp)
        self._publish(state_records, "ASG", group.name, stats)

    def _process_db_clusters(self, timestamp: datetime, stats: CycleStats) -> None:
        try:
            clusters = self.rds_client.list_clusters()
            cluster_counts: List[ClusterZoneCounts] = [
                aggregate_cluster(cluster, self.rds_client.describe_instance)
                for cluster in clusters
            ]
        except (ResourceListingError, InstanceLookupError) as e:
            log_error_with_context(logger, e, "analyze_db_clusters")
            stats.cluster_step_failed = True
            return

        for counts in cluster_counts:
            logger.info(f"RDS Cluster: {counts.cluster_id}")
            for zone, zone_counts in sorted(counts.az_counts.items()):
                logger.info(f"  {zone}: {zone_counts.writers} writer(s), {zone_counts.readers} reader(s)")

            records = build_cluster_metrics(counts, timestamp)
            self._publish(records, "DB cluster", counts.cluster_id, stats)
            stats.clusters += 1

    def _publish(
        self,
        records: Sequence[MetricRecord],
        resource_kind: str,
        resource_id: str,
        stats: CycleStats
    ) -> None:
        """Publish one resource's records; failures are logged, not raised."""
        try:
            stats.records_published += self.publisher.publish(records)
        except MetricPublishError as e:
            stats.records_published += e.records_sent
            stats.publish_failures += 1
            log_error_with_context(
                logger, e, f"send metrics for {resource_kind} {resource_id}",
                resource_id=resource_id,
                batch_index=e.batch_index
            )
