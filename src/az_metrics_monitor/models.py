"""Snapshot and metric models shared across the monitor."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


HEALTHY = "Healthy"
COUNT_UNIT = "Count"


class LifecycleState(str, Enum):
    """Auto Scaling instance lifecycle states, in the order the API documents them."""
    PENDING = "Pending"
    PENDING_WAIT = "Pending:Wait"
    PENDING_PROCEED = "Pending:Proceed"
    QUARANTINED = "Quarantined"
    IN_SERVICE = "InService"
    TERMINATING = "Terminating"
    TERMINATING_WAIT = "Terminating:Wait"
    TERMINATING_PROCEED = "Terminating:Proceed"
    TERMINATED = "Terminated"
    DETACHING = "Detaching"
    DETACHED = "Detached"
    ENTERING_STANDBY = "EnteringStandby"
    STANDBY = "Standby"
    WARMED_PENDING = "Warmed:Pending"
    WARMED_PENDING_WAIT = "Warmed:Pending:Wait"
    WARMED_PENDING_PROCEED = "Warmed:Pending:Proceed"
    WARMED_TERMINATING = "Warmed:Terminating"
    WARMED_TERMINATING_WAIT = "Warmed:Terminating:Wait"
    WARMED_TERMINATING_PROCEED = "Warmed:Terminating:Proceed"
    WARMED_TERMINATED = "Warmed:Terminated"
    WARMED_STOPPED = "Warmed:Stopped"
    WARMED_RUNNING = "Warmed:Running"
    WARMED_HIBERNATED = "Warmed:Hibernated"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["LifecycleState"]:
        """Return the matching state, or None for values outside the enum."""
        try:
            return cls(value)
        except ValueError:
            return None


class ClusterRole(str, Enum):
    """Role of a member inside an Aurora DB cluster."""
    WRITER = "Writer"
    READER = "Reader"


@dataclass(frozen=True)
class AsgInstance:
    """Instance entry of an Auto Scaling group."""
    instance_id: str
    availability_zone: Optional[str]
    lifecycle_state: str
    health_status: Optional[str] = None

    @property
    def is_healthy_and_in_service(self) -> bool:
        return (
            self.health_status == HEALTHY
            and self.lifecycle_state == LifecycleState.IN_SERVICE.value
        )


@dataclass(frozen=True)
class AutoScalingGroup:
    """Auto Scaling group snapshot taken for one poll cycle."""
    name: str
    availability_zones: Tuple[str, ...] = ()
    instances: Tuple[AsgInstance, ...] = ()


@dataclass(frozen=True)
class DBClusterMember:
    """Member entry of a DB cluster."""
    instance_identifier: Optional[str]
    is_writer: bool = False

    @property
    def role(self) -> ClusterRole:
        return ClusterRole.WRITER if self.is_writer else ClusterRole.READER


@dataclass(frozen=True)
class DBCluster:
    """DB cluster snapshot taken for one poll cycle."""
    identifier: str
    availability_zones: Tuple[str, ...] = ()
    members: Tuple[DBClusterMember, ...] = ()


@dataclass(frozen=True)
class DBInstanceDetail:
    """Current placement of a DB instance."""
    identifier: str
    availability_zone: Optional[str]


@dataclass
class ZoneRoleCount:
    """Writer and reader counts for one availability zone."""
    writers: int = 0
    readers: int = 0

    def add(self, role: ClusterRole) -> None:
        if role is ClusterRole.WRITER:
            self.writers += 1
        else:
            self.readers += 1

    def count(self, role: ClusterRole) -> int:
        return self.writers if role is ClusterRole.WRITER else self.readers

    @property
    def total(self) -> int:
        return self.writers + self.readers


@dataclass
class ClusterZoneCounts:
    """Per-zone role counts of a DB cluster."""
    cluster_id: str
    az_counts: Dict[str, ZoneRoleCount] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricRecord:
    """
    A single CloudWatch datum.

    Dimensions are kept as an ordered tuple of (name, value) pairs; the pair
    set identifies the time series, so names must be unique.
    """
    name: str
    value: float
    dimensions: Tuple[Tuple[str, str], ...]
    timestamp: datetime
    unit: str = COUNT_UNIT

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Metric {self.name} has negative value {self.value}")

        names = [name for name, _ in self.dimensions]
        if len(names) != len(set(names)):
            raise ValueError(f"Metric {self.name} has duplicate dimension names: {names}")

    def to_cloudwatch(self) -> Dict[str, Any]:
        """Render as a PutMetricData ``MetricDatum``."""
        return {
            'MetricName': self.name,
            'Value': float(self.value),
            'Unit': self.unit,
            'Timestamp': self.timestamp,
            'Dimensions': [
                {'Name': name, 'Value': value} for name, value in self.dimensions
            ]
        }
