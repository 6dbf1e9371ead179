"""AWS service wrappers used by the poll loop."""

from .autoscaling import AutoScalingGroupLister
from .cloudwatch import MetricPublisher
from .rds import RDSClusterClient

__all__ = ["AutoScalingGroupLister", "MetricPublisher", "RDSClusterClient"]
