"""Exception types raised by the monitor."""

from typing import Optional


class MonitorError(Exception):
    """Base error for the AZ metrics monitor."""


class ConfigurationError(MonitorError):
    """Credentials or configuration could not be loaded at startup."""


class ResourceListingError(MonitorError):
    """A top-level resource collection could not be listed."""

    def __init__(self, resource_kind: str, message: str):
        super().__init__(f"Unable to list {resource_kind}: {message}")
        self.resource_kind = resource_kind


class InstanceLookupError(MonitorError):
    """A DB instance detail lookup failed."""

    def __init__(self, instance_identifier: str, message: str):
        super().__init__(f"Unable to describe DB instance {instance_identifier}: {message}")
        self.instance_identifier = instance_identifier


class MetricPublishError(MonitorError):
    """
    A metric batch was rejected by CloudWatch.

    Attributes:
        batch_index: Zero-based index of the failing batch
        records_sent: Records accepted before the failing batch
    """

    def __init__(self, message: str, batch_index: int, records_sent: int = 0,
                 error_code: Optional[str] = None):
        super().__init__(message)
        self.batch_index = batch_index
        self.records_sent = records_sent
        self.error_code = error_code
