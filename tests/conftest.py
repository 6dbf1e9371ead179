"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Dict
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from az_metrics_monitor.config.aws_config import AWSClientManager
from az_metrics_monitor.config.settings import AWSConfig, MetricsConfig, MonitorSettings
from az_metrics_monitor.models import (
    AsgInstance,
    AutoScalingGroup,
    DBCluster,
    DBClusterMember,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host configuration out of settings-driven tests."""
    for name in ["POLLING_INTERVAL", "SERVICE_NAME", "CONFIG_FILE"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_settings() -> MonitorSettings:
    """Create test configuration."""
    return MonitorSettings(
        service_name="test-monitor",
        polling_interval=1,
        aws=AWSConfig(region="us-east-1", endpoint_url="http://localhost:4566"),
        metrics=MetricsConfig(namespace="TestAZMetrics")
    )


@pytest.fixture
def fixed_timestamp() -> datetime:
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_aws_client_manager():
    """Mock AWS client manager."""
    manager = Mock(spec=AWSClientManager)
    manager.autoscaling_client = Mock()
    manager.rds_client = Mock()
    manager.cloudwatch_client = Mock()
    return manager


@pytest.fixture
def web_asg() -> AutoScalingGroup:
    """Group 'web-asg' with two declared zones and three instances."""
    return AutoScalingGroup(
        name="web-asg",
        availability_zones=("us-east-1a", "us-east-1b"),
        instances=(
            AsgInstance("i-001", "us-east-1a", "InService", "Healthy"),
            AsgInstance("i-002", "us-east-1a", "Pending", "Healthy"),
            AsgInstance("i-003", "us-east-1b", "InService", "Healthy"),
        )
    )


@pytest.fixture
def aurora_cluster() -> DBCluster:
    """Cluster with one writer in zone a and two readers in zone b."""
    return DBCluster(
        identifier="aurora-prod",
        availability_zones=("us-east-1a", "us-east-1b"),
        members=(
            DBClusterMember("aurora-prod-1", is_writer=True),
            DBClusterMember("aurora-prod-2", is_writer=False),
            DBClusterMember("aurora-prod-3", is_writer=False),
        )
    )


@pytest.fixture
def aurora_placements() -> Dict[str, str]:
    return {
        "aurora-prod-1": "us-east-1a",
        "aurora-prod-2": "us-east-1b",
        "aurora-prod-3": "us-east-1b",
    }


@pytest.fixture
def client_error():
    """Factory for botocore ClientError instances."""
    def _create(code: str = "ThrottlingException", operation: str = "PutMetricData") -> ClientError:
        return ClientError(
            error_response={'Error': {'Code': code, 'Message': f"{code} raised"}},
            operation_name=operation
        )
    return _create


@pytest.fixture
def raw_asg_page() -> Dict[str, Any]:
    """DescribeAutoScalingGroups page as returned by boto3."""
    return {
        'AutoScalingGroups': [
            {
                'AutoScalingGroupName': 'web-asg',
                'AvailabilityZones': ['us-east-1a', 'us-east-1b'],
                'Instances': [
                    {
                        'InstanceId': 'i-001',
                        'AvailabilityZone': 'us-east-1a',
                        'LifecycleState': 'InService',
                        'HealthStatus': 'Healthy'
                    },
                    {
                        'InstanceId': 'i-002',
                        'AvailabilityZone': 'us-east-1b',
                        'LifecycleState': 'Pending',
                        'HealthStatus': 'Healthy'
                    }
                ]
            }
        ]
    }


@pytest.fixture
def make_paginator():
    """Factory for mock paginators yielding ``pages`` from ``paginate()``."""
    def _create(pages):
        paginator = Mock()
        paginator.paginate.return_value = iter(pages)
        return paginator
    return _create
