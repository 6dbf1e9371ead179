"""Auto Scaling group listing."""

import logging
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ResourceListingError
from ..models import AsgInstance, AutoScalingGroup

logger = logging.getLogger(__name__)


class AutoScalingGroupLister:
    """Lists every Auto Scaling group of the account/region with its instances."""

    def __init__(self, autoscaling_client):
        self.client = autoscaling_client

    def list_groups(self) -> List[AutoScalingGroup]:
        """
        Describe all Auto Scaling groups, following pagination.

        Returns:
            Group snapshots for the current cycle

        Raises:
            ResourceListingError: If any DescribeAutoScalingGroups page fails
        """
        groups: List[AutoScalingGroup] = []

        try:
            paginator = self.client.get_paginator('describe_auto_scaling_groups')
            for page in paginator.paginate():
                for raw_group in page.get('AutoScalingGroups', []):
                    groups.append(self._parse_group(raw_group))
        except (ClientError, BotoCoreError) as e:
            raise ResourceListingError("Auto Scaling groups", str(e)) from e

        logger.debug(f"Described {len(groups)} Auto Scaling groups")
        return groups

    @staticmethod
    def _parse_group(raw_group: Dict[str, Any]) -> AutoScalingGroup:
        instances = tuple(
            AsgInstance(
                instance_id=raw.get('InstanceId', 'unknown'),
                availability_zone=raw.get('AvailabilityZone'),
                lifecycle_state=raw.get('LifecycleState', ''),
                health_status=raw.get('HealthStatus')
            )
            for raw in raw_group.get('Instances', [])
        )
        return AutoScalingGroup(
            name=raw_group['AutoScalingGroupName'],
            availability_zones=tuple(raw_group.get('AvailabilityZones', [])),
            instances=instances
        )
