"""DB cluster listing and DB instance placement lookup."""

import logging
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import InstanceLookupError, ResourceListingError
from ..models import DBCluster, DBClusterMember, DBInstanceDetail

logger = logging.getLogger(__name__)


class RDSClusterClient:
    """Read-only access to DB clusters and their member instances."""

    def __init__(self, rds_client):
        self.client = rds_client

    def list_clusters(self) -> List[DBCluster]:
        """
        Describe all DB clusters, following pagination.

        Raises:
            ResourceListingError: If any DescribeDBClusters page fails
        """
        clusters: List[DBCluster] = []

        try:
            paginator = self.client.get_paginator('describe_db_clusters')
            for page in paginator.paginate():
                for raw_cluster in page.get('DBClusters', []):
                    clusters.append(self._parse_cluster(raw_cluster))
        except (ClientError, BotoCoreError) as e:
            raise ResourceListingError("DB clusters", str(e)) from e

        logger.debug(f"Described {len(clusters)} DB clusters")
        return clusters

    def describe_instance(self, instance_identifier: str) -> DBInstanceDetail:
        """
        Look up the current availability zone of a DB instance.

        Raises:
            InstanceLookupError: If the call fails or returns no instance
        """
        try:
            response = self.client.describe_db_instances(DBInstanceIdentifier=instance_identifier)
        except (ClientError, BotoCoreError) as e:
            raise InstanceLookupError(instance_identifier, str(e)) from e

        instances = response.get('DBInstances', [])
        if not instances:
            raise InstanceLookupError(instance_identifier, "no instance returned")

        return DBInstanceDetail(
            identifier=instance_identifier,
            availability_zone=instances[0].get('AvailabilityZone')
        )

    @staticmethod
    def _parse_cluster(raw_cluster: Dict[str, Any]) -> DBCluster:
        members = tuple(
            DBClusterMember(
                instance_identifier=raw.get('DBInstanceIdentifier'),
                is_writer=bool(raw.get('IsClusterWriter', False))
            )
            for raw in raw_cluster.get('DBClusterMembers', [])
        )
        return DBCluster(
            identifier=raw_cluster['DBClusterIdentifier'],
            availability_zones=tuple(raw_cluster.get('AvailabilityZones', [])),
            members=members
        )
