"""CloudWatch metric publishing."""

import logging
from typing import Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..batcher import MAX_BATCH_SIZE, batch_count, chunk_records
from ..errors import MetricPublishError
from ..models import MetricRecord

logger = logging.getLogger(__name__)


class MetricPublisher:
    """Publishes metric records to a CloudWatch namespace in bounded batches."""

    def __init__(self, cloudwatch_client, namespace: str, batch_size: int = MAX_BATCH_SIZE):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}, got {batch_size}")

        self.client = cloudwatch_client
        self.namespace = namespace
        self.batch_size = batch_size

    def publish(self, records: Sequence[MetricRecord]) -> int:
        """
        Send records with one PutMetricData call per batch.

        Batches go out in order and publishing stops at the first rejected
        batch; later batches of the same call are not attempted.

        Args:
            records: Records to publish

        Returns:
            Number of records sent

        Raises:
            MetricPublishError: On the first failing batch
        """
        records_sent = 0
        if records:
            logger.debug(
                f"Publishing {len(records)} metrics to {self.namespace} "
                f"in {batch_count(len(records), self.batch_size)} batches"
            )

        for batch_index, batch in enumerate(chunk_records(records, self.batch_size)):
            try:
                self.client.put_metric_data(
                    Namespace=self.namespace,
                    MetricData=[record.to_cloudwatch() for record in batch]
                )
            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code')
                raise MetricPublishError(
                    f"Error putting metric data (batch {batch_index}): {e}",
                    batch_index=batch_index,
                    records_sent=records_sent,
                    error_code=error_code
                ) from e
            except BotoCoreError as e:
                raise MetricPublishError(
                    f"Error putting metric data (batch {batch_index}): {e}",
                    batch_index=batch_index,
                    records_sent=records_sent
                ) from e

            records_sent += len(batch)

        logger.debug(f"Published {records_sent} metrics to {self.namespace}")
        return records_sent
