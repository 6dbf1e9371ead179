"""AWS-specific configuration and client setup."""

import logging
from typing import Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ConfigurationError
from .settings import AWSConfig

logger = logging.getLogger(__name__)


class AWSClientManager:
    """Manages AWS client instances with proper configuration."""

    def __init__(self, aws_config: AWSConfig, session: Optional[boto3.Session] = None):
        self.config = aws_config

        access_key_id = aws_config.access_key_id
        secret_access_key = aws_config.secret_access_key
        if aws_config.endpoint_url and not access_key_id:
            # LocalStack accepts any static credentials
            access_key_id, secret_access_key = 'test', 'test'

        self._session = session or boto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=aws_config.region
        )
        self._autoscaling_client = None
        self._rds_client = None
        self._cloudwatch_client = None

        # Throttling is absorbed by the SDK; the monitor itself does not retry
        self._boto_config = Config(
            region_name=aws_config.region,
            retries={
                'max_attempts': aws_config.max_attempts,
                'mode': 'standard'
            },
            connect_timeout=aws_config.connect_timeout_seconds,
            read_timeout=aws_config.read_timeout_seconds
        )

    def _create_client(self, service_name: str):
        """Create a boto3 client, translating setup failures into ConfigurationError."""
        try:
            if self.config.endpoint_url:
                client = self._session.client(
                    service_name,
                    endpoint_url=self.config.endpoint_url,
                    config=self._boto_config
                )
                logger.info(f"Created {service_name} client for endpoint: {self.config.endpoint_url}")
            else:
                client = self._session.client(service_name, config=self._boto_config)
                logger.info(f"Created AWS {service_name} client in region: {client.meta.region_name}")
        except BotoCoreError as e:
            raise ConfigurationError(f"Unable to create {service_name} client: {e}") from e

        return client

    @property
    def autoscaling_client(self):
        """Get or create Auto Scaling client."""
        if self._autoscaling_client is None:
            self._autoscaling_client = self._create_client('autoscaling')
        return self._autoscaling_client

    @property
    def rds_client(self):
        """Get or create RDS client."""
        if self._rds_client is None:
            self._rds_client = self._create_client('rds')
        return self._rds_client

    @property
    def cloudwatch_client(self):
        """Get or create CloudWatch client."""
        if self._cloudwatch_client is None:
            self._cloudwatch_client = self._create_client('cloudwatch')
        return self._cloudwatch_client

    def verify_credentials(self) -> None:
        """
        Ensure the SDK can resolve credentials and build every client.

        Raises:
            ConfigurationError: If credentials or a region cannot be resolved
        """
        if not self.config.endpoint_url:
            try:
                credentials = self._session.get_credentials()
            except BotoCoreError as e:
                raise ConfigurationError(f"Unable to load AWS credentials: {e}") from e
            if credentials is None:
                raise ConfigurationError("Unable to load AWS credentials: none found")

        # Touch each client so a missing region fails before the first cycle
        _ = self.autoscaling_client
        _ = self.rds_client
        _ = self.cloudwatch_client
        logger.info("AWS credentials and clients verified")

    def verify_connections(self) -> Dict[str, str]:
        """
        Make one cheap read call per service and return its status.

        Failures are reported in the result instead of raised.

        Returns:
            Mapping of service name to 'healthy' or 'error: <reason>'
        """
        checks = {
            'autoscaling': lambda: self.autoscaling_client.describe_account_limits(),
            'rds': lambda: self.rds_client.describe_account_attributes(),
            'cloudwatch': lambda: self.cloudwatch_client.describe_alarms(MaxRecords=1),
        }
        status = {}

        for service_name, check in checks.items():
            try:
                check()
                status[service_name] = 'healthy'
                logger.info(f"{service_name} connection verified")
            except (ClientError, BotoCoreError, ConfigurationError) as e:
                status[service_name] = f'error: {e}'
                logger.error(f"{service_name} connection failed: {e}")

        return status

