"""AZ Metrics Monitor Service - Availability zone instance counts to CloudWatch."""

import logging
import os
import signal
import sys
import threading
from typing import Optional

import yaml

from .config.aws_config import AWSClientManager
from .config.settings import load_settings
from .errors import ConfigurationError, ResourceListingError
from .poller import AZMetricsPoller
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


class AZMetricsMonitorService:
    """Main service wiring settings, AWS clients and the poll loop."""

    def __init__(self, config_file: Optional[str] = None):
        self.settings = load_settings(config_file)
        self.poller: Optional[AZMetricsPoller] = None
        self._stop_event = threading.Event()

        setup_logging(self.settings.logging, self.settings.service_name)
        logger.info("AZ Metrics Monitor Service initialized")

    def start(self) -> None:
        """
        Verify AWS access and run the poll loop until stopped.

        Raises:
            ConfigurationError: If credentials or clients cannot be set up
            ResourceListingError: If Auto Scaling groups cannot be listed
        """
        logger.info("Starting AZ Metrics Monitor Service")

        client_manager = AWSClientManager(self.settings.aws)
        client_manager.verify_credentials()

        unhealthy = {
            service: status
            for service, status in client_manager.verify_connections().items()
            if status != "healthy"
        }
        if unhealthy:
            logger.warning(f"Starting with unreachable AWS services: {unhealthy}")

        self.poller = AZMetricsPoller.from_client_manager(self.settings, client_manager)
        self._setup_signal_handlers()

        self.poller.run_forever(self._stop_event)
        logger.info("AZ Metrics Monitor Service stopped")

    def stop(self) -> None:
        """Ask the poll loop to exit after the current cycle."""
        self._stop_event.set()

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, initiating shutdown")
            self.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)


def main() -> None:
    """Main entry point."""
    config_file = os.getenv("CONFIG_FILE")

    try:
        service = AZMetricsMonitorService(config_file)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        service.start()
    except ConfigurationError as e:
        logger.error(f"Unable to load SDK config: {e}")
        sys.exit(1)
    except ResourceListingError as e:
        logger.error(f"Fatal: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
