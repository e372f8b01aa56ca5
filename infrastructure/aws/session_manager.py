"""AWS session manager"""

import boto3
from botocore.config import Config
from typing import Optional

from core.models.config import AWSConfig
from core.utils.logger import get_infrastructure_logger


class AWSSessionManager:
    """Builds boto3 sessions and clients from explicit AWS settings."""

    def __init__(self, aws_config: AWSConfig):
        self.aws_config = aws_config
        self.region = aws_config.region
        self.logger = get_infrastructure_logger(__name__)
        self._session: Optional[boto3.Session] = None

    def get_session(self) -> boto3.Session:
        """Get the boto3 session, creating it on first use.

        Static keys win over a named profile; with neither, boto3's default
        credential chain applies (environment, shared config, instance role).
        """
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        if self.aws_config.has_static_credentials:
            self.logger.info("Using static credentials from configuration")
            return boto3.Session(
                aws_access_key_id=self.aws_config.access_key_id,
                aws_secret_access_key=self.aws_config.secret_access_key,
                aws_session_token=self.aws_config.session_token,
                region_name=self.region,
            )

        if self.aws_config.profile_name:
            self.logger.info(f"Using AWS profile {self.aws_config.profile_name}")
            return boto3.Session(
                profile_name=self.aws_config.profile_name, region_name=self.region
            )

        self.logger.info("Using default credential chain")
        return boto3.Session(region_name=self.region)

    def client(self, service_name: str):
        """Create a client with the configured timeout and retry budget."""
        client_config = Config(
            connect_timeout=self.aws_config.timeout,
            read_timeout=self.aws_config.timeout,
            retries={"max_attempts": self.aws_config.max_retries, "mode": "standard"},
        )
        return self.get_session().client(
            service_name, region_name=self.region, config=client_config
        )
