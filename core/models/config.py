from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class AWSConfig:
    """AWS connection settings handed to the session manager."""
    region: str = "us-east-1"
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    profile_name: Optional[str] = None
    timeout: int = 60
    max_retries: int = 3

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass(frozen=True)
class ReleaseConfig:
    """Settings for one rolling release, fixed for the lifetime of the run."""

    group_name: str
    aws: AWSConfig = field(default_factory=AWSConfig)

    # Maximum seconds to wait for new capacity to report InService
    inservice_time_allowed: int = 300

    # Poll interval and drain settle delay; 0 disables the wait
    elb_timeout: int = 10

    log_level: LogLevel = LogLevel.INFO

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.group_name:
            errors.append("An autoscaling group name is required")

        if self.inservice_time_allowed < 0:
            errors.append("inservice_time_allowed must not be negative")

        if self.elb_timeout < 0:
            errors.append("elb_timeout must not be negative")

        if not self.aws.region:
            errors.append("AWS region is required")

        if bool(self.aws.access_key_id) != bool(self.aws.secret_access_key):
            errors.append("AWS access key and secret key must be given together")

        if self.aws.max_retries < 0:
            errors.append("AWS max_retries must not be negative")

        return errors
