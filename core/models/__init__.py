"""Core data models for the release system."""

from .config import AWSConfig, LogLevel, ReleaseConfig
from .group import (
    Group,
    InstanceHealth,
    IN_SERVICE,
    RELEASE_DISABLED_PROCESSES,
    RELEASE_REQUIRED_PROCESSES,
)
from .release import (
    CapacityUpdate,
    DeregistrationResult,
    ReleaseResult,
    ReleaseSession,
    ReleaseState,
    ReleaseStatus,
    SwingSlot,
)

__all__ = [
    'AWSConfig',
    'LogLevel',
    'ReleaseConfig',
    'Group',
    'InstanceHealth',
    'IN_SERVICE',
    'RELEASE_DISABLED_PROCESSES',
    'RELEASE_REQUIRED_PROCESSES',
    'CapacityUpdate',
    'DeregistrationResult',
    'ReleaseResult',
    'ReleaseSession',
    'ReleaseState',
    'ReleaseStatus',
    'SwingSlot'
]
