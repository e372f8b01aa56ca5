"""Autoscaling group and load balancer health models."""

from dataclasses import dataclass, field
from typing import List, Optional, Set


IN_SERVICE = "InService"

# Processes that must stay active while instances are rotated
RELEASE_REQUIRED_PROCESSES = (
    "RemoveFromLoadBalancerLowPriority",
    "Terminate",
    "Launch",
    "HealthCheck",
    "AddToLoadBalancer",
)

# Processes that would fight the rotation if left running
RELEASE_DISABLED_PROCESSES = (
    "ReplaceUnhealthy",
    "AlarmNotification",
    "ScheduledActions",
    "AZRebalance",
)


@dataclass
class Group:
    """Point-in-time view of an autoscaling group."""

    name: str
    desired_capacity: int
    max_size: int
    min_size: int = 0
    suspended_processes: Set[str] = field(default_factory=set)
    instance_ids: List[str] = field(default_factory=list)
    load_balancer_names: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("group name cannot be empty")

    @property
    def has_headroom(self) -> bool:
        """True when desired capacity can grow without touching max size."""
        return self.desired_capacity < self.max_size

    def suspended(self, processes) -> List[str]:
        """Return the given processes that are currently suspended, in order."""
        return [p for p in processes if p in self.suspended_processes]


@dataclass
class InstanceHealth:
    """One load balancer health record."""

    instance_id: str
    state: str
    description: Optional[str] = None
    reason_code: Optional[str] = None

    @property
    def is_inservice(self) -> bool:
        return self.state == IN_SERVICE
