from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from core.exceptions import DeregistrationError
from core.models.group import Group


class ReleaseState(Enum):
    """Release state machine states."""
    INIT = "init"
    VALIDATED = "validated"
    SUSPENDED = "suspended"
    CYCLING = "cycling"
    DRAINING = "draining"
    RESUMED = "resumed"
    DONE = "done"
    FAILED = "failed"


class ReleaseStatus(Enum):
    """Overall release outcome."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIAL_SUCCESS = "partial_success"


DESIRED_CAPACITY = "desired_capacity"
MAX_SIZE = "max_size"


@dataclass(frozen=True)
class CapacityUpdate:
    """A single-field capacity change sent to the group API."""

    field: str
    value: int

    def __post_init__(self):
        if self.field not in (DESIRED_CAPACITY, MAX_SIZE):
            raise ValueError(f"Unsupported capacity field: {self.field}")

    def as_kwargs(self) -> Dict[str, int]:
        return {self.field: self.value}

    def __str__(self) -> str:
        return f"{self.field}={self.value}"


@dataclass
class SwingSlot:
    """The extra slot opened for one instance swap."""

    group_name: str
    original_desired_capacity: int
    original_max_size: int
    widens_max_size: bool
    updates: List[CapacityUpdate] = field(default_factory=list)

    # Group members when the slot was opened; anything newer was launched into it
    instance_ids: List[str] = field(default_factory=list)

    def launched_instances(self, group: Group) -> List[str]:
        return [i for i in group.instance_ids if i not in self.instance_ids]

    @property
    def widened_desired_capacity(self) -> int:
        return self.original_desired_capacity + 1


@dataclass
class DeregistrationResult:
    """Outcome of removing an instance from a set of load balancers."""

    instance_id: str
    deregistered_from: List[str] = field(default_factory=list)
    failures: Dict[str, DeregistrationError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def failed_load_balancers(self) -> List[str]:
        return list(self.failures)


@dataclass
class ReleaseSession:
    """In-memory bookkeeping for one execute() call."""

    group: Group
    load_balancers: List[str] = field(default_factory=list)
    original_instances: List[str] = field(default_factory=list)
    cycled_instances: List[str] = field(default_factory=list)
    skipped_instances: List[str] = field(default_factory=list)
    suspended_by_release: List[str] = field(default_factory=list)
    slots: List[SwingSlot] = field(default_factory=list)
    deregistration_failures: List[DeregistrationError] = field(default_factory=list)
    state: ReleaseState = ReleaseState.INIT
    current_instance: Optional[str] = None

    @property
    def capacity_updates(self) -> List[CapacityUpdate]:
        """Every capacity update issued so far, in order."""
        return [u for slot in self.slots for u in slot.updates]

    @property
    def remaining_instances(self) -> List[str]:
        done = set(self.cycled_instances) | set(self.skipped_instances)
        return [i for i in self.original_instances if i not in done]


@dataclass
class ReleaseResult:
    """Summary of a release run."""

    release_id: str = field(default_factory=lambda: str(uuid4()))
    group_name: str = ""

    status: ReleaseStatus = ReleaseStatus.PENDING
    state: ReleaseState = ReleaseState.INIT
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    cycled_instances: List[str] = field(default_factory=list)
    skipped_instances: List[str] = field(default_factory=list)
    capacity_updates: List[CapacityUpdate] = field(default_factory=list)
    deregistration_failures: List[DeregistrationError] = field(default_factory=list)

    error_message: Optional[str] = None

    @property
    def duration(self) -> Optional[timedelta]:
        """Calculate release duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return None

    @property
    def is_successful(self) -> bool:
        return self.status == ReleaseStatus.COMPLETED

    def mark_started(self) -> None:
        self.status = ReleaseStatus.RUNNING
        self.start_time = datetime.now()

    def mark_finished(self, session: ReleaseSession) -> None:
        """Copy the session outcome and close the result."""
        self._absorb(session)
        if self.deregistration_failures:
            self.status = ReleaseStatus.PARTIAL_SUCCESS
        else:
            self.status = ReleaseStatus.COMPLETED
        self.end_time = datetime.now()

    def mark_failed(self, session: Optional[ReleaseSession], error: Exception) -> None:
        if session is not None:
            self._absorb(session)
        self.state = ReleaseState.FAILED
        self.status = ReleaseStatus.FAILED
        self.error_message = str(error)
        self.end_time = datetime.now()

    def _absorb(self, session: ReleaseSession) -> None:
        self.state = session.state
        self.cycled_instances = list(session.cycled_instances)
        self.skipped_instances = list(session.skipped_instances)
        self.capacity_updates = list(session.capacity_updates)
        self.deregistration_failures = list(session.deregistration_failures)
