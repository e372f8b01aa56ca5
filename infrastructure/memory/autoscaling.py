"""In-memory autoscaling groups."""

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .errors import client_error
from .load_balancer import InMemoryLoadBalancerClient
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.models.group import Group, IN_SERVICE
from core.utils.logger import get_infrastructure_logger


@dataclass
class _GroupRecord:
    name: str
    min_size: int
    max_size: int
    desired_capacity: int
    load_balancers: List[str] = field(default_factory=list)
    suspended_processes: Set[str] = field(default_factory=set)
    instances: List[str] = field(default_factory=list)

    def snapshot(self) -> Group:
        return Group(
            name=self.name,
            desired_capacity=self.desired_capacity,
            max_size=self.max_size,
            min_size=self.min_size,
            suspended_processes=set(self.suspended_processes),
            instance_ids=list(self.instances),
            load_balancer_names=list(self.load_balancers),
        )


class InMemoryAutoScalingClient(IAutoScalingClient):
    """Autoscaling groups held in memory.

    Capacity bounds are enforced the way the service enforces them, with a
    ValidationError ClientError. The group reconciles to its desired
    capacity immediately: new instances are launched and registered with
    the group's load balancers, and scale-in terminates the oldest instance.
    """

    def __init__(
        self,
        load_balancer_client: Optional[InMemoryLoadBalancerClient] = None,
        call_log: Optional[list] = None,
    ):
        self.load_balancer_client = load_balancer_client or InMemoryLoadBalancerClient()
        self.call_log = call_log if call_log is not None else []
        self.logger = get_infrastructure_logger(__name__)
        self._groups: Dict[str, _GroupRecord] = {}
        self._ids = itertools.count(1)

    def create_group(
        self,
        name: str,
        desired_capacity: int = 1,
        max_size: int = 2,
        min_size: int = 0,
        load_balancers: Iterable[str] = (),
        suspended_processes: Iterable[str] = (),
    ) -> Group:
        """Create a group whose existing instances are already InService."""
        record = _GroupRecord(
            name=name,
            min_size=min_size,
            max_size=max_size,
            desired_capacity=desired_capacity,
            load_balancers=list(load_balancers),
            suspended_processes=set(suspended_processes),
        )
        self._check_bounds(record, min_size, desired_capacity, max_size, "CreateAutoScalingGroup")
        self._groups[name] = record

        for load_balancer in record.load_balancers:
            self.load_balancer_client.create_load_balancer(load_balancer)
        for _ in range(desired_capacity):
            self._launch(record, state=IN_SERVICE)

        return record.snapshot()

    def delete_group(self, name: str) -> None:
        """Remove a group and terminate its instances."""
        record = self._require(name, "DeleteAutoScalingGroup")
        while record.instances:
            self._terminate_oldest(record)
        del self._groups[name]

    async def describe_group(self, group_name: str) -> Optional[Group]:
        self.call_log.append(("describe_group", group_name))
        record = self._groups.get(group_name)
        return record.snapshot() if record else None

    async def update_group(
        self,
        group_name: str,
        desired_capacity: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> Group:
        changes = {}
        if max_size is not None:
            changes["max_size"] = max_size
        if desired_capacity is not None:
            changes["desired_capacity"] = desired_capacity
        self.call_log.append(("update_group", group_name, changes))

        record = self._require(group_name, "UpdateAutoScalingGroup")
        new_max = record.max_size if max_size is None else max_size
        new_desired = record.desired_capacity if desired_capacity is None else desired_capacity
        self._check_bounds(record, record.min_size, new_desired, new_max, "UpdateAutoScalingGroup")

        record.max_size = new_max
        record.desired_capacity = new_desired
        self._reconcile(record)
        return record.snapshot()

    async def suspend_processes(self, group_name: str, processes: List[str]) -> None:
        self.call_log.append(("suspend_processes", group_name, list(processes)))
        record = self._require(group_name, "SuspendProcesses")
        record.suspended_processes.update(processes)

    async def resume_processes(self, group_name: str, processes: List[str]) -> None:
        self.call_log.append(("resume_processes", group_name, list(processes)))
        record = self._require(group_name, "ResumeProcesses")
        record.suspended_processes.difference_update(processes)

    def _require(self, group_name: str, operation: str) -> _GroupRecord:
        record = self._groups.get(group_name)
        if record is None:
            raise client_error(
                "ValidationError",
                f"AutoScalingGroup name not found - {group_name}",
                operation,
            )
        return record

    def _check_bounds(self, record: _GroupRecord, min_size: int, desired: int,
                      max_size: int, operation: str) -> None:
        if not min_size <= desired <= max_size:
            raise client_error(
                "ValidationError",
                f"Desired capacity:{desired} must be between the specified "
                f"min size:{min_size} and max size:{max_size}",
                operation,
            )

    def _reconcile(self, record: _GroupRecord) -> None:
        while len(record.instances) < record.desired_capacity:
            self._launch(record)
        while len(record.instances) > record.desired_capacity:
            self._terminate_oldest(record)

    def _launch(self, record: _GroupRecord, state: Optional[str] = None) -> str:
        instance_id = f"i-{next(self._ids):017x}"
        record.instances.append(instance_id)
        for load_balancer in record.load_balancers:
            self.load_balancer_client.register_instance(load_balancer, instance_id, state)
        self.logger.debug(f"Launched {instance_id} in {record.name}")
        return instance_id

    def _terminate_oldest(self, record: _GroupRecord) -> str:
        instance_id = record.instances.pop(0)
        for load_balancer in record.load_balancers:
            self.load_balancer_client.remove_instance(load_balancer, instance_id)
        self.logger.debug(f"Terminated {instance_id} in {record.name}")
        return instance_id
