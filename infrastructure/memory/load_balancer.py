"""In-memory classic load balancers."""

from typing import Dict, List, Optional, Set, Tuple

from .errors import client_error
from core.interfaces.load_balancer_interface import ILoadBalancerClient
from core.models.group import IN_SERVICE, InstanceHealth
from core.utils.logger import get_infrastructure_logger


OUT_OF_SERVICE = "OutOfService"


class InMemoryLoadBalancerClient(ILoadBalancerClient):
    """Load balancers held in memory.

    Instances registered without an explicit state start OutOfService and
    turn InService after `inservice_after` health probes of their load
    balancer. `inservice_after=None` keeps them OutOfService for good.
    """

    def __init__(self, inservice_after: Optional[int] = 0, call_log: Optional[list] = None):
        self.inservice_after = inservice_after
        self.call_log = call_log if call_log is not None else []
        self.failing: Set[str] = set()
        self.logger = get_infrastructure_logger(__name__)
        self._health: Dict[str, Dict[str, InstanceHealth]] = {}
        self._pending: Dict[Tuple[str, str], Optional[int]] = {}

    def create_load_balancer(self, name: str) -> None:
        self._health.setdefault(name, {})

    def delete_load_balancer(self, name: str) -> None:
        self._health.pop(name, None)
        for key in [k for k in self._pending if k[0] == name]:
            del self._pending[key]

    def register_instance(self, name: str, instance_id: str, state: Optional[str] = None) -> None:
        self.create_load_balancer(name)
        if state is None and self.inservice_after == 0:
            state = IN_SERVICE

        if state is None:
            self._pending[(name, instance_id)] = self.inservice_after
            state = OUT_OF_SERVICE

        self._health[name][instance_id] = InstanceHealth(
            instance_id=instance_id,
            state=state,
            description="N/A",
            reason_code="N/A" if state == IN_SERVICE else "Instance",
        )

    def set_health(self, name: str, instance_id: str, state: str,
                   description: str = "N/A", reason_code: str = "N/A") -> None:
        """Overwrite one health record, registering the instance if needed."""
        self.create_load_balancer(name)
        self._pending.pop((name, instance_id), None)
        self._health[name][instance_id] = InstanceHealth(
            instance_id=instance_id,
            state=state,
            description=description,
            reason_code=reason_code,
        )

    def remove_instance(self, name: str, instance_id: str) -> None:
        """Drop an instance without recording a call, as a terminating group does."""
        self._health.get(name, {}).pop(instance_id, None)
        self._pending.pop((name, instance_id), None)

    def registered_instances(self, name: str) -> List[str]:
        return list(self._health.get(name, {}))

    async def describe_instance_health(self, load_balancer: str) -> List[InstanceHealth]:
        self.call_log.append(("describe_instance_health", load_balancer))
        records = self._get(load_balancer, "DescribeInstanceHealth")

        for (name, instance_id), remaining in list(self._pending.items()):
            if name != load_balancer or remaining is None:
                continue
            if remaining <= 0:
                records[instance_id].state = IN_SERVICE
                records[instance_id].reason_code = "N/A"
                del self._pending[(name, instance_id)]

        snapshot = [
            InstanceHealth(r.instance_id, r.state, r.description, r.reason_code)
            for r in records.values()
        ]

        for key, remaining in list(self._pending.items()):
            if key[0] == load_balancer and remaining is not None:
                self._pending[key] = remaining - 1

        return snapshot

    async def deregister_instance(self, load_balancer: str, instance_id: str) -> None:
        self.call_log.append(("deregister_instance", load_balancer, instance_id))
        records = self._get(load_balancer, "DeregisterInstancesFromLoadBalancer")

        if load_balancer in self.failing:
            raise client_error(
                "ServiceUnavailable",
                f"Load balancer {load_balancer} is unavailable",
                "DeregisterInstancesFromLoadBalancer",
            )

        records.pop(instance_id, None)
        self._pending.pop((load_balancer, instance_id), None)
        self.logger.debug(f"{instance_id} removed from {load_balancer}")

    def _get(self, name: str, operation: str) -> Dict[str, InstanceHealth]:
        if name not in self._health:
            raise client_error(
                "LoadBalancerNotFound",
                f"There is no ACTIVE Load Balancer named '{name}'",
                operation,
            )
        return self._health[name]
