"""Load balancer API interface."""

from abc import ABC, abstractmethod
from typing import List
from core.models.group import InstanceHealth


class ILoadBalancerClient(ABC):
    """Interface for load balancer health and registration."""

    @abstractmethod
    async def describe_instance_health(self, load_balancer: str) -> List[InstanceHealth]:
        """Get the health record of every registered instance.

        Args:
            load_balancer: Load balancer name

        Returns:
            List of InstanceHealth records, empty when nothing is registered
        """
        pass

    @abstractmethod
    async def deregister_instance(self, load_balancer: str, instance_id: str) -> None:
        """Remove an instance from a load balancer.

        Args:
            load_balancer: Load balancer name
            instance_id: Instance to remove

        Raises:
            botocore.exceptions.ClientError: If the load balancer rejects the call
        """
        pass
