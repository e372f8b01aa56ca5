"""Release controller interface."""

from abc import ABC, abstractmethod
from typing import List
from core.models.release import DeregistrationResult, ReleaseResult


class IReleaseController(ABC):
    """Interface for running a rolling release of one group."""

    @abstractmethod
    async def execute(self) -> ReleaseResult:
        """Swap every instance of the group for a freshly launched one.

        Returns:
            ReleaseResult with the cycled instances and applied updates

        Raises:
            ReleaseError: On any fatal failure; the state is left as-is
        """
        pass

    @abstractmethod
    async def instances_inservice(self, load_balancer: str) -> bool:
        """Check whether a load balancer reports an InService instance."""
        pass

    @abstractmethod
    async def all_instances_inservice(self, load_balancers: List[str]) -> bool:
        """Check instances_inservice across every given load balancer."""
        pass

    @abstractmethod
    async def deregister_instance(self, instance_id: str,
                                  load_balancers: List[str]) -> DeregistrationResult:
        """Remove an instance from every given load balancer."""
        pass
