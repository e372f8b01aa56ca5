"""Autoscaling group API interface."""

from abc import ABC, abstractmethod
from typing import List, Optional
from core.models.group import Group


class IAutoScalingClient(ABC):
    """Interface for reading and mutating one autoscaling group."""

    @abstractmethod
    async def describe_group(self, group_name: str) -> Optional[Group]:
        """Read the current state of a group.

        Args:
            group_name: Name of the autoscaling group

        Returns:
            Group snapshot, or None when no such group exists
        """
        pass

    @abstractmethod
    async def update_group(self, group_name: str,
                           desired_capacity: Optional[int] = None,
                           max_size: Optional[int] = None) -> Group:
        """Update capacity fields of a group.

        Args:
            group_name: Name of the autoscaling group
            desired_capacity: New desired capacity, if changing
            max_size: New max size, if changing

        Returns:
            Group snapshot after the update

        Raises:
            botocore.exceptions.ClientError: If the update is rejected
        """
        pass

    @abstractmethod
    async def suspend_processes(self, group_name: str, processes: List[str]) -> None:
        """Suspend the named scaling processes. Already suspended ones are ignored."""
        pass

    @abstractmethod
    async def resume_processes(self, group_name: str, processes: List[str]) -> None:
        """Resume the named scaling processes."""
        pass
