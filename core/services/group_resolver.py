import logging

from core.exceptions import GroupNotFoundError
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.models.group import Group


class GroupResolver:
    """Looks up autoscaling groups by name."""

    def __init__(self, autoscaling_client: IAutoScalingClient):
        self.autoscaling_client = autoscaling_client
        self.logger = logging.getLogger(__name__)

    async def resolve(self, group_name: str) -> Group:
        """Return the current state of a group, failing if it does not exist."""
        group = await self.autoscaling_client.describe_group(group_name)
        if group is None:
            self.logger.error(f"Autoscaling group not found: {group_name}")
            raise GroupNotFoundError(group_name)

        self.logger.debug(
            f"Resolved {group.name}: desired={group.desired_capacity} "
            f"max={group.max_size} instances={len(group.instance_ids)}"
        )
        return group
