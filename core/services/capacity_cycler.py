"""Capacity changes that open and close a swing slot."""

import logging
from typing import List

from botocore.exceptions import ClientError

from core.exceptions import CapacityUpdateError
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.models.group import Group
from core.models.release import (
    CapacityUpdate,
    DESIRED_CAPACITY,
    MAX_SIZE,
    SwingSlot,
)


def plan_scale_up(slot: SwingSlot) -> List[CapacityUpdate]:
    """Updates that add one slot, widening max size before raising desired capacity."""
    updates = []
    if slot.widens_max_size:
        updates.append(CapacityUpdate(MAX_SIZE, slot.original_max_size + 1))
    updates.append(CapacityUpdate(DESIRED_CAPACITY, slot.original_desired_capacity + 1))
    return updates


def plan_scale_down(slot: SwingSlot) -> List[CapacityUpdate]:
    """Updates that remove the slot, lowering desired capacity before max size."""
    updates = [CapacityUpdate(DESIRED_CAPACITY, slot.original_desired_capacity)]
    if slot.widens_max_size:
        updates.append(CapacityUpdate(MAX_SIZE, slot.original_max_size))
    return updates


class CapacityCycler:
    """Applies swing slot plans one field at a time."""

    def __init__(self, autoscaling_client: IAutoScalingClient):
        self.autoscaling_client = autoscaling_client
        self.logger = logging.getLogger(__name__)

    def open_slot(self, group: Group) -> SwingSlot:
        """Describe the slot to add to a group; nothing is sent yet."""
        return SwingSlot(
            group_name=group.name,
            original_desired_capacity=group.desired_capacity,
            original_max_size=group.max_size,
            widens_max_size=not group.has_headroom,
            instance_ids=list(group.instance_ids),
        )

    async def scale_up(self, slot: SwingSlot) -> Group:
        """Grow the group by one slot.

        Every update that succeeds is appended to slot.updates, so a slot
        left half open by a rejection still shows what was applied.

        Raises:
            CapacityUpdateError: If the group API rejects an update
        """
        self.logger.info(
            f"Scaling up {slot.group_name} from desired={slot.original_desired_capacity} "
            f"max={slot.original_max_size}"
        )
        return await self._apply_all(slot, plan_scale_up(slot))

    async def scale_down(self, slot: SwingSlot) -> Group:
        """Close a slot and return the group to its pre-cycle capacity."""
        self.logger.info(
            f"Scaling down {slot.group_name} to desired={slot.original_desired_capacity} "
            f"max={slot.original_max_size}"
        )
        return await self._apply_all(slot, plan_scale_down(slot))

    async def _apply_all(self, slot: SwingSlot, updates: List[CapacityUpdate]) -> Group:
        group = None
        for update in updates:
            group = await self._apply(slot.group_name, update)
            slot.updates.append(update)
        return group

    async def _apply(self, group_name: str, update: CapacityUpdate) -> Group:
        try:
            group = await self.autoscaling_client.update_group(group_name, **update.as_kwargs())
        except ClientError as e:
            reason = e.response.get("Error", {}).get("Message") or str(e)
            self.logger.error(f"Capacity update {update} on {group_name} rejected: {reason}")
            raise CapacityUpdateError(group_name, update.field, update.value, reason) from e

        self.logger.info(f"Updated {group_name}: {update}")
        return group
