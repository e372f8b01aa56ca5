import asyncio

import pytest

from core.exceptions import CapacityUpdateError
from core.models.group import Group
from core.models.release import CapacityUpdate, SwingSlot
from core.services.capacity_cycler import (
    CapacityCycler,
    plan_scale_down,
    plan_scale_up,
)
from infrastructure.memory import InMemoryAutoScalingClient


def updates_sent(call_log):
    return [entry[2] for entry in call_log if entry[0] == "update_group"]


class TestCapacityPlans:
    """Test cases for the swing slot update plans."""

    def test_full_group_widens_max_size_first(self):
        """A group at max size raises max size before desired capacity."""
        cycler = CapacityCycler(InMemoryAutoScalingClient())
        slot = cycler.open_slot(Group(name="web", desired_capacity=3, max_size=3))

        assert slot.widens_max_size
        assert plan_scale_up(slot) == [
            CapacityUpdate("max_size", 4),
            CapacityUpdate("desired_capacity", 4),
        ]
        assert plan_scale_down(slot) == [
            CapacityUpdate("desired_capacity", 3),
            CapacityUpdate("max_size", 3),
        ]

    def test_group_with_headroom_only_touches_desired_capacity(self):
        cycler = CapacityCycler(InMemoryAutoScalingClient())
        slot = cycler.open_slot(Group(name="web", desired_capacity=2, max_size=5))

        assert not slot.widens_max_size
        assert plan_scale_up(slot) == [CapacityUpdate("desired_capacity", 3)]
        assert plan_scale_down(slot) == [CapacityUpdate("desired_capacity", 2)]

    def test_every_step_keeps_desired_within_max(self):
        """Replaying either plan never puts desired capacity above max size."""
        for desired, max_size in [(0, 0), (1, 1), (1, 2), (4, 4), (2, 7)]:
            slot = SwingSlot("web", desired, max_size, widens_max_size=desired == max_size)
            current = {"desired_capacity": desired, "max_size": max_size}
            for update in plan_scale_up(slot) + plan_scale_down(slot):
                current[update.field] = update.value
                assert current["desired_capacity"] <= current["max_size"]
            assert current == {"desired_capacity": desired, "max_size": max_size}

    def test_capacity_update_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            CapacityUpdate("min_size", 1)


class TestCapacityCycler:
    """Test cases for CapacityCycler against an in-memory group."""

    def setup_method(self):
        self.call_log = []
        self.autoscaling = InMemoryAutoScalingClient(call_log=self.call_log)
        self.cycler = CapacityCycler(self.autoscaling)

    def test_cycle_at_max_size(self):
        group = self.autoscaling.create_group("web", desired_capacity=1, max_size=1)

        slot = self.cycler.open_slot(group)
        widened = asyncio.run(self.cycler.scale_up(slot))
        assert widened.desired_capacity == 2
        assert widened.max_size == 2

        restored = asyncio.run(self.cycler.scale_down(slot))
        assert restored.desired_capacity == 1
        assert restored.max_size == 1

        assert updates_sent(self.call_log) == [
            {"max_size": 2},
            {"desired_capacity": 2},
            {"desired_capacity": 1},
            {"max_size": 1},
        ]

    def test_cycle_with_headroom(self):
        group = self.autoscaling.create_group("web", desired_capacity=1, max_size=2)

        slot = self.cycler.open_slot(group)
        asyncio.run(self.cycler.scale_up(slot))
        asyncio.run(self.cycler.scale_down(slot))

        assert updates_sent(self.call_log) == [
            {"desired_capacity": 2},
            {"desired_capacity": 1},
        ]
        assert [str(u) for u in slot.updates] == ["desired_capacity=2", "desired_capacity=1"]

    def test_rejected_update_raises_capacity_update_error(self):
        """A stale snapshot makes the service reject the update; no retry follows."""
        self.autoscaling.create_group("web", desired_capacity=2, max_size=2)
        stale = Group(name="web", desired_capacity=2, max_size=5)

        slot = self.cycler.open_slot(stale)
        with pytest.raises(CapacityUpdateError) as excinfo:
            asyncio.run(self.cycler.scale_up(slot))

        assert excinfo.value.field == "desired_capacity"
        assert excinfo.value.value == 3
        assert "must be between" in excinfo.value.reason
        assert slot.updates == []
        assert len(updates_sent(self.call_log)) == 1
