import asyncio

import pytest

from core.services.health_prober import HealthProber
from infrastructure.memory import InMemoryLoadBalancerClient, OUT_OF_SERVICE


class TestHealthProber:
    """Test cases for InService checks."""

    def setup_method(self):
        self.elb = InMemoryLoadBalancerClient()
        self.elb.create_load_balancer("test_load_balancer_01")
        self.elb.create_load_balancer("test_load_balancer_02")
        self.prober = HealthProber(self.elb)

    def test_single_load_balancer(self):
        """No records means not in service; one InService record is enough."""
        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01")) is False

        self.elb.set_health("test_load_balancer_01", "i-1", "InService")

        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01")) is True

    def test_records_not_in_service(self):
        self.elb.set_health("test_load_balancer_01", "i-1", OUT_OF_SERVICE,
                            description="Instance has failed at least the UnhealthyThreshold",
                            reason_code="Instance")
        self.elb.set_health("test_load_balancer_01", "i-2", "Unknown")

        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01")) is False

    def test_min_inservice(self):
        self.elb.set_health("test_load_balancer_01", "i-1", "InService")
        self.elb.set_health("test_load_balancer_01", "i-2", OUT_OF_SERVICE)

        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01", 2)) is False

        self.elb.set_health("test_load_balancer_01", "i-2", "InService")

        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01", 2)) is True

    def test_all_load_balancers(self):
        """The check is an AND across every load balancer."""
        load_balancers = ["test_load_balancer_01", "test_load_balancer_02"]

        assert asyncio.run(self.prober.all_instances_inservice(load_balancers)) is False

        self.elb.set_health("test_load_balancer_01", "i-1", "InService")
        assert asyncio.run(self.prober.all_instances_inservice(load_balancers)) is False

        self.elb.set_health("test_load_balancer_02", "i-1", "InService")
        assert asyncio.run(self.prober.all_instances_inservice(load_balancers)) is True

    def test_empty_load_balancer_list_is_an_error(self):
        with pytest.raises(ValueError):
            asyncio.run(self.prober.all_instances_inservice([]))

    def test_new_registration_needs_probes_to_come_in_service(self):
        elb = InMemoryLoadBalancerClient(inservice_after=2)
        elb.register_instance("lb", "i-new")
        prober = HealthProber(elb)

        results = [asyncio.run(prober.instances_inservice("lb")) for _ in range(3)]

        assert results == [False, False, True]

    def test_named_instances_must_be_inservice(self):
        """A count satisfied by other instances does not stand in for the named ones."""
        self.elb.set_health("test_load_balancer_01", "i-other", "InService")
        self.elb.set_health("test_load_balancer_01", "i-old", "InService")
        self.elb.set_health("test_load_balancer_01", "i-new", OUT_OF_SERVICE)
        self.elb.set_health("test_load_balancer_02", "i-new", "InService")

        assert asyncio.run(self.prober.instances_inservice("test_load_balancer_01", 2)) is True
        assert asyncio.run(self.prober.instances_inservice(
            "test_load_balancer_01", 2, instance_ids=["i-new"]
        )) is False
        assert asyncio.run(self.prober.all_instances_inservice(
            ["test_load_balancer_02", "test_load_balancer_01"], instance_ids=iter(["i-new"])
        )) is False

        self.elb.set_health("test_load_balancer_01", "i-new", "InService")

        assert asyncio.run(self.prober.all_instances_inservice(
            ["test_load_balancer_01", "test_load_balancer_02"], instance_ids=iter(["i-new"])
        )) is True
