import asyncio

from core.exceptions import DeregistrationError
from core.services.deregistrar import Deregistrar
from infrastructure.memory import InMemoryLoadBalancerClient


class TestDeregistrar:
    """Test cases for removing instances from load balancers."""

    def setup_method(self):
        self.call_log = []
        self.elb = InMemoryLoadBalancerClient(call_log=self.call_log)
        for name in ("test_load_balancer_01", "test_load_balancer_02", "test_load_balancer_03"):
            self.elb.create_load_balancer(name)
        self.deregistrar = Deregistrar(self.elb)

    def test_deregisters_across_all_load_balancers(self):
        for name in ("test_load_balancer_01", "test_load_balancer_02"):
            self.elb.register_instance(name, "i-one")
            self.elb.register_instance(name, "i-two")
        self.elb.register_instance("test_load_balancer_03", "i-two")

        result = asyncio.run(self.deregistrar.deregister_instance(
            "i-one", ["test_load_balancer_01", "test_load_balancer_02", "test_load_balancer_03"]
        ))

        assert result.succeeded
        assert "i-one" not in self.elb.registered_instances("test_load_balancer_01")
        assert "i-one" not in self.elb.registered_instances("test_load_balancer_02")
        assert self.elb.registered_instances("test_load_balancer_01") == ["i-two"]
        assert self.elb.registered_instances("test_load_balancer_02") == ["i-two"]
        # Never held i-one, left untouched
        assert self.elb.registered_instances("test_load_balancer_03") == ["i-two"]

    def test_failure_on_one_load_balancer_does_not_stop_the_others(self):
        for name in ("test_load_balancer_01", "test_load_balancer_02"):
            self.elb.register_instance(name, "i-one")
        self.elb.failing.add("test_load_balancer_01")

        result = asyncio.run(self.deregistrar.deregister_instance(
            "i-one", ["test_load_balancer_01", "test_load_balancer_02"]
        ))

        assert not result.succeeded
        assert result.failed_load_balancers == ["test_load_balancer_01"]
        assert result.deregistered_from == ["test_load_balancer_02"]
        assert isinstance(result.failures["test_load_balancer_01"], DeregistrationError)
        assert result.failures["test_load_balancer_01"].reason == "ServiceUnavailable"
        assert self.elb.registered_instances("test_load_balancer_01") == ["i-one"]
        assert self.elb.registered_instances("test_load_balancer_02") == []

        attempted = [entry[1] for entry in self.call_log if entry[0] == "deregister_instance"]
        assert attempted == ["test_load_balancer_01", "test_load_balancer_02"]

    def test_unknown_load_balancer_is_recorded(self):
        result = asyncio.run(self.deregistrar.deregister_instance("i-one", ["missing"]))

        assert result.failed_load_balancers == ["missing"]
        assert result.failures["missing"].reason == "LoadBalancerNotFound"
