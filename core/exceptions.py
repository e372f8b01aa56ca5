"""Error taxonomy for the release tool."""

from typing import Iterable, Optional


class ReleaseError(Exception):
    """Base class for every release failure."""


class ConfigurationError(ValueError):
    """Raised when the release configuration is missing or invalid."""


class GroupNotFoundError(ReleaseError):
    """The named autoscaling group does not exist."""

    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__(f"Autoscaling group '{group_name}' does not exist")


class NoLoadBalancersError(ReleaseError):
    """The group has no load balancer to gate instance health on."""

    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__(
            f"Autoscaling group '{group_name}' is not attached to any load balancer"
        )


class RequiredProcessSuspendedError(ReleaseError):
    """A process the release relies on is suspended on the group."""

    def __init__(self, group_name: str, processes: Iterable[str]):
        self.group_name = group_name
        self.processes = list(processes)
        super().__init__(
            f"Autoscaling group '{group_name}' has required processes suspended: "
            f"{', '.join(self.processes)}"
        )


class HealthCheckTimeoutError(ReleaseError):
    """New capacity did not come into service within the allowed time."""

    def __init__(self, group_name: str, load_balancers: Iterable[str], seconds: float):
        self.group_name = group_name
        self.load_balancers = list(load_balancers)
        self.seconds = seconds
        super().__init__(
            f"Instances of '{group_name}' were not InService on "
            f"{', '.join(self.load_balancers)} after {seconds} seconds"
        )


class CapacityUpdateError(ReleaseError):
    """The group API rejected a capacity update."""

    def __init__(self, group_name: str, field: str, value: int, reason: str):
        self.group_name = group_name
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Setting {field}={value} on '{group_name}' was rejected: {reason}"
        )


class DeregistrationError(ReleaseError):
    """An instance could not be removed from one load balancer.

    Recorded on the deregistration result rather than raised; the cycle
    carries on and the failure is reported to the operator.
    """

    def __init__(self, instance_id: str, load_balancer: str, reason: Optional[str] = None):
        self.instance_id = instance_id
        self.load_balancer = load_balancer
        self.reason = reason
        message = f"Failed to deregister {instance_id} from {load_balancer}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class HealthCheckError(ReleaseError):
    """Load balancer health could not be read while waiting on new capacity."""

    def __init__(self, group_name: str, load_balancers: Iterable[str], reason: str):
        self.group_name = group_name
        self.load_balancers = list(load_balancers)
        self.reason = reason
        super().__init__(
            f"Health of '{group_name}' on {', '.join(self.load_balancers)} "
            f"could not be checked: {reason}"
        )
