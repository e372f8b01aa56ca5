"""AWS classic Elastic Load Balancing client."""

from typing import Any, List, Optional

from botocore.exceptions import ClientError
from .session_manager import AWSSessionManager
from core.interfaces.load_balancer_interface import ILoadBalancerClient
from core.models.group import InstanceHealth
from core.utils.logger import get_infrastructure_logger


class LoadBalancerClient(ILoadBalancerClient):
    """AWS ELB client wrapper for health and registration operations."""

    def __init__(
        self,
        session_manager: Optional[AWSSessionManager] = None,
        client: Any = None,
    ):
        if session_manager is None and client is None:
            raise ValueError("A session manager or a boto3 client is required")
        self.logger = get_infrastructure_logger(__name__)
        self._session_manager = session_manager
        self._client = client

    def _ensure_client(self) -> None:
        """Ensure the ELB client is initialized (lazy initialization)."""
        if self._client is None:
            self._client = self._session_manager.client("elb")

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Handle AWS client errors with consistent logging."""
        if isinstance(error, ClientError):
            error_code = error.response["Error"]["Code"]
            self.logger.error(f"{operation} failed: {error_code}")
        else:
            self.logger.error(f"{operation} failed: {str(error)}")
        raise error

    async def describe_instance_health(self, load_balancer: str) -> List[InstanceHealth]:
        """Get the health of every instance registered with a load balancer."""
        try:
            self._ensure_client()
            response = self._client.describe_instance_health(
                LoadBalancerName=load_balancer
            )
            return [
                InstanceHealth(
                    instance_id=state["InstanceId"],
                    state=state.get("State", "Unknown"),
                    description=state.get("Description"),
                    reason_code=state.get("ReasonCode"),
                )
                for state in response.get("InstanceStates", [])
            ]
        except Exception as e:
            self._handle_error("Describe instance health", e)

    async def deregister_instance(self, load_balancer: str, instance_id: str) -> None:
        """Deregister an instance from a load balancer."""
        try:
            self._ensure_client()
            self._client.deregister_instances_from_load_balancer(
                LoadBalancerName=load_balancer,
                Instances=[{"InstanceId": instance_id}],
            )
        except Exception as e:
            self._handle_error("Deregister instance", e)
