"""AWS Auto Scaling client for group capacity and process operations."""

from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError
from .session_manager import AWSSessionManager
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.models.group import Group
from core.utils.logger import get_infrastructure_logger


# Lifecycle states of instances on their way out of the group
LEAVING_LIFECYCLE_PREFIXES = ("Terminating", "Detaching", "Detached")


class AutoScalingClient(IAutoScalingClient):
    """AWS Auto Scaling client wrapper for one-group release operations."""

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
        """Ensure the Auto Scaling client is initialized (lazy initialization)."""
        if self._client is None:
            self._client = self._session_manager.client("autoscaling")

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Handle AWS client errors with consistent logging."""
        if isinstance(error, ClientError):
            error_code = error.response["Error"]["Code"]
            self.logger.error(f"{operation} failed: {error_code}")
        else:
            self.logger.error(f"{operation} failed: {str(error)}")
        raise error

    async def describe_group(self, group_name: str) -> Optional[Group]:
        """Describe one autoscaling group, or None if it does not exist."""
        try:
            self._ensure_client()
            response = self._client.describe_auto_scaling_groups(
                AutoScalingGroupNames=[group_name]
            )
            groups = response["AutoScalingGroups"]
            if not groups:
                return None
            return self._map_group(groups[0])
        except Exception as e:
            self._handle_error("Describe auto scaling group", e)

    async def update_group(
        self,
        group_name: str,
        desired_capacity: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> Group:
        """Update capacity fields and return the group as it now stands."""
        try:
            self._ensure_client()
            params: Dict[str, Any] = {"AutoScalingGroupName": group_name}
            if desired_capacity is not None:
                params["DesiredCapacity"] = desired_capacity
            if max_size is not None:
                params["MaxSize"] = max_size

            self._client.update_auto_scaling_group(**params)
        except Exception as e:
            self._handle_error("Update auto scaling group", e)

        group = await self.describe_group(group_name)
        if group is None:
            raise ClientError(
                {"Error": {"Code": "ValidationError",
                           "Message": f"AutoScalingGroup name not found - {group_name}"}},
                "DescribeAutoScalingGroups",
            )
        return group

    async def suspend_processes(self, group_name: str, processes: List[str]) -> None:
        """Suspend scaling processes on a group."""
        try:
            self._ensure_client()
            self._client.suspend_processes(
                AutoScalingGroupName=group_name, ScalingProcesses=processes
            )
        except Exception as e:
            self._handle_error("Suspend processes", e)

    async def resume_processes(self, group_name: str, processes: List[str]) -> None:
        """Resume scaling processes on a group."""
        try:
            self._ensure_client()
            self._client.resume_processes(
                AutoScalingGroupName=group_name, ScalingProcesses=processes
            )
        except Exception as e:
            self._handle_error("Resume processes", e)

    def _map_group(self, data: Dict[str, Any]) -> Group:
        """Map a DescribeAutoScalingGroups entry to our Group model."""
        return Group(
            name=data["AutoScalingGroupName"],
            desired_capacity=data["DesiredCapacity"],
            max_size=data["MaxSize"],
            min_size=data["MinSize"],
            suspended_processes={
                p["ProcessName"] for p in data.get("SuspendedProcesses", [])
            },
            instance_ids=[
                i["InstanceId"] for i in data.get("Instances", [])
                if not i.get("LifecycleState", "").startswith(LEAVING_LIFECYCLE_PREFIXES)
            ],
            load_balancer_names=list(data.get("LoadBalancerNames", [])),
        )
