"""Scaling process suspension for the duration of a release."""

import logging
from typing import List

from core.exceptions import RequiredProcessSuspendedError
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.models.group import (
    Group,
    RELEASE_DISABLED_PROCESSES,
    RELEASE_REQUIRED_PROCESSES,
)


class ProcessGuard:
    """Puts a group into release mode and takes it back out.

    Instance rotation needs Launch, Terminate, HealthCheck and the load
    balancer attach/detach processes running, and needs the processes that
    would replace, rebalance or rescale instances behind its back stopped.
    """

    def __init__(self, autoscaling_client: IAutoScalingClient):
        self.autoscaling_client = autoscaling_client
        self.logger = logging.getLogger(__name__)

    def assert_release_processes_active(self, group: Group) -> None:
        """Raise RequiredProcessSuspendedError if a required process is suspended."""
        suspended = group.suspended(RELEASE_REQUIRED_PROCESSES)
        if suspended:
            self.logger.error(
                f"Cannot release {group.name}, required processes suspended: {suspended}"
            )
            raise RequiredProcessSuspendedError(group.name, suspended)

    async def enter_release_mode(self, group: Group) -> List[str]:
        """Suspend the release-disabled processes.

        Returns:
            The processes that were active before this call, which are the
            ones exit_release_mode should later resume
        """
        newly_suspended = [
            p for p in RELEASE_DISABLED_PROCESSES if p not in group.suspended_processes
        ]

        self.logger.info(f"Suspending processes on {group.name}: {list(RELEASE_DISABLED_PROCESSES)}")
        await self.autoscaling_client.suspend_processes(
            group.name, list(RELEASE_DISABLED_PROCESSES)
        )
        group.suspended_processes.update(RELEASE_DISABLED_PROCESSES)

        return newly_suspended

    async def exit_release_mode(self, group: Group, processes: List[str]) -> None:
        """Resume the processes a release suspended."""
        if not processes:
            self.logger.info(f"No processes to resume on {group.name}")
            return

        self.logger.info(f"Resuming processes on {group.name}: {processes}")
        await self.autoscaling_client.resume_processes(group.name, list(processes))
        group.suspended_processes.difference_update(processes)
