import asyncio
import logging
import time
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import HealthCheckTimeoutError, HealthCheckError, NoLoadBalancersError
from core.interfaces.autoscaling_interface import IAutoScalingClient
from core.interfaces.load_balancer_interface import ILoadBalancerClient
from core.interfaces.release_interface import IReleaseController
from core.models.config import ReleaseConfig
from core.models.group import Group
from core.models.release import (
    DeregistrationResult,
    ReleaseResult,
    ReleaseSession,
    ReleaseState,
    SwingSlot,
)
from core.services.capacity_cycler import CapacityCycler
from core.services.deregistrar import Deregistrar
from core.services.group_resolver import GroupResolver
from core.services.health_prober import HealthProber
from core.services.process_guard import ProcessGuard


class ReleaseController(IReleaseController):
    """Rolling release of one autoscaling group.

    Each original instance is swapped for a new one in turn: open a swing
    slot, wait for the load balancers to report the widened group
    InService, deregister the old instance, close the slot. Scaling
    processes that would interfere are suspended for the whole run and
    resumed once every instance has been cycled.

    A fatal error stops the run where it is. Capacity is not rolled back
    and suspended processes stay suspended so the operator can inspect
    the group.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        autoscaling_client: IAutoScalingClient,
        load_balancer_client: ILoadBalancerClient,
        group: Group,
    ):
        self.config = config
        self.group = group
        self.group_resolver = GroupResolver(autoscaling_client)
        self.process_guard = ProcessGuard(autoscaling_client)
        self.capacity_cycler = CapacityCycler(autoscaling_client)
        self.health_prober = HealthProber(load_balancer_client)
        self.deregistrar = Deregistrar(load_balancer_client)
        self.last_result: Optional[ReleaseResult] = None
        self.logger = logging.getLogger(__name__)

    @classmethod
    async def create(
        cls,
        config: ReleaseConfig,
        autoscaling_client: IAutoScalingClient,
        load_balancer_client: ILoadBalancerClient,
    ) -> "ReleaseController":
        """Build a controller for an existing group.

        Raises:
            GroupNotFoundError: If the configured group does not exist
        """
        group = await GroupResolver(autoscaling_client).resolve(config.group_name)
        return cls(config, autoscaling_client, load_balancer_client, group)

    def _handle_error(self, message: str, error: Exception) -> str:
        """Centralized error handling."""
        error_msg = f"{message}: {str(error)}"
        self.logger.error(error_msg)
        return error_msg

    def _transition(self, session: ReleaseSession, state: ReleaseState,
                    instance_id: Optional[str] = None) -> None:
        previous = session.state
        session.state = state
        suffix = f" ({instance_id})" if instance_id else ""
        self.logger.info(
            f"Release of {session.group.name}: {previous.value} -> {state.value}{suffix}"
        )

    async def execute(self) -> ReleaseResult:
        """Run the release once."""
        result = ReleaseResult(group_name=self.config.group_name)
        result.mark_started()
        self.last_result = result
        session = None

        self.logger.info(f"Starting release {result.release_id} of {self.config.group_name}")

        try:
            session = await self._validate()
            await self._suspend(session)

            for instance_id in session.original_instances:
                await self._cycle_instance(session, instance_id)

            await self._resume(session)
            self._transition(session, ReleaseState.DONE)
            result.mark_finished(session)

        except Exception as e:
            if session is not None:
                self._transition(session, ReleaseState.FAILED, session.current_instance)
            result.mark_failed(session, e)
            self._handle_error(f"Release {result.release_id} failed", e)
            raise

        if result.deregistration_failures:
            for failure in result.deregistration_failures:
                self.logger.warning(f"Left registered: {failure}")
        self.logger.info(
            f"Release {result.release_id} {result.status.value}: "
            f"cycled {len(result.cycled_instances)} instances in {result.duration}"
        )
        return result

    async def _validate(self) -> ReleaseSession:
        group = await self.group_resolver.resolve(self.config.group_name)
        self.group = group

        if not group.load_balancer_names:
            raise NoLoadBalancersError(group.name)

        session = ReleaseSession(
            group=group,
            load_balancers=list(group.load_balancer_names),
            original_instances=list(group.instance_ids),
        )
        self._transition(session, ReleaseState.VALIDATED)
        return session

    async def _suspend(self, session: ReleaseSession) -> None:
        self.process_guard.assert_release_processes_active(session.group)
        session.suspended_by_release = await self.process_guard.enter_release_mode(
            session.group
        )
        self._transition(session, ReleaseState.SUSPENDED)

    async def _cycle_instance(self, session: ReleaseSession, instance_id: str) -> None:
        group = await self.group_resolver.resolve(session.group.name)
        session.group = group
        self.group = group

        if instance_id not in group.instance_ids:
            self.logger.warning(f"{instance_id} already left {group.name}, skipping")
            session.skipped_instances.append(instance_id)
            return

        session.current_instance = instance_id
        self._transition(session, ReleaseState.CYCLING, instance_id)

        slot = self.capacity_cycler.open_slot(group)
        session.slots.append(slot)
        await self.capacity_cycler.scale_up(slot)
        await self._wait_for_inservice(session, slot)

        self._transition(session, ReleaseState.DRAINING, instance_id)
        deregistration = await self.deregistrar.deregister_instance(
            instance_id, session.load_balancers
        )
        if not deregistration.succeeded:
            self.logger.warning(
                f"{instance_id} is still registered with "
                f"{deregistration.failed_load_balancers}"
            )
            session.deregistration_failures.extend(deregistration.failures.values())

        if self.config.elb_timeout:
            await asyncio.sleep(self.config.elb_timeout)

        await self.capacity_cycler.scale_down(slot)
        session.cycled_instances.append(instance_id)
        session.current_instance = None
        self.logger.info(
            f"Cycled {instance_id} ({len(session.remaining_instances)} remaining)"
        )

    async def _wait_for_inservice(self, session: ReleaseSession, slot: SwingSlot) -> None:
        """Poll until the instances launched into the slot are InService everywhere.

        The widened group size must also be reached on every load balancer.
        Sleeps never run past the deadline, and one last check runs at it.
        """
        expected = slot.widened_desired_capacity
        deadline = time.monotonic() + self.config.inservice_time_allowed

        while True:
            if await self._slot_inservice(session, slot, expected):
                return

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise HealthCheckTimeoutError(
                    session.group.name,
                    session.load_balancers,
                    self.config.inservice_time_allowed,
                )

            await asyncio.sleep(min(self.config.elb_timeout, remaining))

    async def _slot_inservice(self, session: ReleaseSession, slot: SwingSlot,
                              expected: int) -> bool:
        try:
            group = await self.group_resolver.resolve(session.group.name)
            launched = slot.launched_instances(group)
            if not launched:
                self.logger.info(f"Waiting for {group.name} to launch a new instance")
                return False

            if not await self.health_prober.all_instances_inservice(
                session.load_balancers, expected, launched
            ):
                return False

        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError):
                reason = e.response.get("Error", {}).get("Code") or str(e)
            else:
                reason = str(e)
            raise HealthCheckError(session.group.name, session.load_balancers, reason) from e

        self.logger.info(
            f"{', '.join(launched)} InService on {session.load_balancers} "
            f"({expected} instances)"
        )
        return True

    async def _resume(self, session: ReleaseSession) -> None:
        await self.process_guard.exit_release_mode(session.group, session.suspended_by_release)
        self._transition(session, ReleaseState.RESUMED)

    async def instances_inservice(self, load_balancer: str) -> bool:
        return await self.health_prober.instances_inservice(load_balancer)

    async def all_instances_inservice(self, load_balancers: List[str]) -> bool:
        return await self.health_prober.all_instances_inservice(load_balancers)

    async def deregister_instance(self, instance_id: str,
                                  load_balancers: List[str]) -> DeregistrationResult:
        return await self.deregistrar.deregister_instance(instance_id, load_balancers)
