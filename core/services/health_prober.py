import logging
from typing import Iterable, List, Optional

from core.interfaces.load_balancer_interface import ILoadBalancerClient


class HealthProber:
    """Point-in-time InService checks against load balancers."""

    def __init__(self, load_balancer_client: ILoadBalancerClient):
        self.load_balancer_client = load_balancer_client
        self.logger = logging.getLogger(__name__)

    async def instances_inservice(self, load_balancer: str, min_inservice: int = 1,
                                  instance_ids: Optional[Iterable[str]] = None) -> bool:
        """True when at least min_inservice instances report InService.

        With instance_ids, every one of those instances must also be among
        the InService records. A load balancer with no health records is
        never in service.
        """
        records = await self.load_balancer_client.describe_instance_health(load_balancer)
        inservice = [r for r in records if r.is_inservice]

        for record in records:
            if not record.is_inservice:
                self.logger.debug(
                    f"{record.instance_id} on {load_balancer} is {record.state} "
                    f"({record.reason_code}): {record.description}"
                )

        if len(inservice) < max(min_inservice, 1):
            self.logger.info(
                f"{load_balancer}: {len(inservice)}/{len(records)} InService, "
                f"waiting for {max(min_inservice, 1)}"
            )
            return False

        if instance_ids is not None:
            inservice_ids = {r.instance_id for r in inservice}
            waiting = [i for i in instance_ids if i not in inservice_ids]
            if waiting:
                self.logger.info(
                    f"{load_balancer}: waiting for {', '.join(waiting)} to be InService"
                )
                return False

        return True

    async def all_instances_inservice(self, load_balancers: List[str], min_inservice: int = 1,
                                      instance_ids: Optional[Iterable[str]] = None) -> bool:
        """True only when every load balancer passes instances_inservice."""
        if not load_balancers:
            raise ValueError("At least one load balancer is required")

        if instance_ids is not None:
            instance_ids = list(instance_ids)

        for load_balancer in load_balancers:
            if not await self.instances_inservice(load_balancer, min_inservice, instance_ids):
                return False
        return True
