import logging
from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import DeregistrationError
from core.interfaces.load_balancer_interface import ILoadBalancerClient
from core.models.release import DeregistrationResult


class Deregistrar:
    """Removes instances from load balancers, one balancer at a time."""

    def __init__(self, load_balancer_client: ILoadBalancerClient):
        self.load_balancer_client = load_balancer_client
        self.logger = logging.getLogger(__name__)

    async def deregister_instance(self, instance_id: str,
                                  load_balancers: List[str]) -> DeregistrationResult:
        """Deregister an instance from every load balancer in the list.

        A failure on one load balancer is recorded and the rest are still
        attempted.
        """
        result = DeregistrationResult(instance_id=instance_id)

        for load_balancer in load_balancers:
            try:
                await self.load_balancer_client.deregister_instance(load_balancer, instance_id)
            except (ClientError, BotoCoreError) as e:
                if isinstance(e, ClientError):
                    reason = e.response.get("Error", {}).get("Code") or str(e)
                else:
                    reason = str(e)
                error = DeregistrationError(instance_id, load_balancer, reason)
                self.logger.error(str(error))
                result.failures[load_balancer] = error
                continue

            self.logger.info(f"Deregistered {instance_id} from {load_balancer}")
            result.deregistered_from.append(load_balancer)

        return result
