"""In-memory collaborators for tests and rehearsals."""

from .autoscaling import InMemoryAutoScalingClient
from .load_balancer import InMemoryLoadBalancerClient, OUT_OF_SERVICE

__all__ = [
    'InMemoryAutoScalingClient',
    'InMemoryLoadBalancerClient',
    'OUT_OF_SERVICE'
]
