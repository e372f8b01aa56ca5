"""Core interfaces for the release system."""

from .autoscaling_interface import IAutoScalingClient
from .load_balancer_interface import ILoadBalancerClient
from .config_interface import IConfigService
from .release_interface import IReleaseController

__all__ = [
    'IAutoScalingClient',
    'ILoadBalancerClient',
    'IConfigService',
    'IReleaseController'
]
