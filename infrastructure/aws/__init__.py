"""AWS infrastructure implementations."""

from .autoscaling_client import AutoScalingClient
from .elb_client import LoadBalancerClient
from .session_manager import AWSSessionManager

__all__ = [
    'AutoScalingClient',
    'LoadBalancerClient',
    'AWSSessionManager'
]
