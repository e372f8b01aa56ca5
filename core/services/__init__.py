"""Core services for the rolling release."""

from .group_resolver import GroupResolver
from .process_guard import ProcessGuard
from .capacity_cycler import CapacityCycler
from .health_prober import HealthProber
from .deregistrar import Deregistrar
from .config_service import ConfigService

__all__ = [
    'GroupResolver',
    'ProcessGuard',
    'CapacityCycler',
    'HealthProber',
    'Deregistrar',
    'ConfigService'
]
