from .base import REGISTRY, register
from .bus_factor_metric import BusFactorMetric, calculate_bus_factor, to_contributors
from .correctness_metric import CorrectnessMetric
from .license_metric import LicenseMetric
from .ramp_up_metric import RampUpMetric
from .responsiveness_metric import ResponsivenessMetric

# Order here is the order calculators run in for each repository.
register(RampUpMetric())
register(CorrectnessMetric())
register(ResponsivenessMetric())
register(LicenseMetric())

__all__ = [
    "REGISTRY",
    "BusFactorMetric",
    "CorrectnessMetric",
    "LicenseMetric",
    "RampUpMetric",
    "ResponsivenessMetric",
    "calculate_bus_factor",
    "to_contributors",
]
