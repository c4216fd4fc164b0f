from typing import Dict

# Weighted sum (weights add up to 1.0)
WEIGHTS: Dict[str, float] = {
    "bus_factor": 0.30,  # key-person risk
    "correctness": 0.30,  # tests, CI and issue closure
    "ramp_up": 0.20,  # ease of adoption
    "responsive_maintainer": 0.20,  # issue and PR turnaround
}

# a bus factor of this many people or more counts as fully healthy
BUS_FACTOR_SATURATION = 5


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def normalize_bus_factor(raw: int) -> float:
    """Map the raw bus factor count onto [0, 1]."""
    if raw <= 0:
        return 0.0
    return min(raw, BUS_FACTOR_SATURATION) / BUS_FACTOR_SATURATION


def compute_net_score(
    bus_factor: float, ramp_up: float, correctness: float, responsive_maintainer: float
) -> float:
    """Fixed linear weighting of the four normalized component scores.

    Pure and deterministic; inputs are clamped so the result always lies in [0, 1].
    """
    components = {
        "bus_factor": bus_factor,
        "correctness": correctness,
        "ramp_up": ramp_up,
        "responsive_maintainer": responsive_maintainer,
    }
    net_score = sum(WEIGHTS[name] * _clamp(value) for name, value in components.items())
    return _clamp(net_score)
