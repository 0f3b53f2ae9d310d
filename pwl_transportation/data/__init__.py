# Data layer for the transportation benchmark
"""
Contains the instance data models and the random instance generator.
"""

from .models import PiecewiseLinearFunction, TransportationInstance
from .generator import generate_data, instance_seed

__all__ = [
    "PiecewiseLinearFunction", "TransportationInstance",
    "generate_data", "instance_seed",
]
