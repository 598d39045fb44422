"""
leaftemp data package.

Provides validated input contracts for the leaf energy balance.
"""

from leaftemp.data.contracts import (
    WeatherInput,
    LeafParameters,
)

__all__ = [
    "WeatherInput",
    "LeafParameters",
]
