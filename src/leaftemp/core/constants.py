"""
Physical constants and fixed model coefficients for the leaf energy balance.
"""
from typing import Final, Tuple

# Physical constants
STEFAN_BOLTZMANN: Final[float] = 5.67e-8  # W m-2 K-4
GRAVITY: Final[float] = 9.81  # m/s²
ATMOSPHERIC_PRESSURE_KPA: Final[float] = 101.325  # kPa, fixed
GAS_CONSTANT_KPA: Final[float] = 8.314e-3  # kPa m³ mol-1 K-1
HEAT_CAPACITY_AIR: Final[float] = 29.3  # J mol-1 K-1 (molar)
MOLAR_MASS_WATER: Final[float] = 18.015  # g/mol
KELVIN_OFFSET: Final[float] = 273.15

# Buck (1981) saturation vapour pressure
BUCK_A: Final[float] = 0.61365  # kPa
BUCK_B: Final[float] = 17.502
BUCK_C: Final[float] = 240.97  # °C

# Linear air-property fits, value = intercept + slope * T(°C)
LATENT_HEAT_FIT: Final[Tuple[float, float]] = (45064.3, -42.5)  # J/mol
PSYCHROMETRIC_FIT: Final[Tuple[float, float]] = (0.0646, 6.0e-5)  # kPa/K
KINEMATIC_VISCOSITY_FIT: Final[Tuple[float, float]] = (1.327e-5, 9.0e-8)  # m²/s
THERMAL_DIFFUSIVITY_FIT: Final[Tuple[float, float]] = (1.89e-5, 1.32e-7)  # m²/s
THERMAL_EXPANSION_FIT: Final[Tuple[float, float]] = (3.6568e-3, -1.1e-5)  # 1/K

# Light response
PPFD_PER_SHORTWAVE: Final[float] = 2.0  # µmol m-2 s-1 per W m-2

# Convection correlations, Nu = coefficient * number ** exponent
FORCED_LAMINAR: Final[Tuple[float, float]] = (0.60, 0.5)
FORCED_TURBULENT: Final[Tuple[float, float]] = (0.032, 0.8)
FREE_LAMINAR: Final[Tuple[float, float]] = (0.50, 0.25)
FREE_TURBULENT: Final[Tuple[float, float]] = (0.13, 0.33)

REYNOLDS_CRITICAL: Final[float] = 2.0e4
GRASHOF_CRITICAL: Final[float] = 1.0e5
RICHARDSON_FORCED_MAX: Final[float] = 0.1
RICHARDSON_FREE_MIN: Final[float] = 16.0
MIXED_BLEND_EXPONENT: Final[float] = 3.5

# Boundary layer
OUTDOOR_ENHANCEMENT: Final[float] = 1.4
HEAT_TO_VAPOUR_RESISTANCE: Final[float] = 0.93
LEAF_SIDES: Final[float] = 2.0

# Unit conversion factors
UNIT_CONVERSIONS: Final[dict] = {
    "mol_to_mmol": 1000.0,
    "seconds_per_hour": 3600.0,
    "mg_to_kg": 1.0e-6,
}
