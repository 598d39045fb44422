"""
Psychrometric relations and temperature-dependent air properties.

Vapour pressures are expressed as mole fractions (mmol/mol) at the fixed
atmospheric pressure. Air properties are linear fits in temperature and are
evaluated at the mean of leaf and air temperature.

References:
- Buck, A.L. (1981) New equations for computing vapor pressure and
  enhancement factor. Journal of Applied Meteorology, 20:1527-1532.
- Campbell, G.S. and Norman, J.M. (1998) An Introduction to Environmental
  Biophysics, 2nd ed. Springer.
"""
import numpy as np
from dataclasses import dataclass

from leaftemp.core.constants import (
    ATMOSPHERIC_PRESSURE_KPA, GAS_CONSTANT_KPA, HEAT_CAPACITY_AIR, KELVIN_OFFSET,
    BUCK_A, BUCK_B, BUCK_C,
    LATENT_HEAT_FIT, PSYCHROMETRIC_FIT, KINEMATIC_VISCOSITY_FIT,
    THERMAL_DIFFUSIVITY_FIT, THERMAL_EXPANSION_FIT,
)


def _linear(fit, temperature_c: float) -> float:
    intercept, slope = fit
    return intercept + slope * temperature_c


def saturation_vapor_pressure_kpa(temperature_c: float) -> float:
    """
    Saturation vapour pressure over water (Buck 1981).

        e_sat = 0.61365 × exp(17.502 T / (240.97 + T))

    Args:
        temperature_c: Temperature (°C)

    Returns:
        Saturation vapour pressure (kPa)
    """
    return BUCK_A * np.exp(BUCK_B * temperature_c / (BUCK_C + temperature_c))


def kpa_to_mole_fraction(pressure_kpa: float) -> float:
    """Partial pressure (kPa) to mole fraction (mmol/mol)"""
    return pressure_kpa * 1000.0 / ATMOSPHERIC_PRESSURE_KPA


def mole_fraction_to_kpa(mole_fraction: float) -> float:
    """Mole fraction (mmol/mol) to partial pressure (kPa)"""
    return mole_fraction * ATMOSPHERIC_PRESSURE_KPA / 1000.0


def saturation_vapor_pressure(temperature_c: float) -> float:
    """Saturation vapour pressure as a mole fraction (mmol/mol)"""
    return float(kpa_to_mole_fraction(saturation_vapor_pressure_kpa(temperature_c)))


def actual_vapor_pressure(air_temperature_c: float, relative_humidity: float) -> float:
    """
    Actual vapour pressure of the air.

        ea = e_sat(Tair) × RH / 100

    Args:
        air_temperature_c: Air temperature (°C)
        relative_humidity: Relative humidity (%)

    Returns:
        Vapour pressure (mmol/mol)
    """
    return saturation_vapor_pressure(air_temperature_c) * relative_humidity / 100.0


def vapor_pressure_deficit(leaf_temperature_c: float, ea: float) -> float:
    """
    Leaf-to-air vapour pressure deficit (mmol/mol).

    The leaf interior is taken as saturated at leaf temperature and compared
    with the bulk air, not with the leaf surface.
    """
    return saturation_vapor_pressure(leaf_temperature_c) - ea


def resistance_conversion_factor(air_temperature_c: float) -> float:
    """
    Molar density of air, P / (R T), in mol/m³.

    Divides a conductance in mol m-2 s-1 to give a resistance in s/m.
    """
    return ATMOSPHERIC_PRESSURE_KPA / (GAS_CONSTANT_KPA * (air_temperature_c + KELVIN_OFFSET))


@dataclass(frozen=True)
class AirProperties:
    """Air properties at the leaf-air mean temperature"""
    temperature_c: float
    latent_heat: float  # J/mol
    psychrometric_constant: float  # kPa/K
    kinematic_viscosity: float  # m²/s
    density: float  # mol/m³
    thermal_diffusivity: float  # m²/s
    thermal_expansion: float  # 1/K
    heat_capacity: float = HEAT_CAPACITY_AIR  # J mol-1 K-1

    @property
    def volumetric_heat_capacity(self) -> float:
        """ρ·Cp (J m-3 K-1)"""
        return self.density * self.heat_capacity


def air_properties(leaf_temperature_c: float, air_temperature_c: float) -> AirProperties:
    """Evaluate air properties at the mean of leaf and air temperature"""
    t_mean = 0.5 * (leaf_temperature_c + air_temperature_c)

    return AirProperties(
        temperature_c=t_mean,
        latent_heat=_linear(LATENT_HEAT_FIT, t_mean),
        psychrometric_constant=_linear(PSYCHROMETRIC_FIT, t_mean),
        kinematic_viscosity=_linear(KINEMATIC_VISCOSITY_FIT, t_mean),
        density=ATMOSPHERIC_PRESSURE_KPA / (GAS_CONSTANT_KPA * (t_mean + KELVIN_OFFSET)),
        thermal_diffusivity=_linear(THERMAL_DIFFUSIVITY_FIT, t_mean),
        thermal_expansion=_linear(THERMAL_EXPANSION_FIT, t_mean),
    )
