"""
Boundary-layer heat exchange for a horizontal flat leaf.

The convective regime is chosen from the Richardson number Ri = Gr / Re²:

- Ri <= 0.1: forced convection, Nu from the laminar or turbulent forced
  correlation selected by Re
- Ri >= 16: free convection, Nu from the laminar or turbulent free
  correlation selected by Gr
- otherwise mixed: the forced laminar and turbulent numbers are combined in
  quadrature and blended with the free number,
  Nu = (Nu_free^3.5 + Nu_forced^3.5)^(1/3.5)

References:
- Campbell, G.S. and Norman, J.M. (1998) An Introduction to Environmental
  Biophysics, 2nd ed. Springer, Ch. 7.
- Nobel, P.S. (2009) Physicochemical and Environmental Plant Physiology,
  4th ed. Academic Press, Ch. 7.
"""
import logging
from typing import Tuple

from leaftemp.core.constants import (
    GRAVITY, LEAF_SIDES, OUTDOOR_ENHANCEMENT,
    FORCED_LAMINAR, FORCED_TURBULENT, FREE_LAMINAR, FREE_TURBULENT,
    REYNOLDS_CRITICAL, GRASHOF_CRITICAL,
    RICHARDSON_FORCED_MAX, RICHARDSON_FREE_MIN, MIXED_BLEND_EXPONENT,
)
from leaftemp.core.types import ConvectionRegime, ConvectionState
from leaftemp.physics.psychrometrics import AirProperties

logger = logging.getLogger(__name__)


def _correlation(coefficients: Tuple[float, float], number: float) -> float:
    coefficient, exponent = coefficients
    return coefficient * number ** exponent


def reynolds_number(wind_speed: float, d: float, nu: float) -> float:
    """Re = u d / ν"""
    return wind_speed * d / nu


def grashof_number(
    leaf_temperature_c: float,
    air_temperature_c: float,
    d: float,
    nu: float,
    alpha: float
) -> float:
    """Gr = α g d³ (Tleaf - Tair) / ν², negative for a leaf colder than air"""
    return alpha * GRAVITY * d ** 3 * (leaf_temperature_c - air_temperature_c) / nu ** 2


def forced_nusselt(re: float) -> Tuple[float, float, float]:
    """
    Forced-convection Nusselt numbers.

    Returns:
        Tuple of (selected Nu, laminar Nu, turbulent Nu); laminar is
        selected for Re <= 2e4
    """
    laminar = _correlation(FORCED_LAMINAR, re)
    turbulent = _correlation(FORCED_TURBULENT, re)
    selected = laminar if re <= REYNOLDS_CRITICAL else turbulent
    return selected, laminar, turbulent


def free_nusselt(gr: float) -> float:
    """
    Free-convection Nusselt number, laminar for Gr <= 1e5.

    Uses |Gr| so the correlation stays real when the leaf is colder than air.
    """
    gr = abs(gr)
    if gr <= GRASHOF_CRITICAL:
        return _correlation(FREE_LAMINAR, gr)
    return _correlation(FREE_TURBULENT, gr)


def nusselt_number(re: float, gr: float) -> Tuple[float, float, float, float, ConvectionRegime]:
    """
    Select the convective regime and compute the effective Nusselt number.

    Args:
        re: Reynolds number (> 0)
        gr: Grashof number (signed)

    Returns:
        Tuple of (Nu, Nu_forced, Nu_free, Ri, regime)
    """
    ri = gr / re ** 2
    nu_forced, nu_laminar, nu_turbulent = forced_nusselt(re)
    nu_free = free_nusselt(gr)

    if ri <= RICHARDSON_FORCED_MAX:
        return nu_forced, nu_forced, nu_free, ri, ConvectionRegime.FORCED

    if ri >= RICHARDSON_FREE_MIN:
        return nu_free, nu_forced, nu_free, ri, ConvectionRegime.FREE

    nu_forced_mixed = (nu_laminar ** 2 + nu_turbulent ** 2) ** 0.5
    nu = (nu_free ** MIXED_BLEND_EXPONENT + nu_forced_mixed ** MIXED_BLEND_EXPONENT) ** (
        1.0 / MIXED_BLEND_EXPONENT
    )
    return nu, nu_forced_mixed, nu_free, ri, ConvectionRegime.MIXED


def boundary_layer_resistance(d: float, thermal_diffusivity: float, nu: float) -> float:
    """rblH = d / (1.4 K Nu), in s/m"""
    return d / (OUTDOOR_ENHANCEMENT * thermal_diffusivity * nu)


def sensible_heat_flux(
    leaf_temperature_c: float,
    air_temperature_c: float,
    volumetric_heat_capacity: float,
    rblH: float
) -> float:
    """H = 2 ρ Cp (Tleaf - Tair) / rblH, both leaf faces"""
    return LEAF_SIDES * volumetric_heat_capacity * (leaf_temperature_c - air_temperature_c) / rblH


def boundary_layer_exchange(
    leaf_temperature_c: float,
    air_temperature_c: float,
    wind_speed: float,
    d: float,
    air: AirProperties,
    min_wind_speed: float = 0.001
) -> ConvectionState:
    """
    Convective heat exchange between the leaf and the surrounding air.

    Args:
        leaf_temperature_c: Candidate leaf temperature (°C)
        air_temperature_c: Air temperature (°C)
        wind_speed: Wind speed (m/s); floored at ``min_wind_speed``
        d: Characteristic leaf dimension (m)
        air: Air properties at the leaf-air mean temperature
        min_wind_speed: Wind speed floor (m/s)

    Returns:
        ConvectionState with dimensionless numbers, rblH and H
    """
    wind_speed = max(wind_speed, min_wind_speed)

    re = reynolds_number(wind_speed, d, air.kinematic_viscosity)
    gr = grashof_number(
        leaf_temperature_c, air_temperature_c, d,
        air.kinematic_viscosity, air.thermal_expansion
    )
    nu, nu_forced, nu_free, ri, regime = nusselt_number(re, gr)
    logger.debug(f"Convection {regime.value}: Re={re:.1f}, Gr={gr:.1f}, Ri={ri:.4f}, Nu={nu:.3f}")

    rblH = boundary_layer_resistance(d, air.thermal_diffusivity, nu)
    H = sensible_heat_flux(
        leaf_temperature_c, air_temperature_c, air.volumetric_heat_capacity, rblH
    )

    return ConvectionState(
        Re=re,
        Gr=gr,
        Ri=ri,
        Nu_forced=nu_forced,
        Nu_free=nu_free,
        Nu=nu,
        regime=regime,
        rblH=rblH,
        H=H,
    )
