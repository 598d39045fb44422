"""
Leaf energy balance at a candidate leaf temperature.

    gains  = aSWR (SWRup + SWRdown) + aLWR (LWRup + LWRdown)
    losses = LE + H + LWRout

The solver drives the squared imbalance (losses - gains)² to zero. Gains do
not depend on leaf temperature and are resolved once per call together with
the other temperature-independent quantities (see ``resolve_inputs``).
"""
import logging
from typing import Optional, Tuple

from leaftemp.core.config import SolverConfig
from leaftemp.core.constants import (
    STEFAN_BOLTZMANN, KELVIN_OFFSET, LEAF_SIDES, HEAT_TO_VAPOUR_RESISTANCE,
    MOLAR_MASS_WATER, UNIT_CONVERSIONS,
)
from leaftemp.core.types import EnergyBalanceState, ResolvedInputs
from leaftemp.data.contracts import LeafParameters, WeatherInput
from leaftemp.physics import psychrometrics
from leaftemp.physics.convection import boundary_layer_exchange
from leaftemp.physics.stomatal import surface_conductance

logger = logging.getLogger(__name__)


def absorbed_radiation(weather: WeatherInput, params: LeafParameters) -> float:
    """Radiation absorbed by both leaf faces (W/m²)"""
    shortwave = params.aSWR * (weather.SWRup + weather.SWRdown)
    longwave = params.aLWR * (weather.LWRup + weather.LWRdown)
    return shortwave + longwave


def emitted_longwave(leaf_temperature_c: float, emissivity: float) -> float:
    """LWRout = 2 ε σ (Tleaf + 273.15)⁴, both leaf faces"""
    return LEAF_SIDES * emissivity * STEFAN_BOLTZMANN * (leaf_temperature_c + KELVIN_OFFSET) ** 4


def transpiration_rates(latent_heat_flux: float, latent_heat: float) -> Tuple[float, float]:
    """
    Convert LE to transpiration.

    Args:
        latent_heat_flux: LE (W/m²)
        latent_heat: Latent heat of vaporisation (J/mol)

    Returns:
        Tuple of (Emmols in mmol m-2 s-1, Emmhr in mm/hr)
    """
    emmols = latent_heat_flux / latent_heat * UNIT_CONVERSIONS["mol_to_mmol"]
    # mmol m-2 s-1 -> mg m-2 s-1 -> kg m-2 hr-1, and 1 kg m-2 of water is 1 mm
    emmhr = (
        emmols * MOLAR_MASS_WATER
        * UNIT_CONVERSIONS["seconds_per_hour"]
        * UNIT_CONVERSIONS["mg_to_kg"]
    )
    return emmols, emmhr


def resolve_inputs(
    weather: WeatherInput,
    params: LeafParameters,
    solver: Optional[SolverConfig] = None
) -> ResolvedInputs:
    """Build the per-call record the residual and the solver read from"""
    solver = solver or SolverConfig()

    if weather.WS < solver.min_wind_speed_m_s:
        logger.info(
            f"Wind speed {weather.WS} m/s below floor, using {solver.min_wind_speed_m_s} m/s"
        )
    if params.drought and params.psi_soil > params.psi_min:
        logger.debug(f"Drought: psi_soil {params.psi_soil} -> psi_min {params.psi_min} MPa")

    esat_air = psychrometrics.saturation_vapor_pressure(weather.Tair)

    return ResolvedInputs(
        weather=weather,
        params=params,
        psi_soil=params.effective_psi_soil,
        wind_speed=max(weather.WS, solver.min_wind_speed_m_s),
        min_wind_speed=solver.min_wind_speed_m_s,
        gains=absorbed_radiation(weather, params),
        esat_air=esat_air,
        ea=psychrometrics.actual_vapor_pressure(weather.Tair, weather.RH),
        rstconv=psychrometrics.resistance_conversion_factor(weather.Tair),
    )


def evaluate_energy_balance(leaf_temperature_c: float, resolved: ResolvedInputs) -> EnergyBalanceState:
    """
    Evaluate every energy balance term at a candidate leaf temperature.

    Args:
        leaf_temperature_c: Candidate leaf temperature (°C)
        resolved: Per-call inputs from ``resolve_inputs``

    Returns:
        EnergyBalanceState with fluxes, resistances and diagnostics

    Raises:
        DegenerateConductanceError: if total surface conductance is zero
    """
    weather = resolved.weather
    params = resolved.params
    air = psychrometrics.air_properties(leaf_temperature_c, weather.Tair)

    eleaf = psychrometrics.saturation_vapor_pressure(leaf_temperature_c)
    vpd = psychrometrics.vapor_pressure_deficit(leaf_temperature_c, resolved.ea)

    stomatal = surface_conductance(
        vpd, weather.SWRdown, params, resolved.rstconv, psi_soil=resolved.psi_soil
    )
    convection = boundary_layer_exchange(
        leaf_temperature_c, weather.Tair, resolved.wind_speed, params.d, air,
        min_wind_speed=resolved.min_wind_speed,
    )

    rtotal = stomatal.rsurface + convection.rblH / HEAT_TO_VAPOUR_RESISTANCE
    vpd_kpa = psychrometrics.mole_fraction_to_kpa(vpd)
    LE = air.volumetric_heat_capacity / air.psychrometric_constant * vpd_kpa / rtotal
    emmols, emmhr = transpiration_rates(LE, air.latent_heat)

    LWRout = emitted_longwave(leaf_temperature_c, params.emisleaf)
    losses = LE + convection.H + LWRout

    return EnergyBalanceState(
        Tleaf=leaf_temperature_c,
        eleaf=eleaf,
        VPD=vpd,
        stomatal=stomatal,
        convection=convection,
        rtotal=rtotal,
        gains=resolved.gains,
        LE=LE,
        H=convection.H,
        LWRout=LWRout,
        Emmols=emmols,
        Emmhr=emmhr,
        losses=losses,
    )


def energy_balance_residual(leaf_temperature_c: float, resolved: ResolvedInputs) -> float:
    """Squared energy imbalance (losses - gains)², the solver objective"""
    return evaluate_energy_balance(leaf_temperature_c, resolved).residual
