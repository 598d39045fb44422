"""
Steady-state leaf temperature and transpiration from micrometeorological drivers.

Entry points:
- ``evaluate``: scalar drivers and keyword leaf parameters
- ``evaluate_weather``: validated ``WeatherInput`` / ``LeafParameters`` objects

Each call is self-contained: inputs are validated, resolved into a per-call
record, solved, and every diagnostic is re-evaluated once at the accepted
temperature. Nothing is shared between calls, so independent weather records
can be evaluated concurrently.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from leaftemp.core.config import LeafTempConfig, get_config
from leaftemp.core.exceptions import ConvergenceError, ErrorContext, handle_exception
from leaftemp.core.types import (
    EnergyBalanceState, LeafTemperatureResult, ResolvedInputs, SolverOutcome, SolverStatus
)
from leaftemp.data.contracts import LeafParameters, WeatherInput
from leaftemp.physics.energy_balance import evaluate_energy_balance, resolve_inputs
from leaftemp.physics.solver import solve_leaf_temperature

logger = logging.getLogger(__name__)


def assemble_result(
    outcome: SolverOutcome,
    resolved: ResolvedInputs,
    state: Optional[EnergyBalanceState] = None
) -> LeafTemperatureResult:
    """Package inputs, parameters and diagnostics at the accepted leaf temperature"""
    if state is None:
        state = evaluate_energy_balance(outcome.Tleaf, resolved)

    weather = resolved.weather
    params = resolved.params
    stomatal = state.stomatal
    convection = state.convection

    return LeafTemperatureResult(
        Tleaf=outcome.Tleaf,
        flag=int(outcome.status),
        gains=state.gains,
        losses=state.losses,
        LE=state.LE,
        H=state.H,
        LWRout=state.LWRout,
        imbalance=state.imbalance,
        residual=state.residual,
        Emmols=state.Emmols,
        Emmhr=state.Emmhr,
        eleaf=state.eleaf,
        esatTair=resolved.esat_air,
        ea=resolved.ea,
        VPD=state.VPD,
        WS=weather.WS,
        Tair=weather.Tair,
        RH=weather.RH,
        LWRup=weather.LWRup,
        LWRdown=weather.LWRdown,
        SWRup=weather.SWRup,
        SWRdown=weather.SWRdown,
        drought=params.drought,
        d=params.d,
        emisleaf=params.emisleaf,
        aLWR=params.aLWR,
        aSWR=params.aSWR,
        gcuticular=params.gcuticular,
        psi_soil=resolved.psi_soil,
        psi_min=params.psi_min,
        kplant=params.kplant,
        PPFDo=params.PPFDo,
        Phi=params.Phi,
        gswset=params.gswset,
        rsurface=stomatal.rsurface,
        gsurface=resolved.rstconv / stomatal.rsurface,
        gsw=stomatal.gsw,
        gtw=stomatal.gtw,
        rblH=convection.rblH,
        rtotal=state.rtotal,
        Nu=convection.Nu,
        Re=convection.Re,
        Gr=convection.Gr,
        Ri=convection.Ri,
        regime=convection.regime,
        iterations=outcome.iterations,
        message=outcome.message,
    )


def evaluate_weather(
    weather: WeatherInput,
    params: Optional[LeafParameters] = None,
    config: Optional[LeafTempConfig] = None,
    strict: bool = False
) -> LeafTemperatureResult:
    """
    Solve the leaf energy balance for one weather record.

    Args:
        weather: Micrometeorological drivers
        params: Leaf parameters (defaults if None)
        config: Configuration (global configuration if None)
        strict: Raise ConvergenceError instead of returning flag = 1

    Returns:
        LeafTemperatureResult at the accepted leaf temperature

    Raises:
        DegenerateConductanceError: if total surface conductance is zero
        PhysicsModelError: on floating-point overflow inside the model
        ConvergenceError: if ``strict`` and the solver did not converge
    """
    params = params or LeafParameters()
    config = config or get_config()

    try:
        resolved = resolve_inputs(weather, params, config.solver)
        outcome = solve_leaf_temperature(resolved, config.solver)
    except ArithmeticError as e:
        raise handle_exception(
            e, ErrorContext(component="solver", operation="evaluate_weather")
        ) from e
    result = assemble_result(outcome, resolved)

    if strict and outcome.status != SolverStatus.CONVERGED:
        raise ConvergenceError(
            f"No energy balance closure: {outcome.message}",
            context=ErrorContext(
                component="solver",
                operation="evaluate",
                leaf_temperature_c=outcome.Tleaf,
                details={"imbalance": result.imbalance},
            ),
        )

    return result


def evaluate(
    WS: float,
    Tair: float,
    RH: float,
    LWRup: float,
    LWRdown: float,
    SWRup: float,
    SWRdown: float,
    drought: bool = False,
    d: float = 0.05,
    emisleaf: float = 0.96,
    aLWR: float = 0.96,
    aSWR: float = 0.50,
    gcuticular: float = 0.02,
    psi_soil: float = 0.0,
    psi_min: float = -1.5,
    kplant: float = 10.0,
    PPFDo: float = 10.0,
    Phi: float = 0.001,
    gswset: Optional[float] = None,
    config: Optional[LeafTempConfig] = None,
    strict: bool = False
) -> LeafTemperatureResult:
    """
    Predict steady-state leaf temperature and transpiration.

    Args:
        WS: Wind speed (m/s)
        Tair: Air temperature (°C)
        RH: Relative humidity (%)
        LWRup, LWRdown: Longwave radiation travelling up / down (W/m²)
        SWRup, SWRdown: Shortwave radiation travelling up / down (W/m²)
        drought: Force psi_soil down to psi_min
        d: Characteristic leaf dimension (m)
        emisleaf: Leaf longwave emissivity
        aLWR, aSWR: Longwave / shortwave absorptance
        gcuticular: Cuticular conductance (mol m-2 s-1)
        psi_soil: Soil water potential (MPa)
        psi_min: Turgor loss point (MPa)
        kplant: Plant hydraulic conductance (mmol m-2 s-1 MPa-1)
        PPFDo: PPFD offset of the light response
        Phi: Slope of the light response
        gswset: Fixed stomatal conductance replacing the modelled one
        config: Configuration (global configuration if None)
        strict: Raise ConvergenceError instead of returning flag = 1

    Returns:
        LeafTemperatureResult

    Raises:
        InvalidInputError: if any driver or parameter is invalid
        DegenerateConductanceError: if total surface conductance is zero
    """
    try:
        weather = WeatherInput(
            WS=WS, Tair=Tair, RH=RH,
            LWRup=LWRup, LWRdown=LWRdown, SWRup=SWRup, SWRdown=SWRdown,
        )
        params = LeafParameters(
            drought=drought, d=d, emisleaf=emisleaf, aLWR=aLWR, aSWR=aSWR,
            gcuticular=gcuticular, psi_soil=psi_soil, psi_min=psi_min,
            kplant=kplant, PPFDo=PPFDo, Phi=Phi, gswset=gswset,
        )
    except ValidationError as e:
        raise handle_exception(e, ErrorContext(component="contracts", operation="evaluate")) from e

    return evaluate_weather(weather, params, config=config, strict=strict)
