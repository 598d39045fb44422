"""
Type definitions and records for the leaftemp package.
Provides strong typing throughout the codebase.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional
from typing_extensions import TypeAlias
import pandas as pd

from leaftemp.data.contracts import WeatherInput, LeafParameters


# Type aliases for clarity
TemperatureC: TypeAlias = float
FluxWm2: TypeAlias = float
ResistanceSm: TypeAlias = float  # s/m
ConductanceMol: TypeAlias = float  # mol m-2 s-1
MoleFraction: TypeAlias = float  # mmol/mol


class ConvectionRegime(str, Enum):
    """Convective heat exchange regime selected by the Richardson number"""
    FORCED = "forced"
    MIXED = "mixed"
    FREE = "free"


class SolverStatus(int, Enum):
    """Convergence flag reported with every result"""
    CONVERGED = 0
    NOT_CONVERGED = 1


@dataclass(frozen=True)
class ResolvedInputs:
    """
    Everything one evaluation needs, resolved once per call.

    Holds the validated drivers and parameters together with the quantities
    that do not depend on leaf temperature, so the residual can be evaluated
    repeatedly without recomputing them.
    """
    weather: WeatherInput
    params: LeafParameters
    psi_soil: float  # effective, after the drought flag
    wind_speed: float  # floored
    min_wind_speed: float
    gains: FluxWm2
    esat_air: MoleFraction
    ea: MoleFraction
    rstconv: float  # mol/m³, conductance to resistance factor


@dataclass(frozen=True)
class StomatalState:
    """Surface conductance and resistance at one VPD"""
    PPFD: float
    b: float
    gsw: ConductanceMol
    gtw: ConductanceMol
    rsurface: ResistanceSm


@dataclass(frozen=True)
class ConvectionState:
    """Boundary-layer heat exchange at one leaf temperature"""
    Re: float
    Gr: float
    Ri: float
    Nu_forced: float
    Nu_free: float
    Nu: float
    regime: ConvectionRegime
    rblH: ResistanceSm
    H: FluxWm2


@dataclass(frozen=True)
class EnergyBalanceState:
    """Energy balance terms and diagnostics at one candidate leaf temperature"""
    Tleaf: TemperatureC
    eleaf: MoleFraction
    VPD: MoleFraction
    stomatal: StomatalState
    convection: ConvectionState
    rtotal: ResistanceSm
    gains: FluxWm2
    LE: FluxWm2
    H: FluxWm2
    LWRout: FluxWm2
    Emmols: float  # mmol m-2 s-1
    Emmhr: float  # mm/hr
    losses: FluxWm2

    @property
    def imbalance(self) -> FluxWm2:
        """Signed energy imbalance, losses minus gains"""
        return self.losses - self.gains

    @property
    def residual(self) -> float:
        """Squared imbalance minimised by the solver"""
        return self.imbalance ** 2


@dataclass(frozen=True)
class SolverOutcome:
    """Accepted leaf temperature and convergence information"""
    Tleaf: TemperatureC
    status: SolverStatus
    iterations: int
    n_evaluations: int
    message: str


@dataclass(frozen=True)
class LeafTemperatureResult:
    """Solved leaf temperature with every input and diagnostic at the solution"""
    # Solution
    Tleaf: TemperatureC
    flag: int

    # Energy balance
    gains: FluxWm2
    losses: FluxWm2
    LE: FluxWm2
    H: FluxWm2
    LWRout: FluxWm2
    imbalance: FluxWm2
    residual: float

    # Transpiration
    Emmols: float
    Emmhr: float

    # Psychrometrics
    eleaf: MoleFraction
    esatTair: MoleFraction
    ea: MoleFraction
    VPD: MoleFraction

    # Weather
    WS: float
    Tair: TemperatureC
    RH: float
    LWRup: FluxWm2
    LWRdown: FluxWm2
    SWRup: FluxWm2
    SWRdown: FluxWm2

    # Leaf and soil parameters
    drought: bool
    d: float
    emisleaf: float
    aLWR: float
    aSWR: float
    gcuticular: ConductanceMol
    psi_soil: float
    psi_min: float
    kplant: float
    PPFDo: float
    Phi: float
    gswset: Optional[ConductanceMol]

    # Resistances and conductances
    rsurface: ResistanceSm
    gsurface: ConductanceMol
    gsw: ConductanceMol
    gtw: ConductanceMol
    rblH: ResistanceSm
    rtotal: ResistanceSm

    # Convection
    Nu: float
    Re: float
    Gr: float
    Ri: float
    regime: ConvectionRegime

    # Solver
    iterations: int = 0
    message: str = ""

    @property
    def converged(self) -> bool:
        return self.flag == SolverStatus.CONVERGED

    @property
    def delta_t(self) -> float:
        """Leaf-to-air temperature difference (K)"""
        return self.Tleaf - self.Tair

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["regime"] = self.regime.value
        return out

    def to_series(self) -> pd.Series:
        """Flat pandas record, convenient for building result tables"""
        return pd.Series(self.to_dict())
