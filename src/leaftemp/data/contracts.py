"""
Input contracts for the leaf energy balance.
Ensures weather drivers and leaf parameters are physically valid before solving.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class WeatherInput(BaseModel):
    """Micrometeorological drivers for one evaluation.

    Radiation fluxes are named by the direction the radiation travels:
    "up" is leaf-to-sky, "down" is sky-to-leaf. Numeric fields are strict:
    strings are rejected rather than coerced.
    """
    WS: float = Field(ge=0, description="Wind speed (m/s)")
    Tair: float = Field(ge=-90, le=70, description="Air temperature (°C), near-surface observed range")
    RH: float = Field(ge=0, le=100, description="Relative humidity (%)")
    LWRup: float = Field(ge=0, description="Upward longwave radiation (W/m²)")
    LWRdown: float = Field(ge=0, description="Downward longwave radiation (W/m²)")
    SWRup: float = Field(ge=0, description="Upward shortwave radiation (W/m²)")
    SWRdown: float = Field(ge=0, description="Downward shortwave radiation (W/m²)")

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False, strict=True)


class LeafParameters(BaseModel):
    """Leaf and soil parameters for a horizontal flat leaf"""
    drought: bool = Field(False, description="Force stomatal closure via psi_soil = psi_min")
    d: float = Field(0.05, gt=0, description="Characteristic leaf dimension (m)")
    emisleaf: float = Field(0.96, ge=0, le=1, description="Longwave emissivity")
    aLWR: float = Field(0.96, ge=0, le=1, description="Longwave absorptance")
    aSWR: float = Field(0.50, ge=0, le=1, description="Shortwave absorptance")
    gcuticular: float = Field(0.02, ge=0, description="Cuticular conductance (mol m-2 s-1)")
    psi_soil: float = Field(0.0, description="Soil water potential (MPa)")
    psi_min: float = Field(-1.5, description="Turgor loss point (MPa)")
    kplant: float = Field(10.0, ge=0, description="Plant hydraulic conductance (mmol m-2 s-1 MPa-1)")
    PPFDo: float = Field(10.0, ge=0, description="PPFD offset (µmol m-2 s-1)")
    Phi: float = Field(0.001, gt=0, description="Slope of the PPFD response")
    gswset: Optional[float] = Field(
        None, ge=0, description="Fixed stomatal conductance replacing the modelled one (mol m-2 s-1)"
    )

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False, strict=True)

    @property
    def effective_psi_soil(self) -> float:
        """Soil water potential after applying the drought flag"""
        if self.drought:
            return min(self.psi_soil, self.psi_min)
        return self.psi_soil
