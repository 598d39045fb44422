"""
Surface conductance to water vapour from soil water status and light.

Stomatal conductance follows a hydraulic supply limit: the soil-to-turgor-loss
water potential difference drives flow through the plant, reduced by a
light-response term and by the evaporative demand (VPD). The hydraulic
expression carries the units of kplant (mmol m-2 s-1) and is converted to
mol m-2 s-1 before cuticular conductance is added in parallel.
"""
import logging
import math
from typing import Optional

from leaftemp.core.constants import PPFD_PER_SHORTWAVE, UNIT_CONVERSIONS
from leaftemp.core.exceptions import DegenerateConductanceError, ErrorContext
from leaftemp.core.types import StomatalState
from leaftemp.data.contracts import LeafParameters

logger = logging.getLogger(__name__)


def shortwave_to_ppfd(swr_down: float) -> float:
    """Approximate PPFD (µmol m-2 s-1) from downwelling shortwave (W/m²)"""
    return PPFD_PER_SHORTWAVE * swr_down


def light_response(ppfd: float, phi: float, ppfd_offset: float) -> float:
    """
    Light-response term of the stomatal model.

        b = (1 + Φ·PPFD) / (Φ·(PPFD + PPFDo))
    """
    if ppfd + ppfd_offset <= 0:
        return float("inf")
    return (1.0 + phi * ppfd) / (phi * (ppfd + ppfd_offset))


def stomatal_conductance(
    vpd: float,
    psi_soil: float,
    psi_min: float,
    kplant: float,
    b: float
) -> float:
    """
    Stomatal conductance to water vapour in mmol m-2 s-1, clamped at zero.

        gsw = max(kplant (psi_soil - psi_min) / (kplant b + VPD), 0)

    Zero whenever psi_soil <= psi_min (full closure).
    """
    if kplant == 0 or math.isinf(b):
        return 0.0
    denominator = kplant * b + vpd
    if denominator <= 0:
        return 0.0
    return max(kplant * (psi_soil - psi_min) / denominator, 0.0)


def surface_conductance(
    vpd: float,
    swr_down: float,
    params: LeafParameters,
    rstconv: float,
    psi_soil: Optional[float] = None,
) -> StomatalState:
    """
    Total surface conductance and resistance at a given VPD.

    Args:
        vpd: Leaf-to-air vapour pressure deficit (mmol/mol)
        swr_down: Downwelling shortwave radiation (W/m²)
        params: Leaf parameters
        rstconv: Conductance-to-resistance factor (mol/m³)
        psi_soil: Effective soil water potential; defaults to the
            drought-adjusted value from ``params``

    Returns:
        StomatalState with gsw, gtw and rsurface

    Raises:
        DegenerateConductanceError: if total surface conductance is not positive
    """
    if psi_soil is None:
        psi_soil = params.effective_psi_soil

    ppfd = shortwave_to_ppfd(swr_down)
    b = light_response(ppfd, params.Phi, params.PPFDo)

    gsw = stomatal_conductance(vpd, psi_soil, params.psi_min, params.kplant, b)
    gsw /= UNIT_CONVERSIONS["mol_to_mmol"]
    if gsw == 0.0 and params.gswset is None:
        logger.debug(f"Stomata closed (psi_soil={psi_soil}, VPD={vpd:.2f}); cuticular conductance only")
    stomatal_term = params.gswset if params.gswset is not None else gsw
    gtw = params.gcuticular + stomatal_term

    if gtw <= 0:
        raise DegenerateConductanceError(
            "Total surface conductance is zero; surface resistance is undefined",
            context=ErrorContext(
                component="stomatal",
                operation="surface_conductance",
                details={"gcuticular": params.gcuticular, "gsw": stomatal_term},
            ),
        )

    return StomatalState(
        PPFD=ppfd,
        b=b,
        gsw=stomatal_term,
        gtw=gtw,
        rsurface=rstconv / gtw,
    )
