"""
Bounded one-dimensional solver for the steady-state leaf temperature.

Minimises the squared energy imbalance over leaf temperature with a
bound-constrained quasi-Newton method (L-BFGS-B by default), starting from
air temperature. A single attempt is made per call; when the optimizer
stops without converging, the best temperature found is still returned and
flagged.
"""
import logging
from typing import Optional

import numpy as np
from scipy.optimize import minimize

from leaftemp.core.config import SolverConfig
from leaftemp.core.types import ResolvedInputs, SolverOutcome, SolverStatus
from leaftemp.physics.energy_balance import energy_balance_residual, evaluate_energy_balance

logger = logging.getLogger(__name__)


def solve_leaf_temperature(
    resolved: ResolvedInputs,
    config: Optional[SolverConfig] = None
) -> SolverOutcome:
    """
    Find the leaf temperature at which the energy balance closes.

    The outcome is CONVERGED when the absolute imbalance at the accepted
    temperature is within ``config.balance_tolerance_w_m2``. L-BFGS-B can
    stop with a line-search failure once the squared residual reaches
    machine zero, so the optimizer status alone does not decide the flag.

    Args:
        resolved: Per-call inputs from ``resolve_inputs``
        config: Solver settings

    Returns:
        SolverOutcome with the accepted leaf temperature and status
    """
    config = config or SolverConfig()
    bounds = [(config.lower_bound_c, config.upper_bound_c)]
    x0 = np.clip([resolved.weather.Tair], config.lower_bound_c, config.upper_bound_c)

    def obj_fn(x: np.ndarray) -> float:
        return float(energy_balance_residual(float(x[0]), resolved))

    result = minimize(
        obj_fn,
        x0=x0,
        method=config.method,
        jac=config.jac,
        bounds=bounds,
        options={
            "maxiter": config.max_iterations,
            "ftol": config.ftol,
            "gtol": config.gtol,
        },
    )

    t_leaf = float(result.x[0])
    imbalance = evaluate_energy_balance(t_leaf, resolved).imbalance
    balanced = abs(imbalance) <= config.balance_tolerance_w_m2

    if balanced:
        status = SolverStatus.CONVERGED
        if not result.success:
            logger.debug(f"Optimizer stopped with a closed balance: {result.message}")
    else:
        status = SolverStatus.NOT_CONVERGED
        logger.warning(
            f"Leaf temperature did not converge (Tleaf={t_leaf:.4f} °C, "
            f"imbalance={imbalance:.3e} W/m²): {result.message}"
        )

    logger.debug(
        f"Solver finished after {result.nit} iterations, "
        f"{result.nfev} evaluations: Tleaf={t_leaf:.4f} °C"
    )

    return SolverOutcome(
        Tleaf=t_leaf,
        status=status,
        iterations=int(result.nit),
        n_evaluations=int(result.nfev),
        message=str(result.message),
    )
