"""Physics modules for leaf temperature prediction."""
from leaftemp.physics.leaf_temperature import (
    evaluate,
    evaluate_weather,
    assemble_result,
)
from leaftemp.physics.energy_balance import (
    resolve_inputs,
    evaluate_energy_balance,
    energy_balance_residual,
)
from leaftemp.physics.solver import solve_leaf_temperature

__all__ = [
    "evaluate",
    "evaluate_weather",
    "assemble_result",
    # Energy balance
    "resolve_inputs",
    "evaluate_energy_balance",
    "energy_balance_residual",
    # Solver
    "solve_leaf_temperature",
]
