"""
Tests for the convergence flag of the leaf temperature solver.
"""
import numpy as np
import pytest
from scipy.optimize import OptimizeResult

from leaftemp.core.types import SolverStatus
from leaftemp.data.contracts import LeafParameters, WeatherInput
from leaftemp.physics import solver
from leaftemp.physics.energy_balance import resolve_inputs


@pytest.fixture
def resolved():
    weather = WeatherInput(
        WS=0.25, Tair=40.0, RH=20.0,
        LWRup=400.0, LWRdown=300.0, SWRup=300.0, SWRdown=1000.0,
    )
    return resolve_inputs(weather, LeafParameters(drought=True))


@pytest.fixture
def root(resolved):
    outcome = solver.solve_leaf_temperature(resolved)
    assert outcome.status == SolverStatus.CONVERGED
    return outcome.Tleaf


def fake_minimize(tleaf, success, message):
    def minimize(fun, x0, **kwargs):
        return OptimizeResult(
            x=np.array([tleaf]), success=success, message=message, nit=7, nfev=30
        )
    return minimize


class TestConvergenceFlag:

    def test_line_search_stop_with_closed_balance(self, monkeypatch, resolved, root):
        monkeypatch.setattr(solver, "minimize", fake_minimize(root, False, "ABNORMAL: "))
        outcome = solver.solve_leaf_temperature(resolved)
        assert outcome.status == SolverStatus.CONVERGED
        assert outcome.Tleaf == root
        assert outcome.message == "ABNORMAL: "

    def test_reported_success_with_open_balance(self, monkeypatch, resolved, root):
        monkeypatch.setattr(solver, "minimize", fake_minimize(root - 2.0, True, "CONVERGENCE"))
        outcome = solver.solve_leaf_temperature(resolved)
        assert outcome.status == SolverStatus.NOT_CONVERGED
        assert outcome.Tleaf == pytest.approx(root - 2.0)
        assert outcome.iterations == 7
        assert outcome.n_evaluations == 30

    def test_starts_from_clipped_air_temperature(self, monkeypatch, resolved):
        seen = {}

        def minimize(fun, x0, **kwargs):
            seen["x0"] = x0
            seen["bounds"] = kwargs["bounds"]
            return OptimizeResult(x=x0, success=True, message="", nit=0, nfev=1)

        monkeypatch.setattr(solver, "minimize", minimize)
        solver.solve_leaf_temperature(resolved)
        assert seen["x0"][0] == 40.0
        assert seen["bounds"] == [(-10.0, 90.0)]
