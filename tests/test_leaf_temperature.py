"""
End-to-end tests for the steady-state leaf temperature model.
Tests energy balance closure, physical responses, and error handling.
"""
import logging
import math
from functools import partial
from concurrent.futures import ProcessPoolExecutor

import pandas as pd
import pytest

from leaftemp.core.config import LeafTempConfig, SolverConfig
from leaftemp.core.exceptions import (
    ConvergenceError, DegenerateConductanceError, InvalidInputError, LeafTempError,
    PhysicsModelError,
)
from leaftemp.core.types import ConvectionRegime, SolverStatus
from leaftemp.data.contracts import LeafParameters, WeatherInput
from leaftemp.physics import evaluate, evaluate_weather, leaf_temperature


REFERENCE_WEATHER = dict(
    WS=0.25, Tair=40.0, RH=20.0,
    LWRup=400.0, LWRdown=300.0, SWRup=300.0, SWRdown=1000.0,
)


class TestReferenceScenario:
    """Hot, dry, sunny conditions with light wind"""

    @pytest.fixture(scope="class")
    def watered(self):
        return evaluate(**REFERENCE_WEATHER)

    @pytest.fixture(scope="class")
    def drought(self):
        return evaluate(**REFERENCE_WEATHER, drought=True)

    @pytest.fixture(scope="class")
    def drought_thin_leaf(self):
        return evaluate(**REFERENCE_WEATHER, drought=True, d=0.005)

    def test_converges(self, watered, drought, drought_thin_leaf):
        for result in (watered, drought, drought_thin_leaf):
            assert result.flag == 0
            assert result.converged
            assert -10.0 <= result.Tleaf <= 90.0

    def test_energy_balance_closes(self, watered, drought, drought_thin_leaf):
        for result in (watered, drought, drought_thin_leaf):
            assert abs(result.losses - result.gains) <= 1e-4
            assert result.losses == pytest.approx(result.LE + result.H + result.LWRout)

    def test_watered_leaf_is_above_air(self, watered):
        assert watered.Tleaf > watered.Tair
        assert watered.gsw > 0.0
        assert watered.gtw > watered.gcuticular

    def test_drought_leaf_is_warmer_and_transpires_less(self, watered, drought):
        assert drought.Tleaf > watered.Tleaf
        assert drought.Tleaf > drought.Tair
        assert drought.Emmols < watered.Emmols
        assert drought.gsw == 0.0
        assert drought.gtw == pytest.approx(drought.gcuticular)
        assert drought.psi_soil == drought.psi_min

    def test_thin_leaf_tracks_air_temperature(self, drought, drought_thin_leaf):
        assert abs(drought_thin_leaf.delta_t) < abs(drought.delta_t)
        assert drought_thin_leaf.rblH < drought.rblH

    def test_diagnostics_consistent(self, watered):
        assert watered.gains == pytest.approx(1322.0)
        assert watered.gsurface == pytest.approx(watered.gtw)
        assert watered.VPD == pytest.approx(watered.eleaf - watered.ea)
        assert watered.ea == pytest.approx(watered.esatTair * 0.2)
        assert watered.Ri == pytest.approx(watered.Gr / watered.Re ** 2)
        assert watered.Emmols > 0 and watered.Emmhr > 0
        assert isinstance(watered.regime, ConvectionRegime)

    def test_inputs_echoed(self, watered):
        for name, value in REFERENCE_WEATHER.items():
            assert getattr(watered, name) == value
        assert watered.kplant == 10.0
        assert watered.d == 0.05
        assert watered.gswset is None
        assert watered.drought is False


class TestPhysicalResponses:
    """Monotonic responses of leaf-air temperature difference"""

    def test_more_sunlight_warms_leaf(self):
        dim = evaluate(**{**REFERENCE_WEATHER, "SWRdown": 600.0}, drought=True)
        bright = evaluate(**REFERENCE_WEATHER, drought=True)
        assert bright.delta_t > dim.delta_t

    def test_wind_couples_leaf_to_air(self):
        calm = evaluate(**REFERENCE_WEATHER, drought=True)
        windy = evaluate(**{**REFERENCE_WEATHER, "WS": 2.0}, drought=True)
        assert abs(windy.delta_t) < abs(calm.delta_t)

    def test_wind_couples_watered_leaf_to_air(self):
        deltas = [
            evaluate(**{**REFERENCE_WEATHER, "WS": ws}).delta_t
            for ws in (0.1, 0.25, 1.0, 3.0)
        ]
        assert all(delta > 0 for delta in deltas)
        assert deltas == sorted(deltas, reverse=True)

    def test_still_air_solves(self):
        result = evaluate(**{**REFERENCE_WEATHER, "WS": 0.0}, drought=True)
        assert result.flag == 0
        assert result.WS == 0.0
        assert math.isfinite(result.Re) and result.Re > 0

    def test_night_leaf_cools_below_air(self):
        result = evaluate(
            WS=0.5, Tair=15.0, RH=70.0,
            LWRup=380.0, LWRdown=300.0, SWRup=0.0, SWRdown=0.0,
        )
        assert result.flag == 0
        assert result.Tleaf < result.Tair

    def test_stomatal_override(self):
        closed = evaluate(**REFERENCE_WEATHER, gswset=0.0)
        open_ = evaluate(**REFERENCE_WEATHER, gswset=0.5)
        assert closed.gtw == pytest.approx(0.02)
        assert open_.gtw == pytest.approx(0.52)
        assert open_.Tleaf < closed.Tleaf

    def test_deterministic(self):
        first = evaluate(**REFERENCE_WEATHER)
        second = evaluate(**REFERENCE_WEATHER)
        assert first.to_dict() == second.to_dict()

    def test_parallel_evaluation_matches_sequential(self):
        weather = {k: v for k, v in REFERENCE_WEATHER.items() if k not in ("WS", "Tair")}
        solve = partial(evaluate, REFERENCE_WEATHER["WS"], drought=True, **weather)
        air_temperatures = [10.0, 20.0, 30.0, 40.0]

        sequential = [solve(t).Tleaf for t in air_temperatures]
        with ProcessPoolExecutor(max_workers=2) as pool:
            parallel = [r.Tleaf for r in pool.map(solve, air_temperatures)]
        assert parallel == sequential


class TestContractsEntryPoint:

    def test_evaluate_weather_matches_evaluate(self):
        weather = WeatherInput(**REFERENCE_WEATHER)
        params = LeafParameters(drought=True)
        assert evaluate_weather(weather, params).Tleaf == evaluate(
            **REFERENCE_WEATHER, drought=True
        ).Tleaf

    def test_result_record_exports(self):
        result = evaluate(**REFERENCE_WEATHER)
        record = result.to_dict()
        assert record["regime"] == result.regime.value
        for key in ("Tleaf", "flag", "gains", "losses", "LE", "H", "LWRout",
                    "Emmols", "Emmhr", "eleaf", "esatTair", "ea", "rsurface",
                    "gsurface", "rblH", "Nu", "Re", "Gr", "Ri"):
            assert key in record

        series = result.to_series()
        assert isinstance(series, pd.Series)
        assert series["Tleaf"] == result.Tleaf


class TestErrorHandling:

    @pytest.mark.parametrize("override", [
        {"RH": 120.0},
        {"RH": -1.0},
        {"WS": -0.5},
        {"SWRdown": -10.0},
        {"Tair": float("nan")},
        {"Tair": -300.0},
        {"Tair": 100.0},
        {"WS": "breezy"},
        {"RH": "20"},
    ])
    def test_invalid_weather(self, override):
        with pytest.raises(InvalidInputError):
            evaluate(**{**REFERENCE_WEATHER, **override})

    @pytest.mark.parametrize("override", [
        {"d": 0.0},
        {"d": -0.05},
        {"emisleaf": 1.5},
        {"gcuticular": -0.01},
        {"gswset": -0.1},
        {"Phi": 0.0},
    ])
    def test_invalid_parameters(self, override):
        with pytest.raises(InvalidInputError) as excinfo:
            evaluate(**REFERENCE_WEATHER, **override)
        assert isinstance(excinfo.value, LeafTempError)

    def test_zero_surface_conductance(self):
        with pytest.raises(DegenerateConductanceError):
            evaluate(**REFERENCE_WEATHER, gswset=0.0, gcuticular=0.0)

    def test_iteration_budget_exhausted(self, caplog):
        config = LeafTempConfig(solver=SolverConfig(max_iterations=1))
        with caplog.at_level(logging.WARNING, logger="leaftemp"):
            result = evaluate(**REFERENCE_WEATHER, drought=True, config=config)

        assert result.flag == SolverStatus.NOT_CONVERGED
        assert not result.converged
        assert math.isfinite(result.Tleaf)
        assert abs(result.imbalance) > 1e-4
        assert "did not converge" in caplog.text

    def test_strict_mode_raises(self):
        config = LeafTempConfig(solver=SolverConfig(max_iterations=1))
        with pytest.raises(ConvergenceError):
            evaluate(**REFERENCE_WEATHER, drought=True, config=config, strict=True)

    def test_closed_balance_after_line_search_stop(self):
        result = evaluate(
            WS=0.0, Tair=20.0, RH=50.0,
            LWRup=350.0, LWRdown=300.0, SWRup=200.0, SWRdown=1000.0,
            drought=True,
        )
        assert result.flag == SolverStatus.CONVERGED
        assert abs(result.imbalance) <= 1e-4

    def test_no_root_within_bounds(self, caplog):
        """Absorbed radiation exceeds what the leaf can shed even at the upper bound"""
        with caplog.at_level(logging.WARNING, logger="leaftemp"):
            result = evaluate(
                WS=0.0, Tair=65.0, RH=100.0,
                LWRup=2000.0, LWRdown=2000.0, SWRup=2000.0, SWRdown=8000.0,
                drought=True,
            )

        assert result.flag == SolverStatus.NOT_CONVERGED
        assert result.Tleaf == pytest.approx(90.0)
        assert result.imbalance < -1000.0
        for name in ("Tleaf", "LE", "H", "LWRout", "Emmols", "rblH", "Nu", "Re", "Gr"):
            assert math.isfinite(getattr(result, name))
        assert "did not converge" in caplog.text

    def test_flag_agrees_with_balance_near_stomatal_pole(self):
        """Humid heat drives VPD negative towards the hydraulic-limit pole"""
        result = evaluate(
            WS=1.0, Tair=45.0, RH=95.0,
            LWRup=350.0, LWRdown=300.0, SWRup=60.0, SWRdown=300.0,
        )
        closed = abs(result.imbalance) <= 1e-4
        assert result.flag == (SolverStatus.CONVERGED if closed else SolverStatus.NOT_CONVERGED)
        assert -10.0 <= result.Tleaf <= 90.0
        for name in ("Tleaf", "imbalance", "LE", "H", "gsw", "rsurface", "VPD"):
            assert math.isfinite(getattr(result, name))

    def test_arithmetic_failure_is_wrapped(self, monkeypatch):
        def overflow(resolved, config=None):
            raise OverflowError("math range error")

        monkeypatch.setattr(leaf_temperature, "solve_leaf_temperature", overflow)
        with pytest.raises(PhysicsModelError) as excinfo:
            evaluate(**REFERENCE_WEATHER)
        assert "solver" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, OverflowError)
