"""
Tests for the leaf energy balance terms.
"""
import pytest

from leaftemp.core.config import SolverConfig
from leaftemp.core.constants import STEFAN_BOLTZMANN
from leaftemp.data.contracts import LeafParameters, WeatherInput
from leaftemp.physics.energy_balance import (
    absorbed_radiation, emitted_longwave, transpiration_rates,
    resolve_inputs, evaluate_energy_balance, energy_balance_residual,
)


@pytest.fixture
def weather():
    return WeatherInput(
        WS=0.25, Tair=40.0, RH=20.0,
        LWRup=400.0, LWRdown=300.0, SWRup=300.0, SWRdown=1000.0,
    )


@pytest.fixture
def resolved(weather):
    return resolve_inputs(weather, LeafParameters())


class TestRadiation:

    def test_absorbed_radiation(self, weather):
        gains = absorbed_radiation(weather, LeafParameters())
        assert gains == pytest.approx(0.5 * 1300.0 + 0.96 * 700.0)

    def test_emitted_longwave_both_faces(self):
        assert emitted_longwave(0.0, 1.0) == pytest.approx(2 * STEFAN_BOLTZMANN * 273.15 ** 4)

    def test_emitted_longwave_increases_with_temperature(self):
        assert emitted_longwave(30.0, 0.96) > emitted_longwave(20.0, 0.96)


class TestTranspiration:

    def test_rates_from_latent_heat(self):
        emmols, emmhr = transpiration_rates(440.0, 44000.0)
        assert emmols == pytest.approx(10.0)
        # 10 mmol m-2 s-1 of water is 0.18015 g m-2 s-1, 0.6485 kg m-2 hr-1
        assert emmhr == pytest.approx(0.64854, rel=1e-4)


class TestResolveInputs:

    def test_temperature_independent_terms(self, resolved, weather):
        assert resolved.gains == pytest.approx(1322.0)
        assert resolved.ea == pytest.approx(resolved.esat_air * 0.2)
        assert resolved.wind_speed == weather.WS
        assert resolved.psi_soil == 0.0

    def test_wind_floor_and_drought(self, weather):
        calm = weather.model_copy(update={"WS": 0.0})
        resolved = resolve_inputs(calm, LeafParameters(drought=True), SolverConfig(min_wind_speed_m_s=0.01))
        assert resolved.wind_speed == 0.01
        assert resolved.psi_soil == -1.5


class TestEnergyBalanceState:

    def test_losses_sum(self, resolved):
        state = evaluate_energy_balance(42.0, resolved)
        assert state.losses == pytest.approx(state.LE + state.H + state.LWRout)
        assert state.residual == pytest.approx((state.losses - state.gains) ** 2)
        assert energy_balance_residual(42.0, resolved) == pytest.approx(state.residual)

    def test_no_sensible_heat_at_air_temperature(self, resolved):
        state = evaluate_energy_balance(40.0, resolved)
        assert state.H == 0.0
        assert state.LE > 0

    def test_total_resistance(self, resolved):
        state = evaluate_energy_balance(45.0, resolved)
        assert state.rtotal == pytest.approx(
            state.stomatal.rsurface + state.convection.rblH / 0.93
        )

    def test_no_latent_heat_without_deficit(self, weather):
        humid = weather.model_copy(update={"RH": 100.0})
        state = evaluate_energy_balance(40.0, resolve_inputs(humid, LeafParameters()))
        assert state.VPD == pytest.approx(0.0, abs=1e-12)
        assert state.LE == pytest.approx(0.0, abs=1e-9)
        assert state.Emmols == pytest.approx(0.0, abs=1e-9)

    def test_drought_reduces_latent_heat(self, weather):
        wet = evaluate_energy_balance(42.0, resolve_inputs(weather, LeafParameters()))
        dry = evaluate_energy_balance(42.0, resolve_inputs(weather, LeafParameters(drought=True)))
        assert dry.LE < wet.LE
        assert dry.stomatal.gtw == pytest.approx(0.02)

    def test_residual_vanishes_only_at_balance(self, resolved):
        """Losses grow with leaf temperature, so the imbalance changes sign"""
        cold = evaluate_energy_balance(0.0, resolved)
        hot = evaluate_energy_balance(80.0, resolved)
        assert cold.imbalance < 0 < hot.imbalance
