"""
Aerodynamic Coefficient Model Tests
===================================

Validates lift, drag, Reynolds number and forces against the reference
scenarios (imperial units, Earth, chord 5 ft, span 20 ft, area 100 ft²):

- A: α = 0, camber 0, thickness 12, V = 100 mph, sea level → cl ≈ 0
- B: α = 5 → positive lift and finite positive L/D
- C: α = 15 → stall rolloff below the linear 2π·α prediction
- D: altitude 0 to 30000 ft → lift and drag fall monotonically
"""

import sys
from pathlib import Path
import math
import unittest

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.foil_analyzer.atmosphere import sample_atmosphere
from src.foil_analyzer.coefficients import (
    aspect_ratio_correction,
    compute_coefficients,
    find_zero_lift_angle,
    lift_over_drag,
    reynolds_number,
    stall_factor,
)
from src.foil_analyzer.config import (
    ConfigurationError,
    DragModel,
    FoilAnalyzerConfig,
    LiftMode,
    LiftModel,
    UnitSystem,
)
from src.foil_analyzer.debugger import CalculationDebugger
from src.foil_analyzer.drag_table import DEFAULT_DRAG_TABLE, table_profile_drag
from src.foil_analyzer.geometry import joukowski_parameters
from src.foil_analyzer.state import CorrectionFlags, InputState


NO_CORRECTIONS = CorrectionFlags(aspect_ratio=False, induced_drag=False, reynolds=False)


def _coefficients(state, config=None, debugger=None):
    atmosphere = sample_atmosphere(state.environment, state.altitude, state.unit_system)
    return compute_coefficients(state, atmosphere, config, debugger)


class TestReferenceScenarios(unittest.TestCase):
    """Concrete scenarios A to D."""

    def setUp(self):
        self.base = InputState(
            angle_deg=0.0, camber_percent=0.0, thickness_percent=12.0,
            velocity=100.0, altitude=0.0,
        )

    def test_scenario_a_zero_angle(self):
        result = _coefficients(self.base)
        self.assertAlmostEqual(result.cl, 0.0, delta=0.01)
        self.assertGreater(result.cd, 0.0)
        self.assertAlmostEqual(result.lift, 0.0, delta=1e-9)
        self.assertGreater(result.drag, 0.0)
        self.assertGreater(result.reynolds, 0.0)

    def test_scenario_b_positive_angle(self):
        result = _coefficients(self.base.with_changes(angle_deg=5.0))
        self.assertGreater(result.cl, 0.0)
        self.assertGreater(result.lift, 0.0)
        self.assertTrue(math.isfinite(result.lift_over_drag))
        self.assertGreater(result.lift_over_drag, 0.0)

    def test_scenario_c_stall_rolloff(self):
        linear = 2.0 * math.pi * math.radians(15.0)
        for corrections in (CorrectionFlags(), NO_CORRECTIONS):
            state = self.base.with_changes(angle_deg=15.0, corrections=corrections)
            self.assertLess(_coefficients(state).cl, linear)

    def test_scenario_c_joukowski_lift_model(self):
        config = FoilAnalyzerConfig(lift_model=LiftModel.JOUKOWSKI)
        state = self.base.with_changes(angle_deg=15.0)
        self.assertLess(_coefficients(state, config).cl, 2.0 * math.pi * math.radians(15.0))

    def test_scenario_d_altitude(self):
        results = [
            _coefficients(self.base.with_changes(angle_deg=5.0, altitude=float(alt)))
            for alt in range(0, 30001, 5000)
        ]
        for lower, higher in zip(results, results[1:]):
            self.assertLess(higher.lift, lower.lift)
            self.assertLess(higher.drag, lower.drag)


class TestLiftModel(unittest.TestCase):
    """Lift formula, stall and aspect ratio."""

    def test_thin_airfoil_slope(self):
        state = InputState(angle_deg=4.0, camber_percent=0.0, corrections=NO_CORRECTIONS)
        self.assertAlmostEqual(_coefficients(state).cl, 2.0 * math.pi * math.radians(4.0))

    def test_symmetry_for_zero_camber(self):
        """cl(−α) = −cl(α) exactly for a symmetric section."""
        for angle in (1.0, 5.0, 12.0, 18.0):
            for corrections in (NO_CORRECTIONS, CorrectionFlags()):
                up = _coefficients(InputState(angle_deg=angle, corrections=corrections))
                down = _coefficients(InputState(angle_deg=-angle, corrections=corrections))
                self.assertEqual(down.cl, -up.cl)

    def test_joukowski_symmetry(self):
        config = FoilAnalyzerConfig(lift_model="joukowski")
        for angle in (3.0, 9.0):
            up = _coefficients(InputState(angle_deg=angle, corrections=NO_CORRECTIONS), config)
            down = _coefficients(InputState(angle_deg=-angle, corrections=NO_CORRECTIONS), config)
            self.assertAlmostEqual(down.cl, -up.cl, places=12)

    def test_stall_factor(self):
        self.assertEqual(stall_factor(5.0), 1.0)
        self.assertEqual(stall_factor(10.0), 1.0)
        self.assertAlmostEqual(stall_factor(20.0), 0.5)
        self.assertEqual(stall_factor(-15.0), stall_factor(15.0))
        self.assertLess(stall_factor(15.0), 1.0)

    def test_ideal_mode_has_no_stall(self):
        state = InputState(angle_deg=15.0, lift_mode=LiftMode.IDEAL, corrections=NO_CORRECTIONS)
        result = _coefficients(state)
        self.assertAlmostEqual(result.cl, 2.0 * math.pi * math.radians(15.0))
        self.assertEqual(result.cd, 0.0)
        self.assertEqual(result.drag, 0.0)
        self.assertEqual(result.lift_over_drag, 0.0)

    def test_aspect_ratio_reduces_lift(self):
        with_ar = _coefficients(InputState(angle_deg=5.0))
        without = _coefficients(
            InputState(angle_deg=5.0, corrections=CorrectionFlags(aspect_ratio=False))
        )
        self.assertLess(with_ar.cl, without.cl)
        self.assertAlmostEqual(with_ar.cl, aspect_ratio_correction(without.cl, 4.0))

    def test_zero_wing_area_skips_corrections(self):
        state = InputState(angle_deg=5.0, wing_area=0.0)
        result = _coefficients(state)
        self.assertEqual(result.aspect_ratio, 0.0)
        self.assertAlmostEqual(result.cl, 2.0 * math.pi * math.radians(5.0))
        self.assertEqual(result.induced_drag_coefficient, 0.0)
        self.assertEqual(result.lift, 0.0)
        self.assertEqual(result.lift_over_drag, 0.0)


class TestZeroLiftAngle(unittest.TestCase):
    """Zero-lift angle from the root search."""

    def test_matches_beta(self):
        for camber in (-6.0, 0.0, 3.0, 8.0):
            state = InputState(camber_percent=camber, thickness_percent=12.0)
            beta = joukowski_parameters(camber, 12.0, 0.0).beta
            self.assertAlmostEqual(find_zero_lift_angle(state), -beta, places=6)

    def test_matches_beta_joukowski_model(self):
        config = FoilAnalyzerConfig(lift_model=LiftModel.JOUKOWSKI)
        state = InputState(camber_percent=5.0, thickness_percent=10.0)
        beta = joukowski_parameters(5.0, 10.0, 0.0).beta
        self.assertAlmostEqual(find_zero_lift_angle(state, config), -beta, places=6)

    def test_shifts_with_camber(self):
        angles = [
            find_zero_lift_angle(InputState(camber_percent=c)) for c in (-4.0, 0.0, 4.0, 8.0)
        ]
        for a, b in zip(angles, angles[1:]):
            self.assertLess(b, a)

    def test_lift_vanishes_at_zero_lift_angle(self):
        state = InputState(camber_percent=5.0, corrections=NO_CORRECTIONS)
        alpha0 = find_zero_lift_angle(state)
        result = _coefficients(state.with_changes(angle_deg=alpha0))
        self.assertAlmostEqual(result.cl, 0.0, places=8)


class TestDragModel(unittest.TestCase):
    """Analytic and table drag, Reynolds and induced terms."""

    def test_analytic_profile_drag(self):
        state = InputState(angle_deg=0.0, thickness_percent=12.0, corrections=NO_CORRECTIONS)
        self.assertAlmostEqual(_coefficients(state).cd, 0.012)

    def test_analytic_profile_drag_camber_term(self):
        """Camber adds 0.0001 per percent, independent of its sign."""
        for camber in (6.0, -6.0):
            state = InputState(angle_deg=0.0, camber_percent=camber, thickness_percent=12.0,
                               corrections=NO_CORRECTIONS)
            self.assertAlmostEqual(_coefficients(state).cd, 0.012 + 0.0006)

    def test_scenario_a_drag_magnitude(self):
        """Sea-level 100 mph: cd0 0.012 scaled by the Reynolds factor."""
        state = InputState(angle_deg=0.0, thickness_percent=12.0)
        result = _coefficients(state)
        factor = (5.0e4 / result.reynolds) ** 0.11
        self.assertAlmostEqual(result.cd, 0.012 * factor)
        self.assertLess(result.cd, 0.01)

    def test_reynolds_correction_never_increases_drag_at_high_re(self):
        """Above the reference Re the factor is below one."""
        plain = _coefficients(InputState(corrections=NO_CORRECTIONS))
        corrected = _coefficients(
            InputState(corrections=CorrectionFlags(aspect_ratio=False, induced_drag=False))
        )
        self.assertLess(corrected.cd, plain.cd)

    def test_low_reynolds_floor(self):
        """Below the reference Re the factor is exactly one."""
        state = InputState(velocity=0.01, corrections=CorrectionFlags(
            aspect_ratio=False, induced_drag=False, reynolds=True))
        result = _coefficients(state)
        self.assertLess(result.reynolds, 5.0e4)
        self.assertAlmostEqual(result.cd0, 0.01 + 0.002 * 12.5 / 12.0)

    def test_induced_drag(self):
        state = InputState(angle_deg=5.0, corrections=CorrectionFlags(reynolds=False))
        result = _coefficients(state)
        expected = result.cl ** 2 / (math.pi * 4.0 * 0.85)
        self.assertAlmostEqual(result.induced_drag_coefficient, expected)
        self.assertAlmostEqual(result.cd, result.cd0 + expected)

    def test_polynomial_table_selected(self):
        config = FoilAnalyzerConfig(drag_model=DragModel.POLYNOMIAL_TABLE)
        state = InputState(angle_deg=0.0, camber_percent=0.0, thickness_percent=10.0,
                           corrections=NO_CORRECTIONS)
        self.assertAlmostEqual(_coefficients(state, config).cd, 0.012)

    def test_table_bilinear_midpoint(self):
        value = table_profile_drag(2.5, 7.5, 0.0)
        self.assertAlmostEqual(value, (0.009 + 0.012 + 0.011 + 0.014) / 4.0)

    def test_table_mirror_symmetry(self):
        self.assertEqual(table_profile_drag(-5.0, 10.0, 3.0), table_profile_drag(5.0, 10.0, -3.0))

    def test_table_clamps_to_edges(self):
        self.assertEqual(table_profile_drag(30.0, 25.0, 30.0), table_profile_drag(20.0, 20.0, 20.0))
        self.assertEqual(table_profile_drag(0.0, 1.0, 0.0), table_profile_drag(0.0, 5.0, 0.0))

    def test_table_positive_over_range(self):
        for camber in (0.0, 7.0, 20.0):
            for thickness in (5.0, 12.0, 20.0):
                for angle in range(-20, 21, 2):
                    self.assertGreater(
                        DEFAULT_DRAG_TABLE.profile_drag(camber, thickness, float(angle)), 0.0
                    )

    def test_table_drag_grows_with_angle(self):
        self.assertGreater(table_profile_drag(0.0, 12.0, 15.0), table_profile_drag(0.0, 12.0, 0.0))


class TestReynoldsAndForces(unittest.TestCase):
    """Reynolds number, forces and sentinels."""

    def test_reynolds_linear_in_velocity(self):
        atmosphere = sample_atmosphere("earth", 0.0, "imperial")
        re1 = reynolds_number(50.0, 5.0, atmosphere, UnitSystem.IMPERIAL)
        re2 = reynolds_number(100.0, 5.0, atmosphere, UnitSystem.IMPERIAL)
        self.assertAlmostEqual(re2 / re1, 2.0)
        self.assertEqual(reynolds_number(0.0, 5.0, atmosphere, UnitSystem.IMPERIAL), 0.0)

    def test_reynolds_formula(self):
        atmosphere = sample_atmosphere("earth", 0.0, "imperial")
        expected = (100.0 / 0.6818) * 5.0 * atmosphere.density / atmosphere.viscosity
        self.assertAlmostEqual(
            reynolds_number(100.0, 5.0, atmosphere, "imperial") / expected, 1.0
        )

    def test_zero_velocity(self):
        result = _coefficients(InputState(angle_deg=5.0, velocity=0.0))
        self.assertEqual(result.cl, 0.0)
        self.assertEqual(result.cd, 0.0)
        self.assertEqual(result.lift, 0.0)
        self.assertEqual(result.drag, 0.0)
        self.assertEqual(result.reynolds, 0.0)
        self.assertEqual(result.lift_over_drag, 0.0)

    def test_imperial_forces_are_q_s_c(self):
        state = InputState(angle_deg=5.0)
        result = _coefficients(state)
        self.assertAlmostEqual(result.lift, result.dynamic_pressure * 100.0 * result.cl)
        self.assertAlmostEqual(result.drag, result.dynamic_pressure * 100.0 * result.cd)

    def test_metric_force_conversion(self):
        state = InputState(angle_deg=5.0, unit_system=UnitSystem.METRIC,
                           chord=1.5, span=6.0, wing_area=9.0)
        result = _coefficients(state)
        expected = result.dynamic_pressure * 9.0 * result.cl * 4.448 / 0.3048 ** 2
        self.assertAlmostEqual(result.lift / expected, 1.0)

    def test_lift_over_drag_sentinel(self):
        self.assertEqual(lift_over_drag(5.0, 0.0), 0.0)
        self.assertEqual(lift_over_drag(0.0, 2.0), 0.0)
        self.assertEqual(lift_over_drag(float("inf"), 2.0), 0.0)
        self.assertEqual(lift_over_drag(1.0, float("nan")), 0.0)
        self.assertEqual(lift_over_drag(6.0, 2.0), 3.0)


class TestTraceAndErrors(unittest.TestCase):
    """Debugger trace and configuration errors."""

    def test_debugger_records_steps(self):
        debugger = CalculationDebugger()
        result = _coefficients(InputState(angle_deg=12.0), debugger=debugger)
        self.assertGreater(debugger.get_step_count(), 0)
        self.assertEqual(debugger.find_step_by_result("cl").result, result.cl)
        self.assertIsNotNone(debugger.find_step_by_result("cd0"))
        self.assertIn("Stall multiplier", debugger.get_report())

    def test_invalid_environment(self):
        with self.assertRaises(ConfigurationError):
            InputState(environment="pluto")

    def test_invalid_number(self):
        with self.assertRaises(ConfigurationError):
            InputState(angle_deg=float("nan"))
        with self.assertRaises(ConfigurationError):
            InputState(velocity="fast")

    def test_numpy_scalars_accepted(self):
        """Values taken from numpy arrays behave like the plain numbers."""
        from_numpy = InputState(angle_deg=np.int64(5), thickness_percent=np.float64(12.0),
                                velocity=np.arange(100, 101)[0])
        plain = InputState(angle_deg=5.0, thickness_percent=12.0, velocity=100.0)
        self.assertAlmostEqual(_coefficients(from_numpy).cl, _coefficients(plain).cl)
        self.assertAlmostEqual(_coefficients(from_numpy).drag, _coefficients(plain).drag)

    def test_invalid_corrections(self):
        with self.assertRaises(ConfigurationError):
            InputState(corrections=True)

    def test_invalid_config(self):
        with self.assertRaises(ConfigurationError):
            FoilAnalyzerConfig(newton_max_iterations=0)
        with self.assertRaises(ConfigurationError):
            FoilAnalyzerConfig(drag_model="quadratic")


def run_validation():
    """Run validation tests and print summary."""
    print("=" * 60)
    print("Coefficient Model Validation")
    print("=" * 60)
    print()

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTests(loader.loadTestsFromTestCase(TestReferenceScenarios))
    suite.addTests(loader.loadTestsFromTestCase(TestLiftModel))
    suite.addTests(loader.loadTestsFromTestCase(TestZeroLiftAngle))
    suite.addTests(loader.loadTestsFromTestCase(TestDragModel))
    suite.addTests(loader.loadTestsFromTestCase(TestReynoldsAndForces))
    suite.addTests(loader.loadTestsFromTestCase(TestTraceAndErrors))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    print()
    print("=" * 60)
    if result.wasSuccessful():
        print("All validation tests PASSED")
    else:
        print(f"FAILED: {len(result.failures)} failures, {len(result.errors)} errors")
    print("=" * 60)

    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_validation()
    sys.exit(0 if success else 1)
