"""
Airfoil Geometry Mapper Tests
=============================

Checks the Joukowski circle parameters, the circulation and the sampled
surface loop (closure, winding, stagnation points, Kutta condition).
"""

import sys
from pathlib import Path
import math
import unittest

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.foil_analyzer.config import (
    FoilAnalyzerConfig,
    GeometryConvention,
    ShapeKind,
)
from src.foil_analyzer.geometry import (
    circulation,
    clamp_inputs,
    joukowski_parameters,
    map_geometry,
)


def _orientation(a, b, c):
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def _segments_cross(p1, p2, p3, p4):
    d1 = _orientation(p3, p4, p1)
    d2 = _orientation(p3, p4, p2)
    d3 = _orientation(p1, p2, p3)
    d4 = _orientation(p1, p2, p4)
    return d1 * d2 < 0 and d3 * d4 < 0


def _self_intersections(x, y):
    """Count proper crossings between non-adjacent edges of a closed polyline."""
    points = list(zip(x, y))
    n_edges = len(points) - 1
    crossings = 0
    for i in range(n_edges):
        for j in range(i + 2, n_edges):
            if i == 0 and j == n_edges - 1:
                continue
            if _segments_cross(points[i], points[i + 1], points[j], points[j + 1]):
                crossings += 1
    return crossings


class TestCircleParameters(unittest.TestCase):
    """Radius, center offset, beta and circulation."""

    def test_flat_plate_is_unit_circle(self):
        """Zero camber and thickness map from the unit circle."""
        params = joukowski_parameters(0.0, 0.0, 0.0)
        self.assertEqual(params.r, 1.0)
        self.assertEqual(params.xc, 0.0)
        self.assertEqual(params.yc, 0.0)
        self.assertEqual(params.beta, 0.0)
        self.assertAlmostEqual(params.mapped_chord, 4.0)

    def test_radius_at_least_one(self):
        for camber in (-10.0, 0.0, 5.0, 20.0):
            for thickness in (0.0, 6.0, 12.0, 30.0):
                params = joukowski_parameters(camber, thickness, 3.0)
                self.assertGreaterEqual(params.r, 1.0)
                if thickness > 0:
                    self.assertGreater(params.r, 1.0)

    def test_circle_passes_through_trailing_edge(self):
        """xc + sqrt(r² − yc²) = 1 for the airfoil shape."""
        params = joukowski_parameters(6.0, 12.0, 4.0)
        self.assertAlmostEqual(params.xc + params.half_width, 1.0)
        self.assertAlmostEqual(params.trailing_edge, 2.0)

    def test_foilsim_normalization(self):
        params = joukowski_parameters(5.0, 12.5, 0.0)
        t = 12.5 / 25.0
        yc = 5.0 / 50.0
        self.assertAlmostEqual(params.yc, yc)
        self.assertAlmostEqual(params.r, t / 4 + math.sqrt(t * t / 16 + yc * yc + 1))
        self.assertAlmostEqual(params.beta, math.degrees(math.asin(yc / params.r)))

    def test_shape_core_normalization(self):
        config = FoilAnalyzerConfig(geometry_convention=GeometryConvention.SHAPE_CORE)
        params = joukowski_parameters(5.0, 12.5, 0.0, config=config)
        self.assertAlmostEqual(params.yc, 0.25)

    def test_circulation_vanishes_at_zero_lift_angle(self):
        params = joukowski_parameters(6.0, 12.0, 0.0)
        self.assertEqual(circulation(-params.beta, params.beta, params.r), 0.0)

    def test_circulation_increases_with_angle(self):
        gammas = [joukowski_parameters(2.0, 12.0, a).gamma for a in range(-10, 11, 2)]
        for lower, higher in zip(gammas, gammas[1:]):
            self.assertGreater(higher, lower)

    def test_positive_camber_gives_negative_zero_lift_angle(self):
        self.assertGreater(joukowski_parameters(4.0, 12.0, 0.0).beta, 0.0)
        self.assertLess(joukowski_parameters(-4.0, 12.0, 0.0).beta, 0.0)


class TestShapeKinds(unittest.TestCase):
    """Tagged shape variants."""

    def test_plate_forces_zero_thickness(self):
        params = joukowski_parameters(5.0, 12.0, 2.0, ShapeKind.PLATE)
        self.assertEqual(params.thickness_percent, 0.0)
        self.assertAlmostEqual(params.r, math.sqrt(0.1 ** 2 + 1.0))

    def test_ellipse_is_centered(self):
        params = joukowski_parameters(0.0, 20.0, 0.0, "ellipse")
        self.assertEqual(params.xc, 0.0)
        _, loop = map_geometry(0.0, 20.0, 0.0, ShapeKind.ELLIPSE)
        self.assertAlmostEqual(loop.x.max(), -loop.x.min(), places=9)


class TestDomainClamp(unittest.TestCase):
    """Out-of-range inputs are clamped, never NaN."""

    def test_negative_thickness_clamped(self):
        camber, thickness = clamp_inputs(5.0, -3.0)
        self.assertEqual(thickness, 0.0)
        self.assertEqual(camber, 5.0)

    def test_large_inputs_clamped(self):
        camber, thickness = clamp_inputs(-250.0, 400.0)
        self.assertEqual(camber, -100.0)
        self.assertEqual(thickness, 100.0)

    def test_extreme_inputs_stay_finite(self):
        params, loop = map_geometry(500.0, -50.0, 20.0)
        self.assertTrue(math.isfinite(params.r))
        self.assertTrue(np.all(np.isfinite(loop.x)))
        self.assertTrue(np.all(np.isfinite(loop.pressure_coefficient)))


class TestSurfaceLoop(unittest.TestCase):
    """Sampled surface points, Cp and velocity ratio."""

    def test_loop_is_closed(self):
        _, loop = map_geometry(4.0, 12.0, 5.0)
        self.assertEqual(len(loop), 37)
        self.assertAlmostEqual(loop.x[0], loop.x[-1], places=9)
        self.assertAlmostEqual(loop.y[0], loop.y[-1], places=9)

    def test_symmetric_section_endpoints(self):
        """Trailing edge at x = 2 and leading edge at the mapped LE."""
        params, loop = map_geometry(0.0, 12.0, 0.0)
        self.assertAlmostEqual(loop.x[0], 2.0, places=9)
        self.assertAlmostEqual(loop.x[18], params.leading_edge, places=9)
        self.assertEqual(loop.leading_edge_index, 18)

    def test_winding_upper_then_lower(self):
        _, loop = map_geometry(0.0, 12.0, 0.0)
        self.assertTrue(np.all(loop.y[1:18] > 0))
        self.assertTrue(np.all(loop.y[19:36] < 0))

    def test_zero_thickness_is_flat_and_finite(self):
        _, loop = map_geometry(0.0, 0.0, 0.0)
        self.assertTrue(np.allclose(loop.y, 0.0))
        self.assertTrue(np.all(np.isfinite(loop.velocity_ratio)))

    def test_symmetric_pressure_at_zero_angle(self):
        _, loop = map_geometry(0.0, 12.0, 0.0)
        cp = loop.pressure_coefficient
        self.assertTrue(np.allclose(cp, cp[::-1], atol=1e-9))

    def test_leading_edge_stagnation(self):
        _, loop = map_geometry(0.0, 12.0, 0.0)
        self.assertAlmostEqual(loop.velocity_ratio[18], 0.0, places=9)
        self.assertAlmostEqual(loop.pressure_coefficient[18], 1.0, places=9)

    def test_kutta_condition_at_trailing_edge(self):
        """Tangential velocity vanishes at θ = 0 for a symmetric section."""
        for angle in (-8.0, 0.0, 6.0):
            _, loop = map_geometry(0.0, 12.0, angle)
            self.assertAlmostEqual(loop.velocity_ratio[0], 0.0, places=6)

    def test_suction_on_upper_surface(self):
        """Positive angle gives lower Cp on top than on the bottom."""
        _, loop = map_geometry(0.0, 12.0, 5.0)
        upper = loop.upper_surface()
        lower = loop.lower_surface()
        self.assertLess(upper.pressure_coefficient.min(), lower.pressure_coefficient.min())

    def test_cp_from_velocity_ratio(self):
        _, loop = map_geometry(3.0, 10.0, 4.0)
        np.testing.assert_allclose(
            loop.pressure_coefficient, 1.0 - loop.velocity_ratio ** 2
        )

    def test_no_self_intersections(self):
        sections = [(0.0, 6.0), (0.0, 12.0), (0.0, 20.0),
                    (2.0, 12.0), (4.0, 12.0), (4.0, 20.0)]
        for camber, thickness in sections:
            for angle in (0.0, 5.0):
                _, loop = map_geometry(camber, thickness, angle)
                self.assertEqual(
                    _self_intersections(loop.x, loop.y), 0,
                    f"camber={camber} thickness={thickness} angle={angle}",
                )

    def test_dataframe_columns(self):
        _, loop = map_geometry(2.0, 12.0, 3.0)
        table = loop.to_dataframe()
        self.assertEqual(len(table), 37)
        for column in ("x", "y", "percent_chord", "pressure_coefficient", "velocity_ratio"):
            self.assertIn(column, table.columns)

    def test_percent_chord_range(self):
        _, loop = map_geometry(0.0, 0.0, 0.0)
        pct = loop.percent_chord()
        self.assertAlmostEqual(pct.max(), 100.0)
        self.assertAlmostEqual(pct.min(), 0.0)

    def test_surface_split_runs_leading_to_trailing_edge(self):
        _, loop = map_geometry(0.0, 12.0, 0.0)
        upper = loop.upper_surface()
        lower = loop.lower_surface()
        self.assertEqual(len(upper), 19)
        self.assertEqual(len(lower), 19)
        self.assertLess(upper.x.iloc[0], upper.x.iloc[-1])
        self.assertLess(lower.x.iloc[0], lower.x.iloc[-1])

    def test_custom_point_count(self):
        config = FoilAnalyzerConfig(surface_points=73)
        _, loop = map_geometry(2.0, 12.0, 3.0, config=config)
        self.assertEqual(len(loop), 73)


def run_validation():
    """Run validation tests and print summary."""
    print("=" * 60)
    print("Geometry Mapper Validation")
    print("=" * 60)
    print()

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTests(loader.loadTestsFromTestCase(TestCircleParameters))
    suite.addTests(loader.loadTestsFromTestCase(TestShapeKinds))
    suite.addTests(loader.loadTestsFromTestCase(TestDomainClamp))
    suite.addTests(loader.loadTestsFromTestCase(TestSurfaceLoop))

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
