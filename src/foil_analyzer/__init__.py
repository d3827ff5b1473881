"""
Foil Analyzer Module
====================

Airfoil aerodynamics and potential-flow visualization core.

The module enables:
- Atmosphere properties for Earth, Mars, Venus and a constant-density liquid
- Joukowski mapping of camber/thickness to a body with a sharp trailing edge
- Lift and drag coefficients, Reynolds number and forces
- Streamlines and the surface pressure/velocity distribution
- Parameter sweeps and matplotlib plots of the results

Example Usage:
-------------
    from src.foil_analyzer import FoilAnalyzer, InputState

    outputs = FoilAnalyzer().compute_all(InputState(angle_deg=5.0))
    print(f"CL = {outputs.cl:.3f}, L/D = {outputs.lift_over_drag:.1f}")

Units Convention:
----------------
- Imperial: mph, ft, ft², lb, psi
- Metric: km/h, m, m², N, kPa
"""

from .atmosphere import AtmosphereSample, sample_atmosphere
from .coefficients import AeroResult, compute_coefficients, find_zero_lift_angle
from .config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    DragModel,
    Environment,
    FoilAnalyzerConfig,
    GeometryConvention,
    LiftMode,
    LiftModel,
    ShapeKind,
    UnitSystem,
)
from .core import FoilAnalyzer, FoilOutputs, compute_outputs
from .debugger import CalculationDebugger
from .geometry import GeometryParameters, SurfaceLoop, map_geometry
from .plotting import FoilPlotter
from .state import CorrectionFlags, InputState
from .streamlines import FlowField, Streamline, solve_flow_field, solve_streamline

__all__ = [
    "AeroResult",
    "AtmosphereSample",
    "CalculationDebugger",
    "ConfigurationError",
    "CorrectionFlags",
    "DEFAULT_CONFIG",
    "DragModel",
    "Environment",
    "FlowField",
    "FoilAnalyzer",
    "FoilAnalyzerConfig",
    "FoilOutputs",
    "FoilPlotter",
    "GeometryConvention",
    "GeometryParameters",
    "InputState",
    "LiftMode",
    "LiftModel",
    "ShapeKind",
    "Streamline",
    "SurfaceLoop",
    "UnitSystem",
    "compute_coefficients",
    "compute_outputs",
    "find_zero_lift_angle",
    "map_geometry",
    "sample_atmosphere",
    "solve_flow_field",
    "solve_streamline",
]
