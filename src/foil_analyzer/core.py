"""
Foil Analyzer Core Module
=========================

Aggregates the atmosphere, geometry, coefficient and streamline models
into one computation per input state.

Classes:
--------
- FoilOutputs: Complete result of one computation
- FoilAnalyzer: Runs computations, sweeps and surface tables

Usage:
------
    from src.foil_analyzer import FoilAnalyzer, InputState

    analyzer = FoilAnalyzer()
    outputs = analyzer.compute_all(InputState(angle_deg=5.0))
    print(outputs.cl, outputs.lift)

    curve = analyzer.sweep(InputState(), "angle_deg", range(-10, 16))

Units Convention:
----------------
- Geometry: chord-normalized mapped plane (chord ≈ 4)
- Forces: lb (imperial) or N (metric)
- Surface pressure: psi (imperial) or kPa (metric)
- Surface velocity: mph (imperial) or km/h (metric)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from .atmosphere import AtmosphereSample, sample_atmosphere
from .coefficients import AeroResult, compute_coefficients
from .config import (
    DEFAULT_CONFIG,
    SEA_LEVEL_PRESSURE_PSF,
    ConfigurationError,
    FoilAnalyzerConfig,
    pressure_conversion,
)
from .debugger import CalculationDebugger
from .geometry import GeometryParameters, SurfaceLoop, generate_surface_loop, joukowski_parameters
from .state import InputState
from .streamlines import FlowField, solve_flow_field

logger = logging.getLogger(__name__)

# Input fields a sweep may vary, with their short aliases
SWEEP_PARAMETERS = {
    "angle_deg": "angle_deg",
    "angle": "angle_deg",
    "camber_percent": "camber_percent",
    "camber": "camber_percent",
    "thickness_percent": "thickness_percent",
    "thickness": "thickness_percent",
    "velocity": "velocity",
    "altitude": "altitude",
    "wing_area": "wing_area",
    "area": "wing_area",
}


@dataclass(frozen=True)
class FoilOutputs:
    """
    Complete result of one foil computation.

    Attributes:
    ----------
    state : InputState
        Inputs the result was computed from.

    aero : AeroResult
        Coefficients and forces.

    atmosphere : AtmosphereSample
        Fluid properties at the state's altitude.

    geometry : GeometryParameters
        Mapping parameters and circulation.

    surface_loop : SurfaceLoop
        Surface points with Cp and velocity ratio.

    flow_field : FlowField
        Body outline and streamlines.
    """

    state: InputState
    aero: AeroResult
    atmosphere: AtmosphereSample
    geometry: GeometryParameters
    surface_loop: SurfaceLoop
    flow_field: FlowField

    @property
    def cl(self) -> float:
        return self.aero.cl

    @property
    def cd(self) -> float:
        return self.aero.cd

    @property
    def lift(self) -> float:
        return self.aero.lift

    @property
    def drag(self) -> float:
        return self.aero.drag

    @property
    def reynolds(self) -> float:
        return self.aero.reynolds

    @property
    def lift_over_drag(self) -> float:
        return self.aero.lift_over_drag

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-data view for UI and plotting collaborators.

        Returns:
        -------
        dict
            {cl, cd, lift, drag, reynolds, liftOverDrag,
             geometry: {surfaceLoop: {x, y, pressureCoefficient,
                                      velocityRatio}, xc, yc, r},
             flowField: {bodyPoints: [{x, y}], streamlines: [[{x, y}]]}}
        """
        loop = self.surface_loop
        return {
            "cl": self.cl,
            "cd": self.cd,
            "lift": self.lift,
            "drag": self.drag,
            "reynolds": self.reynolds,
            "liftOverDrag": self.lift_over_drag,
            "geometry": {
                "surfaceLoop": {
                    "x": loop.x.tolist(),
                    "y": loop.y.tolist(),
                    "pressureCoefficient": loop.pressure_coefficient.tolist(),
                    "velocityRatio": loop.velocity_ratio.tolist(),
                },
                "xc": self.geometry.xc,
                "yc": self.geometry.yc,
                "r": self.geometry.r,
            },
            "flowField": {
                "bodyPoints": [
                    {"x": x, "y": y} for x, y in self.flow_field.body_points
                ],
                "streamlines": [
                    [{"x": x, "y": y} for x, y in line.points]
                    for line in self.flow_field.streamlines
                ],
            },
        }


class FoilAnalyzer:
    """
    Airfoil performance and flow-field analyzer.

    Attributes:
    ----------
    config : FoilAnalyzerConfig
        Model selection and solver settings.

    debugger : CalculationDebugger or None
        Receives the coefficient trace of each compute_all call.

    Example:
    -------
        analyzer = FoilAnalyzer(FoilAnalyzerConfig(max_workers=4))
        outputs = analyzer.compute_all(InputState(angle_deg=8.0,
                                                  camber_percent=4.0))
        table = analyzer.surface_dataframe(outputs)
    """

    def __init__(
        self,
        config: Optional[FoilAnalyzerConfig] = None,
        debugger: Optional[CalculationDebugger] = None
    ):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.debugger = debugger

    # -------------------------------------------------------------------------
    # Single-State Computations
    # -------------------------------------------------------------------------

    def compute_aero(
        self,
        state: InputState
    ) -> Tuple[AtmosphereSample, GeometryParameters, AeroResult]:
        """
        Atmosphere, mapping parameters and coefficients for a state.

        Skips the surface loop and streamlines, which the coefficients do
        not depend on.
        """
        atmosphere = sample_atmosphere(
            state.environment, state.altitude, state.unit_system, self.config
        )
        geometry = joukowski_parameters(
            state.camber_percent, state.thickness_percent, state.angle_deg,
            state.shape_kind, self.config,
        )
        aero = compute_coefficients(
            state, atmosphere, self.config, self.debugger, geometry
        )
        return atmosphere, geometry, aero

    def compute_all(self, state: InputState) -> FoilOutputs:
        """
        Run every model for one input state.

        Parameters:
        ----------
        state : InputState
            Simulation inputs.

        Returns:
        -------
        FoilOutputs
        """
        if self.debugger is not None:
            self.debugger.start(
                angle_deg=state.angle_deg,
                camber_percent=state.camber_percent,
                thickness_percent=state.thickness_percent,
                velocity=state.velocity,
                altitude=state.altitude,
                environment=state.environment.value,
                unit_system=state.unit_system.value,
            )

        atmosphere, geometry, aero = self.compute_aero(state)
        surface_loop = generate_surface_loop(geometry, config=self.config)
        flow_field = solve_flow_field(geometry, state.angle_deg, self.config)

        if self.debugger is not None:
            self.debugger.finish()

        logger.debug(
            "Computed state angle=%.2f camber=%.2f thickness=%.2f: cl=%.4f cd=%.5f",
            state.angle_deg, state.camber_percent, state.thickness_percent,
            aero.cl, aero.cd,
        )

        return FoilOutputs(
            state=state,
            aero=aero,
            atmosphere=atmosphere,
            geometry=geometry,
            surface_loop=surface_loop,
            flow_field=flow_field,
        )

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def surface_dataframe(self, outputs: FoilOutputs) -> pd.DataFrame:
        """
        Surface table with local pressure and velocity in display units.

        Adds to SurfaceLoop.to_dataframe():
        - pressure: p∞ + q·Cp (psi or kPa)
        - velocity: V∞·V/V∞ (mph or km/h)
        """
        table = outputs.surface_loop.to_dataframe()
        state = outputs.state
        psf_to_display = pressure_conversion(state.unit_system) / SEA_LEVEL_PRESSURE_PSF

        q = outputs.atmosphere.dynamic_pressure(state.velocity)
        local_psf = outputs.atmosphere.static_pressure + q * table["pressure_coefficient"]

        table["pressure"] = local_psf * psf_to_display
        table["velocity"] = state.velocity * table["velocity_ratio"]
        return table

    def sweep(
        self,
        state: InputState,
        parameter: str,
        values: Iterable[float]
    ) -> pd.DataFrame:
        """
        Aerodynamic results over a range of one input.

        Parameters:
        ----------
        state : InputState
            Base state; only the swept field changes.

        parameter : str
            One of angle_deg, camber_percent, thickness_percent, velocity,
            altitude, wing_area (or the short forms angle, camber,
            thickness, area).

        values : iterable of float
            Values to evaluate, in order.

        Returns:
        -------
        pd.DataFrame
            One row per value with cl, cd, lift, drag, reynolds,
            lift_over_drag, cd0, induced_drag_coefficient and density.

        Raises:
        ------
        ConfigurationError
            If the parameter cannot be swept.
        """
        field_name = SWEEP_PARAMETERS.get(parameter)
        if field_name is None:
            raise ConfigurationError(
                f"Unknown sweep parameter: {parameter!r}. "
                f"Use one of: {', '.join(sorted(set(SWEEP_PARAMETERS.values())))}"
            )

        rows = []
        for value in values:
            point = state.with_changes(**{field_name: float(value)})
            atmosphere, _, aero = self.compute_aero(point)
            rows.append({
                field_name: float(value),
                "cl": aero.cl,
                "cd": aero.cd,
                "lift": aero.lift,
                "drag": aero.drag,
                "reynolds": aero.reynolds,
                "lift_over_drag": aero.lift_over_drag,
                "cd0": aero.cd0,
                "induced_drag_coefficient": aero.induced_drag_coefficient,
                "density": atmosphere.density,
            })

        columns = [field_name, "cl", "cd", "lift", "drag", "reynolds",
                   "lift_over_drag", "cd0", "induced_drag_coefficient", "density"]
        return pd.DataFrame(rows, columns=columns)

    def lift_curve(
        self,
        state: InputState,
        angle_range: Tuple[float, float] = (-20.0, 20.0),
        num_points: int = 41
    ) -> pd.DataFrame:
        """Angle-of-attack sweep over an evenly spaced range."""
        angles = np.linspace(angle_range[0], angle_range[1], num_points)
        return self.sweep(state, "angle_deg", angles)


def compute_outputs(
    state: InputState,
    config: Optional[FoilAnalyzerConfig] = None
) -> FoilOutputs:
    """Compute all outputs for a state with a default analyzer."""
    return FoilAnalyzer(config).compute_all(state)
