"""
Aerodynamic Coefficient Model
=============================

Lift and drag coefficients, Reynolds number and forces for the current
input state.

Theory Background:
-----------------

**Lift (thin airfoil):**
    cl = 2π·(α − α₀),   α₀ = −β

**Lift (Joukowski circulation):**
    cl = 4π·Γ / c_mapped

**Stall multiplier (|α| > 10°, stall mode only):**
    cl ← cl · (0.5 + 0.1·|α| − 0.005·α²)

**Aspect-ratio correction:**
    cl ← cl / (1 + |cl|/(π·AR)),   AR = b²/S

**Drag:**
    cd = cd0 · (Re_ref / max(Re, Re_ref))^0.11 + cl²/(π·AR·e)

**Reynolds number:**
    Re = (V/vconv)·(c/lconv)·(ρ/μ)

**Forces:**
    L = q·S·cl,   D = q·S·cd

Forces are returned in the unit system's display units (lb or N).

Usage:
------
    from src.foil_analyzer.atmosphere import sample_atmosphere
    from src.foil_analyzer.coefficients import compute_coefficients

    state = InputState(angle_deg=5.0, thickness_percent=12.0)
    atmosphere = sample_atmosphere(state.environment, state.altitude,
                                   state.unit_system)
    result = compute_coefficients(state, atmosphere)
    print(result.summary())
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from scipy import optimize

from .atmosphere import AtmosphereSample
from .config import (
    DEFAULT_CONFIG,
    DragModel,
    FoilAnalyzerConfig,
    LiftMode,
    LiftModel,
    force_conversion,
    length_conversion,
    velocity_conversion,
)
from .debugger import CalculationDebugger
from .drag_table import table_profile_drag
from .geometry import GeometryParameters, joukowski_parameters
from .state import InputState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AeroResult:
    """
    Aerodynamic coefficients and forces for one input state.

    Attributes:
    ----------
    cl, cd : float
        Lift and drag coefficients.

    lift, drag : float
        Forces (lb imperial, N metric).

    reynolds : float
        Chord Reynolds number.

    lift_over_drag : float
        L/D, or 0 when undefined.

    cd0 : float
        Profile drag after the Reynolds correction.

    induced_drag_coefficient : float
        Induced drag term included in cd.

    dynamic_pressure : float
        q (lb/ft²).

    aspect_ratio : float
        Wing aspect ratio used by the corrections.
    """

    cl: float
    cd: float
    lift: float
    drag: float
    reynolds: float
    lift_over_drag: float
    cd0: float = 0.0
    induced_drag_coefficient: float = 0.0
    dynamic_pressure: float = 0.0
    aspect_ratio: float = 0.0

    def summary(self) -> str:
        """Generate a formatted summary string."""
        return (
            f"{'=' * 50}\n"
            f"CL: {self.cl:.4f}   CD: {self.cd:.5f}\n"
            f"Lift: {self.lift:.2f}   Drag: {self.drag:.3f}\n"
            f"L/D: {self.lift_over_drag:.2f}\n"
            f"Reynolds: {self.reynolds:.4g}\n"
            f"{'=' * 50}"
        )


# =============================================================================
# Building Blocks
# =============================================================================

def reynolds_number(
    velocity: float,
    chord: float,
    atmosphere: AtmosphereSample,
    unit_system
) -> float:
    """
    Chord Reynolds number from display-unit velocity and chord.

    Returns 0 when velocity or viscosity is zero.
    """
    if velocity == 0 or atmosphere.viscosity == 0:
        return 0.0
    vconv = velocity_conversion(unit_system)
    lconv = length_conversion(unit_system)
    return (velocity / vconv) * (chord / lconv) * (atmosphere.density / atmosphere.viscosity)


def stall_factor(angle_deg: float, stall_angle_deg: float = 10.0) -> float:
    """Post-stall lift multiplier, 1 inside the stall angle."""
    a = abs(angle_deg)
    if a <= stall_angle_deg:
        return 1.0
    return 0.5 + 0.1 * a - 0.005 * a * a


def lift_coefficient(
    geometry: GeometryParameters,
    config: Optional[FoilAnalyzerConfig] = None
) -> float:
    """
    Section lift coefficient before stall and aspect-ratio corrections.

    Parameters:
    ----------
    geometry : GeometryParameters
        Mapping parameters at the angle of attack.

    config : FoilAnalyzerConfig, optional
        Selects THIN_AIRFOIL or JOUKOWSKI.
    """
    config = config if config is not None else DEFAULT_CONFIG

    if config.lift_model is LiftModel.JOUKOWSKI:
        return 4.0 * math.pi * geometry.gamma / geometry.mapped_chord

    alpha = math.radians(geometry.angle_deg)
    alpha0 = math.radians(-geometry.beta)
    return 2.0 * math.pi * (alpha - alpha0)


def aspect_ratio_correction(cl: float, aspect_ratio: float) -> float:
    """Finite-wing lift correction; unchanged for a non-positive AR."""
    if aspect_ratio <= 0:
        return cl
    return cl / (1.0 + abs(cl) / (math.pi * aspect_ratio))


def profile_drag(
    state: InputState,
    geometry: GeometryParameters,
    config: Optional[FoilAnalyzerConfig] = None
) -> float:
    """Uncorrected profile drag coefficient cd0 from the selected drag model."""
    config = config if config is not None else DEFAULT_CONFIG

    if config.drag_model is DragModel.POLYNOMIAL_TABLE:
        return table_profile_drag(
            geometry.camber_percent, geometry.thickness_percent, state.angle_deg
        )
    return (
        config.cd0_base
        + config.cd0_thickness_slope * (geometry.thickness_percent / 12.0)
        + config.cd0_camber_slope * abs(geometry.camber_percent)
    )


def reynolds_factor(reynolds: float, config: Optional[FoilAnalyzerConfig] = None) -> float:
    """Low-Reynolds profile drag multiplier, never below 1× reference."""
    config = config if config is not None else DEFAULT_CONFIG
    ref = config.reynolds_reference
    return (ref / max(reynolds, ref)) ** config.reynolds_exponent


def lift_over_drag(lift: float, drag: float) -> float:
    """L/D with 0 for zero or non-finite forces."""
    if not (math.isfinite(lift) and math.isfinite(drag)):
        return 0.0
    if drag == 0 or lift == 0:
        return 0.0
    return lift / drag


# =============================================================================
# Coefficient Model
# =============================================================================

def compute_coefficients(
    state: InputState,
    atmosphere: AtmosphereSample,
    config: Optional[FoilAnalyzerConfig] = None,
    debugger: Optional[CalculationDebugger] = None,
    geometry: Optional[GeometryParameters] = None
) -> AeroResult:
    """
    Compute lift and drag coefficients and forces.

    Parameters:
    ----------
    state : InputState
        Geometry, flight condition and correction flags.

    atmosphere : AtmosphereSample
        Fluid properties at the state's altitude.

    config : FoilAnalyzerConfig, optional
        Model selection and coefficient constants.

    debugger : CalculationDebugger, optional
        Receives every formula step when given.

    geometry : GeometryParameters, optional
        Precomputed mapping parameters for the state. Computed when None.

    Returns:
    -------
    AeroResult
    """
    config = config if config is not None else DEFAULT_CONFIG
    if geometry is None:
        geometry = joukowski_parameters(
            state.camber_percent, state.thickness_percent, state.angle_deg,
            state.shape_kind, config,
        )

    trace = debugger is not None
    flags = state.corrections
    aspect_ratio = state.aspect_ratio

    if trace:
        debugger.start_section("Reynolds Number")
    reynolds = reynolds_number(state.velocity, state.chord, atmosphere, state.unit_system)
    if trace:
        debugger.add_step(
            description="Chord Reynolds number",
            formula="Re = (V/vconv)·(c/lconv)·(ρ/μ)",
            variables={"V": state.velocity, "c": state.chord,
                       "rho": atmosphere.density, "mu": atmosphere.viscosity},
            result=reynolds,
            result_name="Re",
        )

    if state.velocity == 0:
        logger.debug("Zero velocity: coefficients and forces set to 0")
        return AeroResult(
            cl=0.0, cd=0.0, lift=0.0, drag=0.0, reynolds=reynolds,
            lift_over_drag=0.0, aspect_ratio=aspect_ratio,
        )

    # -------------------------------------------------------------------------
    # Lift
    # -------------------------------------------------------------------------

    if trace:
        debugger.start_section("Lift Coefficient")
    cl = lift_coefficient(geometry, config)
    if trace:
        debugger.add_step(
            description=f"Section lift ({config.lift_model.value})",
            formula=("cl = 4π·Γ/c_mapped" if config.lift_model is LiftModel.JOUKOWSKI
                     else "cl = 2π·(α − α₀), α₀ = −β"),
            variables={"alpha": state.angle_deg, "beta": geometry.beta,
                       "gamma": geometry.gamma},
            result=cl,
            result_name="cl",
        )

    if state.lift_mode is LiftMode.STALL:
        factor = stall_factor(state.angle_deg, config.stall_angle_deg)
        if factor != 1.0:
            cl *= factor
            if trace:
                debugger.add_step(
                    description="Stall multiplier",
                    formula="cl ← cl·(0.5 + 0.1·|α| − 0.005·α²)",
                    variables={"alpha": state.angle_deg, "factor": factor},
                    result=cl,
                    result_name="cl",
                )

    if flags.aspect_ratio and aspect_ratio > 0:
        cl = aspect_ratio_correction(cl, aspect_ratio)
        if trace:
            debugger.add_step(
                description="Aspect-ratio correction",
                formula="cl ← cl/(1 + |cl|/(π·AR))",
                variables={"AR": aspect_ratio},
                result=cl,
                result_name="cl",
            )

    # -------------------------------------------------------------------------
    # Drag
    # -------------------------------------------------------------------------

    if trace:
        debugger.start_section("Drag Coefficient")

    cd0 = 0.0
    cdi = 0.0
    if state.lift_mode is LiftMode.IDEAL:
        cd = 0.0
    else:
        cd0 = profile_drag(state, geometry, config)
        if trace:
            debugger.add_step(
                description=f"Profile drag ({config.drag_model.value})",
                formula=("table(camber, thickness, α)"
                         if config.drag_model is DragModel.POLYNOMIAL_TABLE
                         else "cd0 = 0.01 + 0.002·(t/12) + 0.0001·|camber|"),
                variables={"camber": geometry.camber_percent,
                           "thickness": geometry.thickness_percent},
                result=cd0,
                result_name="cd0",
            )

        if flags.reynolds:
            cd0 *= reynolds_factor(reynolds, config)
            if trace:
                debugger.add_step(
                    description="Reynolds correction",
                    formula="cd0 ← cd0·(Re_ref/max(Re, Re_ref))^0.11",
                    variables={"Re": reynolds, "Re_ref": config.reynolds_reference},
                    result=cd0,
                    result_name="cd0",
                )

        if flags.induced_drag and aspect_ratio > 0:
            cdi = cl * cl / (math.pi * aspect_ratio * config.oswald_efficiency)
            if trace:
                debugger.add_step(
                    description="Induced drag",
                    formula="cdi = cl²/(π·AR·e)",
                    variables={"cl": cl, "AR": aspect_ratio,
                               "e": config.oswald_efficiency},
                    result=cdi,
                    result_name="cdi",
                )
        cd = cd0 + cdi

    # -------------------------------------------------------------------------
    # Forces
    # -------------------------------------------------------------------------

    q = atmosphere.dynamic_pressure(state.velocity)
    scale = state.wing_area * force_conversion(state.unit_system) / (
        length_conversion(state.unit_system) ** 2
    )
    lift = q * cl * scale
    drag = q * cd * scale
    ratio = lift_over_drag(lift, drag)

    if trace:
        debugger.start_section("Forces")
        debugger.add_step(
            description="Lift force",
            formula="L = q·S·cl",
            variables={"q": q, "S": state.wing_area, "cl": cl},
            result=lift,
            result_name="L",
        )
        debugger.add_step(
            description="Drag force",
            formula="D = q·S·cd",
            variables={"q": q, "S": state.wing_area, "cd": cd},
            result=drag,
            result_name="D",
        )

    return AeroResult(
        cl=cl,
        cd=cd,
        lift=lift,
        drag=drag,
        reynolds=reynolds,
        lift_over_drag=ratio,
        cd0=cd0,
        induced_drag_coefficient=cdi,
        dynamic_pressure=q,
        aspect_ratio=aspect_ratio,
    )


def find_zero_lift_angle(
    state: InputState,
    config: Optional[FoilAnalyzerConfig] = None
) -> float:
    """
    Angle of attack (deg) where the section lift vanishes.

    Solves the lift model without stall or aspect-ratio corrections with
    a bracketed root search. The result agrees with −β from the mapping.

    Parameters:
    ----------
    state : InputState
        Supplies camber, thickness and shape.

    config : FoilAnalyzerConfig, optional
        Selects the lift model and root tolerance.

    Returns:
    -------
    float
        Zero-lift angle (deg).
    """
    config = config if config is not None else DEFAULT_CONFIG

    def section_lift(angle_deg: float) -> float:
        geometry = joukowski_parameters(
            state.camber_percent, state.thickness_percent, angle_deg,
            state.shape_kind, config,
        )
        return lift_coefficient(geometry, config)

    # |β| < 90° so the lift changes sign across ±90°
    result = optimize.root_scalar(
        section_lift,
        bracket=(-90.0, 90.0),
        method="brentq",
        xtol=config.root_finding_tolerance,
    )
    return result.root
