"""
Airfoil Geometry Mapper
=======================

Joukowski conformal mapping from a circle in the cylinder plane to an
airfoil-like body, together with the circulation that satisfies the
Kutta condition and the surface velocity/pressure distribution.

Theory Background:
-----------------

**Joukowski transform:**
    z = w + 1/w

A circle of radius r centered at (xc, yc) that passes through w = 1
maps to an airfoil with a sharp trailing edge at z = 2. In polar form
(w = rg·e^(i·thg)):

    xm = (rg + 1/rg)·cos(thg)
    ym = (rg − 1/rg)·sin(thg)

**Circle parameters (normalized camber c and thickness t):**
    r  = t/4 + sqrt(t²/16 + yc² + 1)
    xc = 1 − sqrt(r² − yc²)
    β  = asin(yc / r)

**Kutta condition:**
    Γ = 2·r·sin(α + β)

Lift vanishes at the zero-lift angle α = −β.

**Surface velocity (potential flow about a circulating cylinder):**
    u_r  = cos(θ − α)·(1 − r²/ρ²)
    u_θ  = −sin(θ − α)·(1 + r²/ρ²) − Γ/ρ
    V/V∞ = sqrt(u_r² + u_θ²) / |dz/dw|
    Cp   = 1 − (V/V∞)²

The squared Jacobian |dz/dw|² vanishes at the trailing edge and is
floored there.

Usage:
------
    from src.foil_analyzer.geometry import map_geometry

    params, loop = map_geometry(camber_percent=5.0, thickness_percent=12.0,
                                angle_deg=4.0)
    print(params.r, loop.pressure_coefficient.min())
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .config import (
    DEFAULT_CONFIG,
    FoilAnalyzerConfig,
    GeometryConvention,
    ShapeKind,
    coerce_enum,
)

logger = logging.getLogger(__name__)

# Divisors turning percent-of-chord inputs into mapping parameters
THICKNESS_SCALE = 25.0
CAMBER_SCALE = {
    GeometryConvention.FOILSIM: 50.0,      # camber/25, halved
    GeometryConvention.SHAPE_CORE: 20.0,
}


@dataclass(frozen=True)
class GeometryParameters:
    """
    Joukowski circle parameters and circulation.

    Attributes:
    ----------
    xc, yc : float
        Circle-center offsets in the cylinder plane.

    r : float
        Circle radius (≥ 1).

    beta : float
        Kutta angle offset asin(yc/r) (deg). −beta is the zero-lift angle.

    gamma : float
        Circulation strength for the angle of attack.

    angle_deg : float
        Angle of attack the circulation was computed for (deg).

    camber_percent, thickness_percent : float
        Inputs after domain clamping.
    """

    xc: float
    yc: float
    r: float
    beta: float
    gamma: float
    angle_deg: float
    camber_percent: float
    thickness_percent: float

    @property
    def half_width(self) -> float:
        """Horizontal half-chord of the circle, sqrt(r² − yc²)."""
        return math.sqrt(max(self.r * self.r - self.yc * self.yc, 0.0))

    @property
    def leading_edge(self) -> float:
        """Mapped x position of the leading edge."""
        leg = self.xc - self.half_width
        return leg + 1.0 / leg

    @property
    def trailing_edge(self) -> float:
        """Mapped x position of the trailing edge."""
        teg = self.xc + self.half_width
        return teg + 1.0 / teg

    @property
    def mapped_chord(self) -> float:
        """Chord length of the mapped body (≈ 4 for thin sections)."""
        return self.trailing_edge - self.leading_edge


@dataclass(frozen=True)
class SurfaceLoop:
    """
    Closed loop of surface points around the mapped body.

    Points run counter-clockwise on the circle: upper surface from the
    trailing edge to the leading edge, then lower surface back to the
    trailing edge. The last point repeats the first.

    Attributes:
    ----------
    x, y : np.ndarray
        Mapped coordinates with the freestream horizontal.

    pressure_coefficient : np.ndarray
        Cp = 1 − (V/V∞)².

    velocity_ratio : np.ndarray
        Local surface speed over freestream speed.

    theta_deg : np.ndarray
        Circle angle of each point (deg).
    """

    x: np.ndarray
    y: np.ndarray
    pressure_coefficient: np.ndarray
    velocity_ratio: np.ndarray
    theta_deg: np.ndarray

    def __len__(self) -> int:
        return len(self.x)

    @property
    def leading_edge_index(self) -> int:
        """Index of the most upstream point."""
        return int(np.argmin(self.x))

    def percent_chord(self) -> np.ndarray:
        """Plot abscissa used by the surface distribution plots (0-100)."""
        return 100.0 * (self.x / 4.0 + 0.5)

    def upper_surface(self) -> pd.DataFrame:
        """Upper surface rows, leading edge to trailing edge."""
        le = self.leading_edge_index
        return self.to_dataframe().iloc[le::-1].reset_index(drop=True)

    def lower_surface(self) -> pd.DataFrame:
        """Lower surface rows, leading edge to trailing edge."""
        le = self.leading_edge_index
        return self.to_dataframe().iloc[le:].reset_index(drop=True)

    def to_dataframe(self) -> pd.DataFrame:
        """Surface table with one row per point."""
        return pd.DataFrame({
            "theta_deg": self.theta_deg,
            "x": self.x,
            "y": self.y,
            "percent_chord": self.percent_chord(),
            "pressure_coefficient": self.pressure_coefficient,
            "velocity_ratio": self.velocity_ratio,
        })


# =============================================================================
# Parameter Calculations
# =============================================================================

def clamp_inputs(
    camber_percent: float,
    thickness_percent: float,
    config: Optional[FoilAnalyzerConfig] = None
) -> Tuple[float, float]:
    """
    Clamp camber and thickness to the mapping's valid domain.

    Negative thickness has no geometric meaning; it is raised to zero.
    """
    config = config if config is not None else DEFAULT_CONFIG

    thickness = min(max(thickness_percent, 0.0), config.max_thickness_percent)
    camber = min(max(camber_percent, -config.max_camber_percent),
                 config.max_camber_percent)

    if thickness != thickness_percent or camber != camber_percent:
        logger.debug(
            "Clamped geometry inputs: camber %.3f -> %.3f, thickness %.3f -> %.3f",
            camber_percent, camber, thickness_percent, thickness,
        )
    return camber, thickness


def circulation(angle_deg: float, beta_deg: float, r: float) -> float:
    """Kutta-condition circulation Γ = 2·r·sin(α + β)."""
    return 2.0 * r * math.sin(math.radians(angle_deg + beta_deg))


def joukowski_parameters(
    camber_percent: float,
    thickness_percent: float,
    angle_deg: float,
    shape_kind=ShapeKind.AIRFOIL,
    config: Optional[FoilAnalyzerConfig] = None
) -> GeometryParameters:
    """
    Compute the circle parameters and circulation for a body.

    Parameters:
    ----------
    camber_percent : float
        Camber (% chord). Clamped to the configured range.

    thickness_percent : float
        Thickness (% chord). Clamped to [0, max].

    angle_deg : float
        Angle of attack (deg).

    shape_kind : ShapeKind
        AIRFOIL places the circle through w = 1 (sharp trailing edge),
        ELLIPSE centers it on the imaginary axis, PLATE forces zero
        thickness.

    config : FoilAnalyzerConfig, optional
        Supplies the normalization convention and clamps.

    Returns:
    -------
    GeometryParameters
    """
    config = config if config is not None else DEFAULT_CONFIG
    shape_kind = coerce_enum(ShapeKind, shape_kind, "shape kind")

    camber, thickness = clamp_inputs(camber_percent, thickness_percent, config)
    if shape_kind is ShapeKind.PLATE:
        thickness = 0.0

    t = thickness / THICKNESS_SCALE
    yc = camber / CAMBER_SCALE[config.geometry_convention]

    # r ≥ 1 from the sqrt term; r > |yc| keeps r² − yc² positive
    r = t / 4.0 + math.sqrt(t * t / 16.0 + yc * yc + 1.0)

    if shape_kind is ShapeKind.ELLIPSE:
        xc = 0.0
    else:
        xc = 1.0 - math.sqrt(r * r - yc * yc)

    beta = math.degrees(math.asin(yc / r))

    return GeometryParameters(
        xc=xc,
        yc=yc,
        r=r,
        beta=beta,
        gamma=circulation(angle_deg, beta, r),
        angle_deg=angle_deg,
        camber_percent=camber,
        thickness_percent=thickness,
    )


# =============================================================================
# Mapping
# =============================================================================

def joukowski_map(xg, yg):
    """
    Map cylinder-plane points (already translated) to the physical plane.

    Accepts scalars or numpy arrays. Points must not sit at the origin.
    """
    rg = np.hypot(xg, yg)
    thg = np.arctan2(yg, xg)
    xm = (rg + 1.0 / rg) * np.cos(thg)
    ym = (rg - 1.0 / rg) * np.sin(thg)
    return xm, ym


def derotate(xm, ym, angle_deg: float):
    """Rotate mapped points by −angle so the freestream is horizontal."""
    radm = np.hypot(xm, ym)
    thetm = np.arctan2(ym, xm)
    alpha = math.radians(angle_deg)
    return radm * np.cos(thetm - alpha), radm * np.sin(thetm - alpha)


def surface_velocity_ratio(
    theta,
    params: GeometryParameters,
    jacobian_floor: float = 0.01
):
    """
    Surface speed ratio V/V∞ at circle angles theta (radians).

    Accepts scalars or numpy arrays.
    """
    r = params.r
    alpha = math.radians(params.angle_deg)

    # On the circle ρ = r, so only the tangential component remains
    uth = -np.sin(theta - alpha) * 2.0 - params.gamma / r
    usq = uth * uth

    xg = r * np.cos(theta) + params.xc
    yg = r * np.sin(theta) + params.yc
    rg = np.hypot(xg, yg)
    thg = np.arctan2(yg, xg)

    jake1 = 1.0 - np.cos(2.0 * thg) / (rg * rg)
    jake2 = np.sin(2.0 * thg) / (rg * rg)
    jakesq = np.maximum(jake1 * jake1 + jake2 * jake2, jacobian_floor)

    return np.sqrt(usq / jakesq)


def generate_surface_loop(
    params: GeometryParameters,
    n_points: Optional[int] = None,
    config: Optional[FoilAnalyzerConfig] = None
) -> SurfaceLoop:
    """
    Sample the mapped body surface.

    Parameters:
    ----------
    params : GeometryParameters
        Circle parameters and circulation.

    n_points : int, optional
        Number of points including the repeated closing point.
        Defaults to config.surface_points (37).

    config : FoilAnalyzerConfig, optional
        Supplies the point count and the Jacobian floor.

    Returns:
    -------
    SurfaceLoop
    """
    config = config if config is not None else DEFAULT_CONFIG
    n_points = n_points if n_points is not None else config.surface_points

    theta_deg = np.linspace(0.0, 360.0, n_points)
    theta = np.radians(theta_deg)

    xg = params.r * np.cos(theta) + params.xc
    yg = params.r * np.sin(theta) + params.yc
    xm, ym = joukowski_map(xg, yg)
    x, y = derotate(xm, ym, params.angle_deg)

    ratio = surface_velocity_ratio(theta, params, config.jacobian_floor)

    return SurfaceLoop(
        x=x,
        y=y,
        pressure_coefficient=1.0 - ratio * ratio,
        velocity_ratio=ratio,
        theta_deg=theta_deg,
    )


def map_geometry(
    camber_percent: float,
    thickness_percent: float,
    angle_deg: float,
    shape_kind=ShapeKind.AIRFOIL,
    config: Optional[FoilAnalyzerConfig] = None
) -> Tuple[GeometryParameters, SurfaceLoop]:
    """
    Compute the mapping parameters and the surface loop in one call.

    Returns:
    -------
    tuple
        (GeometryParameters, SurfaceLoop)
    """
    params = joukowski_parameters(
        camber_percent, thickness_percent, angle_deg, shape_kind, config
    )
    return params, generate_surface_loop(params, config=config)
