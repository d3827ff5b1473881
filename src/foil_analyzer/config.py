"""
Foil Analyzer Configuration Module
==================================

This module contains configuration settings, enumerations and physical
constants for the airfoil flow-field simulator.

All internal calculations run in the legacy FoilSim imperial system
(feet, slugs, pounds, degrees Rankine). The unit system selected by the
caller only changes how velocity, length and force are scaled on the way
in and out, using the fixed conversion factors below. These are display
scale factors of the legacy FoilSim applet, not exact SI factors.

Physical Constants:
------------------
- SEA_LEVEL_TEMPERATURE_R: Standard temperature at sea level (518.6 °R)
- SEA_LEVEL_PRESSURE_PSF: Standard pressure at sea level (2116 lb/ft²)
- GAS_CONSTANT_EARTH: Gas constant for air (1716 ft·lb/(slug·°R))

Usage:
------
    from src.foil_analyzer.config import FoilAnalyzerConfig, UnitSystem

    config = FoilAnalyzerConfig(max_workers=4)
    vconv = velocity_conversion(UnitSystem.METRIC)  # 1.097
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConfigurationError(ValueError):
    """Raised for structurally invalid configuration (unknown enum, bad setting)."""


# =============================================================================
# Enumerations
# =============================================================================

class UnitSystem(Enum):
    """Unit system used for inputs and outputs."""
    IMPERIAL = "imperial"   # mph, ft, lb
    METRIC = "metric"       # km/h, m, N


class Environment(Enum):
    """Fluid environment surrounding the body."""
    EARTH = "earth"
    MARS = "mars"
    MERCURY_LIQUID = "mercury_liquid"   # constant-density liquid, not the planet
    VENUS = "venus"


class LiftMode(Enum):
    """Stall (separating flow) or ideal (inviscid) analysis."""
    STALL = "stall"
    IDEAL = "ideal"


class LiftModel(Enum):
    """Lift-coefficient formula."""
    THIN_AIRFOIL = "thin_airfoil"   # cl = 2π(α − α₀)
    JOUKOWSKI = "joukowski"         # cl = 4π·Γ / mapped chord


class DragModel(Enum):
    """Profile drag formula."""
    ANALYTIC = "analytic"                   # cd0 linear in thickness and |camber|
    POLYNOMIAL_TABLE = "polynomial_table"   # interpolated polynomial table


class GeometryConvention(Enum):
    """Camber/thickness normalization used by the Joukowski mapping."""
    FOILSIM = "foilsim"         # yc = camber/50, t = thickness/25
    SHAPE_CORE = "shape_core"   # yc = camber/20, t = thickness/25


class ShapeKind(Enum):
    """Body shape produced by the conformal mapping."""
    AIRFOIL = "airfoil"
    ELLIPSE = "ellipse"
    PLATE = "plate"


def coerce_enum(enum_cls, value, field_name: str = "value"):
    """
    Convert a member or its string value to an enum member.

    Raises:
    ------
    ConfigurationError
        If the value is not a member of the enumeration.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            pass
    valid = ", ".join(member.value for member in enum_cls)
    raise ConfigurationError(
        f"Unknown {field_name}: {value!r}. Use one of: {valid}"
    )


# =============================================================================
# Unit Conversion Factors (legacy display scale factors)
# =============================================================================

# Velocity: display units per ft/s
VELOCITY_CONVERSION = {
    UnitSystem.IMPERIAL: 0.6818,    # mph
    UnitSystem.METRIC: 1.097,       # km/h
}

# Length: display units per ft
LENGTH_CONVERSION = {
    UnitSystem.IMPERIAL: 1.0,
    UnitSystem.METRIC: 0.3048,
}

# Force: display units per lb
FORCE_CONVERSION = {
    UnitSystem.IMPERIAL: 1.0,
    UnitSystem.METRIC: 4.448,
}

# Pressure: sea-level pressure in display units (psi / kPa)
PRESSURE_CONVERSION = {
    UnitSystem.IMPERIAL: 14.7,
    UnitSystem.METRIC: 101.3,
}


def _lookup(table: dict, unit_system) -> float:
    unit_system = coerce_enum(UnitSystem, unit_system, "unit system")
    return table[unit_system]


def velocity_conversion(unit_system) -> float:
    """Velocity scale factor (display velocity per ft/s)."""
    return _lookup(VELOCITY_CONVERSION, unit_system)


def length_conversion(unit_system) -> float:
    """Length scale factor (display length per ft)."""
    return _lookup(LENGTH_CONVERSION, unit_system)


def force_conversion(unit_system) -> float:
    """Force scale factor (display force per lb)."""
    return _lookup(FORCE_CONVERSION, unit_system)


def pressure_conversion(unit_system) -> float:
    """Sea-level pressure expressed in display pressure units."""
    return _lookup(PRESSURE_CONVERSION, unit_system)


# =============================================================================
# Physical Constants
# =============================================================================

# Earth standard atmosphere (imperial)
SEA_LEVEL_TEMPERATURE_R = 518.6
SEA_LEVEL_PRESSURE_PSF = 2116.0
TROPOPAUSE_ALTITUDE_FT = 36152.0
STRATOSPHERE_TEMPERATURE_R = 389.98
TROPOSPHERE_LAPSE_R_PER_KFT = 3.56
PRESSURE_EXPONENT = 5.256
GAS_CONSTANT_EARTH = 1716.0

# Mars and Venus share the CO2 gas constant
GAS_CONSTANT_CO2 = 1149.0
MARS_LAYER_ALTITUDE = 22960.0
MARS_SURFACE_PRESSURE_PSF = 14.62
VENUS_SURFACE_TEMPERATURE_R = 1331.6
VENUS_SURFACE_PRESSURE_PSF = 194672.0

# Constant-density liquid environment
LIQUID_DENSITY = 1.94          # slug/ft³
LIQUID_TEMPERATURE_R = 520.0
LIQUID_GRAVITY = 32.2          # ft/s²

# Sutherland viscosity references (slug/(ft·s))
VISCOSITY_REF_AIR = 3.62e-7
VISCOSITY_REF_LIQUID = 2.72e-5
SUTHERLAND_REF_TEMPERATURE_R = 518.688

# Rankine to Fahrenheit offset used by the vapor pressure correlation
RANKINE_OFFSET = 459.6


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class FoilAnalyzerConfig:
    """
    Configuration settings for the Foil Analyzer module.

    Attributes:
    ----------
    lift_model : LiftModel
        Lift coefficient formula. Default THIN_AIRFOIL.

    drag_model : DragModel
        Profile drag formula. Default ANALYTIC.

    geometry_convention : GeometryConvention
        Camber/thickness normalization for the Joukowski mapping.

    stall_angle_deg : float
        Angle of attack beyond which the stall multiplier applies (deg).

    oswald_efficiency : float
        Span efficiency factor for induced drag.

    reynolds_reference : float
        Reference Reynolds number for the profile drag correction.

    newton_max_iterations : int
        Maximum residual evaluations per streamline point.

    newton_tolerance : float
        Residual magnitude accepted as converged.

    streamline_count : int
        Number of streamlines (psv values) in the flow field.

    points_per_streamline : int
        Number of points traced along each streamline.

    max_workers : int, optional
        Thread count for computing streamlines. None computes them
        sequentially.
    """

    # -------------------------------------------------------------------------
    # Model Selection
    # -------------------------------------------------------------------------

    lift_model: LiftModel = LiftModel.THIN_AIRFOIL
    drag_model: DragModel = DragModel.ANALYTIC
    geometry_convention: GeometryConvention = GeometryConvention.FOILSIM

    # -------------------------------------------------------------------------
    # Aerodynamic Coefficients
    # -------------------------------------------------------------------------

    # Stall multiplier kicks in beyond this angle (deg)
    stall_angle_deg: float = 10.0

    # Oswald efficiency for induced drag
    oswald_efficiency: float = 0.85

    # Profile drag: cd0 = base + slope × (thickness% / 12) + camber_slope × |camber%|
    cd0_base: float = 0.01
    cd0_thickness_slope: float = 0.002
    cd0_camber_slope: float = 0.0001

    # Reynolds correction: cd0 × (Re_ref / max(Re, Re_ref))^exponent
    reynolds_reference: float = 5.0e4
    reynolds_exponent: float = 0.11

    # Absolute angle tolerance (deg) for the zero-lift angle search
    root_finding_tolerance: float = 1.0e-10

    # -------------------------------------------------------------------------
    # Atmosphere
    # -------------------------------------------------------------------------

    # Relative humidity (%) for the Earth vapor pressure term
    relative_humidity: float = 0.0

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    # Points on the closed surface loop (first == last)
    surface_points: int = 37

    # Input clamps (percent of chord)
    max_thickness_percent: float = 100.0
    max_camber_percent: float = 100.0

    # Squared Joukowski Jacobian floor at the trailing-edge singularity
    jacobian_floor: float = 0.01

    # -------------------------------------------------------------------------
    # Streamline Solver
    # -------------------------------------------------------------------------

    newton_max_iterations: int = 25
    newton_tolerance: float = 1.0e-5
    newton_relaxation: float = 0.5
    newton_min_derivative: float = 1.0e-8

    # Added to r² when a trial point falls inside the circle
    inside_circle_epsilon: float = 0.01

    streamline_count: int = 15
    points_per_streamline: int = 37

    # Upstream start of every streamline (cylinder plane)
    upstream_start: float = -10.0

    # Marching step along the local x-velocity
    march_step: float = 0.5

    # Floor on the x-velocity used for marching
    min_march_velocity: float = 0.05

    max_workers: Optional[int] = None

    def __post_init__(self):
        self.lift_model = coerce_enum(LiftModel, self.lift_model, "lift model")
        self.drag_model = coerce_enum(DragModel, self.drag_model, "drag model")
        self.geometry_convention = coerce_enum(
            GeometryConvention, self.geometry_convention, "geometry convention"
        )
        self.validate()

    def validate(self) -> None:
        """
        Check that solver and geometry settings are usable.

        Raises:
        ------
        ConfigurationError
            If a count or tolerance is out of range.
        """
        if self.newton_max_iterations < 1:
            raise ConfigurationError("newton_max_iterations must be at least 1")
        if self.newton_tolerance <= 0:
            raise ConfigurationError("newton_tolerance must be positive")
        if not 0 < self.newton_relaxation <= 1:
            raise ConfigurationError("newton_relaxation must be in (0, 1]")
        if self.surface_points < 3:
            raise ConfigurationError("surface_points must be at least 3")
        if self.streamline_count < 1 or self.points_per_streamline < 1:
            raise ConfigurationError("streamline counts must be at least 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError("max_workers must be None or at least 1")


# =============================================================================
# Default Configuration Instance
# =============================================================================

DEFAULT_CONFIG = FoilAnalyzerConfig()
