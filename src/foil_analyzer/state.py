"""
Input State Module
==================

Immutable description of one simulation request: body geometry, flight
conditions, environment and analysis options. Every calculation in the
package is a pure function of an InputState plus the configuration.

Usage:
------
    from src.foil_analyzer.state import InputState

    state = InputState(angle_deg=5.0, thickness_percent=12.0, velocity=100.0)
    climb = state.with_changes(altitude=10000.0)
"""

from dataclasses import dataclass, field, replace
import math
import numbers

from .config import (
    ConfigurationError,
    Environment,
    LiftMode,
    ShapeKind,
    UnitSystem,
    coerce_enum,
)


@dataclass(frozen=True)
class CorrectionFlags:
    """Optional corrections applied by the coefficient model."""
    aspect_ratio: bool = True
    induced_drag: bool = True
    reynolds: bool = True


@dataclass(frozen=True)
class InputState:
    """
    Caller-supplied simulation inputs.

    Attributes:
    ----------
    angle_deg : float
        Angle of attack (deg). Typical slider range -20 to 20.

    camber_percent : float
        Maximum camber (% chord).

    thickness_percent : float
        Maximum thickness (% chord).

    velocity : float
        Freestream speed (mph imperial, km/h metric).

    altitude : float
        Altitude (ft imperial, m metric). Depth below the surface for
        the liquid environment is the negative altitude.

    chord, span, wing_area : float
        Planform dimensions (ft / ft² imperial, m / m² metric).

    unit_system : UnitSystem
        Unit system for inputs and outputs.

    environment : Environment
        Fluid environment.

    corrections : CorrectionFlags
        Aspect-ratio, induced-drag and Reynolds corrections.

    lift_mode : LiftMode
        STALL applies the stall multiplier and profile drag; IDEAL
        models inviscid flow with zero drag.

    shape_kind : ShapeKind
        Body produced by the conformal mapping.
    """

    angle_deg: float = 5.0
    camber_percent: float = 0.0
    thickness_percent: float = 12.5
    velocity: float = 100.0
    altitude: float = 0.0
    chord: float = 5.0
    span: float = 20.0
    wing_area: float = 100.0
    unit_system: UnitSystem = UnitSystem.IMPERIAL
    environment: Environment = Environment.EARTH
    corrections: CorrectionFlags = field(default_factory=CorrectionFlags)
    lift_mode: LiftMode = LiftMode.STALL
    shape_kind: ShapeKind = ShapeKind.AIRFOIL

    def __post_init__(self):
        # Frozen dataclass: normalize enum fields through object.__setattr__
        object.__setattr__(
            self, "unit_system",
            coerce_enum(UnitSystem, self.unit_system, "unit system"),
        )
        object.__setattr__(
            self, "environment",
            coerce_enum(Environment, self.environment, "environment"),
        )
        object.__setattr__(
            self, "lift_mode",
            coerce_enum(LiftMode, self.lift_mode, "lift mode"),
        )
        object.__setattr__(
            self, "shape_kind",
            coerce_enum(ShapeKind, self.shape_kind, "shape kind"),
        )
        if not isinstance(self.corrections, CorrectionFlags):
            raise ConfigurationError(
                f"corrections must be CorrectionFlags, got {type(self.corrections).__name__}"
            )
        for name in ("angle_deg", "camber_percent", "thickness_percent",
                     "velocity", "altitude", "chord", "span", "wing_area"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(
                    f"{name} must be a real number, got {value!r}"
                )
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")

    @property
    def aspect_ratio(self) -> float:
        """Wing aspect ratio (AR = b²/S), 0 for a degenerate wing area."""
        if self.wing_area > 0:
            return self.span ** 2 / self.wing_area
        return 0.0

    def with_changes(self, **kwargs) -> "InputState":
        """Return a copy of this state with the given fields replaced."""
        return replace(self, **kwargs)
