"""
Streamline Solver
=================

Traces streamlines of the potential flow around the Joukowski body.

Each streamline is a contour of constant stream function value psv of
the flow about a circulating cylinder, in the cylinder frame where the
freestream is aligned with the x axis:

    ψ(x, y) = y·(1 − r²/R²) + Γ·ln(R/r),   R² = x² + y²

For a marching x position the solver finds y with ψ(x, y) = psv using a
damped Newton iteration, maps (x, y) through the same rotation,
translation and Joukowski chain as the body surface, then advances x by
the local x-velocity.

Usage:
------
    from src.foil_analyzer.geometry import joukowski_parameters
    from src.foil_analyzer.streamlines import solve_flow_field

    params = joukowski_parameters(0.0, 12.0, 5.0)
    field = solve_flow_field(params)
    for line in field.streamlines:
        print(line.psv, line.points[:3])
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, FoilAnalyzerConfig
from .geometry import GeometryParameters, circulation, generate_surface_loop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewtonSolution:
    """
    Result of solving ψ(x, y) = psv for y at a fixed x.

    Attributes:
    ----------
    y : float
        Last iterate at which the residual was evaluated.

    residual : float
        Residual at y.

    iterations : int
        Number of residual evaluations.

    converged : bool
        True if |residual| fell below the tolerance.
    """

    y: float
    residual: float
    iterations: int
    converged: bool


@dataclass
class Streamline:
    """One traced streamline in the physical plane."""

    psv: float
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    cylinder_x: List[float] = field(default_factory=list)
    cylinder_y: List[float] = field(default_factory=list)
    converged: List[bool] = field(default_factory=list)

    @property
    def points(self) -> List[Tuple[float, float]]:
        return list(zip(self.x, self.y))

    @property
    def all_converged(self) -> bool:
        return all(self.converged)

    def __len__(self) -> int:
        return len(self.x)


@dataclass
class FlowField:
    """Body outline plus the family of streamlines around it."""

    body_x: np.ndarray
    body_y: np.ndarray
    streamlines: List[Streamline]

    @property
    def body_points(self) -> List[Tuple[float, float]]:
        return [(float(x), float(y)) for x, y in zip(self.body_x, self.body_y)]

    @property
    def unconverged_count(self) -> int:
        """Total number of points whose Newton solve hit a stopping guard."""
        return sum(
            1 for line in self.streamlines for ok in line.converged if not ok
        )


# =============================================================================
# Newton Solve
# =============================================================================

def initial_guess(psv: float, angle_deg: float, r: float) -> float:
    """Starting y for the Newton iteration."""
    if abs(psv) < 0.001:
        return r if angle_deg < 0.0 else -r
    return -10.0 if psv < 0.0 else 10.0


def solve_cylinder_y(
    x: float,
    psv: float,
    angle_deg: float,
    r: float,
    gamma: float,
    config: Optional[FoilAnalyzerConfig] = None
) -> NewtonSolution:
    """
    Solve the cylinder-plane stream function for y at fixed x.

    Parameters:
    ----------
    x : float
        Cylinder-plane x position.

    psv : float
        Target stream function value.

    angle_deg : float
        Angle of attack (deg). Selects the start side for psv ≈ 0.

    r : float
        Circle radius.

    gamma : float
        Circulation strength.

    config : FoilAnalyzerConfig, optional
        Iteration cap, tolerance, relaxation and guards.

    Returns:
    -------
    NewtonSolution
        The last evaluated iterate. Stops on convergence, on a vanishing
        derivative, or at the evaluation cap.
    """
    config = config if config is not None else DEFAULT_CONFIG

    r2 = r * r
    y = initial_guess(psv, angle_deg, r)
    evaluations = 0
    converged = False

    while True:
        rfac = x * x + y * y
        if rfac < r2:
            # Inside the circle: evaluate just outside it
            rfac = r2 + config.inside_circle_epsilon

        term = 1.0 - r2 / rfac
        residual = psv - y * term - gamma * math.log(math.sqrt(rfac) / r)
        evaluations += 1

        if abs(residual) < config.newton_tolerance:
            converged = True
            break
        if evaluations >= config.newton_max_iterations:
            break

        deriv = -term - 2.0 * y * y * r2 / (rfac * rfac) - gamma * y / rfac
        if abs(deriv) < config.newton_min_derivative:
            break

        y_next = y - config.newton_relaxation * residual / deriv
        if not math.isfinite(y_next):
            break
        y = y_next

    if not converged:
        logger.debug(
            "Newton solve stopped unconverged at x=%.4f psv=%.3f "
            "(residual %.3e after %d evaluations)",
            x, psv, residual, evaluations,
        )

    return NewtonSolution(
        y=y, residual=residual, iterations=evaluations, converged=converged
    )


# =============================================================================
# Mapping and Marching
# =============================================================================

def cylinder_to_physical(
    x: float,
    y: float,
    angle_deg: float,
    r: float,
    xc: float,
    yc: float
) -> Tuple[float, float]:
    """
    Map a solver-frame cylinder point to the physical plane.

    The point is rotated by +angle, translated to the circle center,
    Joukowski-mapped and rotated back by −angle. Points inside the
    circle are first pushed radially onto it.
    """
    alpha = math.radians(angle_deg)
    radius = math.hypot(x, y)
    theta = math.atan2(y, x)

    if radius < r:
        radius = r

    xs = radius * math.cos(theta + alpha) + xc
    ys = radius * math.sin(theta + alpha) + yc

    rg = math.hypot(xs, ys)
    thg = math.atan2(ys, xs)
    xm = (rg + 1.0 / rg) * math.cos(thg)
    ym = (rg - 1.0 / rg) * math.sin(thg)

    radm = math.hypot(xm, ym)
    thetm = math.atan2(ym, xm)
    return radm * math.cos(thetm - alpha), radm * math.sin(thetm - alpha)


def march_velocity(
    x: float,
    y: float,
    angle_deg: float,
    r: float,
    gamma: float
) -> float:
    """Potential-flow x-velocity at a solver-frame cylinder point."""
    r2 = r * r
    lrg2 = max(x * x + y * y, r2)
    lrg = math.sqrt(lrg2)
    theta = math.atan2(y, x)
    alpha = math.radians(angle_deg)

    ur = math.cos(theta - alpha) * (1.0 - r2 / lrg2)
    uth = -math.sin(theta - alpha) * (1.0 + r2 / lrg2) - gamma / lrg
    return ur * math.cos(theta) - uth * math.sin(theta)


def psv_family(count: int) -> List[float]:
    """
    Stream function values for a family of streamlines.

    Spaced 0.5 apart and centered so that an odd count includes 0
    (15 gives −3.5 … 3.5).
    """
    nln2 = count // 2 + 1
    return [-0.5 * (nln2 - 1) + 0.5 * (k - 1) for k in range(1, count + 1)]


def _stall_freezes(psv: float, angle_deg: float, x: float,
                   stall_angle_deg: float) -> bool:
    if abs(angle_deg) <= stall_angle_deg or x <= 0.0:
        return False
    return (psv > 0.0 and angle_deg > 0.0) or (psv < 0.0 and angle_deg < 0.0)


def solve_streamline(
    psv: float,
    angle_deg: float,
    r: float,
    xc: float,
    yc: float,
    gamma: float,
    n_points: Optional[int] = None,
    config: Optional[FoilAnalyzerConfig] = None
) -> Streamline:
    """
    Trace one streamline from the upstream start.

    Parameters:
    ----------
    psv : float
        Stream function value of the line.

    angle_deg : float
        Angle of attack (deg).

    r, xc, yc, gamma : float
        Circle parameters and circulation.

    n_points : int, optional
        Number of points. Defaults to config.points_per_streamline.

    config : FoilAnalyzerConfig, optional
        Solver, stall and marching settings.

    Returns:
    -------
    Streamline
        Physical-plane points in marching order with the cylinder-plane
        points and per-point convergence flags.
    """
    config = config if config is not None else DEFAULT_CONFIG
    n_points = n_points if n_points is not None else config.points_per_streamline

    line = Streamline(psv=psv)
    fxg = config.upstream_start

    for _ in range(n_points):
        solution = solve_cylinder_y(fxg, psv, angle_deg, r, gamma, config)
        lyg = solution.y

        x, y = cylinder_to_physical(fxg, lyg, angle_deg, r, xc, yc)
        if not (math.isfinite(x) and math.isfinite(y)):
            if line.x:
                x, y = line.x[-1], line.y[-1]
            else:
                x, y = fxg, lyg

        # Separated flow above the upper surface: hold the previous height
        if line.y and _stall_freezes(psv, angle_deg, x, config.stall_angle_deg):
            y = line.y[-1]

        line.x.append(x)
        line.y.append(y)
        line.cylinder_x.append(fxg)
        line.cylinder_y.append(lyg)
        line.converged.append(solution.converged)

        vx = march_velocity(fxg, lyg, angle_deg, r, gamma)
        fxg += config.march_step * max(vx, config.min_march_velocity)

    return line


def solve_flow_field(
    geometry: GeometryParameters,
    angle_deg: Optional[float] = None,
    config: Optional[FoilAnalyzerConfig] = None
) -> FlowField:
    """
    Compute the body outline and the full streamline family.

    Parameters:
    ----------
    geometry : GeometryParameters
        Circle parameters and circulation.

    angle_deg : float, optional
        Angle of attack (deg). Defaults to the angle the geometry was
        computed for; another angle also recomputes the circulation.

    config : FoilAnalyzerConfig, optional
        Streamline count, points per line and worker count. With
        max_workers set, streamlines are traced on a thread pool; the
        output is the same as the sequential run.

    Returns:
    -------
    FlowField
    """
    config = config if config is not None else DEFAULT_CONFIG
    angle = geometry.angle_deg if angle_deg is None else angle_deg

    if angle == geometry.angle_deg:
        body = geometry
    else:
        # Kutta circulation at the overriding angle
        body = replace(
            geometry,
            angle_deg=angle,
            gamma=circulation(angle, geometry.beta, geometry.r),
        )
    loop = generate_surface_loop(body, config=config)
    family = psv_family(config.streamline_count)

    def trace(psv: float) -> Streamline:
        return solve_streamline(
            psv, angle, body.r, body.xc, body.yc, body.gamma,
            config.points_per_streamline, config,
        )

    if config.max_workers is not None and config.max_workers > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            futures = [executor.submit(trace, psv) for psv in family]
            streamlines = [future.result() for future in futures]
    else:
        streamlines = [trace(psv) for psv in family]

    field_result = FlowField(body_x=loop.x, body_y=loop.y, streamlines=streamlines)
    if field_result.unconverged_count:
        logger.debug(
            "Flow field has %d unconverged streamline points",
            field_result.unconverged_count,
        )
    return field_result
