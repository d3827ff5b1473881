"""
Polynomial Drag Table
=====================

Empirical section drag coefficient as a function of camber, thickness and
angle of attack.

For every grid node (camber, thickness) the profile drag is a 6th-degree
polynomial in the angle of attack (deg):

    cd(α) = a0 + a1·α + a2·α² + a3·α³ + a4·α⁴ + a5·α⁵ + a6·α⁶

valid for −20° ≤ α ≤ 20°. Between nodes the polynomial values are
interpolated bilinearly in (camber, thickness). Negative camber uses the
mirror image of the section: cd(−c, α) = cd(c, −α).

Grid:
-----
- Camber: 0, 5, 10, 15, 20 (% chord)
- Thickness: 5, 10, 15, 20 (% chord)

Inputs outside the grid are clamped to its edges.

Usage:
------
    from src.foil_analyzer.drag_table import DEFAULT_DRAG_TABLE

    cd0 = DEFAULT_DRAG_TABLE.profile_drag(camber_percent=5.0,
                                          thickness_percent=12.0,
                                          angle_deg=4.0)
"""

from typing import Optional

import numpy as np
from numpy.polynomial import polynomial as P
from scipy.interpolate import RegularGridInterpolator


CAMBER_GRID = np.array([0.0, 5.0, 10.0, 15.0, 20.0])
THICKNESS_GRID = np.array([5.0, 10.0, 15.0, 20.0])
ANGLE_LIMIT_DEG = 20.0

# Coefficients a0..a6 indexed [camber][thickness]
DRAG_POLYNOMIALS = np.array([
    # camber 0 %
    [
        [0.0090, 0.0, 4.5e-4, 0.0, 5.0e-8, 0.0, 1.0e-10],
        [0.0120, 0.0, 5.0e-4, 0.0, 6.0e-8, 0.0, 1.0e-10],
        [0.0150, 0.0, 5.5e-4, 0.0, 7.0e-8, 0.0, 1.0e-10],
        [0.0180, 0.0, 6.0e-4, 0.0, 8.0e-8, 0.0, 1.0e-10],
    ],
    # camber 5 %
    [
        [0.0110, -2.5e-4, 4.5e-4, -1.0e-6, 5.0e-8, 0.0, 1.0e-10],
        [0.0140, -2.5e-4, 5.0e-4, -1.0e-6, 6.0e-8, 0.0, 1.0e-10],
        [0.0170, -2.5e-4, 5.5e-4, -1.0e-6, 7.0e-8, 0.0, 1.0e-10],
        [0.0200, -2.5e-4, 6.0e-4, -1.0e-6, 8.0e-8, 0.0, 1.0e-10],
    ],
    # camber 10 %
    [
        [0.0130, -5.0e-4, 4.5e-4, -2.0e-6, 5.0e-8, 0.0, 1.0e-10],
        [0.0160, -5.0e-4, 5.0e-4, -2.0e-6, 6.0e-8, 0.0, 1.0e-10],
        [0.0190, -5.0e-4, 5.5e-4, -2.0e-6, 7.0e-8, 0.0, 1.0e-10],
        [0.0220, -5.0e-4, 6.0e-4, -2.0e-6, 8.0e-8, 0.0, 1.0e-10],
    ],
    # camber 15 %
    [
        [0.0150, -7.5e-4, 4.5e-4, -3.0e-6, 5.0e-8, 0.0, 1.0e-10],
        [0.0180, -7.5e-4, 5.0e-4, -3.0e-6, 6.0e-8, 0.0, 1.0e-10],
        [0.0210, -7.5e-4, 5.5e-4, -3.0e-6, 7.0e-8, 0.0, 1.0e-10],
        [0.0240, -7.5e-4, 6.0e-4, -3.0e-6, 8.0e-8, 0.0, 1.0e-10],
    ],
    # camber 20 %
    [
        [0.0170, -1.0e-3, 4.5e-4, -4.0e-6, 5.0e-8, 0.0, 1.0e-10],
        [0.0200, -1.0e-3, 5.0e-4, -4.0e-6, 6.0e-8, 0.0, 1.0e-10],
        [0.0230, -1.0e-3, 5.5e-4, -4.0e-6, 7.0e-8, 0.0, 1.0e-10],
        [0.0260, -1.0e-3, 6.0e-4, -4.0e-6, 8.0e-8, 0.0, 1.0e-10],
    ],
])


class PolynomialDragTable:
    """
    Bilinear interpolation over a grid of drag polynomials.

    Parameters:
    ----------
    cambers : np.ndarray
        Ascending camber grid (% chord), non-negative.

    thicknesses : np.ndarray
        Ascending thickness grid (% chord).

    coefficients : np.ndarray
        Shape (len(cambers), len(thicknesses), degree + 1), lowest
        order first.

    angle_limit_deg : float
        Polynomials are evaluated for |α| ≤ this limit.
    """

    def __init__(
        self,
        cambers: np.ndarray = CAMBER_GRID,
        thicknesses: np.ndarray = THICKNESS_GRID,
        coefficients: np.ndarray = DRAG_POLYNOMIALS,
        angle_limit_deg: float = ANGLE_LIMIT_DEG
    ):
        self.cambers = np.asarray(cambers, dtype=float)
        self.thicknesses = np.asarray(thicknesses, dtype=float)
        self.coefficients = np.asarray(coefficients, dtype=float)
        self.angle_limit_deg = angle_limit_deg

        expected = (len(self.cambers), len(self.thicknesses))
        if self.coefficients.shape[:2] != expected:
            raise ValueError(
                f"Coefficient grid shape {self.coefficients.shape[:2]} "
                f"does not match axes {expected}"
            )

    def grid_values(self, angle_deg: float) -> np.ndarray:
        """Polynomial values at every grid node for one angle."""
        # polyval with a 3D coefficient array evaluates along axis 0
        return P.polyval(angle_deg, np.moveaxis(self.coefficients, -1, 0))

    def profile_drag(
        self,
        camber_percent: float,
        thickness_percent: float,
        angle_deg: float
    ) -> float:
        """
        Interpolated section drag coefficient.

        Parameters:
        ----------
        camber_percent : float
            Camber (% chord). Negative values use the mirrored section.

        thickness_percent : float
            Thickness (% chord).

        angle_deg : float
            Angle of attack (deg).

        Returns:
        -------
        float
            Profile drag coefficient.
        """
        if camber_percent < 0.0:
            camber_percent = -camber_percent
            angle_deg = -angle_deg

        camber = float(np.clip(camber_percent, self.cambers[0], self.cambers[-1]))
        thickness = float(
            np.clip(thickness_percent, self.thicknesses[0], self.thicknesses[-1])
        )
        angle = float(np.clip(angle_deg, -self.angle_limit_deg, self.angle_limit_deg))

        interpolator = RegularGridInterpolator(
            (self.cambers, self.thicknesses),
            self.grid_values(angle),
            method="linear",
        )
        return float(interpolator([[camber, thickness]])[0])


DEFAULT_DRAG_TABLE = PolynomialDragTable()


def table_profile_drag(
    camber_percent: float,
    thickness_percent: float,
    angle_deg: float,
    table: Optional[PolynomialDragTable] = None
) -> float:
    """Profile drag from a drag table (default table when None)."""
    table = table if table is not None else DEFAULT_DRAG_TABLE
    return table.profile_drag(camber_percent, thickness_percent, angle_deg)
