"""
Foil Analyzer Plotting Module
=============================

Matplotlib renderers for foil computation results.

Plot Types Available:
--------------------
- Flow field: body outline with streamlines
- Surface pressure distribution: Cp vs % chord, upper and lower surface
- Surface velocity distribution: V/V∞ vs % chord
- Lift and drag curves from a sweep DataFrame

Usage:
-----
    from src.foil_analyzer import FoilAnalyzer, InputState
    from src.foil_analyzer.plotting import FoilPlotter

    outputs = FoilAnalyzer().compute_all(InputState(angle_deg=6.0))
    plotter = FoilPlotter()
    fig = plotter.plot_flow_field(outputs)
    fig.savefig("flow_field.png", dpi=150)
"""

from typing import Optional, Tuple

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .core import FoilOutputs


class FoilPlotter:
    """
    Visualization of foil flow fields and performance curves.

    Every method draws on the given axes, or on a new figure when ax is
    None, and returns the Figure.
    """

    # -------------------------------------------------------------------------
    # Default Plot Styling
    # -------------------------------------------------------------------------

    DEFAULT_FIGURE_SIZE = (10, 6)
    DEFAULT_FIELD_SIZE = (12, 6)
    DEFAULT_GRID = True
    DEFAULT_LEGEND_LOC = "best"

    BODY_COLOR = "tab:red"
    STREAMLINE_COLOR = "tab:blue"
    UPPER_STYLE = {"color": "tab:blue", "marker": "o", "markersize": 3}
    LOWER_STYLE = {"color": "tab:orange", "marker": "s", "markersize": 3}

    def _axes(self, ax: Optional[Axes], figsize: Optional[Tuple[int, int]],
              default_size: Tuple[int, int]) -> Tuple[Figure, Axes]:
        if ax is None:
            fig, ax = plt.subplots(1, figsize=figsize or default_size)
        else:
            fig = ax.get_figure()
        return fig, ax

    # -------------------------------------------------------------------------
    # Flow Field
    # -------------------------------------------------------------------------

    def plot_flow_field(
        self,
        outputs: FoilOutputs,
        figsize: Optional[Tuple[int, int]] = None,
        ax: Optional[Axes] = None
    ) -> Figure:
        """
        Plot the body outline and streamlines.

        Parameters:
        ----------
        outputs : FoilOutputs
            Result of FoilAnalyzer.compute_all.

        figsize : tuple, optional
            Figure size in inches. Default (12, 6).

        ax : matplotlib.axes.Axes, optional
            Existing axes to plot on.

        Returns:
        -------
        matplotlib.figure.Figure
        """
        fig, ax = self._axes(ax, figsize, self.DEFAULT_FIELD_SIZE)
        field = outputs.flow_field

        for line in field.streamlines:
            ax.plot(line.x, line.y, color=self.STREAMLINE_COLOR, linewidth=0.8)

        ax.fill(field.body_x, field.body_y, color=self.BODY_COLOR, alpha=0.6)
        ax.plot(field.body_x, field.body_y, color=self.BODY_COLOR)

        ax.set_aspect("equal")
        ax.set_xlabel("x (mapped plane)")
        ax.set_ylabel("y (mapped plane)")
        ax.set_title(
            f"Flow Field - α = {outputs.state.angle_deg:.1f}°, "
            f"CL = {outputs.cl:.3f}"
        )
        return fig

    # -------------------------------------------------------------------------
    # Surface Distributions
    # -------------------------------------------------------------------------

    def _plot_surface(self, outputs: FoilOutputs, column: str, ylabel: str,
                      title: str, figsize, ax) -> Figure:
        fig, ax = self._axes(ax, figsize, self.DEFAULT_FIGURE_SIZE)
        loop = outputs.surface_loop

        upper = loop.upper_surface()
        lower = loop.lower_surface()
        ax.plot(upper.percent_chord, upper[column], label="Upper", **self.UPPER_STYLE)
        ax.plot(lower.percent_chord, lower[column], label="Lower", **self.LOWER_STYLE)

        ax.set_xlabel("Chord [%]")
        ax.set_ylabel(ylabel)
        ax.set_title(title)
        ax.grid(self.DEFAULT_GRID)
        ax.legend(loc=self.DEFAULT_LEGEND_LOC)
        return fig

    def plot_pressure_distribution(
        self,
        outputs: FoilOutputs,
        invert_axis: bool = True,
        figsize: Optional[Tuple[int, int]] = None,
        ax: Optional[Axes] = None
    ) -> Figure:
        """
        Plot Cp along the upper and lower surfaces.

        The Cp axis is inverted by default (suction up).
        """
        fig = self._plot_surface(
            outputs, "pressure_coefficient", "Cp",
            "Surface Pressure Distribution", figsize, ax,
        )
        if invert_axis:
            fig_ax = ax if ax is not None else fig.axes[0]
            fig_ax.invert_yaxis()
        return fig

    def plot_velocity_distribution(
        self,
        outputs: FoilOutputs,
        figsize: Optional[Tuple[int, int]] = None,
        ax: Optional[Axes] = None
    ) -> Figure:
        """Plot V/V∞ along the upper and lower surfaces."""
        return self._plot_surface(
            outputs, "velocity_ratio", "V / V∞",
            "Surface Velocity Distribution", figsize, ax,
        )

    # -------------------------------------------------------------------------
    # Performance Curves
    # -------------------------------------------------------------------------

    def plot_lift_curve(
        self,
        sweep: pd.DataFrame,
        parameter: str = "angle_deg",
        figsize: Optional[Tuple[int, int]] = None,
        ax: Optional[Axes] = None
    ) -> Figure:
        """
        Plot CL and CD against the swept parameter.

        Parameters:
        ----------
        sweep : pd.DataFrame
            Output of FoilAnalyzer.sweep or lift_curve.

        parameter : str
            Column used for the x axis.

        Returns:
        -------
        matplotlib.figure.Figure
        """
        fig, ax = self._axes(ax, figsize, self.DEFAULT_FIGURE_SIZE)

        ax.plot(sweep[parameter], sweep["cl"], color="tab:blue", label="CL")
        ax.set_xlabel(parameter)
        ax.set_ylabel("CL")
        ax.grid(self.DEFAULT_GRID)

        drag_ax = ax.twinx()
        drag_ax.plot(sweep[parameter], sweep["cd"], color="tab:red",
                     linestyle="--", label="CD")
        drag_ax.set_ylabel("CD")

        lines = ax.get_lines() + drag_ax.get_lines()
        ax.legend(lines, [line.get_label() for line in lines],
                  loc=self.DEFAULT_LEGEND_LOC)
        ax.set_title(f"Lift and Drag vs {parameter}")
        return fig

    def plot_drag_polar(
        self,
        sweep: pd.DataFrame,
        figsize: Optional[Tuple[int, int]] = None,
        ax: Optional[Axes] = None
    ) -> Figure:
        """Plot CL against CD."""
        fig, ax = self._axes(ax, figsize, self.DEFAULT_FIGURE_SIZE)
        ax.plot(sweep["cd"], sweep["cl"], marker="o", markersize=3)
        ax.set_xlabel("CD")
        ax.set_ylabel("CL")
        ax.set_title("Drag Polar")
        ax.grid(self.DEFAULT_GRID)
        return fig
