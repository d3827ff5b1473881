#!/usr/bin/env python3
"""
Foil Analyzer Launcher
======================

Runs one foil computation from the command line, prints the results and
optionally saves the flow-field, pressure and lift-curve plots.

Usage:
------
    # From the project root directory:
    python run_foil_analyzer.py
    python run_foil_analyzer.py --angle 8 --camber 4 --thickness 12
    python run_foil_analyzer.py --units metric --environment mars --plots out/

Requirements:
------------
- Python 3.8+
- numpy
- pandas
- scipy
- matplotlib
"""

import argparse
import logging
import sys
from pathlib import Path

# -------------------------------------------------------------------------
# Path Configuration
# -------------------------------------------------------------------------

project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Airfoil lift, drag and flow field")
    parser.add_argument("--angle", type=float, default=5.0, help="angle of attack (deg)")
    parser.add_argument("--camber", type=float, default=0.0, help="camber (%% chord)")
    parser.add_argument("--thickness", type=float, default=12.5, help="thickness (%% chord)")
    parser.add_argument("--velocity", type=float, default=100.0, help="mph or km/h")
    parser.add_argument("--altitude", type=float, default=0.0, help="ft or m")
    parser.add_argument("--chord", type=float, default=5.0)
    parser.add_argument("--span", type=float, default=20.0)
    parser.add_argument("--area", type=float, default=100.0, help="wing area")
    parser.add_argument("--units", default="imperial", choices=["imperial", "metric"])
    parser.add_argument("--environment", default="earth",
                        choices=["earth", "mars", "mercury_liquid", "venus"])
    parser.add_argument("--shape", default="airfoil", choices=["airfoil", "ellipse", "plate"])
    parser.add_argument("--ideal", action="store_true", help="ideal (inviscid) flow")
    parser.add_argument("--trace", action="store_true", help="print the calculation trace")
    parser.add_argument("--plots", type=Path, default=None,
                        help="directory to save plots into")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


# -------------------------------------------------------------------------
# Main Entry Point
# -------------------------------------------------------------------------

def main(argv=None):
    """
    Run the analysis.

    This function:
    1. Validates that required dependencies are available
    2. Computes the outputs for the requested state
    3. Prints a summary and saves plots when asked
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("=" * 60)
    print("  FoilSim Analyzer")
    print("=" * 60)
    print()
    print("Initializing...")

    try:
        import numpy
        import pandas
        import scipy
        import matplotlib
        print(f"  [OK] numpy {numpy.__version__}")
        print(f"  [OK] pandas {pandas.__version__}")
        print(f"  [OK] scipy {scipy.__version__}")
        print(f"  [OK] matplotlib {matplotlib.__version__}")
    except ImportError as e:
        print(f"\n[ERROR] Missing required dependency: {e}")
        print("\nPlease install dependencies using:")
        print("    pip install -e .")
        sys.exit(1)

    if args.plots is not None:
        matplotlib.use("Agg")

    from src.foil_analyzer import (
        CalculationDebugger,
        ConfigurationError,
        FoilAnalyzer,
        InputState,
        LiftMode,
    )

    try:
        state = InputState(
            angle_deg=args.angle,
            camber_percent=args.camber,
            thickness_percent=args.thickness,
            velocity=args.velocity,
            altitude=args.altitude,
            chord=args.chord,
            span=args.span,
            wing_area=args.area,
            unit_system=args.units,
            environment=args.environment,
            shape_kind=args.shape,
            lift_mode=LiftMode.IDEAL if args.ideal else LiftMode.STALL,
        )
    except ConfigurationError as e:
        print(f"\n[ERROR] Invalid input: {e}")
        sys.exit(2)

    debugger = CalculationDebugger() if args.trace else None
    analyzer = FoilAnalyzer(debugger=debugger)
    outputs = analyzer.compute_all(state)

    force_unit = "lb" if state.unit_system.value == "imperial" else "N"
    print()
    print("Results")
    print("-" * 60)
    print(outputs.aero.summary())
    print(f"Zero-lift angle: {-outputs.geometry.beta:.2f} deg")
    print(f"Lift: {outputs.lift:.2f} {force_unit}   Drag: {outputs.drag:.3f} {force_unit}")
    unconverged = outputs.flow_field.unconverged_count
    if unconverged:
        print(f"Streamline points using the Newton fallback: {unconverged}")

    if debugger is not None:
        print()
        print(debugger.get_report())

    if args.plots is not None:
        from src.foil_analyzer import FoilPlotter

        args.plots.mkdir(parents=True, exist_ok=True)
        plotter = FoilPlotter()
        plotter.plot_flow_field(outputs).savefig(args.plots / "flow_field.png", dpi=150)
        plotter.plot_pressure_distribution(outputs).savefig(
            args.plots / "pressure_distribution.png", dpi=150
        )
        curve = analyzer.lift_curve(state)
        plotter.plot_lift_curve(curve).savefig(args.plots / "lift_curve.png", dpi=150)
        print(f"\nPlots saved to {args.plots}")


if __name__ == "__main__":
    main()
