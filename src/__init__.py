"""
FoilSim Analyzer - Main Package
===============================

Airfoil simulation tools: lift and drag prediction for a wing section
in several fluid environments, and a potential-flow picture of the
streamlines and surface pressures around it.

This package provides modules for:
- Foil Analysis (foil_analyzer): coefficients, forces, flow field, plots
"""

__version__ = "0.1.0"
