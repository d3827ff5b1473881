"""
Atmosphere Model
================

Fluid properties of the environment surrounding the body at a given
altitude: density, dynamic viscosity, static pressure, temperature, and
the dynamic pressure factor.

All values are returned in the legacy FoilSim imperial system:

- Density: slug/ft³
- Viscosity: slug/(ft·s)
- Pressure: lb/ft²
- Temperature: degrees Rankine

The altitude is converted to a feet-equivalent height before the
environment formulas are evaluated, so a metric altitude in meters gives
the same properties as the equivalent height in feet.

Environment Models:
------------------
**Earth (two-layer standard atmosphere):**
    h ≤ 36152 ft:  T = 518.6 − 3.56·h/1000
                   p = 2116·(T/518.6)^5.256
    h > 36152 ft:  T = 389.98
                   p = 2116·0.2236·exp((36000 − h)/(53.35·389.98))
    ρ = (p − 0.379·p_vap) / (1716·T)

**Mars:** two-layer temperature, exponential pressure, CO2 gas constant.

**Mercury (liquid):** constant-density incompressible liquid with
hydrostatic pressure at depth = −altitude.

**Venus:** constant surface conditions.

Viscosity follows Sutherland's law:
    μ = μ0 · 717.408 · (T/518.688)^1.5 / (T + 198.72)

Usage:
------
    from src.foil_analyzer.atmosphere import sample_atmosphere

    sample = sample_atmosphere(Environment.EARTH, 10000.0, UnitSystem.IMPERIAL)
    q = sample.dynamic_pressure(velocity=100.0)  # lb/ft²
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .config import (
    DEFAULT_CONFIG,
    GAS_CONSTANT_CO2,
    GAS_CONSTANT_EARTH,
    LIQUID_DENSITY,
    LIQUID_GRAVITY,
    LIQUID_TEMPERATURE_R,
    MARS_LAYER_ALTITUDE,
    MARS_SURFACE_PRESSURE_PSF,
    PRESSURE_EXPONENT,
    RANKINE_OFFSET,
    SEA_LEVEL_PRESSURE_PSF,
    SEA_LEVEL_TEMPERATURE_R,
    STRATOSPHERE_TEMPERATURE_R,
    SUTHERLAND_REF_TEMPERATURE_R,
    TROPOPAUSE_ALTITUDE_FT,
    TROPOSPHERE_LAPSE_R_PER_KFT,
    VENUS_SURFACE_PRESSURE_PSF,
    VENUS_SURFACE_TEMPERATURE_R,
    VISCOSITY_REF_AIR,
    VISCOSITY_REF_LIQUID,
    Environment,
    FoilAnalyzerConfig,
    UnitSystem,
    coerce_enum,
    length_conversion,
    pressure_conversion,
    velocity_conversion,
)


@dataclass(frozen=True)
class AtmosphereSample:
    """
    Fluid properties at one altitude.

    Attributes:
    ----------
    density : float
        Density (slug/ft³).

    viscosity : float
        Dynamic viscosity (slug/(ft·s)).

    static_pressure : float
        Static pressure (lb/ft²).

    temperature : float
        Temperature (°R).

    dynamic_pressure_factor : float
        0.5·ρ/vconv². Multiply by the display velocity squared to get
        dynamic pressure in lb/ft².
    """

    density: float
    viscosity: float
    static_pressure: float
    temperature: float
    dynamic_pressure_factor: float

    def dynamic_pressure(self, velocity: float) -> float:
        """Dynamic pressure (lb/ft²) for a display-unit velocity."""
        return self.dynamic_pressure_factor * velocity * velocity

    def display_values(self, unit_system) -> Dict[str, float]:
        """
        Convert the sample to the simulator's display units.

        Imperial: psi, slug/ft³, °F, slug/(ft·s).
        Metric: kPa, kg/m³, °C, kg/(m·s).

        Returns:
        -------
        dict
            Keys: static_pressure, density, temperature, viscosity.
        """
        unit_system = coerce_enum(UnitSystem, unit_system, "unit system")
        if unit_system is UnitSystem.IMPERIAL:
            return {
                "static_pressure": self.static_pressure / 144.0,
                "density": self.density,
                "temperature": self.temperature - 460.0,
                "viscosity": self.viscosity,
            }
        psf_to_kpa = pressure_conversion(UnitSystem.METRIC) / 14.7 / 144.0
        return {
            "static_pressure": self.static_pressure * psf_to_kpa,
            "density": self.density * 515.4,
            "temperature": self.temperature * 5.0 / 9.0 - 273.1,
            "viscosity": self.viscosity * 47.87,
        }


# =============================================================================
# Shared Relations
# =============================================================================

def sutherland_viscosity(reference: float, temperature: float) -> float:
    """Sutherland's law referenced to 518.688 °R (slug/(ft·s))."""
    return (
        reference * 717.408
        * (temperature / SUTHERLAND_REF_TEMPERATURE_R) ** 1.5
        / (temperature + 198.72)
    )


def vapor_pressure(temperature_f: float, relative_humidity: float) -> float:
    """Water vapor partial pressure (lb/ft²) for the Earth density term."""
    if relative_humidity == 0.0:
        return 0.0
    # Correlation is fitted above 0 °F
    temperature_f = max(temperature_f, 0.0)
    return relative_humidity * (2.685 + 0.00354 * temperature_f ** 2.245) / 100.0


def _earth(hite: float, config: FoilAnalyzerConfig):
    if hite <= TROPOPAUSE_ALTITUDE_FT:
        temperature = SEA_LEVEL_TEMPERATURE_R - TROPOSPHERE_LAPSE_R_PER_KFT * hite / 1000.0
        pressure = SEA_LEVEL_PRESSURE_PSF * (
            temperature / SEA_LEVEL_TEMPERATURE_R
        ) ** PRESSURE_EXPONENT
    else:
        temperature = STRATOSPHERE_TEMPERATURE_R
        pressure = SEA_LEVEL_PRESSURE_PSF * 0.2236 * math.exp(
            (36000.0 - hite) / (53.35 * STRATOSPHERE_TEMPERATURE_R)
        )

    pvap = vapor_pressure(temperature - RANKINE_OFFSET, config.relative_humidity)
    density = (pressure - 0.379 * pvap) / (GAS_CONSTANT_EARTH * temperature)
    viscosity = sutherland_viscosity(VISCOSITY_REF_AIR, temperature)
    return density, viscosity, pressure, temperature


def _mars(hite: float, config: FoilAnalyzerConfig):
    if hite <= MARS_LAYER_ALTITUDE:
        temperature = 434.02 - 0.548 * hite / 1000.0
    else:
        temperature = 449.36 - 1.217 * hite / 1000.0
    pressure = MARS_SURFACE_PRESSURE_PSF * math.exp(-0.00003 * hite)
    density = pressure / (GAS_CONSTANT_CO2 * temperature)
    # Air Sutherland reference kept for the CO2 atmosphere
    viscosity = sutherland_viscosity(VISCOSITY_REF_AIR, temperature)
    return density, viscosity, pressure, temperature


def _liquid(hite: float, config: FoilAnalyzerConfig):
    depth = -hite
    density = LIQUID_DENSITY
    pressure = SEA_LEVEL_PRESSURE_PSF + density * LIQUID_GRAVITY * depth
    temperature = LIQUID_TEMPERATURE_R
    viscosity = sutherland_viscosity(VISCOSITY_REF_LIQUID, temperature)
    return density, viscosity, pressure, temperature


def _venus(hite: float, config: FoilAnalyzerConfig):
    temperature = VENUS_SURFACE_TEMPERATURE_R
    pressure = VENUS_SURFACE_PRESSURE_PSF
    density = pressure / (GAS_CONSTANT_CO2 * temperature)
    viscosity = sutherland_viscosity(VISCOSITY_REF_AIR, temperature)
    return density, viscosity, pressure, temperature


_ENVIRONMENT_MODELS = {
    Environment.EARTH: _earth,
    Environment.MARS: _mars,
    Environment.MERCURY_LIQUID: _liquid,
    Environment.VENUS: _venus,
}


# =============================================================================
# Public API
# =============================================================================

def sample_atmosphere(
    environment,
    altitude: float,
    unit_system,
    config: Optional[FoilAnalyzerConfig] = None
) -> AtmosphereSample:
    """
    Evaluate the environment model at an altitude.

    Parameters:
    ----------
    environment : Environment or str
        Fluid environment.

    altitude : float
        Altitude in the unit system's length unit (ft or m).

    unit_system : UnitSystem or str
        Unit system of the altitude and of the velocity factor.

    config : FoilAnalyzerConfig, optional
        Supplies the relative humidity. Defaults to DEFAULT_CONFIG.

    Returns:
    -------
    AtmosphereSample
        Fluid properties in legacy imperial units.

    Raises:
    ------
    ConfigurationError
        If the environment or unit system is not recognized.
    """
    config = config if config is not None else DEFAULT_CONFIG
    environment = coerce_enum(Environment, environment, "environment")
    unit_system = coerce_enum(UnitSystem, unit_system, "unit system")

    hite = altitude / length_conversion(unit_system)
    vconv = velocity_conversion(unit_system)

    density, viscosity, pressure, temperature = _ENVIRONMENT_MODELS[environment](
        hite, config
    )

    return AtmosphereSample(
        density=density,
        viscosity=viscosity,
        static_pressure=pressure,
        temperature=temperature,
        dynamic_pressure_factor=0.5 * density / (vconv * vconv),
    )
