"""
Lumped-capacitance thermal balance shared by the motor and the inverter.

Each component is a single thermal node exchanging heat with ambient by
convection (fan/coolant dependent) and radiation:

    Q_conv = h * A * (T - T_amb)
    Q_rad  = ε * σ * A * (T_K⁴ - T_amb_K⁴)
    T     <- T + (Q_gen - (Q_conv + Q_rad) / C) * Δt_th

The temperature is floored at ambient after every step.
"""

from dataclasses import dataclass

from ..models.parameters import CoolingSettings
from ..utils.constants import (
    STEFAN_BOLTZMANN,
    AMBIENT_TEMPERATURE,
    THERMAL_TIME_STEP,
    MOTOR_SURFACE_AREA,
    MOTOR_EMISSIVITY,
    MOTOR_CONVECTION_BASE,
    MOTOR_CONVECTION_FAN_COEFF,
    MOTOR_CONVECTION_COOLANT_COEFF,
    MOTOR_THERMAL_CAPACITANCE,
    MOTOR_THERMAL_RESISTANCE,
    INVERTER_SURFACE_AREA,
    INVERTER_EMISSIVITY,
    INVERTER_CONVECTION_BASE,
    INVERTER_CONVECTION_FAN_COEFF,
    INVERTER_CONVECTION_COOLANT_COEFF,
    INVERTER_THERMAL_CAPACITANCE,
    INVERTER_THERMAL_RESISTANCE,
    celsius_to_kelvin
)


# =============================================================================
# COOLING SURFACES
# =============================================================================

@dataclass(frozen=True)
class ThermalSurface:
    """
    Thermal properties of one lumped component.

    Attributes:
        name: Component identifier
        area: External cooling surface [m²]
        emissivity: Surface emissivity [-]
        convection_base: Natural convection coefficient [W/(m²·K)]
        fan_coefficient: Added convection per unit fan speed [W/(m²·K)]
        coolant_coefficient: Added convection per L/min coolant [W/(m²·K)]
        capacitance: Thermal capacitance [J/°C]
        thermal_resistance: Scales electrical losses into heating rate [°C/W]
    """
    name: str
    area: float
    emissivity: float
    convection_base: float
    fan_coefficient: float
    coolant_coefficient: float
    capacitance: float
    thermal_resistance: float


MOTOR_SURFACE = ThermalSurface(
    name="Motor frame",
    area=MOTOR_SURFACE_AREA,
    emissivity=MOTOR_EMISSIVITY,
    convection_base=MOTOR_CONVECTION_BASE,
    fan_coefficient=MOTOR_CONVECTION_FAN_COEFF,
    coolant_coefficient=MOTOR_CONVECTION_COOLANT_COEFF,
    capacitance=MOTOR_THERMAL_CAPACITANCE,
    thermal_resistance=MOTOR_THERMAL_RESISTANCE
)

INVERTER_SURFACE = ThermalSurface(
    name="Inverter heatsink",
    area=INVERTER_SURFACE_AREA,
    emissivity=INVERTER_EMISSIVITY,
    convection_base=INVERTER_CONVECTION_BASE,
    fan_coefficient=INVERTER_CONVECTION_FAN_COEFF,
    coolant_coefficient=INVERTER_CONVECTION_COOLANT_COEFF,
    capacitance=INVERTER_THERMAL_CAPACITANCE,
    thermal_resistance=INVERTER_THERMAL_RESISTANCE
)


# =============================================================================
# HEAT TRANSFER TERMS
# =============================================================================

def convection_coefficient(surface: ThermalSurface, cooling: CoolingSettings) -> float:
    """
    Convection coefficient for the given fan/coolant setting.

    h = h_base + k_fan * fan_speed + k_coolant * coolant_flow

    Returns:
        Convection coefficient [W/(m²·K)]
    """
    return (surface.convection_base +
            surface.fan_coefficient * cooling.fan_speed +
            surface.coolant_coefficient * cooling.coolant_flow)


def convective_loss(
    surface: ThermalSurface,
    cooling: CoolingSettings,
    temperature: float,
    ambient: float = AMBIENT_TEMPERATURE
) -> float:
    """Convective heat flow to ambient [W]."""
    h = convection_coefficient(surface, cooling)
    return h * surface.area * (temperature - ambient)


def radiative_loss(
    surface: ThermalSurface,
    temperature: float,
    ambient: float = AMBIENT_TEMPERATURE
) -> float:
    """Radiated heat flow to ambient [W], Stefan-Boltzmann on Kelvin temperatures."""
    T_K = celsius_to_kelvin(temperature)
    T_amb_K = celsius_to_kelvin(ambient)
    return surface.emissivity * STEFAN_BOLTZMANN * surface.area * (T_K**4 - T_amb_K**4)


def thermal_balance_step(
    heat_generation: float,
    temperature: float,
    surface: ThermalSurface,
    cooling: CoolingSettings,
    ambient: float = AMBIENT_TEMPERATURE,
    step: float = THERMAL_TIME_STEP
) -> float:
    """
    Advance one lumped thermal node by a single integration step.

    Args:
        heat_generation: Heating rate from losses (already scaled by the
            component's thermal resistance) [°C/s]
        temperature: Present temperature [°C]
        surface: Component thermal properties
        cooling: Fan and coolant settings
        ambient: Ambient temperature [°C]
        step: Thermal integration step [s]

    Returns:
        New temperature [°C], never below ambient
    """
    Q_conv = convective_loss(surface, cooling, temperature, ambient)
    Q_rad = radiative_loss(surface, temperature, ambient)
    cooling_rate = (Q_conv + Q_rad) / surface.capacitance
    new_temperature = temperature + (heat_generation - cooling_rate) * step
    return max(new_temperature, ambient)
