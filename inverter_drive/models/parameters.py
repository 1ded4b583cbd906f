"""
Operator-facing configuration for the drive.

These are the values the driver layer (control panel, scripts, optimizer)
sets before each tick. Every dataclass validates itself on construction so
that the simulation core never has to guard its own denominators.
"""

from dataclasses import dataclass, replace

from .modes import ProtectionMode
from ..utils.constants import (
    AMBIENT_TEMPERATURE,
    ParameterRanges
)


def _check_range(name: str, value: float, low: float, high: float):
    """Raise ValueError if ``value`` lies outside [low, high]."""
    if not ParameterRanges.contains(value, low, high):
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


@dataclass(frozen=True)
class MotorParameters:
    """
    Nameplate, mechanical and electrical data of the induction motor.

    Attributes:
        rated_voltage: Rated phase voltage [V]
        rated_power: Rated power [kW]
        pole_pairs: Number of pole pairs p
        resistance: Stator resistance at ambient [Ω]
        inductance: Equivalent inductance [H]
        load_inertia: Load moment of inertia [kg·m²]
        shaft_inertia: Shaft/rotor moment of inertia [kg·m²]
        damping: Viscous damping [Nm·s/rad]
        friction: Viscous friction [Nm·s/rad]
        temp_coefficient: Resistance temperature coefficient [1/°C]
        coupling_stiffness: Shaft coupling stiffness [Nm/rad]
    """
    rated_voltage: float = 230.0
    rated_power: float = 5.0
    pole_pairs: int = 2
    resistance: float = 0.5
    inductance: float = 0.01
    load_inertia: float = 0.1
    shaft_inertia: float = 0.05
    damping: float = 0.01
    friction: float = 0.01
    temp_coefficient: float = 0.005
    coupling_stiffness: float = 5000.0

    def __post_init__(self):
        self._validate()

    def _validate(self):
        """Validate input parameters."""
        if self.rated_voltage <= 0:
            raise ValueError(f"Rated voltage must be positive, got {self.rated_voltage}")
        if self.rated_power <= 0:
            raise ValueError(f"Rated power must be positive, got {self.rated_power}")
        if self.pole_pairs < 1:
            raise ValueError(f"Pole pairs must be >= 1, got {self.pole_pairs}")
        if self.resistance <= 0:
            raise ValueError(f"Resistance must be positive, got {self.resistance}")
        if self.inductance <= 0:
            raise ValueError(f"Inductance must be positive, got {self.inductance}")
        if self.load_inertia < 0 or self.shaft_inertia < 0:
            raise ValueError("Inertias must be non-negative")
        if self.total_inertia <= 0:
            raise ValueError(f"Total inertia must be positive, got {self.total_inertia}")
        for name in ("damping", "friction", "temp_coefficient", "coupling_stiffness"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @property
    def total_inertia(self) -> float:
        """Load + shaft inertia [kg·m²]."""
        return self.load_inertia + self.shaft_inertia

    @property
    def viscous_coefficient(self) -> float:
        """Damping + friction [Nm·s/rad]."""
        return self.damping + self.friction

    def __repr__(self) -> str:
        return (
            f"MotorParameters(\n"
            f"  Rated: {self.rated_power} kW @ {self.rated_voltage} V, "
            f"{2 * self.pole_pairs} poles\n"
            f"  R = {self.resistance} Ω, L = {self.inductance} H\n"
            f"  J = {self.total_inertia:.3f} kg·m², B+F = {self.viscous_coefficient:.3f}\n"
            f")"
        )


@dataclass(frozen=True)
class CoolingSettings:
    """Fan and coolant settings shared by motor and inverter."""
    fan_speed: float = 0.5       # 0-1
    coolant_flow: float = 5.0    # L/min

    def __post_init__(self):
        _check_range("Fan speed", self.fan_speed,
                     ParameterRanges.FAN_SPEED_MIN, ParameterRanges.FAN_SPEED_MAX)
        _check_range("Coolant flow", self.coolant_flow,
                     ParameterRanges.COOLANT_FLOW_MIN, ParameterRanges.COOLANT_FLOW_MAX)


@dataclass(frozen=True)
class PowerStageSettings:
    """
    Inverter configuration.

    Attributes:
        dc_link_voltage: DC bus voltage [V]
        pwm_frequency: Carrier frequency [Hz]
        dead_time: Switch dead time [s]
        modulation_index: Modulation index [-]
        harmonic_injection: Add third-harmonic term to the signals
        overmodulation: Extend the linear range by 15 %
    """
    dc_link_voltage: float = ParameterRanges.DC_LINK_TYPICAL
    pwm_frequency: float = 10000.0
    dead_time: float = 1e-6
    modulation_index: float = 0.8
    harmonic_injection: bool = False
    overmodulation: bool = False

    def __post_init__(self):
        _check_range("DC link voltage", self.dc_link_voltage,
                     ParameterRanges.DC_LINK_MIN, ParameterRanges.DC_LINK_MAX)
        _check_range("PWM frequency", self.pwm_frequency,
                     ParameterRanges.PWM_FREQ_MIN, ParameterRanges.PWM_FREQ_MAX)
        _check_range("Dead time", self.dead_time,
                     ParameterRanges.DEAD_TIME_MIN, ParameterRanges.DEAD_TIME_MAX)
        _check_range("Modulation index", self.modulation_index,
                     ParameterRanges.MOD_INDEX_MIN, ParameterRanges.MOD_INDEX_MAX)

    @property
    def dead_time_factor(self) -> float:
        """Fraction of each carrier period left after dead time."""
        return 1.0 - self.dead_time * self.pwm_frequency

    def with_changes(self, **changes) -> 'PowerStageSettings':
        """Copy with some fields replaced (re-validated)."""
        return replace(self, **changes)


@dataclass(frozen=True)
class DriveReferences:
    """
    Operator references for one control tick.

    Attributes:
        speed_ref: Speed reference [rad/s]
        torque_ref: Torque reference [Nm] (must be > 0, used by DTC bands)
        flux_ref: Flux reference [Wb]
        accel_rate: Acceleration limit [rad/s²]
        direction: +1 forward, -1 reverse
    """
    speed_ref: float = 100.0
    torque_ref: float = 50.0
    flux_ref: float = 1.0
    accel_rate: float = 10.0
    direction: int = 1

    def __post_init__(self):
        _check_range("Speed reference", self.speed_ref,
                     ParameterRanges.SPEED_REF_MIN, ParameterRanges.SPEED_REF_MAX)
        _check_range("Torque reference", self.torque_ref,
                     ParameterRanges.TORQUE_REF_MIN, ParameterRanges.TORQUE_REF_MAX)
        # DTC bands are relative to the torque reference
        if self.torque_ref <= 0:
            raise ValueError(f"Torque reference must be positive, got {self.torque_ref}")
        _check_range("Flux reference", self.flux_ref,
                     ParameterRanges.FLUX_REF_MIN, ParameterRanges.FLUX_REF_MAX)
        _check_range("Acceleration limit", self.accel_rate,
                     ParameterRanges.ACCEL_MIN, ParameterRanges.ACCEL_MAX)
        if self.direction not in (1, -1):
            raise ValueError(f"Direction must be +1 or -1, got {self.direction}")


@dataclass(frozen=True)
class ControllerGains:
    """Outer speed-loop PI gains."""
    kp: float = 0.1
    ki: float = 0.01

    def __post_init__(self):
        if self.kp < 0 or self.ki < 0:
            raise ValueError(f"Gains must be non-negative, got Kp={self.kp}, Ki={self.ki}")


@dataclass(frozen=True)
class ProtectionSettings:
    """Thermal protection configuration."""
    max_temp: float = 150.0
    mode: ProtectionMode = ProtectionMode.WARNING
    auto_reset: bool = False

    def __post_init__(self):
        if self.max_temp <= AMBIENT_TEMPERATURE:
            raise ValueError(
                f"Max temperature must exceed ambient ({AMBIENT_TEMPERATURE} °C), "
                f"got {self.max_temp}"
            )
