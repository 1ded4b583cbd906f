"""
Three-phase inverter power stage.

Synthesizes pole voltages from normalized modulation signals (0 = low rail,
1 = high rail) with either sine-triangle or space-vector modulation, and
integrates its own heatsink temperature from switching losses.
"""

from typing import Optional, Sequence, Tuple
import math

from ..models.modes import PwmType
from ..models.parameters import PowerStageSettings, CoolingSettings
from ..models.state import PowerStageState, Phases
from ..calculations.thermal import INVERTER_SURFACE, ThermalSurface, thermal_balance_step
from ..calculations.transforms import clarke_projection, SQRT3
from ..calculations.losses import calculate_switching_loss
from ..utils.constants import (
    AMBIENT_TEMPERATURE,
    THERMAL_TIME_STEP,
    OVERMODULATION_GAIN,
    HARMONIC_INJECTION_AMPLITUDE,
    SECTOR_WIDTH
)


# =============================================================================
# SPACE VECTOR MODULATION
# =============================================================================

def svm_sector(theta: float) -> int:
    """
    Sector 0-5 of a reference angle; sector k spans [k·60°, (k+1)·60°).
    """
    return int(math.floor(theta / SECTOR_WIDTH)) % 6


def svm_dwell_times(
    magnitude: float,
    sector_angle: float,
    dc_link_voltage: float,
    pwm_frequency: float
) -> Tuple[float, float, float, float]:
    """
    Active and zero dwell times of the two-vector SVM decomposition.

    m  = |v| √3 / V_dc
    T1 = m T sin(60° - θ_s)
    T2 = m T sin(θ_s)
    T0 = T - T1 - T2

    Args:
        magnitude: Reference vector magnitude [V]
        sector_angle: Angle within the sector [rad], 0 <= θ_s < 60°
        dc_link_voltage: DC bus voltage [V]
        pwm_frequency: Carrier frequency [Hz]

    Returns:
        (T1, T2, T0, T) [s]
    """
    m = magnitude * SQRT3 / dc_link_voltage
    T = 1.0 / pwm_frequency
    T1 = m * T * math.sin(SECTOR_WIDTH - sector_angle)
    T2 = m * T * math.sin(sector_angle)
    T0 = T - T1 - T2
    return T1, T2, T0, T


def svm_duty_cycles(sector: int, T1: float, T2: float, T0: float, T: float) -> Phases:
    """
    Phase duty cycles for a sector with T0/2 placed at both ends.

    Sector k uses the adjacent active vectors V(k+1) then V(k+2); a phase
    conducts for every active vector that has it switched high.
    """
    full = (T1 + T2 + T0 / 2) / T
    first = (T1 + T0 / 2) / T
    second = (T2 + T0 / 2) / T
    zero = T0 / (2 * T)

    if sector == 0:
        return full, second, zero
    if sector == 1:
        return first, full, zero
    if sector == 2:
        return zero, full, second
    if sector == 3:
        return zero, first, full
    if sector == 4:
        return second, zero, full
    if sector == 5:
        return full, zero, first
    raise ValueError(f"Sector must be 0-5, got {sector}")


class InverterPowerStage:
    """
    Two-level voltage-source inverter.

    Configuration is replaced wholesale through ``configure`` (the operator or
    optimizer sets it before each call); the heatsink temperature is the
    only internal state.
    """

    def __init__(
        self,
        settings: Optional[PowerStageSettings] = None,
        cooling: Optional[CoolingSettings] = None,
        surface: ThermalSurface = INVERTER_SURFACE,
        ambient: float = AMBIENT_TEMPERATURE,
        thermal_step: float = THERMAL_TIME_STEP
    ):
        self.settings = settings or PowerStageSettings()
        self.cooling = cooling or CoolingSettings()
        self.surface = surface
        self.ambient = ambient
        self.thermal_step = thermal_step
        self.reset()

    def reset(self):
        """Cool the heatsink back to ambient."""
        self.temperature = self.ambient
        self.last_sector: Optional[int] = None

    def configure(self, settings: PowerStageSettings):
        """Replace the inverter configuration."""
        self.settings = settings

    @property
    def state(self) -> PowerStageState:
        """Snapshot of configuration and temperature."""
        s = self.settings
        return PowerStageState(
            dc_link_voltage=s.dc_link_voltage,
            pwm_frequency=s.pwm_frequency,
            dead_time=s.dead_time,
            modulation_index=s.modulation_index,
            harmonic_injection=s.harmonic_injection,
            overmodulation=s.overmodulation,
            temperature=self.temperature,
            fan_speed=self.cooling.fan_speed,
            coolant_flow=self.cooling.coolant_flow
        )

    @property
    def switching_loss(self) -> float:
        """Present switching losses [W]."""
        return calculate_switching_loss(self.settings.pwm_frequency, self.settings.dc_link_voltage)

    @property
    def voltage_gain(self) -> float:
        """
        Volts per unit of modulation signal.

        V_dc * (1 - t_dead f_pwm) * m * (1.15 if overmodulating)
        """
        s = self.settings
        modulation_factor = s.modulation_index * (OVERMODULATION_GAIN if s.overmodulation else 1.0)
        return s.dc_link_voltage * s.dead_time_factor * modulation_factor

    def generate_phase_voltages(
        self,
        mod_signals: Sequence[float],
        pwm_type: PwmType = PwmType.SINE,
        time: float = 0.0,
        fundamental_frequency: float = 0.0
    ) -> Phases:
        """
        Synthesize the three pole voltages and self-heat.

        Args:
            mod_signals: Normalized modulation signals in [0, 1]
            pwm_type: Modulation strategy
            time: Simulation time [s], used by harmonic injection
            fundamental_frequency: Commanded fundamental [Hz], used by
                harmonic injection

        Returns:
            Phase voltages (va, vb, vc) [V]
        """
        if pwm_type is PwmType.SPACE_VECTOR:
            signals = self._space_vector_duties(mod_signals)
        elif pwm_type is PwmType.SINE:
            signals = tuple(mod_signals)
        else:
            raise ValueError(f"Unhandled PWM type: {pwm_type!r}")

        if self.settings.harmonic_injection:
            third = HARMONIC_INJECTION_AMPLITUDE * math.sin(
                2 * math.pi * 3 * fundamental_frequency * time
            )
            signals = tuple(s + third for s in signals)

        gain = self.voltage_gain
        voltages = (signals[0] * gain, signals[1] * gain, signals[2] * gain)

        self._update_temperature()
        return voltages

    def _space_vector_duties(self, mod_signals: Sequence[float]) -> Phases:
        """Map normalized signals to SVM duty cycles."""
        s = self.settings

        # Signals in [0, 1] -> per unit of V_dc/2 in [-1, 1]
        v_ref = [2.0 * x - 1.0 for x in mod_signals]
        v_alpha, v_beta = clarke_projection(v_ref)
        magnitude = math.hypot(v_alpha, v_beta) * s.dc_link_voltage / 2.0
        theta = math.atan2(v_beta, v_alpha)

        sector = svm_sector(theta)
        sector_angle = theta - math.floor(theta / SECTOR_WIDTH) * SECTOR_WIDTH
        self.last_sector = sector

        T1, T2, T0, T = svm_dwell_times(magnitude, sector_angle, s.dc_link_voltage, s.pwm_frequency)
        return svm_duty_cycles(sector, T1, T2, T0, T)

    def _update_temperature(self):
        """Lumped heatsink update from switching losses."""
        heat_generation = self.switching_loss * self.surface.thermal_resistance
        self.temperature = thermal_balance_step(
            heat_generation,
            self.temperature,
            self.surface,
            self.cooling,
            ambient=self.ambient,
            step=self.thermal_step
        )
