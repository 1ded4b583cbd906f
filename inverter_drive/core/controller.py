"""
Drive control laws.

Three mutually exclusive modes share one controller object so that the
speed-loop integrator carries over when the operator switches mode:

- Scalar V/f: PI speed loop -> rate-limited frequency -> sine references
- Field-oriented: PI speed loop -> torque reference, PI torque/flux loops
  -> d/q voltages -> inverse rotating-frame transform
- Direct torque: hysteresis comparators -> switching table -> voltage vector
"""

from typing import Dict, Optional, Tuple
import math

from ..models.modes import ControlMode
from ..models.parameters import ControllerGains, DriveReferences, MotorParameters
from ..models.state import ControlOutput, MotorState
from ..calculations.transforms import inverse_park, TWO_PI_OVER_3
from ..utils.constants import (
    CONTROL_TIME_STEP,
    VOLTS_PER_HERTZ,
    FOC_TORQUE_KP,
    FOC_TORQUE_KI,
    FOC_FLUX_KP,
    FOC_FLUX_KI,
    DTC_HYSTERESIS_BAND,
    SECTOR_WIDTH
)


# =============================================================================
# DIRECT TORQUE CONTROL TABLES
# =============================================================================

# Switch states (a, b, c) of the eight inverter vectors. 0 and 7 are the
# zero vectors.
VOLTAGE_VECTORS: Dict[int, Tuple[int, int, int]] = {
    0: (0, 0, 0),
    1: (1, 0, 0),
    2: (1, 1, 0),
    3: (0, 1, 0),
    4: (0, 1, 1),
    5: (0, 0, 1),
    6: (1, 0, 1),
    7: (1, 1, 1),
}

# (flux_state, torque_state) -> vector, written for sector 1
SWITCHING_TABLE: Dict[Tuple[int, int], int] = {
    (1, 1): 2, (1, 0): 7, (1, -1): 6,
    (0, 1): 3, (0, 0): 0, (0, -1): 5,
    (-1, 1): 4, (-1, 0): 0, (-1, -1): 4,
}


def hysteresis_state(error: float, reference: float, band: float = DTC_HYSTERESIS_BAND) -> int:
    """
    Three-level comparator: +1/-1 outside ±band·reference, else 0.
    """
    if abs(error) <= band * reference:
        return 0
    return 1 if error > 0 else -1


def flux_sector(psi_d: float, psi_q: float) -> int:
    """
    Stator-flux sector 1-6; sector k is centred on (k-1)·60°.
    """
    angle = math.atan2(psi_q, psi_d)
    return int(math.floor((angle + SECTOR_WIDTH / 2) / SECTOR_WIDTH)) % 6 + 1


def select_voltage_vector(flux_state: int, torque_state: int, sector: int) -> int:
    """
    Look up the switching vector and rotate active vectors with the sector.

    The table is written for sector 1; in sector k every active vector
    V1..V6 advances by k-1 positions, zero vectors are unchanged.
    """
    vector = SWITCHING_TABLE[(flux_state, torque_state)]
    if vector in (0, 7):
        return vector
    return (vector - 1 + sector - 1) % 6 + 1


class DriveController:
    """
    Mode-switchable drive controller.

    The mode is chosen per call; integrators persist across calls until
    ``reset`` is invoked.
    """

    def __init__(
        self,
        motor_parameters: Optional[MotorParameters] = None,
        gains: Optional[ControllerGains] = None,
        control_step: float = CONTROL_TIME_STEP,
        volts_per_hertz: float = VOLTS_PER_HERTZ
    ):
        """
        Args:
            motor_parameters: Motor data (inductance for the DTC flux estimate)
            gains: Speed-loop PI gains
            control_step: Integration step of the PI loops and rate limiter [s]
            volts_per_hertz: V/f constant [V/Hz]
        """
        self.motor_parameters = motor_parameters or MotorParameters()
        self.gains = gains or ControllerGains()
        self.control_step = control_step
        self.volts_per_hertz = volts_per_hertz
        self.reset()

    def reset(self):
        """Clear integrators and the V/f frequency state."""
        self.speed_error_integral = 0.0
        self.torque_error_integral = 0.0
        self.flux_error_integral = 0.0
        self.frequency = 0.0

    def set_gains(self, kp: float, ki: float):
        """Replace the speed-loop gains."""
        self.gains = ControllerGains(kp=kp, ki=ki)

    def update_control(
        self,
        mode: ControlMode,
        references: DriveReferences,
        motor: MotorState,
        time: float
    ) -> ControlOutput:
        """
        Compute modulation signals for one tick.

        Args:
            mode: Control law
            references: Operator references
            motor: Present motor snapshot
            time: Simulation time [s]

        Returns:
            ControlOutput with signals in [0, 1]
        """
        if mode is ControlMode.SCALAR:
            return self._scalar_control(references, motor, time)
        if mode is ControlMode.FIELD_ORIENTED:
            return self._field_oriented_control(references, motor, time)
        if mode is ControlMode.DIRECT_TORQUE:
            return self._direct_torque_control(references, motor)
        raise ValueError(f"Unhandled control mode: {mode!r}")

    # -------------------------------------------------------------------------
    # V/f
    # -------------------------------------------------------------------------

    def _scalar_control(
        self, references: DriveReferences, motor: MotorState, time: float
    ) -> ControlOutput:
        speed_error = references.speed_ref - motor.speed
        self.speed_error_integral += speed_error * self.control_step
        target = self.gains.kp * speed_error + self.gains.ki * self.speed_error_integral

        # Slew limit on the electrical frequency
        max_change = references.accel_rate * self.control_step / (2 * math.pi)
        frequency = min(target, self.frequency + max_change)
        frequency = max(frequency, self.frequency - max_change)
        self.frequency = frequency

        voltage = frequency * self.volts_per_hertz
        omega = 2 * math.pi * frequency * references.direction
        signals = (
            0.5 * (1 + math.sin(omega * time)),
            0.5 * (1 + math.sin(omega * time - TWO_PI_OVER_3)),
            0.5 * (1 + math.sin(omega * time + TWO_PI_OVER_3)),
        )
        return ControlOutput(signals=signals, frequency=abs(frequency), voltage=voltage)

    # -------------------------------------------------------------------------
    # FOC
    # -------------------------------------------------------------------------

    def _field_oriented_control(
        self, references: DriveReferences, motor: MotorState, time: float
    ) -> ControlOutput:
        dt = self.control_step

        # Outer speed loop -> torque reference
        speed_error = references.speed_ref - motor.speed
        self.speed_error_integral += speed_error * dt
        torque_ref = self.gains.kp * speed_error + self.gains.ki * self.speed_error_integral

        # Inner torque and flux loops
        torque_error = torque_ref - motor.torque
        flux_error = references.flux_ref - motor.rotor_flux
        self.torque_error_integral += torque_error * dt
        self.flux_error_integral += flux_error * dt
        v_q = FOC_TORQUE_KP * torque_error + FOC_TORQUE_KI * self.torque_error_integral
        v_d = FOC_FLUX_KP * flux_error + FOC_FLUX_KI * self.flux_error_integral

        theta = 2 * math.pi * references.speed_ref * time * references.direction
        va, vb, vc = inverse_park(v_d, v_q, theta)

        peak = max(abs(va), abs(vb), abs(vc))
        if peak > 0:
            va, vb, vc = va / peak, vb / peak, vc / peak

        signals = (0.5 * (1 + va), 0.5 * (1 + vb), 0.5 * (1 + vc))
        return ControlOutput(signals=signals, frequency=references.speed_ref)

    # -------------------------------------------------------------------------
    # DTC
    # -------------------------------------------------------------------------

    def _direct_torque_control(
        self, references: DriveReferences, motor: MotorState
    ) -> ControlOutput:
        torque_state = hysteresis_state(references.torque_ref - motor.torque, references.torque_ref)
        flux_state = hysteresis_state(references.flux_ref - motor.rotor_flux, references.flux_ref)

        # Stator flux estimate from rotor flux and stator currents
        inductance = self.motor_parameters.inductance
        psi_d = motor.rotor_flux + inductance * motor.i_d
        psi_q = inductance * motor.i_q
        sector = flux_sector(psi_d, psi_q)

        vector = select_voltage_vector(flux_state, torque_state, sector)
        signals = tuple(float(state) for state in VOLTAGE_VECTORS[vector])
        return ControlOutput(signals=signals, sector=sector, vector=vector)
