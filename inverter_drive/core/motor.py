"""
Induction motor electromechanical and thermal model.

One call to ``update_state`` advances the motor by a fixed step:

1. Thermal update from the present phase currents (I²R heating)
2. Resistance inflation with temperature
3. Projection of phase voltages/currents onto q/d axes
4. Torque τ = 1.5 * p * ψ * i_q
5. Rotor flux lag dψ/dt = -ψ/L + i_d
6. Load torque from the selected load profile
7. Explicit integration of the mechanical equation, speed floored at 0

The equations are first-order engineering approximations.
"""

from typing import Optional, Sequence

from ..models.modes import LoadType
from ..models.parameters import MotorParameters, CoolingSettings
from ..models.state import MotorState
from ..calculations.thermal import MOTOR_SURFACE, ThermalSurface, thermal_balance_step
from ..calculations.transforms import clarke_projection
from ..calculations.losses import calculate_joule_losses
from ..utils.constants import (
    AMBIENT_TEMPERATURE,
    THERMAL_TIME_STEP,
    INITIAL_ROTOR_FLUX,
    CONSTANT_LOAD_TORQUE,
    FAN_PUMP_LOAD_COEFF
)


def calculate_load_torque(load_type: LoadType, speed: float) -> float:
    """
    Load torque for the given profile.

    Args:
        load_type: Load profile
        speed: Shaft speed [rad/s]

    Returns:
        Load torque [Nm]
    """
    if load_type is LoadType.CONSTANT:
        return CONSTANT_LOAD_TORQUE
    if load_type is LoadType.FAN_PUMP:
        return FAN_PUMP_LOAD_COEFF * speed * speed
    if load_type is LoadType.INERTIA:
        return 0.0
    raise ValueError(f"Unhandled load type: {load_type!r}")


class InductionMotor:
    """
    Squirrel-cage induction motor with a single-node thermal model.

    Owns its electromechanical and thermal state exclusively; other stages
    only see the ``state`` snapshot.
    """

    def __init__(
        self,
        parameters: Optional[MotorParameters] = None,
        cooling: Optional[CoolingSettings] = None,
        surface: ThermalSurface = MOTOR_SURFACE,
        ambient: float = AMBIENT_TEMPERATURE,
        thermal_step: float = THERMAL_TIME_STEP
    ):
        """
        Initialize the motor at rest, ambient temperature.

        Args:
            parameters: Nameplate and mechanical data
            cooling: Fan/coolant settings
            surface: Thermal properties of the frame
            ambient: Ambient temperature [°C]
            thermal_step: Thermal integration step [s], independent of the
                step passed to ``update_state``
        """
        self.parameters = parameters or MotorParameters()
        self.cooling = cooling or CoolingSettings()
        self.surface = surface
        self.ambient = ambient
        self.thermal_step = thermal_step
        self.reset()

    def reset(self):
        """Return to the canonical baseline: standstill, ambient, initial flux."""
        self.speed = 0.0
        self.torque = 0.0
        self.rotor_flux = INITIAL_ROTOR_FLUX
        self.i_d = 0.0
        self.i_q = 0.0
        self.v_d = 0.0
        self.v_q = 0.0
        self.temperature = self.ambient

    @property
    def state(self) -> MotorState:
        """Snapshot of the present state."""
        return MotorState(
            speed=self.speed,
            torque=self.torque,
            rotor_flux=self.rotor_flux,
            i_d=self.i_d,
            i_q=self.i_q,
            temperature=self.temperature,
            v_d=self.v_d,
            v_q=self.v_q
        )

    @property
    def effective_resistance(self) -> float:
        """
        Winding resistance at the present temperature [Ω].

        R_eff = R * (1 + α * (T - T_amb))
        """
        p = self.parameters
        return p.resistance * (1 + p.temp_coefficient * (self.temperature - self.ambient))

    def update_state(
        self,
        phase_voltages: Sequence[float],
        phase_currents: Sequence[float],
        load_type: LoadType,
        time_step: float
    ) -> MotorState:
        """
        Advance the motor by one step.

        Args:
            phase_voltages: Applied phase voltages [V]
            phase_currents: Measured phase currents [A]
            load_type: Shaft load profile
            time_step: Electrical/mechanical step [s]

        Returns:
            Snapshot after the update
        """
        p = self.parameters

        self._update_temperature(phase_currents)

        # v_q/v_d are published in the snapshot; flux and torque are current driven
        self.v_q, self.v_d = clarke_projection(phase_voltages)
        self.i_q, self.i_d = clarke_projection(phase_currents)

        self.torque = 1.5 * p.pole_pairs * self.rotor_flux * self.i_q
        self.rotor_flux += time_step * (-self.rotor_flux / p.inductance + self.i_d)

        load_torque = calculate_load_torque(load_type, self.speed)
        coupling = p.coupling_stiffness * self.speed * time_step
        acceleration = (
            self.torque - load_torque - p.viscous_coefficient * self.speed - coupling
        ) / p.total_inertia
        self.speed = max(0.0, self.speed + acceleration * time_step)

        return self.state

    def _update_temperature(self, phase_currents: Sequence[float]):
        """Lumped thermal update driven by winding I²R losses."""
        joule = calculate_joule_losses(phase_currents, self.parameters.resistance)
        heat_generation = joule * self.surface.thermal_resistance
        self.temperature = thermal_balance_step(
            heat_generation,
            self.temperature,
            self.surface,
            self.cooling,
            ambient=self.ambient,
            step=self.thermal_step
        )
