"""
Fixed-step drive simulation harness.

Wires the drive stages into the per-tick pipeline

    Controller -> PowerStage -> FaultSimulator -> SensorModel -> Motor

with data passed between stages by value. Each harness owns its own stages
and random generator, so independent harnesses never share state; the
optimizer builds one per evaluation.
"""

from typing import Callable, List, Optional
import random

from ..models.modes import ControlMode, FaultType, LoadType, PwmType
from ..models.parameters import (
    MotorParameters,
    PowerStageSettings,
    CoolingSettings,
    ControllerGains,
    DriveReferences,
    ProtectionSettings
)
from ..models.state import ControlOutput, TickRecord
from ..utils.constants import SIMULATION_TIME_STEP, AMBIENT_TEMPERATURE
from .motor import InductionMotor
from .power_stage import InverterPowerStage
from .controller import DriveController
from .faults import FaultSimulator
from .sensors import SensorModel


class DriveSimulation:
    """
    Inverter-fed induction motor drive advanced one tick at a time.

    Example:
        >>> sim = DriveSimulation(seed=1)
        >>> records = sim.run(0.1, control_mode=ControlMode.SCALAR)
        >>> records[-1].speed
    """

    def __init__(
        self,
        motor_parameters: Optional[MotorParameters] = None,
        power_stage: Optional[PowerStageSettings] = None,
        cooling: Optional[CoolingSettings] = None,
        gains: Optional[ControllerGains] = None,
        time_step: float = SIMULATION_TIME_STEP,
        ambient: float = AMBIENT_TEMPERATURE,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False
    ):
        """
        Args:
            motor_parameters: Motor data
            power_stage: Initial inverter configuration
            cooling: Fan/coolant settings shared by motor and inverter
            gains: Speed-loop PI gains
            time_step: Electrical/mechanical step [s]
            ambient: Ambient temperature [°C]
            seed: Seed for a private generator (ignored when ``rng`` given)
            rng: Generator shared by the fault and sensor models
            verbose: Print fault transitions and run banners
        """
        if time_step <= 0:
            raise ValueError(f"Time step must be positive, got {time_step}")

        self.time_step = time_step
        self.verbose = verbose
        self.rng = rng or random.Random(seed)
        cooling = cooling or CoolingSettings()

        self.motor = InductionMotor(motor_parameters, cooling, ambient=ambient)
        self.power_stage = InverterPowerStage(power_stage, cooling, ambient=ambient)
        self.controller = DriveController(self.motor.parameters, gains)
        self.faults = FaultSimulator(rng=self.rng, clock=lambda: self.time, verbose=verbose)
        self.sensors = SensorModel(rng=self.rng)

        self.time = 0.0
        self.last_control: Optional[ControlOutput] = None

    def _log(self, message: str):
        """Print if verbose."""
        if self.verbose:
            print(message)

    def reset(self):
        """Restore the baseline: standstill, ambient, no fault, t = 0."""
        self.motor.reset()
        self.power_stage.reset()
        self.controller.reset()
        self.faults.clear_fault()
        self.faults.fault_timestamp = 0.0
        self.sensors.reset()
        self.time = 0.0
        self.last_control = None

    # =========================================================================
    # OPERATOR INPUTS
    # =========================================================================

    def configure_power_stage(self, settings: PowerStageSettings):
        self.power_stage.configure(settings)

    def set_cooling(self, cooling: CoolingSettings):
        """Apply fan/coolant settings to both motor and inverter."""
        self.motor.cooling = cooling
        self.power_stage.cooling = cooling

    def set_gains(self, kp: float, ki: float):
        self.controller.set_gains(kp, ki)

    def inject_fault(self, fault: FaultType):
        self.faults.inject_fault(fault)

    def clear_fault(self):
        self.faults.clear_fault()

    @property
    def current_fault(self) -> FaultType:
        return self.faults.current_fault

    # =========================================================================
    # TICK PIPELINE
    # =========================================================================

    def step(
        self,
        references: Optional[DriveReferences] = None,
        control_mode: ControlMode = ControlMode.SCALAR,
        pwm_type: PwmType = PwmType.SINE,
        load_type: LoadType = LoadType.CONSTANT,
        protection: Optional[ProtectionSettings] = None
    ) -> TickRecord:
        """
        Advance the drive by one tick.

        Args:
            references: Operator references
            control_mode: Control law for this tick
            pwm_type: Modulation strategy for this tick
            load_type: Shaft load profile
            protection: Thermal protection settings

        Returns:
            TickRecord stamped with the time at which the tick started
        """
        references = references or DriveReferences()
        protection = protection or ProtectionSettings()
        now = self.time

        control = self.controller.update_control(control_mode, references, self.motor.state, now)
        self.last_control = control

        voltages = self.power_stage.generate_phase_voltages(
            control.signals, pwm_type, time=now, fundamental_frequency=control.frequency
        )
        voltages = self.faults.apply_faults(
            voltages,
            protection.auto_reset,
            self.motor.temperature,
            self.power_stage.temperature,
            protection.max_temp,
            protection.mode
        )
        currents = self.sensors.measure_currents(
            voltages, self.motor.parameters.resistance, self.motor.parameters.inductance
        )
        motor_state = self.motor.update_state(voltages, currents, load_type, self.time_step)

        self.time = now + self.time_step

        return TickRecord(
            time=now,
            voltages=voltages,
            currents=currents,
            speed=motor_state.speed,
            torque=motor_state.torque,
            control_mode=control_mode,
            fault=self.faults.current_fault,
            motor_temperature=motor_state.temperature,
            inverter_temperature=self.power_stage.temperature
        )

    def run(
        self,
        duration: float,
        references: Optional[DriveReferences] = None,
        control_mode: ControlMode = ControlMode.SCALAR,
        pwm_type: PwmType = PwmType.SINE,
        load_type: LoadType = LoadType.CONSTANT,
        protection: Optional[ProtectionSettings] = None,
        callback: Optional[Callable[[TickRecord], None]] = None
    ) -> List[TickRecord]:
        """
        Run ``duration`` seconds of fixed-step simulation.

        Args:
            duration: Simulated time [s]
            references, control_mode, pwm_type, load_type, protection:
                Held constant for every tick, see ``step``
            callback: Called with each record; when given, records are
                streamed and not collected

        Returns:
            Collected records (empty when streaming to ``callback``)
        """
        if duration < 0:
            raise ValueError(f"Duration must be non-negative, got {duration}")

        n_steps = int(round(duration / self.time_step))
        self._log("=" * 70)
        self._log(f"Simulating {duration} s ({n_steps} steps): "
                  f"{control_mode.label}, {pwm_type.label}, {load_type.label} load")
        self._log("=" * 70)

        records: List[TickRecord] = []
        for _ in range(n_steps):
            record = self.step(references, control_mode, pwm_type, load_type, protection)
            if callback is not None:
                callback(record)
            else:
                records.append(record)

        if n_steps:
            self._log(f"Finished at t = {self.time:.3f} s, speed = {self.motor.speed:.2f} rad/s, "
                      f"fault = {self.faults.current_fault.label}")
        return records
