"""
State snapshots exchanged between pipeline stages.

Each stage owns its mutable state privately and publishes a frozen snapshot;
no stage holds a reference to another stage's object.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .modes import ControlMode, FaultType

Phases = Tuple[float, float, float]

CSV_HEADER = "Time,Va,Vb,Vc,Ia,Ib,Ic,Speed,Torque,ControlMode,Fault"


@dataclass(frozen=True)
class MotorState:
    """Electromechanical and thermal state of the motor."""
    speed: float          # Mechanical speed [rad/s], >= 0
    torque: float         # Electromagnetic torque [Nm]
    rotor_flux: float     # Rotor flux [Wb]
    i_d: float            # Direct-axis current [A]
    i_q: float            # Quadrature-axis current [A]
    temperature: float    # Winding temperature [°C]
    v_d: float = 0.0      # Direct-axis voltage [V]
    v_q: float = 0.0      # Quadrature-axis voltage [V]


@dataclass(frozen=True)
class PowerStageState:
    """Configuration and thermal state of the inverter."""
    dc_link_voltage: float
    pwm_frequency: float
    dead_time: float
    modulation_index: float
    harmonic_injection: bool
    overmodulation: bool
    temperature: float
    fan_speed: float
    coolant_flow: float


@dataclass(frozen=True)
class FaultState:
    """Active fault and the clock reading at which it was (re)entered."""
    current_fault: FaultType = FaultType.NONE
    fault_timestamp: float = 0.0


@dataclass
class SensorConfig:
    """Current-sensor health."""
    current_sensor_fault: bool = False
    partial_failure_scale: float = 1.0   # 1 = healthy, 0 = dead


@dataclass(frozen=True)
class ControlOutput:
    """
    Controller output for one tick.

    Attributes:
        signals: Normalized modulation signals, one per phase
        frequency: Commanded electrical frequency [Hz]
        voltage: Commanded voltage amplitude [V] (V/f only)
        sector: Stator-flux sector 1-6 (DTC only)
        vector: Selected switching vector index 0-7 (DTC only)
    """
    signals: Phases
    frequency: float = 0.0
    voltage: float = 0.0
    sector: Optional[int] = None
    vector: Optional[int] = None


@dataclass(frozen=True)
class TickRecord:
    """
    Per-tick output consumed by the logger and the waveform display.
    """
    time: float
    voltages: Phases
    currents: Phases
    speed: float
    torque: float
    control_mode: ControlMode
    fault: FaultType
    motor_temperature: float
    inverter_temperature: float

    def as_csv_row(self) -> str:
        """Format as a row matching ``CSV_HEADER``."""
        va, vb, vc = self.voltages
        ia, ib, ic = self.currents
        return (
            f"{self.time:.3f},{va:.2f},{vb:.2f},{vc:.2f},"
            f"{ia:.2f},{ib:.2f},{ic:.2f},{self.speed:.2f},{self.torque:.2f},"
            f"{self.control_mode.label},{self.fault.label}"
        )
