"""Data models for the inverter drive simulator."""

from .modes import (
    ControlMode,
    PwmType,
    FaultType,
    LoadType,
    ProtectionMode
)
from .parameters import (
    MotorParameters,
    CoolingSettings,
    PowerStageSettings,
    DriveReferences,
    ControllerGains,
    ProtectionSettings
)
from .state import (
    Phases,
    CSV_HEADER,
    MotorState,
    PowerStageState,
    FaultState,
    SensorConfig,
    ControlOutput,
    TickRecord
)

__all__ = [
    # Modes
    'ControlMode',
    'PwmType',
    'FaultType',
    'LoadType',
    'ProtectionMode',
    # Parameters
    'MotorParameters',
    'CoolingSettings',
    'PowerStageSettings',
    'DriveReferences',
    'ControllerGains',
    'ProtectionSettings',
    # State
    'Phases',
    'CSV_HEADER',
    'MotorState',
    'PowerStageState',
    'FaultState',
    'SensorConfig',
    'ControlOutput',
    'TickRecord'
]
