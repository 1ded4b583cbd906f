"""
Inverter Drive Package

Fixed-step simulator of a three-phase inverter feeding a squirrel-cage
induction motor, with V/f, field-oriented and direct torque control, fault
injection, lumped thermal models and an NSGA-II tuner for the drive
parameters.

Usage:
    from inverter_drive import DriveSimulation, ControlMode, PwmType

    sim = DriveSimulation(seed=42)
    records = sim.run(0.5, control_mode=ControlMode.SCALAR,
                      pwm_type=PwmType.SPACE_VECTOR)
    print(records[-1].as_csv_row())

    from inverter_drive import optimize_drive, EvaluationSettings

    front, optimizer = optimize_drive(
        population_size=20,
        n_generations=10,
        evaluation=EvaluationSettings(duration=0.2),
        seed=1
    )
"""

from .models import (
    # Modes
    ControlMode,
    PwmType,
    FaultType,
    LoadType,
    ProtectionMode,
    # Parameters
    MotorParameters,
    CoolingSettings,
    PowerStageSettings,
    DriveReferences,
    ControllerGains,
    ProtectionSettings,
    # State
    CSV_HEADER,
    MotorState,
    PowerStageState,
    FaultState,
    TickRecord
)

from .calculations import (
    thermal_balance_step,
    clarke_projection,
    DriveLosses,
    calculate_drive_losses
)

from .core import (
    InductionMotor,
    InverterPowerStage,
    DriveController,
    FaultSimulator,
    SensorModel,
    DriveSimulation,
    NSGA2Optimizer,
    DriveGenes,
    DriveObjectives,
    Individual,
    EvaluationSettings,
    optimize_drive
)

from .utils import (
    AMBIENT_TEMPERATURE,
    ParameterRanges
)

__version__ = "1.0.0"

__all__ = [
    # Main entry points
    'DriveSimulation',
    'NSGA2Optimizer',
    'optimize_drive',
    'EvaluationSettings',
    'DriveGenes',
    'DriveObjectives',
    'Individual',

    # Components
    'InductionMotor',
    'InverterPowerStage',
    'DriveController',
    'FaultSimulator',
    'SensorModel',

    # Models
    'ControlMode',
    'PwmType',
    'FaultType',
    'LoadType',
    'ProtectionMode',
    'MotorParameters',
    'CoolingSettings',
    'PowerStageSettings',
    'DriveReferences',
    'ControllerGains',
    'ProtectionSettings',
    'CSV_HEADER',
    'MotorState',
    'PowerStageState',
    'FaultState',
    'TickRecord',

    # Calculations
    'thermal_balance_step',
    'clarke_projection',
    'DriveLosses',
    'calculate_drive_losses',

    # Utils
    'AMBIENT_TEMPERATURE',
    'ParameterRanges'
]
