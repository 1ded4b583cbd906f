"""Drive components, simulation harness and optimizer."""

from .motor import (
    InductionMotor,
    calculate_load_torque
)

from .power_stage import (
    InverterPowerStage,
    svm_sector,
    svm_dwell_times,
    svm_duty_cycles
)

from .controller import (
    DriveController,
    VOLTAGE_VECTORS,
    SWITCHING_TABLE,
    hysteresis_state,
    flux_sector,
    select_voltage_vector
)

from .faults import FaultSimulator
from .sensors import SensorModel
from .simulation import DriveSimulation

from .optimizer import (
    NSGA2Optimizer,
    DriveGenes,
    DriveObjectives,
    Individual,
    EvaluationSettings,
    GENE_BOUNDS,
    evaluate_candidate,
    dominates,
    fast_non_dominated_sort,
    assign_crowding_distance,
    optimize_drive
)

__all__ = [
    # Motor
    'InductionMotor',
    'calculate_load_torque',

    # Power stage
    'InverterPowerStage',
    'svm_sector',
    'svm_dwell_times',
    'svm_duty_cycles',

    # Controller
    'DriveController',
    'VOLTAGE_VECTORS',
    'SWITCHING_TABLE',
    'hysteresis_state',
    'flux_sector',
    'select_voltage_vector',

    # Faults, sensors, harness
    'FaultSimulator',
    'SensorModel',
    'DriveSimulation',

    # Optimizer
    'NSGA2Optimizer',
    'DriveGenes',
    'DriveObjectives',
    'Individual',
    'EvaluationSettings',
    'GENE_BOUNDS',
    'evaluate_candidate',
    'dominates',
    'fast_non_dominated_sort',
    'assign_crowding_distance',
    'optimize_drive'
]
