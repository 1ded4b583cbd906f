"""Physical constants, default plant values and operator ranges."""

from .constants import (
    STEFAN_BOLTZMANN,
    AMBIENT_TEMPERATURE,
    SIMULATION_TIME_STEP,
    THERMAL_TIME_STEP,
    CONTROL_TIME_STEP,
    AUTO_RESET_DWELL,
    ParameterRanges,
    celsius_to_kelvin
)

__all__ = [
    'STEFAN_BOLTZMANN',
    'AMBIENT_TEMPERATURE',
    'SIMULATION_TIME_STEP',
    'THERMAL_TIME_STEP',
    'CONTROL_TIME_STEP',
    'AUTO_RESET_DWELL',
    'ParameterRanges',
    'celsius_to_kelvin'
]
