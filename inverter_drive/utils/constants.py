"""
Physical constants and default plant values for the inverter drive simulator.
"""

import math

# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

STEFAN_BOLTZMANN = 5.670367e-8   # Stefan-Boltzmann constant [W/(m²·K⁴)]
KELVIN_OFFSET = 273.15           # °C -> K
AMBIENT_TEMPERATURE = 25.0       # Ambient temperature [°C]


# =============================================================================
# INTEGRATION STEPS
# =============================================================================

# Electrical/mechanical step used by the tick pipeline [s]
SIMULATION_TIME_STEP = 1e-4

# Step used by the lumped thermal balance [s]. Kept separate from the
# electrical step: the thermal update never sees the step passed to the motor.
THERMAL_TIME_STEP = 1e-4

# Step used by the controller integrators and V/f rate limiter [s]
CONTROL_TIME_STEP = 1e-4


# =============================================================================
# THERMAL NETWORK (lumped, one node per component)
# =============================================================================

MOTOR_THERMAL_RESISTANCE = 0.1          # °C/W
MOTOR_THERMAL_CAPACITANCE = 5000.0      # J/°C
MOTOR_SURFACE_AREA = 1.0                # m²
MOTOR_EMISSIVITY = 0.85                 # Painted motor surface
MOTOR_CONVECTION_BASE = 15.0            # W/(m²·K), natural convection
MOTOR_CONVECTION_FAN_COEFF = 35.0       # W/(m²·K) per unit fan speed
MOTOR_CONVECTION_COOLANT_COEFF = 25.0   # W/(m²·K) per L/min coolant

INVERTER_THERMAL_RESISTANCE = 0.05
INVERTER_THERMAL_CAPACITANCE = 2000.0
INVERTER_SURFACE_AREA = 0.5
INVERTER_EMISSIVITY = 0.8
INVERTER_CONVECTION_BASE = 10.0
INVERTER_CONVECTION_FAN_COEFF = 40.0
INVERTER_CONVECTION_COOLANT_COEFF = 20.0

# Switching energy factor: P_sw = f_pwm * K_SW * V_dc [W]
SWITCHING_LOSS_COEFF = 1e-4


# =============================================================================
# POWER STAGE
# =============================================================================

OVERMODULATION_GAIN = 1.15
HARMONIC_INJECTION_AMPLITUDE = 0.1   # Third harmonic, per unit of signal


# =============================================================================
# SENSORS AND FAULTS
# =============================================================================

SENSOR_NOISE_STDDEV = 0.01          # Relative Gaussian noise on currents
SENSOR_INDUCTIVE_WEIGHT = 0.1       # i = v / (R + 0.1 L)

OVERCURRENT_VOLTAGE_SCALE = 1.5
UNDERVOLTAGE_VOLTAGE_SCALE = 0.5
IGBT_FAILURE_DUTY_CYCLE = 0.3       # Probability of phase A drop per tick
AUTO_RESET_DWELL = 2.0              # Fault auto-reset dwell [s]


# =============================================================================
# MOTOR AND LOAD
# =============================================================================

INITIAL_ROTOR_FLUX = 1.0            # Wb
CONSTANT_LOAD_TORQUE = 10.0         # Nm
FAN_PUMP_LOAD_COEFF = 0.1           # Nm/(rad/s)²


# =============================================================================
# CONTROLLER
# =============================================================================

CONTROLLER_MAX_VOLTAGE = 230.0                  # V
CONTROLLER_BASE_FREQUENCY = 50.0                # Hz
VOLTS_PER_HERTZ = CONTROLLER_MAX_VOLTAGE / CONTROLLER_BASE_FREQUENCY

FOC_TORQUE_KP = 0.5
FOC_TORQUE_KI = 0.05
FOC_FLUX_KP = 0.3
FOC_FLUX_KI = 0.03

DTC_HYSTERESIS_BAND = 0.05          # Fraction of the reference

SECTOR_WIDTH = math.pi / 3.0        # 60° in radians


# =============================================================================
# OPERATOR RANGES (for validation at the driver boundary)
# =============================================================================

class ParameterRanges:
    """Operator-facing bounds for references and drive parameters."""

    # DC link voltage [V]
    DC_LINK_MIN = 100.0
    DC_LINK_MAX = 600.0
    DC_LINK_TYPICAL = 400.0

    # Speed reference [rad/s]
    SPEED_REF_MIN = 0.0
    SPEED_REF_MAX = 300.0

    # Acceleration limit [rad/s²]
    ACCEL_MIN = 0.0
    ACCEL_MAX = 50.0

    # Torque reference [Nm]
    TORQUE_REF_MIN = 0.0
    TORQUE_REF_MAX = 100.0

    # Flux reference [Wb]
    FLUX_REF_MIN = 0.5
    FLUX_REF_MAX = 1.5

    # PWM carrier [Hz]
    PWM_FREQ_MIN = 2000.0
    PWM_FREQ_MAX = 20000.0

    # Dead time [s]
    DEAD_TIME_MIN = 0.0
    DEAD_TIME_MAX = 5e-6

    # Modulation index [-]
    MOD_INDEX_MIN = 0.1
    MOD_INDEX_MAX = 1.0

    # Cooling
    FAN_SPEED_MIN = 0.0
    FAN_SPEED_MAX = 1.0
    COOLANT_FLOW_MIN = 0.0
    COOLANT_FLOW_MAX = 10.0     # L/min

    @staticmethod
    def contains(value: float, low: float, high: float) -> bool:
        """Inclusive range check."""
        return low <= value <= high


def celsius_to_kelvin(temp: float) -> float:
    """Convert a temperature from °C to K."""
    return temp + KELVIN_OFFSET
