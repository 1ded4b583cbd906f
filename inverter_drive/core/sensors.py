"""
Phase current sensing.

Currents are estimated from the applied voltages through a crude impedance
i = v / (R + 0.1 L) and corrupted with relative Gaussian noise. Two sensor
faults are modelled: a dead sensor (reads zero) and a partially failed one
(reading scaled by a factor in [0, 1]).
"""

from typing import Optional, Sequence
import random

from ..models.state import Phases, SensorConfig
from ..utils.constants import SENSOR_NOISE_STDDEV, SENSOR_INDUCTIVE_WEIGHT


class SensorModel:
    """Noisy three-phase current sensor."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        noise_stddev: float = SENSOR_NOISE_STDDEV
    ):
        self.rng = rng or random.Random()
        self.noise_stddev = noise_stddev
        self.config = SensorConfig()

    def reset(self):
        """Restore a healthy sensor."""
        self.config = SensorConfig()

    def set_current_sensor_fault(self, faulted: bool):
        self.config.current_sensor_fault = bool(faulted)

    def set_partial_failure_scale(self, scale: float):
        """Set the reading scale, clamped to [0, 1]."""
        self.config.partial_failure_scale = min(1.0, max(0.0, scale))

    def measure_currents(
        self,
        phase_voltages: Sequence[float],
        resistance: float,
        inductance: float
    ) -> Phases:
        """
        Measured phase currents.

        Args:
            phase_voltages: Applied phase voltages [V]
            resistance: Winding resistance [Ω]
            inductance: Winding inductance [H]

        Returns:
            (ia, ib, ic) [A]
        """
        if self.config.current_sensor_fault:
            return 0.0, 0.0, 0.0

        impedance = resistance + SENSOR_INDUCTIVE_WEIGHT * inductance
        scale = self.config.partial_failure_scale
        currents = []
        for v in phase_voltages:
            i = v / impedance
            i += self.rng.gauss(0.0, 1.0) * self.noise_stddev * i
            currents.append(i * scale)
        return currents[0], currents[1], currents[2]
