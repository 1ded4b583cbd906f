"""
Loss calculations for the drive.

Includes:
- Inverter switching losses
- Conduction (I²R) losses in the motor windings
- Combined drive losses used as an optimization objective
"""

from dataclasses import dataclass
from typing import Sequence

from ..utils.constants import SWITCHING_LOSS_COEFF


@dataclass(frozen=True)
class DriveLosses:
    """Loss breakdown for one tick [W]."""
    switching: float
    conduction: float

    @property
    def total(self) -> float:
        """Total losses [W]."""
        return self.switching + self.conduction


def calculate_switching_loss(pwm_frequency: float, dc_link_voltage: float) -> float:
    """
    Switching losses of the inverter bridge.

    P_sw = f_pwm * k_sw * V_dc

    Args:
        pwm_frequency: Carrier frequency [Hz]
        dc_link_voltage: DC bus voltage [V]

    Returns:
        Switching losses [W]
    """
    return pwm_frequency * SWITCHING_LOSS_COEFF * dc_link_voltage


def calculate_joule_losses(currents: Sequence[float], resistance: float) -> float:
    """
    Joule losses summed over the phases.

    P_j = R * Σ i_k²

    Args:
        currents: Instantaneous phase currents [A]
        resistance: Phase resistance [Ω]

    Returns:
        Joule losses [W]
    """
    return resistance * sum(i * i for i in currents)


def calculate_drive_losses(
    pwm_frequency: float,
    dc_link_voltage: float,
    currents: Sequence[float],
    resistance: float
) -> DriveLosses:
    """Switching + conduction losses for one tick."""
    return DriveLosses(
        switching=calculate_switching_loss(pwm_frequency, dc_link_voltage),
        conduction=calculate_joule_losses(currents, resistance)
    )
