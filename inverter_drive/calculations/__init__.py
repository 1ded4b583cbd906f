"""Calculation modules shared by the drive components."""

from .thermal import (
    ThermalSurface,
    MOTOR_SURFACE,
    INVERTER_SURFACE,
    convection_coefficient,
    convective_loss,
    radiative_loss,
    thermal_balance_step
)

from .transforms import (
    clarke_projection,
    inverse_park,
    balanced_set
)

from .losses import (
    DriveLosses,
    calculate_switching_loss,
    calculate_joule_losses,
    calculate_drive_losses
)

__all__ = [
    # Thermal
    'ThermalSurface',
    'MOTOR_SURFACE',
    'INVERTER_SURFACE',
    'convection_coefficient',
    'convective_loss',
    'radiative_loss',
    'thermal_balance_step',

    # Transforms
    'clarke_projection',
    'inverse_park',
    'balanced_set',

    # Losses
    'DriveLosses',
    'calculate_switching_loss',
    'calculate_joule_losses',
    'calculate_drive_losses'
]
