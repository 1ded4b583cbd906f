"""
Closed enumerations for every operator-selectable mode of the drive.

Each member carries the display label used by the operator panel and by the
CSV log, so string tags never travel through the simulation core.
"""

from enum import Enum


class _LabelledEnum(Enum):
    """Enum whose members are (key, label) tuples."""

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label

    @classmethod
    def from_label(cls, label: str):
        """
        Look up a member by display label or key (case-insensitive).

        Raises:
            ValueError: If no member matches.
        """
        wanted = label.strip().lower()
        for member in cls:
            if wanted in (member.label.lower(), member.key.lower(), member.name.lower()):
                return member
        choices = ", ".join(m.label for m in cls)
        raise ValueError(f"Unknown {cls.__name__} '{label}' (expected one of: {choices})")

    def __str__(self) -> str:
        return self.label


class ControlMode(_LabelledEnum):
    """Control law used to produce the modulation signals."""
    SCALAR = ("vf", "V/f")
    FIELD_ORIENTED = ("foc", "FOC")
    DIRECT_TORQUE = ("dtc", "DTC")


class PwmType(_LabelledEnum):
    """Voltage synthesis strategy of the power stage."""
    SINE = ("spwm", "SPWM")
    SPACE_VECTOR = ("svpwm", "SVPWM")


class FaultType(_LabelledEnum):
    """Simulated fault conditions."""
    NONE = ("none", "None")
    OVERCURRENT = ("overcurrent", "Overcurrent")
    UNDERVOLTAGE = ("undervoltage", "Undervoltage")
    PHASE_LOSS = ("phase_loss", "Phase Loss")
    OVERHEAT = ("overheat", "Overheat")
    IGBT_FAILURE = ("igbt_failure", "IGBTFailure")


class LoadType(_LabelledEnum):
    """Mechanical load profile on the shaft."""
    CONSTANT = ("constant", "Constant")
    FAN_PUMP = ("fan_pump", "Fan/Pump")
    INERTIA = ("inertia", "Inertia")


class ProtectionMode(_LabelledEnum):
    """Reaction to an over-temperature condition."""
    NONE = ("none", "None")
    WARNING = ("warning", "Warning")
    SHUTDOWN = ("shutdown", "Shutdown")
