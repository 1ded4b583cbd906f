"""
Fault injection layer.

Owns the fault lifecycle and rewrites the inverter output voltages to emulate
the active fault. Faults are simulated conditions: nothing here raises.

Transitions:
    over-temperature + Shutdown  -> Overheat, output forced to zero every tick
    over-temperature + Warning   -> Overheat once (timestamped), output kept
    auto-reset                   -> None after AUTO_RESET_DWELL since (re)entry
    inject_fault(f), f != None   -> f (timestamped)
    clear_fault()                -> None
"""

from typing import Callable, Optional, Sequence
import random
import time

from ..models.modes import FaultType, ProtectionMode
from ..models.state import FaultState, Phases
from ..utils.constants import (
    AUTO_RESET_DWELL,
    OVERCURRENT_VOLTAGE_SCALE,
    UNDERVOLTAGE_VOLTAGE_SCALE,
    IGBT_FAILURE_DUTY_CYCLE
)

ZERO_VOLTAGES: Phases = (0.0, 0.0, 0.0)


class FaultSimulator:
    """
    Fault state machine over ``FaultType``.

    Args:
        rng: Random source for the intermittent IGBT failure
        clock: Returns the current time in seconds; defaults to wall-clock
            ``time.monotonic``. The simulation harness passes its logical
            clock so runs are reproducible.
        reset_dwell: Auto-reset dwell [s]
        verbose: Print fault transitions
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        reset_dwell: float = AUTO_RESET_DWELL,
        verbose: bool = False
    ):
        self.rng = rng or random.Random()
        self.clock = clock
        self.reset_dwell = reset_dwell
        self.verbose = verbose
        self.current_fault = FaultType.NONE
        self.fault_timestamp = 0.0

    def _log(self, message: str):
        """Print if verbose."""
        if self.verbose:
            print(message)

    @property
    def state(self) -> FaultState:
        """Snapshot of the fault tag and entry time."""
        return FaultState(current_fault=self.current_fault, fault_timestamp=self.fault_timestamp)

    def _enter(self, fault: FaultType):
        self._log(f"Fault: {self.current_fault.label} -> {fault.label}")
        self.current_fault = fault
        self.fault_timestamp = self.clock()

    def inject_fault(self, fault: FaultType):
        """Force a fault and restart its dwell timer. ``NONE`` is ignored."""
        if fault is FaultType.NONE:
            return
        self._enter(fault)

    def clear_fault(self):
        """Return to ``NONE`` unconditionally."""
        if self.current_fault is not FaultType.NONE:
            self._log(f"Fault cleared: {self.current_fault.label}")
        self.current_fault = FaultType.NONE

    def apply_faults(
        self,
        phase_voltages: Sequence[float],
        auto_reset: bool,
        motor_temp: float,
        inverter_temp: float,
        max_temp: float,
        protection_mode: ProtectionMode
    ) -> Phases:
        """
        Update the fault state and perturb the phase voltages.

        Args:
            phase_voltages: Inverter output (va, vb, vc) [V]
            auto_reset: Clear faults automatically after the dwell
            motor_temp: Motor temperature [°C]
            inverter_temp: Inverter temperature [°C]
            max_temp: Over-temperature threshold [°C]
            protection_mode: Reaction to over-temperature

        Returns:
            Perturbed phase voltages
        """
        if motor_temp > max_temp or inverter_temp > max_temp:
            if protection_mode is ProtectionMode.SHUTDOWN:
                if self.current_fault is not FaultType.OVERHEAT:
                    self._enter(FaultType.OVERHEAT)
                return ZERO_VOLTAGES
            if protection_mode is ProtectionMode.WARNING and self.current_fault is not FaultType.OVERHEAT:
                self._enter(FaultType.OVERHEAT)

        if (auto_reset and self.current_fault is not FaultType.NONE and
                self.clock() - self.fault_timestamp > self.reset_dwell):
            self.clear_fault()

        return self._perturb(phase_voltages, protection_mode)

    def _perturb(self, phase_voltages: Sequence[float], protection_mode: ProtectionMode) -> Phases:
        """Voltage transform for the active fault."""
        va, vb, vc = phase_voltages
        fault = self.current_fault

        if fault is FaultType.NONE:
            return va, vb, vc
        if fault is FaultType.OVERCURRENT:
            k = OVERCURRENT_VOLTAGE_SCALE
            return va * k, vb * k, vc * k
        if fault is FaultType.UNDERVOLTAGE:
            k = UNDERVOLTAGE_VOLTAGE_SCALE
            return va * k, vb * k, vc * k
        if fault is FaultType.PHASE_LOSS:
            return 0.0, vb, vc
        if fault is FaultType.OVERHEAT:
            if protection_mode is ProtectionMode.SHUTDOWN:
                return ZERO_VOLTAGES
            return va, vb, vc
        if fault is FaultType.IGBT_FAILURE:
            # Intermittent, independent per tick
            if self.rng.random() < IGBT_FAILURE_DUTY_CYCLE:
                return 0.0, vb, vc
            return va, vb, vc
        raise ValueError(f"Unhandled fault type: {fault!r}")
