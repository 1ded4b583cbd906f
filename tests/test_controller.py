"""
Controller Tests
================

V/f rate limiting, FOC normalization and the DTC comparators, sector
estimate and switching table.
"""

import sys
from pathlib import Path
import math
import unittest

sys.path.insert(0, str(Path(__file__).parent.parent))

from inverter_drive.models import ControlMode, ControllerGains, DriveReferences, MotorState
from inverter_drive.core import (
    DriveController,
    VOLTAGE_VECTORS,
    SWITCHING_TABLE,
    hysteresis_state,
    flux_sector,
    select_voltage_vector
)

AT_REST = MotorState(speed=0.0, torque=0.0, rotor_flux=1.0, i_d=0.0, i_q=0.0, temperature=25.0)


class TestScalarControl(unittest.TestCase):
    """V/f mode."""

    def setUp(self):
        self.controller = DriveController(gains=ControllerGains(kp=0.1, ki=0.01))
        self.references = DriveReferences(speed_ref=100.0, accel_rate=10.0, direction=1)

    def test_first_tick_is_rate_limited(self):
        self.controller.update_control(ControlMode.SCALAR, self.references, AT_REST, 0.0)
        limit = 10.0 * 1e-4 / (2 * math.pi)
        self.assertGreater(self.controller.frequency, 0.0)
        self.assertLessEqual(self.controller.frequency, limit)
        self.assertAlmostEqual(self.controller.frequency, limit)

    def test_frequency_ramps_monotonically(self):
        previous = 0.0
        for k in range(200):
            self.controller.update_control(ControlMode.SCALAR, self.references, AT_REST, k * 1e-4)
            self.assertGreater(self.controller.frequency, previous)
            previous = self.controller.frequency

    def test_voltage_follows_volts_per_hertz(self):
        output = self.controller.update_control(ControlMode.SCALAR, self.references, AT_REST, 0.0)
        self.assertAlmostEqual(output.voltage, output.frequency * 230.0 / 50.0)

    def test_signals_in_unit_range(self):
        for k in range(100):
            output = self.controller.update_control(
                ControlMode.SCALAR, self.references, AT_REST, k * 1e-3)
            for s in output.signals:
                self.assertGreaterEqual(s, 0.0)
                self.assertLessEqual(s, 1.0)

    def test_reverse_direction_swaps_phase_sequence(self):
        forward = DriveController().update_control(
            ControlMode.SCALAR, self.references, AT_REST, 0.01)
        reverse_refs = DriveReferences(speed_ref=100.0, accel_rate=10.0, direction=-1)
        reverse = DriveController().update_control(ControlMode.SCALAR, reverse_refs, AT_REST, 0.01)
        a, b, c = forward.signals
        self.assertAlmostEqual(reverse.signals[0], 1.0 - a)
        self.assertAlmostEqual(reverse.signals[1], 1.0 - c)
        self.assertAlmostEqual(reverse.signals[2], 1.0 - b)

    def test_reset_clears_state(self):
        self.controller.update_control(ControlMode.SCALAR, self.references, AT_REST, 0.0)
        self.controller.reset()
        self.assertEqual(self.controller.frequency, 0.0)
        self.assertEqual(self.controller.speed_error_integral, 0.0)

    def test_set_gains(self):
        self.controller.set_gains(0.5, 0.2)
        self.assertEqual(self.controller.gains, ControllerGains(kp=0.5, ki=0.2))


class TestFieldOrientedControl(unittest.TestCase):
    """FOC mode."""

    def test_signals_normalized_by_peak(self):
        output = DriveController().update_control(
            ControlMode.FIELD_ORIENTED, DriveReferences(), AT_REST, 0.003)
        deviations = [abs(2 * s - 1) for s in output.signals]
        self.assertAlmostEqual(max(deviations), 1.0)
        for s in output.signals:
            self.assertGreaterEqual(s, 0.0)
            self.assertLessEqual(s, 1.0)

    def test_zero_command_gives_mid_rail(self):
        references = DriveReferences(speed_ref=0.0, flux_ref=1.0)
        output = DriveController().update_control(ControlMode.FIELD_ORIENTED, references, AT_REST, 0.0)
        self.assertEqual(output.signals, (0.5, 0.5, 0.5))

    def test_integrators_shared_with_scalar_mode(self):
        controller = DriveController()
        controller.update_control(ControlMode.SCALAR, DriveReferences(), AT_REST, 0.0)
        integral = controller.speed_error_integral
        controller.update_control(ControlMode.FIELD_ORIENTED, DriveReferences(), AT_REST, 1e-4)
        self.assertAlmostEqual(controller.speed_error_integral, 2 * integral)


class TestDirectTorqueControl(unittest.TestCase):
    """DTC comparators and switching table."""

    def test_hysteresis_band(self):
        self.assertEqual(hysteresis_state(2.0, 50.0), 0)
        self.assertEqual(hysteresis_state(-2.5, 50.0), 0)
        self.assertEqual(hysteresis_state(3.0, 50.0), 1)
        self.assertEqual(hysteresis_state(-3.0, 50.0), -1)

    def test_flux_sector(self):
        self.assertEqual(flux_sector(1.0, 0.0), 1)
        self.assertEqual(flux_sector(math.cos(math.radians(29)), math.sin(math.radians(29))), 1)
        self.assertEqual(flux_sector(math.cos(math.radians(31)), math.sin(math.radians(31))), 2)
        self.assertEqual(flux_sector(math.cos(math.radians(60)), math.sin(math.radians(60))), 2)
        self.assertEqual(flux_sector(-1.0, 0.0), 4)
        self.assertEqual(flux_sector(math.cos(math.radians(-31)), math.sin(math.radians(-31))), 6)

    def test_table_covers_all_states(self):
        for flux_state in (-1, 0, 1):
            for torque_state in (-1, 0, 1):
                self.assertIn(SWITCHING_TABLE[(flux_state, torque_state)], VOLTAGE_VECTORS)

    def test_sector_one_uses_table_directly(self):
        for key, vector in SWITCHING_TABLE.items():
            self.assertEqual(select_voltage_vector(key[0], key[1], 1), vector)

    def test_active_vectors_rotate_with_sector(self):
        self.assertEqual(select_voltage_vector(1, 1, 2), 3)
        self.assertEqual(select_voltage_vector(1, 1, 6), 1)
        self.assertEqual(select_voltage_vector(1, -1, 3), 2)

    def test_zero_vectors_do_not_rotate(self):
        for sector in range(1, 7):
            self.assertEqual(select_voltage_vector(1, 0, sector), 7)
            self.assertEqual(select_voltage_vector(0, 0, sector), 0)

    def test_update_control_emits_vector_pattern(self):
        output = DriveController().update_control(
            ControlMode.DIRECT_TORQUE, DriveReferences(torque_ref=50.0, flux_ref=1.0), AT_REST, 0.0)
        # Torque below band, flux on reference, flux vector on the d axis
        self.assertEqual(output.sector, 1)
        self.assertEqual(output.vector, 3)
        self.assertEqual(output.signals, (0.0, 1.0, 0.0))


if __name__ == "__main__":
    unittest.main()
