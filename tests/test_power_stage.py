"""
Power Stage Tests
=================

Sine-triangle and space-vector synthesis, inverter gain terms and
heatsink self-heating.
"""

import sys
from pathlib import Path
import math
import unittest

sys.path.insert(0, str(Path(__file__).parent.parent))

from inverter_drive.models import PwmType, PowerStageSettings
from inverter_drive.calculations import balanced_set
from inverter_drive.core import (
    InverterPowerStage,
    svm_sector,
    svm_dwell_times,
    svm_duty_cycles
)

IDEAL = PowerStageSettings(dc_link_voltage=400.0, pwm_frequency=10000.0, dead_time=0.0,
                           modulation_index=1.0)


class TestSpaceVectorTables(unittest.TestCase):
    """Sector selection, dwell times and the duty table."""

    def test_sector_boundaries(self):
        self.assertEqual(svm_sector(0.0), 0)
        self.assertEqual(svm_sector(math.pi / 3 + 0.01), 1)
        self.assertEqual(svm_sector(math.pi - 0.01), 2)
        self.assertEqual(svm_sector(math.pi + 0.01), 3)
        self.assertEqual(svm_sector(-0.1), 5)

    def test_zero_vector_dwell(self):
        T1, T2, T0, T = svm_dwell_times(0.0, 0.2, 400.0, 10000.0)
        self.assertEqual((T1, T2), (0.0, 0.0))
        self.assertAlmostEqual(T0, T)
        self.assertAlmostEqual(T, 1e-4)

    def test_dwell_times_sum_to_period(self):
        T1, T2, T0, T = svm_dwell_times(150.0, 0.4, 400.0, 5000.0)
        self.assertAlmostEqual(T1 + T2 + T0, T)
        self.assertGreater(T1, 0.0)
        self.assertGreater(T2, 0.0)

    def test_zero_vector_gives_half_duty(self):
        for sector in range(6):
            duties = svm_duty_cycles(sector, 0.0, 0.0, 1.0, 1.0)
            self.assertEqual(sorted(duties), [0.5, 0.5, 0.5])

    def test_duty_cycles_in_unit_range(self):
        for k in range(36):
            theta = k * math.pi / 18 + 0.01
            sector = svm_sector(theta)
            sector_angle = theta - sector * math.pi / 3
            T1, T2, T0, T = svm_dwell_times(180.0, sector_angle, 400.0, 10000.0)
            for duty in svm_duty_cycles(sector, T1, T2, T0, T):
                self.assertGreaterEqual(duty, 0.0)
                self.assertLessEqual(duty, 1.0)

    def test_invalid_sector(self):
        with self.assertRaises(ValueError):
            svm_duty_cycles(6, 0.0, 0.0, 1.0, 1.0)


class TestInverterPowerStage(unittest.TestCase):
    """Voltage synthesis and self-heating."""

    def test_sine_gain(self):
        stage = InverterPowerStage()
        va, vb, vc = stage.generate_phase_voltages((0.5, 0.5, 1.0))
        # 400 V * (1 - 1e-6 * 1e4) * 0.8
        self.assertAlmostEqual(stage.voltage_gain, 316.8)
        self.assertAlmostEqual(va, 158.4)
        self.assertAlmostEqual(vc, 316.8)

    def test_overmodulation_extends_gain(self):
        plain = InverterPowerStage(IDEAL)
        over = InverterPowerStage(IDEAL.with_changes(overmodulation=True))
        self.assertAlmostEqual(over.voltage_gain, plain.voltage_gain * 1.15)

    def test_dead_time_reduces_gain(self):
        stage = InverterPowerStage(IDEAL.with_changes(dead_time=2e-6))
        self.assertAlmostEqual(stage.settings.dead_time_factor, 0.98)
        self.assertAlmostEqual(stage.voltage_gain, 400.0 * 0.98)

    def test_harmonic_injection(self):
        signals = (0.5, 0.5, 0.5)
        # 3 * 50 Hz * t = 1/4 period -> sin = 1
        t = 1.0 / 600.0
        plain = InverterPowerStage(IDEAL).generate_phase_voltages(
            signals, time=t, fundamental_frequency=50.0)
        injected = InverterPowerStage(IDEAL.with_changes(harmonic_injection=True)).generate_phase_voltages(
            signals, time=t, fundamental_frequency=50.0)
        for p, i in zip(plain, injected):
            self.assertAlmostEqual(i - p, 0.1 * 400.0)

    def test_space_vector_matches_sine_line_voltages(self):
        """Both strategies synthesize the same line-to-line voltages."""
        for k in range(24):
            theta = k * math.pi / 12 + 0.05
            signals = balanced_set(0.4, theta, offset=0.5)
            sine = InverterPowerStage(IDEAL).generate_phase_voltages(signals, PwmType.SINE)
            svm = InverterPowerStage(IDEAL).generate_phase_voltages(signals, PwmType.SPACE_VECTOR)
            self.assertAlmostEqual(sine[0] - sine[1], svm[0] - svm[1], places=6)
            self.assertAlmostEqual(sine[1] - sine[2], svm[1] - svm[2], places=6)

    def test_space_vector_same_peak_amplitude(self):
        sine_peak, svm_peak = 0.0, 0.0
        for k in range(360):
            signals = balanced_set(0.45, math.radians(k), offset=0.5)
            sine = InverterPowerStage(IDEAL).generate_phase_voltages(signals, PwmType.SINE)
            svm = InverterPowerStage(IDEAL).generate_phase_voltages(signals, PwmType.SPACE_VECTOR)
            sine_peak = max(sine_peak, abs(sine[0] - sine[1]))
            svm_peak = max(svm_peak, abs(svm[0] - svm[1]))
        self.assertAlmostEqual(sine_peak, svm_peak, places=6)

    def test_space_vector_records_sector(self):
        stage = InverterPowerStage(IDEAL)
        stage.generate_phase_voltages(balanced_set(0.4, 0.1, offset=0.5), PwmType.SPACE_VECTOR)
        self.assertEqual(stage.last_sector, 0)
        stage.generate_phase_voltages(balanced_set(0.4, math.pi + 0.1, offset=0.5), PwmType.SPACE_VECTOR)
        self.assertEqual(stage.last_sector, 3)

    def test_switching_heats_inverter(self):
        stage = InverterPowerStage()
        stage.generate_phase_voltages((0.5, 0.5, 0.5))
        self.assertGreater(stage.temperature, 25.0)
        self.assertAlmostEqual(stage.switching_loss, 400.0)

    def test_configure_and_reset(self):
        stage = InverterPowerStage()
        stage.configure(IDEAL)
        self.assertEqual(stage.state.dead_time, 0.0)
        stage.generate_phase_voltages((0.5, 0.5, 0.5))
        stage.reset()
        self.assertEqual(stage.temperature, 25.0)
        self.assertIsNone(stage.last_sector)


if __name__ == "__main__":
    unittest.main()
