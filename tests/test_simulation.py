"""
Drive Simulation Tests
======================

Whole-pipeline invariants over many ticks in every control mode, plus the
harness operator inputs.
"""

import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).parent.parent))

from inverter_drive.models import (
    ControlMode,
    PwmType,
    FaultType,
    LoadType,
    ProtectionMode,
    CoolingSettings,
    PowerStageSettings,
    DriveReferences,
    ProtectionSettings,
    CSV_HEADER
)
from inverter_drive.core import DriveSimulation

DURATION = 0.03


class TestSimulationInvariants(unittest.TestCase):
    """Properties that hold on every tick."""

    def run_all_modes(self, **run_kwargs):
        for mode in ControlMode:
            for pwm_type in PwmType:
                for load_type in LoadType:
                    sim = DriveSimulation(seed=5)
                    records = sim.run(DURATION, control_mode=mode, pwm_type=pwm_type,
                                      load_type=load_type, **run_kwargs)
                    yield mode, pwm_type, load_type, records

    def test_temperatures_never_below_ambient(self):
        for _, _, _, records in self.run_all_modes():
            for r in records:
                self.assertGreaterEqual(r.motor_temperature, 25.0)
                self.assertGreaterEqual(r.inverter_temperature, 25.0)

    def test_speed_never_negative(self):
        for _, _, _, records in self.run_all_modes():
            for r in records:
                self.assertGreaterEqual(r.speed, 0.0)

    def test_fault_tag_always_enumerated(self):
        protection = ProtectionSettings(max_temp=60.0, mode=ProtectionMode.WARNING, auto_reset=True)
        for _, _, _, records in self.run_all_modes(protection=protection):
            for r in records:
                self.assertIsInstance(r.fault, FaultType)

    def test_record_per_tick(self):
        sim = DriveSimulation(time_step=1e-4)
        records = sim.run(0.01)
        self.assertEqual(len(records), 100)
        self.assertEqual(records[0].time, 0.0)
        self.assertAlmostEqual(records[-1].time, 0.0099)
        self.assertAlmostEqual(sim.time, 0.01)


class TestShutdownProtection(unittest.TestCase):
    """Overheat under Shutdown protection."""

    def test_zero_output_once_tripped(self):
        sim = DriveSimulation(seed=2)
        protection = ProtectionSettings(max_temp=26.0, mode=ProtectionMode.SHUTDOWN)
        records = sim.run(0.02, protection=protection)

        tripped = [k for k, r in enumerate(records) if r.fault is FaultType.OVERHEAT]
        self.assertTrue(tripped, "Drive never overheated")
        for r in records[tripped[0]:]:
            self.assertIs(r.fault, FaultType.OVERHEAT)
            self.assertEqual(r.voltages, (0.0, 0.0, 0.0))

    def test_clear_fault_reads_none(self):
        sim = DriveSimulation(seed=2)
        protection = ProtectionSettings(max_temp=26.0, mode=ProtectionMode.SHUTDOWN)
        sim.run(0.005, protection=protection)
        self.assertIs(sim.current_fault, FaultType.OVERHEAT)
        sim.clear_fault()
        self.assertIs(sim.current_fault, FaultType.NONE)


class TestHarnessInputs(unittest.TestCase):
    """Operator inputs, logging and reproducibility."""

    def test_seeded_runs_repeat(self):
        first = DriveSimulation(seed=17).run(0.01, control_mode=ControlMode.FIELD_ORIENTED)
        second = DriveSimulation(seed=17).run(0.01, control_mode=ControlMode.FIELD_ORIENTED)
        self.assertEqual(first, second)

    def test_harnesses_are_isolated(self):
        a = DriveSimulation(seed=1)
        b = DriveSimulation(seed=1)
        a.inject_fault(FaultType.PHASE_LOSS)
        a.run(0.005)
        self.assertIs(b.current_fault, FaultType.NONE)
        self.assertEqual(b.motor.temperature, 25.0)

    def test_injected_fault_shapes_output(self):
        sim = DriveSimulation(seed=4)
        sim.inject_fault(FaultType.PHASE_LOSS)
        protection = ProtectionSettings(mode=ProtectionMode.NONE)
        for r in sim.run(0.005, protection=protection):
            self.assertEqual(r.voltages[0], 0.0)
            self.assertIs(r.fault, FaultType.PHASE_LOSS)

    def test_auto_reset_runs_on_simulation_time(self):
        sim = DriveSimulation(seed=4)
        sim.inject_fault(FaultType.UNDERVOLTAGE)
        protection = ProtectionSettings(mode=ProtectionMode.NONE, auto_reset=True)
        cleared = []
        sim.run(2.05, protection=protection,
                callback=lambda r: cleared.append(r.fault is FaultType.NONE))
        self.assertFalse(any(cleared[:20000]))
        self.assertTrue(cleared[-1])

    def test_callback_streams_records(self):
        sim = DriveSimulation(seed=3)
        seen = []
        records = sim.run(0.002, callback=seen.append)
        self.assertEqual(records, [])
        self.assertEqual(len(seen), 20)

    def test_csv_rows(self):
        sim = DriveSimulation(seed=3)
        record = sim.step(control_mode=ControlMode.DIRECT_TORQUE)
        fields = record.as_csv_row().split(",")
        self.assertEqual(len(fields), len(CSV_HEADER.split(",")))
        self.assertEqual(fields[-2], "DTC")
        self.assertEqual(fields[-1], "None")

    def test_sensor_uses_nameplate_resistance_when_hot(self):
        sim = DriveSimulation(
            power_stage=PowerStageSettings(pwm_frequency=20000.0, modulation_index=1.0),
            cooling=CoolingSettings(fan_speed=0.0, coolant_flow=0.0),
            seed=2
        )
        protection = ProtectionSettings(mode=ProtectionMode.NONE)
        sim.run(0.3, pwm_type=PwmType.SPACE_VECTOR, protection=protection)
        params = sim.motor.parameters
        self.assertGreater(sim.motor.effective_resistance, 2 * params.resistance)

        sim.sensors.noise_stddev = 0.0
        record = sim.step(pwm_type=PwmType.SPACE_VECTOR, protection=protection)
        impedance = params.resistance + 0.1 * params.inductance
        for v, i in zip(record.voltages, record.currents):
            self.assertAlmostEqual(i, v / impedance, delta=1e-6)

    def test_power_stage_and_cooling_inputs(self):
        sim = DriveSimulation(seed=3)
        settings = PowerStageSettings(pwm_frequency=2000.0, modulation_index=0.5)
        cooling = CoolingSettings(fan_speed=1.0, coolant_flow=10.0)
        sim.configure_power_stage(settings)
        sim.set_cooling(cooling)
        self.assertIs(sim.power_stage.settings, settings)
        self.assertIs(sim.motor.cooling, cooling)
        self.assertIs(sim.power_stage.cooling, cooling)

    def test_set_gains(self):
        sim = DriveSimulation()
        sim.set_gains(0.3, 0.05)
        self.assertEqual(sim.controller.gains.kp, 0.3)
        self.assertEqual(sim.controller.gains.ki, 0.05)

    def test_reset_restores_baseline(self):
        sim = DriveSimulation(seed=8)
        sim.inject_fault(FaultType.OVERCURRENT)
        sim.run(0.01, references=DriveReferences(speed_ref=150.0))
        sim.reset()
        self.assertEqual(sim.time, 0.0)
        self.assertIs(sim.current_fault, FaultType.NONE)
        self.assertEqual(sim.motor.speed, 0.0)
        self.assertEqual(sim.motor.temperature, 25.0)
        self.assertEqual(sim.power_stage.temperature, 25.0)
        self.assertEqual(sim.controller.frequency, 0.0)

    def test_dtc_output_reported(self):
        sim = DriveSimulation(seed=3)
        sim.step(control_mode=ControlMode.DIRECT_TORQUE)
        self.assertIn(sim.last_control.sector, range(1, 7))

    def test_invalid_time_step(self):
        with self.assertRaises(ValueError):
            DriveSimulation(time_step=0.0)


if __name__ == "__main__":
    unittest.main()
