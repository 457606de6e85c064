import json
import unittest
from core import alerts
from core.alerts import SEVERITY_RANK, aggregate_alerts
from core.engine import CALCULATORS, compute, get_calculator, recalculate_with_standard
from core.models import (
    CircuitConfiguration, EnvironmentalConditions, LoadMode, LoadType, Phase, PipelineStage,
    Severity, Standard,
)
from standards.iec import IECCalculator
from standards.nec import NECCalculator

FIXED_TIME = "2024-01-01T00:00:00+00:00"

def loads():
    value = 0.5
    while value <= 300:
        yield value
        value += 0.5

class TestRegistry(unittest.TestCase):
    def test_dispatch_by_standard(self):
        self.assertIsInstance(get_calculator(Standard.NEC), NECCalculator)
        self.assertIsInstance(get_calculator(Standard.IEC), IECCalculator)
        self.assertEqual(set(CALCULATORS), set(Standard))
        with self.assertRaises(ValueError):
            get_calculator("ANSI")

class TestEngineProperties(unittest.TestCase):
    def test_rating_in_ladder_and_covers_minimum(self):
        env = EnvironmentalConditions(ambient_temp_c=40, grouped_cables=4)
        for standard in Standard:
            ladder = get_calculator(standard).BREAKER_RATINGS
            for amps in loads():
                circuit = CircuitConfiguration(standard, 400, Phase.THREE, LoadMode.CURRENT, amps)
                for environment in (None, env):
                    sizing = compute(circuit, environment, calculated_at=FIXED_TIME).breaker_sizing
                    self.assertIn(sizing.recommended_rating, ladder)
                    self.assertGreaterEqual(sizing.recommended_rating, sizing.adjusted_minimum_amps)

    def test_monotonic_in_load(self):
        for standard in Standard:
            previous = 0
            for amps in loads():
                circuit = CircuitConfiguration(standard, 400, Phase.THREE, LoadMode.CURRENT, amps)
                rating = compute(circuit, calculated_at=FIXED_TIME).breaker_sizing.recommended_rating
                self.assertGreaterEqual(rating, previous)
                previous = rating

    def test_nec_never_below_iec_for_same_inputs(self):
        for amps in loads():
            nec = compute(CircuitConfiguration(Standard.NEC, 400, Phase.THREE, LoadMode.CURRENT, amps),
                          calculated_at=FIXED_TIME)
            iec = compute(CircuitConfiguration(Standard.IEC, 400, Phase.THREE, LoadMode.CURRENT, amps),
                          calculated_at=FIXED_TIME)
            self.assertGreaterEqual(nec.breaker_sizing.minimum_breaker_amps, iec.breaker_sizing.minimum_breaker_amps)

    def test_deterministic(self):
        circuit = CircuitConfiguration(Standard.IEC, 400, Phase.THREE, LoadMode.POWER, 22, power_factor=0.85)
        env = EnvironmentalConditions(ambient_temp_c=42, grouped_cables=5, circuit_distance=120)
        first = compute(circuit, env, 6, LoadType.INDUCTIVE, calculated_at=FIXED_TIME)
        second = compute(circuit, env, 6, LoadType.INDUCTIVE, calculated_at=FIXED_TIME)
        self.assertEqual(first, second)
        self.assertEqual(json.dumps(first.to_dict(), sort_keys=True),
                         json.dumps(second.to_dict(), sort_keys=True))

        # calculated_at does not take part in equality
        third = compute(circuit, env, 6, LoadType.INDUCTIVE)
        self.assertEqual(first, third)

    def test_to_dict_is_plain(self):
        circuit = CircuitConfiguration(Standard.NEC, 208, Phase.THREE, LoadMode.POWER, 15)
        data = compute(circuit, calculated_at=FIXED_TIME).to_dict()
        self.assertEqual(data["standard"], "NEC")
        self.assertEqual(data["calculated_at"], FIXED_TIME)
        self.assertEqual(data["calculation_version"], "1.0.0")
        self.assertIsInstance(data["alerts"], list)
        self.assertEqual(data["alerts"][0]["severity"], "minor")
        json.dumps(data)

class TestAlertOrdering(unittest.TestCase):
    def test_ties_keep_generation_order(self):
        first = alerts.info("POWER_FACTOR_DEFAULTED", "first", PipelineStage.VALIDATION)
        major = alerts.warning("VOLTAGE_DROP_ISSUE", "major", PipelineStage.VOLTAGE_DROP, severity=Severity.MAJOR)
        second = alerts.info("LOAD_TYPE_ASSUMED", "second", PipelineStage.VALIDATION)
        late = alerts.info("BREAKING_CAPACITY_NOT_VERIFIED", "late", PipelineStage.SHORT_CIRCUIT)
        early_minor = alerts.warning("LOW_POWER_FACTOR", "third", PipelineStage.VALIDATION)

        ordered = aggregate_alerts([late, first, major, second, early_minor])
        self.assertEqual([a.message for a in ordered], ["major", "first", "second", "third", "late"])

    def test_severity_then_stage(self):
        circuit = CircuitConfiguration(Standard.NEC, 250, Phase.SINGLE, LoadMode.POWER, 30, power_factor=0.6)
        env = EnvironmentalConditions(ambient_temp_c=52, grouped_cables=12, circuit_distance=400)
        result = compute(circuit, env, 50, calculated_at=FIXED_TIME)

        keys = [(SEVERITY_RANK[a.severity], a.stage) for a in result.alerts]
        self.assertEqual(keys, sorted(keys))
        codes = [a.code for a in result.alerts]
        for code in ("NONSTANDARD_VOLTAGE", "LOW_POWER_FACTOR", "SIGNIFICANT_DERATING", "LOAD_TYPE_ASSUMED"):
            self.assertIn(code, codes)
        self.assertEqual(result.alerts[-1].severity.value, "minor")

    def test_warnings_carried_on_breaker(self):
        circuit = CircuitConfiguration(Standard.NEC, 240, Phase.SINGLE, LoadMode.POWER, 10, power_factor=0.9)
        result = compute(circuit, short_circuit_current_ka=25, calculated_at=FIXED_TIME)
        self.assertEqual(len(result.breaker.warnings), 1)
        self.assertIn("25 kA", result.breaker.warnings[0])

class TestStandardSwitch(unittest.TestCase):
    def test_recalculate_matches_fresh_compute(self):
        circuit = CircuitConfiguration(Standard.NEC, 400, Phase.THREE, LoadMode.POWER, 30, power_factor=0.9)
        env = EnvironmentalConditions(ambient_temp_c=45, grouped_cables=6, circuit_distance=80)

        switched = recalculate_with_standard(circuit, Standard.IEC, env, calculated_at=FIXED_TIME)
        fresh = compute(CircuitConfiguration(Standard.IEC, 400, Phase.THREE, LoadMode.POWER, 30, power_factor=0.9),
                        env, calculated_at=FIXED_TIME)
        self.assertEqual(switched, fresh)
        self.assertEqual(switched.standard, Standard.IEC)
        self.assertEqual(switched.breaker_sizing.safety_factor, 1.0)

    def test_conductor_size_cleared_on_switch(self):
        # #6 AWG has no IEC counterpart
        circuit = CircuitConfiguration(Standard.NEC, 240, Phase.SINGLE, LoadMode.CURRENT, 30)
        env = EnvironmentalConditions(circuit_distance=40, conductor_size="6")
        result = recalculate_with_standard(circuit, Standard.IEC, env, calculated_at=FIXED_TIME)
        self.assertNotIsInstance(result, list)
        self.assertEqual(result.voltage_drop.conductor.unit.value, "mm2")

    def test_same_load_different_margin(self):
        circuit = CircuitConfiguration(Standard.NEC, 400, Phase.THREE, LoadMode.CURRENT, 50)
        nec = compute(circuit, calculated_at=FIXED_TIME)
        iec = recalculate_with_standard(circuit, Standard.IEC, calculated_at=FIXED_TIME)
        self.assertEqual(nec.load_analysis.current_amps, iec.load_analysis.current_amps)
        self.assertEqual(nec.breaker.rating_amps, 70)  # 62.5 A
        self.assertEqual(iec.breaker.rating_amps, 50)
        self.assertEqual(nec.breaker.trip_characteristic, "thermal-magnetic")
        self.assertEqual(iec.breaker.trip_characteristic, "C")

if __name__ == '__main__':
    unittest.main()
