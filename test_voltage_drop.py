import math
import unittest
from core.config import DEFAULT_CONFIG
from core.engine import compute
from core.models import (
    CircuitConfiguration, ConductorMaterial, EnvironmentalConditions, LoadMode, Phase, Severity,
    Standard, UnitSystem,
)
from core.voltage_drop import analyze_voltage_drop, classify, voltage_drop_percent
from standards import nec_tables

FIXED_TIME = "2024-01-01T00:00:00+00:00"
NEC_COPPER = nec_tables.CONDUCTORS[ConductorMaterial.COPPER]

def index_of(conductors, size):
    return [cable.size.value for cable in conductors].index(size)

def analyze(current, voltage, distance, size, phase=Phase.SINGLE):
    return analyze_voltage_drop(
        current=current, voltage=voltage, phase=phase, distance=distance,
        conductors=NEC_COPPER, conductor_index=index_of(NEC_COPPER, size),
        resistance_scale=1.0, unit_system=UnitSystem.IMPERIAL,
        code_reference="NEC 210.19(A) Informational Note No. 4", config=DEFAULT_CONFIG)

class TestVoltageDropFormula(unittest.TestCase):
    def test_single_phase(self):
        # 30A * 0.491 Ohm/kft * 150 ft / (240V * 10) = 0.92%
        self.assertAlmostEqual(voltage_drop_percent(30, 0.491, 150, 240, Phase.SINGLE), 0.920625, places=9)

    def test_three_phase_factor(self):
        single = voltage_drop_percent(50, 1.15, 80, 400, Phase.SINGLE)
        three = voltage_drop_percent(50, 1.15, 80, 400, Phase.THREE)
        self.assertAlmostEqual(three / single, math.sqrt(3), places=12)

    def test_bands(self):
        self.assertEqual(classify(0.5, DEFAULT_CONFIG), "acceptable")
        self.assertEqual(classify(1.0, DEFAULT_CONFIG), "acceptable")
        self.assertEqual(classify(1.01, DEFAULT_CONFIG), "notable")
        self.assertEqual(classify(3.0, DEFAULT_CONFIG), "notable")
        self.assertEqual(classify(3.5, DEFAULT_CONFIG), "exceeds-branch-limit")
        self.assertEqual(classify(5.0, DEFAULT_CONFIG), "exceeds-branch-limit")
        self.assertEqual(classify(5.01, DEFAULT_CONFIG), "exceeds-combined-limit")

class TestVoltageDropAnalysis(unittest.TestCase):
    def test_notable_is_informational(self):
        # 30 * 1.24 * 150 / 2400 = 2.325%
        analysis, issues = analyze(30, 240, 150, "10")
        self.assertEqual(analysis.status, "notable")
        self.assertIsNone(analysis.cable_recommendation)
        self.assertEqual([a.code for a in issues], ["VOLTAGE_DROP_NOTABLE"])
        self.assertEqual(issues[0].severity, Severity.MINOR)
        self.assertAlmostEqual(analysis.voltage_at_load, 240 - 240 * 0.02325, places=9)

    def test_upsizes_to_branch_limit(self):
        # #10: 30 * 1.24 * 300 / 2400 = 4.65%  -> #8: 30 * 0.778 * 300 / 2400 = 2.9175%
        analysis, issues = analyze(30, 240, 300, "10")
        self.assertAlmostEqual(analysis.voltage_drop_percent, 4.65, places=9)
        self.assertEqual(analysis.status, "exceeds-branch-limit")

        rec = analysis.cable_recommendation
        self.assertEqual(rec.size.label, "#8 AWG")
        self.assertAlmostEqual(rec.voltage_drop_percent, 2.9175, places=9)
        self.assertAlmostEqual(rec.improvement_percent, (4.65 - 2.9175) / 4.65 * 100, places=9)
        self.assertEqual(rec.cost_impact, "low")
        self.assertTrue(analysis.resolved)

        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].code, "VOLTAGE_DROP_ISSUE")
        self.assertEqual(issues[0].severity, Severity.MAJOR)
        self.assertIn("#8 AWG", issues[0].remediation)

    def test_unresolved_when_table_exhausted(self):
        # Even 2000 kcmil gives 400 * 0.00643 * 10000 / 1200 = 21.4%
        analysis, issues = analyze(400, 120, 10000, "1/0")
        self.assertEqual(analysis.status, "exceeds-combined-limit")
        self.assertIsNone(analysis.cable_recommendation)
        self.assertFalse(analysis.resolved)
        self.assertEqual([a.code for a in issues], ["VOLTAGE_DROP_ISSUE", "VOLTAGE_DROP_UNRESOLVED"])
        for alert in issues:
            self.assertEqual(alert.severity, Severity.CRITICAL)

class TestVoltageDropInPipeline(unittest.TestCase):
    def test_conductor_auto_selected_from_rating(self):
        # 30 * 1.25 = 37.5 -> 40 A; smallest 75°C copper >= 40 A is #8 (50 A)
        circuit = CircuitConfiguration(Standard.NEC, 240, Phase.SINGLE, LoadMode.CURRENT, 30,
                                       power_factor=1.0, unit_system=UnitSystem.IMPERIAL)
        result = compute(circuit, EnvironmentalConditions(circuit_distance=50), calculated_at=FIXED_TIME)
        self.assertEqual(result.breaker.rating_amps, 40)
        self.assertEqual(result.voltage_drop.conductor.label, "#8 AWG")
        self.assertEqual(result.voltage_drop.distance_unit, "ft")

    def test_iec_metric_upsizing(self):
        # 6 mm²: √3 * 32 * 3.08 * 100 / 4000 = 4.27%  -> 10 mm²: 2.54%
        circuit = CircuitConfiguration(Standard.IEC, 400, Phase.THREE, LoadMode.CURRENT, 32)
        env = EnvironmentalConditions(circuit_distance=100, conductor_size="6")
        result = compute(circuit, env, calculated_at=FIXED_TIME)

        vd = result.voltage_drop
        self.assertAlmostEqual(vd.voltage_drop_percent, math.sqrt(3) * 32 * 3.08 * 100 / 4000, places=9)
        self.assertEqual(vd.resistance_unit, "Ω/km")
        self.assertEqual(vd.cable_recommendation.size.label, "10 mm²")
        self.assertIn("10 mm²", result.recommendations.cable_guidance)
        issue = [a for a in result.alerts if a.code == "VOLTAGE_DROP_ISSUE"][0]
        self.assertEqual(issue.severity, Severity.MAJOR)

    def test_unit_systems_agree(self):
        # 150 ft == 45.72 m; NEC resistance is converted to Ohm/km for metric runs
        imperial = CircuitConfiguration(Standard.NEC, 240, Phase.SINGLE, LoadMode.CURRENT, 30,
                                        power_factor=1.0, unit_system=UnitSystem.IMPERIAL)
        metric = CircuitConfiguration(Standard.NEC, 240, Phase.SINGLE, LoadMode.CURRENT, 30,
                                      power_factor=1.0, unit_system=UnitSystem.METRIC)
        r_ft = compute(imperial, EnvironmentalConditions(circuit_distance=150, conductor_size="6"),
                       calculated_at=FIXED_TIME)
        r_m = compute(metric, EnvironmentalConditions(circuit_distance=45.72, conductor_size="6"),
                      calculated_at=FIXED_TIME)
        self.assertAlmostEqual(r_ft.voltage_drop.voltage_drop_percent, r_m.voltage_drop.voltage_drop_percent, places=9)
        self.assertEqual(r_m.voltage_drop.distance_unit, "m")

    def test_long_circuit_warning(self):
        circuit = CircuitConfiguration(Standard.IEC, 230, Phase.SINGLE, LoadMode.CURRENT, 10)
        result = compute(circuit, EnvironmentalConditions(circuit_distance=450), calculated_at=FIXED_TIME)
        self.assertIn("LONG_CIRCUIT", [a.code for a in result.alerts])

if __name__ == '__main__':
    unittest.main()
