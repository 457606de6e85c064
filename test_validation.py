import unittest
from core.engine import compute
from core.models import (
    CircuitConfiguration, ConductorMaterial, ConductorSize, EnvironmentalConditions,
    InstallationMethod, LoadMode, LoadType, Phase, SizeUnit, Standard, UnitSystem,
)
from core.validation import validate

def nec_circuit(**overrides):
    fields = dict(standard=Standard.NEC, voltage=240, phase=Phase.SINGLE,
                  load_mode=LoadMode.POWER, load_value=10, power_factor=0.9)
    fields.update(overrides)
    return CircuitConfiguration(**fields)

def error_fields(errors):
    return [e.field for e in errors]

def notice_codes(outcome):
    return [a.code for a in outcome.normalized.alerts]

class TestValidationErrors(unittest.TestCase):
    def test_out_of_range_inputs(self):
        cases = [
            (nec_circuit(voltage=50), None, None, "voltage"),
            (nec_circuit(voltage=1200), None, None, "voltage"),
            (nec_circuit(load_value=0), None, None, "load_value"),
            (nec_circuit(load_value=20000), None, None, "load_value"),
            (nec_circuit(power_factor=0.3), None, None, "power_factor"),
            (nec_circuit(power_factor=1.2), None, None, "power_factor"),
            (nec_circuit(), EnvironmentalConditions(ambient_temp_c=80), None, "ambient_temp_c"),
            (nec_circuit(), EnvironmentalConditions(grouped_cables=0), None, "grouped_cables"),
            (nec_circuit(), EnvironmentalConditions(grouped_cables=101), None, "grouped_cables"),
            (nec_circuit(), EnvironmentalConditions(circuit_distance=0), None, "circuit_distance"),
            (nec_circuit(), None, 0, "short_circuit_current_ka"),
            (nec_circuit(), None, 250, "short_circuit_current_ka"),
        ]
        for circuit, env, fault, field in cases:
            with self.subTest(field=field):
                result = compute(circuit, env, fault)
                self.assertIsInstance(result, list)
                self.assertEqual(error_fields(result), [field])
                self.assertTrue(result[0].constraint)

    def test_collects_every_error(self):
        circuit = nec_circuit(voltage=50, power_factor=0.1)
        env = EnvironmentalConditions(ambient_temp_c=100, grouped_cables=2.5)
        outcome = validate(circuit, env, -1)
        self.assertFalse(outcome.ok)
        self.assertIsNone(outcome.normalized)
        self.assertEqual(sorted(error_fields(outcome.errors)),
                         sorted(["voltage", "power_factor", "short_circuit_current_ka",
                                 "ambient_temp_c", "grouped_cables"]))

    def test_non_numeric_values(self):
        for bad in ("240", float("nan"), float("inf"), True, None):
            with self.subTest(value=bad):
                outcome = validate(nec_circuit(voltage=bad))
                self.assertEqual(error_fields(outcome.errors), ["voltage"])

    def test_unknown_enum_values(self):
        outcome = validate(nec_circuit(standard="ANSI", phase="two"))
        self.assertEqual(sorted(error_fields(outcome.errors)), ["phase", "standard"])
        self.assertIn("NEC", outcome.errors[0].constraint)

    def test_unknown_conductor_size(self):
        # 7 AWG is not a tabulated size
        outcome = validate(nec_circuit(), EnvironmentalConditions(conductor_size="7"))
        self.assertEqual(error_fields(outcome.errors), ["conductor_size"])
        # mm² sizes belong to the IEC table only
        outcome = validate(nec_circuit(), EnvironmentalConditions(conductor_size=ConductorSize("16", SizeUnit.MM2)))
        self.assertEqual(error_fields(outcome.errors), ["conductor_size"])
        # #14 copper exists but not in aluminum
        outcome = validate(nec_circuit(), EnvironmentalConditions(conductor_size="14",
                                                                  conductor_material=ConductorMaterial.ALUMINUM))
        self.assertEqual(error_fields(outcome.errors), ["conductor_size"])

class TestNormalization(unittest.TestCase):
    def test_string_enums_resolved(self):
        circuit = CircuitConfiguration("IEC", 400, "three", "amps", 32, unit_system="metric")
        env = EnvironmentalConditions(installation_method="B1", conductor_material="copper",
                                      conductor_size="16", insulation_rating=70)
        outcome = validate(circuit, env, load_type="inductive")
        self.assertTrue(outcome.ok)
        data = outcome.normalized
        self.assertEqual(data.circuit.standard, Standard.IEC)
        self.assertEqual(data.circuit.phase, Phase.THREE)
        self.assertEqual(data.circuit.load_mode, LoadMode.CURRENT)
        self.assertEqual(data.circuit.unit_system, UnitSystem.METRIC)
        self.assertEqual(data.environment.installation_method, InstallationMethod.B1)
        self.assertEqual(data.environment.conductor_size, ConductorSize("16", SizeUnit.MM2))
        self.assertEqual(data.load_type, LoadType.INDUCTIVE)

    def test_kcmil_size_resolved(self):
        outcome = validate(nec_circuit(), EnvironmentalConditions(conductor_size="250"))
        self.assertEqual(outcome.normalized.environment.conductor_size.label, "250 kcmil")

    def test_power_factor_defaulted(self):
        outcome = validate(nec_circuit(power_factor=None))
        self.assertEqual(outcome.normalized.circuit.power_factor, 0.8)
        self.assertIn("POWER_FACTOR_DEFAULTED", notice_codes(outcome))

    def test_input_is_not_mutated(self):
        circuit = nec_circuit(power_factor=None, standard="NEC")
        validate(circuit)
        self.assertIsNone(circuit.power_factor)
        self.assertEqual(circuit.standard, "NEC")

class TestValidationNotices(unittest.TestCase):
    def test_clean_input_only_assumes_load_type(self):
        outcome = validate(nec_circuit(), load_type=LoadType.RESISTIVE)
        self.assertEqual(notice_codes(outcome), [])
        outcome = validate(nec_circuit())
        self.assertEqual(notice_codes(outcome), ["LOAD_TYPE_ASSUMED"])
        self.assertEqual(outcome.normalized.load_type, LoadType.MIXED)

    def test_nonstandard_voltage(self):
        self.assertIn("NONSTANDARD_VOLTAGE", notice_codes(validate(nec_circuit(voltage=250))))
        self.assertIn("NONSTANDARD_VOLTAGE", notice_codes(validate(nec_circuit(voltage=400))))
        self.assertNotIn("NONSTANDARD_VOLTAGE", notice_codes(validate(nec_circuit(voltage=480))))

    def test_low_power_factor(self):
        self.assertIn("LOW_POWER_FACTOR", notice_codes(validate(nec_circuit(power_factor=0.6))))
        self.assertNotIn("LOW_POWER_FACTOR", notice_codes(validate(nec_circuit(power_factor=0.7))))

    def test_extreme_temperature(self):
        hot = validate(nec_circuit(), EnvironmentalConditions(ambient_temp_c=65))
        cold = validate(nec_circuit(), EnvironmentalConditions(ambient_temp_c=-30))
        mild = validate(nec_circuit(), EnvironmentalConditions(ambient_temp_c=60))
        self.assertIn("EXTREME_TEMPERATURE", notice_codes(hot))
        self.assertIn("EXTREME_TEMPERATURE", notice_codes(cold))
        self.assertNotIn("EXTREME_TEMPERATURE", notice_codes(mild))

    def test_long_circuit_per_unit_system(self):
        imperial = nec_circuit(unit_system=UnitSystem.IMPERIAL)
        self.assertNotIn("LONG_CIRCUIT", notice_codes(validate(imperial, EnvironmentalConditions(circuit_distance=900))))
        self.assertIn("LONG_CIRCUIT", notice_codes(validate(imperial, EnvironmentalConditions(circuit_distance=1200))))
        metric = nec_circuit(unit_system=UnitSystem.METRIC)
        self.assertIn("LONG_CIRCUIT", notice_codes(validate(metric, EnvironmentalConditions(circuit_distance=400))))

if __name__ == '__main__':
    unittest.main()
