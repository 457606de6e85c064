"""
Input validation.

Fatal problems come back as ValidationError records and stop the calculation
before any stage runs. Unusual but valid inputs become alerts that travel
with the eventual result.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from core import alerts
from core.components import CalculationAlert, ValidationError
from core.config import DEFAULT_CONFIG, EngineConfig
from core.models import (
    CircuitConfiguration, ConductorMaterial, ConductorSize, EnvironmentalConditions,
    InstallationMethod, InsulationRating, LoadMode, LoadType, Phase, PipelineStage,
    Standard, UnitSystem,
)
from standards import iec_tables, nec_tables

logger = logging.getLogger(__name__)

STAGE = PipelineStage.VALIDATION

VOLTAGE_RANGE = (100.0, 1000.0)
LOAD_MAX = 10000.0
POWER_FACTOR_RANGE = (0.5, 1.0)
TEMPERATURE_RANGE = (-40.0, 70.0)
GROUPED_CABLES_RANGE = (1, 100)
DISTANCE_MAX = 10000.0
FAULT_CURRENT_MAX_KA = 200.0

STANDARD_VOLTAGES = {
    Standard.NEC: (120, 208, 240, 277, 480),
    Standard.IEC: (230, 400, 690),
}

CONDUCTOR_TABLES = {
    Standard.NEC: nec_tables.CONDUCTORS,
    Standard.IEC: iec_tables.CONDUCTORS,
}

@dataclass(frozen=True)
class NormalizedInput:
    circuit: CircuitConfiguration
    environment: Optional[EnvironmentalConditions]
    short_circuit_current_ka: Optional[float]
    load_type: LoadType
    alerts: Tuple[CalculationAlert, ...] = ()

@dataclass(frozen=True)
class ValidationOutcome:
    normalized: Optional[NormalizedInput] = None
    errors: Tuple[ValidationError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

def _coerce_enum(enum_cls, value, field: str, errors: List[ValidationError]):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        errors.append(ValidationError(field, f"Unknown value for {field}: {value!r}", value, f"one of {allowed}"))
        return None

def _number(value, field: str, errors: List[ValidationError], required: bool = True) -> Optional[float]:
    if value is None:
        if required:
            errors.append(ValidationError(field, f"{field} is required", None, "required"))
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(ValidationError(field, f"{field} must be a number", value, "numeric"))
        return None
    if not math.isfinite(value):
        errors.append(ValidationError(field, f"{field} must be a finite number", value, "finite"))
        return None
    return float(value)

def _in_range(value: Optional[float], field: str, low: float, high: float,
              errors: List[ValidationError], low_exclusive: bool = False) -> None:
    if value is None:
        return
    below = value <= low if low_exclusive else value < low
    if below or value > high:
        bracket = "(" if low_exclusive else "["
        constraint = f"{bracket}{low:g}, {high:g}]"
        errors.append(ValidationError(field, f"{field} must be within {constraint}", value, constraint))

def _resolve_conductor(size, standard: Standard, material: ConductorMaterial,
                       errors: List[ValidationError]) -> Optional[ConductorSize]:
    key = size.value if isinstance(size, ConductorSize) else str(size)
    for cable in CONDUCTOR_TABLES[standard][material]:
        if cable.size.value == key and (not isinstance(size, ConductorSize) or cable.size.unit == size.unit):
            return cable.size
    label = size.label if isinstance(size, ConductorSize) else key
    errors.append(ValidationError(
        "conductor_size",
        f"{label} is not a {material.value} size in the {standard.value} conductor table",
        label, f"{standard.value} {material.value} conductor table"))
    return None

def _validate_environment(env: EnvironmentalConditions, standard: Optional[Standard],
                          unit_system: Optional[UnitSystem], errors: List[ValidationError],
                          notices: List[CalculationAlert], config: EngineConfig
                          ) -> Optional[EnvironmentalConditions]:
    temp = _number(env.ambient_temp_c, "ambient_temp_c", errors, required=False)
    _in_range(temp, "ambient_temp_c", *TEMPERATURE_RANGE, errors)

    grouped = None
    if env.grouped_cables is not None:
        grouped_value = _number(env.grouped_cables, "grouped_cables", errors)
        if grouped_value is not None:
            if not grouped_value.is_integer():
                errors.append(ValidationError("grouped_cables", "grouped_cables must be a whole number",
                                              env.grouped_cables, "integer"))
            else:
                grouped = int(grouped_value)
                _in_range(grouped, "grouped_cables", *GROUPED_CABLES_RANGE, errors)

    distance = _number(env.circuit_distance, "circuit_distance", errors, required=False)
    _in_range(distance, "circuit_distance", 0.0, DISTANCE_MAX, errors, low_exclusive=True)

    method = None
    if env.installation_method is not None:
        method = _coerce_enum(InstallationMethod, env.installation_method, "installation_method", errors)
    material = _coerce_enum(ConductorMaterial, env.conductor_material, "conductor_material", errors)
    insulation = _coerce_enum(InsulationRating, env.insulation_rating, "insulation_rating", errors)

    size = None
    if env.conductor_size is not None and standard is not None and material is not None:
        size = _resolve_conductor(env.conductor_size, standard, material, errors)

    if errors:
        return None

    if temp is not None and temp > config.extreme_high_temp_c:
        notices.append(alerts.warning(
            "EXTREME_TEMPERATURE", f"Ambient temperature {temp:g}°C is unusually high",
            STAGE, field="ambient_temp_c",
            remediation="Confirm the conductor insulation is rated for this ambient"))
    elif temp is not None and temp < config.extreme_low_temp_c:
        notices.append(alerts.warning(
            "EXTREME_TEMPERATURE", f"Ambient temperature {temp:g}°C is unusually low",
            STAGE, field="ambient_temp_c",
            remediation="Confirm the breaker is rated for low-temperature operation"))

    if distance is not None:
        imperial = unit_system == UnitSystem.IMPERIAL
        limit = config.long_circuit_ft if imperial else config.long_circuit_m
        if distance > limit:
            unit = "ft" if imperial else "m"
            notices.append(alerts.warning(
                "LONG_CIRCUIT", f"Circuit length {distance:g} {unit} exceeds {limit:g} {unit}; "
                "voltage drop is likely to govern conductor size", STAGE, field="circuit_distance"))

    if method is not None and standard == Standard.NEC:
        notices.append(alerts.info(
            "INSTALLATION_METHOD_IGNORED",
            f"Installation method {method.value} is an IEC reference method and is ignored under NEC",
            STAGE, field="installation_method"))

    return replace(
        env,
        ambient_temp_c=temp,
        grouped_cables=grouped,
        installation_method=method,
        circuit_distance=distance,
        conductor_material=material,
        conductor_size=size,
        insulation_rating=insulation,
    )

def validate(circuit: CircuitConfiguration,
             environment: Optional[EnvironmentalConditions] = None,
             short_circuit_current_ka: Optional[float] = None,
             load_type=None,
             config: EngineConfig = DEFAULT_CONFIG) -> ValidationOutcome:
    """Range-checks every input and returns either normalized input or all fatal errors."""
    errors: List[ValidationError] = []
    notices: List[CalculationAlert] = []

    standard = _coerce_enum(Standard, circuit.standard, "standard", errors)
    phase = _coerce_enum(Phase, circuit.phase, "phase", errors)
    load_mode = _coerce_enum(LoadMode, circuit.load_mode, "load_mode", errors)
    unit_system = _coerce_enum(UnitSystem, circuit.unit_system, "unit_system", errors)

    voltage = _number(circuit.voltage, "voltage", errors)
    _in_range(voltage, "voltage", *VOLTAGE_RANGE, errors)

    load_value = _number(circuit.load_value, "load_value", errors)
    _in_range(load_value, "load_value", 0.0, LOAD_MAX, errors, low_exclusive=True)

    if circuit.power_factor is None:
        power_factor = config.default_power_factor
        notices.append(alerts.info(
            "POWER_FACTOR_DEFAULTED", f"Power factor not given; {power_factor:g} assumed",
            STAGE, field="power_factor"))
    else:
        power_factor = _number(circuit.power_factor, "power_factor", errors)
        _in_range(power_factor, "power_factor", *POWER_FACTOR_RANGE, errors)

    fault_ka = _number(short_circuit_current_ka, "short_circuit_current_ka", errors, required=False)
    _in_range(fault_ka, "short_circuit_current_ka", 0.0, FAULT_CURRENT_MAX_KA, errors, low_exclusive=True)

    if load_type is None:
        resolved_load_type = LoadType.MIXED
        notices.append(alerts.info(
            "LOAD_TYPE_ASSUMED", "Load character not declared; mixed load assumed for trip curve selection",
            STAGE, field="load_type"))
    else:
        resolved_load_type = _coerce_enum(LoadType, load_type, "load_type", errors)

    env = None
    if environment is not None:
        env = _validate_environment(environment, standard, unit_system, errors, notices, config)

    if errors:
        logger.warning("Validation failed: %s", "; ".join(f"{e.field}: {e.message}" for e in errors))
        return ValidationOutcome(errors=tuple(errors))

    if voltage not in STANDARD_VOLTAGES[standard]:
        listed = ", ".join(str(v) for v in STANDARD_VOLTAGES[standard])
        notices.append(alerts.warning(
            "NONSTANDARD_VOLTAGE", f"{voltage:g} V is not a common {standard.value} system voltage ({listed} V)",
            STAGE, field="voltage"))

    if power_factor < config.low_power_factor_threshold:
        notices.append(alerts.warning(
            "LOW_POWER_FACTOR", f"Power factor {power_factor:g} is low",
            STAGE, field="power_factor",
            remediation="Consider power factor correction to reduce circuit current"))

    normalized_circuit = replace(
        circuit,
        standard=standard,
        voltage=voltage,
        phase=phase,
        load_mode=load_mode,
        load_value=load_value,
        power_factor=power_factor,
        unit_system=unit_system,
    )
    return ValidationOutcome(normalized=NormalizedInput(
        circuit=normalized_circuit,
        environment=env,
        short_circuit_current_ka=fault_ka,
        load_type=resolved_load_type,
        alerts=tuple(notices),
    ))
