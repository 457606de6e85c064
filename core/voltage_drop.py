import logging
from typing import List, Optional, Sequence, Tuple

from core import alerts
from core.components import Cable, CableRecommendation, CalculationAlert, VoltageDropAnalysis
from core.config import EngineConfig
from core.load_current import SQRT3
from core.models import Phase, PipelineStage, Severity, UnitSystem

logger = logging.getLogger(__name__)

STAGE = PipelineStage.VOLTAGE_DROP

STATUS_ACCEPTABLE = "acceptable"
STATUS_NOTABLE = "notable"
STATUS_EXCEEDS_BRANCH = "exceeds-branch-limit"
STATUS_EXCEEDS_COMBINED = "exceeds-combined-limit"

def voltage_drop_percent(current: float, resistance: float, distance: float,
                         voltage: float, phase: Phase) -> float:
    """VD% = k × I × R × L / (V × 10); R per 1000 length units, k = √3 for three-phase."""
    k = SQRT3 if phase == Phase.THREE else 1.0
    return k * current * resistance * distance / (voltage * 10)

def classify(vd_percent: float, config: EngineConfig) -> str:
    if vd_percent <= config.vd_acceptable_limit:
        return STATUS_ACCEPTABLE
    if vd_percent <= config.vd_branch_limit:
        return STATUS_NOTABLE
    if vd_percent <= config.vd_combined_limit:
        return STATUS_EXCEEDS_BRANCH
    return STATUS_EXCEEDS_COMBINED

def _cost_impact(size_steps: int) -> str:
    if size_steps <= 2:
        return "low"
    if size_steps <= 4:
        return "medium"
    return "high"

def recommend_conductor(conductors: Sequence[Cable], start_index: int, current: float,
                        distance: float, voltage: float, phase: Phase,
                        resistance_scale: float, target_percent: float) -> Optional[Tuple[int, float]]:
    """Walks up the size table until VD% <= target. Returns (index, vd_percent) or None if exhausted."""
    for index in range(start_index + 1, len(conductors)):
        vd = voltage_drop_percent(current, conductors[index].resistance * resistance_scale,
                                  distance, voltage, phase)
        if vd <= target_percent:
            return index, vd
    return None

def _band_alert(status: str, vd: float, label: str, code_reference: str,
                remediation: Optional[str], config: EngineConfig) -> Optional[CalculationAlert]:
    if status == STATUS_NOTABLE:
        return alerts.info(
            "VOLTAGE_DROP_NOTABLE",
            f"Voltage drop {vd:.2f}% on {label} is within the {config.vd_branch_limit:g}% branch limit",
            STAGE, field="circuit_distance", code_reference=code_reference)
    if status == STATUS_EXCEEDS_BRANCH:
        return alerts.warning(
            "VOLTAGE_DROP_ISSUE",
            f"Voltage drop {vd:.2f}% on {label} exceeds the {config.vd_branch_limit:g}% branch-circuit limit",
            STAGE, severity=Severity.MAJOR, field="circuit_distance",
            code_reference=code_reference, remediation=remediation)
    if status == STATUS_EXCEEDS_COMBINED:
        return alerts.critical(
            "VOLTAGE_DROP_ISSUE",
            f"Voltage drop {vd:.2f}% on {label} exceeds the {config.vd_combined_limit:g}% combined feeder and branch limit",
            STAGE, field="circuit_distance", code_reference=code_reference,
            remediation=remediation)
    return None

def analyze_voltage_drop(current: float, voltage: float, phase: Phase, distance: float,
                         conductors: Sequence[Cable], conductor_index: int,
                         resistance_scale: float, unit_system: UnitSystem,
                         code_reference: str, config: EngineConfig
                         ) -> Tuple[VoltageDropAnalysis, List[CalculationAlert]]:
    """
    Voltage drop for conductors[conductor_index] at the load current.
    resistance_scale converts the table's native resistance unit to the one
    matching the circuit's distance unit (Ohm/km for m, Ohm/1000 ft for ft).
    """
    cable = conductors[conductor_index]
    resistance = cable.resistance * resistance_scale
    vd = voltage_drop_percent(current, resistance, distance, voltage, phase)
    status = classify(vd, config)
    vd_volts = voltage * vd / 100.0
    k = SQRT3 if phase == Phase.THREE else 1.0

    recommendation = None
    resolved = True
    issues: List[CalculationAlert] = []
    remediation = None

    if vd > config.vd_branch_limit:
        found = recommend_conductor(conductors, conductor_index, current, distance, voltage,
                                    phase, resistance_scale, config.vd_branch_limit)
        if found is None:
            resolved = False
            remediation = "Raise the supply voltage, shorten the run or use parallel conductors"
            issues.append(alerts.critical(
                "VOLTAGE_DROP_UNRESOLVED",
                f"No standard conductor size brings voltage drop below {config.vd_branch_limit:g}% "
                f"at {distance:g} {'ft' if unit_system == UnitSystem.IMPERIAL else 'm'}",
                STAGE, field="circuit_distance", code_reference=code_reference,
                remediation=remediation))
        else:
            index, new_vd = found
            upsized = conductors[index]
            recommendation = CableRecommendation(
                size=upsized.size,
                voltage_drop_percent=new_vd,
                improvement_percent=(vd - new_vd) / vd * 100.0,
                cost_impact=_cost_impact(index - conductor_index),
            )
            remediation = f"Increase conductor to {upsized.size.label} ({new_vd:.2f}% drop)"

    band = _band_alert(status, vd, cable.size.label, code_reference, remediation, config)
    if band is not None:
        issues.insert(0, band)

    logger.debug("Voltage drop: %s %.3f%% (%s)", cable.size.label, vd, status)
    analysis = VoltageDropAnalysis(
        conductor=cable.size,
        material=cable.material,
        resistance=resistance,
        resistance_unit="Ω/1000 ft" if unit_system == UnitSystem.IMPERIAL else "Ω/km",
        distance=distance,
        distance_unit="ft" if unit_system == UnitSystem.IMPERIAL else "m",
        current_amps=current,
        voltage_drop_volts=vd_volts,
        voltage_drop_percent=vd,
        voltage_at_load=voltage - vd_volts,
        power_loss_watts=k * current * vd_volts,
        status=status,
        formula="VD% = √3 × I × R × L / (V × 10)" if phase == Phase.THREE else "VD% = I × R × L / (V × 10)",
        code_reference=code_reference,
        cable_recommendation=recommendation,
        resolved=resolved,
    )
    return analysis, issues
