import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from core import alerts
from core.alerts import aggregate_alerts
from core.components import (
    BreakerSizingResult, BreakerSpecification, Cable, CalculationAlert, CalculationResult,
    DeratingFactor, DeratingFactorsResult, LoadAnalysis, Recommendations, SafetyFactorResult,
    VoltageDropAnalysis,
)
from core.config import EngineConfig
from core.derating import apply_derating
from core.load_current import calculate_load_current
from core.models import (
    ConductorMaterial, ConductorSize, EnvironmentalConditions, InstallationMethod,
    InsulationRating, PipelineStage, Severity, Standard, UnitSystem,
)
from core.ratings import interrupting_rating_for, select_standard_rating
from core.short_circuit import evaluate_breaking_capacity
from core.voltage_drop import analyze_voltage_drop
from standards.trip_curves import get_trip_characteristic, recommend_trip_curve

logger = logging.getLogger(__name__)

class BreakerCalculator(ABC):
    """
    Per-standard breaker sizing pipeline.

    Subclasses own their ladder, tables and the shape of the safety margin;
    the stage sequence in calculate_circuit is shared. Instances hold no
    per-calculation state.
    """
    STANDARD: Standard
    BREAKER_RATINGS: Tuple[int, ...]
    INTERRUPTING_RATINGS: Tuple[Tuple[int, float], ...]
    CONDUCTORS = {}
    LADDER_REFERENCE = ""
    VOLTAGE_DROP_REFERENCE = ""
    SHORT_CIRCUIT_REFERENCE = ""

    @abstractmethod
    def apply_safety_factor(self, load_current: float) -> SafetyFactorResult:
        """Minimum breaker current before derating."""
        pass

    @abstractmethod
    def temperature_factor(self, ambient_c: float, insulation: InsulationRating) -> DeratingFactor:
        pass

    @abstractmethod
    def grouping_factor(self, grouped: int, method: Optional[InstallationMethod]) -> DeratingFactor:
        pass

    @abstractmethod
    def installation_method_factor(self, method: InstallationMethod) -> Optional[DeratingFactor]:
        """None when the standard has no installation-method correction."""
        pass

    @abstractmethod
    def ampacity_column(self, insulation: InsulationRating) -> int:
        """Ampacity table column used when picking a conductor for a rating."""
        pass

    @abstractmethod
    def resistance_scale(self, unit_system: UnitSystem) -> float:
        """Multiplier from the conductor table's resistance unit to the circuit's."""
        pass

    @abstractmethod
    def general_notes(self) -> Tuple[str, ...]:
        pass

    # --- Table access -------------------------------------------------------

    def conductors(self, material: ConductorMaterial) -> Sequence[Cable]:
        return self.CONDUCTORS[material]

    def select_breaker(self, minimum_amps: float) -> Optional[int]:
        return select_standard_rating(minimum_amps, self.BREAKER_RATINGS)

    def breaking_capacity_ka(self, rating_amps: int) -> float:
        return interrupting_rating_for(rating_amps, self.INTERRUPTING_RATINGS)

    def select_conductor_index(self, amps: float, material: ConductorMaterial,
                               insulation: InsulationRating) -> Optional[int]:
        """Index of the smallest conductor whose ampacity covers amps, None if none does."""
        column = self.ampacity_column(insulation)
        for index, cable in enumerate(self.conductors(material)):
            ampacity = cable.ampacity_at(column)
            if ampacity is not None and ampacity >= amps:
                return index
        return None

    def conductor_index(self, size: ConductorSize, material: ConductorMaterial) -> int:
        for index, cable in enumerate(self.conductors(material)):
            if cable.size == size:
                return index
        raise KeyError(f"{size.label} not in {self.STANDARD.value} {material.value} table")

    # --- Stages -------------------------------------------------------------

    def derating_factors(self, env: EnvironmentalConditions) -> List[DeratingFactor]:
        """Only factors whose input was supplied are active."""
        factors = []
        if env.ambient_temp_c is not None:
            factors.append(self.temperature_factor(env.ambient_temp_c, env.insulation_rating))
        if env.grouped_cables is not None:
            factors.append(self.grouping_factor(env.grouped_cables, env.installation_method))
        if env.installation_method is not None:
            method_factor = self.installation_method_factor(env.installation_method)
            if method_factor is not None:
                factors.append(method_factor)
        return factors

    def _derating_alerts(self, derating: DeratingFactorsResult, config: EngineConfig) -> List[CalculationAlert]:
        stage = PipelineStage.DERATING
        issues = []
        for item in derating.factors:
            if item.clamped:
                logger.warning("%s lookup key %s outside %s, clamped", item.name, item.input_value, item.table_reference)
                issues.append(alerts.info(
                    "DERATING_TABLE_CLAMPED",
                    f"{item.name.replace('_', ' ').capitalize()} value {item.input_value} is outside the "
                    f"published range of {item.table_reference}; the lookup was clamped to the "
                    f"table edge and capped at 1.00, giving {item.factor:.2f}",
                    stage, code_reference=item.table_reference))
            if item.factor == 0:
                issues.append(alerts.critical(
                    "INSULATION_TEMPERATURE_EXCEEDED",
                    f"{item.table_reference} gives a zero factor at {item.input_value}: "
                    "the conductor insulation is not rated for this condition",
                    stage, field="insulation_rating", code_reference=item.table_reference,
                    remediation="Use conductors with a higher insulation temperature rating"))

        combined = derating.combined_factor
        if 0 < combined < config.significant_derating_threshold:
            issues.append(alerts.warning(
                "SIGNIFICANT_DERATING",
                f"Combined derating factor {combined:.3f} raises the minimum breaker current "
                f"from {derating.minimum_breaker_amps:.1f} A to {derating.adjusted_minimum_amps:.1f} A",
                stage, severity=Severity.MAJOR,
                code_reference=", ".join(item.table_reference for item in derating.factors),
                remediation="Reduce cable grouping or route the circuit through a cooler space"))
        return issues

    def _voltage_drop(self, load: LoadAnalysis, unit_system: UnitSystem, env: EnvironmentalConditions,
                      sizing_amps: float, config: EngineConfig
                      ) -> Tuple[VoltageDropAnalysis, List[CalculationAlert], Optional[str]]:
        issues = []
        material = env.conductor_material
        conductors = self.conductors(material)
        if env.conductor_size is not None:
            index = self.conductor_index(env.conductor_size, material)
        else:
            index = self.select_conductor_index(sizing_amps, material, env.insulation_rating)
            if index is None:
                index = len(conductors) - 1
                issues.append(alerts.info(
                    "CONDUCTOR_TABLE_EXCEEDED",
                    f"No single {material.value} conductor carries {sizing_amps:.0f} A; voltage drop "
                    f"evaluated on the largest size {conductors[index].size.label}",
                    PipelineStage.VOLTAGE_DROP, field="conductor_size",
                    remediation="Use parallel conductor sets"))

        analysis, vd_issues = analyze_voltage_drop(
            current=load.current_amps,
            voltage=load.voltage,
            phase=load.phase,
            distance=env.circuit_distance,
            conductors=conductors,
            conductor_index=index,
            resistance_scale=self.resistance_scale(unit_system),
            unit_system=unit_system,
            code_reference=self.VOLTAGE_DROP_REFERENCE,
            config=config,
        )
        issues.extend(vd_issues)

        guidance = None
        if analysis.cable_recommendation is not None:
            upsized = analysis.cable_recommendation
            guidance = (f"Increase conductor from {analysis.conductor.label} to {upsized.size.label} "
                        f"to reduce voltage drop to {upsized.voltage_drop_percent:.2f}%")
        elif analysis.resolved:
            guidance = f"{analysis.conductor.label} keeps voltage drop at {analysis.voltage_drop_percent:.2f}%"
        return analysis, issues, guidance

    def calculate_circuit(self, data, config: EngineConfig, calculated_at: str) -> CalculationResult:
        """Runs load current through trip-curve selection for one validated input."""
        circuit, env = data.circuit, data.environment
        issues: List[CalculationAlert] = list(data.alerts)

        load = calculate_load_current(circuit)
        safety = self.apply_safety_factor(load.current_amps)
        logger.debug("%s minimum breaker: %.3f A (x%g)", self.STANDARD.value, safety.minimum_breaker_amps, safety.factor)

        derating = None
        adjusted = safety.minimum_breaker_amps
        if env is not None:
            factors = self.derating_factors(env)
            if factors:
                derating = apply_derating(safety.minimum_breaker_amps, factors)
                adjusted = derating.adjusted_minimum_amps
                issues.extend(self._derating_alerts(derating, config))

        rating = None
        exceeded = False
        if adjusted is not None:
            rating = self.select_breaker(adjusted)
            if rating is None:
                exceeded = True
                issues.append(alerts.critical(
                    "BREAKER_SIZE_EXCEEDED",
                    f"Adjusted minimum {adjusted:.1f} A exceeds the largest standard rating "
                    f"{self.BREAKER_RATINGS[-1]} A",
                    PipelineStage.RATING_SELECTION, code_reference=self.LADDER_REFERENCE,
                    remediation="Split the load across parallel breakers and circuits, or use a higher system voltage"))

        sizing = BreakerSizingResult(
            load_current_amps=load.current_amps,
            safety_factor=safety.factor,
            factor_type=safety.factor_type,
            safety_reference=safety.code_reference,
            minimum_breaker_amps=safety.minimum_breaker_amps,
            adjusted_minimum_amps=adjusted,
            recommended_rating=rating,
            ladder=self.BREAKER_RATINGS,
            ladder_reference=self.LADDER_REFERENCE,
            ladder_exceeded=exceeded,
        )

        voltage_drop = None
        cable_guidance = None
        if env is not None and env.circuit_distance is not None:
            if rating is not None:
                sizing_amps = rating
            else:
                sizing_amps = adjusted if adjusted is not None else safety.minimum_breaker_amps
            voltage_drop, vd_issues, cable_guidance = self._voltage_drop(
                load, circuit.unit_system, env, sizing_amps, config)
            issues.extend(vd_issues)

        capacity = self.breaking_capacity_ka(rating) if rating is not None else None
        short_circuit, sc_issues = evaluate_breaking_capacity(
            data.short_circuit_current_ka, rating, capacity, self.SHORT_CIRCUIT_REFERENCE)
        issues.extend(sc_issues)

        trip = recommend_trip_curve(data.load_type, self.STANDARD)

        ordered = aggregate_alerts(issues)
        breaker = None
        if rating is not None:
            breaker = BreakerSpecification(
                rating_amps=rating,
                breaking_capacity_ka=capacity,
                trip_characteristic=trip.recommendation,
                load_type=data.load_type,
                standard=self.STANDARD,
                code_reference=self.LADDER_REFERENCE,
                is_safe=short_circuit is None or short_circuit.adequate,
                warnings=tuple(a.message for a in ordered if a.severity != Severity.MINOR),
            )

        curve_notes = get_trip_characteristic(self.STANDARD, trip.recommendation).notes
        recommendations = Recommendations(
            breaker=breaker,
            trip_curve=trip,
            cable_guidance=cable_guidance,
            general_notes=self.general_notes() + (curve_notes,),
        )

        return CalculationResult(
            standard=self.STANDARD,
            load_analysis=load,
            breaker_sizing=sizing,
            derating_factors=derating,
            voltage_drop=voltage_drop,
            short_circuit=short_circuit,
            recommendations=recommendations,
            alerts=ordered,
            calculation_version=config.calculation_version,
            calculated_at=calculated_at,
        )
