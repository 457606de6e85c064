from typing import Optional, Tuple

from core.calculator import BreakerCalculator
from core.components import DeratingFactor, SafetyFactorResult
from core.converters import ohm_per_kft_to_ohm_per_km
from core.derating import range_rows, step_lookup
from core.models import InstallationMethod, InsulationRating, Standard, UnitSystem
from standards import nec_tables

class NECCalculator(BreakerCalculator):
    STANDARD = Standard.NEC
    # Standard NEC breaker ratings (Amps) - NEC 240.6(A)
    BREAKER_RATINGS = nec_tables.BREAKER_RATINGS
    INTERRUPTING_RATINGS = nec_tables.INTERRUPTING_RATINGS
    CONDUCTORS = nec_tables.CONDUCTORS

    # Every load is treated as continuous (3 h or more at maximum current)
    CONTINUOUS_LOAD_FACTOR = 1.25

    LADDER_REFERENCE = "NEC 240.6(A)"
    VOLTAGE_DROP_REFERENCE = "NEC 210.19(A) Informational Note No. 4"
    SHORT_CIRCUIT_REFERENCE = "NEC 110.9"
    TEMPERATURE_REFERENCE = "NEC Table 310.15(B)(1)"
    GROUPING_REFERENCE = "NEC Table 310.15(C)(1)"

    def apply_safety_factor(self, load_current: float) -> SafetyFactorResult:
        # NEC 210.20(A): OCPD >= 125% of continuous load
        return SafetyFactorResult(
            factor=self.CONTINUOUS_LOAD_FACTOR,
            factor_type="continuous-load",
            minimum_breaker_amps=load_current * self.CONTINUOUS_LOAD_FACTOR,
            code_reference="NEC 210.20(A)",
        )

    def _insulation_column(self, insulation: InsulationRating) -> int:
        # 70°C (IEC PVC) has no NEC column; the 75°C column is the nearest
        if insulation == InsulationRating.TEMP_70:
            return 75
        return insulation.value

    def temperature_factor(self, ambient_c: float, insulation: InsulationRating) -> DeratingFactor:
        column = self._insulation_column(insulation)
        rows = range_rows(nec_tables.TEMP_CORRECTION_FACTORS, column)
        lower = min(low for low, _ in nec_tables.TEMP_CORRECTION_FACTORS)
        lookup = step_lookup(rows, ambient_c, lower_bound=lower)
        return DeratingFactor(
            name="temperature",
            symbol="Ct",
            input_value=ambient_c,
            factor=lookup.factor,
            table_reference=f"{self.TEMPERATURE_REFERENCE} ({column}°C column)",
            clamped=lookup.clamped,
        )

    def grouping_factor(self, grouped: int, method: Optional[InstallationMethod]) -> DeratingFactor:
        # Count of current-carrying conductors in the raceway or cable
        rows = tuple(sorted(nec_tables.GROUPING_FACTORS.items()))
        lookup = step_lookup(rows, grouped, lower_bound=1)
        return DeratingFactor(
            name="grouping",
            symbol="Cg",
            input_value=grouped,
            factor=lookup.factor,
            table_reference=self.GROUPING_REFERENCE,
            clamped=lookup.clamped,
        )

    def installation_method_factor(self, method: InstallationMethod) -> Optional[DeratingFactor]:
        return None

    def ampacity_column(self, insulation: InsulationRating) -> int:
        # NEC 110.14(C): terminations limit conductors to the 75°C column
        if insulation == InsulationRating.TEMP_60:
            return 60
        return 75

    def resistance_scale(self, unit_system: UnitSystem) -> float:
        # Chapter 9 Table 8 is Ohm/1000 ft
        if unit_system == UnitSystem.IMPERIAL:
            return 1.0
        return ohm_per_kft_to_ohm_per_km(1.0)

    def general_notes(self) -> Tuple[str, ...]:
        return (
            "Sized per NFPA 70 (NEC): load treated as continuous, breaker >= 125% of load current (NEC 210.20(A)).",
            "Branch-circuit conductors must have an ampacity not less than the breaker rating after correction (NEC 240.4).",
        )
