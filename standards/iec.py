from typing import Optional, Tuple

from core.calculator import BreakerCalculator
from core.components import DeratingFactor, SafetyFactorResult
from core.converters import ohm_per_km_to_ohm_per_kft
from core.derating import interpolate
from core.models import InstallationMethod, InsulationRating, Standard, UnitSystem
from standards import iec_tables

class IECCalculator(BreakerCalculator):
    STANDARD = Standard.IEC
    # Preferred rated currents In (Amps) - IEC 60898-1 / IEC 60947-2
    BREAKER_RATINGS = iec_tables.BREAKER_RATINGS
    INTERRUPTING_RATINGS = iec_tables.INTERRUPTING_RATINGS
    CONDUCTORS = iec_tables.CONDUCTORS

    LADDER_REFERENCE = "IEC 60898-1 / IEC 60947-2"
    VOLTAGE_DROP_REFERENCE = "IEC 60364-5-52 Clause 525"
    SHORT_CIRCUIT_REFERENCE = "IEC 60364-4-43 434.5.1"
    TEMPERATURE_REFERENCE = "IEC 60364-5-52 Table B.52.14"
    GROUPING_REFERENCE = "IEC 60364-5-52 Table B.52.17"
    METHOD_REFERENCE = "IEC 60364-5-52 Tables B.52.2-B.52.5 (relative to method B1)"

    def apply_safety_factor(self, load_current: float) -> SafetyFactorResult:
        # IEC 60364-4-43 433.1: Ib <= In <= Iz. No fixed margin; correction factors carry it
        return SafetyFactorResult(
            factor=1.0,
            factor_type="correction-factor",
            minimum_breaker_amps=load_current,
            code_reference="IEC 60364-4-43 433.1",
        )

    def _insulation_column(self, insulation: InsulationRating) -> int:
        # PVC (70°C) unless the insulation is XLPE/EPR (90°C)
        if insulation == InsulationRating.TEMP_90:
            return 90
        return 70

    def temperature_factor(self, ambient_c: float, insulation: InsulationRating) -> DeratingFactor:
        column = self._insulation_column(insulation)
        lookup = interpolate(iec_tables.TEMP_CORRECTION_FACTORS[column], ambient_c)
        return DeratingFactor(
            name="temperature",
            symbol="Ca",
            input_value=ambient_c,
            # No credit below the 30°C reference: In never drops below Ib
            factor=min(lookup.factor, 1.0),
            table_reference=f"{self.TEMPERATURE_REFERENCE} ({'XLPE' if column == 90 else 'PVC'})",
            clamped=lookup.clamped,
        )

    def grouping_factor(self, grouped: int, method: Optional[InstallationMethod]) -> DeratingFactor:
        # Number of loaded circuits in the group
        if method is None:
            arrangement = iec_tables.DEFAULT_GROUPING_ARRANGEMENT
        else:
            arrangement = iec_tables.GROUPING_ARRANGEMENT[method]
        lookup = interpolate(iec_tables.GROUPING_FACTORS[arrangement], grouped)
        return DeratingFactor(
            name="grouping",
            symbol="Cg",
            input_value=grouped,
            factor=lookup.factor,
            table_reference=f"{self.GROUPING_REFERENCE} (arrangement {arrangement})",
            clamped=lookup.clamped,
        )

    def installation_method_factor(self, method: InstallationMethod) -> Optional[DeratingFactor]:
        return DeratingFactor(
            name="installation_method",
            symbol="Ci",
            input_value=method.value,
            factor=iec_tables.INSTALLATION_METHOD_FACTORS[method],
            table_reference=self.METHOD_REFERENCE,
        )

    def ampacity_column(self, insulation: InsulationRating) -> int:
        return self._insulation_column(insulation)

    def resistance_scale(self, unit_system: UnitSystem) -> float:
        # IEC 60228 is Ohm/km
        if unit_system == UnitSystem.METRIC:
            return 1.0
        return ohm_per_km_to_ohm_per_kft(1.0)

    def general_notes(self) -> Tuple[str, ...]:
        return (
            "Sized per IEC 60364-4-43: Ib <= In, with correction factors applied instead of a fixed margin.",
            "Verify In <= Iz of the selected cable after correction (IEC 60364-4-43 433.1).",
        )
