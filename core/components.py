from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.models import (
    AlertType, ConductorMaterial, ConductorSize, LoadMode, LoadType, Phase,
    PipelineStage, Severity, Standard,
)

@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str
    value: Any = None
    constraint: str = ""

@dataclass(frozen=True)
class CalculationAlert:
    type: AlertType
    code: str
    message: str
    severity: Severity
    stage: PipelineStage
    field: Optional[str] = None
    code_reference: Optional[str] = None
    remediation: Optional[str] = None

@dataclass(frozen=True)
class Cable:
    """One row of a conductor table: size, ampacity per insulation column and resistance."""
    size: ConductorSize
    material: ConductorMaterial
    ampacities: Tuple[Tuple[int, float], ...]  # ((insulation_temp_c, amps), ...)
    resistance: float  # Ohm per 1000 ft (NEC tables) or Ohm/km (IEC tables)

    def ampacity_at(self, insulation_temp: int) -> Optional[float]:
        for temp, amps in self.ampacities:
            if temp == insulation_temp:
                return amps
        return None

@dataclass(frozen=True)
class LoadAnalysis:
    current_amps: float
    power_kw: float
    voltage: float
    phase: Phase
    power_factor: float
    load_mode: LoadMode
    formula: str
    operands: Tuple[Tuple[str, float], ...]

@dataclass(frozen=True)
class SafetyFactorResult:
    factor: float
    factor_type: str  # "continuous-load" or "correction-factor"
    minimum_breaker_amps: float
    code_reference: str

@dataclass(frozen=True)
class DeratingFactor:
    name: str  # "temperature", "grouping", "installation_method"
    symbol: str
    input_value: Any
    factor: float
    table_reference: str
    clamped: bool = False

@dataclass(frozen=True)
class DeratingFactorsResult:
    factors: Tuple[DeratingFactor, ...]
    combined_factor: float
    minimum_breaker_amps: float
    adjusted_minimum_amps: Optional[float]  # None when a factor is zero

    def factor(self, name: str) -> Optional[DeratingFactor]:
        for item in self.factors:
            if item.name == name:
                return item
        return None

@dataclass(frozen=True)
class BreakerSizingResult:
    load_current_amps: float
    safety_factor: float
    factor_type: str
    safety_reference: str
    minimum_breaker_amps: float
    adjusted_minimum_amps: Optional[float]
    recommended_rating: Optional[int]
    ladder: Tuple[int, ...]
    ladder_reference: str
    ladder_exceeded: bool = False

@dataclass(frozen=True)
class CableRecommendation:
    size: ConductorSize
    voltage_drop_percent: float
    improvement_percent: float
    cost_impact: str  # low / medium / high

@dataclass(frozen=True)
class VoltageDropAnalysis:
    conductor: ConductorSize
    material: ConductorMaterial
    resistance: float
    resistance_unit: str
    distance: float
    distance_unit: str
    current_amps: float
    voltage_drop_volts: float
    voltage_drop_percent: float
    voltage_at_load: float
    power_loss_watts: float
    status: str
    formula: str
    code_reference: str
    cable_recommendation: Optional[CableRecommendation] = None
    resolved: bool = True

@dataclass(frozen=True)
class ShortCircuitAnalysis:
    fault_current_ka: float
    breaking_capacity_ka: float
    adequate: bool
    margin_ka: float
    code_reference: str

@dataclass(frozen=True)
class TripCurveRecommendation:
    standard: Standard
    load_type: LoadType
    recommendation: str  # IEC curve letter or NEC trip mechanism
    display_name: str
    inrush_tolerance: str
    rationale: str
    applications: Tuple[str, ...]
    code_reference: str

@dataclass(frozen=True)
class BreakerSpecification:
    rating_amps: int
    breaking_capacity_ka: float
    trip_characteristic: str
    load_type: LoadType
    standard: Standard
    code_reference: str
    is_safe: bool = True
    warnings: Tuple[str, ...] = ()

@dataclass(frozen=True)
class Recommendations:
    breaker: Optional[BreakerSpecification]
    trip_curve: TripCurveRecommendation
    cable_guidance: Optional[str] = None
    general_notes: Tuple[str, ...] = ()

def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value

@dataclass(frozen=True)
class CalculationResult:
    standard: Standard
    load_analysis: LoadAnalysis
    breaker_sizing: BreakerSizingResult
    derating_factors: Optional[DeratingFactorsResult]
    voltage_drop: Optional[VoltageDropAnalysis]
    short_circuit: Optional[ShortCircuitAnalysis]
    recommendations: Recommendations
    alerts: Tuple[CalculationAlert, ...]
    calculation_version: str
    calculated_at: str = field(default="", compare=False)

    @property
    def breaker(self) -> Optional[BreakerSpecification]:
        return self.recommendations.breaker

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self, dict_factory=lambda items: {k: _plain(v) for k, v in items})
