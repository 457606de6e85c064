from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

class Standard(Enum):
    NEC = "NEC"  # North-American model (NFPA 70)
    IEC = "IEC"  # International model (IEC 60364 / 60898 / 60947)

class Phase(Enum):
    SINGLE = "single"
    THREE = "three"

class LoadMode(Enum):
    POWER = "kw"      # load value in kW
    CURRENT = "amps"  # load value in A

class UnitSystem(Enum):
    METRIC = "metric"      # distances in m, resistance in Ohm/km
    IMPERIAL = "imperial"  # distances in ft, resistance in Ohm/1000 ft

class ConductorMaterial(Enum):
    COPPER = "copper"
    ALUMINUM = "aluminum"

class InsulationRating(Enum):
    TEMP_60 = 60
    TEMP_70 = 70  # IEC PVC
    TEMP_75 = 75
    TEMP_90 = 90  # XLPE / THHN

class InstallationMethod(Enum):
    # IEC 60364-5-52 Table B.52.1 reference methods
    A1 = "A1"  # insulated conductors in conduit in a thermally insulated wall
    A2 = "A2"  # multi-core cable in conduit in a thermally insulated wall
    B1 = "B1"  # insulated conductors in conduit on a wall
    B2 = "B2"  # multi-core cable in conduit on a wall
    C = "C"    # clipped direct
    D = "D"    # in ducts in the ground
    E = "E"    # multi-core cable in free air
    F = "F"    # single-core cables touching in free air
    G = "G"    # single-core cables spaced in free air

class LoadType(Enum):
    RESISTIVE = "resistive"
    INDUCTIVE = "inductive"
    MIXED = "mixed"
    CAPACITIVE = "capacitive"

class SizeUnit(Enum):
    AWG = "AWG"
    KCMIL = "kcmil"
    MM2 = "mm2"

class AlertType(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

class Severity(Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

class PipelineStage(IntEnum):
    VALIDATION = 1
    LOAD_CURRENT = 2
    SAFETY_FACTOR = 3
    DERATING = 4
    RATING_SELECTION = 5
    VOLTAGE_DROP = 6
    SHORT_CIRCUIT = 7
    TRIP_CURVE = 8

@dataclass(frozen=True)
class ConductorSize:
    value: str      # table key: "6", "1/0", "250" (NEC) or "16" (IEC mm2)
    unit: SizeUnit

    @property
    def label(self) -> str:
        if self.unit == SizeUnit.AWG:
            return f"#{self.value} AWG"
        if self.unit == SizeUnit.KCMIL:
            return f"{self.value} kcmil"
        return f"{self.value} mm²"

@dataclass(frozen=True)
class CircuitConfiguration:
    standard: Union[Standard, str]
    voltage: float
    phase: Union[Phase, str]
    load_mode: Union[LoadMode, str]
    load_value: float  # the single authoritative load quantity
    power_factor: Optional[float] = None  # None -> default injected by the validator
    unit_system: Union[UnitSystem, str] = UnitSystem.METRIC

@dataclass(frozen=True)
class EnvironmentalConditions:
    ambient_temp_c: Optional[float] = None
    grouped_cables: Optional[int] = None
    installation_method: Optional[Union[InstallationMethod, str]] = None
    circuit_distance: Optional[float] = None  # m (metric) or ft (imperial)
    conductor_material: Union[ConductorMaterial, str] = ConductorMaterial.COPPER
    conductor_size: Optional[Union[ConductorSize, str]] = None  # a bare table key like "6" is resolved
    insulation_rating: Union[InsulationRating, int] = InsulationRating.TEMP_90
