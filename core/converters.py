from typing import Tuple

from core.models import LoadMode, UnitSystem

FEET_PER_METER = 1 / 0.3048

def convert_power_unit(val: float, unit: str, pf: float) -> Tuple[LoadMode, float]:
    """
    Converts a user-entered load to the engine's authoritative quantity.
    Returns (load_mode, value): value in kW for power units, in A for current.
    """
    unit = unit.strip().upper()

    # 1. Current stays authoritative, no power factor applied
    if unit == "A":
        return (LoadMode.CURRENT, val)

    # 2. Real power
    if unit == "W": return (LoadMode.POWER, val / 1000.0)
    if unit == "KW": return (LoadMode.POWER, val)
    if unit == "MW": return (LoadMode.POWER, val * 1000.0)
    if unit == "HP": return (LoadMode.POWER, val * 0.746)

    # 3. Apparent power
    if unit == "VA":
        return (LoadMode.POWER, val * pf / 1000.0)
    if unit == "KVA":
        return (LoadMode.POWER, val * pf)
    if unit == "MVA":
        return (LoadMode.POWER, val * pf * 1000.0)

    raise ValueError(f"Unidad de carga no reconocida: {unit}")

def convert_length_unit(val: float, unit: str, unit_system: UnitSystem) -> float:
    """Returns length in the circuit's unit system (m for metric, ft for imperial)."""
    unit = unit.strip().lower()
    if unit in ["m", "mts", "metros", "metro"]:
        meters = val
    elif unit in ["ft", "pies", "pie"]:
        meters = val * 0.3048
    elif unit in ["yd", "yarda", "yardas"]:
        meters = val * 0.9144
    else:
        raise ValueError(f"Unidad de longitud no reconocida: {unit}")

    if unit_system == UnitSystem.IMPERIAL:
        return meters * FEET_PER_METER
    return meters

def ohm_per_kft_to_ohm_per_km(resistance: float) -> float:
    return resistance * FEET_PER_METER

def ohm_per_km_to_ohm_per_kft(resistance: float) -> float:
    return resistance / FEET_PER_METER
