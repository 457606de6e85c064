import logging
import re
import sys

from core.components import CalculationResult
from core.converters import convert_length_unit, convert_power_unit
from core.engine import compute, recalculate_with_standard
from core.history import CalculationHistory
from core.models import (
    CircuitConfiguration, ConductorMaterial, EnvironmentalConditions, InstallationMethod,
    InsulationRating, LoadType, Phase, Standard, UnitSystem,
)
from core.report import export_to_excel

QUANTITY_PATTERN = re.compile(r"([0-9\.]+)\s*([a-zA-Z]*)")

LOAD_TYPES = {
    "1": LoadType.RESISTIVE,
    "2": LoadType.INDUCTIVE,
    "3": LoadType.MIXED,
    "4": LoadType.CAPACITIVE,
}

def parse_quantity(text: str, default_unit: str):
    """'10 kW' -> (10.0, 'kW'). A bare number takes default_unit."""
    match = QUANTITY_PATTERN.fullmatch(text.strip())
    if not match:
        raise ValueError(f"Valor no reconocido: {text!r}")
    return float(match.group(1)), match.group(2) or default_unit

def ask_optional_float(prompt: str):
    text = input(prompt).strip()
    return float(text) if text else None

def get_standard() -> Standard:
    print("Norma: (1) NEC (Norteamérica), (2) IEC (Internacional)")
    return Standard.IEC if input("Seleccione Norma [1]: ").strip() == "2" else Standard.NEC

def get_environment(standard: Standard, unit_system: UnitSystem):
    print("\n--- Condiciones de Instalación (Enter para omitir) ---")
    if input("¿Aplicar condiciones ambientales? (s/n) [n]: ").lower() != 's':
        return None

    temp = ask_optional_float("Temperatura Ambiente (°C): ")
    grouped_text = input("N° de conductores/circuitos agrupados: ").strip()
    grouped = int(grouped_text) if grouped_text else None

    method = None
    if standard == Standard.IEC:
        method_text = input("Método de instalación IEC (A1, A2, B1, B2, C, D, E, F, G): ").strip().upper()
        method = InstallationMethod(method_text) if method_text else None

    print("Temperatura nominal del aislamiento: (1) 60°C, (2) 75°C, (3) 90°C")
    t_choice = input("Opción [3]: ").strip()
    insulation = {"1": InsulationRating.TEMP_60, "2": InsulationRating.TEMP_75}.get(t_choice, InsulationRating.TEMP_90)

    distance = None
    distance_text = input("Longitud del circuito (ej: 50 m, 150 ft): ").strip()
    if distance_text:
        l_val, l_unit = parse_quantity(distance_text, "ft" if unit_system == UnitSystem.IMPERIAL else "m")
        distance = convert_length_unit(l_val, l_unit, unit_system)

    material = ConductorMaterial.ALUMINUM if input("Conductor de aluminio? (s/n) [n]: ").lower() == 's' else ConductorMaterial.COPPER
    size_text = input("Calibre del conductor (ej: 6, 1/0, 250, 16) [automático]: ").strip()

    return EnvironmentalConditions(
        ambient_temp_c=temp,
        grouped_cables=grouped,
        installation_method=method,
        circuit_distance=distance,
        conductor_material=material,
        conductor_size=size_text or None,
        insulation_rating=insulation,
    )

def get_circuit_input(standard: Standard):
    load_text = input("\nCarga (ej: 10 kW, 5 HP, 20 A, 50 KVA) [Enter para terminar]: ").strip()
    if not load_text:
        return None

    val, unit = parse_quantity(load_text, "kW")
    voltage = float(input("Voltaje (V): "))
    phase = Phase.THREE if input("Fases (1 o 3): ").strip() == "3" else Phase.SINGLE
    pf = ask_optional_float("Factor de Potencia [0.8]: ")
    load_mode, load_value = convert_power_unit(val, unit, pf or 0.8)

    default_units = "1" if standard == Standard.NEC else "2"
    units_choice = input(f"Unidades de longitud: (1) pies, (2) metros [{default_units}]: ").strip() or default_units
    unit_system = UnitSystem.IMPERIAL if units_choice == "1" else UnitSystem.METRIC

    print("Tipo de carga: (1) Resistiva, (2) Inductiva/Motor, (3) Mixta, (4) Capacitiva")
    load_type = LOAD_TYPES.get(input("Opción [3]: ").strip())

    circuit = CircuitConfiguration(
        standard=standard,
        voltage=voltage,
        phase=phase,
        load_mode=load_mode,
        load_value=load_value,
        power_factor=pf,
        unit_system=unit_system,
    )
    environment = get_environment(standard, unit_system)
    fault_ka = ask_optional_float("Corriente de cortocircuito disponible (kA) [omitir]: ")
    return circuit, environment, fault_ka, load_type

def print_result(result: CalculationResult):
    load = result.load_analysis
    sizing = result.breaker_sizing
    breaker = result.breaker

    print("-" * 90)
    print(f" Norma:                 {result.standard.value}")
    print(f" Corriente:             {load.current_amps:.2f} A   [{load.formula}]")
    print(f" Factor ({sizing.factor_type}): x{sizing.safety_factor:g}   [{sizing.safety_reference}]")
    print(f" Mínimo del interruptor: {sizing.minimum_breaker_amps:.2f} A")

    if result.derating_factors is not None:
        for item in result.derating_factors.factors:
            print(f"   {item.symbol} {item.name:<20} {item.factor:.3f}   [{item.table_reference}]")
        print(f"   Factor combinado:      {result.derating_factors.combined_factor:.3f}")
    if sizing.adjusted_minimum_amps is not None:
        print(f" Mínimo ajustado:       {sizing.adjusted_minimum_amps:.2f} A")

    if breaker is not None:
        status = "OK" if breaker.is_safe else "NO SEGURO"
        print(f" Interruptor:           {breaker.rating_amps} A, {breaker.breaking_capacity_ka:g} kA, "
              f"{result.recommendations.trip_curve.display_name} [{status}]")
    else:
        print(" Interruptor:           -- sin interruptor estándar --")

    if result.voltage_drop is not None:
        vd = result.voltage_drop
        warn = " (!)" if vd.status not in ("acceptable", "notable") else ""
        print(f" Caída de tensión:      {vd.voltage_drop_percent:.2f}% en {vd.conductor.label} ({vd.status}){warn}")
    if result.recommendations.cable_guidance:
        print(f"   {result.recommendations.cable_guidance}")

    if result.alerts:
        print("\n Alertas:")
        for alert in result.alerts:
            ref = f" [{alert.code_reference}]" if alert.code_reference else ""
            print(f"   ({alert.severity.value}) {alert.code}: {alert.message}{ref}")
            if alert.remediation:
                print(f"      -> {alert.remediation}")
    print("-" * 90)

def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    print("==========================================================")
    print(" DIMENSIONAMIENTO DE INTERRUPTORES (NEC / IEC)")
    print("==========================================================")

    standard = get_standard()
    history = CalculationHistory()

    while True:
        try:
            data = get_circuit_input(standard)
        except ValueError as e:
            print(f"Error en entrada de datos: {e}. Intente de nuevo.")
            continue
        if data is None:
            break

        circuit, environment, fault_ka, load_type = data
        result = compute(circuit, environment, fault_ka, load_type)
        if isinstance(result, list):
            print("\nDatos inválidos:")
            for error in result:
                print(f"  - {error.field}: {error.message}")
            continue

        print_result(result)
        history.add(circuit, result, environment, fault_ka)

        other = Standard.IEC if standard == Standard.NEC else Standard.NEC
        if input(f"¿Comparar con {other.value}? (s/n) [n]: ").lower() == 's':
            alt = recalculate_with_standard(circuit, other, environment, fault_ka, load_type)
            if isinstance(alt, list):
                for error in alt:
                    print(f"  - {error.field}: {error.message}")
            else:
                print_result(alt)

        if input("¿Exportar reporte a Excel? (s/n): ").lower() == 's':
            filename = export_to_excel(result)
            print(f"\n[INFO] Excel generado: {filename}")

    if not len(history):
        print("No se calcularon circuitos.")
        sys.exit()
    print(f"\n{len(history)} cálculo(s) en el historial de la sesión.")

if __name__ == "__main__":
    main()
