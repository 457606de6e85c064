import io

import pandas as pd
import streamlit as st

from core.converters import convert_length_unit, convert_power_unit
from core.engine import compute, recalculate_with_standard
from core.history import CalculationHistory
from core.models import (
    CircuitConfiguration, ConductorMaterial, EnvironmentalConditions, InstallationMethod,
    InsulationRating, LoadType, Phase, Standard, UnitSystem,
)
from core.report import to_excel_bytes
from core.validation import CONDUCTOR_TABLES

# --- Page Config ---
st.set_page_config(
    page_title="Dimensionamiento de Interruptores (NEC / IEC)",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header { font-family: 'Inter', sans-serif; color: #1E3A8A; font-weight: 700; }
    .stDataFrame { border-radius: 10px; overflow: hidden; }
</style>
""", unsafe_allow_html=True)

# --- Session State Init ---
if "history" not in st.session_state:
    st.session_state.history = CalculationHistory()
if "last_inputs" not in st.session_state:
    st.session_state.last_inputs = None

SEVERITY_ICONS = {"critical": "🛑", "major": "⚠️", "minor": "ℹ️"}
LOAD_TYPE_LABELS = {
    "Resistiva": LoadType.RESISTIVE,
    "Inductiva / Motor": LoadType.INDUCTIVE,
    "Mixta": LoadType.MIXED,
    "Capacitiva": LoadType.CAPACITIVE,
}

# --- Helpers: DataFrames ---
def derating_frame(result) -> pd.DataFrame:
    rows = [{
        "Factor": item.name,
        "Símbolo": item.symbol,
        "Entrada": item.input_value,
        "Valor": item.factor,
        "Referencia": item.table_reference,
        "Fuera de rango": item.clamped,
    } for item in result.derating_factors.factors]
    rows.append({"Factor": "combinado", "Símbolo": "", "Entrada": "",
                 "Valor": result.derating_factors.combined_factor, "Referencia": "", "Fuera de rango": False})
    return pd.DataFrame(rows)

def alerts_frame(result) -> pd.DataFrame:
    return pd.DataFrame([{
        "": SEVERITY_ICONS[a.severity.value],
        "Severidad": a.severity.value,
        "Código": a.code,
        "Mensaje": a.message,
        "Referencia": a.code_reference or "",
        "Solución": a.remediation or "",
    } for a in result.alerts])

def comparison_frame(primary, alternate) -> pd.DataFrame:
    def column(result):
        sizing = result.breaker_sizing
        return {
            "Corriente (A)": round(result.load_analysis.current_amps, 2),
            "Factor": f"x{sizing.safety_factor:g} ({sizing.factor_type})",
            "Mínimo (A)": round(sizing.minimum_breaker_amps, 2),
            "Mínimo ajustado (A)": None if sizing.adjusted_minimum_amps is None else round(sizing.adjusted_minimum_amps, 2),
            "Interruptor (A)": sizing.recommended_rating,
            "Disparo": result.recommendations.trip_curve.display_name,
        }
    return pd.DataFrame({primary.standard.value: column(primary), alternate.standard.value: column(alternate)})

def history_frame(history: CalculationHistory) -> pd.DataFrame:
    return pd.DataFrame([{
        "Fecha": entry.timestamp,
        "Norma": entry.result.standard.value,
        "Voltaje": entry.circuit.voltage,
        "Carga": f"{entry.circuit.load_value:g} {entry.result.load_analysis.load_mode.value}",
        "Corriente (A)": round(entry.result.load_analysis.current_amps, 2),
        "Interruptor (A)": entry.result.breaker_sizing.recommended_rating,
        "Alertas": len(entry.result.alerts),
    } for entry in history.entries()])

def history_to_excel(df: pd.DataFrame) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name='Historial')
    return output.getvalue()

# --- Sidebar ---
with st.sidebar:
    st.title("Configuración")
    standard = Standard(st.radio("Norma", ["NEC", "IEC"], horizontal=True))
    default_units = 0 if standard == Standard.NEC else 1
    unit_system = UnitSystem.IMPERIAL if st.radio(
        "Unidades", ["Imperial (ft)", "Métrico (m)"], index=default_units, horizontal=True
    ).startswith("Imperial") else UnitSystem.METRIC

    st.markdown("---")
    st.subheader("🕘 Historial")
    history = st.session_state.history
    if len(history):
        hist_df = history_frame(history)
        st.dataframe(hist_df, use_container_width=True, hide_index=True)
        st.download_button(
            "📥 Historial (Excel)",
            data=history_to_excel(hist_df),
            file_name="historial_interruptores.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        if st.button("🗑️ Borrar Historial"):
            history.clear()
            st.rerun()
    else:
        st.caption("Sin cálculos todavía.")

# --- Main Area ---
st.markdown("<h1 class='main-header'>⚡ Dimensionamiento de Interruptores</h1>", unsafe_allow_html=True)
st.markdown("---")

with st.expander("⚡ Datos Eléctricos", expanded=True):
    c_p1, c_p2, c_v1, c_v2, c_fp = st.columns([1.5, 0.8, 1.2, 0.8, 1])
    power = c_p1.number_input("Carga", min_value=0.0, value=10.0, step=0.1, format="%.2f")
    unit = c_p2.selectbox("Unidad", ["KW", "W", "HP", "A", "KVA"])
    voltage = c_v1.number_input("Voltaje (V)", value=240.0 if standard == Standard.NEC else 400.0, step=10.0)
    phases = c_v2.radio("Fases", [1, 3], horizontal=True)
    pf_known = c_fp.toggle("FP conocido", True)
    pf = c_fp.number_input("FP", 0.5, 1.0, 0.9, 0.01, disabled=not pf_known)
    load_type_label = st.selectbox("Tipo de carga", list(LOAD_TYPE_LABELS), index=2)

with st.expander("📏 Instalación y Ambiente", expanded=False):
    use_env = st.toggle("Aplicar condiciones de instalación", False)
    c_T1, c_T2, c_G, c_M = st.columns(4)
    temp = c_T1.number_input("Temp. Amb (°C)", -40.0, 70.0, 30.0, 1.0)
    rating = c_T2.selectbox("Aislamiento", [90, 75, 70, 60])
    group = c_G.number_input("Agrupamiento", 1, 100, 1)
    method_label = c_M.selectbox("Método IEC", ["-"] + [m.value for m in InstallationMethod],
                                 disabled=standard != Standard.IEC)

    c_L1, c_L2, c_mat, c_size = st.columns(4)
    length = c_L1.number_input("Longitud (0 = omitir)", 0.0, 10000.0, 0.0, 1.0)
    l_unit = c_L2.selectbox("U.Long", ["ft", "m"] if unit_system == UnitSystem.IMPERIAL else ["m", "ft"])
    material = ConductorMaterial(c_mat.selectbox("Material", ["copper", "aluminum"]))
    sizes = [cable.size.value for cable in CONDUCTOR_TABLES[standard][material]]
    size = c_size.selectbox("Calibre", ["Automático"] + sizes)

    fault = st.number_input("Corriente de falla disponible (kA, 0 = omitir)", 0.0, 200.0, 0.0, 0.5)

if st.button("Calcular", type="primary", use_container_width=True):
    try:
        load_mode, load_value = convert_power_unit(power, unit, pf if pf_known else 0.8)
        environment = None
        if use_env:
            environment = EnvironmentalConditions(
                ambient_temp_c=temp,
                grouped_cables=int(group),
                installation_method=None if method_label == "-" or standard != Standard.IEC else method_label,
                circuit_distance=convert_length_unit(length, l_unit, unit_system) if length > 0 else None,
                conductor_material=material,
                conductor_size=None if size == "Automático" else size,
                insulation_rating=InsulationRating(rating),
            )
        circuit = CircuitConfiguration(
            standard=standard,
            voltage=voltage,
            phase=Phase.THREE if phases == 3 else Phase.SINGLE,
            load_mode=load_mode,
            load_value=load_value,
            power_factor=pf if pf_known else None,
            unit_system=unit_system,
        )
        st.session_state.last_inputs = (circuit, environment, fault or None, LOAD_TYPE_LABELS[load_type_label])
    except ValueError as e:
        st.error(f"Error en entrada de datos: {e}")

if st.session_state.last_inputs is not None:
    circuit, environment, fault_ka, load_type = st.session_state.last_inputs
    result = compute(circuit, environment, fault_ka, load_type)

    if isinstance(result, list):
        st.error("Datos inválidos")
        st.dataframe(pd.DataFrame([{"Campo": e.field, "Error": e.message, "Restricción": e.constraint}
                                   for e in result]), hide_index=True)
    else:
        history = st.session_state.history
        latest = history.entries()[0] if len(history) else None
        if latest is None or latest.circuit != circuit or latest.environment != environment or latest.result != result:
            history.add(circuit, result, environment, fault_ka)

        sizing = result.breaker_sizing
        breaker = result.breaker
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Corriente", f"{result.load_analysis.current_amps:.2f} A")
        m2.metric("Mínimo", f"{sizing.minimum_breaker_amps:.2f} A", f"x{sizing.safety_factor:g}", delta_color="off")
        if sizing.adjusted_minimum_amps is not None:
            m3.metric("Mínimo ajustado", f"{sizing.adjusted_minimum_amps:.2f} A")
        m4.metric("Interruptor", f"{breaker.rating_amps} A" if breaker else "-")
        st.caption(f"{result.load_analysis.formula} · {sizing.safety_reference} · {sizing.ladder_reference}")

        if breaker is not None and not breaker.is_safe:
            st.error(f"Interruptor NO seguro: capacidad de ruptura {breaker.breaking_capacity_ka:g} kA")

        trip = result.recommendations.trip_curve
        st.markdown(f"**Disparo:** {trip.display_name} · {trip.inrush_tolerance}")
        st.caption(trip.rationale)

        if result.derating_factors is not None:
            st.subheader("Factores de corrección")
            st.dataframe(derating_frame(result), use_container_width=True, hide_index=True)

        if result.voltage_drop is not None:
            vd = result.voltage_drop
            st.subheader("Caída de tensión")
            v1, v2, v3 = st.columns(3)
            v1.metric("Caída", f"{vd.voltage_drop_percent:.2f} %", vd.status, delta_color="off")
            v2.metric("Conductor", vd.conductor.label)
            v3.metric("Voltaje en carga", f"{vd.voltage_at_load:.1f} V")
            if result.recommendations.cable_guidance:
                st.info(result.recommendations.cable_guidance)

        if result.alerts:
            st.subheader("Alertas")
            st.dataframe(alerts_frame(result), use_container_width=True, hide_index=True)

        for note in result.recommendations.general_notes:
            st.caption(note)

        other = Standard.IEC if result.standard == Standard.NEC else Standard.NEC
        if st.toggle(f"Comparar con {other.value}"):
            alternate = recalculate_with_standard(circuit, other, environment, fault_ka, load_type)
            if isinstance(alternate, list):
                st.warning("; ".join(e.message for e in alternate))
            else:
                st.dataframe(comparison_frame(result, alternate), use_container_width=True)

        st.download_button(
            "📥 Descargar Memoria (Excel)",
            data=to_excel_bytes(result),
            file_name=f"memoria_interruptor_{result.standard.value.lower()}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
