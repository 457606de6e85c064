import datetime
import io
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from core.components import CalculationResult

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)
TITLE_FONT = Font(bold=True, size=13)

def _style_header(ws, row: int = 1):
    for cell in ws[row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL

def _widen(ws, width: int = 18):
    for col in ws.columns:
        ws.column_dimensions[col[0].column_letter].width = width

def _summary_sheet(ws, result: CalculationResult):
    load = result.load_analysis
    sizing = result.breaker_sizing
    breaker = result.breaker
    trip = result.recommendations.trip_curve

    ws.title = "Resumen"
    ws.append([f"DIMENSIONAMIENTO DE INTERRUPTOR ({result.standard.value})"])
    ws["A1"].font = TITLE_FONT
    ws.append(["Fecha de cálculo:", result.calculated_at])
    ws.append(["Versión:", result.calculation_version])
    ws.append([])
    ws.append(["Parámetro", "Valor", "Referencia"])
    _style_header(ws, ws.max_row)

    rows = [
        ("Fórmula de corriente", load.formula, ""),
        ("Corriente de carga (A)", load.current_amps, ""),
        ("Potencia (kW)", load.power_kw, ""),
        ("Voltaje (V)", load.voltage, ""),
        ("Fases", load.phase.value, ""),
        ("Factor de potencia", load.power_factor, ""),
        (f"Factor ({sizing.factor_type})", sizing.safety_factor, sizing.safety_reference),
        ("Mínimo del interruptor (A)", sizing.minimum_breaker_amps, sizing.safety_reference),
        ("Mínimo ajustado (A)", sizing.adjusted_minimum_amps, ""),
        ("Interruptor recomendado (A)", sizing.recommended_rating, sizing.ladder_reference),
        ("Escalera excedida", "Sí" if sizing.ladder_exceeded else "No", sizing.ladder_reference),
    ]
    if breaker is not None:
        rows.append(("Capacidad de ruptura (kA)", breaker.breaking_capacity_ka, ""))
        rows.append(("Interruptor seguro", "Sí" if breaker.is_safe else "No", ""))
    if result.short_circuit is not None:
        sc = result.short_circuit
        rows.append(("Corriente de falla (kA)", sc.fault_current_ka, sc.code_reference))
        rows.append(("Capacidad adecuada", "Sí" if sc.adequate else "No", sc.code_reference))
    rows.append(("Curva / mecanismo de disparo", trip.display_name, trip.code_reference))
    rows.append(("Justificación", trip.rationale, ""))

    for label, value, reference in rows:
        ws.append([label, value, reference])
        if isinstance(value, float):
            ws.cell(row=ws.max_row, column=2).number_format = "0.00"

    ws.append([])
    ws.append(["Notas"])
    ws.cell(row=ws.max_row, column=1).font = HEADER_FONT
    for note in result.recommendations.general_notes:
        ws.append([note])
    _widen(ws, 32)

def _derating_sheet(ws, result: CalculationResult):
    derating = result.derating_factors
    ws.append(["Factor", "Símbolo", "Entrada", "Valor", "Referencia", "Fuera de rango"])
    _style_header(ws)
    for item in derating.factors:
        ws.append([item.name, item.symbol, item.input_value, item.factor,
                   item.table_reference, "Sí" if item.clamped else "No"])
        ws.cell(row=ws.max_row, column=4).number_format = "0.000"
    ws.append(["combinado", "", "", derating.combined_factor, "", ""])
    ws.cell(row=ws.max_row, column=4).number_format = "0.000"
    _widen(ws)

def _voltage_drop_sheet(ws, result: CalculationResult):
    vd = result.voltage_drop
    ws.append(["Parámetro", "Valor"])
    _style_header(ws)
    rows = [
        ("Conductor", vd.conductor.label),
        ("Material", vd.material.value),
        (f"Resistencia ({vd.resistance_unit})", vd.resistance),
        (f"Longitud ({vd.distance_unit})", vd.distance),
        ("Corriente (A)", vd.current_amps),
        ("Fórmula", vd.formula),
        ("Caída (V)", vd.voltage_drop_volts),
        ("Caída (%)", vd.voltage_drop_percent),
        ("Voltaje en la carga (V)", vd.voltage_at_load),
        ("Pérdidas (W)", vd.power_loss_watts),
        ("Estado", vd.status),
        ("Referencia", vd.code_reference),
    ]
    if vd.cable_recommendation is not None:
        rec = vd.cable_recommendation
        rows += [
            ("Conductor recomendado", rec.size.label),
            ("Caída con recomendado (%)", rec.voltage_drop_percent),
            ("Mejora (%)", rec.improvement_percent),
            ("Impacto de costo", rec.cost_impact),
        ]
    for label, value in rows:
        ws.append([label, value])
        if isinstance(value, float):
            ws.cell(row=ws.max_row, column=2).number_format = "0.000"
    _widen(ws, 26)

def _alerts_sheet(ws, result: CalculationResult):
    ws.append(["Severidad", "Tipo", "Código", "Mensaje", "Referencia", "Solución"])
    _style_header(ws)
    for alert in result.alerts:
        ws.append([alert.severity.value, alert.type.value, alert.code, alert.message,
                   alert.code_reference or "", alert.remediation or ""])
    _widen(ws, 22)
    ws.column_dimensions["D"].width = 70

def build_workbook(result: CalculationResult) -> Workbook:
    wb = Workbook()
    _summary_sheet(wb.active, result)
    if result.derating_factors is not None:
        _derating_sheet(wb.create_sheet("Derating"), result)
    if result.voltage_drop is not None:
        _voltage_drop_sheet(wb.create_sheet("Caida de Tension"), result)
    _alerts_sheet(wb.create_sheet("Alertas"), result)
    return wb

def to_excel_bytes(result: CalculationResult) -> bytes:
    output = io.BytesIO()
    build_workbook(result).save(output)
    return output.getvalue()

def export_to_excel(result: CalculationResult, filename: Optional[str] = None) -> str:
    if filename is None:
        filename = f"Memoria_Interruptor_{result.standard.value}_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    build_workbook(result).save(filename)
    return filename
