import logging
import math

from core.components import LoadAnalysis
from core.models import CircuitConfiguration, LoadMode, Phase

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3)

def calculate_load_current(circuit: CircuitConfiguration) -> LoadAnalysis:
    """
    Derives the circuit current from power, or passes a declared current through.
    Expects a normalized circuit (enums resolved, power factor filled in).
    """
    v = circuit.voltage
    pf = circuit.power_factor
    three_phase = circuit.phase == Phase.THREE

    if circuit.load_mode == LoadMode.CURRENT:
        # Declared current is authoritative; power is derived for display only
        current = circuit.load_value
        power_kw = (SQRT3 if three_phase else 1.0) * v * current * pf / 1000.0
        formula = "I = I_declared"
        operands = (("I", current), ("V", v), ("PF", pf), ("P_kW (derived)", power_kw))
    else:
        power_kw = circuit.load_value
        watts = power_kw * 1000.0
        if three_phase:
            current = watts / (SQRT3 * v * pf)
            formula = "I = P / (√3 × V × PF)"
        else:
            current = watts / (v * pf)
            formula = "I = P / (V × PF)"
        operands = (("P", watts), ("V", v), ("PF", pf))

    logger.debug("Load current: %s -> %.4f A", formula, current)
    return LoadAnalysis(
        current_amps=current,
        power_kw=power_kw,
        voltage=v,
        phase=circuit.phase,
        power_factor=pf,
        load_mode=circuit.load_mode,
        formula=formula,
        operands=operands,
    )
