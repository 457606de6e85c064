from typing import List, Optional, Tuple

from core import alerts
from core.components import CalculationAlert, ShortCircuitAnalysis
from core.models import PipelineStage

STAGE = PipelineStage.SHORT_CIRCUIT

def evaluate_breaking_capacity(fault_current_ka: Optional[float], rating_amps: Optional[int],
                               breaking_capacity_ka: Optional[float], code_reference: str
                               ) -> Tuple[Optional[ShortCircuitAnalysis], List[CalculationAlert]]:
    """
    Checks breaking_capacity >= fault current. Reports inadequacy only;
    the breaker is never swapped for a higher interrupting rating here.
    """
    if rating_amps is None:
        return None, [alerts.info(
            "BREAKING_CAPACITY_NOT_EVALUATED",
            "Breaking capacity was not evaluated because no standard rating was selected",
            STAGE, field="short_circuit_current_ka", code_reference=code_reference)]

    if fault_current_ka is None:
        return None, [alerts.info(
            "BREAKING_CAPACITY_NOT_VERIFIED",
            f"Breaking capacity not verified: no prospective fault current given "
            f"(selected frame is typically rated {breaking_capacity_ka:g} kA)",
            STAGE, field="short_circuit_current_ka", code_reference=code_reference,
            remediation="Obtain the available fault current at the panel from the utility or a fault study")]

    adequate = breaking_capacity_ka >= fault_current_ka
    analysis = ShortCircuitAnalysis(
        fault_current_ka=fault_current_ka,
        breaking_capacity_ka=breaking_capacity_ka,
        adequate=adequate,
        margin_ka=breaking_capacity_ka - fault_current_ka,
        code_reference=code_reference,
    )
    if adequate:
        return analysis, []

    return analysis, [alerts.critical(
        "SHORT_CIRCUIT_CAPACITY_LOW",
        f"Breaker breaking capacity {breaking_capacity_ka:g} kA is below the "
        f"available fault current {fault_current_ka:g} kA",
        STAGE, field="short_circuit_current_ka", code_reference=code_reference,
        remediation=f"Specify a {rating_amps} A breaker with a breaking capacity of at least "
                    f"{fault_current_ka:g} kA, or use a series-rated combination")]
