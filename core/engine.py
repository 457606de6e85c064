"""
Entry point of the breaker sizing engine.

compute() validates the inputs, dispatches to the calculator registered for
the circuit's standard and returns one immutable CalculationResult, or the
list of fatal ValidationErrors when the inputs cannot be calculated.
Calls are pure: calculators are stateless and every table is read-only.
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Union

from core.calculator import BreakerCalculator
from core.components import CalculationResult, ValidationError
from core.config import DEFAULT_CONFIG, EngineConfig
from core.models import CircuitConfiguration, EnvironmentalConditions, Standard
from core.validation import validate
from standards.iec import IECCalculator
from standards.nec import NECCalculator

logger = logging.getLogger(__name__)

CALCULATORS = {
    Standard.NEC: NECCalculator(),
    Standard.IEC: IECCalculator(),
}

def get_calculator(standard: Standard) -> BreakerCalculator:
    try:
        return CALCULATORS[standard]
    except KeyError:
        raise ValueError(f"No calculator registered for standard {standard!r}") from None

def compute(circuit: CircuitConfiguration,
            environment: Optional[EnvironmentalConditions] = None,
            short_circuit_current_ka: Optional[float] = None,
            load_type=None,
            *,
            config: EngineConfig = DEFAULT_CONFIG,
            calculated_at: Optional[str] = None) -> Union[CalculationResult, List[ValidationError]]:
    """
    Sizes a breaker for one circuit.

    calculated_at: ISO-8601 timestamp stamped on the result. Defaults to now (UTC);
    pass a fixed value when byte-identical output is needed.
    """
    outcome = validate(circuit, environment, short_circuit_current_ka, load_type, config)
    if not outcome.ok:
        return list(outcome.errors)

    data = outcome.normalized
    calculator = get_calculator(data.circuit.standard)
    timestamp = calculated_at or datetime.now(timezone.utc).isoformat()

    logger.info("Sizing %s breaker: %g %s at %g V (%s)",
                data.circuit.standard.value, data.circuit.load_value, data.circuit.load_mode.value,
                data.circuit.voltage, data.circuit.phase.value)
    result = calculator.calculate_circuit(data, config, timestamp)

    rating = result.breaker_sizing.recommended_rating
    logger.info("%s result: %.2f A load, %s A breaker, %d alerts",
                result.standard.value, result.load_analysis.current_amps,
                rating if rating is not None else "no", len(result.alerts))
    return result

def recalculate_with_standard(circuit: CircuitConfiguration, standard: Standard,
                              environment: Optional[EnvironmentalConditions] = None,
                              short_circuit_current_ka: Optional[float] = None,
                              load_type=None,
                              *,
                              config: EngineConfig = DEFAULT_CONFIG,
                              calculated_at: Optional[str] = None) -> Union[CalculationResult, List[ValidationError]]:
    """Re-runs the same inputs under another standard. Nothing carries over from a previous result."""
    switched = replace(circuit, standard=standard)
    if environment is not None and environment.conductor_size is not None:
        # Conductor sizes belong to one standard's table
        environment = replace(environment, conductor_size=None)
    return compute(switched, environment, short_circuit_current_ka, load_type,
                   config=config, calculated_at=calculated_at)

def quick_breaker_lookup(current_amps: float, standard: Standard) -> Optional[int]:
    """Ladder rating for a current after the standard's safety factor, without derating or validation."""
    calculator = get_calculator(standard)
    return calculator.select_breaker(calculator.apply_safety_factor(current_amps).minimum_breaker_amps)
