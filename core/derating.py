"""
Derating table lookups.

Published correction tables come in two shapes:

* range tables (NEC): each row covers a closed range of keys and the factor is
  constant across it. Keys falling between two integer ranges take the
  higher row, which always has the smaller factor.
* breakpoint tables (IEC): the factor is given at discrete keys and is
  linearly interpolated between the two nearest breakpoints. A 0.00
  breakpoint is a "not permitted" marker: every key past the previous
  breakpoint takes 0.00.

Keys outside a table's published domain are clamped to the nearest edge and
flagged so the caller can raise an info alert. Nothing is extrapolated.
"""
import bisect
import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from core.components import DeratingFactor, DeratingFactorsResult

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class TableLookup:
    factor: float
    clamped: bool = False

def freeze_table(table):
    """Recursively wraps dict tables in read-only mapping proxies."""
    if isinstance(table, dict):
        return MappingProxyType({key: freeze_table(value) for key, value in table.items()})
    return table

def range_rows(table: Mapping[Tuple[float, float], Mapping[int, float]], column: int) -> Tuple[Tuple[float, float], ...]:
    """Flattens a {(min, max): {column: factor}} table into ascending (max, factor) rows."""
    return tuple((max_key, row[column]) for (_, max_key), row in sorted(table.items()))

def step_lookup(rows: Sequence[Tuple[float, float]], key: float, lower_bound: float) -> TableLookup:
    """rows: ascending (upper_bound, factor). Picks the first row whose upper bound >= key."""
    if key < lower_bound:
        return TableLookup(rows[0][1], clamped=True)
    bounds = [upper for upper, _ in rows]
    index = bisect.bisect_left(bounds, key)
    if index == len(rows):
        return TableLookup(rows[-1][1], clamped=True)
    return TableLookup(rows[index][1])

def interpolate(points: Sequence[Tuple[float, float]], key: float) -> TableLookup:
    """points: ascending (key, factor) breakpoints."""
    keys = [k for k, _ in points]
    if key <= keys[0]:
        return TableLookup(points[0][1], clamped=key < keys[0])
    if key >= keys[-1]:
        return TableLookup(points[-1][1], clamped=key > keys[-1])

    index = bisect.bisect_left(keys, key)
    x1, y1 = points[index]
    if x1 == key:
        return TableLookup(y1)
    x0, y0 = points[index - 1]
    if y1 == 0:
        # A zero breakpoint marks the band where the insulation is not permitted
        return TableLookup(0.0)
    return TableLookup(y0 + (y1 - y0) * (key - x0) / (x1 - x0))

def combine_factors(factors: Sequence[DeratingFactor]) -> float:
    # Product, never a sum or an average. No active factor -> 1.0
    return math.prod(item.factor for item in factors)

def apply_derating(minimum_breaker_amps: float, factors: Sequence[DeratingFactor]) -> DeratingFactorsResult:
    combined = combine_factors(factors)
    adjusted = minimum_breaker_amps / combined if combined > 0 else None
    logger.debug("Derating: factors=%s combined=%.4f adjusted=%s",
                 [(f.name, f.factor) for f in factors], combined, adjusted)
    return DeratingFactorsResult(
        factors=tuple(factors),
        combined_factor=combined,
        minimum_breaker_amps=minimum_breaker_amps,
        adjusted_minimum_amps=adjusted,
    )
