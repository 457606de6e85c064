import bisect
from typing import Optional, Sequence, Tuple

def select_standard_rating(minimum_amps: float, ladder: Sequence[int]) -> Optional[int]:
    """
    Smallest ladder rating >= minimum_amps (binary search).
    Exact equality selects that rating. Returns None when the ladder is exceeded.
    """
    index = bisect.bisect_left(ladder, minimum_amps)
    if index == len(ladder):
        return None
    return ladder[index]

def interrupting_rating_for(rating_amps: int, bands: Sequence[Tuple[int, float]]) -> float:
    """bands: ascending (max_frame_amps, kA). Default breaking capacity of a frame size."""
    for max_frame, capacity_ka in bands:
        if rating_amps <= max_frame:
            return capacity_ka
    raise ValueError(f"No interrupting rating band covers {rating_amps} A")
