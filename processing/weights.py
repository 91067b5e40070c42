"""
Sector weight helpers.

The weight configuration is owned by the caller (the Streamlit session);
these helpers only read it.  They turn loosely keyed mappings into a clean
Sector → float dict and describe how much of the 100% budget is allocated.

Public API:
    coerce_weights(weights) → dict[Sector, float]
    weights_sum_to_one(weights, tolerance) → bool
    allocation_status(weights) → WeightAllocation
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from config.schema import SECTORS, Sector

logger = logging.getLogger(__name__)

AllocationState = Literal["complete", "under", "over"]


@dataclass(frozen=True)
class WeightAllocation:
    """How the current weights use the 100% allocation budget."""

    total: float
    percentage: int
    state: AllocationState
    message: str


def coerce_weights(weights: Mapping[str, float]) -> dict[Sector, float]:
    """
    Build a fresh Sector → float dict from a loosely keyed mapping.

    Keys may be Sector members or sector strings in any case.  Unknown keys
    are dropped with a warning.  Sectors without a key are left out, so the
    scorer still treats them as weight 0.

    Raises:
        ValueError: If a weight is negative, non-finite, or not a number.
    """
    coerced: dict[Sector, float] = {}

    for key, raw_weight in weights.items():
        try:
            sector = Sector(str(getattr(key, "value", key)).strip().lower())
        except ValueError:
            logger.warning(f"Ignoring weight for unknown sector '{key}'")
            continue

        try:
            weight = float(raw_weight)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Weight for {sector.value} is not a number: {raw_weight!r}"
            ) from exc

        if not math.isfinite(weight) or weight < 0:
            raise ValueError(
                f"Weight for {sector.value} must be a finite number >= 0, "
                f"got {raw_weight!r}"
            )

        coerced[sector] = weight

    return coerced


def weights_sum_to_one(
    weights: Mapping[str, float],
    tolerance: float = 1e-4,
) -> bool:
    """True if the weights of the six sectors add up to 1 within *tolerance*."""
    total = sum(float(weights.get(sector, 0.0)) for sector in SECTORS)
    return abs(total - 1.0) < tolerance


def allocation_status(weights: Mapping[str, float]) -> WeightAllocation:
    """
    Summarize the weight allocation for the sidebar status box.

    The percentage is rounded to a whole number before comparing with 100,
    so 0.999 counts as a complete allocation.
    """
    total = sum(float(weights.get(sector, 0.0)) for sector in SECTORS)
    percentage = round(total * 100)

    if percentage == 100:
        return WeightAllocation(
            total, percentage, "complete", "Perfect allocation: 100%"
        )
    if percentage < 100:
        return WeightAllocation(
            total, percentage, "under", f"{100 - percentage}% left to allocate"
        )
    return WeightAllocation(
        total, percentage, "over", f"You are {percentage - 100}% over the limit"
    )
