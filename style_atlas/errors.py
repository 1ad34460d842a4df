"""
Exceptions surfaced by the rank engine.

Degenerate numeric input never raises; it resolves to a defined fallback
value.  The only failure callers must handle is asking for a denormalized
coordinate or a recommendation before a ``RankMap`` exists for the current
entity set and axis-pair.
"""

from __future__ import annotations

from typing import Optional


class RankMapNotReadyError(RuntimeError):
    """Raised when a rank-dependent operation runs without a usable RankMap.

    Attributes:
        axis_pair: The axis-pair the caller asked for, if known.
        reason:    Short description of why the map is unusable.
    """

    def __init__(self, axis_pair: Optional[str] = None, reason: str = "no rank map") -> None:
        self.axis_pair = axis_pair
        self.reason    = reason
        target = f" for axis-pair '{axis_pair}'" if axis_pair is not None else ""
        super().__init__(
            f"Rank map not ready{target}: {reason}.  "
            "Run normalize() on the current entity set first."
        )
