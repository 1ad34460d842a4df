"""
Axis-pair taxonomy for the style map.

Every catalog entry carries three raw scores (``x``, ``y``, ``z``) but only
two are plotted at a time.  The active pair is selected by ``AxisPair``:

  A → (x, y)   y == -1 means "not applicable"
  B → (x, z)   z == -1 or z < 1e-4 means "not applicable"

``Axis`` names the individual raw score fields.

This module has NO imports from any other ``style_atlas`` package.
"""

from enum import StrEnum


class Axis(StrEnum):
    """A single raw score axis."""

    X = "x"
    """Primary axis, always active."""

    Y = "y"
    """Secondary axis for style set A."""

    Z = "z"
    """Secondary axis for style set B."""


class AxisPair(StrEnum):
    """The active two-axis profile of the style map."""

    A = "A"
    """Plot (x, y)."""

    B = "B"
    """Plot (x, z)."""

    @property
    def secondary(self) -> Axis:
        """The non-``x`` axis that is active for this pair."""
        return Axis.Y if self is AxisPair.A else Axis.Z

    @property
    def axes(self) -> tuple[Axis, Axis]:
        """Both active axes, primary first."""
        return (Axis.X, self.secondary)
