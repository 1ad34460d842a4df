"""
Coordinate normalization.

Modules
-------
rank   : ExclusionPolicy + normalize() / denormalize() — rank-based mapping
         and its interpolated inverse.  No I/O.
minmax : coordinate_range() + normalize_minmax() / denormalize_minmax().
"""
